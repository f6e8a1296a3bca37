import pytest
import requests
import responses

from vcverifier.registry import GaiaXRegistryClient, RegistryError

URL = "http://registry.example.com/issuers"


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.mark.parametrize(
    "body, expected",
    [
        ('["did:web:compliance.test.com"]', ["did:web:compliance.test.com"]),
        (
            '["did:web:compliance.test.com","did:key:123"]',
            ["did:web:compliance.test.com", "did:key:123"],
        ),
    ],
)
def test_returns_dids(mocked, body, expected):
    mocked.add(responses.GET, URL, body=body, status=200)
    assert GaiaXRegistryClient(URL).get_compliance_issuers() == expected


def test_malformatted_response_raises(mocked):
    mocked.add(responses.GET, URL, body='{"someThing":"else"}', status=200)
    with pytest.raises(RegistryError):
        GaiaXRegistryClient(URL).get_compliance_issuers()


def test_http_error_raises(mocked):
    mocked.add(responses.GET, URL, body="", status=500)
    with pytest.raises(RegistryError):
        GaiaXRegistryClient(URL).get_compliance_issuers()


def test_empty_body_raises(mocked):
    mocked.add(responses.GET, URL, body="", status=200)
    with pytest.raises(RegistryError):
        GaiaXRegistryClient(URL).get_compliance_issuers()


def test_uses_given_session(mocked):
    mocked.add(responses.GET, URL, body='["did:key:123"]', status=200)
    session = requests.Session()
    client = GaiaXRegistryClient(URL, session)
    assert client.get_compliance_issuers() == ["did:key:123"]
    assert len(mocked.calls) == 1