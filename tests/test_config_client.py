import json

import pytest
import responses
from responses import matchers

from vcverifier.config_client import (
    CcsEmptyResponseError,
    CcsErrorResponseError,
    HttpConfigClient,
    service_url,
)
from vcverifier.settings import ConfiguredService, Credential

ENDPOINT = "http://test.example.com"
SERVICES_URL = "http://test.example.com/service"

CCS_FULL = {
    "total": 1,
    "pageNumber": 0,
    "pageSize": 100,
    "services": [
        {
            "id": "service_all",
            "defaultOidcScope": "did_write",
            "oidcScopes": {
                "did_write": [
                    {
                        "type": "VerifiableCredential",
                        "trustedParticipantsLists": ["https://tir-pdc.example.com"],
                        "trustedIssuersLists": ["https://til-pdc.example.com"],
                    }
                ]
            },
        }
    ],
}


def _services(start, count):
    return [{"id": f"service_{i}", "defaultOidcScope": "scope"} for i in range(start, start + count)]


def test_get_services():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, SERVICES_URL, body=json.dumps(CCS_FULL), status=200)
        services = HttpConfigClient(ENDPOINT).get_services()

    expected = [
        ConfiguredService(
            id="service_all",
            default_oidc_scope="did_write",
            service_scopes={
                "did_write": [
                    Credential(
                        type="VerifiableCredential",
                        trusted_participants_lists=["https://tir-pdc.example.com"],
                        trusted_issuers_lists=["https://til-pdc.example.com"],
                    )
                ]
            },
        )
    ]
    assert len(services) == 1
    assert services == expected


def test_get_services_follows_pages():
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.GET,
            SERVICES_URL,
            json={"total": 150, "pageNumber": 0, "pageSize": 100, "services": _services(0, 100)},
            match=[matchers.query_param_matcher({"pageSize": "100", "page": "0"})],
        )
        rsps.add(
            responses.GET,
            SERVICES_URL,
            json={"total": 150, "pageNumber": 1, "pageSize": 100, "services": _services(100, 50)},
            match=[matchers.query_param_matcher({"pageSize": "100", "page": "1"})],
        )
        services = HttpConfigClient(ENDPOINT).get_services()

    assert len(services) == 150
    assert [s.id for s in services] == [f"service_{i}" for i in range(150)]


def test_get_services_empty_total_stops():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, SERVICES_URL, json={"total": 0, "services": []})
        assert HttpConfigClient(ENDPOINT).get_services() == []


def test_error_status_raises():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, SERVICES_URL, status=500)
        with pytest.raises(CcsErrorResponseError) as info:
            HttpConfigClient(ENDPOINT).get_services()
    assert info.value.status_code == 500


def test_empty_body_raises():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, SERVICES_URL, body="", status=200)
        with pytest.raises(CcsEmptyResponseError):
            HttpConfigClient(ENDPOINT).get_services()


def test_invalid_json_raises():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, SERVICES_URL, body="not json", status=200)
        with pytest.raises(ValueError):
            HttpConfigClient(ENDPOINT).get_services()


@pytest.mark.parametrize("endpoint", [ENDPOINT, ENDPOINT + "/"])
def test_service_url(endpoint):
    assert service_url(endpoint) == SERVICES_URL