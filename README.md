# vcverifier

Building blocks for a service that verifies W3C verifiable credentials and
checks their issuers against EBSI-compatible trusted issuers registries.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## What is in the package

- `vcverifier.provider.read_config(config_file)` loads a YAML file into a
  `vcverifier.settings.Configuration`. Sections and values that are not given
  take their defaults: port 8080, template directory `views/`, static
  directory `views/static/`, `INFO` logging in JSON with request logging on,
  30 second TIR/TIL cache and session expiries, validation mode `none`, key
  algorithm `RS256`, an update interval of 30, and the M2M defaults
  `JsonWebKey2020`, `JsonWebSignature2020` and `RSAPS256`. A file that does
  not hold a mapping raises `ValueError`.
- `vcverifier.settings` holds the configuration dataclasses (`Server`,
  `VerifierConfig`, `Policies`, `LoggingConfig`, `ConfigRepo`, `M2M`,
  `Configuration`) and `ConfiguredService` / `Credential`.
  `ConfiguredService.get_credentials(scope)` returns the credentials of a
  scope, using the service's default OIDC scope when `scope` is empty;
  `get_required_credential_types(scope)` gives their types and
  `get_credential(scope, credential_type)` returns the matching one or `None`.
- `vcverifier.config_client.HttpConfigClient(config_endpoint)` reads
  `<endpoint>/service` in pages of 100 and returns all configured services.
  A missing response, a status other than 200 and an empty body raise
  `CcsNoResponseError`, `CcsErrorResponseError` and `CcsEmptyResponseError`
  (all `CcsError`); a body that is not valid JSON raises `ValueError`, and
  network errors from `requests` are passed on.
- `vcverifier.tir_client.TirHttpClient` asks trusted issuers registries
  about a DID. `is_trusted_participant(endpoints, did)` returns `True` as soon
  as one registry answers 200; `get_trusted_issuer(endpoints, did)` returns
  the first parsed `TrustedIssuer` or `None`. Each lookup tries
  `v4/issuers/<did>` first and falls back to `v3/issuers/<did>`. Failing
  registries are logged and skipped rather than raised. Answers are cached;
  `new_tir_http_client(verifier_config)` builds a client whose caches expire
  after the configured TIR and TIL expiries.
- `vcverifier.registry.GaiaXRegistryClient(endpoint)` fetches the list of
  Gaia-X compliance issuer DIDs; any failure raises `RegistryError`.
- `vcverifier.cache.ExpiringCache` is a thread-safe key-value store with
  per-entry expiry in seconds. `get` raises `KeyError` for missing or expired
  keys, `add` raises `CacheKeyExistsError` for a live key, and `in` tests for
  a live key. `global_cache()` returns the shared `AllCaches` and
  `reset_global_cache()` replaces them with empty ones.
- `vcverifier.document_loader.CachingDocumentLoader` wraps a JSON-LD
  document loader (an object with `load_document(url)` or a callable) and
  caches successfully loaded documents for 300 seconds.
- `vcverifier.models` has the API's request and response bodies as
  dataclasses with `to_dict()` and `from_dict()`, using the JSON field names
  and leaving out empty optional fields.
- `vcverifier.health.Health` runs registered checks; `health_response()`
  returns `(200, body)` when all pass and `(503, body)` otherwise.
- `vcverifier.log` configures the `vcverifier` logger (`configure`,
  `get_logger`), renders objects as compact JSON (`pretty_print_object`) and
  provides `RequestLoggingMiddleware`, a WSGI middleware that logs method,
  path, latency and status of requests whose path is not in the skip list.

## Example

```python
from vcverifier.provider import read_config
from vcverifier.config_client import HttpConfigClient
from vcverifier.tir_client import new_tir_http_client
from vcverifier.log import configure

config = read_config("server.yaml")
configure(
    config.logging.json_logging,
    config.logging.level,
    config.logging.log_requests,
    config.logging.paths_to_skip,
)

for service in HttpConfigClient(config.config_repo.config_endpoint).get_services():
    print(service.id, service.get_required_credential_types(""))

tir = new_tir_http_client(config.verifier)
print(tir.is_trusted_participant([config.verifier.tir_address], "did:web:issuer.example.com"))
```

A minimal `server.yaml`:

```yaml
server:
  port: 3000
verifier:
  did: did:key:somekey
  tirAddress: https://tir.example.com/
logging:
  level: DEBUG
  pathsToSkip:
    - /health
configRepo:
  services:
    - id: testService
      defaultOidcScope: someScope
      oidcScopes:
        someScope:
          - type: VerifiableCredential
            trustedParticipantsLists:
              - https://tir.example.com
            trustedIssuersLists:
              - https://til.example.com
```

## What the package does not do

- It has no command and does not run an HTTP server: there are no token,
  login or QR endpoints. `RequestLoggingMiddleware` and `health_response` are
  meant to be used from an application you provide.
- It does not verify credentials or presentations, sign tokens or manage
  keys.
- Trusted issuers registries are queried without authorization; registries
  that require a bearer token are treated like any registry that does not
  answer 200. The M2M settings are read but not used by the package.