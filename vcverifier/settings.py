"""Configuration model of the verifier."""

from collections.abc import Mapping
from dataclasses import MISSING, dataclass, field, fields
from functools import partial
from typing import Any

SERVICE_DEFAULT_SCOPE = ""


def _build(cls, data):
    """Create a dataclass instance from a mapping using the fields' keys."""
    if data is None:
        return cls()
    if not isinstance(data, Mapping):
        raise TypeError(f"{cls.__name__} expects a mapping, got {type(data).__name__}")
    kwargs = {}
    for f in fields(cls):
        key = f.metadata.get("key", f.name)
        value = data.get(key)
        if value is None:
            continue
        convert = f.metadata.get("convert")
        kwargs[f.name] = convert(value) if convert else value
    return cls(**kwargs)


def _option(key, default=MISSING, *, factory=MISSING, convert=None):
    metadata = {"key": key, "convert": convert}
    if factory is not MISSING:
        return field(default_factory=factory, metadata=metadata)
    return field(default=default, metadata=metadata)


def _section(key, cls):
    return field(default_factory=cls, metadata={"key": key, "convert": partial(_build, cls)})


def _to_str(value) -> str:
    if isinstance(value, (Mapping, list)):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return str(value)


def _to_int(value) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    raise TypeError(f"expected an integer, got {value!r}")


def _to_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "on"}:
            return True
        if lowered in {"false", "0", "no", "off", ""}:
            return False
    raise ValueError(f"expected a boolean, got {value!r}")


def _to_str_list(value) -> list[str]:
    if not isinstance(value, list):
        raise TypeError(f"expected a list, got {type(value).__name__}")
    return [_to_str(item) for item in value]


def _as_mapping(value, what: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise TypeError(f"{what} must be a mapping, got {type(value).__name__}")
    return value


def _policy_map(value) -> dict[str, dict[str, Any]]:
    return {
        str(name): dict(_as_mapping(params, f"parameters of {name}")) if params is not None else {}
        for name, params in _as_mapping(value, "policies").items()
    }


def _type_specific_policies(value) -> dict[str, dict[str, dict[str, Any]]]:
    return {
        str(credential_type): _policy_map(policies) if policies is not None else {}
        for credential_type, policies in _as_mapping(value, "credentialTypeSpecific").items()
    }


@dataclass
class Credential:
    """A credential type required by a scope, with the lists used to trust it."""

    type: str = _option("type", "", convert=_to_str)
    trusted_participants_lists: list[str] = _option(
        "trustedParticipantsLists", factory=list, convert=_to_str_list
    )
    trusted_issuers_lists: list[str] = _option(
        "trustedIssuersLists", factory=list, convert=_to_str_list
    )

    @classmethod
    def from_dict(cls, data) -> "Credential":
        return _build(cls, data)


def _service_scopes(value) -> dict[str, list["Credential"]]:
    scopes = {}
    for scope, credentials in _as_mapping(value, "oidcScopes").items():
        if credentials is None:
            scopes[str(scope)] = []
            continue
        if not isinstance(credentials, list):
            raise TypeError(f"credentials of scope {scope} must be a list")
        scopes[str(scope)] = [Credential.from_dict(item) for item in credentials]
    return scopes


@dataclass
class ConfiguredService:
    """A service with its OIDC scopes and the credentials each scope requires."""

    id: str = _option("id", "", convert=_to_str)
    default_oidc_scope: str = _option("defaultOidcScope", "", convert=_to_str)
    service_scopes: dict[str, list[Credential]] = _option(
        "oidcScopes", factory=dict, convert=_service_scopes
    )

    @classmethod
    def from_dict(cls, data) -> "ConfiguredService":
        return _build(cls, data)

    def get_required_credential_types(self, scope: str) -> list[str]:
        return [credential.type for credential in self.get_credentials(scope)]

    def get_credentials(self, scope: str) -> list[Credential]:
        """Credentials of the scope; the default scope is used for an empty one."""
        if scope != SERVICE_DEFAULT_SCOPE:
            return self.service_scopes.get(scope, [])
        return self.service_scopes.get(self.default_oidc_scope, [])

    def get_credential(self, scope: str, credential_type: str) -> Credential | None:
        return next(
            (c for c in self.get_credentials(scope) if c.type == credential_type),
            None,
        )


def _services(value) -> list[ConfiguredService]:
    if not isinstance(value, list):
        raise TypeError("services must be a list")
    return [ConfiguredService.from_dict(item) for item in value]


@dataclass
class Server:
    host: str = _option("host", "", convert=_to_str)
    port: int = _option("port", 8080, convert=_to_int)
    template_dir: str = _option("templateDir", "views/", convert=_to_str)
    static_dir: str = _option("staticDir", "views/static/", convert=_to_str)


@dataclass
class M2M:
    auth_enabled: bool = _option("authEnabled", False, convert=_to_bool)
    key_path: str = _option("keyPath", "", convert=_to_str)
    credential_path: str = _option("credentialPath", "", convert=_to_str)
    client_id: str = _option("clientId", "", convert=_to_str)
    verification_method: str = _option("verificationMethod", "JsonWebKey2020", convert=_to_str)
    signature_type: str = _option("signatureType", "JsonWebSignature2020", convert=_to_str)
    key_type: str = _option("keyType", "RSAPS256", convert=_to_str)


@dataclass
class LoggingConfig:
    level: str = _option("level", "INFO", convert=_to_str)
    json_logging: bool = _option("jsonLogging", True, convert=_to_bool)
    log_requests: bool = _option("logRequests", True, convert=_to_bool)
    paths_to_skip: list[str] = _option("pathsToSkip", factory=list, convert=_to_str_list)


@dataclass
class Policies:
    default_policies: dict[str, dict[str, Any]] = _option(
        "default", factory=dict, convert=_policy_map
    )
    credential_type_specific_policies: dict[str, dict[str, dict[str, Any]]] = _option(
        "credentialTypeSpecific", factory=dict, convert=_type_specific_policies
    )


@dataclass
class VerifierConfig:
    did: str = _option("did", "", convert=_to_str)
    tir_address: str = _option("tirAddress", "", convert=_to_str)
    tir_cache_expiry: int = _option("tirCacheExpiry", 30, convert=_to_int)
    til_cache_expiry: int = _option("tilCacheExpiry", 30, convert=_to_int)
    session_expiry: int = _option("sessionExpiry", 30, convert=_to_int)
    policy_config: Policies = _section("policies", Policies)
    validation_mode: str = _option("validationMode", "none", convert=_to_str)
    key_algorithm: str = _option("keyAlgorithm", "RS256", convert=_to_str)


@dataclass
class ConfigRepo:
    config_endpoint: str = _option("configEndpoint", "", convert=_to_str)
    services: list[ConfiguredService] = _option("services", factory=list, convert=_services)
    update_interval: int = _option("updateInterval", 30, convert=_to_int)


@dataclass
class Configuration:
    """The complete verifier configuration."""

    server: Server = _section("server", Server)
    verifier: VerifierConfig = _section("verifier", VerifierConfig)
    logging: LoggingConfig = _section("logging", LoggingConfig)
    config_repo: ConfigRepo = _section("configRepo", ConfigRepo)
    m2m: M2M = _section("m2m", M2M)

    @classmethod
    def from_dict(cls, data) -> "Configuration":
        return _build(cls, data)