"""Data models exchanged through the verifier's HTTP API."""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any


def _field(key=None, default: Any = "", *, omitempty: bool = True, model=None, many=False):
    """Declare a model field; the wire key defaults to the attribute name."""
    metadata = {"key": key, "omitempty": omitempty, "model": model, "many": many}
    if many:
        return field(default_factory=list, metadata=metadata)
    if model is not None:
        return field(default_factory=model, metadata=metadata)
    return field(default=default, metadata=metadata)


def _wire_key(f) -> str:
    return f.metadata["key"] or f.name


def _encode(value: Any) -> Any:
    if isinstance(value, ApiModel):
        return value.to_dict()
    if isinstance(value, list):
        return [_encode(item) for item in value]
    return value


class ApiModel:
    """Base of the API models: JSON-style conversion using the wire field names."""

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object; empty optional values are left out."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.metadata["omitempty"] and not value:
                continue
            result[_wire_key(f)] = _encode(value)
        return result

    @classmethod
    def from_dict(cls, data):
        """Build a model from a JSON object; unknown keys are ignored."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise TypeError(f"{cls.__name__} expects a mapping, got {type(data).__name__}")
        kwargs = {}
        for f in fields(cls):
            key = _wire_key(f)
            if key not in data or data[key] is None:
                continue
            value = data[key]
            model = f.metadata["model"]
            if f.metadata["many"]:
                if not isinstance(value, list):
                    raise TypeError(f"{key} must be a list")
                value = [model.from_dict(item) if model else item for item in value]
            elif model is not None:
                value = model.from_dict(value)
            kwargs[f.name] = value
        return cls(**kwargs)


@dataclass
class Did(ApiModel):
    id: str = _field("id")


@dataclass
class BackendInfo(ApiModel):
    issuer_did: Did = _field("issuerDid", model=Did)
    verifier_did: Did = _field("verifierDid", model=Did)


@dataclass
class CredentialSchema(ApiModel):
    id: str = _field("id")
    type: str = _field("type")


@dataclass
class ErrorMessage(ApiModel):
    summary: str = _field("summary")
    details: str = _field("details")


@dataclass
class Jwk(ApiModel):
    kid: str = _field("kid")
    kty: str = _field("kty")
    use: str = _field("use")
    alg: str = _field("alg")
    crv: str = _field("crv")
    x: str = _field("x")
    y: str = _field("y")
    n: str = _field("n")
    e: str = _field("e")
    d: str = _field("d")


@dataclass
class JwkSet(ApiModel):
    keys: list[Jwk] = _field("keys", model=Jwk, many=True)


@dataclass
class SubjectRole(ApiModel):
    names: list[str] = _field("names", many=True)
    target: str = _field("target")


@dataclass
class PacketDeliverySubject(ApiModel):
    id: str = _field("id")
    family_name: str = _field("familyName")
    first_name: str = _field("firstName")
    roles: list[SubjectRole] = _field("roles", model=SubjectRole, many=True)
    email: str = _field("email")


@dataclass
class ProblemDetails(ApiModel):
    """Problem description: type URI, title, HTTP status, detail and instance URI."""

    type_: str = _field("type")
    title: str = _field("title")
    status: float = _field("status", 0.0)
    detail: str = _field("detail")
    instance: str = _field("instance")


@dataclass
class TokenRequestBody(ApiModel):
    """Form body of a vp_token grant request."""

    grant_type: str = _field(omitempty=False)
    vp_token: str = _field(omitempty=False)
    presentation_submission: str = _field(omitempty=False)
    scope: str = _field(omitempty=False)


@dataclass
class TokenResponse(ApiModel):
    token_type: str = _field()
    expires_in: float = _field(default=0.0)
    access_token: str = _field()
    scope: str = _field()
    id_token: str = _field()