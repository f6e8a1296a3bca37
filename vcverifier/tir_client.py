"""Client for EBSI-compatible trusted issuers registries (TIR/TIL)."""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import requests

from vcverifier.cache import DEFAULT_EXPIRATION, ExpiringCache, global_cache
from vcverifier.common import build_url_string
from vcverifier.log import get_logger, pretty_print_object

ISSUERS_V4_PATH = "v4/issuers"
ISSUERS_V3_PATH = "v3/issuers"
DID_V4_PATH = "v4/identifiers"


class TirError(Exception):
    """Base error of the trusted issuers registry client."""


class TirNoResponseError(TirError):
    def __init__(self) -> None:
        super().__init__("no_response_from_tir")


class TirEmptyResponseError(TirError):
    def __init__(self) -> None:
        super().__init__("empty_response_from_tir")


_REQUEST_ERRORS = (requests.RequestException, TirError)


def _mapping(data: Any, what: str) -> Mapping:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def _list(data: Any, what: str) -> list:
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"{what} must be a JSON array, got {type(data).__name__}")
    return data


def _string(data: Mapping, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string, got {type(value).__name__}")
    return value


@dataclass
class IssuerAttribute:
    """An attribute of a trusted issuer as published by the registry."""

    hash: str = ""
    body: str = ""
    issuer_type: str = ""
    tao: str = ""
    root_tao: str = ""

    @classmethod
    def from_dict(cls, data) -> "IssuerAttribute":
        data = _mapping(data, "issuer attribute")
        return cls(
            hash=_string(data, "hash"),
            body=_string(data, "body"),
            issuer_type=_string(data, "issuerType"),
            tao=_string(data, "tao"),
            root_tao=_string(data, "rootTao"),
        )


@dataclass
class TrustedIssuer:
    """A trusted issuer as defined by EBSI."""

    did: str = ""
    attributes: list[IssuerAttribute] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data) -> "TrustedIssuer":
        data = _mapping(data, "trusted issuer")
        return cls(
            did=_string(data, "did"),
            attributes=[
                IssuerAttribute.from_dict(item) for item in _list(data.get("attributes"), "attributes")
            ],
        )


@dataclass
class TimeRange:
    """Validity period given by two timestamps."""

    from_: str = ""
    to: str = ""

    @classmethod
    def from_dict(cls, data) -> "TimeRange":
        data = _mapping(data, "time range")
        return cls(from_=_string(data, "from"), to=_string(data, "to"))


@dataclass
class Claim:
    """A claim name and the values an issuer may set for it."""

    name: str = ""
    allowed_values: list[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data) -> "Claim":
        data = _mapping(data, "claim")
        return cls(
            name=_string(data, "name"),
            allowed_values=list(_list(data.get("allowedValues"), "allowedValues")),
        )


@dataclass
class TirCredential:
    """A credential type, its validity time and the claims allowed to be issued."""

    valid_for: TimeRange = field(default_factory=TimeRange)
    credentials_type: str = ""
    claims: list[Claim] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data) -> "TirCredential":
        data = _mapping(data, "credential")
        return cls(
            valid_for=TimeRange.from_dict(data.get("validFor")),
            credentials_type=_string(data, "credentialsType"),
            claims=[Claim.from_dict(item) for item in _list(data.get("claims"), "claims")],
        )


class NoAuthHttpClient:
    """Issues plain GET requests against a registry, closing each connection."""

    def __init__(self, session=None) -> None:
        self._session = session if session is not None else requests.Session()

    def get(self, tir_address: str, tir_path: str):
        url = build_url_string(tir_address, tir_path)
        # Closing avoids EOFs from keep-alive race conditions.
        return self._session.get(url, headers={"Connection": "close"})


def _issuer_v4_path(did: str) -> str:
    return f"{ISSUERS_V4_PATH}/{did}"


def _issuer_v3_path(did: str) -> str:
    return f"{ISSUERS_V3_PATH}/{did}"


def _parse_tir_response(response) -> TrustedIssuer:
    if not response.content:
        get_logger().info("Received an empty body from the tir.")
        raise TirEmptyResponseError()
    try:
        return TrustedIssuer.from_dict(json.loads(response.content))
    except ValueError:
        get_logger().warning("Was not able to decode the tir-response.")
        raise


class TirHttpClient:
    """Retrieves information from EBSI-compatible trusted issuers registries."""

    def __init__(self, client=None, tir_cache=None, til_cache=None) -> None:
        self._client = client if client is not None else NoAuthHttpClient()
        self._tir_cache = tir_cache if tir_cache is not None else ExpiringCache(30)
        self._til_cache = til_cache if til_cache is not None else ExpiringCache(30)

    def is_trusted_participant(self, tir_endpoints, did: str) -> bool:
        """Whether any of the registries knows the DID."""
        logger = get_logger()
        for tir_endpoint in tir_endpoints:
            logger.debug("Check if a participant %s is trusted through %s.", did, tir_endpoint)
            if self._issuer_exists(tir_endpoint, did):
                logger.debug("Issuer %s is a trusted participant via %s.", did, tir_endpoint)
                return True
        return False

    def get_trusted_issuer(self, tir_endpoints, did: str) -> TrustedIssuer | None:
        """Return the issuer from the first registry that knows it, or None."""
        logger = get_logger()
        for tir_endpoint in tir_endpoints:
            cache_key = tir_endpoint + did
            try:
                return self._til_cache.get(cache_key)
            except KeyError:
                pass
            try:
                response = self._request_issuer(tir_endpoint, did)
            except _REQUEST_ERRORS as error:
                logger.warning(
                    "Was not able to get the issuer %s from %s because of err: %s.", did, tir_endpoint, error
                )
                continue
            if response.status_code != 200:
                logger.debug("Issuer %s is not known at %s.", did, tir_endpoint)
                continue
            try:
                trusted_issuer = _parse_tir_response(response)
            except (TirError, ValueError) as error:
                logger.warning(
                    "Was not able to parse the response from til %s for %s. Err: %s", tir_endpoint, did, error
                )
                continue
            logger.debug("Got issuer %s.", pretty_print_object(trusted_issuer))
            self._til_cache.set(cache_key, trusted_issuer, DEFAULT_EXPIRATION)
            return trusted_issuer
        return None

    def _issuer_exists(self, tir_endpoint: str, did: str) -> bool:
        cache_key = tir_endpoint + did
        try:
            return self._tir_cache.get(cache_key)
        except KeyError:
            pass
        try:
            response = self._request_issuer(tir_endpoint, did)
        except _REQUEST_ERRORS:
            return False
        get_logger().debug("Issuer %s response from %s is %s", did, tir_endpoint, response.status_code)
        # A 200 means the issuer exists; the body need not be parsed.
        exists = response.status_code == 200
        self._tir_cache.set(cache_key, exists, DEFAULT_EXPIRATION)
        return exists

    def _request_issuer(self, tir_endpoint: str, did: str):
        try:
            response = self._request_issuer_with_version(tir_endpoint, _issuer_v4_path(did))
        except _REQUEST_ERRORS as error:
            get_logger().debug("Got error %s", error)
            return self._request_issuer_with_version(tir_endpoint, _issuer_v3_path(did))
        if response.status_code != 200:
            get_logger().debug("Got status %s", response.status_code)
            return self._request_issuer_with_version(tir_endpoint, _issuer_v3_path(did))
        return response

    def _request_issuer_with_version(self, tir_endpoint: str, did_path: str):
        logger = get_logger()
        logger.debug("Get issuer %s/%s.", tir_endpoint, did_path)
        cache_key = build_url_string(tir_endpoint, did_path)
        issuer_cache = global_cache().issuer_cache
        try:
            return issuer_cache.get(cache_key)
        except KeyError:
            pass
        try:
            response = self._client.get(tir_endpoint, did_path)
        except requests.RequestException as error:
            logger.warning("Was not able to get the issuer %s from %s. Err: %s", did_path, tir_endpoint, error)
            raise
        if response is None:
            logger.warning("Was not able to get any response for issuer %s from %s.", did_path, tir_endpoint)
            raise TirNoResponseError()
        issuer_cache.set(cache_key, response, DEFAULT_EXPIRATION)
        logger.debug("Added cache entry for %s", cache_key)
        return response


def new_tir_http_client(verifier_config) -> TirHttpClient:
    """Create a client whose caches expire as the verifier configuration says."""
    return TirHttpClient(
        client=NoAuthHttpClient(),
        tir_cache=ExpiringCache(verifier_config.tir_cache_expiry),
        til_cache=ExpiringCache(verifier_config.til_cache_expiry),
    )