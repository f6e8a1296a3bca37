"""Client for the Gaia-X registry that lists trusted compliance issuers."""

import json

import requests

from vcverifier.log import get_logger, pretty_print_object


class RegistryError(Exception):
    """Raised when the registry does not answer with a usable issuers list."""

    def __init__(self, detail: str = "gaiax_registry_failed_to_answer_properly") -> None:
        super().__init__(detail)


class GaiaXRegistryClient:
    """Retrieves the DIDs of the trustable compliance issuers."""

    def __init__(self, endpoint: str, session=None) -> None:
        self._endpoint = endpoint
        self._session = session if session is not None else requests.Session()

    def get_compliance_issuers(self) -> list[str]:
        """Return the list of issuer DIDs; raise RegistryError on any failure."""
        logger = get_logger()
        try:
            response = self._session.get(self._endpoint)
        except requests.RequestException as error:
            logger.warning("Did not receive a valid issuers list response. Err: %s", error)
            raise RegistryError(str(error)) from error
        if response is None:
            logger.warning("Did not receive any response from gaia-x registry.")
            raise RegistryError()
        if response.status_code != 200:
            logger.warning("Did not receive an ok from the registry. Was %s", response.status_code)
            raise RegistryError()
        if not response.content:
            logger.warning("Received an empty body for the issuers list.")
            raise RegistryError()
        try:
            issuers = json.loads(response.text)
        except ValueError as error:
            logger.warning("Was not able to decode the issuers list. Was %s", response.text)
            raise RegistryError(f"invalid issuers list: {error}") from error
        if not isinstance(issuers, list) or not all(isinstance(i, str) for i in issuers):
            logger.warning("Was not able to decode the issuers list. Was %s", response.text)
            raise RegistryError("issuers list must be a JSON array of strings")
        logger.info("%d issuer dids received.", len(issuers))
        logger.debug("Issuers are %s", pretty_print_object(issuers))
        return issuers