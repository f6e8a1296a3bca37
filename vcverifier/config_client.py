"""Client for the credentials-config-service that lists configured services."""

import json
from dataclasses import dataclass, field

import requests

from vcverifier.log import get_logger, pretty_print_object
from vcverifier.settings import ConfiguredService

SERVICES_PATH = "service"
PAGE_SIZE = 100


class CcsError(Exception):
    """Base error of the config service client."""


class CcsNoResponseError(CcsError):
    def __init__(self) -> None:
        super().__init__("no_response_from_ccs")


class CcsErrorResponseError(CcsError):
    def __init__(self, status_code: int | None = None) -> None:
        super().__init__("error_response_from_ccs")
        self.status_code = status_code


class CcsEmptyResponseError(CcsError):
    def __init__(self) -> None:
        super().__init__("empty_response_from_ccs")


@dataclass
class ServicesResponse:
    """One page of services from the config service."""

    total: int = 0
    page_number: int = 0
    page_size: int = 0
    services: list[ConfiguredService] = field(default_factory=list)


def _parse_services_response(data) -> ServicesResponse:
    if not isinstance(data, dict):
        raise ValueError("services response must be a JSON object")
    services = data.get("services") or []
    if not isinstance(services, list):
        raise ValueError("services must be a JSON array")
    return ServicesResponse(
        total=int(data.get("total") or 0),
        page_number=int(data.get("pageNumber") or 0),
        page_size=int(data.get("pageSize") or 0),
        services=[ConfiguredService.from_dict(item) for item in services],
    )


def service_url(endpoint: str) -> str:
    """Return the services URL below the given config endpoint."""
    if endpoint.endswith("/"):
        return endpoint + SERVICES_PATH
    return f"{endpoint}/{SERVICES_PATH}"


class HttpConfigClient:
    """Fetches all configured services, page by page."""

    def __init__(self, config_endpoint: str, session=None) -> None:
        self._session = session if session is not None else requests.Session()
        self._services_url = service_url(config_endpoint)

    def get_services(self) -> list[ConfiguredService]:
        services: list[ConfiguredService] = []
        page = 0
        while True:
            try:
                response = self._get_services_page(page, PAGE_SIZE)
            except Exception as error:
                get_logger().warning(
                    "Failed to receive services page %s with size %s. Err: %s", page, PAGE_SIZE, error
                )
                raise
            services.extend(response.services)
            # Services added to earlier pages meanwhile are picked up on the next refresh.
            if (
                response.total == 0
                or len(response.services) < PAGE_SIZE
                or response.total == len(services)
            ):
                return services
            page += 1

    def _get_services_page(self, page: int, page_size: int) -> ServicesResponse:
        logger = get_logger()
        logger.debug(
            "Retrieve services from %s for page %s and size %s.", self._services_url, page, page_size
        )
        response = self._session.get(f"{self._services_url}?pageSize={page_size}&page={page}")
        if response is None:
            logger.warning("Was not able to get any response from %s.", self._services_url)
            raise CcsNoResponseError()
        if response.status_code != 200:
            logger.warning(
                "Was not able to get the services from %s. Status: %s",
                self._services_url, response.status_code,
            )
            raise CcsErrorResponseError(response.status_code)
        if not response.content:
            logger.info("Received an empty body from the ccs.")
            raise CcsEmptyResponseError()
        try:
            services_response = _parse_services_response(json.loads(response.text))
        except (ValueError, TypeError):
            logger.warning("Was not able to decode the ccs-response.")
            raise
        logger.debug("Services response was: %s.", pretty_print_object(services_response))
        return services_response