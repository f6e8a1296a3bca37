"""Health checks of the verifier."""

import threading
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

STATUS_OK = "OK"
STATUS_UNAVAILABLE = "Unavailable"


class Health:
    """A named component with registered checks that can be measured together.

    A check is a callable without arguments; raising an exception marks it failed.
    """

    def __init__(self, name: str = "vcverifier") -> None:
        self.name = name
        self._checks: dict[str, Callable[[], Any]] = {}
        self._lock = threading.Lock()

    def register(self, name: str, check: Callable[[], Any]) -> None:
        """Add or replace a check."""
        if not callable(check):
            raise TypeError("check must be callable")
        with self._lock:
            self._checks[name] = check

    def measure(self) -> dict[str, Any]:
        """Run all checks and return the overall status with any failures."""
        with self._lock:
            checks = dict(self._checks)
        failures = {}
        for name, check in checks.items():
            try:
                check()
            except Exception as error:
                failures[name] = str(error)
        result: dict[str, Any] = {
            "status": STATUS_UNAVAILABLE if failures else STATUS_OK,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "component": {"name": self.name},
        }
        if failures:
            result["failures"] = failures
        return result


_default_health = Health("vcverifier")


def health_response(health=None) -> tuple[int, dict[str, Any]]:
    """Return the HTTP status code and body for a health request."""
    result = (health if health is not None else _default_health).measure()
    return (200 if result["status"] == STATUS_OK else 503), result