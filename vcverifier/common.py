"""Small shared helpers: clocks and URL building."""

from datetime import datetime


class RealClock:
    """Clock backed by the system time."""

    def now(self) -> datetime:
        return datetime.now()


def build_url_string(address: str, path: str) -> str:
    """Join an address and a path with exactly one slash between them."""
    if address.endswith("/"):
        return address + path.removeprefix("/")
    if path.startswith("/"):
        return address + path
    return f"{address}/{path}"