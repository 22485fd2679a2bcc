# src/exceptions.py

"""Error taxonomy for the storefront core.

None of these are fatal: callers log them and degrade to an empty or
stale view.  Rejected mutations (e.g. a cart quantity below 1) are not
exceptions at all; the engines return the unchanged state instead.
"""

from typing import Any

ERROR_MESSAGES: dict[str, str] = {
    "HTTP_STATUS": "Catalog service returned an error status",
    "TRANSPORT": "Catalog service could not be reached",
    "BAD_PAYLOAD": "Catalog response could not be parsed",
    "READ_FAILED": "Could not read from the local store",
    "WRITE_FAILED": "Could not write to the local store",
}


class StorefrontError(Exception):
    """Structured base error carrying a machine-readable ``code``."""

    def __init__(self, code: str, message: str = "", **data: Any) -> None:
        self.code = code
        self.message = message or ERROR_MESSAGES.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")


class FetchError(StorefrontError):
    """Network or parse failure while loading the catalog."""


class PersistenceError(StorefrontError):
    """Read or write failure against the favorites/cart store."""

    @property
    def key(self) -> str | None:
        return self.data.get("key")
