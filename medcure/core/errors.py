"""errors.py — Error taxonomy for the data layer.

Every failure a facade can surface carries a ``kind`` so callers can pick
retry (remote) vs. fallback-to-default (local state) without string
matching on messages.

    DataServiceError
    ├── RemoteFailure       backend unreachable or rejected the operation
    ├── LocalStateFailure   simulated state unreadable/unwritable
    ├── ModeProbeFailure    mode source unreachable (never leaves ModeStore)
    ├── RecordNotFound      no record with the requested id
    └── InvalidRecord       caller input rejected before dispatch

Called by: services/*, providers/*, core/mode_store.py, api/errors.py
"""

from __future__ import annotations


class DataServiceError(Exception):
    """Base class for all data layer failures."""

    kind = "data_service_error"

    def __init__(self, message: str, *, domain: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.domain = domain

    def to_dict(self) -> dict[str, str | None]:
        """Serialize to the JSON error shape used by the API."""
        return {"kind": self.kind, "message": self.message, "domain": self.domain}


class RemoteFailure(DataServiceError):
    """The live backend could not complete the operation."""

    kind = "remote_failure"

    def __init__(
        self,
        message: str,
        *,
        domain: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, domain=domain)
        self.status_code = status_code


class LocalStateFailure(DataServiceError):
    """Simulated state (settings file, mock collections) failed."""

    kind = "local_state_failure"


class ModeProbeFailure(DataServiceError):
    """The external mode signal could not be read."""

    kind = "mode_probe_failure"


class RecordNotFound(DataServiceError):
    """A record id did not resolve in the selected backend."""

    kind = "not_found"


class InvalidRecord(DataServiceError):
    """Input failed validation; nothing was dispatched."""

    kind = "invalid_record"

    def __init__(
        self,
        message: str,
        *,
        domain: str | None = None,
        errors: list[str] | None = None,
    ) -> None:
        super().__init__(message, domain=domain)
        self.errors = errors or []
