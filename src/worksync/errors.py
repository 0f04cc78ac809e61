"""Error taxonomy shared by the settlement services and the API layer."""

from __future__ import annotations


class WorkSyncError(Exception):
    """Base class for every error raised by WorkSync services."""

    code = "WORKSYNC_ERROR"


class ValidationError(WorkSyncError):
    """Malformed input: empty employee, non-positive amount, bad status literal."""

    code = "VALIDATION_ERROR"


class NotFoundError(WorkSyncError):
    """A referenced payment, entry or employee has no record."""

    code = "NOT_FOUND"


class ConflictError(WorkSyncError):
    """Stored state changed underneath the request; refetch and resubmit."""

    code = "CONFLICT"


class StorageError(WorkSyncError):
    """Transaction or commit failure unrelated to business rules."""

    code = "STORAGE_ERROR"


class InvalidTransitionError(ConflictError):
    """Raised when a payment status change is not allowed from its current state."""

    code = "INVALID_TRANSITION"

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
