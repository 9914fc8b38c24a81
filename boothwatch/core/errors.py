"""
Domain errors and their HTTP mapping.
Services raise these; routes turn them into HTTPException via domain_error_to_http so handlers stay thin.
"""
from __future__ import annotations

from fastapi import HTTPException

# ---------------------------------------------------------------------------
# HTTP status codes for known error categories
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400
STATUS_UNAUTHORIZED = 401
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409
STATUS_INTERNAL_ERROR = 500


class BoothWatchError(Exception):
    """Base for errors surfaced to API callers."""

    status_code = STATUS_INTERNAL_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(BoothWatchError):
    """Required ping or request field missing."""

    status_code = STATUS_BAD_REQUEST


class AuthError(BoothWatchError):
    """Missing or wrong shared ingestion key."""

    status_code = STATUS_UNAUTHORIZED


class NotFoundError(BoothWatchError):
    status_code = STATUS_NOT_FOUND


class ConflictError(BoothWatchError):
    status_code = STATUS_CONFLICT


class ConfigurationError(BoothWatchError):
    status_code = STATUS_INTERNAL_ERROR


class TransientNotifyError(Exception):
    """Notifier could not deliver. Logged and swallowed; never reaches ping or operator callers."""


class MalformedScheduleData(ValueError):
    """Stored schedule or metadata could not be parsed. Carried in Parsed.error, never raised to callers."""


def domain_error_to_http(exc: BoothWatchError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.detail)
