"""Error taxonomy shared by stores, services, the controller and the API."""
from typing import Any, Dict, Optional


class ContentCraftError(Exception):
    """Base error. `code` is a stable machine tag, `message` is human readable."""

    code: str = "error"
    status_code: int = 500
    retryable: bool = False

    def __init__(self, message: str, *, code: Optional[str] = None, extra: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.extra = extra or {}


class NotFound(ContentCraftError):
    """Id-based lookup miss."""

    code = "not_found"
    status_code = 404
    retryable = True


class PermissionDenied(ContentCraftError):
    """Deleting or mutating a default/system entity."""

    code = "permission_denied"
    status_code = 403


class ValidationFailed(ContentCraftError):
    """Duplicate brand name, missing required field and similar."""

    code = "validation_failed"
    status_code = 422


class BackendFailure(ContentCraftError):
    """Store or network error surfaced from an entity store."""

    code = "backend_failure"
    status_code = 502
    retryable = True


class NoTenantAvailable(ContentCraftError):
    """No tenant exists; needs administrator intervention."""

    code = "no_tenant"
    status_code = 409
