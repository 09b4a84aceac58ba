# app/core/errors.py
from typing import Optional


class GatewayError(Exception):
    """Base class for errors raised by the gateway core."""


class UnauthorizedPrincipal(GatewayError):
    """Raised when a request comes from a principal that was never registered."""

    def __init__(self, principal_id: str):
        self.principal_id = principal_id
        super().__init__(f"principal {principal_id} not registered")


class UnknownAction(GatewayError):
    def __init__(self, action: str):
        self.action = action
        super().__init__(f"unknown action: {action}")


class ActionValidationError(GatewayError):
    """A required action parameter is missing or has the wrong type."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class RemoteError(GatewayError):
    """The remote entity API failed, either at the transport or in its response."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        if status_code is not None:
            message = f"{message} (status {status_code}: {body or ''})"
        super().__init__(message)


class SnapshotError(GatewayError):
    """A context snapshot could not be read or validated. The table was not touched."""
