"""Domain exceptions.

Each error carries the HTTP status it maps to so the API layer can translate
it into a ``{"error": message}`` response without knowing the failing step.
"""


class PortalError(Exception):
    """Base class for all expected business errors."""

    status_code: int = 400

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(PortalError):
    """Raised when input fails a business rule."""

    status_code = 400


class InvalidTokenError(PortalError):
    """Raised when an invitation or reset token is missing, spent or expired."""

    status_code = 400


class PermissionDeniedError(PortalError):
    """Raised when the caller may not perform the action."""

    status_code = 403


class NotFoundError(PortalError):
    """Raised when a referenced record does not exist."""

    status_code = 404


class ConflictError(PortalError):
    """Raised when the action collides with existing state."""

    status_code = 409


class UpstreamError(PortalError):
    """Raised when the store or an external provider fails a required step."""

    status_code = 500
