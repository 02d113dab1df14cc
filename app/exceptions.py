"""Error taxonomy shared by services and routes.

Every error carries the HTTP status it maps to, a short human readable
message and an optional ``detail`` (for example the body returned by the
document builder). ``main.py`` renders them as ``{"message", "detail"}``.
"""

from typing import Any, Optional


class AppError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, detail: Any = None, status_code: Optional[int] = None):
        self.message = message or self.message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self):
        body = {"message": self.message}
        if self.detail is not None:
            body["detail"] = self.detail
        return body


class ValidationError(AppError):
    status_code = 400
    message = "Invalid request"


class MissingFileError(ValidationError):
    message = "A single source file is required"


class MissingInstructionsError(ValidationError):
    message = "Instructions are required"


class UnsupportedFormatError(ValidationError):
    message = "Unsupported output format"


class PayloadTooLargeError(ValidationError):
    status_code = 413
    message = "Uploaded file is too large"


class FileReadError(AppError):
    status_code = 400
    message = "Could not read uploaded file"


class UnauthorizedError(AppError):
    status_code = 401
    message = "Unauthorized"


class ForbiddenError(AppError):
    status_code = 403
    message = "Invalid token"


class InvalidCredentialsError(AppError):
    status_code = 401
    message = "Invalid credentials"


class NotFoundError(AppError):
    status_code = 404
    message = "Not found"


class ConflictError(AppError):
    status_code = 409
    message = "Conflict"


class DownstreamError(AppError):
    """The document builder answered with a non-success status."""

    message = "Document builder error"

    def __init__(self, status_code: int, body: Any = None, message: Optional[str] = None):
        super().__init__(message=message, detail=body, status_code=status_code)


class StorageError(AppError):
    status_code = 500
    message = "Storage error"


class IntegrationError(AppError):
    status_code = 500
    message = "Generation failed"


class DownstreamTimeoutError(IntegrationError):
    message = "Document builder timed out"
