"""
API Error Types

Every failure the service reports is one of five kinds. Each kind is an
HTTPException carrying a machine-readable tag next to the human message,
so FastAPI can still treat it as an HTTP error while main.py renders it as:

    {"error": "<tag>", "message": "<human readable text>"}
"""

from fastapi import HTTPException, status


class ApiError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            status_code=self.status_code,
            detail=message or self.default_message,
        )

    @property
    def message(self) -> str:
        return str(self.detail)

    def to_dict(self) -> dict:
        return {"error": self.error, "message": self.message}


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "unauthorized"
    default_message = "Unauthorized"


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "forbidden"
    default_message = "Forbidden"


class BadRequest(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "bad_request"
    default_message = "Bad request"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"
    default_message = "Not found"


class Internal(ApiError):
    pass


class InvalidSignatureFormat(Unauthorized):
    """The signature could not be parsed or no signer could be recovered."""

    default_message = "Invalid signature format"


class SignatureMismatch(Unauthorized):
    """The signature is well formed but was produced by another address."""

    default_message = "Signature does not match address"
