"""
Custom exception classes for the property listing application.
Provides structured error handling with appropriate HTTP status codes.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception class."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class ValidationError(APIException):
    """User input is missing or malformed."""

    def __init__(
        self,
        detail: str,
        field_errors: Optional[List[Dict[str, Any]]] = None
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code="VALIDATION_ERROR"
        )
        self.field_errors = field_errors or []


class MissingFieldsError(ValidationError):
    """Required form fields were not supplied."""

    def __init__(self, detail: str = "All fields are required."):
        super().__init__(detail)
        self.error_code = "MISSING_FIELDS"


class UnauthorizedError(APIException):
    """Authentication failed."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="UNAUTHORIZED"
        )


class InvalidCredentialsError(UnauthorizedError):
    """
    Invalid login credentials.
    Raised with the same message whether the email is unknown or the password is wrong.
    """

    def __init__(self):
        super().__init__("Invalid email or password.")
        self.error_code = "INVALID_CREDENTIALS"


class LoginRequiredError(APIException):
    """Anonymous access to a protected action; answered with a redirect to the login page."""

    def __init__(self, login_url: str = "/login"):
        super().__init__(
            status_code=status.HTTP_303_SEE_OTHER,
            detail="Login required",
            error_code="LOGIN_REQUIRED",
            headers={"Location": login_url}
        )
        self.login_url = login_url


class ConflictError(APIException):
    """Resource conflict exception."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code="CONFLICT"
        )


class InfrastructureError(APIException):
    """Store or pool failure. The message is generic; details are only logged."""

    def __init__(self, detail: str = "An unexpected error occurred. Please try again."):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code="INTERNAL_SERVER_ERROR"
        )


class TransactionFailedError(InfrastructureError):
    """The property transaction was rolled back."""

    def __init__(self, detail: str = "Could not save the property. Please try again."):
        super().__init__(detail)
        self.error_code = "TRANSACTION_FAILED"


# File upload exceptions
class FileUploadError(ValidationError):
    """File upload error exception."""

    def __init__(self, detail: str):
        super().__init__(f"File upload error: {detail}")


class TooManyFilesError(ValidationError):
    """More files than a single listing accepts."""

    def __init__(self, limit: int):
        super().__init__(f"You can upload at most {limit} photos.")


class UnsupportedFileTypeError(FileUploadError):
    """Unsupported file type exception."""

    def __init__(self, file_type: str, supported_types: List[str]):
        supported = ", ".join(supported_types)
        super().__init__(f"unsupported file type '{file_type}'. Supported types: {supported}")


class FileSizeExceededError(FileUploadError):
    """File size exceeded exception."""

    def __init__(self, size: int, max_size: int):
        super().__init__(f"file size {size} bytes exceeds maximum allowed size {max_size} bytes")
