"""
Domain errors raised by the store and the services.

Each error carries a short machine-checkable `code`, the HTTP status the
API layer answers with, and a human-readable message. The handler in
main.py renders them as {"error": message, "code": code, "success": false}.
"""


class StudentRecordsError(Exception):
    """Base class for all errors that reach API callers."""

    code = "error"
    status_code = 500
    default_message = "Request failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> dict:
        return {"error": self.message, "code": self.code, "success": False}


class NotFound(StudentRecordsError):
    code = "not_found"
    status_code = 404
    default_message = "Student not found"


class DuplicateLogin(StudentRecordsError):
    code = "duplicate_login"
    status_code = 400
    default_message = "This login is already taken"


class ImmutableField(StudentRecordsError):
    code = "immutable_field"
    status_code = 400
    default_message = "Student id cannot be changed"


class InvalidCredentials(StudentRecordsError):
    code = "invalid_credentials"
    status_code = 401
    default_message = "Invalid credentials"


class MissingHandle(StudentRecordsError):
    code = "missing_handle"
    status_code = 400
    default_message = "Telegram username is required"


class MissingInput(StudentRecordsError):
    code = "missing_input"
    status_code = 400
    default_message = "Telegram username and code are required"


class DeliveryFailed(StudentRecordsError):
    code = "delivery_failed"
    status_code = 400
    default_message = "Failed to send verification code"


class InvalidCode(StudentRecordsError):
    code = "invalid_code"
    status_code = 400
    default_message = "Invalid verification code"


class StorageFailure(StudentRecordsError):
    code = "storage_failure"
    status_code = 500
    default_message = "Student storage is unavailable"
