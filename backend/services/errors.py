"""Error taxonomy for the task service.

Every failure raised by a service maps to exactly one of these classes before it
leaves the session flow. The transport decides the HTTP status; messages here are
safe to show to callers and never carry storage details.
"""


class TodoServiceError(Exception):
    """Base exception for all service failures."""

    code = "INTERNAL_ERROR"
    default_message = "Cannot process the request"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class ValidationError(TodoServiceError):
    code = "VALIDATION_ERROR"
    default_message = "Bad request"


class Unauthenticated(TodoServiceError):
    code = "UNAUTHENTICATED"
    default_message = "Invalid or expired token"


class Unauthorized(TodoServiceError):
    """Wrong password for a registered email."""

    code = "INVALID_PASSWORD"
    default_message = "Invalid password"


class Forbidden(TodoServiceError):
    code = "FORBIDDEN"
    default_message = "Item does not belong to the current user"


class NotRegistered(TodoServiceError):
    code = "EMAIL_NOT_REGISTERED"
    default_message = "Email id not registered"


class NotFound(TodoServiceError):
    code = "NOT_FOUND"
    default_message = "Resource not found"


class AlreadyExists(TodoServiceError):
    code = "EMAIL_ALREADY_EXISTS"
    default_message = "User with the email id already exists"


class InternalError(TodoServiceError):
    code = "INTERNAL_ERROR"
    default_message = "Internal server error"


class InvalidIdentity(TodoServiceError):
    """Raised by the token service when asked to sign an incomplete identity."""

    code = "INVALID_IDENTITY"
    default_message = "invalid username or user_id"
