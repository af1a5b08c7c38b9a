"""
Error taxonomy shared by the stores, the services and the HTTP layer.

Every error is raised synchronously by the operation that detects it and is
translated to a status code only at the API boundary (see helpdesk.api.errors).
"""


class HelpdeskError(Exception):
    """Base class for every error the core reports to a caller."""

    def __init__(self, message: str = "Helpdesk error"):
        super().__init__(message)
        self.message = message


class ValidationError(HelpdeskError):
    """A required field is missing/empty or a value is outside its enum."""


class AuthenticationError(HelpdeskError):
    """Credentials or token could not be turned into an identity."""


class ForbiddenError(HelpdeskError):
    """The access policy denied the action."""

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class NotFoundError(HelpdeskError):
    """A referenced ticket, user or comment parent does not exist."""


class ConflictError(HelpdeskError):
    """A uniqueness constraint was violated."""


class StorageError(HelpdeskError):
    """Transaction or connectivity failure. The message never carries engine detail."""

    def __init__(self, message: str = "Internal storage error"):
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """A token was supplied but is malformed, expired or badly signed."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)
