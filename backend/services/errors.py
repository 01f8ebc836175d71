"""
Service error taxonomy.

Every failure a request can hit is one of these four. Each carries the HTTP
status it maps to and a stable public message; store internals never end up
in the message.
"""


class ServiceError(Exception):
    """Base class for request-level failures."""
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(ServiceError):
    """Raised when no tenant can be resolved for the request."""
    status_code = 401
    default_message = "Unauthorized"


class InvalidInput(ServiceError):
    """Raised when input fails validation before any store call."""
    status_code = 400
    default_message = "Invalid input"


class NotFound(ServiceError):
    """Raised for missing entities and entities owned by another tenant alike."""
    status_code = 404
    default_message = "Not found"


class StorageFailure(ServiceError):
    """Raised when the graph store fails. Never carries driver details."""
    status_code = 500
    default_message = "Graph store unavailable"
