# save_server/core/errors.py


# -------------------------------
# Service Error Taxonomy
# -------------------------------

class ServiceError(Exception):
    """
    Base class for every error that is rendered to the client.
    Each subclass fixes the HTTP status and a generic default message.
    """
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class InvalidInput(ServiceError):
    status_code = 400
    message = "Missing credentials"


class InvalidName(InvalidInput):
    message = "Invalid profile name"


class Conflict(ServiceError):
    status_code = 400
    message = "Username taken"


class Unauthorized(ServiceError):
    status_code = 401
    message = "Unauthorized"


class InvalidCredentials(Unauthorized):
    message = "Invalid credentials"


class TokenInvalid(Unauthorized):
    message = "Invalid token"


class TokenExpired(Unauthorized):
    message = "Token expired"


class NotFound(ServiceError):
    status_code = 404
    message = "Not found"


class IntegrityFailure(ServiceError):
    """
    Raised when a stored blob fails authentication or does not decode to
    a {money, level} record. Signals corruption or a key mismatch.
    """
    status_code = 500
    message = "Decryption error"


class Internal(ServiceError):
    status_code = 500
    message = "Internal server error"
