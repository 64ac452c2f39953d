"""
Error taxonomy shared by the service layer and the HTTP layer.

Services raise these; ``app.main`` maps each class to its status code.
Storage write conflicts (``sqlalchemy.orm.exc.StaleDataError``) are not part
of the taxonomy and propagate untouched.
"""


class MaysError(Exception):
    """Base exception for all Mays API errors."""

    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(MaysError):
    """Raised when the requested entity does not exist."""

    status_code = 404


class BadRequestError(MaysError):
    """Raised when a write targets something that cannot be written."""

    status_code = 400


class ForbiddenError(MaysError):
    """Raised when the acting user does not own the resource."""

    status_code = 403


class AuthenticationError(MaysError):
    """Raised when the request credentials are missing, invalid or unknown."""

    status_code = 401
