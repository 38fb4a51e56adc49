"""Exception hierarchy rendered as error envelopes by the API layer."""


class ApiError(Exception):
    """Base error carrying an HTTP status and a user-facing message."""

    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None, errors: list | None = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class BadRequest(ApiError):
    """Missing or empty required field, or a malformed identifier."""

    status_code = 400
    default_message = "Bad request"


class Unauthorized(ApiError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    default_message = "Unauthorized request"


class Forbidden(ApiError):
    """Caller is authenticated but does not own the target."""

    status_code = 403
    default_message = "Not allowed"


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class Conflict(ApiError):
    status_code = 409
    default_message = "Already exists"


class UnexpectedError(ApiError):
    """A write or upload failed after all preconditions passed."""

    status_code = 500
    default_message = "Internal server error"
