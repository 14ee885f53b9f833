"""Error taxonomy for the site API.

Every failure a handler can produce is one of these. Each carries the HTTP
status and the public message rendered as ``{"error": message}``; the
underlying cause (if any) stays server-side in the logs.
"""


class ApiError(Exception):
    """Base class for failures that map directly to an HTTP response."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidPayload(ApiError):
    status_code = 400
    message = "Invalid request data"


class NotFound(ApiError):
    status_code = 404
    message = "Not found"


class Conflict(ApiError):
    status_code = 409
    message = "Conflict"


class RateLimited(ApiError):
    status_code = 429
    message = "Rate limit exceeded. Please wait before trying again."


class UpstreamFailure(ApiError):
    """The store failed; the caller gets a generic message."""

    status_code = 500
