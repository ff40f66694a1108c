"""HTTP-facing error taxonomy.

Every failure that reaches a client is rendered as ``{"error": message}``
with the status code carried by the exception (see ``main.create_app``).
"""


class HTTPError(Exception):
    """Error with a client-facing message and HTTP status code."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @classmethod
    def too_many_requests(cls, message: str) -> "HTTPError":
        return cls(message, 429)

    @classmethod
    def server_error(cls, message: str) -> "HTTPError":
        return cls(message, 500)

    @classmethod
    def service_unavailable(cls, message: str) -> "HTTPError":
        return cls(message, 503)

    @classmethod
    def not_found(cls, message: str) -> "HTTPError":
        return cls(message, 404)

    @classmethod
    def bad_input(cls, message: str) -> "HTTPError":
        return cls(message, 400)

    @classmethod
    def unauthenticated(cls, message: str) -> "HTTPError":
        return cls(message, 401)
