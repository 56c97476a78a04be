"""Error taxonomy for the API Gateway and story records."""


class HackOrSnoozeError(Exception):
    """Base class for every error raised by this package."""


class NetworkError(HackOrSnoozeError):
    """The request never produced an HTTP response."""


class ApiError(HackOrSnoozeError):
    """The API Gateway answered with a non-2xx status."""

    def __init__(self, status: int | None, message: str) -> None:
        super().__init__(f"{status}: {message}" if status else message)
        self.status = status
        self.message = message


class AuthError(ApiError):
    """Credentials were rejected, invalid, or missing."""


class MalformedUrlError(HackOrSnoozeError, ValueError):
    """A story URL could not be parsed as an absolute URL."""

    def __init__(self, url: str, reason: str = "not an absolute URL") -> None:
        super().__init__(f"Malformed story URL {url!r}: {reason}")
        self.url = url
