"""Exceptions raised by the REST transport."""

from __future__ import annotations


class DiscordRestError(Exception):
    """Base exception for all discord-rest errors.

    Attributes:
        is_fatal: If True, retrying the same call cannot succeed and the caller
                  has to take corrective action (e.g. replace an invalid token).
    """

    def __init__(
        self,
        message: str,
        is_fatal: bool = False,
        *args: object,
    ) -> None:
        super().__init__(message, *args)
        self.is_fatal = is_fatal


class HttpError(DiscordRestError):
    """A request finished with a non-success status code."""

    def __init__(self, message: str, status_code: int, is_fatal: bool = False) -> None:
        super().__init__(message, is_fatal)
        self.status_code = status_code


class UnauthorizedError(HttpError):
    def __init__(self, message: str = "Authentication token is invalid.") -> None:
        super().__init__(message, 401, is_fatal=True)


class ForbiddenError(HttpError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(HttpError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class RateLimitedError(HttpError):
    """Still rate-limited after the transport exhausted its retries."""

    def __init__(self, message: str, retry_after: float | None = None) -> None:
        super().__init__(message, 429)
        self.retry_after = retry_after
