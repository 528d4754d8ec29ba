"""Error types raised while checking for advisories."""

from typing import Optional


class AdvisoryWatchError(Exception):
    """Base class for all advisory-watch failures."""


class TransportError(AdvisoryWatchError):
    """Network-level failure (DNS, connection reset, timeout)."""


class ParseError(AdvisoryWatchError):
    """A JSON document could not be decoded or had the wrong shape."""


class _HttpStatusError(AdvisoryWatchError):
    def __init__(self, what: str, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        message = f"{what}: {status_code}"
        if body:
            message += f" - {body[:200]}"
        super().__init__(message)


class FetchError(_HttpStatusError):
    """The advisory listing endpoint answered with a non-200 status."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__("Advisory request failed", status_code, body)


class NotifyError(_HttpStatusError):
    """The chat webhook answered with a non-200 status."""

    def __init__(self, status_code: int, body: Optional[str] = ""):
        super().__init__("Google Chat delivery failed", status_code, body or "")
