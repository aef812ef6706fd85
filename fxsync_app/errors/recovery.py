"""
Recoverable transport failures.

Raised by the HTTP client when a source cannot be reached or answers with a
non-2xx status. Data source clients substitute fallback data for these.
"""

from typing import Optional


class RecoverableError(Exception):
    """Base for failures the data source boundary recovers from."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message)
        self.recoverable = True


class TransportError(RecoverableError):
    """Remote source unreachable, timed out, or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 url: Optional[str] = None, timed_out: bool = False, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.url = url
        self.timed_out = timed_out

    @property
    def is_http_error(self) -> bool:
        return self.status_code is not None
