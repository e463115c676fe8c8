"""Shared state and error type for the cloud operation mix-ins."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional


class CloudError(Exception):
    """Raised when a CloudStack operation cannot be completed as requested."""


class ClientBase:
    """Holds the CloudStack API clients and counts API errors.

    ``cs`` is used for calls that should complete before returning and
    ``cs_async`` for calls that may return before the work is done.  When no
    separate asynchronous client is given, ``cs`` serves both roles.
    """

    def __init__(self, cs: Any, cs_async: Optional[Any] = None) -> None:
        self.cs = cs
        self.cs_async = cs if cs_async is None else cs_async
        self.error_count = 0

    def _record_error(self, err: Optional[BaseException]) -> None:
        """Count an API error; ``None`` means the call succeeded."""
        if err is not None:
            self.error_count += 1

    @contextmanager
    def _recording(self) -> Iterator[None]:
        """Count any exception raised by the enclosed API call, then re-raise it."""
        try:
            yield
        except Exception as exc:
            self._record_error(exc)
            raise