"""Exception hierarchy for trusted-time synchronisation.

Two disjoint branches hang off :class:`TrustClockError`::

    TrustClockError
    ├── SyncError               ← recoverable, raised by sync()
    │   ├── ConnectError        transport not established in time
    │   ├── IOTimeoutError      write/read deadline exceeded
    │   ├── ProtocolError       no Date header in the response
    │   └── ParseError          Date header is not an HTTP-date
    └── ClockFatalError         ← unrecoverable, never caught by the library
        ├── SyncExhaustedError  must_sync() ran out of time
        └── NotSyncedError      now() called before any successful sync

``must_sync()`` only retries :class:`SyncError`.  Because the fatal
branch does not inherit from it, ``except SyncError`` in calling code
can never accidentally swallow a fatal condition.

Each recoverable error carries a machine-readable ``error_type`` so
callers can tally failures by kind without ``isinstance`` chains.
"""

from __future__ import annotations

from typing import Any


class TrustClockError(Exception):
    """Base exception for all trustclock errors."""

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.details:
            parts.append(f"[details={self.details}]")
        return " ".join(parts)


# ---------------------------------------------------------------------------
# Recoverable
# ---------------------------------------------------------------------------


class SyncError(TrustClockError):
    """A single sync attempt failed; existing clock state is untouched."""

    error_type = "sync"

    def __init__(
        self,
        message: str,
        *,
        endpoint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.endpoint = endpoint
        super().__init__(message, details=details)

    def __str__(self) -> str:
        text = super().__str__()
        if self.endpoint:
            text = f"{text} [endpoint={self.endpoint}]"
        return text


class ConnectError(SyncError):
    """Raised when the stream to the remote endpoint cannot be opened."""

    error_type = "connect"


class IOTimeoutError(SyncError):
    """Raised when a write or read deadline expires mid-exchange."""

    error_type = "io_timeout"


class ProtocolError(SyncError):
    """Raised when the response carries no recognisable ``Date:`` header."""

    error_type = "protocol"


class ParseError(SyncError):
    """Raised when the ``Date:`` header value is not an RFC 1123 date."""

    error_type = "parse"

    def __init__(
        self,
        message: str,
        *,
        value: str,
        endpoint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.value = value
        details = dict(details or {})
        details["value"] = value
        super().__init__(message, endpoint=endpoint, details=details)


# ---------------------------------------------------------------------------
# Fatal
# ---------------------------------------------------------------------------


class ClockFatalError(TrustClockError):
    """Unrecoverable clock condition.

    Signals a usage bug or a total environment failure.  Calling code
    is expected to let it propagate and terminate the flow; trustclock
    itself never catches it.
    """


class SyncExhaustedError(ClockFatalError):
    """Raised by ``must_sync()`` when no sync succeeded before the deadline.

    The last recoverable error is chained as ``__cause__``.
    """

    def __init__(self, message: str, *, attempts: int, timeout: float) -> None:
        self.attempts = attempts
        self.timeout = timeout
        super().__init__(
            message,
            details={"attempts": attempts, "timeout": timeout},
        )


class NotSyncedError(ClockFatalError):
    """Raised when trusted time is queried before any successful sync."""
