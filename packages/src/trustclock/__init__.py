"""trustclock.

Trusted wall-clock time for long-running processes on hosts whose own
clock drifts: sync once against a remote HTTP ``Date`` header, then
advance with the local monotonic clock.
"""

from importlib.metadata import PackageNotFoundError, version

from trustclock._clock import ClockPort, SystemClock
from trustclock._errors import (
    ClockFatalError,
    ConnectError,
    IOTimeoutError,
    NotSyncedError,
    ParseError,
    ProtocolError,
    SyncError,
    SyncExhaustedError,
    TrustClockError,
)
from trustclock._fetcher import (
    FetcherPort,
    HttpDateFetcher,
    find_date_header,
    parse_http_date,
)
from trustclock._logging import JsonFormatter, configure_logging
from trustclock._reference import SyncedReference
from trustclock._settings import LoggingSettings, Settings, SyncSettings
from trustclock._state import TrustedClock

try:
    __version__ = version("trustclock")
except PackageNotFoundError:
    # Last resort fallback for source checkouts without metadata
    __version__ = "0.0.0+unknown"

__all__ = [
    # Version
    "__version__",
    # Clock
    "ClockPort",
    "SystemClock",
    "SyncedReference",
    "TrustedClock",
    # Fetcher
    "FetcherPort",
    "HttpDateFetcher",
    "find_date_header",
    "parse_http_date",
    # Errors
    "ClockFatalError",
    "ConnectError",
    "IOTimeoutError",
    "NotSyncedError",
    "ParseError",
    "ProtocolError",
    "SyncError",
    "SyncExhaustedError",
    "TrustClockError",
    # Logging
    "JsonFormatter",
    "configure_logging",
    # Settings
    "LoggingSettings",
    "Settings",
    "SyncSettings",
]
