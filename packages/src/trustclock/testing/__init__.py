"""Public test-support utilities for trustclock.

Re-exports test doubles and factories so that consumer test suites
can import everything from a single ``trustclock.testing`` namespace
instead of reaching into private modules.

Provided symbols:

- :class:`FakeClock`: deterministic monotonic clock with virtual sleep.
- :class:`StubFetcher`: scripted fetcher double.
- :class:`DateServer`: local TCP server with a canned HTTP response.
- :func:`http_response`: builds the canned response bytes.
- :func:`make_settings`: factory for ``Settings`` without ``.env`` files.
"""

from trustclock.testing._clock import FakeClock
from trustclock.testing._fetcher import StubFetcher
from trustclock.testing._server import DateServer, http_response
from trustclock.testing._settings import make_settings

__all__ = [
    "DateServer",
    "FakeClock",
    "StubFetcher",
    "http_response",
    "make_settings",
]
