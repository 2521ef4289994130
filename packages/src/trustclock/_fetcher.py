"""Remote-time fetcher port and HTTP ``Date`` header adapter.

Provides FetcherPort (Protocol) and HttpDateFetcher, which performs a
single TCP round trip to a plain-HTTP endpoint and reads the time from
the ``Date:`` response header.

Exchange::

    → HEAD - HTTP/1.0\\r\\n\\r\\n
    ← HTTP/1.0 400 Bad Request\\r\\n
      ...
      Date: Mon, 02 Jan 2006 15:04:05 GMT\\r\\n
      ...\\r\\n\\r\\n

``HEAD`` asks for no body and ``-`` is not a valid resource path, so
the request is usually rejected by the first proxy it reaches.  That
error response is the fastest answer the remote side can give, and
every HTTP response carries a ``Date`` header.

The whole exchange (connect + write + read) shares one deadline.  The
monotonic sample is taken the moment the first response bytes arrive,
before any parsing.  No round-trip-time compensation is attempted; the
latency of the single request is accepted as error.
"""

from __future__ import annotations

import email.utils
import logging
import re
import socket
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from trustclock._clock import ClockPort, SystemClock, remaining
from trustclock._errors import ConnectError, IOTimeoutError, ParseError, ProtocolError
from trustclock._reference import SyncedReference

if TYPE_CHECKING:
    from trustclock._settings import Settings

logger = logging.getLogger(__name__)

REQUEST = b"HEAD - HTTP/1.0\r\n\r\n"

DATE_PREFIX = "Date:"

HTTP_DATE_FORMAT = "Mon, 02 Jan 2006 15:04:05 MST"
"""RFC 1123 HTTP-date layout; the zone is an alphabetic abbreviation."""

_DAYS = "Mon|Tue|Wed|Thu|Fri|Sat|Sun"
_MONTHS = "Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec"
_HTTP_DATE_RE = re.compile(
    rf"(?:{_DAYS}), \d{{2}} (?:{_MONTHS}) \d{{4}} \d{{2}}:\d{{2}}:\d{{2}} [A-Z]{{1,5}}"
)

_HEADER_END = b"\r\n\r\n"

# ---------------------------------------------------------------------------
# Port (Protocol)
# ---------------------------------------------------------------------------


@runtime_checkable
class FetcherPort(Protocol):
    """Port contract for obtaining one trusted timestamp.

    Implementations perform their I/O within *timeout* seconds and
    return a :class:`SyncedReference`, or raise a
    :class:`~trustclock.SyncError` subclass.  They must not mutate any
    shared state.
    """

    def fetch(self, timeout: float) -> SyncedReference:
        """Fetch a (remote time, monotonic sample) pair."""
        ...


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def find_date_header(payload: bytes) -> str:
    """Return the trimmed value of the first ``Date:`` line in *payload*.

    Raises:
        ProtocolError: No line starts with ``Date:``.
    """
    text = payload.decode("latin-1")
    for line in text.split("\r\n"):
        if line.startswith(DATE_PREFIX):
            return line[len(DATE_PREFIX) :].strip()
    msg = "response has no Date header"
    raise ProtocolError(msg, details={"received": len(payload)})


def parse_http_date(value: str) -> datetime:
    """Parse an RFC 1123 HTTP-date into a local, timezone-aware datetime.

    Day and month names are matched as English tokens regardless of the
    process locale.  The zone may be any alphabetic abbreviation; the
    ones :mod:`email.utils` knows (``GMT``, ``UTC``, ``EST`` ...) keep
    their offset and unknown ones are read as UTC.

    Raises:
        ParseError: *value* is not shaped like :data:`HTTP_DATE_FORMAT`
            or names an impossible date.
    """
    if _HTTP_DATE_RE.fullmatch(value) is None:
        msg = f"invalid HTTP date {value!r}"
        raise ParseError(msg, value=value)
    try:
        parsed = email.utils.parsedate_to_datetime(value)
    except (TypeError, ValueError) as exc:
        msg = f"invalid HTTP date {value!r}"
        raise ParseError(msg, value=value) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone()


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------


class HttpDateFetcher:
    """Fetch trusted time from the ``Date`` header of a plain-HTTP peer.

    Satisfies :class:`FetcherPort` via structural subtyping.

    Args:
        host: Remote hostname.  The default resolves globally to a
            nearby edge, keeping the hop count low.
        port: Remote TCP port (plain HTTP).
        read_size: Upper bound on response bytes read; enough for
            the status line and headers.
        clock: Monotonic clock used for the deadline and the sample.
    """

    def __init__(
        self,
        host: str = "google.com",
        port: int = 80,
        *,
        read_size: int = 1024,
        clock: ClockPort | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.read_size = read_size
        self._clock = clock or SystemClock()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        clock: ClockPort | None = None,
    ) -> HttpDateFetcher:
        """Build a fetcher from ``settings.sync``."""
        return cls(
            settings.sync.host,
            settings.sync.port,
            read_size=settings.sync.read_size,
            clock=clock,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.host}:{self.port}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.endpoint!r})"

    def fetch(self, timeout: float) -> SyncedReference:
        """Perform one round trip and return the remote time.

        Args:
            timeout: Budget in seconds for the whole exchange.

        Raises:
            ConnectError: The connection could not be opened in time,
                was reset, or *timeout* was not positive.
            IOTimeoutError: The write or read deadline expired before
                any response bytes arrived.
            ProtocolError: The response had no ``Date`` header.
            ParseError: The ``Date`` header was malformed.
        """
        if timeout <= 0:
            msg = "no time left to connect"
            raise ConnectError(msg, endpoint=self.endpoint, details={"timeout": timeout})

        deadline = self._clock.now() + timeout
        try:
            sock = socket.create_connection((self.host, self.port), timeout=timeout)
        except OSError as exc:
            msg = f"cannot connect: {exc}"
            raise ConnectError(msg, endpoint=self.endpoint) from exc

        with sock:
            self._send(sock, deadline)
            payload, sample = self._receive(sock, deadline)

        try:
            remote_time = parse_http_date(find_date_header(payload))
        except (ProtocolError, ParseError) as exc:
            exc.endpoint = self.endpoint
            raise

        logger.debug(
            "Fetched remote time %s from %s",
            remote_time.isoformat(),
            self.endpoint,
            extra={
                "endpoint": self.endpoint,
                "remote_time": remote_time,
                "monotonic": sample,
            },
        )
        return SyncedReference(remote_time=remote_time, monotonic=sample)

    # -- internals ----------------------------------------------------------

    def _send(self, sock: socket.socket, deadline: float) -> None:
        budget = remaining(self._clock, deadline)
        if budget <= 0:
            msg = "write deadline exceeded"
            raise IOTimeoutError(msg, endpoint=self.endpoint)
        sock.settimeout(budget)
        try:
            sock.sendall(REQUEST)
        except TimeoutError as exc:
            msg = "write deadline exceeded"
            raise IOTimeoutError(msg, endpoint=self.endpoint) from exc
        except OSError as exc:
            msg = f"write failed: {exc}"
            raise ConnectError(msg, endpoint=self.endpoint) from exc

    def _receive(self, sock: socket.socket, deadline: float) -> tuple[bytes, float]:
        """Read response headers and the monotonic sample of their arrival.

        Reading stops at the end of the header block, at EOF, or when
        ``read_size`` bytes have been buffered.  Once some bytes have
        arrived, a deadline expiry or a reset also ends the read and
        what was received is kept.
        """
        buf = bytearray()
        sample: float | None = None
        while len(buf) < self.read_size:
            budget = remaining(self._clock, deadline)
            if budget <= 0:
                if sample is not None:
                    break
                msg = "read deadline exceeded"
                raise IOTimeoutError(msg, endpoint=self.endpoint)
            sock.settimeout(budget)
            try:
                chunk = sock.recv(self.read_size - len(buf))
            except TimeoutError as exc:
                if sample is not None:
                    break
                msg = "read deadline exceeded"
                raise IOTimeoutError(msg, endpoint=self.endpoint) from exc
            except OSError as exc:
                if sample is not None:
                    break
                msg = f"read failed: {exc}"
                raise ConnectError(msg, endpoint=self.endpoint) from exc
            if not chunk:
                break
            if sample is None:
                sample = self._clock.now()
            buf += chunk
            if _HEADER_END in buf:
                break

        if sample is None:
            msg = "connection closed without a response"
            raise ProtocolError(msg, endpoint=self.endpoint)
        return bytes(buf), sample
