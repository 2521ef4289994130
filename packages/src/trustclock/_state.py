"""Synchronised clock state: sync, must_sync and now.

:class:`TrustedClock` holds the last successful
:class:`~trustclock.SyncedReference` and answers "what time is it" by
adding the monotonic time elapsed since that reference was captured::

    now() = reference.remote_time + (clock.now() - reference.monotonic)

State machine::

    Unsynced --sync ok--> Synced --sync ok--> Synced (reference replaced)
    any      --sync error--> unchanged

A reference never expires.  Callers that care about staleness check
:meth:`TrustedClock.age` and re-sync on their own schedule.

Concurrency: the reference is the only shared mutable state.  It is
replaced and read as a single immutable object under a lock that is
held for the assignment or the copy only; network I/O and the
elapsed-time arithmetic happen outside it.  A reader therefore never
sees a remote time from one sync paired with a monotonic sample from
another.

Usage (composition root)::

    settings = Settings()
    clock = TrustedClock.from_settings(settings)
    clock.must_sync(settings.sync.timeout)
    ...
    stamp = clock.now()
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from trustclock._clock import ClockPort, SystemClock, remaining
from trustclock._errors import NotSyncedError, SyncError, SyncExhaustedError
from trustclock._fetcher import FetcherPort, HttpDateFetcher
from trustclock._reference import SyncedReference

if TYPE_CHECKING:
    from trustclock._settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_RETRY_DELAY = 0.05
"""Seconds to pause between failed ``must_sync`` attempts."""


class TrustedClock:
    """Trusted time compensated by a local monotonic clock.

    Args:
        fetcher: Source of synced references.  Defaults to an
            :class:`HttpDateFetcher` sharing *clock*.
        clock: Monotonic clock for elapsed time and deadlines.
            Defaults to :class:`SystemClock`.
        sleep: Blocking sleep used between ``must_sync`` retries.
            Tests pass ``FakeClock.sleep`` to advance virtual time.
        retry_delay: Pause in seconds between failed attempts.
    """

    def __init__(
        self,
        fetcher: FetcherPort | None = None,
        *,
        clock: ClockPort | None = None,
        sleep: Callable[[float], None] = time.sleep,
        retry_delay: float = DEFAULT_RETRY_DELAY,
    ) -> None:
        self._clock = clock or SystemClock()
        self._fetcher = fetcher or HttpDateFetcher(clock=self._clock)
        self._sleep = sleep
        self._retry_delay = retry_delay
        self._lock = threading.Lock()
        self._reference: SyncedReference | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        clock: ClockPort | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> TrustedClock:
        """Build a clock wired to an :class:`HttpDateFetcher` from *settings*."""
        clock = clock or SystemClock()
        return cls(
            HttpDateFetcher.from_settings(settings, clock=clock),
            clock=clock,
            sleep=sleep,
            retry_delay=settings.sync.retry_delay,
        )

    # -- state inspection ---------------------------------------------------

    @property
    def reference(self) -> SyncedReference | None:
        """The installed reference, or ``None`` before the first sync."""
        with self._lock:
            return self._reference

    @property
    def synced(self) -> bool:
        """Whether at least one sync has succeeded."""
        return self.reference is not None

    def age(self) -> float:
        """Return monotonic seconds since the installed reference was captured.

        Raises:
            NotSyncedError: No sync has succeeded yet.
        """
        return self._clock.now() - self._require_reference().monotonic

    # -- operations ---------------------------------------------------------

    def sync(self, timeout: float) -> None:
        """Fetch the remote time once and install it.

        Blocks for at most *timeout* seconds of network I/O.  On
        failure the previous reference (if any) stays in place.

        Raises:
            SyncError: The fetcher's error, unchanged.
        """
        try:
            reference = self._fetcher.fetch(timeout)
        except SyncError as exc:
            logger.debug("Sync failed: %s", exc)
            raise

        with self._lock:
            self._reference = reference

        logger.debug(
            "Synced to %s",
            reference.remote_time.isoformat(),
            extra={
                "remote_time": reference.remote_time,
                "monotonic": reference.monotonic,
            },
        )

    def must_sync(self, timeout: float) -> None:
        """Retry :meth:`sync` until it succeeds or *timeout* seconds pass.

        Each attempt gets the remaining budget.  The attempt that
        starts at or after the deadline is still issued; if it fails
        the loop ends without sleeping.

        Raises:
            SyncExhaustedError: No attempt succeeded in time.  The last
                :class:`SyncError` is chained as ``__cause__``.
        """
        deadline = self._clock.now() + timeout
        attempt = 0
        while True:
            attempt += 1
            try:
                self.sync(remaining(self._clock, deadline))
            except SyncError as exc:
                if remaining(self._clock, deadline) <= 0:
                    logger.error(
                        "Could not sync within %.3fs after %d attempts: %s",
                        timeout,
                        attempt,
                        exc,
                        extra={"attempt": attempt},
                    )
                    msg = f"no successful sync within {timeout}s"
                    raise SyncExhaustedError(
                        msg,
                        attempts=attempt,
                        timeout=timeout,
                    ) from exc
                logger.debug(
                    "Sync attempt %d failed, retrying in %.3fs",
                    attempt,
                    self._retry_delay,
                    extra={"attempt": attempt},
                )
                self._sleep(self._retry_delay)
                continue
            return

    def now(self) -> datetime:
        """Return the current trusted time.

        Raises:
            NotSyncedError: No sync has succeeded yet.
        """
        return self._require_reference().at(self._clock.now())

    def _require_reference(self) -> SyncedReference:
        with self._lock:
            reference = self._reference
        if reference is None:
            msg = "trusted time has not been synced"
            raise NotSyncedError(msg)
        return reference
