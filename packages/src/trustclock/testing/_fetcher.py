"""Scripted fetcher double for testing.

:class:`StubFetcher` replays a queue of outcomes, either a
:class:`~trustclock.SyncedReference` (or a bare ``datetime``, paired
with the current fake-clock reading) or an exception to raise, and
records every timeout it was called with.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from trustclock._errors import ConnectError
from trustclock._reference import SyncedReference
from trustclock.testing._clock import FakeClock

Outcome = SyncedReference | datetime | Exception


@dataclass
class StubFetcher:
    """Test double for FetcherPort.

    Attributes:
        clock: Fake clock used to stamp bare ``datetime`` outcomes and
            advanced by ``latency`` on every call.
        latency: Virtual seconds each fetch takes.
        calls: Timeouts passed to :meth:`fetch`, in call order.

    When the queue is empty, :meth:`fetch` raises :class:`ConnectError`
    as an unreachable endpoint would.

    Example::

        clock = FakeClock()
        fetcher = StubFetcher(clock)
        fetcher.push(datetime(2006, 1, 2, 15, 4, 5, tzinfo=UTC))
        reference = fetcher.fetch(1.0)
    """

    clock: FakeClock = field(default_factory=FakeClock)
    latency: float = 0.0
    calls: list[float] = field(default_factory=list)
    _outcomes: deque[Outcome] = field(default_factory=deque, repr=False)

    def push(self, *outcomes: Outcome) -> None:
        """Queue outcomes for subsequent fetches."""
        self._outcomes.extend(outcomes)

    def extend(self, outcomes: Iterable[Outcome]) -> None:
        self._outcomes.extend(outcomes)

    def fetch(self, timeout: float) -> SyncedReference:
        self.calls.append(timeout)
        if self.latency:
            self.clock.advance(self.latency)
        if not self._outcomes:
            msg = "stub endpoint unreachable"
            raise ConnectError(msg, endpoint="stub:0")
        outcome = self._outcomes.popleft()
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, datetime):
            return SyncedReference(remote_time=outcome, monotonic=self.clock.now())
        return outcome
