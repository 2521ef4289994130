"""Local monotonic counter used to carry trusted time forward.

A sync pins one remote timestamp to one reading of this counter.  Every
later ``TrustedClock.now()`` adds the counter's progress since that
reading, so the result depends only on how far the counter moved and
never on the host's wall clock.  ``time.monotonic()`` is the source in
production: NTP slews and manual ``date`` changes do not move it, and
its epoch is meaningless on its own (PEP 418).

The same counter drives every deadline in the package: the fetcher's
shared connect/write/read budget and the ``must_sync`` retry window.
:func:`remaining` is the one place that turns a deadline back into a
budget.
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class ClockPort(Protocol):
    """Source of monotonic readings, in seconds.

    :class:`~trustclock.HttpDateFetcher` reads it when the first response
    bytes arrive and stores that reading in the
    :class:`~trustclock.SyncedReference`.  :class:`~trustclock.TrustedClock`
    reads the same source to compensate the reference, so both must be
    given the same instance.
    """

    def now(self) -> float:
        """Return the current counter value in seconds.

        Only differences between readings of the same instance carry
        meaning; readings from two instances must not be mixed.
        """
        ...


class SystemClock:
    """``time.monotonic()`` behind :class:`ClockPort`.

    Stateless, so separately constructed instances are interchangeable.
    """

    __slots__ = ()

    def now(self) -> float:
        return time.monotonic()

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def remaining(clock: ClockPort, deadline: float) -> float:
    """Seconds left on *clock* until *deadline*; zero or negative once it passed."""
    return deadline - clock.now()
