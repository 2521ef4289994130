"""Synced reference value object.

A :class:`SyncedReference` pairs a trusted calendar timestamp with the
local monotonic sample taken the moment that timestamp arrived.  It is
the only thing a sync produces and the only thing ``now()`` needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True, slots=True)
class SyncedReference:
    """Immutable (remote time, monotonic sample) pair.

    The reference is only as accurate as the two fields are close
    together in time; fetchers sample the monotonic clock as soon as
    response bytes are available, before any parsing.

    Attributes:
        remote_time: Timezone-aware timestamp reported by the remote peer.
        monotonic: :class:`~trustclock.ClockPort` reading at capture time.
    """

    remote_time: datetime
    monotonic: float

    def __post_init__(self) -> None:
        if self.remote_time.tzinfo is None:
            msg = "remote_time must be timezone-aware"
            raise ValueError(msg)

    def at(self, monotonic: float) -> datetime:
        """Project the reference forward to another monotonic sample."""
        return self.remote_time + timedelta(seconds=monotonic - self.monotonic)
