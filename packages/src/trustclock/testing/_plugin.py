"""Pytest plugin providing shared test fixtures for trustclock.

Auto-registers ``fake_clock``, ``stub_fetcher`` and ``trusted_clock``
fixtures for any test suite that depends on trustclock.

Discovered automatically via the ``pytest11`` entry point; no explicit
``pytest_plugins`` import is needed in consumer ``conftest.py`` files.

Imports of trustclock modules are deferred into the fixture bodies so
that they happen after ``pytest-cov`` has started tracing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from trustclock._state import TrustedClock
    from trustclock.testing._clock import FakeClock
    from trustclock.testing._fetcher import StubFetcher


@pytest.fixture
def fake_clock() -> FakeClock:
    """FakeClock starting at time 0."""
    from trustclock.testing._clock import FakeClock

    return FakeClock()


@pytest.fixture
def stub_fetcher(fake_clock: FakeClock) -> StubFetcher:
    """Empty StubFetcher stamping references with ``fake_clock``."""
    from trustclock.testing._fetcher import StubFetcher

    return StubFetcher(clock=fake_clock)


@pytest.fixture
def trusted_clock(stub_fetcher: StubFetcher, fake_clock: FakeClock) -> TrustedClock:
    """Unsynced TrustedClock wired with test doubles.

    Retry sleeps go to ``fake_clock.sleep``, so ``must_sync`` loops
    complete instantly in virtual time.
    """
    from trustclock._state import TrustedClock

    return TrustedClock(stub_fetcher, clock=fake_clock, sleep=fake_clock.sleep)
