"""Unit tests for trustclock._errors: exception hierarchy.

Test Techniques Used:
    - Specification-based Testing: Class hierarchy and attributes
    - Equivalence Partitioning: recoverable vs. fatal branches
"""

from __future__ import annotations

import pytest

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

RECOVERABLE = [ConnectError, IOTimeoutError, ProtocolError]


class TestHierarchy:
    """Recoverable and fatal errors live on disjoint branches.

    Technique: Equivalence Partitioning.
    """

    @pytest.mark.parametrize("cls", [*RECOVERABLE, ParseError])
    def test_recoverable_are_sync_errors(self, cls: type[Exception]) -> None:
        """Every recoverable kind derives from SyncError."""
        assert issubclass(cls, SyncError)
        assert not issubclass(cls, ClockFatalError)

    @pytest.mark.parametrize("cls", [SyncExhaustedError, NotSyncedError])
    def test_fatal_are_not_sync_errors(self, cls: type[Exception]) -> None:
        """``except SyncError`` never catches a fatal condition."""
        assert issubclass(cls, ClockFatalError)
        assert not issubclass(cls, SyncError)

    @pytest.mark.parametrize(
        "cls",
        [SyncError, ClockFatalError, ConnectError, SyncExhaustedError],
    )
    def test_everything_is_a_trustclock_error(self, cls: type[Exception]) -> None:
        assert issubclass(cls, TrustClockError)


class TestErrorTypes:
    """Machine-readable ``error_type`` per recoverable kind.

    Technique: Specification-based Testing.
    """

    @pytest.mark.parametrize(
        ("cls", "expected"),
        [
            (ConnectError, "connect"),
            (IOTimeoutError, "io_timeout"),
            (ProtocolError, "protocol"),
            (ParseError, "parse"),
        ],
    )
    def test_error_type(self, cls: type[SyncError], expected: str) -> None:
        assert cls.error_type == expected

    def test_error_types_are_distinct(self) -> None:
        kinds = {cls.error_type for cls in (*RECOVERABLE, ParseError)}
        assert len(kinds) == 4


class TestFormatting:
    """String rendering includes endpoint and details.

    Technique: Specification-based Testing.
    """

    def test_endpoint_in_str(self) -> None:
        err = ConnectError("refused", endpoint="google.com:80")
        assert str(err) == "refused [endpoint=google.com:80]"

    def test_details_in_str(self) -> None:
        err = ProtocolError("no Date", details={"received": 12})
        assert "[details={'received': 12}]" in str(err)

    def test_plain_message(self) -> None:
        assert str(NotSyncedError("not synced")) == "not synced"

    def test_parse_error_carries_value(self) -> None:
        err = ParseError("bad", value="yesterday")
        assert err.value == "yesterday"
        assert err.details == {"value": "yesterday"}

    def test_exhausted_carries_attempts(self) -> None:
        err = SyncExhaustedError("gave up", attempts=3, timeout=0.2)
        assert err.attempts == 3
        assert err.timeout == 0.2
        assert err.details == {"attempts": 3, "timeout": 0.2}
