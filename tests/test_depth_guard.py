"""Tests for DepthGuard and depth_clamp."""

from __future__ import annotations

import logging
import sys

import pytest

from combiparse import DepthLimitExceededError
from combiparse.constants import MAX_DEPTH
from combiparse.core import DepthGuard, depth_clamp


class TestDepthGuard:
    """Test DepthGuard counting."""

    def test_defaults(self) -> None:
        """A new guard starts at zero with the default limit."""
        guard = DepthGuard()

        assert guard.depth == 0
        assert guard.max_depth == depth_clamp(MAX_DEPTH)
        assert not guard.is_exceeded()

    def test_increment_until_exceeded(self) -> None:
        """The guard is exceeded once depth reaches max_depth."""
        guard = DepthGuard(max_depth=3)

        for _ in range(3):
            assert not guard.is_exceeded()
            guard.increment()

        assert guard.is_exceeded()
        assert guard.current_depth == 3

    def test_decrement_floors_at_zero(self) -> None:
        """decrement() never goes negative."""
        guard = DepthGuard(max_depth=3)
        guard.decrement()

        assert guard.depth == 0

    def test_reset(self) -> None:
        """reset() returns to zero."""
        guard = DepthGuard(max_depth=5)
        guard.increment()
        guard.increment()
        guard.reset()

        assert guard.depth == 0

    def test_check_below_limit_is_silent(self) -> None:
        """check() does nothing while depth is below max_depth."""
        guard = DepthGuard(max_depth=2)
        guard.increment()

        guard.check(4, "rule")

        assert guard.depth == 1

    def test_check_at_limit_raises(self, caplog: pytest.LogCaptureFixture) -> None:
        """check() raises DepthLimitExceededError and logs once the limit is reached."""
        guard = DepthGuard(max_depth=2)
        guard.increment()
        guard.increment()

        with (
            caplog.at_level(logging.WARNING, logger="combiparse.core.depth_guard"),
            pytest.raises(DepthLimitExceededError) as exc_info,
        ):
            guard.check(7, "rule")

        assert exc_info.value.position == 7
        assert exc_info.value.max_depth == 2
        assert guard.depth == 2
        assert any("rule" in record.getMessage() for record in caplog.records)

    def test_current_depth_not_constructor_argument(self) -> None:
        """current_depth is internal state."""
        with pytest.raises(TypeError):
            DepthGuard(max_depth=5, current_depth=2)  # type: ignore[call-arg]


class TestDepthClamp:
    """Test clamping against the interpreter recursion limit."""

    def test_within_limit_unchanged(self) -> None:
        """Small depths pass through."""
        assert depth_clamp(10) == 10

    def test_clamped_and_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Depths beyond the safe limit are clamped with a warning."""
        requested = sys.getrecursionlimit() * 10

        with caplog.at_level(logging.WARNING, logger="combiparse.core.depth_guard"):
            result = depth_clamp(requested)

        safe = max(1, (sys.getrecursionlimit() - 50) // 12)
        assert result == safe
        assert any("Clamping" in record.getMessage() for record in caplog.records)

    def test_guard_applies_clamp(self) -> None:
        """DepthGuard clamps its max_depth on construction."""
        guard = DepthGuard(max_depth=sys.getrecursionlimit() * 10)

        assert guard.max_depth == depth_clamp(sys.getrecursionlimit() * 10)
