"""Tests for the score display strategies."""

import pytest

from podcast_charts.models import ScoreRange
from podcast_charts.scoring import (
    FALLBACK_SCORE_RANGE,
    InvertedRangeTransform,
    RawScoreTransform,
    get_score_transform,
)


class TestRawScoreTransform:
    """Higher stored score = better, shown unchanged."""

    @pytest.mark.parametrize("raw", [0, 1, 42, 999.5, -3])
    def test_identity(self, raw) -> None:
        assert RawScoreTransform().display_score(raw) == raw

    def test_ignores_score_range(self) -> None:
        assert RawScoreTransform().display_score(42, ScoreRange(1, 10)) == 42

    def test_ranks_descending(self) -> None:
        t = RawScoreTransform()
        assert t.ascending is False
        assert t.needs_score_range is False


class TestInvertedRangeTransform:
    """Lower stored score = better, shown as max_score - raw."""

    def test_inverts_against_max(self) -> None:
        t = InvertedRangeTransform()
        assert t.display_score(1000, FALLBACK_SCORE_RANGE) == 0
        assert t.display_score(1, FALLBACK_SCORE_RANGE) == 999

    @pytest.mark.parametrize("raw", [1001, 5000, 10**9])
    def test_never_negative(self, raw) -> None:
        assert InvertedRangeTransform().display_score(raw, FALLBACK_SCORE_RANGE) == 0

    def test_placeholder_without_range(self) -> None:
        assert InvertedRangeTransform().display_score(12, None) == 0

    def test_ranks_ascending(self) -> None:
        t = InvertedRangeTransform()
        assert t.ascending is True
        assert t.needs_score_range is True


class TestGetScoreTransform:
    """Tests for strategy lookup."""

    def test_fallback_range_constant(self) -> None:
        assert FALLBACK_SCORE_RANGE == ScoreRange(min_score=1, max_score=1000)

    @pytest.mark.parametrize("name, cls", [("raw", RawScoreTransform), (" Inverted ", InvertedRangeTransform)])
    def test_lookup(self, name, cls) -> None:
        assert isinstance(get_score_transform(name), cls)

    def test_unknown_name(self) -> None:
        with pytest.raises(ValueError, match="unknown score strategy"):
            get_score_transform("golf")
