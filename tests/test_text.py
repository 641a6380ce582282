"""Tests for truncation and expand/collapse helpers."""

from podcast_charts.text import (
    format_expanded,
    needs_expansion,
    parse_expanded,
    toggle_expanded,
    truncate,
)


class TestTruncate:
    """Tests for truncate."""

    def test_short_text_unchanged(self) -> None:
        assert truncate("hello", 150) == "hello"

    def test_exact_limit_unchanged(self) -> None:
        text = "x" * 150
        assert truncate(text) == text

    def test_long_text_cut_with_ellipsis(self) -> None:
        out = truncate("a" * 200, 150)
        assert len(out) == 153
        assert out.endswith("...")
        assert out[:150] == "a" * 150

    def test_needs_expansion(self) -> None:
        assert needs_expansion("a" * 151)
        assert not needs_expansion("a" * 150)
        assert not needs_expansion(None)


class TestExpanded:
    """Tests for the expanded-id set helpers."""

    def test_toggle_adds_then_removes(self) -> None:
        once = toggle_expanded(frozenset(), 7)
        assert once == {7}
        assert toggle_expanded(once, 7) == frozenset()

    def test_toggle_does_not_mutate(self) -> None:
        original = {1, 2}
        toggle_expanded(original, 3)
        assert original == {1, 2}

    def test_parse_skips_junk(self) -> None:
        assert parse_expanded("3, 1,abc,,-2") == {1, 3}
        assert parse_expanded("") == frozenset()

    def test_format_is_sorted(self) -> None:
        assert format_expanded({9, 2, 5}) == "2,5,9"
