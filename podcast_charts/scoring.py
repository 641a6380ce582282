# podcast_charts/scoring.py
"""
Raw score -> display score conventions.

Two conventions exist for the stored score column and they disagree on meaning,
so a deployment picks exactly one via SCORE_STRATEGY:

  raw       higher stored score = better. Shown as-is, ranked descending.
  inverted  lower stored score = better (golf-style). Shown as
            max(0, max_score - raw) against the global score range,
            ranked ascending.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .models import ScoreRange

# Substituted by callers when the global score range cannot be loaded.
FALLBACK_SCORE_RANGE = ScoreRange(min_score=1, max_score=1000)


@dataclass(frozen=True)
class RawScoreTransform:
    """Display the stored score unchanged."""

    name: str = "raw"
    ascending: bool = False
    needs_score_range: bool = False

    def display_score(self, raw: float, score_range: Optional[ScoreRange] = None) -> float:
        return raw


@dataclass(frozen=True)
class InvertedRangeTransform:
    """Invert the stored score against the global maximum so higher = better."""

    name: str = "inverted"
    ascending: bool = True
    needs_score_range: bool = True

    def display_score(self, raw: float, score_range: Optional[ScoreRange] = None) -> float:
        """
        Return max(0, max_score - raw).

        Without a score range there is no valid display score yet; 0 is the placeholder.
        """
        if score_range is None:
            return 0
        return max(0, score_range.max_score - raw)


_TRANSFORMS = {
    "raw": RawScoreTransform(),
    "inverted": InvertedRangeTransform(),
}


def get_score_transform(name: str):
    """
    Resolve a strategy by name.

    Raises:
        ValueError for unknown names.
    """
    key = (name or "").strip().lower()
    try:
        return _TRANSFORMS[key]
    except KeyError:
        raise ValueError(f"unknown score strategy {name!r}; expected one of {sorted(_TRANSFORMS)}") from None
