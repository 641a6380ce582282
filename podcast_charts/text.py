# podcast_charts/text.py
"""
Description truncation and the per-episode expand/collapse toggle.
"""

from __future__ import annotations

from typing import AbstractSet, FrozenSet, Iterable

ELLIPSIS = "..."


def truncate(text: str, limit: int = 150) -> str:
    """Return text unchanged if it fits in limit characters, else cut it and append '...'."""
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def needs_expansion(text: str, limit: int = 150) -> bool:
    """True when truncate() would shorten text (i.e. a Show More toggle is useful)."""
    return len(text or "") > limit


def toggle_expanded(expanded: AbstractSet[int], episode_id: int) -> FrozenSet[int]:
    """Return a new set with episode_id added if absent, removed if present."""
    if episode_id in expanded:
        return frozenset(x for x in expanded if x != episode_id)
    return frozenset(expanded) | {episode_id}


def parse_expanded(raw: str) -> FrozenSet[int]:
    """Parse the comma-separated 'expand' query value, skipping junk."""
    out = set()
    for part in (raw or "").split(","):
        part = part.strip()
        if part.isdigit():
            out.add(int(part))
    return frozenset(out)


def format_expanded(ids: Iterable[int]) -> str:
    """Inverse of parse_expanded with a stable order."""
    return ",".join(str(x) for x in sorted(ids))
