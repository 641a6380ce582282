# podcast_charts/mock_source.py
"""
In-memory episode source used when no Supabase project is configured.

Mirrors SupabaseClient's interface so services don't care which one they get.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from .models import EpisodeQuery, ScoreRange, parse_date


def _row(id_, first, score, episode, show, show_id, description, region, episode_description=None, duration=None):
    return {
        "id": id_,
        "first_appearance_date": first,
        "score": score,
        "episode_name": episode,
        "show_name": show,
        "episode_uri": f"spotify:episode:{id_}",
        "show_uri": f"spotify:show:{show_id}",
        "show_description": description,
        "region": region,
        "episode_description": episode_description,
        "episode_duration": duration,
        "created_at": f"{first}T08:00:00Z",
        "updated_at": f"{first}T10:30:00Z",
    }


SAMPLE_ROWS: List[Dict[str, Any]] = [
    _row(1, "2024-01-15", 5, "The Future of AI in Healthcare", "Tech Talk Stockholm", "1",
         "Sweden's premier technology podcast on AI, healthcare and innovation.", "se",
         "Doctors and researchers from Karolinska walk through the diagnostic tools already in "
         "clinical use, what the regulators are asking for, and which promises will take another "
         "decade to keep.", "48 min"),
    _row(2, "2024-01-18", 12, "Climate Solutions for the Nordic Region", "Green Nordic", "2",
         "Environmental discussions focused on Nordic sustainability initiatives.", "se"),
    _row(3, "2024-01-20", 8, "Swedish Startup Success Stories", "Entrepreneur Sweden", "3",
         "Stories from Swedish founders and business leaders.", "se"),
    _row(4, "2024-02-01", 3, "Music Industry Revolution", "Stockholm Sound", "4",
         "How streaming reshaped the Swedish music scene.", "se"),
    _row(5, "2024-02-10", 15, "Nordic Design Philosophy", "Design Stockholm", "5",
         "Conversations with Scandinavian designers and architects.", "se"),
    _row(6, "2024-01-12", 2, "Silicon Valley Insider Stories", "Valley Talk", "6",
         "Behind-the-scenes stories from the tech industry.", "us"),
    _row(7, "2024-01-16", 7, "The Psychology of Success", "Mind Matters USA", "7",
         "Psychologists on habits, motivation and performance.", "us"),
    _row(8, "2024-01-22", 11, "Cryptocurrency Market Analysis", "Crypto America", "8",
         "Weekly analysis of digital asset markets.", "us"),
    _row(9, "2024-02-03", 4, "Hollywood Behind the Scenes", "Entertainment Weekly", "9",
         "Interviews from film and television sets.", "us"),
    _row(10, "2024-02-12", 9, "American Sports Analytics", "Sports Science USA", "10",
         "Data-driven takes on American sports.", "us"),
    _row(11, "2024-12-10", 1, "Year-End Tech Roundup", "Tech Talk Stockholm", "1",
         "Sweden's premier technology podcast on AI, healthcare and innovation.", "se",
         "The biggest launches of the year, ranked.", "62 min"),
    _row(12, "2024-12-05", 6, "Holiday Shopping Trends 2024", "Consumer Insights", "11",
         "Analysis of consumer behavior during the holiday season.", "us"),
]


class MockEpisodeSource:
    """Episode source backed by a list of rows held in memory."""

    def __init__(self, rows: Optional[Sequence[Dict[str, Any]]] = None) -> None:
        self._rows = list(SAMPLE_ROWS if rows is None else rows)

    def _matching(self, query: EpisodeQuery) -> List[Dict[str, Any]]:
        """Apply region and inclusive date filters."""
        out: List[Dict[str, Any]] = []
        for r in self._rows:
            if query.region and r.get("region") != query.region:
                continue
            d = parse_date(r.get("first_appearance_date"))
            if query.start_date is not None and (d is None or d < query.start_date):
                continue
            if query.end_date is not None and (d is None or d > query.end_date):
                continue
            out.append(r)
        return out

    def select_episodes(self, query: EpisodeQuery) -> List[Dict[str, Any]]:
        rows = sorted(self._matching(query), key=lambda r: r.get("score") or 0, reverse=not query.ascending)
        return [dict(r) for r in rows[: query.limit]]

    def count_episodes(self, query: EpisodeQuery) -> int:
        return len(self._matching(query))

    def score_bounds(self) -> Optional[ScoreRange]:
        scores = [r["score"] for r in self._rows if r.get("score") is not None]
        if not scores:
            return None
        return ScoreRange(min_score=min(scores), max_score=max(scores))
