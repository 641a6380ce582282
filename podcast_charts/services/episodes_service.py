# podcast_charts/services/episodes_service.py
"""
Episode retrieval logic.

Responsibilities:
  - turn (region, time window, reference date) into a store query
  - order rows according to the configured score strategy
  - load the global score range with fallback
  - collect every episode of one show across regions
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
import logging
from typing import Any, Dict, List, Optional, Sequence

import requests
from dateutil import tz

from ..cache import TTLCache
from ..date_range import compute_range
from ..models import Episode, EpisodeQuery, Region, ScoreRange, TimeWindow
from ..scoring import FALLBACK_SCORE_RANGE

logger = logging.getLogger(__name__)

# Per-region row cap when collecting a show's episodes.
SHOW_EPISODES_LIMIT = 1000


class EpisodeFetchError(Exception):
    """Raised when the episode store could not be read."""


class _NoScores(Exception):
    """The episodes table holds no scores yet."""


@dataclass
class EpisodesService:
    """Service responsible for querying episodes from the configured source."""

    source: Any  # SupabaseClient | MockEpisodeSource
    cache: TTLCache
    tz_name: str
    score_transform: Any
    episodes_ttl: int = 60
    score_range_ttl: int = 3600

    @property
    def app_tz(self):
        """Return the configured timezone object used for 'today'."""
        return tz.gettz(self.tz_name)

    def now_local(self) -> datetime:
        """Return the current time in the app timezone."""
        return datetime.now(tz=self.app_tz)

    def build_query(
        self,
        region: Optional[Region],
        time_window: TimeWindow,
        reference_date: date,
        limit: int,
    ) -> EpisodeQuery:
        """Build the store query; the "all" window carries no date filter."""
        start = end = None
        if TimeWindow(time_window) is not TimeWindow.ALL:
            rng = compute_range(time_window, reference_date, now=self.now_local)
            start, end = rng.start_date, rng.end_date

        return EpisodeQuery(
            region=Region(region).value if region else None,
            start_date=start,
            end_date=end,
            ascending=self.score_transform.ascending,
            limit=limit,
        )

    def _rows(self, query: EpisodeQuery) -> List[Dict[str, Any]]:
        """Fetch rows for a query using cached loading."""
        try:
            return self.cache.get_or_set(
                key=query.cache_key(),
                ttl_seconds=self.episodes_ttl,
                loader=lambda: self.source.select_episodes(query),
            )
        except requests.RequestException as exc:
            logger.warning("Episode query %s failed: %s", query.cache_key(), exc)
            raise EpisodeFetchError(str(exc)) from exc

    def fetch_top_episodes(
        self,
        region: Region,
        time_window: TimeWindow,
        reference_date: date,
        limit: int = 25,
    ) -> List[Episode]:
        """
        Return the best-ranked episodes of a region inside the window around reference_date.

        Raises:
            EpisodeFetchError when the store cannot be read.
        """
        query = self.build_query(region, time_window, reference_date, limit)
        return [Episode.from_row(r) for r in self._rows(query) if isinstance(r, dict)]

    def get_episode_count(self, region: Region, time_window: TimeWindow, reference_date: date) -> int:
        """
        Count every episode of a region inside the window (not capped by limit).

        Raises:
            EpisodeFetchError when the store cannot be read.
        """
        query = self.build_query(region, time_window, reference_date, limit=1)
        try:
            return self.cache.get_or_set(
                key=f"count:{query.cache_key()}",
                ttl_seconds=self.episodes_ttl,
                loader=lambda: self.source.count_episodes(query),
            )
        except requests.RequestException as exc:
            logger.warning("Episode count %s failed: %s", query.cache_key(), exc)
            raise EpisodeFetchError(str(exc)) from exc

    def get_global_score_range(self) -> ScoreRange:
        """
        Return the global min/max score.

        Any failure or an empty table yields FALLBACK_SCORE_RANGE, which is not cached.
        """
        try:
            bounds = self.cache.get_or_set(
                key="scores:range",
                ttl_seconds=self.score_range_ttl,
                loader=self._load_score_bounds,
            )
        except requests.RequestException as exc:
            logger.warning("Score range query failed, using fallback: %s", exc)
            return FALLBACK_SCORE_RANGE
        except _NoScores:
            logger.info("No scores stored yet, using fallback range")
            return FALLBACK_SCORE_RANGE
        return bounds

    def _load_score_bounds(self) -> ScoreRange:
        bounds = self.source.score_bounds()
        if bounds is None:
            raise _NoScores()
        return bounds

    def sort_episodes(self, episodes: Sequence[Episode]) -> List[Episode]:
        """Order episodes best-first according to the score strategy."""
        return sorted(episodes, key=lambda e: e.score, reverse=not self.score_transform.ascending)

    def fetch_show_episodes(self, show_uri: str) -> List[Episode]:
        """
        Return every charted episode of one show across all regions, best-first.

        Raises:
            EpisodeFetchError when the store cannot be read.
        """
        today = self.now_local().date()
        collected: List[Episode] = []
        for region in Region:
            collected.extend(self.fetch_top_episodes(region, TimeWindow.ALL, today, limit=SHOW_EPISODES_LIMIT))

        return self.sort_episodes([e for e in collected if e.show_uri == show_uri])
