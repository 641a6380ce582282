# podcast_charts/handlers/dashboard_handler.py
"""
Handler/controller responsible for building the chart dashboard view model.

Keeps Flask routes simple by concentrating assembly logic here.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List, Optional, Sequence

from ..date_range import (
    can_step_next,
    compute_range,
    format_range_label,
    format_short_range,
    step_window,
)
from ..models import DashboardViewModel, Episode, EpisodeCard, ScoreRange, TimeWindow, ViewState
from ..services.episodes_service import EpisodeFetchError, EpisodesService
from ..text import needs_expansion, truncate

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Failed to load episodes. Please try again."


def matches_search(episode: Episode, search: str) -> bool:
    """Case-insensitive substring match on episode or show name; blank search matches all."""
    needle = (search or "").strip().lower()
    if not needle:
        return True
    return needle in episode.episode_name.lower() or needle in episode.show_name.lower()


def build_cards(
    episodes: Sequence[Episode],
    score_transform,
    score_range: Optional[ScoreRange],
    expanded: frozenset,
    description_limit: int,
    use_episode_description: bool = False,
) -> List[EpisodeCard]:
    """
    Rank episodes (1-based, in the given order) and attach display values.

    Dashboard cards describe the show; detail-page cards describe the episode.
    """
    cards: List[EpisodeCard] = []
    for i, ep in enumerate(episodes, start=1):
        text = (ep.episode_description or "") if use_episode_description else ep.show_description
        is_expanded = ep.id in expanded
        cards.append(
            EpisodeCard(
                rank=i,
                episode=ep,
                display_score=score_transform.display_score(ep.score, score_range),
                description=text if is_expanded else truncate(text, description_limit),
                is_expanded=is_expanded,
                can_expand=needs_expansion(text, description_limit),
            )
        )
    return cards


@dataclass
class DashboardHandler:
    """Turns a ViewState into a DashboardViewModel."""

    episodes_service: EpisodesService
    limit: int
    description_limit: int = 150

    def build(self, state: ViewState) -> DashboardViewModel:
        """
        Build the dashboard view model for the current request.

        A failed fetch is recovered here: empty list + user-visible error.
        """
        service = self.episodes_service
        transform = service.score_transform
        now = service.now_local()
        window = state.time_window

        date_range = compute_range(window, state.reference_date, now=service.now_local)

        error: Optional[str] = None
        episodes: List[Episode] = []
        total = 0
        try:
            episodes = service.fetch_top_episodes(state.region, window, state.reference_date, limit=self.limit)
            total = service.get_episode_count(state.region, window, state.reference_date)
        except EpisodeFetchError:
            logger.exception("Dashboard fetch failed for %s/%s", state.region.value, window.value)
            error = FETCH_ERROR_MESSAGE
            episodes = []

        episodes = [e for e in episodes if matches_search(e, state.search)]
        if state.search.strip():
            total = len(episodes)

        score_range = service.get_global_score_range() if transform.needs_score_range else None

        navigable = window is not TimeWindow.ALL
        return DashboardViewModel(
            now=now,
            state=state,
            date_range=date_range,
            range_label=format_range_label(date_range, window, state.reference_date),
            short_range=format_short_range(date_range, include_year=window is TimeWindow.YEAR),
            prev_date=step_window(state.reference_date, window, "prev") if navigable else None,
            next_date=step_window(state.reference_date, window, "next") if navigable else None,
            can_go_next=can_step_next(state.reference_date, window, now=service.now_local),
            cards=build_cards(
                episodes,
                transform,
                score_range,
                state.expanded,
                self.description_limit,
            ),
            total_count=max(total, len(episodes)),
            score_strategy=transform.name,
            score_range=score_range,
            error=error,
        )

    def build_context(self, state: ViewState) -> dict:
        """
        Build a plain dict suitable for render_template(**context).
        """
        vm = self.build(state)
        return dict(vm.__dict__)
