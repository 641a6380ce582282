# podcast_charts/handlers/podcast_handler.py
"""
Handler for the per-show detail page.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from urllib.parse import unquote

from ..models import PodcastViewModel
from ..services.episodes_service import EpisodeFetchError, EpisodesService
from .dashboard_handler import build_cards

logger = logging.getLogger(__name__)

SHOW_URI_PREFIX = "spotify:show:"
SHOW_FETCH_ERROR_MESSAGE = "Failed to load podcast episodes. Please try again."


def show_uri_from_id(show_id: str) -> str:
    """Decode a route segment and turn it into a full show URI (abc -> spotify:show:abc)."""
    decoded = unquote(show_id or "").strip()
    if decoded.startswith(SHOW_URI_PREFIX):
        return decoded
    return f"{SHOW_URI_PREFIX}{decoded}"


@dataclass
class PodcastHandler:
    """Collects one show's episodes across regions into a PodcastViewModel."""

    episodes_service: EpisodesService
    description_limit: int = 150

    def build(self, show_id: str, expanded: frozenset = frozenset()) -> PodcastViewModel:
        service = self.episodes_service
        transform = service.score_transform
        show_uri = show_uri_from_id(show_id)

        try:
            episodes = service.fetch_show_episodes(show_uri)
        except EpisodeFetchError:
            logger.exception("Failed to fetch episodes for %s", show_uri)
            return PodcastViewModel(
                show_uri=show_uri,
                show_name="",
                show_description="",
                score_strategy=transform.name,
                error=SHOW_FETCH_ERROR_MESSAGE,
            )

        if not episodes:
            return PodcastViewModel(show_uri=show_uri, show_name="", show_description="", score_strategy=transform.name)

        score_range = service.get_global_score_range() if transform.needs_score_range else None
        first = episodes[0]
        return PodcastViewModel(
            show_uri=show_uri,
            show_name=first.show_name,
            show_description=first.show_description,
            cards=build_cards(
                episodes,
                transform,
                score_range,
                expanded,
                self.description_limit,
                use_episode_description=True,
            ),
            score_strategy=transform.name,
        )
