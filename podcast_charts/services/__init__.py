"""
Services package exports.
"""
from .episodes_service import EpisodeFetchError, EpisodesService

__all__ = ["EpisodeFetchError", "EpisodesService"]
