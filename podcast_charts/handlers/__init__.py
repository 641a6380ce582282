"""
Handlers package exports.
"""
from .dashboard_handler import DashboardHandler
from .podcast_handler import PodcastHandler

__all__ = ["DashboardHandler", "PodcastHandler"]
