"""Shared fixtures for the dashboard tests."""

from datetime import datetime

import pytest
import requests

from app import create_app
from podcast_charts.cache import TTLCache
from podcast_charts.config import AppConfig
from podcast_charts.mock_source import MockEpisodeSource
from podcast_charts.scoring import get_score_transform
from podcast_charts.services.episodes_service import EpisodesService

FIXED_NOW = datetime(2024, 12, 20, 12, 0, 0)


class BrokenSource:
    """Episode source whose every call fails like an unreachable Supabase."""

    def __init__(self) -> None:
        self.calls = 0

    def _fail(self, *args, **kwargs):
        self.calls += 1
        raise requests.ConnectionError("store unreachable")

    select_episodes = _fail
    count_episodes = _fail
    score_bounds = _fail


def make_config(**overrides) -> AppConfig:
    base = dict(
        tz="Europe/Stockholm",
        supabase_url="",
        supabase_anon_key="",
        score_strategy="raw",
        default_region="se",
        default_time_window="week",
        limit_episodes=25,
        description_limit=150,
        cache_ttl_seconds=60,
        score_range_ttl_seconds=3600,
        log_level="WARNING",
    )
    base.update(overrides)
    return AppConfig(**base)


@pytest.fixture
def mock_source() -> MockEpisodeSource:
    return MockEpisodeSource()


@pytest.fixture
def make_service(mock_source):
    """Factory for an EpisodesService pinned to FIXED_NOW."""

    def _make(source=None, strategy: str = "raw") -> EpisodesService:
        service = EpisodesService(
            source=source if source is not None else mock_source,
            cache=TTLCache(),
            tz_name="Europe/Stockholm",
            score_transform=get_score_transform(strategy),
        )
        service.now_local = lambda: FIXED_NOW
        return service

    return _make


@pytest.fixture
def make_client():
    """Factory for a Flask test client over the given source and strategy."""

    def _make(source=None, strategy: str = "raw"):
        app = create_app(make_config(score_strategy=strategy), source=source or MockEpisodeSource())
        app.config["EPISODES_SERVICE"].now_local = lambda: FIXED_NOW
        app.testing = True
        return app.test_client()

    return _make


@pytest.fixture
def client(make_client):
    return make_client()
