# podcast_charts/config.py
"""
Configuration for the podcast charts dashboard.

This module centralizes all tunable settings (timezone, Supabase connection,
score strategy, cache TTLs, and dashboard defaults).
"""

from __future__ import annotations

from dataclasses import dataclass
import os


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, returning default on missing/invalid values."""
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default


def _env_str(name: str, default: str) -> str:
    """Read a stripped string environment variable; blank values count as missing."""
    raw = (os.getenv(name) or "").strip()
    return raw or default


def _env_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    """
    Read a lower-cased environment variable restricted to a set of choices.

    Example:
      SCORE_STRATEGY=inverted  -> "inverted"
      SCORE_STRATEGY=bogus     -> default
    """
    raw = _env_str(name, default).lower()
    return raw if raw in choices else default


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable app configuration.

    Notes on the data source:
      - supabase_url empty => the in-memory sample data source is used.
      - score_strategy picks ONE display convention for the whole deployment.
    """

    # Core settings
    tz: str = _env_str("TZ", "Europe/Stockholm")
    log_level: str = _env_str("LOG_LEVEL", "INFO").upper()

    # Data source
    supabase_url: str = _env_str("SUPABASE_URL", "")
    supabase_anon_key: str = _env_str("SUPABASE_ANON_KEY", "")
    episodes_table: str = _env_str("EPISODES_TABLE", "episodes")
    http_timeout_seconds: int = _env_int("HTTP_TIMEOUT_SECONDS", 10)

    # Scoring
    score_strategy: str = _env_choice("SCORE_STRATEGY", "raw", ("raw", "inverted"))

    # Cache controls
    cache_ttl_seconds: int = _env_int("CACHE_TTL_SECONDS", 60)
    score_range_ttl_seconds: int = _env_int("SCORE_RANGE_TTL_SECONDS", 3600)

    # Dashboard defaults
    default_region: str = _env_choice("DEFAULT_REGION", "se", ("se", "us"))
    default_time_window: str = _env_choice(
        "DEFAULT_TIME_WINDOW", "week", ("week", "month", "quarter", "year", "all")
    )
    limit_episodes: int = _env_int("LIMIT_EPISODES", 25)
    description_limit: int = _env_int("DESCRIPTION_LIMIT", 150)

    def __post_init__(self):
        """Clamp numeric settings into sane ranges."""
        # dataclass frozen => use object.__setattr__
        object.__setattr__(self, "limit_episodes", max(1, min(1000, self.limit_episodes)))
        object.__setattr__(self, "description_limit", max(1, self.description_limit))
        object.__setattr__(self, "cache_ttl_seconds", max(0, self.cache_ttl_seconds))
        object.__setattr__(self, "score_range_ttl_seconds", max(0, self.score_range_ttl_seconds))

    @property
    def use_mock_data(self) -> bool:
        """True when no Supabase project is configured."""
        return not self.supabase_url
