# podcast_charts/models.py
"""
Domain models for the dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Sequence


class Region(str, Enum):
    """Chart regions available in the data store."""
    SE = "se"
    US = "us"

    @property
    def label(self) -> str:
        return REGION_LABELS[self]


REGION_LABELS = {
    Region.SE: "🇸🇪 Sweden",
    Region.US: "🇺🇸 United States",
}


class TimeWindow(str, Enum):
    """Granularity used to bucket episodes by first appearance date."""
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    ALL = "all"


def safe_int(v, default=0) -> int:
    """Convert a value to int safely; return default on failures."""
    try:
        return int(v)
    except Exception:
        return default


def safe_number(v, default=0):
    """Return v as int when integral, float otherwise; default on failures."""
    try:
        f = float(v)
    except Exception:
        return default
    return int(f) if f.is_integer() else f


def parse_date(val) -> Optional[date]:
    """Parse YYYY-MM-DD (or a full ISO timestamp) into a date; None if unparseable."""
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    if not val:
        return None
    try:
        return date.fromisoformat(str(val)[:10])
    except ValueError:
        return None


def parse_timestamp(val) -> Optional[datetime]:
    """Parse an ISO timestamp such as 2024-01-15T08:00:00Z; None if unparseable."""
    if isinstance(val, datetime):
        return val
    if not val:
        return None
    try:
        return datetime.fromisoformat(str(val).replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass(frozen=True)
class Episode:
    """A chart episode row as stored in the episodes table."""
    id: int
    first_appearance_date: Optional[date]
    score: float
    episode_name: str
    show_name: str
    episode_uri: str
    show_uri: str
    show_description: str
    region: str  # "se" | "us"
    episode_description: Optional[str] = None
    episode_duration: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def show_id(self) -> str:
        """Trailing id of the show URI (spotify:show:abc -> abc)."""
        return self.show_uri.rsplit(":", 1)[-1] if self.show_uri else ""

    @property
    def region_label(self) -> str:
        try:
            return Region(self.region).label
        except ValueError:
            return self.region

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Episode":
        """Build an Episode from a raw store row, tolerating missing/malformed fields."""
        def text(key: str) -> str:
            v = row.get(key)
            return v.strip() if isinstance(v, str) else ""

        def optional_text(key: str) -> Optional[str]:
            return text(key) or None

        return cls(
            id=safe_int(row.get("id"), 0),
            first_appearance_date=parse_date(row.get("first_appearance_date")),
            score=safe_number(row.get("score"), 0),
            episode_name=text("episode_name"),
            show_name=text("show_name"),
            episode_uri=text("episode_uri"),
            show_uri=text("show_uri"),
            show_description=text("show_description"),
            region=text("region").lower(),
            episode_description=optional_text("episode_description"),
            episode_duration=optional_text("episode_duration"),
            created_at=parse_timestamp(row.get("created_at")),
            updated_at=parse_timestamp(row.get("updated_at")),
        )


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar-date interval."""
    start_date: date
    end_date: date


@dataclass(frozen=True)
class ScoreRange:
    """Global min/max of stored scores."""
    min_score: float
    max_score: float


@dataclass(frozen=True)
class EpisodeQuery:
    """Filters handed to an episode source. No dates => no date filter."""
    region: Optional[str]
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    ascending: bool = False
    limit: int = 25

    def cache_key(self) -> str:
        return "episodes:{}:{}:{}:{}:{}".format(
            self.region or "*",
            self.start_date.isoformat() if self.start_date else "-",
            self.end_date.isoformat() if self.end_date else "-",
            "asc" if self.ascending else "desc",
            self.limit,
        )


@dataclass(frozen=True)
class ViewState:
    """Everything the user selected for one dashboard request."""
    region: Region
    time_window: TimeWindow
    reference_date: date
    search: str = ""
    expanded: FrozenSet[int] = frozenset()


@dataclass(frozen=True)
class EpisodeCard:
    """A single ranked episode, ready for display."""
    rank: int
    episode: Episode
    display_score: float
    description: str
    is_expanded: bool
    can_expand: bool


@dataclass(frozen=True)
class DashboardViewModel:
    """All data needed to render the dashboard template."""
    now: datetime
    state: ViewState
    date_range: DateRange
    range_label: str
    short_range: str
    prev_date: Optional[date]
    next_date: Optional[date]
    can_go_next: bool
    cards: Sequence[EpisodeCard]
    total_count: int
    score_strategy: str
    score_range: Optional[ScoreRange] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class PodcastViewModel:
    """All data needed to render a show detail page."""
    show_uri: str
    show_name: str
    show_description: str
    cards: Sequence[EpisodeCard] = field(default_factory=tuple)
    score_strategy: str = "raw"
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return bool(self.cards)
