# podcast_charts/supabase_client.py
"""
Thin HTTP client wrapper for the Supabase (PostgREST) REST API.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from .models import EpisodeQuery, ScoreRange, safe_number

logger = logging.getLogger(__name__)

Params = List[Tuple[str, str]]


def query_params(query: EpisodeQuery, select: str = "*") -> Params:
    """
    Translate an EpisodeQuery into PostgREST query parameters.

    Example:
      region=se, 2024-12-09..2024-12-15, desc, 25 ->
        select=*&region=eq.se&first_appearance_date=gte.2024-12-09
        &first_appearance_date=lte.2024-12-15&order=score.desc.nullslast&limit=25
    """
    params: Params = [("select", select)]
    if query.region:
        params.append(("region", f"eq.{query.region}"))
    if query.start_date is not None:
        params.append(("first_appearance_date", f"gte.{query.start_date.isoformat()}"))
    if query.end_date is not None:
        params.append(("first_appearance_date", f"lte.{query.end_date.isoformat()}"))
    params.append(("order", f"score.{'asc' if query.ascending else 'desc'}.nullslast"))
    params.append(("limit", str(query.limit)))
    return params


def parse_content_range(value: Optional[str]) -> int:
    """Extract the total from a Content-Range header such as '0-24/312' or '*/0'."""
    if not value or "/" not in value:
        return 0
    total = value.rsplit("/", 1)[1].strip()
    return int(total) if total.isdigit() else 0


class SupabaseClient:
    """A minimal client for reading the episodes table over PostgREST."""

    def __init__(self, base_url: str, api_key: str, table: str = "episodes", timeout: int = 10) -> None:
        """Store the project URL and build auth headers."""
        self.base_url = base_url.rstrip("/")
        self.table = table
        self.timeout = timeout
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
            "User-Agent": "podcast-charts/1.0",
        }

    @property
    def table_url(self) -> str:
        return f"{self.base_url}/rest/v1/{self.table}"

    def get_json(self, params: Params) -> List[Dict[str, Any]]:
        """
        Execute a GET against the table endpoint and return the parsed row list.

        Raises:
            requests.HTTPError on non-2xx responses.
        """
        r = requests.get(self.table_url, params=params, timeout=self.timeout, headers=self._headers)
        r.raise_for_status()
        data = r.json()
        return data if isinstance(data, list) else []

    def select_episodes(self, query: EpisodeQuery) -> List[Dict[str, Any]]:
        """Fetch raw episode rows matching the query."""
        return self.get_json(query_params(query))

    def count_episodes(self, query: EpisodeQuery) -> int:
        """
        Count rows matching the query's filters (ordering/limit ignored).

        Uses a HEAD request with Prefer: count=exact and reads Content-Range.
        """
        params = [p for p in query_params(query) if p[0] not in ("order", "limit")]
        headers = dict(self._headers, Prefer="count=exact")
        r = requests.head(self.table_url, params=params, timeout=self.timeout, headers=headers)
        r.raise_for_status()
        return parse_content_range(r.headers.get("Content-Range"))

    def score_bounds(self) -> Optional[ScoreRange]:
        """
        Return the global min/max score, or None when no row has a score.

        Rows without a score are skipped.
        """
        base = [("select", "score"), ("score", "not.is.null")]
        lowest = self.get_json(base + [("order", "score.asc.nullslast"), ("limit", "1")])
        highest = self.get_json(base + [("order", "score.desc.nullslast"), ("limit", "1")])
        if not lowest or not highest:
            return None

        min_score = safe_number(lowest[0].get("score"), None)
        max_score = safe_number(highest[0].get("score"), None)
        if min_score is None or max_score is None:
            return None
        return ScoreRange(min_score=min_score, max_score=max_score)
