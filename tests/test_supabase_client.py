"""Tests for the PostgREST client, with requests faked out."""

from datetime import date

import pytest
import requests

from podcast_charts import supabase_client
from podcast_charts.models import EpisodeQuery, ScoreRange
from podcast_charts.supabase_client import SupabaseClient, parse_content_range, query_params


class FakeResponse:
    def __init__(self, payload=None, status_code: int = 200, headers=None) -> None:
        self._payload = payload
        self.status_code = status_code
        self.headers = headers or {}

    def json(self):
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture
def calls(monkeypatch):
    """Record requests.get/head calls and reply from a queue of responses."""
    recorded = {"get": [], "head": [], "replies": []}

    def fake_get(url, params=None, timeout=None, headers=None):
        recorded["get"].append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        return recorded["replies"].pop(0)

    def fake_head(url, params=None, timeout=None, headers=None):
        recorded["head"].append({"url": url, "params": params, "headers": headers})
        return recorded["replies"].pop(0)

    monkeypatch.setattr(supabase_client.requests, "get", fake_get)
    monkeypatch.setattr(supabase_client.requests, "head", fake_head)
    return recorded


@pytest.fixture
def client() -> SupabaseClient:
    return SupabaseClient("https://proj.supabase.co/", "anon-key", timeout=5)


class TestQueryParams:
    """Tests for query translation."""

    def test_full_query(self) -> None:
        q = EpisodeQuery(region="se", start_date=date(2024, 12, 9), end_date=date(2024, 12, 15), limit=25)
        assert query_params(q) == [
            ("select", "*"),
            ("region", "eq.se"),
            ("first_appearance_date", "gte.2024-12-09"),
            ("first_appearance_date", "lte.2024-12-15"),
            ("order", "score.desc.nullslast"),
            ("limit", "25"),
        ]

    def test_no_date_filter_and_ascending(self) -> None:
        q = EpisodeQuery(region="us", ascending=True, limit=1000)
        params = query_params(q)
        assert ("order", "score.asc.nullslast") in params
        assert all(k != "first_appearance_date" for k, _ in params)

    @pytest.mark.parametrize("header, total", [("0-24/312", 312), ("*/0", 0), (None, 0), ("garbage", 0)])
    def test_content_range(self, header, total) -> None:
        assert parse_content_range(header) == total


class TestSupabaseClient:
    """Tests for SupabaseClient."""

    def test_select_episodes(self, client, calls) -> None:
        calls["replies"].append(FakeResponse([{"id": 1, "score": 5}]))
        rows = client.select_episodes(EpisodeQuery(region="se"))

        assert rows == [{"id": 1, "score": 5}]
        sent = calls["get"][0]
        assert sent["url"] == "https://proj.supabase.co/rest/v1/episodes"
        assert sent["headers"]["apikey"] == "anon-key"
        assert sent["headers"]["Authorization"] == "Bearer anon-key"
        assert sent["timeout"] == 5

    def test_http_error_propagates(self, client, calls) -> None:
        calls["replies"].append(FakeResponse({"message": "boom"}, status_code=500))
        with pytest.raises(requests.HTTPError):
            client.select_episodes(EpisodeQuery(region="se"))

    def test_non_list_payload_is_empty(self, client, calls) -> None:
        calls["replies"].append(FakeResponse({"unexpected": True}))
        assert client.select_episodes(EpisodeQuery(region="se")) == []

    def test_count_uses_head_and_content_range(self, client, calls) -> None:
        calls["replies"].append(FakeResponse(headers={"Content-Range": "0-0/42"}))
        q = EpisodeQuery(region="se", start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))

        assert client.count_episodes(q) == 42
        sent = calls["head"][0]
        assert sent["headers"]["Prefer"] == "count=exact"
        assert all(k not in ("order", "limit") for k, _ in sent["params"])

    def test_score_bounds(self, client, calls) -> None:
        calls["replies"].extend([FakeResponse([{"score": 2}]), FakeResponse([{"score": 870}])])
        assert client.score_bounds() == ScoreRange(min_score=2, max_score=870)
        assert ("order", "score.asc.nullslast") in calls["get"][0]["params"]
        assert ("order", "score.desc.nullslast") in calls["get"][1]["params"]
        assert all(("score", "not.is.null") in c["params"] for c in calls["get"])

    def test_score_bounds_empty_table(self, client, calls) -> None:
        calls["replies"].extend([FakeResponse([]), FakeResponse([])])
        assert client.score_bounds() is None

    def test_score_bounds_null_score_is_no_range(self, client, calls) -> None:
        """A null score in the reply never reaches ScoreRange."""
        calls["replies"].extend([FakeResponse([{"score": 2}]), FakeResponse([{"score": None}])])
        assert client.score_bounds() is None

    def test_score_bounds_coerces_text_scores(self, client, calls) -> None:
        calls["replies"].extend([FakeResponse([{"score": "2"}]), FakeResponse([{"score": "870.5"}])])
        assert client.score_bounds() == ScoreRange(min_score=2, max_score=870.5)
