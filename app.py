# app.py
"""
Flask entrypoint for the podcast charts dashboard.

Routes:
  HTML:
    - /                       chart dashboard
    - /podcast/<show_id>      per-show detail page

  JSON:
    - /api/episodes
    - /api/episodes/count
    - /api/podcast/<show_id>
    - /api/score-range

Query parameters (common):
  - region=se|us
  - window=week|month|quarter|year|all
  - date=YYYY-MM-DD (reference date; defaults to today)
  - q=text (search episode/show names)
  - expand=1,5,9 (episode ids whose description is shown in full)
  - limit=N (JSON only)

Notes:
  - View state is parsed per request and never stored on the app.
  - Invalid parameters fall back to defaults instead of erroring.
"""

from __future__ import annotations

from datetime import date
import logging
import os
from typing import Any, Dict
from urllib.parse import urlencode

from flask import Flask, abort, jsonify, redirect, render_template, request, url_for

from podcast_charts.cache import TTLCache
from podcast_charts.config import AppConfig
from podcast_charts.date_range import compute_range, format_range_label, time_window_label
from podcast_charts.handlers.dashboard_handler import (
    DashboardHandler,
    FETCH_ERROR_MESSAGE,
    build_cards,
    matches_search,
)
from podcast_charts.handlers.podcast_handler import PodcastHandler
from podcast_charts.mock_source import MockEpisodeSource
from podcast_charts.models import EpisodeCard, Region, TimeWindow, ViewState, parse_date
from podcast_charts.scoring import get_score_transform
from podcast_charts.services.episodes_service import EpisodeFetchError, EpisodesService
from podcast_charts.supabase_client import SupabaseClient
from podcast_charts.text import format_expanded, parse_expanded, toggle_expanded

logger = logging.getLogger(__name__)


def create_app(cfg: AppConfig | None = None, source: Any = None) -> Flask:
    """
    App factory.

    Builds shared dependencies (source + cache + service) once per process.
    `source` overrides the configured episode source (used by tests).
    """
    cfg = cfg or AppConfig()
    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if source is None:
        if cfg.use_mock_data:
            logger.info("SUPABASE_URL not set; serving sample episodes")
            source = MockEpisodeSource()
        else:
            source = SupabaseClient(
                cfg.supabase_url,
                cfg.supabase_anon_key,
                table=cfg.episodes_table,
                timeout=cfg.http_timeout_seconds,
            )

    # Unknown strategies fail here, at startup.
    transform = get_score_transform(cfg.score_strategy)

    service = EpisodesService(
        source=source,
        cache=TTLCache(),
        tz_name=cfg.tz,
        score_transform=transform,
        episodes_ttl=cfg.cache_ttl_seconds,
        score_range_ttl=cfg.score_range_ttl_seconds,
    )
    dashboard = DashboardHandler(
        episodes_service=service,
        limit=cfg.limit_episodes,
        description_limit=cfg.description_limit,
    )
    podcast = PodcastHandler(episodes_service=service, description_limit=cfg.description_limit)

    app = Flask(__name__)
    app.config["EPISODES_SERVICE"] = service

    # -------------------------
    # Shared parsing helpers
    # -------------------------

    def parse_region() -> Region:
        """Parse ?region= with a safe default."""
        raw = (request.args.get("region") or cfg.default_region).strip().lower()
        try:
            return Region(raw)
        except ValueError:
            return Region(cfg.default_region)

    def parse_window() -> TimeWindow:
        """Parse ?window= with a safe default."""
        raw = (request.args.get("window") or cfg.default_time_window).strip().lower()
        try:
            return TimeWindow(raw)
        except ValueError:
            return TimeWindow(cfg.default_time_window)

    def parse_reference_date() -> date:
        """
        Parse ?date=YYYY-MM-DD.

        Missing/invalid dates mean today; dates in the future are clamped to today.
        """
        today = service.now_local().date()
        d = parse_date((request.args.get("date") or "").strip())
        if d is None or d > today:
            return today
        return d

    def parse_int(name: str, default: int) -> int:
        """Parse an integer query param with default fallback."""
        try:
            return int(request.args.get(name, default))
        except Exception:
            return default

    def parse_state() -> ViewState:
        return ViewState(
            region=parse_region(),
            time_window=parse_window(),
            reference_date=parse_reference_date(),
            search=(request.args.get("q") or "").strip(),
            expanded=parse_expanded(request.args.get("expand") or ""),
        )

    # -------------------------
    # Template helpers
    # -------------------------

    def dashboard_url(state: ViewState, **overrides) -> str:
        """URL for the dashboard with state applied and selected params replaced."""
        params: Dict[str, Any] = {
            "region": state.region.value,
            "window": state.time_window.value,
            "date": state.reference_date.isoformat(),
        }
        if state.search:
            params["q"] = state.search
        if state.expanded:
            params["expand"] = format_expanded(state.expanded)
        params.update({k: v for k, v in overrides.items() if v is not None})
        return url_for("dashboard_page", **params)

    def toggle_url(expanded: frozenset, episode_id: int) -> str:
        """Current URL with episode_id flipped in the expand param."""
        expanded = toggle_expanded(expanded, episode_id)
        params = dict(request.args)
        params.pop("expand", None)
        if expanded:
            params["expand"] = format_expanded(expanded)
        return f"{request.path}?{urlencode(params)}" if params else request.path

    @app.context_processor
    def inject_helpers() -> Dict[str, Any]:
        return {
            "regions": list(Region),
            "time_windows": list(TimeWindow),
            "time_window_label": time_window_label,
            "dashboard_url": dashboard_url,
            "toggle_url": toggle_url,
        }

    # -------------------------
    # HTML routes
    # -------------------------

    @app.get("/")
    def dashboard_page():
        """
        Chart dashboard.

        Query:
          - region, window, date, q, expand
        """
        state = parse_state()
        ctx = dashboard.build_context(state)
        return render_template("charts/dashboard.html", **ctx)

    @app.get("/podcast/<path:show_id>")
    def podcast_page(show_id: str):
        """
        Per-show detail page.

        Query:
          - expand
        """
        expanded = parse_expanded(request.args.get("expand") or "")
        vm = podcast.build(show_id, expanded)
        status = 200 if vm.found else (502 if vm.error else 404)
        return render_template("charts/podcast.html", vm=vm, expanded=expanded), status

    @app.get("/podcast")
    def podcast_index():
        """A show id is required; send bare visits back to the charts."""
        return redirect("/", code=302)

    # -------------------------
    # JSON routes
    # -------------------------

    def card_to_dict(c: EpisodeCard) -> Dict[str, Any]:
        """
        Serialize a ranked card into JSON-safe primitives.

        Keys are camelCase to match the surrounding payloads.
        """
        ep = c.episode
        return {
            "rank": c.rank,
            "id": ep.id,
            "score": ep.score,
            "displayScore": c.display_score,
            "firstAppearanceDate": ep.first_appearance_date.isoformat() if ep.first_appearance_date else None,
            "episodeName": ep.episode_name,
            "showName": ep.show_name,
            "showId": ep.show_id,
            "episodeUri": ep.episode_uri,
            "showUri": ep.show_uri,
            "showDescription": ep.show_description,
            "region": ep.region,
            "episodeDescription": ep.episode_description,
            "episodeDuration": ep.episode_duration,
            "createdAt": ep.created_at.isoformat() if ep.created_at else None,
            "updatedAt": ep.updated_at.isoformat() if ep.updated_at else None,
        }

    @app.get("/api/episodes")
    def api_episodes():
        """
        Ranked episodes for a region/window.

        Query:
          - region, window, date, q, limit
        """
        state = parse_state()
        limit = max(1, min(1000, parse_int("limit", cfg.limit_episodes)))
        rng = compute_range(state.time_window, state.reference_date, now=service.now_local)

        out: Dict[str, Any] = {
            "generatedAt": service.now_local().isoformat(),
            "region": state.region.value,
            "timeWindow": state.time_window.value,
            "referenceDate": state.reference_date.isoformat(),
            "startDate": rng.start_date.isoformat(),
            "endDate": rng.end_date.isoformat(),
            "label": format_range_label(rng, state.time_window, state.reference_date),
            "scoreStrategy": transform.name,
        }

        try:
            episodes = service.fetch_top_episodes(state.region, state.time_window, state.reference_date, limit=limit)
        except EpisodeFetchError:
            logger.exception("API episode fetch failed")
            out.update(episodes=[], error=FETCH_ERROR_MESSAGE)
            return jsonify(out), 502

        episodes = [e for e in episodes if matches_search(e, state.search)]
        score_range = service.get_global_score_range() if transform.needs_score_range else None
        cards = build_cards(episodes, transform, score_range, frozenset(), cfg.description_limit)
        out["episodes"] = [card_to_dict(c) for c in cards]
        return jsonify(out)

    @app.get("/api/episodes/count")
    def api_episode_count():
        """
        Number of episodes for a region/window.

        Query:
          - region, window, date
        """
        state = parse_state()
        try:
            count = service.get_episode_count(state.region, state.time_window, state.reference_date)
        except EpisodeFetchError:
            logger.exception("API episode count failed")
            return jsonify({"count": 0, "error": FETCH_ERROR_MESSAGE}), 502
        return jsonify({
            "region": state.region.value,
            "timeWindow": state.time_window.value,
            "referenceDate": state.reference_date.isoformat(),
            "count": count,
        })

    @app.get("/api/podcast/<path:show_id>")
    def api_podcast(show_id: str):
        """Every charted episode of one show, best-first."""
        vm = podcast.build(show_id, frozenset())
        if vm.error:
            return jsonify({"showUri": vm.show_uri, "episodes": [], "error": vm.error}), 502
        if not vm.found:
            abort(404)
        return jsonify({
            "showUri": vm.show_uri,
            "showName": vm.show_name,
            "showDescription": vm.show_description,
            "scoreStrategy": vm.score_strategy,
            "episodes": [card_to_dict(c) for c in vm.cards],
        })

    @app.get("/api/score-range")
    def api_score_range():
        """Global score range (fallback values when unavailable)."""
        rng = service.get_global_score_range()
        return jsonify({"minScore": rng.min_score, "maxScore": rng.max_score, "scoreStrategy": transform.name})

    # -------------------------
    # Health
    # -------------------------

    @app.get("/health")
    def health():
        """Simple health endpoint for Docker/monitoring checks."""
        return {"ok": True, "source": "mock" if isinstance(source, MockEpisodeSource) else "supabase"}

    @app.errorhandler(404)
    def not_found(_err):
        if request.path.startswith("/api/"):
            return jsonify({"error": "not found"}), 404
        return render_template("charts/podcast.html", vm=None, expanded=frozenset()), 404

    return app


# WSGI entrypoint for gunicorn (Docker CMD uses: app:app)
app = create_app()

if __name__ == "__main__":
    # Dev server (not for production).
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "8000")), debug=True)
