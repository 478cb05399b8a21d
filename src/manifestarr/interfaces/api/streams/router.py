"""Manifest resolution endpoints (movie, series episode, cache flush)."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Any, cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from manifestarr.domain.entities.manifest import ResolutionResult
from manifestarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["streams"])

_LOOKUP_MISS_MESSAGE = "IMDb ID not found"
_SNIFF_MISS_MESSAGE = "No m3u8 found"


def _format_result(result: ResolutionResult) -> tuple[int, dict[str, Any]]:
    """Map a ResolutionResult to (status_code, JSON body)."""
    if result.status == "lookup_miss":
        return 404, {"success": False, "message": _LOOKUP_MISS_MESSAGE}

    manifest = result.manifest
    if result.status == "sniff_miss" or manifest is None:
        return 404, {
            "success": False,
            "message": _SNIFF_MISS_MESSAGE,
            "lang": result.language,
        }

    body: dict[str, Any] = {"success": True}
    if result.cached:
        body["cached"] = True
    body["type"] = manifest.asset_kind
    body["tmdbId"] = manifest.tmdb_id
    body["imdbId"] = manifest.imdb_id
    if manifest.asset_kind == "series":
        body["season"] = manifest.season
        body["episode"] = manifest.episode
    body["lang"] = manifest.language
    body["m3u8Url"] = manifest.manifest_url
    return 200, body


async def _respond(
    pending: Awaitable[ResolutionResult], **context: Any
) -> JSONResponse:
    try:
        result = await pending
    except Exception as exc:
        log.error("resolve_failed", exc_info=True, **context)
        return JSONResponse(
            status_code=500, content={"success": False, "error": str(exc)}
        )
    status_code, body = _format_result(result)
    return JSONResponse(status_code=status_code, content=body)


@router.get("/movie/{tmdb_id}")
async def resolve_movie(
    request: Request,
    tmdb_id: str,
    lang: str | None = Query(default=None),
) -> JSONResponse:
    """Resolve the HLS manifest of a movie by TMDB ID."""
    state = cast(AppState, request.app.state)
    return await _respond(
        state.resolve_uc.resolve_movie(tmdb_id, lang),
        tmdb_id=tmdb_id,
        asset_kind="movie",
    )


@router.get("/series/{tmdb_id}/{season}/{episode}")
async def resolve_series(
    request: Request,
    tmdb_id: str,
    season: int,
    episode: int,
    lang: str | None = Query(default=None),
) -> JSONResponse:
    """Resolve the HLS manifest of one series episode by TMDB ID."""
    state = cast(AppState, request.app.state)
    return await _respond(
        state.resolve_uc.resolve_series(tmdb_id, season, episode, lang),
        tmdb_id=tmdb_id,
        asset_kind="series",
        season=season,
        episode=episode,
    )


@router.delete("/cache")
async def flush_cache(request: Request) -> JSONResponse:
    """Drop every cached manifest and TMDB lookup."""
    state = cast(AppState, request.app.state)
    await state.resolve_uc.clear_cache()
    return JSONResponse(content={"success": True})
