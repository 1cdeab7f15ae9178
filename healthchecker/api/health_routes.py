"""API routes for running checks and exporting reports.

Endpoints:
  GET  /api/health/metadata  categories, providers and checks (nothing runs)
  GET  /api/health/run  run every check, grouped report payload
  GET  /api/health/category/{slug}  run one category
  GET  /api/health/check/{slug}  run one check
  GET  /api/health/stats  summary counts, optionally cached
  POST /api/health/cache/clear  drop the cached stats entry
  GET  /api/health/export/{fmt}  json / markdown / html download
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import Response

from healthchecker.health.errors import UnknownCategoryError, UnknownSlugError
from healthchecker.health.filters import STATUS_ALL, STATUS_FILTERS
from healthchecker.service import HealthService

logger = logging.getLogger(__name__)

health_router = APIRouter()

EXPORT_FORMATS = {"json": "json", "markdown": "md", "md": "md", "html": "html"}


def _service(request: Request) -> HealthService:
    return request.app.state.health_service


def _server_error(e: Exception) -> HTTPException:
    logger.exception("Health API request failed")
    return HTTPException(status_code=500, detail=str(e))


# ── Run endpoints ────────────────────────────────────────────────────────────


@health_router.get("/health/metadata")
def metadata(request: Request) -> dict[str, Any]:
    """Registry contents, for building check lists before anything runs."""
    return _service(request).runner.metadata()


@health_router.get("/health/run")
def run_all(request: Request) -> dict[str, Any]:
    runner = _service(request).runner
    try:
        runner.run_all()
        payload = runner.to_dict()
        payload["byCategory"] = {
            category: [r.to_dict() for r in results]
            for category, results in runner.results_by_category().items()
        }
        return payload
    except Exception as e:
        raise _server_error(e) from e


@health_router.get("/health/category/{slug}")
def run_category(slug: str, request: Request) -> dict[str, Any]:
    runner = _service(request).runner
    try:
        results = runner.run_category(slug)
    except UnknownCategoryError as e:
        raise HTTPException(
            status_code=404, detail={"error": "unknown_category", "category": slug, "message": str(e)},
        ) from e
    except Exception as e:
        raise _server_error(e) from e
    return {"category": slug, "results": [r.to_dict() for r in results]}


@health_router.get("/health/check/{slug}")
def run_check(slug: str, request: Request) -> dict[str, Any]:
    runner = _service(request).runner
    try:
        result = runner.run_single_check(slug)
    except UnknownSlugError as e:
        raise HTTPException(
            status_code=404, detail={"error": "unknown_check", "slug": slug, "message": str(e)},
        ) from e
    except Exception as e:
        raise _server_error(e) from e
    return result.to_dict()


# ── Stats endpoints ──────────────────────────────────────────────────────────


@health_router.get("/health/stats")
def stats(
    request: Request,
    cache: bool = False,
    cache_ttl: int | None = Query(default=None, ge=0),
) -> dict[str, Any]:
    """Summary counts. ``cache=1`` serves an entry younger than ``cache_ttl`` seconds."""
    ttl = cache_ttl if cache_ttl is not None else request.app.state.settings.stats_cache_ttl
    try:
        return _service(request).runner.stats(use_cache=cache, ttl_seconds=ttl).to_dict()
    except Exception as e:
        raise _server_error(e) from e


@health_router.post("/health/cache/clear")
def clear_cache(request: Request) -> dict[str, Any]:
    _service(request).runner.clear_cache()
    return {"cleared": True}


# ── Export ───────────────────────────────────────────────────────────────────


@health_router.get("/health/export/{fmt}")
def export(
    fmt: str,
    request: Request,
    status: str = STATUS_ALL,
    category: list[str] = Query(default=[]),
    check: list[str] = Query(default=[]),
) -> Response:
    extension = EXPORT_FORMATS.get(fmt)
    if extension is None:
        raise HTTPException(status_code=404, detail=f"Unknown export format: {fmt}")
    if status not in STATUS_FILTERS:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid status filter: {status} (expected one of {', '.join(STATUS_FILTERS)})",
        )

    try:
        exported = _service(request).export(extension, status, category, check)
    except Exception as e:
        raise _server_error(e) from e

    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
