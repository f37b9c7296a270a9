"""FastAPI service entrypoint for the genre-similarity recommender."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request

from ..config import AppConfig, build_source, load_config
from ..sources import TextSource
from ..store.catalog import LoadOutcome, MovieCatalog
from ..utils import setup_logging
from .messages import GENERIC_ERROR_MESSAGE, render_load, render_recommendation
from .recommender import recommend as recommend_movies
from .schemas import HealthResponse, LoadResponse, MoviesResponse, RecommendRequest, RecommendResponse

logger = logging.getLogger(__name__)


def _load_response(outcome: LoadOutcome) -> dict[str, Any]:
    return {
        "kind": outcome.kind.value,
        "movies": outcome.movies,
        "ratings": outcome.ratings,
        "skipped_movie_lines": outcome.skipped_movie_lines,
        "skipped_rating_lines": outcome.skipped_rating_lines,
        "source_name": outcome.source_name,
        "status": outcome.status,
        "message": render_load(outcome),
    }


def create_app(
    *,
    config: AppConfig | None = None,
    source: TextSource | None = None,
) -> FastAPI:
    """Build the app; `config` and `source` can be injected for tests."""

    @asynccontextmanager
    async def lifespan(app_: FastAPI):
        cfg = config
        if cfg is None:
            cfg = load_config(os.getenv("CONFIG_PATH") or None)
        setup_logging(os.getenv("LOG_LEVEL", cfg.online.log_level))

        src = source if source is not None else build_source(cfg.data)
        catalog = MovieCatalog(item_resource=cfg.data.item_resource, data_resource=cfg.data.data_resource)

        logger.info("Starting service with source=%r top_n=%d", src, cfg.online.top_n)
        outcome = await catalog.init(src)
        if not outcome.ok:
            # Keep serving so /health and /reload can report and recover.
            logger.error("Initial load failed: %s", outcome.message)

        app_.state.config = cfg
        app_.state.source = src
        app_.state.catalog = catalog
        app_.state.last_load = outcome
        yield

    app_ = FastAPI(title="MovieLens Genre Similarity Service", lifespan=lifespan)

    def _catalog(request: Request) -> MovieCatalog:
        catalog = getattr(request.app.state, "catalog", None)
        if catalog is None or not catalog.is_loaded:
            raise HTTPException(status_code=503, detail="Catalog not loaded")
        return catalog

    @app_.get("/health", response_model=HealthResponse)
    def health(request: Request) -> dict:
        catalog = getattr(request.app.state, "catalog", None)
        if catalog is None:
            return {"status": "loading", "loaded": False, "movies": 0, "ratings": 0}
        return {
            "status": "ok" if catalog.is_loaded else "error",
            "loaded": catalog.is_loaded,
            "movies": len(catalog.movies),
            "ratings": len(catalog.ratings),
        }

    @app_.get("/movies", response_model=MoviesResponse)
    def movies(request: Request) -> dict:
        """Movie list for the selection dropdown, sorted by title."""
        catalog = _catalog(request)
        options = catalog.movie_options()
        return {"count": len(options), "results": [{"id": o.id, "title": o.title} for o in options]}

    @app_.post("/recommend", response_model=RecommendResponse)
    def recommend(req: RecommendRequest, request: Request) -> dict:
        """Recommend movies similar in genre to the selected one."""
        catalog = _catalog(request)
        top_n = int(request.app.state.config.online.top_n)
        try:
            result = recommend_movies(catalog, req.movie_id, top_n=top_n)
            return {**result.to_dict(), "message": render_recommendation(result)}
        except Exception as exc:
            logger.exception("recommend failed for movie_id=%r", req.movie_id)
            raise HTTPException(status_code=500, detail=GENERIC_ERROR_MESSAGE) from exc

    @app_.post("/reload", response_model=LoadResponse)
    async def reload(request: Request) -> dict:
        """Re-fetch u.item and u.data; the catalog is only replaced on success."""
        catalog = getattr(request.app.state, "catalog", None)
        if catalog is None:
            raise HTTPException(status_code=503, detail="Catalog not initialized")
        outcome = await catalog.reload(request.app.state.source)
        request.app.state.last_load = outcome
        if not outcome.ok:
            raise HTTPException(status_code=502, detail=render_load(outcome))
        return _load_response(outcome)

    return app_


app = create_app()
