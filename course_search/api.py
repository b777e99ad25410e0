from __future__ import annotations

"""
FastAPI wrapper around the search engine.

- GET /health
- GET /search?query=...&minIndex=0&maxIndex=1000

The engine is built once at startup from the JSON inputs in DATA_DIR and
its cache sweeper runs for the lifetime of the app.
"""

import json
import sys
from pathlib import Path
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .config import (
    CLASS_INDEX_PATH,
    DEFAULT_MAX_INDEX,
    DEFAULT_MIN_INDEX,
    EMPLOYEE_INDEX_PATH,
    EMPLOYEE_MAP_PATH,
    LOG_DIR,
    LOG_LEVEL,
    LOG_ROTATION,
    LOG_TO_FILE,
    TERM_DUMP_PATH,
    HealthResponse,
    SearchResponse,
)
from .search import Search


# -----------------------
# Logging
# -----------------------

def configure_logging() -> None:
    logger.remove()
    logger.add(sys.stdout, level=LOG_LEVEL.upper())
    if LOG_TO_FILE:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        logger.add(LOG_DIR / "course_search.log", level=LOG_LEVEL.upper(), rotation=LOG_ROTATION)


# -----------------------
# Engine loading
# -----------------------

def _read_json(path: Path) -> Optional[Any]:
    if not path.exists():
        logger.warning("Search input missing: {}", path)
        return None
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_search_engine() -> Optional[Search]:
    return Search.create(
        _read_json(TERM_DUMP_PATH),
        _read_json(CLASS_INDEX_PATH),
        _read_json(EMPLOYEE_MAP_PATH),
        _read_json(EMPLOYEE_INDEX_PATH),
    )


# -----------------------
# FastAPI app + startup
# -----------------------

app = FastAPI()
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_search: Optional[Search] = None


@app.on_event("startup")
def startup_event() -> None:
    global _search
    configure_logging()
    logger.info("Loading search engine...")
    _search = load_search_engine()
    if _search is None:
        logger.warning("Search engine not available; /search will return 503")
        return
    _search.start()
    logger.info("Search engine ready.")


@app.on_event("shutdown")
def shutdown_event() -> None:
    if _search is not None:
        _search.stop()


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.get("/search", response_model=SearchResponse)
def search(
    query: str = Query(...),
    min_index: int = Query(DEFAULT_MIN_INDEX, alias="minIndex", ge=0),
    max_index: int = Query(DEFAULT_MAX_INDEX, alias="maxIndex", ge=0),
) -> SearchResponse:
    if not query.strip():
        raise HTTPException(status_code=422, detail="Query must be non-empty")
    if _search is None:
        raise HTTPException(status_code=503, detail="Search engine not loaded")
    results = _search.search(query, min_index, max_index)
    return SearchResponse(results=[r.to_dict() for r in results])
