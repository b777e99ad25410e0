from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List

from pydantic import BaseModel, Field


# ---------------------------
# Paths
# ---------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_DIR = Path(os.getenv("COURSE_SEARCH_DATA_DIR", str(PROJECT_ROOT / "data")))
TERM_DUMP_PATH = DATA_DIR / "term_dump.json"
CLASS_INDEX_PATH = DATA_DIR / "class_index.json"
EMPLOYEE_MAP_PATH = DATA_DIR / "employee_map.json"
EMPLOYEE_INDEX_PATH = DATA_DIR / "employee_index.json"


# ---------------------------
# Pagination defaults
# ---------------------------

DEFAULT_MIN_INDEX = 0
DEFAULT_MAX_INDEX = 1000


# ---------------------------
# Query cache
# ---------------------------

DEFAULT_CACHE_TTL_SECONDS = 24 * 60 * 60
CACHE_TTL_SECONDS = int(os.getenv("CACHE_TTL_SECONDS", str(DEFAULT_CACHE_TTL_SECONDS)))
CACHE_SWEEP_INTERVAL_SECONDS = int(
    os.getenv("CACHE_SWEEP_INTERVAL_SECONDS", str(DEFAULT_CACHE_TTL_SECONDS))
)


# ---------------------------
# Query rewrites
# ---------------------------

# "cs2500" -> "cs 2500" only when what follows the subject code looks like a class number
SUBJECT_PREFIX_MAX_REMAINDER = 5
SUBJECT_PREFIX_MIN_DIGITS = 3

EMAIL_DOMAINS: List[str] = ["@northeastern.edu", "@neu.edu"]


# ---------------------------
# Business ranking
# ---------------------------

ENROLLMENT_TIER_OFFSET = 1_000_000
CLASS_NUMBER_CEILING = 10_000
NO_SECTIONS_KEY = 0
NON_NUMERIC_CLASS_KEY = 1
OVERSIZED_CLASS_KEY = 2

# Employees share the numeric key space with classes; 0 puts them level with
# classes that have no sections, and stable sorting keeps index order among them.
EMPLOYEE_BUSINESS_KEY = 0


# ---------------------------
# Full-text search configs (per-field boosts + prefix expansion)
# ---------------------------

CLASS_SEARCH_FIELDS: Dict[str, float] = {
    "classId": 4,
    "acronym": 4,
    "subject": 2,
    "desc": 1,
    "name": 1,
    "profs": 1,
    "crns": 1,
}

EMPLOYEE_SEARCH_FIELDS: Dict[str, float] = {
    "name": 2,
    "primaryRole": 1,
    "primaryDepartment": 1,
    "emails": 1,
    "phone": 1,
}

SEARCH_EXPAND = True


# ---------------------------
# Logging / observability
# ---------------------------

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = Path(os.getenv("COURSE_SEARCH_LOG_DIR", str(PROJECT_ROOT / "logs")))
LOG_TO_FILE = os.getenv("COURSE_SEARCH_LOG_TO_FILE", "0") == "1"
LOG_ROTATION = "10 MB"


# ---------------------------
# Pydantic models shared around the app
# ---------------------------

class SearchResponse(BaseModel):
    """
    Response body for GET /search.
    Each result is the wire form produced by ``HydratedResult.to_dict()``.
    """

    results: List[Dict[str, Any]] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """
    Response body for GET /health.
    """

    status: str
