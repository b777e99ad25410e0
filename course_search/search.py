from __future__ import annotations

"""
Search engine over classes and employees.

``Search.search(term, min_index, max_index)`` is the single public
operation: results ``[min_index, max_index)`` of the merged ranking, with
equal-score groups re-ordered by business score.  Pagination is stable:
page N is exactly the N-th slice of the fully ranked list.

Pipeline per request:
  0) reject empty windows
  1) normalize the query, consult the cache (subject match, else index merge)
  2) widen the window to whole score groups (skipped for subject matches)
  3) hydrate the window
  4) business re-rank within score groups (skipped for subject matches)
  5) trim back to the requested slice
"""

import time
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

from loguru import logger

from . import config
from .anomalies import Anomaly, AnomalyKind, AnomalyLog
from .cache import CacheSweeper, Clock, QueryCache
from .hydrate import KeyHasher, hydrate_refs
from .index import (
    CLASS_SEARCH_CONFIG,
    EMPLOYEE_SEARCH_CONFIG,
    FullTextIndex,
    SearchConfig,
    coerce_index,
)
from .keys import section_hash
from .normalize import normalize_query
from .pipeline_types import HydratedResult, ScoredRef, Window
from .records import EmployeeRecord
from .rerank import rerank_within_score_groups
from .retrieval import retrieve_refs
from .subjects import match_subject
from .term_dump import DataStore, TermDump, load_employee_map
from .window import expand_window


@dataclass
class SearchOutcome:
    results: List[HydratedResult] = field(default_factory=list)
    anomalies: List[Anomaly] = field(default_factory=list)
    was_subject_match: bool = False
    cache_hit: bool = False


class Search:
    def __init__(
        self,
        term_dump: DataStore,
        class_index: FullTextIndex,
        employee_map: Mapping[str, EmployeeRecord],
        employee_index: FullTextIndex,
        cache: Optional[QueryCache] = None,
        key_hasher: KeyHasher = section_hash,
        class_config: SearchConfig = CLASS_SEARCH_CONFIG,
        employee_config: SearchConfig = EMPLOYEE_SEARCH_CONFIG,
        sweep_interval_seconds: float = config.CACHE_SWEEP_INTERVAL_SECONDS,
    ):
        self.term_dump = term_dump
        self.class_index = class_index
        self.employee_map = employee_map
        self.employee_index = employee_index
        self.cache = cache if cache is not None else QueryCache()
        self.key_hasher = key_hasher
        self.class_config = class_config
        self.employee_config = employee_config
        self.sweeper = CacheSweeper(self.cache, interval_seconds=sweep_interval_seconds)

    @classmethod
    def create(
        cls,
        term_dump: Any,
        class_index: Any,
        employee_map: Any,
        employee_index: Any,
        *,
        clock: Optional[Clock] = None,
        **options: Any,
    ) -> Optional["Search"]:
        """
        Build an engine from pre-parsed inputs (objects or plain mappings).
        Returns None if any input is missing.
        """
        inputs = {
            "term_dump": term_dump,
            "class_index": class_index,
            "employee_map": employee_map,
            "employee_index": employee_index,
        }
        missing = [name for name, value in inputs.items() if value is None]
        if missing:
            logger.error("Search.create: missing arguments: {}", ", ".join(missing))
            return None

        if isinstance(term_dump, Mapping):
            term_dump = TermDump.load(term_dump)
        if clock is not None and "cache" not in options:
            options["cache"] = QueryCache(clock=clock)

        return cls(
            term_dump,
            coerce_index(class_index),
            load_employee_map(employee_map),
            coerce_index(employee_index),
            **options,
        )

    # -- lifecycle -----------------------------------------------------------

    def start(self) -> None:
        self.sweeper.start()

    def stop(self) -> None:
        self.sweeper.stop()

    # -- ref computation -----------------------------------------------------

    def _compute_refs(self, query: str) -> Tuple[List[ScoredRef], bool]:
        subjects = self.term_dump.get_subjects()
        subject_refs = match_subject(query, subjects, self.term_dump)
        if subject_refs is not None:
            return subject_refs, True
        refs = retrieve_refs(
            query,
            subjects,
            self.class_index,
            self.employee_index,
            class_config=self.class_config,
            employee_config=self.employee_config,
        )
        return refs, False

    # -- public API ----------------------------------------------------------

    def run(
        self,
        term: str,
        min_index: int = config.DEFAULT_MIN_INDEX,
        max_index: int = config.DEFAULT_MAX_INDEX,
    ) -> SearchOutcome:
        """Same as ``search`` but also reports anomalies and cache/subject flags."""
        anomalies = AnomalyLog()

        # --- 0) Window sanity ---
        if max_index <= min_index:
            anomalies.record(
                AnomalyKind.INVALID_REQUEST,
                "max index must be greater than min index",
                min_index=min_index,
                max_index=max_index,
            )
            return SearchOutcome(anomalies=anomalies.entries)

        # --- 1) Refs (cached per normalized query) ---
        query = normalize_query(term)
        entry, cache_hit = self.cache.get_or_compute(query, lambda: self._compute_refs(query))
        refs = entry.refs
        was_subject_match = entry.was_subject_match

        if not refs or min_index >= len(refs):
            return SearchOutcome(
                anomalies=anomalies.entries,
                was_subject_match=was_subject_match,
                cache_hit=cache_hit,
            )

        return_count = max_index - min_index
        last = min(max_index, len(refs)) - 1

        # --- 2) Widen to whole score groups ---
        if was_subject_match:
            window = Window(min_index=min_index, max_index=last)
        else:
            window = expand_window(refs, min_index, last)
        start_offset = min_index - window.min_index

        # --- 3) Hydrate ---
        results = hydrate_refs(
            refs[window.min_index:window.max_index + 1],
            self.term_dump,
            self.employee_map,
            anomalies,
            key_hasher=self.key_hasher,
        )

        # --- 4) Business re-rank ---
        if not was_subject_match:
            start_time = time.perf_counter()
            results = rerank_within_score_groups(results, anomalies)
            logger.debug(
                "Sorting took {:.2f}ms for {} results (offset={}, count={})",
                (time.perf_counter() - start_time) * 1000, len(results), start_offset, return_count,
            )

        # --- 5) Trim ---
        return SearchOutcome(
            results=results[start_offset:start_offset + return_count],
            anomalies=anomalies.entries,
            was_subject_match=was_subject_match,
            cache_hit=cache_hit,
        )

    def search(
        self,
        term: str,
        min_index: int = config.DEFAULT_MIN_INDEX,
        max_index: int = config.DEFAULT_MAX_INDEX,
    ) -> List[HydratedResult]:
        """
        Main search function; min/max index are for pagination.
        Eg, for results 10 through 19 call ``search("hi there", 10, 20)``.
        """
        return self.run(term, min_index, max_index).results
