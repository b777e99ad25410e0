from __future__ import annotations

"""
Full-text index adapter used for the class and employee corpora.

The search engine only needs ``search(text, config) -> [IndexHit, ...]``
sorted by descending score (see ``FullTextIndex``).  ``FieldIndex`` is the
bundled implementation: one BM25+ model (``rank_bm25``) per document field,
scores combined with per-field boosts from a ``SearchConfig``.

With ``expand`` on, a query token also matches every indexed term it is a
prefix of ("algo" -> "algorithms"), down-weighted by how much of the term it
covers.  Only documents that match at least one (expanded) query token in a
boosted field are returned.

Serialized form (what ``load`` / ``to_dict`` speak)::

    {"ref": "ref", "fields": ["name", "desc"], "documents": [{"ref": "...", "name": "..."}, ...]}
"""

from bisect import bisect_left
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

import numpy as np
from loguru import logger
from pydantic import BaseModel, Field
from rank_bm25 import BM25Plus

from . import config
from .normalize import lexical_tokens
from .pipeline_types import IndexHit


# ---------------------------------------------------------------------------
# Search configs
# ---------------------------------------------------------------------------

class FieldConfig(BaseModel):
    boost: float = Field(1.0, gt=0)


class SearchConfig(BaseModel):
    fields: Dict[str, FieldConfig]
    expand: bool = True

    @classmethod
    def from_boosts(cls, boosts: Mapping[str, float], expand: bool = True) -> "SearchConfig":
        return cls(fields={k: FieldConfig(boost=v) for k, v in boosts.items()}, expand=expand)


CLASS_SEARCH_CONFIG = SearchConfig.from_boosts(config.CLASS_SEARCH_FIELDS, expand=config.SEARCH_EXPAND)
EMPLOYEE_SEARCH_CONFIG = SearchConfig.from_boosts(config.EMPLOYEE_SEARCH_FIELDS, expand=config.SEARCH_EXPAND)


class FullTextIndex(Protocol):
    def search(self, text: str, config: SearchConfig) -> List[IndexHit]: ...


# ---------------------------------------------------------------------------
# BM25 field index
# ---------------------------------------------------------------------------

class _FieldPostings:
    """Tokenised corpus + BM25 model + term -> doc positions for one field."""

    def __init__(self, corpus_tokens: List[List[str]]):
        self.postings: Dict[str, List[int]] = {}
        for pos, tokens in enumerate(corpus_tokens):
            for tok in set(tokens):
                self.postings.setdefault(tok, []).append(pos)
        self.vocab: List[str] = sorted(self.postings)
        # BM25 divides by the average doc length; an all-empty field has none
        self.model: Optional[BM25Plus] = BM25Plus(corpus_tokens) if self.vocab else None

    def expand(self, token: str, enabled: bool) -> Dict[str, float]:
        weights: Dict[str, float] = {}
        if token in self.postings:
            weights[token] = 1.0
        if not enabled:
            return weights
        i = bisect_left(self.vocab, token)
        while i < len(self.vocab) and self.vocab[i].startswith(token):
            term = self.vocab[i]
            if term != token:
                weights[term] = max(weights.get(term, 0.0), len(token) / len(term))
            i += 1
        return weights


class FieldIndex:
    def __init__(
        self,
        fields: Sequence[str],
        documents: Sequence[Mapping[str, Any]],
        ref_field: str = "ref",
    ):
        self.fields = list(fields)
        self.ref_field = ref_field
        self.documents: List[Dict[str, Any]] = []
        self.refs: List[str] = []

        for doc in documents:
            ref = doc.get(ref_field)
            if ref is None:
                logger.warning("Skipping index document without '{}': {}", ref_field, doc)
                continue
            self.documents.append(dict(doc))
            self.refs.append(str(ref))

        self._fields: Dict[str, _FieldPostings] = {}
        for name in self.fields:
            corpus_tokens = [lexical_tokens(doc.get(name)) for doc in self.documents]
            self._fields[name] = _FieldPostings(corpus_tokens)

        logger.info("Built field index over {} documents ({} fields)", len(self.refs), len(self.fields))

    @classmethod
    def load(cls, data: Mapping[str, Any]) -> "FieldIndex":
        return cls(
            fields=data.get("fields") or [],
            documents=data.get("documents") or [],
            ref_field=data.get("ref", "ref"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"ref": self.ref_field, "fields": list(self.fields), "documents": list(self.documents)}

    def __len__(self) -> int:
        return len(self.refs)

    def search(self, text: str, config: SearchConfig) -> List[IndexHit]:
        """Return matching documents sorted by descending boosted score."""
        query_tokens = lexical_tokens(text)
        if not query_tokens or not self.refs:
            return []

        n = len(self.refs)
        total = np.zeros(n, dtype="float64")
        matched = np.zeros(n, dtype=bool)

        for field_name, field_cfg in config.fields.items():
            postings = self._fields.get(field_name)
            if postings is None or postings.model is None:
                continue

            terms: Dict[str, float] = {}
            for tok in query_tokens:
                for term, w in postings.expand(tok, config.expand).items():
                    terms[term] = max(terms.get(term, 0.0), w)

            for term, weight in terms.items():
                matched[postings.postings[term]] = True
                scores = np.asarray(postings.model.get_scores([term]), dtype="float64")
                total += field_cfg.boost * weight * scores

        hits = np.flatnonzero(matched)
        if hits.size == 0:
            return []
        # stable sort: equal scores keep insertion order
        order = hits[np.argsort(-total[hits], kind="stable")]
        return [IndexHit(ref=self.refs[i], score=float(total[i])) for i in order]


def coerce_index(index: Any) -> FullTextIndex:
    """Accept a ready index object or its serialized mapping."""
    if isinstance(index, Mapping):
        return FieldIndex.load(index)
    return index
