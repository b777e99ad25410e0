from __future__ import annotations

"""
Query normalisation helpers shared by the cache, the subject matcher and
the full-text index.

Public helpers:

* normalize_query(text) -> str
    Trim + lower-case.  This is the cache key and is applied exactly once
    per request by the search facade.

* prepare_index_query(query, subjects) -> str
    Rewrites applied before hitting the full-text indexes
    ("cs2500" -> "cs 2500", email domains removed).

* lexical_tokens(text) -> List[str]
    Tokeniser used by the bundled index adapter, for both documents and
    queries so they see the same view of text.
"""

import re
import unicodedata
from typing import Iterable, List, Sequence

from . import config
from .records import Subject


_EMAIL_DOMAIN_RES = [
    re.compile(re.escape(domain), flags=re.IGNORECASE) for domain in config.EMAIL_DOMAINS
]
_DIGIT_RE = re.compile(r"\d")
_TOKEN_RE = re.compile(r"[a-z0-9_+#]+")


def _normalise_unicode(text: str) -> str:
    text = unicodedata.normalize("NFKC", text)
    text = text.replace("‘", "'").replace("’", "'")
    text = text.replace("“", '"').replace("”", '"')
    text = text.replace("–", "-").replace("—", "-")
    return text


def normalize_query(text: str | None) -> str:
    """Searches are case insensitive; one canonical form per query."""
    if text is None:
        return ""
    return str(text).strip().lower()


def rewrite_subject_prefix(query: str, subjects: Sequence[Subject]) -> str:
    """Put a space after a leading subject code when a class number follows.

    Only the first subject whose code prefixes the query is considered, and
    only when the remainder is short and mostly digits, e.g. ``cs2500``.
    """
    lowered = query.lower().strip()
    for subject in subjects:
        code = subject.subject.lower()
        if not code or not lowered.startswith(code):
            continue
        remainder = query[len(code):]
        if len(remainder) > config.SUBJECT_PREFIX_MAX_REMAINDER:
            break
        if len(_DIGIT_RE.findall(remainder)) >= config.SUBJECT_PREFIX_MIN_DIGITS:
            query = f"{query[:len(code)]} {remainder}"
        break
    return query


def strip_email_domains(query: str) -> str:
    """Let ``jdoe@northeastern.edu`` style queries hit the employee index."""
    for pattern in _EMAIL_DOMAIN_RES:
        query = pattern.sub("", query)
    return query


def prepare_index_query(query: str, subjects: Sequence[Subject]) -> str:
    query = rewrite_subject_prefix(query, subjects)
    return strip_email_domains(query)


def lexical_tokens(text: str | Iterable[str] | None) -> List[str]:
    """Tokenise a field value; list values (profs, crns, emails) are joined."""
    if text is None:
        return []
    if not isinstance(text, str):
        text = " ".join(str(t) for t in text if t is not None)
    norm = _normalise_unicode(text).lower()
    return _TOKEN_RE.findall(norm)
