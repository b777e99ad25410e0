from __future__ import annotations

"""
Key hashing for term-dump records.

A record's hash is its identifying components joined with ``/``, each URL
quoted, e.g. ``neu.edu/201810/CS/2500_1835962771/10234`` for a section.
Class hashes stop after the class uid.
"""

from typing import Optional
from urllib.parse import quote

from .records import ClassRecord, SectionRecord


def _part(value) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def make_hash(
    host,
    term_id,
    subject,
    class_uid,
    crn=None,
) -> Optional[str]:
    """Return the record hash, or ``None`` if a required component is missing."""
    parts = [_part(host), _part(term_id), _part(subject), _part(class_uid)]
    if any(p is None for p in parts):
        return None
    if crn is not None:
        crn_part = _part(crn)
        if crn_part is None:
            return None
        parts.append(crn_part)
    return "/".join(quote(p, safe="") for p in parts)


def class_uid_of(record: ClassRecord) -> Optional[str]:
    return record.class_uid or record.class_id


def class_hash(record: ClassRecord) -> Optional[str]:
    return make_hash(record.host, record.term_id, record.subject, class_uid_of(record))


def section_hash(class_record: ClassRecord, crn) -> Optional[str]:
    """Derive the hash of one of ``class_record``'s sections from its crn."""
    return make_hash(
        class_record.host,
        class_record.term_id,
        class_record.subject,
        class_uid_of(class_record),
        crn,
    )


def section_record_hash(record: SectionRecord) -> Optional[str]:
    class_uid = record.class_uid or (record.model_extra or {}).get("classId")
    return make_hash(record.host, record.term_id, record.subject, class_uid, record.crn)
