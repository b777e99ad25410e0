from __future__ import annotations
"""
Hydration: turn ranked refs into full result objects.

Classes are resolved through the data store, along with every section
listed in their ``crns`` (section refs are derived with the key hasher).
Employees come straight from the employee mapping.

Missing data never aborts a batch.  A class or employee that cannot be
found is still emitted, with ``None`` in place of its record; a missing
section is left out of ``sections``; a ref of unknown type is skipped.
Each case is reported on the request's ``AnomalyLog``.
"""

from typing import Callable, List, Mapping, Optional, Sequence

from .anomalies import AnomalyKind, AnomalyLog
from .keys import section_hash
from .pipeline_types import ClassResult, EmployeeResult, HydratedResult, RefType, ScoredRef
from .records import ClassRecord, EmployeeRecord, SectionRecord
from .term_dump import DataStore

KeyHasher = Callable[[ClassRecord, str], Optional[str]]


def _load_sections(
    class_record: ClassRecord,
    data_store: DataStore,
    key_hasher: KeyHasher,
    anomalies: AnomalyLog,
) -> List[SectionRecord]:
    sections: List[SectionRecord] = []
    for crn in class_record.crns:
        key = key_hasher(class_record, crn)
        if not key:
            anomalies.record(
                AnomalyKind.MISSING_HASH,
                "could not derive section hash",
                crn=crn,
                subject=class_record.subject,
                class_id=class_record.class_id,
            )
            continue
        section = data_store.get_section_from_hash(key)
        if section is None:
            anomalies.record(AnomalyKind.MISSING_RECORD, "section not found", ref=key)
            continue
        sections.append(section)
    return sections


def hydrate_class(
    ref: ScoredRef,
    data_store: DataStore,
    key_hasher: KeyHasher,
    anomalies: AnomalyLog,
) -> ClassResult:
    class_record = data_store.get_class_from_hash(ref.ref)
    if class_record is None:
        anomalies.record(AnomalyKind.MISSING_RECORD, "class not found", ref=ref.ref)
        return ClassResult(score=ref.score, class_record=None, sections=[])
    sections = _load_sections(class_record, data_store, key_hasher, anomalies)
    return ClassResult(score=ref.score, class_record=class_record, sections=sections)


def hydrate_employee(
    ref: ScoredRef,
    employee_map: Mapping[str, EmployeeRecord],
    anomalies: AnomalyLog,
) -> EmployeeResult:
    record = employee_map.get(ref.ref)
    if record is None:
        anomalies.record(AnomalyKind.MISSING_RECORD, "employee not found", ref=ref.ref)
    return EmployeeResult(score=ref.score, employee_record=record)


def hydrate_refs(
    refs: Sequence[ScoredRef],
    data_store: DataStore,
    employee_map: Mapping[str, EmployeeRecord],
    anomalies: AnomalyLog,
    key_hasher: KeyHasher = section_hash,
) -> List[HydratedResult]:
    """Resolve ``refs`` in order; see the module docstring for failure handling."""
    out: List[HydratedResult] = []
    for ref in refs:
        if ref.type == RefType.CLASS:
            out.append(hydrate_class(ref, data_store, key_hasher, anomalies))
        elif ref.type == RefType.EMPLOYEE:
            out.append(hydrate_employee(ref, employee_map, anomalies))
        else:
            anomalies.record(
                AnomalyKind.UNKNOWN_REF_TYPE,
                "unknown ref type; skipping",
                ref=ref.ref,
                type=ref.type,
            )
    return out
