from __future__ import annotations

"""
Record schemas for the term dump and the employee directory.

The dumps use camelCase keys (``termId``, ``seatsRemaining`` ...).  Models
accept either the dump key or the Python attribute name, keep unknown keys
around, and dump back to the camelCase wire shape with ``to_wire()``.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_str(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return value


class _DumpRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Subject(_DumpRecord):
    subject: str
    text: str = ""


class ClassRecord(_DumpRecord):
    """A course offering in one term."""

    host: str = ""
    term_id: str = Field("", alias="termId")
    subject: str = ""
    class_uid: Optional[str] = Field(None, alias="classUid")
    class_id: Optional[str] = Field(None, alias="classId")
    name: str = ""
    desc: str = ""
    crns: List[str] = Field(default_factory=list)

    @field_validator("term_id", "class_uid", "class_id", mode="before")
    @classmethod
    def _coerce_ids(cls, v):
        return _as_str(v)

    @field_validator("crns", mode="before")
    @classmethod
    def _coerce_crns(cls, v):
        if v is None:
            return []
        return [_as_str(c) for c in v]


class SectionRecord(_DumpRecord):
    """A single section (crn) of a class, with seat and waitlist counts."""

    host: str = ""
    term_id: str = Field("", alias="termId")
    subject: str = ""
    class_uid: Optional[str] = Field(None, alias="classUid")
    crn: str = ""
    seats_capacity: int = Field(0, alias="seatsCapacity")
    seats_remaining: int = Field(0, alias="seatsRemaining")
    wait_capacity: Optional[int] = Field(None, alias="waitCapacity")
    wait_remaining: Optional[int] = Field(None, alias="waitRemaining")

    @field_validator("term_id", "class_uid", "crn", mode="before")
    @classmethod
    def _coerce_ids(cls, v):
        return _as_str(v)

    def has_waitlist(self) -> bool:
        return self.wait_capacity is not None and self.wait_remaining is not None


class EmployeeRecord(_DumpRecord):
    """A staff directory entry."""

    id: Optional[str] = None
    name: str = ""
    primary_role: Optional[str] = Field(None, alias="primaryRole")
    primary_department: Optional[str] = Field(None, alias="primaryDepartment")
    emails: List[str] = Field(default_factory=list)
    phone: Optional[str] = None
    office_room: Optional[str] = Field(None, alias="officeRoom")

    @field_validator("id", "phone", mode="before")
    @classmethod
    def _coerce_ids(cls, v):
        return _as_str(v)
