from typing import Dict, List, Optional

import pytest

from course_search.pipeline_types import IndexHit
from course_search.term_dump import TermDump


def make_class(subject: str, class_id: str, crns=(), name: str = "", host: str = "neu.edu", term_id: str = "202110"):
    return {
        "host": host,
        "termId": term_id,
        "subject": subject,
        "classUid": f"{class_id}_uid",
        "classId": class_id,
        "name": name,
        "crns": list(crns),
    }


def make_section(cls: dict, crn: str, capacity: int, remaining: int,
                 wait_capacity: Optional[int] = None, wait_remaining: Optional[int] = None):
    section = {
        "host": cls["host"],
        "termId": cls["termId"],
        "subject": cls["subject"],
        "classUid": cls["classUid"],
        "crn": crn,
        "seatsCapacity": capacity,
        "seatsRemaining": remaining,
    }
    if wait_capacity is not None:
        section["waitCapacity"] = wait_capacity
    if wait_remaining is not None:
        section["waitRemaining"] = wait_remaining
    return section


def class_ref(cls: dict) -> str:
    return f"{cls['host']}/{cls['termId']}/{cls['subject']}/{cls['classUid']}"


class FakeIndex:
    """Canned hits per query text; records every query it receives."""

    def __init__(self, results: Optional[Dict[str, List[IndexHit]]] = None):
        self.results = results or {}
        self.calls: List[str] = []

    def search(self, text, config):
        self.calls.append(text)
        return list(self.results.get(text, []))


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


SUBJECTS = [
    {"subject": "CS", "text": "Computer Science"},
    {"subject": "MATH", "text": "Mathematics"},
    {"subject": "ARTF", "text": "Art - Fundamentals"},
]


@pytest.fixture
def sample_dump():
    cs2500 = make_class("CS", "2500", crns=["101"], name="Fundamentals of Computer Science 1")
    cs1800 = make_class("CS", "1800", crns=["201", "202"], name="Discrete Structures")
    cs4500 = make_class("CS", "4500", crns=[], name="Software Development")
    math1341 = make_class("MATH", "1341", crns=["301"], name="Calculus 1")
    return {
        "subjects": SUBJECTS,
        "classes": [cs2500, cs1800, cs4500, math1341],
        "sections": [
            make_section(cs2500, "101", 30, 30),
            make_section(cs1800, "201", 40, 35),
            make_section(cs1800, "202", 40, 40, wait_capacity=10, wait_remaining=5),
            make_section(math1341, "301", 25, 25),
        ],
    }


@pytest.fixture
def term_dump(sample_dump):
    return TermDump.load(sample_dump)


@pytest.fixture
def clock():
    return FakeClock()
