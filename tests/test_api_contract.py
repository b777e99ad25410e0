from fastapi.testclient import TestClient

from course_search.api import app
from course_search.pipeline_types import EmployeeResult
from course_search.records import EmployeeRecord


client = TestClient(app)


class DummySearch:
    """Records calls and returns one employee per request."""

    def __init__(self):
        self.calls = []

    def search(self, term, min_index, max_index):
        self.calls.append((term, min_index, max_index))
        return [EmployeeResult(score=1.0, employee_record=EmployeeRecord(name="Ada"))]


def test_health_endpoint():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}


def test_search_requires_non_empty_query(monkeypatch):
    monkeypatch.setattr("course_search.api._search", DummySearch())
    resp = client.get("/search", params={"query": "  "})
    assert resp.status_code == 422


def test_search_unavailable_without_engine(monkeypatch):
    monkeypatch.setattr("course_search.api._search", None)
    resp = client.get("/search", params={"query": "cs2500"})
    assert resp.status_code == 503


def test_search_passes_window_and_serialises_results(monkeypatch):
    engine = DummySearch()
    monkeypatch.setattr("course_search.api._search", engine)

    resp = client.get("/search", params={"query": "ada", "minIndex": 10, "maxIndex": 20})

    assert resp.status_code == 200
    assert engine.calls == [("ada", 10, 20)]
    data = resp.json()
    assert data["results"][0]["type"] == "employee"
    assert data["results"][0]["employee"]["name"] == "Ada"


def test_search_defaults_to_first_thousand(monkeypatch):
    engine = DummySearch()
    monkeypatch.setattr("course_search.api._search", engine)
    client.get("/search", params={"query": "ada"})
    assert engine.calls == [("ada", 0, 1000)]
