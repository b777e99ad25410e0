from course_search.config import HealthResponse, SearchResponse
from course_search.pipeline_types import ClassResult, EmployeeResult, RefType
from course_search.records import ClassRecord, EmployeeRecord, SectionRecord


def test_search_response_structure():
    result = ClassResult(
        score=1.5,
        class_record=ClassRecord(subject="CS", classId="2500"),
        sections=[SectionRecord(crn="101", seatsCapacity=30, seatsRemaining=10)],
    )
    resp = SearchResponse(results=[result.to_dict()])
    assert len(resp.results) == 1
    body = resp.results[0]
    assert body["type"] == "class"
    assert body["class"]["classId"] == "2500"
    assert body["sections"][0]["seatsRemaining"] == 10


def test_employee_result_wire_shape():
    result = EmployeeResult(score=2.0, employee_record=EmployeeRecord(name="Ada", officeRoom="WVH 310"))
    body = result.to_dict()
    assert body == {
        "score": 2.0,
        "type": "employee",
        "employee": {"name": "Ada", "emails": [], "officeRoom": "WVH 310"},
    }
    assert result.type == RefType.EMPLOYEE


def test_missing_record_serialises_as_null():
    assert ClassResult(score=0.0, class_record=None).to_dict()["class"] is None
    assert EmployeeResult(score=0.0, employee_record=None).to_dict()["employee"] is None


def test_health_response():
    health = HealthResponse(status="healthy")
    assert health.status == "healthy"
