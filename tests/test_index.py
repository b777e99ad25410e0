from course_search.index import (
    CLASS_SEARCH_CONFIG,
    EMPLOYEE_SEARCH_CONFIG,
    FieldIndex,
    SearchConfig,
    coerce_index,
)


def _employee_index():
    return FieldIndex(
        fields=["name", "primaryRole", "emails"],
        documents=[
            {"ref": "e1", "name": "Alan Turing", "primaryRole": "Professor", "emails": ["aturing@northeastern.edu"]},
            {"ref": "e2", "name": "Grace Professor", "primaryRole": "Turing Fellow", "emails": []},
            {"ref": "e3", "name": "Ada Lovelace", "primaryRole": "Lecturer", "emails": ["ada@neu.edu"]},
        ],
    )


def test_search_returns_only_matching_documents_sorted():
    hits = _employee_index().search("lovelace", EMPLOYEE_SEARCH_CONFIG)
    assert [h.ref for h in hits] == ["e3"]
    assert hits[0].score > 0


def test_field_boosts_order_matches():
    # "turing" is in e1's name (boost 2) and in e2's role (boost 1)
    hits = _employee_index().search("turing", EMPLOYEE_SEARCH_CONFIG)
    assert [h.ref for h in hits] == ["e1", "e2"]
    assert hits[0].score > hits[1].score


def test_prefix_expansion_can_be_switched_off():
    index = _employee_index()
    expanded = index.search("lovel", EMPLOYEE_SEARCH_CONFIG)
    assert [h.ref for h in expanded] == ["e3"]

    exact_only = SearchConfig.from_boosts({"name": 2}, expand=False)
    assert index.search("lovel", exact_only) == []


def test_unconfigured_fields_are_ignored():
    config = SearchConfig.from_boosts({"name": 1})
    hits = _employee_index().search("lecturer", config)
    assert hits == []


def test_empty_query_and_empty_index():
    assert _employee_index().search("   ", EMPLOYEE_SEARCH_CONFIG) == []
    empty = FieldIndex(fields=["name"], documents=[])
    assert empty.search("anything", EMPLOYEE_SEARCH_CONFIG) == []


def test_documents_without_ref_are_skipped():
    index = FieldIndex(fields=["name"], documents=[{"name": "no ref"}, {"ref": "x", "name": "has ref"}])
    assert index.refs == ["x"]


def test_load_and_to_dict():
    data = {
        "ref": "id",
        "fields": ["classId", "subject", "name"],
        "documents": [
            {"id": "c1", "classId": "2500", "subject": "CS", "name": "Fundamentals"},
            {"id": "c2", "classId": "1800", "subject": "CS", "name": "Discrete"},
        ],
    }
    index = coerce_index(data)
    assert isinstance(index, FieldIndex)
    assert index.to_dict() == data

    hits = index.search("cs 2500", CLASS_SEARCH_CONFIG)
    assert [h.ref for h in hits] == ["c1", "c2"]


def test_coerce_index_passes_objects_through():
    index = _employee_index()
    assert coerce_index(index) is index
