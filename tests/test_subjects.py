from course_search.pipeline_types import RefType
from course_search.subjects import find_subject, match_subject

from conftest import class_ref


def test_subject_code_match_lists_all_classes_in_native_order(term_dump, sample_dump):
    refs = match_subject("cs", term_dump.get_subjects(), term_dump)

    cs_classes = [c for c in sample_dump["classes"] if c["subject"] == "CS"]
    assert [r.ref for r in refs] == [class_ref(c) for c in cs_classes]
    assert all(r.score == 0 for r in refs)
    assert all(r.type == RefType.CLASS for r in refs)


def test_subject_display_text_matches_case_insensitively(term_dump):
    refs = match_subject("mathematics", term_dump.get_subjects(), term_dump)
    assert len(refs) == 1


def test_non_subject_query_returns_none(term_dump):
    assert match_subject("cs 2500", term_dump.get_subjects(), term_dump) is None
    assert match_subject("", term_dump.get_subjects(), term_dump) is None


def test_subject_without_classes_is_still_a_match(term_dump):
    refs = match_subject("artf", term_dump.get_subjects(), term_dump)
    assert refs == []


def test_find_subject_returns_the_subject(term_dump):
    subject = find_subject("computer science", term_dump.get_subjects())
    assert subject is not None
    assert subject.subject == "CS"
