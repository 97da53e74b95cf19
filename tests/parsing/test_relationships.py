import pytest

from contentspec import ContentSpecParser
from contentspec.enums import LevelType, RelationshipType
from contentspec.exceptions import ParsingException
from contentspec.parsing.relationships import create_relationships


def _parse(text, **kwargs):
    results = ContentSpecParser().parse(text, **kwargs)
    assert results.success, results.diagnostics
    return results.content_spec


def _topic(content_spec, title):
    return next(t for t in content_spec.topics if t.title == title)


def test_create_relationships_with_titles():
    relationships = create_relationships(
        "N1", RelationshipType.REFER_TO, ["T1", "Setup Guide [N2]", " T- my_target "], line_number=3
    )

    assert [(r.target_ref, r.title) for r in relationships] == [
        ("T1", None),
        ("N2", "Setup Guide"),
        ("T-my_target", None),
    ]
    assert all(r.line_number == 3 and r.source_id == "N1" for r in relationships)
    assert not any(r.is_resolved for r in relationships)


def test_create_relationships_rejects_plain_text():
    with pytest.raises(ParsingException, match="Invalid Prerequisite Relationship format."):
        create_relationships("N1", RelationshipType.PREREQUISITE, ["Setup Guide"])


@pytest.mark.parametrize(
    "text",
    [
        "N: A [T1]\nN: B [R: T1]",
        "N: B [R: T1]\nN: A [T1]",
    ],
)
def test_target_resolves_in_either_order(text):
    content_spec = _parse(text)

    a = _topic(content_spec, "A")
    b = _topic(content_spec, "B")
    assert a.unique_id != b.unique_id
    relationship = b.relationships[0]
    assert relationship.target is a
    assert relationship.is_resolved
    assert not relationship.is_self_reference


def test_target_on_a_level():
    content_spec = _parse("Chapter: One [T-one]\n  Overview [N1, Concept] [R: T-one]")

    relationship = _topic(content_spec, "Overview").relationships[0]
    assert relationship.target is content_spec.base_level.child_levels[0]
    assert relationship.target.level_type is LevelType.CHAPTER


def test_new_topic_ids_resolve_directly():
    content_spec = _parse("A [N1, Concept] [P: N2]\nB [N2, Task]")

    assert _topic(content_spec, "A").relationships[0].target is _topic(content_spec, "B")


def test_unknown_target_gets_a_placeholder():
    results = ContentSpecParser().parse("Overview [N1, Concept] [R: T9, N5]")

    assert results.success, "Unresolved references are left for later validation"
    first, second = _topic(results.content_spec, "Overview").relationships
    assert first.target.is_placeholder
    assert first.target.target_id == "T9"
    assert not first.is_resolved
    assert second.target.is_placeholder
    assert second.target.id == "N5"


def test_existing_id_suffix_match():
    content_spec = _parse("A [1234]\nB [N1, Concept] [R: 1234]")

    relationship = _topic(content_spec, "B").relationships[0]
    assert relationship.match_count == 1
    assert relationship.target is _topic(content_spec, "A")
    assert relationship.target.unique_id == "L1-1234"


def test_ambiguous_existing_id_is_not_picked():
    content_spec = _parse("A [1234]\nB [1234]\nC [N1, Concept] [R: 1234]")

    relationship = _topic(content_spec, "C").relationships[0]
    assert relationship.match_count == 2
    assert relationship.ambiguous
    assert relationship.target.is_placeholder


def test_duplicate_ids_are_never_resolved():
    content_spec = _parse("A [X1]\nB [N1, Concept] [R: X1]")

    relationship = _topic(content_spec, "B").relationships[0]
    assert relationship.target.is_placeholder
    assert relationship.match_count == 0


def test_duplicated_topic_gets_a_target_when_referenced():
    content_spec = _parse("A [N1, Concept]\nB [X1]\nC [N2, Concept] [R: N1]")

    a = _topic(content_spec, "A")
    assert a.target_id == "T-N1"
    assert _topic(content_spec, "C").relationships[0].target is a


def test_synthesized_target_avoids_existing_targets():
    content_spec = _parse("A [N1, Concept]\nB [X1]\nC [N2, Concept] [R: N1] [T-N1]")

    assert _topic(content_spec, "A").target_id == "T-N1-1"


def test_topics_without_duplicates_get_no_target():
    content_spec = _parse("A [N1, Concept]\nC [N2, Concept] [R: N1]")

    assert _topic(content_spec, "A").target_id is None


def test_self_reference_is_flagged():
    content_spec = _parse("A [N1, Concept] [R: N1]")

    relationship = _topic(content_spec, "A").relationships[0]
    assert relationship.target is _topic(content_spec, "A")
    assert relationship.is_self_reference


def test_relationship_table(specs_dir):
    content_spec = _parse((specs_dir / "book.contentspec").read_text())

    table = content_spec.relationship_table
    assert set(table) == {"L12-N", "N2", "L18-N"}
    assert [r.target_ref for r in table["L18-N"]] == ["T2", "T-intro"]
    assert table["L18-N"][1].target is content_spec.base_level.child_levels[0]
    assert len(content_spec.relationships) == 4


def test_process_levels_link_their_topics(specs_dir):
    text = (specs_dir / "process.contentspec").read_text()
    content_spec = _parse(text, process_processes=True)

    download, install, verify = content_spec.base_level.child_levels[0].spec_topics
    assert [(r.relationship_type, r.target) for r in download.relationships] == [(RelationshipType.NEXT, install)]
    assert [(r.relationship_type, r.target) for r in install.relationships] == [
        (RelationshipType.PREVIOUS, download),
        (RelationshipType.NEXT, verify),
    ]
    assert [(r.relationship_type, r.target) for r in verify.relationships] == [(RelationshipType.PREVIOUS, install)]
    assert all(r.implicit for r in install.relationships)
    assert set(content_spec.relationship_table) == {"N1", "N2", "N3"}


def test_process_levels_are_off_by_default(specs_dir):
    content_spec = _parse((specs_dir / "process.contentspec").read_text())

    assert not any(topic.relationships for topic in content_spec.topics)
