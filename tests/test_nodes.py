from common import parse

from contentspec.enums import LevelType, RelationshipType, TopicType
from contentspec.nodes import (
    AdditionalFile,
    Comment,
    ContentSpec,
    KeyValueNode,
    Level,
    Relationship,
    SpecTopic,
    TextNode,
    classify_topic_id,
)


def _tree():
    base = Level(level_type=LevelType.BASE, writer="Base Writer", tags=["Tech1"])
    chapter = Level(level_type=LevelType.CHAPTER, title="Intro", condition="beta", tags=["Area"])
    topic = SpecTopic(id="N1", title="Overview", type="Concept", tags=["Tech1", "Own"])
    base.append_child(chapter)
    chapter.append_child(topic)
    return base, chapter, topic


def test_classify_topic_id():
    assert classify_topic_id("N") is TopicType.NEW
    assert classify_topic_id("XC12") is TopicType.CLONED_DUPLICATE
    assert classify_topic_id("X12") is TopicType.DUPLICATE
    assert classify_topic_id("C12") is TopicType.CLONED
    assert classify_topic_id("12") is TopicType.EXISTING
    assert classify_topic_id("T12") is None


def test_topic_classification_is_derived_from_id():
    assert SpecTopic(id="X3").classification is TopicType.DUPLICATE


def test_parent_and_depth():
    base, chapter, topic = _tree()

    assert topic.parent is chapter
    assert chapter.parent is base
    assert base.parent is None
    assert topic.depth == 1
    assert chapter.depth == 0
    assert not topic.is_top_level


def test_option_inheritance():
    base, chapter, topic = _tree()

    assert topic.get_writer() == "Base Writer"
    assert topic.get_writer(inherit=False) is None
    assert topic.get_condition() == "beta"
    assert topic.get_description() is None
    assert topic.get_tags() == ["Tech1", "Area", "Own"]
    assert topic.get_tags(inherit=False) == ["Tech1", "Own"]


def test_add_tag_rejects_duplicates():
    topic = SpecTopic(id="N")

    assert topic.add_tag("A", "Category")
    assert not topic.add_tag("A")
    assert topic.tags == ["A"]
    assert topic.categories == {"Category": ["A"]}


def test_placeholder_topic():
    dummy = SpecTopic.dummy("T-missing")

    assert dummy.is_placeholder
    assert dummy.target_id == "T-missing"
    assert SpecTopic.dummy("1234").target_id is None


def test_relationship_state():
    relationship = Relationship(source_id="N1", relationship_type=RelationshipType.REFER_TO, target_ref="T1")
    assert not relationship.is_resolved

    relationship.target = SpecTopic.dummy("T1")
    assert not relationship.is_resolved

    relationship.target = SpecTopic(id="N2", unique_id="N2")
    assert relationship.is_resolved
    assert "target" not in relationship.model_dump()


def test_topic_text():
    topic = SpecTopic(
        id="N1",
        title="Overview",
        type="Concept",
        writer="Jane",
        target_id="T1",
        categories={"Area": ["A", "B"]},
        tags=["A", "B", "Plain"],
    )
    topic.add_relationship(Relationship(source_id="N1", relationship_type=RelationshipType.REFER_TO, target_ref="T2"))
    topic.add_relationship(
        Relationship(source_id="N1", relationship_type=RelationshipType.REFER_TO, target_ref="N3", title="Other")
    )
    topic.add_relationship(
        Relationship(source_id="N1", relationship_type=RelationshipType.NEXT, target_ref="N4", implicit=True)
    )

    assert topic.to_text() == "Overview [N1, Concept, Area: (A, B), Plain, Writer = Jane] [R: T2, Other [N3]] [T1]"
    assert [r.target_ref for r in topic.get_relationships(RelationshipType.REFER_TO)] == ["T2", "N3"]


def test_existing_topic_text():
    assert SpecTopic(id="1234").to_text() == "1234"
    assert SpecTopic(id="1234", revision=3).to_text() == "[1234, rev: 3]"
    assert SpecTopic(id="1234", title="Old", type="Concept").to_text() == "Old [1234]"


def test_level_text_is_indented():
    base, chapter, topic = _tree()
    chapter.append_child(TextNode())
    chapter.append_child(Comment(text="# note"))

    assert chapter.to_text(spaces=4) == "Chapter: Intro [Area, condition = beta]\n    Overview [N1, Concept, Tech1, Own]\n\n    # note"


def test_content_spec_text():
    content_spec = ContentSpec()
    content_spec.append_node(KeyValueNode(key="Title", value="Book"))
    content_spec.append_node(KeyValueNode(key="Entities", value="<!ENTITY A \"a\">\n<!ENTITY B \"b\">"))
    content_spec.base_level.append_child(Level(level_type=LevelType.PREFACE, title="Hello"))

    assert content_spec.to_text() == 'Title = Book\nEntities = [<!ENTITY A "a">\n<!ENTITY B "b">]\nPreface: Hello\n'


def test_additional_file_text():
    assert str(AdditionalFile(file_id=1)) == "1"
    assert str(AdditionalFile(file_id=2, title="Image", revision=4)) == "Image [2, rev: 4]"


def test_metadata_lookups_ignore_case():
    content_spec = ContentSpec()
    content_spec.append_node(KeyValueNode(key="Product", value="Foo"))

    assert content_spec.get_metadata("PRODUCT") == "Foo"
    assert content_spec.has_metadata("product")
    assert content_spec.product == "Foo"
    assert content_spec.version is None


def test_json_dump_keeps_node_kinds():
    content_spec = parse("Title = Book\nChapter: A\n  # note\n  N: X [Concept] [R: T1]\n  Shared [Common Content]").content_spec

    dumped = content_spec.model_dump(mode="json")
    chapter = dumped["base_level"]["children"][0]

    assert dumped["nodes"][0] == {
        "line_number": 1,
        "text": "Title = Book",
        "node_type": "metadata",
        "key": "Title",
        "value": "Book",
        "topic": None,
    }
    assert [child["node_type"] for child in chapter["children"]] == ["comment", "topic", "common_content"]
    assert chapter["children"][1]["relationships"][0]["target_ref"] == "T1"
    assert "relationship_table" not in dumped

    restored = Level.model_validate(dumped["base_level"])
    assert isinstance(restored.children[0], Level)
    assert isinstance(restored.children[0].children[1], SpecTopic)


def test_numeric_metadata_that_is_not_a_number():
    content_spec = ContentSpec()
    content_spec.append_node(KeyValueNode(key="ID", value="²"))
    content_spec.append_node(KeyValueNode(key="Spaces", value="4"))

    assert content_spec.id is None
    assert content_spec.spaces == 4
