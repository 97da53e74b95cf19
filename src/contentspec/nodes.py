"""Pydantic models for the parsed content specification tree."""

from __future__ import annotations

import weakref
from typing import Annotated, Any, Dict, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

from .constants import (
    CLONED_DUPLICATE_TOPIC_ID_REGEX,
    CLONED_TOPIC_ID_REGEX,
    DUMMY_UNIQUE_ID,
    DUPLICATE_TOPIC_ID_REGEX,
    EXISTING_TOPIC_ID_REGEX,
    NEW_TOPIC_ID_REGEX,
    TARGET_REGEX,
)
from .enums import LevelType, RelationshipType, TopicType
from .utils import to_int


def classify_topic_id(topic_id: str) -> Optional[TopicType]:
    """Work out what kind of topic reference a raw topic ID denotes, or None for an invalid ID."""
    if NEW_TOPIC_ID_REGEX.match(topic_id):
        return TopicType.NEW
    if CLONED_DUPLICATE_TOPIC_ID_REGEX.match(topic_id):
        return TopicType.CLONED_DUPLICATE
    if CLONED_TOPIC_ID_REGEX.match(topic_id):
        return TopicType.CLONED
    if DUPLICATE_TOPIC_ID_REGEX.match(topic_id):
        return TopicType.DUPLICATE
    if EXISTING_TOPIC_ID_REGEX.match(topic_id):
        return TopicType.EXISTING
    return None


class SpecNode(BaseModel):
    """Base class of every node in a content specification."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    line_number: Optional[int] = None
    text: Optional[str] = None

    _parent: Optional[weakref.ReferenceType] = PrivateAttr(default=None)

    @property
    def parent(self) -> Optional["Level"]:
        return self._parent() if self._parent is not None else None

    def set_parent(self, parent: Optional["Level"]) -> None:
        self._parent = weakref.ref(parent) if parent is not None else None

    @property
    def depth(self) -> int:
        """Number of containers above this node, not counting the base container."""
        depth = 0
        parent = self.parent
        while parent is not None and parent.level_type is not LevelType.BASE:
            depth += 1
            parent = parent.parent
        return depth


class Relationship(BaseModel):
    """A directed edge declared on a topic or container, resolved after parsing completes."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    source_id: str
    relationship_type: RelationshipType
    target_ref: str
    title: Optional[str] = None
    line_number: Optional[int] = None
    match_count: int = 0
    is_self_reference: bool = False
    implicit: bool = False

    target: Optional[Any] = Field(default=None, exclude=True, repr=False)

    @property
    def is_resolved(self) -> bool:
        return self.target is not None and getattr(self.target, "unique_id", None) != DUMMY_UNIQUE_ID

    @property
    def ambiguous(self) -> bool:
        return self.match_count > 1

    def __str__(self) -> str:
        if self.title:
            return f"{self.title} [{self.target_ref}]"
        return self.target_ref


class SpecNodeWithOptions(SpecNode):
    """A node that carries tags, a writer, a condition, a description and source URLs."""

    tags: List[str] = Field(default_factory=list)
    categories: Dict[str, List[str]] = Field(default_factory=dict)
    writer: Optional[str] = None
    condition: Optional[str] = None
    description: Optional[str] = None
    source_urls: List[str] = Field(default_factory=list)
    fixed_url: Optional[str] = None

    def _inherited(self, attribute: str, inherit: bool) -> Optional[str]:
        value = getattr(self, attribute)
        if value is None and inherit and self.parent is not None:
            return self.parent._inherited(attribute, inherit)
        return value

    def get_writer(self, inherit: bool = True) -> Optional[str]:
        return self._inherited("writer", inherit)

    def get_condition(self, inherit: bool = True) -> Optional[str]:
        return self._inherited("condition", inherit)

    def get_description(self, inherit: bool = True) -> Optional[str]:
        return self._inherited("description", inherit)

    def get_tags(self, inherit: bool = True) -> List[str]:
        tags = []
        if inherit and self.parent is not None:
            tags.extend(self.parent.get_tags(inherit))
        tags.extend(tag for tag in self.tags if tag not in tags)
        return tags

    def add_tag(self, tag: str, category: Optional[str] = None) -> bool:
        """Add a tag, returning False when the node already has it."""
        if tag in self.tags:
            return False
        self.tags.append(tag)
        if category is not None:
            self.categories.setdefault(category, []).append(tag)
        return True

    def options_text(self) -> List[str]:
        entries = []
        categorised = {tag for tags in self.categories.values() for tag in tags}
        for category, tags in self.categories.items():
            if len(tags) == 1:
                entries.append(f"{category}: {tags[0]}")
            else:
                entries.append(f"{category}: ({', '.join(tags)})")
        entries.extend(tag for tag in self.tags if tag not in categorised)
        if self.writer is not None:
            entries.append(f"Writer = {self.writer}")
        if self.description is not None:
            entries.append(f"Description = {self.description}")
        if self.condition is not None:
            entries.append(f"condition = {self.condition}")
        entries.extend(f"URL = {url}" for url in self.source_urls)
        if self.fixed_url is not None:
            entries.append(f"Fixed URL = {self.fixed_url}")
        return entries


def _relationships_text(relationships: List[Relationship]) -> str:
    grouped: Dict[RelationshipType, List[Relationship]] = {}
    for relationship in relationships:
        if relationship.implicit:
            continue
        grouped.setdefault(relationship.relationship_type, []).append(relationship)

    parts = []
    for relationship_type, items in grouped.items():
        if not relationship_type.short_name:
            continue
        parts.append(f" [{relationship_type.short_name}: {', '.join(str(item) for item in items)}]")
    return "".join(parts)


class SpecTopic(SpecNodeWithOptions):
    """A reference to a single topic from inside the specification."""

    node_type: Literal["topic"] = "topic"
    id: str
    title: Optional[str] = None
    type: Optional[str] = None
    classification: Optional[TopicType] = None
    unique_id: Optional[str] = None
    revision: Optional[int] = None
    target_id: Optional[str] = None
    relationships: List[Relationship] = Field(default_factory=list)

    @model_validator(mode="after")
    def _classify(self) -> "SpecTopic":
        if self.classification is None:
            self.classification = classify_topic_id(self.id)
        return self

    @classmethod
    def dummy(cls, target_ref: str) -> "SpecTopic":
        """Placeholder standing in for a relationship target that could not be found."""
        topic = cls(id=target_ref, unique_id=DUMMY_UNIQUE_ID)
        if TARGET_REGEX.match(target_ref):
            topic.target_id = target_ref
        return topic

    @property
    def is_placeholder(self) -> bool:
        return self.unique_id == DUMMY_UNIQUE_ID

    @property
    def is_top_level(self) -> bool:
        return self.parent is None or self.parent.level_type is LevelType.BASE

    def add_relationship(self, relationship: Relationship) -> None:
        self.relationships.append(relationship)

    def get_relationships(self, relationship_type: RelationshipType) -> List[Relationship]:
        return [r for r in self.relationships if r.relationship_type is relationship_type]

    def attributes_text(self) -> str:
        """Everything after the title: the attribute list, relationships and target."""
        attributes = [self.id]
        if self.revision is not None:
            attributes.append(f"rev: {self.revision}")
        if self.type is not None and self.classification is TopicType.NEW:
            attributes.append(self.type)
        attributes.extend(self.options_text())

        line = f"[{', '.join(attributes)}]"
        line += _relationships_text(self.relationships)
        if self.target_id is not None:
            line += f" [{self.target_id}]"
        return line

    def to_text(self, include_indentation: bool = True, spaces: int = 2) -> str:
        attributes = self.attributes_text()
        if self.title:
            line = f"{self.title} {attributes}"
        elif attributes == f"[{self.id}]":
            line = self.id
        else:
            line = attributes
        if include_indentation:
            line = " " * (self.depth * spaces) + line
        return line

    def __str__(self) -> str:
        return self.to_text(include_indentation=False)


class CommonContent(SpecNode):
    node_type: Literal["common_content"] = "common_content"
    title: str
    unique_id: Optional[str] = None

    def to_text(self, include_indentation: bool = True, spaces: int = 2) -> str:
        line = f"{self.title} [Common Content]"
        return " " * (self.depth * spaces) + line if include_indentation else line


class Comment(SpecNode):
    node_type: Literal["comment"] = "comment"
    text: str

    def to_text(self, include_indentation: bool = True, spaces: int = 2) -> str:
        line = self.text.strip()
        return " " * (self.depth * spaces) + line if include_indentation else line


class TextNode(SpecNode):
    """Blank line marker."""

    node_type: Literal["text"] = "text"
    text: str = "\n"

    def to_text(self, include_indentation: bool = True, spaces: int = 2) -> str:
        return ""


class AdditionalFile(BaseModel):
    file_id: int
    title: Optional[str] = None
    revision: Optional[int] = None

    def __str__(self) -> str:
        if self.title is None and self.revision is None:
            return str(self.file_id)
        rev = f", rev: {self.revision}" if self.revision is not None else ""
        title = f"{self.title} " if self.title else ""
        return f"{title}[{self.file_id}{rev}]"


class KeyValueNode(SpecNode):
    """A ``key = value`` metadata entry. Spec-topic entries also carry the parsed topic."""

    node_type: Literal["metadata"] = "metadata"
    key: str
    value: str
    topic: Optional[SpecTopic] = None

    def to_text(self, include_indentation: bool = True, spaces: int = 2) -> str:
        if self.topic is not None:
            return f"{self.key} = {self.topic.attributes_text()}"
        if "\n" in self.value:
            return f"{self.key} = [{self.value}]"
        return f"{self.key} = {self.value}"


class FileList(SpecNode):
    node_type: Literal["files"] = "files"
    key: str
    files: List[AdditionalFile] = Field(default_factory=list)

    def to_text(self, include_indentation: bool = True, spaces: int = 2) -> str:
        return f"{self.key} = [{', '.join(str(f) for f in self.files)}]"


LevelChild = Annotated[
    Union["Level", SpecTopic, CommonContent, Comment, TextNode],
    Field(discriminator="node_type"),
]
DocumentNode = Annotated[Union[KeyValueNode, FileList, Comment, TextNode], Field(discriminator="node_type")]


class Level(SpecNodeWithOptions):
    """A chapter, section, appendix, part, preface, process, initial text container or the base container."""

    node_type: Literal["level"] = "level"
    level_type: LevelType
    title: Optional[str] = None
    unique_id: Optional[str] = None
    target_id: Optional[str] = None
    external_target_id: Optional[str] = None
    external_content_spec: Optional[str] = None
    children: List[LevelChild] = Field(default_factory=list)
    relationships: List[Relationship] = Field(default_factory=list)

    def append_child(self, node: SpecNode) -> None:
        node.set_parent(self)
        self.children.append(node)

    @property
    def child_levels(self) -> List["Level"]:
        return [child for child in self.children if isinstance(child, Level)]

    @property
    def spec_topics(self) -> List[SpecTopic]:
        return [child for child in self.children if isinstance(child, SpecTopic)]

    @property
    def front_matter(self) -> Optional["Level"]:
        for child in self.children:
            if isinstance(child, Level) and child.level_type is LevelType.INITIAL_CONTENT:
                return child
        return None

    @property
    def front_matter_topics(self) -> List[SpecTopic]:
        front_matter = self.front_matter
        return front_matter.spec_topics if front_matter is not None else []

    @property
    def has_content(self) -> bool:
        return any(isinstance(child, (Level, SpecTopic, CommonContent)) for child in self.children)

    def add_relationship(self, relationship: Relationship) -> None:
        self.relationships.append(relationship)

    def iter_levels(self) -> Iterator["Level"]:
        """Depth first iteration over this container and every container below it."""
        yield self
        for child in self.child_levels:
            yield from child.iter_levels()

    def iter_topics(self) -> Iterator[SpecTopic]:
        for child in self.children:
            if isinstance(child, SpecTopic):
                yield child
            elif isinstance(child, Level):
                yield from child.iter_topics()

    def max_depth(self) -> int:
        child_depths = [child.max_depth() for child in self.child_levels]
        own = 0 if self.level_type is LevelType.BASE else 1
        return own + (max(child_depths) if child_depths else 0)

    def _header_front_matter(self) -> Optional["Level"]:
        """Front matter that was declared on this container's own line."""
        front_matter = self.front_matter
        if front_matter is not None and front_matter.line_number == self.line_number:
            return front_matter
        return None

    def header_text(self) -> str:
        line = f"{self.level_type.value}:"
        if self.title:
            line += f" {self.title}"
        front_matter = self._header_front_matter()
        if front_matter is not None:
            line += "".join(f" {topic.attributes_text()}" for topic in front_matter.spec_topics)
        options = self.options_text()
        if options:
            line += f" [{', '.join(options)}]"
        line += _relationships_text(self.relationships)
        if self.target_id is not None:
            line += f" [{self.target_id}]"
        return line

    def to_text(self, include_indentation: bool = True, spaces: int = 2) -> str:
        lines = []
        if self.level_type is not LevelType.BASE:
            header = self.header_text()
            lines.append(" " * (self.depth * spaces) + header if include_indentation else header)
        elif self.options_text():
            lines.append(f"[{', '.join(self.options_text())}]")
        header_front_matter = self._header_front_matter()
        for child in self.children:
            if child is not header_front_matter:
                lines.append(child.to_text(include_indentation=include_indentation, spaces=spaces))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.header_text() if self.level_type is not LevelType.BASE else "Base"


class ContentSpec(BaseModel):
    """Root of a parsed content specification."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    nodes: List[DocumentNode] = Field(default_factory=list)
    base_level: Level = Field(default_factory=lambda: Level(level_type=LevelType.BASE))
    relationship_table: Dict[str, List[Relationship]] = Field(default_factory=dict, exclude=True)

    def append_node(self, node: SpecNode) -> None:
        """Add a metadata entry, comment or blank line marker to the document."""
        self.nodes.append(node)

    def append_comment(self, node: Union[Comment, TextNode]) -> None:
        """Place a comment or blank line that sits at the base level.

        Until the base container holds any content the node belongs to the document header,
        afterwards it is kept with the base container so that ordering is preserved.
        """
        if self.base_level.has_content:
            self.base_level.append_child(node)
        else:
            self.nodes.append(node)

    def get_metadata_node(self, key: str) -> Optional[Union[KeyValueNode, FileList]]:
        key = key.lower()
        for node in self.nodes:
            if isinstance(node, (KeyValueNode, FileList)) and node.key.lower() == key:
                return node
        return None

    def get_metadata(self, key: str) -> Optional[str]:
        node = self.get_metadata_node(key)
        if isinstance(node, KeyValueNode):
            return node.value
        return None

    def has_metadata(self, key: str) -> bool:
        return self.get_metadata_node(key) is not None

    @property
    def metadata(self) -> Dict[str, str]:
        return {node.key: node.value for node in self.nodes if isinstance(node, KeyValueNode)}

    @property
    def title(self) -> Optional[str]:
        return self.get_metadata("Title")

    @property
    def product(self) -> Optional[str]:
        return self.get_metadata("Product")

    @property
    def version(self) -> Optional[str]:
        return self.get_metadata("Version")

    @property
    def checksum(self) -> Optional[str]:
        return self.get_metadata("CHECKSUM")

    @property
    def id(self) -> Optional[int]:
        return to_int(self.get_metadata("ID"))

    @property
    def additional_files(self) -> List[AdditionalFile]:
        files = []
        for node in self.nodes:
            if isinstance(node, FileList):
                files.extend(node.files)
        return files

    @property
    def spaces(self) -> Optional[int]:
        return to_int(self.get_metadata("Spaces"))

    @property
    def spec_topics(self) -> List[SpecTopic]:
        """Topics declared through metadata, such as a legal notice or revision history."""
        return [node.topic for node in self.nodes if isinstance(node, KeyValueNode) and node.topic is not None]

    def get_spec_topic(self, key: str) -> Optional[SpecTopic]:
        node = self.get_metadata_node(key)
        return node.topic if isinstance(node, KeyValueNode) else None

    @property
    def levels(self) -> List[Level]:
        return list(self.base_level.iter_levels())

    @property
    def topics(self) -> List[SpecTopic]:
        return self.spec_topics + list(self.base_level.iter_topics())

    def find_topic(self, unique_id: str) -> Optional[SpecTopic]:
        for topic in self.topics:
            if topic.unique_id == unique_id:
                return topic
        return None

    @property
    def relationships(self) -> List[Relationship]:
        return [relationship for items in self.relationship_table.values() for relationship in items]

    def to_text(self, spaces: Optional[int] = None) -> str:
        spaces = spaces or self.spaces or 2
        lines = [node.to_text(spaces=spaces) for node in self.nodes]
        body = self.base_level.to_text(spaces=spaces)
        if body:
            lines.append(body)
        return "\n".join(lines) + "\n"


Level.model_rebuild()
ContentSpec.model_rebuild()
