"""Parsing topic reference lines and common content lines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..constants import (
    BARE_TOPIC_ID_REGEX,
    CLONED_ID_ATTRIBUTE_REGEX,
    COMMON_CONTENT_UNIQUE_ID,
    ERROR_COMMON_CONTENT_RELATIONSHIP_MSG,
    ERROR_DUPLICATE_ID_MSG,
    ERROR_DUPLICATE_TARGET_ID_MSG,
    ERROR_DUPLICATED_RELATIONSHIP_TYPE_MSG,
    ERROR_INVALID_REVISION_MSG,
    ERROR_INVALID_TITLE_ID_MSG,
    ERROR_INVALID_TITLE_ID_TYPE_MSG,
    ERROR_INVALID_TOPIC_FORMAT_MSG,
    ERROR_INVALID_TOPIC_ID_MSG,
    ERROR_TOPIC_EXTERNAL_CSP_MSG,
    ERROR_TOPIC_EXTERNAL_TARGET_MSG,
    ERROR_TOPIC_NEXT_PREV_MSG,
    PREFIXED_TOPIC_REGEX,
    REVISION_ATTRIBUTE_REGEX,
    UNIQUE_NEW_TOPIC_ID_REGEX,
    WARN_COMMON_CONTENT_ATTRIBUTES_MSG,
    WARN_IGNORE_DUP_INFO_MSG,
)
from ..enums import RelationshipType, TopicType
from ..exceptions import ParsingException
from ..nodes import CommonContent, Relationship, SpecTopic, classify_topic_id
from ..utils import clean_xml_character_references, find_unescaped, replace_escape_chars, to_int
from .classifier import split_inline_relationships
from .options import add_options
from .relationships import create_relationships
from .state import ParserState
from .variables import get_line_variables

RelationshipSets = List[Tuple[RelationshipType, List[str]]]


@dataclass
class ParsedTopic:
    """A topic that has been parsed but not yet registered with the parser state."""

    topic: SpecTopic
    relationships: List[Relationship] = field(default_factory=list)


def parse_title(line: str) -> str:
    """The text before the first unescaped opening bracket, with escapes and character references resolved."""
    end = find_unescaped(line, "[")
    title = line if end == -1 else line[:end]
    return replace_escape_chars(clean_xml_character_references(title.strip()))


def merge_relationship_sets(*groups: RelationshipSets) -> RelationshipSets:
    """Combine attribute lists from separate brackets and inline declarations, rejecting repeated kinds."""
    merged: RelationshipSets = []
    seen = set()
    for group in groups:
        for relationship_type, entries in group:
            if relationship_type in seen:
                raise ParsingException(ERROR_DUPLICATED_RELATIONSHIP_TYPE_MSG)
            seen.add(relationship_type)
            merged.append((relationship_type, entries))
    return merged


def parse_topic(
    state: ParserState,
    line: str,
    line_number: Optional[int] = None,
    default_type: Optional[str] = None,
    read_ahead: bool = True,
) -> SpecTopic:
    """Parse a topic reference and register it, its target and its relationships with ``state``.

    Three forms are accepted::

        Title [N1, Concept, Writer = Jane] [R: T1] [T2]
        N1: Title [Concept, Writer = Jane, R: T1, T2]
        1234

    ``default_type`` is used for new topics that do not name a type themselves.
    """
    parsed = read_topic(state, line, line_number, default_type, read_ahead)
    register_topic(state, parsed)
    return parsed.topic


def read_topic(
    state: ParserState,
    line: str,
    line_number: Optional[int] = None,
    default_type: Optional[str] = None,
    read_ahead: bool = True,
) -> ParsedTopic:
    """Parse a topic reference without touching the lookup tables of ``state``."""
    line_number = line_number if line_number is not None else state.line_number
    text = line.strip()

    bare = BARE_TOPIC_ID_REGEX.match(text)
    if bare:
        topic = SpecTopic(id=bare.group("id"), line_number=line_number, text=line)
        topic.unique_id = _unique_id(state, topic, line_number)
        return ParsedTopic(topic=topic)

    prefixed = PREFIXED_TOPIC_REGEX.match(text)
    if prefixed:
        topic_id = prefixed.group("id")
        text = prefixed.group("rest").strip()

    variables = get_line_variables(state, text, read_ahead=read_ahead)
    title = parse_title(variables.line)
    attributes = variables.first(RelationshipType.NONE)

    if not prefixed:
        if attributes is None:
            raise ParsingException(ERROR_INVALID_TOPIC_FORMAT_MSG)
        if not attributes:
            raise ParsingException(ERROR_INVALID_TITLE_ID_MSG)
        topic_id, attributes = attributes[0], attributes[1:]
    attributes = list(attributes or [])

    classification = classify_topic_id(topic_id)
    if classification is None:
        raise ParsingException(ERROR_INVALID_TOPIC_ID_MSG)
    if classification is TopicType.NEW and not title:
        raise ParsingException(ERROR_INVALID_TITLE_ID_MSG)

    topic = SpecTopic(id=topic_id, title=title or None, line_number=line_number, text=line)

    if classification is TopicType.EXISTING and attributes:
        revision = REVISION_ATTRIBUTE_REGEX.match(attributes[0])
        if revision:
            number = to_int(revision.group(1))
            if number is None or number < 0:
                raise ParsingException(ERROR_INVALID_REVISION_MSG)
            topic.revision = number
            attributes = attributes[1:]

    options, inline_sets = split_inline_relationships(attributes)

    if classification is TopicType.NEW:
        if options and CLONED_ID_ATTRIBUTE_REGEX.match(options[0]):
            topic.id = "C" + CLONED_ID_ATTRIBUTE_REGEX.match(options[0]).group(1)
            topic.classification = TopicType.CLONED
            options = options[1:]
        elif options and _is_type(options[0]):
            topic.type = replace_escape_chars(options.pop(0))
        elif not prefixed and default_type is None:
            raise ParsingException(ERROR_INVALID_TITLE_ID_TYPE_MSG)
        if topic.type is None:
            topic.type = default_type

    topic.unique_id = _unique_id(state, topic, line_number)

    accepts_options = topic.classification in (TopicType.NEW, TopicType.CLONED) or (
        topic.classification is TopicType.EXISTING and topic.revision is None
    )
    if accepts_options:
        add_options(topic, options)
    elif options:
        state.error_logger.warn(WARN_IGNORE_DUP_INFO_MSG, line_number, line)

    other_sets = [(t, e) for t, e in variables.sets if t is not RelationshipType.NONE]
    relationships = []
    for relationship_type, entries in merge_relationship_sets(other_sets, inline_sets):
        if relationship_type in (RelationshipType.NEXT, RelationshipType.PREVIOUS):
            raise ParsingException(ERROR_TOPIC_NEXT_PREV_MSG)
        elif relationship_type is RelationshipType.EXTERNAL_TARGET:
            raise ParsingException(ERROR_TOPIC_EXTERNAL_TARGET_MSG)
        elif relationship_type is RelationshipType.EXTERNAL_CONTENT_SPEC:
            raise ParsingException(ERROR_TOPIC_EXTERNAL_CSP_MSG)
        elif relationship_type is RelationshipType.TARGET:
            target_id = entries[0]
            if state.has_target(target_id):
                raise ParsingException(ERROR_DUPLICATE_TARGET_ID_MSG)
            topic.target_id = target_id
        else:
            relationships.extend(create_relationships(topic.unique_id, relationship_type, entries, line_number))

    return ParsedTopic(topic=topic, relationships=relationships)


def register_topic(state: ParserState, parsed: ParsedTopic) -> None:
    topic = parsed.topic
    state.spec_topics[topic.unique_id] = topic
    if topic.target_id is not None:
        state.target_topics[topic.target_id] = topic
    for relationship in parsed.relationships:
        state.add_topic_relationship(topic, relationship)


def _is_type(value: str) -> bool:
    return find_unescaped(value, "=") == -1 and find_unescaped(value, ":") == -1


def _unique_id(state: ParserState, topic: SpecTopic, line_number: int) -> str:
    if UNIQUE_NEW_TOPIC_ID_REGEX.match(topic.id):
        if topic.id in state.spec_topics:
            raise ParsingException(ERROR_DUPLICATE_ID_MSG.format(id=topic.id))
        return topic.id
    return f"L{line_number}-{topic.id}"


def parse_common_content(state: ParserState, line: str, line_number: Optional[int] = None) -> CommonContent:
    line_number = line_number if line_number is not None else state.line_number
    variables = get_line_variables(state, line.strip())

    if any(t is not RelationshipType.NONE for t in variables.types):
        raise ParsingException(ERROR_COMMON_CONTENT_RELATIONSHIP_MSG)
    attributes = variables.first(RelationshipType.NONE) or []
    if len(attributes) > 1:
        state.error_logger.warn(WARN_COMMON_CONTENT_ATTRIBUTES_MSG, line_number, line)

    return CommonContent(
        title=parse_title(variables.line),
        unique_id=COMMON_CONTENT_UNIQUE_ID.format(line=line_number),
        line_number=line_number,
        text=line,
    )
