"""Parsing container lines: chapters, sections, appendices, parts, prefaces, processes and initial text."""

from __future__ import annotations

from typing import List, Optional

from ..constants import (
    ALL_TOPIC_ID_REGEX,
    ERROR_DUPLICATE_TARGET_ID_MSG,
    ERROR_DUPLICATED_RELATIONSHIP_TYPE_MSG,
    ERROR_LEVEL_EXTERNAL_CSP_MSG,
    ERROR_LEVEL_FRONT_MATTER_RELATIONSHIP_MSG,
    ERROR_LEVEL_RELATIONSHIP_MSG,
    GENERIC_INVALID_LEVEL,
    INITIAL_CONTENT_REGEX,
)
from ..enums import LevelType, RelationshipType
from ..exceptions import ParsingException
from ..nodes import Level, SpecTopic
from ..utils import find_unescaped, replace_escape_chars
from .classifier import split_inline_relationships
from .options import add_options
from .relationships import create_relationships
from .state import ParserState
from .topics import merge_relationship_sets, read_topic, register_topic
from .variables import get_line_variables


def get_level_type(line: str) -> LevelType:
    """The container kind named by the keyword at the start of ``line``."""
    upper = line.strip().upper()
    if INITIAL_CONTENT_REGEX.match(upper):
        return LevelType.INITIAL_CONTENT

    colon = upper.find(":")
    keyword = upper if colon == -1 else upper[:colon]
    try:
        return LevelType.from_keyword(keyword)
    except ValueError:
        raise ParsingException(GENERIC_INVALID_LEVEL)


def create_empty_level(line: str, line_number: int) -> Level:
    """A container with no title or options, used in place of a container line that failed to parse."""
    return Level(level_type=get_level_type(line), unique_id=f"L{line_number}", line_number=line_number, text=line)


def parse_level(state: ParserState, line: str, line_number: Optional[int] = None) -> Level:
    """Parse ``CHAPTER: Title [options] [relationships] [T1]`` style lines into a new container.

    The container is registered with ``state`` but not attached to the tree; the caller decides
    where it goes.
    """
    line_number = line_number if line_number is not None else state.line_number
    level = create_empty_level(line, line_number)

    colon = line.find(":")
    remainder = line[colon + 1 :].strip() if colon != -1 else ""
    if remainder:
        _parse_level_contents(state, level, remainder, line_number)

    state.levels[level.unique_id] = level
    if level.target_id is not None:
        state.target_levels[level.target_id] = level
    if level.external_target_id is not None:
        state.external_target_levels[level.external_target_id] = level
    return level


def _parse_level_contents(state: ParserState, level: Level, text: str, line_number: int) -> None:
    variables = get_line_variables(state, text, group_types=True)

    title_end = find_unescaped(variables.line, "[")
    title = variables.line if title_end == -1 else variables.line[:title_end]
    level.title = replace_escape_chars(title.strip()) or None

    front_matter: List[List[str]] = []
    options: Optional[List[str]] = None
    relationship_sets = []
    for relationship_type, entries in variables.sets:
        if relationship_type is not RelationshipType.NONE:
            relationship_sets.append((relationship_type, entries))
        elif entries and ALL_TOPIC_ID_REGEX.match(entries[0]):
            front_matter.append(entries)
        elif options is not None:
            raise ParsingException(ERROR_DUPLICATED_RELATIONSHIP_TYPE_MSG)
        else:
            options = entries

    option_entries, inline_sets = split_inline_relationships(options or [])
    add_options(level, option_entries)

    pending = []
    for relationship_type, entries in merge_relationship_sets(relationship_sets, inline_sets):
        if relationship_type is RelationshipType.TARGET:
            if state.has_target(entries[0]):
                raise ParsingException(ERROR_DUPLICATE_TARGET_ID_MSG)
            level.target_id = entries[0]
        elif relationship_type is RelationshipType.EXTERNAL_TARGET:
            if entries[0] in state.external_target_levels:
                raise ParsingException(ERROR_DUPLICATE_TARGET_ID_MSG)
            level.external_target_id = entries[0]
        elif relationship_type is RelationshipType.EXTERNAL_CONTENT_SPEC:
            if level.external_content_spec is not None:
                raise ParsingException(ERROR_LEVEL_EXTERNAL_CSP_MSG.format(level=level.level_type.value))
            level.external_content_spec = entries[0]
        else:
            pending.append((relationship_type, entries))

    if pending and level.level_type is not LevelType.INITIAL_CONTENT:
        if not front_matter:
            raise ParsingException(ERROR_LEVEL_RELATIONSHIP_MSG.format(level=level.level_type.value))
        if len(front_matter) > 1:
            raise ParsingException(ERROR_LEVEL_FRONT_MATTER_RELATIONSHIP_MSG.format(level=level.level_type.value))

    topics = [
        read_topic(state, f"{title.strip()} [{', '.join(entries)}]", line_number, read_ahead=False)
        for entries in front_matter
    ]

    relationships = []
    for relationship_type, entries in pending:
        source = level if level.level_type is LevelType.INITIAL_CONTENT else topics[0].topic
        relationships.append((source, create_relationships(source.unique_id, relationship_type, entries, line_number)))

    if topics:
        initial_content = Level(
            level_type=LevelType.INITIAL_CONTENT, unique_id=f"L{line_number}-1", line_number=line_number, text=level.text
        )
        for parsed in topics:
            register_topic(state, parsed)
            initial_content.append_child(parsed.topic)
        level.append_child(initial_content)
        state.levels[initial_content.unique_id] = initial_content

    for source, items in relationships:
        for relationship in items:
            if isinstance(source, SpecTopic):
                state.add_topic_relationship(source, relationship)
            else:
                state.add_level_relationship(source, relationship)
