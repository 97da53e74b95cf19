"""Declaring relationships while parsing, and resolving them once the whole document has been read."""

from __future__ import annotations

import re
from typing import Iterable, Iterator, List, Optional, Union

from ..constants import (
    ERROR_INVALID_RELATIONSHIP_FORMAT_MSG,
    ERROR_MISSING_SEPARATOR_MSG,
    RELATION_ID_ANYWHERE_REGEX,
    RELATION_ID_LONG_REGEX,
    RELATION_ID_REGEX,
    TARGET_REGEX,
    UNIQUE_NEW_TOPIC_ID_REGEX,
)
from ..enums import LevelType, RelationshipType, TopicType
from ..exceptions import ParsingException
from ..nodes import Level, Relationship, SpecTopic
from ..utils import replace_escape_chars
from .state import ParserState


def create_relationships(
    source_id: str, relationship_type: RelationshipType, entries: Iterable[str], line_number: Optional[int] = None
) -> List[Relationship]:
    """Turn the entries of a relationship attribute list into unresolved Relationship objects.

    An entry is either a bare topic/target ID or ``Title [ID]``.
    """
    relationships = []
    for entry in entries:
        entry = entry.strip()
        if RELATION_ID_REGEX.match(entry):
            relationships.append(
                Relationship(
                    source_id=source_id,
                    relationship_type=relationship_type,
                    target_ref=_normalise_id(entry),
                    line_number=line_number,
                )
            )
            continue

        match = RELATION_ID_LONG_REGEX.match(entry)
        if match:
            title = replace_escape_chars(match.group("title").strip())
            relationships.append(
                Relationship(
                    source_id=source_id,
                    relationship_type=relationship_type,
                    target_ref=_normalise_id(match.group("id")),
                    title=title or None,
                    line_number=line_number,
                )
            )
            continue

        if len(RELATION_ID_ANYWHERE_REGEX.findall(entry)) > 1:
            raise ParsingException(ERROR_MISSING_SEPARATOR_MSG.format(separator=","))
        raise ParsingException(ERROR_INVALID_RELATIONSHIP_FORMAT_MSG.format(kind=relationship_type.display_name))

    return relationships


def _normalise_id(value: str) -> str:
    return re.sub(r"\s", "", value)


class RelationshipResolver:
    """Attaches a target node to every declared relationship.

    Nothing here raises: references that cannot be resolved, or that match more than one
    topic, are pointed at a placeholder topic so a later validation step can report them.
    """

    def __init__(self, state: ParserState):
        self.state = state

    def resolve(self) -> None:
        self._assign_duplicate_targets()

        for relationship in self._all_relationships():
            self._resolve_relationship(relationship)

        self._build_relationship_table()

    def _all_relationships(self) -> Iterator[Relationship]:
        for relationships in self.state.level_relationships.values():
            yield from relationships
        for relationships in self.state.topic_relationships.values():
            yield from relationships

    def _assign_duplicate_targets(self) -> None:
        """Give new topics that have duplicates a target ID when other topics refer to them.

        Without one, a reference to ``N1`` could not be told apart from a reference to one of
        its ``X1`` duplicates when the content is later assembled.
        """
        duplicated = {
            "N" + topic.id[1:]
            for topic in self.state.spec_topics.values()
            if topic.classification is TopicType.DUPLICATE
        }
        if not duplicated:
            return

        for relationship in self._all_relationships():
            topic = self.state.spec_topics.get(relationship.target_ref)
            if relationship.target_ref not in duplicated or topic is None:
                continue
            if topic.target_id is None and topic.unique_id != relationship.source_id:
                topic.target_id = self._new_target_id(topic)
                self.state.target_topics[topic.target_id] = topic
                self.state.error_logger.debug(
                    f"Assigned target {topic.target_id} to duplicated topic {topic.unique_id}", relationship.line_number
                )

    def _new_target_id(self, topic: SpecTopic) -> str:
        target_id = f"T-{topic.unique_id}"
        suffix = 1
        while self.state.has_target(target_id):
            target_id = f"T-{topic.unique_id}-{suffix}"
            suffix += 1
        return target_id

    def _resolve_relationship(self, relationship: Relationship) -> None:
        if relationship.target is not None:
            return

        ref = relationship.target_ref
        target: Optional[Union[SpecTopic, Level]] = None

        if TARGET_REGEX.match(ref):
            target = self.state.target_topics.get(ref)
            if target is None:
                target = self.state.target_levels.get(ref)
        elif UNIQUE_NEW_TOPIC_ID_REGEX.match(ref):
            target = self.state.spec_topics.get(ref)
        elif not ref.upper().startswith("X"):
            matches = self._suffix_matches(ref)
            relationship.match_count = len(matches)
            if len(matches) == 1:
                target = matches[0]
            elif len(matches) > 1:
                self.state.error_logger.info(
                    f"{ref} matches {len(matches)} topics, a target ID is needed to tell them apart",
                    relationship.line_number,
                )

        if target is None:
            target = SpecTopic.dummy(ref)
        relationship.target = target
        relationship.is_self_reference = getattr(target, "unique_id", None) == relationship.source_id

    def _suffix_matches(self, ref: str) -> List[SpecTopic]:
        regex = re.compile(rf"^[\w\d]+-{re.escape(ref)}$")
        return [topic for unique_id, topic in self.state.spec_topics.items() if regex.match(unique_id)]

    def _build_relationship_table(self) -> None:
        table = self.state.content_spec.relationship_table
        table.clear()
        for relationship in self._all_relationships():
            table.setdefault(relationship.source_id, []).append(relationship)


def process_levels(state: ParserState) -> None:
    """Link the topics directly inside each PROCESS container with NEXT and PREVIOUS relationships."""
    for level in state.base_level.iter_levels():
        if level.level_type is not LevelType.PROCESS:
            continue

        topics = level.spec_topics
        for previous_topic, next_topic in zip(topics, topics[1:]):
            forward = Relationship(
                source_id=previous_topic.unique_id,
                relationship_type=RelationshipType.NEXT,
                target_ref=next_topic.unique_id,
                line_number=previous_topic.line_number,
                target=next_topic,
                implicit=True,
            )
            backward = Relationship(
                source_id=next_topic.unique_id,
                relationship_type=RelationshipType.PREVIOUS,
                target_ref=previous_topic.unique_id,
                line_number=next_topic.line_number,
                target=previous_topic,
                implicit=True,
            )
            state.add_topic_relationship(previous_topic, forward)
            state.add_topic_relationship(next_topic, backward)
