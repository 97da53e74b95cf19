from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from ..config import DEFAULT_INDENTATION_SIZE
from ..diagnostics import ErrorLogger
from ..nodes import ContentSpec, Level, Relationship, SpecTopic
from .lines import LineBuffer


@dataclass
class ParserState:
    """Everything a single parse run mutates. A fresh state is created for every document."""

    lines: LineBuffer
    error_logger: ErrorLogger
    content_spec: ContentSpec = field(default_factory=ContentSpec)
    indentation_size: int = DEFAULT_INDENTATION_SIZE
    indentation_level: int = 0
    line_number: int = 0
    current_level: Optional[Level] = None

    # unique id -> topic
    spec_topics: Dict[str, SpecTopic] = field(default_factory=dict)
    # target id -> node
    target_topics: Dict[str, SpecTopic] = field(default_factory=dict)
    target_levels: Dict[str, Level] = field(default_factory=dict)
    external_target_levels: Dict[str, Level] = field(default_factory=dict)
    # unique id -> level
    levels: Dict[str, Level] = field(default_factory=dict)
    # source unique id -> declared relationships
    level_relationships: Dict[str, List[Relationship]] = field(default_factory=dict)
    topic_relationships: Dict[str, List[Relationship]] = field(default_factory=dict)
    metadata_keys: Set[str] = field(default_factory=set)

    def __post_init__(self):
        if self.current_level is None:
            self.current_level = self.content_spec.base_level

    @property
    def base_level(self) -> Level:
        return self.content_spec.base_level

    @property
    def at_base_level(self) -> bool:
        return self.current_level is self.content_spec.base_level

    def has_target(self, target_id: str) -> bool:
        return target_id in self.target_topics or target_id in self.target_levels

    def add_level_relationship(self, level: Level, relationship: Relationship) -> None:
        level.add_relationship(relationship)
        self.level_relationships.setdefault(relationship.source_id, []).append(relationship)

    def add_topic_relationship(self, topic: SpecTopic, relationship: Relationship) -> None:
        topic.add_relationship(relationship)
        self.topic_relationships.setdefault(relationship.source_id, []).append(relationship)
