from __future__ import annotations

from enum import Enum


class LevelType(str, Enum):
    BASE = "Base"
    CHAPTER = "Chapter"
    SECTION = "Section"
    APPENDIX = "Appendix"
    PART = "Part"
    PREFACE = "Preface"
    PROCESS = "Process"
    INITIAL_CONTENT = "Initial Text"

    @classmethod
    def from_keyword(cls, keyword: str) -> "LevelType":
        keyword = keyword.strip().upper()
        if keyword == "INITIAL TEXT":
            return cls.INITIAL_CONTENT
        for level_type in cls:
            if level_type is not cls.BASE and level_type.value.upper() == keyword:
                return level_type
        raise ValueError(f"Unknown level keyword: {keyword}")


class TopicType(str, Enum):
    """How a topic reference relates to topics in the content store."""

    NEW = "new"
    EXISTING = "existing"
    CLONED = "cloned"
    DUPLICATE = "duplicate"
    CLONED_DUPLICATE = "cloned_duplicate"


class RelationshipType(str, Enum):
    """Kind of a bracketed attribute list, or of a declared relationship."""

    NONE = "none"
    REFER_TO = "refer_to"
    PREREQUISITE = "prerequisite"
    LINKLIST = "link_list"
    NEXT = "next"
    PREVIOUS = "previous"
    TARGET = "target"
    EXTERNAL_TARGET = "external_target"
    EXTERNAL_CONTENT_SPEC = "external_content_spec"

    @property
    def is_relationship(self) -> bool:
        return self in (
            RelationshipType.REFER_TO,
            RelationshipType.PREREQUISITE,
            RelationshipType.LINKLIST,
            RelationshipType.NEXT,
            RelationshipType.PREVIOUS,
        )

    @property
    def display_name(self) -> str:
        return {
            RelationshipType.REFER_TO: "Refers-To",
            RelationshipType.PREREQUISITE: "Prerequisite",
            RelationshipType.LINKLIST: "Link-List",
            RelationshipType.NEXT: "Next",
            RelationshipType.PREVIOUS: "Previous",
            RelationshipType.TARGET: "Target",
            RelationshipType.EXTERNAL_TARGET: "External Target",
            RelationshipType.EXTERNAL_CONTENT_SPEC: "External Content Spec",
        }.get(self, "Options")

    @property
    def short_name(self) -> str:
        return {
            RelationshipType.REFER_TO: "R",
            RelationshipType.PREREQUISITE: "P",
            RelationshipType.LINKLIST: "L",
            RelationshipType.NEXT: "NEXT",
            RelationshipType.PREVIOUS: "PREV",
        }.get(self, "")


class ParsingMode(str, Enum):
    NEW = "new"
    EDITED = "edited"
    EITHER = "either"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"
