from .config import ParserConfig
from .diagnostics import Diagnostic, ErrorLogger
from .enums import LevelType, ParsingMode, RelationshipType, Severity, TopicType
from .exceptions import IndentationException, ParsingException
from .nodes import ContentSpec, Level, Relationship, SpecTopic
from .parser import ContentSpecParser, ParserResults, parse_content_spec

__all__ = [
    "ContentSpec",
    "ContentSpecParser",
    "Diagnostic",
    "ErrorLogger",
    "IndentationException",
    "Level",
    "LevelType",
    "ParserConfig",
    "ParserResults",
    "ParsingException",
    "ParsingMode",
    "Relationship",
    "RelationshipType",
    "Severity",
    "SpecTopic",
    "TopicType",
    "parse_content_spec",
]
