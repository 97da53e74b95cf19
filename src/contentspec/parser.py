from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .config import ParserConfig, logger
from .constants import (
    BLANK_LINE_REGEX,
    CHECKSUM_KEY,
    COMMENT_REGEX,
    COMMON_CONTENT_REGEX,
    ERROR_EMPTY_BRACKETS_MSG,
    ERROR_INCORRECT_EDITED_MODE_MSG,
    ERROR_INCORRECT_INDENTATION_MSG,
    ERROR_INCORRECT_NEW_MODE_MSG,
    ERROR_RELATIONSHIP_BASE_LEVEL_MSG,
    ID_KEY,
    INITIAL_CONTENT_REGEX,
    LEVEL_REGEX,
    METADATA_LINE_REGEX,
    TITLE_KEY,
)
from .diagnostics import Diagnostic, ErrorLogger
from .enums import ParsingMode, RelationshipType, Severity
from .exceptions import IndentationException, ParsingException
from .nodes import Comment, ContentSpec, TextNode
from .parsing.classifier import split_inline_relationships
from .parsing.levels import create_empty_level, parse_level
from .parsing.lines import LineBuffer
from .parsing.metadata import parse_metadata
from .parsing.options import add_options
from .parsing.relationships import RelationshipResolver, process_levels
from .parsing.state import ParserState
from .parsing.topics import parse_common_content, parse_topic
from .parsing.variables import get_line_variables


@dataclass
class ParserResults:
    success: bool
    content_spec: Optional[ContentSpec]
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.WARNING]


class ContentSpecParser:
    """Parses content specification text into a ContentSpec tree.

    Line level problems are reported to the error logger and parsing carries on with the next
    line. Indentation problems stop the parse and no document is returned. Each call to
    :meth:`parse` works on its own state and its own error logger, so one parser can be reused
    for many documents, also from several threads at once. When an ``error_logger`` is given it
    receives the diagnostics of every finished parse.
    """

    def __init__(self, config: ParserConfig = None, error_logger: ErrorLogger = None):
        self.config = config or ParserConfig()
        self.error_logger = error_logger

    def parse(self, text: str, mode: ParsingMode = ParsingMode.EITHER, process_processes: bool = None) -> ParserResults:
        if process_processes is None:
            process_processes = self.config.process_processes

        state = ParserState(
            lines=LineBuffer.from_text(text),
            error_logger=ErrorLogger(verbosity=self.config.verbosity),
            indentation_size=self.config.indentation_size,
        )
        results = self._parse_document(state, mode, process_processes)

        if self.error_logger is not None:
            self.error_logger.extend(results.diagnostics)
        return results

    def _parse_document(self, state: ParserState, mode: ParsingMode, process_processes: bool) -> ParserResults:
        error_logger = state.error_logger
        if not self._check_parsing_mode(state, mode):
            return ParserResults(False, None, list(error_logger.diagnostics))

        try:
            while state.lines:
                line = state.lines.poll()
                state.line_number = state.lines.line_number
                self._parse_line(state, line)
        except IndentationException as e:
            error_logger.error(str(e), state.line_number, line)
            return ParserResults(False, None, list(error_logger.diagnostics))

        if process_processes:
            process_levels(state)
        RelationshipResolver(state).resolve()

        success = not error_logger.has_errors
        logger.debug(f"Parsed {state.line_number} lines, success={success}")
        return ParserResults(success, state.content_spec, list(error_logger.diagnostics))

    def _check_parsing_mode(self, state: ParserState, mode: ParsingMode) -> bool:
        """Check that the header of the document fits the requested mode."""
        if mode is ParsingMode.EITHER:
            return True

        header = [
            (i, line.strip())
            for i, line in enumerate(state.lines.remaining(), start=1)
            if not BLANK_LINE_REGEX.match(line) and not COMMENT_REGEX.match(line)
        ][:2]
        first_line_number, first_line = header[0] if header else (None, None)
        key = _metadata_key(first_line)
        if mode is ParsingMode.NEW and key != TITLE_KEY.upper():
            state.error_logger.error(ERROR_INCORRECT_NEW_MODE_MSG, first_line_number, first_line)
            return False
        if mode is ParsingMode.EDITED:
            second_key = _metadata_key(header[1][1]) if len(header) > 1 else None
            if key != ID_KEY and not (key == CHECKSUM_KEY and second_key == ID_KEY):
                state.error_logger.error(ERROR_INCORRECT_EDITED_MODE_MSG, first_line_number, first_line)
                return False
        return True

    def _parse_line(self, state: ParserState, line: str) -> None:
        if BLANK_LINE_REGEX.match(line):
            self._add_comment(state, TextNode(line_number=state.line_number))
            return
        if COMMENT_REGEX.match(line):
            self._add_comment(state, Comment(text=line.strip(), line_number=state.line_number))
            return

        self._update_indentation(state, line)

        stripped = line.strip()
        upper = stripped.upper()
        try:
            if state.at_base_level and METADATA_LINE_REGEX.match(stripped):
                parse_metadata(state, stripped)
            elif COMMON_CONTENT_REGEX.match(stripped):
                state.current_level.append_child(parse_common_content(state, stripped))
            elif INITIAL_CONTENT_REGEX.match(upper) or LEVEL_REGEX.match(upper):
                self._parse_level_line(state, stripped, line)
            elif state.at_base_level and stripped.startswith("["):
                self._parse_global_options(state, stripped, line)
            else:
                state.current_level.append_child(parse_topic(state, stripped))
        except IndentationException:
            raise
        except ParsingException as e:
            state.error_logger.error(str(e), state.line_number, line)

    @staticmethod
    def _add_comment(state: ParserState, node) -> None:
        if state.at_base_level:
            state.content_spec.append_comment(node)
        else:
            state.current_level.append_child(node)

    @staticmethod
    def _update_indentation(state: ParserState, line: str) -> None:
        """Move the current container up to the level the line is indented at.

        Raises an IndentationException when the indentation is not a whole number of levels, or
        is deeper than the current container allows.
        """
        width = len(line) - len(line.lstrip())
        if width % state.indentation_size != 0:
            raise IndentationException(ERROR_INCORRECT_INDENTATION_MSG)

        level = width // state.indentation_size
        if level > state.indentation_level:
            raise IndentationException(ERROR_INCORRECT_INDENTATION_MSG)

        for _ in range(state.indentation_level - level):
            state.current_level = state.current_level.parent
        state.indentation_level = level

    def _parse_level_line(self, state: ParserState, stripped: str, line: str) -> None:
        line_number = state.line_number
        try:
            level = parse_level(state, stripped, line_number)
        except ParsingException as e:
            state.error_logger.error(str(e), line_number, line)
            level = create_empty_level(stripped, line_number)
            state.levels[level.unique_id] = level

        state.current_level.append_child(level)
        state.current_level = level
        state.indentation_level += 1

    def _parse_global_options(self, state: ParserState, stripped: str, line: str) -> None:
        variables = get_line_variables(state, stripped)
        if any(t is not RelationshipType.NONE for t in variables.types):
            raise ParsingException(ERROR_RELATIONSHIP_BASE_LEVEL_MSG)

        for entries in variables.of_type(RelationshipType.NONE):
            if not entries:
                state.error_logger.warn(ERROR_EMPTY_BRACKETS_MSG, state.line_number, line)
                continue
            options, inline_sets = split_inline_relationships(entries)
            if inline_sets:
                raise ParsingException(ERROR_RELATIONSHIP_BASE_LEVEL_MSG)
            add_options(state.base_level, options)


def parse_content_spec(text: str, mode: ParsingMode = ParsingMode.EITHER, **kwargs) -> ParserResults:
    """Parse ``text`` with a fresh parser. Keyword arguments are passed to :class:`ParserConfig`."""
    return ContentSpecParser(ParserConfig(**kwargs)).parse(text, mode)


def _metadata_key(line: Optional[str]) -> Optional[str]:
    if line is None or "=" not in line:
        return None
    return line.split("=", 1)[0].strip().upper()
