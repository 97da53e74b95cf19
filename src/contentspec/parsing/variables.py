"""Finding bracketed attribute lists ("variable sets") in a line and splitting them into attributes."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Tuple

from ..constants import (
    CONTINUATION_SET_REGEX,
    ERROR_DUPLICATED_RELATIONSHIP_TYPE_MSG,
    ERROR_MISSING_ATTRIBUTES_MSG,
    ERROR_MISSING_ENDING_BRACKET_MSG,
    ERROR_MISSING_OPENING_BRACKET_MSG,
    ERROR_MISSING_SEPARATOR_MSG,
)
from ..enums import RelationshipType
from ..exceptions import ParsingException
from ..utils import ends_with_unescaped, find_unescaped, is_escaped, split_attributes
from .classifier import get_type, strip_relationship_prefix

if TYPE_CHECKING:
    from .state import ParserState


@dataclass
class VariableSet:
    """A delimited attribute list. ``end`` is None while the closing delimiter has not been found."""

    start: int
    end: Optional[int]
    contents: str

    @property
    def is_closed(self) -> bool:
        return self.end is not None


@dataclass
class LineVariables:
    """The attribute lists of a (possibly multi-line) statement, in the order they were written."""

    line: str
    sets: List[Tuple[RelationshipType, List[str]]] = field(default_factory=list)

    def of_type(self, relationship_type: RelationshipType) -> List[List[str]]:
        return [entries for set_type, entries in self.sets if set_type is relationship_type]

    def first(self, relationship_type: RelationshipType) -> Optional[List[str]]:
        matches = self.of_type(relationship_type)
        return matches[0] if matches else None

    def has(self, relationship_type: RelationshipType) -> bool:
        return any(set_type is relationship_type for set_type, _ in self.sets)

    @property
    def types(self) -> List[RelationshipType]:
        return [set_type for set_type, _ in self.sets]

    def __len__(self) -> int:
        return len(self.sets)


def find_variable_set(text: str, start_delim: str = "[", end_delim: str = "]", start_pos: int = 0) -> Optional[VariableSet]:
    """Find the first unescaped ``start_delim`` at or after ``start_pos`` and its matching ``end_delim``.

    Nested pairs of the same delimiters are skipped over by tracking the nesting depth. Returns
    None when there is no opening delimiter. When the closing delimiter is missing the returned
    set has ``end`` set to None and holds everything after the opening delimiter.
    """
    start = find_unescaped(text, start_delim, start_pos)
    if start == -1:
        return None

    depth = 0
    for i in range(start, len(text)):
        char = text[i]
        if char not in (start_delim, end_delim) or is_escaped(text, i):
            continue
        if char == start_delim:
            depth += 1
        else:
            depth -= 1
            if depth == 0:
                return VariableSet(start=start, end=i, contents=text[start + 1 : i])

    return VariableSet(start=start, end=None, contents=text[start + 1 :])


def find_variable_sets(text: str, start_delim: str = "[", end_delim: str = "]") -> List[VariableSet]:
    """Find every top level variable set in ``text``.

    Raises a ParsingException when a closing delimiter has no opening one, or when the last
    set is never closed.
    """
    variable_sets = []
    pos = 0
    while True:
        variable_set = find_variable_set(text, start_delim, end_delim, pos)
        stray_end = find_unescaped(text, end_delim, pos)
        if variable_set is None:
            if stray_end != -1:
                raise ParsingException(ERROR_MISSING_OPENING_BRACKET_MSG)
            break
        if stray_end != -1 and stray_end < variable_set.start:
            raise ParsingException(ERROR_MISSING_OPENING_BRACKET_MSG)
        if not variable_set.is_closed:
            raise ParsingException(ERROR_MISSING_ENDING_BRACKET_MSG)

        variable_sets.append(variable_set)
        pos = variable_set.end + 1

    return variable_sets


def has_unclosed_set(text: str, start_delim: str = "[", end_delim: str = "]") -> bool:
    pos = 0
    while True:
        variable_set = find_variable_set(text, start_delim, end_delim, pos)
        if variable_set is None:
            return False
        if not variable_set.is_closed:
            return True
        pos = variable_set.end + 1


def read_continuation_lines(state: "ParserState", line: str, start_delim: str = "[", end_delim: str = "]", separator: str = ",") -> str:
    """Pull following physical lines into ``line`` while the statement is visibly unfinished.

    A statement continues when an attribute list is still open, when it ends with a separator,
    or when the next line starts with a relationship or target attribute list.
    """
    while True:
        next_line = state.lines.peek()
        if next_line is None:
            return line

        unfinished = has_unclosed_set(line, start_delim, end_delim) or ends_with_unescaped(line, separator)
        continued = start_delim == "[" and CONTINUATION_SET_REGEX.match(next_line.strip().upper()) is not None
        if not (unfinished or continued):
            return line

        line += "\n" + state.lines.poll()


def split_relationship_entries(contents: str, separator: str = ",") -> List[str]:
    entries = split_attributes(contents, separator)
    for entry in entries:
        if "\n" in entry or _count_unescaped(entry, "[") > 1:
            raise ParsingException(ERROR_MISSING_SEPARATOR_MSG.format(separator=separator))
        if not entry:
            raise ParsingException(ERROR_MISSING_ATTRIBUTES_MSG)
    return entries


def split_option_entries(contents: str, separator: str = ",") -> List[str]:
    if not contents.strip():
        return []
    entries = split_attributes(contents, separator)
    if any(not entry for entry in entries):
        raise ParsingException(ERROR_MISSING_ATTRIBUTES_MSG)
    return entries


def _count_unescaped(text: str, char: str) -> int:
    return sum(1 for i, c in enumerate(text) if c == char and not is_escaped(text, i))


def parse_variable_set(contents: str, separator: str = ",") -> Tuple[RelationshipType, List[str]]:
    relationship_type = get_type(contents)
    if relationship_type.is_relationship:
        entries = split_relationship_entries(strip_relationship_prefix(contents), separator)
    elif relationship_type in (RelationshipType.TARGET, RelationshipType.EXTERNAL_TARGET):
        entries = [re.sub(r"\s", "", contents)]
    elif relationship_type is RelationshipType.EXTERNAL_CONTENT_SPEC:
        entries = [contents.strip()]
    else:
        entries = split_option_entries(contents, separator)
    return relationship_type, entries


def get_line_variables(
    state: "ParserState",
    line: str,
    start_delim: str = "[",
    end_delim: str = "]",
    separator: str = ",",
    ignore_types: bool = False,
    group_types: bool = False,
    read_ahead: bool = True,
) -> LineVariables:
    """Collect and classify every attribute list of a statement.

    When ``read_ahead`` is set the statement is first extended over following physical lines
    for as long as it is unfinished. The same attribute list kind may only appear once unless
    ``ignore_types`` is set; ``group_types`` allows several plain option lists.
    """
    if read_ahead:
        line = read_continuation_lines(state, line, start_delim, end_delim, separator)

    variables = LineVariables(line=line)
    for variable_set in find_variable_sets(line, start_delim, end_delim):
        relationship_type, entries = parse_variable_set(variable_set.contents, separator)
        if variables.has(relationship_type) and not ignore_types:
            if not (group_types and relationship_type is RelationshipType.NONE):
                raise ParsingException(ERROR_DUPLICATED_RELATIONSHIP_TYPE_MSG)
        variables.sets.append((relationship_type, entries))

    return variables
