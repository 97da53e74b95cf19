"""Parsing ``key = value`` metadata lines at the top level of a specification."""

from __future__ import annotations

from typing import List, Optional

from ..constants import (
    ABSTRACT_KEYS,
    DEBUG_KEY,
    ERROR_DUPLICATE_METADATA_MSG,
    ERROR_INVALID_FILE_MSG,
    ERROR_INVALID_INJECTION_MSG,
    ERROR_INVALID_METADATA_FORMAT_MSG,
    ERROR_INVALID_MULTILINE_METADATA_MSG,
    ERROR_INVALID_NUMBER_MSG,
    ERROR_MISSING_BRACKETS_MSG,
    ERROR_MISSING_OPENING_BRACKET_MSG,
    FILE_ID_LONG_REGEX,
    FILE_ID_REGEX,
    FILES_KEYS,
    INLINE_INJECTION_KEY,
    MULTILINE_KEY_REGEX,
    SPACES_KEY,
    SPEC_TOPIC_KEYS,
    WARN_DEBUG_IGNORE_MSG,
)
from ..config import DEFAULT_INDENTATION_SIZE
from ..exceptions import InvalidKeyValueException, ParsingException
from ..nodes import AdditionalFile, FileList, KeyValueNode, SpecNode
from ..utils import find_unescaped, get_and_validate_key_value_pair, replace_escape_chars, to_int
from .state import ParserState
from .topics import parse_topic
from .variables import find_variable_sets, get_line_variables


def _key_in(key: str, keys) -> bool:
    return key.lower() in (k.lower() for k in keys)


def is_spec_topic_metadata(key: str, value: str) -> bool:
    """Whether a metadata entry is really a topic, such as a legal notice given by topic ID."""
    if _key_in(key, SPEC_TOPIC_KEYS):
        return True
    return _key_in(key, ABSTRACT_KEYS) and value.startswith("[")


def parse_metadata(state: ParserState, line: str, line_number: Optional[int] = None) -> Optional[SpecNode]:
    """Parse a metadata line, add the resulting node to the document and return it.

    Returns None for settings that are consumed by the parser rather than stored, such as an
    ignored ``Debug`` value.
    """
    line_number = line_number if line_number is not None else state.line_number
    try:
        key, value = get_and_validate_key_value_pair(line)
    except InvalidKeyValueException:
        raise ParsingException(ERROR_INVALID_METADATA_FORMAT_MSG)

    if key.lower() in state.metadata_keys:
        raise ParsingException(ERROR_DUPLICATE_METADATA_MSG.format(key=key))
    state.metadata_keys.add(key.lower())

    node = _parse_value(state, key, value, line, line_number)
    if node is None:
        return None

    state.content_spec.append_node(node)
    return node


def _parse_value(state: ParserState, key: str, value: str, line: str, line_number: int) -> Optional[SpecNode]:
    upper_key = key.upper()

    if upper_key == SPACES_KEY.upper():
        spaces = to_int(value)
        if spaces is None:
            raise ParsingException(ERROR_INVALID_NUMBER_MSG.format(key=key))
        state.indentation_size = spaces if spaces > 0 else DEFAULT_INDENTATION_SIZE
        return KeyValueNode(key=key, value=str(state.indentation_size), line_number=line_number, text=line)

    if upper_key == DEBUG_KEY.upper():
        if value not in ("0", "1", "2"):
            state.error_logger.warn(WARN_DEBUG_IGNORE_MSG.format(value=value), line_number, line)
            return None
        state.error_logger.verbosity = int(value)
        return KeyValueNode(key=key, value=value, line_number=line_number, text=line)

    if upper_key == INLINE_INJECTION_KEY.upper():
        parse_inline_injection(value)
        return KeyValueNode(key=key, value=value, line_number=line_number, text=line)

    if _key_in(key, FILES_KEYS):
        return FileList(key=key, files=parse_files(state, value), line_number=line_number, text=line)

    if is_spec_topic_metadata(key, value):
        return _parse_spec_topic(state, key, value, line, line_number)

    if MULTILINE_KEY_REGEX.match(key) and value.startswith("["):
        value = _read_multiline_value(state, value)[1:-1]

    return KeyValueNode(key=key, value=replace_escape_chars(value), line_number=line_number, text=line)


def parse_inline_injection(value: str) -> List[str]:
    """Validate an ``Inline Injection`` value and return the topic types it is restricted to."""
    bracket = find_unescaped(value, "[")
    setting = value if bracket == -1 else value[:bracket]
    if setting.strip().lower() not in ("on", "off"):
        raise ParsingException(ERROR_INVALID_INJECTION_MSG)
    if bracket == -1:
        return []

    types = []
    for variable_set in find_variable_sets(value[bracket:]):
        types.extend(entry.strip() for entry in variable_set.contents.split(",") if entry.strip())
    return types


def _read_multiline_value(state: ParserState, value: str) -> str:
    """Extend a bracketed value over following lines until its closing bracket.

    The value may not contain a second opening bracket and must end at the closing one.
    """
    while find_unescaped(value, "]") == -1:
        next_line = state.lines.poll()
        if next_line is None:
            raise ParsingException(ERROR_INVALID_MULTILINE_METADATA_MSG)
        value += "\n" + next_line

    end = find_unescaped(value, "]")
    second_start = find_unescaped(value, "[", 1)
    if second_start != -1 and second_start < end:
        raise ParsingException(ERROR_INVALID_MULTILINE_METADATA_MSG)
    if value[end + 1 :].strip():
        raise ParsingException(ERROR_INVALID_MULTILINE_METADATA_MSG)
    return value[: end + 1]


def parse_files(state: ParserState, value: str) -> List[AdditionalFile]:
    """Parse ``[123, Title [456], Other [789, rev: 2]]``. The list may span several lines."""
    if not value.startswith("["):
        raise ParsingException(ERROR_MISSING_BRACKETS_MSG)

    variables = get_line_variables(state, value, ignore_types=True)
    files = []
    for _, entries in variables.sets:
        for entry in entries:
            entry = entry.strip()
            if FILE_ID_REGEX.match(entry):
                files.append(AdditionalFile(file_id=int(entry)))
                continue
            match = FILE_ID_LONG_REGEX.match(entry)
            if not match:
                raise ParsingException(ERROR_INVALID_FILE_MSG)
            revision = match.group("rev")
            files.append(
                AdditionalFile(
                    file_id=int(match.group("id")),
                    title=replace_escape_chars(match.group("title").strip()) or None,
                    revision=int(revision) if revision is not None else None,
                )
            )
    return files


def _parse_spec_topic(state: ParserState, key: str, value: str, line: str, line_number: int) -> KeyValueNode:
    if find_unescaped(value, "[") == -1:
        if find_unescaped(value, "]") == -1:
            raise ParsingException(ERROR_MISSING_BRACKETS_MSG)
        raise ParsingException(ERROR_MISSING_OPENING_BRACKET_MSG)

    topic = parse_topic(state, f"{key} {value}", line_number, default_type=key)
    if topic.type is None:
        topic.type = key
    return KeyValueNode(key=key, value=value, topic=topic, line_number=line_number, text=line)
