from __future__ import annotations

import re
import sys
from typing import List, Optional, Tuple

from .exceptions import InvalidKeyValueException

ESCAPED_CHAR_REGEX = re.compile(r"\\([\[\]\(\),=#:\\])")
XML_CHAR_REF_REGEX = re.compile(r"&#(x[0-9a-fA-F]+|\d+);")
INTEGER_REGEX = re.compile(r"-?\d+")

_OPENERS = {"[": "]", "(": ")"}
_CLOSERS = {"]", ")"}


def is_escaped(text: str, index: int) -> bool:
    """Return True when the character at ``index`` is preceded by an odd number of backslashes."""
    backslashes = 0
    i = index - 1
    while i >= 0 and text[i] == "\\":
        backslashes += 1
        i -= 1
    return backslashes % 2 == 1


def find_unescaped(text: str, char: str, start: int = 0) -> int:
    index = text.find(char, start)
    while index != -1 and is_escaped(text, index):
        index = text.find(char, index + 1)
    return index


def replace_escape_chars(text: str) -> str:
    return ESCAPED_CHAR_REGEX.sub(r"\1", text)


def clean_xml_character_references(text: str) -> str:
    """Replace numeric XML character references such as ``&#39;`` with the character they encode."""

    def _replace(match: re.Match) -> str:
        ref = match.group(1)
        code = int(ref[1:], 16) if ref[0] in "xX" else int(ref)
        if code > sys.maxunicode:
            return match.group(0)
        return chr(code)

    return XML_CHAR_REF_REGEX.sub(_replace, text)


def get_and_validate_key_value_pair(text: str) -> Tuple[str, str]:
    """Split ``key = value`` at the first unescaped equals sign, trimming both halves."""
    index = find_unescaped(text, "=")
    if index == -1:
        raise InvalidKeyValueException(f"No '=' found in '{text}'")

    key = text[:index].strip()
    value = text[index + 1 :].strip()
    if not key or not value:
        raise InvalidKeyValueException(f"Empty key or value in '{text}'")

    return key, value


def split_attributes(text: str, separator: str = ",") -> List[str]:
    """Split an attribute list on unescaped separators that are not inside nested brackets or parentheses.

    Entries are returned trimmed; empty entries are kept so callers can report them.
    """
    entries = []
    depth = 0
    current = []
    for i, char in enumerate(text):
        if not is_escaped(text, i):
            if char in _OPENERS:
                depth += 1
            elif char in _CLOSERS and depth > 0:
                depth -= 1
            elif char == separator and depth == 0:
                entries.append("".join(current).strip())
                current = []
                continue
        current.append(char)

    entries.append("".join(current).strip())
    return entries


def ends_with_unescaped(text: str, char: str) -> bool:
    stripped = text.rstrip()
    return stripped.endswith(char) and not is_escaped(stripped, len(stripped) - 1)


def to_int(value: Optional[str]) -> Optional[int]:
    """``value`` as an integer, or None when it is not a plain, optionally negative, whole number."""
    if value is None or not INTEGER_REGEX.fullmatch(value.strip()):
        return None
    return int(value)
