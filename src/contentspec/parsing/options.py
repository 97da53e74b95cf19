"""Applying plain option entries (tags, categories and ``key = value`` attributes) to a node."""

from __future__ import annotations

import re
from typing import Iterable

from ..constants import (
    ALL_TOPIC_ID_REGEX,
    ERROR_DUPLICATE_ATTRIBUTE_MSG,
    ERROR_DUPLICATE_TAG_MSG,
    ERROR_INVALID_ATTRIBUTE_MSG,
    ERROR_INVALID_CONDITION_MSG,
    ERROR_INVALID_TAG_FORMAT_MSG,
    ERROR_TOPIC_ID_IN_OPTIONS_MSG,
)
from ..exceptions import InvalidKeyValueException, ParsingException
from ..nodes import SpecNodeWithOptions
from ..utils import find_unescaped, get_and_validate_key_value_pair, replace_escape_chars
from .variables import find_variable_sets, split_option_entries

SINGLE_VALUE_ATTRIBUTES = {"DESCRIPTION": "description", "WRITER": "writer", "CONDITION": "condition"}


def add_options(node: SpecNodeWithOptions, entries: Iterable[str]) -> None:
    """Apply every option entry to ``node``, raising a ParsingException on the first invalid one."""
    for entry in entries:
        equals = find_unescaped(entry, "=")
        colon = find_unescaped(entry, ":")
        if equals != -1 and (colon == -1 or equals < colon):
            _add_attribute(node, entry)
        elif colon != -1:
            _add_category_tags(node, entry[:colon].strip(), entry[colon + 1 :].strip())
        else:
            if ALL_TOPIC_ID_REGEX.match(entry):
                raise ParsingException(ERROR_TOPIC_ID_IN_OPTIONS_MSG)
            _add_tag(node, replace_escape_chars(entry))


def _add_attribute(node: SpecNodeWithOptions, entry: str) -> None:
    try:
        key, value = get_and_validate_key_value_pair(entry)
    except InvalidKeyValueException:
        raise ParsingException(ERROR_INVALID_ATTRIBUTE_MSG.format(key=entry.split("=", 1)[0].strip()))

    value = replace_escape_chars(value)
    upper_key = key.upper()
    if upper_key in SINGLE_VALUE_ATTRIBUTES:
        attribute = SINGLE_VALUE_ATTRIBUTES[upper_key]
        if getattr(node, attribute) is not None:
            raise ParsingException(ERROR_DUPLICATE_ATTRIBUTE_MSG.format(key=key))
        if attribute == "condition":
            try:
                re.compile(value)
            except re.error:
                raise ParsingException(ERROR_INVALID_CONDITION_MSG.format(value=value))
        setattr(node, attribute, value)
    elif upper_key == "URL":
        node.source_urls.append(value)
    elif upper_key == "FIXED URL":
        if node.fixed_url is not None:
            raise ParsingException(ERROR_DUPLICATE_ATTRIBUTE_MSG.format(key=key))
        node.fixed_url = value
    else:
        raise ParsingException(ERROR_INVALID_ATTRIBUTE_MSG.format(key=key))


def _add_category_tags(node: SpecNodeWithOptions, category: str, tag_text: str) -> None:
    if not category or not tag_text:
        raise ParsingException(ERROR_INVALID_TAG_FORMAT_MSG)

    if tag_text.startswith("("):
        variable_sets = find_variable_sets(tag_text, "(", ")")
        if len(variable_sets) != 1 or variable_sets[0].end != len(tag_text) - 1:
            raise ParsingException(ERROR_INVALID_TAG_FORMAT_MSG)
        tags = split_option_entries(variable_sets[0].contents)
        if len(tags) < 2:
            raise ParsingException(ERROR_INVALID_TAG_FORMAT_MSG)
    else:
        tags = [tag_text]

    for tag in tags:
        _add_tag(node, replace_escape_chars(tag), replace_escape_chars(category))


def _add_tag(node: SpecNodeWithOptions, tag: str, category: str = None) -> None:
    if not node.add_tag(tag, category):
        raise ParsingException(ERROR_DUPLICATE_TAG_MSG.format(tag=tag))
