"""Decides what a bracketed attribute list, or a single attribute, denotes."""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from ..constants import (
    ERROR_MISSING_ATTRIBUTES_MSG,
    EXTERNAL_CSP_REGEX,
    EXTERNAL_TARGET_REGEX,
    LINK_LIST_REGEX,
    NEXT_REGEX,
    PREREQUISITE_REGEX,
    PREV_REGEX,
    RELATED_REGEX,
    RELATION_ID_LONG_REGEX,
    RELATION_ID_REGEX,
    TARGET_REGEX,
)
from ..enums import RelationshipType
from ..exceptions import ParsingException

# First match wins
CLASSIFIERS: Tuple[Tuple[re.Pattern, RelationshipType], ...] = (
    (RELATED_REGEX, RelationshipType.REFER_TO),
    (PREREQUISITE_REGEX, RelationshipType.PREREQUISITE),
    (LINK_LIST_REGEX, RelationshipType.LINKLIST),
    (NEXT_REGEX, RelationshipType.NEXT),
    (PREV_REGEX, RelationshipType.PREVIOUS),
    (TARGET_REGEX, RelationshipType.TARGET),
    (EXTERNAL_TARGET_REGEX, RelationshipType.EXTERNAL_TARGET),
    (EXTERNAL_CSP_REGEX, RelationshipType.EXTERNAL_CONTENT_SPEC),
)


def get_type(text: str) -> RelationshipType:
    """Classify the raw contents of a bracketed attribute list."""
    value = text.strip().upper()
    for regex, relationship_type in CLASSIFIERS:
        if regex.match(value):
            return relationship_type
    return RelationshipType.NONE


def strip_relationship_prefix(text: str) -> str:
    """Return what follows the ``R:``/``P:``/``L:``/``NEXT:``/``PREV:`` keyword."""
    return text[text.index(":") + 1 :]


def split_inline_relationships(entries: List[str]) -> Tuple[List[str], List[Tuple[RelationshipType, List[str]]]]:
    """Separate relationship and target declarations written inside a plain option list.

    ``[Concept, T1, R: T2, T3, Tag]`` yields the options ``Concept`` and ``Tag``, a target ``T1``
    and a refer-to relationship on ``T2`` and ``T3``. A relationship keyword takes every following
    entry that looks like a topic or target ID.
    """
    options: List[str] = []
    sets: List[Tuple[RelationshipType, List[str]]] = []
    current: Optional[List[str]] = None

    for entry in entries:
        entry_type = get_type(entry)
        if current is not None and not entry_type.is_relationship and (
            RELATION_ID_REGEX.match(entry) or RELATION_ID_LONG_REGEX.match(entry)
        ):
            current.append(entry)
        elif entry_type.is_relationship:
            current = []
            sets.append((entry_type, current))
            remainder = strip_relationship_prefix(entry).strip()
            if remainder:
                current.append(remainder)
        elif entry_type in (RelationshipType.TARGET, RelationshipType.EXTERNAL_TARGET):
            current = None
            sets.append((entry_type, [re.sub(r"\s", "", entry)]))
        elif entry_type is RelationshipType.EXTERNAL_CONTENT_SPEC:
            current = None
            sets.append((entry_type, [entry.strip()]))
        else:
            current = None
            options.append(entry)

    for entry_type, items in sets:
        if not items:
            raise ParsingException(ERROR_MISSING_ATTRIBUTES_MSG)

    return options, sets
