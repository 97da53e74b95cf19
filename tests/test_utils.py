import pytest

from contentspec.exceptions import InvalidKeyValueException
from contentspec.utils import (
    clean_xml_character_references,
    ends_with_unescaped,
    find_unescaped,
    get_and_validate_key_value_pair,
    is_escaped,
    replace_escape_chars,
    split_attributes,
    to_int,
)


def test_escapes():
    assert is_escaped(r"a\[", 2)
    assert not is_escaped(r"a\\[", 3)
    assert find_unescaped(r"\[x[", "[") == 3
    assert replace_escape_chars(r"\[a\]\,\=\#") == "[a],=#"


def test_character_references():
    assert clean_xml_character_references("Don&#39;t &#x41;") == "Don't A"
    assert clean_xml_character_references("&#x110000;") == "&#x110000;"


@pytest.mark.parametrize(
    "text,expected",
    [("4", 4), (" -3 ", -3), ("--2", None), ("²", None), ("1_000", None), ("2.5", None), ("", None), (None, None)],
)
def test_to_int(text, expected):
    assert to_int(text) == expected


def test_key_value_pair():
    assert get_and_validate_key_value_pair("Title =  A = B ") == ("Title", "A = B")
    assert get_and_validate_key_value_pair(r"Key\=x = v") == (r"Key\=x", "v")


@pytest.mark.parametrize("text", ["Title =", "= value", "no separator"])
def test_invalid_key_value_pair(text):
    with pytest.raises(InvalidKeyValueException):
        get_and_validate_key_value_pair(text)


def test_split_attributes_respects_nesting_and_escapes():
    entries = split_attributes(r"a, Title [T1, T2], Area: (b, c), d\, e")

    assert entries == ["a", "Title [T1, T2]", "Area: (b, c)", r"d\, e"]


def test_split_attributes_keeps_empty_entries():
    assert split_attributes("a,,b") == ["a", "", "b"]


def test_ends_with_unescaped():
    assert ends_with_unescaped("a, ", ",")
    assert not ends_with_unescaped("a\\,", ",")
