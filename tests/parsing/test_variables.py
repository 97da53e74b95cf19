import pytest

from contentspec.enums import RelationshipType
from contentspec.exceptions import ParsingException
from contentspec.parsing.variables import find_variable_set, find_variable_sets, get_line_variables


def test_find_variable_set_returns_offsets_and_contents():
    variable_set = find_variable_set("Title [N1, Concept] [T1]")

    assert variable_set.start == 6
    assert variable_set.end == 18
    assert variable_set.contents == "N1, Concept"


def test_find_variable_set_skips_escaped_brackets():
    variable_set = find_variable_set(r"Title \[not\] [N1]")

    assert variable_set.start == 14
    assert variable_set.contents == "N1"


def test_find_variable_set_tracks_nesting():
    text = "[Tag, Title [T1], Other [T2]]"
    variable_set = find_variable_set(text)

    assert variable_set.end == len(text) - 1, "The nested closing brackets must not end the set"
    assert variable_set.contents == "Tag, Title [T1], Other [T2]"


def test_find_variable_set_reports_unterminated_set():
    variable_set = find_variable_set("Title [N1, Concept,")

    assert variable_set.end is None
    assert not variable_set.is_closed
    assert variable_set.contents == "N1, Concept,"


def test_find_variable_set_without_opening_delimiter():
    assert find_variable_set("Just a title") is None


def test_find_variable_set_with_parentheses():
    variable_set = find_variable_set("(a, (b), c)", "(", ")")

    assert variable_set.contents == "a, (b), c"


@pytest.mark.parametrize(
    "text,message",
    [
        ("Title N1]", "Missing opening bracket"),
        ("Title ] [N1]", "Missing opening bracket"),
        ("Title [N1", "Missing ending bracket"),
    ],
)
def test_find_variable_sets_rejects_unbalanced_brackets(text, message):
    with pytest.raises(ParsingException, match=message):
        find_variable_sets(text)


def test_multi_line_set_closing_three_lines_later(make_state):
    state = make_state("  Writer = A,\n  description = B,\n  Tag]")

    variables = get_line_variables(state, "Title [N1, Concept,")

    assert variables.line == "Title [N1, Concept,\n  Writer = A,\n  description = B,\n  Tag]"
    assert find_variable_set(variables.line).contents == "N1, Concept,\n  Writer = A,\n  description = B,\n  Tag"
    assert variables.first(RelationshipType.NONE) == ["N1", "Concept", "Writer = A", "description = B", "Tag"]
    assert state.lines.line_number == 3, "All three continuation lines should have been consumed"


def test_relationship_set_on_following_line_is_pulled_in(make_state):
    state = make_state("  [R: T1]\nNext [N2, Task]")

    variables = get_line_variables(state, "Title [N1, Concept]")

    assert variables.types == [RelationshipType.NONE, RelationshipType.REFER_TO]
    assert variables.first(RelationshipType.REFER_TO) == ["T1"]
    assert state.lines.peek() == "Next [N2, Task]"


def test_line_ending_with_separator_continues(make_state):
    state = make_state("[T1]")

    variables = get_line_variables(state, "Title [N1, Concept] [R: T2],")

    assert variables.has(RelationshipType.TARGET)


def test_duplicate_set_kinds_are_rejected(make_state):
    with pytest.raises(ParsingException, match="Duplicated bracket types found."):
        get_line_variables(make_state(), "Title [R: T1] [R: T2]")


def test_grouped_option_sets_are_allowed(make_state):
    variables = get_line_variables(make_state(), "Title [1234] [Tag]", group_types=True)

    assert variables.of_type(RelationshipType.NONE) == [["1234"], ["Tag"]]


def test_targets_have_whitespace_removed(make_state):
    variables = get_line_variables(make_state(), "Title [N1, Concept] [T- my_target]")

    assert variables.first(RelationshipType.TARGET) == ["T-my_target"]


def test_empty_attribute_is_reported(make_state):
    with pytest.raises(ParsingException, match="Missing attribute detected."):
        get_line_variables(make_state(), "Title [N1, , Concept]")


def test_relationship_entries_need_separators(make_state):
    with pytest.raises(ParsingException, match=r"Missing separator \(,\) detected."):
        get_line_variables(make_state(), "Title [N1, Concept] [R: One [T1] Two [T2]]")
