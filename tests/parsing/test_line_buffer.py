from contentspec.parsing.lines import LineBuffer


def test_peek_does_not_consume():
    lines = LineBuffer(["first", "second"])

    assert lines.peek() == "first"
    assert lines.peek() == "first"
    assert len(lines) == 2
    assert lines.line_number == 0


def test_poll_consumes_and_counts_lines():
    lines = LineBuffer.from_text("first\nsecond\n")

    assert lines.poll() == "first"
    assert lines.line_number == 1
    assert lines.poll() == "second"
    assert lines.line_number == 2
    assert lines.poll() is None
    assert lines.peek() is None
    assert lines.line_number == 2, "Polling an empty buffer must not advance the line counter"


def test_add_line_appends_to_the_end():
    lines = LineBuffer()
    lines.add_line("a")
    lines.add_line("b")

    assert lines.remaining() == ["a", "b"]
    assert bool(lines)
    lines.poll()
    lines.poll()
    assert not lines
