import pathlib

import pytest

from contentspec import ContentSpecParser, ErrorLogger
from contentspec.parsing.lines import LineBuffer
from contentspec.parsing.state import ParserState


@pytest.fixture
def top_dir() -> pathlib.Path:
    return pathlib.Path(__file__).resolve().absolute().parent


@pytest.fixture
def files_dir(top_dir):
    return (top_dir / ".." / "files").resolve().absolute()


@pytest.fixture
def specs_dir(files_dir):
    return files_dir / "specs"


@pytest.fixture
def parser() -> ContentSpecParser:
    return ContentSpecParser()


@pytest.fixture
def make_state():
    """Build a fresh parser state whose buffer holds the lines that follow the line under test."""

    def _make_state(following: str = "", line_number: int = 1) -> ParserState:
        state = ParserState(lines=LineBuffer(following.splitlines()), error_logger=ErrorLogger())
        state.line_number = line_number
        return state

    return _make_state
