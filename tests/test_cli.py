import json

from typer.testing import CliRunner

from contentspec import parse_content_spec
from contentspec.cli_app import app

runner = CliRunner()


def test_parse_prints_tree(specs_dir):
    result = runner.invoke(app, ["parse", str(specs_dir / "book.contentspec")])

    assert result.exit_code == 0, result.output
    assert "Title = Example Book" in result.output
    assert "Chapter: Introduction [Concept Area] [T-intro]" in result.output
    assert "(L12-N)" in result.output
    assert "-> Refers-To T1 = L11-N" in result.output


def test_parse_as_json(specs_dir):
    result = runner.invoke(app, ["parse", str(specs_dir / "book.contentspec"), "--json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["base_level"]["children"][0]["title"] == "Introduction"


def test_parse_failure_exits_with_error(specs_dir):
    result = runner.invoke(app, ["parse", str(specs_dir / "bad_indentation.contentspec")])

    assert result.exit_code == 1
    assert "Indentation is invalid" in result.output


def test_parse_with_mode(specs_dir):
    book = str(specs_dir / "book.contentspec")

    assert runner.invoke(app, ["parse", book, "--mode", "new"]).exit_code == 0
    assert runner.invoke(app, ["parse", book, "--mode", "edited"]).exit_code == 1


def test_parse_process_levels(specs_dir):
    result = runner.invoke(app, ["parse", str(specs_dir / "process.contentspec"), "--process-processes"])

    assert result.exit_code == 0, result.output
    assert "-> Next N2 = N2" in result.output


def test_format(specs_dir):
    path = specs_dir / "book.contentspec"

    result = runner.invoke(app, ["format", str(path)])

    assert result.exit_code == 0, result.output
    assert result.output == parse_content_spec(path.read_text()).content_spec.to_text()


def test_verbose_reports_notes(tmp_path):
    path = tmp_path / "ambiguous.contentspec"
    path.write_text("A [1234]\nB [1234]\nC [N1, Concept] [R: 1234]\n")

    quiet = runner.invoke(app, ["parse", str(path)])
    verbose = runner.invoke(app, ["parse", str(path), "--verbose"])

    assert quiet.exit_code == verbose.exit_code == 0
    assert "matches 2 topics" not in quiet.output
    assert "INFO: Line 3: 1234 matches 2 topics" in verbose.output
