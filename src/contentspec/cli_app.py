import logging
from pathlib import Path

import typer

from contentspec import ContentSpecParser, ParserConfig, ParsingMode
from contentspec.nodes import Level, SpecTopic

app = typer.Typer()


def _print_level(level: Level, indent: int = 0) -> None:
    for child in level.children:
        if isinstance(child, Level):
            typer.echo("  " * indent + child.header_text())
            _print_level(child, indent + 1)
        elif isinstance(child, SpecTopic):
            typer.echo("  " * indent + f"{child.to_text(include_indentation=False)}  ({child.unique_id})")
            for relationship in child.relationships:
                target = relationship.target
                resolved = getattr(target, "unique_id", None) if relationship.is_resolved else "unresolved"
                typer.echo("  " * (indent + 1) + f"-> {relationship.relationship_type.display_name} {relationship} = {resolved}")


@app.command("parse")
def parse(
    source: Path,
    mode: ParsingMode = ParsingMode.EITHER,
    spaces: int = 2,
    process_processes: bool = False,
    json: bool = typer.Option(False, "--json", help="Print the parsed tree as JSON"),
    verbose: bool = False,
):
    """Parse a content specification file and report what was found."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s - %(message)s")

    config = ParserConfig(indentation_size=spaces, process_processes=process_processes, verbosity=2 if verbose else 0)
    results = ContentSpecParser(config).parse(source.read_text(encoding="utf-8"), mode)

    for diagnostic in results.diagnostics:
        typer.echo(f"{diagnostic.severity.value.upper()}: {diagnostic}", err=True)

    if results.content_spec is not None:
        if json:
            typer.echo(results.content_spec.model_dump_json(indent=2))
        else:
            for key, value in results.content_spec.metadata.items():
                typer.echo(f"{key} = {value}")
            _print_level(results.content_spec.base_level)

    if not results.success:
        raise typer.Exit(code=1)


@app.command("format")
def format_spec(source: Path, spaces: int = 2):
    """Parse a content specification file and print it back in canonical form."""
    results = ContentSpecParser(ParserConfig(indentation_size=spaces)).parse(source.read_text(encoding="utf-8"))
    for diagnostic in results.diagnostics:
        typer.echo(str(diagnostic), err=True)
    if not results.success:
        raise typer.Exit(code=1)
    typer.echo(results.content_spec.to_text(), nl=False)


if __name__ == "__main__":
    app()
