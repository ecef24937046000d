"""projscan CLI - read build metadata from .NET project files."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from projscan.config import ReaderConfig
from projscan.dotnet.project import ProjectFile
from projscan.dotnet.solution import parse_solution
from projscan.errors import ProjectReadError
from projscan.output import build_result, write_output

logger = logging.getLogger(__name__)


@click.group()
def cli() -> None:
    """projscan - list sources, references and packages of .NET projects."""
    pass


def _read_projects(path: Path, config: ReaderConfig) -> list[ProjectFile]:
    """Read a single project file, or every project in a solution."""
    if path.suffix.lower() != ".sln":
        try:
            return [ProjectFile(path, config)]
        except ProjectReadError as e:
            raise click.ClickException(str(e)) from e

    try:
        entries = parse_solution(str(path))
    except OSError as e:
        raise click.ClickException(f"Failed to read {path}: {e}") from e

    projects = []
    for entry in entries:
        logger.debug(f"Solution project: {entry.name} -> {entry.path}")
        try:
            projects.append(ProjectFile(entry.path, config))
        except ProjectReadError as e:
            logger.warning(f"Skipping {entry.name}: {e}")
    return projects


def _print_tables(results: list[dict]) -> None:
    """Render each project result as a Rich table."""
    from rich.console import Console
    from rich.table import Table

    console = Console()
    for result in results:
        table = Table(title=f"{Path(result['path']).name} ({result['strategy']})", show_edge=False)
        table.add_column("Field", style="bold")
        table.add_column("Value")

        table.add_row("Style", result["style"] or "-")
        table.add_row("Frameworks", ", ".join(result["target_frameworks"]) or "-")
        table.add_row("References", str(len(result["references"])))
        table.add_row("Sources", str(len(result["sources"])))
        packages = ", ".join(f"{p['name']}@{p['version']}" for p in result["packages"])
        table.add_row("Packages", packages or "-")
        for error in result["errors"]:
            table.add_row("[red]Error[/red]", error)

        console.print(table)


@cli.command("inspect")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", "output_path", default=None, help="Write JSON to this file")
@click.option("-j", "--json", "as_json", is_flag=True, help="Print JSON instead of tables")
@click.option("--no-evaluation", is_flag=True, help="Skip MSBuild evaluation and read the XML directly")
@click.option("--extension", default=".cs", help="Source file extension")
@click.option("--verbose", is_flag=True, help="Log which reader handled each project")
@click.option("--quiet", is_flag=True, help="Suppress all output except errors")
def inspect_cmd(
    path: str,
    output_path: str | None,
    as_json: bool,
    no_evaluation: bool,
    extension: str,
    verbose: bool,
    quiet: bool,
) -> None:
    """Read a project file (or every project in a .sln) and report its metadata."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = ReaderConfig(
        source_extension=extension,
        use_evaluation=not no_evaluation,
    )
    projects = _read_projects(Path(path).resolve(), config)
    results = [build_result(p) for p in projects]

    if output_path:
        write_output(results, output_path)

    if quiet:
        return
    if as_json:
        click.echo(json.dumps({"projects": results}, indent=2))
    else:
        _print_tables(results)
        if output_path:
            from rich.console import Console
            Console().print(f"[green]Output written to:[/green] {output_path}")


if __name__ == "__main__":
    cli()
