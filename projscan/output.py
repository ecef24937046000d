"""JSON serialisation of project metadata."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from projscan.dotnet.project import ProjectFile
from projscan.errors import ProjectReadError


def build_result(project: ProjectFile) -> dict[str, Any]:
    """Build a JSON-ready dict from a read project.

    A package read failure is reported under ``errors`` instead of failing
    the whole result.
    """
    errors = []
    try:
        packages = [
            {"name": p.name, "version": p.version}
            for p in project.packages
        ]
    except ProjectReadError as e:
        packages = []
        errors.append(str(e))

    return {
        "path": project.filename,
        "directory": project.directory,
        "strategy": project.strategy.value,
        "style": project.style.value if project.style else None,
        "target_frameworks": list(project.target_frameworks),
        "references": list(project.references),
        "packages": packages,
        "sources": list(project.sources),
        "errors": errors,
    }


def write_output(results: list[dict[str, Any]], output_path: str) -> None:
    """Write project results to a JSON file."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump({"projects": results}, f, indent=2)
