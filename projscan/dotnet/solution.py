"""List the project files named by a .sln file."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

from projscan.dotnet.markup import normalise_include

# Project("{TYPE-GUID}") = "Name", "Path\To\Project.csproj", "{PROJECT-GUID}"
_PROJECT_RE = re.compile(
    r'^Project\(\"\{([^}]+)\}\"\)\s*=\s*\"([^\"]+)\"\s*,\s*\"([^\"]+)\"\s*,\s*\"\{([^}]+)\}\"',
    re.MULTILINE,
)

_PROJECT_TYPES = {
    "FAE04EC0-301F-11D3-BF4B-00C04F79EFBC": "csharp",
    "9A19103F-16F7-4668-BE54-9A1E7A4F7556": "csharp",  # SDK-style C#
    "F184B08F-C81C-45F6-A57F-5ABD9991F28F": "vbnet",
    "778DAE3C-4631-46EA-AA77-85C1314464D9": "vbnet",  # SDK-style VB
}


@dataclass(frozen=True)
class SolutionEntry:
    """A project listed in a .sln file."""
    name: str
    path: str
    kind: str
    project_guid: str


def parse_solution(sln_path: str) -> list[SolutionEntry]:
    """Return the C# and VB.NET projects of a solution.

    Solution folders and other project types are skipped. Paths are made
    absolute against the solution's directory.

    Raises:
        OSError: the solution file cannot be read.
    """
    with open(sln_path, "r", encoding="utf-8-sig") as f:
        content = f.read()

    sln_dir = os.path.dirname(os.path.abspath(sln_path))
    entries = []
    for match in _PROJECT_RE.finditer(content):
        kind = _PROJECT_TYPES.get(match.group(1).upper())
        if kind is None:
            continue
        path = os.path.abspath(os.path.join(sln_dir, normalise_include(match.group(3))))
        entries.append(SolutionEntry(
            name=match.group(2),
            path=path,
            kind=kind,
            project_guid=match.group(4).upper(),
        ))

    return entries
