"""projscan - Read build metadata from .NET project files without building."""

from projscan.config import PackageReference, ReaderConfig
from projscan.dotnet.project import ProjectFile
from projscan.errors import (
    EvaluationUnavailable,
    MarkupLoadFailure,
    MissingAttribute,
    ProjectReadError,
)

__version__ = "0.1.0"
__all__ = [
    "ProjectFile",
    "PackageReference",
    "ReaderConfig",
    "ProjectReadError",
    "EvaluationUnavailable",
    "MarkupLoadFailure",
    "MissingAttribute",
]
