"""Core data types and configuration for project file reading."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

SDK_NAMES = (
    "Microsoft.NET.Sdk",
    "Microsoft.NET.Sdk.Web",
    "Microsoft.NET.Sdk.Worker",
    "Microsoft.NET.Sdk.Razor",
    "Microsoft.NET.Sdk.BlazorWebAssembly",
    "Microsoft.NET.Sdk.WindowsDesktop",
)


class ProjectStyle(str, Enum):
    SDK = "sdk"
    LEGACY = "legacy"


class Strategy(str, Enum):
    EVALUATION = "evaluation"
    MARKUP = "markup"


@dataclass(frozen=True)
class PackageReference:
    """A reference to a particular version of a particular package."""
    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"


@dataclass(frozen=True)
class LegacyProject:
    """Old-style project file, items namespaced under the MSBuild 2003 schema.

    Multi-targeting is not modelled for this style, so target_frameworks
    is always empty.
    """
    path: str
    references: tuple[str, ...] = ()
    sources: tuple[str, ...] = ()
    style = ProjectStyle.LEGACY

    @property
    def target_frameworks(self) -> tuple[str, ...]:
        return ()

    @property
    def project_references(self) -> tuple[str, ...]:
        return ()


@dataclass(frozen=True)
class SdkProject:
    """SDK-style project file (root carries an Sdk attribute).

    References are resolved through package management for this style
    and are not modelled here.
    """
    path: str
    sources: tuple[str, ...] = ()
    target_frameworks: tuple[str, ...] = ()
    style = ProjectStyle.SDK

    @property
    def references(self) -> tuple[str, ...]:
        return ()

    @property
    def project_references(self) -> tuple[str, ...]:
        return ()


@dataclass(frozen=True)
class EvaluatedItems:
    """Item lists produced by the MSBuild evaluation engine."""
    path: str
    references: tuple[str, ...] = ()
    sources: tuple[str, ...] = ()


@dataclass
class ReaderConfig:
    source_extension: str = ".cs"
    sdk_names: tuple[str, ...] = field(default_factory=lambda: SDK_NAMES)
    use_evaluation: bool = True
    dotnet_command: str = "dotnet"
    evaluation_timeout: float | None = 120.0
