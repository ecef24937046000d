"""Parse .csproj files directly as XML (MSBuild schema).

This doesn't expand properties, evaluate conditions or follow imports, so it
only approximates what the evaluation engine reports. It is the fallback when
evaluation is unavailable.
"""

from __future__ import annotations

import os
import xml.etree.ElementTree as ET

from projscan.config import (
    LegacyProject,
    PackageReference,
    ReaderConfig,
    SdkProject,
)
from projscan.errors import MarkupLoadFailure, MissingAttribute

MSBUILD_NS = "http://schemas.microsoft.com/developer/msbuild/2003"

# Paths are relative to the <Project> root element.
SDK_QUERIES = {
    "target_frameworks": ("PropertyGroup/TargetFrameworks", "PropertyGroup/TargetFramework"),
    "compile": "ItemGroup/Compile",
    "package": "ItemGroup/PackageReference",
}

LEGACY_QUERIES = {
    "reference": f"{{{MSBUILD_NS}}}ItemGroup/{{{MSBUILD_NS}}}Reference",
    "compile": f"{{{MSBUILD_NS}}}ItemGroup/{{{MSBUILD_NS}}}Compile",
    "package": f"{{{MSBUILD_NS}}}ItemGroup/{{{MSBUILD_NS}}}PackageReference",
}


def load_markup(project_path: str) -> ET.Element:
    """Parse a project file and return its root element.

    Raises:
        MarkupLoadFailure: the file is unreadable or not well-formed XML.
    """
    try:
        return ET.parse(project_path).getroot()
    except (ET.ParseError, OSError) as e:
        raise MarkupLoadFailure(project_path, e) from e


def is_sdk_project(root: ET.Element, config: ReaderConfig | None = None) -> bool:
    config = config or ReaderConfig()
    return root.get("Sdk", "").strip() in config.sdk_names


def _includes(root: ET.Element, query: str) -> list[str]:
    # Update/Remove items have no Include and don't add files
    return [el.get("Include") for el in root.iterfind(query) if el.get("Include")]


def normalise_include(include: str) -> str:
    """Convert Windows separators when running on a '/' host."""
    if os.sep == "/":
        return include.replace("\\", "/")
    return include


def resolve_include(project_dir: str, include: str) -> str:
    """Resolve an item include against the project directory to a full path."""
    return os.path.abspath(os.path.join(project_dir, normalise_include(include)))


def scan_sources(project_dir: str, extension: str) -> list[str]:
    """Recursively list files under project_dir ending with extension."""
    found = []
    for dirpath, dirnames, filenames in os.walk(project_dir):
        dirnames.sort()
        for filename in sorted(filenames):
            if filename.endswith(extension):
                found.append(os.path.join(dirpath, filename))
    return found


def _split_frameworks(values: list[str]) -> tuple[str, ...]:
    frameworks = []
    for value in values:
        for tfm in value.split(";"):
            tfm = tfm.strip()
            if tfm:
                frameworks.append(tfm)
    return tuple(frameworks)


def read_target_frameworks(root: ET.Element, config: ReaderConfig | None = None) -> tuple[str, ...]:
    """Return the declared target frameworks, plural element first.

    Legacy projects are treated as single-targeted and yield nothing.
    """
    if not is_sdk_project(root, config):
        return ()
    texts = []
    for query in SDK_QUERIES["target_frameworks"]:
        texts.extend(el.text for el in root.iterfind(query) if el.text)
    return _split_frameworks(texts)


def read_sdk_project(
    project_path: str, root: ET.Element, config: ReaderConfig | None = None
) -> SdkProject:
    """Read an SDK-style project.

    SDK projects compile every source file under the project directory
    implicitly, so the explicit Compile includes are followed by a recursive
    scan. The two lists are concatenated, not deduplicated.
    """
    config = config or ReaderConfig()
    project_dir = os.path.dirname(os.path.abspath(project_path))

    explicit = [
        resolve_include(project_dir, inc)
        for inc in _includes(root, SDK_QUERIES["compile"])
    ]
    implicit = scan_sources(project_dir, config.source_extension)

    return SdkProject(
        path=project_path,
        sources=tuple(explicit + implicit),
        target_frameworks=read_target_frameworks(root, config),
    )


def read_legacy_project(project_path: str, root: ET.Element) -> LegacyProject:
    """Read an old-style project. Its explicit Compile list is authoritative."""
    project_dir = os.path.dirname(os.path.abspath(project_path))
    references = _includes(root, LEGACY_QUERIES["reference"])
    sources = [
        resolve_include(project_dir, inc)
        for inc in _includes(root, LEGACY_QUERIES["compile"])
    ]
    return LegacyProject(
        path=project_path,
        references=tuple(references),
        sources=tuple(sources),
    )


def read_markup(
    project_path: str,
    root: ET.Element | None = None,
    config: ReaderConfig | None = None,
) -> LegacyProject | SdkProject:
    """Read a project file as XML and return the variant matching its style.

    Raises:
        MarkupLoadFailure: the file cannot be parsed.
    """
    config = config or ReaderConfig()
    project_path = os.path.abspath(project_path)
    if root is None:
        root = load_markup(project_path)

    if is_sdk_project(root, config):
        return read_sdk_project(project_path, root, config)
    return read_legacy_project(project_path, root)


def _package_version(element: ET.Element, ns: str) -> str:
    version = element.get("Version", "")
    if not version:
        # Version may be given as a child element
        child = element.find(f"{ns}Version")
        if child is not None and child.text:
            version = child.text
    return version.strip()


def read_packages(project_path: str, root: ET.Element) -> tuple[PackageReference, ...]:
    """Return the PackageReference items of a project, in either style.

    Raises:
        MissingAttribute: a PackageReference lacks its Include or Version.
    """
    packages = []
    for query, ns in (
        (SDK_QUERIES["package"], ""),
        (LEGACY_QUERIES["package"], f"{{{MSBUILD_NS}}}"),
    ):
        for el in root.iterfind(query):
            name = el.get("Include", "").strip()
            if not name:
                raise MissingAttribute(project_path, "PackageReference", "Include")
            version = _package_version(el, ns)
            if not version:
                raise MissingAttribute(project_path, f"PackageReference Include={name!r}", "Version")
            packages.append(PackageReference(name=name, version=version))
    return tuple(packages)
