"""Errors raised while reading project files."""

from __future__ import annotations


class ProjectReadError(Exception):
    """Base class for failures reading a project file."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path


class EvaluationUnavailable(ProjectReadError):
    """The MSBuild evaluation engine could not process the project file.

    Expected on hosts without the .NET SDK and for projects the engine
    rejects. Recovered by falling back to reading the markup directly.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(path, f"Evaluation unavailable for {path}: {reason}")
        self.reason = reason


class MarkupLoadFailure(ProjectReadError):
    """The project file could not be parsed as XML at all."""

    def __init__(self, path: str, cause: Exception) -> None:
        super().__init__(path, f"Failed to load {path}: {cause}")
        self.cause = cause


class MissingAttribute(ProjectReadError):
    """A required attribute is absent from an item element."""

    def __init__(
        self,
        path: str,
        element: str,
        attribute: str,
        line: int | None = None,
    ) -> None:
        where = f"{path}:{line}" if line else path
        super().__init__(path, f"{where}: <{element}> is missing required attribute '{attribute}'")
        self.element = element
        self.attribute = attribute
        self.line = line
