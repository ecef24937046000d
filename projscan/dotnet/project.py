"""Represents a .csproj file and reads build metadata from it."""

from __future__ import annotations

import logging
import os
from typing import Callable

from projscan.config import (
    EvaluatedItems,
    PackageReference,
    ProjectStyle,
    ReaderConfig,
    Strategy,
)
from projscan.dotnet.evaluation import Err, EvaluationResult, Ok, try_evaluate
from projscan.dotnet.markup import (
    is_sdk_project,
    load_markup,
    read_markup,
    read_packages,
    read_target_frameworks,
)
from projscan.errors import (
    EvaluationUnavailable,
    MarkupLoadFailure,
    MissingAttribute,
    ProjectReadError,
)

logger = logging.getLogger(__name__)

Evaluator = Callable[[str, ReaderConfig], EvaluationResult]


class ProjectFile:
    """Build metadata of one project file.

    The project is evaluated with MSBuild first. If that fails for any reason
    the file is read directly as XML instead, which doesn't handle variable
    expansion. Everything is read during construction; the accessors only
    return what was read.

    Raises:
        MarkupLoadFailure: evaluation failed and the file is not valid XML.
    """

    def __init__(
        self,
        path: str | os.PathLike,
        config: ReaderConfig | None = None,
        evaluator: Evaluator = try_evaluate,
    ) -> None:
        filename = os.path.abspath(os.fspath(path))
        config = config or ReaderConfig()

        if config.use_evaluation:
            try:
                result = evaluator(filename, config)
            except Exception as e:  # noqa: BLE001
                result = Err(e)
            if not isinstance(result, (Ok, Err)):
                result = Err(TypeError(f"evaluator returned {result!r}"))
        else:
            result = Err(EvaluationUnavailable(filename, "evaluation disabled"))

        root = None
        style: ProjectStyle | None = None
        frameworks: tuple[str, ...] = ()
        packages: tuple[PackageReference, ...] = ()
        packages_error: ProjectReadError | None = None

        if isinstance(result, Ok):
            items: EvaluatedItems = result.value
            strategy = Strategy.EVALUATION
            references, sources = items.references, items.sources
            try:
                root = load_markup(filename)
            except MarkupLoadFailure as e:
                logger.debug(f"No XML for {filename} after evaluation: {e}")
                packages_error = e
            else:
                style = ProjectStyle.SDK if is_sdk_project(root, config) else ProjectStyle.LEGACY
                frameworks = read_target_frameworks(root, config)
        else:
            logger.debug(f"Falling back to XML for {filename}: {result.reason}")
            strategy = Strategy.MARKUP
            root = load_markup(filename)
            variant = read_markup(filename, root, config)
            references, sources = variant.references, variant.sources
            style, frameworks = variant.style, variant.target_frameworks

        if root is not None:
            try:
                packages = read_packages(filename, root)
            except MissingAttribute as e:
                packages_error = e

        logger.debug(f"Read {filename} using {strategy.value}")

        self._filename = filename
        self._strategy = strategy
        self._style = style
        self._references = tuple(references)
        self._sources = tuple(sources)
        self._target_frameworks = frameworks
        self._packages = packages
        self._packages_error = packages_error

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def directory(self) -> str:
        return os.path.dirname(self._filename)

    @property
    def strategy(self) -> Strategy:
        """Which reader produced the references and sources."""
        return self._strategy

    @property
    def style(self) -> ProjectStyle | None:
        return self._style

    @property
    def references(self) -> tuple[str, ...]:
        """The list of references as a list of assembly IDs."""
        return self._references

    @property
    def sources(self) -> tuple[str, ...]:
        """The list of source files in full path format."""
        return self._sources

    @property
    def target_frameworks(self) -> tuple[str, ...]:
        return self._target_frameworks

    @property
    def packages(self) -> tuple[PackageReference, ...]:
        """PackageReference items, read from the XML whichever reader ran.

        Raises:
            ProjectReadError: a package item is missing Include or Version,
                or the XML could not be loaded.
        """
        if self._packages_error is not None:
            raise self._packages_error.with_traceback(None)
        return self._packages

    @property
    def project_references(self) -> tuple[str, ...]:
        # TODO: resolve ProjectReference items into ProjectFile instances
        return ()

    def __repr__(self) -> str:
        return f"ProjectFile({self._filename!r}, strategy={self._strategy.value})"
