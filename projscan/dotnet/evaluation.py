"""Read a project file through the MSBuild evaluation engine.

``dotnet msbuild -getItem:...`` evaluates the project (properties, conditions,
imports and wildcard item groups) without running any targets and prints the
resulting items as JSON. This is the accurate way to read a project, but it
needs the .NET SDK on the host and fails for project types the engine cannot
load, so callers always have to be ready to fall back.
"""

from __future__ import annotations

import json
import logging
import os
import re
import shutil
import subprocess
from dataclasses import dataclass

from projscan.config import EvaluatedItems, ReaderConfig
from projscan.errors import EvaluationUnavailable

logger = logging.getLogger(__name__)

_ITEM_TYPES = ("Reference", "Compile")
_PROPERTIES = ("TargetFramework", "TargetFrameworks")

_ENGINE_ENV = {
    "DOTNET_NOLOGO": "1",
    "DOTNET_SKIP_FIRST_TIME_EXPERIENCE": "1",
    "DOTNET_CLI_TELEMETRY_OPTOUT": "1",
}

_JSON_START = re.compile(r"^\{", re.MULTILINE)


@dataclass(frozen=True)
class Ok:
    value: EvaluatedItems


@dataclass(frozen=True)
class Err:
    reason: Exception


EvaluationResult = Ok | Err


def _engine_command(
    project_path: str,
    config: ReaderConfig,
    target_framework: str | None = None,
) -> list[str]:
    executable = shutil.which(config.dotnet_command)
    if executable is None:
        raise EvaluationUnavailable(
            project_path, f"'{config.dotnet_command}' executable not found on PATH"
        )
    args = [executable, "msbuild", project_path, "-nologo"]
    if target_framework:
        args.append(f"-property:TargetFramework={target_framework}")
    for prop in _PROPERTIES:
        args.append(f"-getProperty:{prop}")
    for item_type in _ITEM_TYPES:
        args.append(f"-getItem:{item_type}")
    return args


def _parse_output(project_path: str, output: str) -> dict:
    """Pull the JSON document out of the engine's output.

    Anything printed before the document (first-run banners, notices) is
    skipped.
    """
    match = _JSON_START.search(output)
    if match is None:
        raise EvaluationUnavailable(project_path, "engine printed no JSON")
    try:
        payload = json.loads(output[match.start():])
    except json.JSONDecodeError as e:
        raise EvaluationUnavailable(project_path, f"unreadable engine output: {e}") from e

    if not isinstance(payload, dict) or not isinstance(payload.get("Items"), dict):
        raise EvaluationUnavailable(project_path, "engine output has no Items table")
    return payload


def _run_engine(project_path: str, args: list[str], config: ReaderConfig) -> dict:
    logger.debug(f"Evaluating {project_path}: {' '.join(args)}")
    try:
        completed = subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=config.evaluation_timeout,
            check=False,
            env={**os.environ, **_ENGINE_ENV},
        )
    except subprocess.TimeoutExpired as e:
        raise EvaluationUnavailable(
            project_path, f"engine timed out after {config.evaluation_timeout}s"
        ) from e
    except OSError as e:
        raise EvaluationUnavailable(project_path, f"failed to start engine: {e}") from e

    if completed.returncode != 0:
        detail = (completed.stdout or completed.stderr or "").strip().splitlines()
        message = detail[-1] if detail else "no output"
        raise EvaluationUnavailable(
            project_path, f"engine exited with code {completed.returncode}: {message}"
        )

    return _parse_output(project_path, completed.stdout)


def _inner_framework(payload: dict) -> str | None:
    """First moniker of a multi-targeted project, None if single-targeted.

    The outer build of a multi-targeted project has no Compile items; they
    only exist once a single TargetFramework is set.
    """
    properties = payload.get("Properties") or {}
    if properties.get("TargetFramework"):
        return None
    for tfm in properties.get("TargetFrameworks", "").split(";"):
        tfm = tfm.strip()
        if tfm:
            return tfm
    return None


def run_evaluation(project_path: str, config: ReaderConfig | None = None) -> EvaluatedItems:
    """Evaluate a project file and return its references and compiled sources.

    References are the evaluated includes of ``Reference`` items. Sources are
    the full paths of ``Compile`` items with the configured source extension.
    Multi-targeted projects are evaluated for their first target framework.

    Raises:
        EvaluationUnavailable: the engine is missing, rejected the project,
            timed out or printed something other than the item table.
    """
    config = config or ReaderConfig()
    payload = _run_engine(project_path, _engine_command(project_path, config), config)

    framework = _inner_framework(payload)
    if framework:
        logger.debug(f"{project_path} is multi-targeted, evaluating for {framework}")
        args = _engine_command(project_path, config, target_framework=framework)
        payload = _run_engine(project_path, args, config)

    items = payload["Items"]

    references = tuple(
        item["Identity"]
        for item in items.get("Reference", [])
        if item.get("Identity")
    )
    sources = tuple(
        item["FullPath"]
        for item in items.get("Compile", [])
        if item.get("FullPath", "").endswith(config.source_extension)
    )

    return EvaluatedItems(path=project_path, references=references, sources=sources)


def try_evaluate(project_path: str, config: ReaderConfig | None = None) -> EvaluationResult:
    """Run the evaluation engine, folding any exception it raises into ``Err``."""
    try:
        return Ok(run_evaluation(project_path, config))
    except Exception as e:  # noqa: BLE001
        return Err(e)
