# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Discover JSON templates, expand their partials and write the results."""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from .config import BuildConfig
from .engine import ResolutionEngine
from .errors import BuildError
from .store import FileDocumentStore
from .types import JSONValue

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TemplateOutput:
    """Pair a template with the file generated from it."""

    source: Path
    target: Path


@dataclass(slots=True)
class BuildResult:
    """Capture the outcome of a template build."""

    outputs: list[TemplateOutput] = field(default_factory=list)
    documents_loaded: int = 0

    @property
    def written(self) -> list[Path]:
        """Return the generated file paths in build order."""

        return [output.target for output in self.outputs]


def discover_templates(source_dir: Path, pattern: re.Pattern[str]) -> tuple[Path, ...]:
    """Return template files below ``source_dir`` whose name matches ``pattern``.

    Raises:
        BuildError: If ``source_dir`` is not a directory.
    """

    if not source_dir.is_dir():
        raise BuildError(f"template directory {source_dir} does not exist")
    LOGGER.info("Searching for templates in %s", source_dir)
    templates: list[Path] = []
    for path in source_dir.rglob("*"):
        if not path.is_file():
            continue
        LOGGER.debug("Found file %s", path)
        if pattern.fullmatch(path.name):
            LOGGER.debug("%s is a template", path)
            templates.append(path)
    return tuple(sorted(templates))


def output_path_for(source: Path, *, source_dir: Path, target_dir: Path) -> Path:
    """Mirror the location of ``source`` below ``source_dir`` inside ``target_dir``.

    Raises:
        BuildError: If ``source`` does not live below ``source_dir``.
    """

    try:
        relative = source.relative_to(source_dir)
    except ValueError as exc:
        raise BuildError(f"{source} is not found below {source_dir}") from exc
    return target_dir / relative


def render_document(tree: JSONValue, *, pretty: bool = True, indent: int = 2) -> str:
    """Serialize ``tree`` as JSON text terminated by a newline."""

    if pretty:
        text = json.dumps(tree, indent=indent, ensure_ascii=False)
    else:
        text = json.dumps(tree, separators=(",", ":"), ensure_ascii=False)
    return f"{text}\n"


def write_document(target: Path, text: str) -> None:
    """Atomically replace ``target`` with ``text``, creating parent directories."""

    target.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        os.replace(temp_name, target)
    except OSError as exc:
        Path(temp_name).unlink(missing_ok=True)
        raise BuildError(f"unable to write {target}: {exc}") from exc


def build_templates(config: BuildConfig) -> BuildResult:
    """Expand every template selected by ``config`` and write the outputs.

    All templates share one resolution run, so each partial is read once per
    build. A failing template aborts the build before its output is written.

    Args:
        config: Build configuration with absolute directories.

    Returns:
        BuildResult: Written outputs in template order.

    Raises:
        BuildError: If templates cannot be discovered or written.
        PartialResolutionError: If a template cannot be resolved.
    """

    templates = discover_templates(config.source_dir, config.include_regex)
    LOGGER.info("Found %d templates", len(templates))
    engine = ResolutionEngine(
        FileDocumentStore(config.effective_partial_root),
        markers=config.markers.to_markers(),
        max_depth=config.max_depth,
    )
    result = BuildResult()
    for source in templates:
        target = output_path_for(source, source_dir=config.source_dir, target_dir=config.target_dir)
        LOGGER.info("Generating %s from template %s", target, source)
        tree = engine.resolve_partial(str(source))
        write_document(target, render_document(tree, pretty=config.pretty_print, indent=config.indent))
        result.outputs.append(TemplateOutput(source=source, target=target))
    result.documents_loaded = engine.cache.load_count
    return result


__all__ = [
    "BuildResult",
    "TemplateOutput",
    "build_templates",
    "discover_templates",
    "output_path_for",
    "render_document",
    "write_document",
]
