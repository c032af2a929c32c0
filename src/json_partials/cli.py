# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Command line interface for building and resolving JSON templates."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer

from .build import build_templates, render_document, write_document
from .config import load_build_config
from .engine import ResolutionEngine
from .errors import BuildError, ConfigError, PartialResolutionError
from .logging import CLILogger, build_cli_logger
from .store import FileDocumentStore

app = typer.Typer(
    name="json-partials",
    help="Expand ##include partial references inside JSON documents.",
    no_args_is_help=True,
    add_completion=False,
)

ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", "-r", help="Project root used to locate configuration files."),
]
SOURCE_DIR_OPTION = Annotated[
    Path | None,
    typer.Option("--source-dir", help="Directory containing the source templates; relative to the working directory."),
]
TARGET_DIR_OPTION = Annotated[
    Path | None,
    typer.Option("--target-dir", help="Directory receiving the generated files; relative to the working directory."),
]
PARTIAL_ROOT_OPTION = Annotated[
    Path | None,
    typer.Option(
        "--partial-root",
        help="Directory partial identifiers are resolved against; relative to the working directory.",
    ),
]
PATTERN_OPTION = Annotated[
    str | None,
    typer.Option("--pattern", help="Regular expression selecting template file names."),
]
COMPACT_OPTION = Annotated[
    bool,
    typer.Option("--compact", help="Write compact JSON even when configuration asks for pretty output."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Show resolution debug logging."),
]
NO_COLOR_OPTION = Annotated[
    bool,
    typer.Option("--no-color", help="Disable coloured output."),
]


@app.command("build")
def build_command(
    root: ROOT_OPTION = Path("."),
    source_dir: SOURCE_DIR_OPTION = None,
    target_dir: TARGET_DIR_OPTION = None,
    partial_root: PARTIAL_ROOT_OPTION = None,
    pattern: PATTERN_OPTION = None,
    compact: COMPACT_OPTION = False,
    use_emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
    no_color: NO_COLOR_OPTION = False,
) -> None:
    """Build every template below the source directory."""

    logger = build_cli_logger(emoji=use_emoji, debug=debug, no_color=no_color)
    overrides: dict[str, Any] = {
        "source_dir": _from_cwd(source_dir),
        "target_dir": _from_cwd(target_dir),
        "partial_root": _from_cwd(partial_root),
        "include_pattern": pattern,
        "pretty_print": False if compact else None,
    }
    try:
        config = load_build_config(root, overrides=overrides)
        logger.debug(f"source_dir={config.source_dir} target_dir={config.target_dir}")
        result = build_templates(config)
    except (BuildError, ConfigError, PartialResolutionError) as exc:
        _fail(logger, exc)

    for output in result.outputs:
        logger.debug(f"source={output.source} target={output.target}")
    logger.ok(f"Generated {len(result.outputs)} document(s) in {config.target_dir}")


@app.command("resolve")
def resolve_command(
    document: Annotated[Path, typer.Argument(help="JSON document to resolve.")],
    partial_root: PARTIAL_ROOT_OPTION = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the result to this file instead of stdout."),
    ] = None,
    pretty: Annotated[bool, typer.Option("--pretty/--compact", help="Pretty-print the result.")] = True,
    use_emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
    no_color: NO_COLOR_OPTION = False,
) -> None:
    """Resolve a single document and print the expanded JSON."""

    logger = build_cli_logger(emoji=use_emoji, debug=debug, no_color=no_color)
    document = document.resolve()
    store = FileDocumentStore(partial_root.resolve() if partial_root is not None else document.parent)
    try:
        tree = ResolutionEngine(store).resolve_partial(str(document))
        text = render_document(tree, pretty=pretty)
        if output is not None:
            write_document(output, text)
    except (BuildError, PartialResolutionError) as exc:
        _fail(logger, exc)

    if output is None:
        logger.echo(text.rstrip("\n"))
    else:
        logger.ok(f"Wrote {output}")


def _from_cwd(path: Path | None) -> Path | None:
    return path.resolve() if path is not None else None


def _fail(logger: CLILogger, exc: Exception) -> NoReturn:
    logger.fail(str(exc))
    raise typer.Exit(code=1) from exc


def main() -> None:
    """Console script entry point."""

    app()


__all__ = ["app", "main"]

