# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Dotted property path navigation inside resolved documents."""

from __future__ import annotations

from collections.abc import Mapping

from .errors import NonObjectPathError, PathNotFoundError
from .types import JSONValue, describe_node


def path_segments(path: str) -> tuple[str, ...]:
    """Split ``path`` on dots, trimming segments and dropping empty ones."""

    return tuple(segment for segment in (part.strip() for part in path.split(".")) if segment)


def extract_path(tree: JSONValue, path: str) -> JSONValue:
    """Return the value found at ``path`` inside ``tree``.

    Only object properties are navigated; index or wildcard syntax is looked
    up as a literal key.

    Args:
        tree: Resolved document to navigate.
        path: Dotted property path; empty selects ``tree`` itself.

    Returns:
        JSONValue: Value located at ``path``.

    Raises:
        PathNotFoundError: If a segment is missing from the current object.
        NonObjectPathError: If a segment must be read from a non-object value.
    """

    current = tree
    walked: list[str] = []
    for segment in path_segments(path):
        location = f"'{'.'.join(walked)}'" if walked else "the document root"
        if not isinstance(current, Mapping):
            raise NonObjectPathError(segment, path, location, describe_node(current))
        if segment not in current:
            raise PathNotFoundError(segment, path, location)
        current = current[segment]
        walked.append(segment)
    return current


__all__ = ["extract_path", "path_segments"]
