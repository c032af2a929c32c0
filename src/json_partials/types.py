# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared type aliases, node kinds and marker constants for partial resolution."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Final, TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | Sequence["JSONValue"] | Mapping[str, "JSONValue"]
JSONObject: TypeAlias = Mapping[str, JSONValue]

INCLUDE_PARTIAL_KEY: Final[str] = "##include"
PARTIAL_KEY: Final[str] = "partial"
PARTIAL_PATH_KEY: Final[str] = "path"
DEFAULT_MAX_DEPTH: Final[int] = 64


class NodeKind(str, Enum):
    """Enumerate the node shapes a document tree may contain."""

    OBJECT = "object"
    ARRAY = "array"
    SCALAR = "scalar"


def node_kind(value: object) -> NodeKind:
    """Classify ``value`` as an object, array or scalar node.

    Args:
        value: Candidate JSON node.

    Returns:
        NodeKind: Shape of the node.

    Raises:
        TypeError: If ``value`` is not representable as JSON.
    """

    if value is None or isinstance(value, (str, int, float, bool)):
        return NodeKind.SCALAR
    if isinstance(value, Mapping):
        return NodeKind.OBJECT
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return NodeKind.ARRAY
    raise TypeError(f"unsupported JSON value type {type(value).__name__}")


def describe_node(value: object) -> str:
    """Return a short human-readable description of ``value`` for error messages."""

    try:
        kind = node_kind(value)
    except TypeError:
        return type(value).__name__
    if kind is NodeKind.SCALAR:
        return "null" if value is None else f"{type(value).__name__} {value!r}"
    return kind.value


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "INCLUDE_PARTIAL_KEY",
    "PARTIAL_KEY",
    "PARTIAL_PATH_KEY",
    "JSONObject",
    "JSONPrimitive",
    "JSONValue",
    "NodeKind",
    "describe_node",
    "node_kind",
]
