# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Ordered object merging and immutability helpers for resolved documents."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import cast

from .types import JSONObject, JSONValue


def merge_objects(layers: Iterable[JSONObject]) -> dict[str, JSONValue]:
    """Union ``layers`` key-for-key, later layers overriding earlier ones.

    Values are replaced wholesale; nested objects and arrays are never merged.
    A key overridden by a later layer keeps the position it first appeared at.

    Args:
        layers: Objects ordered from lowest to highest precedence.

    Returns:
        dict[str, JSONValue]: New mapping holding the merged properties.
    """

    merged: dict[str, JSONValue] = {}
    for layer in layers:
        merged.update(layer)
    return merged


def order_keys(source_keys: Sequence[str], merged: Mapping[str, JSONValue]) -> dict[str, JSONValue]:
    """Reorder ``merged`` to follow ``source_keys``.

    Keys present in ``source_keys`` keep that order; keys contributed only by
    partials follow, sorted lexicographically.

    Args:
        source_keys: Key order of the object as written in its document.
        merged: Merged properties to reorder.

    Returns:
        dict[str, JSONValue]: New mapping with deterministic key order.
    """

    ordered = {key: merged[key] for key in source_keys if key in merged}
    for key in sorted(key for key in merged if key not in ordered):
        ordered[key] = merged[key]
    return ordered


def freeze_json_value(value: JSONValue) -> JSONValue:
    """Return an immutable copy of ``value`` suitable for sharing between documents."""

    if isinstance(value, MappingProxyType):
        return value
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_json_value(item) for key, item in value.items()})
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return tuple(freeze_json_value(item) for item in value)
    return value


def to_plain_json(value: JSONValue) -> JSONValue:
    """Convert frozen JSON structures into fresh mutable dicts and lists."""

    if isinstance(value, Mapping):
        return {key: to_plain_json(cast("JSONValue", item)) for key, item in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [to_plain_json(cast("JSONValue", item)) for item in value]
    return value


__all__ = ["freeze_json_value", "merge_objects", "order_keys", "to_plain_json"]
