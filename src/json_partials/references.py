# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Parsing of partial marker values into partial references."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass

from .errors import InvalidReferenceError
from .types import INCLUDE_PARTIAL_KEY, PARTIAL_KEY, PARTIAL_PATH_KEY, JSONValue


@dataclass(frozen=True, slots=True)
class MarkerKeys:
    """Reserved keys recognised by the resolver."""

    include: str = INCLUDE_PARTIAL_KEY
    partial: str = PARTIAL_KEY
    path: str = PARTIAL_PATH_KEY

    def is_marker_object(self, node: Mapping[str, JSONValue]) -> bool:
        """Return ``True`` when ``node`` holds the include key and nothing else."""

        return len(node) == 1 and self.include in node


DEFAULT_MARKERS = MarkerKeys()


@dataclass(frozen=True, slots=True)
class PartialReference:
    """Pointer to a partial document and an optional dotted path inside it."""

    document_id: str
    path: str = ""

    def __str__(self) -> str:
        return f"{self.document_id}::{self.path}" if self.path else self.document_id


def parse_references(
    marker_value: JSONValue,
    *,
    markers: MarkerKeys = DEFAULT_MARKERS,
) -> tuple[PartialReference, ...]:
    """Interpret the value of an include marker.

    Array values are flattened in order, and ``None`` or empty entries are
    skipped, so ``null`` and ``[]`` both yield no references.

    Args:
        marker_value: Value stored under the include key.
        markers: Reserved key names used for object-form references.

    Returns:
        tuple[PartialReference, ...]: References in declaration order.

    Raises:
        InvalidReferenceError: If an entry is neither a string nor an object,
            or an object entry has no usable partial identifier.
    """

    return tuple(_parse_entry(entry, markers=markers) for entry in _flatten(marker_value))


def _flatten(value: JSONValue) -> Iterator[JSONValue]:
    """Yield the non-empty leaves of ``value``, descending through arrays."""

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        for item in value:
            yield from _flatten(item)
        return
    if value is None or value == "" or (isinstance(value, Mapping) and not value):
        return
    yield value


def _parse_entry(entry: JSONValue, *, markers: MarkerKeys) -> PartialReference:
    if isinstance(entry, str):
        return PartialReference(document_id=_document_id(entry, entry))
    if isinstance(entry, Mapping):
        if markers.partial not in entry:
            raise InvalidReferenceError(entry, f"missing '{markers.partial}' key")
        raw_id = entry[markers.partial]
        if not isinstance(raw_id, str):
            raise InvalidReferenceError(entry, f"'{markers.partial}' must be a string")
        raw_path = entry.get(markers.path)
        if raw_path is not None and not isinstance(raw_path, str):
            raise InvalidReferenceError(entry, f"'{markers.path}' must be a string")
        return PartialReference(
            document_id=_document_id(raw_id, entry),
            path=(raw_path or "").strip(),
        )
    raise InvalidReferenceError(entry, "expected a string or an object")


def _document_id(raw: str, entry: JSONValue) -> str:
    if not raw.strip():
        raise InvalidReferenceError(entry, "partial identifier must not be blank")
    return raw


__all__ = [
    "DEFAULT_MARKERS",
    "MarkerKeys",
    "PartialReference",
    "parse_references",
]
