# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Per-run memoisation of resolved partial documents with cycle detection."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from .errors import CircularReferenceError, IncludeDepthError
from .merge import freeze_json_value
from .types import DEFAULT_MAX_DEPTH, JSONValue

LOGGER = logging.getLogger(__name__)

Loader = Callable[[str], JSONValue]
Expander = Callable[[JSONValue, str], JSONValue]


class CacheState(str, Enum):
    """Lifecycle states of a cache entry."""

    UNRESOLVED = "unresolved"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


class PartialCache:
    """Resolve each document at most once per resolution run.

    A cache instance belongs to a single run. Entries move from
    ``UNRESOLVED`` to ``IN_PROGRESS`` while their content is being expanded,
    then to ``RESOLVED`` holding a frozen copy of the expanded tree. Meeting an
    ``IN_PROGRESS`` entry again means the reference graph has a cycle.
    """

    def __init__(self, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.max_depth = max_depth
        self._resolved: dict[str, JSONValue] = {}
        self._in_progress: list[str] = []
        self.load_count = 0

    @property
    def include_chain(self) -> tuple[str, ...]:
        """Return the documents currently being resolved, outermost first."""

        return tuple(self._in_progress)

    def state(self, document_id: str) -> CacheState:
        """Return the lifecycle state of ``document_id``."""

        if document_id in self._resolved:
            return CacheState.RESOLVED
        if document_id in self._in_progress:
            return CacheState.IN_PROGRESS
        return CacheState.UNRESOLVED

    def resolve(self, document_id: str, loader: Loader, expand: Expander) -> JSONValue:
        """Return the fully expanded tree of ``document_id``.

        Args:
            document_id: Canonical document identifier.
            loader: Callable loading the raw document on a cache miss.
            expand: Callable expanding nested partials in a loaded tree; it
                receives the tree and ``document_id``.

        Returns:
            JSONValue: Frozen, fully expanded document tree.

        Raises:
            CircularReferenceError: If ``document_id`` is already being resolved.
            IncludeDepthError: If nesting exceeds :attr:`max_depth`.
        """

        match self.state(document_id):
            case CacheState.RESOLVED:
                LOGGER.debug("Partial cache hit for %s", document_id)
                return self._resolved[document_id]
            case CacheState.IN_PROGRESS:
                raise CircularReferenceError(document_id, self.include_chain)
            case CacheState.UNRESOLVED:
                pass
        if len(self._in_progress) >= self.max_depth:
            raise IncludeDepthError(document_id, self.max_depth)

        LOGGER.debug("Partial cache miss for %s", document_id)
        self._in_progress.append(document_id)
        try:
            raw = loader(document_id)
            self.load_count += 1
            resolved = freeze_json_value(expand(raw, document_id))
        finally:
            self._in_progress.pop()
        self._resolved[document_id] = resolved
        return resolved

    def clear(self) -> None:
        """Forget every resolved entry, starting a fresh run."""

        if self._in_progress:
            raise RuntimeError("cannot clear a partial cache while a resolution is in progress")
        self._resolved.clear()
        self.load_count = 0

    def __len__(self) -> int:
        return len(self._resolved)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._resolved


__all__ = ["CacheState", "Expander", "Loader", "PartialCache"]
