# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Depth-first expansion of partial markers inside document trees."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import cast

from .cache import CacheState, PartialCache
from .errors import DuplicateDocumentError, InvalidPartialTargetError, PartialResolutionError, PathNotFoundError
from .merge import merge_objects, order_keys, to_plain_json
from .paths import extract_path
from .references import DEFAULT_MARKERS, MarkerKeys, PartialReference, parse_references
from .store import DocumentStore
from .types import DEFAULT_MAX_DEPTH, JSONObject, JSONValue, NodeKind, describe_node, node_kind

LOGGER = logging.getLogger(__name__)


class ResolutionEngine:
    """Expand partial markers in documents loaded through a document store.

    One engine represents one resolution run: every document it loads is
    cached for its lifetime, so independent runs should use separate engines.

    Args:
        store: Document store used to load referenced partials.
        markers: Reserved key names identifying partial markers.
        cache: Cache shared by the run; a fresh one is created when omitted.
        max_depth: Maximum nesting of partial loads when creating the cache.
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        markers: MarkerKeys = DEFAULT_MARKERS,
        cache: PartialCache | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.store = store
        self.markers = markers
        self.cache = cache if cache is not None else PartialCache(max_depth=max_depth)

    def resolve_document(self, tree: JSONValue, *, document_id: str | None = None) -> JSONValue:
        """Return a fully expanded copy of ``tree``.

        Args:
            tree: Document tree to expand; it is never modified.
            document_id: Optional identifier of ``tree``. When given, the tree
                takes part in cycle detection and error context like any partial.

        Returns:
            JSONValue: New tree made of plain dicts, lists and scalars.

        Raises:
            DuplicateDocumentError: If ``document_id`` was already resolved by
                this engine, since its cached expansion may not match ``tree``.
            PartialResolutionError: If any partial cannot be resolved.
        """

        if document_id is None:
            return to_plain_json(self._resolve_node(tree))
        canonical = self.store.canonical_id(document_id)
        if self.cache.state(canonical) is CacheState.RESOLVED:
            raise DuplicateDocumentError(canonical)
        resolved = self.cache.resolve(canonical, lambda _canonical: tree, self._expand)
        return to_plain_json(resolved)

    def resolve_partial(self, document_id: str) -> JSONValue:
        """Load ``document_id`` from the store and return it fully expanded."""

        return to_plain_json(self._load(document_id))

    def resolve_reference(self, reference: PartialReference) -> JSONValue:
        """Return the frozen value selected by ``reference``.

        Path failures record ``reference`` so the partial they occurred in is named.
        """

        tree = self._load(reference.document_id)
        try:
            return extract_path(tree, reference.path)
        except PathNotFoundError as exc:
            exc.add_reference(reference)
            raise

    def _load(self, document_id: str) -> JSONValue:
        canonical = self.store.canonical_id(document_id)
        return self.cache.resolve(canonical, self.store.load, self._expand)

    def _expand(self, tree: JSONValue, document_id: str) -> JSONValue:
        try:
            return self._resolve_node(tree)
        except PartialResolutionError as exc:
            exc.add_context(document_id, self.cache.include_chain)
            raise

    def _resolve_node(self, node: JSONValue) -> JSONValue:
        try:
            kind = node_kind(node)
        except TypeError as exc:
            raise InvalidPartialTargetError(None, type(node).__name__, reason="not a JSON value") from exc
        match kind:
            case NodeKind.OBJECT:
                return self._resolve_object(cast(JSONObject, node))
            case NodeKind.ARRAY:
                return [self._resolve_node(item) for item in cast(Sequence[JSONValue], node)]
            case NodeKind.SCALAR:
                return node

    def _resolve_object(self, node: JSONObject) -> JSONValue:
        include_key = self.markers.include
        if self.markers.is_marker_object(node):
            return self._resolve_marker(node[include_key])
        if include_key not in node:
            return {key: self._resolve_node(value) for key, value in node.items()}

        layers = self._object_layers(node[include_key])
        own = {key: self._resolve_node(value) for key, value in node.items() if key != include_key}
        return order_keys(list(node), merge_objects([*layers, own]))

    def _resolve_marker(self, marker_value: JSONValue) -> JSONValue:
        references = self._parse(marker_value)
        if len(references) == 1:
            value = self.resolve_reference(references[0])
            if isinstance(value, Mapping):
                return order_keys((self.markers.include,), value)
            return value
        merged = merge_objects(self._merge_sources(references))
        return order_keys((self.markers.include,), merged)

    def _object_layers(self, marker_value: JSONValue) -> list[JSONObject]:
        return self._merge_sources(self._parse(marker_value))

    def _merge_sources(self, references: Sequence[PartialReference]) -> list[JSONObject]:
        layers: list[JSONObject] = []
        for reference in references:
            value = self.resolve_reference(reference)
            if not isinstance(value, Mapping):
                raise InvalidPartialTargetError(reference, describe_node(value))
            layers.append(value)
        return layers

    def _parse(self, marker_value: JSONValue) -> tuple[PartialReference, ...]:
        LOGGER.debug("Parsing includes from definition: %r", marker_value)
        references = parse_references(marker_value, markers=self.markers)
        LOGGER.debug("Found includes: %s", ", ".join(str(reference) for reference in references) or "<none>")
        return references


def resolve_document(
    tree: JSONValue,
    store: DocumentStore,
    *,
    document_id: str | None = None,
    markers: MarkerKeys = DEFAULT_MARKERS,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> JSONValue:
    """Expand ``tree`` in a fresh resolution run backed by ``store``."""

    engine = ResolutionEngine(store, markers=markers, max_depth=max_depth)
    return engine.resolve_document(tree, document_id=document_id)


__all__ = ["ResolutionEngine", "resolve_document"]
