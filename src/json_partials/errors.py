# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised while resolving partial references."""

from __future__ import annotations

from collections.abc import Sequence


class PartialResolutionError(RuntimeError):
    """Base class for failures raised during a resolution run.

    Attributes:
        document_id: Identifier of the document whose content triggered the
            failure, attached by the engine when it is not already known.
        include_chain: Identifiers of the documents being resolved when the
            failure occurred, outermost first.
        reference: Partial reference (``id`` or ``id::path``) whose content
            was being read when the failure occurred, if any.
    """

    def __init__(self, message: str, *, document_id: str | None = None) -> None:
        """Create the error with ``message`` and an optional originating document.

        Args:
            message: Human-readable description of the failure.
            document_id: Identifier of the document the failure originates from.
        """

        super().__init__(message)
        self.message = message
        self.document_id = document_id
        self.include_chain: tuple[str, ...] = ()
        self.reference: str | None = None

    def add_reference(self, reference: object) -> None:
        """Record the partial reference being read unless one is already known."""

        if self.reference is None:
            self.reference = str(reference)

    def add_context(self, document_id: str, include_chain: Sequence[str] = ()) -> None:
        """Attach document context without overwriting what is already recorded.

        Args:
            document_id: Identifier of the document being resolved.
            include_chain: Documents in progress when the error surfaced.
        """

        if self.document_id is None:
            self.document_id = document_id
        if not self.include_chain and include_chain:
            self.include_chain = tuple(include_chain)

    def __str__(self) -> str:
        text = self.message
        if self.reference is not None:
            text = f"{text} (from partial '{self.reference}')"
        if self.document_id is not None:
            text = f"{text} [in {self.document_id}]"
        if len(self.include_chain) > 1:
            text = f"{text} (include chain: {' -> '.join(self.include_chain)})"
        return text


class DocumentNotFoundError(PartialResolutionError):
    """Raised when a referenced document is missing or cannot be parsed."""

    def __init__(self, document_id: str, *, reason: str | None = None) -> None:
        message = f"partial document '{document_id}' could not be loaded"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.missing_id = document_id


class CircularReferenceError(PartialResolutionError):
    """Raised when a document transitively references itself."""

    def __init__(self, document_id: str, chain: Sequence[str]) -> None:
        cycle = " -> ".join((*chain, document_id))
        super().__init__(f"circular reference to partial '{document_id}': {cycle}")
        self.entry_id = document_id
        self.cycle = (*chain, document_id)


class IncludeDepthError(PartialResolutionError):
    """Raised when nested partial loads exceed the configured depth limit."""

    def __init__(self, document_id: str, max_depth: int) -> None:
        super().__init__(f"loading partial '{document_id}' exceeds the maximum include depth of {max_depth}")
        self.max_depth = max_depth


class DuplicateDocumentError(PartialResolutionError):
    """Raised when a second tree is supplied under an identifier already resolved in the run."""

    def __init__(self, document_id: str) -> None:
        super().__init__(
            f"document '{document_id}' was already resolved in this run; use a new engine to resolve an updated tree",
        )
        self.duplicate_id = document_id


class InvalidReferenceError(PartialResolutionError):
    """Raised when a partial marker value is malformed."""

    def __init__(self, value: object, reason: str) -> None:
        super().__init__(f"invalid partial reference {value!r}: {reason}")
        self.value = value


class PathNotFoundError(PartialResolutionError):
    """Raised when a dotted path does not resolve inside a partial document."""

    def __init__(self, segment: str, path: str, node_description: str) -> None:
        PartialResolutionError.__init__(self, f"path '{path}' has no property '{segment}' at {node_description}")
        self.segment = segment
        self.path = path
        self.node_description = node_description


class InvalidPartialTargetError(PartialResolutionError):
    """Raised when extracted partial content cannot be merged where merging is required.

    Attributes:
        value_kind: Description of the offending value, e.g. ``"array"``.
    """

    def __init__(
        self,
        reference: object | None,
        value_kind: str,
        *,
        reason: str = "only objects can be merged",
    ) -> None:
        PartialResolutionError.__init__(self, f"partial content is {value_kind}; {reason}")
        self.value_kind = value_kind
        if reference is not None:
            self.add_reference(reference)


class NonObjectPathError(PathNotFoundError, InvalidPartialTargetError):
    """Raised when a dotted path tries to descend into a non-object value."""

    def __init__(self, segment: str, path: str, location: str, value_kind: str) -> None:
        PathNotFoundError.__init__(self, segment, path, f"{location} ({value_kind})")
        self.value_kind = value_kind


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class BuildError(RuntimeError):
    """Raised when templates cannot be discovered, mapped or written."""


__all__ = [
    "BuildError",
    "CircularReferenceError",
    "ConfigError",
    "DocumentNotFoundError",
    "DuplicateDocumentError",
    "IncludeDepthError",
    "InvalidPartialTargetError",
    "InvalidReferenceError",
    "NonObjectPathError",
    "PartialResolutionError",
    "PathNotFoundError",
]
