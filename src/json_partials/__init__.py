# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Public export surface for resolving ``##include`` partials in JSON documents."""

from __future__ import annotations

from typing import Final

from .build import BuildResult, build_templates
from .cache import CacheState, PartialCache
from .config import BuildConfig, MarkerConfig, load_build_config
from .engine import ResolutionEngine, resolve_document
from .errors import (
    BuildError,
    CircularReferenceError,
    ConfigError,
    DocumentNotFoundError,
    DuplicateDocumentError,
    IncludeDepthError,
    InvalidPartialTargetError,
    InvalidReferenceError,
    NonObjectPathError,
    PartialResolutionError,
    PathNotFoundError,
)
from .merge import merge_objects, order_keys
from .paths import extract_path
from .references import MarkerKeys, PartialReference, parse_references
from .store import DocumentStore, FileDocumentStore, MappingDocumentStore
from .types import JSONValue

__all__: Final[tuple[str, ...]] = (
    "BuildConfig",
    "BuildError",
    "BuildResult",
    "CacheState",
    "CircularReferenceError",
    "ConfigError",
    "DocumentNotFoundError",
    "DuplicateDocumentError",
    "DocumentStore",
    "FileDocumentStore",
    "IncludeDepthError",
    "InvalidPartialTargetError",
    "InvalidReferenceError",
    "JSONValue",
    "MappingDocumentStore",
    "MarkerConfig",
    "MarkerKeys",
    "NonObjectPathError",
    "PartialCache",
    "PartialReference",
    "PartialResolutionError",
    "PathNotFoundError",
    "ResolutionEngine",
    "build_templates",
    "extract_path",
    "load_build_config",
    "merge_objects",
    "order_keys",
    "parse_references",
    "resolve_document",
)
