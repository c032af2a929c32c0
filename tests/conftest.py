# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

from json_partials.store import MappingDocumentStore
from json_partials.types import JSONValue


class CountingStore(MappingDocumentStore):
    """In-memory store recording how often each document is loaded."""

    def __init__(self, documents: Mapping[str, JSONValue]) -> None:
        super().__init__(documents)
        self.loads: Counter[str] = Counter()

    def load(self, document_id: str) -> JSONValue:
        self.loads[document_id] += 1
        return super().load(document_id)


@pytest.fixture
def make_store() -> Callable[[Mapping[str, JSONValue]], CountingStore]:
    """Return a factory building counting in-memory document stores."""

    return CountingStore


@pytest.fixture
def write_json() -> Callable[[Path, object], Path]:
    """Return a helper writing ``payload`` as JSON to ``path``."""

    def _write(path: Path, payload: object) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return path

    return _write
