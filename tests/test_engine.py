# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for expanding partial markers in document trees."""

from __future__ import annotations

import copy
import json
from collections.abc import Callable, Mapping
from typing import Any

import pytest

from json_partials.engine import ResolutionEngine, resolve_document
from json_partials.errors import (
    CircularReferenceError,
    DocumentNotFoundError,
    DuplicateDocumentError,
    IncludeDepthError,
    InvalidPartialTargetError,
    InvalidReferenceError,
    NonObjectPathError,
    PathNotFoundError,
)
from json_partials.references import MarkerKeys
from json_partials.types import JSONValue

StoreFactory = Callable[[Mapping[str, JSONValue]], Any]


def test_single_partial_replaces_marker_object(make_store: StoreFactory) -> None:
    store = make_store({"base.json": {"name": "x", "value": 1}})

    result = resolve_document({"##include": "base.json"}, store)

    assert result == {"name": "x", "value": 1}
    assert list(result) == ["name", "value"]  # type: ignore[arg-type]


def test_multiple_partials_and_own_properties(make_store: StoreFactory) -> None:
    store = make_store(
        {
            "a.json": {"value": 1, "k": "a"},
            "b.json": {"value": 2, "k": "b"},
        },
    )

    result = resolve_document({"##include": ["a.json", "b.json"], "value": 99}, store)

    assert result == {"value": 99, "k": "b"}
    assert list(result) == ["value", "k"]  # type: ignore[arg-type]


def test_override_precedence(make_store: StoreFactory) -> None:
    store = make_store({"p1.json": {"x": 1, "only_p1": True}, "p2.json": {"x": 2}})

    with_own = resolve_document({"##include": ["p1.json", "p2.json"], "x": 3}, store)
    without_own = resolve_document({"##include": ["p1.json", "p2.json"]}, store)

    assert with_own == {"x": 3, "only_p1": True}
    assert without_own == {"only_p1": True, "x": 2}


def test_key_order_preserved_with_partial_keys_appended_sorted(make_store: StoreFactory) -> None:
    store = make_store({"c.json": {"z": 0, "c": 3}})

    result = resolve_document({"b": 1, "##include": "c.json", "a": 2}, store)

    assert list(result) == ["b", "a", "c", "z"]  # type: ignore[arg-type]


def test_document_without_markers_is_unchanged(make_store: StoreFactory) -> None:
    document = {"zeta": [1, {"y": None, "x": True}], "alpha": {"b": "text", "a": 1.5}, "m": []}
    store = make_store({})

    result = resolve_document(document, store)

    assert json.dumps(result) == json.dumps(document)
    assert not store.loads


def test_nested_markers_resolve_inside_arrays_and_partials(make_store: StoreFactory) -> None:
    store = make_store(
        {
            "server.json": {"host": "localhost", "tls": {"##include": "tls.json"}},
            "tls.json": {"enabled": True},
        },
    )

    document = {"servers": [{"##include": "server.json"}, {"##include": "server.json", "host": "b"}]}

    result = resolve_document(document, store)

    assert result == {
        "servers": [
            {"host": "localhost", "tls": {"enabled": True}},
            {"host": "b", "tls": {"enabled": True}},
        ],
    }
    assert store.loads == {"server.json": 1, "tls.json": 1}


def test_path_extraction_splices_scalar_values(make_store: StoreFactory) -> None:
    store = make_store({"p.json": {"a": {"b": {"c": 42}}}})

    result = resolve_document(
        {
            "answer": {"##include": {"partial": "p.json", "path": "a.b.c"}},
            "inner": {"##include": {"partial": "p.json", "path": "a.b"}},
        },
        store,
    )

    assert result == {"answer": 42, "inner": {"c": 42}}


def test_missing_path_segment_raises(make_store: StoreFactory) -> None:
    store = make_store({"p.json": {"a": {"b": {"c": 42}}}})

    with pytest.raises(PathNotFoundError) as excinfo:
        resolve_document({"##include": {"partial": "p.json", "path": "a.z"}}, store, document_id="root.json")

    assert excinfo.value.segment == "z"
    assert excinfo.value.document_id == "root.json"


def test_path_errors_name_the_partial_they_occurred_in(make_store: StoreFactory) -> None:
    store = make_store({"p.json": {"a": {"b": 1}}, "q.json": {"a": {"c": 2}}})
    document = {
        "x": {"##include": {"partial": "p.json", "path": "a.b"}},
        "y": {"##include": {"partial": "q.json", "path": "a.b"}},
    }

    with pytest.raises(PathNotFoundError) as excinfo:
        resolve_document(document, store, document_id="root.json")

    error = excinfo.value
    assert error.reference == "q.json::a.b"
    assert error.document_id == "root.json"
    assert str(error) == "path 'a.b' has no property 'b' at 'a' (from partial 'q.json::a.b') [in root.json]"


def test_non_object_path_and_merge_errors_carry_reference(make_store: StoreFactory) -> None:
    store = make_store({"p.json": {"a": 1, "list": [1]}})

    with pytest.raises(NonObjectPathError) as excinfo:
        resolve_document({"##include": {"partial": "p.json", "path": "a.b"}}, store)
    assert excinfo.value.reference == "p.json::a.b"
    assert excinfo.value.value_kind == "int 1"

    with pytest.raises(InvalidPartialTargetError) as merge_info:
        resolve_document({"##include": {"partial": "p.json", "path": "list"}, "own": True}, store)
    assert merge_info.value.reference == "p.json::list"
    assert merge_info.value.value_kind == "array"
    assert "p.json::list" in str(merge_info.value)


def test_document_loaded_once_per_run(make_store: StoreFactory) -> None:
    store = make_store({"shared.json": {"a": {"x": 1}, "b": {"y": 2}}})
    engine = ResolutionEngine(store)

    result = engine.resolve_document(
        {
            "first": {"##include": "shared.json"},
            "second": {"##include": {"partial": "shared.json", "path": "a"}},
            "third": [{"##include": {"partial": "shared.json", "path": "b"}}],
        },
    )
    engine.resolve_partial("shared.json")

    assert result == {"first": {"a": {"x": 1}, "b": {"y": 2}}, "second": {"x": 1}, "third": [{"y": 2}]}
    assert store.loads == {"shared.json": 1}
    assert engine.cache.load_count == 1


def test_separate_runs_do_not_share_cache(make_store: StoreFactory) -> None:
    store = make_store({"shared.json": {"a": 1}})

    resolve_document({"##include": "shared.json"}, store)
    resolve_document({"##include": "shared.json"}, store)

    assert store.loads == {"shared.json": 2}


def test_results_do_not_alias_cached_content(make_store: StoreFactory) -> None:
    store = make_store({"list.json": {"items": [1, 2]}})
    engine = ResolutionEngine(store)

    first = engine.resolve_document({"##include": "list.json"})
    first["items"].append(3)  # type: ignore[index, union-attr]
    second = engine.resolve_document({"##include": "list.json"})

    assert second == {"items": [1, 2]}


def test_input_tree_is_not_modified(make_store: StoreFactory) -> None:
    document = {"##include": ["a.json"], "own": {"##include": "a.json"}}
    snapshot = copy.deepcopy(document)
    store = make_store({"a.json": {"v": 1}})

    resolve_document(document, store)

    assert document == snapshot


def test_direct_cycle_is_detected(make_store: StoreFactory) -> None:
    store = make_store({"self.json": {"##include": "self.json"}})

    with pytest.raises(CircularReferenceError) as excinfo:
        ResolutionEngine(store).resolve_partial("self.json")

    assert excinfo.value.cycle == ("self.json", "self.json")


def test_transitive_cycle_reports_chain_and_origin(make_store: StoreFactory) -> None:
    store = make_store(
        {
            "a.json": {"##include": "b.json"},
            "b.json": {"nested": {"##include": "c.json"}},
            "c.json": {"##include": ["a.json"], "extra": 1},
        },
    )

    with pytest.raises(CircularReferenceError) as excinfo:
        ResolutionEngine(store).resolve_partial("a.json")

    error = excinfo.value
    assert error.cycle == ("a.json", "b.json", "c.json", "a.json")
    assert error.document_id == "c.json"
    assert "c.json" in str(error)


def test_root_document_takes_part_in_cycle_detection(make_store: StoreFactory) -> None:
    store = make_store({"p.json": {"back": {"##include": "root.json"}}})

    with pytest.raises(CircularReferenceError):
        resolve_document({"##include": "p.json"}, store, document_id="root.json")


def test_missing_document_reports_referencing_document(make_store: StoreFactory) -> None:
    store = make_store({"a.json": {"x": {"##include": "missing.json"}}})

    with pytest.raises(DocumentNotFoundError) as excinfo:
        resolve_document({"##include": "a.json"}, store, document_id="root.json")

    error = excinfo.value
    assert error.missing_id == "missing.json"
    assert error.document_id == "a.json"
    assert error.include_chain == ("root.json", "a.json")


def test_invalid_marker_value_raises(make_store: StoreFactory) -> None:
    with pytest.raises(InvalidReferenceError):
        resolve_document({"##include": 12}, make_store({}))


def test_scalar_partial_cannot_merge_with_own_properties(make_store: StoreFactory) -> None:
    store = make_store({"p.json": {"a": 1}, "list.json": [1, 2]})

    with pytest.raises(InvalidPartialTargetError):
        resolve_document({"##include": {"partial": "p.json", "path": "a"}, "own": True}, store)
    with pytest.raises(InvalidPartialTargetError):
        resolve_document({"##include": ["p.json", "list.json"]}, store)


def test_single_non_object_partial_replaces_marker(make_store: StoreFactory) -> None:
    store = make_store({"list.json": [{"##include": "item.json"}, 2], "item.json": {"id": 1}})

    assert resolve_document({"values": {"##include": "list.json"}}, store) == {"values": [{"id": 1}, 2]}


@pytest.mark.parametrize("marker_value", [None, []])
def test_empty_marker_resolves_to_empty_object(make_store: StoreFactory, marker_value: JSONValue) -> None:
    assert resolve_document({"value": {"##include": marker_value}}, make_store({})) == {"value": {}}


def test_depth_limit(make_store: StoreFactory) -> None:
    documents: dict[str, JSONValue] = {f"d{index}.json": {"##include": f"d{index + 1}.json"} for index in range(10)}
    documents["d10.json"] = {"end": True}
    store = make_store(documents)

    assert ResolutionEngine(store, max_depth=20).resolve_partial("d0.json") == {"end": True}
    with pytest.raises(IncludeDepthError):
        ResolutionEngine(store, max_depth=5).resolve_partial("d0.json")


def test_custom_marker_keys(make_store: StoreFactory) -> None:
    markers = MarkerKeys(include="@import", partial="file", path="select")
    store = make_store({"a.json": {"section": {"k": "v"}}})

    result = resolve_document({"@import": {"file": "a.json", "select": "section"}}, store, markers=markers)

    assert result == {"k": "v"}
    assert resolve_document({"##include": "a.json"}, store, markers=markers) == {"##include": "a.json"}


def test_non_json_values_are_rejected(make_store: StoreFactory) -> None:
    with pytest.raises(InvalidPartialTargetError):
        resolve_document({"bad": {1, 2}}, make_store({}))  # type: ignore[dict-item]


def test_resolving_a_changed_tree_under_a_resolved_id_is_rejected(make_store: StoreFactory) -> None:
    engine = ResolutionEngine(make_store({}))

    assert engine.resolve_document({"v": 1}, document_id="root.json") == {"v": 1}
    with pytest.raises(DuplicateDocumentError) as excinfo:
        engine.resolve_document({"v": 2}, document_id="root.json")

    assert excinfo.value.duplicate_id == "root.json"
    assert ResolutionEngine(make_store({})).resolve_document({"v": 2}, document_id="root.json") == {"v": 2}
