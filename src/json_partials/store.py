# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Document stores that load raw partial documents by identifier."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from .errors import DocumentNotFoundError
from .types import JSONValue

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class DocumentStore(Protocol):
    """Contract for loading documents referenced by partial markers."""

    def canonical_id(self, document_id: str) -> str:
        """Return the identifier under which ``document_id`` is cached.

        Args:
            document_id: Identifier as written in a partial reference.

        Returns:
            str: Canonical identifier shared by every spelling of the document.
        """
        ...

    def load(self, document_id: str) -> JSONValue:
        """Load the raw document stored under ``document_id``.

        Args:
            document_id: Canonical identifier returned by :meth:`canonical_id`.

        Returns:
            JSONValue: Parsed document tree.

        Raises:
            DocumentNotFoundError: If the document is missing or malformed.
        """
        ...


class FileDocumentStore:
    """Load JSON documents from files located below ``root``."""

    def __init__(self, root: Path, *, encoding: str = "utf-8") -> None:
        self.root = root
        self._encoding = encoding

    def canonical_id(self, document_id: str) -> str:
        return str((self.root / document_id).resolve())

    def load(self, document_id: str) -> JSONValue:
        path = Path(document_id)
        if not path.is_file():
            raise DocumentNotFoundError(document_id, reason="file does not exist")
        LOGGER.debug("Reading partial file %s", path)
        try:
            with path.open("r", encoding=self._encoding) as stream:
                return json.load(stream)
        except json.JSONDecodeError as exc:
            raise DocumentNotFoundError(document_id, reason=f"invalid JSON ({exc})") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentNotFoundError(document_id, reason=str(exc)) from exc

    def __repr__(self) -> str:
        return f"FileDocumentStore(root={str(self.root)!r})"


class MappingDocumentStore:
    """Serve documents from an in-memory mapping of identifiers to trees."""

    def __init__(self, documents: Mapping[str, JSONValue]) -> None:
        self._documents = dict(documents)

    def canonical_id(self, document_id: str) -> str:
        return document_id.strip()

    def load(self, document_id: str) -> JSONValue:
        try:
            return self._documents[document_id]
        except KeyError:
            raise DocumentNotFoundError(document_id, reason="no such document") from None


__all__ = ["DocumentStore", "FileDocumentStore", "MappingDocumentStore"]
