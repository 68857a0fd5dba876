"""In-memory stand-ins for tests and dependents.

- FakeStore: a PipelineRunDataStore that never touches a backing medium;
  ``save()`` raises whatever error was preconfigured with ``with_error``.
- InMemoryDocumentClient: a dict-backed DocumentClient with integer version
  tokens that counts create/update calls.
"""

from __future__ import annotations

from typing import Dict, Optional

from .document import (
    ConflictError,
    DocumentExistsError,
    DocumentKey,
    DocumentNotFoundError,
    VersionedDocument,
)
from .types import PipelineRunDataStore


class FakeStore(PipelineRunDataStore):
    """A fake store."""

    def __init__(self) -> None:
        self.data: Dict[str, str] = {}
        self.err: Optional[BaseException] = None

    def with_error(self, err: Optional[BaseException]) -> "FakeStore":
        """Set the error ``save()`` raises."""
        self.err = err
        return self

    def get(self, key: str) -> str:
        return self.data.get(key, "")

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def save(self) -> None:
        if self.err is not None:
            raise self.err


class InMemoryDocumentClient:
    """DocumentClient keeping documents in a dict."""

    def __init__(self) -> None:
        self.documents: Dict[DocumentKey, VersionedDocument] = {}
        self.create_calls = 0
        self.update_calls = 0
        self._counter = 0

    def _next_version(self) -> str:
        self._counter += 1
        return str(self._counter)

    def get(self, key: DocumentKey) -> VersionedDocument:
        document = self.documents.get(key)
        if document is None:
            raise DocumentNotFoundError(key)
        return document.copy()

    def create(self, document: VersionedDocument) -> str:
        self.create_calls += 1
        if document.key in self.documents:
            raise DocumentExistsError(document.key)
        stored = document.copy()
        stored.version = self._next_version()
        self.documents[document.key] = stored
        return stored.version

    def update(self, document: VersionedDocument) -> str:
        self.update_calls += 1
        current = self.documents.get(document.key)
        if current is None:
            raise DocumentNotFoundError(document.key)
        if current.version != document.version:
            raise ConflictError(document.key, document.version, current.version or "")
        stored = document.copy()
        stored.owner_references = list(current.owner_references)
        stored.version = self._next_version()
        self.documents[document.key] = stored
        return stored.version
