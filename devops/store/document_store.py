"""
document_store.py - Pipeline run data store backed by a versioned document.

The store keeps an exclusive in-memory copy of the document. ``save()``
creates the document when no version token was captured at load time, and
updates it otherwise; nothing else influences the choice.

Usage:
    from devops.store import DocumentKey, DocumentStore, FileDocumentClient

    client = FileDocumentClient(root)
    store = DocumentStore.load(DocumentKey("my-project", "my-pipeline-1"), client)
    store.set_owner_reference(owner)  # applied only if save() creates
    store.set_status(status_json)
    store.save()
"""

from __future__ import annotations

import logging
from typing import Optional

from .document import (
    DocumentClient,
    DocumentKey,
    DocumentNotFoundError,
    OwnerReference,
    VersionedDocument,
)
from .types import PipelineRunDataStore

logger = logging.getLogger(__name__)


class DocumentStore(PipelineRunDataStore):
    """PipelineRunDataStore persisted through a DocumentClient."""

    def __init__(self, client: DocumentClient, document: VersionedDocument):
        self._client = client
        self._document = document
        self._owner: Optional[OwnerReference] = None

    @classmethod
    def load(cls, key: DocumentKey, client: DocumentClient) -> "DocumentStore":
        """Load the document under ``key``, or start empty if it is missing.

        Raises:
            StoreError: Any client failure other than not-found.
        """
        try:
            document = client.get(key)
        except DocumentNotFoundError:
            logger.debug("Document %s not found, starting empty", key)
            document = VersionedDocument(key=key)
        return cls(client, document)

    @property
    def key(self) -> DocumentKey:
        return self._document.key

    @property
    def has_version(self) -> bool:
        """Whether a version token is held; decides create vs. update."""
        return self._document.version is not None

    @property
    def version(self) -> Optional[str]:
        return self._document.version

    def set_owner_reference(self, owner: OwnerReference) -> None:
        """Register the owner to attach when ``save()`` creates the document."""
        self._owner = owner

    def get(self, key: str) -> str:
        return self._document.data.get(key, "")

    def set(self, key: str, value: str) -> None:
        self._document.data[key] = value

    def save(self) -> None:
        """Commit the full mapping.

        Raises:
            DocumentExistsError: Creating a document someone else created.
            ConflictError: Updating a document modified since it was loaded.
            StoreError: Any other client failure, unchanged.
        """
        if not self.has_version:
            if self._owner is not None:
                self._document.set_owner_reference(self._owner)
            version = self._client.create(self._document)
            logger.info("Created document %s (version %s)", self.key, version)
        else:
            version = self._client.update(self._document)
            logger.info("Updated document %s (version %s)", self.key, version)
        self._document.version = version
