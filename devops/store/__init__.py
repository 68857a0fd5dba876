# devops.store package
# Pipeline run data persisted as string key-value pairs.
#
# Core components:
#   - types: KeyValueStore / PipelineRunDataStore contracts and fixed keys
#   - document: VersionedDocument, DocumentClient protocol, store errors
#   - document_store: DocumentStore (create-vs-update by version token)
#   - file_client: FileDocumentClient (JSON files, SHA-256 version tokens)
#   - fake: FakeStore and InMemoryDocumentClient for tests
#
# Usage:
#     from devops.store import DocumentKey, DocumentStore, FileDocumentClient
#     store = DocumentStore.load(DocumentKey("ns", "name"), FileDocumentClient(root))
#     store.set_stages(stages)
#     store.save()

from .document import (
    ConflictError,
    DocumentClient,
    DocumentExistsError,
    DocumentKey,
    DocumentNotFoundError,
    OwnerReference,
    StoreError,
    VersionedDocument,
)
from .document_store import DocumentStore
from .fake import FakeStore, InMemoryDocumentClient
from .file_client import FileDocumentClient
from .types import (
    DATA_KEY_ALL_LOG,
    DATA_KEY_STAGE,
    DATA_KEY_STATUS,
    KeyValueStore,
    PipelineRunDataStore,
    step_log_key,
)

__all__ = [
    # Contracts
    "KeyValueStore",
    "PipelineRunDataStore",
    "DATA_KEY_ALL_LOG",
    "DATA_KEY_STAGE",
    "DATA_KEY_STATUS",
    "step_log_key",
    # Documents
    "DocumentKey",
    "OwnerReference",
    "VersionedDocument",
    "DocumentClient",
    # Errors
    "StoreError",
    "DocumentNotFoundError",
    "DocumentExistsError",
    "ConflictError",
    # Implementations
    "DocumentStore",
    "FileDocumentClient",
    "FakeStore",
    "InMemoryDocumentClient",
]
