"""
document.py - Versioned key-value documents and the client contract.

A versioned document is a namespaced string mapping whose writes are guarded
by an opaque version token (optimistic concurrency). The token is None until
the document has been read from, or committed to, the backing medium.

Clients implement ``DocumentClient``:
    get(key)        -> VersionedDocument (raises DocumentNotFoundError)
    create(doc)     -> new version token (raises DocumentExistsError)
    update(doc)     -> new version token (raises ConflictError on mismatch)

Concrete clients:
    devops.store.file_client.FileDocumentClient   JSON files on disk
    devops.store.fake.InMemoryDocumentClient      dict-backed, for tests
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol


# =============================================================================
# Error Types
# =============================================================================


class StoreError(Exception):
    """Base exception for backing-store failures."""

    pass


class DocumentNotFoundError(StoreError):
    """Raised when the requested document does not exist."""

    def __init__(self, key: "DocumentKey"):
        self.key = key
        super().__init__(f"document '{key}' not found")


class DocumentExistsError(StoreError):
    """Raised when creating a document that already exists."""

    def __init__(self, key: "DocumentKey"):
        self.key = key
        super().__init__(f"document '{key}' already exists")


class ConflictError(StoreError):
    """Raised when a version mismatch indicates a concurrent modification."""

    def __init__(self, key: "DocumentKey", expected_version: Optional[str], actual_version: str):
        self.key = key
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"document '{key}' was modified concurrently. "
            f"Expected version: {expected_version}, Actual: {actual_version}"
        )


# =============================================================================
# Document Types
# =============================================================================


@dataclass(frozen=True)
class DocumentKey:
    """Namespace and name of a document."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True)
class OwnerReference:
    """Link tying a document's lifecycle to the resource that owns it.

    Attributes:
        api_version: API version of the owner, e.g. "devops.kubesphere.io/v1alpha3".
        kind: Kind of the owner, e.g. "PipelineRun".
        name: Name of the owner.
        uid: Unique ID of the owner, if known.
        controller: Whether the owner is the managing controller.
        block_owner_deletion: Whether the owner cannot be deleted before this.
    """

    api_version: str
    kind: str
    name: str
    uid: str = ""
    controller: bool = False
    block_owner_deletion: bool = False

    def same_owner(self, other: "OwnerReference") -> bool:
        return (
            self.api_version == other.api_version
            and self.kind == other.kind
            and self.name == other.name
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "name": self.name,
            "uid": self.uid,
            "controller": self.controller,
            "blockOwnerDeletion": self.block_owner_deletion,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OwnerReference":
        return cls(
            api_version=data.get("apiVersion", ""),
            kind=data.get("kind", ""),
            name=data.get("name", ""),
            uid=data.get("uid", ""),
            controller=data.get("controller", False),
            block_owner_deletion=data.get("blockOwnerDeletion", False),
        )


@dataclass
class VersionedDocument:
    """A key-value mapping plus its version token and owner references."""

    key: DocumentKey
    data: Dict[str, str] = field(default_factory=dict)
    version: Optional[str] = None
    owner_references: List[OwnerReference] = field(default_factory=list)

    def set_owner_reference(self, owner: OwnerReference) -> None:
        """Attach an owner, replacing any existing link to the same owner."""
        for i, ref in enumerate(self.owner_references):
            if ref.same_owner(owner):
                self.owner_references[i] = owner
                return
        self.owner_references.append(owner)

    def copy(self) -> "VersionedDocument":
        return VersionedDocument(
            key=self.key,
            data=dict(self.data),
            version=self.version,
            owner_references=list(self.owner_references),
        )


class DocumentClient(Protocol):
    """Reads and writes versioned documents on a backing medium."""

    def get(self, key: DocumentKey) -> VersionedDocument:
        """Load a document, including its current version token.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """
        ...

    def create(self, document: VersionedDocument) -> str:
        """Create a document with its data and owner references.

        Returns:
            The version token of the created document.

        Raises:
            DocumentExistsError: If the document already exists.
        """
        ...

    def update(self, document: VersionedDocument) -> str:
        """Replace a document's data if ``document.version`` is current.

        Returns:
            The new version token.

        Raises:
            ConflictError: If the stored version differs.
            DocumentNotFoundError: If the document no longer exists.
        """
        ...
