"""
file_client.py - Versioned documents stored as JSON files.

Layout:

    <root>/
      <namespace>/
        <name>.json       {"namespace", "name", "data", "ownerReferences"}
        <name>.json.lock  sidecar lock file

The version token of a document is the SHA-256 of its file content, so any
write by another process changes the token and a stale update is refused
with ConflictError.

Every create and update holds an exclusive ``fcntl`` lock on the sidecar for
the whole check-then-write sequence, so writers in other processes wait
instead of interleaving. A create publishes its temporary file with
``os.link``, which fails if the document appeared in the meantime; an update
publishes with ``os.replace``. Either way a reader never sees a partial
document.
"""

from __future__ import annotations

import fcntl
import hashlib
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Union

from .document import (
    ConflictError,
    DocumentExistsError,
    DocumentKey,
    DocumentNotFoundError,
    OwnerReference,
    StoreError,
    VersionedDocument,
)

logger = logging.getLogger(__name__)

_LOCK_SUFFIX = ".lock"

# -----------------------------------------------------------------------------
# Per-document locking
# -----------------------------------------------------------------------------
# Threads of one process serialize on the in-process lock; processes serialize
# on the flock held on the sidecar file.

_PATH_LOCKS: Dict[Path, threading.Lock] = {}
_PATH_LOCKS_LOCK = threading.Lock()


def _get_path_lock(path: Path) -> threading.Lock:
    with _PATH_LOCKS_LOCK:
        lock = _PATH_LOCKS.get(path)
        if lock is None:
            lock = threading.Lock()
            _PATH_LOCKS[path] = lock
        return lock


def _lock_path(path: Path) -> Path:
    return path.with_suffix(path.suffix + _LOCK_SUFFIX)


@contextmanager
def _locked_document(path: Path) -> Iterator[None]:
    """Hold the in-process and the OS-level lock of a document file."""
    lock_path = _lock_path(path)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with _get_path_lock(path), lock_path.open("a+", encoding="utf-8") as lock_handle:
        fcntl.flock(lock_handle.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_handle.fileno(), fcntl.LOCK_UN)


def _compute_version(content: Union[str, bytes]) -> str:
    """Compute the SHA-256 version token of file content."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def _write_temp(path: Path, content: bytes) -> str:
    """Write bytes to a synced temporary file next to ``path``."""
    parent = path.parent
    parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(suffix=".tmp", prefix=path.name + ".", dir=parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
    except BaseException:
        _remove_quietly(tmp_path)
        raise
    return tmp_path


def _remove_quietly(tmp_path: str) -> None:
    try:
        os.unlink(tmp_path)
    except OSError:
        pass


def _atomic_write(path: Path, content: bytes) -> None:
    """Write bytes to a file atomically (temp file + os.replace)."""
    tmp_path = _write_temp(path, content)
    try:
        os.replace(tmp_path, path)
    except BaseException:
        _remove_quietly(tmp_path)
        raise


def _atomic_create(path: Path, content: bytes) -> None:
    """Publish a new file atomically, never replacing an existing one.

    Raises:
        FileExistsError: If ``path`` already exists.
    """
    tmp_path = _write_temp(path, content)
    try:
        os.link(tmp_path, path)
    finally:
        _remove_quietly(tmp_path)


def _validate_segment(value: str, what: str) -> None:
    if not value or value in (".", "..") or "/" in value or "\\" in value:
        raise ValueError(f"invalid document {what}: {value!r}")


class FileDocumentClient:
    """DocumentClient storing each document as a JSON file under ``root``."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def _path(self, key: DocumentKey) -> Path:
        _validate_segment(key.namespace, "namespace")
        _validate_segment(key.name, "name")
        return self.root / key.namespace / f"{key.name}.json"

    def _serialize(self, document: VersionedDocument) -> bytes:
        payload: Dict[str, Any] = {
            "namespace": document.key.namespace,
            "name": document.key.name,
            "data": dict(document.data),
            "ownerReferences": [ref.to_dict() for ref in document.owner_references],
        }
        return (json.dumps(payload, indent=2, ensure_ascii=False) + "\n").encode("utf-8")

    def _read(self, key: DocumentKey, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except FileNotFoundError:
            raise DocumentNotFoundError(key) from None
        except OSError as e:
            raise StoreError(f"failed to read document '{key}': {e}") from e

    def _parse(self, key: DocumentKey, content: bytes) -> VersionedDocument:
        try:
            payload = json.loads(content)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
            raise StoreError(f"document '{key}' is corrupt: {e}") from e

        if not isinstance(payload, dict):
            raise StoreError(f"document '{key}' is corrupt: expected an object")
        data = payload.get("data") or {}
        if not isinstance(data, dict):
            raise StoreError(f"document '{key}' is corrupt: 'data' must be an object")
        refs = payload.get("ownerReferences") or []
        if not isinstance(refs, list) or not all(isinstance(ref, dict) for ref in refs):
            raise StoreError(
                f"document '{key}' is corrupt: 'ownerReferences' must be an array of objects"
            )

        return VersionedDocument(
            key=key,
            data={str(k): str(v) for k, v in data.items()},
            version=_compute_version(content),
            owner_references=[OwnerReference.from_dict(ref) for ref in refs],
        )

    def get(self, key: DocumentKey) -> VersionedDocument:
        path = self._path(key)
        return self._parse(key, self._read(key, path))

    def create(self, document: VersionedDocument) -> str:
        path = self._path(document.key)
        content = self._serialize(document)
        with _locked_document(path):
            try:
                _atomic_create(path, content)
            except FileExistsError:
                raise DocumentExistsError(document.key) from None
        logger.debug("Wrote %s", path)
        return _compute_version(content)

    def update(self, document: VersionedDocument) -> str:
        path = self._path(document.key)
        content = self._serialize(document)
        with _locked_document(path):
            current_version = _compute_version(self._read(document.key, path))
            if current_version != document.version:
                raise ConflictError(document.key, document.version, current_version)
            _atomic_write(path, content)
        logger.debug("Wrote %s", path)
        return _compute_version(content)
