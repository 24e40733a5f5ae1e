# src/quantum/tasks/json_db.py

from __future__ import annotations

import contextlib
import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any

from ..errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)

Document = dict[str, Any]

_SUFFIX = ".json"


def _encode_key(key: str) -> str:
    if not key or key in (".", "..") or "\x00" in key:
        raise StorageError(f"Invalid record key: {key!r}")
    return key.replace("%", "%25").replace("/", "%2F").replace("\\", "%5C")


def _decode_key(name: str) -> str:
    return name.replace("%5C", "\\").replace("%2F", "/").replace("%25", "%")


class JsonDB:
    """
    Directory-backed JSON document store.

    Layout: <root>/<collection>/<key>.json, one document per file.

    - writes go to a sibling temp file which is then renamed over the target
    - a collection directory that does not exist reads as empty
    - no locking: the last writer wins
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Unable to open database: {self._root}") from e

    @property
    def root(self) -> Path:
        return self._root

    # ---- low-level helpers ----

    def _collection_dir(self, collection: str) -> Path:
        if not collection or "/" in collection or collection in (".", ".."):
            raise StorageError(f"Invalid collection name: {collection!r}")
        return self._root / collection

    def _doc_path(self, collection: str, key: str) -> Path:
        return self._collection_dir(collection) / (_encode_key(key) + _SUFFIX)

    @staticmethod
    def _load(path: Path) -> Document:
        try:
            raw = path.read_text("utf-8")
        except OSError as e:
            raise StorageError(f"Error reading record {path}: {e}") from e
        try:
            doc = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Error reading record {path}: {e}") from e
        if not isinstance(doc, dict):
            raise StorageError(f"Error reading record {path}: not a JSON object")
        return doc

    # ---- public API ----

    def write(self, collection: str, key: str, doc: Document) -> None:
        path = self._doc_path(collection, key)
        tmp = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(doc, ensure_ascii=False, indent="\t"), "utf-8")
            os.replace(tmp, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise StorageError(f"Error writing record {collection}/{key}: {e}") from e
        logger.debug("Wrote %s/%s", collection, key)

    def exists(self, collection: str, key: str) -> bool:
        return self._doc_path(collection, key).is_file()

    def read(self, collection: str, key: str) -> Document:
        path = self._doc_path(collection, key)
        if not path.is_file():
            raise NotFoundError(collection, key)
        return self._load(path)

    def read_all(self, collection: str) -> list[tuple[str, Document]]:
        """Return (key, document) pairs ordered by file name."""
        cdir = self._collection_dir(collection)
        if not cdir.is_dir():
            return []
        try:
            paths = sorted(p for p in cdir.iterdir() if p.is_file() and p.name.endswith(_SUFFIX))
        except OSError as e:
            raise StorageError(f"Error reading database: {e}") from e
        return [(_decode_key(p.name[: -len(_SUFFIX)]), self._load(p)) for p in paths]

    def count(self, collection: str) -> int:
        cdir = self._collection_dir(collection)
        if not cdir.is_dir():
            return 0
        return sum(1 for p in cdir.iterdir() if p.name.endswith(_SUFFIX))

    def delete(self, collection: str, key: str) -> None:
        path = self._doc_path(collection, key)
        try:
            path.unlink()
        except FileNotFoundError:
            raise NotFoundError(collection, key) from None
        except OSError as e:
            raise StorageError(f"Error deleting record {collection}/{key}: {e}") from e
        logger.debug("Deleted %s/%s", collection, key)

    def drop(self, collection: str) -> None:
        """Remove a whole collection; a missing collection is not an error."""
        cdir = self._collection_dir(collection)
        if not cdir.exists():
            return
        try:
            shutil.rmtree(cdir)
        except OSError as e:
            raise StorageError(f"Error deleting all records from {collection}: {e}") from e
        logger.debug("Dropped collection %s", collection)
