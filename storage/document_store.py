"""Document storage for league data.

Documents are JSON-compatible dicts addressed by slash-separated paths,
e.g. "leagues/family/userData/alice". Listing a collection path returns its
direct child documents. Writes always replace the whole document.
"""

import copy
import json
import os
import threading

import config


class DocumentStore:
    """Interface the league service persists through."""

    def get(self, path: str) -> dict | None:
        raise NotImplementedError

    def set(self, path: str, data: dict):
        raise NotImplementedError

    def delete(self, path: str):
        raise NotImplementedError

    def list(self, collection: str) -> dict[str, dict]:
        """{document_id: document} for every document directly under a collection."""
        raise NotImplementedError


class MemoryDocumentStore(DocumentStore):
    """In-process store. Safe to share between fan-out worker threads."""

    def __init__(self, documents: dict[str, dict] | None = None):
        self._docs: dict[str, dict] = {}
        self._lock = threading.Lock()
        for path, data in (documents or {}).items():
            self.set(path, data)

    def get(self, path: str) -> dict | None:
        with self._lock:
            data = self._docs.get(clean_path(path))
            return copy.deepcopy(data) if data is not None else None

    def set(self, path: str, data: dict):
        with self._lock:
            self._docs[clean_path(path)] = copy.deepcopy(data)

    def delete(self, path: str):
        with self._lock:
            self._docs.pop(clean_path(path), None)

    def list(self, collection: str) -> dict[str, dict]:
        prefix = clean_path(collection) + "/"
        with self._lock:
            return {
                path[len(prefix):]: copy.deepcopy(data)
                for path, data in self._docs.items()
                if path.startswith(prefix) and "/" not in path[len(prefix):]
            }


class JsonFileDocumentStore(DocumentStore):
    """One JSON file per document under a root directory (data/ by default)."""

    def __init__(self, root: str = config.DATA_DIR):
        self.root = root

    def _file(self, path: str) -> str:
        return os.path.join(self.root, *clean_path(path).split("/")) + ".json"

    def get(self, path: str) -> dict | None:
        filepath = self._file(path)
        if not os.path.exists(filepath):
            return None
        with open(filepath, "r", encoding="utf-8") as f:
            return json.load(f)

    def set(self, path: str, data: dict):
        filepath = self._file(path)
        os.makedirs(os.path.dirname(filepath), exist_ok=True)
        # Write then rename so readers never see a half-written document
        tmp = f"{filepath}.{threading.get_ident()}.tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp, filepath)

    def delete(self, path: str):
        filepath = self._file(path)
        if os.path.exists(filepath):
            os.remove(filepath)

    def list(self, collection: str) -> dict[str, dict]:
        directory = os.path.join(self.root, *clean_path(collection).split("/"))
        if not os.path.isdir(directory):
            return {}
        docs = {}
        for filename in sorted(os.listdir(directory)):
            if filename.endswith(".json"):
                doc_id = filename[:-len(".json")]
                docs[doc_id] = self.get(f"{collection}/{doc_id}")
        return docs


def clean_path(path: str) -> str:
    parts = [p for p in path.strip("/").split("/") if p]
    if not parts or any(p in (".", "..") for p in parts):
        raise ValueError(f"Invalid document path: {path!r}")
    return "/".join(parts)
