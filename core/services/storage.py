"""
Local persistence for projects, feedback and generated files.

Directory layout:
data/
├── projects/{project_id}.json
└── feedback/{feedback_id}.json
storage/
└── stl-files/{project_id}/{file_name}  (+ .meta.json sidecar)
"""
from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.errors import UploadError

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


class JsonDocumentStore:
    """
    Document store keeping one JSON file per document.

    Usage:
        store = JsonDocumentStore("./data")
        project_id = store.add("projects", {"prompt": "phone stand"})
        store.update("projects", project_id, {"status": "concepts"})
        project = store.get("projects", project_id)
    """

    def __init__(self, base_dir: str):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _collection_dir(self, collection: str) -> Path:
        path = self.base_dir / collection
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _doc_path(self, collection: str, doc_id: str) -> Path:
        # ids come from URLs; keep them inside the collection directory
        if not doc_id or "/" in doc_id or "\\" in doc_id or doc_id.startswith("."):
            raise KeyError(doc_id)
        return self._collection_dir(collection) / f"{doc_id}.json"

    def _write(self, path: Path, data: Dict[str, Any]) -> None:
        tmp = path.with_suffix(".json.tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        tmp.replace(path)

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        now = _now_iso()
        doc = {**data, "createdAt": now, "updatedAt": now}
        self._write(self._doc_path(collection, doc_id), doc)
        return doc_id

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        try:
            path = self._doc_path(collection, doc_id)
        except KeyError:
            return None
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        # Read-modify-write without locking: concurrent updates to one document
        # can overwrite each other (last write wins).
        doc = self.get(collection, doc_id)
        if doc is None:
            raise KeyError(f"{collection}/{doc_id} does not exist")
        doc.update(fields)
        doc["updatedAt"] = _now_iso()
        self._write(self._doc_path(collection, doc_id), doc)

    def query(self, collection: str, field: str, value: Any, order_by: str = "createdAt") -> List[Dict[str, Any]]:
        """Documents where `field == value`, ascending by `order_by`, each with its `id`."""
        docs = []
        for path in self._collection_dir(collection).glob("*.json"):
            with open(path, "r", encoding="utf-8") as f:
                doc = json.load(f)
            if doc.get(field) == value:
                docs.append({**doc, "id": path.stem})
        return sorted(docs, key=lambda d: d.get(order_by) or "")


class LocalFileStorage:
    """Blob storage on the local disk, served by the API under `base_url`."""

    def __init__(self, base_dir: str, base_url: str = "/files"):
        self.base_dir = Path(base_dir)
        self.base_url = base_url.rstrip("/")
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def upload(self, path: str, data: bytes, content_type: str, metadata: Dict[str, str] | None = None) -> str:
        """Store `data` at `path` (relative) and return its download URL."""
        target = self.base_dir / path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
            meta = {
                "contentType": content_type,
                "size": len(data),
                "customMetadata": metadata or {},
            }
            Path(f"{target}.meta.json").write_text(json.dumps(meta, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.error("Upload of %s failed: %s", path, exc)
            raise UploadError(f"Failed to upload {path}") from exc

        url = f"{self.base_url}/{path}"
        logger.info("File uploaded: %s", url)
        return url
