import json
import logging
import os
import threading
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from pixieshare.domain.errors import NotFound, PersistenceFailure
from pixieshare.domain.models import FileDescriptor

logger = logging.getLogger(__name__)


class MetadataStore:
    """In-memory id -> FileDescriptor mapping backed by one JSON document.

    Writers hold ``_lock`` for both mutation and persistence, and swap in a
    fresh dict rather than mutating the published one, so readers never need
    the lock.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._tmp_path = path.with_name(path.name + ".tmp")
        self._lock = threading.Lock()
        self._files: dict[str, FileDescriptor] = {}

    def load(self) -> None:
        with self._lock:
            self._files = self._read_document()
        logger.info("Loaded %d file descriptor(s) from %s", len(self._files), self._path)

    def _read_document(self) -> dict[str, FileDescriptor]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError:
            logger.warning("Could not read metadata document %s; starting empty", self._path, exc_info=True)
            return {}

        try:
            doc = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Metadata document %s is corrupt (%s); starting empty", self._path, e)
            return {}
        if not isinstance(doc, dict):
            logger.warning("Metadata document %s is not a JSON object; starting empty", self._path)
            return {}

        files: dict[str, FileDescriptor] = {}
        for key, entry in doc.items():
            try:
                descriptor = FileDescriptor.model_validate(entry)
            except ValidationError as e:
                logger.warning("Skipping invalid metadata entry %r: %d error(s)", key, e.error_count())
                continue
            if descriptor.id != key:
                logger.warning("Skipping metadata entry %r with mismatched id %r", key, descriptor.id)
                continue
            files[key] = descriptor
        return files

    def get(self, file_id: str) -> FileDescriptor:
        descriptor = self._files.get(file_id)
        if descriptor is None:
            raise NotFound(file_id)
        return descriptor

    def __contains__(self, file_id: object) -> bool:
        return file_id in self._files

    def __len__(self) -> int:
        return len(self._files)

    def put(self, descriptor: FileDescriptor) -> None:
        self.put_many([descriptor])

    def put_many(self, descriptors: Iterable[FileDescriptor]) -> None:
        """Register descriptors, then persist once.

        The descriptors stay registered even if persisting fails; the caller
        gets a PersistenceFailure and the next successful persist writes them.
        """
        with self._lock:
            files = dict(self._files)
            for d in descriptors:
                files[d.id] = d
            self._files = files
            self._persist_locked()

    def persist(self) -> None:
        with self._lock:
            self._persist_locked()

    def _persist_locked(self) -> None:
        doc = {file_id: d.to_document() for file_id, d in self._files.items()}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._tmp_path.open("w", encoding="utf-8") as f:
                json.dump(doc, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(self._tmp_path, self._path)
        except OSError as e:
            logger.exception("Failed to persist metadata document %s", self._path)
            raise PersistenceFailure(f"could not write {self._path.name}: {e.strerror or e}") from e
