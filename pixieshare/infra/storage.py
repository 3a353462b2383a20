import logging
import os
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from pixieshare.domain.errors import BlobMissing, SizeLimitExceeded
from pixieshare.domain.media import safe_extension

logger = logging.getLogger(__name__)

ID_BYTES = 9  # 12 url-safe characters
CHUNK_SIZE = 1024 * 1024


def new_file_id() -> str:
    return secrets.token_urlsafe(ID_BYTES)


@dataclass(frozen=True)
class StoredBlob:
    id: str
    stored_filename: str
    size_bytes: int


@dataclass(frozen=True)
class LocatedBlob:
    path: Path
    stat: os.stat_result


class BlobStore:
    def __init__(self, root: Path) -> None:
        self._root = root.resolve()

    @property
    def root(self) -> Path:
        return self._root

    def store(self, stream: BinaryIO, declared_name: str | None, max_bytes: int) -> StoredBlob:
        """Copy ``stream`` into the store under a fresh id.

        The bytes land in a ``.part`` file first and are renamed into place
        only once fully written, so a stored filename never names a partial
        blob.
        """
        self._root.mkdir(parents=True, exist_ok=True)
        file_id = new_file_id()
        stored_filename = file_id + safe_extension(declared_name)
        target = self._root / stored_filename
        partial = self._root / f".{stored_filename}.part"

        written = 0
        try:
            with partial.open("xb") as out:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > max_bytes:
                        raise SizeLimitExceeded(max_bytes)
                    out.write(chunk)
                out.flush()
                os.fsync(out.fileno())
            os.replace(partial, target)
        except BaseException:
            partial.unlink(missing_ok=True)
            raise

        return StoredBlob(id=file_id, stored_filename=stored_filename, size_bytes=written)

    def open(self, stored_filename: str) -> BinaryIO:
        path = self._resolve(stored_filename)
        try:
            return path.open("rb")
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            raise BlobMissing(stored_filename)

    def locate(self, stored_filename: str) -> LocatedBlob:
        """Path and stat of a stored blob, taken from an open handle."""
        with self.open(stored_filename) as fh:
            return LocatedBlob(path=Path(fh.name), stat=os.fstat(fh.fileno()))

    def _resolve(self, stored_filename: str) -> Path:
        if not stored_filename or "/" in stored_filename or "\\" in stored_filename:
            raise BlobMissing(stored_filename)
        path = (self._root / stored_filename).resolve()
        if path.parent != self._root:
            raise BlobMissing(stored_filename)
        return path
