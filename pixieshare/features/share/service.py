import logging
from dataclasses import dataclass
from urllib.parse import quote

from pixieshare.domain.errors import BlobMissing, Gone
from pixieshare.domain.models import FileDescriptor
from pixieshare.infra.metadata import MetadataStore
from pixieshare.infra.storage import BlobStore, LocatedBlob

logger = logging.getLogger(__name__)

RAW_CACHE_CONTROL = "public, max-age=31536000, immutable"


def share_links(file_id: str) -> dict[str, str]:
    return {
        "view": f"/f/{file_id}",
        "raw": f"/raw/{file_id}",
        "download": f"/d/{file_id}",
    }


def content_disposition(filename: str, disposition: str = "attachment") -> str:
    """Build a Content-Disposition value carrying ``filename`` exactly.

    ``filename*`` (RFC 5987) holds the exact name; ``filename`` is a plain
    ASCII fallback for clients that ignore the extended form.
    """
    fallback = "".join(
        "_" if ord(ch) < 0x20 or ord(ch) >= 0x7F or ch in '"\\' else ch for ch in filename
    )
    encoded = quote(filename, safe="")
    return f"{disposition}; filename=\"{fallback}\"; filename*=utf-8''{encoded}"


@dataclass(frozen=True)
class SharedFile:
    descriptor: FileDescriptor
    blob: LocatedBlob


class ShareService:
    def __init__(self, *, blobs: BlobStore, metadata: MetadataStore) -> None:
        self._blobs = blobs
        self._metadata = metadata

    def resolve(self, *, file_id: str) -> FileDescriptor:
        return self._metadata.get(file_id)

    def open(self, *, file_id: str) -> SharedFile:
        descriptor = self._metadata.get(file_id)
        try:
            blob = self._blobs.locate(descriptor.stored_filename)
        except BlobMissing:
            logger.warning("Blob %s for file %s is missing on disk", descriptor.stored_filename, file_id)
            raise Gone(file_id)
        return SharedFile(descriptor=descriptor, blob=blob)
