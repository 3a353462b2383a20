import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from pixieshare.domain.errors import MalformedRequest, PersistenceFailure, SizeLimitExceeded
from pixieshare.domain.media import infer_mime_type
from pixieshare.domain.models import FileDescriptor
from pixieshare.features.share.service import share_links
from pixieshare.infra.metadata import MetadataStore
from pixieshare.infra.storage import BlobStore

logger = logging.getLogger(__name__)


class UploadService:
    def __init__(self, *, blobs: BlobStore, metadata: MetadataStore, max_bytes: int) -> None:
        self._blobs = blobs
        self._metadata = metadata
        self._max_bytes = max_bytes

    async def upload_files(self, *, files: list[UploadFile]) -> dict[str, Any]:
        """Store every part independently, then register the successes at once.

        A part that fails (too large, disk error) gets an error entry in the
        result; its siblings are unaffected. If the metadata document cannot be
        written the result carries a batch-level ``error`` and the stored blobs
        are left in place.
        """
        if not files:
            raise MalformedRequest("no files in upload")

        uploaded_at = datetime.now(timezone.utc)
        entries: list[dict[str, Any]] = []
        stored: list[FileDescriptor] = []

        for file in files:
            name = file.filename or ""
            try:
                descriptor = await self._store_one(file, uploaded_at)
            except SizeLimitExceeded as e:
                logger.warning("Rejected %r: larger than %d bytes", name, e.max_bytes)
                entries.append({"name": name, "error": e.code, "message": str(e)})
                continue
            except OSError as e:
                logger.exception("Failed to store %r", name)
                entries.append({"name": name, "error": "storage_failed", "message": e.strerror or str(e)})
                continue

            stored.append(descriptor)
            entries.append({"id": descriptor.id, "name": descriptor.original_name, **share_links(descriptor.id)})

        result: dict[str, Any] = {"files": entries}
        if stored:
            try:
                await run_in_threadpool(self._metadata.put_many, stored)
            except PersistenceFailure as e:
                result["error"] = e.code
                result["message"] = str(e)
        return result

    async def _store_one(self, file: UploadFile, uploaded_at: datetime) -> FileDescriptor:
        if file.size is not None and file.size > self._max_bytes:
            raise SizeLimitExceeded(self._max_bytes)

        blob = await run_in_threadpool(self._blobs.store, file.file, file.filename, self._max_bytes)
        descriptor = FileDescriptor(
            id=blob.id,
            stored_filename=blob.stored_filename,
            original_name=file.filename or blob.stored_filename,
            mime_type=infer_mime_type(file.content_type, file.filename),
            size_bytes=blob.size_bytes,
            uploaded_at=uploaded_at,
        )
        logger.info(
            "Stored %r as %s (%s, %d bytes)",
            descriptor.original_name,
            descriptor.stored_filename,
            descriptor.mime_type,
            descriptor.size_bytes,
        )
        return descriptor
