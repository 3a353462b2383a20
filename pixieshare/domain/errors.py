from __future__ import annotations


class PixieShareError(Exception):
    code = "pixieshare_error"


class NotFound(PixieShareError):
    code = "not_found"

    def __init__(self, file_id: str):
        super().__init__(f"unknown file id: {file_id}")
        self.file_id = file_id


class Gone(PixieShareError):
    """The descriptor exists but its blob is no longer on disk."""

    code = "gone"

    def __init__(self, file_id: str):
        super().__init__(f"file {file_id} is no longer available")
        self.file_id = file_id


class BlobMissing(PixieShareError):
    code = "blob_missing"

    def __init__(self, stored_filename: str):
        super().__init__(f"blob not found: {stored_filename}")
        self.stored_filename = stored_filename


class SizeLimitExceeded(PixieShareError):
    code = "file_too_large"

    def __init__(self, max_bytes: int):
        mb, rest = divmod(max_bytes, 1024 * 1024)
        limit = f"{mb} MB" if mb and not rest else f"{max_bytes} byte"
        super().__init__(f"file exceeds the {limit} limit")
        self.max_bytes = max_bytes


class PersistenceFailure(PixieShareError):
    code = "metadata_persist_failed"


class MalformedRequest(PixieShareError):
    code = "malformed_request"
