from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class FileDescriptor(BaseModel):
    """Metadata for one uploaded file.

    Serialized with camelCase keys. The legacy keys written by earlier
    versions of the metadata document (``filename``, ``mime``, ``size``) are
    accepted when loading.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    stored_filename: str = Field(
        min_length=1,
        serialization_alias="storedFilename",
        validation_alias=AliasChoices("storedFilename", "filename", "stored_filename"),
    )
    original_name: str = Field(
        serialization_alias="originalName",
        validation_alias=AliasChoices("originalName", "original_name"),
    )
    mime_type: str = Field(
        serialization_alias="mimeType",
        validation_alias=AliasChoices("mimeType", "mime", "mime_type"),
    )
    size_bytes: int = Field(
        ge=0,
        serialization_alias="sizeBytes",
        validation_alias=AliasChoices("sizeBytes", "size", "size_bytes"),
    )
    uploaded_at: datetime = Field(
        serialization_alias="uploadedAt",
        validation_alias=AliasChoices("uploadedAt", "uploaded_at"),
    )

    @field_validator("uploaded_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # Naive timestamps in older documents were written as UTC.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @property
    def size_mb(self) -> float:
        return self.size_bytes / 1024 / 1024
