import json
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path

import pytest

from pixieshare.domain.errors import NotFound, PersistenceFailure
from pixieshare.domain.models import FileDescriptor
from pixieshare.infra.metadata import MetadataStore


def _descriptor(file_id: str, name: str = "cat.png") -> FileDescriptor:
    return FileDescriptor(
        id=file_id,
        stored_filename=f"{file_id}.png",
        original_name=name,
        mime_type="image/png",
        size_bytes=42,
        uploaded_at=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
    )


def test_missing_document_loads_empty(tmp_path: Path) -> None:
    store = MetadataStore(tmp_path / "_files.json")
    store.load()
    assert len(store) == 0


def test_corrupt_document_loads_empty_with_warning(tmp_path: Path, caplog) -> None:
    path = tmp_path / "_files.json"
    path.write_text('{"abc": {"id": "abc", ')
    store = MetadataStore(path)

    with caplog.at_level(logging.WARNING):
        store.load()

    assert len(store) == 0
    assert "corrupt" in caplog.text


def test_non_object_document_loads_empty(tmp_path: Path) -> None:
    path = tmp_path / "_files.json"
    path.write_text("[1, 2, 3]")
    store = MetadataStore(path)
    store.load()
    assert len(store) == 0


def test_put_persists_camel_case_document(tmp_path: Path) -> None:
    path = tmp_path / "_files.json"
    store = MetadataStore(path)
    store.put(_descriptor("abcdefghijkl"))

    doc = json.loads(path.read_text())
    assert doc == {
        "abcdefghijkl": {
            "id": "abcdefghijkl",
            "storedFilename": "abcdefghijkl.png",
            "originalName": "cat.png",
            "mimeType": "image/png",
            "sizeBytes": 42,
            "uploadedAt": "2024-05-01T12:30:00Z",
        }
    }
    assert not (tmp_path / "_files.json.tmp").exists()


def test_reload_round_trips_descriptors(tmp_path: Path) -> None:
    path = tmp_path / "_files.json"
    first = MetadataStore(path)
    first.put_many([_descriptor("aaaaaaaaaaaa"), _descriptor("bbbbbbbbbbbb", name="dog & <co>.png")])

    second = MetadataStore(path)
    second.load()

    assert second.get("bbbbbbbbbbbb") == _descriptor("bbbbbbbbbbbb", name="dog & <co>.png")
    assert len(second) == 2


def test_load_accepts_legacy_field_names(tmp_path: Path) -> None:
    path = tmp_path / "_files.json"
    path.write_text(
        json.dumps(
            {
                "V1StGXR8_Z5j": {
                    "id": "V1StGXR8_Z5j",
                    "filename": "V1StGXR8_Z5j.mp3",
                    "originalName": "song.mp3",
                    "mime": "audio/mpeg",
                    "size": 1234,
                    "uploadedAt": "2023-11-02T08:00:00.000Z",
                }
            }
        )
    )
    store = MetadataStore(path)
    store.load()

    d = store.get("V1StGXR8_Z5j")
    assert d.stored_filename == "V1StGXR8_Z5j.mp3"
    assert d.mime_type == "audio/mpeg"
    assert d.size_bytes == 1234


def test_invalid_entries_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "_files.json"
    good = _descriptor("goodgoodgood").to_document()
    path.write_text(
        json.dumps(
            {
                "goodgoodgood": good,
                "broken": {"id": "broken"},
                "mismatch": {**good, "id": "somethingels"},
            }
        )
    )
    store = MetadataStore(path)
    store.load()

    assert "goodgoodgood" in store
    assert "broken" not in store
    assert "mismatch" not in store


def test_get_unknown_id_raises_not_found(tmp_path: Path) -> None:
    store = MetadataStore(tmp_path / "_files.json")
    with pytest.raises(NotFound):
        store.get("nope")


def test_concurrent_puts_keep_every_entry(tmp_path: Path) -> None:
    path = tmp_path / "_files.json"
    store = MetadataStore(path)
    ids = [f"id{i:010d}" for i in range(64)]

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(lambda i: store.put(_descriptor(i)), ids))

    doc = json.loads(path.read_text())
    assert sorted(doc) == ids
    assert len(store) == 64


def test_persist_failure_is_reported_and_keeps_entry_in_memory(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = MetadataStore(blocker / "_files.json")

    with pytest.raises(PersistenceFailure):
        store.put(_descriptor("abcdefghijkl"))

    assert store.get("abcdefghijkl").original_name == "cat.png"


def test_persist_after_failure_writes_pending_entries(tmp_path: Path) -> None:
    path = tmp_path / "_files.json"
    blocking_tmp = tmp_path / "_files.json.tmp"
    blocking_tmp.mkdir()
    store = MetadataStore(path)

    with pytest.raises(PersistenceFailure):
        store.put(_descriptor("abcdefghijkl"))
    assert not path.exists()

    blocking_tmp.rmdir()
    store.persist()

    assert list(json.loads(path.read_text())) == ["abcdefghijkl"]


def test_uploaded_at_is_normalised_to_utc(tmp_path: Path) -> None:
    path = tmp_path / "_files.json"
    naive = _descriptor("naivenaive12").to_document() | {"id": "naivenaive12", "uploadedAt": "2023-11-02T08:00:00"}
    offset = _descriptor("offsetoffset").to_document() | {"id": "offsetoffset", "uploadedAt": "2023-11-02T08:00:00+02:00"}
    path.write_text(json.dumps({"naivenaive12": naive, "offsetoffset": offset}))
    store = MetadataStore(path)
    store.load()

    assert store.get("naivenaive12").uploaded_at == datetime(2023, 11, 2, 8, 0, tzinfo=timezone.utc)
    shifted = store.get("offsetoffset").uploaded_at
    assert shifted.utcoffset().total_seconds() == 0
    assert shifted.hour == 6
