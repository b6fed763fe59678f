"""Tests for upload storage."""

from pathlib import Path

import pytest

from print_bot.domain.errors import StorageError
from print_bot.services.files import FileStorage


def test_store_writes_blob_under_its_own_directory(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path / "uploads")

    first = storage.store("chat-1", b"one", "doc.pdf")
    second = storage.store("chat-1", b"two", "doc.pdf")

    assert first != second
    assert first.name == "doc.pdf"
    assert first.read_bytes() == b"one"
    assert second.read_bytes() == b"two"
    assert first.parent.parent == tmp_path / "uploads"


def test_store_strips_directory_components(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path / "uploads")

    path = storage.store("chat-1", b"data", "../../etc/passwd")

    assert path.name == "passwd"
    assert path.parent.parent == tmp_path / "uploads"


def test_store_falls_back_for_empty_name(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path / "uploads")

    path = storage.store("chat-1", b"data", "..")

    assert path.name == "upload.bin"


def test_release_removes_file_and_directory(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path / "uploads")
    path = storage.store("chat-1", b"data", "doc.pdf")

    storage.release(path)

    assert not path.exists()
    assert not path.parent.exists()
    assert (tmp_path / "uploads").exists()


def test_release_twice_is_a_no_op(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path / "uploads")
    path = storage.store("chat-1", b"data", "doc.pdf")

    storage.release(path)
    storage.release(path)

    assert not path.exists()


def test_release_never_created_path(tmp_path: Path) -> None:
    storage = FileStorage(tmp_path / "uploads")

    storage.release(tmp_path / "uploads" / "missing" / "doc.pdf")


def test_store_raises_storage_error_when_directory_unwritable(
    tmp_path: Path,
) -> None:
    blocker = tmp_path / "uploads"
    blocker.write_text("not a directory")
    storage = FileStorage(blocker)

    with pytest.raises(StorageError):
        storage.store("chat-1", b"data", "doc.pdf")
