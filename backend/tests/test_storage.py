import io

import pytest

from image_service.services.errors import StorageDeleteFailure, StorageWriteFailure, UnsafePath


def test_store_writes_under_folder_and_returns_relative_path(disk, storage_root):
    path = disk.store(io.BytesIO(b"data"), "media/en", "photo.png")
    assert path == "media/en/photo.png"
    assert (storage_root / "public" / "media" / "en" / "photo.png").read_bytes() == b"data"
    assert disk.exists(path)


def test_url_joins_base_url_and_path(disk):
    assert disk.url("media/photo.png") == "/storage/media/photo.png"
    disk.base_url = "https://cdn.example.com/assets/"
    assert disk.url("/media/photo.png") == "https://cdn.example.com/assets/media/photo.png"


def test_paths_outside_root_are_rejected(disk):
    with pytest.raises(UnsafePath):
        disk.store(io.BytesIO(b"x"), "../outside", "evil.png")
    with pytest.raises(UnsafePath):
        disk.exists("../../etc/passwd")


def test_delete_missing_file_returns_false(disk):
    assert disk.delete("media/none.png") is False


def test_delete_failure_is_reported(disk, storage_root):
    (storage_root / "public" / "folder").mkdir()
    with pytest.raises(StorageDeleteFailure):
        disk.delete("folder")


def test_staged_copy_is_removed_after_finalize(disk, storage_root):
    with disk.staged(io.BytesIO(b"payload")) as staged_path:
        assert staged_path.read_bytes() == b"payload"
        path = disk.put_file_as(staged_path, "profile_pics", "avatar.png")
    assert path == "profile_pics/avatar.png"
    assert not staged_path.exists()
    assert list((storage_root / "temp").iterdir()) == []


def test_staged_copy_is_removed_when_finalize_fails(disk, storage_root):
    with pytest.raises(StorageWriteFailure):
        with disk.staged(io.BytesIO(b"payload")) as staged_path:
            staged_path.unlink()
            disk.put_file_as(staged_path, "profile_pics", "avatar.png")
    assert list((storage_root / "temp").iterdir()) == []


def test_exists_is_false_for_overlong_names(disk):
    assert disk.exists("x" * 300 + ".png") is False


def test_paths_with_null_bytes_are_rejected(disk):
    with pytest.raises(UnsafePath):
        disk.path("media/a\x00b.png")
    with pytest.raises(UnsafePath):
        disk.store(io.BytesIO(b"x"), "a\x00b", "photo.png")
