import pytest

from inventory_api.core.errors import NotFoundError, StorageWriteError
from inventory_api.storage import blob_store as blob_store_module
from inventory_api.storage.blob_store import LocalBlobStore

from conftest import stored_files


def test_root_directory_is_created_recursively(tmp_path):
    root = tmp_path / "a" / "b" / "uploads"
    LocalBlobStore(str(root))
    assert root.is_dir()


def test_store_keeps_extension_and_content(blob_store):
    ref = blob_store.store(b"\xff\xd8binary", "Camera Shot.JPG")

    assert ref.startswith("photo-")
    assert ref.endswith(".jpg")
    with blob_store.retrieve(ref) as fh:
        assert fh.read() == b"\xff\xd8binary"


def test_store_without_original_name_has_no_extension(blob_store):
    ref = blob_store.store(b"data", None)
    assert "." not in ref
    assert blob_store.exists(ref)


def test_each_store_gets_a_new_key(blob_store):
    first = blob_store.store(b"one", "a.png")
    second = blob_store.store(b"two", "a.png")

    assert first != second
    assert stored_files(blob_store.root) == sorted([first, second])


def test_store_never_overwrites_existing_blob(blob_store, monkeypatch):
    keys = iter(["photo-1-1.jpg", "photo-1-1.jpg", "photo-1-2.jpg"])
    monkeypatch.setattr(blob_store_module, "_generate_key", lambda name: next(keys))

    first = blob_store.store(b"original", "x.jpg")
    second = blob_store.store(b"newer", "x.jpg")

    assert (first, second) == ("photo-1-1.jpg", "photo-1-2.jpg")
    with blob_store.retrieve(first) as fh:
        assert fh.read() == b"original"


def test_store_io_failure_raises_storage_write_error(blob_store, monkeypatch):
    def broken_open(*args, **kwargs):
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr(blob_store_module, "open", broken_open, raising=False)

    with pytest.raises(StorageWriteError):
        blob_store.store(b"data", "a.jpg")


@pytest.mark.parametrize("ref", [None, "", "photo-missing.jpg"])
def test_retrieve_missing_raises_not_found(blob_store, ref):
    with pytest.raises(NotFoundError):
        blob_store.retrieve(ref)


def test_delete_is_idempotent(blob_store):
    ref = blob_store.store(b"data", "a.jpg")

    assert blob_store.delete(ref) is True
    assert blob_store.delete(ref) is False
    assert blob_store.delete(None) is False
    assert not blob_store.exists(ref)


def test_references_outside_root_are_refused(blob_store, tmp_path):
    outsider = tmp_path / "outside.jpg"
    outsider.write_bytes(b"keep me")

    with pytest.raises(NotFoundError):
        blob_store.retrieve("../../outside.jpg")
    assert blob_store.delete("../../outside.jpg") is False
    assert outsider.exists()


@pytest.mark.parametrize("ref", [None, ""])
def test_delete_without_reference_is_logged(blob_store, caplog, ref):
    with caplog.at_level("INFO", logger="inventory_api.storage.blob_store"):
        assert blob_store.delete(ref) is False

    assert "No photo reference to delete" in caplog.messages
