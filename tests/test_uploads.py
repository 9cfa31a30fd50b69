import os
from datetime import datetime, timezone

import pytest

from catalog_admin.errors import StorageError, ValidationError
from catalog_admin.utils import uploads
from catalog_admin.utils.uploads import UploadedFile, UploadStore

FIXED_NOW = datetime(2026, 2, 19, 3, 0, tzinfo=timezone.utc)


def make_file(name="Laut Bercerita.jpeg", mime_type="image/jpeg", data=b"cover-bytes"):
    return UploadedFile(name=name, mime_type=mime_type, size=len(data), data=data)


@pytest.fixture
def store(tmp_path):
    return UploadStore(str(tmp_path / "uploads"), clock=lambda: FIXED_NOW)


def resolve(store, reference_path):
    return store.path_for(reference_path)


class TestSave:
    def test_writes_exact_bytes(self, store):
        stored = store.save(make_file(data=b"\xff\xd8\xff payload"))

        assert stored.filename == "2026-02-19-laut-bercerita.jpeg"
        assert stored.reference_path == "/uploads/2026-02-19-laut-bercerita.jpeg"
        with open(resolve(store, stored.reference_path), "rb") as fh:
            assert fh.read() == b"\xff\xd8\xff payload"

    def test_creates_missing_directory(self, tmp_path):
        store = UploadStore(str(tmp_path / "a" / "b"), clock=lambda: FIXED_NOW)
        store.save(make_file())
        assert (tmp_path / "a" / "b").is_dir()

    @pytest.mark.parametrize("mime_type", ["image/jpeg", "image/png", "image/webp"])
    def test_accepts_allowed_types(self, store, mime_type):
        store.save(make_file(mime_type=mime_type))

    @pytest.mark.parametrize("mime_type", ["image/gif", "application/pdf", "text/html", ""])
    def test_rejects_other_types_without_writing(self, store, mime_type):
        with pytest.raises(ValidationError) as excinfo:
            store.save(make_file(mime_type=mime_type))

        assert excinfo.value.message == "Format gambar harus JPG/PNG/WEBP."
        assert excinfo.value.errors[0]["field"] == "image"
        assert not tmp_listing(store)

    def test_rejects_oversized_without_writing(self, store):
        data = b"x" * (5 * 1024 * 1024 + 1)
        with pytest.raises(ValidationError, match="maksimal 5MB"):
            store.save(make_file(data=data))
        assert not tmp_listing(store)

    def test_size_ceiling_is_inclusive(self, store):
        store.save(make_file(data=b"x" * (5 * 1024 * 1024)))

    def test_same_name_same_day_gets_counter(self, store):
        first = store.save(make_file(data=b"one"))
        second = store.save(make_file(data=b"two"))
        third = store.save(make_file(data=b"three"))

        assert first.filename == "2026-02-19-laut-bercerita.jpeg"
        assert second.filename == "2026-02-19-laut-bercerita-1.jpeg"
        assert third.filename == "2026-02-19-laut-bercerita-2.jpeg"
        with open(resolve(store, first.reference_path), "rb") as fh:
            assert fh.read() == b"one"

    def test_defaults_for_nameless_file(self, store):
        stored = store.save(make_file(name=""))
        assert stored.filename == "2026-02-19-image.jpg"

    def test_gives_up_after_attempt_cap(self, store, monkeypatch):
        monkeypatch.setattr(uploads, "MAX_NAME_ATTEMPTS", 2)
        store.save(make_file())
        store.save(make_file())
        with pytest.raises(StorageError):
            store.save(make_file())

    def test_failed_write_leaves_no_partial_file(self, store, monkeypatch):
        class FullDisk:
            def __init__(self, fh):
                self.fh = fh

            def __enter__(self):
                return self

            def __exit__(self, *exc_info):
                self.fh.close()

            def write(self, data):
                self.fh.write(data[: len(data) // 2])
                raise OSError(28, "No space left on device")

        monkeypatch.setattr(uploads, "open", lambda path, mode: FullDisk(open(path, mode)),
                            raising=False)

        with pytest.raises(StorageError, match="Gagal menyimpan gambar"):
            store.save(make_file())
        assert tmp_listing(store) == []


class TestDeleteByReference:
    def test_removes_existing_file(self, store):
        stored = store.save(make_file())
        store.delete_by_reference(stored.reference_path)
        assert not tmp_listing(store)

    def test_already_deleted_is_noop(self, store):
        stored = store.save(make_file())
        store.delete_by_reference(stored.reference_path)
        store.delete_by_reference(stored.reference_path)

    @pytest.mark.parametrize("reference", [
        "/etc/passwd",
        "https://example.com/uploads/a.png",
        "uploads/a.png",
        "/uploads/",
        None,
    ])
    def test_outside_prefix_is_noop(self, store, reference):
        stored = store.save(make_file())
        store.delete_by_reference(reference)
        assert tmp_listing(store) == [stored.filename]

    def test_traversal_only_touches_upload_folder(self, store, tmp_path):
        outside = tmp_path / "keep.txt"
        outside.write_text("keep")
        store.delete_by_reference("/uploads/../keep.txt")
        assert outside.exists()

    def test_other_errors_propagate(self, store):
        stored = store.save(make_file())
        path = resolve(store, stored.reference_path)
        # a directory where the file should be
        os.remove(path)
        os.mkdir(path)
        with pytest.raises(OSError):
            store.delete_by_reference(stored.reference_path)


def tmp_listing(store):
    if not os.path.isdir(store.folder):
        return []
    return sorted(os.listdir(store.folder))
