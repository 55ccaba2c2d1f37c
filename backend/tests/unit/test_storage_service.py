"""Unit tests for local upload storage."""

import io
from unittest.mock import patch

import pytest
from werkzeug.datastructures import FileStorage

from myskin.core.exceptions import StorageError, ValidationError
from myskin.services.storage_service import LocalFileStorage


def _upload(data=b"%PDF-1.4", filename="cv.pdf"):
    return FileStorage(stream=io.BytesIO(data), filename=filename)


class TestLocalFileStorage:
    def test_save_and_delete(self, tmp_path):
        storage = LocalFileStorage(root=str(tmp_path))

        url = storage.save(_upload(), "job-applications/cvs", {"pdf"})

        assert url.startswith("/uploads/job-applications/cvs/") and url.endswith(".pdf")
        stored = tmp_path / url[len("/uploads/"):]
        assert stored.read_bytes() == b"%PDF-1.4"
        assert storage.delete(url) is True
        assert not stored.exists()

    def test_disallowed_extension_is_validation_error(self, tmp_path):
        storage = LocalFileStorage(root=str(tmp_path))

        with pytest.raises(ValidationError) as exc_info:
            storage.save(_upload(b"MZ", "cv.exe"), "job-applications/cvs", {"pdf", "doc"}, field="cv")

        assert exc_info.value.status_code == 400
        assert exc_info.value.errors == ["cv: File type not allowed. Allowed types: doc, pdf"]
        assert list(tmp_path.iterdir()) == []

    def test_missing_file_is_validation_error(self, tmp_path):
        storage = LocalFileStorage(root=str(tmp_path))

        with pytest.raises(ValidationError) as exc_info:
            storage.save(FileStorage(stream=io.BytesIO(b""), filename=""), "general", {"png"})

        assert exc_info.value.errors == ["file: is required"]

    def test_write_failure_is_storage_error(self, tmp_path):
        storage = LocalFileStorage(root=str(tmp_path))
        upload = _upload(b"\x89PNG", "a.png")

        with patch.object(upload, "save", side_effect=OSError("disk full")):
            with pytest.raises(StorageError) as exc_info:
                storage.save(upload, "general", {"png"})

        assert exc_info.value.status_code == 500
