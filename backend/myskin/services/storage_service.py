"""
Local file storage for uploads (CVs, product and blog images).

Files are written below ``UPLOAD_FOLDER`` with a random name that keeps the
original extension, and served back from ``/uploads/<path>``.
"""

import logging
import os
import uuid
from typing import Iterable, Optional

from werkzeug.utils import secure_filename

from myskin.core.config import get_upload_folder
from myskin.core.exceptions import StorageError, ValidationError
from myskin.domain.interfaces import IFileStorage

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads/"


def file_extension(filename: Optional[str]) -> str:
    safe = secure_filename(filename or "")
    if "." not in safe:
        return ""
    return safe.rsplit(".", 1)[1].lower()


class LocalFileStorage(IFileStorage):
    def __init__(self, root: Optional[str] = None):
        self.root = os.path.abspath(root or get_upload_folder())

    def _resolve(self, relative_path: str) -> str:
        path = os.path.abspath(os.path.join(self.root, relative_path))
        if os.path.commonpath([path, self.root]) != self.root:
            raise StorageError("Invalid file path")
        return path

    def save(
        self, file_storage, folder: str, allowed_extensions: Iterable[str], field: str = "file"
    ) -> str:
        """
        Store an uploaded ``werkzeug.datastructures.FileStorage``.

        Returns:
            Public URL of the stored file

        Raises:
            ValidationError: If the file is missing or its extension is not allowed
            StorageError: If the file cannot be written
        """
        if file_storage is None or not file_storage.filename:
            raise ValidationError("No file provided", [f"{field}: is required"])

        allowed = {ext.lower() for ext in allowed_extensions}
        extension = file_extension(file_storage.filename)
        if extension not in allowed:
            message = f"File type not allowed. Allowed types: {', '.join(sorted(allowed))}"
            raise ValidationError(message, [f"{field}: {message}"])

        folder = folder.strip("/")
        relative_path = f"{folder}/{uuid.uuid4().hex}.{extension}"
        destination = self._resolve(relative_path)
        try:
            os.makedirs(os.path.dirname(destination), exist_ok=True)
            file_storage.save(destination)
        except OSError as e:
            logger.error(
                "Failed to store uploaded file",
                extra={"context": {"folder": folder, "error": str(e)}},
                exc_info=True,
            )
            raise StorageError("Failed to upload file") from e

        logger.info(
            "Stored uploaded file",
            extra={"context": {"path": relative_path, "original_name": file_storage.filename}},
        )
        return f"{UPLOAD_URL_PREFIX}{relative_path}"

    def delete(self, url: str) -> bool:
        if not url or not url.startswith(UPLOAD_URL_PREFIX):
            return False
        try:
            path = self._resolve(url[len(UPLOAD_URL_PREFIX):])
        except StorageError:
            return False
        if not os.path.isfile(path):
            return False
        try:
            os.remove(path)
        except OSError as e:
            logger.warning(
                "Failed to delete stored file",
                extra={"context": {"url": url, "error": str(e)}},
            )
            return False
        return True
