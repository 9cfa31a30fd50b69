"""Filesystem storage for uploaded cover images.

Files live flat under one folder and are referenced elsewhere only by their
public path (``/uploads/<filename>``).  Names follow
``<YYYY-MM-DD>-<slug>[-<n>]<ext>`` where the date is the local day in the
configured timezone.
"""

import logging
import os
from collections import namedtuple
from contextlib import suppress

from flask import current_app

from catalog_admin.errors import StorageError, ValidationError, field_error
from catalog_admin.utils.file_rules import (
    allowed_file,
    candidate_filename,
    date_prefix,
    file_extension,
    slugify_basename,
)

logger = logging.getLogger(__name__)

UploadedFile = namedtuple("UploadedFile", ["name", "mime_type", "size", "data"])
StoredFile = namedtuple("StoredFile", ["filename", "reference_path"])

MAX_NAME_ATTEMPTS = 1000


def uploaded_file_from_storage(storage):
    """Read a werkzeug ``FileStorage`` into an :class:`UploadedFile`."""
    data = storage.read()
    return UploadedFile(
        name=storage.filename or "",
        mime_type=storage.mimetype or "",
        size=len(data),
        data=data,
    )


class UploadStore:
    def __init__(self, folder, url_prefix="/uploads", max_size=5 * 1024 * 1024,
                 allowed_mime_types=("image/jpeg", "image/png", "image/webp"),
                 timezone="Asia/Jakarta", clock=None):
        self.folder = folder
        self.url_prefix = "/" + url_prefix.strip("/")
        self.max_size = max_size
        self.allowed_mime_types = frozenset(allowed_mime_types)
        self.timezone = timezone
        self.clock = clock

    @classmethod
    def from_config(cls, config):
        return cls(
            folder=config["UPLOAD_FOLDER"],
            url_prefix=config["UPLOAD_URL_PREFIX"],
            max_size=config["UPLOAD_MAX_SIZE"],
            allowed_mime_types=config["UPLOAD_ALLOWED_MIME_TYPES"],
            timezone=config["UPLOAD_TIMEZONE"],
        )

    def validate(self, file):
        if not allowed_file(file.mime_type, self.allowed_mime_types):
            message = "Format gambar harus JPG/PNG/WEBP."
            raise ValidationError(message, [field_error("image", message)])
        if file.size > self.max_size:
            message = f"Ukuran gambar maksimal {self.max_size // (1024 * 1024)}MB."
            raise ValidationError(message, [field_error("image", message)])

    def save(self, file):
        """Validate and write ``file``; return a :class:`StoredFile`.

        Validation happens before anything touches the disk.  Each candidate
        name is opened with exclusive create, so a name taken by a concurrent
        upload moves on to the next counter instead of being overwritten.
        """
        self.validate(file)

        os.makedirs(self.folder, exist_ok=True)

        now = self.clock() if self.clock else None
        prefix = date_prefix(self.timezone, now)
        base = slugify_basename(file.name)
        ext = file_extension(file.name)

        for counter in range(MAX_NAME_ATTEMPTS):
            filename = candidate_filename(prefix, base, ext, counter)
            full_path = os.path.join(self.folder, filename)
            try:
                fh = open(full_path, "xb")
            except FileExistsError:
                continue
            except OSError as exc:
                raise StorageError(f"Gagal menyimpan gambar: {exc}") from exc
            try:
                with fh:
                    fh.write(file.data)
            except OSError as exc:
                # No dejar archivos a medias
                with suppress(OSError):
                    os.remove(full_path)
                raise StorageError(f"Gagal menyimpan gambar: {exc}") from exc
            logger.info("📸 Imagen guardada: %s", filename)
            return StoredFile(filename, f"{self.url_prefix}/{filename}")

        raise StorageError(f"Terlalu banyak file dengan nama {base}{ext} hari ini.")

    def is_local_reference(self, reference_path):
        return (isinstance(reference_path, str)
                and reference_path.startswith(self.url_prefix + "/")
                and bool(os.path.basename(reference_path)))

    def path_for(self, reference_path):
        # Solo el nombre, nunca rutas relativas
        return os.path.join(self.folder, os.path.basename(reference_path))

    def delete_by_reference(self, reference_path):
        """Remove the file behind ``reference_path``.

        Paths outside the public prefix and files already gone are ignored;
        any other ``OSError`` propagates.
        """
        if not self.is_local_reference(reference_path):
            return
        try:
            os.remove(self.path_for(reference_path))
        except FileNotFoundError:
            return
        logger.info("🗑️ Imagen eliminada: %s", reference_path)


def get_upload_store():
    return current_app.extensions["upload_store"]


def discard_upload(reference_path):
    """Best-effort delete: failures are logged, never raised."""
    try:
        get_upload_store().delete_by_reference(reference_path)
    except OSError as exc:
        current_app.logger.warning("⚠️ No se pudo eliminar %s: %s", reference_path, exc)
