"""Naming and validation rules for uploaded cover images."""

import os
import re
from datetime import datetime
from zoneinfo import ZoneInfo

DEFAULT_BASENAME = "image"
DEFAULT_EXTENSION = ".jpg"


def allowed_file(mime_type, allowed_mime_types):
    return mime_type in allowed_mime_types


def date_prefix(timezone, now=None):
    """Return ``YYYY-MM-DD`` for the local day in ``timezone``."""
    now = now or datetime.now(ZoneInfo(timezone))
    if now.tzinfo is not None:
        now = now.astimezone(ZoneInfo(timezone))
    return now.date().isoformat()


def _basename(name):
    return os.path.basename((name or "").replace("\\", "/"))


def file_extension(name):
    ext = os.path.splitext(_basename(name))[1].lower()
    ext = re.sub(r"[^a-z0-9.]", "", ext)
    return ext if len(ext) > 1 else DEFAULT_EXTENSION


def slugify_basename(name):
    """Lower-case slug of ``name`` without its extension.

    Whitespace runs become a single hyphen and anything outside
    ``[a-z0-9-_]`` is dropped. Falls back to ``"image"`` when nothing is left.
    """
    base = re.sub(r"\.[^/.]+$", "", _basename(name))
    base = base.strip().lower()
    base = re.sub(r"\s+", "-", base)
    base = re.sub(r"[^a-z0-9\-_]", "", base)
    return base or DEFAULT_BASENAME


def candidate_filename(prefix, base, ext, counter=0):
    if counter:
        return f"{prefix}-{base}-{counter}{ext}"
    return f"{prefix}-{base}{ext}"
