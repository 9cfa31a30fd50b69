import io

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def image_field(name="cover.png", mime_type="image/png", data=PNG_BYTES):
    """Multipart tuple for the Flask test client."""
    return (io.BytesIO(data), name, mime_type)


def stored_files(upload_dir):
    if not upload_dir.exists():
        return []
    return sorted(p.name for p in upload_dir.iterdir())
