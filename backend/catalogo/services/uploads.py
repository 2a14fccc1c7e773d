"""Image uploads for products, categories and store branding."""

import logging
import uuid
from pathlib import Path

from fastapi import UploadFile

from catalogo.core.config import settings

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}
CHUNK_SIZE = 64 * 1024


class UploadRejected(ValueError):
    pass


def max_upload_bytes() -> int:
    return settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024


async def save_image(file: UploadFile, folder: str, prefix: str) -> str:
    """Validate and store an uploaded image. Returns its public URL path."""
    if file.content_type not in ALLOWED_CONTENT_TYPES:
        raise UploadRejected(
            f"File type not allowed. Use: {', '.join(sorted(ALLOWED_CONTENT_TYPES))}"
        )

    limit = max_upload_bytes()
    # Check Content-Length header first (if available) to reject early
    if file.size and file.size > limit:
        raise UploadRejected(f"File too large. Max {settings.MAX_UPLOAD_SIZE_MB}MB")

    # Read in chunks to limit memory usage
    chunks = []
    total_size = 0
    while True:
        chunk = await file.read(CHUNK_SIZE)
        if not chunk:
            break
        total_size += len(chunk)
        if total_size > limit:
            raise UploadRejected(f"File too large. Max {settings.MAX_UPLOAD_SIZE_MB}MB")
        chunks.append(chunk)

    target_dir = Path(settings.UPLOAD_DIR) / folder
    target_dir.mkdir(parents=True, exist_ok=True)
    filename = f"{prefix}_{uuid.uuid4().hex[:8]}.{ALLOWED_CONTENT_TYPES[file.content_type]}"
    (target_dir / filename).write_bytes(b"".join(chunks))

    logger.info("Stored upload %s/%s (%d bytes)", folder, filename, total_size)
    return f"/uploads/{folder}/{filename}"


def delete_local_image(url: str | None) -> None:
    """Remove a previously uploaded file; URLs that are not local are ignored."""
    if not url or not url.startswith("/uploads/"):
        return
    path = Path(settings.UPLOAD_DIR) / url.removeprefix("/uploads/")
    if path.is_file():
        path.unlink()
