# belajarshafa/services/upload_service.py
import logging
import os
import re
import time
import uuid

from botocore.exceptions import BotoCoreError, ClientError

from belajarshafa.core.config import settings
from belajarshafa.core.exceptions import BadRequestError

logger = logging.getLogger(__name__)

DOCUMENT_MIME_TYPES = {
    ".pdf": "application/pdf",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}

IMAGE_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}

DOCUMENT_PREFIX = "course-materials"
IMAGE_PREFIX = "course-thumbnails"


def _split_name(filename: str):
    stem, ext = os.path.splitext(filename)
    return stem, ext.lower()


def generate_key(prefix: str, filename: str) -> str:
    """``<prefix>/<ms timestamp>-<uuid4>-<sanitized stem><ext>``"""
    stem, ext = _split_name(filename)
    sanitized = re.sub(r"[^a-zA-Z0-9]", "-", stem).lower()
    timestamp = int(time.time() * 1000)
    return f"{prefix}/{timestamp}-{uuid.uuid4()}-{sanitized}{ext}"


def public_url(key: str) -> str:
    return f"{settings.S3_PUBLIC_BASE_URL.rstrip('/')}/{key}"


def _upload(
    s3_client,
    *,
    filename: str,
    data: bytes,
    allowed: dict,
    max_size: int,
    prefix: str,
    kind: str,
) -> dict:
    if not filename:
        raise BadRequestError("No file provided")

    _, ext = _split_name(filename)
    if ext not in allowed:
        raise BadRequestError(
            f"Invalid {kind} type. Allowed types: {', '.join(sorted(allowed))}"
        )

    size = len(data)
    if size > max_size:
        raise BadRequestError(
            f"File size exceeds maximum allowed size of {max_size // (1024 * 1024)}MB"
        )

    key = generate_key(prefix, filename)
    try:
        s3_client.put_object(
            Bucket=settings.S3_BUCKET_NAME,
            Key=key,
            Body=data,
            ContentType=allowed[ext],
        )
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Failed to upload {filename} to {key}: {e}", exc_info=True)
        raise BadRequestError(f"Failed to upload file: {e}")

    logger.info(f"Uploaded {filename} ({size} bytes) to {key}")
    return {
        "url": public_url(key),
        "file_name": filename,
        "file_size": size,
        "key": key,
    }


def upload_document(s3_client, *, filename: str, data: bytes) -> dict:
    return _upload(
        s3_client,
        filename=filename,
        data=data,
        allowed=DOCUMENT_MIME_TYPES,
        max_size=settings.MAX_DOCUMENT_SIZE,
        prefix=DOCUMENT_PREFIX,
        kind="file",
    )


def upload_image(s3_client, *, filename: str, data: bytes) -> dict:
    return _upload(
        s3_client,
        filename=filename,
        data=data,
        allowed=IMAGE_MIME_TYPES,
        max_size=settings.MAX_IMAGE_SIZE,
        prefix=IMAGE_PREFIX,
        kind="image",
    )
