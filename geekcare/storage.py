"""Object storage for uploaded files (medical records, support attachments)."""

import logging
import uuid
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import HTTPException, UploadFile

from .config import (
    STORAGE_ACCESS_KEY_ID,
    STORAGE_BUCKET_NAME,
    STORAGE_ENDPOINT_URL,
    STORAGE_REGION,
    STORAGE_SECRET_ACCESS_KEY,
)

logger = logging.getLogger(__name__)

# Presigned URL expiration time (1 hour)
PRESIGNED_URL_EXPIRATION = 3600

# Characters never allowed in uploaded filenames
DANGEROUS_FILENAME_CHARS = ["..", "/", "\\", "<", ">", ":", '"', "|", "?", "*"]


def get_storage_client():
    """Create and return an S3-compatible storage client."""
    return boto3.client(
        "s3",
        endpoint_url=STORAGE_ENDPOINT_URL,
        aws_access_key_id=STORAGE_ACCESS_KEY_ID,
        aws_secret_access_key=STORAGE_SECRET_ACCESS_KEY,
        region_name=STORAGE_REGION,
        config=Config(signature_version="s3v4"),
    )


def generate_presigned_url(key: str, expiration: int = PRESIGNED_URL_EXPIRATION) -> str:
    """Generate a presigned URL for accessing a private object."""
    client = get_storage_client()
    params = {"Bucket": STORAGE_BUCKET_NAME, "Key": key, "ResponseContentDisposition": "inline"}
    try:
        return client.generate_presigned_url("get_object", Params=params, ExpiresIn=expiration)
    except (BotoCoreError, ClientError) as e:
        logger.error(f"❌ Failed to generate presigned URL for key {key}: {e}")
        raise


def presigned_url_or_none(key: Optional[str]) -> Optional[str]:
    """Presigned URL for listing endpoints; a storage failure must not break the list"""
    if not key:
        return None
    try:
        return generate_presigned_url(key)
    except (BotoCoreError, ClientError):
        return None


def validate_filename(filename: Optional[str], allowed_extensions: tuple[str, ...]) -> str:
    """Reject path traversal attempts and unexpected extensions; returns the extension"""
    if not filename:
        raise HTTPException(status_code=400, detail="Filename is required")

    for char in DANGEROUS_FILENAME_CHARS:
        if char in filename:
            logger.warning(f"❌ Dangerous character '{char}' detected in filename: '{filename}'")
            raise HTTPException(
                status_code=400, detail=f"Invalid filename - contains dangerous character '{char}'"
            )

    if len(filename) > 255:
        raise HTTPException(status_code=400, detail="Filename too long - maximum 255 characters")

    if not filename.lower().endswith(allowed_extensions):
        raise HTTPException(status_code=400, detail="Invalid filename - unsupported file extension")

    return filename.rsplit(".", 1)[-1].lower()


async def store_upload(
    file: UploadFile,
    prefix: str,
    allowed_types: set[str],
    allowed_extensions: tuple[str, ...],
    max_size: int,
) -> str:
    """Validate an uploaded file and store it privately. Returns the object key."""
    if file.content_type not in allowed_types:
        raise HTTPException(status_code=400, detail="Invalid file type")

    ext = validate_filename(file.filename, allowed_extensions)
    contents = await file.read()
    if len(contents) > max_size:
        raise HTTPException(
            status_code=400,
            detail=f"File size exceeds {max_size // (1024 * 1024)}MB limit. "
            f"Your file is {len(contents) / (1024 * 1024):.2f}MB.",
        )

    key = f"{prefix}-{uuid.uuid4()}.{ext}"
    try:
        get_storage_client().put_object(
            Bucket=STORAGE_BUCKET_NAME,
            Key=key,
            Body=contents,
            ContentType=file.content_type,
        )
    except (BotoCoreError, ClientError) as e:
        logger.error(f"❌ Upload failed for {key}: {str(e)}")
        raise HTTPException(status_code=502, detail="File storage is unavailable. Please try again.")

    logger.info(f"📤 Stored upload {key} ({len(contents)} bytes)")
    return key


def delete_object(key: str) -> None:
    try:
        get_storage_client().delete_object(Bucket=STORAGE_BUCKET_NAME, Key=key)
    except (BotoCoreError, ClientError) as e:
        # Orphaned objects are tolerated; the row is already gone
        logger.warning(f"⚠️ Failed to delete stored object {key}: {e}")
