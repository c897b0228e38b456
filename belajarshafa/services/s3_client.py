# belajarshafa/services/s3_client.py
import logging
from functools import lru_cache

import boto3

from belajarshafa.core.config import settings

logger = logging.getLogger(__name__)


@lru_cache
def get_s3_client():
    """One boto3 client per process, pointed at any S3-compatible endpoint."""
    client = boto3.client(
        "s3",
        endpoint_url=settings.S3_ENDPOINT_URL,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        region_name=settings.AWS_REGION,
    )
    logger.info(
        f"S3 client initialised (bucket={settings.S3_BUCKET_NAME}, "
        f"endpoint={settings.S3_ENDPOINT_URL or 'aws default'})"
    )
    return client
