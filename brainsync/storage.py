# brainsync/storage.py
import logging
import re
import tempfile
import uuid
from datetime import datetime
from pathlib import Path

import boto3
from boto3.s3.transfer import TransferConfig
from flask import current_app

from .config import ALLOWED_VIDEO_EXTENSIONS
from .errors import StorageUnavailable, StoreFault, ValidationGap

logger = logging.getLogger(__name__)

s3_config = TransferConfig(
    multipart_threshold=1024 * 1024 * 25,
    multipart_chunksize=1024 * 1024 * 50,
    max_concurrency=5,
    use_threads=True
)


def storage_configured():
    config = current_app.config
    return bool(config.get('BUCKET_NAME') and config.get('AWS_ACCESS_KEY') and config.get('AWS_SECRET_KEY'))


def get_s3_client():
    """S3 client for the current app, created on first use"""
    client = current_app.extensions.get('s3_client')
    if client is None:
        if not storage_configured():
            raise StorageUnavailable()
        config = current_app.config
        endpoint_url = config.get('S3_ENDPOINT_URL') or None
        if not endpoint_url and config.get('REGION_NAME'):
            endpoint_url = f"https://s3.{config['REGION_NAME']}.wasabisys.com"
        client = boto3.client(
            's3',
            aws_access_key_id=config['AWS_ACCESS_KEY'],
            aws_secret_access_key=config['AWS_SECRET_KEY'],
            region_name=config.get('REGION_NAME') or None,
            endpoint_url=endpoint_url
        )
        current_app.extensions['s3_client'] = client
    return client


def generate_presigned_url(key, expires_in=None):
    """Presigned GET URL for an object"""
    config = current_app.config
    return get_s3_client().generate_presigned_url(
        ClientMethod='get_object',
        Params={'Bucket': config['BUCKET_NAME'], 'Key': key},
        ExpiresIn=expires_in or config['PRESIGNED_URL_EXPIRES']
    )


def upload_to_s3(file_path, key):
    get_s3_client().upload_file(str(file_path), current_app.config['BUCKET_NAME'], key, Config=s3_config)


def is_allowed_file(filename, allowed_extensions=ALLOWED_VIDEO_EXTENSIONS):
    return bool(filename) and Path(filename).suffix.lower() in allowed_extensions


def process_video_upload(file):
    """Store an uploaded video file and return its playable URL.

    The file is spooled to a temp file, pushed to the bucket under
    ``videos/<date>/<hex>_<name>`` and served through a presigned URL.
    """
    if file is None or not file.filename:
        raise ValidationGap('A video file is required', fields=['file'])
    if not is_allowed_file(file.filename):
        raise ValidationGap(
            f"Unsupported video format. Allowed: {', '.join(sorted(ALLOWED_VIDEO_EXTENSIONS))}",
            fields=['file']
        )
    if not storage_configured():
        raise StorageUnavailable()

    stem = re.sub(r'[^\w]', '_', Path(file.filename).stem)
    ext = Path(file.filename).suffix.lower()
    key = f"videos/{datetime.now().strftime('%Y%m%d')}/{uuid.uuid4().hex}_{stem}{ext}"

    with tempfile.NamedTemporaryFile(suffix=ext, delete=False) as tmp_file:
        tmp_path = Path(tmp_file.name)
        file.save(tmp_file)

    try:
        upload_to_s3(tmp_path, key)
        video_url = generate_presigned_url(key)
    except StorageUnavailable:
        raise
    except Exception as e:
        logger.error(f"Video upload failed ({key}): {e}")
        raise StoreFault('Error uploading video') from e
    finally:
        tmp_path.unlink(missing_ok=True)

    logger.info(f"✅ Video uploaded: {key}")
    return {'videoUrl': video_url, 'videoKey': key}


def with_playable_url(record):
    """Re-sign ``videoUrl`` from the stored ``videoKey`` so old records stay playable"""
    key = record.get('videoKey')
    if not key or not storage_configured():
        return record
    try:
        url = generate_presigned_url(key)
    except Exception as e:
        logger.warning(f"Could not presign {key}, keeping stored URL: {e}")
        return record
    return {**record, 'videoUrl': url}
