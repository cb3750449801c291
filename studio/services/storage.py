import os
from uuid import uuid4

import requests

from studio.core.config import settings, IMAGE_CONTENT_TYPES
from studio.core.errors import ValidationError
from studio.core.logger import logger

"""
PACKAGE IMAGE STORAGE

Uploads are written under UPLOAD_DIR and served from /media. Images hosted
on UploadThing are deleted through its REST API. Deletion is best effort
and never retried.
"""

MEDIA_PREFIX = "/media/"
UPLOADTHING_DELETE_URL = "https://api.uploadthing.com/v6/deleteFiles"


def save_package_image(content_type: str, data: bytes) -> str:
    if content_type not in IMAGE_CONTENT_TYPES:
        raise ValidationError("Unsupported image type")

    ext = IMAGE_CONTENT_TYPES[content_type]
    filename = f"{uuid4()}.{ext}"

    upload_dir = os.path.join(settings.UPLOAD_DIR, "packages")
    os.makedirs(upload_dir, exist_ok=True)

    path = os.path.join(upload_dir, filename)
    with open(path, "wb") as f:
        f.write(data)

    return f"{MEDIA_PREFIX}packages/{filename}"


#Key of a hosted file, the last path segment (utfs.io/f/<key>)
def extract_file_key(url: str) -> str | None:
    if "/f/" in url:
        key = url.split("/f/", 1)[1]
    else:
        key = url.rstrip("/").rsplit("/", 1)[-1]

    key = key.split("?", 1)[0]
    return key or None


def _delete_local(url: str) -> bool:
    relative = url[len(MEDIA_PREFIX):]
    root = os.path.abspath(settings.UPLOAD_DIR)
    path = os.path.abspath(os.path.join(root, relative))

    # Never follow a URL out of the upload directory
    if not path.startswith(root + os.sep):
        logger.warning(f"Refusing to delete image outside upload dir: {url}")
        return False

    if os.path.exists(path):
        os.remove(path)

    return True


def _delete_remote(url: str) -> bool:
    if not settings.UPLOADTHING_SECRET:
        logger.warning(f"UPLOADTHING_SECRET not set, cannot delete image {url}")
        return False

    file_key = extract_file_key(url)
    if not file_key:
        logger.error(f"Could not extract file key from URL: {url}")
        return False

    res = requests.post(
        UPLOADTHING_DELETE_URL,
        json={"fileKeys": [file_key]},
        headers={"X-Uploadthing-Api-Key": settings.UPLOADTHING_SECRET},
        timeout=10,
    )
    res.raise_for_status()
    return True


def delete_package_image(url: str | None) -> bool:
    """
    Ask storage to remove an image. Failures are logged and reported
    as False, the caller carries on either way.
    """
    if not url:
        return False

    try:
        if url.startswith(MEDIA_PREFIX):
            deleted = _delete_local(url)
        else:
            deleted = _delete_remote(url)

    except (OSError, requests.RequestException) as e:
        logger.error(f"Error deleting image {url}: {e}")
        return False

    if deleted:
        logger.info(f"Deleted package image {url}")

    return deleted
