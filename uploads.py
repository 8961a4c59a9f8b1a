"""
Image upload forwarding

Images are handed to Cloudinary as-is; the media host stores them and mints
the public URL the catalog keeps in ``Product.image``.
"""

import logging
from typing import Optional

import cloudinary
import cloudinary.uploader

from config import get_settings
from errors import UploadError

logger = logging.getLogger(__name__)

ALLOWED_FORMATS = ["jpg", "png", "jpeg"]
TRANSFORMATION = [{"width": 500, "height": 500, "crop": "limit"}]


def configure() -> None:
    settings = get_settings()
    cloudinary.config(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        secure=True,
    )


def upload_image(data: bytes, filename: str, content_type: Optional[str] = None) -> str:
    if content_type and not content_type.startswith("image/"):
        raise UploadError("File must be an image", status_code=400)
    if not data:
        raise UploadError("File is empty", status_code=400)

    try:
        result = cloudinary.uploader.upload(
            data,
            folder=get_settings().cloudinary_folder,
            allowed_formats=ALLOWED_FORMATS,
            transformation=TRANSFORMATION,
            resource_type="image",
        )
    except Exception as e:
        logger.error("Cloudinary upload of %s failed: %s", filename, e)
        raise UploadError()

    logger.info("Uploaded %s to %s", filename, result["secure_url"])
    return result["secure_url"]
