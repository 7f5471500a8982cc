import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

CLOUDINARY_UPLOAD_URL = 'https://api.cloudinary.com/v1_1/{cloud_name}/image/upload'


class MediaConfigurationError(Exception):
    pass


class MediaUploadError(Exception):
    pass


def upload_image(file, timeout: float = 30) -> str:
    """Upload a profile picture to Cloudinary and return its hosted URL.

    Args:
        file: an uploaded file object (anything with ``name`` and ``read()``)

    Returns:
        the ``url`` Cloudinary assigned to the image
    """
    cloud_name = settings.CLOUDINARY_CLOUD_NAME
    upload_preset = settings.CLOUDINARY_UPLOAD_PRESET
    if not cloud_name or not upload_preset:
        raise MediaConfigurationError(
            'Cloudinary configuration missing. Please set CLOUDINARY_CLOUD_NAME '
            'and CLOUDINARY_UPLOAD_PRESET environment variables.'
        )

    url = CLOUDINARY_UPLOAD_URL.format(cloud_name=cloud_name)
    content_type = getattr(file, 'content_type', None) or 'application/octet-stream'
    try:
        response = requests.post(
            url,
            files={'file': (file.name, file.read(), content_type)},
            data={'upload_preset': upload_preset, 'cloud_name': cloud_name},
            timeout=timeout,
        )
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error('Image upload failed: %s', e)
        raise MediaUploadError('Failed to upload image') from e

    hosted_url = data.get('secure_url') or data.get('url')
    if not hosted_url:
        raise MediaUploadError('Image host did not return a URL')
    return hosted_url
