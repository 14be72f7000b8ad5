"""Thumbnail rendering with Pillow."""

import io
from typing import Dict, Iterable

from PIL import Image

from common.constants import THUMBNAIL_WIDTHS


def render_thumbnail(data: bytes, width: int) -> bytes:
    """
    Resize an image to the given width, keeping its aspect ratio.

    Args:
        data: Encoded source image
        width: Target width in pixels

    Returns:
        Encoded thumbnail in the source image's format

    Raises:
        PIL.UnidentifiedImageError: If data is not a readable image
    """
    with Image.open(io.BytesIO(data)) as image:
        image_format = image.format or "PNG"
        height = max(1, round(image.height * width / image.width))
        resized = image.resize((width, height))

        buffer = io.BytesIO()
        resized.save(buffer, format=image_format)
        return buffer.getvalue()


def render_thumbnails(data: bytes, widths: Iterable[int] = THUMBNAIL_WIDTHS) -> Dict[int, bytes]:
    """
    Render every requested width; any failure aborts the whole set.
    """
    return {width: render_thumbnail(data, width) for width in widths}
