from __future__ import annotations

"""Image member replacement."""

import logging

from officify.core.models import ImageMap, OdfArchive

logger = logging.getLogger(__name__)

__all__ = ["IMAGES_PREFIX", "image_member_path", "replace_images"]

IMAGES_PREFIX = "Pictures/"


def image_member_path(name: str) -> str:
    return f"{IMAGES_PREFIX}{name}"


def replace_images(archive: OdfArchive, images: ImageMap) -> None:
    """Write each image under ``Pictures/<name>``, overwriting or inserting.

    The image format is not checked, nor whether the document references the
    name; callers own the placeholder text pointing at the right path.
    """
    for name, data in images.items():
        path = image_member_path(name)
        action = "overwrite" if path in archive else "insert"
        archive.write(path, bytes(data))
        logger.debug("Image %s: %s (%d bytes)", action, path, len(data))
