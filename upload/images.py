"""
Reads image files from disk into panel resources
"""
import logging
import mimetypes
from pathlib import Path
from typing import Iterable, Union

from core.errors import ValidationError
from core.openai_client import sniff_mime_type
from core.panels import ImageResource

logger = logging.getLogger(__name__)


def guess_mime_type(path: Path) -> str:
    """Get MIME type from file extension"""
    mime_type, _ = mimetypes.guess_type(path.name)
    return mime_type or ""


def is_image_file(path: Path) -> bool:
    return guess_mime_type(path).startswith("image/")


def load_image(path: Union[str, Path]) -> ImageResource:
    path = Path(path)
    with open(path, "rb") as f:
        data = f.read()
    mime_type = guess_mime_type(path)
    if not mime_type.startswith("image/"):
        mime_type = sniff_mime_type(data)
    return ImageResource(data=data, mime_type=mime_type, name=path.name)


def load_images(paths: Iterable[Union[str, Path]]) -> list[ImageResource]:
    """Load every image file in ``paths``, keeping their order.

    Non-image files are skipped.

    Raises:
        ValidationError: if none of the paths is an image file
    """
    paths = [Path(p) for p in paths]
    images = [p for p in paths if is_image_file(p)]

    skipped = len(paths) - len(images)
    if skipped:
        logger.warning(f"Skipped {skipped} non-image file(s)")

    if not images:
        raise ValidationError("Please upload image files only")

    resources = [load_image(p) for p in images]
    logger.info(f"Uploaded {len(resources)} panel(s)")
    return resources
