"""
Remote generation gateway - turns one panel image and a scene into a manga page.

Two provider calls run in sequence: a vision model describes the page, then
an image model draws it. Either failure aborts the whole request; there is
no retry here.
"""
import logging
from typing import Optional

from .errors import ValidationError
from .openai_client import OpenAIClient
from .panels import GenerationResult

logger = logging.getLogger(__name__)


class MangaPanelGateway:
    def __init__(self, client: Optional[OpenAIClient] = None):
        self.client = client or OpenAIClient()

    async def generate(self, image: bytes, scene: str, mime_type: Optional[str] = None) -> GenerationResult:
        """Generate a manga page for ``image`` following ``scene``.

        ``mime_type`` is sniffed from the bytes when not given.

        Raises:
            ValidationError: empty image or blank scene (no provider call made)
            GatewayError: either provider call failed
        """
        if not image:
            raise ValidationError("Image data is empty")
        scene = (scene or "").strip()
        if not scene:
            raise ValidationError("Scene description is empty")

        logger.info("Processing manga panel request...")
        description = await self.client.describe_panel(image, scene, mime_type=mime_type)
        logger.info("Panel description received")

        url = await self.client.generate_image(description)
        logger.info("Manga panel generated successfully")

        return GenerationResult(manga_panel_url=url, description=description)
