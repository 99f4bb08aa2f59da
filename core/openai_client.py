"""
OpenAI API client for the describe and synthesize steps of panel generation
"""
import base64
import logging
from typing import Optional

import httpx

from config.settings import (
    OPENAI_API_KEY, OPENAI_API_BASE, VISION_MODEL, VISION_MAX_TOKENS,
    IMAGE_MODEL, IMAGE_SIZE, IMAGE_QUALITY, REQUEST_TIMEOUT
)
from .errors import GatewayError

logger = logging.getLogger(__name__)

# Magic numbers for the formats the vision model accepts
IMAGE_SIGNATURES = [
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
]


def sniff_mime_type(data: bytes, default: str = "image/jpeg") -> str:
    """Guess an image MIME type from its leading bytes"""
    for signature, mime_type in IMAGE_SIGNATURES:
        if data.startswith(signature):
            return mime_type
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return default


class OpenAIClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        vision_model: Optional[str] = None,
        image_model: Optional[str] = None,
        timeout: float = REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key if api_key is not None else OPENAI_API_KEY
        self.api_base = (api_base or OPENAI_API_BASE).rstrip("/")
        self.vision_model = vision_model or VISION_MODEL
        self.image_model = image_model or IMAGE_MODEL
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

    def _encode_image(self, data: bytes) -> str:
        """Encode image to base64"""
        return base64.b64encode(data).decode("utf-8")

    async def _post(self, path: str, payload: dict, provider: str) -> dict:
        """POST a JSON payload and return the JSON body, or raise GatewayError"""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.api_base}{path}",
                    headers=self.headers,
                    json=payload
                )
        except httpx.HTTPError as e:
            logger.error(f"{provider} request failed: {e}")
            raise GatewayError(f"{provider} API error: {e}") from e

        if response.is_error:
            message = self._error_message(response)
            logger.error(f"{provider} API error ({response.status_code}): {message}")
            raise GatewayError(f"{provider} API error: {message}", status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise GatewayError(f"{provider} API error: response was not JSON") from e

    def _error_message(self, response: httpx.Response) -> str:
        """Pull the provider's message out of an error response"""
        try:
            body = response.json()
        except ValueError:
            return response.text or "Unknown error"
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            return error.get("message") or "Unknown error"
        if isinstance(error, str):
            return error
        return "Unknown error"

    async def describe_panel(self, image: bytes, scene: str, mime_type: Optional[str] = None) -> str:
        """Ask the vision model to turn an image and a scene into a manga page description"""
        mime_type = mime_type or sniff_mime_type(image)
        image_data = self._encode_image(image)

        payload = {
            "model": self.vision_model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "text",
                            "text": (
                                f'Generate a manga panel from this image and the scene I have written: "{scene}". '
                                "Lay out multiple scenes on one page like a real manga, in a black and white "
                                "theme with black character outlines on a white background. Use clear panel "
                                "divisions, speech bubbles where needed and dynamic action."
                            )
                        },
                        {
                            "type": "image_url",
                            "image_url": {
                                "url": f"data:{mime_type};base64,{image_data}"
                            }
                        }
                    ]
                }
            ],
            "max_tokens": VISION_MAX_TOKENS
        }

        result = await self._post("/chat/completions", payload, provider="OpenAI")
        try:
            return result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise GatewayError("OpenAI API error: unexpected completion response") from e

    async def generate_image(self, description: str) -> str:
        """Render a manga page from a description, returning the image URL"""
        payload = {
            "model": self.image_model,
            "prompt": (
                f"Create a manga panel based on this description: {description}. "
                "Style: black and white manga art with bold black outlines, white background, "
                "dynamic poses and a professional layout with clear panel divisions. "
                "Multiple scenes arranged like a real manga page."
            ),
            "size": IMAGE_SIZE,
            "quality": IMAGE_QUALITY,
            "n": 1
        }

        result = await self._post("/images/generations", payload, provider="DALL-E")
        try:
            return result["data"][0]["url"]
        except (KeyError, IndexError, TypeError) as e:
            raise GatewayError("DALL-E API error: unexpected image response") from e
