"""
Client for the gateway proxy's HTTP endpoint
"""
import base64
import logging
from typing import Optional

import httpx

from config.settings import GATEWAY_URL, GATEWAY_API_KEY, REQUEST_TIMEOUT
from .errors import GatewayError, ValidationError
from .panels import GenerationResult

logger = logging.getLogger(__name__)


class ProxyGatewayClient:
    """Same ``generate(image, scene)`` contract as MangaPanelGateway, over HTTP."""

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.url = url or GATEWAY_URL
        self.api_key = api_key if api_key is not None else GATEWAY_API_KEY
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
            headers["apikey"] = self.api_key
        return headers

    async def generate(self, image: bytes, scene: str, mime_type: Optional[str] = None) -> GenerationResult:
        """POST the image to the proxy.

        The body carries bare base64 with no data-URI prefix, so ``mime_type``
        is not sent; the proxy sniffs the type from the bytes.
        """
        if not image:
            raise ValidationError("Image data is empty")
        scene = (scene or "").strip()
        if not scene:
            raise ValidationError("Scene description is empty")

        payload = {
            "imageBase64": base64.b64encode(image).decode("utf-8"),
            "scene": scene
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, headers=self._headers(), json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Gateway request failed: {e}")
            raise GatewayError(f"Gateway unreachable: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.is_error or "error" in data:
            message = data.get("error") or f"Gateway returned HTTP {response.status_code}"
            raise GatewayError(message, status_code=response.status_code)

        url = data.get("mangaPanelUrl")
        if not url:
            raise GatewayError("Gateway response missing mangaPanelUrl", status_code=response.status_code)

        return GenerationResult(manga_panel_url=url, description=data.get("description", ""))
