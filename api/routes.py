"""
Gateway proxy endpoints
"""
import base64
import binascii
import logging
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config.settings import GATEWAY_PATH, CORS_ALLOW_ORIGIN, CORS_ALLOW_HEADERS
from core.errors import GatewayError, ValidationError
from core.gateway import MangaPanelGateway

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": CORS_ALLOW_ORIGIN,
    "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
}

router = APIRouter()


class PanelRequest(BaseModel):
    imageBase64: str
    scene: str = ""


@lru_cache()
def get_gateway() -> MangaPanelGateway:
    return MangaPanelGateway()


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=CORS_HEADERS)


def decode_image(image_base64: str) -> tuple[bytes, Optional[str]]:
    """Decode the request image, tolerating a stray data-URI prefix.

    Returns:
        The image bytes and the MIME type named by the prefix, if any
    """
    mime_type = None
    if image_base64.startswith("data:") and "," in image_base64:
        prefix, image_base64 = image_base64.split(",", 1)
        mime_type = prefix[len("data:"):].split(";", 1)[0] or None
    try:
        return base64.b64decode(image_base64, validate=True), mime_type
    except (binascii.Error, ValueError):
        raise ValidationError("imageBase64 is not valid base64") from None


@router.options(GATEWAY_PATH)
async def process_manga_panel_preflight():
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post(GATEWAY_PATH)
async def process_manga_panel(
    request: PanelRequest,
    gateway: MangaPanelGateway = Depends(get_gateway)
):
    """Describe the uploaded image and render it as a manga page."""
    try:
        image, mime_type = decode_image(request.imageBase64)
        result = await gateway.generate(image, request.scene, mime_type=mime_type)
    except ValidationError as e:
        logger.warning(f"Rejected manga panel request: {e}")
        return error_response(str(e), 400)
    except GatewayError as e:
        logger.error(f"Error in process-manga-panel: {e}")
        return error_response(e.message or "Failed to process manga panel", 500)
    except Exception:
        logger.exception("Unexpected error in process-manga-panel")
        return error_response("Failed to process manga panel", 500)

    return JSONResponse(
        {"mangaPanelUrl": result.manga_panel_url, "description": result.description},
        headers=CORS_HEADERS
    )


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return JSONResponse({"status": "healthy", "service": "manga-panel-gateway"}, headers=CORS_HEADERS)
