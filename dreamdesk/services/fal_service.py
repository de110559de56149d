"""
Image editing through fal.ai (nano-banana edit model).

The provider's result envelope is returned unmodified.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from dreamdesk.config import get_settings
from dreamdesk.services.errors import NotConfiguredError, UpstreamError

logger = logging.getLogger(__name__)

FAL_EDIT_URL = "https://fal.run/fal-ai/nano-banana/edit"


class FalService:
    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None, timeout: float = 120.0):
        self.transport = transport
        self.timeout = timeout

    async def edit_image(
        self,
        prompt: str,
        image_urls: List[str],
        num_images: int = 1,
        output_format: str = "jpeg",
    ) -> Dict[str, Any]:
        api_key = get_settings().fal_api_key
        if not api_key:
            logger.error("FAL_API_KEY is not set")
            raise NotConfiguredError("FAL AI API key not configured")

        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            response = await client.post(
                FAL_EDIT_URL,
                headers={"Authorization": f"Key {api_key}"},
                json={
                    "prompt": prompt,
                    "image_urls": image_urls,
                    "num_images": num_images,
                    "output_format": output_format,
                },
            )

        if response.status_code >= 400:
            logger.error("FAL AI API error (%d): %s", response.status_code, response.text)
            raise UpstreamError("Failed to process image editing request", response.status_code, response.text)
        logger.info("Edited %d source image(s)", len(image_urls))
        return response.json()


fal_service = FalService()
