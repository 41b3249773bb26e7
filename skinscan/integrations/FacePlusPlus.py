import logging
from typing import Any, Dict, Optional

import httpx

from skinscan.ai.Errors import UpstreamServiceError

logger = logging.getLogger(__name__)


class FacePlusPlusClient:
    """
    Client for the Face++ Detect API, asking only for the ``skinstatus`` attribute.

    The response is returned as-is: VisionParser is responsible for reading it.
    """

    def __init__(self, api_key: str, api_secret: str,
                 endpoint: str = "https://api-us.faceplusplus.com/facepp/v3/detect",
                 timeout_s: float = 30.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.api_secret = api_secret
        self.endpoint = endpoint
        self.timeout_s = timeout_s
        self.transport = transport

    async def analyze_face(self, data: bytes, filename: str = "image.jpg",
                           media_type: str = "image/jpeg") -> Dict[str, Any]:
        form = {
            "api_key": self.api_key,
            "api_secret": self.api_secret,
            "return_attributes": "skinstatus",
        }
        files = {"image_file": (filename, data, media_type)}

        async with httpx.AsyncClient(timeout=self.timeout_s, transport=self.transport) as client:
            res = await client.post(self.endpoint, data=form, files=files)

        try:
            body = res.json()
        except ValueError:
            body = {"raw": res.text}

        if res.status_code >= 400:
            message = body.get("error_message") if isinstance(body, dict) else None
            raise UpstreamServiceError(detail=f"Face++ returned {res.status_code}: {message or res.text}")

        if not isinstance(body, dict):
            logger.warning("[VISION] Face++ returned a non-object body")
            return {}
        return body
