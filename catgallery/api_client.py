# catgallery/api_client.py
from typing import List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from catgallery.errors import RemoteError
from catgallery.logging import get_logger
from catgallery.schemas import ImageDescriptor

logger = get_logger(__name__)

_descriptors = TypeAdapter(List[ImageDescriptor])


class CatApiClient:
    """Thin client for ``GET /v1/images/search`` on the cat API."""

    def __init__(self, client: httpx.AsyncClient, base_url: str, size: str = "full"):
        self._client = client
        self._base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._size = size

    async def get_cat_images(self, limit: int = 100, size: Optional[str] = None) -> List[ImageDescriptor]:
        url = f"{self._base_url}v1/images/search"
        params = {"limit": limit, "size": size or self._size}
        try:
            r = await self._client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.warning("cat_api_network_error", error=str(e))
            raise RemoteError(f"Cat API network error: {e}") from e

        if not 200 <= r.status_code < 300:
            logger.warning("cat_api_http_error", status=r.status_code)
            raise RemoteError(f"Cat API HTTP {r.status_code}")

        try:
            return _descriptors.validate_python(r.json())
        except (ValueError, ValidationError) as e:
            logger.warning("cat_api_invalid_payload", error=str(e))
            raise RemoteError("Cat API returned an invalid payload") from e
