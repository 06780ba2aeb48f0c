# catgallery/repository.py
import asyncio
from typing import Callable, List

from catgallery.api_client import CatApiClient
from catgallery.connectivity import ConnectivityHelper
from catgallery.data_store import CatImageStore, Observer
from catgallery.errors import ConnectivityError, EmptyResultError
from catgallery.logging import get_logger
from catgallery.schemas import CachedItem, ImageDescriptor

logger = get_logger(__name__)

BATCH_SIZE = 100

NO_CONNECTION = "No internet connection available"
NO_IMAGES = "No images available"


def to_cached_item(descriptor: ImageDescriptor, page: int, index: int) -> CachedItem:
    return CachedItem(
        remote_id=descriptor.id,
        image_url=descriptor.url,
        title=f"Cat Image {page * BATCH_SIZE + index + 1}",
        description=f"A beautiful cat image with dimensions {descriptor.width}x{descriptor.height}",
    )


class CatImageRepository:
    """
    Cache-aside synchronizer between the cat API and the local store.

    Reads always go through the store's live query; the two write paths
    (``load_more_cat_images`` and ``refresh_cat_images``) check connectivity
    first, fetch one batch and write it in one upsert. Failures are raised to
    the caller untouched.

    Note that the API has no cursor: every page requests the same batch and
    ``page`` only shifts the generated titles.
    """

    def __init__(self, api: CatApiClient, store: CatImageStore, connectivity: ConnectivityHelper):
        self.api = api
        self.store = store
        self.connectivity = connectivity
        # a refresh must not truncate the table under an in-flight page write
        self._write_lock = asyncio.Lock()

    def observe_all(self, callback: Observer) -> Callable[[], None]:
        return self.store.subscribe(callback)

    async def load_more_cat_images(self, page: int) -> List[CachedItem]:
        if page < 0:
            raise ValueError(f"page must be non-negative, got {page}")
        async with self._write_lock:
            return await self._load_page(page)

    async def refresh_cat_images(self) -> bool:
        async with self._write_lock:
            await self._ensure_connected()
            logger.info("refresh_started")
            self.store.delete_all()
            images = await self._load_page(0)
            if not images:
                raise EmptyResultError(NO_IMAGES)
            logger.info("refresh_finished", count=len(images))
            return True

    async def _load_page(self, page: int) -> List[CachedItem]:
        await self._ensure_connected()

        response = await self.api.get_cat_images(limit=BATCH_SIZE)
        if not response:
            logger.info("page_empty", page=page)
            return []

        images = [to_cached_item(d, page, i) for i, d in enumerate(response)]
        self.store.insert_or_replace(images)
        logger.info("page_stored", page=page, count=len(images))
        return images

    async def _ensure_connected(self):
        # is_connected opens a socket; keep it off the event loop
        if not await asyncio.to_thread(self.connectivity.is_connected):
            logger.warning("offline")
            raise ConnectivityError(NO_CONNECTION)
