# catgallery/viewmodel.py
import asyncio
from typing import Callable, List, Optional, Set

from catgallery.logging import get_logger
from catgallery.repository import CatImageRepository
from catgallery.schemas import (
    CachedItem, EmptyState, ErrorState, LoadingState, SuccessState, UiState,
)

logger = get_logger(__name__)

StateObserver = Callable[[UiState], None]


class CatImageViewModel:
    """
    Presentation state for the gallery screen.

    Holds the pagination cursor and exposes a single observable ``UiState``.
    What is rendered comes from the store's live query; the two commands only
    start work and report failures. Must be created inside a running event
    loop, which owns the command tasks.
    """

    def __init__(self, repository: CatImageRepository):
        self._repository = repository
        self._state: UiState = LoadingState()
        self._observers: List[StateObserver] = []
        self._tasks: Set[asyncio.Task] = set()
        self._loop = asyncio.get_running_loop()
        self._unsubscribe: Optional[Callable[[], None]] = None

        self.current_page = 0
        self.is_loading_more = False
        self.has_more_images = True

        try:
            self._unsubscribe = repository.observe_all(self._on_images)
        except Exception as e:
            logger.error("observe_failed", error=str(e))
            self._set_state(ErrorState(message=str(e) or "Unknown error occurred"))
        self.load_more_images()

    # --- observable state ---
    @property
    def state(self) -> UiState:
        return self._state

    def subscribe(self, callback: StateObserver) -> Callable[[], None]:
        self._observers.append(callback)
        callback(self._state)

        def unsubscribe():
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    def _set_state(self, state: UiState):
        if state == self._state:
            return
        self._state = state
        for callback in list(self._observers):
            callback(state)

    def _on_images(self, images: List[CachedItem]):
        if not images:
            self._set_state(EmptyState())
        else:
            self._set_state(SuccessState(images=images))

    # --- commands ---
    def refresh_images(self) -> asyncio.Task:
        self.current_page = 0
        self.has_more_images = True
        self._set_state(LoadingState())
        return self._launch(self._refresh())

    def load_more_images(self) -> Optional[asyncio.Task]:
        if self.is_loading_more or not self.has_more_images:
            return None
        self.is_loading_more = True
        return self._launch(self._load_more())

    async def _refresh(self):
        try:
            await self._repository.refresh_cat_images()
        except Exception as e:
            logger.warning("refresh_failed", error=str(e))
            self._set_state(ErrorState(message=str(e) or "Failed to refresh images"))

    async def _load_more(self):
        try:
            new_images = await self._repository.load_more_cat_images(self.current_page)
            if not new_images:
                self.has_more_images = False
            else:
                self.current_page += 1
        except Exception as e:
            # current_page is left as is: no increment, no rollback
            logger.warning("load_more_failed", page=self.current_page, error=str(e))
            self._set_state(ErrorState(message=str(e) or "Failed to load more images"))
        finally:
            self.is_loading_more = False

    def _launch(self, coro) -> asyncio.Task:
        task = self._loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # --- lifecycle ---
    async def wait_until_idle(self):
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        for task in list(self._tasks):
            task.cancel()
        self._observers.clear()
