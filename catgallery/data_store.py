# catgallery/data_store.py
from typing import Callable, Iterable, List, Optional

from sqlalchemy import delete, func, literal_column, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from catgallery.errors import StoreError
from catgallery.logging import get_logger
from catgallery.models import CatImage
from catgallery.schemas import CachedItem

logger = get_logger(__name__)

Observer = Callable[[List[CachedItem]], None]


class CatImageStore:
    """
    Local cache of gallery items backed by the ``cat_images`` table.

    The store is the only shared mutable state in the client. Reads return
    immutable ``CachedItem`` snapshots; ``subscribe`` turns the table into a
    live query: observers get the current contents straight away and the new
    contents after every committed write, in write order.
    """

    def __init__(self, session_factory):
        self._session_factory = session_factory
        self._observers: List[Observer] = []

    # --- reads ---
    def list_all(self) -> List[CachedItem]:
        # no explicit sort key: rowid is first-insertion order
        q = select(CatImage).order_by(literal_column("cat_images.rowid"))
        try:
            with self._session_factory() as db:
                rows = db.execute(q).scalars().all()
                return [CachedItem.model_validate(r) for r in rows]
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read cached images: {e}") from e

    def get(self, remote_id: str) -> Optional[CachedItem]:
        try:
            with self._session_factory() as db:
                row = db.get(CatImage, remote_id)
                return CachedItem.model_validate(row) if row is not None else None
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read cached image {remote_id}: {e}") from e

    def count(self) -> int:
        try:
            with self._session_factory() as db:
                return db.execute(select(func.count()).select_from(CatImage)).scalar_one()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to count cached images: {e}") from e

    # --- writes ---
    def insert_or_replace(self, items: Iterable[CachedItem]) -> None:
        values = [item.model_dump() for item in items]
        if not values:
            return
        stmt = sqlite_insert(CatImage).values(values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[CatImage.remote_id],
            set_={
                "image_url": stmt.excluded.image_url,
                "title": stmt.excluded.title,
                "description": stmt.excluded.description,
            },
        )
        try:
            with self._session_factory() as db:
                db.execute(stmt)
                db.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to save images: {e}") from e
        logger.debug("store_upsert", rows=len(values))
        self._notify()

    def delete_all(self) -> None:
        try:
            with self._session_factory() as db:
                db.execute(delete(CatImage))
                db.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to clear cached images: {e}") from e
        logger.debug("store_cleared")
        self._notify()

    # --- live query ---
    def subscribe(self, callback: Observer) -> Callable[[], None]:
        """Register ``callback`` and replay the current contents to it.

        Returns a function that removes the registration; calling it more
        than once is harmless.
        """
        self._observers.append(callback)
        try:
            callback(self.list_all())
        except Exception:
            self._observers.remove(callback)
            raise

        def unsubscribe():
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        if not self._observers:
            return
        snapshot = self.list_all()
        # observers may unsubscribe while being notified
        for callback in list(self._observers):
            try:
                callback(snapshot)
            except Exception:
                # the write already committed; keep notifying the rest
                logger.exception("store_observer_failed", observer=repr(callback))
