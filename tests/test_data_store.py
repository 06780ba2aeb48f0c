"""Tests for the SQLite-backed gallery cache and its live query."""

import pytest

from catgallery.data_store import CatImageStore
from catgallery.db import make_engine, make_session_factory
from catgallery.errors import StoreError
from catgallery.schemas import CachedItem


def _item(remote_id, title=None):
    return CachedItem(
        remote_id=remote_id,
        image_url=f"https://cdn.example.com/{remote_id}.jpg",
        title=title or f"Cat {remote_id}",
        description="A beautiful cat image with dimensions 800x600",
    )


class TestUpsert:
    def test_overlapping_ids_never_duplicate(self, store):
        store.insert_or_replace([_item("a"), _item("b")])
        store.insert_or_replace([_item("b"), _item("c")])
        store.insert_or_replace([_item("a")])

        assert store.count() == 3
        assert [i.remote_id for i in store.list_all()] == ["a", "b", "c"]

    def test_duplicate_ids_within_one_batch(self, store):
        store.insert_or_replace([_item("a", "first"), _item("a", "second")])

        assert store.count() == 1
        assert store.get("a").title == "second"

    def test_rewrite_overwrites_columns_and_keeps_position(self, store):
        store.insert_or_replace([_item("a", "Cat Image 1"), _item("b", "Cat Image 2")])
        store.insert_or_replace([_item("a", "Cat Image 101")])

        items = store.list_all()
        assert [i.remote_id for i in items] == ["a", "b"]
        assert items[0].title == "Cat Image 101"

    def test_empty_batch_is_noop(self, store):
        seen = []
        store.subscribe(seen.append)

        store.insert_or_replace([])

        assert store.count() == 0
        assert seen == [[]]


class TestReads:
    def test_get_missing_returns_none(self, store):
        assert store.get("nope") is None

    def test_delete_all_truncates(self, store):
        store.insert_or_replace([_item("a"), _item("b")])
        store.delete_all()

        assert store.count() == 0
        assert store.list_all() == []

    def test_missing_table_raises_store_error(self, tmp_path):
        engine = make_engine(f"sqlite:///{tmp_path / 'bare.db'}")
        bare = CatImageStore(make_session_factory(engine))

        with pytest.raises(StoreError):
            bare.list_all()
        with pytest.raises(StoreError):
            bare.insert_or_replace([_item("a")])
        engine.dispose()


class TestLiveQuery:
    def test_subscribe_replays_then_emits_in_write_order(self, store):
        store.insert_or_replace([_item("a")])
        seen = []

        store.subscribe(seen.append)
        store.insert_or_replace([_item("b")])
        store.delete_all()

        assert [[i.remote_id for i in snap] for snap in seen] == [["a"], ["a", "b"], []]

    def test_unsubscribe_stops_emissions(self, store):
        seen = []
        unsubscribe = store.subscribe(seen.append)

        unsubscribe()
        unsubscribe()
        store.insert_or_replace([_item("a")])

        assert seen == [[]]

    def test_every_observer_sees_every_write(self, store):
        first, second = [], []
        store.subscribe(first.append)
        store.subscribe(second.append)

        store.insert_or_replace([_item("a")])

        assert first == second
        assert len(first) == 2

    def test_failing_observer_does_not_fail_the_write(self, store):
        def broken(snapshot):
            if snapshot:
                raise RuntimeError("render crashed")

        seen = []
        store.subscribe(broken)
        store.subscribe(seen.append)

        store.insert_or_replace([_item("a")])

        assert store.count() == 1
        assert [[i.remote_id for i in snap] for snap in seen] == [[], ["a"]]
