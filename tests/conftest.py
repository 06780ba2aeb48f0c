"""Shared fixtures: a throwaway SQLite cache and mocked remote collaborators."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from catgallery.api_client import CatApiClient
from catgallery.connectivity import ConnectivityHelper
from catgallery.data_store import CatImageStore
from catgallery.db import init_db, make_engine, make_session_factory
from catgallery.repository import CatImageRepository


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'cache.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return CatImageStore(make_session_factory(engine))


@pytest.fixture
def api():
    api = AsyncMock(spec=CatApiClient)
    api.get_cat_images.return_value = []
    return api


@pytest.fixture
def connectivity():
    oracle = MagicMock(spec=ConnectivityHelper)
    oracle.is_connected.return_value = True
    return oracle


@pytest.fixture
def repository(api, store, connectivity):
    return CatImageRepository(api, store, connectivity)
