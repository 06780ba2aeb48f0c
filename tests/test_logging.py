import structlog

from catgallery.logging import get_logger


def test_get_logger_binds_initial_values():
    logger = get_logger("catgallery.test", page=3, source="cat-api")

    assert structlog.get_context(logger) == {"page": 3, "source": "cat-api"}


def test_get_logger_without_values_is_unbound():
    logger = get_logger("catgallery.test")

    assert structlog.get_context(logger.bind()) == {}
