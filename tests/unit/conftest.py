"""Conftest for unit tests - automatically mark all tests as unit tests."""

import pytest

from library_search.engine.indexer import index_records


def pytest_collection_modifyitems(config, items):
    """Automatically mark all tests in the unit directory as unit tests."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def make_records():
    """Index plain dicts with the engine's own field names."""

    def _make(*rows: dict):
        return index_records(rows)

    return _make
