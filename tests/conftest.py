"""Shared test fixtures and configuration."""

import os

import pytest

from library_search.config import reset_settings
from library_search.engine.romanization import clear_romanization_cache
from library_search.observability import metrics as metrics_module, tracing as tracing_module


TEST_ENV = {
    "LIBRARY_SEARCH_DEFAULT_SEARCH_LIMIT": "50",
    "LIBRARY_SEARCH_DEFAULT_SUGGEST_LIMIT": "8",
    "LIBRARY_SEARCH_UNKNOWN_DEVELOPER_LABEL": "Unknown Developer",
    "LIBRARY_SEARCH_LOG_LEVEL": "info",
    "LIBRARY_SEARCH_LOG_JSON": "true",
    "LIBRARY_SEARCH_TRACING_ENABLED": "true",
    "LIBRARY_SEARCH_METRICS_ENABLED": "true",
}

for key, value in TEST_ENV.items():
    os.environ[key] = value


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Pin settings to test defaults and drop cached state between tests."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    reset_settings()
    clear_romanization_cache()
    yield
    reset_settings()
    clear_romanization_cache()
    metrics_module.set_metrics_enabled(True)
    tracing_module.set_tracing_enabled(True)


@pytest.fixture
def library_rows():
    """Rows shaped the way the game library's data layer stores them."""
    return [
        {
            "id": 1,
            "name": "Clannad",
            "name_cn": "",
            "developer": "Key / VisualArts",
            "all_titles": '["CLANNAD", "クラナド"]',
            "localpath": "D:/Games/Clannad/clannad.exe",
            "clear": 1,
        },
        {
            "id": 2,
            "name": "Subahibi",
            "name_cn": "素晴日",
            "developer": "SCA-JI",
            "all_titles": ["素晴らしき日々", "Wonderful Everyday"],
            "localpath": None,
            "clear": 0,
        },
        {
            "id": 3,
            "name": "Senren Banka",
            "name_cn": "千恋万花",
            "developer": "Yuzusoft",
            "all_titles": None,
            "localpath": "",
            "clear": 1,
        },
        {
            "id": 4,
            "name": "Steins;Gate",
            "name_cn": "",
            "developer": "",
            "all_titles": "[]",
            "localpath": "E:/sg/launcher.exe",
            "clear": 0,
        },
        {
            "id": 5,
            "name": "Fate/stay night",
            "name_cn": "",
            "developer": "TYPE-MOON",
            "all_titles": ["Fate/stay night [Realta Nua]"],
            "localpath": "",
            "clear": 0,
        },
    ]
