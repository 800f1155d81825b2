"""Shared fixtures for the model lifecycle tests."""

import itertools
from unittest.mock import MagicMock

import pytest

from opensearch_sugar.catalog import ModelRecord
from opensearch_sugar.http import MLHttp

ENV_VARS = [
    "OPENSEARCH_URL",
    "OPENSEARCH_USR",
    "OPENSEARCH_PWD",
    "OPENSEARCH_VERIFY_CERTS",
    "OPENSEARCH_TIMEOUT",
    "OPENSEARCH_MAX_RETRIES",
    "ML_POLL_INTERVAL",
    "ML_POLL_TIMEOUT",
]


def search_response(*records: ModelRecord) -> dict:
    """Build a models/_search response body for the given records."""
    return {
        "hits": {
            "total": {"value": len(records)},
            "hits": [
                {
                    "_id": f"{r.id}_0",
                    "_source": {
                        "name": r.name,
                        "model_version": r.version,
                        "model_id": r.id,
                        "chunk_number": 0,
                    },
                }
                for r in records
            ],
        }
    }


@pytest.fixture
def minilm() -> ModelRecord:
    return ModelRecord(
        name="huggingface/sentence-transformers/all-MiniLM-L6-v2",
        version="1.0.1",
        id="minilm-id",
    )


@pytest.fixture
def mpnet() -> ModelRecord:
    return ModelRecord(
        name="huggingface/sentence-transformers/all-mpnet-base-v2",
        version="1.0.1",
        id="mpnet-id",
    )


@pytest.fixture
def mock_http(minilm: ModelRecord, mpnet: ModelRecord) -> MagicMock:
    """MLHttp fake whose catalog holds two models."""
    http = MagicMock(spec=MLHttp)
    http.search_models.return_value = search_response(minilm, mpnet)
    return http


@pytest.fixture
def fake_clock():
    """Clock returning 0, 1, 2, ... seconds on successive calls."""
    counter = itertools.count()
    return lambda: next(counter)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Unset all connection variables and keep load_dotenv away from any real .env."""
    for name in ENV_VARS:
        # setenv first so teardown restores the original state
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path
