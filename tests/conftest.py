"""Pytest configuration and fixtures for simfinder tests."""

import json

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop sinks the CLI attached to captured streams."""
    yield
    logger.remove()


@pytest.fixture
def sample_items() -> list:
    """The three-item example: a near duplicate pair plus unrelated text."""
    return [
        {"id": "1", "text": "the quick brown fox"},
        {"id": "2", "text": "the quick brown fox!"},
        {"id": "3", "text": "completely unrelated content"},
    ]


@pytest.fixture
def sample_input(sample_items) -> dict:
    """Run input document with every algorithm enabled."""
    return {
        "content": sample_items,
        "similarityThreshold": 0.8,
        "algorithms": {"cosine": True, "levenshtein": True, "fuzzy": True, "jaccard": True},
        "caseSensitive": False,
        "ignoreWhitespace": True,
        "minLength": 0,
        "groupByDuplicate": True,
    }


@pytest.fixture
def input_file(tmp_path, sample_input):
    """sample_input written to a temporary JSON file."""
    path = tmp_path / "input.json"
    path.write_text(json.dumps(sample_input), encoding="utf-8")
    return path
