"""Tests for HashlineConfig and its environment loading."""

import pytest
from pydantic import ValidationError

from hashline.config import HashlineConfig
from hashline.models import TagPolicy


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in HashlineConfig.model_fields:
        monkeypatch.delenv(f"HASHLINE_{name.upper()}", raising=False)


def test_defaults():
    config = HashlineConfig()
    assert config.tag_policy == TagPolicy.MARK_ALL
    assert config.strict_ambiguity is False
    assert config.auto_cleanup is True
    assert config.context_radius == 4
    assert config.max_lines == 2000
    assert config.max_bytes == 51200
    assert config.mutation_timeout == 10.0
    assert config.executor == "local"


def test_reads_environment(monkeypatch):
    for key, value in {
        "HASHLINE_TAG_POLICY": "first-occurrence",
        "HASHLINE_STRICT_AMBIGUITY": "yes",
        "HASHLINE_AUTO_CLEANUP": "0",
        "HASHLINE_CONTEXT_RADIUS": "2",
        "HASHLINE_MUTATION_TIMEOUT": "2.5",
        "HASHLINE_EXECUTOR": "subprocess",
    }.items():
        monkeypatch.setenv(key, value)
    config = HashlineConfig()
    assert config.tag_policy == TagPolicy.FIRST_OCCURRENCE
    assert config.strict_ambiguity is True
    assert config.auto_cleanup is False
    assert config.context_radius == 2
    assert config.mutation_timeout == 2.5
    assert config.executor == "subprocess"


def test_keyword_arguments_override_environment(monkeypatch):
    monkeypatch.setenv("HASHLINE_EXECUTOR", "subprocess")
    assert HashlineConfig(executor="local").executor == "local"


def test_empty_values_keep_defaults(monkeypatch):
    monkeypatch.setenv("HASHLINE_MAX_LINES", "")
    assert HashlineConfig().max_lines == 2000


@pytest.mark.parametrize(
    "key, value",
    [
        ("HASHLINE_EXECUTOR", "remote"),
        ("HASHLINE_MUTATION_TIMEOUT", "0"),
        ("HASHLINE_TAG_POLICY", "last"),
        ("HASHLINE_CONTEXT_RADIUS", "-1"),
    ],
)
def test_invalid_environment(monkeypatch, key, value):
    monkeypatch.setenv(key, value)
    with pytest.raises(ValidationError):
        HashlineConfig()
