"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from dataclasses import dataclass, field
from typing import Any

from deepclone import CopyRecord, CopySettings, DeepCopier


@dataclass
class FixtureNode:
    name: str
    next: "FixtureNode | None" = None
    tags: list[str] = field(default_factory=list)


@dataclass(slots=True)
class FixtureHolder:
    ref: Any
    label: str = ""


class RecordingHistory:
    """Minimal CopyHistory implementation for testing."""

    def __init__(self) -> None:
        self._records: list[CopyRecord] = []

    def record_copy(self, record: CopyRecord) -> None:
        self._records.append(record)

    def get_records(self) -> list[CopyRecord]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()


@pytest.fixture
def settings():
    """Settings independent of the process environment."""
    return CopySettings(_env_file=None)


@pytest.fixture
def copier(settings):
    """Fresh DeepCopier with default settings."""
    return DeepCopier(settings)


@pytest.fixture
def history():
    return RecordingHistory()


@pytest.fixture
def node_cls():
    return FixtureNode


@pytest.fixture
def holder_cls():
    return FixtureHolder
