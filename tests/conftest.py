"""Pytest fixtures for ClinicSync tests.

This module provides fixtures for test configuration, local replicas and
orchestrators wired to an in-memory remote.
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from clinicsync.core.config import Config
from clinicsync.core.events import SyncEvents
from clinicsync.core.store import ReplicaStore
from clinicsync.core.sync import SyncOrchestrator

from tests.helpers import FakeRemote


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create temporary config directory for tests.

    Args:
        tmp_path: pytest temporary directory fixture

    Returns:
        Path to temporary config directory.
    """
    config_dir = tmp_path / "clinicsync_test"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


@pytest.fixture
def test_config(test_config_dir: Path) -> Config:
    """Create test configuration."""
    return Config(config_dir=test_config_dir)


@pytest.fixture
def test_db_path(test_config_dir: Path) -> Path:
    """Get path for test replica database."""
    return test_config_dir / "test_replica.db"


@pytest.fixture
def seeded_store(test_db_path: Path) -> Generator[ReplicaStore, None, None]:
    """Create a file-backed replica with default seed data.

    Yields:
        Seeded ReplicaStore instance.
    """
    store = ReplicaStore(test_db_path)
    yield store
    store.close()


@pytest.fixture
def empty_store() -> Generator[ReplicaStore, None, None]:
    """Create an in-memory replica without seed data.

    Yields:
        Empty ReplicaStore instance.
    """
    store = ReplicaStore(":memory:", seed=False)
    yield store
    store.close()


@pytest.fixture
def fake_remote() -> FakeRemote:
    """Create an uninitialized in-memory remote."""
    return FakeRemote()


@pytest.fixture
def events() -> SyncEvents:
    return SyncEvents()


@pytest.fixture
def orchestrator(
    empty_store: ReplicaStore, fake_remote: FakeRemote, events: SyncEvents
) -> SyncOrchestrator:
    """Create an orchestrator over an empty replica and the fake remote."""
    return SyncOrchestrator(
        empty_store, fake_remote, events, clock=lambda: "2026-10-19T12:00:00+00:00"
    )
