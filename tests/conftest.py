"""Shared test fixtures and utilities."""

import uuid
from pathlib import Path

import pytest

from jobstore.constants import ENV_BASE_DIR, ENV_BOOTSTRAP
from jobstore.storage import FilesystemAdapter


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer environment overrides out of the tests."""
    monkeypatch.delenv(ENV_BASE_DIR, raising=False)
    monkeypatch.delenv(ENV_BOOTSTRAP, raising=False)


@pytest.fixture
def base_dir(tmp_path) -> Path:
    """Base directory for an adapter under test."""
    return tmp_path / "storage"


@pytest.fixture
def adapter(base_dir) -> FilesystemAdapter:
    """Bootstrapped adapter rooted in a temp directory."""
    return FilesystemAdapter(base_dir, bootstrap=True)


@pytest.fixture
def job_path(adapter):
    """Factory fixture for job-system object paths: <dir>/<date>/<job>/<uuid>."""
    def _job_path(directory: str = "jobs", job_id: str = "job-1") -> str:
        return adapter.path_for(directory, job_id, uuid.uuid4())
    return _job_path
