"""Shared pytest configuration and fixtures for the SVNX test suite.

This module provides:
- An in-memory repository client that counts every query it answers
- Factories for raw log entries and changed paths
- Test configuration (paths, markers)
"""
import io
import os
import sys
import tempfile
from collections import Counter
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path

import pytest


# Add src/ to path so test modules can import svnx package
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

# Keep test-run logs out of the user log directory
os.environ.setdefault("SVNX_LOG_DIR", tempfile.mkdtemp(prefix="svnx-test-logs-"))

from svnx.client.base import RepositoryClient  # noqa: E402
from svnx.errors import ContentUnavailableError, RepositoryClientError  # noqa: E402
from svnx.models import (  # noqa: E402
    ChangeAction,
    NodeKind,
    RawChangedPath,
    RawFileInfo,
    RawLogEntry,
    RepositoryInfo,
)


ROOT_URL = "svn://svn.example.com/repo"


def make_entry(revision, paths=(), author="alice", message=None):
    """Build a RawLogEntry with a fixed date."""
    return RawLogEntry(
        revision=revision,
        author=author,
        date=datetime(2024, 1, 1, 12, 0, revision % 60, tzinfo=timezone.utc),
        message=message if message is not None else f"commit {revision}",
        changed_paths=tuple(paths),
    )


def file_change(path, action=ChangeAction.MODIFY, **kwargs):
    return RawChangedPath(action=action, path=path, node_kind=NodeKind.FILE, **kwargs)


class FakeRepositoryClient(RepositoryClient):
    """In-memory repository that records how often each query is made."""

    def __init__(self, entries=(), latest_revision=None, root_url=ROOT_URL):
        self.entries = {entry.revision: entry for entry in entries}
        self.latest_revision = (
            latest_revision
            if latest_revision is not None
            else max(self.entries, default=0)
        )
        self.root_url = root_url
        self.files = {}
        self.mime_types = {}
        self.revision_properties = {}
        self.failing_log_ranges = set()
        self.failing_file_info = set()
        self.failing_properties = set()
        self.failing_content = set()
        self.failing_revision_properties = set()
        self.info_error = None
        self.calls = Counter()
        self.log_ranges = []
        self.closed = False

    def add_file(self, path, data, mime_type=None):
        self.files[path] = data
        if mime_type:
            self.mime_types[path] = mime_type

    def get_repository_info(self):
        self.calls["get_repository_info"] += 1
        if self.info_error is not None:
            raise self.info_error
        return RepositoryInfo(
            url=self.root_url,
            root_url=self.root_url,
            latest_revision=self.latest_revision,
        )

    def get_log(self, start, end, include_changed_paths=True):
        self.calls["get_log"] += 1
        self.log_ranges.append((start, end))
        if (start, end) in self.failing_log_ranges:
            raise RepositoryClientError(f"log r{start}:{end} failed")
        result = []
        for revision in range(start, end + 1):
            entry = self.entries.get(revision)
            if entry is None:
                continue
            if not include_changed_paths:
                entry = RawLogEntry(
                    revision=entry.revision,
                    author=entry.author,
                    date=entry.date,
                    message=entry.message,
                    changed_paths=None,
                )
            result.append(entry)
        return result

    def get_revision_properties(self, revision):
        self.calls["get_revision_properties"] += 1
        if revision in self.failing_revision_properties:
            raise RepositoryClientError("proplist failed")
        return dict(
            self.revision_properties.get(
                revision,
                {"svn:log": "msg", "svn:author": "alice", "svn:date": "2024-01-01"},
            )
        )

    def get_file_info(self, path, revision):
        self.calls["get_file_info"] += 1
        if path in self.failing_file_info:
            raise RepositoryClientError("list failed")
        data = self.files.get(path, b"")
        return RawFileInfo(size=len(data), node_kind=NodeKind.FILE)

    def get_property(self, path, revision, name):
        self.calls["get_property"] += 1
        if path in self.failing_properties:
            raise RepositoryClientError("propget failed")
        return self.mime_types.get(path)

    @contextmanager
    def open_content(self, path, revision):
        self.calls["open_content"] += 1
        if path in self.failing_content:
            raise ContentUnavailableError("cat failed")
        yield io.BytesIO(self.files.get(path, b""))

    def close(self):
        self.calls["close"] += 1
        self.closed = True


@pytest.fixture
def fake_client():
    """Provide an empty in-memory repository client."""
    return FakeRepositoryClient()


@pytest.fixture
def repository_factory():
    """Provide the in-memory client class for tests that need entries."""
    return FakeRepositoryClient


@pytest.fixture
def entry_factory():
    return make_entry


@pytest.fixture
def file_change_factory():
    return file_change


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (slower)"
    )


def pytest_collection_modifyitems(config, items):
    """Auto-mark tests based on their location."""
    for item in items:
        if "integration" not in item.nodeid:
            item.add_marker(pytest.mark.unit)
