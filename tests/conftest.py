"""Shared fixtures: in-memory stores and record factories."""

import asyncio
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Callable, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from keygate.auth.api_key import digest_api_key
from keygate.auth.pipeline import AuthPipeline
from keygate.models.api_key import ApiKeyRecord
from keygate.models.project import Project

VALID_KEY = "proj_123_production_abcd"


class FakeKeyStore:
    """In-memory key store recording every call it receives."""

    def __init__(self) -> None:
        self.records: dict[str, ApiKeyRecord] = {}
        self.usage: Counter = Counter()
        self.calls: list[tuple[str, str]] = []
        self.find_error: Optional[BaseException] = None
        self.increment_error: Optional[BaseException] = None
        self.find_delay: float = 0

    def add(self, raw: str, record: ApiKeyRecord) -> None:
        self.records[raw] = record

    async def find_by_credential(self, api_key: str) -> Optional[ApiKeyRecord]:
        self.calls.append(("find_by_credential", api_key))
        if self.find_delay:
            await asyncio.sleep(self.find_delay)
        if self.find_error is not None:
            raise self.find_error
        return self.records.get(api_key)

    async def increment_usage(self, record: ApiKeyRecord) -> int:
        self.calls.append(("increment_usage", record.key_id))
        # Yield so concurrent callers interleave before the increment
        await asyncio.sleep(0)
        if self.increment_error is not None:
            raise self.increment_error
        self.usage[record.key_id] += 1
        return self.usage[record.key_id]


class FakeProjectStore:
    """In-memory project store returning only active projects."""

    def __init__(self) -> None:
        self.projects: dict[str, Project] = {}
        self.calls: list[str] = []

    def add(self, project: Project) -> None:
        self.projects[project.project_id] = project

    async def find_active_by_id(self, project_id: str) -> Optional[Project]:
        self.calls.append(project_id)
        project = self.projects.get(project_id)
        if project is None or not project.is_active:
            return None
        return project


@pytest.fixture
def make_record() -> Callable[..., ApiKeyRecord]:
    """Factory for ApiKeyRecord with sensible defaults."""

    def _make(raw: str = VALID_KEY, **overrides: Any) -> ApiKeyRecord:
        data: dict[str, Any] = {
            "key_id": "key_001",
            "project_id": "123",
            "key_digest": digest_api_key(raw),
            "key_hash": "$2b$12$notarealhashnotarealhashnotarealhashnotarealhas",
            "key_type": "production",
            "status": "active",
            "permissions": ["read", "write"],
            "ip_allowlist": [],
            "created_at": datetime(2025, 11, 11, tzinfo=timezone.utc),
            "name": "Test key",
        }
        data.update(overrides)
        return ApiKeyRecord(**data)

    return _make


@pytest.fixture
def make_project() -> Callable[..., Project]:
    """Factory for Project with sensible defaults."""

    def _make(**overrides: Any) -> Project:
        data: dict[str, Any] = {
            "project_id": "123",
            "name": "demo-project",
            "status": "active",
            "owner_id": "user_1",
        }
        data.update(overrides)
        return Project(**data)

    return _make


@pytest.fixture
def key_store() -> FakeKeyStore:
    return FakeKeyStore()


@pytest.fixture
def project_store() -> FakeProjectStore:
    return FakeProjectStore()


@pytest.fixture
def seeded_stores(key_store, project_store, make_record, make_project):
    """Stores holding one active production key for an active project."""
    key_store.add(VALID_KEY, make_record())
    project_store.add(make_project())
    return key_store, project_store


@pytest.fixture
def pipeline(key_store, project_store) -> AuthPipeline:
    """Pipeline in non-hardened mode with the default bypass literals."""
    return AuthPipeline(
        key_store=key_store,
        project_store=project_store,
        hardened=False,
        bypass_credentials=["local-dev-key", "dev-key"],
        namespace="proj",
        store_timeout_seconds=1.0,
    )


@pytest.fixture
def mock_table() -> AsyncMock:
    """Create mock DynamoDB Table resource."""
    table = AsyncMock()
    table.get_item = AsyncMock(return_value={})
    table.put_item = AsyncMock(return_value={})
    table.query = AsyncMock(return_value={"Items": []})
    table.update_item = AsyncMock(return_value={"Attributes": {}})
    return table


@pytest.fixture
def mock_session(mock_table: AsyncMock) -> MagicMock:
    """Create mock aioboto3 session whose resource yields mock_table."""
    dynamodb = MagicMock()
    dynamodb.Table = AsyncMock(return_value=mock_table)

    resource = MagicMock()
    resource.__aenter__ = AsyncMock(return_value=dynamodb)
    resource.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.resource.return_value = resource
    return session
