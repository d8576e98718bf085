"""Store interfaces the authentication pipeline depends on."""

from typing import Optional, Protocol

from keygate.models.api_key import ApiKeyRecord
from keygate.models.project import Project


class KeyStore(Protocol):
    """Lookup and usage accounting for API key records."""

    async def find_by_credential(self, api_key: str) -> Optional[ApiKeyRecord]:
        """Return the record matching the full raw key, or None."""
        ...

    async def increment_usage(self, record: ApiKeyRecord) -> int:
        """Atomically count one accepted request and return the new count."""
        ...


class ProjectStore(Protocol):
    """Read-only project lookup."""

    async def find_active_by_id(self, project_id: str) -> Optional[Project]:
        """Return the project if it exists and is active, or None."""
        ...
