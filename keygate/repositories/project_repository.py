"""Project repository for DynamoDB operations."""

from typing import Optional

from keygate.config import settings
from keygate.models.project import Project
from keygate.repositories.base import BaseRepository
from keygate.utils.lookup_cache import LookupCache


class ProjectRepository(BaseRepository):
    """
    Repository for projects in DynamoDB.

    Read-only from the gateway's point of view, apart from create()
    which seeds data for tooling and tests.
    """

    def __init__(
        self,
        table_name: str | None = None,
        cache: LookupCache[Project] | None = None,
    ) -> None:
        """
        Initialize ProjectRepository with the projects table.

        Args:
            table_name: Table name (defaults to settings)
            cache: Lookup cache (creates one from settings if None)
        """
        super().__init__(table_name or settings.dynamodb_table_projects)
        self.cache = cache or LookupCache(settings.lookup_cache_ttl_seconds)

    async def get_by_id(self, project_id: str) -> Optional[Project]:
        """
        Get project by ID regardless of status.

        Args:
            project_id: Project partition key

        Returns:
            Project if found, None otherwise
        """
        item = await self.get_item({"project_id": project_id})
        if item:
            return Project(**item)
        return None

    async def find_active_by_id(self, project_id: str) -> Optional[Project]:
        """
        Get an active project by ID.

        Args:
            project_id: Project partition key

        Returns:
            Project if it exists and is active, None otherwise
        """
        cached = self.cache.get(project_id)
        if cached is not None:
            return cached

        project = await self.get_by_id(project_id)
        if project is None or not project.is_active:
            return None

        self.cache.set(project_id, project)
        return project

    async def create(self, project: Project) -> Project:
        """
        Create a new project in DynamoDB.

        Args:
            project: Project to store

        Returns:
            The created Project
        """
        await self.put_item(project.model_dump(exclude_none=True))
        return project

