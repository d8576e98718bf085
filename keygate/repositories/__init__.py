"""Repository layer for DynamoDB operations."""

from keygate.repositories.api_key_repository import ApiKeyRepository
from keygate.repositories.project_repository import ProjectRepository

__all__ = ["ApiKeyRepository", "ProjectRepository"]
