"""Project (tenant) model for DynamoDB."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ProjectStatus(str, Enum):
    """Project status."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class Project(BaseModel):
    """
    Project that API keys authorize access to.

    Attributes:
        project_id: Unique project identifier
        name: Project name
        status: Project status (active, inactive)
        owner_id: Identifier of the owning account
        created_at: ISO 8601 timestamp of project creation
    """

    project_id: str = Field(..., description="Unique project identifier")
    name: str = Field(..., description="Project name")
    status: str = Field(
        default=ProjectStatus.ACTIVE.value,
        description="Project status: active, inactive",
    )
    owner_id: Optional[str] = Field(None, description="Owning account")
    created_at: Optional[str] = Field(
        None, description="ISO 8601 creation timestamp"
    )

    @property
    def is_active(self) -> bool:
        return self.status == ProjectStatus.ACTIVE.value
