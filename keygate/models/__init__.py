"""Data models for the Keygate project API."""

from keygate.models.api_key import ApiKeyRecord, KeyClass, KeyStatus
from keygate.models.project import Project, ProjectStatus

__all__ = ["ApiKeyRecord", "KeyClass", "KeyStatus", "Project", "ProjectStatus"]
