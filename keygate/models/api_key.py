"""API key record model for DynamoDB."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class KeyClass(str, Enum):
    """Key class encoded in the credential and stored on the record."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"
    RESTRICTED = "restricted"


class KeyStatus(str, Enum):
    """Lifecycle status of an issued key."""

    ACTIVE = "active"
    ROTATED = "rotated"
    REVOKED = "revoked"


# Statuses that still authorize requests; rotated is the grace period
USABLE_STATUSES = frozenset({KeyStatus.ACTIVE.value, KeyStatus.ROTATED.value})


class ApiKeyRecord(BaseModel):
    """
    Persisted API key record.

    Status is kept as a plain string so records written by the issuance
    side with an unknown status still load and are rejected as revoked.

    Attributes:
        key_id: Unique identifier of the issued key
        project_id: Project the key belongs to
        key_digest: SHA-256 digest of the raw key (lookup index)
        key_hash: Bcrypt hash of the raw key
        key_type: Key class (production, development, restricted)
        status: Key status (active, rotated, revoked)
        permissions: Capability tokens granted to the key
        ip_allowlist: IP addresses or CIDR networks (production keys only)
        expires_at: Absolute expiry, None for non-expiring keys
        usage_count: Number of accepted requests
        last_used_at: Timestamp of the last accepted request
        created_at: Timestamp of key creation
        name: Human-readable key name
    """

    key_id: str = Field(..., description="Unique key identifier")
    project_id: str = Field(..., description="Owning project identifier")
    key_digest: str = Field(..., description="SHA-256 digest of API key")
    key_hash: str = Field(..., description="Bcrypt hash of API key")
    key_type: KeyClass = Field(
        default=KeyClass.PRODUCTION, description="Key class"
    )
    status: str = Field(
        default=KeyStatus.ACTIVE.value,
        description="Key status: active, rotated, revoked",
    )
    permissions: List[str] = Field(
        default_factory=list, description="Granted capabilities"
    )
    ip_allowlist: List[str] = Field(
        default_factory=list, description="Allowed client IPs or CIDRs"
    )
    expires_at: Optional[datetime] = Field(
        None, description="Expiry timestamp (None = never)"
    )
    usage_count: int = Field(default=0, description="Accepted request count")
    last_used_at: Optional[datetime] = Field(
        None, description="Last used timestamp"
    )
    created_at: Optional[datetime] = Field(
        None, description="Creation timestamp"
    )
    name: Optional[str] = Field(None, description="Human-readable name")

    class Config:
        """Pydantic configuration."""

        use_enum_values = True
        json_schema_extra = {
            "example": {
                "key_id": "key_5f3c2a1b",
                "project_id": "123",
                "key_digest": "9f86d081884c7d65...",
                "key_hash": "$2b$12$...",
                "key_type": "production",
                "status": "active",
                "permissions": ["read", "write"],
                "ip_allowlist": ["203.0.113.0/24"],
                "expires_at": None,
                "usage_count": 0,
                "last_used_at": None,
                "created_at": "2025-11-11T12:00:00Z",
                "name": "Production server key",
            }
        }

    def is_expired(self, now: datetime | None = None) -> bool:
        """Return True if the key has an expiry that lies in the past."""
        if self.expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return now > expires_at
