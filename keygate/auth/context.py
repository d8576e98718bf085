"""Authentication results attached to requests."""

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from keygate.exceptions import (
    BadRequestError,
    ClientCredentialError,
    GatewayError,
    PolicyError,
)
from keygate.models.api_key import ApiKeyRecord, KeyStatus
from keygate.models.project import Project


class RejectionCode(str, Enum):
    """Machine-readable rejection codes."""

    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"
    CREDENTIAL_EXPIRED = "CREDENTIAL_EXPIRED"
    CREDENTIAL_REVOKED = "CREDENTIAL_REVOKED"
    ORIGIN_NOT_ALLOWED = "ORIGIN_NOT_ALLOWED"
    TENANT_MISMATCH = "TENANT_MISMATCH"
    TENANT_NOT_FOUND = "TENANT_NOT_FOUND"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    MISSING_PROJECT_NAME = "MISSING_PROJECT_NAME"
    PROJECT_NAME_MISMATCH = "PROJECT_NAME_MISMATCH"


# Origin and permission failures are authorization failures
POLICY_CODES = frozenset(
    {
        RejectionCode.ORIGIN_NOT_ALLOWED,
        RejectionCode.INSUFFICIENT_PERMISSIONS,
        RejectionCode.PROJECT_NAME_MISMATCH,
    }
)
BAD_REQUEST_CODES = frozenset({RejectionCode.MISSING_PROJECT_NAME})


class Rejection(BaseModel):
    """A failed check, carrying the code and developer-facing text."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["rejected"] = "rejected"
    code: RejectionCode
    message: str
    details: Optional[Any] = None

    @property
    def status_code(self) -> int:
        return self.to_error().status_code

    def to_error(self) -> GatewayError:
        """
        Convert the rejection into the matching gateway exception.

        Returns:
            PolicyError for authorization failures, BadRequestError for
            missing request fields, ClientCredentialError otherwise
        """
        if self.code in POLICY_CODES:
            return PolicyError(
                message=self.message,
                error_code=self.code.value,
                details=self.details,
            )
        if self.code in BAD_REQUEST_CODES:
            return BadRequestError(
                message=self.message,
                error_code=self.code.value,
                details=self.details,
            )
        return ClientCredentialError(
            message=self.message,
            error_code=self.code.value,
            details=self.details,
        )


class OverrideContext(BaseModel):
    """
    Unrestricted trust tier produced by a development bypass credential.

    Carries no project and no permissions. Handlers must not treat it
    as an authenticated project.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["override"] = "override"
    credential: str = Field(..., repr=False)

    is_override: Literal[True] = True
    project: None = None
    project_id: None = None
    permissions: tuple[str, ...] = ()


class AuthenticatedContext(BaseModel):
    """Project context for a request whose credential passed every check."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["authenticated"] = "authenticated"
    credential: str = Field(..., repr=False)
    key_record: ApiKeyRecord
    project: Project
    permissions: tuple[str, ...]
    project_id: str
    usage_recorded: bool = True
    # Count after this request was recorded; None when accounting degraded
    usage_count: Optional[int] = None

    is_override: Literal[False] = False

    @property
    def key_id(self) -> str:
        return self.key_record.key_id

    @property
    def is_rotated(self) -> bool:
        return self.key_record.status == KeyStatus.ROTATED.value

    @property
    def auth_summary(self) -> dict[str, Any]:
        """Developer-facing summary of the authenticated caller."""
        return {
            "project_id": self.project_id,
            "project_name": self.project.name,
            "project_owner": self.project.owner_id,
            "key_type": self.key_record.key_type,
            "permissions": list(self.permissions),
            "authenticated": True,
        }


AuthContext = Union[AuthenticatedContext, OverrideContext]
AuthResult = Union[AuthenticatedContext, OverrideContext, Rejection]
