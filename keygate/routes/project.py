"""Project-scoped API routes."""

from typing import Any

from fastapi import APIRouter, Depends

from keygate.auth.context import AuthContext
from keygate.auth.dependencies import require_permission, require_project_name

router = APIRouter(prefix="/v1/project", tags=["Project"])

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: {
        "description": "Missing, invalid, expired or revoked API key",
        "content": {
            "application/json": {
                "example": {
                    "success": False,
                    "error": {
                        "code": "INVALID_CREDENTIAL",
                        "message": "Invalid or revoked API key",
                        "timestamp": "2025-11-11T12:00:00+00:00",
                        "details": "The API key does not exist or has been revoked",
                        "suggestions": ["Verify your API key is correct"],
                    },
                }
            }
        },
    },
    403: {
        "description": "Origin not allowed or insufficient permissions",
        "content": {
            "application/json": {
                "example": {
                    "success": False,
                    "error": {
                        "code": "INSUFFICIENT_PERMISSIONS",
                        "message": "Permission 'write' required for this action",
                        "timestamp": "2025-11-11T12:00:00+00:00",
                        "details": {"required": "write", "available": ["read"]},
                        "suggestions": ["Use an API key with broader permissions"],
                    },
                }
            }
        },
    },
}


@router.get("", responses=_ERROR_RESPONSES)
async def get_project(
    context: AuthContext = Depends(require_permission("read")),
) -> dict[str, Any]:
    """
    Describe the project the calling key belongs to.

    Returns:
        The caller's auth summary, or an override marker for
        development bypass keys
    """
    if context.is_override:
        return {"success": True, "data": {"override": True, "authenticated": False}}
    return {"success": True, "data": context.auth_summary}


@router.get("/key", responses=_ERROR_RESPONSES)
async def get_key(
    context: AuthContext = Depends(require_permission("read")),
) -> dict[str, Any]:
    """
    Describe the calling key.

    A rotated key carries a notice so clients can migrate during the
    grace period.
    """
    if context.is_override:
        return {"success": True, "data": {"override": True}}

    record = context.key_record
    data: dict[str, Any] = {
        "key_id": record.key_id,
        "key_type": record.key_type,
        "status": record.status,
        "permissions": list(context.permissions),
        "usage_count": context.usage_count,
        "expires_at": record.expires_at.isoformat() if record.expires_at else None,
        "usage_recorded": context.usage_recorded,
    }
    if context.is_rotated:
        data["notice"] = "This key has been rotated; switch to its replacement"
    return {"success": True, "data": data}


@router.post(
    "/verify",
    responses=_ERROR_RESPONSES,
    dependencies=[Depends(require_permission("write"))],
)
async def verify_project(
    context: AuthContext = Depends(require_project_name),
) -> dict[str, Any]:
    """
    Confirm that the key may write to the project it names.

    Requires the `write` capability and a `projectName` matching the
    key's project.
    """
    if context.is_override:
        return {"success": True, "data": {"override": True, "verified": True}}
    return {
        "success": True,
        "data": {
            "project_id": context.project_id,
            "project_name": context.project.name,
            "verified": True,
        },
    }
