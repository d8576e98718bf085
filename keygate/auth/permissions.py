"""Per-route checks against an authenticated request context."""

from typing import Optional

from keygate.auth.context import AuthContext, Rejection, RejectionCode


def check_permission(context: AuthContext, permission: str) -> Optional[Rejection]:
    """
    Check that a context grants a capability.

    The override tier always passes. Details echo only the caller's own
    permissions.

    Args:
        context: Context produced by the pipeline
        permission: Required capability token

    Returns:
        None if allowed, Rejection otherwise
    """
    if context.is_override:
        return None

    permissions = list(context.permissions or ())
    if permission in permissions:
        return None

    return Rejection(
        code=RejectionCode.INSUFFICIENT_PERMISSIONS,
        message=f"Permission '{permission}' required for this action",
        details={"required": permission, "available": permissions},
    )


def check_permissions(context: AuthContext, *permissions: str) -> Optional[Rejection]:
    """Check several capabilities; all of them are required."""
    for permission in permissions:
        rejection = check_permission(context, permission)
        if rejection is not None:
            return rejection
    return None


def check_project_name(
    context: AuthContext, project_name: Optional[str]
) -> Optional[Rejection]:
    """
    Check that a caller-supplied project name matches the key's project.

    Args:
        context: Context produced by the pipeline
        project_name: Name given in the request body or query

    Returns:
        None if the name matches (or the caller is the override tier),
        Rejection otherwise
    """
    if not project_name:
        return Rejection(
            code=RejectionCode.MISSING_PROJECT_NAME,
            message="Project name required",
            details="Include projectName in your request",
        )

    if context.is_override:
        return None

    if context.project.name != project_name:
        return Rejection(
            code=RejectionCode.PROJECT_NAME_MISMATCH,
            message="Project name does not match API key",
            details=(
                f"API key belongs to project \"{context.project.name}\", "
                f"but request specifies \"{project_name}\""
            ),
        )
    return None
