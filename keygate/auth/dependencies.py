"""FastAPI dependencies for project API key authentication."""

from collections.abc import Awaitable, Callable
from typing import Optional

from fastapi import Depends, Request

from keygate.auth.context import AuthContext, AuthenticatedContext, Rejection
from keygate.auth.origin import resolve_client_origin
from keygate.auth.permissions import check_permissions, check_project_name
from keygate.auth.pipeline import AuthPipeline
from keygate.config import settings
from keygate.repositories.api_key_repository import ApiKeyRepository
from keygate.repositories.project_repository import ProjectRepository


def build_auth_pipeline() -> AuthPipeline:
    """
    Build the pipeline backed by the DynamoDB repositories.

    Returns:
        AuthPipeline wired to ApiKeyRepository and ProjectRepository
    """
    return AuthPipeline(
        key_store=ApiKeyRepository(),
        project_store=ProjectRepository(),
    )


def get_auth_pipeline(request: Request) -> AuthPipeline:
    """
    Return the pipeline attached to the application.

    Tests replace it through `app.dependency_overrides`.
    """
    pipeline = getattr(request.app.state, "auth_pipeline", None)
    if pipeline is None:
        pipeline = build_auth_pipeline()
        request.app.state.auth_pipeline = pipeline
    return pipeline


def get_credential(request: Request) -> Optional[str]:
    """
    Read the raw credential from the request.

    The dedicated header wins over the query parameter.

    Args:
        request: Incoming request

    Returns:
        Raw credential string, or None if absent
    """
    credential = request.headers.get(settings.credential_header)
    if credential:
        return credential.strip()
    credential = request.query_params.get(settings.credential_query_param)
    if credential:
        return credential.strip()
    return None


async def require_project_context(
    request: Request,
    pipeline: AuthPipeline = Depends(get_auth_pipeline),
) -> AuthContext:
    """
    Authenticate the request and attach the resulting context.

    FastAPI caches this dependency per request, so stacking several
    permission checks still runs the pipeline (and counts usage) once.

    Args:
        request: Incoming request
        pipeline: Injected authentication pipeline

    Returns:
        AuthenticatedContext or OverrideContext

    Raises:
        ClientCredentialError: If the credential is rejected (401)
        PolicyError: If the origin policy rejects the request (403)
        InfrastructureError: If a store fails during validation (500)
    """
    client_host = request.client.host if request.client else None
    result = await pipeline.authenticate(
        get_credential(request),
        client_origin=resolve_client_origin(client_host, request.headers),
        correlation_id=getattr(request.state, "correlation_id", None),
    )

    if isinstance(result, Rejection):
        raise result.to_error()

    request.state.auth = result
    if isinstance(result, AuthenticatedContext):
        request.state.api_key_id = result.key_id
        request.state.project_id = result.project_id
    return result


def require_permission(
    *permissions: str,
) -> Callable[..., Awaitable[AuthContext]]:
    """
    Build a dependency that requires capabilities on the request context.

    Applying it several times on one route requires all of the named
    capabilities.

    Args:
        permissions: Required capability tokens

    Returns:
        FastAPI dependency returning the request's AuthContext
    """

    async def permission_dependency(
        context: AuthContext = Depends(require_project_context),
    ) -> AuthContext:
        rejection = check_permissions(context, *permissions)
        if rejection is not None:
            raise rejection.to_error()
        return context

    return permission_dependency


async def require_project_name(
    request: Request,
    context: AuthContext = Depends(require_project_context),
) -> AuthContext:
    """
    Require the caller to name the project its key belongs to.

    The name is read from the `projectName` query parameter or the
    `projectName` field of a JSON body.

    Raises:
        BadRequestError: If no project name is given (400)
        PolicyError: If the name does not match the key's project (403)
    """
    project_name = request.query_params.get("projectName")
    if not project_name:
        try:
            body = await request.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            project_name = body.get("projectName")

    rejection = check_project_name(context, project_name)
    if rejection is not None:
        raise rejection.to_error()

    request.state.requested_project_name = project_name
    return context
