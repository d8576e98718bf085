"""
Credential validation pipeline.

Turns a raw credential into an authenticated project context, an
override context for development bypass keys, or a rejection. The
checks run as an ordered list of named steps; the first step that
returns an outcome ends the run.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, TypeVar, Union

from botocore.exceptions import BotoCoreError, ClientError

from keygate.auth.context import (
    AuthenticatedContext,
    AuthResult,
    OverrideContext,
    Rejection,
    RejectionCode,
)
from keygate.auth.credential import (
    CredentialDescriptor,
    CredentialFormatError,
    is_bypass_credential,
    parse_credential,
)
from keygate.auth.origin import is_origin_allowed
from keygate.auth.stores import KeyStore, ProjectStore
from keygate.config import settings
from keygate.exceptions import InfrastructureError, StoreUnavailableError
from keygate.logging.config import get_logger
from keygate.models.api_key import USABLE_STATUSES, ApiKeyRecord, KeyClass
from keygate.models.project import Project

logger = get_logger(__name__)

T = TypeVar("T")

# Failures that mean the store could not answer, as opposed to a bug
STORE_FAILURES = (asyncio.TimeoutError, ClientError, BotoCoreError, OSError)


@dataclass
class Attempt:
    """State accumulated while one credential moves through the steps."""

    credential: Optional[str]
    client_origin: Optional[str] = None
    correlation_id: Optional[str] = None
    descriptor: Optional[CredentialDescriptor] = None
    key_record: Optional[ApiKeyRecord] = None
    project: Optional[Project] = None
    usage_recorded: bool = False
    usage_count: Optional[int] = None


# None continues with the next step; anything else ends the run
StepOutcome = Union[Rejection, OverrideContext, None]
Step = Callable[[Attempt], Awaitable[StepOutcome]]


class AuthPipeline:
    """
    Ordered credential checks.

    Step order:
        presence, bypass, format, lookup, status, expiry, origin,
        project_binding, project, usage

    Revocation and expiry run before the origin and project checks so a
    dead key never reveals network policy. The project binding check is
    in-memory and runs before the project store round trip.
    """

    def __init__(
        self,
        key_store: KeyStore,
        project_store: ProjectStore,
        hardened: bool | None = None,
        bypass_credentials: list[str] | None = None,
        namespace: str | None = None,
        store_timeout_seconds: float | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize AuthPipeline.

        Args:
            key_store: Store of API key records
            project_store: Store of projects
            hardened: Enforce origin policy (defaults to settings)
            bypass_credentials: Development bypass literals (defaults to settings)
            namespace: Credential namespace tag (defaults to settings)
            store_timeout_seconds: Timeout per store call (defaults to settings)
            clock: Returns the current UTC time (for tests)
        """
        self.key_store = key_store
        self.project_store = project_store
        self.hardened = settings.is_hardened if hardened is None else hardened
        self.bypass_credentials = (
            settings.bypass_credentials
            if bypass_credentials is None
            else bypass_credentials
        )
        self.namespace = namespace or settings.credential_namespace
        self.store_timeout_seconds = (
            store_timeout_seconds
            if store_timeout_seconds is not None
            else settings.store_timeout_seconds
        )
        self.clock = clock or (lambda: datetime.now(timezone.utc))

        self.steps: tuple[tuple[str, Step], ...] = (
            ("presence", self._check_presence),
            ("bypass", self._check_bypass),
            ("format", self._parse_format),
            ("lookup", self._lookup_key),
            ("status", self._check_status),
            ("expiry", self._check_expiry),
            ("origin", self._check_origin),
            ("project_binding", self._check_project_binding),
            ("project", self._resolve_project),
            ("usage", self._record_usage),
        )

    @property
    def step_names(self) -> list[str]:
        return [name for name, _ in self.steps]

    async def authenticate(
        self,
        credential: Optional[str],
        client_origin: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> AuthResult:
        """
        Run every step against a credential.

        Args:
            credential: Raw credential from the request, if any
            client_origin: Resolved client address
            correlation_id: Request correlation ID for logging

        Returns:
            AuthenticatedContext, OverrideContext or Rejection

        Raises:
            InfrastructureError: If a store failed before the usage step
        """
        attempt = Attempt(
            credential=credential,
            client_origin=client_origin,
            correlation_id=correlation_id,
        )

        for name, step in self.steps:
            outcome = await step(attempt)
            if outcome is None:
                continue
            if isinstance(outcome, OverrideContext):
                logger.warning(
                    "Development bypass credential accepted",
                    extra={
                        "correlation_id": correlation_id,
                        "context": {"step": name, "override": True},
                    },
                )
            else:
                logger.info(
                    "Credential rejected",
                    extra={
                        "correlation_id": correlation_id,
                        "context": {
                            "step": name,
                            "code": outcome.code.value,
                            "claimed_project_id": (
                                attempt.descriptor.project_id
                                if attempt.descriptor
                                else None
                            ),
                        },
                    },
                )
            return outcome

        record = attempt.key_record
        project = attempt.project
        return AuthenticatedContext(
            credential=attempt.credential,
            key_record=record,
            project=project,
            permissions=tuple(record.permissions),
            project_id=project.project_id,
            usage_recorded=attempt.usage_recorded,
            usage_count=attempt.usage_count,
        )

    async def _call_store(
        self, store: str, operation: str, call: Awaitable[T], attempt: Attempt
    ) -> T:
        """
        Await a store call with the configured timeout.

        Raises:
            StoreUnavailableError: On timeout or store failure
        """
        try:
            return await asyncio.wait_for(call, timeout=self.store_timeout_seconds)
        except STORE_FAILURES as exc:
            logger.error(
                "Store call failed during credential validation",
                exc_info=exc,
                extra={
                    "correlation_id": attempt.correlation_id,
                    "context": {
                        "store": store,
                        "operation": operation,
                        "exception_type": type(exc).__name__,
                    },
                },
            )
            raise StoreUnavailableError(store=store, operation=operation) from exc

    async def _check_presence(self, attempt: Attempt) -> StepOutcome:
        if not attempt.credential:
            return Rejection(
                code=RejectionCode.MISSING_CREDENTIAL,
                message="API key required",
                details=(
                    f"Include {settings.credential_header} header or "
                    f"{settings.credential_query_param} query parameter"
                ),
            )
        return None

    async def _check_bypass(self, attempt: Attempt) -> StepOutcome:
        if is_bypass_credential(attempt.credential, self.bypass_credentials):
            return OverrideContext(credential=attempt.credential)
        return None

    async def _parse_format(self, attempt: Attempt) -> StepOutcome:
        try:
            attempt.descriptor = parse_credential(attempt.credential, self.namespace)
        except CredentialFormatError:
            return Rejection(
                code=RejectionCode.INVALID_FORMAT,
                message="Invalid API key format",
                details=(
                    f"API key must be in format: "
                    f"{self.namespace}_[project_id]_[key_class]_[suffix]"
                ),
            )
        return None

    async def _lookup_key(self, attempt: Attempt) -> StepOutcome:
        record = await self._call_store(
            "key_store",
            "find_by_credential",
            self.key_store.find_by_credential(attempt.credential),
            attempt,
        )
        if record is None:
            # Same answer whether or not the claimed project exists
            return Rejection(
                code=RejectionCode.INVALID_CREDENTIAL,
                message="Invalid or revoked API key",
                details="The API key does not exist or has been revoked",
            )
        attempt.key_record = record
        return None

    async def _check_status(self, attempt: Attempt) -> StepOutcome:
        status = attempt.key_record.status
        if status not in USABLE_STATUSES:
            return Rejection(
                code=RejectionCode.CREDENTIAL_REVOKED,
                message="API key has been revoked",
                details=f"Key status: {status}",
            )
        return None

    async def _check_expiry(self, attempt: Attempt) -> StepOutcome:
        record = attempt.key_record
        if record.is_expired(self.clock()):
            return Rejection(
                code=RejectionCode.CREDENTIAL_EXPIRED,
                message="API key has expired",
                details=f"Key expired on {record.expires_at.isoformat()}",
            )
        return None

    async def _check_origin(self, attempt: Attempt) -> StepOutcome:
        record = attempt.key_record
        if not self.hardened or record.key_type != KeyClass.PRODUCTION.value:
            return None
        if not is_origin_allowed(attempt.client_origin, record.ip_allowlist):
            return Rejection(
                code=RejectionCode.ORIGIN_NOT_ALLOWED,
                message="Request from unauthorized IP address",
                details=(
                    f"IP {attempt.client_origin or 'unknown'} is not allowlisted "
                    f"for this production API key"
                ),
            )
        return None

    async def _check_project_binding(self, attempt: Attempt) -> StepOutcome:
        if attempt.key_record.project_id != attempt.descriptor.project_id:
            return Rejection(
                code=RejectionCode.TENANT_MISMATCH,
                message="API key project mismatch",
                details="The API key does not belong to the project it names",
            )
        return None

    async def _resolve_project(self, attempt: Attempt) -> StepOutcome:
        project_id = attempt.key_record.project_id
        project = await self._call_store(
            "project_store",
            "find_active_by_id",
            self.project_store.find_active_by_id(project_id),
            attempt,
        )
        if project is None or not project.is_active:
            return Rejection(
                code=RejectionCode.TENANT_NOT_FOUND,
                message="Project not found or inactive",
                details=f"Project {project_id} does not exist or is not active",
            )
        attempt.project = project
        return None

    async def _record_usage(self, attempt: Attempt) -> StepOutcome:
        try:
            usage_count = await self._call_store(
                "key_store",
                "increment_usage",
                self.key_store.increment_usage(attempt.key_record),
                attempt,
            )
        except InfrastructureError:
            # Accounting never blocks access
            logger.warning(
                "Usage accounting degraded, request admitted unaccounted",
                extra={
                    "correlation_id": attempt.correlation_id,
                    "context": {
                        "key_id": attempt.key_record.key_id,
                        "project_id": attempt.key_record.project_id,
                        "usage_recorded": False,
                    },
                },
            )
            attempt.usage_recorded = False
            return None

        attempt.usage_recorded = True
        attempt.usage_count = usage_count
        return None
