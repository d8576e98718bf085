"""FastAPI application entry point."""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from keygate.auth.dependencies import build_auth_pipeline
from keygate.config import settings
from keygate.exceptions import GatewayError
from keygate.handlers.exception_handler import (
    gateway_exception_handler,
    generic_exception_handler,
    validation_exception_handler,
)
from keygate.logging.config import configure_logging
from keygate.middleware.logging import LoggingMiddleware
from keygate.routes import project, status

# Configure logging before creating the app
configure_logging()

app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description="""
## Keygate Project API

Project-scoped API protected by API key authentication. Every request to a
project route is resolved to a project context before the handler runs.

### Authentication

Send your project API key in a header:

```
X-API-Key: proj_<project_id>_<key_class>_<secret>
```

or as the `apikey` query parameter. The header wins when both are present.

### Key lifecycle

- **active**: accepted
- **rotated**: still accepted during the grace period; switch to the new key
- **revoked**: always rejected

Production keys may carry an IP allowlist, enforced when the service runs
in production mode.

### Errors

Every error response has the shape
`{"success": false, "error": {"code", "message", "details", "suggestions"}}`.
Branch on `error.code`, never on the message text.
""",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.state.auth_pipeline = build_auth_pipeline()

app.add_middleware(LoggingMiddleware)

app.add_exception_handler(GatewayError, gateway_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.include_router(project.router)
app.include_router(status.router)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """
    Root endpoint with API information.

    Returns:
        Dict with welcome message and docs link
    """
    return {
        "message": f"Welcome to {settings.api_title}",
        "version": settings.api_version,
        "docs": "/docs",
        "health": "/status",
    }
