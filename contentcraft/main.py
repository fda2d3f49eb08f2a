"""FastAPI application entrypoint."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from contentcraft import __version__
from contentcraft.errors import ContentCraftError
from contentcraft.logging_config import configure_logging, get_logger
from contentcraft.middleware.correlation_id import CorrelationIdMiddleware
from contentcraft.routers import (
    brands_router,
    content_router,
    health_router,
    presets_router,
    tenants_router,
    workspace_router,
)
from contentcraft.schemas import ErrorResponse
from contentcraft.stores import build_stores
from contentcraft.workspace import WorkspaceRegistry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown: logging, entity stores, workspace sessions."""
    configure_logging()
    stores = build_stores()
    app.state.stores = stores
    app.state.workspaces = WorkspaceRegistry(stores)
    logger.info("app_started", version=__version__)
    yield
    logger.info("app_shutdown")


app = FastAPI(
    title="ContentCraft Pro",
    version=__version__,
    lifespan=lifespan,
)
app.add_middleware(CorrelationIdMiddleware)


@app.exception_handler(ContentCraftError)
async def contentcraft_error_handler(request: Request, exc: ContentCraftError) -> JSONResponse:
    """Map the error taxonomy onto ErrorResponse bodies."""
    log = logger.warning if exc.status_code < 500 else logger.error
    log("request_failed", path=request.url.path, code=exc.code, status=exc.status_code, error=exc.message)
    body = ErrorResponse(detail=exc.message, code=exc.code, extra=exc.extra or None)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


app.include_router(health_router)
app.include_router(tenants_router)
app.include_router(brands_router)
app.include_router(presets_router)
app.include_router(content_router)
app.include_router(workspace_router)


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint: app name and version."""
    return {"name": "contentcraft", "version": __version__}
