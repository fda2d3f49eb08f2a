"""FastAPI dependencies: stores and workspace sessions from app state."""
from typing import Annotated, Optional

from fastapi import Depends, Header, Request, Response

from contentcraft.controller import SelectionController
from contentcraft.middleware.correlation_id import HEADER_SESSION_ID
from contentcraft.stores import Stores
from contentcraft.workspace import WorkspaceRegistry


def get_stores(request: Request) -> Stores:
    """Stores built at startup (see lifespan in main)."""
    return request.app.state.stores


def get_registry(request: Request) -> WorkspaceRegistry:
    return request.app.state.workspaces


async def get_workspace(
    response: Response,
    registry: Annotated[WorkspaceRegistry, Depends(get_registry)],
    session_id: Annotated[Optional[str], Header(alias=HEADER_SESSION_ID)] = None,
) -> SelectionController:
    """Controller for the caller's session; a session id is minted when absent."""
    session_id = (session_id or "").strip() or registry.new_session_id()
    response.headers[HEADER_SESSION_ID] = session_id
    return await registry.open(session_id)


# Type aliases for dependency injection
StoresDep = Annotated[Stores, Depends(get_stores)]
WorkspaceDep = Annotated[SelectionController, Depends(get_workspace)]
