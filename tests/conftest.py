"""Shared fixtures: fixture-backed stores and an ASGI client over them."""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from contentcraft.stores import Stores, memory_stores
from contentcraft.workspace import WorkspaceRegistry


@pytest.fixture
def stores() -> Stores:
    """Fresh in-memory stores loaded from the bundled fixtures."""
    return memory_stores()


@pytest.fixture
def empty_stores() -> Stores:
    return memory_stores(empty=True)


@pytest_asyncio.fixture
async def client(stores: Stores):
    """AsyncClient against the app, with app state pointing at `stores`."""
    from contentcraft.main import app

    app.state.stores = stores
    app.state.workspaces = WorkspaceRegistry(stores)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
