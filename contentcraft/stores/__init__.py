"""Entity stores: one interface per entity, backend chosen by STORE_BACKEND."""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from contentcraft.config import Settings, get_settings
from contentcraft.logging_config import get_logger
from contentcraft.schemas import Brand, Content, Preset, Tenant
from contentcraft.stores.base import EntityStore
from contentcraft.stores.entities import BRAND, CONTENT, PRESET, TENANT
from contentcraft.stores.memory import MemoryStore, load_fixture

logger = get_logger(__name__)


@dataclass
class Stores:
    """The four entity stores the services and controller work against."""

    tenants: EntityStore[Tenant]
    brands: EntityStore[Brand]
    presets: EntityStore[Preset]
    contents: EntityStore[Content]


def memory_stores(fixtures_dir: Optional[Path] = None, *, empty: bool = False) -> Stores:
    """Fixture-backed stores. empty=True starts with no records at all."""

    def rows(name: str):
        return [] if empty else load_fixture(name, fixtures_dir)

    return Stores(
        tenants=MemoryStore(TENANT, rows("tenants")),
        brands=MemoryStore(BRAND, rows("brands")),
        presets=MemoryStore(PRESET, rows("presets")),
        contents=MemoryStore(CONTENT, rows("contents")),
    )


def database_stores(session_factory=None) -> Stores:
    """SQLAlchemy-backed stores (defaults to the app session factory)."""
    from contentcraft.db import async_session_factory
    from contentcraft.models import BrandRow, ContentRow, PresetRow, TenantRow
    from contentcraft.stores.database import DatabaseStore

    factory = session_factory or async_session_factory
    return Stores(
        tenants=DatabaseStore(TENANT, TenantRow, factory),
        brands=DatabaseStore(BRAND, BrandRow, factory),
        presets=DatabaseStore(PRESET, PresetRow, factory),
        contents=DatabaseStore(CONTENT, ContentRow, factory),
    )


def remote_stores(settings: Settings, transport=None) -> Stores:
    """Record-API-backed stores."""
    from contentcraft.stores.remote import RecordApiClient, RemoteStore

    if not settings.record_api_url:
        raise ValueError("RECORD_API_URL must be set when STORE_BACKEND=remote")
    client = RecordApiClient(
        settings.record_api_url,
        project_id=settings.record_api_project_id,
        public_key=settings.record_api_public_key,
        timeout_seconds=settings.record_api_timeout_seconds,
        retries=settings.record_api_retries,
        transport=transport,
    )
    return Stores(
        tenants=RemoteStore(TENANT, client),
        brands=RemoteStore(BRAND, client),
        presets=RemoteStore(PRESET, client),
        contents=RemoteStore(CONTENT, client),
    )


def build_stores(settings: Optional[Settings] = None) -> Stores:
    """Stores for the configured backend."""
    settings = settings or get_settings()
    logger.info("stores.build", backend=settings.store_backend)
    if settings.store_backend == "database":
        return database_stores()
    if settings.store_backend == "remote":
        return remote_stores(settings)
    fixtures_dir = Path(settings.fixtures_dir) if settings.fixtures_dir else None
    return memory_stores(fixtures_dir)


__all__ = [
    "EntityStore",
    "Stores",
    "build_stores",
    "database_stores",
    "memory_stores",
    "remote_stores",
]
