"""
Selection controller: pure reducer transitions and the async orchestration
over in-memory stores (load, switch, brand-set save, failures, stale fetches).
"""
import asyncio
from datetime import datetime, timezone

import pytest

from contentcraft.controller import (
    VIEW_BRANDS,
    VIEW_SESSION,
    BrandSelected,
    BrandsLoaded,
    BrandsRequested,
    ErrorKind,
    SelectionController,
    Status,
    TenantsLoaded,
    WorkspaceState,
    reduce,
)
from contentcraft.errors import BackendFailure, NotFound, ValidationFailed
from contentcraft.schemas import Brand, Tenant
from contentcraft.stores import Stores
from contentcraft.stores.entities import BRAND, CONTENT, PRESET, TENANT
from contentcraft.stores.memory import MemoryStore


def _brand(id: int, tenant_id: int = 1, is_default: bool = False) -> Brand:
    return Brand(id=id, name=f"Brand {id}", tenant_id=tenant_id, is_default=is_default)


def _stores(tenants, brands) -> Stores:
    return Stores(
        tenants=MemoryStore(TENANT, tenants),
        brands=MemoryStore(BRAND, brands),
        presets=MemoryStore(PRESET, []),
        contents=MemoryStore(CONTENT, []),
    )


def _assert_consistent(state: WorkspaceState) -> None:
    """Selections always point into the current collections."""
    if state.selected_tenant_id is not None:
        assert state.current_tenant is not None
    if state.selected_brand_id is not None:
        assert state.current_brand is not None
    assert all(b.tenant_id == state.selected_tenant_id for b in state.brands)


# --- reducer ---


def test_reduce_empty_tenant_list_is_terminal_error() -> None:
    """Zero tenants -> ERROR no_tenant, not retryable, distinct from backend failures."""
    state = reduce(WorkspaceState(status=Status.LOADING), TenantsLoaded(()))
    assert state.status is Status.ERROR
    assert state.error.kind is ErrorKind.NO_TENANT
    assert state.error.retryable is False
    assert state.error.view == VIEW_SESSION


def test_reduce_stale_brand_result_is_ignored() -> None:
    """A result tagged with an older sequence number returns the same state object."""
    state = reduce(WorkspaceState(), BrandsRequested(tenant_id=2, seq=5))
    stale = BrandsLoaded(tenant_id=2, seq=4, brands=(_brand(20, tenant_id=2),))
    assert reduce(state, stale) is state
    other_tenant = BrandsLoaded(tenant_id=1, seq=5, brands=(_brand(10),))
    assert reduce(state, other_tenant) is state


def test_reduce_brands_loaded_drops_foreign_brands() -> None:
    state = reduce(WorkspaceState(), BrandsRequested(tenant_id=1, seq=1))
    state = reduce(state, BrandsLoaded(tenant_id=1, seq=1, brands=(_brand(10), _brand(20, tenant_id=2))))
    assert [b.id for b in state.brands] == [10]
    assert state.selected_brand_id == 10
    assert state.status is Status.READY


def test_reduce_unknown_brand_selection_is_ignored() -> None:
    state = WorkspaceState(brands=(_brand(1),), selected_brand_id=1, selected_tenant_id=1)
    assert reduce(state, BrandSelected(99)) is state


# --- controller ---


@pytest.mark.asyncio
async def test_start_selects_default_tenant_and_brand(stores: Stores) -> None:
    """On load the default tenant (1) and its default brand (1) are selected."""
    controller = SelectionController(stores)
    state = await controller.start()
    assert state.status is Status.READY
    assert controller.current_tenant.id == 1
    assert controller.current_brand.id == 1
    assert controller.selected_brand.id == 1
    assert {b.tenant_id for b in state.brands} == {1}


@pytest.mark.asyncio
async def test_start_is_idempotent(stores: Stores) -> None:
    controller = SelectionController(stores)
    first = await controller.start()
    assert await controller.start() is first


@pytest.mark.asyncio
async def test_load_then_switch_tenant_scenario() -> None:
    """Tenants [1 default, 2], brands [10@1 default, 20@2 default]: load -> 1/10, switch -> 2/20."""
    now = datetime.now(timezone.utc).isoformat()
    stores = _stores(
        [
            {"id": 1, "name": "One", "is_default": True, "created_at": now},
            {"id": 2, "name": "Two", "created_at": now},
        ],
        [
            {"id": 10, "name": "Ten", "tenant_id": 1, "is_default": True},
            {"id": 20, "name": "Twenty", "tenant_id": 2, "is_default": True},
        ],
    )
    controller = SelectionController(stores)
    await controller.start()
    assert controller.current_tenant.id == 1
    assert controller.current_brand.id == 10

    await controller.switch_tenant(Tenant(id=2, name="Two"))
    assert controller.current_tenant.id == 2
    assert controller.current_brand.id == 20


@pytest.mark.asyncio
async def test_no_tenant_is_non_retryable_error(empty_stores: Stores) -> None:
    controller = SelectionController(empty_stores)
    state = await controller.start()
    assert state.status is Status.ERROR
    assert state.error.kind is ErrorKind.NO_TENANT
    assert not state.error.retryable
    assert controller.current_tenant is None
    assert controller.current_brand is None
    # retry leaves a non-retryable error in place
    assert await controller.retry() is state


@pytest.mark.asyncio
async def test_switch_round_trip_restores_default_brand(stores: Stores) -> None:
    """A -> B -> A selects resolve_default(scope(brands, A)) again."""
    controller = SelectionController(stores)
    await controller.start()
    controller.select_brand(3)
    await controller.switch_tenant(2)
    assert controller.current_brand.id == 4
    await controller.switch_tenant(1)
    assert controller.current_tenant.id == 1
    assert controller.current_brand.id == 1


@pytest.mark.asyncio
async def test_switch_to_unknown_tenant_raises(stores: Stores) -> None:
    controller = SelectionController(stores)
    before = await controller.start()
    with pytest.raises(NotFound):
        await controller.switch_tenant(42)
    assert controller.state is before


@pytest.mark.asyncio
async def test_deleting_selected_default_brand_falls_back_to_first_remaining(stores: Stores) -> None:
    """[1 default, 2, 3] selected 1; saved set [2, 3] -> selected 2."""
    controller = SelectionController(stores)
    await controller.start()
    assert controller.current_brand.id == 1
    remaining = [b for b in controller.state.brands if b.id != 1]
    controller.on_brands_save(remaining)
    assert controller.current_brand.id == 2
    assert all(b.id != 1 for b in controller.state.brands)


@pytest.mark.asyncio
async def test_deleting_selected_brand_falls_back_to_default(stores: Stores) -> None:
    controller = SelectionController(stores)
    await controller.start()
    controller.select_brand(3)
    remaining = [b for b in controller.state.brands if b.id != 3]
    controller.on_brands_save(remaining)
    assert controller.current_brand.id == 1


@pytest.mark.asyncio
async def test_deleting_other_brand_keeps_selection(stores: Stores) -> None:
    controller = SelectionController(stores)
    await controller.start()
    controller.select_brand(2)
    remaining = [b for b in controller.state.brands if b.id != 3]
    controller.on_brands_save(remaining)
    assert controller.current_brand.id == 2


@pytest.mark.asyncio
async def test_edited_selected_brand_keeps_selection_with_new_fields(stores: Stores) -> None:
    controller = SelectionController(stores)
    await controller.start()
    controller.select_brand(2)
    edited = [
        b.model_copy(update={"name": "Renamed"}) if b.id == 2 else b
        for b in controller.state.brands
    ]
    controller.on_brands_save(edited)
    assert controller.current_brand.id == 2
    assert controller.current_brand.name == "Renamed"


@pytest.mark.asyncio
async def test_on_brands_save_without_tenant_is_rejected(empty_stores: Stores) -> None:
    controller = SelectionController(empty_stores)
    await controller.start()
    with pytest.raises(ValidationFailed):
        controller.on_brands_save([_brand(1, is_default=True)])


@pytest.mark.asyncio
async def test_select_unknown_brand_raises(stores: Stores) -> None:
    controller = SelectionController(stores)
    await controller.start()
    with pytest.raises(NotFound):
        controller.select_brand(4)  # belongs to tenant 2
    assert controller.current_brand.id == 1


@pytest.mark.asyncio
async def test_every_published_state_is_consistent(stores: Stores) -> None:
    """No listener ever sees a selected brand missing from the brand collection."""
    controller = SelectionController(stores)
    seen = []
    controller.subscribe(seen.append)
    await controller.start()
    controller.select_brand(2)
    await controller.switch_tenant(2)
    controller.on_brands_save([b for b in controller.state.brands if b.id != 4])
    await controller.switch_tenant(1)
    assert seen
    for state in seen:
        _assert_consistent(state)


@pytest.mark.asyncio
async def test_unsubscribe_stops_notifications(stores: Stores) -> None:
    controller = SelectionController(stores)
    seen = []
    unsubscribe = controller.subscribe(seen.append)
    await controller.start()
    count = len(seen)
    unsubscribe()
    controller.select_brand(2)
    assert len(seen) == count


@pytest.mark.asyncio
async def test_late_brand_response_for_previous_tenant_is_discarded(stores: Stores) -> None:
    """Switch to 2 (slow), then back to 1 (fast): the late tenant-2 result must not win."""
    controller = SelectionController(stores)
    await controller.start()

    gate = asyncio.Event()
    original = stores.brands.get_all

    async def slow_get_all(tenant_id=None):
        if tenant_id == 2:
            await gate.wait()
        return await original(tenant_id)

    stores.brands.get_all = slow_get_all

    slow_switch = asyncio.create_task(controller.switch_tenant(2))
    await asyncio.sleep(0)
    await controller.switch_tenant(1)
    assert controller.current_tenant.id == 1

    gate.set()
    await slow_switch
    assert controller.state.status is Status.READY
    assert controller.current_tenant.id == 1
    assert controller.current_brand.id == 1
    assert {b.tenant_id for b in controller.state.brands} == {1}


@pytest.mark.asyncio
async def test_brand_fetch_failure_keeps_last_good_selection(stores: Stores) -> None:
    """A failed brand fetch surfaces a brands-view error; selections stay put; retry recovers."""
    controller = SelectionController(stores)
    await controller.start()
    controller.select_brand(2)

    original = stores.brands.get_all
    failing = {"on": True}

    async def flaky_get_all(tenant_id=None):
        if failing["on"]:
            raise BackendFailure("brand store unreachable")
        return await original(tenant_id)

    stores.brands.get_all = flaky_get_all

    state = await controller.switch_tenant(2)
    assert state.status is Status.ERROR
    assert state.error.kind is ErrorKind.BACKEND_FAILURE
    assert state.error.retryable
    assert state.error.view == VIEW_BRANDS
    assert controller.current_tenant.id == 1
    assert controller.current_brand.id == 2
    _assert_consistent(state)

    failing["on"] = False
    state = await controller.retry()
    assert state.status is Status.READY
    assert state.error is None
    assert controller.current_tenant.id == 2
    assert controller.current_brand.id == 4


@pytest.mark.asyncio
async def test_initial_tenant_failure_is_retryable(stores: Stores) -> None:
    original = stores.tenants.get_all
    calls = {"n": 0}

    async def flaky_get_all(tenant_id=None):
        calls["n"] += 1
        if calls["n"] == 1:
            raise BackendFailure("tenant store unreachable")
        return await original(tenant_id)

    stores.tenants.get_all = flaky_get_all

    controller = SelectionController(stores)
    state = await controller.start()
    assert state.status is Status.ERROR
    assert state.error.view == VIEW_SESSION
    assert state.error.retryable
    assert controller.current_tenant is None

    state = await controller.retry()
    assert state.status is Status.READY
    assert controller.current_tenant.id == 1


@pytest.mark.asyncio
async def test_refresh_tenants_keeps_selection(stores: Stores) -> None:
    controller = SelectionController(stores)
    await controller.start()
    await controller.switch_tenant(2)
    controller.select_brand(5)
    await controller.refresh_tenants()
    assert controller.current_tenant.id == 2
    assert controller.current_brand.id == 5


@pytest.mark.asyncio
async def test_refresh_tenants_after_selected_tenant_removed(stores: Stores) -> None:
    controller = SelectionController(stores)
    await controller.start()
    await controller.switch_tenant(2)
    await stores.tenants.delete(2)
    await controller.refresh_tenants()
    assert controller.current_tenant.id == 1
    assert controller.current_brand.id == 1


@pytest.mark.asyncio
async def test_unexpected_store_error_is_retryable(stores: Stores) -> None:
    original = stores.brands.get_all
    failing = {"on": True}

    async def broken_get_all(tenant_id=None):
        if failing["on"]:
            raise KeyError("Id")
        return await original(tenant_id)

    stores.brands.get_all = broken_get_all

    controller = SelectionController(stores)
    state = await controller.start()
    assert state.status is Status.ERROR
    assert state.error.view == VIEW_BRANDS
    assert state.error.retryable

    failing["on"] = False
    state = await controller.retry()
    assert state.status is Status.READY
    assert controller.current_brand.id == 1


@pytest.mark.asyncio
async def test_on_brands_save_drops_unscoped_brands(stores: Stores) -> None:
    controller = SelectionController(stores)
    await controller.start()
    orphan = Brand(id=999, name="Orphan", tenant_id=None)
    state = controller.on_brands_save(list(controller.state.brands) + [orphan])
    assert 999 not in {b.id for b in state.brands}
    _assert_consistent(state)


@pytest.mark.asyncio
async def test_unsubscribe_twice_is_harmless(stores: Stores) -> None:
    controller = SelectionController(stores)
    unsubscribe = controller.subscribe(lambda state: None)
    unsubscribe()
    unsubscribe()


@pytest.mark.asyncio
async def test_refresh_tenants_keeps_pending_switch_target(stores: Stores) -> None:
    controller = SelectionController(stores)
    await controller.start()

    gate = asyncio.Event()
    original = stores.brands.get_all

    async def slow_get_all(tenant_id=None):
        if tenant_id == 2:
            await gate.wait()
        return await original(tenant_id)

    stores.brands.get_all = slow_get_all

    switch = asyncio.create_task(controller.switch_tenant(2))
    await asyncio.sleep(0)
    refresh = asyncio.create_task(controller.refresh_tenants())
    await asyncio.sleep(0)
    gate.set()
    await asyncio.gather(switch, refresh)

    assert controller.state.status is Status.READY
    assert controller.current_tenant.id == 2
    assert controller.current_brand.id == 4
