"""
Selection-consistency controller.

`reduce(state, action)` is a pure transition function over WorkspaceState.
SelectionController owns one state value, performs the store fetches and
dispatches their outcomes. Every state it publishes satisfies:

- selected_tenant_id is None or names a tenant in `tenants`;
- selected_brand_id is None or names a brand in `brands`;
- `brands` all belong to the selected tenant.

Brand fetches are tagged with (tenant_id, seq); a result whose tag does not
match the outstanding request is dropped, so a slow response for a tenant the
user already switched away from can never overwrite the newer selection.
"""
import itertools
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple, Union

from contentcraft.errors import ContentCraftError, NotFound, ValidationFailed
from contentcraft.logging_config import get_logger
from contentcraft.schemas import Brand, Tenant
from contentcraft.scoping import find_by_id, resolve_default, scope
from contentcraft.stores import Stores

logger = get_logger(__name__)


class Status(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class ErrorKind(str, Enum):
    NO_TENANT = "no_tenant"
    BACKEND_FAILURE = "backend_failure"


VIEW_SESSION = "session"
VIEW_BRANDS = "brands"


@dataclass(frozen=True)
class WorkspaceError:
    """Error surfaced to pages. view = which part of the workspace failed."""

    kind: ErrorKind
    message: str
    retryable: bool
    view: str = VIEW_SESSION


@dataclass(frozen=True)
class WorkspaceState:
    status: Status = Status.UNINITIALIZED
    tenants: Tuple[Tenant, ...] = ()
    brands: Tuple[Brand, ...] = ()
    selected_tenant_id: Optional[int] = None
    selected_brand_id: Optional[int] = None
    # Target of the outstanding (or last failed) brand fetch.
    pending_tenant_id: Optional[int] = None
    brand_request_seq: int = 0
    error: Optional[WorkspaceError] = None

    @property
    def current_tenant(self) -> Optional[Tenant]:
        return find_by_id(self.tenants, self.selected_tenant_id)

    @property
    def current_brand(self) -> Optional[Brand]:
        return find_by_id(self.brands, self.selected_brand_id)


# --- actions ---


@dataclass(frozen=True)
class TenantsRequested:
    pass


@dataclass(frozen=True)
class TenantsLoaded:
    tenants: Tuple[Tenant, ...]


@dataclass(frozen=True)
class TenantsFailed:
    message: str


@dataclass(frozen=True)
class BrandsRequested:
    tenant_id: int
    seq: int


@dataclass(frozen=True)
class BrandsLoaded:
    tenant_id: int
    seq: int
    brands: Tuple[Brand, ...]


@dataclass(frozen=True)
class BrandsFailed:
    tenant_id: int
    seq: int
    message: str


@dataclass(frozen=True)
class BrandsSaved:
    brands: Tuple[Brand, ...]


@dataclass(frozen=True)
class BrandSelected:
    brand_id: int


Action = Union[
    TenantsRequested,
    TenantsLoaded,
    TenantsFailed,
    BrandsRequested,
    BrandsLoaded,
    BrandsFailed,
    BrandsSaved,
    BrandSelected,
]


def _keep_or_default(brands: Sequence[Brand], previous_id: Optional[int]) -> Optional[int]:
    """Previous selection if it survived, else the collection's default."""
    if find_by_id(brands, previous_id) is not None:
        return previous_id
    fallback = resolve_default(brands)
    return fallback.id if fallback is not None else None


def _is_stale(state: WorkspaceState, tenant_id: int, seq: int) -> bool:
    return seq != state.brand_request_seq or tenant_id != state.pending_tenant_id


def reduce(state: WorkspaceState, action: Action) -> WorkspaceState:
    """Pure transition function. Unknown or stale actions return `state` unchanged."""
    if isinstance(action, TenantsRequested):
        return replace(state, status=Status.LOADING, error=None)

    if isinstance(action, TenantsLoaded):
        tenants = tuple(action.tenants)
        if not tenants:
            return WorkspaceState(
                status=Status.ERROR,
                error=WorkspaceError(
                    kind=ErrorKind.NO_TENANT,
                    message="No tenant available. Ask an administrator to create one.",
                    retryable=False,
                ),
            )
        # A switch still in flight keeps its target while that tenant exists.
        pending = find_by_id(tenants, state.pending_tenant_id)
        if find_by_id(tenants, state.selected_tenant_id) is not None:
            target = pending.id if pending is not None else state.selected_tenant_id
            return replace(state, tenants=tenants, pending_tenant_id=target)
        default = pending or resolve_default(tenants)
        return replace(
            state,
            tenants=tenants,
            brands=(),
            selected_tenant_id=None,
            selected_brand_id=None,
            pending_tenant_id=default.id if default is not None else None,
        )

    if isinstance(action, TenantsFailed):
        return replace(
            state,
            status=Status.ERROR,
            error=WorkspaceError(kind=ErrorKind.BACKEND_FAILURE, message=action.message, retryable=True),
        )

    if isinstance(action, BrandsRequested):
        return replace(
            state,
            status=Status.LOADING,
            pending_tenant_id=action.tenant_id,
            brand_request_seq=action.seq,
            error=None,
        )

    if isinstance(action, BrandsLoaded):
        if _is_stale(state, action.tenant_id, action.seq):
            return state
        brands = tuple(scope(action.brands, action.tenant_id))
        same_tenant = action.tenant_id == state.selected_tenant_id
        selected = _keep_or_default(brands, state.selected_brand_id if same_tenant else None)
        return replace(
            state,
            status=Status.READY,
            brands=brands,
            selected_tenant_id=action.tenant_id,
            selected_brand_id=selected,
            pending_tenant_id=None,
            error=None,
        )

    if isinstance(action, BrandsFailed):
        if _is_stale(state, action.tenant_id, action.seq):
            return state
        return replace(
            state,
            status=Status.ERROR,
            error=WorkspaceError(
                kind=ErrorKind.BACKEND_FAILURE,
                message=action.message,
                retryable=True,
                view=VIEW_BRANDS,
            ),
        )

    if isinstance(action, BrandsSaved):
        tenant_id = state.selected_tenant_id
        brands = tuple(scope(action.brands, tenant_id))
        return replace(
            state,
            brands=brands,
            selected_brand_id=_keep_or_default(brands, state.selected_brand_id),
        )

    if isinstance(action, BrandSelected):
        if find_by_id(state.brands, action.brand_id) is None:
            return state
        return replace(state, selected_brand_id=action.brand_id)

    return state


Listener = Callable[[WorkspaceState], None]


class SelectionController:
    """
    Owns the workspace selection for one session.

    Pages read `current_tenant` / `current_brand` and call `switch_tenant`,
    `on_brands_save`, `select_brand` and `retry`; they never pick entities out
    of raw collections themselves.
    """

    def __init__(self, stores: Stores) -> None:
        self._stores = stores
        self._state = WorkspaceState()
        self._seq = itertools.count(1)
        self._listeners: List[Listener] = []

    @property
    def state(self) -> WorkspaceState:
        return self._state

    @property
    def current_tenant(self) -> Optional[Tenant]:
        return self._state.current_tenant

    @property
    def current_brand(self) -> Optional[Brand]:
        return self._state.current_brand

    selected_brand = current_brand

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener` with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)
        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> WorkspaceState:
        previous = self._state
        self._state = reduce(previous, action)
        if self._state is previous:
            logger.debug("workspace.action_ignored", action=type(action).__name__)
            return self._state
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    async def start(self) -> WorkspaceState:
        """UNINITIALIZED -> LOADING -> READY | ERROR. No-op once started."""
        if self._state.status is not Status.UNINITIALIZED:
            return self._state
        return await self._load_tenants()

    async def refresh_tenants(self) -> WorkspaceState:
        """
        Reload tenants. A pending switch target wins, then the selected tenant,
        then the default; each only if it still exists.
        """
        return await self._load_tenants()

    async def switch_tenant(self, tenant: Union[Tenant, int]) -> WorkspaceState:
        """Select another tenant; its brands replace the current ones when they arrive."""
        tenant_id = tenant if isinstance(tenant, int) else tenant.id
        if find_by_id(self._state.tenants, tenant_id) is None:
            raise NotFound(f"Tenant with ID {tenant_id} not found", extra={"id": tenant_id})
        state = await self._load_brands(tenant_id)
        if state.selected_tenant_id == tenant_id and state.status is Status.READY:
            logger.info("workspace.tenant_switched", tenant_id=tenant_id, brand_id=state.selected_brand_id)
        return state

    def on_brands_save(self, brands: Sequence[Brand]) -> WorkspaceState:
        """
        Take the complete updated brand collection. The selected brand is kept
        if its id survived (with its new fields), else re-resolved.
        """
        if self._state.selected_tenant_id is None:
            raise ValidationFailed("No tenant selected")
        previous = self._state.selected_brand_id
        state = self.dispatch(BrandsSaved(tuple(brands)))
        if state.selected_brand_id != previous:
            logger.info("workspace.brand_reselected", previous=previous, brand_id=state.selected_brand_id)
        return state

    def select_brand(self, brand_id: int) -> WorkspaceState:
        if find_by_id(self._state.brands, brand_id) is None:
            raise NotFound(f"Brand with ID {brand_id} not found", extra={"id": brand_id})
        return self.dispatch(BrandSelected(brand_id))

    async def retry(self) -> WorkspaceState:
        """Re-attempt the failed load. Non-retryable errors are left as they are."""
        error = self._state.error
        if self._state.status is not Status.ERROR or error is None or not error.retryable:
            return self._state
        if error.view == VIEW_BRANDS and self._state.pending_tenant_id is not None:
            return await self._load_brands(self._state.pending_tenant_id)
        return await self._load_tenants()

    async def _load_tenants(self) -> WorkspaceState:
        self.dispatch(TenantsRequested())
        try:
            tenants = await self._stores.tenants.get_all()
        except ContentCraftError as e:
            logger.warning("workspace.tenants_failed", error=e.message)
            return self.dispatch(TenantsFailed(e.message))
        except Exception as e:
            logger.exception("workspace.tenants_error")
            return self.dispatch(TenantsFailed(f"Failed to load tenants: {e.__class__.__name__}"))
        state = self.dispatch(TenantsLoaded(tuple(tenants)))
        if state.status is Status.ERROR:
            logger.warning("workspace.no_tenant")
            return state
        return await self._load_brands(state.pending_tenant_id)  # type: ignore[arg-type]

    async def _load_brands(self, tenant_id: int) -> WorkspaceState:
        seq = next(self._seq)
        self.dispatch(BrandsRequested(tenant_id=tenant_id, seq=seq))
        try:
            brands = await self._stores.brands.get_all(tenant_id)
        except ContentCraftError as e:
            logger.warning("workspace.brands_failed", tenant_id=tenant_id, seq=seq, error=e.message)
            return self.dispatch(BrandsFailed(tenant_id=tenant_id, seq=seq, message=e.message))
        except Exception as e:
            logger.exception("workspace.brands_error", tenant_id=tenant_id, seq=seq)
            message = f"Failed to load brands: {e.__class__.__name__}"
            return self.dispatch(BrandsFailed(tenant_id=tenant_id, seq=seq, message=message))
        return self.dispatch(BrandsLoaded(tenant_id=tenant_id, seq=seq, brands=tuple(brands)))
