"""Content service: immutable generation records, library filters, dashboard figures."""
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from contentcraft.errors import PermissionDenied, ValidationFailed
from contentcraft.logging_config import get_logger
from contentcraft.schemas import Content, ContentCreate, ContentStats, DailyContentStat
from contentcraft.schemas.content import DEFAULT_CONTENT_NAME, OUTPUT_TYPES
from contentcraft.services.brand_service import get_brand_for_tenant
from contentcraft.services.preset_service import get_visible_preset
from contentcraft.stores import EntityStore, Stores

logger = get_logger(__name__)

# Library tabs: tab id -> keyword matched against the preset name snapshot.
LIBRARY_CATEGORIES: Dict[str, str] = {
    "youtube": "YouTube",
    "blog": "Blog",
    "social": "Social",
    "marketing": "Marketing",
}

STATS_WINDOW_DAYS = 7


def count_words(outputs: Dict[str, str]) -> int:
    """Whitespace-separated words across every output text."""
    return sum(len(text.split()) for text in outputs.values() if text)


async def create_content(stores: Stores, payload: ContentCreate) -> Content:
    """
    Persist one generation run. The preset name is copied into the record, so
    later preset renames or deletions never touch history.
    """
    await stores.tenants.get_by_id(payload.tenant_id)
    await get_brand_for_tenant(stores.brands, payload.brand_id, payload.tenant_id)
    preset_name = (payload.preset or "").strip()
    if not preset_name and payload.preset_id is not None:
        preset = await get_visible_preset(stores.presets, payload.preset_id, payload.tenant_id)
        preset_name = preset.name
    if not preset_name:
        raise ValidationFailed("Content needs a preset or preset_id")

    outputs = {tag: text for tag, text in payload.outputs.items() if text is not None}
    free_form = sorted(set(outputs) - set(OUTPUT_TYPES))
    if free_form:
        logger.debug("content.free_form_outputs", tags=free_form)
    data = {
        "name": (payload.name or "").strip() or preset_name or DEFAULT_CONTENT_NAME,
        "input": payload.input,
        "preset": preset_name,
        "provider": payload.provider,
        "brand_id": payload.brand_id,
        "tenant_id": payload.tenant_id,
        "output_count": payload.output_count if payload.output_count is not None else len(outputs),
        "word_count": payload.word_count if payload.word_count is not None else count_words(outputs),
        "outputs": outputs,
    }
    content = await stores.contents.create(data)
    logger.info(
        "content.created",
        content_id=content.id,
        tenant_id=content.tenant_id,
        brand_id=content.brand_id,
        outputs=content.output_count,
    )
    return content


async def update_content(store: EntityStore[Content], content_id: int) -> Content:
    """Content is immutable once created; always rejected after an existence check."""
    await store.get_by_id(content_id)
    raise PermissionDenied("Content records cannot be modified", extra={"content_id": content_id})


async def delete_content(store: EntityStore[Content], content_id: int) -> None:
    await store.get_by_id(content_id)
    await store.delete(content_id)
    logger.info("content.deleted", content_id=content_id)


def _created(content: Content) -> datetime:
    ts = content.created_at or datetime.min.replace(tzinfo=timezone.utc)
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


async def list_library(
    store: EntityStore[Content],
    tenant_id: Optional[int],
    brand_id: Optional[int] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Content]:
    """
    Content history for a tenant, most recent first.
    brand_id narrows to one brand; category is a LIBRARY_CATEGORIES key
    ("all" or None = everything); search matches input and preset name.
    """
    items = await store.get_all(tenant_id)
    if brand_id is not None:
        items = [c for c in items if c.brand_id == brand_id]
    if category and category != "all":
        keyword = LIBRARY_CATEGORIES.get(category)
        if keyword is None:
            raise ValidationFailed(f"Unknown library category: {category}")
        items = [c for c in items if keyword in c.preset]
    if search and search.strip():
        needle = search.strip().lower()
        items = [c for c in items if needle in c.input.lower() or needle in c.preset.lower()]
    return sorted(items, key=lambda c: (_created(c), c.id), reverse=True)


async def content_stats(
    store: EntityStore[Content],
    tenant_id: Optional[int],
    brand_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> ContentStats:
    """Totals, last-7-days series and per-preset counts for the dashboard."""
    now = now or datetime.now(timezone.utc)
    items = await list_library(store, tenant_id, brand_id=brand_id)
    week_start = now - timedelta(days=STATS_WINDOW_DAYS)
    total_words = sum(c.word_count for c in items)

    days = [(now - timedelta(days=offset)).date() for offset in range(STATS_WINDOW_DAYS - 1, -1, -1)]
    per_day: Dict = {day: [0, 0] for day in days}
    for c in items:
        day = _created(c).date()
        if day in per_day:
            per_day[day][0] += 1
            per_day[day][1] += c.word_count

    return ContentStats(
        total_content=len(items),
        this_week=sum(1 for c in items if _created(c) >= week_start),
        total_words=total_words,
        avg_words_per_content=round(total_words / len(items)) if items else 0,
        last_7_days=[DailyContentStat(day=d, content=v[0], words=v[1]) for d, v in per_day.items()],
        by_preset=dict(Counter(c.preset for c in items)),
    )
