"""Brand manager: an editing session over a copy of the current brand collection."""
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from contentcraft.errors import NotFound, PermissionDenied, ValidationFailed
from contentcraft.schemas import Brand, BrandDraft
from contentcraft.schemas.brand import DEFAULT_BRAND_COLOR, DEFAULT_BRAND_EMOJI

PRESET_COLORS = (
    "#3B82F6", "#8B5CF6", "#10B981", "#F59E0B",
    "#EF4444", "#6366F1", "#EC4899", "#14B8A6",
    "#F97316", "#84CC16", "#06B6D4", "#8B5A2B",
)

EMOJI_CATEGORIES = {
    "business": ("🚀", "💼", "📈", "🎯", "⚡", "🔥", "💡", "🌟"),
    "tech": ("💻", "🤖", "⚙️", "🔧", "📱", "🖥️", "⌚", "📡"),
    "creative": ("🎨", "✨", "🎭", "🎪", "🖌️", "📸", "🎬"),
    "lifestyle": ("☕", "🏠", "🌱", "🎵", "📚", "🍕", "🏃", "✈️"),
}


class BrandManager:
    """
    Edits are applied to a private copy; nothing is persisted until the caller
    hands `brands` (the complete updated collection) to the controller or to
    the brand-set sync. Rejected edits leave the copy untouched.
    """

    def __init__(self, brands: Iterable[Brand], tenant_id: Optional[int] = None) -> None:
        self._brands: List[Brand] = [b.model_copy(deep=True) for b in brands]
        self.tenant_id = tenant_id
        if self.tenant_id is None and self._brands:
            self.tenant_id = self._brands[0].tenant_id

    @property
    def brands(self) -> List[Brand]:
        return [b.model_copy(deep=True) for b in self._brands]

    def drafts(self) -> List[BrandDraft]:
        """The collection as brand-set entries for PUT /workspace/brands."""
        return [
            BrandDraft(id=b.id, name=b.name, color=b.color, emoji=b.emoji, is_default=b.is_default)
            for b in self._brands
        ]

    def _find(self, brand_id: int) -> Brand:
        for brand in self._brands:
            if brand.id == brand_id:
                return brand
        raise NotFound(f"Brand with ID {brand_id} not found", extra={"id": brand_id})

    def _check_name(self, name: str, exclude_id: Optional[int] = None) -> str:
        cleaned = name.strip()
        if not cleaned:
            raise ValidationFailed("Brand name is required")
        lowered = cleaned.lower()
        if any(b.name.lower() == lowered and b.id != exclude_id for b in self._brands):
            raise ValidationFailed("Brand name already exists")
        return cleaned

    def create_brand(
        self,
        name: str,
        color: str = DEFAULT_BRAND_COLOR,
        emoji: str = DEFAULT_BRAND_EMOJI,
    ) -> Brand:
        """Add a non-default brand with a provisional id (max id + 1)."""
        brand = Brand(
            id=max((b.id for b in self._brands), default=0) + 1,
            name=self._check_name(name),
            color=color,
            emoji=emoji,
            tenant_id=self.tenant_id,
            is_default=False,
            created_at=datetime.now(timezone.utc),
        )
        self._brands.append(brand)
        return brand.model_copy()

    def edit_brand(
        self,
        brand_id: int,
        name: Optional[str] = None,
        color: Optional[str] = None,
        emoji: Optional[str] = None,
    ) -> Brand:
        brand = self._find(brand_id)
        changes = {}
        if name is not None:
            changes["name"] = self._check_name(name, exclude_id=brand_id)
        if color is not None:
            changes["color"] = color
        if emoji is not None:
            changes["emoji"] = emoji
        updated = brand.model_copy(update=changes)
        self._brands[self._brands.index(brand)] = updated
        return updated.model_copy()

    def delete_brand(self, brand_id: int) -> Brand:
        """Remove a brand. The default brand cannot be deleted."""
        brand = self._find(brand_id)
        if brand.is_default:
            raise PermissionDenied("Cannot delete the default brand", extra={"brand_id": brand_id})
        self._brands.remove(brand)
        return brand

    def make_default(self, brand_id: int) -> Brand:
        """Move the default flag to brand_id."""
        target = self._find(brand_id)
        self._brands = [b.model_copy(update={"is_default": b.id == target.id}) for b in self._brands]
        return self._find(brand_id).model_copy()
