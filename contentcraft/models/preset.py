"""Preset model."""
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from contentcraft.db import Base


class PresetRow(Base):
    """
    Prompt template. tenant_id NULL = system preset (is_custom false),
    visible to every tenant.
    """

    __tablename__ = "presets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    prompt: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(String(32), nullable=False, default="custom")
    is_custom: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    suggested: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
