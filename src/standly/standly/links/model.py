from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import QuickLinkCategory


@dataclass(frozen=True)
class QuickLink:
    link_id: int
    title: str
    url: str
    category: QuickLinkCategory = QuickLinkCategory.GENERAL
    icon_url: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_view(self) -> dict:
        return {
            "id": self.link_id,
            "title": self.title,
            "url": self.url,
            "category": self.category.value,
            "icon_url": self.icon_url,
            "created_by": self.created_by,
        }
