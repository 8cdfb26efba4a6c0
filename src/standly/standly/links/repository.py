from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import QuickLinkCategory
from .model import QuickLink


class QuickLinkRepository(Protocol):
    def list_all(self) -> Sequence[QuickLink]:
        raise NotImplementedError

    def get(self, link_id: int) -> Optional[QuickLink]:
        raise NotImplementedError

    def create(
        self,
        *,
        title: str,
        url: str,
        category: QuickLinkCategory,
        icon_url: Optional[str],
        created_by: Optional[int],
    ) -> int:
        raise NotImplementedError

    def update(self, link_id: int, updates: dict) -> bool:
        raise NotImplementedError

    def delete(self, link_id: int) -> bool:
        raise NotImplementedError
