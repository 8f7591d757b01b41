"""
Exhibit Data Model
==================
Read-only records supplied by the content collaborator, and the ordered,
filtered per-platform views the layout and viewpoint code derive from them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, Iterable, List, Optional
import logging

logger = logging.getLogger(__name__)


class DisplayKind(StrEnum):
    BOOTH = "booth"
    WALL = "wall"
    BOTH = "both"

    def matches(self, requested: DisplayKind) -> bool:
        """True if an exhibit of this kind belongs to the `requested` partition."""
        return self == requested or self is DisplayKind.BOTH


@dataclass(frozen=True)
class Exhibit:
    id: str
    platform_ids: frozenset[str]
    display_kind: DisplayKind = DisplayKind.BOOTH
    title: str = ""

    def is_on(self, platform_id: str) -> bool:
        return platform_id in self.platform_ids

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "platforms": sorted(self.platform_ids),
            "display_kind": self.display_kind.value,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Exhibit:
        platforms = data.get("platforms", [])
        if isinstance(platforms, str):
            raise ValueError(f"Exhibit '{data.get('id')}': 'platforms' must be a list, got a string.")
        return Exhibit(
            id=str(data["id"]),
            platform_ids=frozenset(str(p) for p in platforms),
            display_kind=DisplayKind(data.get("display_kind", DisplayKind.BOOTH)),
            title=data.get("title", ""),
        )


@dataclass(frozen=True)
class ExhibitCatalog:
    """
    Ordered snapshot of the exhibit catalog.

    The order is the content collaborator's order and is the only thing that
    decides where an exhibit ends up on its platform.
    """
    exhibits: tuple[Exhibit, ...] = ()
    guidelines: tuple[str, ...] = ()

    @classmethod
    def from_exhibits(cls, exhibits: Iterable[Exhibit], guidelines: Iterable[str] = ()) -> ExhibitCatalog:
        exhibits = tuple(exhibits)
        seen: set[str] = set()
        for exhibit in exhibits:
            if exhibit.id in seen:
                raise ValueError(f"Duplicate exhibit id '{exhibit.id}'.")
            seen.add(exhibit.id)
        return cls(exhibits=exhibits, guidelines=tuple(guidelines))

    def __len__(self) -> int:
        return len(self.exhibits)

    def get(self, exhibit_id: str) -> Optional[Exhibit]:
        for exhibit in self.exhibits:
            if exhibit.id == exhibit_id:
                return exhibit
        return None

    def for_platform(self, platform_id: str, kind: DisplayKind) -> List[Exhibit]:
        """Exhibits shown on `platform_id` in the `kind` partition, in catalog order."""
        kind = DisplayKind(kind)
        if kind is DisplayKind.BOTH:
            raise ValueError("Filter by BOOTH or WALL; BOTH is not a partition.")
        return [
            e for e in self.exhibits
            if e.is_on(platform_id) and e.display_kind.matches(kind)
        ]

    def index_of(self, exhibit_id: str, platform_id: str, kind: DisplayKind) -> tuple[int, int]:
        """
        Position of an exhibit inside its filtered platform list.

        Returns:
            (index, count); index is -1 when the exhibit is not in the list.
        """
        filtered = self.for_platform(platform_id, kind)
        for i, exhibit in enumerate(filtered):
            if exhibit.id == exhibit_id:
                return i, len(filtered)
        return -1, len(filtered)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exhibits": [e.to_dict() for e in self.exhibits],
            "guidelines": list(self.guidelines),
        }
