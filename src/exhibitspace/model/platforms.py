"""
Platform Registry
=================
Static table of the floating platforms (geometry + display metadata) and the
light-bridge connections between them.

Platform id convention:
    S   - hub (market place, the viewer starts here)
    B*  - ground platforms, same height as the hub
    Q*  - elevated platforms, floating above the ground ring
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from math import pi
from typing import Any, Dict, Iterator, List, Optional, Sequence
import logging

from exhibitspace.model.geometry_primitives import Vector
from exhibitspace.model.geometry_utils import hex_inner_radius, point_in_hexagon

logger = logging.getLogger(__name__)

DEFAULT_ROTATION_OFFSET: float = pi / 6


class PlatformKind(StrEnum):
    HUB = "hub"
    GROUND = "ground"
    ELEVATED = "elevated"


class ConnectionKind(StrEnum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    RING = "ring"


_PREFIX_KINDS: Dict[str, PlatformKind] = {
    "S": PlatformKind.HUB,
    "B": PlatformKind.GROUND,
    "Q": PlatformKind.ELEVATED,
}


def classify(platform_id: str) -> Optional[PlatformKind]:
    """Platform kind from the id prefix, or None for an unknown prefix."""
    if not platform_id:
        return None
    return _PREFIX_KINDS.get(platform_id[0])


@dataclass(frozen=True)
class Platform:
    id: str
    center: Vector
    radius: float
    rotation_offset: float = DEFAULT_ROTATION_OFFSET
    kind: PlatformKind = PlatformKind.GROUND
    name: str = ""
    short_name: str = ""
    color: str = "#94a3b8"

    @property
    def inner_radius(self) -> float:
        return hex_inner_radius(self.radius)

    def contains(self, point: Vector) -> bool:
        """True if the floor projection of `point` is on the platform hexagon."""
        return point_in_hexagon(point, self.center, self.radius, self.rotation_offset)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "short_name": self.short_name,
            "center": list(self.center.to_tuple()),
            "radius": self.radius,
            "rotation_offset": self.rotation_offset,
            "kind": self.kind.value,
            "color": self.color,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Platform:
        platform_id = str(data["id"])
        kind = data.get("kind")
        if kind is None:
            kind = classify(platform_id)
            if kind is None:
                raise ValueError(f"Cannot infer kind of platform '{platform_id}', set 'kind' explicitly.")
        radius = float(data["radius"])
        if radius <= 0.0:
            raise ValueError(f"Platform '{platform_id}' must have a positive radius, got {radius}.")
        return Platform(
            id=platform_id,
            center=Vector.from_sequence(data["center"]),
            radius=radius,
            rotation_offset=float(data.get("rotation_offset", DEFAULT_ROTATION_OFFSET)),
            kind=PlatformKind(kind),
            name=data.get("name", ""),
            short_name=data.get("short_name", ""),
            color=data.get("color", "#94a3b8"),
        )


@dataclass(frozen=True)
class Connection:
    """A light-bridge between two platforms (undirected)."""
    from_id: str
    to_id: str
    kind: ConnectionKind = ConnectionKind.PRIMARY

    def touches(self, platform_id: str) -> bool:
        return platform_id in (self.from_id, self.to_id)

    def to_dict(self) -> Dict[str, Any]:
        return {"from": self.from_id, "to": self.to_id, "kind": self.kind.value}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Connection:
        return Connection(
            from_id=str(data["from"]),
            to_id=str(data["to"]),
            kind=ConnectionKind(data.get("kind", ConnectionKind.PRIMARY)),
        )


@dataclass(frozen=True)
class PlatformRegistry:
    """
    Immutable lookup table of platforms, loaded once at start.
    Identity of a platform is its id; iteration follows table order.
    """
    platforms: tuple[Platform, ...]
    connections: tuple[Connection, ...] = ()
    _by_id: Dict[str, Platform] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_id: Dict[str, Platform] = {}
        for platform in self.platforms:
            if platform.id in by_id:
                raise ValueError(f"Duplicate platform id '{platform.id}'.")
            by_id[platform.id] = platform
        for connection in self.connections:
            for end in (connection.from_id, connection.to_id):
                if end not in by_id:
                    raise ValueError(f"Connection {connection.from_id}->{connection.to_id} references unknown platform '{end}'.")
        object.__setattr__(self, "_by_id", by_id)

    @classmethod
    def from_platforms(
        cls,
        platforms: Sequence[Platform],
        connections: Sequence[Connection] = ()
    ) -> PlatformRegistry:
        return cls(platforms=tuple(platforms), connections=tuple(connections))

    @classmethod
    def default(cls) -> PlatformRegistry:
        """Registry built from the bundled platforms.json."""
        from exhibitspace.config import DEFAULT_PLATFORMS_PATH
        from exhibitspace.model.io import load_platform_registry
        return load_platform_registry(DEFAULT_PLATFORMS_PATH)

    def __contains__(self, platform_id: object) -> bool:
        return platform_id in self._by_id

    def __iter__(self) -> Iterator[Platform]:
        return iter(self.platforms)

    def __len__(self) -> int:
        return len(self.platforms)

    def get_platform(self, platform_id: str) -> Optional[Platform]:
        return self._by_id.get(platform_id)

    def list_platform_ids(self) -> List[str]:
        return [p.id for p in self.platforms]

    def classify(self, platform_id: str) -> Optional[PlatformKind]:
        """Kind by id prefix; unknown ids with a known prefix still classify."""
        return classify(platform_id)

    def connections_for(self, platform_id: str) -> List[Connection]:
        return [c for c in self.connections if c.touches(platform_id)]

    def neighbours(self, platform_id: str) -> List[str]:
        result = []
        for c in self.connections_for(platform_id):
            result.append(c.to_id if c.from_id == platform_id else c.from_id)
        return result

    def connection_midpoint(self, from_id: str, to_id: str) -> Optional[Vector]:
        """Midpoint between two platform centers, lifted by one unit for a label."""
        a = self.get_platform(from_id)
        b = self.get_platform(to_id)
        if a is None or b is None:
            return None
        mid = (a.center + b.center) / 2.0
        return Vector(mid.x, mid.y + 1.0, mid.z)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "platforms": [p.to_dict() for p in self.platforms],
            "connections": [c.to_dict() for c in self.connections],
        }
