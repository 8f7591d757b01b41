"""
Viewpoint Resolver
==================
Computes where the camera has to stand to frame an exhibit.

The resolver is the inverse of the layout engine: it rebuilds the same
filtered, ordered exhibit list, places the exhibit with the same layout
function and then steps away from it by a fixed standoff distance. Single
booths are viewed from the platform-center side they face. Triangle members
are viewed from outside their cluster, and wall posters from the inner side
of the perimeter wall, opposite to their outward facing. Camera and look-at
share the same height, so the distance between them is exactly the standoff.

A NotFound (unknown platform, exhibit not on that platform/partition, unknown
fixed view, unrecognised display kind) is returned as None and never raised.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional
import logging

from exhibitspace.config import HUB_PLATFORM_ID
from exhibitspace.model.exhibits import DisplayKind, ExhibitCatalog
from exhibitspace.model.geometry_primitives import Vector
from exhibitspace.model.layout import (
    GUIDELINE_CAPACITY, BoothRole, Placement, booth_role, place_booth, place_guideline_poster,
    place_wall_poster,
)
from exhibitspace.model.platforms import Platform, PlatformKind, PlatformRegistry

logger = logging.getLogger(__name__)

# Standoff distances must fit inside the platform radii in platforms.json
BOOTH_STANDOFF: float = 5.0
WALL_STANDOFF: float = 6.0
GUIDELINE_STANDOFF: float = 8.0

BOOTH_BASE_HEIGHT: float = 3.5
BOOTH_HEIGHT: float = 3.5
BOOTH_BANNER_HEIGHT: float = BOOTH_BASE_HEIGHT + BOOTH_HEIGHT / 2 + 0.3
EYE_HEIGHT: float = 4.0

RECEPTION_WALL_OFFSET: Vector = Vector(-1.0, 0.0, -30.0)
RECEPTION_STANDOFF: float = 9.0
OVERVIEW_DISTANCE: float = 18.0
OVERVIEW_TARGET_HEIGHT: float = 3.0

CENTER_VIEW_NAME: str = "center"
RECEPTION_VIEW_NAME: str = "reception"


@dataclass(frozen=True)
class ViewPoint:
    camera_position: Vector
    look_at: Vector
    standoff_distance: float

    @property
    def view_direction(self) -> Vector:
        return (self.look_at - self.camera_position).normalize()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "camera": list(self.camera_position.to_tuple()),
            "look_at": list(self.look_at.to_tuple()),
            "distance": self.standoff_distance,
        }


@dataclass(frozen=True)
class FixedView:
    """Hand-placed camera pose relative to the platform center (y relative to the floor)."""
    offset: Vector
    look_at_offset: Vector

    def resolve(self, platform: Platform) -> ViewPoint:
        camera = platform.center + self.offset
        target = platform.center + self.look_at_offset
        return ViewPoint(
            camera_position=camera,
            look_at=target,
            standoff_distance=camera.distance_to(target),
        )


CENTER_VIEW = FixedView(
    offset=Vector(0.0, EYE_HEIGHT, OVERVIEW_DISTANCE),
    look_at_offset=Vector(0.0, OVERVIEW_TARGET_HEIGHT, 0.0),
)

RECEPTION_VIEW = FixedView(
    offset=Vector(RECEPTION_WALL_OFFSET.x, EYE_HEIGHT, RECEPTION_WALL_OFFSET.z + RECEPTION_STANDOFF),
    look_at_offset=Vector(RECEPTION_WALL_OFFSET.x, EYE_HEIGHT, RECEPTION_WALL_OFFSET.z),
)

# Views available on every platform, then views bound to a single platform id
COMMON_FIXED_VIEWS: Dict[str, FixedView] = {CENTER_VIEW_NAME: CENTER_VIEW}
PLATFORM_FIXED_VIEWS: Dict[str, Dict[str, FixedView]] = {
    HUB_PLATFORM_ID: {RECEPTION_VIEW_NAME: RECEPTION_VIEW},
}


def viewpoint_from_placement(
    placement: Placement,
    look_height: float,
    standoff: float,
    *,
    opposite: bool = False
) -> ViewPoint:
    """
    Camera `standoff` units from the placement, at `look_height` above the floor.

    Args:
        opposite: Stand against the facing direction instead of along it
            (wall posters, triangle members).
    """
    look_at = placement.position + Vector(0.0, look_height, 0.0)
    direction = -placement.facing_vector if opposite else placement.facing_vector
    camera = look_at + direction * standoff
    return ViewPoint(camera_position=camera, look_at=look_at, standoff_distance=standoff)


class ViewpointResolver:
    """
    Resolves camera poses against the current exhibit catalog.

    `catalog_source` is called on every lookup so a catalog refresh by the
    content collaborator is picked up without rebuilding the resolver.
    """

    def __init__(self, registry: PlatformRegistry, catalog_source: Callable[[], ExhibitCatalog]) -> None:
        self.registry = registry
        self._catalog_source = catalog_source

    @classmethod
    def for_catalog(cls, registry: PlatformRegistry, catalog: ExhibitCatalog) -> ViewpointResolver:
        return cls(registry, lambda: catalog)

    @property
    def catalog(self) -> ExhibitCatalog:
        return self._catalog_source()

    def resolve_viewpoint(
        self,
        exhibit_id: str,
        display_kind: DisplayKind | str,
        platform_id: str
    ) -> Optional[ViewPoint]:
        platform = self.registry.get_platform(platform_id)
        if platform is None:
            logger.debug(f"resolve_viewpoint: unknown platform '{platform_id}'")
            return None

        try:
            kind = DisplayKind(display_kind)
        except ValueError:
            logger.debug(f"resolve_viewpoint: unknown display kind {display_kind!r}")
            return None
        if kind is DisplayKind.BOTH:
            logger.debug("resolve_viewpoint: display kind must be booth or wall")
            return None

        index, count = self.catalog.index_of(exhibit_id, platform_id, kind)
        if index < 0:
            logger.debug(f"resolve_viewpoint: '{exhibit_id}' is not a {kind} on '{platform_id}'")
            return None

        if kind is DisplayKind.BOOTH:
            placement = place_booth(platform, index, count)
            # Triangle members face their centroid; view them from outside the cluster
            in_triangle = booth_role(index, count) == BoothRole.TRIANGLE
            viewpoint = viewpoint_from_placement(
                placement, BOOTH_BANNER_HEIGHT, BOOTH_STANDOFF, opposite=in_triangle
            )
        else:
            placement = place_wall_poster(platform, index, count)
            viewpoint = viewpoint_from_placement(placement, EYE_HEIGHT, WALL_STANDOFF, opposite=True)

        self._check_bounds(platform, viewpoint, exhibit_id)
        return viewpoint

    def guideline_viewpoint(self, platform_id: str, index: int) -> Optional[ViewPoint]:
        """Viewpoint for guideline poster `index` on the hub."""
        platform = self.registry.get_platform(platform_id)
        if platform is None or platform.kind != PlatformKind.HUB:
            return None

        count = min(len(self.catalog.guidelines), GUIDELINE_CAPACITY)
        if not 0 <= index < count:
            return None

        placement = place_guideline_poster(platform, index, count)
        return viewpoint_from_placement(placement, EYE_HEIGHT, GUIDELINE_STANDOFF, opposite=True)

    def has_platform(self, platform_id: str) -> bool:
        return platform_id in self.registry

    def fixed_view_names(self, platform_id: str) -> List[str]:
        if platform_id not in self.registry:
            return []
        return list(COMMON_FIXED_VIEWS) + list(PLATFORM_FIXED_VIEWS.get(platform_id, {}))

    def fixed_viewpoint(self, platform_id: str, name: str = CENTER_VIEW_NAME) -> Optional[ViewPoint]:
        platform = self.registry.get_platform(platform_id)
        if platform is None:
            logger.debug(f"fixed_viewpoint: unknown platform '{platform_id}'")
            return None

        view = PLATFORM_FIXED_VIEWS.get(platform_id, {}).get(name) or COMMON_FIXED_VIEWS.get(name)
        if view is None:
            logger.debug(f"fixed_viewpoint: no view '{name}' on '{platform_id}'")
            return None
        return view.resolve(platform)

    def center_viewpoint(self, platform_id: str) -> Optional[ViewPoint]:
        return self.fixed_viewpoint(platform_id, CENTER_VIEW_NAME)

    @staticmethod
    def _check_bounds(platform: Platform, viewpoint: ViewPoint, exhibit_id: str) -> None:
        if not platform.contains(viewpoint.camera_position):
            logger.debug(
                f"Camera for '{exhibit_id}' stands outside platform '{platform.id}' "
                f"(radius {platform.radius}); consider a larger platform."
            )
