"""
Layout Engine
=============
Deterministic placement of exhibits on a platform.

Every placement is a pure function of (platform, index, count): the same
arguments always give bit-identical results, and the only way an exhibit
moves is a change of its index or of the number of exhibits it shares the
platform with. The viewpoint resolver relies on this to aim the camera.

Facing convention:
    `facing_angle` is the yaw of the exhibit's facing normal. Booths placed
    on their own face the platform center, booths in a triangle group face
    the triangle's centroid and wall posters face outward along their
    edge's outward normal. Which side the camera stands on is decided by
    the viewpoint resolver, not by the placement.

Booths:
    Booths use a contiguous arc of 4 of the 6 hexagon sectors; the remaining
    2 sectors are kept free for fixed furniture. Six or more booths are
    clustered into inward-facing triangles of three, anything left over is
    spread as single "remainder" booths behind the last triangle.

Wall posters:
    Two posters per hexagon edge, edges filled starting from a start edge.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from math import pi
from typing import TYPE_CHECKING, List, Sequence
import logging

import numpy as np

from exhibitspace.model.exhibits import DisplayKind, ExhibitCatalog
from exhibitspace.model.geometry_primitives import Vector
from exhibitspace.model.geometry_utils import (
    EDGE_ANGLE_STEP, HEX_EDGES, edge_normal_angle, hex_edge_length, normalize_angle
)
from exhibitspace.model.platforms import Platform, PlatformKind, PlatformRegistry

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

# ------------------------------------------------------------------------------
# Booth constants
# ------------------------------------------------------------------------------
SECTOR_SIZE: float = EDGE_ANGLE_STEP
USED_SECTORS: int = 4
START_SECTOR: int = 2
ARC_FILL: float = 0.85  # Keep booths off the sector borders

SINGLE_RADIUS_FACTOR: float = 0.45
TRIANGLE_ANCHOR_RADIUS_FACTOR: float = 0.48
TRIANGLE_RADIUS: float = 2.5
TRIANGLE_ANGLES: tuple[float, float, float] = (0.0, -2.0 * pi / 3.0, -4.0 * pi / 3.0)
TRIANGLE_MIN_COUNT: int = 6
GROUP_SIZE: int = 3

# ------------------------------------------------------------------------------
# Wall constants
# ------------------------------------------------------------------------------
POSTERS_PER_EDGE: int = 2
DEFAULT_WALL_START_EDGE: int = 3
WALL_CAPACITY: int = POSTERS_PER_EDGE * HEX_EDGES
WALL_INSET: float = 0.98

WALL_HEIGHT: float = 10.0
POSTER_HEIGHT: float = WALL_HEIGHT * 0.85
MAX_IMAGE_WIDTH: float = POSTER_HEIGHT * 1.2
TEXT_AREA_WIDTH: float = POSTER_HEIGHT * 0.5
MAX_POSTER_WIDTH: float = TEXT_AREA_WIDTH + MAX_IMAGE_WIDTH + 0.8

# Guideline posters (hub only, image-only format)
GUIDELINE_LEFT_START_EDGE: int = 5
GUIDELINE_LEFT_EDGES: int = 2
GUIDELINE_RIGHT_START_EDGE: int = 1
GUIDELINE_RIGHT_EDGES: int = 1
GUIDELINE_LEFT_CAPACITY: int = GUIDELINE_LEFT_EDGES * POSTERS_PER_EDGE
GUIDELINE_CAPACITY: int = (GUIDELINE_LEFT_EDGES + GUIDELINE_RIGHT_EDGES) * POSTERS_PER_EDGE
GUIDELINE_IMAGE_WIDTH: float = 12.0
GUIDELINE_SPACING: float = GUIDELINE_IMAGE_WIDTH + 2.0


class LayoutContractError(ValueError):
    """Raised for calls no valid caller can make (negative count, index out of range)."""


class BoothRole(StrEnum):
    SINGLE = "single"
    TRIANGLE = "triangle"
    REMAINDER = "remainder"


class PlacementKind(StrEnum):
    BOOTH = "booth"
    WALL = "wall"
    GUIDELINE = "guideline"


@dataclass(frozen=True)
class Placement:
    """World position and display facing of one exhibit slot."""
    position: Vector
    facing_angle: float

    @property
    def facing_vector(self) -> Vector:
        return Vector.horizontal(self.facing_angle)


@dataclass(frozen=True)
class PlacedExhibit:
    exhibit_id: str
    position: Vector
    facing_angle: float
    kind: PlacementKind = PlacementKind.BOOTH

    @property
    def facing_vector(self) -> Vector:
        return Vector.horizontal(self.facing_angle)


@dataclass(frozen=True)
class BoothArc:
    """The angular arc booths may occupy on a platform."""
    start: float
    spread: float

    @property
    def midpoint(self) -> float:
        return self.start + self.spread / 2.0

    def at(self, fraction: float) -> float:
        return self.start + fraction * self.spread


def booth_arc(platform: Platform) -> BoothArc:
    return BoothArc(
        start=START_SECTOR * SECTOR_SIZE + platform.rotation_offset,
        spread=USED_SECTORS * SECTOR_SIZE * ARC_FILL,
    )


def _check_contract(index: int, count: int) -> None:
    if count < 0:
        raise LayoutContractError(f"count must be >= 0, got {count}")
    if index < 0 or index >= count:
        raise LayoutContractError(f"index {index} out of range for count {count}")


def booth_grouping(count: int) -> tuple[int, int]:
    """
    Split `count` booths into triangle groups.

    Returns:
        (groups, remainder). Below the triangle threshold every booth is
        placed on its own and the result is (0, 0).
    """
    if count < 0:
        raise LayoutContractError(f"count must be >= 0, got {count}")
    if count < TRIANGLE_MIN_COUNT:
        return 0, 0
    return count // GROUP_SIZE, count % GROUP_SIZE


def booth_role(index: int, count: int) -> BoothRole:
    _check_contract(index, count)
    groups, _ = booth_grouping(count)
    if groups == 0:
        return BoothRole.SINGLE
    if index < groups * GROUP_SIZE:
        return BoothRole.TRIANGLE
    return BoothRole.REMAINDER


def _on_floor(platform: Platform, offset: Vector) -> Vector:
    return Vector(platform.center.x + offset.x, platform.center.y, platform.center.z + offset.z)


def _place_single(platform: Platform, angle: float) -> Placement:
    radius = platform.radius * SINGLE_RADIUS_FACTOR
    position = _on_floor(platform, Vector.horizontal(angle, radius))
    # Face the platform center
    return Placement(position=position, facing_angle=normalize_angle(angle + pi))


def place_booth(platform: Platform, index: int, count: int) -> Placement:
    """
    Place booth `index` of `count` booths on `platform`.

    Raises:
        LayoutContractError: If count < 0 or index is not in [0, count).
    """
    _check_contract(index, count)
    arc = booth_arc(platform)
    groups, remainder = booth_grouping(count)

    if groups == 0:
        angle = arc.midpoint if count == 1 else arc.at(index / (count - 1))
        return _place_single(platform, angle)

    slots = groups + (1 if remainder > 0 else 0)

    if index < groups * GROUP_SIZE:
        group_index, member = divmod(index, GROUP_SIZE)
        slot_angle = arc.at(group_index / (slots - 1))
        anchor = Vector.horizontal(slot_angle, platform.radius * TRIANGLE_ANCHOR_RADIUS_FACTOR)
        member_angle = slot_angle + TRIANGLE_ANGLES[member]
        position = _on_floor(platform, anchor + Vector.horizontal(member_angle, TRIANGLE_RADIUS))
        # Face the centroid of the triangle (its anchor)
        return Placement(position=position, facing_angle=normalize_angle(member_angle + pi))

    # Remainder booths sit in the free slot after the last triangle
    rest_index = index - groups * GROUP_SIZE
    angle = arc.at((groups + rest_index * 0.5) / (slots - 0.5))
    return _place_single(platform, angle)


def wall_slot(index: int, start_edge: int = DEFAULT_WALL_START_EDGE) -> tuple[int, int]:
    """(edge_index, slot_on_edge) for poster `index`."""
    if index < 0:
        raise LayoutContractError(f"index must be >= 0, got {index}")
    return (start_edge + index // POSTERS_PER_EDGE) % HEX_EDGES, index % POSTERS_PER_EDGE


def poster_spacing(edge_length: float) -> float:
    """Distance between the two poster centers on one edge."""
    ideal = MAX_POSTER_WIDTH + 4.0
    fit_two = edge_length / 2.2
    return max(MAX_POSTER_WIDTH + 1.0, min(ideal, fit_two))


def _posters_on_edge(index: int, count: int, capacity: int) -> int:
    if count > capacity:
        return POSTERS_PER_EDGE
    return min(POSTERS_PER_EDGE, count - (index // POSTERS_PER_EDGE) * POSTERS_PER_EDGE)


def _place_on_edge(
    platform: Platform,
    edge_index: int,
    slot: int,
    on_edge: int,
    spacing: float
) -> Placement:
    normal_angle = edge_normal_angle(edge_index, platform.rotation_offset)
    wall_center = Vector.horizontal(normal_angle, platform.inner_radius * WALL_INSET)

    if on_edge <= 1:
        offset = 0.0
    else:
        offset = -spacing * (on_edge - 1) / 2.0 + slot * spacing

    tangent = Vector.horizontal(normal_angle + pi / 2.0)
    position = _on_floor(platform, wall_center + tangent * offset)
    return Placement(position=position, facing_angle=normalize_angle(normal_angle))


def place_wall_poster(
    platform: Platform,
    index: int,
    count: int,
    *,
    start_edge: int = DEFAULT_WALL_START_EDGE
) -> Placement:
    """
    Place wall poster `index` of `count` posters on the platform perimeter.

    Posters beyond WALL_CAPACITY wrap around onto already used slots.

    Raises:
        LayoutContractError: If count < 0 or index is not in [0, count).
    """
    _check_contract(index, count)
    edge_index, slot = wall_slot(index, start_edge)
    on_edge = _posters_on_edge(index, count, WALL_CAPACITY)
    spacing = poster_spacing(hex_edge_length(platform.radius))
    return _place_on_edge(platform, edge_index, slot, on_edge, spacing)


def place_guideline_poster(platform: Platform, index: int, count: int) -> Placement:
    """
    Place guideline poster `index` on the hub.

    The first four fill the two left edges, the rest go on the right edge.

    Raises:
        LayoutContractError: On an invalid index/count, or count > GUIDELINE_CAPACITY.
    """
    _check_contract(index, count)
    if count > GUIDELINE_CAPACITY:
        raise LayoutContractError(f"At most {GUIDELINE_CAPACITY} guideline posters fit, got {count}")

    if index < GUIDELINE_LEFT_CAPACITY:
        local, start_edge, edges = index, GUIDELINE_LEFT_START_EDGE, GUIDELINE_LEFT_EDGES
        side_count = min(count, GUIDELINE_LEFT_CAPACITY)
    else:
        local, start_edge, edges = index - GUIDELINE_LEFT_CAPACITY, GUIDELINE_RIGHT_START_EDGE, GUIDELINE_RIGHT_EDGES
        side_count = count - GUIDELINE_LEFT_CAPACITY

    wall_index = (local // POSTERS_PER_EDGE) % edges
    edge_index = (start_edge + wall_index) % HEX_EDGES
    on_edge = min(POSTERS_PER_EDGE, side_count - wall_index * POSTERS_PER_EDGE)
    return _place_on_edge(platform, edge_index, local % POSTERS_PER_EDGE, on_edge, GUIDELINE_SPACING)


def layout_platform(
    registry: PlatformRegistry,
    catalog: ExhibitCatalog,
    platform_id: str
) -> List[PlacedExhibit]:
    """
    Place every exhibit of `platform_id`: booths, wall posters and, on the
    hub, the guideline posters. An unknown platform yields an empty list.
    """
    platform = registry.get_platform(platform_id)
    if platform is None:
        logger.debug(f"layout_platform: unknown platform '{platform_id}'")
        return []

    placed: List[PlacedExhibit] = []

    booths = catalog.for_platform(platform_id, DisplayKind.BOOTH)
    for i, exhibit in enumerate(booths):
        p = place_booth(platform, i, len(booths))
        placed.append(PlacedExhibit(exhibit.id, p.position, p.facing_angle, PlacementKind.BOOTH))

    walls = catalog.for_platform(platform_id, DisplayKind.WALL)
    if len(walls) > WALL_CAPACITY:
        logger.warning(
            f"Platform '{platform_id}' has {len(walls)} wall posters, only {WALL_CAPACITY} "
            f"distinct slots exist; extra posters share slots."
        )
    for i, exhibit in enumerate(walls):
        p = place_wall_poster(platform, i, len(walls))
        placed.append(PlacedExhibit(exhibit.id, p.position, p.facing_angle, PlacementKind.WALL))

    if platform.kind == PlatformKind.HUB and catalog.guidelines:
        guidelines = catalog.guidelines[:GUIDELINE_CAPACITY]
        if len(catalog.guidelines) > GUIDELINE_CAPACITY:
            logger.warning(f"Only the first {GUIDELINE_CAPACITY} guideline posters are shown.")
        for i, guideline_id in enumerate(guidelines):
            p = place_guideline_poster(platform, i, len(guidelines))
            placed.append(PlacedExhibit(guideline_id, p.position, p.facing_angle, PlacementKind.GUIDELINE))

    logger.debug(f"layout_platform: placed {len(placed)} exhibits on '{platform_id}'")
    return placed


def placements_to_array(placed: Sequence[PlacedExhibit]) -> npt.NDArray[np.float64]:
    """
    Pack placements for mesh instancing.

    Returns:
        Array of shape (N, 4): x, y, z, facing_angle.
    """
    if not placed:
        return np.empty((0, 4), dtype=np.float64)
    return np.array(
        [[p.position.x, p.position.y, p.position.z, p.facing_angle] for p in placed],
        dtype=np.float64,
    )
