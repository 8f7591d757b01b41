from __future__ import annotations

from typing import TYPE_CHECKING

from math import pi, cos
import numpy as np

if TYPE_CHECKING:
    from numpy import typing as npt

from exhibitspace.model.geometry_primitives import Vector

HEX_EDGES: int = 6
EDGE_ANGLE_STEP: float = 2.0 * pi / HEX_EDGES


def normalize_angle(angle_rad: float) -> float:
    """Wrap an angle into [-pi, pi)."""
    return (angle_rad + pi) % (2.0 * pi) - pi


def hex_inner_radius(radius: float) -> float:
    """Distance from the hexagon center to the middle of an edge (apothem)."""
    return radius * cos(pi / HEX_EDGES)


def hex_edge_length(radius: float) -> float:
    # A regular hexagon's edge equals its circumradius
    return radius


def edge_normal_angle(edge_index: int, rotation_offset: float) -> float:
    """Yaw of the outward normal of hexagon edge `edge_index`."""
    return (edge_index % HEX_EDGES) * EDGE_ANGLE_STEP + rotation_offset


def hexagon_vertices(
    center: Vector,
    radius: float,
    rotation_offset: float,
    *,
    closed: bool = False
) -> npt.NDArray[np.float64]:
    """
    Corner points of a platform hexagon in the floor plane.

    Corners sit half a step between the edge normals, on the circumradius.

    Args:
        center: Platform center; its y is used for every vertex.
        radius: Circumradius of the hexagon.
        rotation_offset: Yaw of the outward normal of edge 0.
        closed: If True, repeat the first vertex at the end (ring).

    Returns:
        An array of shape (6, 3), or (7, 3) when closed.
    """
    theta = np.arange(HEX_EDGES) * EDGE_ANGLE_STEP + rotation_offset + EDGE_ANGLE_STEP / 2.0
    pts = np.column_stack((
        center.x + radius * np.cos(theta),
        np.full(HEX_EDGES, center.y),
        center.z + radius * np.sin(theta),
    ))

    if closed:
        pts = np.vstack((pts, pts[0]))

    return pts


def point_in_hexagon(
    point: Vector,
    center: Vector,
    radius: float,
    rotation_offset: float,
    *,
    eps: float = 1e-9
) -> bool:
    """
    Check whether the floor-plane projection of `point` lies inside the hexagon.

    A point is inside when its projection onto every edge normal does not
    exceed the apothem. Height is ignored.
    """
    theta = np.arange(HEX_EDGES) * EDGE_ANGLE_STEP + rotation_offset
    normals = np.column_stack((np.cos(theta), np.sin(theta)))
    d = np.array([point.x - center.x, point.z - center.z])
    return bool(np.all(normals @ d <= hex_inner_radius(radius) + eps))
