"""Tests for layout.py: booth arcs, triangle groups, wall posters."""
import logging
import math

import numpy as np
import pytest

from exhibitspace.model.geometry_primitives import Vector
from exhibitspace.model.geometry_utils import edge_normal_angle
from exhibitspace.model.layout import (
    GUIDELINE_SPACING, SINGLE_RADIUS_FACTOR, TRIANGLE_ANCHOR_RADIUS_FACTOR, TRIANGLE_RADIUS, WALL_INSET,
    BoothRole, LayoutContractError, PlacementKind,
    booth_arc, booth_grouping, booth_role, layout_platform, place_booth, place_guideline_poster,
    place_wall_poster, placements_to_array, poster_spacing, wall_slot,
)
from conftest import make_catalog


def _floor_offset(platform, position):
    """Offset from the platform center in the floor plane."""
    return Vector(position.x - platform.center.x, 0.0, position.z - platform.center.z)


def _faces(placement, target):
    """Cosine between the display normal and the direction to `target`."""
    to_target = Vector(target.x - placement.position.x, 0.0, target.z - placement.position.z).normalize()
    return placement.facing_vector.dot(to_target)


class TestBoothGrouping:
    @pytest.mark.parametrize("count", [1, 2, 3, 4, 5])
    def test_small_counts_are_individual(self, count):
        assert booth_grouping(count) == (0, 0)
        assert all(booth_role(i, count) == BoothRole.SINGLE for i in range(count))

    @pytest.mark.parametrize("count", [6, 7, 8, 9, 12])
    def test_triangle_groups(self, count):
        roles = [booth_role(i, count) for i in range(count)]
        assert roles.count(BoothRole.TRIANGLE) == (count // 3) * 3
        assert roles.count(BoothRole.REMAINDER) == count % 3
        assert booth_grouping(count) == (count // 3, count % 3)

    def test_zero_count(self):
        assert booth_grouping(0) == (0, 0)


class TestPlaceBooth:
    @pytest.mark.parametrize("platform_id", ["S", "B1", "Q1"])
    @pytest.mark.parametrize("count", [2, 3, 4, 5])
    def test_individual_booths_face_center(self, registry, platform_id, count):
        platform = registry.get_platform(platform_id)
        for i in range(count):
            p = place_booth(platform, i, count)
            assert _faces(p, platform.center) == pytest.approx(1.0)
            assert _floor_offset(platform, p.position).magnitude == pytest.approx(platform.radius * SINGLE_RADIUS_FACTOR)
            assert p.position.y == platform.center.y

    def test_individual_booths_stay_on_arc(self, registry):
        platform = registry.get_platform("B2")
        arc = booth_arc(platform)
        for i in range(5):
            yaw = _floor_offset(platform, place_booth(platform, i, 5).position).yaw
            assert (yaw - arc.start + 1e-9) % (2 * math.pi) <= arc.spread + 2e-9

    def test_single_booth_sits_on_arc_midpoint(self, registry):
        platform = registry.get_platform("Q1")
        p = place_booth(platform, 0, 1)
        direction = _floor_offset(platform, p.position).normalize()
        expected = Vector.horizontal(booth_arc(platform).midpoint)
        assert direction.dot(expected) == pytest.approx(1.0)

    def test_first_and_last_span_the_arc(self, registry):
        platform = registry.get_platform("B3")
        arc = booth_arc(platform)
        first = _floor_offset(platform, place_booth(platform, 0, 4).position).normalize()
        last = _floor_offset(platform, place_booth(platform, 3, 4).position).normalize()
        assert first.dot(Vector.horizontal(arc.start)) == pytest.approx(1.0)
        assert last.dot(Vector.horizontal(arc.start + arc.spread)) == pytest.approx(1.0)

    @pytest.mark.parametrize("count", [6, 7, 8, 9, 12])
    def test_triangle_members_face_their_centroid(self, registry, count):
        platform = registry.get_platform("Q2")
        groups = count // 3
        for g in range(groups):
            members = [place_booth(platform, 3 * g + k, count) for k in range(3)]
            centroid = Vector(
                sum(m.position.x for m in members) / 3,
                platform.center.y,
                sum(m.position.z for m in members) / 3,
            )
            assert _floor_offset(platform, centroid).magnitude == pytest.approx(
                platform.radius * TRIANGLE_ANCHOR_RADIUS_FACTOR
            )
            for m in members:
                assert m.position.distance_to(centroid) == pytest.approx(TRIANGLE_RADIUS)
                assert _faces(m, centroid) == pytest.approx(1.0)

    def test_q1_seven_booths_index_three_faces_center(self, registry):
        platform = registry.get_platform("Q1")
        p = place_booth(platform, 3, 7)
        assert _faces(p, platform.center) == pytest.approx(1.0, abs=1e-9)

    @pytest.mark.parametrize("count", [7, 8])
    def test_remainder_booths_face_center(self, registry, count):
        platform = registry.get_platform("Q1")
        for i in range((count // 3) * 3, count):
            p = place_booth(platform, i, count)
            assert _faces(p, platform.center) == pytest.approx(1.0)
            assert _floor_offset(platform, p.position).magnitude == pytest.approx(platform.radius * SINGLE_RADIUS_FACTOR)

    def test_idempotent(self, registry):
        platform = registry.get_platform("Q3")
        for count in (1, 5, 7, 12):
            for i in range(count):
                a = place_booth(platform, i, count)
                b = place_booth(platform, i, count)
                assert a == b
                assert a.position.to_tuple() == b.position.to_tuple()
                assert a.facing_angle == b.facing_angle

    @pytest.mark.parametrize("index, count", [(0, 0), (-1, 3), (3, 3), (0, -1)])
    def test_contract_violations(self, registry, index, count):
        with pytest.raises(LayoutContractError):
            place_booth(registry.get_platform("B1"), index, count)

    def test_contract_error_is_value_error(self):
        assert issubclass(LayoutContractError, ValueError)


class TestWallPosters:
    def test_edge_assignment(self):
        for i in range(12):
            assert wall_slot(i) == ((3 + i // 2) % 6, i % 2)
            assert wall_slot(i, start_edge=1) == ((1 + i // 2) % 6, i % 2)

    @pytest.mark.parametrize("count", [1, 2, 5, 12])
    def test_posters_hang_on_their_edge(self, registry, count):
        platform = registry.get_platform("B1")
        apothem = platform.inner_radius * WALL_INSET
        for i in range(count):
            edge, _ = wall_slot(i)
            normal = Vector.horizontal(edge_normal_angle(edge, platform.rotation_offset))
            p = place_wall_poster(platform, i, count)
            assert _floor_offset(platform, p.position).dot(normal) == pytest.approx(apothem)
            # Facing follows the outward edge normal, away from the center
            assert p.facing_vector.dot(normal) == pytest.approx(1.0)
            assert _faces(p, platform.center) < 0.0

    def test_single_poster_is_centered(self, registry):
        platform = registry.get_platform("Q1")
        p = place_wall_poster(platform, 0, 1)
        normal = Vector.horizontal(edge_normal_angle(3, platform.rotation_offset))
        expected = platform.center + normal * (platform.inner_radius * WALL_INSET)
        assert p.position.distance_to(expected) == pytest.approx(0.0, abs=1e-9)

    def test_pair_is_symmetric(self, registry):
        platform = registry.get_platform("Q1")
        a = place_wall_poster(platform, 0, 2)
        b = place_wall_poster(platform, 1, 2)
        mid = (a.position + b.position) / 2.0
        lone = place_wall_poster(platform, 0, 1)
        assert mid.distance_to(lone.position) == pytest.approx(0.0, abs=1e-9)
        assert a.position.distance_to(b.position) == pytest.approx(poster_spacing(platform.radius))

    def test_odd_count_centres_last_poster(self, registry):
        platform = registry.get_platform("B2")
        last = place_wall_poster(platform, 2, 3)
        edge, _ = wall_slot(2)
        normal = Vector.horizontal(edge_normal_angle(edge, platform.rotation_offset))
        expected = platform.center + normal * (platform.inner_radius * WALL_INSET)
        assert last.position.distance_to(expected) == pytest.approx(0.0, abs=1e-9)

    def test_contract_violations(self, registry):
        with pytest.raises(LayoutContractError):
            place_wall_poster(registry.get_platform("B1"), 2, 2)


class TestGuidelinePosters:
    def test_left_and_right_edges(self, registry):
        hub = registry.get_platform("S")
        apothem = hub.inner_radius * WALL_INSET
        expected_edges = [5, 5, 0, 0, 1, 1]
        for i, edge in enumerate(expected_edges):
            p = place_guideline_poster(hub, i, 6)
            normal = Vector.horizontal(edge_normal_angle(edge, hub.rotation_offset))
            assert _floor_offset(hub, p.position).dot(normal) == pytest.approx(apothem)
            assert p.facing_vector.dot(normal) == pytest.approx(1.0)

    def test_pair_spacing(self, registry):
        hub = registry.get_platform("S")
        a = place_guideline_poster(hub, 4, 6)
        b = place_guideline_poster(hub, 5, 6)
        assert a.position.distance_to(b.position) == pytest.approx(GUIDELINE_SPACING)

    def test_capacity(self, registry):
        with pytest.raises(LayoutContractError):
            place_guideline_poster(registry.get_platform("S"), 0, 7)


class TestLayoutPlatform:
    def test_sample_q1(self, registry, sample_catalog):
        placed = layout_platform(registry, sample_catalog, "Q1")
        assert [p.exhibit_id for p in placed] == ["p3", "p6", "p7", "p8", "p9", "p10", "p11"]
        assert all(p.kind == PlacementKind.BOOTH for p in placed)

    def test_both_kind_lands_in_both_partitions(self, registry, sample_catalog):
        placed = layout_platform(registry, sample_catalog, "B2")
        booths = [p.exhibit_id for p in placed if p.kind == PlacementKind.BOOTH]
        walls = [p.exhibit_id for p in placed if p.kind == PlacementKind.WALL]
        assert booths == ["p5", "p15"]
        assert walls == ["p4", "p15"]

    def test_hub_gets_guidelines(self, registry, sample_catalog):
        placed = layout_platform(registry, sample_catalog, "S")
        assert [p.kind for p in placed] == [PlacementKind.GUIDELINE] * 6

    def test_matches_direct_placement(self, registry):
        catalog = make_catalog("B3", booths=8)
        platform = registry.get_platform("B3")
        placed = layout_platform(registry, catalog, "B3")
        for i, p in enumerate(placed):
            direct = place_booth(platform, i, 8)
            assert p.position == direct.position
            assert p.facing_angle == direct.facing_angle

    def test_unknown_platform(self, registry, sample_catalog):
        assert layout_platform(registry, sample_catalog, "nope") == []

    def test_too_many_posters_warns(self, registry, caplog):
        catalog = make_catalog("B1", walls=13)
        with caplog.at_level(logging.WARNING, logger="exhibitspace"):
            placed = layout_platform(registry, catalog, "B1")
        assert len(placed) == 13
        assert "wall posters" in caplog.text

    def test_array_packing(self, registry, sample_catalog):
        placed = layout_platform(registry, sample_catalog, "Q1")
        arr = placements_to_array(placed)
        assert arr.shape == (7, 4)
        np.testing.assert_allclose(arr[0, :3], placed[0].position.to_array())
        assert placements_to_array([]).shape == (0, 4)
