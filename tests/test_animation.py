"""Tests for the parametric animation driver."""
import math

import numpy as np
import pytest

from straitbuilder import mansions
from straitbuilder.animation import (
    DOLPHIN_PODS, JUMP_THRESHOLD, TANKER_PATH, TANKER_SPEED, TRAFFIC_LANES, TRAFFIC_SPEEDS,
    Pose, dolphin_pod_pose, dolphin_pose, ferry_pose, fishing_boat_pose, flag_wave_offsets,
    pod_member_poses, seagull_poses, tanker_pose, traffic_pose, water_surface,
)
from straitbuilder.constants import SHORE_U, TOWER_CENTER, TOWER_RADIUS, VOXEL_SCALE
from straitbuilder.generators import EntityKind, generate_entity
from straitbuilder.models import Mode
from straitbuilder.palettes import WATER, hex_to_rgb


TIMES = [0.0, 1.5, 17.25, 600.0]


class TestPurity:
    """Poses depend on time only."""

    @pytest.mark.parametrize("fn", [ferry_pose, tanker_pose, fishing_boat_pose, dolphin_pose])
    def test_repeatable(self, fn):
        for t in TIMES:
            assert fn(t) == fn(t)

    def test_flock_repeatable(self):
        assert seagull_poses(3.0, 8, seed=5) == seagull_poses(3.0, 8, seed=5)
        assert seagull_poses(3.0, 8, seed=5) != seagull_poses(3.0, 8, seed=6)

    def test_water_repeatable(self):
        a = water_surface(2.0, rows=16, cols=24)
        b = water_surface(2.0, rows=16, cols=24)
        assert np.array_equal(a.heights, b.heights)
        assert np.array_equal(a.colors, b.colors)


class TestPose:
    """Tests for Pose.matrix()."""

    def test_identity(self):
        assert np.allclose(Pose().matrix(), np.eye(4))

    def test_translation_and_scale(self):
        m = Pose((1.0, 2.0, 3.0), (0.0, 0.0, 0.0), 0.5).matrix()
        assert np.allclose(m[:3, 3], (1.0, 2.0, 3.0))
        assert np.allclose(np.diag(m)[:3], 0.5)

    def test_yaw(self):
        """A quarter turn about y sends +z to +x."""
        m = Pose(rotation=(0.0, math.pi / 2, 0.0)).matrix()
        assert np.allclose(m[:3, :3] @ np.array([0.0, 0.0, 1.0]), (1.0, 0.0, 0.0))


class TestPaths:
    """Tests for individual motion paths."""

    def test_ferry_stays_east(self):
        """The ferry loop stays between x = 0.5 and 2."""
        for t in np.linspace(0, 200, 101):
            x = ferry_pose(float(t)).position[0]
            assert 0.5 - 1e-9 <= x <= 2.0 + 1e-9

    def test_tanker_wraps(self):
        """After one full path length the tanker is back where it started."""
        period = TANKER_PATH / TANKER_SPEED
        assert tanker_pose(3.0).position == pytest.approx(tanker_pose(3.0 + period).position)

    def test_fishing_boat_lane(self):
        for t in np.linspace(0, 200, 51):
            assert -10.5 - 1e-9 <= fishing_boat_pose(float(t)).position[0] <= -8.0 + 1e-9

    def test_dolphin_cruise_depth(self):
        """Below the jump threshold the dolphin cruises at depth."""
        assert dolphin_pose(0.0).position[1] == -2.0

    def test_dolphin_jump_arc(self):
        """Half way through a jump the dolphin is above the water."""
        phase = math.asin(JUMP_THRESHOLD + (1 - JUMP_THRESHOLD) * 0.5)
        pose = dolphin_pose(phase / 1.5)
        assert pose.position[1] == pytest.approx(-2.0 + 2.8)

    def test_pod_on_ellipse(self):
        pod = DOLPHIN_PODS[0]
        x, _, z = dolphin_pod_pose(4.0, pod).position
        assert ((x - pod.center_x) / pod.x_radius) ** 2 + ((z - pod.center_z) / pod.z_radius) ** 2 == pytest.approx(1.0)
        assert len(pod_member_poses(4.0, pod)) == 4

    def test_traffic_on_deck(self):
        """Cars stay within the deck span and wrap around."""
        for lane in range(len(TRAFFIC_LANES)):
            span = 64.0
            period = span / TRAFFIC_SPEEDS[lane]
            for t in (0.0, 5.0, 11.0):
                pose = traffic_pose(t, lane, 1)
                assert -32.0 <= pose.position[0] <= 32.0
                assert pose.position == pytest.approx(traffic_pose(t + period, lane, 1).position)

    def test_traffic_directions(self):
        """Lanes on either side of the axis drive opposite ways."""
        a0 = traffic_pose(0.0, 0, 0).position[0]
        a1 = traffic_pose(1.0, 0, 0).position[0]
        b0 = traffic_pose(0.0, 3, 0).position[0]
        b1 = traffic_pose(1.0, 3, 0).position[0]
        assert (a1 - a0) * (b1 - b0) < 0


class TestFlagAndWater:
    """Tests for cloth offsets and the water grid."""

    def test_flag_offsets_grow(self):
        """Displacement amplitude grows away from the pole."""
        offsets = np.array([flag_wave_offsets(t, 16) for t in np.linspace(0, 3, 60)])
        assert offsets.shape == (60, 16)
        spread = np.abs(offsets).max(axis=0)
        assert spread[-1] > spread[0]

    def test_water_colors(self, mode):
        """Every cell takes one of the three shades for the mode."""
        surface = water_surface(1.0, mode=mode, rows=32, cols=48)
        assert surface.heights.shape == (32, 48)
        suffix = '_night' if mode is Mode.NIGHT else ''
        shades = {hex_to_rgb(WATER[k + suffix]) for k in ('crest', 'mid', 'trough')}
        assert {tuple(c) for c in surface.colors.reshape(-1, 3).tolist()} <= shades

    def test_water_level(self):
        surface = water_surface(0.0, rows=16, cols=16)
        assert surface.heights.min() >= -0.3 - 0.22
        assert surface.heights.max() <= -0.3 + 0.22


SAMPLE_TIMES = np.linspace(0, 200, 81)


def _world_points(kind, pose):
    """World-space voxel centres of ``kind`` placed at ``pose``."""
    points = generate_entity(kind, 0).positions
    homogeneous = np.hstack([points, np.ones((len(points), 1))])
    return (homogeneous @ pose.matrix().T)[:, :3]


def _max_abs_x(kind, pose):
    return np.abs(_world_points(kind, pose)[:, 0]).max() + VOXEL_SCALE * pose.scale


class TestChannelClearance:
    """Moving watercraft and wildlife keep to open water."""

    @pytest.fixture(scope='class')
    def quay_edge(self):
        """Lateral distance of the nearest quay face from the channel axis."""
        return min(fp[0] for fp in mansions.planned_footprints()) * VOXEL_SCALE

    def test_quays_inside_shore(self, quay_edge):
        assert quay_edge <= SHORE_U * VOXEL_SCALE

    def test_fishing_boat_clear_of_shore(self, quay_edge):
        for t in SAMPLE_TIMES:
            assert _max_abs_x(EntityKind.FISHING_BOAT, fishing_boat_pose(float(t))) < quay_edge

    @pytest.mark.parametrize("pod", DOLPHIN_PODS)
    def test_dolphins_clear_of_shore(self, pod, quay_edge):
        """Every member of every pod, beak and flukes included."""
        for t in SAMPLE_TIMES:
            for pose in pod_member_poses(float(t), pod):
                assert _max_abs_x(EntityKind.DOLPHIN, pose) < quay_edge

    def test_ferry_clear_of_tower(self):
        """No part of the ferry enters the island tower's disc."""
        centre = np.array(TOWER_CENTER)
        for t in SAMPLE_TIMES:
            points = _world_points(EntityKind.FERRY, ferry_pose(float(t)))[:, [0, 2]]
            assert np.linalg.norm(points - centre, axis=1).min() > TOWER_RADIUS

    @pytest.mark.parametrize("pod", DOLPHIN_PODS)
    def test_dolphins_clear_of_tower(self, pod):
        centre = np.array(TOWER_CENTER)
        for t in SAMPLE_TIMES:
            for pose in pod_member_poses(float(t), pod):
                points = _world_points(EntityKind.DOLPHIN, pose)[:, [0, 2]]
                assert np.linalg.norm(points - centre, axis=1).min() > TOWER_RADIUS
