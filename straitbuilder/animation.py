"""Closed-form motion for everything that moves in the scene.

Every function here is a pure function of time ``t`` in seconds: calling
it twice with the same arguments gives the same pose, and nothing is
integrated frame to frame.  Poses are in world units; rotations are
Euler angles (x, y, z) applied in that order to the model's local axes.
"""

import math
from dataclasses import dataclass, field
from typing import List, NamedTuple, Tuple

import numpy as np
import trimesh

from .constants import (
    BRIDGE_DECK_HALF_SPAN, BRIDGE_DECK_Y, BRIDGE_Z, DEFAULT_SCENE_SEED,
    SEAGULL_COUNT, TRAFFIC_CARS_PER_LANE, VOXEL_SCALE,
)
from .models import Mode
from .palettes import WATER, hex_to_rgb
from .prng import seeded_random


@dataclass(frozen=True)
class Pose:
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    scale: float = 1.0

    def matrix(self) -> np.ndarray:
        """4x4 model matrix: translate * rotate * scale."""
        tf = trimesh.transformations
        return tf.concatenate_matrices(
            tf.translation_matrix(self.position),
            tf.euler_matrix(*self.rotation, axes='rxyz'),
            tf.scale_matrix(self.scale),
        )


def _heading(dx: float, dz: float) -> float:
    """Yaw that points a +z-forward model along (dx, dz)."""
    return math.atan2(dx, dz)


# ── Watercraft ─────────────────────────────────────────────────────────

FERRY_SPEED = 0.08
FERRY_SCALE = 0.64
FERRY_CENTER_X = 1.25
FERRY_X_RADIUS = 0.75


def ferry_pose(t: float) -> Pose:
    """Long figure-eight loop on the Asian side, between the channel
    axis and the island tower."""
    s = FERRY_SPEED
    x = FERRY_CENTER_X + math.cos(t * s * 2) * FERRY_X_RADIUS
    z = math.sin(t * s) * 20
    dz = 20 * s * math.cos(t * s)
    dx = -FERRY_X_RADIUS * s * 2 * math.sin(t * s * 2)
    return Pose((x, 0.0, z), (0.0, _heading(dx, dz), 0.0), FERRY_SCALE)


TANKER_SPEED = 2.0
TANKER_PATH = 160.0


def tanker_pose(t: float) -> Pose:
    """Straight run down the European channel, wrapping at the ends."""
    z = (t * TANKER_SPEED) % TANKER_PATH - TANKER_PATH / 2
    pitch = math.sin(t * 0.3) * 0.01
    roll = math.sin(t * 0.5) * 0.02
    return Pose((-5.0, 0.0, -z), (pitch, math.pi, roll))


BOAT_SPEED = 0.08
BOAT_CENTER_X = -9.25
BOAT_X_RADIUS = 1.25


def fishing_boat_pose(t: float) -> Pose:
    """Narrow ellipse in the western lane with bobbing on the swell."""
    s = BOAT_SPEED
    ct = t + 100
    x = BOAT_CENTER_X + math.cos(ct * s) * BOAT_X_RADIUS
    z = math.sin(ct * s) * 22
    dx = -s * math.sin(ct * s) * BOAT_X_RADIUS
    dz = s * math.cos(ct * s) * 22
    y = math.sin(x * 0.5 + t * 1.5) * 0.1 + math.sin(z * 0.3 + t) * 0.1
    return Pose((x, y, z), (math.sin(t * 1.2) * 0.05, _heading(dx, dz), math.cos(t * 0.8) * 0.05))


# ── Dolphins ───────────────────────────────────────────────────────────

DOLPHIN_SCALE = 0.64
CRUISE_DEPTH = -2.0
JUMP_THRESHOLD = 0.55
JUMP_HEIGHT = 2.8


class DolphinPod(NamedTuple):
    start_angle: float
    x_radius: float
    z_radius: float
    speed: float
    center_x: float = 0.0
    center_z: float = 0.0


DOLPHIN_PODS = (
    DolphinPod(0.0, 2.0, 28.0, 0.12, center_x=-2.0),
    DolphinPod(3.5, 1.25, 10.0, 0.1, center_x=8.0, center_z=-10.0),
)

# (phase offset, x, z) of each dolphin relative to its pod
POD_FORMATION = ((0.0, 0.0, 1.0), (1.5, 1.2, -0.7), (2.5, -1.2, -0.7), (4.0, 0.0, -2.2))


def dolphin_pod_pose(t: float, pod: DolphinPod) -> Pose:
    """Pod centre on its ellipse, facing along the path."""
    a = t * pod.speed + pod.start_angle
    x = math.sin(a) * pod.x_radius + pod.center_x
    z = math.cos(a) * pod.z_radius + pod.center_z
    return Pose((x, 0.0, z), (0.0, _heading(math.cos(a) * pod.x_radius, -math.sin(a) * pod.z_radius), 0.0))


def dolphin_pose(t: float, offset: float = 0.0) -> Pose:
    """Swim and jump cycle for one dolphin, relative to its slot in the pod.

    The dolphin jumps whenever ``sin`` of its phase passes the threshold,
    following a half-sine arc with the pitch tracking the arc's slope.
    """
    phase = t * 1.5 + offset
    jump = math.sin(phase)
    if jump > JUMP_THRESHOLD:
        n = (jump - JUMP_THRESHOLD) / (1 - JUMP_THRESHOLD)
        y = CRUISE_DEPTH + math.sin(n * math.pi) * JUMP_HEIGHT
        rotation = (-math.cos(n * math.pi) * 1.2, 0.0, 0.0)
    else:
        y = CRUISE_DEPTH
        rotation = (math.sin(phase * 2) * 0.1, 0.0, math.cos(phase * 1.5) * 0.15)
    return Pose((0.0, y, 0.0), rotation, DOLPHIN_SCALE)


def pod_member_poses(t: float, pod: DolphinPod) -> List[Pose]:
    """World poses of every dolphin in ``pod``."""
    centre = dolphin_pod_pose(t, pod)
    yaw = centre.rotation[1]
    c, s = math.cos(yaw), math.sin(yaw)
    poses = []
    for offset, ox, oz in POD_FORMATION:
        local = dolphin_pose(t, offset)
        x = centre.position[0] + ox * c + oz * s
        z = centre.position[2] - ox * s + oz * c
        poses.append(Pose((x, local.position[1], z),
                          (local.rotation[0], yaw, local.rotation[2]), local.scale))
    return poses


# ── Seagulls ───────────────────────────────────────────────────────────

SEAGULL_SCALE = 0.5


def seagull_poses(t: float, count: int = SEAGULL_COUNT, seed: int = DEFAULT_SCENE_SEED) -> List[Pose]:
    """Circling flock; each gull's circle comes from the seeded PRNG."""
    poses = []
    for i in range(count):
        base = seed * 7 + i * 10
        speed = 0.8 + seeded_random(base) * 0.6
        offset = seeded_random(base + 1) * 100
        radius = 5 + seeded_random(base + 2) * 10
        height = 5 + seeded_random(base + 3) * 5
        cx = (seeded_random(base + 4) - 0.5) * 10
        cz = (seeded_random(base + 5) - 0.5) * 10
        a = t * speed + offset
        poses.append(Pose(
            (cx + math.sin(a) * radius, height + math.sin(a * 3) * 0.5, cz + math.cos(a) * radius),
            (0.0, -a, 0.0),
            SEAGULL_SCALE,
        ))
    return poses


# ── Bridge traffic ─────────────────────────────────────────────────────

# lane centres as voxel offsets from the deck axis; sign gives direction
TRAFFIC_LANES = (-13.5, -4.5, 4.5, 13.5)
TRAFFIC_SPEEDS = (3.0, 4.0, 4.0, 3.0)


def traffic_pose(t: float, lane: int, car: int, cars_per_lane: int = TRAFFIC_CARS_PER_LANE) -> Pose:
    """Car ``car`` of ``lane``, evenly spaced and wrapping over the deck."""
    span = 2 * BRIDGE_DECK_HALF_SPAN
    offset = TRAFFIC_LANES[lane]
    direction = 1.0 if offset > 0 else -1.0
    travelled = (t * TRAFFIC_SPEEDS[lane] + car * span / cars_per_lane) % span
    x = direction * (travelled - BRIDGE_DECK_HALF_SPAN)
    y = BRIDGE_DECK_Y + VOXEL_SCALE
    z = BRIDGE_Z + offset * VOXEL_SCALE
    # car models are built on the ASIA side, nose toward +x
    yaw = 0.0 if direction > 0 else math.pi
    return Pose((x, y, z), (0.0, yaw, 0.0))


# ── Flag and water ─────────────────────────────────────────────────────

WIND_SPEED = 4.0


def flag_wave_offsets(t: float, width: int) -> np.ndarray:
    """Sideways displacement of each cloth column, growing away from the pole."""
    dist = np.arange(width, dtype=np.float64) * VOXEL_SCALE
    phase = t * WIND_SPEED
    amplitude = 0.05 + dist * 0.2
    return np.sin(dist * 8.0 - phase) * amplitude + np.sin(dist * 20.0 - phase * 2) * amplitude * 0.2


WATER_ROWS = 192
WATER_COLS = 480
WATER_LEVEL = -0.3
CREST_LEVEL = -0.25
TROUGH_LEVEL = -0.35


@dataclass(frozen=True)
class WaterSurface:
    xs: np.ndarray
    zs: np.ndarray
    heights: np.ndarray = field(repr=False)     # (rows, cols)
    colors: np.ndarray = field(repr=False)      # (rows, cols, 3) uint8


def water_surface(t: float, mode=Mode.DAY, rows: int = WATER_ROWS, cols: int = WATER_COLS) -> WaterSurface:
    """Wave heights and crest/mid/trough shading for the water grid."""
    xs = (np.arange(rows) - rows / 2) * VOXEL_SCALE
    zs = (np.arange(cols) - cols / 2) * VOXEL_SCALE
    px, pz = np.meshgrid(xs, zs, indexing='ij')
    heights = (np.sin(px / 2 + t * 0.8) * 0.1
               + np.cos(pz / 1.5 + t * 0.5) * 0.1
               + np.sin((px + pz) * 2 + t) * 0.02
               + WATER_LEVEL)

    suffix = '_night' if Mode(mode) is Mode.NIGHT else ''
    colors = np.empty(heights.shape + (3,), dtype=np.uint8)
    colors[...] = hex_to_rgb(WATER['mid' + suffix])
    colors[heights > CREST_LEVEL] = hex_to_rgb(WATER['crest' + suffix])
    colors[heights < TROUGH_LEVEL] = hex_to_rgb(WATER['trough' + suffix])
    return WaterSurface(xs, zs, heights, colors)
