"""Suspension bridge across the strait and the cars that drive on it."""

import logging

from .constants import (
    BRIDGE_BACKSPAN, BRIDGE_DECK_HALF_SPAN, BRIDGE_DECK_HALF_WIDTH, BRIDGE_DECK_Y,
    BRIDGE_TOWER_HEIGHT, BRIDGE_TOWER_X, BRIDGE_Z, LAND_DEPTH, SHORE_U, VOXEL_SCALE,
)
from .heightfield import elevation
from .models import VoxelSet
from .palettes import (
    BRIDGE, CAR_BODIES, DARK_GLASS, HEADLIGHT_DAY, HEADLIGHT_NIGHT,
    TAILLIGHT_DAY, TAILLIGHT_NIGHT,
)
from .prng import seeded_choice
from .voxels import VoxelBuilder

logger = logging.getLogger(__name__)


def _v(units: float) -> int:
    """World units to whole voxels."""
    return int(round(units / VOXEL_SCALE))


Z0 = _v(BRIDGE_Z)
DECK_Y = _v(BRIDGE_DECK_Y)
TOWER_U = _v(BRIDGE_TOWER_X)
TOWER_TOP = _v(BRIDGE_TOWER_HEIGHT)
HALF_SPAN = _v(BRIDGE_DECK_HALF_SPAN)
HALF_WIDTH = _v(BRIDGE_DECK_HALF_WIDTH)
BACKSPAN = _v(BRIDGE_BACKSPAN)

LEG_OFFSET = 20          # legs at Z0 +/- 2.5 units
LANE_OFFSET = 9          # lane dividers at +/- 1.125 units
TRUSS_OFFSET = 13
CABLE_OFFSET = 14
PILLAR_SPACING = 48
UNIT = 8                 # voxels per world unit
CROSSBAR_LEVELS = (DECK_Y - 2 * UNIT, DECK_Y + 4 * UNIT, TOWER_TOP - 2 * UNIT)
SUSPENDER = '#94a3b8'


def deck_color(j: int, u: int) -> str:
    """Road surface color at lateral offset ``j`` from the deck axis."""
    if j == 0:
        return BRIDGE['line']
    if abs(j) == LANE_OFFSET and u % 8 < 4:
        return BRIDGE['lane']
    return BRIDGE['road']


def _tower(b, tu):
    for leg in (-LEG_OFFSET, LEG_OFFSET):
        for y in range(TOWER_TOP):
            for du in (-1, 0, 1):
                for dz in (-1, 0, 1):
                    b.add(tu + du, y, Z0 + leg + dz, BRIDGE['steel'])
        b.lamp(tu, TOWER_TOP, Z0 + leg, BRIDGE['beacon_day'], BRIDGE['beacon_night'])
    for cy in CROSSBAR_LEVELS:
        for z in range(Z0 - LEG_OFFSET, Z0 + LEG_OFFSET + 1):
            for y in range(cy, cy + 4):
                b.add(tu, y, z, BRIDGE['dark_steel'])
                b.add(tu + 1, y, z, BRIDGE['dark_steel'])


def _pillar_base(u: int) -> int:
    lateral = abs(u) - SHORE_U
    if 0 <= lateral < LAND_DEPTH:
        return elevation(lateral, Z0) + 1
    return 0


def _deck(b):
    for u in range(-HALF_SPAN, HALF_SPAN + 1):
        for j in range(-HALF_WIDTH, HALF_WIDTH + 1):
            b.add(u, DECK_Y, Z0 + j, deck_color(j, u))
        b.add(u, DECK_Y + 1, Z0 - HALF_WIDTH, BRIDGE['steel'])
        b.add(u, DECK_Y + 1, Z0 + HALF_WIDTH, BRIDGE['steel'])

        if u % UNIT == 0:
            for z in (-TRUSS_OFFSET, 0, TRUSS_OFFSET):
                b.column(u, DECK_Y - UNIT, DECK_Y, Z0 + z, BRIDGE['dark_steel'])
        b.add(u, DECK_Y - UNIT, Z0 - TRUSS_OFFSET, BRIDGE['dark_steel'])
        b.add(u, DECK_Y - UNIT, Z0 + TRUSS_OFFSET, BRIDGE['dark_steel'])

        if abs(u) > TOWER_U + 4 * UNIT and abs(u) % PILLAR_SPACING == 0:
            for pu in (u - 1, u):
                for pz in (Z0 - 1, Z0):
                    b.column(pu, _pillar_base(u), DECK_Y - UNIT, pz, BRIDGE['dark_steel'])


def _cable_run(b, points):
    """Draw cables through ``(u, y)`` points, closing vertical gaps."""
    prev = None
    for u, y in points:
        for z in (Z0 - CABLE_OFFSET, Z0 + CABLE_OFFSET):
            lo, hi = (y, y) if prev is None else (min(prev, y), max(prev, y))
            for cy in range(lo, hi + 1):
                b.add(u, cy, z, BRIDGE['cable'])
        prev = y


def main_cable_height(u: int) -> int:
    """Parabolic sag between the towers; lowest point 2 units above the deck."""
    low = DECK_Y + 2 * UNIT
    top = TOWER_TOP - UNIT
    p = u / TOWER_U
    return int(round(low + p * p * (top - low)))


def backspan_height(i: int) -> int:
    """Linear run from the tower top down to deck level."""
    top = TOWER_TOP - UNIT
    return int(round(top - (i / BACKSPAN) * (top - DECK_Y)))


def _cables(b):
    main = [(u, main_cable_height(u)) for u in range(-TOWER_U, TOWER_U + 1)]
    _cable_run(b, main)
    for u, y in main:
        if u % UNIT == 0:
            for z in (Z0 - CABLE_OFFSET, Z0 + CABLE_OFFSET):
                for vy in range(DECK_Y + 1, y):
                    b.add(u, vy, z, SUSPENDER)
    _cable_run(b, [(TOWER_U + i, backspan_height(i)) for i in range(BACKSPAN)])
    _cable_run(b, [(-TOWER_U - i, backspan_height(i)) for i in range(BACKSPAN)])


def generate_bridge(seed: int, side, mode) -> VoxelSet:
    """The bridge is fixed; ``seed`` is accepted for the common signature."""
    b = VoxelBuilder(side, mode, above_ground=True)
    _tower(b, -TOWER_U)
    _tower(b, TOWER_U)
    _deck(b)
    _cables(b)
    voxels = b.build()
    logger.debug(f"Bridge: {len(voxels)} voxels")
    return voxels


# ── Traffic ────────────────────────────────────────────────────────────

CAR_LENGTH = 12
CAR_WIDTH = 6


def generate_car(seed: int, side, mode) -> VoxelSet:
    """A small car in local coordinates, nose toward +u.

    Body color comes from the seed; head and tail lights are lamps.
    """
    b = VoxelBuilder(side, mode)
    body = seeded_choice(seed, CAR_BODIES)
    u0, u1 = -CAR_LENGTH // 2, CAR_LENGTH // 2
    z0, z1 = -CAR_WIDTH // 2, CAR_WIDTH // 2
    b.box(u0, u1, 0, 2, z0, z1, body)
    b.box(u0 + 3, u1 - 3, 2, 4, z0, z1, DARK_GLASS, hollow=True)
    b.box(u0 + 3, u1 - 3, 4, 5, z0, z1, body)
    for z in (z0, z1 - 1):
        b.lamp(u1 - 1, 1, z, HEADLIGHT_DAY, HEADLIGHT_NIGHT)
        b.lamp(u0, 1, z, TAILLIGHT_DAY, TAILLIGHT_NIGHT)
    return b.build()
