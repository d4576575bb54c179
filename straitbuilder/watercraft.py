"""Ships on the strait: the commuter ferry, the tanker and a fishing boat.

Models are built in local coordinates with the bow toward +z and ``u``
running across the hull, centred on 0.  The animation driver places them
on the water.
"""

import logging

from .models import VoxelSet
from .palettes import (
    FERRY, FISHING_BOAT, FLAG_RED, FLAG_WHITE, MAST_LIGHT_DAY, MAST_LIGHT_NIGHT,
    TANKER,
)
from .prng import cell_seed, chance
from .voxels import VoxelBuilder

logger = logging.getLogger(__name__)

FERRY_LENGTH = 64
FERRY_WIDTH = 16
TANKER_LENGTH = 160
TANKER_WIDTH = 22
TANKER_HULL_HEIGHT = 12
BOAT_LENGTH = 26
BOAT_WIDTH = 8


def _half_width(width: float) -> int:
    return int(max(width, 2)) // 2


def ferry_half_width(z: int) -> int:
    """Half beam of the ferry at ``z`` (-32..31): pointed at both ends."""
    zn = z / (FERRY_LENGTH / 2)
    width = float(FERRY_WIDTH)
    if abs(zn) > 0.6:
        width = FERRY_WIDTH * (1 - ((abs(zn) - 0.6) * 2.5) ** 1.5)
    return _half_width(width)


def tanker_half_width(z: int) -> int:
    """Half beam of the tanker: long parallel midbody, fine bow, blunt stern."""
    half = TANKER_LENGTH // 2
    width = float(TANKER_WIDTH)
    if z > half - 32:
        width = TANKER_WIDTH * (1 - ((z - (half - 32)) / 32) ** 2)
    elif z < -half + 16:
        width = TANKER_WIDTH * (1 - (((-half + 16) - z) / 16) ** 3 * 0.5)
    return _half_width(width)


def boat_half_width(z: int) -> int:
    """Half beam of the fishing boat: square stern, pointed bow."""
    width = float(BOAT_WIDTH)
    if z > 5:
        width = BOAT_WIDTH * (1 - ((z - 5) / (BOAT_LENGTH / 2 - 5)) ** 1.5)
    if width < 2:
        return 0
    return int(width) // 2


def _glass(b, u, y, z, colors):
    b.lamp(u, y, z, colors['glass_day'], colors['glass_night'])


def _mast(b, z, y0, height, color):
    """Mast with a crossbar four below the top and a lamp on the truck."""
    top = y0 + height
    b.column(0, y0, top, z, color)
    b.add(-1, top - 4, z, color)
    b.add(1, top - 4, z, color)
    b.lamp(0, top, z, MAST_LIGHT_DAY, MAST_LIGHT_NIGHT)


def _stern_flag(b, pole_z, y0, y1, rows, length, pole_color):
    b.column(0, y0, y1, pole_z, pole_color)
    for y in rows:
        for dz in range(1, length + 1):
            b.add(0, y, pole_z - dz, FLAG_RED)
    # single white cell standing in for the crescent
    b.add(0, rows[len(rows) // 2], pole_z - 2, FLAG_WHITE)


# ── Ferry ──────────────────────────────────────────────────────────────

def _ferry_hull(b):
    half = FERRY_LENGTH // 2
    for z in range(-half, half):
        k = z + half
        hw = ferry_half_width(z)
        inset = hw - 2
        for u in range(-hw, hw + 1):
            side = abs(u) == hw
            b.add(u, 0, z, FERRY['hull'])
            b.add(u, 1, z, FERRY['hull'])

            if side:
                b.column(u, 2, 6, z, FERRY['hull_white'])
                for y in range(6, 11):
                    if y == 7 and k % 12 == 0 and abs(z) < 0.6 * half:
                        b.add(u, y, z, FERRY['lifebuoy'])
                    elif 8 <= y <= 9 and k % 4:
                        _glass(b, u, y, z, FERRY)
                    else:
                        b.add(u, y, z, FERRY['cabin'])
            else:
                if u % 2 == 0 and k % 2 == 0:
                    b.add(u, 2, z, FERRY['deck'])
                b.add(u, 6, z, FERRY['cabin'])
                b.add(u, 11, z, FERRY['cabin'])

            if abs(u) > inset:
                continue
            open_deck = z < -10
            if abs(u) == inset:
                if open_deck:
                    b.add(u, 12, z, FERRY['trim'])
                else:
                    for y in range(12, 17):
                        if 13 <= y <= 14 and k % 3:
                            _glass(b, u, y, z, FERRY)
                        else:
                            b.add(u, y, z, FERRY['cabin'])
            elif open_deck:
                b.add(u, 11, z, FERRY['deck'])
                if u == 0 and k % 4 == 0:
                    b.add(u, 12, z, FERRY['lifebuoy'])
            else:
                b.add(u, 17, z, FERRY['cabin'])
                if z == -10:
                    b.column(u, 12, 17, z, FERRY['cabin'])


def _ferry_funnel(b):
    for y in range(17, 25):
        for su in range(-2, 3):
            for sz in range(-2, 3):
                if abs(su) + abs(sz) >= 4:
                    continue
                if 19 <= y <= 21 and abs(su) == 2:
                    b.add(su, y, sz, FERRY['logo'])
                elif y > 22:
                    b.add(su, y, sz, FERRY['funnel_top'])
                else:
                    b.add(su, y, sz, FERRY['cabin'])


def generate_ferry(seed: int, side, mode) -> VoxelSet:
    """The city ferry.  There is a single model; ``seed`` is unused."""
    b = VoxelBuilder(side, mode)
    _ferry_hull(b)
    _ferry_funnel(b)
    _mast(b, 20, 17, 20, FERRY['trim'])
    _mast(b, -10, 17, 12, FERRY['trim'])
    for u in (-1, 0, 1):
        b.add(u, 18, 24, FERRY['funnel_top'])    # radar
    _stern_flag(b, -FERRY_LENGTH // 2 + 3, 5, 16, (12, 13, 14), 4, FERRY['pole'])
    bow = FERRY_LENGTH // 2
    for u, dz in ((3, 6), (4, 7)):
        b.add(u, 6, bow - dz, FERRY['funnel_top'])
        b.add(-u, 6, bow - dz, FERRY['funnel_top'])
    voxels = b.build()
    logger.debug(f"Ferry: {len(voxels)} voxels")
    return voxels


# ── Tanker ─────────────────────────────────────────────────────────────

BRIDGE_LENGTH = 20
BRIDGE_WIDTH = 18
BRIDGE_LEVELS = 13
FUNNEL_DEPTH = 6


def _tanker_hull(b):
    half = TANKER_LENGTH // 2
    top = TANKER_HULL_HEIGHT
    for z in range(-half, half):
        hw = tanker_half_width(z)
        for u in range(-hw, hw + 1):
            b.column(u, 0, 3, z, TANKER['waterline'])
            b.add(u, top, z, TANKER['deck'])
            if abs(u) == hw or z in (-half, half - 1):
                b.column(u, 3, top + 1, z, TANKER['hull'])
        if z == half - 10:
            # name board
            b.add(hw, top - 2, z, TANKER['bridge'])
            b.add(-hw, top - 2, z, TANKER['bridge'])

    for z in range(-half + 25, half - 20, 4):
        b.add(0, top + 1, z, TANKER['pipe'])
        b.add(0, top + 1, z + 1, TANKER['pipe'])
        if z % 16 == 0:
            for u in range(-6, 7):
                b.add(u, top + 1, z, TANKER['pipe'])


def _tanker_bridge(b):
    """Accommodation block at the stern with the funnel built into it."""
    top = TANKER_HULL_HEIGHT
    z0 = -TANKER_LENGTH // 2 + 2
    z1 = z0 + BRIDGE_LENGTH - 1
    for level in range(BRIDGE_LEVELS):
        y = top + 1 + level
        half = (BRIDGE_WIDTH - level * 0.5) / 2
        roof = level == BRIDGE_LEVELS - 1
        reach = int(half + 3) if level == 8 else int(half)
        for z in range(z0, z1 + 1):
            for u in range(-reach, reach + 1):
                wall = abs(u) >= half - 1 or z in (z0, z1) or roof
                wing = level == 8 and half - 4 < abs(u) < half + 3
                funnel = z < z0 + FUNNEL_DEPTH and abs(u) < 4
                if wall or wing:
                    if abs(u) > half and not wing:
                        continue
                    if funnel and level > 6:
                        b.add(u, y, z, TANKER['funnel'])
                    elif level == 8 and not roof and (z == z1 or abs(u) > half - 1):
                        _glass(b, u, y, z, TANKER)
                    else:
                        b.add(u, y, z, TANKER['bridge'])
                elif funnel and level > 9:
                    b.add(u, y, z, TANKER['funnel'])


def generate_tanker(seed: int, side, mode) -> VoxelSet:
    """The crude carrier.  There is a single model; ``seed`` is unused."""
    b = VoxelBuilder(side, mode)
    _tanker_hull(b)
    _tanker_bridge(b)
    top = TANKER_HULL_HEIGHT
    b.column(0, top, top + 12, 0, TANKER['crane'])
    for z in range(8):
        b.add(0, top + 10, z, TANKER['crane'])
    b.lamp(0, top + 12, 0, MAST_LIGHT_DAY, MAST_LIGHT_NIGHT)
    b.lamp(0, top + BRIDGE_LEVELS + 1, -TANKER_LENGTH // 2 + 12,
           MAST_LIGHT_DAY, MAST_LIGHT_NIGHT)
    voxels = b.build()
    logger.debug(f"Tanker: {len(voxels)} voxels")
    return voxels


# ── Fishing boat ───────────────────────────────────────────────────────

CABIN_Z = 2
CABIN_WIDTH = 4
CABIN_LENGTH = 5
NET_KEEP = 0.7
NET_PILE = 0.4


def _boat_hull(b):
    half = BOAT_LENGTH // 2
    for z in range(-half, half):
        hw = boat_half_width(z)
        for u in range(-hw, hw + 1):
            b.add(u, 0, z, FISHING_BOAT['waterline'])
            if abs(u) == hw or z == half - 1:
                b.column(u, 1, 4, z, FISHING_BOAT['hull'])
            elif z < half - 2:
                b.add(u, 1, z, FISHING_BOAT['deck'])
            else:
                b.add(u, 1, z, FISHING_BOAT['hull'])


def _wheelhouse(b):
    hw = CABIN_WIDTH // 2
    z0, z1 = CABIN_Z, CABIN_Z + CABIN_LENGTH - 1
    for y in range(2, 8):
        for u in range(-hw, hw + 1):
            for z in range(z0, z1 + 1):
                wall = abs(u) == hw or z in (z0, z1)
                if not wall:
                    if y == 7:
                        b.add(u, y, z, FISHING_BOAT['roof'])
                    continue
                glazed = 4 <= y <= 5 and (
                    (z == z1 and abs(u) < 2)
                    or (abs(u) == hw and (z - z0) % 2)
                    or (z == z0 and u == 0))
                if glazed:
                    _glass(b, u, y, z, FISHING_BOAT)
                else:
                    b.add(u, y, z, FISHING_BOAT['cabin'])


def generate_fishing_boat(seed: int, side, mode) -> VoxelSet:
    """A small trawler; ``seed`` decides how the nets are piled."""
    b = VoxelBuilder(side, mode)
    _boat_hull(b)
    _wheelhouse(b)
    for u in range(-2, 3):
        for z in range(-8, -4):
            net_seed = cell_seed(seed, u, 2, z)
            if chance(net_seed, NET_KEEP):
                b.add(u, 2, z, FISHING_BOAT['net'])
                if chance(net_seed + 1, NET_PILE):
                    b.add(u, 3, z, FISHING_BOAT['net'])
    for u, y in ((0, 2), (1, 2), (0, 3)):
        b.add(u, y, -2, FISHING_BOAT['crate'])
    _mast(b, 1, 2, 12, FISHING_BOAT['mast'])
    _stern_flag(b, -12, 2, 8, (6, 7), 3, FISHING_BOAT['pole'])
    return b.build()
