"""Waterfront mansions (yali) in three styles.

A mansion's seed is the along-shore index of its slot.  The slot jitter,
palette and dimensions are all drawn from that seed, and the scene picks
which of the three styles occupies a slot with :func:`mansion_variant`.

Style A  plank-sided house with projecting upper floors (cumba), diagonal
         braces and a wide hipped roof.
Style B  white palace with a central risalit and a flat balustraded roof.
Style C  ornate three-storey house with corner turrets and a centre gable.
"""

import logging
from dataclasses import dataclass, field
from typing import Tuple

from .constants import (
    MANSION_CLEARANCE, MANSION_SLOT_COUNT, MANSION_SLOT_START,
    MANSION_SLOT_STEP, SHORE_U,
)
from .heightfield import elevation
from .models import Palette, VoxelSet
from .palettes import (
    DOOR_WOOD, FINIAL_GOLD, MARBLE_QUAY, QUAY_STONE, YALI_A_PALETTES,
    YALI_B_PALETTES, YALI_C_PALETTES, pick_palette,
)
from .prng import seeded_int, seeded_random
from .voxels import VoxelBuilder, clamp_extent
from . import zones

logger = logging.getLogger(__name__)

ROOF_OVERHANG = 3
CUMBA_PROJECTION = 4


def mansion_slots():
    """Seeds of the waterfront slots, one per ``MANSION_SLOT_STEP``."""
    return [MANSION_SLOT_START + i * MANSION_SLOT_STEP for i in range(MANSION_SLOT_COUNT)]


def mansion_variant(seed: int) -> int:
    """Which style (0 = A, 1 = B, 2 = C) the scene builds in a slot."""
    return int(seeded_random(seed + 999) * 3)


def slot_center(seed: int) -> int:
    return seed + seeded_int(seed, 0, 10)


@dataclass(frozen=True)
class MansionPlan:
    """Resolved layout of one mansion in lateral/along voxel indices.

    Footprints are inclusive ``(u0, u1, k0, k1)`` boxes.
    """
    style: str
    seed: int
    center: int
    front: int
    base_y: int
    width: int
    depth: int
    floors: int
    floor_height: int
    palette: Palette
    floor_footprints: Tuple[tuple, ...] = field(default=())
    roof_footprints: Tuple[tuple, ...] = field(default=())
    footprint: tuple = field(default=())

    @property
    def roof_y(self) -> int:
        return self.base_y + self.floors * self.floor_height


def _excluded(side, plan: MansionPlan) -> bool:
    u0, u1, k0, k1 = plan.footprint
    if zones.lateral_footprint_excluded(side, u0, u1, k0, k1, clearance=MANSION_CLEARANCE):
        logger.debug(f"Mansion {plan.style} at slot {plan.seed} skipped: reserved zone")
        return True
    return False


def _quay(b, u0, u1, k0, k1, y, color):
    for u in range(u0, u1 + 1):
        for z in range(k0, k1 + 1):
            b.add(u, y, z, color)


# ── Style A ────────────────────────────────────────────────────────────

def plan_type_a(seed: int) -> MansionPlan:
    """Dimensions and footprints of a style A mansion."""
    width = clamp_extent(18 + seeded_int(seed + 1, 0, 10))
    depth = clamp_extent(16 + seeded_int(seed + 2, 0, 6))
    floors = 2 + (1 if seeded_random(seed + 3) > 0.5 else 0)
    center = slot_center(seed)
    front = SHORE_U + 4
    floor_height = 11

    floor_fps = []
    for f in range(floors):
        half = (width + (2 if f else 0)) // 2
        shift = CUMBA_PROJECTION if f else 0
        floor_fps.append((front - shift, front + depth - 1, center - half, center + half))

    base_y = elevation(front - SHORE_U, center) + 1
    roof_y = base_y + floors * floor_height
    tu0, tu1, tk0, tk1 = floor_fps[-1]
    roof_fps = []
    # two layers per step of eave inset, then a closed cap over the top floor
    for h in range(2 * ROOF_OVERHANG):
        ov = ROOF_OVERHANG - h // 2
        roof_fps.append((tu0 - ov, tu1 + ov, tk0 - ov, tk1 + ov, roof_y + h))
    roof_fps.append((tu0, tu1, tk0, tk1, roof_y + 2 * ROOF_OVERHANG))

    half_q = width // 2 + 2
    footprint = (min(front - 8, tu0 - ROOF_OVERHANG), tu1 + ROOF_OVERHANG,
                 min(center - half_q, tk0 - ROOF_OVERHANG), max(center + half_q, tk1 + ROOF_OVERHANG))
    return MansionPlan('A', seed, center, front, base_y, width, depth, floors, floor_height,
                       pick_palette(seed, YALI_A_PALETTES), tuple(floor_fps), tuple(roof_fps),
                       footprint)


def generate_type_a(seed: int, side, mode) -> VoxelSet:
    plan = plan_type_a(seed)
    if _excluded(side, plan):
        return VoxelSet.empty()
    b = VoxelBuilder(side, mode, above_ground=True)
    pal = plan.palette
    fh = plan.floor_height
    half_q = plan.width // 2 + 2
    _quay(b, plan.front - 8, plan.front + 1, plan.center - half_q, plan.center + half_q,
          plan.base_y, QUAY_STONE)

    for f, (u0, u1, k0, k1) in enumerate(plan.floor_footprints):
        y_base = plan.base_y + f * fh
        for y in range(fh):
            cornice = y == 0
            for u in range(u0, u1 + 1):
                for z in range(k0, k1 + 1):
                    front, back = u == u0, u == u1
                    is_side = z in (k0, k1)
                    if not (front or back or is_side) and 0 < y < fh - 1:
                        continue
                    py = y_base + y
                    if cornice:
                        b.add(u, py, z, pal.trim)
                        continue
                    color = pal.board if y % 2 == 0 else pal.wall
                    if (front or back or is_side) and 3 <= y <= fh - 3:
                        rhythm = (z - plan.center) if (front or back) else (u - u0)
                        mod = abs(rhythm) % 4
                        if mod in (1, 2):
                            if y in (3, fh - 3) or (mod == 1 and y % 3 == 0):
                                b.add(u, py, z, pal.trim)
                            else:
                                b.window(u, py, z, pal)
                            continue
                    b.add(u, py, z, color)

        if f:
            # stepped braces under the projecting floor
            for z in range(k0, k1 + 1, 4):
                for s in range(CUMBA_PROJECTION):
                    by = y_base - CUMBA_PROJECTION + s
                    b.add(plan.front - s, by, z, pal.trim)
                    b.add(plan.front - s, by, z + 1, pal.trim)

    last = len(plan.roof_footprints) - 1
    for h, (u0, u1, k0, k1, ry) in enumerate(plan.roof_footprints):
        for u in range(u0, u1 + 1):
            for z in range(k0, k1 + 1):
                if h != last and u0 < u < u1 and k0 < z < k1:
                    continue
                b.add(u, ry, z, pal.roof)
    return b.build()


# ── Style B ────────────────────────────────────────────────────────────

def plan_type_b(seed: int) -> MansionPlan:
    width = clamp_extent(20 + seeded_int(seed + 1, 0, 6))
    depth = clamp_extent(14 + seeded_int(seed + 2, 0, 4))
    floors = 2 + (1 if seeded_random(seed + 3) > 0.7 else 0)
    center = slot_center(seed)
    front = SHORE_U + 5
    half = width // 2
    base_y = elevation(front - SHORE_U, center) + 1
    fps = tuple((front - 2, front + depth - 1, center - half, center + half)
                for _ in range(floors))
    footprint = (front - 6, front + depth - 1, center - half - 4, center + half + 4)
    return MansionPlan('B', seed, center, front, base_y, width, depth, floors, 10,
                       pick_palette(seed, YALI_B_PALETTES), fps, (), footprint)


def generate_type_b(seed: int, side, mode) -> VoxelSet:
    plan = plan_type_b(seed)
    if _excluded(side, plan):
        return VoxelSet.empty()
    b = VoxelBuilder(side, mode, above_ground=True)
    pal = plan.palette
    fh = plan.floor_height
    half = plan.width // 2
    span = max(1, int(plan.width / 2.5))
    c = plan.center
    _quay(b, plan.front - 6, plan.front + 3, c - half - 4, c + half + 4,
          plan.base_y, MARBLE_QUAY)

    def projection(dz):
        return 2 if abs(dz) < span / 2 else 0

    for f in range(plan.floors):
        y_base = plan.base_y + f * fh
        for y in range(fh):
            for dz in range(-half, half + 1):
                proj = projection(dz)
                for lx in range(-proj, plan.depth):
                    interior = (-proj < lx < plan.depth - 1 and abs(dz) < half - 1
                                and 0 < y < fh - 1)
                    if interior:
                        continue
                    u, z, py = plan.front + lx, c + dz, y_base + y
                    visible = (lx == -proj or lx == plan.depth - 1 or abs(dz) == half
                               or (proj and lx < 0 and abs(dz) == (span - 1) // 2))
                    if visible and y in (0, fh - 1):
                        b.add(u, py, z, pal.trim)
                    elif visible and 2 < y < fh - 2 and dz % 4 in (1, 2):
                        b.window(u, py, z, pal)
                    elif visible and dz % 4 == 0:
                        b.add(u, py, z, pal.trim)
                    else:
                        b.add(u, py, z, pal.wall)

    roof_y = plan.roof_y
    for dz in range(-half, half + 1):
        proj = projection(dz)
        for lx in range(-proj, plan.depth):
            u, z = plan.front + lx, c + dz
            b.add(u, roof_y, z, pal.roof)
            edge = (lx == -proj or lx == plan.depth - 1 or abs(dz) == half
                    or (not proj and lx == 0 and abs(dz) == span // 2))
            if edge:
                b.add(u, roof_y + 1, z, pal.trim)
                if (lx + dz) % 2 == 0:
                    b.add(u, roof_y + 2, z, pal.trim)
                b.add(u, roof_y + 3, z, pal.trim)
    return b.build()


# ── Style C ────────────────────────────────────────────────────────────

_C_WIDTH = 21
_C_DEPTH = 15
_C_TURRET_HEIGHT = 14


def plan_type_c(seed: int) -> MansionPlan:
    center = slot_center(seed)
    front = SHORE_U + 5
    half = _C_WIDTH // 2
    base_y = elevation(front - SHORE_U, center) + 1
    fps = tuple((front - (2 if f else 0), front + _C_DEPTH - 1, center - half, center + half)
                for f in range(3))
    footprint = (front - 8, front + _C_DEPTH + 1, center - half - 4, center + half + 4)
    return MansionPlan('C', seed, center, front, base_y, _C_WIDTH, _C_DEPTH, 3, 9,
                       pick_palette(seed, YALI_C_PALETTES), fps, (), footprint)


def generate_type_c(seed: int, side, mode) -> VoxelSet:
    plan = plan_type_c(seed)
    if _excluded(side, plan):
        return VoxelSet.empty()
    b = VoxelBuilder(side, mode, above_ground=True)
    pal = plan.palette
    fh = plan.floor_height
    half = plan.width // 2
    c, front, depth = plan.center, plan.front, plan.depth
    _quay(b, front - 8, front - 1, c - half - 4, c + half + 4, plan.base_y, pal.trim)

    for f in range(plan.floors):
        y_base = plan.base_y + f * fh
        for ly in range(fh):
            for dz in range(-half, half + 1):
                offset = 0
                if f:
                    if abs(dz) <= 3:
                        offset = -2
                    elif abs(dz) > 7:
                        offset = -1
                for lx in range(offset, depth):
                    if offset < lx < depth - 1 and abs(dz) < half and 0 < ly < fh - 1:
                        continue
                    u, z, py = front + lx, c + dz, y_base + ly
                    is_front = lx == offset
                    is_side = abs(dz) == half
                    if f == 0 and is_front and abs(dz) <= 3 and ly < 6:
                        b.add(u, py, z, DOOR_WOOD)
                    elif (is_front or is_side) and 2 < ly < fh - 2:
                        if dz % 4 in (1, 2):
                            b.window(u, py, z, pal)
                        else:
                            b.add(u, py, z, pal.wall)
                    elif ly in (0, fh - 1):
                        b.add(u, py, z, pal.trim)
                    else:
                        b.add(u, py, z, pal.board if f == 0 else pal.wall)

    roof_y = plan.roof_y
    for h in range(8):
        for lx in range(-2 + h, depth + 2 - h):
            for dz in range(-half - 2 + h, half + 3 - h):
                if abs(dz) > half - 3 and lx < 3:
                    continue
                b.add(front + lx, roof_y + h, c + dz, pal.roof)

    for tz in (-half + 2, half - 2):
        tx = -2
        for ty in range(_C_TURRET_HEIGHT):
            for dx in range(-2, 3):
                for dz in range(-2, 3):
                    u, py, z = front + tx + dx, roof_y + ty, c + tz + dz
                    if ty >= 8:
                        reduction = (ty - 8) / 2
                        if abs(dx) > 2 - reduction or abs(dz) > 2 - reduction:
                            continue
                        b.add(u, py, z, pal.roof)
                    elif 2 < ty < 8 and (abs(dx) == 2 or abs(dz) == 2) and abs(dx) + abs(dz) < 4:
                        b.window(u, py, z, pal)
                    else:
                        b.add(u, py, z, pal.wall)
        b.add(front + tx, roof_y + _C_TURRET_HEIGHT, c + tz, FINIAL_GOLD)

    # centre gable
    for gy in range(6):
        span = 7 - gy
        for gz in range(-(span // 2), span // 2 + 1):
            b.add(front - 3, roof_y + gy, c + gz, pal.wall)
            b.add(front - 2, roof_y + gy + 1, c + gz, pal.roof)
    return b.build()


_PLANNERS = (plan_type_a, plan_type_b, plan_type_c)


def planned_footprints():
    """Footprints of the style the scene builds in every slot."""
    return [_PLANNERS[mansion_variant(seed)](seed).footprint for seed in mansion_slots()]
