"""Apartment blocks on the hillside behind the waterfront.

Sites sit on a coarse along-shore grid with two lateral rows; the seed is
the site's grid index (row = ``seed % 2``, column = ``seed // 2``), so a
given seed always lands on the same jittered site.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from .constants import (
    APARTMENT_ALONG_START, APARTMENT_ALONG_STEP, APARTMENT_CLEARANCE,
    APARTMENT_COLUMNS, APARTMENT_JITTER, APARTMENT_ROWS, SHORE_U,
)
from .heightfield import elevation
from .models import Palette, VoxelSet
from .palettes import (
    APARTMENT_PALETTES, APARTMENT_STONE, AWNINGS, CHIMNEY, DOOR_WOOD,
    PLANTER_GREEN, RAILING_DARK, pick_palette,
)
from .prng import chance, seeded_choice, seeded_int
from .voxels import VoxelBuilder
from . import zones

logger = logging.getLogger(__name__)

WIDTH = 14
DEPTH = 14
FLOOR_HEIGHT = 7
BASE_HEIGHT = 5
BALCONY_DEPTH = 2
ROOF_LAYERS = 6
WINDOW_PERIOD = 5

BALCONY_PROBABILITY = 0.7
SHOP_PROBABILITY = 0.4
TERRACE_PROBABILITY = 0.35


@dataclass(frozen=True)
class ApartmentPlan:
    seed: int
    u0: int                 # lateral index of the water-facing wall
    k0: int                 # along-shore index of the first wall
    floors: int
    palette: Palette
    balconies: Tuple[bool, ...]
    has_shop: bool
    has_terrace: bool
    awning: str

    @property
    def footprint(self):
        """Conservative (u0, u1, k0, k1) voxel bounds, eaves and awning included."""
        return (self.u0 - BALCONY_DEPTH - 1, self.u0 + DEPTH + 1,
                self.k0 - 1, self.k0 + WIDTH + 1)


def apartment_seeds():
    """Seeds of every site on the scene grid."""
    return range(APARTMENT_COLUMNS * len(APARTMENT_ROWS))


def plan_apartment(seed: int) -> ApartmentPlan:
    row = seed % len(APARTMENT_ROWS)
    column = seed // len(APARTMENT_ROWS)
    lateral = APARTMENT_ROWS[row] + seeded_int(seed + 11, 0, APARTMENT_JITTER)
    along = (APARTMENT_ALONG_START + column * APARTMENT_ALONG_STEP
             + seeded_int(seed + 12, 0, APARTMENT_JITTER))
    floors = 4 + (1 if chance(seed + 3, 0.5) else 0)
    balconies = tuple(f > 0 and chance(seed + 20 + f, BALCONY_PROBABILITY)
                      for f in range(floors))
    return ApartmentPlan(
        seed=seed,
        u0=SHORE_U + lateral,
        k0=along,
        floors=floors,
        palette=pick_palette(seed, APARTMENT_PALETTES),
        balconies=balconies,
        has_shop=chance(seed + 4, SHOP_PROBABILITY),
        has_terrace=chance(seed + 5, TERRACE_PROBABILITY),
        awning=seeded_choice(seed + 6, AWNINGS),
    )


def planned_footprints():
    """Footprints of every grid site, whether or not it gets built."""
    return [plan_apartment(seed).footprint for seed in apartment_seeds()]


def _stone_base(b, plan, ground, base_top):
    """Stone walls rising from each column's own ground level; ``ground``
    maps (u, along) to terrain height."""
    u0, k0 = plan.u0, plan.k0
    front_ground = max(ground[u0, z] for z in range(k0, k0 + WIDTH))
    door = (k0 + WIDTH // 2 - 1, k0 + WIDTH // 2)
    for u in range(u0, u0 + DEPTH):
        for z in range(k0, k0 + WIDTH):
            if u0 < u < u0 + DEPTH - 1 and k0 < z < k0 + WIDTH - 1:
                continue
            b.column(u, ground[u, z] + 1, base_top, z, APARTMENT_STONE)
    b.box(u0, u0 + DEPTH, base_top - 1, base_top, k0, k0 + WIDTH, APARTMENT_STONE)
    for y in range(front_ground + 1, front_ground + 5):
        for z in range(k0, k0 + WIDTH):
            if z in door:
                b.add(u0, y, z, DOOR_WOOD)
            elif plan.has_shop and 0 < z - k0 < WIDTH - 1 and (z - k0) % 4 in (1, 2):
                b.window(u0, y, z, plan.palette)
    if plan.has_shop:
        # striped awning over the shop front
        for du in (1, 2):
            for z in range(k0, k0 + WIDTH):
                color = plan.awning if (z - k0) % 2 == 0 else '#f8fafc'
                b.add(u0 - du, front_ground + 5, z, color)


def _floor(b, plan, f, fy):
    u0, k0 = plan.u0, plan.k0
    balcony = plan.balconies[f]
    min_l = -BALCONY_DEPTH if balcony else 0
    for lx in range(min_l, DEPTH):
        for lz in range(WIDTH):
            if min_l < lx < DEPTH - 1 and 0 < lz < WIDTH - 1:
                continue
            u, z = u0 + lx, k0 + lz
            on_balcony = lx < 0
            corner = lx in (min_l, DEPTH - 1) or lz in (0, WIDTH - 1)
            win_l = lx % WINDOW_PERIOD in (2, 3)
            win_z = lz % WINDOW_PERIOD in (2, 3)
            for y in range(FLOOR_HEIGHT):
                if y == 0:
                    b.add(u, fy, z, plan.palette.trim)
                elif on_balcony:
                    if y < 2 and (lx + lz + y) % 2 == 0:
                        b.add(u, fy + y, z, RAILING_DARK)
                elif not corner and (win_l or win_z) and 1 < y < FLOOR_HEIGHT - 1:
                    frame = (y in (2, FLOOR_HEIGHT - 2) or (win_l and lx % WINDOW_PERIOD == 2)
                             or (win_z and lz % WINDOW_PERIOD == 2))
                    if frame:
                        b.add(u, fy + y, z, plan.palette.trim)
                    else:
                        b.window(u, fy + y, z, plan.palette)
                else:
                    b.add(u, fy + y, z, plan.palette.wall)
    if balcony:
        # slab, and the wall behind the open balcony
        b.box(u0 - BALCONY_DEPTH, u0, fy, fy + 1, k0, k0 + WIDTH, plan.palette.trim)
        for lz in range(1, WIDTH - 1):
            for y in range(1, FLOOR_HEIGHT):
                if lz % WINDOW_PERIOD in (2, 3) and 1 < y < FLOOR_HEIGHT - 1:
                    b.window(u0, fy + y, k0 + lz, plan.palette)
                else:
                    b.add(u0, fy + y, k0 + lz, plan.palette.wall)


def _hipped_roof(b, plan, roof_y):
    u0, k0 = plan.u0, plan.k0
    for r in range(ROOF_LAYERS):
        b.box(u0 - 1 + r, u0 + DEPTH + 1 - r, roof_y + r, roof_y + r + 1,
              k0 - 1 + r, k0 + WIDTH + 1 - r, plan.palette.roof)
    b.column(u0 + DEPTH // 2, roof_y, roof_y + ROOF_LAYERS + 2, k0 + WIDTH // 2, CHIMNEY)


def _terrace(b, plan, roof_y):
    u0, k0 = plan.u0, plan.k0
    b.box(u0, u0 + DEPTH, roof_y, roof_y + 1, k0, k0 + WIDTH, plan.palette.trim)
    b.box(u0, u0 + DEPTH, roof_y + 1, roof_y + 3, k0, k0 + WIDTH, plan.palette.wall, hollow=True)
    for du, dz in ((2, 2), (2, WIDTH - 3), (DEPTH - 3, 2), (DEPTH - 3, WIDTH - 3)):
        b.add(u0 + du, roof_y + 1, k0 + dz, CHIMNEY)
        b.add(u0 + du, roof_y + 2, k0 + dz, PLANTER_GREEN)
    # stair hut
    b.box(u0 + DEPTH - 5, u0 + DEPTH - 1, roof_y + 1, roof_y + 5,
          k0 + 5, k0 + 9, APARTMENT_STONE, hollow=True)
    b.box(u0 + DEPTH - 5, u0 + DEPTH - 1, roof_y + 5, roof_y + 6,
          k0 + 5, k0 + 9, plan.palette.roof)
    b.lamp(u0 + DEPTH - 5, roof_y + 3, k0 + 7, '#475569', '#fbbf24')


def generate_apartment(seed: int, side, mode) -> VoxelSet:
    """One apartment block at the site selected by ``seed``."""
    plan = plan_apartment(seed)
    u0, u1, k0, k1 = plan.footprint
    if zones.lateral_footprint_excluded(side, u0, u1, k0, k1,
                                        clearance=APARTMENT_CLEARANCE):
        logger.debug(f"Apartment {seed} skipped: reserved zone")
        return VoxelSet.empty()

    ground = {(u, k): elevation(u - SHORE_U, k)
              for u in range(plan.u0, plan.u0 + DEPTH)
              for k in range(plan.k0, plan.k0 + WIDTH)}
    base_top = max(ground.values()) + 1 + BASE_HEIGHT

    b = VoxelBuilder(side, mode, above_ground=True)
    _stone_base(b, plan, ground, base_top)
    for f in range(plan.floors):
        _floor(b, plan, f, base_top + f * FLOOR_HEIGHT)
    roof_y = base_top + plan.floors * FLOOR_HEIGHT
    if plan.has_terrace:
        _terrace(b, plan, roof_y)
    else:
        _hipped_roof(b, plan, roof_y)
    return b.build()
