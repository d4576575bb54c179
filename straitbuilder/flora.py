"""Tree scatter for the urban hillside.

Trunk candidates sit on a fixed lattice; each is kept by a seeded draw,
then dropped if its canopy would reach into a reserved zone or onto a
planned building (apartment block, mansion or the mosque).  Canopies are
spheres thinned per voxel.
"""

import logging
from functools import lru_cache

from shapely.geometry import box
from shapely.ops import unary_union
from shapely.prepared import prep

from .constants import (
    ALONG_RANGE, LAND_DEPTH, MOSQUE_ANCHOR, ROAD_LIMIT, SHORE_U, TREE_CLEARANCE,
    TREE_LATTICE,
)
from .palettes import FLORA
from .prng import cell_seed, chance, seeded_int, seeded_random
from . import apartments, landmarks, mansions
from . import zones

logger = logging.getLogger(__name__)

TREE_PROBABILITY = 0.25
LEAF_KEEP = 0.6
MAX_CANOPY_RADIUS = 7


@lru_cache(maxsize=1)
def _building_cover():
    """Prepared union of planned building footprints in (u, along)."""
    footprints = (apartments.planned_footprints() + mansions.planned_footprints()
                  + [landmarks.plan_mosque(MOSQUE_ANCHOR)])
    boxes = [box(u0, k0, u1, k1) for u0, u1, k0, k1 in footprints]
    return prep(unary_union(boxes).buffer(1))


def tree_sites(seed: int):
    """Yield ``(lateral, along, tree_seed)`` for every kept trunk candidate."""
    for lateral in range(ROAD_LIMIT, LAND_DEPTH - MAX_CANOPY_RADIUS):
        if lateral % TREE_LATTICE:
            continue
        for along in range(-ALONG_RANGE + MAX_CANOPY_RADIUS, ALONG_RANGE - MAX_CANOPY_RADIUS):
            if along % TREE_LATTICE:
                continue
            tree_seed = cell_seed(seed, SHORE_U + lateral, 1, along)
            if chance(tree_seed, TREE_PROBABILITY):
                yield lateral, along, tree_seed


def add_tree(builder, u: int, base_y: int, along: int, tree_seed: int):
    """Trunk plus thinned spherical canopy; ``base_y`` is the first voxel
    above the ground."""
    height = seeded_int(tree_seed + 1, 10, 16)
    radius = 5 + seeded_random(tree_seed + 2) * 2
    leaf = FLORA['leaf_europe'] if chance(tree_seed + 3, 0.5) else FLORA['leaf_asia']

    builder.column(u, base_y, base_y + height, along, FLORA['trunk'])

    cy = base_y + height
    r = int(radius)
    r2 = radius * radius
    for du in range(-r, r + 1):
        for dy in range(-r, r + 1):
            for dz in range(-r, r + 1):
                if du * du + dy * dy + dz * dz >= r2:
                    continue
                leaf_seed = cell_seed(tree_seed, du, dy, dz)
                if not chance(leaf_seed, LEAF_KEEP):
                    continue
                color = FLORA['leaf_light'] if chance(leaf_seed + 1, 0.2) else leaf
                builder.add(u + du, cy + dy, along + dz, color)


def scatter_trees(builder, seed: int, heights) -> int:
    """Plant trees onto ``builder``; ``heights`` is the shore's surface grid
    indexed ``[lateral, along + ALONG_RANGE]``.  Returns the tree count."""
    cover = _building_cover()
    count = 0
    for lateral, along, tree_seed in tree_sites(seed):
        u = SHORE_U + lateral
        u0, u1 = u - MAX_CANOPY_RADIUS, u + MAX_CANOPY_RADIUS
        k0, k1 = along - MAX_CANOPY_RADIUS, along + MAX_CANOPY_RADIUS
        if zones.lateral_footprint_excluded(builder.side, u0, u1, k0, k1,
                                            clearance=TREE_CLEARANCE):
            logger.debug(f"Tree at ({lateral}, {along}) skipped: reserved zone")
            continue
        if cover.intersects(box(u0, k0, u1, k1)):
            continue
        ground = int(heights[lateral, along + ALONG_RANGE])
        add_tree(builder, u, ground + 1, along, tree_seed)
        count += 1
    return count
