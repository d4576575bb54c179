"""Shoreline terrain voxel generation.

Provides:
1. ``elevation`` -- re-exported from :mod:`straitbuilder.heightfield`
2. ``generate_terrain`` -- ground cover, quay wall, skirt fill and trees
"""

import logging

import numpy as np

from .constants import PROMENADE_LIMIT, QUAY_WALL_DEPTH, ROAD_LIMIT, SHORE_U
from .heightfield import elevation, shore_axes, surface_grid
from .models import Side
from .palettes import GROUND
from .prng import cell_seed, chance
from .voxels import VoxelBuilder
from . import flora

logger = logging.getLogger(__name__)

__all__ = ["elevation", "generate_terrain"]


def _ground_color(seed, lateral, along, in_plaza, in_corridor):
    if in_plaza:
        return GROUND['plaza']
    if in_corridor:
        return GROUND['rock']
    if lateral < PROMENADE_LIMIT:
        return GROUND['promenade']
    if lateral < ROAD_LIMIT:
        return GROUND['asphalt']
    if chance(cell_seed(seed, SHORE_U + lateral, 0, along), 0.6):
        return GROUND['grass']
    return GROUND['grass_dark']


def generate_terrain(seed: int, side, mode):
    """Ground cover, quay wall and trees for one shore.

    Every column gets its surface voxel; where a neighbour sits lower the
    column is filled down to it so steep steps leave no gaps.
    """
    builder = VoxelBuilder(side, mode)
    heights, plaza, corridor = surface_grid(side)
    laterals, alongs = shore_axes()

    padded = np.pad(heights, 1, mode='edge')
    lowest_neighbour = np.minimum.reduce([
        padded[:-2, 1:-1], padded[2:, 1:-1], padded[1:-1, :-2], padded[1:-1, 2:],
    ])

    for li, lateral in enumerate(laterals.tolist()):
        u = SHORE_U + lateral
        for ki, along in enumerate(alongs.tolist()):
            h = int(heights[li, ki])
            color = _ground_color(seed, lateral, along, plaza[li, ki], corridor[li, ki])
            builder.add(u, h, along, color)
            for y in range(int(lowest_neighbour[li, ki]) + 1, h):
                builder.add(u, y, along, GROUND['rock'])
            if lateral == 0:
                for d in range(1, QUAY_WALL_DEPTH + 1):
                    builder.add(u, h - d, along, GROUND['quay_wall'])

    trees = flora.scatter_trees(builder, seed, heights)
    voxels = builder.build()
    logger.info(f"Terrain ({Side(side).value}): {len(voxels)} voxels, {trees} trees")
    return voxels
