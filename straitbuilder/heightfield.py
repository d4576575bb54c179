"""Closed-form shoreline height field shared by every land generator."""

import math
from functools import lru_cache
from typing import Optional

import numpy as np

from .constants import (
    ALONG_RANGE, COAST_BAND, COAST_HEIGHT, LAND_DEPTH, SHORE_U, VOXEL_SCALE,
)
from .models import Side, ZoneKind
from . import zones

# Hill profile
_SLOPE_OFFSET = 10
_SLOPE_RATE = 0.04
_SLOPE_POWER = 1.2
_SLOPE_GAIN = 5.0
_COARSE_FREQ = 0.02
_COARSE_AMP = 8.0
_FINE_FREQ = 0.1
# Kept below the hill gradient at the band edge so the profile stays
# non-decreasing inland.
_FINE_AMP = 1.5

PLAZA_HEIGHT = COAST_HEIGHT + 1


def elevation(lateral, along) -> int:
    """Terrain height in voxels.

    Parameters
    ----------
    lateral : int
        Distance from the shoreline in voxels (0 at the quay edge).
    along : int
        Along-shore voxel index.
    """
    if lateral < COAST_BAND:
        return COAST_HEIGHT
    slope = ((lateral - _SLOPE_OFFSET) * _SLOPE_RATE) ** _SLOPE_POWER * _SLOPE_GAIN
    coarse = math.sin(along * _COARSE_FREQ) * _COARSE_AMP
    fine = math.cos(lateral * _FINE_FREQ) * _FINE_AMP
    return max(COAST_HEIGHT, int(math.floor(COAST_HEIGHT + slope + coarse + fine)))


def elevation_grid(laterals, alongs) -> np.ndarray:
    """Sample :func:`elevation` on a grid; returns an int array of shape
    ``(len(laterals), len(alongs))``."""
    return np.array([[elevation(lat, alo) for alo in alongs] for lat in laterals],
                    dtype=np.int32).reshape(len(laterals), len(alongs))


def shore_axes():
    """Lateral (from shore) and along-shore voxel index ranges of one shore."""
    return np.arange(LAND_DEPTH), np.arange(-ALONG_RANGE, ALONG_RANGE)


def surface_grid(side) -> tuple:
    """Sample the ground of one shore.

    Returns ``(heights, plaza_mask, corridor_mask)``, each indexed
    ``[lateral, along]``.  Cells inside the mosque plaza are levelled to
    ``PLAZA_HEIGHT``.
    """
    side = Side(side)
    laterals, alongs = shore_axes()
    heights = elevation_grid(laterals, alongs)
    xs = (side.x_dir * (SHORE_U + laterals) * VOXEL_SCALE)[:, None]
    zs = (alongs * VOXEL_SCALE)[None, :]
    plaza = zones.zone_mask(xs, zs, ZoneKind.MOSQUE_PLAZA)
    corridor = zones.zone_mask(xs, zs, ZoneKind.BRIDGE_CORRIDOR)
    heights = np.where(plaza, PLAZA_HEIGHT, heights)
    return heights, plaza, corridor


def ground_height(side, lateral: int, along: int) -> int:
    """Height of the terrain surface voxel at one cell, plaza included."""
    x = Side(side).x_dir * (SHORE_U + lateral) * VOXEL_SCALE
    if bool(zones.zone_mask(x, along * VOXEL_SCALE, ZoneKind.MOSQUE_PLAZA)):
        return PLAZA_HEIGHT
    return elevation(lateral, along)


@lru_cache(maxsize=1)
def _shore_surface() -> np.ndarray:
    # both shores share one surface since every zone is mirrored
    heights = surface_grid(Side.EUROPE)[0]
    heights.setflags(write=False)
    return heights


def terrain_top(ix: int, iz: int) -> Optional[int]:
    """Height of the topmost terrain voxel under world grid column
    ``(ix, iz)``, or None where the column is open water."""
    lateral = abs(ix) - SHORE_U
    k = iz + ALONG_RANGE
    if 0 <= lateral < LAND_DEPTH and 0 <= k < 2 * ALONG_RANGE:
        return int(_shore_surface()[lateral, k])
    return None
