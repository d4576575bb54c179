"""Reserved ground regions and the exclusion test used by placement.

Zones are plain shapely geometries in world (x, z).  Generators test a
candidate once, with its whole footprint, before writing any voxel; a
candidate that touches a zone is skipped outright.
"""

import logging
from functools import lru_cache

import numpy as np
import shapely
from shapely.geometry import Point, box
from shapely.prepared import prep

from .constants import (
    BRIDGE_Z, BRIDGE_DECK_HALF_SPAN, BRIDGE_CORRIDOR_HALF_WIDTH,
    MOSQUE_PLAZA_U, MOSQUE_PLAZA_ALONG, TOWER_CENTER, TOWER_RADIUS,
    VOXEL_SCALE,
)
from .models import ExclusionZone, Side, ZoneKind

logger = logging.getLogger(__name__)


def _zone_geometry(zone: ExclusionZone):
    cx, cz = zone.center
    if zone.is_radial:
        return Point(cx, cz).buffer(zone.radius)
    hx, hz = zone.half_extents
    return box(cx - hx, cz - hz, cx + hx, cz + hz)


def default_zones():
    """The fixed scene zones, each declared on both shores.

    The mosque stands on the European shore and the tower off the Asian
    shore, but both reservations are mirrored so exclusion decisions are
    the same on either side.
    """
    u0, u1 = MOSQUE_PLAZA_U
    k0, k1 = MOSQUE_PLAZA_ALONG
    plaza = ExclusionZone(
        ZoneKind.MOSQUE_PLAZA,
        center=(Side.EUROPE.x_dir * (u0 + u1) / 2 * VOXEL_SCALE,
                (k0 + k1) / 2 * VOXEL_SCALE),
        half_extents=((u1 - u0) / 2 * VOXEL_SCALE, (k1 - k0) / 2 * VOXEL_SCALE),
    )
    tower = ExclusionZone(ZoneKind.TOWER_FOOTPRINT, center=TOWER_CENTER,
                          radius=TOWER_RADIUS)
    # Centred on x = 0, so it is its own mirror image.
    corridor = ExclusionZone(
        ZoneKind.BRIDGE_CORRIDOR, center=(0.0, BRIDGE_Z),
        half_extents=(BRIDGE_DECK_HALF_SPAN, BRIDGE_CORRIDOR_HALF_WIDTH),
    )
    return (corridor, plaza, plaza.mirrored(), tower, tower.mirrored())


class ExclusionResolver:
    """Read-only set of zones with footprint queries."""

    def __init__(self, zones=None):
        self.zones = tuple(default_zones() if zones is None else zones)
        self._geoms = [_zone_geometry(z) for z in self.zones]
        self._prepared = [prep(g) for g in self._geoms]

    def _hits(self, footprint, exempt) -> bool:
        for zone, prepared in zip(self.zones, self._prepared):
            if zone.kind in exempt:
                continue
            if prepared.intersects(footprint):
                return True
        return False

    def is_excluded(self, x: float, z: float, clearance: float = 0.0,
                    exempt=()) -> bool:
        """True if the point, grown into a square of half-size
        ``clearance``, touches any zone not listed in ``exempt``."""
        if clearance > 0:
            footprint = box(x - clearance, z - clearance, x + clearance, z + clearance)
        else:
            footprint = Point(x, z)
        return self._hits(footprint, exempt)

    def footprint_excluded(self, x0: float, z0: float, x1: float, z1: float,
                           clearance: float = 0.0, exempt=()) -> bool:
        """Same test for a rectangular footprint given by two corners."""
        footprint = box(min(x0, x1) - clearance, min(z0, z1) - clearance,
                        max(x0, x1) + clearance, max(z0, z1) + clearance)
        return self._hits(footprint, exempt)

    def contains(self, x: float, z: float, exempt=()) -> bool:
        """Strict interior membership (boundary points are outside)."""
        pt = Point(x, z)
        return any(geom.contains(pt) for zone, geom in zip(self.zones, self._geoms)
                   if zone.kind not in exempt)


@lru_cache(maxsize=1)
def default_resolver() -> ExclusionResolver:
    """Shared resolver over :func:`default_zones`."""
    resolver = ExclusionResolver()
    logger.debug(f"Exclusion resolver ready with {len(resolver.zones)} zones")
    return resolver


def lateral_footprint_excluded(side, u0, u1, k0, k1, clearance=0.0, exempt=(),
                               resolver=None) -> bool:
    """Exclusion test for a footprint given in voxel (u, along) ranges.

    ``u0..u1`` are lateral voxel indices (inclusive) measured from the
    strait centre line, ``k0..k1`` along-shore voxel indices.
    """
    resolver = resolver or default_resolver()
    x_dir = Side(side).x_dir
    return resolver.footprint_excluded(
        x_dir * u0 * VOXEL_SCALE, k0 * VOXEL_SCALE,
        x_dir * u1 * VOXEL_SCALE, k1 * VOXEL_SCALE,
        clearance=clearance, exempt=exempt)


def zone_mask(xs, zs, kind, resolver=None) -> np.ndarray:
    """Vectorised strict-interior test of world points against one zone kind."""
    resolver = resolver or default_resolver()
    xs = np.asarray(xs, dtype=np.float64)
    zs = np.asarray(zs, dtype=np.float64)
    mask = np.zeros(np.broadcast(xs, zs).shape, dtype=bool)
    for zone, geom in zip(resolver.zones, resolver._geoms):
        if zone.kind is kind:
            mask |= shapely.contains_xy(geom, xs, zs)
    return mask
