"""Waterfront mosque, island tower and the tower's flag cloth.

These are the radial generators: domes come from sphere-shell tests,
minarets and the lantern from stacked cylinder sections, and the mosque
window shafts from a per-face profile that tells centre bays from side
bays.
"""

import logging
import math

from .constants import SHORE_U, TOWER_CENTER, VOXEL_SCALE
from .heightfield import ground_height
from .models import VoxelSet, ZoneKind
from .palettes import MOSQUE, PALE_LIGHT, TOWER
from .prng import cell_seed, chance
from .voxels import VoxelBuilder
from . import zones

logger = logging.getLogger(__name__)


# ── Mosque ─────────────────────────────────────────────────────────────

MOSQUE_FRONT = SHORE_U + 6
MOSQUE_SIZE = 24
MOSQUE_WALL_HEIGHT = 16
WALL_THICKNESS = 2
BAY = 8
DRUM_RADIUS = 11.0
DRUM_HEIGHT = 4
DOME_RADIUS = 11.5
DOME_SHELL = 1.6
MINARET_HEIGHT = 48
MINARET_BALCONIES = (24, 36)
MINARET_OFFSETS = ((-3, -3), (-3, MOSQUE_SIZE + 2))   # (du, dk) from the front corner


def window_profile(t: int, y: int):
    """Classify a wall cell by its position along a face.

    ``t`` runs 0..23 along the face, ``y`` is the height above the wall
    base.  Returns ``'center'`` or ``'side'`` for cells inside an arched
    window shaft and ``None`` for solid wall.
    """
    bay = t // BAY
    if bay < 0 or bay > 2:
        return None
    offset = t - (bay * BAY + (BAY - 1) / 2)
    half = 2.5 if bay == 1 else 1.5
    if abs(offset) > half:
        return None
    sill, spring = (4, 10) if bay == 1 else (5, 10)
    # round arch above the springing line
    top = spring + math.sqrt(max(half * half - offset * offset, 0.0))
    if sill <= y <= top:
        return 'center' if bay == 1 else 'side'
    return None


def plan_mosque(seed: int):
    """Footprint ``(u0, u1, k0, k1)`` of a mosque anchored at ``seed``."""
    return (MOSQUE_FRONT - 6, MOSQUE_FRONT + MOSQUE_SIZE,
            seed - 6, seed + MOSQUE_SIZE + 5)


def _mosque_walls(b, u0, k0, y0):
    n = MOSQUE_SIZE
    for y in range(MOSQUE_WALL_HEIGHT):
        for du in range(n):
            for dk in range(n):
                depth = min(du, dk, n - 1 - du, n - 1 - dk)
                roof = y >= MOSQUE_WALL_HEIGHT - 2
                if depth >= WALL_THICKNESS and not roof:
                    continue
                u, z, py = u0 + du, k0 + dk, y0 + y
                if roof or depth >= WALL_THICKNESS:
                    b.add(u, py, z, MOSQUE['marble'])
                    continue
                # position along whichever face this cell belongs to
                t = dk if min(du, n - 1 - du) == depth else du
                bay = window_profile(t, y)
                if bay is None:
                    b.add(u, py, z, MOSQUE['wall'])
                elif depth == 0:
                    night = MOSQUE['glass_night'] if bay == 'center' else PALE_LIGHT
                    b.lamp(u, py, z, MOSQUE['glass_day'], night)
                # inner layer of a shaft stays open
    # cornice
    y = y0 + MOSQUE_WALL_HEIGHT
    for du in range(-1, n + 1):
        for dk in range(-1, n + 1):
            if du in (-1, n) or dk in (-1, n):
                b.add(u0 + du, y, k0 + dk, MOSQUE['trim'])


def _drum_and_dome(b, cu, ck, y0):
    r_out = DRUM_RADIUS
    span = int(math.ceil(DOME_RADIUS)) + 1
    for dy in range(DRUM_HEIGHT):
        for du in range(-span, span + 1):
            for dk in range(-span, span + 1):
                d = math.hypot(du - 0.5, dk - 0.5)
                if r_out - 1.5 <= d < r_out:
                    angle = math.degrees(math.atan2(dk - 0.5, du - 0.5)) % 45
                    if 1 <= dy <= 2 and 15 <= angle <= 30:
                        b.lamp(cu + du, y0 + dy, ck + dk, MOSQUE['glass_day'], MOSQUE['glass_night'])
                    else:
                        b.add(cu + du, y0 + dy, ck + dk, MOSQUE['wall'])
    dome_y = y0 + DRUM_HEIGHT
    for dy in range(span + 1):
        for du in range(-span, span + 1):
            for dk in range(-span, span + 1):
                d = math.sqrt((du - 0.5) ** 2 + dy * dy + (dk - 0.5) ** 2)
                if DOME_RADIUS - DOME_SHELL < d < DOME_RADIUS:
                    b.add(cu + du, dome_y + dy, ck + dk, MOSQUE['dome'])
    top = dome_y + int(DOME_RADIUS)
    b.column(cu, top, top + 3, ck, MOSQUE['crescent'])
    b.add(cu, top + 3, ck - 1, MOSQUE['crescent'])
    b.add(cu, top + 4, ck, MOSQUE['crescent'])


def _cylinder(b, cu, ck, y0, y1, radius, color):
    r = int(math.ceil(radius))
    for y in range(y0, y1):
        for du in range(-r, r + 1):
            for dk in range(-r, r + 1):
                if du * du + dk * dk <= radius * radius:
                    b.add(cu + du, y, ck + dk, color)


def _minaret(b, mu, mk, y0):
    _cylinder(b, mu, mk, y0, y0 + 8, 2.5, MOSQUE['marble'])
    _cylinder(b, mu, mk, y0 + 8, y0 + MINARET_BALCONIES[1], 1.6, MOSQUE['wall'])
    _cylinder(b, mu, mk, y0 + MINARET_BALCONIES[1], y0 + MINARET_HEIGHT, 1.2, MOSQUE['wall'])
    for level in MINARET_BALCONIES:
        y = y0 + level
        for du in range(-3, 4):
            for dk in range(-3, 4):
                d2 = du * du + dk * dk
                if d2 <= 9:
                    b.add(mu + du, y, mk + dk, MOSQUE['trim'])
                if 5 <= d2 <= 9:
                    b.add(mu + du, y + 1, mk + dk, MOSQUE['trim'])
        for du, dk in ((3, 0), (-3, 0), (0, 3), (0, -3)):
            b.lamp(mu + du, y + 2, mk + dk, MOSQUE['lead'], MOSQUE['glass_night'])
    # lead cone
    top = y0 + MINARET_HEIGHT
    for i, radius in enumerate((1.5, 1.2, 1.0, 0.5, 0.0)):
        _cylinder(b, mu, mk, top + 2 * i, top + 2 * i + 2, radius, MOSQUE['lead'])
    b.add(mu, top + 10, mk, MOSQUE['crescent'])


def generate_mosque(seed: int, side, mode) -> VoxelSet:
    """Mosque whose front corner sits at along-shore index ``seed``.

    The scene builds it at ``MOSQUE_ANCHOR``; any other anchor is a
    candidate site that is dropped when it touches a reserved zone other
    than the plaza.
    """
    u0, u1, k0, k1 = plan_mosque(seed)
    if zones.lateral_footprint_excluded(side, u0, u1, k0, k1,
                                        exempt=(ZoneKind.MOSQUE_PLAZA,)):
        logger.debug(f"Mosque candidate at {seed} skipped: reserved zone")
        return VoxelSet.empty()

    b = VoxelBuilder(side, mode, above_ground=True)
    y0 = ground_height(side, MOSQUE_FRONT - SHORE_U, seed) + 1
    _mosque_walls(b, MOSQUE_FRONT, seed, y0)
    cu = MOSQUE_FRONT + MOSQUE_SIZE // 2 - 1
    ck = seed + MOSQUE_SIZE // 2 - 1
    _drum_and_dome(b, cu, ck, y0 + MOSQUE_WALL_HEIGHT)
    for du, dk in MINARET_OFFSETS:
        _minaret(b, MOSQUE_FRONT + du, seed + dk, y0)
    return b.build()


# ── Island tower ───────────────────────────────────────────────────────

def _v(units: float) -> int:
    return int(round(units / VOXEL_SCALE))


TOWER_U = _v(TOWER_CENTER[0])
TOWER_K = _v(TOWER_CENTER[1])
PLATFORM_HALF = 17
PLATFORM_DIAMOND = 24
WALL_INSET = 14
WALL_HEIGHT = 6
BASE_HALF = 5
BASE_HEIGHT = 14
LANTERN_RADIUS = 4.8
LANTERN_HEIGHT = 10
BALCONY_RADIUS = 7.2
DOME_BASE_RADIUS = 5.2
DOME_HEIGHT = 8
POLE_HEIGHT = 16


def _platform(b, cu, ck, seed):
    for du in range(-PLATFORM_HALF, PLATFORM_HALF + 1):
        for dk in range(-PLATFORM_HALF, PLATFORM_HALF + 1):
            if abs(du) + abs(dk) >= PLATFORM_DIAMOND:
                continue
            u, z = cu + du, ck + dk
            b.add(u, 0, z, TOWER['platform'])
            edge = (abs(du) + abs(dk) > PLATFORM_DIAMOND - 2
                    or max(abs(du), abs(dk)) > PLATFORM_HALF - 2)
            if edge:
                if chance(cell_seed(seed, du, 0, dk), 0.7):
                    b.add(u, 1, z, TOWER['rock'])
                    b.add(u, -1, z, TOWER['rock_dark'])
            else:
                b.add(u, -1, z, TOWER['rock_dark'])
    # pier toward the strait
    for du in range(-PLATFORM_HALF - 12, -PLATFORM_HALF):
        for dk in range(-3, 3):
            b.add(cu + du, 0, ck + dk, TOWER['platform'])
            b.add(cu + du, -1, ck + dk, TOWER['rock_dark'])


def _fortification(b, cu, ck):
    for du in range(-WALL_INSET, WALL_INSET + 1):
        for dk in range(-WALL_INSET, WALL_INSET + 1):
            if max(abs(du), abs(dk)) != WALL_INSET:
                continue
            b.column(cu + du, 0, WALL_HEIGHT, ck + dk, TOWER['wall'])
            if (abs(du) + abs(dk)) % 4 < 2:
                b.add(cu + du, WALL_HEIGHT, ck + dk, TOWER['wall'])
    # side building with a small hipped roof
    for du in range(-WALL_INSET + 1, -1):
        for dk in range(2, WALL_INSET - 1):
            b.column(cu + du, 0, 6, ck + dk, TOWER['stone'])
    for h in range(4):
        for du in range(-WALL_INSET + 1 + h, -1 - h):
            for dk in range(2 + h, WALL_INSET - 1 - h):
                b.add(cu + du, 6 + h, ck + dk, TOWER['roof'])


def _tower_body(b, cu, ck):
    b.box(cu - BASE_HALF, cu + BASE_HALF + 1, 0, BASE_HEIGHT,
          ck - BASE_HALF, ck + BASE_HALF + 1, TOWER['wall'])
    y0 = BASE_HEIGHT
    r = int(math.ceil(BALCONY_RADIUS))
    for du in range(-r, r + 1):
        for dk in range(-r, r + 1):
            d = math.hypot(du, dk)
            if LANTERN_RADIUS <= d < BALCONY_RADIUS:
                b.add(cu + du, y0, ck + dk, TOWER['platform'])
                if d > BALCONY_RADIUS - 0.8:
                    b.add(cu + du, y0 + 1, ck + dk, TOWER['pole'])
    for y in range(LANTERN_HEIGHT):
        for du in range(-5, 6):
            for dk in range(-5, 6):
                d = math.hypot(du, dk)
                if d >= LANTERN_RADIUS or d < LANTERN_RADIUS - 1.5:
                    continue
                in_band = 3 <= y <= 6
                facing = (abs(du) < 2 and abs(dk) > 2) or (abs(dk) < 2 and abs(du) > 2)
                if in_band and facing:
                    b.lamp(cu + du, y0 + y, ck + dk, TOWER['glass_day'], TOWER['glass_night'])
                else:
                    b.add(cu + du, y0 + y, ck + dk, TOWER['stone'])
    dome_y = y0 + LANTERN_HEIGHT
    for du in range(-6, 7):
        for dk in range(-6, 7):
            d = math.hypot(du, dk)
            if DOME_BASE_RADIUS - 0.8 < d < DOME_BASE_RADIUS:
                b.add(cu + du, dome_y, ck + dk, TOWER['pole'])
    for y in range(DOME_HEIGHT):
        radius = DOME_BASE_RADIUS * (math.cos(y / DOME_HEIGHT * math.pi / 2) * 0.8 + 0.2)
        for du in range(-6, 7):
            for dk in range(-6, 7):
                if du * du + dk * dk < radius * radius:
                    b.add(cu + du, dome_y + y, ck + dk, TOWER['dome'])
    pole_y = dome_y + DOME_HEIGHT
    b.column(cu, pole_y, pole_y + POLE_HEIGHT, ck, TOWER['pole'])


def generate_tower(seed: int, side, mode) -> VoxelSet:
    """Island tower near the shore; ``seed`` only varies the rock fringe."""
    cu, ck = TOWER_U, TOWER_K
    r = PLATFORM_DIAMOND
    if zones.lateral_footprint_excluded(side, cu - PLATFORM_HALF - 12, cu + r, ck - r, ck + r,
                                        exempt=(ZoneKind.TOWER_FOOTPRINT,)):
        logger.debug("Tower skipped: reserved zone")
        return VoxelSet.empty()
    b = VoxelBuilder(side, mode)
    _platform(b, cu, ck, seed)
    _fortification(b, cu, ck)
    _tower_body(b, cu, ck)
    return b.build()


# ── Flag cloth ─────────────────────────────────────────────────────────

FLAG_WIDTH = 16
FLAG_HEIGHT = 10
FLAG_MOUNT = BASE_HEIGHT + LANTERN_HEIGHT + DOME_HEIGHT + POLE_HEIGHT - FLAG_HEIGHT


def flag_is_white(x: int, y: int, width: int = FLAG_WIDTH, height: int = FLAG_HEIGHT) -> bool:
    """Crescent-and-star emblem test on a ``width`` x ``height`` cloth."""
    aspect = width / height
    px = (x + 0.5) / width * aspect
    py = (y + 0.5) / height
    outer = math.hypot(px - 0.45 * aspect, py - 0.5)
    inner = math.hypot(px - 0.53 * aspect, py - 0.5)
    star = math.hypot(px - 0.72 * aspect, py - 0.5)
    return (outer < 0.25 and inner >= 0.2) or star < 0.12


def generate_flag(seed: int, side, mode, width: int = FLAG_WIDTH,
                  height: int = FLAG_HEIGHT) -> VoxelSet:
    """Flat flag cloth in the u/y plane, hoist edge at ``u = 0``.

    The cloth is static geometry; the wave comes from per-column offsets
    in :func:`straitbuilder.animation.flag_wave_offsets`.
    """
    b = VoxelBuilder(side, mode)
    for x in range(width):
        for y in range(height):
            color = TOWER['flag_white'] if flag_is_white(x, y, width, height) else TOWER['flag_red']
            b.add(x, y, 0, color)
    return b.build()


def tower_flag_mount():
    """(u, y, k) voxel indices where the flag's hoist edge attaches."""
    return TOWER_U + 1, FLAG_MOUNT, TOWER_K
