"""Dolphins and gulls.  Both are tiny models posed by the animation driver."""

from .models import VoxelSet
from .palettes import DOLPHIN, SEAGULL
from .voxels import VoxelBuilder

# (radius_u, radius_y, y_offset) per body slice, tail stock first
_DOLPHIN_PROFILE = (
    [(0.5 + z * 0.2, 0.5 + z * 0.2, 0.0) for z in range(3)]
    + [(1.1 + z * 0.15, 1.1 + z * 0.15, 0.0) for z in range(4)]
    + [(1.7, 1.7, 0.0)] * 4
    + [(1.7 - z * 0.35, 1.7 - z * 0.3, 0.2) for z in range(3)]
)


def _body_color(rel: float) -> str:
    if rel > 0.3:
        return DOLPHIN['back']
    if rel < -0.2:
        return DOLPHIN['belly']
    return DOLPHIN['side']


def generate_dolphin(seed: int, side, mode) -> VoxelSet:
    """Bottlenose dolphin, tail at z=0 and beak at z=15."""
    b = VoxelBuilder(side, mode)
    for z, (ru, ry, yoff) in enumerate(_DOLPHIN_PROFILE):
        for y in range(-int(ry + 1), int(ry + 1) + 1):
            for u in range(-int(ru + 1), int(ru + 1) + 1):
                if (u * u) / (ru * ru) + ((y - yoff) ** 2) / (ry * ry) <= 1.0:
                    b.add(u, y, z, _body_color((y - yoff) / ry))

    b.add(0, 0, 14, DOLPHIN['beak'])
    b.add(0, 0, 15, DOLPHIN['beak'])
    # dorsal fin
    for y, z in ((2, 8), (3, 8), (2, 9), (2, 7)):
        b.add(0, y, z, DOLPHIN['back'])
    # pectoral fins, swept back
    for u in (-2, 2):
        b.add(u, -1, 10, DOLPHIN['side'])
        b.add(u + (1 if u > 0 else -1), -1, 9, DOLPHIN['side'])
    # flukes
    for u in range(-3, 4):
        if u == 0:
            continue
        b.add(u, 0, -1, DOLPHIN['back'])
        if abs(u) < 3:
            b.add(u, 0, 0, DOLPHIN['back'])
    return b.build()


def generate_seagull(seed: int, side, mode) -> VoxelSet:
    """Gull in glide: body along z, wings raised toward the tips."""
    b = VoxelBuilder(side, mode)
    for z in range(-1, 3):
        b.add(0, 0, z, SEAGULL['body'])
    b.add(0, 1, 2, SEAGULL['body'])
    b.add(0, 1, 3, SEAGULL['beak'])
    for u in range(1, 7):
        lift = u // 3
        color = SEAGULL['wing_tip'] if u >= 5 else SEAGULL['wing']
        for s in (-1, 1):
            b.add(s * u, lift, 0, color)
            b.add(s * u, lift, 1, color)
    return b.build()
