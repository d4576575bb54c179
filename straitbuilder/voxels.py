"""Voxel accumulation shared by every generator.

Generators write in *lateral* coordinates: ``u`` grows away from the
strait centre line (or, for watercraft and wildlife, across the hull).
The builder turns ``u`` into a world x index with the side's sign, so the
same generator code yields mirror-image output on the two shores.

The builder is also the only place that looks at the day/night mode:
:meth:`VoxelBuilder.window` and :meth:`VoxelBuilder.lamp` classify a
cell as OPAQUE (day color) or LIGHT (night color).  Every other write is
opaque and mode-independent, so positions never depend on the mode.
"""

import logging

from .heightfield import terrain_top
from .models import Mode, Palette, Side, VoxelSet
from .palettes import hex_to_rgb

logger = logging.getLogger(__name__)


def clamp_extent(n) -> int:
    """Round an extent down to whole voxels, never below one."""
    return max(1, int(n))


class VoxelBuilder:
    """Collects voxels for one generator call.

    Writing to a cell that is already painted repaints it in place: the
    cell keeps its original slot in the output order, so positions in the
    resulting :class:`VoxelSet` are unique.

    With ``above_ground`` set, writes at or below the terrain surface of
    their column are dropped, so a structure never shares a cell with the
    shore it stands on.
    """

    def __init__(self, side, mode, above_ground: bool = False):
        self.side = Side(side)
        self.mode = Mode(mode)
        self.above_ground = above_ground
        self.x_dir = self.side.x_dir
        self._slots = {}
        self._cells = []
        self._colors = []
        self._light = []

    def __len__(self):
        return len(self._cells)

    def _write(self, u, y, z, color, lit):
        key = (self.x_dir * int(u), int(y), int(z))
        if self.above_ground:
            top = terrain_top(key[0], key[2])
            if top is not None and key[1] <= top:
                return
        rgb = hex_to_rgb(color)
        slot = self._slots.get(key)
        if slot is None:
            self._slots[key] = len(self._cells)
            self._cells.append(key)
            self._colors.append(rgb)
            self._light.append(lit)
        else:
            self._colors[slot] = rgb
            self._light[slot] = lit

    def add(self, u, y, z, color: str):
        """Paint one opaque voxel."""
        self._write(u, y, z, color, False)

    def lamp(self, u, y, z, day_color: str, night_color: str):
        """Paint a light-capable voxel (beacon, lantern, headlight)."""
        if self.mode is Mode.NIGHT:
            self._write(u, y, z, night_color, True)
        else:
            self._write(u, y, z, day_color, False)

    def window(self, u, y, z, palette: Palette):
        """Paint a glass voxel using the palette's day/night glass colors."""
        self.lamp(u, y, z, palette.glass_day, palette.glass_night)

    def has(self, u, y, z) -> bool:
        return (self.x_dir * int(u), int(y), int(z)) in self._slots

    def box(self, u0, u1, y0, y1, z0, z1, color: str, hollow: bool = False):
        """Fill the half-open box [u0,u1) x [y0,y1) x [z0,z1).

        Degenerate extents are clamped to one voxel.  ``hollow`` paints
        only the four vertical faces.
        """
        u1 = max(u1, u0 + 1)
        y1 = max(y1, y0 + 1)
        z1 = max(z1, z0 + 1)
        for y in range(y0, y1):
            for u in range(u0, u1):
                for z in range(z0, z1):
                    if hollow and u0 < u < u1 - 1 and z0 < z < z1 - 1:
                        continue
                    self._write(u, y, z, color, False)

    def column(self, u, y0, y1, z, color: str):
        """Vertical run of voxels from ``y0`` (inclusive) to ``y1`` (exclusive)."""
        for y in range(y0, max(y1, y0 + 1)):
            self._write(u, y, z, color, False)

    def build(self) -> VoxelSet:
        if not self._cells:
            return VoxelSet.empty()
        return VoxelSet(self._cells, self._colors, self._light)
