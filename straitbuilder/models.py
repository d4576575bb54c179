"""Data classes, enums and path management."""

import pathlib
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Tuple

import numpy as np

from .constants import OUTPUT_DIR, CACHE_DIR, VOXEL_SCALE


class PathManager:
    """Manage output and cache paths for scene builds."""

    @staticmethod
    def get_output_path(filename: str) -> pathlib.Path:
        """Get the output file path."""
        path = pathlib.Path(filename)
        if path.is_absolute():
            return path
        return OUTPUT_DIR / path

    @staticmethod
    def get_cache_path(*parts: str) -> pathlib.Path:
        """Get a path under the on-disk cache directory."""
        return CACHE_DIR.joinpath(*parts)


class Side(str, Enum):
    EUROPE = 'europe'
    ASIA = 'asia'

    @property
    def x_dir(self) -> int:
        """Sign applied to lateral distances on this shore."""
        return 1 if self is Side.ASIA else -1


class Mode(str, Enum):
    DAY = 'day'
    NIGHT = 'night'


class Role(str, Enum):
    OPAQUE = 'opaque'
    LIGHT = 'light'


class ZoneKind(str, Enum):
    BRIDGE_CORRIDOR = 'bridge_corridor'
    MOSQUE_PLAZA = 'mosque_plaza'
    TOWER_FOOTPRINT = 'tower_footprint'


class Voxel(NamedTuple):
    position: Tuple[float, float, float]
    color: Tuple[int, int, int]
    role: Role


@dataclass(frozen=True)
class Palette:
    """Color set for one structure instance.

    ``accent`` is the board/siding color used by plank facades; it falls
    back to the wall color where a style has no siding.
    """
    name: str
    wall: str
    trim: str
    roof: str
    glass_day: str = '#1e293b'
    glass_night: str = '#fbbf24'
    accent: Optional[str] = None

    @property
    def board(self) -> str:
        return self.accent or self.wall


@dataclass(frozen=True)
class ExclusionZone:
    """Reserved ground region in world (x, z) coordinates.

    Rectangular zones carry ``half_extents``; radial zones carry ``radius``.
    """
    kind: ZoneKind
    center: Tuple[float, float]
    half_extents: Optional[Tuple[float, float]] = None
    radius: Optional[float] = None

    @property
    def is_radial(self) -> bool:
        return self.radius is not None

    def mirrored(self) -> 'ExclusionZone':
        """The same zone reflected onto the opposite shore."""
        cx, cz = self.center
        return ExclusionZone(self.kind, (-cx, cz), self.half_extents, self.radius)


def _frozen(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


class VoxelSet:
    """Ordered, read-only voxels produced by one generator call.

    Stored column-wise: integer grid indices ``(N, 3)``, RGB colors
    ``(N, 3)`` and a boolean light mask ``(N,)``.  World positions are the
    grid indices times ``VOXEL_SCALE``.  Equality is identity; use
    :meth:`same_as` for content comparison.
    """

    __slots__ = ('_indices', '_colors', '_light')

    def __init__(self, indices, colors, light):
        self._indices = _frozen(np.array(indices, dtype=np.int32).reshape(-1, 3))
        self._colors = _frozen(np.array(colors, dtype=np.uint8).reshape(-1, 3))
        self._light = _frozen(np.array(light, dtype=bool).reshape(-1))
        if not len(self._indices) == len(self._colors) == len(self._light):
            raise ValueError("VoxelSet columns must have the same length")

    @classmethod
    def empty(cls) -> 'VoxelSet':
        return cls(np.zeros((0, 3)), np.zeros((0, 3)), np.zeros(0))

    def __reduce__(self):
        return (VoxelSet, (self._indices, self._colors, self._light))

    def __len__(self) -> int:
        return len(self._indices)

    def __iter__(self):
        for idx, rgb, lit in zip(self._indices, self._colors, self._light):
            yield Voxel(
                position=tuple(float(v) * VOXEL_SCALE for v in idx),
                color=tuple(int(c) for c in rgb),
                role=Role.LIGHT if lit else Role.OPAQUE,
            )

    def __repr__(self) -> str:
        return f"VoxelSet({len(self)} voxels, {int(self._light.sum())} light)"

    @property
    def indices(self) -> np.ndarray:
        return self._indices

    @property
    def colors(self) -> np.ndarray:
        return self._colors

    @property
    def light_mask(self) -> np.ndarray:
        return self._light

    @property
    def positions(self) -> np.ndarray:
        """World-space positions, shape ``(N, 3)``."""
        return self._indices.astype(np.float64) * VOXEL_SCALE

    def select(self, mask) -> 'VoxelSet':
        """Subset by boolean mask, keeping order."""
        mask = np.asarray(mask, dtype=bool)
        return VoxelSet(self._indices[mask], self._colors[mask], self._light[mask])

    def position_keys(self) -> set:
        """Grid indices as a set of tuples, for order-free comparisons."""
        return set(map(tuple, self._indices.tolist()))

    def same_as(self, other: 'VoxelSet') -> bool:
        """Exact content equality: positions, colors, roles and order."""
        return (np.array_equal(self._indices, other._indices) and
                np.array_equal(self._colors, other._colors) and
                np.array_equal(self._light, other._light))

    def bounds(self) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        """World-space (min, max) corners, or None when empty."""
        if len(self) == 0:
            return None
        pos = self.positions
        return pos.min(axis=0), pos.max(axis=0)

    @staticmethod
    def concat(sets) -> 'VoxelSet':
        """Join several sets in order (positions may repeat across inputs)."""
        sets = [s for s in sets if len(s)]
        if not sets:
            return VoxelSet.empty()
        return VoxelSet(np.concatenate([s._indices for s in sets]),
                        np.concatenate([s._colors for s in sets]),
                        np.concatenate([s._light for s in sets]))
