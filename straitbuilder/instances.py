"""Instance buffers: one transform and one color per voxel.

A buffer is what a renderer uploads for an instanced unit cube.  The
manager keeps one buffer per stream and only rebuilds it when it is
handed a different VoxelSet object; handing it the same object again is
free.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import trimesh

from .constants import VOXEL_SCALE
from .models import VoxelSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstanceBuffer:
    count: int
    transforms: np.ndarray      # (N, 4, 4) float32
    colors: np.ndarray          # (N, 3) float32 in 0..1
    emissive: bool = False

    @property
    def translations(self) -> np.ndarray:
        return self.transforms[:, :3, 3]


def _unit_transform() -> np.ndarray:
    """Uniform voxel scale; translations are written per instance."""
    return trimesh.transformations.scale_matrix(VOXEL_SCALE)


def build_instance_buffer(voxel_set: VoxelSet, emissive: bool = False) -> Optional[InstanceBuffer]:
    """Lower a VoxelSet to an InstanceBuffer, or None when it is empty."""
    count = len(voxel_set)
    if count == 0:
        return None
    transforms = np.repeat(_unit_transform()[np.newaxis], count, axis=0).astype(np.float32)
    transforms[:, :3, 3] = voxel_set.positions
    colors = voxel_set.colors.astype(np.float32) / 255.0
    transforms.setflags(write=False)
    colors.setflags(write=False)
    return InstanceBuffer(count=count, transforms=transforms, colors=colors, emissive=emissive)


def sync_instances(voxel_set: VoxelSet) -> Optional[InstanceBuffer]:
    """Stateless form: always builds a fresh buffer."""
    return build_instance_buffer(voxel_set)


class InstanceBufferManager:
    """Holds the buffer for one stream (one entity's opaque or light voxels)."""

    def __init__(self, emissive: bool = False):
        self.emissive = emissive
        self.rebuilds = 0
        self._source = None
        self._buffer = None

    def sync(self, voxel_set: VoxelSet) -> Optional[InstanceBuffer]:
        """Return the buffer for ``voxel_set``, rebuilding only if the
        VoxelSet object differs from the last one synced."""
        if voxel_set is self._source:
            return self._buffer
        self._source = voxel_set
        self._buffer = build_instance_buffer(voxel_set, emissive=self.emissive)
        self.rebuilds += 1
        logger.debug(f"Instance buffer rebuilt: {len(voxel_set)} instances")
        return self._buffer

    @property
    def buffer(self) -> Optional[InstanceBuffer]:
        return self._buffer
