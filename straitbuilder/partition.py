"""Split a VoxelSet into the opaque stream and the emissive light stream."""

from typing import NamedTuple

from .models import VoxelSet


class Partition(NamedTuple):
    opaque: VoxelSet
    light: VoxelSet


def partition(voxel_set: VoxelSet) -> Partition:
    """Regroup by role, keeping the original relative order in each half.

    ``len(opaque) + len(light) == len(voxel_set)`` and the two halves share
    no position.
    """
    mask = voxel_set.light_mask
    if not mask.any():
        return Partition(voxel_set, VoxelSet.empty())
    return Partition(voxel_set.select(~mask), voxel_set.select(mask))
