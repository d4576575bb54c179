"""Tests for the opaque/light partitioner."""
import numpy as np

from straitbuilder.generators import EntityKind, generate_entity
from straitbuilder.models import Mode, Side, VoxelSet
from straitbuilder.partition import partition


class TestPartition:
    """Tests for partition()."""

    def test_complete_and_disjoint(self, first_slot, mode):
        """The halves add up to the input and share no position."""
        voxels = generate_entity(EntityKind.MANSION_A, first_slot, Side.EUROPE, mode)
        parts = partition(voxels)
        assert len(parts.opaque) + len(parts.light) == len(voxels)
        assert not parts.opaque.position_keys() & parts.light.position_keys()
        assert parts.opaque.position_keys() | parts.light.position_keys() == voxels.position_keys()

    def test_roles(self, first_slot):
        """Each half holds only its own role."""
        parts = partition(generate_entity(EntityKind.MANSION_A, first_slot, mode=Mode.NIGHT))
        assert not parts.opaque.light_mask.any()
        assert parts.light.light_mask.all()
        assert len(parts.light) > 0

    def test_day_all_opaque(self, first_slot):
        """By day nothing is emissive and the input passes through."""
        voxels = generate_entity(EntityKind.MANSION_A, first_slot, mode=Mode.DAY)
        parts = partition(voxels)
        assert parts.opaque is voxels
        assert len(parts.light) == 0

    def test_order_kept(self):
        """Relative order within each half follows the input."""
        voxels = VoxelSet([(0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0)],
                          [(1, 1, 1)] * 4, [False, True, False, True])
        parts = partition(voxels)
        assert parts.opaque.indices[:, 0].tolist() == [0, 2]
        assert parts.light.indices[:, 0].tolist() == [1, 3]

    def test_empty(self):
        parts = partition(VoxelSet.empty())
        assert len(parts.opaque) == 0 and len(parts.light) == 0
        assert isinstance(parts.light.indices, np.ndarray)
