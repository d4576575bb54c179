"""StraitBuilder package: procedural voxel scenes of a city strait.

Import constants FIRST so logging and environment overrides are set up
before any generator module loads.
"""

from straitbuilder import constants as _constants  # noqa: F401

from straitbuilder.builder import StraitBuilder
from straitbuilder.generators import EntityKind, generate_entity, generate_many
from straitbuilder.instances import InstanceBufferManager, sync_instances
from straitbuilder.models import Mode, Side, VoxelSet
from straitbuilder.partition import partition
