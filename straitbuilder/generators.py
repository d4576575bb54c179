"""Entity registry: one generation function per entity kind.

``generate_entity`` is the single entry point the scene builder uses.
Results are memoised on the full ``(kind, seed, side, mode)`` key, so
asking again for the same entity returns the very same VoxelSet object;
the instance buffer layer relies on that identity to skip rebuilds.
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from enum import Enum
from functools import lru_cache
from typing import List, NamedTuple, Optional

from .models import Mode, Side, VoxelSet
from . import apartments, bridge, landmarks, mansions, terrain, watercraft, wildlife

logger = logging.getLogger(__name__)


class EntityKind(str, Enum):
    TERRAIN = 'terrain'
    MANSION_A = 'mansion_a'
    MANSION_B = 'mansion_b'
    MANSION_C = 'mansion_c'
    APARTMENT = 'apartment'
    BRIDGE = 'bridge'
    TRAFFIC = 'traffic'
    MOSQUE = 'mosque'
    TOWER = 'tower'
    FLAG = 'flag'
    FERRY = 'ferry'
    TANKER = 'tanker'
    FISHING_BOAT = 'fishing_boat'
    DOLPHIN = 'dolphin'
    SEAGULL = 'seagull'


_GENERATORS = {
    EntityKind.TERRAIN: terrain.generate_terrain,
    EntityKind.MANSION_A: mansions.generate_type_a,
    EntityKind.MANSION_B: mansions.generate_type_b,
    EntityKind.MANSION_C: mansions.generate_type_c,
    EntityKind.APARTMENT: apartments.generate_apartment,
    EntityKind.BRIDGE: bridge.generate_bridge,
    EntityKind.TRAFFIC: bridge.generate_car,
    EntityKind.MOSQUE: landmarks.generate_mosque,
    EntityKind.TOWER: landmarks.generate_tower,
    EntityKind.FLAG: landmarks.generate_flag,
    EntityKind.FERRY: watercraft.generate_ferry,
    EntityKind.TANKER: watercraft.generate_tanker,
    EntityKind.FISHING_BOAT: watercraft.generate_fishing_boat,
    EntityKind.DOLPHIN: wildlife.generate_dolphin,
    EntityKind.SEAGULL: wildlife.generate_seagull,
}

MANSION_KINDS = (EntityKind.MANSION_A, EntityKind.MANSION_B, EntityKind.MANSION_C)


def entity_kind(kind) -> EntityKind:
    """Normalise a kind name or enum member; unknown names raise ValueError."""
    if isinstance(kind, EntityKind):
        return kind
    try:
        return EntityKind(str(kind).lower())
    except ValueError:
        valid = ', '.join(k.value for k in EntityKind)
        raise ValueError(f"Unknown entity kind '{kind}'. Expected one of: {valid}") from None


class EntityRequest(NamedTuple):
    kind: EntityKind
    seed: int
    side: Side = Side.EUROPE
    mode: Mode = Mode.DAY


@lru_cache(maxsize=None)
def _generate(kind: EntityKind, seed: int, side: Side, mode: Mode) -> VoxelSet:
    return _GENERATORS[kind](seed, side, mode)


def generate_entity(kind, seed: int, side=Side.EUROPE, mode=Mode.DAY) -> VoxelSet:
    """Generate (or fetch the memoised) VoxelSet for one entity.

    Args:
        kind: ``EntityKind`` member or its string value
        seed: placement or variant seed
        side: shore the entity belongs to
        mode: day or night
    """
    return _generate(entity_kind(kind), int(seed), Side(side), Mode(mode))


def clear_cache():
    """Forget every memoised VoxelSet."""
    _generate.cache_clear()


def cache_info():
    return _generate.cache_info()


def _generate_request(request: EntityRequest) -> VoxelSet:
    return generate_entity(*request)


def generate_many(requests, max_workers: Optional[int] = None) -> List[VoxelSet]:
    """Generate many entities, in request order.

    Work fans out over a process pool when there is more than one request
    and ``max_workers`` is not 1; results are identical to the serial path
    because every generator is a pure function of its request.
    """
    requests = [EntityRequest(entity_kind(r[0]), *r[1:]) for r in requests]
    if max_workers == 1 or len(requests) < 2:
        return [_generate_request(r) for r in requests]

    logger.info(f"Generating {len(requests)} entities in parallel")
    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(_generate_request, requests))
