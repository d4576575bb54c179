"""Tests for the entity registry and the per-entity generators."""
import numpy as np
import pytest

from straitbuilder.apartments import apartment_seeds
from straitbuilder.bridge import DECK_Y, HALF_SPAN, HALF_WIDTH, Z0
from straitbuilder.constants import DEFAULT_SCENE_SEED, MOSQUE_ANCHOR
from straitbuilder.generators import (
    EntityKind, EntityRequest, entity_kind, generate_entity, generate_many,
)
from straitbuilder.mansions import (
    mansion_slots, mansion_variant, plan_type_a, plan_type_b, plan_type_c,
)
from straitbuilder.models import Mode, Role, Side, VoxelSet
from straitbuilder.palettes import YALI_B_PALETTES, YALI_C_PALETTES, hex_to_rgb


MANSION_KINDS = (EntityKind.MANSION_A, EntityKind.MANSION_B, EntityKind.MANSION_C)


def seed_for(kind):
    """A seed that gives ``kind`` real geometry on either shore."""
    if kind in MANSION_KINDS:
        return -182
    if kind is EntityKind.MOSQUE:
        return MOSQUE_ANCHOR
    return 0


# (kind, seed) pairs that produce geometry in both modes
LIT_ENTITIES = (
    (EntityKind.MANSION_A, -182),
    (EntityKind.MANSION_B, -142),
    (EntityKind.MANSION_C, -102),
    (EntityKind.APARTMENT, 0),
    (EntityKind.BRIDGE, 0),
    (EntityKind.TRAFFIC, 3),
    (EntityKind.MOSQUE, MOSQUE_ANCHOR),
    (EntityKind.FERRY, 0),
    (EntityKind.TANKER, 0),
    (EntityKind.FISHING_BOAT, 5),
)


class TestRegistry:
    """Tests for kind lookup and memoisation."""

    def test_every_kind_registered(self):
        """Each kind resolves to a generator returning a VoxelSet."""
        for kind in (EntityKind.FLAG, EntityKind.SEAGULL, EntityKind.DOLPHIN):
            assert isinstance(generate_entity(kind, 0), VoxelSet)

    def test_string_kinds(self):
        """Kind names are accepted case-insensitively."""
        assert entity_kind('mansion_a') is EntityKind.MANSION_A
        assert entity_kind('FERRY') is EntityKind.FERRY

    def test_unknown_kind(self):
        """Unknown names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown entity kind"):
            generate_entity('submarine', 0)

    def test_memoised_identity(self, fresh_cache, first_slot):
        """The same key returns the very same VoxelSet object."""
        a = generate_entity(EntityKind.MANSION_A, first_slot, Side.EUROPE, Mode.DAY)
        b = generate_entity('mansion_a', first_slot, 'europe', 'day')
        assert a is b

    def test_different_keys_differ(self, fresh_cache, first_slot):
        """Mode is part of the key."""
        day = generate_entity(EntityKind.MANSION_A, first_slot, Side.EUROPE, Mode.DAY)
        night = generate_entity(EntityKind.MANSION_A, first_slot, Side.EUROPE, Mode.NIGHT)
        assert day is not night

    @pytest.mark.parametrize("kind", list(EntityKind), ids=lambda k: k.value)
    def test_deterministic_after_cache_clear(self, fresh_cache, kind):
        """Regenerating from scratch gives identical content."""
        from straitbuilder.generators import clear_cache
        first = generate_entity(kind, seed_for(kind))
        clear_cache()
        second = generate_entity(kind, seed_for(kind))
        assert first is not second
        assert first.same_as(second)

    def test_parallel_matches_serial(self, fresh_cache):
        """The process pool path yields the same voxels in the same order."""
        requests = [
            EntityRequest(EntityKind.TRAFFIC, 1, Side.ASIA, Mode.NIGHT),
            EntityRequest(EntityKind.FLAG, 0, Side.ASIA, Mode.DAY),
            EntityRequest(EntityKind.SEAGULL, 0, Side.EUROPE, Mode.DAY),
            EntityRequest(EntityKind.FISHING_BOAT, 9, Side.EUROPE, Mode.NIGHT),
        ]
        parallel = generate_many(requests, max_workers=2)
        serial = generate_many(requests, max_workers=1)
        assert len(parallel) == len(serial) == len(requests)
        for p, s in zip(parallel, serial):
            assert p.same_as(s)


class TestInvariants:
    """Properties every generator must hold."""

    @pytest.mark.parametrize("kind,seed", LIT_ENTITIES, ids=lambda v: str(getattr(v, 'value', v)))
    def test_mode_does_not_move_voxels(self, kind, seed):
        """Day and night differ only in color and role, never in position."""
        day = generate_entity(kind, seed, Side.EUROPE, Mode.DAY)
        night = generate_entity(kind, seed, Side.EUROPE, Mode.NIGHT)
        assert len(day) > 0
        assert np.array_equal(day.indices, night.indices)

    @pytest.mark.parametrize("kind,seed", LIT_ENTITIES, ids=lambda v: str(getattr(v, 'value', v)))
    def test_day_has_no_light(self, kind, seed):
        """Only night output carries LIGHT voxels."""
        day = generate_entity(kind, seed, Side.EUROPE, Mode.DAY)
        night = generate_entity(kind, seed, Side.EUROPE, Mode.NIGHT)
        assert not day.light_mask.any()
        assert night.light_mask.any()

    @pytest.mark.parametrize("kind", list(EntityKind), ids=lambda k: k.value)
    def test_mirror_symmetry(self, kind, mode):
        """ASIA output is EUROPE output with x negated."""
        seed = seed_for(kind)
        europe = generate_entity(kind, seed, Side.EUROPE, mode)
        asia = generate_entity(kind, seed, Side.ASIA, mode)
        mirrored = europe.indices * np.array([-1, 1, 1])
        assert np.array_equal(mirrored, asia.indices)
        assert np.array_equal(europe.colors, asia.colors)
        assert np.array_equal(europe.light_mask, asia.light_mask)

    @pytest.mark.parametrize("seed", mansion_slots())
    def test_grid_aligned_unique(self, seed):
        """Positions are multiples of the voxel scale and never repeat."""
        voxels = generate_entity(EntityKind.MANSION_B, seed)
        assert len(voxels.position_keys()) == len(voxels)
        assert np.allclose(voxels.positions / 0.125, voxels.indices)

    def test_voxel_records(self, first_slot):
        """Iteration yields Voxel records with world positions and roles."""
        voxels = generate_entity(EntityKind.MANSION_A, first_slot, Side.EUROPE, Mode.NIGHT)
        records = list(voxels)
        assert len(records) == len(voxels)
        roles = {v.role for v in records}
        assert roles == {Role.OPAQUE, Role.LIGHT}
        for v in records[:50]:
            assert all(abs(c / 0.125 - round(c / 0.125)) < 1e-9 for c in v.position)
            assert all(0 <= c <= 255 for c in v.color)


class TestBridgeDeck:
    """The deck covers its full span and width at deck height."""

    def test_full_deck(self):
        """Every (x, z) cell of the deck exists at deck height."""
        voxels = generate_entity(EntityKind.BRIDGE, 0, Side.EUROPE, Mode.DAY)
        keys = voxels.position_keys()
        assert HALF_SPAN * 0.125 == 32.0
        assert HALF_WIDTH * 0.125 == 2.25
        for u in range(-HALF_SPAN, HALF_SPAN + 1):
            for j in range(-HALF_WIDTH, HALF_WIDTH + 1):
                assert (u, DECK_Y, Z0 + j) in keys

    def test_centre_line_color(self):
        """The centre line is painted in the line color."""
        voxels = generate_entity(EntityKind.BRIDGE, 0, Side.EUROPE, Mode.DAY)
        idx = voxels.indices
        line = (idx[:, 1] == DECK_Y) & (idx[:, 2] == Z0)
        assert line.sum() == 2 * HALF_SPAN + 1
        assert (voxels.colors[line] == (248, 250, 252)).all()

    def test_beacons_light_at_night(self):
        """Pylon beacons are the bridge's only lights."""
        night = generate_entity(EntityKind.BRIDGE, 0, Side.EUROPE, Mode.NIGHT)
        assert night.light_mask.sum() == 4


class TestMansionTypeA:
    """Floors and roof of the plank-sided style."""

    @pytest.mark.parametrize("seed", mansion_slots())
    def test_floor_count(self, seed):
        """Two or three floors, never anything else."""
        assert plan_type_a(seed).floors in (2, 3)

    @pytest.mark.parametrize("seed", mansion_slots())
    def test_roof_contains_top_floor(self, seed):
        """Every roof layer but the cap strictly contains the top floor."""
        plan = plan_type_a(seed)
        tu0, tu1, tk0, tk1 = plan.floor_footprints[-1]
        *eaves, cap = plan.roof_footprints
        assert eaves
        for u0, u1, k0, k1, _ in eaves:
            assert u0 < tu0 and u1 > tu1 and k0 < tk0 and k1 > tk1
        assert cap[:4] == (tu0, tu1, tk0, tk1)

    def test_generated_roof_matches_plan(self, first_slot):
        """The highest voxel is the roof cap above the last floor."""
        plan = plan_type_a(first_slot)
        voxels = generate_entity(EntityKind.MANSION_A, first_slot)
        assert len(voxels) > 0
        assert voxels.indices[:, 1].max() == plan.roof_footprints[-1][4]
        assert plan.roof_y == plan.base_y + plan.floors * plan.floor_height

    def test_quay_at_base(self, first_slot):
        """The quay is laid at the floor level, not sunk into the shore."""
        plan = plan_type_a(first_slot)
        voxels = generate_entity(EntityKind.MANSION_A, first_slot)
        assert voxels.indices[:, 1].min() == plan.base_y


class TestMansionSlots:
    """Every waterfront slot builds in the style the scene picks for it."""

    @pytest.mark.parametrize("seed", mansion_slots())
    def test_variant_generates(self, seed, side):
        kind = MANSION_KINDS[mansion_variant(seed)]
        assert isinstance(generate_entity(kind, seed, side), VoxelSet)

    @pytest.mark.parametrize("kind", MANSION_KINDS, ids=lambda k: k.value)
    def test_every_style_builds_somewhere(self, kind):
        assert any(len(generate_entity(kind, seed)) for seed in mansion_slots())


class TestTerrainContact:
    """Structures stand on the shore without sharing cells with it."""

    @pytest.fixture
    def ground(self, side):
        return generate_entity(EntityKind.TERRAIN, DEFAULT_SCENE_SEED, side).position_keys()

    def _assert_clear(self, voxels, ground):
        shared = voxels.position_keys() & ground
        assert not shared, f"{len(shared)} cells shared with terrain, e.g. {sorted(shared)[:3]}"

    @pytest.mark.parametrize("seed", mansion_slots())
    def test_mansions(self, seed, side, ground):
        kind = MANSION_KINDS[mansion_variant(seed)]
        self._assert_clear(generate_entity(kind, seed, side), ground)

    def test_apartments(self, side, ground):
        for seed in apartment_seeds():
            self._assert_clear(generate_entity(EntityKind.APARTMENT, seed, side), ground)

    def test_mosque(self, side, ground):
        mosque = generate_entity(EntityKind.MOSQUE, MOSQUE_ANCHOR, side)
        assert len(mosque) > 0
        self._assert_clear(mosque, ground)

    def test_bridge(self, side, ground):
        """The one bridge spans the channel and lands on both shores."""
        self._assert_clear(generate_entity(EntityKind.BRIDGE, 0, Side.EUROPE), ground)


class TestMosque:
    """Mosque candidates against the reserved zones."""

    def test_anchor_builds(self):
        """The scene anchor sits on its own plaza and is built."""
        assert len(generate_entity(EntityKind.MOSQUE, MOSQUE_ANCHOR, Side.EUROPE)) > 0

    def test_corridor_candidate_empty(self):
        """A candidate moved into the bridge corridor yields nothing."""
        voxels = generate_entity(EntityKind.MOSQUE, -40, Side.EUROPE, Mode.NIGHT)
        assert len(voxels) == 0


class TestWatercraft:
    """Ships and wildlife are local models centred on their origin."""

    @pytest.mark.parametrize("kind", [EntityKind.FERRY, EntityKind.TANKER, EntityKind.FISHING_BOAT])
    def test_hull_on_waterline(self, kind):
        """The keel sits at y = 0 and the hull is centred across."""
        voxels = generate_entity(kind, 0)
        idx = voxels.indices
        assert idx[:, 1].min() == 0
        assert idx[:, 0].min() == -idx[:, 0].max()

    def test_fishing_nets_vary_by_seed(self):
        """Nets are piled differently for different seeds."""
        sets = [generate_entity(EntityKind.FISHING_BOAT, s) for s in range(6)]
        assert len({len(s) for s in sets}) > 1

    @pytest.mark.parametrize("kind", [EntityKind.DOLPHIN, EntityKind.SEAGULL])
    def test_wildlife_small(self, kind):
        voxels = generate_entity(kind, 0)
        assert 0 < len(voxels) < 1000
        assert not generate_entity(kind, 0, mode=Mode.NIGHT).light_mask.any()


class TestMansionPalettes:
    """Styles B and C pick their scheme from a small table per slot."""

    @pytest.mark.parametrize("planner,table", [
        (plan_type_b, YALI_B_PALETTES),
        (plan_type_c, YALI_C_PALETTES),
    ], ids=['b', 'c'])
    def test_palette_from_table(self, planner, table):
        names = {planner(seed).palette.name for seed in range(40)}
        assert names <= {p.name for p in table}
        assert len(names) > 1

    def test_palette_reaches_walls(self, first_slot):
        plan = plan_type_b(first_slot)
        voxels = generate_entity(EntityKind.MANSION_B, first_slot)
        assert tuple(hex_to_rgb(plan.palette.wall)) in {tuple(c) for c in voxels.colors.tolist()}
