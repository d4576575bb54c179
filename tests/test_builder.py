"""Tests for scene assembly, GLB export and the CLI."""
import numpy as np
import pytest
from click.testing import CliRunner

from straitbuilder import builder as builder_mod
from straitbuilder import glb
from straitbuilder.builder import StraitBuilder, _cache_key
from straitbuilder.cli import cli
from straitbuilder.generators import EntityKind, generate_entity
from straitbuilder.instances import build_instance_buffer, sync_instances
from straitbuilder.models import Mode, Side
from straitbuilder.partition import partition


CHEAP_KINDS = {EntityKind.TRAFFIC, EntityKind.FLAG, EntityKind.SEAGULL}


@pytest.fixture
def small_builder():
    """Builder whose plan is cut down to cars, the flag and the gulls."""
    b = StraitBuilder(seed=7, use_cache=False)
    full_plan = b.plan
    b.plan = lambda t=0.0: [p for p in full_plan(t) if p.request.kind in CHEAP_KINDS]
    return b


class TestPlan:
    """Tests for the scene layout."""

    def test_every_kind_placed(self):
        kinds = {p.request.kind for p in StraitBuilder(seed=7).plan()}
        assert kinds == set(EntityKind)

    def test_unique_names(self):
        names = [p.name for p in StraitBuilder(seed=7).plan()]
        assert len(names) == len(set(names))

    def test_both_shores(self):
        """Shore-fixed families appear once per side."""
        plan = StraitBuilder(seed=7).plan()
        for kind in (EntityKind.TERRAIN, EntityKind.APARTMENT):
            sides = [p.request.side for p in plan if p.request.kind is kind]
            assert sides.count(Side.EUROPE) == sides.count(Side.ASIA) > 0

    def test_moving_entities_posed(self):
        plan = StraitBuilder(seed=7).plan(t=3.0)
        for p in plan:
            if p.request.kind in (EntityKind.FERRY, EntityKind.DOLPHIN, EntityKind.TRAFFIC):
                assert p.pose is not None
            if p.request.kind is EntityKind.TERRAIN:
                assert p.pose is None


class TestBuild:
    """Tests for StraitBuilder.build()."""

    def test_counts(self, small_builder):
        """Car counts add up to four lanes of three cars."""
        counts = small_builder.build(Mode.NIGHT).counts()
        assert counts['traffic']['entities'] == 12
        assert counts['traffic']['light'] == 12 * 4
        assert counts['flag']['light'] == 0

    def test_same_mode_no_rebuild(self, small_builder):
        """Building the same mode again reuses every buffer."""
        first = small_builder.build(Mode.DAY)
        rebuilds = small_builder.rebuild_count()
        second = small_builder.build(Mode.DAY)
        assert small_builder.rebuild_count() == rebuilds
        for a, b in zip(first.entries, second.entries):
            assert a.opaque is b.opaque
            assert a.light is b.light

    def test_mode_toggle_rebuilds_lit_only(self, small_builder):
        """Only entities with lamps get new buffers on a mode change."""
        day = small_builder.build(Mode.DAY)
        rebuilds = small_builder.rebuild_count()
        night = small_builder.build(Mode.NIGHT)
        assert small_builder.rebuild_count() == rebuilds + 2 * 12
        for a, b in zip(day.entries, night.entries):
            if a.placement.request.kind is EntityKind.TRAFFIC:
                assert a.opaque is not b.opaque
            else:
                assert a.opaque is b.opaque

    def test_world_buffers_posed(self, small_builder):
        """Posed entities are moved by their pose matrix."""
        scene = small_builder.build(Mode.DAY, t=2.0)
        buffers = dict(scene.world_buffers())
        entry = next(e for e in scene.entries if e.placement.name == 'car_0_0')
        expected = entry.placement.pose.matrix() @ entry.opaque.transforms[0]
        assert np.allclose(buffers['car_0_0'].transforms[0], expected, atol=1e-5)

    def test_parallel_generation(self):
        """A process pool gives the same scene as the serial path."""
        serial = StraitBuilder(seed=7, use_cache=False)
        pooled = StraitBuilder(seed=7, use_cache=False, max_workers=2)
        for b in (serial, pooled):
            full_plan = b.plan
            b.plan = lambda t=0.0, f=full_plan: [p for p in f(t) if p.request.kind is EntityKind.TRAFFIC]
        for a, b in zip(serial.build().entries, pooled.build().entries):
            assert a.voxels.same_as(b.voxels)


class TestGlbExport:
    """Tests for GLB export."""

    def test_writes_binary_gltf(self, tmp_path):
        parts = partition(generate_entity(EntityKind.TRAFFIC, 1, Side.ASIA, Mode.NIGHT))
        out = tmp_path / "car.glb"
        result = glb.export_scene(
            [('car', sync_instances(parts.opaque)),
             ('car_light', build_instance_buffer(parts.light, emissive=True))],
            str(out))
        assert result == str(out)
        assert out.read_bytes()[:4] == b'glTF'

    def test_empty_raises(self, tmp_path):
        with pytest.raises(ValueError, match="No voxels"):
            glb.export_scene([('nothing', None)], str(tmp_path / "empty.glb"))

    def test_scene_cache(self, small_builder, tmp_path, monkeypatch):
        """A second export with the same key is served from the cache."""
        monkeypatch.setattr(builder_mod, '_GLB_CACHE', tmp_path / "cache")
        small_builder.use_cache = True
        small_builder.generate_glb(Mode.DAY, str(tmp_path / "a.glb"))
        assert (tmp_path / "cache" / _cache_key(7, Mode.DAY, 0.0)).exists()
        rebuilds = small_builder.rebuild_count()
        small_builder.generate_glb(Mode.DAY, str(tmp_path / "b.glb"))
        assert small_builder.rebuild_count() == rebuilds
        assert (tmp_path / "b.glb").read_bytes() == (tmp_path / "a.glb").read_bytes()


class TestCli:
    """Tests for the click commands."""

    def test_entity_command(self, tmp_path):
        out = tmp_path / "gull.glb"
        result = CliRunner().invoke(cli, ['entity', 'seagull', '--output', str(out)])
        assert result.exit_code == 0, result.output
        assert "seagull:" in result.output
        assert out.exists()

    def test_unknown_kind(self, tmp_path):
        result = CliRunner().invoke(cli, ['entity', 'submarine', '--output', str(tmp_path / "x.glb")])
        assert result.exit_code == 1
        assert "Unknown entity kind" in result.output

    def test_bad_mode(self):
        result = CliRunner().invoke(cli, ['entity', 'seagull', '--mode', 'dusk'])
        assert result.exit_code == 2
