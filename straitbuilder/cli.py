"""Click CLI commands for StraitBuilder."""

import logging

import click

from .builder import StraitBuilder
from .constants import DEFAULT_SCENE_SEED
from .generators import EntityKind, generate_entity
from .instances import build_instance_buffer
from .models import Mode, Side
from .partition import partition
from . import glb as glb_mod

logger = logging.getLogger(__name__)

_MODES = click.Choice([m.value for m in Mode])
_SIDES = click.Choice([s.value for s in Side])


def _progress(pct, msg):
    click.echo(f"[{pct:3.0f}%] {msg}")


@click.group()
def cli():
    """StraitBuilder CLI for generating voxel strait scenes."""
    pass


@cli.command()
@click.option('--mode', '-m', type=_MODES, default='day', help='Day or night lighting')
@click.option('--seed', '-s', type=int, default=DEFAULT_SCENE_SEED, help='Scene seed')
@click.option('--time', '-t', 'at', type=float, default=0.0, help='Animation time in seconds')
@click.option('--output', '-o', default='strait.glb', help='Output GLB file path')
@click.option('--no-cache', is_flag=True, help='Bypass the GLB cache')
def build(mode: str, seed: int, at: float, output: str, no_cache: bool):
    """Build the full scene and write it as a GLB file."""
    try:
        builder = StraitBuilder(seed=seed, use_cache=not no_cache)
        result = builder.generate_glb(mode, output, t=at, progress_callback=_progress)
        click.echo(f"Wrote {result}")
    except Exception as e:
        logger.error(f"Error building scene: {e}")
        raise click.ClickException(str(e))


@cli.command()
@click.argument('kind')
@click.option('--seed', '-s', type=int, default=0, help='Entity seed')
@click.option('--side', type=_SIDES, default='europe', help='Shore the entity belongs to')
@click.option('--mode', '-m', type=_MODES, default='day', help='Day or night lighting')
@click.option('--output', '-o', default=None, help='Output GLB file path')
def entity(kind: str, seed: int, side: str, mode: str, output: str):
    """Generate a single entity and write it as a GLB file.

    KIND is one of the entity kinds, e.g. mansion_a, bridge or ferry.
    """
    try:
        voxels = generate_entity(kind, seed, side, mode)
        parts = partition(voxels)
        click.echo(f"{kind}: {len(parts.opaque)} opaque, {len(parts.light)} light")
        buffers = [('opaque', build_instance_buffer(parts.opaque)),
                   ('light', build_instance_buffer(parts.light, emissive=True))]
        result = glb_mod.export_scene(buffers, output or f"{kind}_{seed}_{side}_{mode}.glb")
        click.echo(f"Wrote {result}")
    except Exception as e:
        logger.error(f"Error generating entity: {e}")
        raise click.ClickException(str(e))


@cli.command()
@click.option('--mode', '-m', type=_MODES, default='day', help='Day or night lighting')
@click.option('--seed', '-s', type=int, default=DEFAULT_SCENE_SEED, help='Scene seed')
def stats(mode: str, seed: int):
    """Print voxel counts per entity kind."""
    try:
        counts = StraitBuilder(seed=seed).stats(mode)
    except Exception as e:
        logger.error(f"Error building scene: {e}")
        raise click.ClickException(str(e))

    click.echo(f"{'kind':<14}{'entities':>10}{'opaque':>10}{'light':>10}")
    for kind in EntityKind:
        row = counts.get(kind.value)
        if row:
            click.echo(f"{kind.value:<14}{row['entities']:>10}{row['opaque']:>10}{row['light']:>10}")

