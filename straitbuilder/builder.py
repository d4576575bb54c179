"""StraitBuilder: thin orchestrator that delegates to focused modules."""

import logging
import shutil
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional

import numpy as np

from .animation import (
    DOLPHIN_PODS, Pose, ferry_pose, fishing_boat_pose, pod_member_poses,
    seagull_poses, tanker_pose, traffic_pose, TRAFFIC_LANES,
)
from .apartments import apartment_seeds
from .constants import (
    DEFAULT_SCENE_SEED, MOSQUE_ANCHOR, SEAGULL_COUNT, TRAFFIC_CARS_PER_LANE,
    USE_CACHE, VOXEL_SCALE,
)
from .generators import (
    MANSION_KINDS, EntityKind, EntityRequest, generate_entity, generate_many,
)
from .instances import InstanceBuffer, InstanceBufferManager
from .landmarks import tower_flag_mount
from .mansions import mansion_slots, mansion_variant
from .models import Mode, PathManager, Side, VoxelSet
from .partition import Partition, partition
from . import glb as glb_mod

logger = logging.getLogger(__name__)

# ── Caches ─────────────────────────────────────────────────────────────
_GLB_CACHE = PathManager.get_cache_path("glb")

_CACHE_VERSION = 1  # bump when any generator changes its output


def _cache_key(seed: int, mode: Mode, t: float) -> str:
    return f"scene_v{_CACHE_VERSION}_{seed}_{mode.value}_{t:.2f}.glb"


class Placement(NamedTuple):
    """One entity in the scene.  ``pose`` is None for entities generated
    directly in world coordinates (everything fixed to the shores)."""
    name: str
    request: EntityRequest
    pose: Optional[Pose] = None


@dataclass
class SceneEntry:
    placement: Placement
    voxels: VoxelSet
    partition: Partition
    opaque: Optional[InstanceBuffer]
    light: Optional[InstanceBuffer]


@dataclass
class SceneBuild:
    mode: Mode
    entries: List[SceneEntry]
    timings: Dict[str, float] = field(default_factory=dict)

    def counts(self) -> Dict[str, Dict[str, int]]:
        """Opaque/light voxel counts and entity count per entity kind."""
        totals = {}
        for entry in self.entries:
            kind = entry.placement.request.kind.value
            row = totals.setdefault(kind, Counter())
            row['entities'] += 1
            row['opaque'] += len(entry.partition.opaque)
            row['light'] += len(entry.partition.light)
        return {kind: dict(row) for kind, row in totals.items()}

    def world_buffers(self):
        """Yield ``(name, InstanceBuffer)`` with poses applied."""
        for entry in self.entries:
            pose = entry.placement.pose
            for suffix, buf in (('', entry.opaque), ('_light', entry.light)):
                if buf is None:
                    continue
                if pose is not None:
                    transforms = np.matmul(pose.matrix().astype(np.float32), buf.transforms)
                    buf = InstanceBuffer(buf.count, transforms, buf.colors, buf.emissive)
                yield entry.placement.name + suffix, buf


class StraitBuilder:
    def __init__(self, seed: int = DEFAULT_SCENE_SEED, use_cache: bool = USE_CACHE,
                 max_workers: Optional[int] = 1):
        """
        seed: scene seed (terrain, tower rocks, gull flock).
        use_cache: set False to bypass the on-disk GLB cache.
        max_workers: process pool size for the first generation pass;
            1 keeps everything in-process and memoised.
        """
        self.seed = seed
        self.use_cache = use_cache
        self.max_workers = max_workers
        self._voxels = {}           # EntityRequest -> VoxelSet
        self._current = {}          # placement name -> VoxelSet last synced
        self._partitions = {}       # placement name -> (VoxelSet, Partition)
        self._managers = {}         # placement name -> (opaque, light) managers

    def plan(self, t: float = 0.0) -> List[Placement]:
        """Every entity of the scene, posed at time ``t``."""
        placements = []

        def add(name, kind, seed, side, pose=None):
            placements.append(Placement(name, EntityRequest(kind, seed, side), pose))

        for side in Side:
            add(f"terrain_{side.value}", EntityKind.TERRAIN, self.seed, side)
        for slot in mansion_slots():
            kind = MANSION_KINDS[mansion_variant(slot)]
            for side in Side:
                add(f"mansion_{slot}_{side.value}", kind, slot, side)
        for seed in apartment_seeds():
            for side in Side:
                add(f"apartment_{seed}_{side.value}", EntityKind.APARTMENT, seed, side)
        add("bridge", EntityKind.BRIDGE, 0, Side.EUROPE)
        add("mosque", EntityKind.MOSQUE, MOSQUE_ANCHOR, Side.EUROPE)
        add("tower", EntityKind.TOWER, self.seed, Side.ASIA)
        u, y, k = tower_flag_mount()
        add("flag", EntityKind.FLAG, 0, Side.ASIA,
            Pose((u * VOXEL_SCALE, y * VOXEL_SCALE, k * VOXEL_SCALE)))

        add("ferry", EntityKind.FERRY, 0, Side.ASIA, ferry_pose(t))
        add("tanker", EntityKind.TANKER, 0, Side.EUROPE, tanker_pose(t))
        add("fishing_boat", EntityKind.FISHING_BOAT, self.seed, Side.EUROPE, fishing_boat_pose(t))
        for p, pod in enumerate(DOLPHIN_PODS):
            for i, pose in enumerate(pod_member_poses(t, pod)):
                add(f"dolphin_{p}_{i}", EntityKind.DOLPHIN, 0, Side.EUROPE, pose)
        for i, pose in enumerate(seagull_poses(t, SEAGULL_COUNT, self.seed)):
            add(f"seagull_{i}", EntityKind.SEAGULL, 0, Side.EUROPE, pose)
        for lane in range(len(TRAFFIC_LANES)):
            for car in range(TRAFFIC_CARS_PER_LANE):
                add(f"car_{lane}_{car}", EntityKind.TRAFFIC, lane * 10 + car, Side.ASIA,
                    traffic_pose(t, lane, car))
        return placements

    def _generate(self, requests):
        missing = list(dict.fromkeys(r for r in requests if r not in self._voxels))
        if not missing:
            return
        if self.max_workers == 1:
            results = [generate_entity(*r) for r in missing]
        else:
            results = generate_many(missing, max_workers=self.max_workers)
        self._voxels.update(zip(missing, results))

    def _resolve(self, name: str, voxels: VoxelSet) -> VoxelSet:
        """Keep the previous VoxelSet object when the content is unchanged,
        so a mode toggle leaves buffers of lamp-free entities alone."""
        previous = self._current.get(name)
        if previous is not None and previous is not voxels and previous.same_as(voxels):
            return previous
        self._current[name] = voxels
        return voxels

    def _partition(self, name: str, voxels: VoxelSet) -> Partition:
        cached = self._partitions.get(name)
        if cached is not None and cached[0] is voxels:
            return cached[1]
        parts = partition(voxels)
        self._partitions[name] = (voxels, parts)
        return parts

    def build(self, mode=Mode.DAY, t: float = 0.0, progress_callback=None) -> SceneBuild:
        """Generate, partition and sync every entity for ``mode``."""
        def _progress(pct, msg):
            if progress_callback:
                progress_callback(pct, msg)

        mode = Mode(mode)
        _timings = {}
        placements = self.plan(t)
        requests = [p.request._replace(mode=mode) for p in placements]

        _progress(10, "Generating voxels...")
        _t0 = time.perf_counter()
        self._generate(requests)
        _timings['1_generate'] = time.perf_counter() - _t0

        _progress(60, "Syncing instance buffers...")
        _t0 = time.perf_counter()
        entries = []
        for placement, request in zip(placements, requests):
            name = placement.name
            voxels = self._resolve(name, self._voxels[request])
            parts = self._partition(name, voxels)
            if name not in self._managers:
                self._managers[name] = (InstanceBufferManager(), InstanceBufferManager(emissive=True))
            opaque_mgr, light_mgr = self._managers[name]
            entries.append(SceneEntry(placement, voxels, parts,
                                      opaque_mgr.sync(parts.opaque),
                                      light_mgr.sync(parts.light)))
        _timings['2_partition_sync'] = time.perf_counter() - _t0

        total = sum(len(e.voxels) for e in entries)
        logger.info(f"Built {len(entries)} entities ({total} voxels) for {mode.value} "
                    f"in {sum(_timings.values()):.1f}s")
        return SceneBuild(mode, entries, _timings)

    def rebuild_count(self) -> int:
        """Total instance buffer rebuilds so far."""
        return sum(o.rebuilds + l.rebuilds for o, l in self._managers.values())

    def stats(self, mode=Mode.DAY) -> Dict[str, Dict[str, int]]:
        return self.build(mode).counts()

    def generate_glb(self, mode, output_path: str, t: float = 0.0,
                     progress_callback=None) -> str:
        """Generate GLB file. Returns the absolute path to the generated file."""
        mode = Mode(mode)

        # ── GLB cache ─────────────────────────────────────────────
        glb_cache_path = None
        if self.use_cache:
            _GLB_CACHE.mkdir(parents=True, exist_ok=True)
            glb_name = _cache_key(self.seed, mode, t)
            glb_cache_path = _GLB_CACHE / glb_name
            if glb_cache_path.exists():
                resolved = PathManager.get_output_path(output_path)
                resolved.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(glb_cache_path, resolved)
                size_mb = glb_cache_path.stat().st_size / 1024 / 1024
                logger.info(f"GLB cache hit: {glb_name} ({size_mb:.1f} MB)")
                return str(resolved)

        # ── Full GLB generation ────────────────────────────────────
        try:
            scene = self.build(mode, t, progress_callback=progress_callback)
            result = glb_mod.export_scene(scene.world_buffers(), output_path,
                                          progress_callback=progress_callback)
        except Exception as e:
            logger.error(f"Error generating GLB: {e}")
            raise

        # Save to GLB cache
        if glb_cache_path is not None and result:
            try:
                shutil.copy2(result, glb_cache_path)
                size_mb = glb_cache_path.stat().st_size / 1024 / 1024
                logger.info(f"Saved GLB to cache: {glb_cache_path.name} "
                            f"({size_mb:.1f} MB)")
            except Exception as e:
                logger.warning(f"Failed to cache GLB: {e}")

        return result
