"""GLB file generation from instance buffers."""

import logging
import time
from collections import defaultdict

import numpy as np
import trimesh

from .models import PathManager

logger = logging.getLogger(__name__)

EMISSIVE_STRENGTH = 1.0


def _unit_cube():
    cube = trimesh.creation.box(extents=(1.0, 1.0, 1.0))
    return np.asarray(cube.vertices, dtype=np.float64), np.asarray(cube.faces, dtype=np.int64)


def _cubes(transforms):
    """Vertices and faces of one unit cube per 4x4 transform."""
    cube_verts, cube_faces = _unit_cube()
    n = len(transforms)
    rot = transforms[:, :3, :3].astype(np.float64)
    trans = transforms[:, :3, 3].astype(np.float64)
    verts = np.einsum('nij,vj->nvi', rot, cube_verts) + trans[:, np.newaxis, :]
    offsets = (np.arange(n) * len(cube_verts))[:, np.newaxis, np.newaxis]
    faces = cube_faces[np.newaxis] + offsets
    return verts.reshape(-1, 3), faces.reshape(-1, 3)


def _opaque_mesh(buffer):
    verts, faces = _cubes(buffer.transforms)
    rgba = np.ones((buffer.count, 4), dtype=np.float64)
    rgba[:, :3] = buffer.colors
    vertex_colors = np.repeat((rgba * 255).round().astype(np.uint8), len(verts) // buffer.count, axis=0)
    return trimesh.Trimesh(vertices=verts, faces=faces, vertex_colors=vertex_colors, process=False)


def _light_meshes(buffer):
    """One mesh per light color, each with its own emissive material."""
    keys = (buffer.colors * 255).round().astype(np.uint8)
    groups = defaultdict(list)
    for i, key in enumerate(map(tuple, keys.tolist())):
        groups[key].append(i)
    for key, rows in sorted(groups.items()):
        verts, faces = _cubes(buffer.transforms[rows])
        color = [c / 255.0 for c in key]
        material = trimesh.visual.material.PBRMaterial(
            baseColorFactor=color + [1.0],
            emissiveFactor=[c * EMISSIVE_STRENGTH for c in color],
            roughnessFactor=0.3,
            metallicFactor=0.0,
            doubleSided=True,
        )
        mesh = trimesh.Trimesh(vertices=verts, faces=faces, process=False)
        mesh.visual = trimesh.visual.TextureVisuals(material=material)
        yield '%02x%02x%02x' % key, mesh


def export_scene(buffers, output_path: str, progress_callback=None) -> str:
    """Write ``(name, InstanceBuffer)`` pairs to a binary glTF file.

    Opaque buffers become one vertex-colored cube mesh each; emissive
    buffers are split by color so every light color gets an emissive
    material.  Returns the absolute path written.
    """
    def _progress(pct, msg):
        if progress_callback:
            progress_callback(pct, msg)

    _timings = {}
    _t0 = time.perf_counter()
    buffers = [(name, buf) for name, buf in buffers if buf is not None and buf.count]
    if not buffers:
        raise ValueError("No voxels to export")

    _progress(90, "Assembling 3D model...")
    glb_scene = trimesh.Scene()
    total = 0
    for name, buf in buffers:
        total += buf.count
        if buf.emissive:
            for suffix, mesh in _light_meshes(buf):
                glb_scene.add_geometry(mesh, geom_name=f"{name}_light_{suffix}")
        else:
            glb_scene.add_geometry(_opaque_mesh(buf), geom_name=name)
    _timings['1_meshes'] = time.perf_counter() - _t0

    _t0 = time.perf_counter()
    output_path = PathManager.get_output_path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    _progress(95, "Finalizing design...")
    glb_scene.export(str(output_path), file_type='glb')
    _timings['2_export'] = time.perf_counter() - _t0

    logger.info("=" * 60)
    logger.info("GLB EXPORT TIMING BREAKDOWN")
    logger.info("=" * 60)
    _total = 0.0
    for _lbl, _dur in sorted(_timings.items()):
        logger.info(f"  {_lbl}: {_dur:.1f}s")
        _total += _dur
    logger.info(f"  TOTAL: {_total:.1f}s")
    logger.info("=" * 60)

    logger.info(f"GLB file generated successfully: {output_path} ({total} voxels)")
    return str(output_path)
