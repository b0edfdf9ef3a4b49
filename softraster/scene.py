import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .color import Color
from .config import RenderConfig
from .framebuffer import Framebuffer
from .math3d import Mat4, Vec3, perspective, rotate, translate, vec3_to_vec4
from .mesh import Mesh
from .obj import load_obj

logger = logging.getLogger(__name__)

WHITE = Vec3(1.0, 1.0, 1.0)
AMBIENT = 0.3
DIFFUSE = 0.7

# clip-space w at or below this is treated as on the camera plane
W_EPSILON = 1e-12


# ============================================================
#  Shading
# ============================================================

def shade_normal(n: Vec3, light_dir: Vec3) -> Color:
    """
    Ambient + diffuse gray for a surface normal under a directional light.

    intensity = 0.3 + 0.7 * clamp(dot(n, -light_dir), 0, 1), both vectors
    normalized. A zero normal gets ambient only.
    """
    lum = n.normalize().dot((-light_dir).normalize())
    lum = max(0.0, min(1.0, lum))
    return Color.from_vec3(WHITE * (AMBIENT + DIFFUSE * lum))

def flat_shade(v0: Vec3, v1: Vec3, v2: Vec3, light_dir: Vec3) -> Color:
    """
    One color for the whole triangle, from its geometric normal.

    Pass untransformed (object-space) vertices: normals taken after the
    perspective divide are neither length- nor direction-preserving.
    """
    return shade_normal((v1 - v0).cross(v2 - v0), light_dir)


# ============================================================
#  Instances
# ============================================================

@dataclass(frozen=True)
class Instance:
    """One placement of the shared mesh: a translation and a rotation about an axis."""
    offset: Vec3
    axis: Vec3
    angle: float  # radians

    def model_matrix(self) -> Mat4:
        """Rotate first, then translate."""
        return translate(self.offset) @ rotate(self.axis, self.angle)


def instance_grid(config: RenderConfig, rng: np.random.Generator) -> List[Instance]:
    """
    (2R+1)^2 instances on a grid in the z=grid_depth plane, x outer, y inner,
    each with a random rotation in [-360, 360) degrees.
    """
    r = config.grid_radius
    instances = []
    for gx in range(-r, r + 1):
        for gy in range(-r, r + 1):
            angle = math.radians(rng.uniform(-360.0, 360.0))
            offset = Vec3(gx * config.grid_spacing, gy * config.grid_spacing, config.grid_depth)
            instances.append(Instance(offset, config.rotation_axis, angle))
    return instances


# ============================================================
#  Render loop
# ============================================================

@dataclass
class RenderStats:
    instances: int = 0
    drawn: int = 0
    culled: int = 0
    skipped: int = 0


def prepare_mesh(config: RenderConfig) -> Mesh:
    """
    Load the configured OBJ, or fall back to a UV sphere when it is missing,
    unreadable or empty. Then estimate normals if there are none and
    center/scale to config.target_size.
    """
    mesh: Optional[Mesh] = None
    if config.model_path:
        try:
            mesh = load_obj(config.model_path)
        except OSError as e:
            logger.warning("Could not load '%s': %s", config.model_path, e)
        else:
            if not mesh.verts or not mesh.faces:
                logger.warning("'%s' has no renderable geometry", config.model_path)
                mesh = None

    if mesh is None:
        logger.info("Using procedural sphere (%d x %d segments)",
                    config.sphere_lat, config.sphere_lon)
        mesh = Mesh.uv_sphere(config.sphere_lat, config.sphere_lon)

    if not mesh.normals:
        mesh.estimate_normals()

    mesh.center_and_scale(config.target_size)
    return mesh

def _triangle_color(mesh: Mesh, face, tri, config: RenderConfig) -> Color:
    if config.normal_source == "vertex":
        normals = mesh.triangle_normals(face)
        if normals is not None:
            n0, n1, n2 = normals
            return shade_normal(n0 + n1 + n2, config.light_dir)
    return flat_shade(*tri, config.light_dir)

def _project(mvp: Mat4, v: Vec3) -> Optional[Vec3]:
    """Clip-space transform plus divide; None when w is (near) zero."""
    c = mvp.mul_vec4(vec3_to_vec4(v))
    if abs(c.w) <= W_EPSILON:
        return None
    return Vec3(c.x / c.w, c.y / c.w, c.z / c.w)

def render_scene(mesh: Mesh, config: RenderConfig,
                 rng: Optional[np.random.Generator] = None,
                 instances: Optional[List[Instance]] = None) -> Tuple[Framebuffer, RenderStats]:
    """
    Draw every instance of the mesh into a new framebuffer.

    Triangles are drawn in mesh order per instance, in instance order,
    with no depth test. Shading depends only on the untransformed mesh, so
    each face color is computed once and reused across instances.

    A triangle with a vertex on the camera plane (w == 0 after projection)
    cannot be divided into NDC; it is left out and counted as skipped.
    """
    if rng is None:
        rng = np.random.default_rng(config.seed)
    if instances is None:
        instances = instance_grid(config, rng)

    fb = Framebuffer(config.width, config.height)
    proj = perspective(math.radians(config.fov_y), config.aspect, config.near, config.far)
    stats = RenderStats()

    # object-space triangles + their colors, in face order
    shaded = []
    for face in mesh.faces:
        tri = mesh.triangle_vertices(face)
        if tri is None:
            stats.skipped += 1
            continue
        shaded.append((face.v, _triangle_color(mesh, face, tri, config)))

    for inst in instances:
        mvp = proj @ inst.model_matrix()
        t_verts = [_project(mvp, v) for v in mesh.verts]
        drawn = 0
        unprojectable = 0
        for (i0, i1, i2), color in shaded:
            a, b, c = t_verts[i0], t_verts[i1], t_verts[i2]
            if a is None or b is None or c is None:
                unprojectable += 1
                continue
            if fb.draw_triangle(a, b, c, config.view_dir, color):
                drawn += 1
        stats.instances += 1
        stats.drawn += drawn
        stats.culled += len(shaded) - drawn - unprojectable
        stats.skipped += unprojectable
        logger.debug("Instance at %s angle %.1f deg: %d/%d triangles drawn",
                     tuple(inst.offset), math.degrees(inst.angle), drawn, len(shaded))

    logger.info("Rendered %d instances: %d triangles drawn, %d culled, %d faces skipped",
                stats.instances, stats.drawn, stats.culled, stats.skipped)
    return fb, stats
