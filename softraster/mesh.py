import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .math3d import Vec3

logger = logging.getLogger(__name__)

DEFAULT_NORMAL = Vec3(0.0, 0.0, 1.0)

Triangle = Tuple[Vec3, Vec3, Vec3]


# ============================================================
#  Mesh storage
# ============================================================

@dataclass
class Face:
    """
    Single face, indices into:
      - v:  vertex positions
      - vt: texture coords (optional, -1 where a slot has none)
      - vn: vertex normals (optional, -1 where a slot has none)

    Indices are 0-based. Faces coming out of the OBJ loader or the sphere
    generator always have exactly 3 vertex indices.
    """
    v: Tuple[int, ...]
    vt: Tuple[int, ...] = ()
    vn: Tuple[int, ...] = ()


class Mesh:
    """
    Triangle mesh: vertex positions, optional texture coords and normals,
    and faces indexing into them.

    Lifecycle:
      created empty -> filled by the OBJ loader or uv_sphere() ->
      estimate_normals() if it has none -> center_and_scale() once ->
      read-only while rendering.
    """
    def __init__(self):
        self.verts: List[Vec3] = []
        self.uvs: List[Vec3] = []
        self.normals: List[Vec3] = []
        self.faces: List[Face] = []

    def __repr__(self):
        return (f"Mesh(verts={len(self.verts)}, uvs={len(self.uvs)}, "
                f"normals={len(self.normals)}, faces={len(self.faces)})")

    def _vertex(self, idx: int) -> Optional[Vec3]:
        """Vertex by index, or None if out of range (no negative wrap-around)."""
        if idx < 0 or idx >= len(self.verts):
            return None
        return self.verts[idx]

    def triangle_vertices(self, face: Face) -> Optional[Triangle]:
        """
        Return the three vertex positions of a triangular face.

        None if the face does not have exactly 3 indices or any index is
        out of range; callers skip such faces.
        """
        if len(face.v) != 3:
            return None
        v0 = self._vertex(face.v[0])
        v1 = self._vertex(face.v[1])
        v2 = self._vertex(face.v[2])
        if v0 is None or v1 is None or v2 is None:
            return None
        return v0, v1, v2

    def triangle_normals(self, face: Face) -> Optional[Triangle]:
        """
        Return the three per-vertex normals of a triangular face.

        Uses the face's normal sub-indices when it has a full set, the
        vertex indices otherwise. Missing normals default to (0,0,1).
        None if the face is not a triangle or the mesh has no normals.
        """
        if len(face.v) != 3 or not self.normals:
            return None
        if len(face.vn) == 3 and min(face.vn) >= 0:
            idx = face.vn
        else:
            idx = face.v
        return tuple(self._normal(i) for i in idx)

    def _normal(self, idx: int) -> Vec3:
        if idx < 0 or idx >= len(self.normals):
            return DEFAULT_NORMAL
        return self.normals[idx]

    # ========================================================
    #  Preparation
    # ========================================================

    def estimate_normals(self):
        """
        Replace the normal list with one averaged normal per vertex.

        Each triangle contributes its unit face normal
        normalize((v1 - v0) x (v2 - v0)) to all three of its vertices;
        a vertex normal is the plain (unweighted) mean of its contributions.
        Vertices used by no triangle get (0,0,1).
        """
        sums = [Vec3(0.0, 0.0, 0.0)] * len(self.verts)
        counts = [0] * len(self.verts)

        for face in self.faces:
            tri = self.triangle_vertices(face)
            if tri is None:
                continue
            v0, v1, v2 = tri
            n = (v1 - v0).cross(v2 - v0).normalize()
            for idx in face.v:
                sums[idx] = sums[idx] + n
                counts[idx] += 1

        self.normals = [
            sums[i] / counts[i] if counts[i] > 0 else DEFAULT_NORMAL
            for i in range(len(self.verts))
        ]

    def bounding_box(self) -> Tuple[Vec3, Vec3]:
        """Component-wise (min, max) over all vertices; zero box if empty."""
        if not self.verts:
            return Vec3(0.0, 0.0, 0.0), Vec3(0.0, 0.0, 0.0)
        xs = [v.x for v in self.verts]
        ys = [v.y for v in self.verts]
        zs = [v.z for v in self.verts]
        return Vec3(min(xs), min(ys), min(zs)), Vec3(max(xs), max(ys), max(zs))

    def center_and_scale(self, target_diagonal: float):
        """
        Move the bounding-box midpoint to the origin and scale uniformly so
        the bounding-box diagonal becomes target_diagonal.

        A box with a diagonal below 1e-12 (single point, empty mesh) is only
        re-centered.
        """
        lo, hi = self.bounding_box()
        center = (lo + hi) / 2.0
        extent = (hi - lo).length()
        if extent < 1e-12:
            logger.warning("Degenerate bounding box (diagonal %.3g), skipping scale", extent)
            factor = 1.0
        else:
            factor = target_diagonal / extent
        self.verts = [(v - center) * factor for v in self.verts]

    # ========================================================
    #  Procedural geometry
    # ========================================================

    @classmethod
    def uv_sphere(cls, lat_segments: int = 20, lon_segments: int = 20,
                  radius: float = 1.5) -> "Mesh":
        """
        Latitude/longitude sphere around the origin.

        Rings run from the north pole (theta=0) to the south pole (theta=pi);
        each ring repeats its first vertex at phi=2*pi so the grid closes.
        Every grid quad becomes two triangles.
        """
        if lat_segments < 1 or lon_segments < 1:
            raise ValueError("sphere needs at least one latitude and one longitude segment")

        mesh = cls()
        for i in range(lat_segments + 1):
            theta = math.pi * i / lat_segments
            y = math.cos(theta)
            r = math.sin(theta)
            for j in range(lon_segments + 1):
                phi = 2.0 * math.pi * j / lon_segments
                mesh.verts.append(Vec3(r * math.cos(phi), y, r * math.sin(phi)) * radius)

        for i in range(lat_segments):
            for j in range(lon_segments):
                a = i * (lon_segments + 1) + j
                b = a + lon_segments + 1
                c = a + 1
                d = b + 1
                mesh.faces.append(Face((a, b, c)))
                mesh.faces.append(Face((c, b, d)))
        return mesh
