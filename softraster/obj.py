import logging
from typing import Iterable, List, Tuple

from .math3d import Vec3
from .mesh import Face, Mesh

logger = logging.getLogger(__name__)


# ============================================================
#  OBJ loader
# ============================================================

def _to_float(token: str) -> float:
    """Parse a number, 0.0 if malformed."""
    try:
        return float(token)
    except ValueError:
        return 0.0

def _to_index(token: str, count: int) -> int:
    """
    Convert an OBJ index (1-based, negative = relative to the end of the
    list parsed so far) into a 0-based index.

    Malformed or zero tokens resolve to the first element.
    """
    try:
        i = int(token)
    except ValueError:
        i = 1
    if i > 0:
        return i - 1
    if i < 0:
        return count + i
    return 0

def _to_sub_index(token: str, count: int) -> int:
    """Same as _to_index for vt/vn slots, -1 when the slot is empty."""
    if not token:
        return -1
    return _to_index(token, count)

def _parse_face(parts: List[str], mesh: Mesh) -> List[Face]:
    """
    Parse the slots of an 'f' record and fan-triangulate:
      (0,1,2), (0,2,3), ..., (0,N-2,N-1)
    """
    v_idx, vt_idx, vn_idx = [], [], []
    for token in parts:
        comps = token.split("/")
        v_idx.append(_to_index(comps[0], len(mesh.verts)))
        vt_idx.append(_to_sub_index(comps[1], len(mesh.uvs)) if len(comps) > 1 else -1)
        vn_idx.append(_to_sub_index(comps[2], len(mesh.normals)) if len(comps) > 2 else -1)

    has_vt = any(i >= 0 for i in vt_idx)
    has_vn = any(i >= 0 for i in vn_idx)

    def pick(idx: List[int], present: bool, k: int) -> Tuple[int, ...]:
        if not present:
            return ()
        return idx[0], idx[k], idx[k + 1]

    return [
        Face((v_idx[0], v_idx[k], v_idx[k + 1]),
             pick(vt_idx, has_vt, k),
             pick(vn_idx, has_vn, k))
        for k in range(1, len(v_idx) - 1)
    ]

def parse_obj(lines: Iterable[str]) -> Mesh:
    """
    Build a Mesh from OBJ text lines.

    Supported:
      v  x y z [w]      (w ignored)
      vt u v [w]
      vn x y z
      f  v[/vt[/vn]] v[/vt[/vn]] v[/vt[/vn]] ...   (3+ slots, fan-split)

    Blank lines, '#' comments and any other record type (o, g, s, usemtl,
    mtllib, ...) are skipped. Malformed numbers read as 0.
    """
    mesh = Mesh()
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split()
        tag = parts[0]
        if tag == "v" and len(parts) >= 4:
            mesh.verts.append(Vec3(_to_float(parts[1]), _to_float(parts[2]), _to_float(parts[3])))
        elif tag == "vt" and len(parts) >= 3:
            w = _to_float(parts[3]) if len(parts) >= 4 else 0.0
            mesh.uvs.append(Vec3(_to_float(parts[1]), _to_float(parts[2]), w))
        elif tag == "vn" and len(parts) >= 4:
            mesh.normals.append(Vec3(_to_float(parts[1]), _to_float(parts[2]), _to_float(parts[3])))
        elif tag == "f" and len(parts) >= 4:
            mesh.faces.extend(_parse_face(parts[1:], mesh))
    return mesh

def load_obj(path: str) -> Mesh:
    """
    Read an OBJ file.

    Raises OSError if the file cannot be opened; the caller decides on a
    fallback.
    """
    with open(path, "r", encoding="utf-8", errors="ignore") as f:
        mesh = parse_obj(f)
    logger.info("Loaded %s: %d vertices, %d faces", path, len(mesh.verts), len(mesh.faces))
    return mesh
