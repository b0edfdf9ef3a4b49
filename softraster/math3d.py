import math
from dataclasses import dataclass
from typing import List, Optional


# ============================================================
#  Math primitives
# ============================================================

@dataclass(frozen=True)
class Vec3:
    """
    3D vector for positions, normals, directions and texture coordinates.

    Note:
      - Immutable (frozen); every operation returns a new Vec3.
      - Scalars may be multiplied from either side: v * k and k * v.
    """
    x: float
    y: float
    z: float

    def __add__(self, o): return Vec3(self.x + o.x, self.y + o.y, self.z + o.z)
    def __sub__(self, o): return Vec3(self.x - o.x, self.y - o.y, self.z - o.z)
    def __mul__(self, k: float): return Vec3(self.x * k, self.y * k, self.z * k)
    def __rmul__(self, k: float): return Vec3(k * self.x, k * self.y, k * self.z)
    def __truediv__(self, k: float): return Vec3(self.x / k, self.y / k, self.z / k)
    def __neg__(self): return Vec3(-self.x, -self.y, -self.z)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def dot(self, o) -> float:
        """Dot product (scalar product)."""
        return self.x * o.x + self.y * o.y + self.z * o.z

    def cross(self, o) -> "Vec3":
        """Cross product, right-hand rule."""
        return Vec3(
            self.y * o.z - self.z * o.y,
            self.z * o.x - self.x * o.z,
            self.x * o.y - self.y * o.x
        )

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.length_squared())

    def normalize(self) -> "Vec3":
        """Return normalized vector (length=1), or the zero vector if degenerate."""
        n = self.length()
        if n <= 1e-12:
            return Vec3(0.0, 0.0, 0.0)
        return self / n


@dataclass(frozen=True)
class Vec4:
    """
    4D homogeneous vector.
    Result of Mat4.mul_vec4, before the perspective divide.
    """
    x: float
    y: float
    z: float
    w: float


def vec3_to_vec4(v: Vec3, w: float = 1.0) -> Vec4:
    """Convert Vec3 to homogeneous Vec4."""
    return Vec4(v.x, v.y, v.z, w)


class Mat4:
    """
    4x4 matrix (row-major, m[row][col]).

    Used for:
      - Model matrix (rotation per instance)
      - Translation of each instance into the view volume
      - Projection matrix (perspective)

    Multiplication:
      - Matrix @ Matrix => Mat4
      - Matrix * Vec4   => Vec4 (mul_vec4)
      - Matrix * point  => Vec3 after perspective divide (transform_point)

    Composition reads right to left: (A @ B @ C).transform_point(p)
    applies C first, then B, then A.
    """
    def __init__(self, m: Optional[List[List[float]]] = None):
        self.m = m if m is not None else [[0.0]*4 for _ in range(4)]

    def __repr__(self):
        return f"Mat4({self.m!r})"

    @staticmethod
    def identity() -> "Mat4":
        """Create identity matrix."""
        m = Mat4()
        for i in range(4):
            m.m[i][i] = 1.0
        return m

    def __matmul__(self, o: "Mat4") -> "Mat4":
        """Matrix multiplication (Mat4 @ Mat4)."""
        if not isinstance(o, Mat4):
            return NotImplemented
        r = Mat4()
        for i in range(4):
            for j in range(4):
                s = 0.0
                for k in range(4):
                    s += self.m[i][k] * o.m[k][j]
                r.m[i][j] = s
        return r

    def mul_vec4(self, v: Vec4) -> Vec4:
        """Multiply matrix by a Vec4 (Mat4 * Vec4)."""
        x = self.m[0][0]*v.x + self.m[0][1]*v.y + self.m[0][2]*v.z + self.m[0][3]*v.w
        y = self.m[1][0]*v.x + self.m[1][1]*v.y + self.m[1][2]*v.z + self.m[1][3]*v.w
        z = self.m[2][0]*v.x + self.m[2][1]*v.y + self.m[2][2]*v.z + self.m[2][3]*v.w
        w = self.m[3][0]*v.x + self.m[3][1]*v.y + self.m[3][2]*v.z + self.m[3][3]*v.w
        return Vec4(x, y, z, w)

    def transform_point(self, p: Vec3) -> Vec3:
        """
        Transform the point (x, y, z, 1) and divide by the resulting w.

        Precondition:
          the transformed w must be non-zero. A point in the camera's z=0
          plane under a perspective matrix violates it and raises
          ZeroDivisionError.
        """
        c = self.mul_vec4(vec3_to_vec4(p))
        return Vec3(c.x / c.w, c.y / c.w, c.z / c.w)


# ============================================================
#  3D transforms
# ============================================================

def translate(v: Vec3) -> Mat4:
    """
    Translation matrix.

    Applies: (x, y, z) -> (x + v.x, y + v.y, z + v.z)
    """
    m = Mat4.identity()
    m.m[0][3] = v.x
    m.m[1][3] = v.y
    m.m[2][3] = v.z
    return m

def scale(v: Vec3) -> Mat4:
    """
    Scaling matrix.

    Applies: (x, y, z) -> (v.x*x, v.y*y, v.z*z)
    """
    m = Mat4.identity()
    m.m[0][0] = v.x
    m.m[1][1] = v.y
    m.m[2][2] = v.z
    return m

def rotate(axis: Vec3, a: float) -> Mat4:
    """
    Rotation by angle a (radians) around an arbitrary axis (Rodrigues).

    The axis is normalized first. Positive angles rotate counter-clockwise
    when looking down the axis towards the origin (right-hand rule), so
    rotate(Vec3(0, 0, 1), a) matches the classic Z rotation.
    """
    c, s = math.cos(a), math.sin(a)
    t = 1.0 - c
    r = axis.normalize()
    m = Mat4.identity()
    m.m[0][0] = c + r.x * r.x * t
    m.m[0][1] = r.x * r.y * t - r.z * s
    m.m[0][2] = r.x * r.z * t + r.y * s
    m.m[1][0] = r.y * r.x * t + r.z * s
    m.m[1][1] = c + r.y * r.y * t
    m.m[1][2] = r.y * r.z * t - r.x * s
    m.m[2][0] = r.z * r.x * t - r.y * s
    m.m[2][1] = r.z * r.y * t + r.x * s
    m.m[2][2] = c + r.z * r.z * t
    return m


# ============================================================
#  Projections
# ============================================================

def perspective(fov_y, aspect, z_near, z_far) -> Mat4:
    """
    Perspective projection matrix.

    Parameters:
      fov_y  - vertical field of view in radians
      aspect - width / height
      z_near - near plane distance (positive)
      z_far  - far plane distance (positive)

    Notes:
      - Camera looks towards -Z in view space.
      - w of the result is -z_view, so transform_point divides by -z.
      - Depth maps z_view=-z_near to 0 and z_view=-z_far to 1.
    """
    s = math.tan(fov_y * 0.5)
    m = Mat4()
    m.m[0][0] = 1.0 / (aspect * s)
    m.m[1][1] = 1.0 / s
    m.m[2][2] = -z_far / (z_far - z_near)
    m.m[2][3] = -z_far * z_near / (z_far - z_near)
    m.m[3][2] = -1.0
    return m
