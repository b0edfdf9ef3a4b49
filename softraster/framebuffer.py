import logging

import numpy as np
from numba import njit
from PIL import Image

from .color import BLACK, Color
from .math3d import Vec3

logger = logging.getLogger(__name__)

PPM_TAG = "P3"
MAX_CHANNEL = 255


# ============================================================
#  Numba kernels
# ============================================================

@njit(cache=True)
def _put_pixel(img, x, y, r, g, b):
    """
    Write one pixel; coordinates outside the image are dropped.

    img: uint8 array of shape (H, W, 3), indexed [y, x, channel].
    """
    h, w, _ = img.shape
    if x < 0 or x >= w or y < 0 or y >= h:
        return
    img[y, x, 0] = r
    img[y, x, 1] = g
    img[y, x, 2] = b


@njit(cache=True)
def _sign(v):
    if v > 0:
        return 1
    if v < 0:
        return -1
    return 0


@njit(cache=True)
def _draw_line(img, x0, y0, x1, y1, r, g, b):
    """
    Integer line stepping for all octants.

    Walks max(|dx|, |dy|) unit steps along the dominant axis; the error
    term starts at half the dominant extent and triggers a diagonal step
    whenever it drops below zero. Plots both endpoints.
    """
    dx = x1 - x0
    dy = y1 - y0
    sx = _sign(dx)
    sy = _sign(dy)
    dx = abs(dx)
    dy = abs(dy)

    if dx > dy:
        pdx, pdy = sx, 0
        es, el = dy, dx
    else:
        pdx, pdy = 0, sy
        es, el = dx, dy

    x, y = x0, y0
    e = el // 2
    _put_pixel(img, x, y, r, g, b)
    for _ in range(el):
        e -= es
        if e < 0:
            e += el
            x += sx
            y += sy
        else:
            x += pdx
            y += pdy
        _put_pixel(img, x, y, r, g, b)


@njit(cache=True)
def _is_inside(px, py, ax, ay, bx, by, cx, cy):
    """
    Edge sign test of pixel P against triangle A, B, C.

    Each edge (A->B, B->C, C->A) is tested with P substituted for the
    trailing vertex; P is inside iff all three signs agree (sign(0) == 0).
    """
    s0 = (ax - px) * (by - ay) - (bx - ax) * (ay - py)
    s1 = (bx - px) * (cy - by) - (cx - bx) * (by - py)
    s2 = (cx - px) * (ay - cy) - (ax - cx) * (cy - py)
    k = _sign(s0)
    return k == _sign(s1) and k == _sign(s2)


@njit(cache=True)
def _fill_triangle(img, ax, ay, bx, by, cx, cy, r, g, b):
    """
    Fill a triangle in pixel coordinates by scanning its bounding box,
    then outline its three edges.

    The scan is half-open ([min, max) on both axes); the outline closes
    the right and bottom borders. No depth test, later triangles overwrite.
    """
    min_x = min(ax, bx, cx)
    max_x = max(ax, bx, cx)
    min_y = min(ay, by, cy)
    max_y = max(ay, by, cy)

    for x in range(min_x, max_x):
        for y in range(min_y, max_y):
            if _is_inside(x, y, ax, ay, bx, by, cx, cy):
                _put_pixel(img, x, y, r, g, b)

    _draw_line(img, ax, ay, bx, by, r, g, b)
    _draw_line(img, bx, by, cx, cy, r, g, b)
    _draw_line(img, cx, cy, ax, ay, r, g, b)


def is_inside_triangle(px, py, x0, y0, x1, y1, x2, y2) -> bool:
    """True if integer point (px, py) passes the sign test for triangle 0-1-2."""
    return bool(_is_inside(int(px), int(py), int(x0), int(y0),
                           int(x1), int(y1), int(x2), int(y2)))


# ============================================================
#  Framebuffer
# ============================================================

def _in_ndc(v: Vec3) -> bool:
    return -1.0 <= v.x <= 1.0 and -1.0 <= v.y <= 1.0


class Framebuffer:
    """
    Fixed-size RGB pixel grid with point, line and triangle drawing.

    (0, 0) is the top-left pixel. Draw calls overwrite pixels in place
    (no blending, no depth test); writes outside the grid are clipped.
    """
    is_inside_triangle = staticmethod(is_inside_triangle)

    def __init__(self, width: int, height: int, background: Color = BLACK):
        if width <= 0 or height <= 0:
            raise ValueError(f"framebuffer size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 3), dtype=np.uint8)
        self.pixels[:, :] = tuple(background)

    @property
    def aspect(self) -> float:
        return self.width / self.height

    def get_pixel(self, x: int, y: int) -> Color:
        r, g, b = self.pixels[y, x]
        return Color(int(r), int(g), int(b))

    def set_pixel(self, x: int, y: int, color: Color):
        """Write one pixel; out-of-range coordinates are a silent no-op."""
        _put_pixel(self.pixels, int(x), int(y), color.r, color.g, color.b)

    def draw_line(self, x0: int, y0: int, x1: int, y1: int, color: Color):
        """Plot max(|dx|, |dy|) + 1 points from (x0, y0) to (x1, y1), clipped."""
        _draw_line(self.pixels, int(x0), int(y0), int(x1), int(y1),
                   color.r, color.g, color.b)

    # ========================================================
    #  NDC -> pixel
    # ========================================================

    def x_coord(self, ndc_x: float) -> int:
        """x=-1 maps to column 0, x=+1 to column W (one past the edge)."""
        return int((ndc_x + 1.0) * 0.5 * self.width)

    def y_coord(self, ndc_y: float) -> int:
        """y=+1 maps to row 0 (top), y=-1 to row H."""
        return int((1.0 - (ndc_y + 1.0) * 0.5) * self.height)

    def draw_triangle(self, a: Vec3, b: Vec3, c: Vec3, view_dir: Vec3, color: Color) -> bool:
        """
        Fill and outline a triangle given in normalized device coordinates.

        Returns False without drawing when:
          - any vertex has x or y outside [-1, 1] (crude frustum reject)
          - the triangle is degenerate (zero-length normal)
          - its normal points away from view_dir (back-face culling)
        The normal is taken from the un-mapped vertices, so view_dir must be
        expressed in the same space.
        """
        if not (_in_ndc(a) and _in_ndc(b) and _in_ndc(c)):
            return False

        n = (b - a).cross(c - a)
        if n.length_squared() <= 0.0:
            return False
        if n.normalize().dot(view_dir) < 0.0:
            return False

        _fill_triangle(self.pixels,
                       self.x_coord(a.x), self.y_coord(a.y),
                       self.x_coord(b.x), self.y_coord(b.y),
                       self.x_coord(c.x), self.y_coord(c.y),
                       color.r, color.g, color.b)
        return True

    # ========================================================
    #  Output
    # ========================================================

    def to_text(self) -> str:
        """
        Serialize as plain PPM (P3).

        Layout: tag line, "W H", "255", then one line per row with every
        pixel written as "r g b " (trailing space included), then one empty
        line.
        """
        out = [f"{PPM_TAG}\n{self.width} {self.height}\n{MAX_CHANNEL}\n"]
        for row in self.pixels:
            values = row.reshape(-1).tolist()
            out.append("".join(f"{v} " for v in values))
            out.append("\n")
        out.append("\n")
        return "".join(out)

    def __str__(self):
        return self.to_text()

    def to_image(self) -> Image.Image:
        """Copy of the pixels as a Pillow RGB image."""
        return Image.fromarray(self.pixels.copy())

    def save(self, path: str):
        """
        Write the frame to path.

        .ppm and .txt get exactly to_text(); anything else goes through
        Pillow, which picks the encoder from the extension. The CLI adds one
        more trailing newline when it prints to stdout instead of saving.
        """
        if path.lower().endswith((".ppm", ".txt")):
            with open(path, "w", encoding="ascii", newline="\n") as f:
                f.write(self.to_text())
        else:
            self.to_image().save(path)
        logger.info("Wrote %dx%d frame to %s", self.width, self.height, path)
