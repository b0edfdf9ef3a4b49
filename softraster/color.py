from dataclasses import dataclass

from .math3d import Vec3


@dataclass(frozen=True)
class Color:
    """
    8-bit RGB color, channels 0..255.

    str(color) is the "r g b" triple used by the text image format.
    """
    r: int
    g: int
    b: int

    def __post_init__(self):
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise ValueError(f"color channel out of range 0..255: {channel}")

    def __str__(self):
        return f"{self.r} {self.g} {self.b}"

    def __iter__(self):
        yield self.r
        yield self.g
        yield self.b

    @staticmethod
    def from_vec3(v: Vec3) -> "Color":
        """
        Convert a shading vector in [0,1]^3 to a Color.

        Each channel is multiplied by 255 and truncated toward zero, so
        (0.4, 0.6, 1.0) -> (102, 153, 255). Values outside [0,1] are not
        clamped beforehand; the result saturates at 0 and 255 like a
        float-to-u8 cast.
        """
        return Color(_to_channel(v.x), _to_channel(v.y), _to_channel(v.z))


def _to_channel(value: float) -> int:
    scaled = 255.0 * value
    if not scaled > 0.0:  # negative, zero or NaN
        return 0
    if scaled >= 255.0:
        return 255
    return int(scaled)


BLACK = Color(0, 0, 0)
