from dataclasses import dataclass, field
from typing import Optional

from .math3d import Vec3

NORMAL_SOURCES = ("face", "vertex")


@dataclass
class RenderConfig:
    """Settings for one offline render: image, camera, light, instance grid and mesh."""
    width: int = 800
    height: int = 600

    # Camera (perspective, looking down -Z)
    fov_y: float = 45.0          # degrees
    near: float = 0.1
    far: float = 100.0
    view_dir: Vec3 = field(default_factory=lambda: Vec3(0.0, 0.0, 1.0))

    # Directional light, pointing from the light into the scene
    light_dir: Vec3 = field(default_factory=lambda: Vec3(0.1, 0.1, -1.0))
    # "face": geometric normal per triangle, "vertex": mean of its vertex normals
    normal_source: str = "face"

    # Instances on a (2R+1) x (2R+1) grid in front of the camera
    grid_radius: int = 1
    grid_spacing: float = 8.0
    grid_depth: float = -30.0
    rotation_axis: Vec3 = field(default_factory=lambda: Vec3(1.0, 1.0, 1.0))
    seed: Optional[int] = None

    # Mesh source and preparation
    model_path: Optional[str] = "models/deer.obj"
    target_size: float = 10.0
    sphere_lat: int = 20
    sphere_lon: int = 20

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"resolution must be positive, got {self.width}x{self.height}")
        if not 0.0 < self.fov_y < 180.0:
            raise ValueError(f"fov_y must be in (0, 180) degrees, got {self.fov_y}")
        if not 0.0 < self.near < self.far:
            raise ValueError(f"need 0 < near < far, got near={self.near} far={self.far}")
        if self.grid_radius < 0:
            raise ValueError(f"grid_radius must be >= 0, got {self.grid_radius}")
        if self.target_size <= 0.0:
            raise ValueError(f"target_size must be positive, got {self.target_size}")
        if self.sphere_lat < 1 or self.sphere_lon < 1:
            raise ValueError("sphere segment counts must be >= 1")
        if self.normal_source not in NORMAL_SOURCES:
            raise ValueError(f"normal_source must be one of {NORMAL_SOURCES}, got {self.normal_source!r}")

    @property
    def aspect(self) -> float:
        return self.width / self.height
