from .math3d import Vec3, Vec4, Mat4, translate, scale, rotate, perspective
from .color import Color
from .mesh import Face, Mesh
from .obj import load_obj, parse_obj
from .framebuffer import Framebuffer, is_inside_triangle
from .config import RenderConfig
from .scene import Instance, RenderStats, flat_shade, prepare_mesh, render_scene
from .logging_config import setup_logging

__version__ = "0.1.0"
