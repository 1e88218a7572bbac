"""Scene module for scene description, loading and kernel-side storage.

Components:
    model: Immutable Scene, Material, Sphere, Plane and PointLight
    loader: YAML/JSON scene files
    presets: Built-in demo scene
    intersection: Primitive table and nearest-hit / any-hit queries
    lights: Point light table, ambient level and background
    manager: upload_scene() from a Scene into the tables

intersection, lights and manager declare Taichi fields and are not imported
here; import them directly after ti.init().
"""

from .loader import load_scene_file, parse_scene, save_scene_file, scene_from_dict, scene_to_dict
from .model import Material, Plane, PointLight, Scene, Sphere
from .presets import DemoSceneParams, create_demo_scene

__all__ = [
    "DemoSceneParams",
    "Material",
    "Plane",
    "PointLight",
    "Scene",
    "Sphere",
    "create_demo_scene",
    "load_scene_file",
    "parse_scene",
    "save_scene_file",
    "scene_from_dict",
    "scene_to_dict",
]
