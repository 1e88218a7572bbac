"""Built-in demo scene.

Three spheres (red, green, blue) stand on a grey floor in front of a pale
back wall, lit by a key light and a weaker fill light.

Example:
    >>> from raycast.scene.presets import create_demo_scene
    >>> scene = create_demo_scene()
    >>> len(scene.primitives), len(scene.lights)
    (5, 2)
"""

from dataclasses import dataclass

from raycast.camera.viewport import Camera
from raycast.scene.model import Material, Plane, PointLight, Scene, Sphere


@dataclass
class DemoSceneParams:
    """Knobs for the demo scene.

    Attributes:
        ambient: Ambient level in [0, 1].
        key_intensity: Intensity of the main light.
        fill_intensity: Intensity of the fill light.
        fov: Camera field of view in degrees.
    """

    ambient: float = 0.1
    key_intensity: float = 0.8
    fill_intensity: float = 0.3
    fov: float = 60.0


def create_demo_scene(params: DemoSceneParams | None = None) -> Scene:
    """Create the demo scene.

    Args:
        params: Optional parameters; defaults to DemoSceneParams().

    Returns:
        The Scene (spheres first, then floor and back wall).
    """
    if params is None:
        params = DemoSceneParams()

    red = Material(colour=(220, 40, 40), diffuse=0.9, specular=0.5, specular_exp=32)
    green = Material(colour=(40, 200, 60), diffuse=0.8, specular=0.2, specular_exp=8)
    blue = Material(colour=(50, 80, 230), diffuse=0.9, specular=0.8, specular_exp=64)
    floor = Material(colour=(180, 180, 180), diffuse=0.8, specular=0.0, specular_exp=1)
    wall = Material(colour=(230, 225, 210), diffuse=0.7, specular=0.0, specular_exp=1)

    camera = Camera(position=(0.0, 1.5, -6.0), direction=(0.0, -0.1, 1.0), fov=params.fov)

    primitives = (
        Sphere(center=(-2.2, 1.0, 2.0), radius=1.0, material=red),
        Sphere(center=(0.0, 0.75, 1.0), radius=0.75, material=green),
        Sphere(center=(2.2, 1.25, 2.5), radius=1.25, material=blue),
        Plane(point=(0.0, 0.0, 0.0), normal=(0.0, 1.0, 0.0), material=floor),
        Plane(point=(0.0, 0.0, 8.0), normal=(0.0, 0.0, -1.0), material=wall),
    )

    lights = (
        PointLight(position=(-4.0, 6.0, -3.0), colour=(255, 255, 255), intensity=params.key_intensity),
        PointLight(position=(5.0, 3.0, -2.0), colour=(255, 240, 220), intensity=params.fill_intensity),
    )

    return Scene(
        camera=camera,
        primitives=primitives,
        lights=lights,
        ambient=params.ambient,
        background=(20, 20, 35),
    )
