"""Upload of an immutable Scene snapshot into the Taichi tables.

The kernels read primitives, lights and the environment from module-level
fields. upload_scene() replaces the whole table contents with one Scene,
preserving primitive order.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raycast.scene.manager import upload_scene
    >>> from raycast.scene.presets import create_demo_scene
    >>> counts = upload_scene(create_demo_scene())
"""

from dataclasses import dataclass

from raycast.scene.intersection import (
    MAX_PRIMITIVES,
    add_plane,
    add_sphere,
    clear_primitives,
)
from raycast.scene.lights import (
    MAX_LIGHTS,
    add_point_light,
    clear_lights,
    set_environment,
)
from raycast.scene.model import Plane, Scene, Sphere


@dataclass(frozen=True)
class UploadStats:
    """Number of table entries written by upload_scene()."""

    spheres: int
    planes: int
    lights: int

    @property
    def primitives(self) -> int:
        return self.spheres + self.planes


def upload_scene(scene: Scene) -> UploadStats:
    """Replace the kernel-side scene with the contents of scene.

    Args:
        scene: The snapshot to upload.

    Returns:
        Counts of what was uploaded.

    Raises:
        RuntimeError: If the scene exceeds the table capacities. Checked
            before anything is written.
    """
    if len(scene.primitives) > MAX_PRIMITIVES:
        raise RuntimeError(
            f"Scene has {len(scene.primitives)} primitives; "
            f"maximum is {MAX_PRIMITIVES}"
        )
    if len(scene.lights) > MAX_LIGHTS:
        raise RuntimeError(f"Scene has {len(scene.lights)} lights; maximum is {MAX_LIGHTS}")

    clear_primitives()
    clear_lights()

    spheres = planes = 0
    for prim in scene.primitives:
        if isinstance(prim, Sphere):
            add_sphere(prim.center, prim.radius, prim.material)
            spheres += 1
        elif isinstance(prim, Plane):
            add_plane(prim.point, prim.normal, prim.material)
            planes += 1

    for light in scene.lights:
        add_point_light(light.position, light.colour, light.intensity)

    set_environment(scene.ambient, scene.background)

    return UploadStats(spheres=spheres, planes=planes, lights=len(scene.lights))
