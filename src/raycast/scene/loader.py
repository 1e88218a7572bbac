"""Scene files: YAML or JSON documents describing a Scene.

Document layout (YAML shown; JSON uses the same keys):

    camera:
      pos: {x: 0, y: 1, z: -5}
      dir: {x: 0, y: 0, z: 1}
      fov: 60
    spheres:
      - pos: {x: 0, y: 1, z: 3}
        radius: 1
        material:
          colour: {r: 255, g: 0, b: 0}
          diffuse: 0.9
          specular: 0.5
          specular_exp: 32
    planes:
      - pos: {x: 0, y: 0, z: 0}
        norm: {x: 0, y: 1, z: 0}
        material: {...}
    point_lights:
      - pos: {x: 2, y: 5, z: -2}
        colour: {r: 255, g: 255, b: 255}
        intensity: 0.8
    ambient: 0.1
    background: {r: 20, g: 20, b: 40}

Spheres are placed before planes in the primitive order. The sphere,
plane and light lists may be omitted; everything else is required.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import yaml

from raycast.camera.viewport import Camera
from raycast.scene.model import Material, Plane, PointLight, Scene, Sphere

YAML_SUFFIXES = (".yml", ".yaml")
JSON_SUFFIXES = (".json",)


class _SceneYamlLoader(yaml.SafeLoader):
    """SafeLoader that also reads YAML 1.2 floats without a dot, such as 1e-1."""


_SceneYamlLoader.add_implicit_resolver(
    "tag:yaml.org,2002:float",
    re.compile(r"^[-+]?(?:[0-9][0-9_]*)(?:\.[0-9_]*)?[eE][-+]?[0-9]+$"),
    list("-+0123456789"),
)


def _require(mapping: Any, key: str, where: str) -> Any:
    if not isinstance(mapping, dict):
        raise ValueError(f"{where} must be a mapping, got {type(mapping).__name__}")
    if key not in mapping:
        raise ValueError(f"{where}: missing required field '{key}'")
    return mapping[key]


def _number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{where} must be a number, got {value!r}")
    return float(value)


def _xyz(value: Any, where: str) -> tuple[float, float, float]:
    return (
        _number(_require(value, "x", where), f"{where}.x"),
        _number(_require(value, "y", where), f"{where}.y"),
        _number(_require(value, "z", where), f"{where}.z"),
    )


def _rgb(value: Any, where: str) -> tuple[int, int, int]:
    channels = []
    for key in ("r", "g", "b"):
        c = _require(value, key, where)
        if isinstance(c, bool) or not isinstance(c, int) or not 0 <= c <= 255:
            raise ValueError(f"{where}.{key} must be an integer in [0, 255], got {c!r}")
        channels.append(c)
    return (channels[0], channels[1], channels[2])


def _sequence(data: dict, key: str) -> list:
    items = data.get(key, [])
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValueError(f"'{key}' must be a list, got {type(items).__name__}")
    return items


def _material(value: Any, where: str) -> Material:
    return Material(
        colour=_rgb(_require(value, "colour", where), f"{where}.colour"),
        diffuse=_number(_require(value, "diffuse", where), f"{where}.diffuse"),
        specular=_number(_require(value, "specular", where), f"{where}.specular"),
        specular_exp=_number(_require(value, "specular_exp", where), f"{where}.specular_exp"),
    )


def scene_from_dict(data: Any) -> Scene:
    """Build a Scene from a parsed scene document.

    Args:
        data: Mapping in the layout described in the module docstring.

    Returns:
        The validated Scene.

    Raises:
        ValueError: If a field is missing, mistyped or out of range.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Scene document must be a mapping, got {type(data).__name__}")

    cam = _require(data, "camera", "scene")
    camera = Camera(
        position=_xyz(_require(cam, "pos", "camera"), "camera.pos"),
        direction=_xyz(_require(cam, "dir", "camera"), "camera.dir"),
        fov=_number(_require(cam, "fov", "camera"), "camera.fov"),
    )

    primitives: list[Sphere | Plane] = []
    for i, item in enumerate(_sequence(data, "spheres")):
        where = f"spheres[{i}]"
        primitives.append(
            Sphere(
                center=_xyz(_require(item, "pos", where), f"{where}.pos"),
                radius=_number(_require(item, "radius", where), f"{where}.radius"),
                material=_material(_require(item, "material", where), f"{where}.material"),
            )
        )
    for i, item in enumerate(_sequence(data, "planes")):
        where = f"planes[{i}]"
        primitives.append(
            Plane(
                point=_xyz(_require(item, "pos", where), f"{where}.pos"),
                normal=_xyz(_require(item, "norm", where), f"{where}.norm"),
                material=_material(_require(item, "material", where), f"{where}.material"),
            )
        )

    lights = []
    for i, item in enumerate(_sequence(data, "point_lights")):
        where = f"point_lights[{i}]"
        lights.append(
            PointLight(
                position=_xyz(_require(item, "pos", where), f"{where}.pos"),
                colour=_rgb(_require(item, "colour", where), f"{where}.colour"),
                intensity=_number(_require(item, "intensity", where), f"{where}.intensity"),
            )
        )

    return Scene(
        camera=camera,
        primitives=tuple(primitives),
        lights=tuple(lights),
        ambient=_number(_require(data, "ambient", "scene"), "ambient"),
        background=_rgb(_require(data, "background", "scene"), "background"),
    )


def _xyz_dict(v) -> dict[str, float]:
    return {"x": v[0], "y": v[1], "z": v[2]}


def _rgb_dict(c) -> dict[str, int]:
    return {"r": c[0], "g": c[1], "b": c[2]}


def _material_dict(m: Material) -> dict[str, Any]:
    return {
        "colour": _rgb_dict(m.colour),
        "diffuse": m.diffuse,
        "specular": m.specular,
        "specular_exp": m.specular_exp,
    }


def scene_to_dict(scene: Scene) -> dict[str, Any]:
    """Serialise a Scene to a document accepted by scene_from_dict().

    Spheres are written before planes, so a scene whose planes come before
    its spheres loads back in sphere-first order.
    """
    return {
        "camera": {
            "pos": _xyz_dict(scene.camera.position),
            "dir": _xyz_dict(scene.camera.direction),
            "fov": scene.camera.fov,
        },
        "spheres": [
            {"pos": _xyz_dict(s.center), "radius": s.radius, "material": _material_dict(s.material)}
            for s in scene.spheres
        ],
        "planes": [
            {"pos": _xyz_dict(p.point), "norm": _xyz_dict(p.normal), "material": _material_dict(p.material)}
            for p in scene.planes
        ],
        "point_lights": [
            {"pos": _xyz_dict(light.position), "colour": _rgb_dict(light.colour), "intensity": light.intensity}
            for light in scene.lights
        ],
        "ambient": scene.ambient,
        "background": _rgb_dict(scene.background),
    }


def parse_scene(text: str, fmt: str = "yaml") -> Scene:
    """Parse scene text in the given format ("yaml" or "json").

    Raises:
        ValueError: On a syntax error or an invalid document.
    """
    try:
        if fmt == "yaml":
            data = yaml.load(text, Loader=_SceneYamlLoader)
        elif fmt == "json":
            data = json.loads(text)
        else:
            raise ValueError(f"Unknown scene format '{fmt}', expected 'yaml' or 'json'")
    except yaml.YAMLError as exc:
        raise ValueError(f"Malformed YAML scene: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Malformed JSON scene: {exc}") from exc
    return scene_from_dict(data)


def load_scene_file(path: str | Path) -> Scene:
    """Load a scene from a .yml/.yaml or .json file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: On an unknown suffix or an invalid document.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in YAML_SUFFIXES:
        fmt = "yaml"
    elif suffix in JSON_SUFFIXES:
        fmt = "json"
    else:
        raise ValueError(f"Unsupported scene file type '{path.suffix}' for {path}")
    return parse_scene(path.read_text(encoding="utf-8"), fmt)


def save_scene_file(scene: Scene, path: str | Path) -> None:
    """Write a scene as YAML or JSON, chosen by the file suffix."""
    path = Path(path)
    data = scene_to_dict(scene)
    suffix = path.suffix.lower()
    if suffix in YAML_SUFFIXES:
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    elif suffix in JSON_SUFFIXES:
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    else:
        raise ValueError(f"Unsupported scene file type '{path.suffix}' for {path}")
