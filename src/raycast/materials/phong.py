"""Phong-family local illumination on 8-bit colour channels.

A material is a base colour (integers 0-255) and three coefficients. Every
term of the shading model scales that base colour by a real factor and
truncates back to an integer channel:

    scale(c, f) = trunc(clamp(c * f, 0, 255))

For one visible point light, with L the unit direction to the light, N the
unit surface normal, V the unit direction to the viewer and I the light
intensity:

    diffuse  = scale(colour, max(0, L.N) * kd * I)
    R        = 2 (L.N) N - L
    specular = scale(colour, max(0, R.V)^exp * ks * I)
    contrib  = min(diffuse + specular, 255)

The integrator adds the ambient term and the contributions of all visible
lights and clamps the total to [0, 255].

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raycast.materials.phong import Material, light_contribution
    >>> # Use within a Taichi kernel:
    >>> # rgb = light_contribution(material, normal, to_light, to_viewer, 1.0)
"""

import taichi as ti
import taichi.math as tm

from raycast.core.ray import ivec3, real, reflect_about, vec3


@ti.dataclass
class Material:
    """Surface appearance of a primitive.

    Attributes:
        colour: Base colour, each channel in [0, 255].
        diffuse: Diffuse coefficient kd in [0, 1].
        specular: Specular coefficient ks in [0, 1].
        specular_exp: Shininess exponent (>= 0).
    """

    colour: ivec3
    diffuse: real
    specular: real
    specular_exp: real


@ti.func
def scale_colour(colour: ivec3, factor: real) -> ivec3:
    """Scale each channel by a factor, clamping to [0, 255] and truncating."""
    scaled = tm.clamp(ti.cast(colour, real) * factor, 0.0, 255.0)
    return ti.cast(scaled, ti.i32)


@ti.func
def phong_factors(
    normal: vec3,
    to_light: vec3,
    to_viewer: vec3,
    diffuse: real,
    specular: real,
    specular_exp: real,
    intensity: real,
):
    """Compute the diffuse and specular scale factors for one light.

    Args:
        normal: Unit surface normal.
        to_light: Unit direction from the surface point to the light.
        to_viewer: Unit direction from the surface point to the viewer.
        diffuse: Diffuse coefficient kd.
        specular: Specular coefficient ks.
        specular_exp: Shininess exponent.
        intensity: Light intensity.

    Returns:
        Tuple (diffuse_factor, specular_factor).
    """
    dot_n = ti.max(0.0, tm.dot(to_light, normal))
    diffuse_factor = dot_n * diffuse * intensity

    reflected = reflect_about(to_light, normal)
    r_dot_v = ti.max(0.0, tm.dot(reflected, to_viewer))
    specular_factor = ti.pow(r_dot_v, specular_exp) * specular * intensity

    return diffuse_factor, specular_factor


@ti.func
def light_contribution(
    material: Material,
    normal: vec3,
    to_light: vec3,
    to_viewer: vec3,
    intensity: real,
) -> ivec3:
    """Colour contributed by one unoccluded point light.

    Args:
        material: Material at the shaded point.
        normal: Unit surface normal.
        to_light: Unit direction to the light.
        to_viewer: Unit direction to the viewer.
        intensity: Light intensity.

    Returns:
        Integer RGB contribution, each channel at most 255.
    """
    diffuse_factor, specular_factor = phong_factors(
        normal,
        to_light,
        to_viewer,
        material.diffuse,
        material.specular,
        material.specular_exp,
        intensity,
    )
    diffuse_rgb = scale_colour(material.colour, diffuse_factor)
    specular_rgb = scale_colour(material.colour, specular_factor)
    return ti.min(diffuse_rgb + specular_rgb, ivec3(255, 255, 255))


@ti.func
def ambient_colour(material: Material, ambient: real) -> ivec3:
    """Ambient term: the base colour scaled by the scene ambient level."""
    return scale_colour(material.colour, ambient)
