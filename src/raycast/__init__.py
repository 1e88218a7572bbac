"""Taichi-based ray caster with local (Phong) illumination.

This package renders still images of scenes made of spheres, infinite planes
and point lights, as seen from a pinhole camera. Every primary ray is resolved
against every primitive, shaded with ambient + diffuse + specular terms, and
tested for shadows with secondary rays toward each light. Jittered
supersampling smooths edges.

Subpackages:
    core: Rays, sampling, the shading integrator and frame buffers
    camera: Camera description and viewport derivation
    geometry: Sphere and plane intersection routines
    materials: Phong material model and channel arithmetic
    scene: Scene model, Taichi-side storage, loader and presets
    preview: PNG export and interactive preview window

Modules that declare Taichi fields (camera.pinhole, scene.intersection,
scene.lights, core.integrator) must be imported after ``ti.init()``; see
``raycast.config.init_taichi``.
"""

__version__ = "0.1.0"
