"""Jittered supersampling with a stateless per-pixel random source.

Sample 0 of every pixel is the exact pixel ray. Samples 1..N-1 are offset by
a uniform jitter in [0, 1) along both pixel strides. The jitter is drawn from
an integer hash of (seed, pixel index, sample index, axis) rather than a
shared generator, so:

- every pixel owns its random stream, whatever thread renders it
- the same seed always yields the same image
- rendering rows in separate bands gives the same bytes as one full pass

The hash is Thomas Wang's 32-bit integer hash, cascaded over the inputs.
"""

import taichi as ti

from raycast.core.ray import real

# 2^24: the top 24 bits of a hash map exactly onto [0, 1) in steps of 2^-24
_UNIT_SCALE = 16777216.0


@ti.func
def wang_hash(key: ti.u32) -> ti.u32:
    """Thomas Wang's 32-bit integer hash (wrapping unsigned arithmetic)."""
    k = (key ^ ti.u32(61)) ^ (key >> ti.u32(16))
    k = k * ti.u32(9)
    k = k ^ (k >> ti.u32(4))
    k = k * ti.u32(0x27D4EB2D)
    k = k ^ (k >> ti.u32(15))
    return k


@ti.func
def random_unit(seed: ti.u32, pixel: ti.u32, sample: ti.u32, axis: ti.u32) -> real:
    """Uniform value in [0, 1) for one jitter axis of one sample.

    Args:
        seed: Caller-controlled seed for the whole render.
        pixel: Linear pixel index (y * width + x).
        sample: Sample index within the pixel.
        axis: 0 for the x stride, 1 for the y stride.

    Returns:
        A deterministic value in [0, 1).
    """
    h = wang_hash(seed ^ wang_hash(pixel ^ wang_hash(sample * ti.u32(2) + axis)))
    return ti.cast(h >> ti.u32(8), real) / _UNIT_SCALE


@ti.func
def sample_position(x: ti.i32, y: ti.i32, sample: ti.i32, width: ti.i32, seed: ti.u32):
    """Fractional pixel coordinates for one sample.

    Args:
        x: Pixel column.
        y: Pixel row.
        sample: Sample index; 0 is never jittered.
        width: Image width, used to linearise the pixel index.
        seed: Render seed.

    Returns:
        Tuple (px, py) of pixel-space coordinates to feed get_pixel_ray().
    """
    px = ti.cast(x, real)
    py = ti.cast(y, real)
    if sample > 0:
        pixel = ti.cast(y * width + x, ti.u32)
        s = ti.cast(sample, ti.u32)
        px += random_unit(seed, pixel, s, ti.u32(0))
        py += random_unit(seed, pixel, s, ti.u32(1))
    return px, py


def normalize_seed(seed: int) -> int:
    """Fold an arbitrary Python int into the unsigned 32-bit seed space."""
    return int(seed) & 0xFFFFFFFF
