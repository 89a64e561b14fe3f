"""Per-scanline random streams and Monte Carlo sampling utilities.

The renderer treats uniform random numbers as an injected capability:
every Taichi function that needs randomness takes a ``stream`` index and
calls ``uniform(stream)``. Each stream is an independent xorshift32 state
stored in a Taichi field, and the render kernel assigns one stream to each
scanline. Because a scanline is always processed by exactly one thread, no
two threads ever touch the same state, and the image produced for a given
seed does not depend on how many worker threads Taichi uses.

Stream states are derived on the host from a single integer seed with a
splitmix-style hash (``stream_seeds``), then uploaded with
``seed_streams``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretrace.core.sampling import seed_streams, uniform
    >>> seed_streams(1234)
    >>> @ti.kernel
    ... def draw() -> ti.f32:
    ...     return uniform(0)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.spheretrace.core.ray import length_squared, vec3

# One stream per scanline of the largest supported image
MAX_STREAMS = 2048

# 24 random bits map exactly onto the f32 mantissa, keeping results in [0, 1)
_INV_2_24 = 1.0 / 16777216.0

_MASK32 = np.uint64(0xFFFFFFFF)

# xorshift32 state per stream
_rng_states = ti.field(dtype=ti.u32, shape=MAX_STREAMS)


def stream_seeds(seed: int, count: int = MAX_STREAMS) -> npt.NDArray[np.uint32]:
    """Derive the initial state of each random stream from a seed.

    Stream i receives a splitmix32 hash of ``seed + (i + 1) * golden_ratio``.
    The derivation is independent of ``count``: stream i always gets the same
    state for a given seed.

    Args:
        seed: Any integer; only its low 32 bits are used.
        count: Number of stream states to produce.

    Returns:
        Array of ``count`` non-zero uint32 states.
    """
    idx = np.arange(1, count + 1, dtype=np.uint64)
    x = (np.uint64(seed & 0xFFFFFFFF) + idx * np.uint64(0x9E3779B9)) & _MASK32
    x ^= x >> np.uint64(16)
    x = (x * np.uint64(0x7FEB352D)) & _MASK32
    x ^= x >> np.uint64(15)
    x = (x * np.uint64(0x846CA68B)) & _MASK32
    x ^= x >> np.uint64(16)
    # xorshift has an absorbing zero state
    x[x == 0] = 1
    return x.astype(np.uint32)


def seed_streams(seed: int) -> None:
    """Reset every random stream from a single seed.

    Must be called from Python (not from within a Taichi kernel).
    """
    _rng_states.from_numpy(stream_seeds(seed, MAX_STREAMS))


def get_stream_state(stream: int) -> int:
    """Get the current raw state of a stream (for debugging and tests)."""
    return int(_rng_states[stream])


@ti.func
def uniform(stream: ti.i32) -> ti.f32:
    """Draw a uniform float in [0, 1) from the given stream.

    Advances the stream's xorshift32 state (shifts 13, 17, 5) and returns
    its top 24 bits scaled by 2^-24.

    Args:
        stream: Index of the stream owned by the calling unit of work.

    Returns:
        A float in [0, 1).
    """
    x = _rng_states[stream]
    x ^= x << ti.cast(13, ti.u32)
    x ^= (x >> ti.cast(17, ti.u32)) & ti.cast(0x7FFF, ti.u32)
    x ^= x << ti.cast(5, ti.u32)
    _rng_states[stream] = x
    bits = (x >> ti.cast(8, ti.u32)) & ti.cast(0xFFFFFF, ti.u32)
    return ti.cast(bits, ti.f32) * _INV_2_24


@ti.func
def random_in_unit_sphere(stream: ti.i32) -> vec3:
    """Generate a random point strictly inside the unit sphere.

    Rejection sampling: draws points in the [-1, 1)^3 cube (x, y, z in that
    order) until one has squared length below 1.

    Args:
        stream: Random stream to draw from.

    Returns:
        A point p with |p| < 1.
    """
    result = vec3(0.0, 0.0, 0.0)
    while True:
        p = 2.0 * vec3(uniform(stream), uniform(stream), uniform(stream)) - vec3(1.0, 1.0, 1.0)
        if length_squared(p) < 1.0:
            result = p
            break
    return result


@ti.func
def random_in_unit_disk(stream: ti.i32) -> vec3:
    """Generate a random point inside the unit disk in the xy-plane.

    Used for thin-lens depth of field sampling.

    Args:
        stream: Random stream to draw from.

    Returns:
        A point (x, y, 0) with x^2 + y^2 < 1.
    """
    result = vec3(0.0, 0.0, 0.0)
    while True:
        p = 2.0 * vec3(uniform(stream), uniform(stream), 0.0) - vec3(1.0, 1.0, 0.0)
        if tm.dot(p, p) < 1.0:
            result = p
            break
    return result
