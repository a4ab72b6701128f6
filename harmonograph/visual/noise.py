"""
Coherent noise for the harmonograph perturbation step.

Improved gradient noise (Perlin, 2002) in three dimensions, vectorized with
numpy, plus the linear remap used to turn noise samples into offsets.
"""

from typing import Union
import numpy as np


ArrayLike = Union[float, np.ndarray]

# Ken Perlin's reference permutation, doubled to avoid index wrapping
_PERMUTATION = np.array([
    151, 160, 137, 91, 90, 15, 131, 13, 201, 95, 96, 53, 194, 233, 7, 225,
    140, 36, 103, 30, 69, 142, 8, 99, 37, 240, 21, 10, 23, 190, 6, 148,
    247, 120, 234, 75, 0, 26, 197, 62, 94, 252, 219, 203, 117, 35, 11, 32,
    57, 177, 33, 88, 237, 149, 56, 87, 174, 20, 125, 136, 171, 168, 68, 175,
    74, 165, 71, 134, 139, 48, 27, 166, 77, 146, 158, 231, 83, 111, 229, 122,
    60, 211, 133, 230, 220, 105, 92, 41, 55, 46, 245, 40, 244, 102, 143, 54,
    65, 25, 63, 161, 1, 216, 80, 73, 209, 76, 132, 187, 208, 89, 18, 169,
    200, 196, 135, 130, 116, 188, 159, 86, 164, 100, 109, 198, 173, 186, 3, 64,
    52, 217, 226, 250, 124, 123, 5, 202, 38, 147, 118, 126, 255, 82, 85, 212,
    207, 206, 59, 227, 47, 16, 58, 17, 182, 189, 28, 42, 223, 183, 170, 213,
    119, 248, 152, 2, 44, 154, 163, 70, 221, 153, 101, 155, 167, 43, 172, 9,
    129, 22, 39, 253, 19, 98, 108, 110, 79, 113, 224, 232, 178, 185, 112, 104,
    218, 246, 97, 228, 251, 34, 242, 193, 238, 210, 144, 12, 191, 179, 162, 241,
    81, 51, 145, 235, 249, 14, 239, 107, 49, 192, 214, 31, 181, 199, 106, 157,
    184, 84, 204, 176, 115, 121, 50, 45, 127, 4, 150, 254, 138, 236, 205, 93,
    222, 114, 67, 29, 24, 72, 243, 141, 128, 195, 78, 66, 215, 61, 156, 180,
], dtype=np.int64)
_PERM = np.concatenate([_PERMUTATION, _PERMUTATION])

# The 12 cube-edge gradients, padded to 16 entries
_GRADIENTS = np.array([
    [1, 1, 0], [-1, 1, 0], [1, -1, 0], [-1, -1, 0],
    [1, 0, 1], [-1, 0, 1], [1, 0, -1], [-1, 0, -1],
    [0, 1, 1], [0, -1, 1], [0, 1, -1], [0, -1, -1],
    [1, 1, 0], [0, -1, 1], [-1, 1, 0], [0, -1, -1],
], dtype=np.float64)


def linear_remap(
    value: ArrayLike,
    in_min: float,
    in_max: float,
    out_min: float,
    out_max: float
) -> ArrayLike:
    """
    Linearly map value from [in_min, in_max] to [out_min, out_max].

    Values outside the input range are extrapolated, not clamped.
    """
    return (value - in_min) * (out_max - out_min) / (in_max - in_min) + out_min


def _fade(t: np.ndarray) -> np.ndarray:
    """Quintic smoothstep 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(t: np.ndarray, a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return a + t * (b - a)


def _grad(hash_: np.ndarray, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
    g = _GRADIENTS[hash_ & 15]
    return g[..., 0] * x + g[..., 1] * y + g[..., 2] * z


def coherent_noise_3d(x: ArrayLike, y: ArrayLike, z: ArrayLike) -> ArrayLike:
    """
    Sample 3D gradient noise.

    Inputs broadcast against each other. The result is smooth, deterministic,
    zero at integer lattice points, and lies within [-1, 1].

    Args:
        x: X coordinate(s)
        y: Y coordinate(s)
        z: Z coordinate(s)

    Returns:
        Noise value(s); a float when all inputs are scalars
    """
    x, y, z = np.broadcast_arrays(
        np.asarray(x, dtype=np.float64),
        np.asarray(y, dtype=np.float64),
        np.asarray(z, dtype=np.float64)
    )
    scalar = x.ndim == 0

    xf = np.floor(x)
    yf = np.floor(y)
    zf = np.floor(z)

    xi = xf.astype(np.int64) & 255
    yi = yf.astype(np.int64) & 255
    zi = zf.astype(np.int64) & 255

    x = x - xf
    y = y - yf
    z = z - zf

    u = _fade(x)
    v = _fade(y)
    w = _fade(z)

    a = _PERM[xi] + yi
    aa = _PERM[a] + zi
    ab = _PERM[a + 1] + zi
    b = _PERM[xi + 1] + yi
    ba = _PERM[b] + zi
    bb = _PERM[b + 1] + zi

    result = _lerp(
        w,
        _lerp(
            v,
            _lerp(u, _grad(_PERM[aa], x, y, z), _grad(_PERM[ba], x - 1, y, z)),
            _lerp(u, _grad(_PERM[ab], x, y - 1, z), _grad(_PERM[bb], x - 1, y - 1, z))
        ),
        _lerp(
            v,
            _lerp(u, _grad(_PERM[aa + 1], x, y, z - 1), _grad(_PERM[ba + 1], x - 1, y, z - 1)),
            _lerp(u, _grad(_PERM[ab + 1], x, y - 1, z - 1), _grad(_PERM[bb + 1], x - 1, y - 1, z - 1))
        )
    )

    # Gradient noise can marginally overshoot the unit interval
    result = np.clip(result, -1.0, 1.0)

    if scalar:
        return float(result)
    return result
