import logging
import math

import numpy as np

from ..core.rng import get_seeded_rng

logger = logging.getLogger(__name__)

PERMUTATION_SIZE = 256


def fade(t):
    """Quintic smoothstep 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6 - 15) + 10)


def lerp(a, b, t):
    return a + (b - a) * t


def grad(hash_value: int, x: float, y: float) -> float:
    """Dot product of (x, y) with one of eight lattice directions picked by the hash."""
    h = hash_value & 15
    u = x if h < 8 else y
    v = y if h < 8 else x
    return (u if (h & 1) == 0 else -u) + (v if (h & 2) == 0 else -v)


def _grad_array(hash_values: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    h = hash_values & 15
    u = np.where(h < 8, x, y)
    v = np.where(h < 8, y, x)
    return np.where((h & 1) == 0, u, -u) + np.where((h & 2) == 0, v, -v)


class NoiseField:
    """
    Seeded 2D gradient noise.

    The permutation table is shuffled once from the seed and doubled to 512
    entries so lattice lookups never need an explicit wraparound.
    """

    def __init__(self, seed: int):
        self.seed = seed
        rng = get_seeded_rng(seed)
        p = np.arange(PERMUTATION_SIZE, dtype=np.int64)
        for i in range(PERMUTATION_SIZE - 1, 0, -1):
            j = math.floor(rng.next() * (i + 1))
            p[i], p[j] = p[j], p[i]
        self.permutation = np.concatenate([p, p])
        self._p = self.permutation.tolist()
        logger.debug("Built noise permutation table for seed %d", seed)

    def sample(self, x: float, y: float) -> float:
        """Returns the noise value at (x, y), roughly in [-1, 1]."""
        x_floor = math.floor(x)
        y_floor = math.floor(y)
        xi = x_floor & 255
        yi = y_floor & 255
        xf = x - x_floor
        yf = y - y_floor

        u = fade(xf)
        v = fade(yf)

        p = self._p
        aa = p[p[xi] + yi]
        ab = p[p[xi] + yi + 1]
        ba = p[p[xi + 1] + yi]
        bb = p[p[xi + 1] + yi + 1]

        x1 = lerp(grad(aa, xf, yf), grad(ba, xf - 1, yf), u)
        x2 = lerp(grad(ab, xf, yf - 1), grad(bb, xf - 1, yf - 1), u)
        return lerp(x1, x2, v)

    def sample_grid(self, xs, ys) -> np.ndarray:
        """
        Vectorised version of `sample` for arrays of coordinates.

        `xs` and `ys` are broadcast against each other; the result has the
        broadcast shape.
        """
        xs, ys = np.broadcast_arrays(np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64))
        x_floor = np.floor(xs)
        y_floor = np.floor(ys)
        xi = x_floor.astype(np.int64) & 255
        yi = y_floor.astype(np.int64) & 255
        xf = xs - x_floor
        yf = ys - y_floor

        u = fade(xf)
        v = fade(yf)

        p = self.permutation
        aa = p[p[xi] + yi]
        ab = p[p[xi] + yi + 1]
        ba = p[p[xi + 1] + yi]
        bb = p[p[xi + 1] + yi + 1]

        x1 = lerp(_grad_array(aa, xf, yf), _grad_array(ba, xf - 1, yf), u)
        x2 = lerp(_grad_array(ab, xf, yf - 1), _grad_array(bb, xf - 1, yf - 1), u)
        return lerp(x1, x2, v)
