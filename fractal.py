'''
fractal.py -- multi-octave ("fractal") gradient noise as a ScalarField
'''

import math
from collections import namedtuple

import numpy

import noise
from field import ScalarField


NoiseParameters = namedtuple('NoiseParameters', 'seed frequency octaves')


def derive_seeds(root_seed, count):
    """ Draw `count` independent 63-bit seeds from one root seed.

    The same root seed always gives the same sequence, so fields seeded from
    it are reproducible regardless of the order they are built in.

    """
    if count < 0:
        raise ValueError(f"seed count must be non-negative, got {count}")
    rng = numpy.random.default_rng(int(root_seed) & noise.SEED_MASK)
    return [int(s) for s in rng.integers(0, 2**63 - 1, size=count, dtype=numpy.int64)]


class FractalNoiseSource(object):
    """ Builder for fractal noise fields.

        field = FractalNoiseSource.simplex().seed(s).frequency(0.01).octaves(8).create()

    Octave i samples the noise at coordinate * frequency * 2**i with amplitude
    0.5**i; the octaves are summed without normalisation. A per-axis frequency
    of zero removes that axis, e.g. frequency(f, 0, f) gives a 2D heightmap
    noise that ignores y.
    """

    def __init__(self):
        self._seed = 0
        self._frequency = (1.0, 1.0, 1.0)
        self._octaves = 1

    @classmethod
    def simplex(cls):
        return cls()

    def seed(self, seed):
        self._seed = int(seed)
        return self

    def frequency(self, fx, fy=None, fz=None):
        if fy is None and fz is None:
            fy = fz = fx
        elif fy is None or fz is None:
            raise ValueError("frequency takes one value or one per axis")
        freq = (float(fx), float(fy), float(fz))
        if not all(math.isfinite(f) for f in freq):
            raise ValueError(f"frequency must be finite, got {freq}")
        self._frequency = freq
        return self

    def octaves(self, octaves):
        if isinstance(octaves, bool) or int(octaves) != octaves or octaves < 1:
            raise ValueError(f"octave count must be a positive integer, got {octaves!r}")
        self._octaves = int(octaves)
        return self

    @property
    def params(self):
        return NoiseParameters(self._seed, self._frequency, self._octaves)

    def create(self):
        return fractal_field(self.params)


def fractal_field(params):
    seed, frequency, octaves = params
    if octaves < 1:
        raise ValueError(f"octave count must be a positive integer, got {octaves!r}")
    generators = [noise.SimplexNoise(s) for s in derive_seeds(seed, octaves)]
    # Per-octave (frequency, amplitude) pairs, fixed at construction.
    base = numpy.array(frequency, dtype=numpy.float64)
    layers = [(base * 2.0 ** i, 0.5 ** i) for i in range(octaves)]

    def fn(x, y, z):
        x, y, z = numpy.broadcast_arrays(x, y, z)
        shape = x.shape
        pts = numpy.stack([x.ravel(), y.ravel(), z.ravel()], axis=-1).astype(numpy.float64)
        total = numpy.zeros(pts.shape[0], dtype=numpy.float64)
        for gen, (freq, amp) in zip(generators, layers):
            total += gen.noise(pts * freq) * amp
        return total.reshape(shape)

    return ScalarField(fn)
