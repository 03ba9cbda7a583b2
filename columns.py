'''
columns.py -- per-column biome height and volatility as scalar fields
'''

import math

import numpy

import config
from field import ScalarField


class ColumnParameterSource(object):
    """ Height and volatility fields blended from biome data.

    Biome values are blended on a section lattice (every `section_size`
    blocks in x and z) with a distance-weighted kernel over
    `smooth_radius` sections, and bilinearly interpolated for the columns in
    between, so biome borders become slopes instead of cliffs.

    Results are cached for the active chunk. Call `set_chunk` before
    evaluating columns of a different chunk; evaluating without it is a
    caller error (values stay finite but the cache keeps growing). Not
    thread-safe: give each generation worker its own instance.
    """

    def __init__(self, provider, smooth_radius=None, section_size=None):
        if smooth_radius is None:
            smooth_radius = getattr(config, 'BIOME_SMOOTH_RADIUS', 2)
        if section_size is None:
            section_size = getattr(config, 'BIOME_SECTION_SIZE', (4, 4))
        smooth_radius = int(smooth_radius)
        section_size = tuple(int(s) for s in section_size)
        if smooth_radius < 0:
            raise ValueError(f"smooth radius must be non-negative, got {smooth_radius}")
        if len(section_size) != 2 or min(section_size) < 1:
            raise ValueError(f"section size must be two positive integers, got {section_size}")
        self.provider = provider
        self.smooth_radius = smooth_radius
        self.section_size = section_size
        self.chunk = None
        self._biomes = {}
        self._sections = {}
        self._columns = {}

        r = smooth_radius
        kernel = [(dx, dz, 10.0 / math.sqrt(dx * dx + dz * dz + 0.2))
                  for dx in range(-r, r + 1) for dz in range(-r, r + 1)]
        total = sum(w for _, _, w in kernel)
        self._kernel = [(dx, dz, w / total) for dx, dz, w in kernel]

        self.height = ScalarField(lambda x, y, z: self._lookup(x, z)[0])
        self.volatility = ScalarField(lambda x, y, z: self._lookup(x, z)[1])

    def set_chunk(self, cx, cz):
        self.chunk = (int(cx), int(cz))
        self._biomes.clear()
        self._sections.clear()
        self._columns.clear()

    def get_biome(self, x, y, z):
        key = (int(x), int(z))
        biome = self._biomes.get(key)
        if biome is None:
            biome = self.provider.classify(key[0], key[1])
            self._biomes[key] = biome
        return biome

    def _section(self, sx, sz):
        key = (sx, sz)
        params = self._sections.get(key)
        if params is None:
            ssx, ssz = self.section_size
            height = 0.0
            volatility = 0.0
            for dx, dz, w in self._kernel:
                biome = self.get_biome((sx + dx) * ssx, 0, (sz + dz) * ssz)
                height += w * biome.height
                volatility += w * biome.volatility
            params = (height, volatility)
            self._sections[key] = params
        return params

    def column(self, x, z):
        """(height, volatility) of block column (x, z)."""
        key = (int(x), int(z))
        params = self._columns.get(key)
        if params is None:
            ssx, ssz = self.section_size
            sx, fx = divmod(key[0], ssx)
            sz, fz = divmod(key[1], ssz)
            u = fx / float(ssx)
            w = fz / float(ssz)
            h00, v00 = self._section(sx, sz)
            h10, v10 = self._section(sx + 1, sz)
            h01, v01 = self._section(sx, sz + 1)
            h11, v11 = self._section(sx + 1, sz + 1)
            height = (h00 * (1 - u) + h10 * u) * (1 - w) + (h01 * (1 - u) + h11 * u) * w
            volatility = (v00 * (1 - u) + v10 * u) * (1 - w) + (v01 * (1 - u) + v11 * u) * w
            params = (height, volatility)
            self._columns[key] = params
        return params

    def _lookup(self, x, z):
        x, z = numpy.broadcast_arrays(numpy.asarray(x), numpy.asarray(z))
        shape = x.shape
        pairs = numpy.stack([x.ravel(), z.ravel()], axis=-1).astype(numpy.int64)
        unique, inverse = numpy.unique(pairs, axis=0, return_inverse=True)
        params = numpy.array([self.column(cx, cz) for cx, cz in unique.tolist()],
                             dtype=numpy.float64).reshape(-1, 2)
        inverse = inverse.reshape(-1)
        return params[inverse, 0].reshape(shape), params[inverse, 1].reshape(shape)
