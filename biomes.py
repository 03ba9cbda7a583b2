'''
biomes.py -- biome records and the provider interface consumed by terrain generation

Biome classification itself is owned by the host world; only the record type,
the provider interface and two small adapters live here.
'''

from collections import namedtuple

from blocks import GRASS, DIRT, SAND, BLOCK_ID

# height and volatility are in the units of the terrain field: height is the
# surface offset as a fraction of MAX_ELEV, volatility scales the 3D noise.
Biome = namedtuple('Biome', 'name height volatility top filler')

OCEAN = Biome('Ocean', -0.25, 0.04, SAND, SAND)
PLAINS = Biome('Plains', 0.03, 0.02, GRASS, DIRT)
DESERT = Biome('Desert', 0.04, 0.02, SAND, BLOCK_ID['Sandstone'])
HILLS = Biome('Hills', 0.12, 0.12, GRASS, DIRT)
MOUNTAINS = Biome('Mountains', 0.3, 0.25, BLOCK_ID['Snow'], BLOCK_ID['Gravel'])


class BiomeProvider(object):
    """Classifies a block column into a Biome."""

    def classify(self, x, z):
        raise NotImplementedError


class UniformBiomeProvider(BiomeProvider):
    """The same biome everywhere."""

    def __init__(self, biome=PLAINS):
        self.biome = biome

    def classify(self, x, z):
        return self.biome


class CallableBiomeProvider(BiomeProvider):
    """Adapts a function (x, z) -> Biome."""

    def __init__(self, func):
        self.func = func

    def classify(self, x, z):
        return self.func(x, z)
