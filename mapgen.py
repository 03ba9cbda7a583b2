#std/external libs
import time
import numpy

#local libs
import config
import logutil
from blocks import AIR, STONE, WATER, BLOCK_SOLID
from biomes import UniformBiomeProvider
from columns import ColumnParameterSource
from field import NEGATIVE, NOT_NEGATIVE
from fractal import FractalNoiseSource, derive_seeds
from settings import GeneratorSettings
from util import cube_min_block, cube_max_block


class CubePrimer(object):
    """ Voxel sink for one cube, backed by a numpy array indexed [x, y, z].

    Accepts set_material calls in any order.
    """
    def __init__(self, cube_pos, size=config.CUBE_SIZE):
        self.cube_pos = tuple(cube_pos)
        self.size = size
        self.origin = cube_min_block(cube_pos, size)
        self.blocks = numpy.zeros((size, size, size), dtype='u2')

    def _local(self, x, y, z):
        lx, ly, lz = x - self.origin[0], y - self.origin[1], z - self.origin[2]
        if not (0 <= lx < self.size and 0 <= ly < self.size and 0 <= lz < self.size):
            raise IndexError(f"block {(x, y, z)} is outside cube {self.cube_pos}")
        return lx, ly, lz

    def set_material(self, x, y, z, material):
        self.blocks[self._local(x, y, z)] = material

    def get_material(self, x, y, z):
        return int(self.blocks[self._local(x, y, z)])

    def column_heights(self):
        """Local y of the highest solid block per (x, z) column, -1 where none."""
        solid = BLOCK_SOLID[self.blocks].astype(bool)
        any_solid = solid.any(axis=1)
        top_from_rev = numpy.argmax(solid[:, ::-1, :], axis=1)
        heights = (self.size - 1) - top_from_rev
        return numpy.where(any_solid, heights, -1)


class TerrainGenerator(object):
    """ Density terrain for one world seed.

    A coarse selector noise blends two independently seeded fractal fields
    (low/high), scaled by biome volatility and offset by biome height plus a
    2D height perturbation. The sum is scaled to MAX_ELEV and falls off with
    y, so density is positive below the surface and negative above.
    """

    def __init__(self, seed, biome_provider, settings=None):
        if seed is None:
            seed = int(time.time())
        self.seed = seed
        self.settings = settings if settings is not None else GeneratorSettings()
        s = self.settings

        selector_seed, low_seed, high_seed, height_seed = derive_seeds(seed, 4)
        self.selector = FractalNoiseSource.simplex().seed(selector_seed) \
            .frequency(s.selector_frequency).octaves(s.selector_octaves).create()
        self.low = FractalNoiseSource.simplex().seed(low_seed) \
            .frequency(s.terrain_frequency).octaves(s.octaves).create()
        self.high = FractalNoiseSource.simplex().seed(high_seed) \
            .frequency(s.terrain_frequency).octaves(s.octaves).create()

        # Flattened 2D noise: negative excursions folded and squashed harder
        # than positive ones.
        hf = s.heightmap_frequency
        self.random_height_2d = FractalNoiseSource.simplex().seed(height_seed) \
            .frequency(hf, 0, hf).octaves(s.heightmap_octaves).create() \
            .mul_if(NEGATIVE, -0.3).mul(3).sub(2).clamp(-2, 1) \
            .div_if(NEGATIVE, 2 * 2 * 1.4).div_if(NOT_NEGATIVE, 8) \
            .mul(0.2 * 17 / 64.0)

        self.biome_source = ColumnParameterSource(biome_provider, s.biome_smooth_radius,
                                                  s.biome_section_size)
        height = self.biome_source.height
        volatility = self.biome_source.volatility

        max_elev = s.max_elev
        offset = s.height_offset
        vscale = s.vertical_scale
        divisor = s.below_height_volatility_divisor

        def below_height_divisor(x, y, z):
            # y rebased with the same offset and scale as the density falloff
            # below, so elevation and biome height are both fractions of
            # max_elev (instead of y * 8 / max_elev).
            elevation = (y * vscale - offset) / max_elev
            return numpy.where(elevation < height(x, y, z), divisor, 1.0)

        self.terrain = self.selector.lerp(self.low, self.high) \
            .mul(volatility.div(below_height_divisor)) \
            .add(height).add(self.random_height_2d) \
            .mul(max_elev).add(offset).sub(lambda x, y, z: y * vscale)

    def generate_cube(self, primer, cube_x, cube_y, cube_z):
        """ Fill `primer` (anything with set_material) with the cube's terrain. """
        size = self.settings.cube_size
        cube_pos = (cube_x, cube_y, cube_z)
        start = cube_min_block(cube_pos, size)
        end = cube_max_block(cube_pos, size)
        logutil.set_cube(cube_pos)
        t = time.time()
        try:
            self.biome_source.set_chunk(cube_x, cube_z)
            count = 0
            for entry in self.terrain.scaled_stream(start, end, self.settings.stride):
                primer.set_material(entry.x, entry.y, entry.z, self.get_block(entry))
                count += 1
            logutil.log("MAPGEN", f"generated {count} blocks in {(time.time() - t) * 1000.0:.1f}ms")
        finally:
            logutil.set_cube(None)
        return primer

    def get_block(self, entry, biome=None):
        """ Material for one ExtendedEntry.

        The vertical gradient stands in for the distance to the surface:
        if density + grad_y <= 0 the block above is empty, so this block is
        the surface.
        """
        x, y, z = entry.x, entry.y, entry.z
        density = entry.value
        y_grad = entry.grad_y
        if biome is None:
            biome = self.biome_source.get_biome(x, y, z)
        sea_level = self.settings.sea_level

        state = AIR
        if density > 0:
            state = STONE
            #if the block above would be empty:
            if density + y_grad <= 0:
                if y < sea_level - 1:
                    state = biome.filler
                else:
                    state = biome.top
            #if density decreases as we go up && density < dirt_depth
            elif y_grad < 0 and density < self.settings.dirt_depth:
                state = biome.filler
        elif y < sea_level:
            state = WATER
        return state


terrain_generator = None

def initialize_terrain_generator(seed=None, biome_provider=None, settings=None):
    global terrain_generator
    if biome_provider is None:
        biome_provider = UniformBiomeProvider()
    terrain_generator = TerrainGenerator(seed, biome_provider, settings)
    return terrain_generator


def generate_terrain_cube(cube_pos):
    """Generate one cube with the global generator; returns the block array [x, y, z]."""
    global terrain_generator
    if terrain_generator is None:
        initialize_terrain_generator()
    primer = CubePrimer(cube_pos, size=terrain_generator.settings.cube_size)
    terrain_generator.generate_cube(primer, *cube_pos)
    return primer.blocks


if __name__ == '__main__':
    import sys
    seed = int(sys.argv[1]) if len(sys.argv) > 1 else 12345
    gen = initialize_terrain_generator(seed=seed)
    size = gen.settings.cube_size
    top_cube = int(gen.settings.height_offset + gen.settings.max_elev) // size
    heights = numpy.full((size, size), -1)
    for cy in range(top_cube, -1, -1):
        h = CubePrimer((0, cy, 0), size)
        gen.generate_cube(h, 0, cy, 0)
        local = h.column_heights()
        heights = numpy.where((heights < 0) & (local >= 0), local + cy * size, heights)
    for z in range(size):
        print(" ".join(f"{int(heights[x, z]):3d}" for x in range(size)))
