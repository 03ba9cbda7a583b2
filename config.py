import math

# Size of cubes used to stream terrain generation (x, y and z).
CUBE_SIZE = 16

# Vertical layout of the world.
SEA_LEVEL = 64
# Elevation range the combined terrain field is scaled to.
MAX_ELEV = 256.0
# Density at y=0 before biome adjustment; puts the neutral surface at sea level.
HEIGHT_OFFSET = 64.0
# Density lost per block going up.
VERTICAL_SCALE = 1.0

# Surface materials: blocks with density below this get the biome filler.
DIRT_DEPTH = 4.0

# Main terrain noise. The frequency is chosen so the top octave stays near
# one feature per few blocks.
OCTAVES = 16
TERRAIN_FREQUENCY = 684.412 / 2 ** OCTAVES / (MAX_ELEV / 64.0)

# Selector noise choosing between the low and high terrain fields.
SELECTOR_OCTAVES = 8
SELECTOR_FREQUENCY = 8.55515 / 2 ** SELECTOR_OCTAVES / (MAX_ELEV / 64.0)

# 2D height perturbation.
HEIGHTMAP_OCTAVES = 10
HEIGHTMAP_FREQUENCY = 200.0 / 2 ** HEIGHTMAP_OCTAVES / (MAX_ELEV / 64.0)

# Volatility is divided by this below the biome height band.
BELOW_HEIGHT_VOLATILITY_DIVISOR = 4.0

# Coarse lattice stride (x, y, z) used by the interpolating evaluator.
TERRAIN_STRIDE = (4, 8, 4)

# Biome blending: radius in sections and section size in blocks (x, z).
BIOME_SMOOTH_RADIUS = 2 * int(MAX_ELEV / 64)
BIOME_SECTION_SIZE = (4, 4)

# Cave and ravine tunables. Consumed by the cave carving stage, not by the
# density core.
CAVE_SETTINGS = {
    'rarity_per_chunk': 7,
    'max_initial_nodes': 14,
    'large_node_rarity': 4,
    'large_node_max_branches': 4,
    'big_cave_rarity': 10,
    'size_factor1': 10.0,
    'size_factor2': 1.0,
    'big_size_factor_range': (1.0, 4.0),
    'size_add': 1.5,
    'alternate_flatten_factor_rarity': 6,
    'flatten_factor': 0.7,
    'alt_flatten_factor': 0.92,
    'direction_change_factor': 0.9,
    'prev_horiz_acceleration_weight': 0.75,
    'prev_vert_acceleration_weight': 0.9,
    'max_horiz_accel_change': 4.0,
    'max_vert_accel_change': 2.0,
    'carve_step_rarity': 4,
    'floor_depth': -0.7,
}

RAVINE_SETTINGS = {
    'rarity_per_chunk': 64,
    'min_y': -math.inf,
    'max_y': 20,
    'min_length': 84,
    'max_length': 111,
    'width_factor': 3.0,
    'height_factor': 3.0,
    'vertical_size_factor': 0.2,
    'stretch_factor': 3.0,
}

# Enable ANSI colors in logs.
LOG_COLOR = True

# Log field/evaluator activity (lattice sizes, corner counts).
LOG_EVALUATOR = False

# Log per-cube terrain generation.
LOG_MAPGEN = True
