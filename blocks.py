import numpy


class Block(object):
    name = None
    solid = True


class Air(Block):
    name = 'Air'
    solid = False

class DirtWithGrass(Block):
    name = 'Grass'

class Dirt(Block):
    name = 'Dirt'

class Sand(Block):
    name = 'Sand'

class Sandstone(Block):
    name = 'Sandstone'

class Gravel(Block):
    name = 'Gravel'

class Stone(Block):
    name = 'Stone'

class Snow(Block):
    name = 'Snow'

class Water(Block):
    name = 'Water'
    solid = False


# Id 0 is always air so a zeroed array is an empty cube.
BLOCKS = [
    Air,
    DirtWithGrass,
    Dirt,
    Sand,
    Sandstone,
    Gravel,
    Stone,
    Snow,
    Water,
]

BLOCK_ID = {}
for i, x in enumerate(BLOCKS):
    BLOCK_ID[x.name] = i
BLOCK_NAME = [x.name for x in BLOCKS]
BLOCK_SOLID = numpy.array([x.solid for x in BLOCKS], dtype = numpy.uint8)

AIR = BLOCK_ID['Air']
STONE = BLOCK_ID['Stone']
WATER = BLOCK_ID['Water']
GRASS = BLOCK_ID['Grass']
DIRT = BLOCK_ID['Dirt']
SAND = BLOCK_ID['Sand']
