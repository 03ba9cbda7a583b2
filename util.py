import numpy as np

from config import CUBE_SIZE


def lerp(t, low, high):
    """ Linear interpolation, `t` unclamped (t outside [0, 1] extrapolates).
    Works elementwise on numpy arrays.

    At t=0 and t=1 the endpoint is returned as is, so an infinite value at
    the other end does not turn the result into nan.

    """
    with np.errstate(invalid='ignore', over='ignore'):
        mixed = low * (1.0 - t) + high * t
    return np.where(t == 0, low, np.where(t == 1, high, mixed))


def cube_min_block(cube_pos, size=CUBE_SIZE):
    cx, cy, cz = cube_pos
    return (cx * size, cy * size, cz * size)


def cube_max_block(cube_pos, size=CUBE_SIZE):
    x0, y0, z0 = cube_min_block(cube_pos, size)
    return (x0 + size - 1, y0 + size - 1, z0 + size - 1)
