'''
scaling.py -- evaluate an expensive field on a coarse lattice and rebuild
full-resolution values and gradients by trilinear interpolation
'''

import math
import numbers

import numpy as np

import logutil
from field import Region, EntryIterator, ExtendedEntry, as_field
from util import lerp


def as_stride(scale):
    """Validate a per-axis stride: three integers >= 1."""
    try:
        values = tuple(scale)
    except TypeError:
        raise ValueError(f"scale must be a 3-tuple of positive integers, got {scale!r}")
    if len(values) != 3:
        raise ValueError(f"scale must be a 3-tuple of positive integers, got {scale!r}")
    for s in values:
        if isinstance(s, bool) or not isinstance(s, (numbers.Integral, np.integer)) or s < 1:
            raise ValueError(f"scale must be a 3-tuple of positive integers, got {scale!r}")
    return tuple(int(s) for s in values)


def _mix(a, b, t):
    return lerp(t, a, b)


class ScaledInterpolatingEvaluator(object):
    """ Values and gradients of `field` over a region, sampling the field only
    on a lattice of spacing `scale` anchored at the region's min corner.

    Each axis gets max(ceil((size - 1) / stride), 1) cells, so the last lattice
    corner may lie past the region end; voxels are always interpolated inside a
    cell, never extrapolated. Gradients are the partial derivatives of the
    same trilinear interpolant, per voxel (divided by the stride). With a
    stride of 1 the values are the field's own values and the gradient is the
    forward difference to the next voxel.
    """

    def __init__(self, field, start, end, scale):
        self.scale = as_stride(scale)
        self.field = as_field(field)
        self.region = Region(start, end)
        self.cells = tuple(max(int(math.ceil((n - 1) / s)), 1)
                           for n, s in zip(self.region.size, self.scale))
        self.corner_evaluations = 0
        self._arrays = None

    def lattice_axes(self):
        return tuple(np.arange(c + 1, dtype=np.int64) * s + o
                     for c, s, o in zip(self.cells, self.scale, self.region.start))

    def _cell_coords(self, axis):
        n, s, c = self.region.size[axis], self.scale[axis], self.cells[axis]
        offset = np.arange(n, dtype=np.int64)
        cell = np.minimum(offset // s, c - 1)
        frac = (offset - cell * s) / float(s)
        shape = [1, 1, 1]
        shape[axis] = n
        return cell.reshape(shape), frac.reshape(shape)

    def values(self):
        """(value, grad_x, grad_y, grad_z) arrays of shape region.size, indexed [x, y, z]."""
        if self._arrays is None:
            self._arrays = self._evaluate()
        return self._arrays

    def _evaluate(self):
        axes = self.lattice_axes()
        corners = self.field.sample(*np.meshgrid(*axes, indexing='ij'))
        self.corner_evaluations = corners.size
        logutil.log("EVAL", f"{self.region} stride {self.scale}: {corners.size} lattice samples "
                            f"for {self.region.volume} voxels", level="DEBUG")

        (ix, u), (iy, v), (iz, w) = [self._cell_coords(a) for a in range(3)]
        c000 = corners[ix, iy, iz]
        c100 = corners[ix + 1, iy, iz]
        c010 = corners[ix, iy + 1, iz]
        c110 = corners[ix + 1, iy + 1, iz]
        c001 = corners[ix, iy, iz + 1]
        c101 = corners[ix + 1, iy, iz + 1]
        c011 = corners[ix, iy + 1, iz + 1]
        c111 = corners[ix + 1, iy + 1, iz + 1]

        with np.errstate(invalid='ignore', over='ignore'):
            x00 = _mix(c000, c100, u)
            x10 = _mix(c010, c110, u)
            x01 = _mix(c001, c101, u)
            x11 = _mix(c011, c111, u)
            y0 = _mix(x00, x10, v)
            y1 = _mix(x01, x11, v)
            value = _mix(y0, y1, w)

            sx, sy, sz = self.scale
            grad_x = _mix(_mix(c100 - c000, c110 - c010, v),
                          _mix(c101 - c001, c111 - c011, v), w) / sx
            grad_y = _mix(x10 - x00, x11 - x01, w) / sy
            grad_z = (y1 - y0) / sz

        shape = self.region.size
        return tuple(np.broadcast_to(a, shape) for a in (value, grad_x, grad_y, grad_z))

    def __iter__(self):
        return EntryIterator(self.region, self.values, ExtendedEntry)

    def stream(self):
        return iter(self)
