'''
field.py -- composable scalar density fields over the integer voxel lattice

A ScalarField wraps a pure function of (x, y, z). Fields are evaluated with
broadcast integer arrays, so a whole region (or a whole coarse lattice) is
evaluated in one call. Plain scalar functions are accepted too: value maps and
predicates are vectorised element by element unless they are numpy ufuncs or
marked with `numpy_aware`, and `ScalarField(fn, vectorize=True)` does the same
for a scalar coordinate function. Combinators never mutate a field; each
returns a new field closing over its operands.
'''

import numbers
from collections import namedtuple

import numpy as np

from util import lerp as _lerp


def numpy_aware(func):
    """Mark `func` as safe to call with whole arrays instead of single values."""
    func.numpy_aware = True
    return func


def _elementwise(func, otype):
    if isinstance(func, np.ufunc) or getattr(func, 'numpy_aware', False):
        return func
    return np.vectorize(func, otypes=[otype])


# Canonical predicates for the conditional combinators.
@numpy_aware
def NEGATIVE(value):
    return value < 0


@numpy_aware
def POSITIVE(value):
    return value > 0


@numpy_aware
def NOT_NEGATIVE(value):
    return value >= 0


@numpy_aware
def NOT_POSITIVE(value):
    return value <= 0


Entry = namedtuple('Entry', 'x y z value')
ExtendedEntry = namedtuple('ExtendedEntry', 'x y z value grad_x grad_y grad_z')


def _as_point(corner, name):
    try:
        values = tuple(corner)
    except TypeError:
        raise ValueError(f"{name} must be a 3-tuple of integers, got {corner!r}")
    if len(values) != 3:
        raise ValueError(f"{name} must be a 3-tuple of integers, got {corner!r}")
    out = []
    for v in values:
        if isinstance(v, bool) or not isinstance(v, (numbers.Integral, np.integer)):
            if isinstance(v, (numbers.Real, np.floating)) and float(v).is_integer():
                v = int(v)
            else:
                raise ValueError(f"{name} coordinates must be integers, got {corner!r}")
        out.append(int(v))
    return tuple(out)


class Region(object):
    """ Inclusive axis-aligned box of voxels between two corners.

    Corners may be given in any order; the region is normalised to its min
    and max corner. Scan order is x fastest, then y, then z, ascending.

    """
    def __init__(self, start, end):
        start = _as_point(start, 'start')
        end = _as_point(end, 'end')
        self.start = tuple(min(a, b) for a, b in zip(start, end))
        self.end = tuple(max(a, b) for a, b in zip(start, end))
        self.size = tuple(abs(a - b) + 1 for a, b in zip(start, end))

    @property
    def volume(self):
        dx, dy, dz = self.size
        return dx * dy * dz

    def __len__(self):
        return self.volume

    def __repr__(self):
        return f"Region({self.start}, {self.end})"

    def __eq__(self, other):
        return isinstance(other, Region) and self.start == other.start and self.end == other.end

    def __hash__(self):
        return hash((self.start, self.end))

    def axes(self):
        return tuple(np.arange(s, e + 1, dtype=np.int64) for s, e in zip(self.start, self.end))

    def grid(self):
        """Coordinate arrays of shape `size`, indexed [x, y, z]."""
        return np.meshgrid(*self.axes(), indexing='ij')

    def flat_coords(self):
        """Coordinates flattened into scan order (x fastest)."""
        return tuple(g.ravel(order='F') for g in self.grid())

    def __iter__(self):
        (x0, y0, z0), (x1, y1, z1) = self.start, self.end
        for z in range(z0, z1 + 1):
            for y in range(y0, y1 + 1):
                for x in range(x0, x1 + 1):
                    yield (x, y, z)


class EntryIterator(object):
    """ Forward-only, non-restartable iterator over a region.

    `compute` is called once, on the first `next()`, and returns the value
    arrays (shape `region.size`) to pair with each coordinate; `factory`
    builds the entry from the coordinate and those values.

    """
    def __init__(self, region, compute, factory):
        self.region = region
        self.size = region.volume
        self._compute = compute
        self._factory = factory
        self._columns = None
        self._index = 0

    def __iter__(self):
        return self

    def __length_hint__(self):
        return self.size - self._index

    def __next__(self):
        if self._index >= self.size:
            raise StopIteration
        if self._columns is None:
            xs, ys, zs = self.region.flat_coords()
            arrays = [np.asarray(a, dtype=np.float64).ravel(order='F') for a in self._compute()]
            self._columns = [xs.tolist(), ys.tolist(), zs.tolist()] + [a.tolist() for a in arrays]
            self._compute = None
        i = self._index
        self._index += 1
        return self._factory(*[col[i] for col in self._columns])


def _constant_fn(c):
    c = float(c)

    def fn(x, y, z):
        return c
    return fn


def _operand(other, vectorize=False):
    if isinstance(other, ScalarField):
        return other._fn
    if isinstance(other, (numbers.Real, np.number)) and not isinstance(other, bool):
        return _constant_fn(other)
    if callable(other):
        return np.vectorize(other, otypes=[float]) if vectorize else other
    raise TypeError(f"cannot combine a ScalarField with {other!r}")


def as_field(obj, vectorize=False):
    """ Coerce a ScalarField, a number or a callable (x, y, z) -> value to a field.

    With `vectorize` a callable is treated as a scalar function and called
    once per coordinate.

    """
    if isinstance(obj, ScalarField):
        return obj
    return ScalarField(_operand(obj, vectorize))


class ScalarField(object):
    __slots__ = ('_fn',)

    def __init__(self, fn, vectorize=False):
        if isinstance(fn, ScalarField):
            fn = fn._fn
        elif not callable(fn):
            raise TypeError(f"ScalarField needs a callable, got {fn!r}")
        elif vectorize:
            fn = np.vectorize(fn, otypes=[float])
        self._fn = fn

    @classmethod
    def constant(cls, c):
        return cls(_constant_fn(c))

    def __call__(self, x, y, z):
        return self._fn(x, y, z)

    # ----- evaluation -----

    def sample(self, xs, ys, zs):
        """Evaluate at broadcastable coordinate arrays; returns float64 array."""
        xs, ys, zs = np.broadcast_arrays(np.asarray(xs, dtype=np.int64),
                                         np.asarray(ys, dtype=np.int64),
                                         np.asarray(zs, dtype=np.int64))
        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            out = self._fn(xs, ys, zs)
        return np.array(np.broadcast_to(np.asarray(out, dtype=np.float64), xs.shape))

    def get(self, x, y, z):
        return float(self.sample(x, y, z))

    # ----- arithmetic -----

    def _binary(self, other, op):
        a, b = self._fn, _operand(other)
        return ScalarField(lambda x, y, z: op(a(x, y, z), b(x, y, z)))

    def add(self, other):
        return self._binary(other, np.add)

    def sub(self, other):
        return self._binary(other, np.subtract)

    def mul(self, other):
        return self._binary(other, np.multiply)

    def div(self, other):
        return self._binary(other, np.divide)

    def _conditional(self, predicate, other, op):
        a, b = self._fn, _operand(other)
        predicate = _elementwise(predicate, bool)

        def fn(x, y, z):
            value = a(x, y, z)
            return np.where(predicate(value), op(value, b(x, y, z)), value)
        return ScalarField(fn)

    def add_if(self, predicate, other):
        return self._conditional(predicate, other, np.add)

    def sub_if(self, predicate, other):
        return self._conditional(predicate, other, np.subtract)

    def mul_if(self, predicate, other):
        return self._conditional(predicate, other, np.multiply)

    def div_if(self, predicate, other):
        return self._conditional(predicate, other, np.divide)

    # ----- value mapping -----

    def apply(self, func):
        a = self._fn
        func = _elementwise(func, float)
        return ScalarField(lambda x, y, z: func(a(x, y, z)))

    def apply_if(self, predicate, func):
        a = self._fn
        predicate = _elementwise(predicate, bool)
        func = _elementwise(func, float)

        def fn(x, y, z):
            value = a(x, y, z)
            return np.where(predicate(value), func(value), value)
        return ScalarField(fn)

    def clamp(self, lo, hi):
        if lo > hi:
            raise ValueError(f"clamp bounds out of order: {lo} > {hi}")
        return self.apply(numpy_aware(lambda v: np.clip(v, lo, hi)))

    def clamp_if(self, predicate, lo, hi):
        if lo > hi:
            raise ValueError(f"clamp bounds out of order: {lo} > {hi}")
        return self.apply_if(predicate, numpy_aware(lambda v: np.clip(v, lo, hi)))

    def lerp(self, low, high):
        """ Use this field as selector between `low` (t=0) and `high` (t=1).

        The selector is not clamped: values outside [0, 1] extrapolate.
        Clamp the selector first where that is not wanted.

        """
        t, lo, hi = self._fn, _operand(low), _operand(high)
        return ScalarField(lambda x, y, z: _lerp(t(x, y, z), lo(x, y, z), hi(x, y, z)))

    # ----- operators -----

    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return as_field(other).add(self)

    def __sub__(self, other):
        return self.sub(other)

    def __rsub__(self, other):
        return as_field(other).sub(self)

    def __mul__(self, other):
        return self.mul(other)

    def __rmul__(self, other):
        return as_field(other).mul(self)

    def __truediv__(self, other):
        return self.div(other)

    def __rtruediv__(self, other):
        return as_field(other).div(self)

    def __neg__(self):
        return self.mul(-1.0)

    # ----- streaming -----

    def iterator(self, start, end):
        """Entries for every voxel of the region, in scan order."""
        region = Region(start, end)
        return EntryIterator(region, lambda: (self.sample(*region.grid()),), Entry)

    def stream(self, start, end):
        return self.iterator(start, end)

    def scaled_stream(self, start, end, scale):
        """ExtendedEntry stream evaluated on a coarse lattice of stride `scale`."""
        from scaling import ScaledInterpolatingEvaluator
        return iter(ScaledInterpolatingEvaluator(self, start, end, scale))
