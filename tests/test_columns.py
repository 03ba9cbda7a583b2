import math
import os
import sys

import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from biomes import (Biome, BiomeProvider, CallableBiomeProvider, UniformBiomeProvider,
                    HILLS, OCEAN, PLAINS)
from columns import ColumnParameterSource


class CountingProvider(BiomeProvider):
    def __init__(self, biome=PLAINS):
        self.biome = biome
        self.calls = 0

    def classify(self, x, z):
        self.calls += 1
        return self.biome


def _split(x, z):
    return OCEAN if x < 0 else HILLS


def test_uniform_provider_gives_biome_values():
    src = ColumnParameterSource(UniformBiomeProvider(HILLS), smooth_radius=2, section_size=(4, 4))
    src.set_chunk(0, 0)
    for x, z in [(0, 0), (3, 7), (15, 15)]:
        assert src.height.get(x, 50, z) == pytest.approx(HILLS.height)
        assert src.volatility.get(x, 50, z) == pytest.approx(HILLS.volatility)


def test_fields_ignore_y():
    src = ColumnParameterSource(CallableBiomeProvider(_split), smooth_radius=1, section_size=(4, 4))
    src.set_chunk(0, 0)
    ys = np.array([-500, 0, 63, 1000])
    h = src.height.sample(2, ys, 5)
    v = src.volatility.sample(2, ys, 5)
    assert h.shape == (4,)
    assert np.all(h == h[0])
    assert np.all(v == v[0])


def test_sample_matches_column():
    src = ColumnParameterSource(CallableBiomeProvider(_split), smooth_radius=2, section_size=(4, 4))
    src.set_chunk(0, 0)
    xs = np.arange(-6, 10)
    zs = np.full(xs.shape, 3)
    heights = src.height.sample(xs, 0, zs)
    for x, h in zip(xs.tolist(), heights.tolist()):
        assert h == src.column(x, 3)[0]


def test_lookups_are_cached_until_set_chunk():
    provider = CountingProvider()
    src = ColumnParameterSource(provider, smooth_radius=1, section_size=(4, 4))
    src.set_chunk(0, 0)
    src.height.get(1, 0, 1)
    first = provider.calls
    assert first > 0
    src.height.get(1, 0, 1)
    src.volatility.get(1, 99, 1)
    src.get_biome(1, 0, 1)
    src.get_biome(1, 0, 1)
    assert provider.calls == first + 1

    src.set_chunk(1, 0)
    assert src.chunk == (1, 0)
    src.height.get(1, 0, 1)
    assert provider.calls > first + 1


def test_get_biome_returns_provider_record():
    src = ColumnParameterSource(CallableBiomeProvider(_split), smooth_radius=0, section_size=(1, 1))
    assert src.get_biome(-1, 64, 0) is OCEAN
    assert src.get_biome(0, 64, 0) is HILLS


def test_blend_is_exact_far_from_border_and_mixed_at_border():
    src = ColumnParameterSource(CallableBiomeProvider(_split), smooth_radius=2, section_size=(4, 4))
    src.set_chunk(0, 0)
    assert src.height.get(20, 0, 0) == pytest.approx(HILLS.height)
    assert src.height.get(-20, 0, 0) == pytest.approx(OCEAN.height)
    assert src.volatility.get(20, 0, 0) == pytest.approx(HILLS.volatility)
    mid = src.height.get(0, 0, 0)
    assert OCEAN.height < mid < HILLS.height


def test_blend_is_monotonic_across_border():
    src = ColumnParameterSource(CallableBiomeProvider(_split), smooth_radius=2, section_size=(4, 4))
    src.set_chunk(0, 0)
    heights = src.height.sample(np.arange(-24, 25), 0, 0)
    assert np.all(np.diff(heights) >= -1e-12)


def test_zero_radius_section_one_is_raw_biome():
    custom = Biome('Flat', 0.5, 0.1, 2, 3)
    src = ColumnParameterSource(CallableBiomeProvider(lambda x, z: custom if z > 0 else PLAINS),
                                smooth_radius=0, section_size=(1, 1))
    assert src.column(0, 5) == pytest.approx((0.5, 0.1))
    assert src.column(0, -5) == pytest.approx((PLAINS.height, PLAINS.volatility))


def test_other_chunk_without_set_chunk_stays_finite():
    src = ColumnParameterSource(CallableBiomeProvider(_split), smooth_radius=2, section_size=(4, 4))
    src.set_chunk(0, 0)
    for x, z in [(100000, -3), (-7777, 4242)]:
        assert math.isfinite(src.height.get(x, 0, z))
        assert math.isfinite(src.volatility.get(x, 0, z))


def test_defaults_come_from_config(monkeypatch):
    import config
    monkeypatch.setattr(config, 'BIOME_SMOOTH_RADIUS', 3)
    monkeypatch.setattr(config, 'BIOME_SECTION_SIZE', (2, 8))
    src = ColumnParameterSource(UniformBiomeProvider())
    assert src.smooth_radius == 3
    assert src.section_size == (2, 8)


@pytest.mark.parametrize("kwargs", [
    {'smooth_radius': -1},
    {'section_size': (0, 4)},
    {'section_size': (4,)},
    {'section_size': (4, 4, 4)},
])
def test_invalid_arguments_raise(kwargs):
    with pytest.raises(ValueError):
        ColumnParameterSource(UniformBiomeProvider(), **kwargs)


def test_base_provider_is_abstract():
    with pytest.raises(NotImplementedError):
        BiomeProvider().classify(0, 0)
