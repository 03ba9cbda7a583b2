import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import config
from settings import DEFAULTS, GeneratorSettings


def test_defaults_mirror_config():
    s = GeneratorSettings()
    assert s.sea_level == config.SEA_LEVEL
    assert s.max_elev == config.MAX_ELEV
    assert s.octaves == config.OCTAVES
    assert s.stride == tuple(config.TERRAIN_STRIDE)
    assert s.cube_size == config.CUBE_SIZE
    assert s.biome_section_size == tuple(config.BIOME_SECTION_SIZE)
    assert s.caves == config.CAVE_SETTINGS
    assert s.ravines == config.RAVINE_SETTINGS
    assert set(s.to_dict()) == set(DEFAULTS)


def test_overrides_and_coercion():
    s = GeneratorSettings(octaves=4, stride=[2, 2, 2], max_elev=128, sea_level=32.0)
    assert s.octaves == 4
    assert s.stride == (2, 2, 2)
    assert s.max_elev == 128.0
    assert isinstance(s.max_elev, float)
    assert s.sea_level == 32


def test_config_patches_are_picked_up(monkeypatch):
    monkeypatch.setattr(config, 'SEA_LEVEL', 10)
    monkeypatch.setattr(config, 'TERRAIN_STRIDE', (1, 2, 1))
    s = GeneratorSettings()
    assert s.sea_level == 10
    assert s.stride == (1, 2, 1)


def test_missing_config_value_uses_fallback(monkeypatch):
    monkeypatch.delattr(config, 'DIRT_DEPTH')
    assert GeneratorSettings().dirt_depth == 4.0


def test_settings_do_not_share_mutable_config():
    s = GeneratorSettings()
    s.caves['rarity_per_chunk'] = -1
    assert config.CAVE_SETTINGS['rarity_per_chunk'] != -1
    assert GeneratorSettings().caves['rarity_per_chunk'] == config.CAVE_SETTINGS['rarity_per_chunk']


@pytest.mark.parametrize("overrides", [
    {'octaves': 0},
    {'selector_octaves': -2},
    {'heightmap_octaves': 1.5},
    {'cube_size': True},
    {'stride': (4, 0, 4)},
    {'stride': (4, 4)},
    {'biome_section_size': (4, 0)},
    {'biome_section_size': (4, 4, 4)},
    {'biome_smooth_radius': -1},
    {'max_elev': 0},
    {'max_elev': float('inf')},
    {'terrain_frequency': float('nan')},
    {'below_height_volatility_divisor': 0},
    {'no_such_setting': 1},
])
def test_invalid_settings_raise(overrides):
    with pytest.raises(ValueError):
        GeneratorSettings(**overrides)


def test_dict_round_trip():
    s = GeneratorSettings(octaves=6, dirt_depth=2.5, biome_smooth_radius=1)
    copy = GeneratorSettings.from_dict(s.to_dict())
    assert copy == s
    assert copy is not s
    assert GeneratorSettings(octaves=7) != s
    assert 'octaves=6' in repr(s)
