'''
settings.py -- validated generator settings, defaulting to the values in config.py
'''

import copy
import math

import config

# name -> (config attribute, fallback)
DEFAULTS = {
    'sea_level': ('SEA_LEVEL', 64),
    'max_elev': ('MAX_ELEV', 256.0),
    'height_offset': ('HEIGHT_OFFSET', 64.0),
    'vertical_scale': ('VERTICAL_SCALE', 1.0),
    'dirt_depth': ('DIRT_DEPTH', 4.0),
    'octaves': ('OCTAVES', 16),
    'terrain_frequency': ('TERRAIN_FREQUENCY', 0.0026),
    'selector_octaves': ('SELECTOR_OCTAVES', 8),
    'selector_frequency': ('SELECTOR_FREQUENCY', 0.0084),
    'heightmap_octaves': ('HEIGHTMAP_OCTAVES', 10),
    'heightmap_frequency': ('HEIGHTMAP_FREQUENCY', 0.049),
    'below_height_volatility_divisor': ('BELOW_HEIGHT_VOLATILITY_DIVISOR', 4.0),
    'stride': ('TERRAIN_STRIDE', (4, 8, 4)),
    'cube_size': ('CUBE_SIZE', 16),
    'biome_smooth_radius': ('BIOME_SMOOTH_RADIUS', 2),
    'biome_section_size': ('BIOME_SECTION_SIZE', (4, 4)),
    'caves': ('CAVE_SETTINGS', {}),
    'ravines': ('RAVINE_SETTINGS', {}),
}

_POSITIVE_INTS = ('octaves', 'selector_octaves', 'heightmap_octaves', 'cube_size')
_FINITE = ('max_elev', 'height_offset', 'vertical_scale', 'dirt_depth', 'terrain_frequency',
           'selector_frequency', 'heightmap_frequency', 'below_height_volatility_divisor')


def _positive_int(name, value):
    if isinstance(value, bool) or int(value) != value or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return int(value)


class GeneratorSettings(object):
    """ Tunables for one terrain generator.

    Every setting defaults to the matching constant in config.py (read when
    the settings object is created, so tests can patch config). Keyword
    arguments override single values. Invalid values raise ValueError here
    rather than surfacing mid-generation.
    """

    def __init__(self, **overrides):
        unknown = set(overrides) - set(DEFAULTS)
        if unknown:
            raise ValueError(f"unknown generator settings: {', '.join(sorted(unknown))}")
        for name, (attr, fallback) in DEFAULTS.items():
            value = overrides[name] if name in overrides else getattr(config, attr, fallback)
            setattr(self, name, copy.deepcopy(value))
        self._validate()

    def _validate(self):
        for name in _POSITIVE_INTS:
            setattr(self, name, _positive_int(name, getattr(self, name)))
        for name in _FINITE:
            value = float(getattr(self, name))
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value!r}")
            setattr(self, name, value)
        self.sea_level = int(self.sea_level)
        if self.max_elev <= 0:
            raise ValueError(f"max_elev must be positive, got {self.max_elev}")
        if self.below_height_volatility_divisor == 0:
            raise ValueError("below_height_volatility_divisor must be non-zero")
        stride = tuple(self.stride)
        if len(stride) != 3:
            raise ValueError(f"stride must have three components, got {self.stride!r}")
        self.stride = tuple(_positive_int('stride', s) for s in stride)
        section = tuple(self.biome_section_size)
        if len(section) != 2:
            raise ValueError(f"biome_section_size must have two components, got {section!r}")
        self.biome_section_size = tuple(_positive_int('biome_section_size', s) for s in section)
        if int(self.biome_smooth_radius) < 0:
            raise ValueError(f"biome_smooth_radius must be non-negative, got {self.biome_smooth_radius}")
        self.biome_smooth_radius = int(self.biome_smooth_radius)
        self.caves = dict(self.caves)
        self.ravines = dict(self.ravines)

    def to_dict(self):
        return {name: copy.deepcopy(getattr(self, name)) for name in DEFAULTS}

    @classmethod
    def from_dict(cls, data):
        return cls(**data)

    def __eq__(self, other):
        return isinstance(other, GeneratorSettings) and self.to_dict() == other.to_dict()

    def __repr__(self):
        items = ', '.join(f"{k}={v!r}" for k, v in self.to_dict().items() if k not in ('caves', 'ravines'))
        return f"GeneratorSettings({items})"
