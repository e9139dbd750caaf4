"""Combat formula constants with typed accessors.

Formula *structure* is fixed in the engine; the constants it multiplies by
live here so a table can retune them without code changes. Every accessor
takes a default, so an empty CombatSettings still computes stock numbers.
Stock values are available via CombatSettings.defaults().
"""

import json
from dataclasses import dataclass, field
from pathlib import Path


_STOCK_DEFAULTS: dict[str, int | float] = {
    # Ranged hit: base + (technical + skill) * per_point
    "ranged_hit_base": 0.47,
    "ranged_hit_per_point": 0.005,
    # Crit chance: base + skill * per_skill
    "crit_base": 0.03,
    "crit_per_skill": 0.01,
    # Crit multiplier: base + stat / divisor
    "melee_crit_mult_base": 1.2,
    "ranged_crit_mult_base": 1.35,
    "crit_mult_divisor": 100.0,
    # Value read for any attribute that is missing or non-finite
    "attribute_baseline": 10,
    # Skill roll range: RAND(skill, cool + offset)
    "skill_roll_cool_offset": 50,
    # Status thresholds, in HP percent
    "default_hp_percent": 100.0,
    "hp_below_threshold": 50.0,
    "low_hp_crit_threshold": 20.0,
}


@dataclass
class CombatSettings:
    """Typed accessor over named formula constants."""

    _values: dict[str, int | float] = field(default_factory=dict)

    def get_float(self, key: str, default: float) -> float:
        """Get a float constant, falling back to the provided default."""
        val = self._values.get(key)
        if val is None:
            return default
        return float(val)

    def get_int(self, key: str, default: int) -> int:
        """Get an integer constant, falling back to the provided default."""
        val = self._values.get(key)
        if val is None:
            return default
        return int(val)

    @classmethod
    def defaults(cls) -> "CombatSettings":
        """Return the stock constants."""
        return cls(_values=dict(_STOCK_DEFAULTS))

    @classmethod
    def from_json(cls, path: Path) -> "CombatSettings":
        """Stock constants overlaid with the numeric entries of a JSON object."""
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{path}: combat settings must be a JSON object")
        values = dict(_STOCK_DEFAULTS)
        for key, raw in data.items():
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                raise ValueError(f"{path}: setting {key!r} must be a number")
            values[key] = raw
        return cls(_values=values)
