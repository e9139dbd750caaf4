"""Effect records as read from the rule catalog.

Two shapes exist in the rule data:
  - tag effects: a list of small records {kind, target, op, value}
  - cyber-mod effects: one flat bag of optional keys per modification

The bag is converted once, at the parser boundary, into an EffectSet with a
closed set of optional fields. Unrecognized keys are dropped there, so the
modifier stack only ever matches over fields it knows.
"""

import math
from dataclasses import dataclass, field, fields
from typing import Any, Mapping

from chrome_calc.models.constants import STAT_EFFECT_KEYS


def finite_number(raw: Any) -> float | None:
    """Return *raw* as a float, or None if it is not a finite number."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    value = float(raw)
    if not math.isfinite(value):
        return None
    return value


@dataclass(frozen=True, slots=True)
class TagEffect:
    """One entry of a tag's (or tag choice's) effect list."""
    kind: str | None = None      # "stat" is the only kind the engine sums
    target: str | None = None    # dotted path, e.g. "attributes.body"
    op: str | None = None        # only "add" is defined
    value: float | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TagEffect":
        def _str(key: str) -> str | None:
            raw = data.get(key)
            return raw if isinstance(raw, str) else None

        return cls(
            kind=_str("kind"),
            target=_str("target"),
            op=_str("op"),
            value=finite_number(data.get("value")),
        )

    @property
    def is_stat_add(self) -> bool:
        return (
            self.kind == "stat"
            and self.op in (None, "add")
            and self.value is not None
            and self.value != 0
        )


@dataclass(frozen=True, slots=True)
class EffectSet:
    """Combat and stat modifiers carried by one cyber-mod (or OS tier).

    Every field is optional; None means "not present in the catalog entry".
    Percentages are stored the way the catalog writes them (15 == 15%).
    """
    condition: str | None = None

    # Accuracy
    ranged_accuracy_add: float | None = None
    accuracy_set: float | None = None
    attack_chance: float | None = None
    crit_rate_set: float | None = None       # only under condition "smart_weapon"

    # Damage multipliers
    melee_damage_add: float | None = None
    ranged_damage_add: float | None = None
    unarmed_damage_add: float | None = None
    damage_add_percent: float | None = None
    first_attack_add: float | None = None

    # Criticals
    crit_rate_add: float | None = None
    crit_chance_add: float | None = None
    unarmed_crit_rate_add: float | None = None
    unarmed_crit_rate_set: float | None = None
    unarmed_crit_damage_add: float | None = None

    # Resolution flags
    crit_reroll_once_per_battle: bool | None = None
    unarmed_disable_crit: bool | None = None
    crit_auto_on_low_hp: bool | None = None
    unarmed_scale_to_ceiling: bool | None = None

    # Procs
    health_points_on_crit: float | None = None

    # Attribute / civil additive bonuses, keyed by catalog key ("body_add").
    stat_adds: Mapping[str, float] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "EffectSet":
        """Convert a raw catalog bag, dropping anything unrecognized."""
        if not data:
            return cls()
        values: dict[str, Any] = {}
        stat_adds: dict[str, float] = {}
        for key, raw in data.items():
            if key in STAT_EFFECT_KEYS:
                number = finite_number(raw)
                if number is not None:
                    stat_adds[key] = number
            elif key == "condition":
                if isinstance(raw, str):
                    values[key] = raw
            elif key in _FLAG_FIELDS:
                values[key] = bool(raw)
            elif key in _NUMBER_FIELDS:
                number = finite_number(raw)
                if number is not None:
                    values[key] = number
        return cls(stat_adds=stat_adds, **values)

    @staticmethod
    def rejected_keys(data: Mapping[str, Any] | None) -> list[str]:
        """Keys in *data* that from_mapping() would silently drop."""
        if not data:
            return []
        rejected: list[str] = []
        for key, raw in data.items():
            if key in _FLAG_FIELDS:
                continue
            if key == "condition":
                if not isinstance(raw, str):
                    rejected.append(key)
            elif key in STAT_EFFECT_KEYS or key in _NUMBER_FIELDS:
                if finite_number(raw) is None:
                    rejected.append(key)
            else:
                rejected.append(key)
        return rejected

    def merged(self, other: "EffectSet") -> "EffectSet":
        """Overlay *other* on top of this set; present fields in *other* win."""
        values = {
            name: getattr(other, name)
            for name in _OVERLAY_FIELDS
            if getattr(other, name) is not None
        }
        stat_adds = {**self.stat_adds, **other.stat_adds}
        current = {name: getattr(self, name) for name in _OVERLAY_FIELDS}
        current.update(values)
        return EffectSet(stat_adds=stat_adds, **current)

    @property
    def is_empty(self) -> bool:
        if self.stat_adds:
            return False
        return all(getattr(self, name) is None for name in _OVERLAY_FIELDS)


_OVERLAY_FIELDS: tuple[str, ...] = tuple(
    f.name for f in fields(EffectSet) if f.name != "stat_adds"
)
_FLAG_FIELDS = frozenset({
    "crit_reroll_once_per_battle",
    "unarmed_disable_crit",
    "crit_auto_on_low_hp",
    "unarmed_scale_to_ceiling",
})
_NUMBER_FIELDS = frozenset(_OVERLAY_FIELDS) - _FLAG_FIELDS - {"condition"}
