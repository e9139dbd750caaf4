"""Per-source bonus breakdown for the character sheet.

Lists where each attribute and civil-stat bonus comes from (which tag,
which modification), so the sheet can show "Body 12 (+2 Boxing Gloves)".
Tag stat effects only appear here; the attack engine itself reads
cyber-mod bonuses through resolve_effective_attributes().
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from chrome_calc.models.catalog import RuleCatalog
from chrome_calc.models.character import CyberModSystemState
from chrome_calc.models.constants import (
    ATTRIBUTE_EFFECT_KEYS,
    ATTRIBUTE_TARGETS,
    CIVIL_EFFECT_KEYS,
    CIVIL_TARGETS,
    EMPTY_SLOT,
)
from chrome_calc.models.effect import EffectSet


@dataclass(slots=True)
class BonusSource:
    label: str
    values: dict[Enum, float] = field(default_factory=dict)


def _tag_sources(
    catalog: RuleCatalog,
    selections: Mapping[str, bool],
    choices: Mapping[str, str],
    targets: Mapping[str, Enum],
) -> list[BonusSource]:
    sources: list[BonusSource] = []
    for name, enabled in selections.items():
        if not enabled:
            continue
        tag = catalog.tag(name)
        if tag is None:
            continue
        values: dict[Enum, float] = {}
        # Base effects and the chosen option's effects both apply.
        for effect in tag.active_effects(choices.get(name)):
            if not effect.is_stat_add or effect.target is None:
                continue
            target = targets.get(effect.target)
            if target is None:
                continue
            values[target] = values.get(target, 0.0) + effect.value
        if values:
            sources.append(BonusSource(label=name, values=values))
    return sources


def _cyber_sources(
    catalog: RuleCatalog,
    cyber_mods: Mapping[str, CyberModSystemState],
    key_table: tuple[tuple[str, Enum], ...],
) -> list[BonusSource]:
    sources: list[BonusSource] = []
    for system_name, state in cyber_mods.items():
        system = catalog.system(system_name)
        if system is None or state is None:
            continue
        for slot in state.slots:
            if not slot or slot == EMPTY_SLOT:
                continue
            mod = system.lookup(slot)
            if mod is None:
                continue
            values = _stat_values(mod.resolve(state.tier), key_table)
            if values:
                sources.append(BonusSource(label=mod.name, values=values))
    return sources


def _stat_values(
    effects: EffectSet,
    key_table: tuple[tuple[str, Enum], ...],
) -> dict[Enum, float]:
    values: dict[Enum, float] = {}
    for key, stat in key_table:
        value = effects.stat_adds.get(key)
        if value:
            values[stat] = values.get(stat, 0.0) + value
    return values


def attribute_tag_bonus_sources(
    catalog: RuleCatalog,
    selections: Mapping[str, bool],
    choices: Mapping[str, str] | None = None,
) -> list[BonusSource]:
    return _tag_sources(catalog, selections, choices or {}, ATTRIBUTE_TARGETS)


def civil_tag_bonus_sources(
    catalog: RuleCatalog,
    selections: Mapping[str, bool],
    choices: Mapping[str, str] | None = None,
) -> list[BonusSource]:
    return _tag_sources(catalog, selections, choices or {}, CIVIL_TARGETS)


def cyber_attribute_bonus_sources(
    catalog: RuleCatalog,
    cyber_mods: Mapping[str, CyberModSystemState],
) -> list[BonusSource]:
    return _cyber_sources(catalog, cyber_mods, ATTRIBUTE_EFFECT_KEYS)


def cyber_civil_bonus_sources(
    catalog: RuleCatalog,
    cyber_mods: Mapping[str, CyberModSystemState],
) -> list[BonusSource]:
    return _cyber_sources(catalog, cyber_mods, CIVIL_EFFECT_KEYS)


def sum_bonus_sources(sources: list[BonusSource]) -> dict[Enum, float]:
    """Total bonus per stat across all sources."""
    totals: dict[Enum, float] = {}
    for source in sources:
        for stat, value in source.values.items():
            totals[stat] = totals.get(stat, 0.0) + value
    return totals
