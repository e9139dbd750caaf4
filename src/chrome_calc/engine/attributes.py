"""Effective attributes: base values plus installed cyber-mod bonuses.

The engine reads cyber-mod installation in its serialized form: a mapping
of normalized system key -> list of installed identifiers, where a tier
rides along as a synthetic "tier:<label>" entry. serialize_cyber_mods()
produces that form from the sheet's per-system slot state.
"""

import logging
import math
from typing import Any, Mapping

from chrome_calc.models.catalog import RuleCatalog
from chrome_calc.models.character import CyberModSystemState
from chrome_calc.models.combat_settings import CombatSettings
from chrome_calc.models.constants import (
    ATTRIBUTE_EFFECT_KEYS,
    EMPTY_SLOT,
    OPERATING_SYSTEM,
    TIER_PREFIX,
    Attribute,
    syskey,
)
from chrome_calc.models.effect import EffectSet

logger = logging.getLogger(__name__)

SerializedCyberMods = dict[str, list[str]]

_OS_KEY = syskey(OPERATING_SYSTEM)


def serialize_cyber_mods(state: Mapping[str, CyberModSystemState]) -> SerializedCyberMods:
    """Flatten per-system slots into system key -> identifiers.

    Empty slots are dropped; a non-blank tier is appended as "tier:<label>".
    Systems with nothing installed are omitted.
    """
    result: SerializedCyberMods = {}
    for system_name, data in state.items():
        if data is None:
            continue
        entries = [
            name.strip() for name in data.slots
            if name and name != EMPTY_SLOT
        ]
        if data.tier and data.tier.strip():
            entries.append(f"{TIER_PREFIX}{data.tier.strip()}")
        if entries:
            result[syskey(system_name)] = entries
    return result


def parse_tier_selection(values: list[str]) -> tuple[str | None, str | None]:
    """Split a system's entries into (last installed id, tier label)."""
    mod_id: str | None = None
    tier: str | None = None
    for value in values:
        if not value:
            continue
        if value.startswith(TIER_PREFIX):
            tier = value[len(TIER_PREFIX):].split(":", 1)[0] or None
        else:
            mod_id = value
    return mod_id, tier


def installed_effect_sets(
    catalog: RuleCatalog,
    cyber_mods: SerializedCyberMods,
) -> list[tuple[str, EffectSet]]:
    """(mod name, resolved effects) for everything installed.

    Non-OS modifications come first, in installation order. The Operating
    System is resolved exactly once, last, from the combined entries of
    every key that normalizes to it. Unknown systems and identifiers are
    skipped.
    """
    resolved: list[tuple[str, EffectSet]] = []
    os_values: list[str] = []

    for raw_system, ids in (cyber_mods or {}).items():
        system = catalog.system(raw_system)
        if system is None:
            logger.debug("Skipping unknown system %r", raw_system)
            continue
        if system.key == _OS_KEY:
            os_values.extend(ids or [])
            continue
        _mod_id, tier = parse_tier_selection(ids or [])
        for identifier in ids or []:
            if not identifier or identifier == EMPTY_SLOT or identifier.startswith(TIER_PREFIX):
                continue
            mod = system.lookup(identifier)
            if mod is None:
                logger.debug("Skipping unknown mod %r in %s", identifier, system.name)
                continue
            resolved.append((mod.name, mod.resolve(tier)))

    if os_values:
        os_id, tier = parse_tier_selection(os_values)
        os_mod = catalog.lookup_mod(_OS_KEY, os_id) if os_id else None
        if os_mod is not None:
            resolved.append((os_mod.name, os_mod.resolve(tier)))
        elif os_id:
            logger.debug("Skipping unknown operating system %r", os_id)

    return resolved


def collect_attribute_bonuses(effect_sets: list[EffectSet]) -> dict[Attribute, float]:
    bonuses: dict[Attribute, float] = {}
    for effects in effect_sets:
        for key, attr in ATTRIBUTE_EFFECT_KEYS:
            value = effects.stat_adds.get(key)
            if value is not None:
                bonuses[attr] = bonuses.get(attr, 0.0) + value
    return bonuses


def read_attribute(
    attributes: Mapping[Any, Any],
    attr: Attribute,
    baseline: float = 10,
) -> float:
    """Read one attribute by enum or plain string key; non-finite -> baseline."""
    raw = attributes.get(attr)
    if raw is None:
        raw = attributes.get(attr.value)
    if raw is None or isinstance(raw, bool):
        return baseline
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return baseline
    if not math.isfinite(value):
        return baseline
    return value


def resolve_effective_attributes(
    base: Mapping[Any, Any],
    cyber_mods: SerializedCyberMods,
    catalog: RuleCatalog,
    settings: CombatSettings | None = None,
) -> dict[Attribute, float]:
    """effective = base + sum of cyber-mod attribute bonuses, per attribute.

    Pure: neither *base* nor *cyber_mods* is modified, and repeated calls
    with the same inputs return equal dicts.
    """
    settings = settings or CombatSettings.defaults()
    baseline = settings.get_float("attribute_baseline", 10)
    sets = [effects for _name, effects in installed_effect_sets(catalog, cyber_mods)]
    bonuses = collect_attribute_bonuses(sets)
    return {
        attr: read_attribute(base, attr, baseline) + bonuses.get(attr, 0.0)
        for attr in Attribute
    }
