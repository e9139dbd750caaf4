"""Parse rule-catalog JSON into catalog models.

Layout of a catalog directory:
  tags.json          {"items": {"<key>": {"name", "effects", "choices"}}}
  <anything>.json    {"system": "<name>", "slots": N, "mods": [...]}

Malformed individual entries are skipped with a warning; the catalog is
content maintained outside this codebase and may be ahead of the engine.
A file whose top level is unusable raises ValueError.
"""

import json
import logging
from pathlib import Path
from typing import Any

from chrome_calc.models.catalog import (
    CyberMod,
    CyberSystem,
    RuleCatalog,
    TagChoice,
    TagDefinition,
)
from chrome_calc.models.effect import EffectSet, TagEffect

logger = logging.getLogger(__name__)

TAGS_FILENAME = "tags.json"


def _parse_effect_set(raw: Any, where: str) -> EffectSet:
    if raw is None:
        return EffectSet()
    if not isinstance(raw, dict):
        logger.warning("%s: effects is not an object, ignoring", where)
        return EffectSet()
    rejected = EffectSet.rejected_keys(raw)
    if rejected:
        logger.warning("%s: ignoring unrecognized effect keys %s", where, sorted(rejected))
    return EffectSet.from_mapping(raw)


def _parse_tag_effects(raw: Any, where: str) -> tuple[TagEffect, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        logger.warning("%s: effects is not a list, ignoring", where)
        return ()
    effects: list[TagEffect] = []
    for entry in raw:
        if not isinstance(entry, dict):
            logger.warning("%s: skipping non-object effect %r", where, entry)
            continue
        effects.append(TagEffect.from_mapping(entry))
    return tuple(effects)


def parse_mod(data: Any, system_name: str) -> CyberMod | None:
    """Parse one modification entry, or None if it has no usable identity."""
    if not isinstance(data, dict):
        logger.warning("%s: skipping non-object mod entry", system_name)
        return None
    name = data.get("name")
    mod_id = data.get("id")
    if not isinstance(name, str) and not isinstance(mod_id, str):
        logger.warning("%s: skipping mod with neither id nor name", system_name)
        return None
    mod_id = mod_id if isinstance(mod_id, str) else name
    name = name if isinstance(name, str) else mod_id
    where = f"{system_name}/{mod_id}"

    tiers: dict[str, EffectSet] = {}
    raw_tiers = data.get("tiers")
    if isinstance(raw_tiers, dict):
        for label, tier_data in raw_tiers.items():
            tiers[str(label)] = _parse_effect_set(tier_data, f"{where} tier {label}")
    elif raw_tiers is not None:
        logger.warning("%s: tiers is not an object, ignoring", where)

    desc = data.get("desc")
    return CyberMod(
        id=mod_id,
        name=name,
        desc=desc if isinstance(desc, str) else "",
        effects=_parse_effect_set(data.get("effects"), where),
        base_effects=_parse_effect_set(data.get("base_effects"), f"{where} base"),
        tiers=tiers,
    )


def parse_system(data: Any, source: str = "<system>") -> CyberSystem:
    """Parse a body-system definition."""
    if not isinstance(data, dict) or not isinstance(data.get("system"), str):
        raise ValueError(f"{source}: not a system definition (missing 'system' name)")
    name = data["system"]
    slots = data.get("slots", 1)
    if isinstance(slots, bool) or not isinstance(slots, int) or slots < 0:
        logger.warning("%s: invalid slot count %r, using 1", name, slots)
        slots = 1
    raw_mods = data.get("mods") or []
    if not isinstance(raw_mods, list):
        logger.warning("%s: mods is not a list, ignoring", name)
        raw_mods = []
    mods = [m for m in (parse_mod(entry, name) for entry in raw_mods) if m is not None]
    return CyberSystem(name=name, slots=slots, mods=tuple(mods))


def parse_tags(data: Any, source: str = TAGS_FILENAME) -> list[TagDefinition]:
    """Parse the tag table ({"items": {...}})."""
    if not isinstance(data, dict):
        raise ValueError(f"{source}: tag table must be a JSON object")
    items = data.get("items") or {}
    if not isinstance(items, dict):
        raise ValueError(f"{source}: 'items' must be an object")

    tags: list[TagDefinition] = []
    for key, item in items.items():
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            logger.warning("%s: skipping tag %r without a name", source, key)
            continue
        name = item["name"]
        choices: list[TagChoice] = []
        for option in item.get("choices") or []:
            if not isinstance(option, dict):
                logger.warning("%s: skipping malformed choice", name)
                continue
            choice_id = option.get("id")
            label = option.get("label")
            choices.append(TagChoice(
                id=choice_id if isinstance(choice_id, str) else None,
                label=label if isinstance(label, str) else None,
                effects=_parse_tag_effects(option.get("effects"), f"{name} choice"),
            ))
        tags.append(TagDefinition(
            name=name,
            effects=_parse_tag_effects(item.get("effects"), name),
            choices=tuple(choices),
        ))
    return tags


def load_catalog(directory: Path) -> RuleCatalog:
    """Load every system file and the tag table found in *directory*."""
    if not directory.is_dir():
        raise FileNotFoundError(f"Catalog directory not found: {directory}")

    systems: list[CyberSystem] = []
    tags: list[TagDefinition] = []
    for path in sorted(directory.glob("*.json")):
        data = json.loads(path.read_text(encoding="utf-8"))
        if path.name == TAGS_FILENAME:
            tags = parse_tags(data, source=str(path))
            continue
        if isinstance(data, dict) and "system" in data:
            systems.append(parse_system(data, source=str(path)))
        else:
            logger.warning("%s: not a system or tag file, skipping", path)

    logger.info("Loaded catalog: %d systems, %d tags", len(systems), len(tags))
    return RuleCatalog.from_parts(systems, tags)
