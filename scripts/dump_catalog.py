"""Dump systems, modifications, and tags from a rule catalog directory.

Usage:
    python -m scripts.dump_catalog [--catalog DIR] [--tags-only] [--mods-only]
"""

import argparse
import logging
from dataclasses import fields
from pathlib import Path

from chrome_calc.models.effect import EffectSet
from chrome_calc.parser.catalog_parser import load_catalog


DEFAULT_CATALOG = Path(__file__).resolve().parent.parent / "data" / "catalog"


def format_effects(effects: EffectSet) -> str:
    """Compact 'key=value' list of the fields present in an effect set."""
    parts: list[str] = []
    for f in fields(EffectSet):
        if f.name == "stat_adds":
            continue
        value = getattr(effects, f.name)
        if value is not None:
            parts.append(f"{f.name}={value}")
    for key in sorted(effects.stat_adds):
        parts.append(f"{key}={effects.stat_adds[key]:+g}")
    return ", ".join(parts) if parts else "-"


def main():
    parser = argparse.ArgumentParser(description="Dump a rule catalog")
    parser.add_argument("--catalog", type=Path, default=DEFAULT_CATALOG)
    parser.add_argument("--tags-only", action="store_true")
    parser.add_argument("--mods-only", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)
    catalog = load_catalog(args.catalog)

    if not args.tags_only:
        for system in sorted(catalog.systems.values(), key=lambda s: s.name):
            print(f"\n=== {system.name} ({system.slots} slot{'s' if system.slots != 1 else ''}) ===")
            for mod in system.mods:
                print(f"  {mod.name:<24} [{mod.id}]")
                if not mod.effects.is_empty:
                    print(f"      effects: {format_effects(mod.effects)}")
                if not mod.base_effects.is_empty:
                    print(f"      base:    {format_effects(mod.base_effects)}")
                for label, tier in sorted(mod.tiers.items()):
                    print(f"      tier {label}:  {format_effects(tier)}")

    if not args.mods_only:
        print(f"\n=== Tags ({len(catalog.tags)}) ===")
        for name in sorted(catalog.tags):
            tag = catalog.tags[name]
            extra = f"  ({len(tag.choices)} choices)" if tag.choices else ""
            print(f"  {name}{extra}")
            for effect in tag.effects:
                print(f"      {effect.target} {effect.op or 'add'} {effect.value}")

    print()


if __name__ == "__main__":
    main()
