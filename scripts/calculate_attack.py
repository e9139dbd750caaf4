"""Run attack calculations against a rule catalog and print the trace.

Usage:
    python -m scripts.calculate_attack [--catalog DIR] [--weapon TYPE]
        [--damage N] [--attr body=12 ...] [--tag Boxing ...]
        [--mod "Arms=Gorilla Arms" ...] [--tier 3] [--hp 40]
        [--first] [--smart] [--arrows] [--always-crit]
        [--seed N] [--trials N] [--settings FILE] [--verbose]

Without --catalog, uses the sample catalog under data/catalog.
"""

import argparse
import logging
import random
from pathlib import Path

from chrome_calc.engine.attributes import serialize_cyber_mods
from chrome_calc.engine.calculator import calculate_attack
from chrome_calc.models.character import Character, CyberModSystemState, WeaponConfig, WeaponFlags
from chrome_calc.models.combat_settings import CombatSettings
from chrome_calc.models.constants import OPERATING_SYSTEM, WEAPON_TYPES, Attribute
from chrome_calc.parser.catalog_parser import load_catalog


DEFAULT_CATALOG = Path(__file__).resolve().parent.parent / "data" / "catalog"


def _parse_attributes(values: list[str] | None) -> dict[Attribute, float]:
    """'body=12' pairs -> attribute dict, everything else at 10."""
    attrs: dict[Attribute, float] = {attr: 10 for attr in Attribute}
    for item in values or []:
        key, sep, raw = item.partition("=")
        if not sep:
            raise ValueError(f"Expected NAME=VALUE, got {item!r}")
        try:
            attr = Attribute(key.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown attribute {key!r}") from None
        attrs[attr] = float(raw)
    return attrs


def _parse_mods(
    values: list[str] | None,
    tier: str | None = None,
) -> dict[str, CyberModSystemState]:
    """'System=Mod Name' pairs -> per-system installation state."""
    state: dict[str, CyberModSystemState] = {}
    for item in values or []:
        system, sep, mod = item.partition("=")
        if not sep or not system.strip() or not mod.strip():
            raise ValueError(f"Expected SYSTEM=MOD, got {item!r}")
        entry = state.setdefault(system.strip(), CyberModSystemState())
        entry.slots.append(mod.strip())
    if tier:
        state.setdefault(OPERATING_SYSTEM, CyberModSystemState()).tier = tier
    return state


def main():
    parser = argparse.ArgumentParser(description="Calculate an attack and print its trace")
    parser.add_argument("--catalog", type=Path, default=DEFAULT_CATALOG,
                        help="Rule catalog directory")
    parser.add_argument("--settings", type=Path,
                        help="JSON file of combat formula overrides")
    parser.add_argument("--weapon", default="Unarmed Melee",
                        help=f"Weapon type, one of: {', '.join(WEAPON_TYPES)}")
    parser.add_argument("--damage", type=float, default=0, help="Weapon base damage")
    parser.add_argument("--attr", action="append", help="Attribute, e.g. body=12")
    parser.add_argument("--tag", action="append", help="Active tag name")
    parser.add_argument("--mod", action="append", help="Installed mod, e.g. 'Arms=Gorilla Arms'")
    parser.add_argument("--tier", help="Operating System tier")
    parser.add_argument("--hp", type=float, default=100, help="Current HP percent")
    parser.add_argument("--berserk", action="store_true")
    parser.add_argument("--burn", action="store_true")
    parser.add_argument("--first", action="store_true", help="Attacking first this turn")
    parser.add_argument("--smart", action="store_true")
    parser.add_argument("--arrows", action="store_true")
    parser.add_argument("--always-crit", action="store_true")
    parser.add_argument("--seed", type=int)
    parser.add_argument("--trials", type=int, default=1)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    catalog = load_catalog(args.catalog)
    settings = CombatSettings.from_json(args.settings) if args.settings else CombatSettings.defaults()
    character = Character(
        attributes=_parse_attributes(args.attr),
        tags={name: True for name in args.tag or []},
        cyber_mods=_parse_mods(args.mod, args.tier),
        weapon=WeaponConfig(
            type=args.weapon,
            damage=args.damage,
            flags=WeaponFlags(
                smart=args.smart,
                arrows=args.arrows,
                always_crit=args.always_crit,
                first=args.first,
            ),
        ),
    )
    cyber_mods = serialize_cyber_mods(character.cyber_mods)
    status = {
        "hp_percent": args.hp,
        "berserk_active": args.berserk,
        "has_burn": args.burn,
    }
    rng = random.Random(args.seed)

    hits = crits = 0
    total = 0.0
    for i in range(args.trials):
        result = calculate_attack(
            character.attributes, character.tags, cyber_mods, character.weapon,
            catalog, status,
            rng=rng, settings=settings,
        )
        if result.failed:
            print(result.text)
            raise SystemExit(1)
        if args.trials == 1:
            print(result.text)
            break
        hits += result.outcome.hit
        crits += result.outcome.crit
        total += result.outcome.damage
        if i == 0:
            print(result.text)
            print()

    if args.trials > 1:
        print(f"--- {args.trials} trials ---")
        print(f"  Hit rate     {hits / args.trials:>7.1%}")
        print(f"  Crit rate    {crits / args.trials:>7.1%}")
        print(f"  Mean damage  {total / args.trials:>7.2f}")


if __name__ == "__main__":
    main()
