"""Attributes, civil stats, attack categories, and effect-key tables.

Rule data arrives as free-form JSON strings. Everything downstream of the
parser works with the enums below; the tables map catalog keys onto them.
"""

from enum import Enum


class Attribute(str, Enum):
    """The seven core attributes driving combat formulas."""
    BODY = "body"
    WILLPOWER = "willpower"
    COOL = "cool"
    INTELLIGENCE = "intelligence"
    REFLEXES = "reflexes"
    SKILL = "skill"
    TECHNICAL = "technical"


class CivilStat(str, Enum):
    """Secondary, non-combat stats. Not read by any combat formula."""
    REPUTATION = "reputation"
    EMPATHY = "empathy"
    APPEAL = "appeal"
    PERFORMANCE = "performance"
    CRAFTING = "crafting"
    DRIVING = "driving"
    EVASION = "evasion"
    INTIMIDATION = "intimidation"
    LUCK = "luck"
    PERCEPTION = "perception"
    PERSUASION = "persuasion"
    TOLERANCE = "tolerance"


class AttackCategory(str, Enum):
    MELEE = "melee"
    RANGED = "ranged"


class AttackSubtype(str, Enum):
    """Selects the damage formula branch."""
    UNARMED = "unarmed"
    KICK = "kick"
    BLUNT = "blunt"
    SHARP = "sharp"
    WHIP = "whip"
    SLICE = "slice"
    BLAST = "blast"
    RANGED = "ranged"


# Subtypes that count as hand-to-hand for tag and cyberware rules.
UNARMED_SUBTYPES = frozenset({AttackSubtype.UNARMED, AttackSubtype.KICK})
BLADED_SUBTYPES = frozenset({AttackSubtype.SHARP, AttackSubtype.SLICE})


WEAPON_TYPES: tuple[str, ...] = (
    "Unarmed Melee",
    "Blunt Weapon Melee",
    "Sharp Weapon Melee",
    "Ranged Attack",
    "Kick",
    "Grappling",
    "Slice",
    "Whip",
    "Blast",
)


OPERATING_SYSTEM = "Operating System"
HANDS_SYSTEM = "Hands"
EMPTY_SLOT = "None"
TIER_PREFIX = "tier:"


# Cyber-mod effect key -> attribute. Several spellings exist in the catalog.
ATTRIBUTE_EFFECT_KEYS: tuple[tuple[str, Attribute], ...] = (
    ("body_add", Attribute.BODY),
    ("strength_add", Attribute.BODY),
    ("cool_add", Attribute.COOL),
    ("willpower_add", Attribute.WILLPOWER),
    ("int_add", Attribute.INTELLIGENCE),
    ("intelligence_add", Attribute.INTELLIGENCE),
    ("reflex_add", Attribute.REFLEXES),
    ("reflexes_add", Attribute.REFLEXES),
    ("skill_add", Attribute.SKILL),
    ("technical_add", Attribute.TECHNICAL),
    ("technical_ability_add", Attribute.TECHNICAL),
)

# Cyber-mod effect key -> civil stat. "persuassion_add" is a typo that
# shipped in published rule data; keep accepting it.
CIVIL_EFFECT_KEYS: tuple[tuple[str, CivilStat], ...] = (
    ("appeal_add", CivilStat.APPEAL),
    ("performance_add", CivilStat.PERFORMANCE),
    ("crafting_add", CivilStat.CRAFTING),
    ("driving_add", CivilStat.DRIVING),
    ("evasion_add", CivilStat.EVASION),
    ("intimidation_add", CivilStat.INTIMIDATION),
    ("luck_add", CivilStat.LUCK),
    ("gambler_add", CivilStat.LUCK),
    ("perception_add", CivilStat.PERCEPTION),
    ("persuasion_add", CivilStat.PERSUASION),
    ("persuassion_add", CivilStat.PERSUASION),
    ("tolerance_add", CivilStat.TOLERANCE),
)

STAT_EFFECT_KEYS = frozenset(
    key for key, _ in ATTRIBUTE_EFFECT_KEYS + CIVIL_EFFECT_KEYS
)


# Tag stat-effect target path -> attribute / civil stat.
ATTRIBUTE_TARGETS: dict[str, Attribute] = {
    f"attributes.{attr.value}": attr for attr in Attribute
}
ATTRIBUTE_TARGETS["attributes.technical_ability"] = Attribute.TECHNICAL

CIVIL_TARGETS: dict[str, CivilStat] = {
    f"civil.{stat.value}": stat for stat in CivilStat
}


def syskey(name: str) -> str:
    """Normalize a system or modification name to its catalog key form."""
    return "_".join(name.strip().lower().split())
