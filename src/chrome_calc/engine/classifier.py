"""Map a weapon type string to (attack category, attack subtype)."""

from chrome_calc.models.constants import AttackCategory, AttackSubtype


C = AttackCategory
S = AttackSubtype

_WEAPON_TYPE_MAP: dict[str, tuple[AttackCategory, AttackSubtype]] = {
    "unarmed melee": (C.MELEE, S.UNARMED),
    "unarmed": (C.MELEE, S.UNARMED),
    "grappling": (C.MELEE, S.UNARMED),
    "kick": (C.MELEE, S.KICK),
    "blunt": (C.MELEE, S.BLUNT),
    "blunt weapon melee": (C.MELEE, S.BLUNT),
    "sharp": (C.MELEE, S.SHARP),
    "sharp weapon melee": (C.MELEE, S.SHARP),
    "blade": (C.MELEE, S.SHARP),
    "bladed": (C.MELEE, S.SHARP),
    "whip": (C.MELEE, S.WHIP),
    "slice": (C.MELEE, S.SLICE),
    "blast": (C.RANGED, S.BLAST),
    "ranged": (C.RANGED, S.RANGED),
    "ranged attack": (C.RANGED, S.RANGED),
}

_FALLBACK = (C.RANGED, S.RANGED)


def classify(weapon_type: str | None) -> tuple[AttackCategory, AttackSubtype]:
    """Case-insensitive lookup; anything unknown is a plain ranged attack.

    A missing type reads as "Unarmed Melee", the sheet's default weapon.
    """
    if weapon_type is None:
        weapon_type = "Unarmed Melee"
    if not isinstance(weapon_type, str):
        return _FALLBACK
    return _WEAPON_TYPE_MAP.get(weapon_type.strip().lower(), _FALLBACK)
