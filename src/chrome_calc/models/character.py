"""Character-side inputs to the attack calculation.

All of these are owned by the character builder and only read by the
engine. Attribute dicts are keyed by Attribute; missing keys read as the
baseline value (10).
"""

from dataclasses import dataclass, field

from chrome_calc.models.constants import Attribute, CivilStat


def _default_attributes() -> dict[Attribute, float]:
    return {attr: 10 for attr in Attribute}


@dataclass(slots=True)
class WeaponFlags:
    smart: bool = False
    arrows: bool = False
    always_crit: bool = False
    returned: bool = False
    first: bool = False      # attacking first this turn


@dataclass(slots=True)
class WeaponConfig:
    type: str = "Unarmed Melee"
    damage: float = 0
    flags: WeaponFlags = field(default_factory=WeaponFlags)


@dataclass(slots=True)
class CyberModSystemState:
    """Installed modifications in one body system.

    "None" marks an empty slot. `tier` only means something for the
    Operating System.
    """
    slots: list[str] = field(default_factory=list)
    tier: str | None = None


@dataclass
class Character:
    """Everything the sheet knows about a character that the engine reads."""

    name: str = ""
    attributes: dict[Attribute, float] = field(default_factory=_default_attributes)
    civil: dict[CivilStat, float] = field(default_factory=dict)

    # Tag name -> active; tag name -> chosen option id
    tags: dict[str, bool] = field(default_factory=dict)
    tag_choices: dict[str, str] = field(default_factory=dict)

    # System display name -> installation
    cyber_mods: dict[str, CyberModSystemState] = field(default_factory=dict)

    weapon: WeaponConfig = field(default_factory=WeaponConfig)
