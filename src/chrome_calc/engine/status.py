"""Per-calculation situational facts.

A StatusContext is assembled fresh for every calculation from the caller's
status snapshot plus the weapon's flags, and discarded afterwards.
"""

from dataclasses import dataclass
from typing import Any, Mapping

from chrome_calc.models.character import WeaponConfig
from chrome_calc.models.combat_settings import CombatSettings
from chrome_calc.models.effect import finite_number


@dataclass(frozen=True, slots=True)
class StatusContext:
    hp_percent: float = 100.0
    is_first_turn: bool = False
    attacking_first: bool = False
    berserk_active: bool = False
    has_burn: bool = False

    # Seeded from weapon flags
    weapon_smart: bool = False
    weapon_arrows: bool = False
    force_crit: bool = False
    returned_attack: bool = False

    @property
    def first_strike(self) -> bool:
        return self.is_first_turn and self.attacking_first


def build_status_context(
    weapon: WeaponConfig,
    status: Mapping[str, Any] | None = None,
    settings: CombatSettings | None = None,
) -> StatusContext:
    """Merge the caller's status snapshot with the weapon's flags.

    Explicit smart/arrows entries in *status* win over the weapon flags;
    "attacking first" on the weapon implies both first-turn flags.
    """
    status = status or {}
    settings = settings or CombatSettings.defaults()

    hp = finite_number(status.get("hp_percent"))
    if hp is None:
        hp = settings.get_float("default_hp_percent", 100.0)

    if "weapon_smart" in status:
        smart = bool(status["weapon_smart"])
    elif "weapon_is_smart" in status:
        smart = bool(status["weapon_is_smart"])
    else:
        smart = weapon.flags.smart

    if "weapon_arrows" in status:
        arrows = bool(status["weapon_arrows"])
    else:
        arrows = weapon.flags.arrows

    first = weapon.flags.first
    return StatusContext(
        hp_percent=hp,
        is_first_turn=first or bool(status.get("is_first_turn")),
        attacking_first=first or bool(status.get("attacking_first")),
        berserk_active=bool(status.get("berserk_active")),
        has_burn=bool(status.get("has_burn")),
        weapon_smart=smart,
        weapon_arrows=arrows,
        force_crit=weapon.flags.always_crit or bool(status.get("force_crit")),
        returned_attack=weapon.flags.returned or bool(status.get("returned_attack")),
    )
