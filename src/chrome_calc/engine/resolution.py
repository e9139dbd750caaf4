"""Roll hit and crit against the modified numbers and settle final damage."""

import math
from dataclasses import dataclass

from chrome_calc.engine.formulas import RandomSource, ceil1
from chrome_calc.engine.modifiers import ResolutionState


@dataclass(frozen=True, slots=True)
class AttackOutcome:
    hit: bool
    crit: bool
    damage: float
    hit_roll: float
    crit_roll: float | None = None   # None when no crit die was needed


def final_damage(state: ResolutionState, hit: bool, crit: bool) -> float:
    """Ceil to integer if force-max-roll, then multiply if crit, then ceil to 0.1."""
    if not hit:
        return 0.0
    damage = state.damage
    if state.force_max_roll:
        damage = math.ceil(damage)
    if crit:
        damage *= state.crit_mult
    return ceil1(damage)


def resolve(state: ResolutionState, rng: RandomSource) -> AttackOutcome:
    """Draw the hit die, then (on a hit, unless forced either way) the crit die."""
    hit_roll = rng.random()
    hit = hit_roll <= state.hit_chance

    crit = False
    crit_roll: float | None = None
    if hit:
        if state.force_crit:
            crit = True
        elif not state.disable_crit:
            crit_roll = rng.random()
            crit = crit_roll <= state.crit_chance

    return AttackOutcome(
        hit=hit,
        crit=crit,
        damage=final_damage(state, hit, crit),
        hit_roll=hit_roll,
        crit_roll=crit_roll,
    )
