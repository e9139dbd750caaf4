"""Human-readable report of one attack calculation.

The sheet shows this text verbatim, so line content is stable:

    Attack: UNARMED (melee)
    Formula: ((Body 10) / 10) + ...
    Random roll: 37
    Bonuses:
      - First Strike bonus: +20% damage from cyberware
    Hit Chance: 100%  |  Crit Chance: 13%  |  Crit Mult: x1.30
    Result: CRITICAL HIT - Damage 7.4
    Base Damage: 5.7
    Proc: Feedback Circuit - Heal +5 HP
"""

import math

from chrome_calc.engine.engine_config import EngineConfig
from chrome_calc.engine.formulas import BaseNumbers, fmt_number
from chrome_calc.engine.modifiers import ResolutionState
from chrome_calc.engine.resolution import AttackOutcome
from chrome_calc.models.constants import AttackCategory, AttackSubtype

FAILURE_PREFIX = "Calculation failed:"


def _percent(x: float) -> int:
    return math.floor(x * 100 + 0.5)


def format_trace(
    category: AttackCategory,
    subtype: AttackSubtype,
    base: BaseNumbers,
    state: ResolutionState,
    outcome: AttackOutcome,
    config: EngineConfig | None = None,
) -> str:
    config = config or EngineConfig()
    lines = [
        f"Attack: {subtype.value.upper()} ({category.value})",
        f"Formula: {base.formula_text}",
        f"Random roll: {base.skill_roll}",
    ]
    if state.notes:
        lines.append("Bonuses:")
        lines.extend(f"  - {note}" for note in state.notes)
    lines.append(
        f"Hit Chance: {_percent(state.hit_chance)}%  |  "
        f"Crit Chance: {_percent(state.crit_chance)}%  |  "
        f"Crit Mult: x{state.crit_mult:.2f}"
    )

    if not outcome.hit:
        lines.append("Result: MISS")
    elif outcome.crit:
        lines.append(f"Result: CRITICAL HIT - Damage {outcome.damage:.1f}")
        lines.append(f"Base Damage: {base.damage:.1f}")
        for proc in state.procs:
            lines.append(
                f"Proc: {config.heal_proc_label} - Heal +{fmt_number(proc.amount)} HP"
            )
    else:
        lines.append(f"Result: HIT - Damage {outcome.damage:.1f}")

    return "\n".join(lines)


def format_failure(error: str) -> str:
    return f"{FAILURE_PREFIX} {error}"
