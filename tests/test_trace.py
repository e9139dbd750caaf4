"""Tests for the attack trace text."""

from chrome_calc.engine.engine_config import EngineConfig
from chrome_calc.engine.formulas import BaseNumbers
from chrome_calc.engine.modifiers import HealProc, ResolutionState
from chrome_calc.engine.resolution import AttackOutcome
from chrome_calc.engine.trace import FAILURE_PREFIX, format_failure, format_trace
from chrome_calc.models.constants import AttackCategory, AttackSubtype


BASE = BaseNumbers(
    hit_chance=1.0, crit_chance=0.13, crit_mult=1.3,
    damage=5.8, skill_roll=37, formula_text="((Body 10) / 10) + 0.75",
)


def _trace(state, outcome, config=None):
    return format_trace(
        AttackCategory.MELEE, AttackSubtype.UNARMED, BASE, state, outcome, config,
    ).splitlines()


def _state(**overrides):
    values = dict(damage=5.8, hit_chance=1.0, crit_chance=0.13, crit_mult=1.3)
    values.update(overrides)
    return ResolutionState(**values)


def test_plain_hit():
    lines = _trace(_state(), AttackOutcome(hit=True, crit=False, damage=5.8, hit_roll=0.2))
    assert lines == [
        "Attack: UNARMED (melee)",
        "Formula: ((Body 10) / 10) + 0.75",
        "Random roll: 37",
        "Hit Chance: 100%  |  Crit Chance: 13%  |  Crit Mult: x1.30",
        "Result: HIT - Damage 5.8",
    ]


def test_miss():
    state = _state(hit_chance=0.57)
    lines = _trace(state, AttackOutcome(hit=False, crit=False, damage=0.0, hit_roll=0.9))
    assert lines[-2] == "Hit Chance: 57%  |  Crit Chance: 13%  |  Crit Mult: x1.30"
    assert lines[-1] == "Result: MISS"


def test_critical_hit_shows_base_damage_and_procs():
    state = _state(procs=(HealProc(5),))
    outcome = AttackOutcome(hit=True, crit=True, damage=7.6, hit_roll=0.2, crit_roll=0.05)
    assert _trace(state, outcome)[-3:] == [
        "Result: CRITICAL HIT - Damage 7.6",
        "Base Damage: 5.8",
        "Proc: Feedback Circuit - Heal +5 HP",
    ]


def test_procs_only_reported_on_crit():
    state = _state(procs=(HealProc(5),))
    lines = _trace(state, AttackOutcome(hit=True, crit=False, damage=5.8, hit_roll=0.2))
    assert not any(line.startswith("Proc:") for line in lines)


def test_bonus_notes_listed_before_chances():
    state = _state(notes=(
        "First Strike bonus: +20% damage from cyberware",
        "Critical chance +10% (condition: sharp_weapon)",
    ))
    lines = _trace(state, AttackOutcome(hit=True, crit=False, damage=7.0, hit_roll=0.2))
    assert lines[3:6] == [
        "Bonuses:",
        "  - First Strike bonus: +20% damage from cyberware",
        "  - Critical chance +10% (condition: sharp_weapon)",
    ]


def test_whole_number_damage_keeps_one_decimal():
    lines = _trace(_state(), AttackOutcome(hit=True, crit=False, damage=12.0, hit_roll=0.2))
    assert lines[-1] == "Result: HIT - Damage 12.0"


def test_percentages_round_half_up():
    state = _state(hit_chance=0.625, crit_chance=0.125)
    lines = _trace(state, AttackOutcome(hit=False, crit=False, damage=0.0, hit_roll=0.9))
    assert lines[-2].startswith("Hit Chance: 63%  |  Crit Chance: 13%")


def test_ranged_header():
    text = format_trace(
        AttackCategory.RANGED, AttackSubtype.BLAST, BASE, _state(),
        AttackOutcome(hit=True, crit=False, damage=5.8, hit_roll=0.2),
    )
    assert text.splitlines()[0] == "Attack: BLAST (ranged)"


def test_custom_proc_label():
    state = _state(procs=(HealProc(2.5),))
    outcome = AttackOutcome(hit=True, crit=True, damage=7.6, hit_roll=0.2)
    lines = _trace(state, outcome, EngineConfig(heal_proc_label="Leech Node"))
    assert lines[-1] == "Proc: Leech Node - Heal +2.5 HP"


def test_failure_text():
    assert format_failure("boom") == f"{FAILURE_PREFIX} boom"
