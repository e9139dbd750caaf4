"""Base hit chance, crit chance, crit multiplier, and damage.

These are the numbers before any tag or cyber-mod modifier. Each attack
subtype has one fixed damage expression; the only randomness is the skill
roll, drawn uniformly from RAND(skill, cool + 50) on every call.

Formula constants come from CombatSettings; the expression shapes are
hardcoded here, paired with a renderer that writes the same expression
with the actual (tag-adjusted) values substituted in for the trace.
"""

import math
from dataclasses import dataclass
from typing import Callable, Mapping, Protocol

from chrome_calc.engine.attributes import read_attribute
from chrome_calc.engine.engine_config import EngineConfig
from chrome_calc.models.character import WeaponConfig
from chrome_calc.models.combat_settings import CombatSettings
from chrome_calc.models.constants import (
    UNARMED_SUBTYPES,
    AttackCategory,
    AttackSubtype,
    Attribute,
)
from chrome_calc.models.effect import finite_number


class RandomSource(Protocol):
    """The subset of random.Random the engine draws from."""

    def random(self) -> float: ...

    def randint(self, a: int, b: int) -> int: ...


def clamp01(x: float) -> float:
    if x < 0:
        return 0.0
    if x > 1:
        return 1.0
    return x


def ceil1(x: float) -> float:
    """Round up to one decimal place. Float noise below 1e-6 is ignored."""
    return math.ceil(round(x * 10, 6)) / 10


def fmt_number(x: float) -> str:
    """Render 20.0 as '20' and 12.5 as '12.5'."""
    if float(x).is_integer():
        return str(int(x))
    return f"{x:g}"


def skill_roll(low: float, high: float, rng: RandomSource) -> int:
    """Uniform integer between *low* and *high* inclusive, in either order."""
    if not (math.isfinite(low) and math.isfinite(high)):
        return 0
    lo, hi = min(low, high), max(low, high)
    lo_int, hi_int = math.ceil(lo), math.floor(hi)
    if hi_int < lo_int:
        return math.floor(lo + 0.5)
    return rng.randint(lo_int, hi_int)


def base_hit_chance(
    category: AttackCategory,
    technical: float,
    skill: float,
    settings: CombatSettings,
) -> float:
    """Melee always connects; ranged scales with technical + skill."""
    if category is AttackCategory.MELEE:
        return 1.0
    base = settings.get_float("ranged_hit_base", 0.47)
    per_point = settings.get_float("ranged_hit_per_point", 0.005)
    return clamp01(base + per_point * (technical + skill))


def base_crit_chance(skill: float, settings: CombatSettings) -> float:
    base = settings.get_float("crit_base", 0.03)
    per_skill = settings.get_float("crit_per_skill", 0.01)
    return clamp01(base + per_skill * skill)


def crit_multiplier(
    category: AttackCategory,
    subtype: AttackSubtype,
    skill: float,
    technical: float,
    settings: CombatSettings,
) -> float:
    """Melee and blast scale with skill, other ranged with technical."""
    divisor = settings.get_float("crit_mult_divisor", 100.0)
    if category is AttackCategory.MELEE or subtype is AttackSubtype.BLAST:
        return settings.get_float("melee_crit_mult_base", 1.2) + skill / divisor
    return settings.get_float("ranged_crit_mult_base", 1.35) + technical / divisor


@dataclass(frozen=True, slots=True)
class FormulaInputs:
    """Attribute values after the unarmed tag pre-adjustments."""
    body: float
    cool: float
    intelligence: float
    reflexes: float
    technical: float
    skill: float
    weapon_base: float
    roll: int
    roll_high: float

    @property
    def reflex_term(self) -> float:
        return self.reflexes * (0.01 * self.roll)

    @property
    def weapon_factor(self) -> float:
        return self.weapon_base * 0.01 if self.weapon_base > 0 else 0.0

    # Text fragments for the trace
    @property
    def rand_text(self) -> str:
        return f"RAND({fmt_number(self.skill)}, {fmt_number(self.roll_high)})"

    @property
    def reflex_text(self) -> str:
        return f"(Reflexes {fmt_number(self.reflexes)}) * (0.01 * {self.rand_text})"

    @property
    def weapon_text(self) -> str:
        if self.weapon_base > 0:
            return f"{fmt_number(self.weapon_base)} * 0.01"
        return "0"


def _unarmed(f: FormulaInputs) -> float:
    return f.body / 10 + f.cool / 5 + f.reflex_term + 0.75


def _unarmed_text(f: FormulaInputs) -> str:
    return (
        f"((Body {fmt_number(f.body)}) / 10) + ((Cool {fmt_number(f.cool)}) / 5)"
        f" + {f.reflex_text} + 0.75"
    )


def _kick(f: FormulaInputs) -> float:
    return 2 * _unarmed(f)


def _kick_text(f: FormulaInputs) -> str:
    return f"2 * [{_unarmed_text(f)}]"


def _blunt(f: FormulaInputs) -> float:
    return (f.body / 8 + f.cool / 5 + f.reflex_term + 0.75) * f.weapon_factor


def _blunt_text(f: FormulaInputs) -> str:
    return (
        f"(((Body {fmt_number(f.body)}) / 8) + ((Cool {fmt_number(f.cool)}) / 5)"
        f" + {f.reflex_text} + 0.75) * ({f.weapon_text})"
    )


def _sharp(f: FormulaInputs) -> float:
    return (f.body / 10 + f.cool / 4 + f.reflex_term + 0.75) * f.weapon_factor


def _sharp_text(f: FormulaInputs) -> str:
    return (
        f"(((Body {fmt_number(f.body)}) / 10) + ((Cool {fmt_number(f.cool)}) / 4)"
        f" + {f.reflex_text} + 0.75) * ({f.weapon_text})"
    )


def _whip(f: FormulaInputs) -> float:
    return 1.5 * (f.intelligence / 8 + f.cool / 4 + f.reflex_term + 0.75)


def _whip_text(f: FormulaInputs) -> str:
    return (
        f"1.5 * [ (Intelligence {fmt_number(f.intelligence)} / 8)"
        f" + (Cool {fmt_number(f.cool)} / 4) + {f.reflex_text} + 0.75 ]"
    )


def _slice(f: FormulaInputs) -> float:
    return 1.5 * (f.body / 10 + f.cool / 3 + f.reflex_term + 0.75)


def _slice_text(f: FormulaInputs) -> str:
    return (
        f"1.5 * [ (Body {fmt_number(f.body)} / 10)"
        f" + (Cool {fmt_number(f.cool)} / 3) + {f.reflex_text} + 0.75 ]"
    )


def _blast(f: FormulaInputs) -> float:
    return 1.5 * (f.technical / 8 + f.cool / 4 + f.reflex_term + 0.75)


def _blast_text(f: FormulaInputs) -> str:
    return (
        f"1.5 * [ (Technical {fmt_number(f.technical)} / 8)"
        f" + (Cool {fmt_number(f.cool)} / 4) + {f.reflex_text} + 0.75 ]"
    )


def _ranged(f: FormulaInputs) -> float:
    return f.intelligence / 2 + f.reflexes / 10 + f.weapon_factor * f.roll


def _ranged_text(f: FormulaInputs) -> str:
    return (
        f"(Intelligence {fmt_number(f.intelligence)} / 2)"
        f" + (Reflexes {fmt_number(f.reflexes)} / 10)"
        f" + (({f.weapon_text}) * {f.rand_text})"
    )


_DAMAGE_FORMULAS: dict[
    AttackSubtype,
    tuple[Callable[[FormulaInputs], float], Callable[[FormulaInputs], str]],
] = {
    AttackSubtype.UNARMED: (_unarmed, _unarmed_text),
    AttackSubtype.KICK: (_kick, _kick_text),
    AttackSubtype.BLUNT: (_blunt, _blunt_text),
    AttackSubtype.SHARP: (_sharp, _sharp_text),
    AttackSubtype.WHIP: (_whip, _whip_text),
    AttackSubtype.SLICE: (_slice, _slice_text),
    AttackSubtype.BLAST: (_blast, _blast_text),
    AttackSubtype.RANGED: (_ranged, _ranged_text),
}


@dataclass(frozen=True, slots=True)
class BaseNumbers:
    hit_chance: float
    crit_chance: float
    crit_mult: float
    damage: float          # already rounded up to 0.1
    skill_roll: int
    formula_text: str


def formula_inputs(
    subtype: AttackSubtype,
    attrs: Mapping[Attribute, float],
    weapon: WeaponConfig,
    tags: Mapping[str, bool],
    roll: int,
    settings: CombatSettings,
    config: EngineConfig,
) -> FormulaInputs:
    baseline = settings.get_float("attribute_baseline", 10)
    body = read_attribute(attrs, Attribute.BODY, baseline)
    reflexes = read_attribute(attrs, Attribute.REFLEXES, baseline)
    if subtype in UNARMED_SUBTYPES:
        if tags.get(config.unarmed_body_tag):
            body += config.unarmed_training_bonus
        if tags.get(config.unarmed_reflexes_tag):
            reflexes += config.unarmed_training_bonus

    cool = read_attribute(attrs, Attribute.COOL, baseline)
    weapon_base = finite_number(weapon.damage)
    return FormulaInputs(
        body=body,
        cool=cool,
        intelligence=read_attribute(attrs, Attribute.INTELLIGENCE, baseline),
        reflexes=reflexes,
        technical=read_attribute(attrs, Attribute.TECHNICAL, baseline),
        skill=read_attribute(attrs, Attribute.SKILL, baseline),
        weapon_base=weapon_base if weapon_base is not None else 0.0,
        roll=roll,
        roll_high=cool + settings.get_float("skill_roll_cool_offset", 50),
    )


def evaluate_base(
    category: AttackCategory,
    subtype: AttackSubtype,
    attrs: Mapping[Attribute, float],
    weapon: WeaponConfig,
    tags: Mapping[str, bool],
    rng: RandomSource,
    settings: CombatSettings | None = None,
    config: EngineConfig | None = None,
) -> BaseNumbers:
    """Compute the unmodified numbers for one attack.

    Draws a fresh skill roll from *rng* on every call.
    """
    settings = settings or CombatSettings.defaults()
    config = config or EngineConfig()
    baseline = settings.get_float("attribute_baseline", 10)
    skill = read_attribute(attrs, Attribute.SKILL, baseline)
    technical = read_attribute(attrs, Attribute.TECHNICAL, baseline)
    cool = read_attribute(attrs, Attribute.COOL, baseline)

    roll = skill_roll(
        skill, cool + settings.get_float("skill_roll_cool_offset", 50), rng
    )
    inputs = formula_inputs(subtype, attrs, weapon, tags, roll, settings, config)
    compute, describe = _DAMAGE_FORMULAS.get(subtype, _DAMAGE_FORMULAS[AttackSubtype.RANGED])

    return BaseNumbers(
        hit_chance=base_hit_chance(category, technical, skill, settings),
        crit_chance=base_crit_chance(skill, settings),
        crit_mult=crit_multiplier(category, subtype, skill, technical, settings),
        damage=ceil1(compute(inputs)),
        skill_roll=roll,
        formula_text=describe(inputs),
    )
