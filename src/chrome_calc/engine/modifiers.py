"""The modifier stack: cyber-mod and tag adjustments to the base numbers.

Modifiers are applied as a fold over an ordered list of steps, each taking
and returning an immutable ResolutionState:

  1. every installed non-OS modification, in installation order
  2. the Operating System, once, with base and tier effects combined
  3. hard-coded tag rules (Melee Training, Fencing, Aikido, ...)
  4. clamp hit/crit to [0, 1]; disable-crit forces crit chance to 0

Later steps see (and may override) what earlier ones did, so the order is
part of the contract. Within one effect set the rules in _EFFECT_RULES
run in their listed order.
"""

import logging
from dataclasses import dataclass, replace
from functools import partial, reduce
from typing import Callable, Mapping

from chrome_calc.engine.attributes import SerializedCyberMods, installed_effect_sets
from chrome_calc.engine.engine_config import EngineConfig
from chrome_calc.engine.formulas import BaseNumbers, clamp01, fmt_number
from chrome_calc.engine.status import StatusContext
from chrome_calc.models.catalog import RuleCatalog
from chrome_calc.models.combat_settings import CombatSettings
from chrome_calc.models.constants import (
    BLADED_SUBTYPES,
    UNARMED_SUBTYPES,
    AttackCategory,
    AttackSubtype,
)
from chrome_calc.models.effect import EffectSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HealProc:
    """Deferred heal that only fires if the attack lands as a critical."""
    amount: float


@dataclass(frozen=True, slots=True)
class ResolutionState:
    damage: float
    hit_chance: float
    crit_chance: float
    crit_mult: float
    force_crit: bool = False
    disable_crit: bool = False
    force_max_roll: bool = False
    procs: tuple[HealProc, ...] = ()
    notes: tuple[str, ...] = ()

    def scale_damage(self, percent: float) -> "ResolutionState":
        return replace(self, damage=self.damage * (1 + percent / 100))

    def with_note(self, note: str) -> "ResolutionState":
        return replace(self, notes=self.notes + (note,))


@dataclass(frozen=True, slots=True)
class AttackContext:
    category: AttackCategory
    subtype: AttackSubtype
    status: StatusContext
    low_hp_threshold: float = 50.0
    crit_auto_hp_threshold: float = 20.0

    @property
    def is_melee(self) -> bool:
        return self.category is AttackCategory.MELEE

    @property
    def is_ranged(self) -> bool:
        return self.category is AttackCategory.RANGED

    @property
    def is_unarmed(self) -> bool:
        return self.subtype in UNARMED_SUBTYPES

    def allows_crit_bonus(self, condition: str | None) -> bool:
        """Gate for crit_chance_add. Unknown conditions pass."""
        if condition == "start_of_battle":
            return self.status.is_first_turn
        if condition == "sharp_weapon":
            return self.subtype in BLADED_SUBTYPES
        if condition == "first_strike":
            return self.status.first_strike
        return True


EffectRule = Callable[[ResolutionState, EffectSet, AttackContext], ResolutionState]


# --- Effect rules, in precedence order ---------------------------------------


def _accuracy(state: ResolutionState, fx: EffectSet, ctx: AttackContext) -> ResolutionState:
    hit = state.hit_chance
    if ctx.is_ranged and fx.ranged_accuracy_add:
        hit += fx.ranged_accuracy_add / 100
    if fx.accuracy_set is not None:
        hit = fx.accuracy_set / 100
    if fx.attack_chance is not None:
        hit = max(hit, fx.attack_chance / 100)
    return replace(state, hit_chance=hit)


def _smart_weapon(state: ResolutionState, fx: EffectSet, ctx: AttackContext) -> ResolutionState:
    if fx.condition != "smart_weapon" or not ctx.status.weapon_smart:
        return state
    if fx.accuracy_set is not None:
        state = replace(state, hit_chance=fx.accuracy_set / 100)
    if fx.crit_rate_set is not None:
        state = replace(state, crit_chance=fx.crit_rate_set / 100)
    return state


def _damage_multipliers(state: ResolutionState, fx: EffectSet, ctx: AttackContext) -> ResolutionState:
    if ctx.is_melee and fx.melee_damage_add:
        state = state.scale_damage(fx.melee_damage_add)
    if ctx.is_ranged and fx.ranged_damage_add:
        state = state.scale_damage(fx.ranged_damage_add)
    if ctx.is_unarmed and fx.unarmed_damage_add:
        state = state.scale_damage(fx.unarmed_damage_add)
    return state


def _first_strike(state: ResolutionState, fx: EffectSet, ctx: AttackContext) -> ResolutionState:
    # Both bonuses can fire on the same attack; they stack multiplicatively.
    if not ctx.status.first_strike:
        return state
    if fx.condition == "first_strike":
        pct = fx.damage_add_percent or 0.0
        state = state.scale_damage(pct).with_note(
            f"First Strike bonus: +{fmt_number(pct)}% damage from cyberware"
        )
    if fx.first_attack_add:
        state = state.scale_damage(fx.first_attack_add).with_note(
            f"First Attack bonus: +{fmt_number(fx.first_attack_add)}% damage from cyberware"
        )
    return state


def _hp_below_half(state: ResolutionState, fx: EffectSet, ctx: AttackContext) -> ResolutionState:
    if (
        fx.condition == "hp_below_50"
        and ctx.is_melee
        and ctx.status.hp_percent < ctx.low_hp_threshold
    ):
        return state.scale_damage(fx.melee_damage_add or 0.0)
    return state


def _burn_inflicted(state: ResolutionState, fx: EffectSet, ctx: AttackContext) -> ResolutionState:
    if fx.condition == "burn_inflicted" and ctx.is_melee and ctx.status.has_burn:
        return state.scale_damage(fx.melee_damage_add or 0.0)
    return state


def _berserk(state: ResolutionState, fx: EffectSet, ctx: AttackContext) -> ResolutionState:
    # Keyed on status alone, not on the effect's condition field.
    if not ctx.status.berserk_active:
        return state
    state = state.scale_damage(fx.damage_add_percent or 0.0)
    if fx.crit_reroll_once_per_battle:
        state = replace(state, force_crit=True)
    return state


def _crit_chance(state: ResolutionState, fx: EffectSet, ctx: AttackContext) -> ResolutionState:
    if fx.crit_rate_add:
        state = replace(state, crit_chance=state.crit_chance + fx.crit_rate_add / 100)
    if fx.crit_chance_add and ctx.allows_crit_bonus(fx.condition):
        note = f"Critical chance +{fmt_number(fx.crit_chance_add)}%"
        if fx.condition:
            note += f" (condition: {fx.condition})"
        state = replace(
            state, crit_chance=state.crit_chance + fx.crit_chance_add / 100
        ).with_note(note)
    return state


def _unarmed_crits(state: ResolutionState, fx: EffectSet, ctx: AttackContext) -> ResolutionState:
    if not ctx.is_unarmed:
        return state
    if fx.unarmed_crit_rate_add:
        state = replace(state, crit_chance=state.crit_chance + fx.unarmed_crit_rate_add / 100)
    if fx.unarmed_crit_rate_set:
        state = replace(state, crit_chance=fx.unarmed_crit_rate_set / 100)
    if fx.unarmed_crit_damage_add:
        state = replace(state, crit_mult=state.crit_mult * (1 + fx.unarmed_crit_damage_add / 100))
    return state


def _resolution_flags(state: ResolutionState, fx: EffectSet, ctx: AttackContext) -> ResolutionState:
    if fx.unarmed_disable_crit and ctx.is_unarmed:
        state = replace(state, disable_crit=True)
    if fx.crit_auto_on_low_hp and ctx.status.hp_percent <= ctx.crit_auto_hp_threshold:
        state = replace(state, force_crit=True)
    if fx.unarmed_scale_to_ceiling and ctx.is_unarmed:
        state = replace(state, force_max_roll=True)
    return state


def _procs(state: ResolutionState, fx: EffectSet, ctx: AttackContext) -> ResolutionState:
    if fx.health_points_on_crit:
        return replace(state, procs=state.procs + (HealProc(fx.health_points_on_crit),))
    return state


_EFFECT_RULES: tuple[EffectRule, ...] = (
    _accuracy,
    _smart_weapon,
    _damage_multipliers,
    _first_strike,
    _hp_below_half,
    _burn_inflicted,
    _berserk,
    _crit_chance,
    _unarmed_crits,
    _resolution_flags,
    _procs,
)


def apply_effect_set(
    state: ResolutionState,
    effects: EffectSet,
    ctx: AttackContext,
) -> ResolutionState:
    """Run every recognized effect rule over one effect set."""
    return reduce(lambda acc, rule: rule(acc, effects, ctx), _EFFECT_RULES, state)


# --- Stack steps --------------------------------------------------------------


def apply_tag_rules(
    state: ResolutionState,
    ctx: AttackContext,
    tags: Mapping[str, bool],
    config: EngineConfig,
) -> ResolutionState:
    """Combat bonuses from tags that have no catalog effect record."""
    hit, crit, dmg = state.hit_chance, state.crit_chance, state.damage
    if ctx.is_melee and tags.get(config.melee_training_tag):
        crit += config.melee_training_crit
    if tags.get(config.fencing_tag) and ctx.subtype in BLADED_SUBTYPES:
        crit += config.fencing_crit
    if tags.get(config.aikido_tag) and ctx.is_unarmed:
        dmg *= config.aikido_damage_mult
    if tags.get(config.archery_tag) and ctx.is_ranged and ctx.status.weapon_arrows:
        hit += config.archery_hit
        crit += config.archery_crit
    if tags.get(config.kickboxing_tag) and ctx.subtype is AttackSubtype.KICK:
        dmg *= config.kickboxing_damage_mult
    return replace(state, hit_chance=hit, crit_chance=crit, damage=dmg)


def finalize(state: ResolutionState) -> ResolutionState:
    crit = 0.0 if state.disable_crit else clamp01(state.crit_chance)
    return replace(state, hit_chance=clamp01(state.hit_chance), crit_chance=crit)


def modifier_steps(
    effect_sets: list[EffectSet],
    ctx: AttackContext,
    tags: Mapping[str, bool],
    config: EngineConfig,
) -> list[Callable[[ResolutionState], ResolutionState]]:
    """The ordered steps of the stack, ready to fold."""
    steps: list[Callable[[ResolutionState], ResolutionState]] = [
        partial(apply_effect_set, effects=effects, ctx=ctx) for effects in effect_sets
    ]
    steps.append(partial(apply_tag_rules, ctx=ctx, tags=tags, config=config))
    steps.append(finalize)
    return steps


def apply_modifiers(
    base: BaseNumbers,
    category: AttackCategory,
    subtype: AttackSubtype,
    status: StatusContext,
    catalog: RuleCatalog,
    cyber_mods: SerializedCyberMods,
    tags: Mapping[str, bool],
    settings: CombatSettings | None = None,
    config: EngineConfig | None = None,
) -> ResolutionState:
    """Apply cyber-mod then tag modifiers to *base* and clamp the result."""
    settings = settings or CombatSettings.defaults()
    config = config or EngineConfig()
    ctx = AttackContext(
        category=category,
        subtype=subtype,
        status=status,
        low_hp_threshold=settings.get_float("hp_below_threshold", 50.0),
        crit_auto_hp_threshold=settings.get_float("low_hp_crit_threshold", 20.0),
    )
    installed = installed_effect_sets(catalog, cyber_mods)
    logger.debug(
        "Applying %d modification(s) to %s/%s attack",
        len(installed), category.value, subtype.value,
    )

    initial = ResolutionState(
        damage=base.damage,
        hit_chance=base.hit_chance,
        crit_chance=base.crit_chance,
        crit_mult=base.crit_mult,
        force_crit=status.force_crit,
    )
    steps = modifier_steps([fx for _name, fx in installed], ctx, tags, config)
    return reduce(lambda state, step: step(state), steps, initial)
