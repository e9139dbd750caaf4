"""Tests for effect records and the catalog model lookups."""

import math

import pytest

from chrome_calc.models.catalog import (
    CyberMod,
    CyberSystem,
    RuleCatalog,
    TagChoice,
    TagDefinition,
    numeric_tier_key,
)
from chrome_calc.models.effect import EffectSet, TagEffect, finite_number


# --- finite_number ---

def test_finite_number():
    assert finite_number(3) == 3.0
    assert finite_number(2.5) == 2.5
    assert finite_number(True) is None
    assert finite_number("3") is None
    assert finite_number(math.inf) is None
    assert finite_number(math.nan) is None


# --- EffectSet ---

def test_from_mapping_splits_stats_and_combat_fields():
    fx = EffectSet.from_mapping({
        "condition": "sharp_weapon",
        "crit_chance_add": 10,
        "body_add": 2,
        "gambler_add": 1,
        "unarmed_disable_crit": 1,
    })
    assert fx.condition == "sharp_weapon"
    assert fx.crit_chance_add == 10
    assert fx.unarmed_disable_crit is True
    assert fx.stat_adds == {"body_add": 2, "gambler_add": 1}


def test_from_mapping_drops_unknown_and_invalid():
    fx = EffectSet.from_mapping({"laser_eyes": 1, "crit_rate_add": "x", "condition": 5})
    assert fx.is_empty


def test_from_mapping_of_nothing_is_empty():
    assert EffectSet.from_mapping(None).is_empty
    assert EffectSet.from_mapping({}).is_empty


def test_rejected_keys():
    raw = {"laser_eyes": 1, "crit_rate_add": "x", "body_add": 1, "crit_auto_on_low_hp": 0}
    assert sorted(EffectSet.rejected_keys(raw)) == ["crit_rate_add", "laser_eyes"]


def test_merged_overlays_present_fields():
    base = EffectSet.from_mapping({"condition": "first_strike", "damage_add_percent": 25, "reflex_add": 1})
    tier = EffectSet.from_mapping({"damage_add_percent": 30, "crit_rate_add": 5, "reflex_add": 2, "cool_add": 1})
    merged = base.merged(tier)
    assert merged.condition == "first_strike"
    assert merged.damage_add_percent == 30
    assert merged.crit_rate_add == 5
    assert merged.stat_adds == {"reflex_add": 2, "cool_add": 1}
    assert base.damage_add_percent == 25


def test_tag_effect_is_stat_add():
    assert TagEffect(kind="stat", target="civil.luck", value=2).is_stat_add
    assert TagEffect(kind="stat", target="civil.luck", op="add", value=2).is_stat_add
    assert not TagEffect(kind="stat", target="civil.luck", op="mul", value=2).is_stat_add
    assert not TagEffect(kind="stat", target="civil.luck", value=0).is_stat_add
    assert not TagEffect(kind="perk", target="civil.luck", value=2).is_stat_add


def test_tag_effect_from_mapping_ignores_wrong_types():
    effect = TagEffect.from_mapping({"kind": "stat", "target": 3, "op": None, "value": "1"})
    assert effect.kind == "stat"
    assert effect.target is None
    assert effect.value is None


# --- Tiers ---

@pytest.mark.parametrize("label, expected", [
    ("3", "3"), ("03", "3"), ("3.0", "3"), ("2.50", "2.5"),
    ("three", None), ("nan", None), ("inf", None),
])
def test_numeric_tier_key(label, expected):
    assert numeric_tier_key(label) == expected


def _os_mod():
    return CyberMod(
        id="berserk", name="Berserk",
        effects=EffectSet.from_mapping({"cool_add": 1}),
        base_effects=EffectSet.from_mapping({"willpower_add": 1, "damage_add_percent": 5}),
        tiers={
            "1": EffectSet.from_mapping({"damage_add_percent": 10}),
            "elite": EffectSet.from_mapping({"reflex_add": 3}),
        },
    )


def test_resolve_layers_effects_base_then_tier():
    fx = _os_mod().resolve("1")
    assert fx.damage_add_percent == 10
    assert fx.stat_adds == {"cool_add": 1, "willpower_add": 1}


def test_resolve_without_tier():
    fx = _os_mod().resolve(None)
    assert fx.damage_add_percent == 5


def test_tier_lookup_verbatim_then_numeric():
    mod = _os_mod()
    assert mod.tier_effects("elite").stat_adds == {"reflex_add": 3}
    assert mod.tier_effects("01").damage_add_percent == 10
    assert mod.tier_effects("2") is None
    assert mod.tier_effects("") is None


# --- Tags and systems ---

def test_tag_choice_lookup():
    tag = TagDefinition(name="Athlete", choices=(
        TagChoice(id="sprinter", label="Sprinter"),
        TagChoice(id="lifter", label="Sprinter Deluxe"),
    ))
    assert tag.choice("lifter").id == "lifter"
    assert tag.choice("Sprinter Deluxe").id == "lifter"
    assert tag.choice("swimmer") is None
    assert tag.choice(None) is None


def test_system_lookup_by_key_or_name():
    system = CyberSystem(name="Nervous System", mods=(CyberMod(id="k", name="Kerenzikov"),))
    catalog = RuleCatalog.from_parts([system])
    assert catalog.system("nervous_system") is system
    assert catalog.system("  Nervous   System ") is system
    assert catalog.system("Spine") is None
    assert catalog.lookup_mod("Nervous System", "Kerenzikov").id == "k"
    assert catalog.lookup_mod("Nervous System", "k").name == "Kerenzikov"
    assert catalog.lookup_mod("Spine", "k") is None


def test_default_state_gives_hands_an_extra_slot():
    catalog = RuleCatalog.from_parts([
        CyberSystem(name="Hands", slots=1),
        CyberSystem(name="Operating System", slots=1),
    ])
    state = catalog.default_cyber_mods_state()
    assert state["Hands"].slots == ["None", "None"]
    assert state["Operating System"].tier == ""
    assert catalog.default_cyber_mods_state(hands_extra_slots=0)["Hands"].slots == ["None"]
