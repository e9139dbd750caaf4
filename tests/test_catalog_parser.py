"""Tests for loading rule-catalog JSON."""

import json
import logging
from pathlib import Path

import pytest

from chrome_calc.models.constants import EMPTY_SLOT
from chrome_calc.parser.catalog_parser import (
    load_catalog,
    parse_mod,
    parse_system,
    parse_tags,
)


SAMPLE_CATALOG = Path(__file__).resolve().parent.parent / "data" / "catalog"


def _write(directory: Path, name: str, data) -> None:
    (directory / name).write_text(json.dumps(data), encoding="utf-8")


# --- Modifications ---

def test_parse_mod_with_tiers():
    mod = parse_mod({
        "id": "berserk",
        "name": "Berserk",
        "desc": "Rage.",
        "base_effects": {"willpower_add": 1},
        "tiers": {"1": {"damage_add_percent": 10}, "3": {"reflex_add": 2}},
    }, "Operating System")
    assert mod.id == "berserk"
    assert mod.desc == "Rage."
    assert mod.base_effects.stat_adds == {"willpower_add": 1}
    assert set(mod.tiers) == {"1", "3"}
    assert mod.tiers["1"].damage_add_percent == 10


def test_parse_mod_falls_back_between_id_and_name():
    assert parse_mod({"name": "Smart Link"}, "Hands").id == "Smart Link"
    assert parse_mod({"id": "smart_link"}, "Hands").name == "smart_link"


def test_parse_mod_without_identity_is_skipped(caplog):
    with caplog.at_level(logging.WARNING):
        assert parse_mod({"effects": {"body_add": 1}}, "Arms") is None
    assert "neither id nor name" in caplog.text


def test_unrecognized_effect_keys_dropped_with_warning(caplog):
    with caplog.at_level(logging.WARNING):
        mod = parse_mod({"id": "x", "effects": {"body_add": 1, "laser_eyes": True}}, "Arms")
    assert mod.effects.stat_adds == {"body_add": 1}
    assert "laser_eyes" in caplog.text


def test_numeric_tier_labels_become_strings():
    mod = parse_mod({"id": "os", "tiers": {1: {"cool_add": 1}}}, "Operating System")
    assert mod.tier_effects("1").stat_adds == {"cool_add": 1}


# --- Systems ---

def test_parse_system():
    system = parse_system({
        "system": "Arms",
        "slots": 2,
        "mods": [{"id": "gorilla", "name": "Gorilla Arms"}, "junk", {"desc": "nameless"}],
    })
    assert system.name == "Arms"
    assert system.key == "arms"
    assert system.slots == 2
    assert [m.id for m in system.mods] == ["gorilla"]


def test_parse_system_invalid_slots_fall_back_to_one(caplog):
    with caplog.at_level(logging.WARNING):
        system = parse_system({"system": "Legs", "slots": "many"})
    assert system.slots == 1
    assert "invalid slot count" in caplog.text


def test_parse_system_requires_name():
    with pytest.raises(ValueError, match="missing 'system'"):
        parse_system({"slots": 1}, source="broken.json")


# --- Tags ---

def test_parse_tags():
    tags = parse_tags({"items": {
        "athlete": {
            "name": "Athlete",
            "effects": [{"kind": "stat", "target": "attributes.body", "op": "add", "value": 1}],
            "choices": [{"id": "sprinter", "label": "Sprinter", "effects": [
                {"kind": "stat", "target": "attributes.reflexes", "value": 1},
            ]}],
        },
        "nameless": {"effects": []},
    }})
    assert [t.name for t in tags] == ["Athlete"]
    athlete = tags[0]
    assert athlete.effects[0].target == "attributes.body"
    assert athlete.choice("sprinter").effects[0].op is None


def test_parse_tags_rejects_non_object():
    with pytest.raises(ValueError):
        parse_tags(["Boxing"])
    with pytest.raises(ValueError):
        parse_tags({"items": ["Boxing"]})


def test_tag_effect_values_must_be_finite_numbers():
    tags = parse_tags({"items": {"t": {"name": "T", "effects": [
        {"kind": "stat", "target": "attributes.body", "value": "two"},
    ]}}})
    assert tags[0].effects[0].value is None
    assert not tags[0].effects[0].is_stat_add


# --- Directory loading ---

def test_load_catalog_from_directory(tmp_path):
    _write(tmp_path, "tags.json", {"items": {"boxing": {"name": "Boxing"}}})
    _write(tmp_path, "arms.json", {"system": "Arms", "slots": 2, "mods": [{"id": "gorilla"}]})
    _write(tmp_path, "operating_system.json", {"system": "Operating System", "mods": []})
    catalog = load_catalog(tmp_path)
    assert set(catalog.systems) == {"arms", "operating_system"}
    assert catalog.tag("Boxing") is not None
    assert catalog.lookup_mod("Arms", "gorilla") is not None


def test_load_catalog_skips_unrelated_files(tmp_path, caplog):
    _write(tmp_path, "notes.json", {"hello": "world"})
    with caplog.at_level(logging.WARNING):
        catalog = load_catalog(tmp_path)
    assert catalog.systems == {}
    assert "not a system or tag file" in caplog.text


def test_load_catalog_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_catalog(tmp_path / "nope")


def test_load_catalog_bad_system_file_raises(tmp_path):
    _write(tmp_path, "arms.json", {"system": 7})
    with pytest.raises(ValueError):
        load_catalog(tmp_path)


# --- Sample catalog ---

def test_sample_catalog_loads():
    catalog = load_catalog(SAMPLE_CATALOG)
    assert {"arms", "hands", "nervous_system", "operating_system"} <= set(catalog.systems)
    assert catalog.tag("Boxing") is not None
    berserk = catalog.lookup_mod("Operating System", "Berserk")
    assert berserk is not None
    assert "3" in berserk.tiers


def test_default_installation_state():
    state = load_catalog(SAMPLE_CATALOG).default_cyber_mods_state()
    assert len(state["Hands"].slots) == 2
    assert len(state["Arms"].slots) == 2
    assert all(slot == EMPTY_SLOT for slot in state["Arms"].slots)
    assert state["Operating System"].tier == ""
    assert state["Arms"].tier is None
