"""Tests for the weapon-type classifier."""

import pytest

from chrome_calc.engine.classifier import classify
from chrome_calc.models.constants import WEAPON_TYPES, AttackCategory, AttackSubtype


C = AttackCategory
S = AttackSubtype


@pytest.mark.parametrize(
    "weapon_type, expected",
    [
        ("Unarmed Melee", (C.MELEE, S.UNARMED)),
        ("Grappling", (C.MELEE, S.UNARMED)),
        ("Kick", (C.MELEE, S.KICK)),
        ("Blunt Weapon Melee", (C.MELEE, S.BLUNT)),
        ("Sharp Weapon Melee", (C.MELEE, S.SHARP)),
        ("bladed", (C.MELEE, S.SHARP)),
        ("Whip", (C.MELEE, S.WHIP)),
        ("Slice", (C.MELEE, S.SLICE)),
        ("Blast", (C.RANGED, S.BLAST)),
        ("Ranged Attack", (C.RANGED, S.RANGED)),
    ],
)
def test_known_weapon_types(weapon_type, expected):
    assert classify(weapon_type) == expected


def test_lookup_ignores_case_and_padding():
    assert classify("  sHaRp WeApOn MeLeE ") == (C.MELEE, S.SHARP)


def test_unknown_type_falls_back_to_ranged():
    assert classify("Orbital Laser") == (C.RANGED, S.RANGED)
    assert classify("") == (C.RANGED, S.RANGED)


def test_missing_type_reads_as_unarmed():
    assert classify(None) == (C.MELEE, S.UNARMED)


def test_non_string_input_does_not_raise():
    assert classify(42) == (C.RANGED, S.RANGED)


def test_every_sheet_weapon_type_is_mapped():
    """Only 'Ranged Attack' and 'Blast' should be ranged among sheet types."""
    ranged = {t for t in WEAPON_TYPES if classify(t)[0] is C.RANGED}
    assert ranged == {"Ranged Attack", "Blast"}
