"""Tests for move notation canonicalization."""

import pytest

from framedata.errors import NotationError
from framedata.normalize.notation import Notation, canonicalize, try_canonicalize


EQUIVALENT = {
    "5lp": ["5LP", "5lp", "neutral lp", "st.LP", "Stand LP", "n.lp", "LP", "jab", "Standing Light Punch"],
    "2mk": ["2MK", "cr.mk", "crouching MK", "d.mk", "c.mk", "Crouching Medium Kick", "↓MK"],
    "236hp": ["236HP", "qcf+hp", "QCFHP", "qcf hp", "↓↘→HP"],
    "623p": ["623P", "dp+p", "→↓↘P"],
    "214k": ["214K", "qcb+k", "qcbk"],
    "j.hp": ["j.HP", "jumping hp", "jump HP", "j.5hp"],
    "j.2mk": ["j.2MK", "j.d.mk", "jumping 2mk"],
    "6hp": ["6HP", "f.hp", "f+hp", "→HP"],
    "3hp": ["3HP", "df.hp", "df+hp"],
    "5lp+5mp": ["MP+LP", "LP+MP", "5LP+5MP", "lp + mp", "5mp+5lp"],
    "41236hp": ["41236HP", "hcf+hp"],
    "[4]6p": ["[4]6P", "[←]→P"],
}

SAMPLES = [
    "5LP", "2MK", "j.HP", "236HP", "MP+LP", "2LP+LK", "214P (Charged)", "[4]6P",
    "236P~6P", "5MP > 236P", "Hadoken (236P)", "jab", "throw", "cr.HK", "hcb+k", "j.2MK",
]


class TestEquivalence:
    @pytest.mark.parametrize(
        "raw, expected",
        [(raw, canonical) for canonical, spellings in EQUIVALENT.items() for raw in spellings],
    )
    def test_spellings_share_one_canonical(self, raw, expected):
        assert canonicalize(raw).canonical == expected

    def test_returns_notation(self):
        assert isinstance(canonicalize("5LP"), Notation)


class TestCompoundInputs:
    def test_button_order_is_normalized(self):
        assert canonicalize("MP+LP").canonical == canonicalize("LP+MP").canonical

    def test_bare_button_inherits_direction(self):
        assert canonicalize("2LP+LK").canonical == "2lk+2lp"

    def test_jump_compound(self):
        assert canonicalize("j.MP+MK").canonical == "j.mk+j.mp"

    def test_follow_up_segments(self):
        assert canonicalize("236P~6P").canonical == "236p~6p"
        assert canonicalize("5MP > 236P").canonical == "5mp>236p"

    @pytest.mark.parametrize("raw, expected", [
        ("throw", "5lk+5lp"),
        ("LP+LK", "5lk+5lp"),
        ("Back Throw", "4lk+4lp"),
        ("Drive Parry", "5mk+5mp"),
        ("Drive Impact", "5hk+5hp"),
    ])
    def test_system_mechanics(self, raw, expected):
        assert canonicalize(raw).canonical == expected


class TestQualifiers:
    def test_trailing_qualifier_kept(self):
        assert canonicalize("214P (Charged)").canonical == "214p(charged)"
        assert canonicalize("214P(charged)").canonical == "214p(charged)"

    def test_input_inside_prose(self):
        assert canonicalize("Hadoken (236P)").canonical == "236p"

    def test_qualifier_on_first_segment(self):
        assert canonicalize("236K (hold)~K").canonical == "236k(hold)~5k"


class TestAliases:
    def test_original_and_lowercase_kept(self):
        aliases = canonicalize("236HP").aliases
        assert {"236HP", "236hp"} <= aliases

    def test_compass_and_arrow_forms(self):
        assert {"qcfhp", "qcf+hp", "↓↘→hp"} <= canonicalize("236HP").aliases
        assert {"cr.mk", "d.mk", "c.mk"} <= canonicalize("2MK").aliases
        assert {"st.lp", "n.lp", "lp"} <= canonicalize("5LP").aliases
        assert {"f.hp", "f+hp"} <= canonicalize("6HP").aliases

    def test_classic_name_added(self):
        assert "jab" in canonicalize("5LP").aliases
        assert "sweep" in canonicalize("cr.HK").aliases
        assert "throw" in canonicalize("LP+LK").aliases

    @pytest.mark.parametrize("raw", SAMPLES)
    def test_every_alias_resolves_back(self, raw):
        notation = canonicalize(raw)
        for alias in notation.aliases:
            assert canonicalize(alias).canonical == notation.canonical, alias

    def test_keys_are_lowercase(self):
        keys = canonicalize("236HP").keys()
        assert "236hp" in keys
        assert all(k == k.lower() for k in keys)


class TestIdempotence:
    @pytest.mark.parametrize("raw", SAMPLES + [s for spellings in EQUIVALENT.values() for s in spellings])
    def test_canonical_of_canonical(self, raw):
        once = canonicalize(raw).canonical
        assert canonicalize(once).canonical == once

    def test_deterministic(self):
        assert canonicalize("qcf+hp") == canonicalize("qcf+hp")


class TestRejection:
    @pytest.mark.parametrize("raw", [
        "", "   ", "Hadoken", "Drive Rush", "Notes", "Level 3 Critical Art", "Frame data is subject to change",
        "dp",
    ])
    def test_no_input_token_raises(self, raw):
        with pytest.raises(NotationError):
            canonicalize(raw)

    def test_notation_error_is_value_error(self):
        with pytest.raises(ValueError):
            canonicalize("Hadoken")

    def test_try_canonicalize(self):
        assert try_canonicalize("Hadoken") is None
        assert try_canonicalize("5lp").canonical == "5lp"
