"""Tests for the actor modifier accessor and ownership helpers."""

from types import SimpleNamespace

import pytest

from rollcall.core.actors import (
    ActorRecord,
    categorize_by_ownership,
    default_ability_for,
    is_player_owned,
    modifier_for,
    player_owner,
)
from rollcall.enums import RollCategory


@pytest.fixture
def tinkerer():
    return ActorRecord(
        id="t",
        name="Tess",
        abilities={"int": {"value": 16, "mod": 3, "save": 5}},
        skills={"arc": {"mod": 3}},
        tools={"thief": {"total": 7, "ability": "dex"}, "herb": {"mod": 2}},
        items=[
            {"type": "tool", "name": "Smith's Tools", "base_item": "smith", "bonus": 4, "ability": "str"},
            {"type": "weapon", "name": "Dagger", "base_item": "dagger", "bonus": 9},
        ],
    )


# ---------------------------------------------------------------------------
# Tests: modifier_for
# ---------------------------------------------------------------------------

class TestSkillModifier:
    def test_total_preferred(self, aria):
        assert modifier_for(aria, RollCategory.SKILL, "ste") == 5

    def test_raw_mod_when_no_total(self, tinkerer):
        assert modifier_for(tinkerer, "skill", "arc") == 3

    def test_missing_skill_is_zero(self, tinkerer):
        assert modifier_for(tinkerer, "skill", "ath") == 0


class TestSaveAndAbility:
    def test_save_bonus(self, tinkerer):
        assert modifier_for(tinkerer, "save", "int") == 5

    def test_ability_mod(self, tinkerer):
        assert modifier_for(tinkerer, RollCategory.ABILITY_CHECK, "int") == 3

    def test_missing_ability_is_zero(self, tinkerer):
        assert modifier_for(tinkerer, "save", "wis") == 0
        assert modifier_for(tinkerer, "ability", "cha") == 0

    def test_concentration_uses_con_save(self, aria):
        assert modifier_for(aria, "concentration", None) == 1


class TestToolModifier:
    def test_tracked_tool_total(self, tinkerer):
        assert modifier_for(tinkerer, "tool", "thief") == 7

    def test_tracked_tool_mod(self, tinkerer):
        assert modifier_for(tinkerer, "tool", "herb") == 2

    def test_falls_back_to_owned_item(self, tinkerer):
        assert modifier_for(tinkerer, "tool", "smith") == 4

    def test_non_tool_items_ignored(self, tinkerer):
        assert modifier_for(tinkerer, "tool", "dagger") == 0

    def test_unknown_tool_is_zero(self, tinkerer):
        assert modifier_for(tinkerer, "tool", "lute") == 0


class TestDegradation:
    def test_unknown_category(self, aria):
        assert modifier_for(aria, "juggling", "ste") == 0

    def test_none_actor(self):
        assert modifier_for(None, "skill", "ste") == 0

    def test_plain_mapping_actor(self):
        actor = {"id": "m", "skills": {"prc": {"total": "6"}}}
        assert modifier_for(actor, "skill", "prc") == 6

    def test_host_object_with_system_section(self):
        actor = SimpleNamespace(
            id="h",
            system={"abilities": {"wis": {"mod": 2, "save": {"value": 4}}}},
        )
        assert modifier_for(actor, "save", "wis") == 4
        assert modifier_for(actor, "ability", "wis") == 2

    def test_garbage_values_are_zero(self):
        actor = {"id": "g", "skills": {"ste": {"total": "lots"}}}
        assert modifier_for(actor, "skill", "ste") == 0

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan"), "Infinity", "nan"])
    def test_non_finite_values_are_zero(self, value):
        actor = {"id": "g", "skills": {"ste": {"total": value}}, "abilities": {"dex": {"save": value}}}
        assert modifier_for(actor, "skill", "ste") == 0
        assert modifier_for(actor, "save", "dex") == 0


# ---------------------------------------------------------------------------
# Tests: default ability
# ---------------------------------------------------------------------------

class TestDefaultAbility:
    def test_actor_skill_entry(self, aria):
        assert default_ability_for(aria, "skill", "ste") == "dex"

    def test_standard_skill_table(self, tinkerer):
        assert default_ability_for(tinkerer, "skill", "ath") == "str"

    def test_unknown_skill_falls_back_to_int(self, tinkerer):
        assert default_ability_for(tinkerer, "skill", "xyz") == "int"

    def test_tool_entry_then_item(self, tinkerer):
        assert default_ability_for(tinkerer, "tool", "thief") == "dex"
        assert default_ability_for(tinkerer, "tool", "smith") == "str"
        assert default_ability_for(tinkerer, "tool", "lute") == "int"

    def test_not_applicable(self, aria):
        assert default_ability_for(aria, "save", "dex") is None


# ---------------------------------------------------------------------------
# Tests: ownership
# ---------------------------------------------------------------------------

class TestOwnership:
    def test_player_owned(self, aria):
        assert is_player_owned(aria) is True
        assert player_owner(aria) == "player1"

    def test_gm_ownership_does_not_count(self):
        actor = ActorRecord(id="x", ownership={"gm": 3, "default": 3})
        assert is_player_owned(actor, gm_user_ids=["gm"]) is False

    def test_observer_level_is_not_owner(self):
        actor = ActorRecord(id="x", ownership={"player1": 2})
        assert is_player_owned(actor) is False

    def test_non_character_types_excluded(self):
        actor = ActorRecord(id="v", type="vehicle", ownership={"player1": 3})
        assert is_player_owned(actor) is False

    def test_categorize(self, party):
        pcs, npcs = categorize_by_ownership(party)
        assert [(a.id, owner) for a, owner in pcs] == [("a", "player1"), ("b", "player2")]
        assert [a.id for a in npcs] == ["c"]
