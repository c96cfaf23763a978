"""
Canonical enumerations for Rollcall.

StrEnum values serialize as plain strings, so they drop straight into
JSON payloads and host-side roll configuration without conversion.
ConsensusMethod is an IntEnum because the host stores the selected
group rule as an integer setting.
"""

from enum import IntEnum, StrEnum
from typing import Optional


# ── Roll Categories ────────────────────────────────────────────────────

class RollCategory(StrEnum):
    """What kind of roll a moderator is requesting."""
    ABILITY_CHECK = "ability-check"
    SAVING_THROW = "saving-throw"
    SKILL = "skill"
    TOOL = "tool"
    ATTACK = "attack"
    DAMAGE = "damage"
    HIT_DIE = "hit-die"
    INITIATIVE = "initiative"
    CUSTOM = "custom"
    CONCENTRATION = "concentration"
    DEATH_SAVE = "death-save"

    @classmethod
    def parse(cls, raw: object) -> Optional["RollCategory"]:
        """Resolve a host roll-type string (any casing, any alias) to a category."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        return _CATEGORY_ALIASES.get(raw.strip().lower())


_CATEGORY_ALIASES: dict[str, RollCategory] = {
    "ability": RollCategory.ABILITY_CHECK,
    "abilitycheck": RollCategory.ABILITY_CHECK,
    "ability-check": RollCategory.ABILITY_CHECK,
    "save": RollCategory.SAVING_THROW,
    "savingthrow": RollCategory.SAVING_THROW,
    "saving-throw": RollCategory.SAVING_THROW,
    "skill": RollCategory.SKILL,
    "tool": RollCategory.TOOL,
    "attack": RollCategory.ATTACK,
    "damage": RollCategory.DAMAGE,
    "hitdie": RollCategory.HIT_DIE,
    "hit-die": RollCategory.HIT_DIE,
    "initiative": RollCategory.INITIATIVE,
    "initiativedialog": RollCategory.INITIATIVE,
    "custom": RollCategory.CUSTOM,
    "formula": RollCategory.CUSTOM,
    "concentration": RollCategory.CONCENTRATION,
    "deathsave": RollCategory.DEATH_SAVE,
    "death-save": RollCategory.DEATH_SAVE,
}


# ── Visibility ─────────────────────────────────────────────────────────

class RollMode(StrEnum):
    """Who gets to see a roll's result."""
    PUBLIC = "public"
    PRIVATE = "private"    # GM-only
    BLIND = "blind"
    SELF = "self"


class AdvantageMode(StrEnum):
    """Tri-state advantage selector as reported by the dialog."""
    NORMAL = "normal"
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"


# ── Dialog Variants ────────────────────────────────────────────────────

class DialogVariant(StrEnum):
    """Presentation variant of the roll configuration dialog."""
    ATTACK = "attack"
    DAMAGE = "damage"
    HIT_DIE = "hit_die"
    SKILL_TOOL = "skill_tool"
    GENERIC = "generic"


# ── Group Resolution ───────────────────────────────────────────────────

class ConsensusMethod(IntEnum):
    """Group check rule, numbered the way the host setting stores it."""
    STANDARD = 1
    GROUP_AVERAGE = 2
    LEADER_WITH_HELP = 3
    WEAKEST_LINK = 4

    @property
    def label(self) -> str:
        return _METHOD_LABELS[self]


_METHOD_LABELS = {
    ConsensusMethod.STANDARD: "Standard Rule",
    ConsensusMethod.GROUP_AVERAGE: "Group Average",
    ConsensusMethod.LEADER_WITH_HELP: "Leader with Help",
    ConsensusMethod.WEAKEST_LINK: "Weakest Link",
}
