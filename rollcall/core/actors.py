"""
Actor records and the modifier accessor.

The core only ever reads actors through the functions here. Actors can
be ActorRecord instances, plain mappings shaped like one, or host
objects exposing the same names as attributes (optionally nested under
`system`, the way host actor documents keep their game data).
"""

import logging
import math
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, Field

from ..enums import RollCategory

logger = logging.getLogger(__name__)


OWNER_LEVEL = 3

# Default governing ability for each standard skill.
SKILL_DEFAULT_ABILITIES: Dict[str, str] = {
    "acr": "dex", "ani": "wis", "arc": "int", "ath": "str",
    "dec": "cha", "his": "int", "ins": "wis", "itm": "cha",
    "inv": "int", "med": "wis", "nat": "int", "prc": "wis",
    "prf": "cha", "per": "cha", "rel": "int", "slt": "dex",
    "ste": "dex", "sur": "wis",
}
FALLBACK_ABILITY = "int"


class AbilityScore(BaseModel):
    value: int = 10
    mod: int = 0
    save: Optional[int] = None


class ProficiencyEntry(BaseModel):
    """A skill or tool entry: computed total, raw modifier, governing ability."""
    total: Optional[int] = None
    mod: Optional[int] = None
    ability: Optional[str] = None


class ItemEntry(BaseModel):
    type: str = "loot"
    name: str = ""
    base_item: Optional[str] = None
    bonus: Optional[int] = None
    ability: Optional[str] = None


class ActorRecord(BaseModel):
    """Reference shape of an actor as the core sees it."""
    id: str
    name: str = ""
    type: str = "character"
    ownership: Dict[str, int] = Field(default_factory=dict)
    abilities: Dict[str, AbilityScore] = Field(default_factory=dict)
    skills: Dict[str, ProficiencyEntry] = Field(default_factory=dict)
    tools: Dict[str, ProficiencyEntry] = Field(default_factory=dict)
    items: List[ItemEntry] = Field(default_factory=list)
    initiative: Optional[int] = None


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------

def _get(obj: Any, name: str, default: Any = None) -> Any:
    """Read `name` from a mapping or an object, None-safe."""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _section(actor: Any, name: str) -> Any:
    """Read a data section directly on the actor or under actor.system."""
    value = _get(actor, name)
    if value is None:
        value = _get(_get(actor, "system"), name)
    return value


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Mapping):
        # Newer host data nests numbers as {"value": n}
        value = value.get("value")
        if value is None:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number)


def actor_id(actor: Any) -> Optional[str]:
    value = _get(actor, "id")
    if value is None:
        value = _get(actor, "_id")
    return str(value) if value is not None else None


def actor_name(actor: Any) -> str:
    return str(_get(actor, "name", "") or "")


def _find_tool_item(actor: Any, key: str) -> Any:
    items = _get(actor, "items") or []
    wanted = key.lower()
    for item in items:
        if _get(item, "type") != "tool":
            continue
        base = (
            _get(item, "base_item")
            or _get(item, "baseItem")
            or _get(_get(_get(item, "system"), "type"), "baseItem")
        )
        name = str(_get(item, "name", "") or "")
        if (isinstance(base, str) and base.lower() == wanted) or name.lower() == wanted:
            return item
    return None


# ---------------------------------------------------------------------------
# Modifier accessor
# ---------------------------------------------------------------------------

def modifier_for(actor: Any, category: Any, key: Optional[str]) -> int:
    """Return the bonus an actor brings to a roll of `category`/`key`.

    Absent data degrades to 0; this never raises.
    """
    category = RollCategory.parse(category)
    if category is None or actor is None:
        return 0

    if category == RollCategory.SKILL:
        entry = _get(_section(actor, "skills"), key) if key else None
        total = _as_int(_get(entry, "total"))
        if total is not None:
            return total
        return _as_int(_get(entry, "mod")) or 0

    if category in (RollCategory.SAVING_THROW, RollCategory.CONCENTRATION):
        ability_key = "con" if category == RollCategory.CONCENTRATION else key
        ability = _get(_section(actor, "abilities"), ability_key) if ability_key else None
        return _as_int(_get(ability, "save")) or 0

    if category == RollCategory.ABILITY_CHECK:
        ability = _get(_section(actor, "abilities"), key) if key else None
        return _as_int(_get(ability, "mod")) or 0

    if category == RollCategory.TOOL:
        if not key:
            return 0
        entry = _get(_section(actor, "tools"), key)
        if entry is not None:
            total = _as_int(_get(entry, "total"))
            if total is not None:
                return total
            mod = _as_int(_get(entry, "mod"))
            if mod is not None:
                return mod
        item = _find_tool_item(actor, key)
        if item is not None:
            return _as_int(_get(item, "bonus")) or 0
        logger.debug(f"No tool '{key}' on actor {actor_id(actor)}")
        return 0

    if category == RollCategory.INITIATIVE:
        initiative = _as_int(_section(actor, "initiative"))
        if initiative is not None:
            return initiative
        dex = _get(_section(actor, "abilities"), "dex")
        return _as_int(_get(dex, "mod")) or 0

    return 0


def default_ability_for(actor: Any, category: Any, key: Optional[str]) -> Optional[str]:
    """Governing ability of a skill or tool when the user picks none."""
    category = RollCategory.parse(category)
    if category not in (RollCategory.SKILL, RollCategory.TOOL) or not key:
        return None

    section = "skills" if category == RollCategory.SKILL else "tools"
    ability = _get(_get(_section(actor, section), key), "ability")
    if ability:
        return str(ability)

    if category == RollCategory.SKILL:
        return SKILL_DEFAULT_ABILITIES.get(key, FALLBACK_ABILITY)

    item = _find_tool_item(actor, key)
    return str(_get(item, "ability") or FALLBACK_ABILITY)


# ---------------------------------------------------------------------------
# Ownership
# ---------------------------------------------------------------------------

def player_owner(actor: Any, gm_user_ids: Iterable[str] = ()) -> Optional[str]:
    """First non-moderator user holding OWNER level on the actor."""
    gm_ids = set(gm_user_ids)
    ownership = _get(actor, "ownership") or {}
    for user_id, level in ownership.items():
        if user_id == "default" or user_id in gm_ids:
            continue
        if (_as_int(level) or 0) >= OWNER_LEVEL:
            return user_id
    return None


def is_player_owned(actor: Any, gm_user_ids: Iterable[str] = ()) -> bool:
    """Whether a player (not the moderator) owns this character or NPC."""
    if _get(actor, "type") not in ("character", "npc"):
        return False
    return player_owner(actor, gm_user_ids) is not None


def categorize_by_ownership(
    actors: Iterable[Any],
    gm_user_ids: Iterable[str] = (),
) -> Tuple[List[Tuple[Any, str]], List[Any]]:
    """Split actors into (player-owned, owner id) pairs and moderator-run actors."""
    gm_ids = list(gm_user_ids)
    pc_actors: List[Tuple[Any, str]] = []
    npc_actors: List[Any] = []
    for actor in actors:
        owner = player_owner(actor, gm_ids)
        if owner:
            pc_actors.append((actor, owner))
        else:
            npc_actors.append(actor)
    return pc_actors, npc_actors
