"""
Group Consensus Calculator.

Collapses the individual totals of a group check into one verdict under
one of four rules:

- Standard Rule: at least half the group (rounded up) meets the DC.
- Group Average: the floored mean total meets the DC.
- Leader with Help: the actor with the best modifier rolls for the group;
  every other success adds 1, every other failure subtracts 1.
- Weakest Link: the actor with the worst modifier rolls for the group;
  every other success adds 1.

Everything here is stateless: the same inputs always give the same
outcome. Leader and weakest actor are picked by modifier, never by roll
total, and ties go to the first actor in input order.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from ..enums import ConsensusMethod
from .actors import actor_id, actor_name, modifier_for
from .models import GroupConsensusOutcome, RollResultEntry

logger = logging.getLogger(__name__)


def _coerce_results(roll_results: Sequence[Any]) -> List[RollResultEntry]:
    entries = []
    for raw in roll_results or []:
        if isinstance(raw, RollResultEntry):
            entries.append(raw)
        elif isinstance(raw, Mapping):
            entries.append(RollResultEntry.model_validate({
                "actorId": raw.get("actorId", raw.get("actor_id")),
                "total": raw.get("total"),
            }))
        else:
            entries.append(RollResultEntry(actorId=str(getattr(raw, "actor_id")), total=getattr(raw, "total", None)))
    return entries


def _whole_number(value: Any) -> Optional[int]:
    """An int, an integral float, or a string of digits; anything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def resolve_method(method: Any) -> Tuple[ConsensusMethod, bool]:
    """Map a setting value to a method; unknown values become Standard Rule.

    Returns (method, fell_back).
    """
    if isinstance(method, ConsensusMethod):
        return method, False
    number = _whole_number(method)
    if number is not None:
        try:
            return ConsensusMethod(number), False
        except ValueError:
            pass
    logger.warning(f"Unknown group roll method {method!r}; using {ConsensusMethod.STANDARD.label}")
    return ConsensusMethod.STANDARD, True


def _meets(total: int, dc: int) -> bool:
    return total >= dc


# ---------------------------------------------------------------------------
# Methods
# ---------------------------------------------------------------------------

def standard_rule(results: List[RollResultEntry], dc: int) -> GroupConsensusOutcome:
    """Half the group, rounded up, must succeed."""
    n = len(results)
    successes = sum(1 for r in results if _meets(r.total, dc))
    threshold = math.ceil(n / 2)
    success = successes >= threshold
    return GroupConsensusOutcome(
        complete=True,
        success=success,
        result=1 if success else 0,
        details={
            "method": ConsensusMethod.STANDARD.label,
            "successes": successes,
            "total": n,
            "threshold": threshold,
            "dc": dc,
            "summary": f"{successes} of {n} succeeded (needed {threshold}) against DC {dc}",
        },
    )


def group_average(results: List[RollResultEntry], dc: int) -> GroupConsensusOutcome:
    """The floored average total is checked against the DC."""
    n = len(results)
    total_sum = sum(r.total for r in results)
    average = total_sum // n
    success = average >= dc
    return GroupConsensusOutcome(
        complete=True,
        success=success,
        result=average,
        details={
            "method": ConsensusMethod.GROUP_AVERAGE.label,
            "average": average,
            "sum": total_sum,
            "total": n,
            "dc": dc,
            "summary": f"Group average {average} against DC {dc}",
        },
    )


def _pick_by_modifier(
    actors: Sequence[Any],
    category: Any,
    key: Optional[str],
    highest: bool,
) -> Optional[Any]:
    """Actor with the strictly best (or worst) modifier; first one wins ties."""
    chosen = None
    chosen_mod = None
    for actor in actors:
        mod = modifier_for(actor, category, key)
        if chosen is None or (mod > chosen_mod if highest else mod < chosen_mod):
            chosen, chosen_mod = actor, mod
    return chosen


def _find_entry(results: List[RollResultEntry], ident: Optional[str]) -> Optional[RollResultEntry]:
    if ident is None:
        return None
    for entry in results:
        if entry.actor_id == ident:
            return entry
    return None


def _error(method: ConsensusMethod, reason: str) -> GroupConsensusOutcome:
    logger.warning(f"{method.label} could not be resolved: {reason}")
    return GroupConsensusOutcome(
        complete=True,
        success=False,
        result=0,
        details={"method": method.label, "error": reason},
    )


def leader_with_help(
    results: List[RollResultEntry],
    dc: int,
    actors: Sequence[Any],
    category: Any,
    key: Optional[str],
) -> GroupConsensusOutcome:
    """The best-modifier actor rolls; the others help or hinder by 1 each."""
    method = ConsensusMethod.LEADER_WITH_HELP
    leader = _pick_by_modifier(actors, category, key, highest=True)
    if leader is None:
        return _error(method, "no actors to pick a leader from")

    leader_id = actor_id(leader)
    leader_entry = _find_entry(results, leader_id)
    if leader_entry is None:
        return _error(method, f"leader {leader_id} has no roll result")

    others = [r for r in results if r.actor_id != leader_id]
    bonus = sum(1 for r in others if _meets(r.total, dc))
    penalty = len(others) - bonus
    adjusted = leader_entry.total + bonus - penalty
    success = adjusted >= dc

    name = actor_name(leader)
    return GroupConsensusOutcome(
        complete=True,
        success=success,
        result=adjusted,
        details={
            "method": method.label,
            "leader": leader_id,
            "leaderName": name,
            "leaderRoll": leader_entry.total,
            "bonus": bonus,
            "penalty": penalty,
            "adjustedResult": adjusted,
            "dc": dc,
            "summary": (
                f"{name or leader_id} leads with {leader_entry.total} "
                f"(+{bonus} help, -{penalty} hindrance) = {adjusted} against DC {dc}"
            ),
        },
    )


def weakest_link(
    results: List[RollResultEntry],
    dc: int,
    actors: Sequence[Any],
    category: Any,
    key: Optional[str],
) -> GroupConsensusOutcome:
    """The worst-modifier actor rolls; every other success adds 1."""
    method = ConsensusMethod.WEAKEST_LINK
    weakest = _pick_by_modifier(actors, category, key, highest=False)
    if weakest is None:
        return _error(method, "no actors to pick the weakest link from")

    weakest_id = actor_id(weakest)
    weakest_entry = _find_entry(results, weakest_id)
    if weakest_entry is None:
        return _error(method, f"weakest actor {weakest_id} has no roll result")

    bonus = sum(1 for r in results if r.actor_id != weakest_id and _meets(r.total, dc))
    adjusted = weakest_entry.total + bonus
    success = adjusted >= dc

    name = actor_name(weakest)
    return GroupConsensusOutcome(
        complete=True,
        success=success,
        result=adjusted,
        details={
            "method": method.label,
            "weakest": weakest_id,
            "weakestName": name,
            "weakestRoll": weakest_entry.total,
            "bonus": bonus,
            "adjustedResult": adjusted,
            "dc": dc,
            "summary": (
                f"{name or weakest_id} rolls {weakest_entry.total} "
                f"(+{bonus} help) = {adjusted} against DC {dc}"
            ),
        },
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def is_complete(results: Sequence[RollResultEntry]) -> bool:
    return bool(results) and all(r.total is not None for r in results)


def evaluate(
    roll_results: Sequence[Any],
    target_difficulty: int,
    actors: Sequence[Any] = (),
    category: Any = None,
    key: Optional[str] = None,
    method: Any = ConsensusMethod.STANDARD,
) -> GroupConsensusOutcome:
    """Resolve a group check.

    Args:
        roll_results: One {actorId, total} per actor; total None = not rolled yet
        target_difficulty: The DC
        actors: Actor records, in request order (Leader/Weakest Link only)
        category: Roll category used for modifier lookups
        key: Ability/skill/tool key used for modifier lookups
        method: ConsensusMethod or its integer setting value

    Returns:
        An incomplete outcome while any total is missing, else the verdict.
    """
    try:
        results = _coerce_results(roll_results)
    except (ValidationError, AttributeError) as e:
        logger.warning(f"Malformed group roll results: {e}")
        return GroupConsensusOutcome(complete=False, details={"error": "malformed roll results"})

    if not is_complete(results):
        return GroupConsensusOutcome.incomplete()

    resolved, fell_back = resolve_method(method)
    dc = _whole_number(target_difficulty)
    if dc is None:
        return _error(resolved, f"invalid target difficulty {target_difficulty!r}")

    if resolved == ConsensusMethod.GROUP_AVERAGE:
        outcome = group_average(results, dc)
    elif resolved == ConsensusMethod.LEADER_WITH_HELP:
        outcome = leader_with_help(results, dc, actors, category, key)
    elif resolved == ConsensusMethod.WEAKEST_LINK:
        outcome = weakest_link(results, dc, actors, category, key)
    else:
        outcome = standard_rule(results, dc)

    if fell_back:
        details: Dict[str, Any] = {**outcome.details, "fallback": True, "requestedMethod": method}
        outcome = outcome.model_copy(update={"details": details})

    logger.info(
        f"Group roll ({resolved.label}) vs DC {dc}: "
        f"{'success' if outcome.success else 'failure'}, result {outcome.result}"
    )
    return outcome
