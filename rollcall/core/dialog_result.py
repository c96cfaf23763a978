"""
Dialog Result Processor.

Converts what the dialog settled with into the final execution config.
Pure: no I/O, no settings lookups, no dependence on the dialog itself.
"""

import logging
from typing import Any, List, Optional

from ..enums import AdvantageMode, RollCategory
from ..settings.defaults import DEFAULT_SETTINGS
from ..settings.models import RollSettings
from .actors import default_ability_for
from .models import DialogOutcome, FinalizedRoll, RollExecutionConfig, RollRequest, RollSpec
from .request_builder import add_situational_bonus, roll_flags
from .roll_mode import resolve_roll_mode

logger = logging.getLogger(__name__)


# Host dice use -1/0/1 for the advantage selector.
_NUMERIC_ADVANTAGE = {
    1: AdvantageMode.ADVANTAGE,
    0: AdvantageMode.NORMAL,
    -1: AdvantageMode.DISADVANTAGE,
}


def _advantage_mode(roll: FinalizedRoll) -> AdvantageMode:
    if roll.advantage_mode != AdvantageMode.NORMAL:
        return roll.advantage_mode
    raw = roll.options.get("advantageMode")
    if isinstance(raw, int) and not isinstance(raw, bool):
        return _NUMERIC_ADVANTAGE.get(raw, AdvantageMode.NORMAL)
    if isinstance(raw, str):
        try:
            return AdvantageMode(raw)
        except ValueError:
            return AdvantageMode.NORMAL
    return AdvantageMode.NORMAL


def _target(roll: FinalizedRoll) -> Optional[int]:
    raw = roll.options.get("target")
    if raw is None or raw == "" or isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric DC from dialog: {raw!r}")
        return None


def _chosen_ability(
    outcome: DialogOutcome,
    actors: List[Any],
    request: RollRequest,
) -> Optional[str]:
    """The user's ability pick, kept only when it differs from the default."""
    if request.category not in (RollCategory.SKILL, RollCategory.TOOL):
        return None
    if not outcome.chosen_ability:
        return None
    reference = actors[0] if actors else None
    if outcome.chosen_ability == default_ability_for(reference, request.category, request.key):
        return None
    return outcome.chosen_ability


def process_outcome(
    outcome: Optional[DialogOutcome],
    actors: List[Any],
    request: RollRequest,
    settings: RollSettings = DEFAULT_SETTINGS,
) -> Optional[RollExecutionConfig]:
    """Turn a dialog outcome into the final execution config.

    Args:
        outcome: What the dialog settled with
        actors: The validated actor list of the request
        request: The request the dialog was opened for
        settings: Session settings (public rolls flag, default roll mode)

    Returns:
        The execution config, or None when the dialog was cancelled or
        produced no rolls. None means "nothing to do", not an error.
    """
    if outcome is None or outcome.cancelled or not outcome.rolls:
        return None

    first = outcome.rolls[0]
    mode = _advantage_mode(first)
    target = _target(first)
    situational = first.data.get("situational") or first.options.get("situational") or ""

    spec = RollSpec(options={"target": target} if target is not None else {})
    spec = add_situational_bonus(spec, situational)

    roll_mode = resolve_roll_mode(
        settings.public_rolls_enabled,
        outcome.roll_mode,
        settings.default_roll_mode,
    )

    flags = roll_flags(request.requester_label, is_moderator=True)
    flags["is_roll_request"] = outcome.send_request

    config = RollExecutionConfig(
        rolls=(spec,),
        advantage=mode == AdvantageMode.ADVANTAGE,
        disadvantage=mode == AdvantageMode.DISADVANTAGE,
        target=target,
        roll_mode=roll_mode,
        send_request=outcome.send_request,
        chat_message=True,
        situational=bool(situational),
        ability=_chosen_ability(outcome, actors, request),
        roll_type=request.category,
        roll_key=request.key,
        skip_dialog=settings.skip_dialogs,
        **flags,
    )
    logger.debug(
        f"Dialog result for {request.category}/{request.key}: "
        f"mode={mode} target={target} roll_mode={roll_mode} send={outcome.send_request}"
    )
    return config
