"""
Request Config Builder.

Turns a validated RollRequest into the RollExecutionConfig handed to the
roll evaluator. The builder assumes validation already happened; it
never sees an empty actor list.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional

from .models import SITUATIONAL_TERM, RollExecutionConfig, RollRequest, RollSpec

logger = logging.getLogger(__name__)


def normalize_roll_spec(raw: RollSpec | Mapping | None) -> RollSpec:
    """Coerce a roll spec so parts, data and options are always present."""
    if raw is None:
        return RollSpec()
    if isinstance(raw, RollSpec):
        return raw
    return RollSpec.model_validate(dict(raw))


def add_situational_bonus(spec: RollSpec, situational: Optional[str]) -> RollSpec:
    """Attach a situational formula to a roll spec.

    The symbolic term goes into the formula parts once; calling this again
    on the result only refreshes the stored formula.
    """
    if not situational:
        return spec

    parts = spec.formula_parts
    if SITUATIONAL_TERM not in parts:
        parts = (*parts, SITUATIONAL_TERM)

    return spec.model_copy(update={
        "formula_parts": parts,
        "data": {**spec.data, "situational": situational},
    })


def remove_situational_bonus(spec: RollSpec) -> RollSpec:
    """Strip the situational term and formula, e.g. after the user cleared the field."""
    if SITUATIONAL_TERM not in spec.formula_parts and "situational" not in spec.data:
        return spec
    return spec.model_copy(update={
        "formula_parts": tuple(p for p in spec.formula_parts if p != SITUATIONAL_TERM),
        "data": {k: v for k, v in spec.data.items() if k != "situational"},
    })


def roll_flags(requested_by: Optional[str], is_moderator: bool) -> Dict[str, Any]:
    """Markers that keep a generated roll from being intercepted as a new request."""
    return {
        "is_roll_request": not is_moderator,
        "show_requested_by": True,
        "requested_by": requested_by or "GM",
        "processed": True,
    }


def build_execution_config(
    request: RollRequest,
    roll_spec: RollSpec | Mapping | None = None,
    *,
    is_moderator: bool = True,
    **additional: Any,
) -> RollExecutionConfig:
    """Build the execution config for a validated request.

    Args:
        request: The validated moderator request
        roll_spec: Per-roll formula parts, data and options
        is_moderator: Whether the acting party is the moderator
        **additional: Extra top-level fields (subject, roll_mode, ability...)

    Returns:
        Frozen RollExecutionConfig
    """
    spec = normalize_roll_spec(roll_spec)

    situational = request.situational_formula or spec.data.get("situational") or ""
    spec = add_situational_bonus(spec, situational)

    fields: Dict[str, Any] = {
        "rolls": (spec,),
        "advantage": request.advantage_hint,
        "disadvantage": request.disadvantage_hint,
        "target": request.target_difficulty,
        "subject": None,
        "chat_message": True,
        "situational": bool(situational),
        "roll_type": request.category,
        "roll_key": request.key,
    }
    fields.update(additional)
    fields.update(roll_flags(request.requester_label, is_moderator))

    logger.debug(
        f"Built config for {request.category}/{request.key}: "
        f"parts={list(spec.formula_parts)} target={fields['target']}"
    )
    return RollExecutionConfig(**fields)
