"""
Request validation and shared normalization helpers.

Validation happens once, before any configuration is built. A request
that fails here never reaches the builder: the caller gets None and no
partial config exists.
"""

import logging
from typing import Any, Iterable, List, Optional

from ..enums import RollCategory
from .actors import actor_id
from .errors import RequestValidationError
from .models import RollRequest

logger = logging.getLogger(__name__)


_DC_CATEGORIES = frozenset({
    RollCategory.ABILITY_CHECK,
    RollCategory.SAVING_THROW,
    RollCategory.SKILL,
    RollCategory.TOOL,
    RollCategory.CONCENTRATION,
})


def supports_dc(category: Any) -> bool:
    """Whether a roll of this category is checked against a DC."""
    return RollCategory.parse(category) in _DC_CATEGORIES


def normalize_actors(actors: Optional[Iterable[Any]]) -> Optional[List[Any]]:
    """Drop empty and duplicate actor references, keeping input order.

    Returns None when no actor survives.
    """
    if not actors:
        return None

    seen: set[str] = set()
    normalized = []
    for actor in actors:
        if actor is None:
            continue
        ident = actor_id(actor)
        if ident is None and isinstance(actor, str):
            ident = actor
        if ident is not None:
            if ident in seen:
                continue
            seen.add(ident)
        normalized.append(actor)

    return normalized or None


def check_request(request: RollRequest) -> RollRequest:
    """Validate a request, raising RequestValidationError on failure.

    Returns a copy whose actor list is normalized.
    """
    actors = normalize_actors(request.actors)
    if not actors:
        raise RequestValidationError("no actors to roll for")
    if request.advantage_hint and request.disadvantage_hint:
        raise RequestValidationError("advantage and disadvantage both requested")
    return request.model_copy(update={"actors": actors})


def validate_request(request: Optional[RollRequest]) -> Optional[RollRequest]:
    """Validate a request; None means the operation must abort with no effect."""
    if request is None:
        return None
    try:
        return check_request(request)
    except RequestValidationError as e:
        logger.warning(f"Roll request rejected ({request.category}/{request.key}): {e.reason}")
        return None
