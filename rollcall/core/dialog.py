"""
Interactive config hand-off.

The dialog that lets the moderator adjust a roll is an outside
collaborator. The core gives it a DialogSeed and a DialogSession, then
waits for the session to settle exactly once with a DialogOutcome.
Cancellation is just another outcome (cancelled=True), never an
exception.

Usage:
    seed = build_seed(request, base_config, settings)
    outcome = await run_interactive_config(dialog, seed)
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, FrozenSet, Iterable, List, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field

from ..enums import DialogVariant, RollCategory
from ..settings.models import RollSettings
from .actors import actor_name, default_ability_for, is_player_owned
from .errors import DialogSettlementError
from .models import DialogOutcome, RollExecutionConfig, RollRequest
from .roll_mode import resolve_roll_mode
from .validation import supports_dc

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Seed
# ---------------------------------------------------------------------------

# Form fields each dialog variant shows. Everything else about the
# variants is shared, so they differ only by this table.
VARIANT_FIELDS: dict[DialogVariant, FrozenSet[str]] = {
    DialogVariant.ATTACK: frozenset({"advantage", "situational", "roll_mode", "send_request"}),
    DialogVariant.DAMAGE: frozenset({"situational", "roll_mode", "send_request"}),
    DialogVariant.HIT_DIE: frozenset({"situational", "roll_mode", "send_request"}),
    DialogVariant.SKILL_TOOL: frozenset({"advantage", "situational", "roll_mode", "send_request", "dc", "ability"}),
    DialogVariant.GENERIC: frozenset({"advantage", "situational", "roll_mode", "send_request", "dc"}),
}

_CATEGORY_VARIANTS = {
    RollCategory.ATTACK: DialogVariant.ATTACK,
    RollCategory.DAMAGE: DialogVariant.DAMAGE,
    RollCategory.HIT_DIE: DialogVariant.HIT_DIE,
    RollCategory.SKILL: DialogVariant.SKILL_TOOL,
    RollCategory.TOOL: DialogVariant.SKILL_TOOL,
}


def variant_for(category: Any) -> DialogVariant:
    return _CATEGORY_VARIANTS.get(RollCategory.parse(category), DialogVariant.GENERIC)


class RollConfigState(BaseModel):
    """Moderator-side state shared by every dialog variant."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    actors: List[Any] = Field(default_factory=list)
    send_request: bool = True
    show_dc: bool = False
    dc_value: Optional[int] = None


class DialogSeed(BaseModel):
    """Everything the dialog needs to render its first frame."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    variant: DialogVariant
    category: RollCategory
    roll_key: Optional[str] = None
    config: RollExecutionConfig
    state: RollConfigState
    subtitle: str = ""
    choose_ability: bool = False
    default_ability: Optional[str] = None

    @property
    def fields(self) -> FrozenSet[str]:
        return VARIANT_FIELDS[self.variant]

    def exposes(self, field: str) -> bool:
        return field in self.fields


def _subtitle(actors: List[Any]) -> str:
    if len(actors) == 1:
        return actor_name(actors[0])
    if len(actors) > 1:
        return f"{len(actors)} actors"
    return ""


def build_seed(
    request: RollRequest,
    base_config: RollExecutionConfig,
    settings: RollSettings,
    gm_user_ids: Iterable[str] = (),
) -> DialogSeed:
    """Build the dialog seed for a validated request."""
    gm_ids = list(gm_user_ids)
    actors = list(request.actors)
    variant = variant_for(request.category)
    show_dc = supports_dc(request.category) and "dc" in VARIANT_FIELDS[variant]

    roll_mode = resolve_roll_mode(settings.public_rolls_enabled, None, settings.default_roll_mode)
    config = base_config.model_copy(update={"roll_mode": roll_mode})

    default_ability = None
    if variant == DialogVariant.SKILL_TOOL and actors:
        default_ability = default_ability_for(actors[0], request.category, request.key)

    return DialogSeed(
        variant=variant,
        category=request.category,
        roll_key=request.key,
        config=config,
        state=RollConfigState(
            actors=actors,
            send_request=any(is_player_owned(a, gm_ids) for a in actors),
            show_dc=show_dc,
            dc_value=request.target_difficulty,
        ),
        subtitle=_subtitle(actors),
        choose_ability=variant == DialogVariant.SKILL_TOOL,
        default_ability=default_ability,
    )


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

class DialogSession:
    """Single-settlement channel between the core and a dialog.

    Must be created inside a running event loop. The first submit() or
    cancel() wins; anything after that is ignored.
    """

    def __init__(self):
        self._future: asyncio.Future[DialogOutcome] = asyncio.get_running_loop().create_future()

    @property
    def settled(self) -> bool:
        return self._future.done()

    def submit(self, outcome: DialogOutcome) -> bool:
        """Settle with the user's decision. Returns False if already settled."""
        if self._future.done():
            logger.debug("Dialog already settled; ignoring late result")
            return False
        self._future.set_result(outcome)
        return True

    def cancel(self) -> bool:
        """Settle as dismissed."""
        return self.submit(DialogOutcome.cancellation())

    def result(self) -> DialogOutcome:
        if not self._future.done():
            raise DialogSettlementError("dialog has not settled yet")
        return self._future.result()

    async def wait(self) -> DialogOutcome:
        return await self._future


class DialogCollaborator(Protocol):
    """The interactive dialog.

    open() renders the dialog for `seed` and arranges for `session` to be
    settled once the user submits or closes it. It may return before that
    happens, or be a coroutine that finishes after settling.
    """

    def open(self, seed: DialogSeed, session: DialogSession) -> Optional[Awaitable[None]]:
        ...


class CallableDialog:
    """Adapts `async def fn(seed) -> DialogOutcome | None` to DialogCollaborator."""

    def __init__(self, fn: Callable[[DialogSeed], Awaitable[Optional[DialogOutcome]]]):
        self._fn = fn

    async def open(self, seed: DialogSeed, session: DialogSession) -> None:
        outcome = await self._fn(seed)
        if outcome is None:
            session.cancel()
        else:
            session.submit(outcome)


async def run_interactive_config(
    collaborator: DialogCollaborator,
    seed: DialogSeed,
) -> DialogOutcome:
    """Hand the seed to the dialog and wait for its single settlement.

    The dialog gets its own copy of the config, so nothing it does can
    reach the caller's objects; only the returned outcome counts. A
    dialog that raises is treated as dismissed.
    """
    handoff = seed.model_copy(update={"config": seed.config.model_copy(deep=True)})
    session = DialogSession()

    try:
        opened = collaborator.open(handoff, session)
        if inspect.isawaitable(opened):
            await opened
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.error(f"Roll dialog failed for {seed.category}/{seed.roll_key}: {e}")
        session.cancel()

    outcome = await session.wait()
    if outcome.cancelled:
        logger.debug(f"Roll dialog dismissed for {seed.category}/{seed.roll_key}")
    return outcome
