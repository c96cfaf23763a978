"""Roll request orchestration.

Wires the pieces of a roll request together:

    validate_request       – reject empty actor lists and conflicting modes
    build_execution_config – the moderator's base config
    run_interactive_config – hand-off to the dialog, single settlement
    process_outcome        – the dialog's answer as the final config

and exposes group resolution with the session's configured rule.
"""

import logging
from typing import Any, Iterable, Optional, Sequence

from ..settings.models import RollSettings
from .dialog import DialogCollaborator, build_seed, run_interactive_config
from .dialog_result import process_outcome
from .group_consensus import evaluate
from .models import GroupConsensusOutcome, RollExecutionConfig, RollRequest, RollSpec
from .request_builder import build_execution_config
from .roll_mode import resolve_roll_mode
from .validation import validate_request

logger = logging.getLogger(__name__)


class RollOrchestrator:
    """Runs roll requests for one session.

    Holds only read-only collaborators; every request builds its own
    config objects, so concurrent requests never share state.
    """

    def __init__(
        self,
        settings: RollSettings,
        dialog: Optional[DialogCollaborator] = None,
        is_moderator: bool = True,
        gm_user_ids: Iterable[str] = (),
    ):
        """Initialize the orchestrator.

        Args:
            settings: Session settings, loaded once at session start
            dialog: Interactive dialog collaborator; None means direct requests only
            is_moderator: Whether the acting user is the moderator
            gm_user_ids: User ids with moderator rights (excluded from ownership checks)
        """
        self.settings = settings
        self.dialog = dialog
        self.is_moderator = is_moderator
        self.gm_user_ids = tuple(gm_user_ids)

    async def configure(self, request: RollRequest) -> Optional[RollExecutionConfig]:
        """Run a request through the dialog.

        Returns:
            The final config, or None if the request was invalid or the
            dialog was dismissed.
        """
        validated = validate_request(request)
        if validated is None:
            return None

        if self.dialog is None or self.settings.skip_dialogs:
            return self.build_direct(validated)

        base = build_execution_config(validated, is_moderator=self.is_moderator)
        seed = build_seed(validated, base, self.settings, self.gm_user_ids)
        outcome = await run_interactive_config(self.dialog, seed)

        return process_outcome(outcome, validated.actors, validated, self.settings)

    def build_direct(
        self,
        request: RollRequest,
        roll_spec: Optional[RollSpec] = None,
    ) -> Optional[RollExecutionConfig]:
        """Build a config without asking anyone (skip-dialog path)."""
        validated = validate_request(request)
        if validated is None:
            return None

        roll_mode = resolve_roll_mode(
            self.settings.public_rolls_enabled,
            None,
            self.settings.default_roll_mode,
        )
        return build_execution_config(
            validated,
            roll_spec,
            is_moderator=self.is_moderator,
            roll_mode=roll_mode,
            skip_dialog=True,
        )

    def evaluate_group(
        self,
        roll_results: Sequence[Any],
        target_difficulty: int,
        actors: Sequence[Any],
        category: Any,
        key: Optional[str] = None,
    ) -> GroupConsensusOutcome:
        """Resolve a group check with the session's configured rule."""
        return evaluate(
            roll_results,
            target_difficulty,
            actors,
            category,
            key,
            self.settings.group_roll_result_mode,
        )
