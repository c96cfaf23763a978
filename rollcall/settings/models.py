"""Pydantic models for session settings."""

from pydantic import BaseModel, ConfigDict, Field

from ..enums import ConsensusMethod, RollMode


class RollSettings(BaseModel):
    """Process-wide roll settings.

    Loaded once at session start and read-only afterwards. The core never
    looks these up on its own; callers pass the values they need into the
    roll mode resolver and the group calculator.
    """

    model_config = ConfigDict(frozen=True)

    public_rolls_enabled: bool = Field(
        default=False,
        description="Player rolls requested by the moderator are always public"
    )
    group_roll_result_mode: int = Field(
        default=int(ConsensusMethod.STANDARD),
        ge=1,
        le=4,
        description="Group check rule: 1 Standard, 2 Average, 3 Leader with Help, 4 Weakest Link"
    )
    default_roll_mode: RollMode = Field(
        default=RollMode.PUBLIC,
        description="Roll mode used when public rolls are off and nobody picked one"
    )
    show_group_dc_to_players: bool = Field(
        default=False,
        description="Reveal the group DC in the group roll summary"
    )
    group_rolls_msg_enabled: bool = Field(
        default=True,
        description="Collapse multi-actor rolls into a single group message"
    )
    skip_dialogs: bool = Field(
        default=False,
        description="Send requests straight through without the configuration dialog"
    )
    debug_mode: bool = Field(
        default=False,
        description="Verbose logging of config merges"
    )

    @property
    def consensus_method(self) -> ConsensusMethod:
        return ConsensusMethod(self.group_roll_result_mode)
