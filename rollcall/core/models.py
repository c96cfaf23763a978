"""
Data records exchanged between the core and its collaborators.

RollRequest is the moderator's intent. RollExecutionConfig is what the
roll evaluator receives and is frozen once built. DialogOutcome is what
the interactive dialog hands back. RollResultEntry and
GroupConsensusOutcome are the input and output of group resolution.
"""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..enums import AdvantageMode, RollCategory, RollMode


SITUATIONAL_TERM = "@situational"


class RollRequest(BaseModel):
    """A moderator's request for one or more actors to roll."""

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    category: RollCategory
    key: Optional[str] = None
    target_difficulty: Optional[int] = Field(default=None, alias="targetDifficulty")
    advantage_hint: bool = Field(default=False, alias="advantageHint")
    disadvantage_hint: bool = Field(default=False, alias="disadvantageHint")
    situational_formula: Optional[str] = Field(default=None, alias="situationalFormula")
    requester_label: str = Field(default="GM", alias="requesterLabel")
    actors: List[Any] = Field(default_factory=list)

    @field_validator("category", mode="before")
    @classmethod
    def _parse_category(cls, value: Any) -> RollCategory:
        category = RollCategory.parse(value)
        if category is None:
            raise ValueError(f"Unknown roll category: {value!r}")
        return category


class RollSpec(BaseModel):
    """One roll inside an execution config: formula parts, roll data, options."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    formula_parts: Tuple[str, ...] = Field(default=(), alias="parts")
    data: Dict[str, Any] = Field(default_factory=dict)
    options: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("formula_parts", "data", "options", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any, info) -> Any:
        if value is None:
            return () if info.field_name == "formula_parts" else {}
        return value


class RollExecutionConfig(BaseModel):
    """Finalized instruction for the roll evaluator.

    Frozen: build a new one with model_copy(update=...) instead of editing.
    `processed` is always True on configs produced by the core, so a host
    interceptor can tell a generated roll from a fresh request.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, arbitrary_types_allowed=True)

    rolls: Tuple[RollSpec, ...] = (RollSpec(),)
    advantage: bool = False
    disadvantage: bool = False
    target: Optional[int] = None
    roll_mode: Optional[RollMode] = Field(default=None, alias="rollMode")
    is_roll_request: bool = Field(default=False, alias="isRollRequest")
    send_request: bool = Field(default=False, alias="sendRequest")
    subject: Optional[Any] = None
    chat_message: bool = Field(default=True, alias="chatMessage")
    requested_by: str = Field(default="GM", alias="_requestedBy")
    show_requested_by: bool = Field(default=True, alias="_showRequestedBy")
    processed: bool = True
    situational: bool = False
    ability: Optional[str] = None
    roll_type: Optional[RollCategory] = Field(default=None, alias="rollType")
    roll_key: Optional[str] = Field(default=None, alias="rollKey")
    skip_dialog: bool = Field(default=False, alias="skipDialog")

    @model_validator(mode="before")
    @classmethod
    def _cancel_opposing_modes(cls, data: Any) -> Any:
        # Advantage and disadvantage together cancel out to a normal roll.
        if isinstance(data, dict) and data.get("advantage") and data.get("disadvantage"):
            data = {**data, "advantage": False, "disadvantage": False}
        return data

    @property
    def primary(self) -> RollSpec:
        return self.rolls[0]


class FinalizedRoll(BaseModel):
    """One roll as the dialog left it after the user confirmed."""

    model_config = ConfigDict(populate_by_name=True)

    formula_parts: List[str] = Field(default_factory=list, alias="parts")
    data: Dict[str, Any] = Field(default_factory=dict)
    options: Dict[str, Any] = Field(default_factory=dict)
    advantage_mode: AdvantageMode = Field(default=AdvantageMode.NORMAL, alias="advantageMode")


class DialogOutcome(BaseModel):
    """What the interactive dialog settles with."""

    model_config = ConfigDict(populate_by_name=True)

    rolls: List[FinalizedRoll] = Field(default_factory=list)
    chosen_ability: Optional[str] = Field(default=None, alias="chosenAbility")
    send_request: bool = Field(default=False, alias="sendRequest")
    roll_mode: Optional[RollMode] = Field(default=None, alias="rollMode")
    cancelled: bool = False

    @classmethod
    def cancellation(cls) -> "DialogOutcome":
        return cls(cancelled=True)


class RollResultEntry(BaseModel):
    """One actor's total in a group roll; total None means not rolled yet."""

    model_config = ConfigDict(populate_by_name=True)

    actor_id: str = Field(alias="actorId")
    total: Optional[int] = None


class GroupConsensusOutcome(BaseModel):
    """Group verdict. Created fresh per evaluation and never mutated."""

    model_config = ConfigDict(frozen=True)

    complete: bool
    success: bool = False
    result: int = 0
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def incomplete(cls) -> "GroupConsensusOutcome":
        return cls(complete=False, success=False, result=0)
