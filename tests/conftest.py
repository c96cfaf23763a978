"""
Shared test fixtures for the Rollcall test suite.

Provides:
- Sample actors: the three-actor party used by the group rule scenarios
- Settings fixtures: defaults and a public-rolls variant
- ScriptedDialog: deterministic dialog collaborator (no UI needed)
"""

from typing import Any, List, Optional

import pytest

from rollcall.core.actors import ActorRecord
from rollcall.core.dialog import DialogSeed, DialogSession
from rollcall.core.models import DialogOutcome, FinalizedRoll, RollRequest
from rollcall.enums import RollCategory
from rollcall.settings import RollSettings, reset_settings_store

# ---------------------------------------------------------------------------
# ScriptedDialog: deterministic dialog stub
# ---------------------------------------------------------------------------

class ScriptedDialog:
    """Dialog collaborator that settles with a canned outcome.

    Usage:
        dialog = ScriptedDialog(DialogOutcome(rolls=[FinalizedRoll()]))
        outcome = await run_interactive_config(dialog, seed)
        assert dialog.seeds[0].variant == DialogVariant.GENERIC
    """

    def __init__(self, outcome: Optional[DialogOutcome] = None, settle_twice: bool = False):
        self.outcome = outcome
        self.settle_twice = settle_twice
        self.seeds: List[DialogSeed] = []

    def open(self, seed: DialogSeed, session: DialogSession) -> None:
        self.seeds.append(seed)
        if self.outcome is None:
            session.cancel()
        else:
            session.submit(self.outcome)
        if self.settle_twice:
            # A close event firing after submit
            session.cancel()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _fresh_settings_store():
    reset_settings_store()
    yield
    reset_settings_store()


@pytest.fixture
def scripted_dialog():
    """Factory for ScriptedDialog collaborators."""
    return ScriptedDialog


@pytest.fixture
def settings():
    return RollSettings()


@pytest.fixture
def public_settings():
    return RollSettings(public_rolls_enabled=True, default_roll_mode="private")


@pytest.fixture
def aria():
    return ActorRecord(
        id="a",
        name="Aria",
        ownership={"player1": 3},
        abilities={"dex": {"value": 18, "mod": 4, "save": 6}, "con": {"value": 12, "mod": 1, "save": 1}},
        skills={"ste": {"total": 5, "mod": 4, "ability": "dex"}},
    )


@pytest.fixture
def bram():
    return ActorRecord(
        id="b",
        name="Bram",
        ownership={"player2": 3},
        abilities={"dex": {"value": 12, "mod": 1, "save": 1}},
        skills={"ste": {"total": 2, "mod": 1, "ability": "dex"}},
    )


@pytest.fixture
def cole():
    return ActorRecord(
        id="c",
        name="Cole",
        type="npc",
        abilities={"dex": {"value": 10, "mod": 0, "save": 0}},
        skills={"ste": {"total": 1, "mod": 0, "ability": "dex"}},
    )


@pytest.fixture
def party(aria, bram, cole) -> List[Any]:
    return [aria, bram, cole]


@pytest.fixture
def stealth_request(party):
    return RollRequest(
        category=RollCategory.SKILL,
        key="ste",
        target_difficulty=15,
        requester_label="GM",
        actors=party,
    )


@pytest.fixture
def submitted_outcome():
    """A dialog outcome with advantage, a +2 bonus and DC 14."""
    return DialogOutcome(
        rolls=[FinalizedRoll(
            parts=["1d20", "@mod"],
            data={"situational": "+2"},
            options={"target": 14},
            advantageMode="advantage",
        )],
        sendRequest=True,
    )
