"""Tracking of one in-flight group roll."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from ..enums import ConsensusMethod, RollCategory
from .actors import actor_id
from .group_consensus import evaluate
from .models import GroupConsensusOutcome, RollResultEntry
from .validation import supports_dc

logger = logging.getLogger(__name__)


class GroupRollEntry(BaseModel):
    """One actor's slot in a group roll."""
    actor_id: str
    total: Optional[int] = None
    rolled: bool = False
    success: bool = False
    failure: bool = False


class GroupRollSession(BaseModel):
    """Results of a group roll as they come in.

    Each session owns its own entries; two sessions never share state.
    """

    group_roll_id: str
    category: RollCategory
    key: Optional[str] = None
    dc: Optional[int] = None
    entries: List[GroupRollEntry] = Field(default_factory=list)

    @classmethod
    def start(
        cls,
        group_roll_id: str,
        actors: Sequence[Any],
        category: Any,
        key: Optional[str] = None,
        dc: Optional[int] = None,
    ) -> "GroupRollSession":
        ids = [i for i in (actor_id(a) for a in actors) if i is not None]
        return cls(
            group_roll_id=group_roll_id,
            category=RollCategory.parse(category) or RollCategory.CUSTOM,
            key=key,
            dc=dc,
            entries=[GroupRollEntry(actor_id=i) for i in ids],
        )

    def _entry(self, ident: str) -> Optional[GroupRollEntry]:
        for entry in self.entries:
            if entry.actor_id == ident:
                return entry
        return None

    def _flag(self, entry: GroupRollEntry) -> None:
        if self.dc is not None and entry.rolled and entry.total is not None:
            entry.success = entry.total >= self.dc
            entry.failure = entry.total < self.dc
        else:
            entry.success = entry.failure = False

    def record(self, ident: str, total: int) -> bool:
        """Store one actor's total. Returns False for actors not in this roll."""
        entry = self._entry(ident)
        if entry is None:
            logger.warning(f"Group roll {self.group_roll_id}: no slot for actor {ident}")
            return False
        entry.total = total
        entry.rolled = True
        self._flag(entry)
        return True

    def update_dc(self, dc: int) -> None:
        """Change the DC and re-flag every rolled entry."""
        self.dc = dc
        for entry in self.entries:
            self._flag(entry)

    @property
    def all_rolled(self) -> bool:
        return bool(self.entries) and all(e.rolled for e in self.entries)

    @property
    def supports_dc(self) -> bool:
        return supports_dc(self.category)

    def results(self) -> List[RollResultEntry]:
        return [RollResultEntry(actorId=e.actor_id, total=e.total) for e in self.entries]

    def group_result(
        self,
        actors: Sequence[Any],
        method: Any = ConsensusMethod.STANDARD,
    ) -> Optional[GroupConsensusOutcome]:
        """Group verdict, or None when this roll has no DC to check against."""
        if not self.supports_dc or self.dc is None:
            return None
        return evaluate(self.results(), self.dc, actors, self.category, self.key, method)

    def summary_data(self) -> Dict[str, Any]:
        """Template-ready snapshot of the roll for the message collaborator."""
        return {
            "groupRollId": self.group_roll_id,
            "rollType": str(self.category),
            "rollKey": self.key,
            "dc": self.dc,
            "showDC": self.dc is not None,
            "supportsDC": self.supports_dc,
            "allRolled": self.all_rolled,
            "results": [
                {
                    "actorId": e.actor_id,
                    "total": e.total,
                    "rolled": e.rolled,
                    "success": e.success,
                    "failure": e.failure,
                }
                for e in self.entries
            ],
        }
