"""Exception types raised inside the core.

None of these escape the public operations for expected failures
(invalid requests, cancelled dialogs, missing actor data); they are
caught at the operation boundary, logged, and turned into None or a
degraded result.
"""


class RollcallError(Exception):
    """Base class for Rollcall errors."""


class RequestValidationError(RollcallError):
    """A roll request cannot be turned into a configuration."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class DialogSettlementError(RollcallError):
    """A dialog session was read before it settled."""
