"""Roll visibility resolution."""

from typing import Optional

from ..enums import RollMode


def resolve_roll_mode(
    public_rolls_enabled: bool,
    explicit_mode: Optional[RollMode | str] = None,
    default_mode: RollMode | str = RollMode.PUBLIC,
) -> RollMode:
    """Decide who sees a roll.

    An explicit choice (the user touched the roll-mode selector) always
    wins. Otherwise public rolls force PUBLIC, and the session default
    applies when they are off.
    """
    if explicit_mode:
        return RollMode(explicit_mode)
    if public_rolls_enabled:
        return RollMode.PUBLIC
    return RollMode(default_mode)
