from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


RA_STEP_DEG = 2.0
DEC_STEP_DEG = 2.0
ROLL_STEP_DEG = 5.0


class CommandKind(Enum):
    NAVIGATE_NEXT = "next"
    NAVIGATE_PREV = "prev"
    ADJUST_RA = "ra"
    ADJUST_DEC = "dec"
    ADJUST_ROLL = "roll"


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    delta: float = 0.0

    @property
    def is_navigation(self) -> bool:
        return self.kind in (CommandKind.NAVIGATE_NEXT, CommandKind.NAVIGATE_PREV)


NAVIGATE_NEXT = Command(CommandKind.NAVIGATE_NEXT)
NAVIGATE_PREV = Command(CommandKind.NAVIGATE_PREV)


def adjust_ra(delta: float) -> Command:
    return Command(CommandKind.ADJUST_RA, delta)


def adjust_dec(delta: float) -> Command:
    return Command(CommandKind.ADJUST_DEC, delta)


def adjust_roll(delta: float) -> Command:
    return Command(CommandKind.ADJUST_ROLL, delta)


# Key name -> command. A/D pan in RA, W/S in declination, Q/E roll.
KEY_BINDINGS: Dict[str, Command] = {
    "Right": NAVIGATE_NEXT,
    "Left": NAVIGATE_PREV,
    "A": adjust_ra(+RA_STEP_DEG),
    "D": adjust_ra(-RA_STEP_DEG),
    "W": adjust_dec(-DEC_STEP_DEG),
    "S": adjust_dec(+DEC_STEP_DEG),
    "Q": adjust_roll(-ROLL_STEP_DEG),
    "E": adjust_roll(+ROLL_STEP_DEG),
}


def command_for_key(key_name: str) -> Optional[Command]:
    return KEY_BINDINGS.get(key_name)
