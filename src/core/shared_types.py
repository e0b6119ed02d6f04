"""
Type definitions used across layers
"""

from enum import StrEnum


class Side(StrEnum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def display_name(self) -> str:
        return "Blue Team" if self is Side.LEFT else "Red Team"


class PointType(StrEnum):
    """How a rally was won. Values are the encodings stored remotely."""

    ACE = "ace"
    ATTACK = "attack"
    BLOCK = "block"
    ERROR = "error"
    UNSPECIFIED = "unspecified"

    @property
    def requires_player(self) -> bool:
        return self in PLAYER_ATTRIBUTED_TYPES

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


PLAYER_ATTRIBUTED_TYPES = frozenset({PointType.ACE, PointType.ATTACK, PointType.BLOCK})

_DISPLAY_NAMES: dict[PointType, str] = {
    PointType.ACE: "Ace",
    PointType.ATTACK: "Attack",
    PointType.BLOCK: "Block",
    PointType.ERROR: "Error",
    PointType.UNSPECIFIED: "Other",
}

_SYMBOLS: dict[PointType, str] = {
    PointType.ACE: "🎯",
    PointType.ATTACK: "🏐",
    PointType.BLOCK: "🛡️",
    PointType.ERROR: "❌",
    PointType.UNSPECIFIED: "∅",
}


class AttributionStep(StrEnum):
    IDLE = "idle"
    AWAITING_POINT_TYPE = "awaiting point type"
    AWAITING_PLAYER = "awaiting player"


class SyncStatus(StrEnum):
    """Connection indicator. NOT_SYNCED is 'never loaded', not 'loaded and empty'."""

    NOT_SYNCED = "connecting"
    SYNCED = "ok"
    ERROR = "error"


class AdjustmentOutcome(StrEnum):
    STAGED = "staged"
    APPLIED = "applied"
    BUSY = "busy"
    IGNORED = "ignored"
