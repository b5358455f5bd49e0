"""
String enum definitions for score-keeping concepts.
"""

from enum import Enum


class GameType(str, Enum):
    """Card game variant tracked by a session."""

    RUMMY = "rummy"
    UNO = "uno"  # non-wagered, buy-in is always 0


class RoundKind(str, Enum):
    """Origin of a recorded round."""

    NORMAL = "normal"  # real play, one entry per active player
    JOIN = "join"  # late joiner's starting adjustment
    REBUY = "rebuy"  # re-entry adjustment after elimination


# kinds whose single entry is a synthetic total adjustment rather than play
ADJUSTMENT_ROUND_KINDS = frozenset({RoundKind.JOIN, RoundKind.REBUY})


class SnapshotStatus(str, Enum):
    """Payment state of a frozen settlement, toggled outside the core."""

    PAID = "paid"
    UNPAID = "unpaid"
