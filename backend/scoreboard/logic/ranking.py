"""
Total ordering of all players in a session, active and eliminated.

Lower totals rank higher. Every active player ranks above every eliminated
one; among eliminated players, whoever kept playing longer ranks higher.
Rankings are rebuilt from scratch on every call because an edit can change
anyone's elimination retroactively.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from scoreboard.logic.scoring import compute_totals
from scoreboard.logic.types import PlayerRanking

if TYPE_CHECKING:
    from scoreboard.logic.types import GameSession

logger = structlog.get_logger()

NEVER_PLAYED_ROUND_INDEX = -1


def last_round_index(session: GameSession, player_id: str) -> int:
    """Index of the last round holding an entry for the player, -1 if none."""
    for index in range(len(session.rounds) - 1, -1, -1):
        if session.rounds[index].score_for(player_id) is not None:
            return index
    return NEVER_PLAYED_ROUND_INDEX


def get_rankings(session: GameSession) -> list[PlayerRanking]:
    """
    Rank every player 1..N with no ties.

    Active players sort by total ascending. Eliminated players sort by last
    round played (later is better), then by total ascending. Python's sort
    is stable, so anything still tied keeps player-list order.
    """
    totals = compute_totals(session)
    eliminated = set(session.eliminated_player_ids)

    active = [pid for pid in session.player_ids if pid not in eliminated]
    out = [pid for pid in session.player_ids if pid in eliminated]

    active.sort(key=lambda pid: totals[pid])
    out.sort(key=lambda pid: (-last_round_index(session, pid), totals[pid]))

    rankings = [
        PlayerRanking(player_id=pid, total_score=totals[pid], rank=rank)
        for rank, pid in enumerate(active + out, start=1)
    ]
    logger.debug(
        "rankings computed",
        session_id=session.id,
        active_count=len(active),
        eliminated_count=len(out),
    )
    return rankings
