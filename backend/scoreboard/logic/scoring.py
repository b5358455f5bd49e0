"""
Score aggregation for a session: running totals, elimination and pot size.

Totals are always summed from the full round log. Nothing here is cached,
so a retroactive score edit is reflected by simply calling again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scoreboard.logic.settings import GameConfig
    from scoreboard.logic.types import GameSession


def compute_totals(session: GameSession) -> dict[str, int]:
    """
    Sum every round entry per player, in player order.

    Join and rebuy adjustments count like any other entry. Entries for
    players not seated in the session are ignored.
    """
    totals = dict.fromkeys(session.player_ids, 0)
    for game_round in session.rounds:
        for entry in game_round.scores:
            if entry.player_id in totals:
                totals[entry.player_id] += entry.score
    return totals


def is_eliminated(total: int, config: GameConfig) -> bool:
    """A player is out once their total is strictly above the threshold."""
    return total > config.elimination_threshold


def compute_pot_size(session: GameSession) -> float:
    buy_in = session.config.buy_in
    return buy_in * len(session.players) + buy_in * sum(session.rebuy_counts.values())


def derive_eliminated(session: GameSession, totals: dict[str, int] | None = None) -> tuple[str, ...]:
    """Rebuild the eliminated set from totals alone, in player order."""
    if totals is None:
        totals = compute_totals(session)
    return tuple(pid for pid, total in totals.items() if is_eliminated(total, session.config))


def max_active_total(session: GameSession, totals: dict[str, int] | None = None) -> int:
    """
    Highest total among players still in the game, or 0 when nobody is.

    Rebuys reset to this score and late joiners start from it.
    """
    if totals is None:
        totals = compute_totals(session)
    eliminated = set(session.eliminated_player_ids)
    return max((total for pid, total in totals.items() if pid not in eliminated), default=0)
