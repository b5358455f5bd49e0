"""
Cross-session player statistics for leaderboards.

Placements come from the frozen settlement snapshot when a session has
one, so a manual split pot is honored, and from freshly computed rankings
otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from scoreboard.logic.ranking import get_rankings
from scoreboard.logic.settings import resolve_num_winners
from scoreboard.logic.types import PlayerStats

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from scoreboard.logic.enums import GameType
    from scoreboard.logic.types import GameSession, Player, PlayerGroup, SettlementSnapshot

logger = structlog.get_logger()

HAT_TRICK_LENGTH = 3
PODIUM_RANKS = (1, 2, 3)


@dataclass
class _StatsTally:
    player_id: str
    player_name: str
    first_place: int = 0
    second_place: int = 0
    third_place: int = 0
    hat_tricks: int = 0
    rounds_won: int = 0
    total_matches: int = 0

    def add_placement(self, rank: int, paid_positions: int) -> None:
        self.total_matches += 1
        if rank not in PODIUM_RANKS or rank > paid_positions:
            return
        if rank == 1:
            self.first_place += 1
        elif rank == 2:  # noqa: PLR2004
            self.second_place += 1
        else:
            self.third_place += 1

    def freeze(self) -> PlayerStats:
        return PlayerStats(
            player_id=self.player_id,
            player_name=self.player_name,
            first_place=self.first_place,
            second_place=self.second_place,
            third_place=self.third_place,
            hat_tricks=self.hat_tricks,
            rounds_won=self.rounds_won,
            total_podiums=self.first_place + self.second_place + self.third_place,
            total_matches=self.total_matches,
        )


def count_hat_tricks(scores: Iterable[int]) -> int:
    """
    Count non-overlapping runs of three consecutive zero scores.

    Six zeros in a row make two hat-tricks, five make one.
    """
    hat_tricks = 0
    streak = 0
    for score in scores:
        if score != 0:
            streak = 0
            continue
        streak += 1
        if streak == HAT_TRICK_LENGTH:
            hat_tricks += 1
            streak = 0
    return hat_tricks


def _recorded_scores(session: GameSession, player_id: str) -> list[int]:
    """Every entry the player has in the session, adjustment rounds included."""
    scores = []
    for game_round in session.rounds:
        score = game_round.score_for(player_id)
        if score is not None:
            scores.append(score)
    return scores


def _latest_snapshots(snapshots: Iterable[SettlementSnapshot]) -> dict[str, SettlementSnapshot]:
    latest: dict[str, SettlementSnapshot] = {}
    for snapshot in snapshots:
        current = latest.get(snapshot.session_id)
        if current is None or snapshot.date >= current.date:
            latest[snapshot.session_id] = snapshot
    return latest


def _placements(session: GameSession, snapshot: SettlementSnapshot | None) -> list[tuple[str, int]]:
    if snapshot is not None:
        return [(s.player_id, s.rank) for s in snapshot.settlements]
    return [(r.player_id, r.rank) for r in get_rankings(session)]


def _session_in_scope(session: GameSession, game_type: GameType, target_group: PlayerGroup | None) -> bool:
    if session.game_type != game_type:
        return False
    # group scoping is by the session's own group id, never by player overlap
    return target_group is None or session.group_id == target_group.id


def calculate_player_stats(
    history: Sequence[GameSession],
    players: Sequence[Player],
    game_type: GameType,
    target_group: PlayerGroup | None = None,
    prior_snapshots: Sequence[SettlementSnapshot] | None = None,
) -> list[PlayerStats]:
    """
    Tally placements, rounds won and hat-tricks per player for one game type.

    Only players in target_group are tracked when a group is given.
    Ordered by first, second and third places, then total podiums, all
    descending; equal records keep the order of `players`.
    """
    if target_group is not None:
        members = set(target_group.player_ids)
        players = [p for p in players if p.id in members]
    tallies = {p.id: _StatsTally(player_id=p.id, player_name=p.name) for p in players}
    snapshots = _latest_snapshots(prior_snapshots or ())

    sessions = [s for s in history if _session_in_scope(s, game_type, target_group)]
    for session in sessions:
        paid_positions = resolve_num_winners(session.config, len(session.players))
        for player_id, rank in _placements(session, snapshots.get(session.id)):
            tally = tallies.get(player_id)
            if tally is not None:
                tally.add_placement(rank, paid_positions)

        for player_id in session.player_ids:
            tally = tallies.get(player_id)
            if tally is None:
                continue
            scores = _recorded_scores(session, player_id)
            tally.rounds_won += sum(1 for score in scores if score == 0)
            tally.hat_tricks += count_hat_tricks(scores)

    stats = [tally.freeze() for tally in tallies.values()]
    stats.sort(key=lambda s: (-s.first_place, -s.second_place, -s.third_place, -s.total_podiums))

    logger.debug(
        "player stats calculated",
        game_type=game_type,
        group_id=target_group.id if target_group else None,
        session_count=len(sessions),
        player_count=len(stats),
    )
    return stats
