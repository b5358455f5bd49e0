"""
Session lifecycle: start, record rounds, rebuys, late joins, edits and end.

Every operation returns a new frozen GameSession. Ids and timestamps are
supplied by the caller so the same inputs always produce the same session.
After each mutation the caller recomputes totals, rankings and settlements
from the returned session.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from scoreboard.logic.enums import ADJUSTMENT_ROUND_KINDS, RoundKind
from scoreboard.logic.exceptions import (
    DuplicatePlayerError,
    InvalidEditError,
    InvalidRebuyError,
    SessionEndedError,
    UnknownPlayerError,
    UnknownRoundError,
)
from scoreboard.logic.scoring import compute_pot_size, compute_totals, derive_eliminated, is_eliminated, max_active_total
from scoreboard.logic.settlement import calculate_settlements, calculate_transfers, redistribute_settlements
from scoreboard.logic.types import GameRound, GameSession, RoundScoreEntry, SettlementSnapshot

if TYPE_CHECKING:
    from collections.abc import Iterable

    from scoreboard.logic.enums import GameType, SnapshotStatus
    from scoreboard.logic.settings import GameConfig
    from scoreboard.logic.types import Player

logger = structlog.get_logger()


def _require_active(session: GameSession) -> None:
    if not session.is_active:
        raise SessionEndedError(session.id)


def _require_player(session: GameSession, player_id: str) -> None:
    if player_id not in session.player_ids:
        raise UnknownPlayerError(player_id)


def start_session(  # noqa: PLR0913
    session_id: str,
    title: str,
    players: Iterable[Player],
    config: GameConfig,
    game_type: GameType,
    start_time: int,
    group_id: str | None = None,
) -> GameSession:
    session = GameSession(
        id=session_id,
        title=title,
        players=tuple(players),
        config=config,
        game_type=game_type,
        start_time=start_time,
        group_id=group_id,
    )
    logger.info("session started", session_id=session.id, game_type=game_type, player_count=len(session.players))
    return session


def add_round(
    session: GameSession,
    round_id: str,
    scores: Iterable[RoundScoreEntry],
    timestamp: int,
) -> GameSession:
    """
    Append a round of play and eliminate anyone pushed over the threshold.

    Already eliminated players stay eliminated; new eliminations are appended
    in player order.
    """
    _require_active(session)
    game_round = GameRound(id=round_id, scores=tuple(scores), timestamp=timestamp, kind=RoundKind.NORMAL)
    updated = session.model_copy(update={"rounds": (*session.rounds, game_round)})

    totals = compute_totals(updated)
    already_out = set(session.eliminated_player_ids)
    newly_out = [
        pid for pid, total in totals.items() if pid not in already_out and is_eliminated(total, session.config)
    ]
    for pid in newly_out:
        logger.info("player eliminated", session_id=session.id, player_id=pid, total=totals[pid])

    return updated.model_copy(update={"eliminated_player_ids": (*session.eliminated_player_ids, *newly_out)})


def apply_rebuy(session: GameSession, player_id: str, round_id: str, timestamp: int) -> GameSession:
    """
    Buy an eliminated player back in.

    Their total is reset to the highest total among players still in, via a
    single rebuy adjustment entry, and their rebuy count grows by one.
    """
    _require_active(session)
    _require_player(session, player_id)
    if player_id not in session.eliminated_player_ids:
        raise InvalidRebuyError(f"player {player_id!r} is not eliminated")

    totals = compute_totals(session)
    target = max(max_active_total(session, totals), 0)
    adjustment = GameRound(
        id=round_id,
        scores=(RoundScoreEntry(player_id=player_id, score=target - totals[player_id]),),
        timestamp=timestamp,
        kind=RoundKind.REBUY,
    )
    rebuy_counts = {**session.rebuy_counts, player_id: session.rebuy_count(player_id) + 1}

    logger.info(
        "player rebought",
        session_id=session.id,
        player_id=player_id,
        reset_total=target,
        rebuy_count=rebuy_counts[player_id],
    )
    return session.model_copy(
        update={
            "rounds": (*session.rounds, adjustment),
            "eliminated_player_ids": tuple(pid for pid in session.eliminated_player_ids if pid != player_id),
            "rebuy_counts": rebuy_counts,
        }
    )


def add_player(session: GameSession, player: Player, round_id: str, timestamp: int) -> GameSession:
    """Seat a late joiner, starting them at the highest total among players still in."""
    _require_active(session)
    if player.id in session.player_ids:
        raise DuplicatePlayerError(f"player {player.id!r} is already in session {session.id}")

    start_total = max_active_total(session)
    join_round = GameRound(
        id=round_id,
        scores=(RoundScoreEntry(player_id=player.id, score=start_total),),
        timestamp=timestamp,
        kind=RoundKind.JOIN,
    )
    logger.info("player joined", session_id=session.id, player_id=player.id, start_total=start_total)
    return session.model_copy(update={"players": (*session.players, player), "rounds": (*session.rounds, join_round)})


def edit_score(session: GameSession, round_id: str, player_id: str, score: int) -> GameSession:
    """
    Correct one player's entry in a recorded round.

    Adds the entry if the player had none in that round. A join or rebuy
    round only accepts an edit of its single adjustment entry. The
    eliminated set is rebuilt from scratch since the edit may bring anyone
    back in or out.
    """
    _require_active(session)
    _require_player(session, player_id)

    rounds = list(session.rounds)
    for index, game_round in enumerate(rounds):
        if game_round.id == round_id:
            break
    else:
        raise UnknownRoundError(round_id)

    entry = RoundScoreEntry(player_id=player_id, score=score)
    if game_round.score_for(player_id) is None:
        if game_round.kind in ADJUSTMENT_ROUND_KINDS:
            raise InvalidEditError(round_id, player_id)
        scores = (*game_round.scores, entry)
    else:
        scores = tuple(entry if e.player_id == player_id else e for e in game_round.scores)
    rounds[index] = game_round.model_copy(update={"scores": scores})

    updated = session.model_copy(update={"rounds": tuple(rounds)})
    eliminated = derive_eliminated(updated)
    logger.info(
        "score edited",
        session_id=session.id,
        round_id=round_id,
        player_id=player_id,
        score=score,
        eliminated_count=len(eliminated),
    )
    return updated.model_copy(update={"eliminated_player_ids": eliminated})


def end_session(session: GameSession, end_time: int) -> GameSession:
    _require_active(session)
    logger.info("session ended", session_id=session.id, round_count=len(session.rounds))
    return session.model_copy(update={"is_active": False, "end_time": end_time})


def build_snapshot(
    session: GameSession,
    snapshot_id: str,
    date: int,
    *,
    split_pot: bool = False,
) -> SettlementSnapshot:
    """Freeze the session's settlement and transfers, standard or split pot."""
    settlements = redistribute_settlements(session) if split_pot else calculate_settlements(session)
    return SettlementSnapshot(
        id=snapshot_id,
        session_id=session.id,
        title=session.title,
        game_type=session.game_type,
        date=date,
        pot_size=compute_pot_size(session),
        settlements=tuple(settlements),
        transfers=tuple(calculate_transfers(settlements)),
    )


def set_snapshot_status(snapshot: SettlementSnapshot, status: SnapshotStatus) -> SettlementSnapshot:
    return snapshot.model_copy(update={"status": status})
