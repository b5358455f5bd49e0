from __future__ import annotations

from typing import TYPE_CHECKING

from scoreboard.logic.enums import GameType, RoundKind
from scoreboard.logic.settings import GameConfig
from scoreboard.logic.types import GameRound, GameSession, Player, RoundScoreEntry

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


# ============================================================================
# Test Session Builder Helpers
# ============================================================================


def create_player(player_id: str, name: str | None = None) -> Player:
    """Create a Player whose name defaults to its id."""
    return Player(id=player_id, name=name if name is not None else player_id)


def create_round(
    scores: Mapping[str, int],
    round_id: str | None = None,
    *,
    kind: RoundKind = RoundKind.NORMAL,
    timestamp: int = 0,
) -> GameRound:
    """Create a GameRound from a {player_id: score} mapping."""
    return GameRound(
        id=round_id if round_id is not None else f"r-{timestamp}-{'-'.join(scores)}",
        scores=tuple(RoundScoreEntry(player_id=pid, score=score) for pid, score in scores.items()),
        timestamp=timestamp,
        kind=kind,
    )


def create_session(  # noqa: PLR0913
    player_ids: Sequence[str] = ("A", "B", "C", "D"),
    *,
    rounds: Sequence[GameRound] | Sequence[Mapping[str, int]] = (),
    eliminated: Sequence[str] = (),
    rebuys: Mapping[str, int] | None = None,
    buy_in: float = 5,
    num_winners: int | None = None,
    elimination_threshold: int = 220,
    game_type: GameType = GameType.RUMMY,
    group_id: str | None = None,
    session_id: str = "session-1",
    is_active: bool = True,
) -> GameSession:
    """Create a GameSession with sensible defaults for testing.

    Rounds may be given as GameRound objects or plain score mappings; plain
    mappings become normal rounds numbered by position.
    """
    built_rounds = tuple(
        r if isinstance(r, GameRound) else create_round(r, round_id=f"{session_id}-r{i}", timestamp=i)
        for i, r in enumerate(rounds)
    )
    return GameSession(
        id=session_id,
        title=f"Test {session_id}",
        players=tuple(create_player(pid) for pid in player_ids),
        config=GameConfig(buy_in=buy_in, num_winners=num_winners, elimination_threshold=elimination_threshold),
        rounds=built_rounds,
        eliminated_player_ids=tuple(eliminated),
        rebuy_counts=dict(rebuys or {}),
        is_active=is_active,
        game_type=game_type,
        group_id=group_id,
    )


def scenario_session() -> GameSession:
    """Four players, buy-in 5, two paid places; B and D bust out in round two.

    Totals: A=10, B=250, C=30, D=250.
    """
    return create_session(
        rounds=[
            {"A": 10, "B": 50, "C": 20, "D": 100},
            {"A": 0, "B": 200, "C": 10, "D": 150},
        ],
        eliminated=["B", "D"],
        num_winners=2,
    )
