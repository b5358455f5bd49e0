"""
Pydantic models for score-keeping data structures.

Every model is frozen: sessions are updated by producing new values with
model_copy, and every derived view (totals, rankings, settlements) is a
projection recomputed from a session rather than stored on it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from scoreboard.logic.enums import ADJUSTMENT_ROUND_KINDS, GameType, RoundKind, SnapshotStatus
from scoreboard.logic.settings import GameConfig


class Player(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    alias: str | None = None


class PlayerGroup(BaseModel):
    """A named circle of players whose sessions are scoped together for stats."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    player_ids: tuple[str, ...] = ()


class RoundScoreEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    player_id: str
    score: int  # signed penalty points


class GameRound(BaseModel):
    """One recorded round: real play, or a join/rebuy total adjustment."""

    model_config = ConfigDict(frozen=True)

    id: str
    scores: tuple[RoundScoreEntry, ...] = ()
    timestamp: int = 0  # epoch milliseconds
    kind: RoundKind = RoundKind.NORMAL

    @model_validator(mode="after")
    def _validate_adjustment_entry(self) -> GameRound:
        if self.kind in ADJUSTMENT_ROUND_KINDS and len(self.scores) != 1:
            raise ValueError(f"{self.kind.value} round {self.id!r} must carry exactly one adjustment entry")
        return self

    def score_for(self, player_id: str) -> int | None:
        """Return the player's entry in this round, or None when they have none."""
        for entry in self.scores:
            if entry.player_id == player_id:
                return entry.score
        return None


class GameSession(BaseModel):
    """
    A single game from start to settlement.

    eliminated_player_ids keeps elimination order but is used as a set.
    Every id it references, and every key of rebuy_counts, must be a
    seated player.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    players: tuple[Player, ...]
    config: GameConfig
    rounds: tuple[GameRound, ...] = ()
    eliminated_player_ids: tuple[str, ...] = ()
    rebuy_counts: dict[str, int] = Field(default_factory=dict)
    is_active: bool = True
    start_time: int = 0
    end_time: int | None = None
    game_type: GameType = GameType.RUMMY
    group_id: str | None = None

    @model_validator(mode="after")
    def _validate_player_references(self) -> GameSession:
        player_ids = [p.id for p in self.players]
        if len(set(player_ids)) != len(player_ids):
            raise ValueError(f"GameSession {self.id!r} has duplicate player ids")
        seated = set(player_ids)
        if len(set(self.eliminated_player_ids)) != len(self.eliminated_player_ids):
            raise ValueError(f"GameSession {self.id!r} lists an eliminated player twice")
        unknown = (set(self.eliminated_player_ids) | set(self.rebuy_counts)) - seated
        if unknown:
            raise ValueError(f"GameSession {self.id!r} references unknown players: {sorted(unknown)}")
        negative = sorted(pid for pid, count in self.rebuy_counts.items() if count < 0)
        if negative:
            raise ValueError(f"GameSession {self.id!r} has negative rebuy counts for: {negative}")
        return self

    @property
    def player_ids(self) -> tuple[str, ...]:
        return tuple(p.id for p in self.players)

    def rebuy_count(self, player_id: str) -> int:
        return self.rebuy_counts.get(player_id, 0)


class PlayerRanking(BaseModel):
    model_config = ConfigDict(frozen=True)

    player_id: str
    total_score: int
    rank: int


class Settlement(BaseModel):
    """Net balance of one player: positive receives, negative owes."""

    model_config = ConfigDict(frozen=True)

    player_id: str
    amount: float
    rank: int


class Transfer(BaseModel):
    """A single payment realizing part of the net balances."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_player_id: str = Field(alias="from")
    to_player_id: str = Field(alias="to")
    amount: float = Field(gt=0)


class SettlementSnapshot(BaseModel):
    """
    Frozen settlement result for redisplay without recomputation.

    Only status changes after creation, and it is toggled by the caller.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    session_id: str
    title: str
    game_type: GameType
    date: int
    pot_size: float
    settlements: tuple[Settlement, ...]
    transfers: tuple[Transfer, ...]
    status: SnapshotStatus = SnapshotStatus.UNPAID


class PlayerStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    player_id: str
    player_name: str
    first_place: int = 0
    second_place: int = 0
    third_place: int = 0
    hat_tricks: int = 0
    rounds_won: int = 0
    total_podiums: int = 0
    total_matches: int = 0
