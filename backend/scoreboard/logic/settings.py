"""Per-session game rules: buy-in, penalties, elimination threshold and paid positions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from scoreboard.logic.enums import GameType

# legacy paid-position fallback for sessions recorded before num_winners existed
LEGACY_THREE_WINNER_MIN_PLAYERS = 6
LEGACY_TWO_WINNER_MIN_PLAYERS = 4


class GameConfig(BaseModel):
    """
    Rules fixed at session start.

    Money values are in the session's currency unit. Scores are penalty
    points: lower is better and a total above elimination_threshold is out.
    """

    model_config = ConfigDict(frozen=True)

    buy_in: float = Field(default=5, ge=0)
    scoot_penalty: int = Field(default=25, ge=0)  # quick drop before the first draw
    middle_scoot_penalty: int = Field(default=40, ge=0)  # drop mid-hand
    max_penalty: int = Field(default=80, ge=0)
    elimination_threshold: int = Field(default=220, ge=0)
    num_winners: int | None = Field(default=None, ge=0)  # None/0: legacy session


_PRESETS: dict[GameType, GameConfig] = {
    GameType.RUMMY: GameConfig(),
    GameType.UNO: GameConfig(buy_in=0, elimination_threshold=500),
}


def default_config(game_type: GameType, **overrides: object) -> GameConfig:
    """Return the preset rules for a game type, with optional field overrides."""
    preset = _PRESETS[game_type]
    if not overrides:
        return preset
    return GameConfig.model_validate({**preset.model_dump(), **overrides})


def resolve_num_winners(config: GameConfig, player_count: int) -> int:
    """
    Number of paid positions for a session.

    An explicit num_winners wins. Older sessions without it pay 3 places
    from 6 players, 2 from 4, otherwise only the winner.
    """
    if config.num_winners:
        return config.num_winners
    if player_count >= LEGACY_THREE_WINNER_MIN_PLAYERS:
        return 3
    if player_count >= LEGACY_TWO_WINNER_MIN_PLAYERS:
        return 2
    return 1
