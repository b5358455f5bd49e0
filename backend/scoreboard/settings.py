"""Process-level configuration via environment variables."""

from pydantic_settings import BaseSettings

from scoreboard.logic.enums import GameType


class ScoreboardSettings(BaseSettings):
    model_config = {"env_prefix": "SCOREBOARD_"}

    default_game_type: GameType = GameType.RUMMY
