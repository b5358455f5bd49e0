import pytest
from pydantic import ValidationError

from scoreboard.logic.enums import GameType
from scoreboard.logic.settings import GameConfig, default_config, resolve_num_winners
from scoreboard.settings import ScoreboardSettings


class TestDefaultConfig:
    def test_rummy_preset(self):
        config = default_config(GameType.RUMMY)

        assert config.buy_in == 5
        assert config.elimination_threshold == 220
        assert (config.scoot_penalty, config.middle_scoot_penalty, config.max_penalty) == (25, 40, 80)
        assert config.num_winners is None

    def test_uno_preset_is_not_wagered(self):
        config = default_config(GameType.UNO)

        assert config.buy_in == 0
        assert config.elimination_threshold == 500

    def test_overrides_are_validated(self):
        assert default_config(GameType.RUMMY, num_winners=3).num_winners == 3
        with pytest.raises(ValidationError, match="buy_in"):
            default_config(GameType.RUMMY, buy_in=-1)

    def test_config_is_frozen(self):
        with pytest.raises(ValidationError):
            default_config(GameType.RUMMY).buy_in = 10  # type: ignore[misc]


class TestResolveNumWinners:
    @pytest.mark.parametrize(
        ("player_count", "expected"),
        [(1, 1), (3, 1), (4, 2), (5, 2), (6, 3), (10, 3)],
    )
    def test_legacy_fallback_by_player_count(self, player_count, expected):
        assert resolve_num_winners(GameConfig(num_winners=None), player_count) == expected

    def test_zero_treated_as_missing(self):
        assert resolve_num_winners(GameConfig(num_winners=0), 6) == 3

    def test_explicit_value_wins(self):
        assert resolve_num_winners(GameConfig(num_winners=1), 8) == 1


class TestScoreboardSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("SCOREBOARD_DEFAULT_GAME_TYPE", raising=False)
        settings = ScoreboardSettings()

        assert settings.default_game_type == GameType.RUMMY

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SCOREBOARD_DEFAULT_GAME_TYPE", "uno")
        settings = ScoreboardSettings()

        assert settings.default_game_type == GameType.UNO

    def test_unknown_game_type_rejected(self, monkeypatch):
        monkeypatch.setenv("SCOREBOARD_DEFAULT_GAME_TYPE", "poker")
        with pytest.raises(ValidationError, match="default_game_type"):
            ScoreboardSettings()
