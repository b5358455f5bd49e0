"""Settle a session or print a leaderboard from exported JSON.

Usage:
    uv run python bin/scoreboard.py settle path/to/session.json
    uv run python bin/scoreboard.py settle path/to/session.json --split-pot
    uv run python bin/scoreboard.py stats path/to/history.json --game-type uno
    uv run python bin/scoreboard.py stats path/to/history.json --group path/to/group.json

history.json holds {"sessions": [...], "players": [...], "snapshots": [...]}.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import BaseModel

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from scoreboard.logic.enums import GameType
from scoreboard.logic.scoring import compute_pot_size
from scoreboard.logic.settlement import (
    calculate_settlements,
    calculate_transfers,
    house_balance,
    redistribute_settlements,
)
from scoreboard.logic.stats import calculate_player_stats
from scoreboard.logic.types import GameSession, Player, PlayerGroup, SettlementSnapshot
from scoreboard.settings import ScoreboardSettings
from shared.logging import bind_session_context, setup_logging


class HistoryExport(BaseModel):
    sessions: list[GameSession]
    players: list[Player]
    snapshots: list[SettlementSnapshot] = []


def settle(session_path: Path, *, split_pot: bool) -> None:
    session = GameSession.model_validate_json(session_path.read_text())
    bind_session_context(session.id)
    names = {p.id: p.name for p in session.players}

    settlements = redistribute_settlements(session) if split_pot else calculate_settlements(session)
    transfers = calculate_transfers(settlements)

    print(f"{session.title}  pot: {compute_pot_size(session):.2f}")
    print("=" * 60)
    for s in settlements:
        print(f"#{s.rank:<3} {names[s.player_id]:<24} {s.amount:+10.2f}")
    print()
    for t in transfers:
        print(f"{names[t.from_player_id]} -> {names[t.to_player_id]}: {t.amount:.2f}")

    house = house_balance(settlements)
    if house:
        print(f"House balance: {house:+.2f}")


def stats(history_path: Path, game_type: GameType, group_path: Path | None) -> None:
    export = HistoryExport.model_validate_json(history_path.read_text())
    group = PlayerGroup.model_validate_json(group_path.read_text()) if group_path else None

    rows = calculate_player_stats(export.sessions, export.players, game_type, group, export.snapshots)
    print(f"{'Player':<24} {'1st':>4} {'2nd':>4} {'3rd':>4} {'Pod':>4} {'Won':>5} {'Hat':>4} {'GP':>4}")
    print("=" * 60)
    for row in rows:
        print(
            f"{row.player_name:<24} {row.first_place:>4} {row.second_place:>4} {row.third_place:>4} "
            f"{row.total_podiums:>4} {row.rounds_won:>5} {row.hat_tricks:>4} {row.total_matches:>4}"
        )


def main() -> None:
    settings = ScoreboardSettings()
    setup_logging()

    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    commands = parser.add_subparsers(dest="command", required=True)

    settle_parser = commands.add_parser("settle", help="print settlement and transfers for one session")
    settle_parser.add_argument("session", type=Path)
    settle_parser.add_argument("--split-pot", action="store_true", help="split the remaining pot among active players")

    stats_parser = commands.add_parser("stats", help="print the leaderboard for a game type")
    stats_parser.add_argument("history", type=Path)
    stats_parser.add_argument("--game-type", type=GameType, default=settings.default_game_type)
    stats_parser.add_argument("--group", type=Path, default=None)

    args = parser.parse_args()
    if args.command == "settle":
        settle(args.session, split_pot=args.split_pot)
    else:
        stats(args.history, args.game_type, args.group)


if __name__ == "__main__":
    main()
