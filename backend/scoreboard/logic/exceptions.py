"""Typed domain exceptions for session lifecycle violations.

The analytic functions (totals, rankings, settlements, stats) never raise
on well-formed input. Only lifecycle operations that are asked to do
something impossible raise subclasses of ScoreboardError.
"""


class ScoreboardError(Exception):
    """Base exception for rejected session operations."""


class SessionEndedError(ScoreboardError):
    """Session has ended and no longer accepts rounds, rebuys, joins or edits."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"session {session_id} has ended")


class UnknownPlayerError(ScoreboardError):
    """Player id is not part of the session."""

    def __init__(self, player_id: str) -> None:
        self.player_id = player_id
        super().__init__(f"unknown player {player_id!r}")


class UnknownRoundError(ScoreboardError):
    """Round id is not part of the session."""

    def __init__(self, round_id: str) -> None:
        self.round_id = round_id
        super().__init__(f"unknown round {round_id!r}")


class DuplicatePlayerError(ScoreboardError):
    """Player id is already seated in the session."""


class InvalidRebuyError(ScoreboardError):
    """Rebuy requested for a player who is still in the game."""


class InvalidEditError(ScoreboardError):
    """Edit would give a join/rebuy adjustment round a second entry."""

    def __init__(self, round_id: str, player_id: str) -> None:
        self.round_id = round_id
        self.player_id = player_id
        super().__init__(f"round {round_id!r} is an adjustment for another player, cannot add {player_id!r}")
