"""
Money settlement for a finished (or in-progress) session.

Handles rank-based payouts from the pot, each player's net balance against
what they put in, the greedy transfer plan that clears those balances, and
the interactive "split pot" redistribution among players still in the game.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from scoreboard.logic.ranking import get_rankings
from scoreboard.logic.scoring import compute_pot_size
from scoreboard.logic.settings import resolve_num_winners
from scoreboard.logic.types import Settlement, Transfer

if TYPE_CHECKING:
    from scoreboard.logic.types import GameSession, PlayerRanking

logger = structlog.get_logger()

BALANCE_EPSILON = 0.01
MONEY_DECIMALS = 2

# fixed payouts in buy-ins for ranks below first, keyed by paid-position count
_RANK2_BUY_INS = {2: 1, 3: 2}
_RANK3_BUY_INS = 1


@dataclass
class _Balance:
    """Mutable working copy of a settlement used while matching transfers."""

    player_id: str
    amount: float


def total_invested(session: GameSession, player_id: str) -> float:
    """Initial buy-in plus one buy-in per rebuy."""
    return session.config.buy_in * (1 + session.rebuy_count(player_id))


def calculate_payouts(
    session: GameSession,
    rankings: list[PlayerRanking] | None = None,
) -> dict[str, float]:
    """
    Amount each player receives from the pot, keyed by player id in rank order.

    One paid position: the winner takes the pot. Two: second gets a buy-in
    back. Three or more: third gets one buy-in, second two, and in every case
    first takes what is left, floored at zero. Positions beyond the third are
    never paid. The floor only fires for rankings that name more paid ranks
    than the pot was funded for, never for a validated session.
    """
    if rankings is None:
        rankings = get_rankings(session)
    pot = compute_pot_size(session)
    buy_in = session.config.buy_in
    paid_positions = resolve_num_winners(session.config, len(session.players))

    by_rank = {r.rank: r.player_id for r in rankings}
    payouts = dict.fromkeys((r.player_id for r in rankings), 0.0)

    if paid_positions == 1:
        if 1 in by_rank:
            payouts[by_rank[1]] = pot
        return payouts

    fixed_total = 0.0
    if 2 in by_rank:
        rank2 = buy_in * _RANK2_BUY_INS[min(paid_positions, 3)]
        payouts[by_rank[2]] = rank2
        fixed_total += rank2
    if paid_positions >= 3 and 3 in by_rank:
        rank3 = buy_in * _RANK3_BUY_INS
        payouts[by_rank[3]] = rank3
        fixed_total += rank3

    if 1 in by_rank:
        remainder = pot - fixed_total
        if remainder < 0:
            logger.warning(
                "payout floor triggered",
                session_id=session.id,
                pot_size=pot,
                fixed_payouts=fixed_total,
                shortfall=round(-remainder, MONEY_DECIMALS),
            )
        payouts[by_rank[1]] = max(0.0, remainder)
    return payouts


def calculate_settlements(session: GameSession) -> list[Settlement]:
    """
    Net balance per player (payout minus total invested), sorted by rank.

    Balances sum to zero unless the first-place floor fired; see house_balance.
    """
    rankings = get_rankings(session)
    payouts = calculate_payouts(session, rankings)
    settlements = [
        Settlement(
            player_id=r.player_id,
            amount=payouts[r.player_id] - total_invested(session, r.player_id),
            rank=r.rank,
        )
        for r in rankings
    ]
    logger.debug(
        "settlements calculated",
        session_id=session.id,
        pot_size=compute_pot_size(session),
        paid_positions=resolve_num_winners(session.config, len(session.players)),
    )
    return settlements


def house_balance(settlements: list[Settlement]) -> float:
    """
    What the pot itself is left holding after all balances are paid.

    Zero for an ordinary settlement. Negative when the payout floor promised
    more than the pot held, i.e. the house would have to cover the gap.
    """
    return round(-sum(s.amount for s in settlements), MONEY_DECIMALS) + 0.0


def calculate_transfers(settlements: list[Settlement]) -> list[Transfer]:
    """
    Clear all balances with greedy debtor/creditor matching.

    The largest debtor pays the largest creditor as much as either side
    allows, then whichever side is settled moves on. Produces at most
    debtors + creditors - 1 transfers; not guaranteed globally minimal.
    Input settlements are left untouched.
    """
    balances = [_Balance(s.player_id, s.amount) for s in settlements]
    debtors = sorted((b for b in balances if b.amount < 0), key=lambda b: b.amount)
    creditors = sorted((b for b in balances if b.amount > 0), key=lambda b: -b.amount)

    transfers: list[Transfer] = []
    debtor_index = 0
    creditor_index = 0
    while debtor_index < len(debtors) and creditor_index < len(creditors):
        debtor = debtors[debtor_index]
        creditor = creditors[creditor_index]

        amount = min(abs(debtor.amount), creditor.amount)
        rounded = round(amount, MONEY_DECIMALS)
        if rounded > 0:
            transfers.append(Transfer(from_player_id=debtor.player_id, to_player_id=creditor.player_id, amount=rounded))

        debtor.amount += amount
        creditor.amount -= amount

        if abs(debtor.amount) < BALANCE_EPSILON:
            debtor_index += 1
        if abs(creditor.amount) < BALANCE_EPSILON:
            creditor_index += 1

    logger.debug(
        "transfers calculated",
        debtor_count=len(debtors),
        creditor_count=len(creditors),
        transfer_count=len(transfers),
    )
    return transfers


def redistribute_settlements(session: GameSession) -> list[Settlement]:
    """
    "Split pot": share what is left of the pot equally among active players.

    Players already out keep the payout their standard rank earned. The pot
    minus those payouts is divided evenly among everyone still in, who all
    share rank 1. With nobody active the standard settlement is returned.
    """
    standard = calculate_settlements(session)
    eliminated = set(session.eliminated_player_ids)
    active_ids = [pid for pid in session.player_ids if pid not in eliminated]
    if not active_ids:
        logger.info("split pot skipped, no active players", session_id=session.id)
        return standard

    earned_by_out_players = sum(
        s.amount + total_invested(session, s.player_id) for s in standard if s.player_id in eliminated
    )
    share = (compute_pot_size(session) - earned_by_out_players) / len(active_ids)

    redistributed = [
        Settlement(player_id=s.player_id, amount=share - total_invested(session, s.player_id), rank=1)
        if s.player_id not in eliminated
        else s
        for s in standard
    ]
    redistributed.sort(key=lambda s: s.rank)

    logger.info(
        "pot split among active players",
        session_id=session.id,
        active_count=len(active_ids),
        share=round(share, MONEY_DECIMALS),
    )
    return redistributed
