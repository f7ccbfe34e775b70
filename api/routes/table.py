"""Table API endpoints."""

import logging
from typing import Annotated, Callable

from fastapi import APIRouter, Header, HTTPException

from api.schemas import (
    BetRequest,
    CardResponse,
    NewTableResponse,
    SeatResponse,
    TableStateResponse,
)
from api.session import get_table_store, new_table_token, resolve_table_id
from blackjack.cards import Card
from blackjack.errors import IllegalCommand, InvalidBet
from blackjack.game import BlackjackTable, TableSnapshot
from blackjack.game.serialization import deserialize_table, serialize_table
from blackjack.game.snapshot import SeatSnapshot
from blackjack.strategy import PolicyTable, basic_policy
from config import config

logger = logging.getLogger(__name__)

router = APIRouter()

TableIdHeader = Annotated[str, Header(alias="X-Table-ID")]

_policy: PolicyTable | None = None


def get_policy() -> PolicyTable:
    """
    Load the agent policy once per process.

    Reads the trained policy file when one is configured, otherwise falls
    back to the built-in hit/stand chart.
    """
    global _policy
    if _policy is None:
        if config.policy.path:
            _policy = PolicyTable.load(config.policy.path)
            if not _policy.is_loaded:
                logger.warning("Policy file %s is empty, the agent will always stand", config.policy.path)
        else:
            logger.info("No POLICY_PATH configured, using the basic hit/stand chart")
            _policy = basic_policy()
    return _policy


async def _load_table(token: str) -> tuple[str, BlackjackTable]:
    """Resolve a table token and restore its table."""
    table_id = resolve_table_id(token)
    if table_id is None:
        raise HTTPException(status_code=404, detail="Unknown table")

    store = await get_table_store()
    data = await store.load(table_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Unknown table")
    return table_id, deserialize_table(data, policy=get_policy())


async def _save_table(table_id: str, table: BlackjackTable) -> None:
    store = await get_table_store()
    await store.save(table_id, serialize_table(table))


def _card_response(card: Card) -> CardResponse:
    return CardResponse(rank=str(card.rank), suit=card.suit.value, value=card.value)


def _seat_response(seat: SeatSnapshot) -> SeatResponse:
    return SeatResponse(
        name=seat.name,
        cards=[_card_response(c) for c in seat.cards],
        value=seat.value,
        usable_ace=seat.usable_ace,
        is_busted=seat.is_busted,
        chips=seat.chips,
        bet=seat.bet,
        message=seat.message,
    )


def _state_response(snapshot: TableSnapshot) -> TableStateResponse:
    """Convert a table snapshot to a response."""
    return TableStateResponse(
        phase=snapshot.phase.name,
        dealer=_seat_response(snapshot.dealer),
        agent=_seat_response(snapshot.agent),
        player=_seat_response(snapshot.player),
        game_over=snapshot.game_over,
        winner=snapshot.winner,
        high_score=snapshot.high_score,
        last_standing=snapshot.last_standing,
        shoe_remaining=snapshot.shoe_remaining,
        can_bet=snapshot.can_bet,
        can_hit=snapshot.can_hit,
        can_stay=snapshot.can_stay,
        can_start_next_round=snapshot.can_start_next_round,
    )


async def _run_command(
    token: str,
    command: Callable[[BlackjackTable], TableSnapshot],
) -> TableStateResponse:
    """Apply a command to a stored table and persist the result."""
    table_id, table = await _load_table(token)

    try:
        snapshot = command(table)
    except InvalidBet as exc:
        raise HTTPException(status_code=400, detail=exc.reason) from exc
    except IllegalCommand as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    await _save_table(table_id, table)
    return _state_response(snapshot)


@router.post("/new")
async def new_table() -> NewTableResponse:
    """Create a new table."""
    token = new_table_token()
    table = BlackjackTable(rules=config.table.to_rules(), policy=get_policy())
    await _save_table(resolve_table_id(token), table)
    return NewTableResponse(table_id=token)


@router.get("/state")
async def get_state(table_token: TableIdHeader) -> TableStateResponse:
    """Get current table state."""
    _, table = await _load_table(table_token)
    return _state_response(table.snapshot())


@router.post("/bet")
async def place_bet(request: BetRequest, table_token: TableIdHeader) -> TableStateResponse:
    """Place the player's bet and play up to the player's turn."""
    return await _run_command(table_token, lambda table: table.place_bet(request.amount))


@router.post("/hit")
async def hit(table_token: TableIdHeader) -> TableStateResponse:
    """Player takes another card."""
    return await _run_command(table_token, lambda table: table.hit())


@router.post("/stay")
async def stay(table_token: TableIdHeader) -> TableStateResponse:
    """Player stays; the dealer plays and the round is scored."""
    return await _run_command(table_token, lambda table: table.stay())


@router.post("/next-round")
async def next_round(table_token: TableIdHeader) -> TableStateResponse:
    """Clear the finished round."""
    return await _run_command(table_token, lambda table: table.next_round())


@router.post("/restart")
async def restart(table_token: TableIdHeader) -> TableStateResponse:
    """Start a new game at this table."""
    return await _run_command(table_token, lambda table: table.restart())
