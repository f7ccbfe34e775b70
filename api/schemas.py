"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field


class BetRequest(BaseModel):
    """Request to place a bet."""

    # Range checks happen in the engine so rejections carry its reason
    amount: int = Field(..., description="Bet amount in chips")


class NewTableResponse(BaseModel):
    """Handle for a freshly created table."""

    table_id: str


class CardResponse(BaseModel):
    """Card representation."""

    rank: str
    suit: str
    value: int


class SeatResponse(BaseModel):
    """One seat at the table."""

    name: str
    cards: list[CardResponse]
    value: int
    usable_ace: bool
    is_busted: bool
    chips: int
    bet: int
    message: str


class TableStateResponse(BaseModel):
    """Current table state."""

    phase: str
    dealer: SeatResponse
    agent: SeatResponse
    player: SeatResponse
    game_over: bool
    winner: str | None
    high_score: int
    last_standing: str | None
    shoe_remaining: int
    can_bet: bool
    can_hit: bool
    can_stay: bool
    can_start_next_round: bool
