"""Blackjack table engine with state machine."""

import logging
from random import Random
from typing import Callable

from transitions import Machine

from blackjack.betting import agent_bet_amount, validate_bet
from blackjack.cards import Card, Shoe
from blackjack.errors import IllegalCommand, InvalidBet
from blackjack.game.events import EventEmitter, EventType, GameEvent
from blackjack.game.snapshot import SeatSnapshot, TableSnapshot
from blackjack.game.state import RoundPhase
from blackjack.hand import Hand, Outcome, compare
from blackjack.strategy.policy import Action, PolicyTable
from blackjack.strategy.rules import TableRules, dealer_should_hit

logger = logging.getLogger(__name__)

DEALER = "Dealer"
AGENT = "Agent"
PLAYER = "Player"

_OUTCOME_EVENTS = {
    Outcome.WIN: EventType.SEAT_WINS,
    Outcome.PUSH: EventType.PUSH,
    Outcome.LOSE: EventType.SEAT_LOSES,
}


class BlackjackTable:
    """
    A table where a human player and a policy-driven agent face the dealer.

    This is the core game logic, completely UI-agnostic. Every command runs
    its transition and any automatic phases that follow it (dealing, the
    agent's turn, the dealer's turn, scoring) before returning, so the table
    is always observed at a phase that waits for a command.

    The event history covers the current round only; subscribers see every
    event as it is emitted.
    """

    # State machine states
    STATES = [p.name.lower() for p in RoundPhase]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "open_betting", "source": "idle", "dest": "betting"},
        {"trigger": "start_dealing", "source": "betting", "dest": "dealing"},
        {"trigger": "start_agent_turn", "source": "dealing", "dest": "agent_turn"},
        {"trigger": "start_player_turn", "source": "agent_turn", "dest": "player_turn"},
        {"trigger": "player_action", "source": "player_turn", "dest": "player_turn"},
        {"trigger": "start_dealer_turn", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "start_scoring", "source": "dealer_turn", "dest": "scoring"},
        {"trigger": "finish_round", "source": "scoring", "dest": "round_over"},
        {"trigger": "end_game", "source": "scoring", "dest": "game_over"},
        {"trigger": "reset_round", "source": "round_over", "dest": "idle"},
        {"trigger": "reset_table", "source": "*", "dest": "idle"},
    ]

    def __init__(
        self,
        rules: TableRules | None = None,
        policy: PolicyTable | None = None,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a new table.

        Args:
            rules: Table rules (uses defaults if not provided)
            policy: Agent policy; an empty table makes the agent always stand
            rng: Random number generator for reproducible shoes
        """
        self.rules = rules or TableRules()
        self.policy = policy if policy is not None else PolicyTable()
        self._rng = rng or Random()
        self.events = EventEmitter()

        self.shoe = Shoe(num_decks=self.rules.num_decks, rng=self._rng)
        self.dealer = Hand()
        self.agent = Hand(chips=self.rules.starting_chips)
        self.player = Hand(chips=self.rules.starting_chips)
        self.messages: dict[str, str] = {AGENT: "", PLAYER: ""}

        self.high_score = 0
        self.winner: str | None = None
        self.last_standing: str | None = None

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="idle",
            auto_transitions=False,
            model_attribute="_machine_state",
            after_state_change="_log_phase",
        )

    @property
    def phase(self) -> RoundPhase:
        """Get current phase as enum."""
        return RoundPhase[self._machine_state.upper()]  # type: ignore

    @property
    def game_over(self) -> bool:
        return self.phase is RoundPhase.GAME_OVER

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to table events."""
        self.events.subscribe(handler, event_type)

    # Commands

    def place_bet(self, amount: int) -> TableSnapshot:
        """
        Stake the player's bet, size the agent's, and play up to the
        player's turn.

        Args:
            amount: Player bet in chips

        Raises:
            IllegalCommand: If the table is not waiting for a bet
            InvalidBet: If the amount is rejected; nothing is changed
        """
        self._require("bet", RoundPhase.IDLE)

        reason = validate_bet(amount, self.player.chips)
        if reason is not None:
            self.events.emit_new(EventType.INVALID_BET, amount=amount, reason=reason)
            raise InvalidBet(reason, amount)

        self.open_betting()
        self.player.place_bet(amount)
        self.agent.place_bet(
            agent_bet_amount(
                self.agent.chips,
                self.rules.agent_bet_fraction,
                self.rules.agent_bet_round_up,
            )
        )
        self.events.emit_new(EventType.BET_PLACED, seat=PLAYER, amount=self.player.bet)
        self.events.emit_new(EventType.BET_PLACED, seat=AGENT, amount=self.agent.bet)

        self.start_dealing()
        self._deal_initial_cards()

        self.start_agent_turn()
        self._play_agent()

        self.start_player_turn()
        return self.snapshot()

    def hit(self) -> TableSnapshot:
        """Player takes another card; a bust ends the player's turn."""
        self._require("hit", RoundPhase.PLAYER_TURN)

        self._deal_card(self.player, PLAYER)
        self.events.emit_new(EventType.PLAYER_HIT, hand_value=self.player.value)

        if self.player.is_busted:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_value=self.player.value)
            self._finish_player_turn()
        else:
            self.player_action()
        return self.snapshot()

    def stay(self) -> TableSnapshot:
        """Player keeps the current hand."""
        self._require("stay", RoundPhase.PLAYER_TURN)

        self.events.emit_new(EventType.PLAYER_STAY, hand_value=self.player.value)
        self._finish_player_turn()
        return self.snapshot()

    def next_round(self) -> TableSnapshot:
        """Clear the finished round and wait for the next bet."""
        self._require("start the next round", RoundPhase.ROUND_OVER)

        self.events.clear_history()
        self.dealer.clear()
        self.agent.clear()
        self.player.clear()
        self.messages = {AGENT: "", PLAYER: ""}

        if self.shoe.should_replenish(self.rules.replenish_threshold):
            remaining = self.shoe.cards_remaining
            self.shoe.rebuild()
            logger.debug("Shoe replenished with %d cards left", remaining)
            self.events.emit_new(
                EventType.SHOE_REPLENISHED,
                cards_discarded=remaining,
                cards_remaining=self.shoe.cards_remaining,
            )

        self.reset_round()
        return self.snapshot()

    def restart(self) -> TableSnapshot:
        """Start a new game: fresh shoe, hands, balances and records."""
        self.events.clear_history()
        self.shoe = Shoe(num_decks=self.rules.num_decks, rng=self._rng)
        self.dealer = Hand()
        self.agent = Hand(chips=self.rules.starting_chips)
        self.player = Hand(chips=self.rules.starting_chips)
        self.messages = {AGENT: "", PLAYER: ""}

        self.high_score = 0
        self.winner = None
        self.last_standing = None

        self.reset_table()
        self.events.emit_new(EventType.TABLE_RESTARTED, starting_chips=self.rules.starting_chips)
        return self.snapshot()

    def snapshot(self) -> TableSnapshot:
        """Return a read-only view of the table."""
        return TableSnapshot(
            phase=self.phase,
            dealer=SeatSnapshot.of(DEALER, self.dealer),
            agent=SeatSnapshot.of(AGENT, self.agent, self.messages[AGENT]),
            player=SeatSnapshot.of(PLAYER, self.player, self.messages[PLAYER]),
            game_over=self.game_over,
            winner=self.winner,
            high_score=self.high_score,
            last_standing=self.last_standing,
            shoe_remaining=self.shoe.cards_remaining,
        )

    # Automatic phases

    def _deal_initial_cards(self) -> None:
        """Deal one card to the dealer, then two each to agent and player."""
        self._deal_card(self.dealer, DEALER)
        self._deal_card(self.agent, AGENT)
        self._deal_card(self.agent, AGENT)
        self._deal_card(self.player, PLAYER)
        self._deal_card(self.player, PLAYER)

        self.events.emit_new(EventType.ROUND_STARTED, dealer_upcard=self.dealer.value)

    def _play_agent(self) -> None:
        """Agent draws until its policy stands or it busts."""
        while not self.agent.is_busted:
            action = self.policy.decide(
                self.dealer.value,
                self.agent.value,
                self.agent.usable_ace,
            )
            if action is not Action.HIT:
                self.events.emit_new(EventType.AGENT_STANDS, hand_value=self.agent.value)
                return

            self._deal_card(self.agent, AGENT)
            self.events.emit_new(EventType.AGENT_HITS, hand_value=self.agent.value)

        self.events.emit_new(EventType.AGENT_BUSTS, hand_value=self.agent.value)

    def _finish_player_turn(self) -> None:
        self.start_dealer_turn()
        self._play_dealer()
        self.start_scoring()
        self._score_round()

    def _play_dealer(self) -> None:
        """Dealer hits below the stand threshold."""
        while dealer_should_hit(self.dealer.value, self.rules.dealer_stand_threshold):
            self._deal_card(self.dealer, DEALER)
            self.events.emit_new(EventType.DEALER_HITS, hand_value=self.dealer.value)

        if self.dealer.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS, hand_value=self.dealer.value)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer.value)

    def _score_round(self) -> None:
        """Settle both seats against the dealer and check for game over."""
        for seat, hand in ((PLAYER, self.player), (AGENT, self.agent)):
            outcome = compare(hand.value, self.dealer.value)
            bet = hand.bet
            credited = hand.settle(outcome)
            self.messages[seat] = outcome.message
            self.events.emit_new(
                _OUTCOME_EVENTS[outcome],
                seat=seat,
                bet=bet,
                credited=credited,
                net=credited - bet,
                chips=hand.chips,
            )

        self._update_high_score()
        self.events.emit_new(
            EventType.ROUND_ENDED,
            player_chips=self.player.chips,
            agent_chips=self.agent.chips,
        )

        if self.player.chips <= 0 or self.agent.chips <= 0:
            self.last_standing = self._last_standing()
            logger.info("Game over, last standing: %s", self.last_standing)
            self.events.emit_new(
                EventType.GAME_ENDED,
                last_standing=self.last_standing,
                winner=self.winner,
                high_score=self.high_score,
            )
            self.end_game()
            return

        self.finish_round()

    def _update_high_score(self) -> None:
        for seat, hand in ((AGENT, self.agent), (PLAYER, self.player)):
            if hand.chips > self.high_score:
                self.high_score = hand.chips
                self.winner = seat
                self.events.emit_new(EventType.HIGH_SCORE, seat=seat, chips=hand.chips)

    def _last_standing(self) -> str | None:
        if self.player.chips <= 0 and self.agent.chips <= 0:
            return None
        return AGENT if self.player.chips <= 0 else PLAYER

    # Helpers

    def _deal_card(self, hand: Hand, seat: str) -> Card:
        """Deal a card from the shoe to a hand."""
        card = self.shoe.draw()
        hand.add_card(card)
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card),
            seat=seat,
            hand_value=hand.value,
        )
        return card

    def _require(self, command: str, phase: RoundPhase) -> None:
        """Reject ``command`` unless the table is in ``phase``."""
        if self.phase is not phase:
            self.events.emit_new(
                EventType.INVALID_ACTION,
                command=command,
                phase=self.phase.name,
            )
            raise IllegalCommand(command, self.phase)

    def _log_phase(self) -> None:
        logger.debug("Table entered %s", self.phase.name)
