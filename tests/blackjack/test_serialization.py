"""Tests for table serialization."""

import json
from random import Random

import pytest

from blackjack.cards import Card, Rank, Suit
from blackjack.game import BlackjackTable, RoundPhase
from blackjack.game.serialization import (
    deserialize_card,
    deserialize_hand,
    deserialize_table,
    serialize_card,
    serialize_hand,
    serialize_table,
)
from blackjack.strategy import TableRules

from conftest import hand_of, stack_shoe


def round_trip(table, **kwargs):
    return deserialize_table(json.loads(json.dumps(serialize_table(table))), **kwargs)


class TestCardsAndHands:
    def test_card(self):
        card = Card(Rank.TEN, Suit.HEARTS)
        assert serialize_card(card) == {"rank": "10", "suit": "Hearts"}
        assert deserialize_card(serialize_card(card)) == card

    def test_hand_rebuilds_soft_ace(self):
        hand = hand_of("AS", "6H", chips=80)
        hand.place_bet(30)

        restored = deserialize_hand(serialize_hand(hand))

        assert restored.cards == hand.cards
        assert restored.value == 17
        assert restored.usable_ace
        assert restored.chips == 50
        assert restored.bet == 30


class TestTable:
    def test_new_table(self, table):
        restored = round_trip(table)

        assert restored.phase is RoundPhase.IDLE
        assert restored.snapshot() == table.snapshot()
        assert list(restored.shoe) == list(table.shoe)

    def test_mid_round_resumes_identically(self, table):
        """Test a restored table plays the rest of the round the same way."""
        stack_shoe(table, "10S", "10H", "8D", "10C", "3D")
        table.place_bet(25)
        restored = round_trip(table, policy=table.policy)

        assert restored.phase is RoundPhase.PLAYER_TURN
        assert restored.snapshot() == table.snapshot()

        assert restored.hit() == table.hit()
        if table.phase is RoundPhase.PLAYER_TURN:
            assert restored.stay() == table.stay()
        assert restored.phase is table.phase

    def test_records_survive(self, table):
        stack_shoe(table, "10S", "10H", "9D", "10C", "6D", "8C")
        table.place_bet(100)
        table.stay()

        restored = round_trip(table)

        assert restored.phase is RoundPhase.GAME_OVER
        assert restored.high_score == 150
        assert restored.winner == "Agent"
        assert restored.last_standing == "Agent"
        assert restored.messages == {"Agent": "Win!", "Player": "Lose"}

    def test_restored_table_accepts_commands(self, table):
        stack_shoe(table, "10S", "10H", "8D", "10C", "KD", "7S")
        table.place_bet(10)
        table.stay()

        restored = round_trip(table)
        restored.next_round()

        assert restored.phase is RoundPhase.IDLE
        assert restored.player.chips == 110

    def test_rules_survive(self):
        rules = TableRules(num_decks=2, starting_chips=500, dealer_stand_threshold=18)
        table = BlackjackTable(rules=rules, rng=Random(1))

        restored = round_trip(table)

        assert restored.rules == rules
        assert restored.shoe.total_cards == 104
        assert restored.player.chips == 500

    def test_unknown_phase_raises(self, table):
        data = serialize_table(table)
        data["phase"] = "SHUFFLING"

        with pytest.raises(ValueError, match="Unknown table phase"):
            deserialize_table(data)
