"""牌定义测试"""
import random
from collections import Counter

import pytest

from core.cards import (
    CARD_VALUES,
    JOKER,
    JOKER_SUIT,
    RANKS,
    SUITS,
    Card,
    cards_to_str,
    create_deck,
    make_card,
)


class TestCardValues:
    """牌值语义测试"""

    def test_start_cards(self):
        starters = {rank for rank, info in CARD_VALUES.items() if info.can_start}
        assert starters == {'A', 'J', 'Q', 'K'}

    def test_face_values(self):
        assert CARD_VALUES['A'].value == 1
        assert CARD_VALUES['10'].value == 10
        assert CARD_VALUES['J'].value == 11
        assert CARD_VALUES['Q'].value == 12
        assert CARD_VALUES['K'].value == 13

    def test_eight_moves_backward(self):
        info = CARD_VALUES['8']
        assert info.backward
        assert info.signed_value == -8

    def test_split_cards(self):
        assert CARD_VALUES['7'].can_split
        assert not CARD_VALUES['7'].must_split
        assert CARD_VALUES['9'].must_split

    def test_joker(self):
        info = CARD_VALUES[JOKER]
        assert info.is_joker
        assert info.value == 0


class TestCard:
    """Card 测试"""

    def test_make_card_id(self):
        card = make_card('A', '♥', deck=1)
        assert card.id == 'A♥1'
        assert card.info.can_start

    def test_make_joker(self):
        card = make_card(JOKER)
        assert card.is_joker
        assert card.suit == JOKER_SUIT
        assert str(card) == JOKER_SUIT

    def test_str(self):
        assert str(make_card('10', '♣')) == '10♣'

    def test_unknown_rank(self):
        with pytest.raises(ValueError):
            Card('1', '♠', '1♠0')

    def test_same_face_different_id(self):
        assert make_card('5', '♠', 0) != make_card('5', '♠', 1)

    def test_cards_to_str(self):
        assert cards_to_str([make_card('A'), make_card('7', '♥')]) == 'A♠ 7♥'


class TestCreateDeck:
    """牌组测试"""

    def test_size(self):
        assert len(create_deck()) == 108

    def test_unique_ids(self):
        deck = create_deck()
        assert len({card.id for card in deck}) == 108

    def test_composition(self):
        deck = create_deck()
        counts = Counter((card.rank, card.suit) for card in deck if not card.is_joker)
        assert len(counts) == len(RANKS) * len(SUITS)
        assert set(counts.values()) == {2}
        assert sum(1 for card in deck if card.is_joker) == 4

    def test_joker_ids(self):
        ids = {card.id for card in create_deck() if card.is_joker}
        assert ids == {'JOKER1_0', 'JOKER2_0', 'JOKER1_1', 'JOKER2_1'}

    def test_seeded_shuffle(self):
        assert create_deck(random.Random(5)) == create_deck(random.Random(5))
