"""牌堆测试"""
import random

from core.cards import make_card
from core.deck import discard, draw_card


EMPTY_PILES = ((), (), (), ())


class TestDrawCard:
    """抽牌测试"""

    def test_draws_last_card(self):
        pile = (make_card('2'), make_card('3'), make_card('4'))
        card, new_pile, piles = draw_card(pile, EMPTY_PILES)
        assert card == make_card('4')
        assert new_pile == pile[:2]
        assert piles == EMPTY_PILES

    def test_reshuffle_when_empty(self):
        piles = ((make_card('2'), make_card('3')), (), (make_card('K'),), ())
        card, new_pile, new_piles = draw_card((), piles, random.Random(0))

        assert card is not None
        assert len(new_pile) == 2
        assert new_piles == EMPTY_PILES
        assert {card, *new_pile} == {make_card('2'), make_card('3'), make_card('K')}

    def test_nothing_left(self):
        card, new_pile, piles = draw_card((), EMPTY_PILES)
        assert card is None
        assert new_pile == ()


class TestDiscard:
    """弃牌测试"""

    def test_appends_to_player_pile(self):
        piles = discard(EMPTY_PILES, 2, make_card('A'))
        piles = discard(piles, 2, make_card('5'))
        assert piles[2] == (make_card('A'), make_card('5'))
        assert piles[0] == piles[1] == piles[3] == ()
