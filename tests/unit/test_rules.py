"""规则引擎测试"""
import pytest

from core.board import START, Home, Track, initial_pegs, replace_peg
from core.cards import CARD_VALUES, JOKER, make_card
from core.rules import IllegalMoveError, RuleEngine, describe_move, describe_split


def board(placements):
    """{(player, peg_index): peg} -> 棋盘，其余棋子在起点区"""
    pegs = initial_pegs()
    for (player, peg_index), peg in placements.items():
        pegs = replace_peg(pegs, player, peg_index, peg)
    return pegs


ACE = make_card('A')
KING = make_card('K')
FIVE = make_card('5')
SEVEN = make_card('7')
EIGHT = make_card('8')
NINE = make_card('9')
JOKER_CARD = make_card(JOKER)


class TestResolveAmount:
    """步数解析测试"""

    def test_plain_card(self):
        assert RuleEngine.resolve_amount(CARD_VALUES['5'], None) == 5
        assert RuleEngine.resolve_amount(CARD_VALUES['5'], 5) == 5
        assert RuleEngine.resolve_amount(CARD_VALUES['5'], 3) is None

    def test_eight(self):
        assert RuleEngine.resolve_amount(CARD_VALUES['8'], None) == -8
        assert RuleEngine.resolve_amount(CARD_VALUES['8'], 8) is None

    def test_seven(self):
        info = CARD_VALUES['7']
        assert RuleEngine.resolve_amount(info, None) == 7
        assert RuleEngine.resolve_amount(info, 3) == 3
        assert RuleEngine.resolve_amount(info, 0) is None
        assert RuleEngine.resolve_amount(info, 8) is None
        assert RuleEngine.resolve_amount(info, -2) is None

    def test_nine_requires_split(self):
        info = CARD_VALUES['9']
        assert RuleEngine.resolve_amount(info, None) is None
        assert RuleEngine.resolve_amount(info, 9) is None
        assert RuleEngine.resolve_amount(info, 0) is None
        assert RuleEngine.resolve_amount(info, 4) == 4
        assert RuleEngine.resolve_amount(info, -8) == -8


class TestStartMoves:
    """出场测试"""

    def test_ace_starts_to_come_out(self):
        plan = RuleEngine.plan_move(initial_pegs(), 0, 0, ACE)
        assert plan.destination == Track(8)
        assert plan.path == (Track(8),)
        assert plan.bumped is None

    def test_other_player_come_out(self):
        plan = RuleEngine.plan_move(initial_pegs(), 2, 4, KING)
        assert plan.destination == Track(44)

    def test_non_start_card(self):
        assert not RuleEngine.is_legal(initial_pegs(), 0, 0, FIVE)
        assert not RuleEngine.is_legal(initial_pegs(), 0, 0, SEVEN)

    def test_blocked_by_own_peg(self):
        pegs = board({(0, 1): Track(8)})
        assert not RuleEngine.is_legal(pegs, 0, 0, ACE)

    def test_bumps_opponent_on_come_out(self):
        pegs = board({(1, 0): Track(8)})
        new_pegs, bumped = RuleEngine.execute(pegs, 0, 0, KING)
        assert bumped
        assert new_pegs[0][0] == Track(8)
        assert new_pegs[1][0] == START


class TestTrackMoves:
    """赛道移动测试"""

    def test_forward(self):
        pegs = board({(0, 0): Track(20)})
        plan = RuleEngine.plan_move(pegs, 0, 0, FIVE)
        assert plan.destination == Track(25)
        assert plan.path == tuple(Track(p) for p in range(21, 26))

    def test_eight_backward(self):
        pegs = board({(0, 0): Track(70)})
        new_pegs, bumped = RuleEngine.execute(pegs, 0, 0, EIGHT)
        assert new_pegs[0][0] == Track(62)
        assert not bumped

    def test_backward_wraps(self):
        pegs = board({(0, 0): Track(5)})
        plan = RuleEngine.plan_move(pegs, 0, 0, EIGHT)
        assert plan.destination == Track(69)

    def test_backward_never_enters_home(self):
        pegs = board({(0, 0): Track(10)})
        plan = RuleEngine.plan_move(pegs, 0, 0, EIGHT)
        assert plan.destination == Track(2)

    def test_forward_wraps(self):
        pegs = board({(1, 0): Track(70)})
        plan = RuleEngine.plan_move(pegs, 1, 0, FIVE)
        assert plan.destination == Track(3)

    def test_cannot_land_on_own_peg(self):
        pegs = board({(0, 0): Track(10), (0, 1): Track(15)})
        assert not RuleEngine.is_legal(pegs, 0, 0, FIVE)

    def test_cannot_jump_own_peg(self):
        pegs = board({(0, 0): Track(10), (0, 1): Track(12)})
        assert not RuleEngine.is_legal(pegs, 0, 0, FIVE)

    def test_jumps_opponent_and_bumps_on_landing(self):
        pegs = board({(0, 0): Track(10), (1, 0): Track(12), (1, 1): Track(15)})
        plan = RuleEngine.plan_move(pegs, 0, 0, FIVE)
        assert plan.destination == Track(15)
        assert plan.bumped == (1, 1)

        new_pegs = RuleEngine.apply_plan(pegs, plan)
        assert new_pegs[1][1] == START
        assert new_pegs[1][0] == Track(12)

    def test_execute_illegal_raises(self):
        pegs = board({(0, 0): Track(10), (0, 1): Track(15)})
        with pytest.raises(IllegalMoveError):
            RuleEngine.execute(pegs, 0, 0, FIVE)

    def test_invalid_peg_index(self):
        with pytest.raises(ValueError):
            RuleEngine.plan_move(initial_pegs(), 0, 5, ACE)


class TestHomeEntry:
    """进入终点区测试"""

    def test_exact_entry_slot_zero(self):
        pegs = board({(0, 0): Track(2)})
        plan = RuleEngine.plan_move(pegs, 0, 0, make_card('2'))
        assert plan.destination == Home(0)

    def test_entry_path(self):
        pegs = board({(0, 0): Track(2)})
        plan = RuleEngine.plan_move(pegs, 0, 0, make_card('3'))
        assert plan.destination == Home(1)
        assert plan.path == (Track(3), Home(0), Home(1))

    def test_entry_to_last_slot(self):
        pegs = board({(0, 0): Track(2)})
        plan = RuleEngine.plan_move(pegs, 0, 0, make_card('6'))
        assert plan.destination == Home(4)

    def test_overshoot_continues_on_track(self):
        pegs = board({(0, 0): Track(2)})
        plan = RuleEngine.plan_move(pegs, 0, 0, make_card('10'))
        assert plan.destination == Track(12)

    def test_occupied_slot_continues_on_track(self):
        pegs = board({(0, 0): Track(2), (0, 1): Home(1)})
        plan = RuleEngine.plan_move(pegs, 0, 0, make_card('3'))
        assert plan.destination == Track(5)

    def test_cannot_jump_home_peg(self):
        pegs = board({(0, 0): Track(2), (0, 1): Home(1)})
        plan = RuleEngine.plan_move(pegs, 0, 0, make_card('4'))
        assert plan.destination == Track(6)

    def test_entry_across_wrap(self):
        pegs = board({(0, 0): Track(70)})
        plan = RuleEngine.plan_move(pegs, 0, 0, make_card('6'))
        assert plan.destination == Home(0)
        assert plan.path == (Track(71), Track(0), Track(1), Track(2), Track(3), Home(0))

    def test_only_own_home(self):
        # 玩家 1 经过玩家 0 的入口时不会进入
        pegs = board({(1, 0): Track(2)})
        plan = RuleEngine.plan_move(pegs, 1, 0, make_card('3'))
        assert plan.destination == Track(5)


class TestHomeMoves:
    """终点区内移动测试"""

    def test_forward_within_home(self):
        pegs = board({(0, 0): Home(0)})
        plan = RuleEngine.plan_move(pegs, 0, 0, make_card('3'))
        assert plan.destination == Home(3)
        assert plan.path == (Home(1), Home(2), Home(3))

    def test_exact_fit_only(self):
        pegs = board({(0, 0): Home(0)})
        assert not RuleEngine.is_legal(pegs, 0, 0, FIVE)

    def test_cannot_jump_in_home(self):
        pegs = board({(0, 0): Home(0), (0, 1): Home(2)})
        assert not RuleEngine.is_legal(pegs, 0, 0, make_card('3'))
        assert RuleEngine.is_legal(pegs, 0, 0, ACE)

    def test_backward_and_nine_illegal(self):
        pegs = board({(0, 0): Home(2)})
        assert not RuleEngine.is_legal(pegs, 0, 0, EIGHT)
        assert not RuleEngine.is_legal(pegs, 0, 0, NINE, 1)

    def test_seven_split_amount_in_home(self):
        pegs = board({(0, 0): Home(0)})
        assert RuleEngine.is_legal(pegs, 0, 0, SEVEN, 2)
        assert not RuleEngine.is_legal(pegs, 0, 0, SEVEN)

    def test_joker_illegal(self):
        pegs = board({(0, 0): Home(0), (1, 0): Track(30)})
        assert not RuleEngine.is_legal(pegs, 0, 0, JOKER_CARD)


class TestJoker:
    """Joker 测试"""

    def test_from_start(self):
        pegs = board({(2, 1): Track(30)})
        plan = RuleEngine.plan_move(pegs, 0, 0, JOKER_CARD, target=(2, 1))
        assert plan.destination == Track(30)
        assert plan.bumped == (2, 1)

    def test_from_track(self):
        pegs = board({(0, 0): Track(40), (3, 0): Track(10)})
        new_pegs, bumped = RuleEngine.execute(pegs, 0, 0, JOKER_CARD, target=(3, 0))
        assert bumped
        assert new_pegs[0][0] == Track(10)
        assert new_pegs[3][0] == START

    def test_default_target_is_first_opponent(self):
        pegs = board({(3, 0): Track(10), (1, 2): Track(50)})
        plan = RuleEngine.plan_move(pegs, 0, 0, JOKER_CARD)
        assert plan.bumped == (1, 2)

    def test_no_target(self):
        pegs = board({(0, 1): Track(30)})
        assert not RuleEngine.is_legal(pegs, 0, 0, JOKER_CARD)

    def test_invalid_targets(self):
        pegs = board({(0, 1): Track(30), (1, 0): Track(40)})
        assert not RuleEngine.is_legal(pegs, 0, 0, JOKER_CARD, target=(0, 1))
        assert not RuleEngine.is_legal(pegs, 0, 0, JOKER_CARD, target=(1, 1))
        assert not RuleEngine.is_legal(pegs, 0, 0, JOKER_CARD, target=(5, 0))


class TestMovePath:
    """回放路径测试"""

    def test_illegal_path_empty(self):
        assert RuleEngine.move_path(initial_pegs(), 0, 0, FIVE) == ()

    def test_backward_path(self):
        pegs = board({(0, 0): Track(20)})
        path = RuleEngine.move_path(pegs, 0, 0, EIGHT)
        assert path == tuple(Track(p) for p in range(19, 11, -1))


class TestDescribeMove:
    """动作描述测试"""

    def test_start(self):
        assert describe_move(START, Track(8), ACE) == "Started a peg"

    def test_track(self):
        assert describe_move(Track(12), Track(19), SEVEN) == "Space 12 to Space 19"

    def test_home_entry(self):
        assert describe_move(Track(2), Home(1), make_card('3')) == "Space 2 to Home 1"

    def test_home(self):
        assert describe_move(Home(0), Home(3), make_card('3')) == "Home 0 to Home 3"

    def test_joker(self):
        assert describe_move(START, Track(30), JOKER_CARD, bumped_player=1) == "Joker bumped Blue"

    def test_fallback(self):
        assert describe_move(START, Track(30), JOKER_CARD) == "Moved"

    def test_split(self):
        assert describe_split("Space 1 to Space 4", "Space 9 to Space 13") == (
            "Split: Space 1 to Space 4, Space 9 to Space 13"
        )
