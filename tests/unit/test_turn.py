"""交互式回合控制测试"""
from dataclasses import replace
from itertools import count

from core.actions import Action
from core.board import START, Home, Track, initial_pegs, replace_peg
from core.cards import Card, JOKER, JOKER_SUIT
from core.state import GameState
from core.turn import YOUR_TURN, TurnController, TurnPhase

_ids = count()


def cards(*ranks):
    result = []
    for rank in ranks:
        suit = JOKER_SUIT if rank == JOKER else '♦'
        result.append(Card(rank, suit, f"{rank}{suit}c{next(_ids)}"))
    return tuple(result)


def board(placements):
    pegs = initial_pegs()
    for (player, peg_index), peg in placements.items():
        pegs = replace_peg(pegs, player, peg_index, peg)
    return pegs


def controller_for(pegs, hand):
    hands = (tuple(hand),) + tuple(cards('2', '3', '4', '5', '6', '10') for _ in range(3))
    state = GameState(
        pegs=pegs,
        hands=hands,
        draw_pile=cards(*(['5'] * 20)),
        discard_piles=((), (), (), ()),
    )
    return TurnController(state)


class TestSelection:
    """选牌选子测试"""

    def test_initial_phase(self):
        controller = TurnController(GameState.initial(seed=1))
        assert controller.phase == TurnPhase.AWAITING_CARD
        assert controller.message == YOUR_TURN
        assert not controller.is_ai_turn

    def test_peg_before_card(self):
        controller = controller_for(initial_pegs(), cards('A', '2', '3', '4', '5', '6'))
        assert not controller.select_peg(0)
        assert controller.message == "Select a card first."

    def test_card_index_out_of_range(self):
        controller = controller_for(initial_pegs(), cards('A', '2', '3', '4', '5', '6'))
        assert not controller.select_card(6)
        assert controller.phase == TurnPhase.AWAITING_CARD

    def test_play_ace(self):
        controller = controller_for(initial_pegs(), cards('A', '2', '3', '4', '5', '6'))
        assert controller.select_card(0)
        assert controller.phase == TurnPhase.AWAITING_PEG
        assert controller.select_peg(0)
        assert controller.state.pegs[0][0] == Track(8)
        assert controller.player == 1
        assert controller.is_ai_turn
        assert controller.message == "Blue is thinking..."

    def test_illegal_peg_keeps_state(self):
        controller = controller_for(initial_pegs(), cards('5', 'A', '2', '3', '4', '6'))
        state = controller.state
        controller.select_card(0)
        assert not controller.select_peg(0)
        assert controller.message == "Invalid move. Try again."
        assert controller.state is state


class TestSplit:
    """拆分交互测试"""

    def test_seven_split(self):
        pegs = board({(0, 0): Track(20), (0, 1): Track(40)})
        controller = controller_for(pegs, cards('7', '2', '3', '4', '5', '6'))

        controller.select_card(0)
        assert controller.select_peg(0, 3)
        assert controller.phase == TurnPhase.AWAITING_SPLIT_COMPLETION
        assert controller.message == "Move 4 spaces forward with another peg."
        # 预览已移动，提交前状态不变
        assert controller.pegs[0][0] == Track(23)
        assert controller.state.pegs[0][0] == Track(20)

        assert not controller.select_peg(0)
        assert controller.select_peg(1)
        assert controller.state.pegs[0][0] == Track(23)
        assert controller.state.pegs[0][1] == Track(44)
        assert controller.state.last_moves[0] == "Split: Space 20 to Space 23, Space 40 to Space 44"

    def test_full_seven(self):
        pegs = board({(0, 0): Track(20)})
        controller = controller_for(pegs, cards('7', '2', '3', '4', '5', '6'))
        controller.select_card(0)
        assert controller.select_peg(0)
        assert controller.state.pegs[0][0] == Track(27)

    def test_cancel_split(self):
        pegs = board({(0, 0): Track(20), (0, 1): Track(40)})
        controller = controller_for(pegs, cards('7', '2', '3', '4', '5', '6'))
        state = controller.state
        controller.select_card(0)
        controller.select_peg(0, 3)

        assert controller.cancel()
        assert controller.phase == TurnPhase.AWAITING_CARD
        assert controller.state is state
        assert controller.pegs == pegs

    def test_second_half_must_be_legal(self):
        # 只有一枚棋子在赛道上，第二段无处可走
        pegs = board({(0, 0): Track(20)})
        controller = controller_for(pegs, cards('7', '2', '3', '4', '5', '6'))
        controller.select_card(0)
        controller.select_peg(0, 3)
        assert not controller.complete_split(1)
        assert controller.message == "Invalid move for split. Try again."
        assert controller.phase == TurnPhase.AWAITING_SPLIT_COMPLETION

    def test_nine_requires_amount(self):
        pegs = board({(0, 0): Track(20), (0, 1): Track(40)})
        controller = controller_for(pegs, cards('9', '2', '3', '4', '5', '6'))
        controller.select_card(0)
        assert not controller.select_peg(0)
        assert controller.select_peg(0, 5)
        assert controller.message == "Move 4 spaces backward with another peg."
        assert controller.select_peg(1)
        assert controller.state.pegs[0][0] == Track(25)
        assert controller.state.pegs[0][1] == Track(36)

    def test_nine_on_home_peg(self):
        pegs = board({(0, 0): Home(0), (0, 1): Track(40)})
        controller = controller_for(pegs, cards('9', '2', '3', '4', '5', '6'))
        controller.select_card(0)
        assert not controller.select_peg(0, 1)
        assert "Cannot use 9 card" in controller.message

    def test_win_on_first_half(self):
        pegs = board({
            (0, 0): Home(1), (0, 1): Home(2), (0, 2): Home(3), (0, 3): Home(4), (0, 4): Track(2),
        })
        hand = cards('7', '2', '3', '4', '5', '6')
        controller = controller_for(pegs, hand)
        # 与 AI 枚举的获胜走法一致
        assert Action.split(hand[0], 4, 2) in controller.state.enumerate_legal_moves()

        controller.select_card(0)
        assert controller.select_peg(4, 2)
        assert controller.state.pegs[0][4] == Home(0)
        assert controller.state.winner == 0
        assert controller.phase == TurnPhase.FINISHED
        assert controller.message == "Yellow wins!"
        assert not controller.select_card(0)


class TestJoker:
    """Joker 交互测试"""

    def test_bump(self):
        pegs = board({(1, 0): Track(30)})
        controller = controller_for(pegs, cards(JOKER, '2', '3', '4', '5', '6'))
        controller.select_card(0)
        assert controller.select_peg(0)
        assert controller.phase == TurnPhase.AWAITING_JOKER_TARGET

        assert controller.select_joker_target(1, 0)
        assert controller.state.pegs[0][0] == Track(30)
        assert controller.state.pegs[1][0] == START
        assert controller.state.last_moves[0] == "Joker bumped Blue"

    def test_own_peg_cancels(self):
        pegs = board({(1, 0): Track(30)})
        controller = controller_for(pegs, cards(JOKER, '2', '3', '4', '5', '6'))
        controller.select_card(0)
        controller.select_peg(0)
        assert not controller.select_joker_target(0, 1)
        assert controller.phase == TurnPhase.AWAITING_CARD
        assert controller.message == "Joker cancelled. Select a card and peg to move."

    def test_target_must_be_on_track(self):
        pegs = board({(1, 0): Track(30)})
        controller = controller_for(pegs, cards(JOKER, '2', '3', '4', '5', '6'))
        controller.select_card(0)
        controller.select_peg(0)
        assert not controller.select_joker_target(1, 1)
        assert not controller.select_joker_target(1, 9)
        assert controller.phase == TurnPhase.AWAITING_JOKER_TARGET

    def test_reselect_card_leaves_joker_mode(self):
        pegs = board({(1, 0): Track(30)})
        controller = controller_for(pegs, cards(JOKER, 'A', '3', '4', '5', '6'))
        controller.select_card(0)
        controller.select_peg(0)
        assert controller.select_card(1)
        assert controller.phase == TurnPhase.AWAITING_PEG


class TestDiscard:
    """弃牌交互测试"""

    def test_cannot_discard_with_legal_move(self):
        controller = controller_for(initial_pegs(), cards('A', '2', '3', '4', '5', '6'))
        assert not controller.can_discard()
        assert not controller.discard(1)

    def test_stuck_discard(self):
        controller = controller_for(initial_pegs(), cards('2', '3', '4', '5', '6', '10'))
        assert controller.can_discard()
        assert controller.discard(0)
        assert controller.message == "Yellow discarded (stuck: 1/3)"
        assert controller.player == 1

    def test_auto_start_message(self):
        controller = controller_for(initial_pegs(), cards('2', '3', '4', '5', '6', '10'))
        controller.state = replace(controller.state, stuck_counts=(2, 0, 0, 0))
        assert controller.discard(0)
        assert controller.message == "Yellow was stuck 3 turns and started a peg!"
        assert controller.state.pegs[0][0] == Track(8)


class TestAITurns:
    """AI 回合测试"""

    def test_not_ai_turn(self):
        controller = TurnController(GameState.initial(seed=3))
        assert controller.play_ai_turn() is None

    def test_runs_until_human(self):
        state = replace(GameState.initial(seed=3), current_player=1)
        controller = TurnController(state)
        actions = controller.run_ai_turns()
        assert len(actions) == 3
        assert controller.player == 0
        assert controller.message == YOUR_TURN
        assert controller.state.step_count == 3

    def test_all_ai_max_turns(self):
        controller = TurnController(GameState.initial(seed=4), ai_players=range(4))
        actions = controller.run_ai_turns(max_turns=10)
        assert len(actions) == 10
        assert controller.state.step_count == 10
