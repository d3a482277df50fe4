"""
交互式回合控制

表现层每次点击调用一个方法，控制器维护回合内的选择状态:
AWAITING_CARD -> AWAITING_PEG -> {AWAITING_SPLIT_COMPLETION | AWAITING_JOKER_TARGET | 结算}

拆分的第一段立即在预览棋盘上执行，第二段完成后才整体提交到 GameState；
取消会丢弃预览，不产生任何修改。
"""
from enum import Enum
from typing import Iterable, List, Optional
import logging

from .actions import Action
from .ai import HeuristicAI
from .board import PEGS_PER_PLAYER, PLAYER_NAMES, Home, Pegs, all_home
from .cards import Card
from .rules import IllegalMoveError, RuleEngine
from .state import STUCK_AUTO_START, GameState

logger = logging.getLogger(__name__)

YOUR_TURN = "Your turn! Select a card and peg to move."


class TurnPhase(Enum):
    """回合内的交互阶段"""
    AWAITING_CARD = "awaiting_card"
    AWAITING_PEG = "awaiting_peg"
    AWAITING_SPLIT_COMPLETION = "awaiting_split_completion"
    AWAITING_JOKER_TARGET = "awaiting_joker_target"
    FINISHED = "finished"


class TurnController:
    """
    回合控制器

    人类玩家的操作返回 bool: False 表示操作被拒绝，message 给出提示，状态不变
    """

    def __init__(
        self,
        state: Optional[GameState] = None,
        ai_players: Iterable[int] = (1, 2, 3),
        ai: Optional[HeuristicAI] = None,
    ):
        """
        Args:
            state: 初始状态 (默认新开一局)
            ai_players: 由 AI 控制的座位
            ai: 决策引擎
        """
        self.state = state if state is not None else GameState.initial()
        self.ai_players = frozenset(ai_players)
        self.ai = ai or HeuristicAI()
        self.message = YOUR_TURN
        self._reset_selection()
        if self.state.is_finished:
            self.phase = TurnPhase.FINISHED

    def _reset_selection(self):
        self.phase = TurnPhase.AWAITING_CARD
        self.selected_card: Optional[int] = None
        self.selected_peg: Optional[int] = None
        self.split_first: Optional[int] = None
        self.split_amount: Optional[int] = None
        self.split_remaining: Optional[int] = None
        self._preview: Optional[Pegs] = None

    def new_game(self, seed: Optional[int] = None):
        """重新开始"""
        self.state = GameState.initial(seed=seed)
        self.message = YOUR_TURN
        self._reset_selection()

    @property
    def player(self) -> int:
        return self.state.current_player

    @property
    def pegs(self) -> Pegs:
        """当前应显示的棋盘 (拆分进行中时为预览)"""
        return self._preview if self._preview is not None else self.state.pegs

    @property
    def card(self) -> Optional[Card]:
        if self.selected_card is None:
            return None
        return self.state.get_hand()[self.selected_card]

    @property
    def is_ai_turn(self) -> bool:
        return not self.state.is_finished and self.player in self.ai_players

    def _reject(self, message: str) -> bool:
        self.message = message
        return False

    def _commit(self, action: Action) -> bool:
        """把完整动作提交到游戏状态"""
        try:
            self.state = self.state.with_action(action)
        except IllegalMoveError:
            return self._reject("Invalid move. Try again.")

        self._reset_selection()
        if self.state.is_finished:
            self.phase = TurnPhase.FINISHED
            self.message = f"{PLAYER_NAMES[self.state.winner]} wins!"
        else:
            self.message = f"{PLAYER_NAMES[self.player]} is thinking..."
        return True

    def select_card(self, card_index: int) -> bool:
        """选择手牌；Joker 选目标阶段重新选牌会退出 Joker 模式"""
        if self.phase in (TurnPhase.FINISHED, TurnPhase.AWAITING_SPLIT_COMPLETION):
            return False
        if not 0 <= card_index < len(self.state.get_hand()):
            return self._reject("Select a card first.")

        self._reset_selection()
        self.selected_card = card_index
        self.phase = TurnPhase.AWAITING_PEG
        return True

    def select_peg(self, peg_index: int, amount: Optional[int] = None) -> bool:
        """
        选择己方棋子

        Args:
            peg_index: 棋子序号
            amount: 7/9 的拆分步数；7 为 None 或 7 时整走，9 必须提供
        """
        if self.phase == TurnPhase.AWAITING_JOKER_TARGET:
            # Joker 模式下点击自己的棋子即取消
            self.cancel()
            self.message = "Joker cancelled. Select a card and peg to move."
            return False
        if self.phase == TurnPhase.AWAITING_SPLIT_COMPLETION:
            return self.complete_split(peg_index)
        if self.phase != TurnPhase.AWAITING_PEG:
            return self._reject("Select a card first.")
        if not 0 <= peg_index < PEGS_PER_PLAYER:
            return self._reject("Invalid move. Try again.")

        card = self.card
        info = card.info
        peg = self.state.pegs[self.player][peg_index]
        self.selected_peg = peg_index

        if info.is_joker:
            if not self.state.is_legal(self.player, peg_index, card):
                return self._reject("Invalid move. Try again.")
            self.phase = TurnPhase.AWAITING_JOKER_TARGET
            self.message = "Now click an opponent's peg on the track to bump it."
            return True

        if info.must_split:
            if isinstance(peg, Home):
                return self._reject("Cannot use 9 card with pegs in home (need forward AND backward moves).")
            if amount is None:
                return self._reject("Select split: forward amount for this peg, backward for another peg.")
            return self._begin_split(peg_index, amount)

        if info.can_split and amount is not None and amount < info.value:
            return self._begin_split(peg_index, amount)

        return self._commit(Action.simple(card, peg_index, amount))

    def _begin_split(self, peg_index: int, amount: int) -> bool:
        """执行拆分的第一段到预览棋盘"""
        card = self.card
        plan = RuleEngine.plan_move(self.state.pegs, self.player, peg_index, card, amount)
        if plan is None:
            return self._reject("Invalid move. Try again.")

        preview = RuleEngine.apply_plan(self.state.pegs, plan)
        if all_home(preview, self.player):
            # 第一段即获胜，无需第二段
            return self._commit(Action.split(card, peg_index, amount))

        remaining = card.info.value - abs(amount)
        self.split_first = peg_index
        self.split_amount = amount
        self.split_remaining = -remaining if card.info.must_split and amount > 0 else remaining
        self._preview = preview
        self.phase = TurnPhase.AWAITING_SPLIT_COMPLETION

        direction = "backward" if self.split_remaining < 0 else "forward"
        self.message = f"Move {remaining} spaces {direction} with another peg."
        return True

    def complete_split(self, peg_index: int) -> bool:
        """用第二枚棋子完成拆分 (在第一段之后的棋盘上验证)"""
        if self.phase != TurnPhase.AWAITING_SPLIT_COMPLETION:
            return False
        if peg_index == self.split_first or not 0 <= peg_index < PEGS_PER_PLAYER:
            return self._reject("Invalid move for split. Try again.")
        if not RuleEngine.is_legal(
            self._preview, self.player, peg_index, self.card, self.split_remaining
        ):
            return self._reject("Invalid move for split. Try again.")

        action = Action.split(self.card, self.split_first, self.split_amount, peg_index)
        return self._commit(action)

    def select_joker_target(self, player: int, peg_index: int) -> bool:
        """选择 Joker 的目标；点击自己的棋子会取消"""
        if self.phase != TurnPhase.AWAITING_JOKER_TARGET:
            return False
        if player == self.player:
            self.cancel()
            self.message = "Joker cancelled. Select a card and peg to move."
            return False
        target = (player, peg_index)
        if not self.state.is_legal(self.player, self.selected_peg, self.card, target=target):
            return self._reject("Now click an opponent's peg on the track to bump it.")

        return self._commit(Action.joker(self.card, self.selected_peg, target))

    def cancel(self) -> bool:
        """放弃进行中的选择 (拆分预览、Joker 目标)，回到选牌阶段"""
        if self.phase == TurnPhase.FINISHED:
            return False
        self._reset_selection()
        self.message = YOUR_TURN
        return True

    def can_discard(self) -> bool:
        """没有任何合法走子时才能弃牌"""
        return not self.state.is_finished and not self.state.has_any_valid_move()

    def discard(self, card_index: int) -> bool:
        """卡死时弃掉一张手牌"""
        if self.phase == TurnPhase.AWAITING_SPLIT_COMPLETION or not self.can_discard():
            return self._reject("You have a legal move and cannot discard.")

        player = self.player
        try:
            self.state = self.state.with_discard(card_index)
        except IllegalMoveError:
            return self._reject("Select a card to discard.")

        self._reset_selection()
        if self.state.last_moves[player] == STUCK_AUTO_START:
            self.message = f"{PLAYER_NAMES[player]} was stuck 3 turns and started a peg!"
        else:
            self.message = f"{PLAYER_NAMES[player]} discarded (stuck: {self.state.stuck_counts[player]}/3)"
        return True

    def play_ai_turn(self) -> Optional[Action]:
        """若轮到 AI，则选择并执行一个动作"""
        if not self.is_ai_turn:
            return None

        player = self.player
        action = self.ai.choose_move(self.state, player)
        if action.is_discard:
            self.discard(self.state.get_hand().index(action.card))
        else:
            self._commit(action)
        logger.debug("%s: %s", PLAYER_NAMES[player], self.state.last_moves[player])
        return action

    def run_ai_turns(self, max_turns: Optional[int] = None) -> List[Action]:
        """连续执行 AI 回合，直到轮到人类玩家或游戏结束"""
        actions = []
        while self.is_ai_turn and (max_turns is None or len(actions) < max_turns):
            actions.append(self.play_ai_turn())
        if not self.state.is_finished and not self.is_ai_turn:
            self.message = YOUR_TURN
        return actions
