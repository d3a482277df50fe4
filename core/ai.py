"""
启发式对手 AI

枚举所有合法动作，按 距离改善 + 奖励 打分，选最高分
(同分取枚举顺序中的第一个)
"""
from dataclasses import dataclass
from typing import List, Optional
import logging

from .actions import Action, ActionGenerator, ActionType, simulate
from .board import (
    NUM_PLAYERS,
    Home,
    Pegs,
    Track,
    come_out_position,
    distance_to_home,
    pegs_in_start,
    total_distance,
)
from .config import HeuristicConfig
from .state import GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredAction:
    """带评分的候选动作"""
    action: Action
    improvement: int
    bonus: int
    pegs: Pegs

    @property
    def score(self) -> int:
        return self.improvement + self.bonus


class HeuristicAI:
    """
    启发式决策引擎

    score = (走子前己方总距离 - 走子后总距离) + bonus
    """

    def __init__(self, config: Optional[HeuristicConfig] = None):
        self.config = config or HeuristicConfig()

    def vulnerability_penalty(self, position: int, pegs: Pegs, player: int) -> int:
        """
        停在对手出场位的风险惩罚

        对手起点区棋子越多，越可能用出场牌把我们撞回去
        """
        penalty = 0
        for p in range(NUM_PLAYERS):
            if p == player or position != come_out_position(p):
                continue
            penalty += self.config.come_out_penalty
            penalty += self.config.come_out_start_peg_penalty * pegs_in_start(pegs, p)
        return penalty

    def _peg_penalty(self, pegs: Pegs, player: int, peg_index: int) -> int:
        peg = pegs[player][peg_index]
        if isinstance(peg, Track):
            return self.vulnerability_penalty(peg.position, pegs, player)
        return 0

    def _joker_bonus(self, before: Pegs, after: Pegs, player: int, action: Action) -> int:
        cfg = self.config
        target_player, target_index = action.target
        target_peg = before[target_player][target_index]

        bonus = cfg.joker_base_bonus

        # 撞回离家越近的棋子，干扰价值越高
        opponent_distance = distance_to_home(target_peg, target_player, cfg.start_distance)
        if opponent_distance < cfg.joker_disruption_range:
            bonus += (cfg.joker_disruption_range - opponent_distance) // 2

        # 落在刚被撞玩家的出场位上，几乎必然被撞回
        if target_peg.position == come_out_position(target_player):
            bonus -= cfg.joker_own_come_out_penalty

        bonus -= self.vulnerability_penalty(target_peg.position, after, player)
        return bonus

    def score_action(self, pegs: Pegs, player: int, action: Action) -> Optional[ScoredAction]:
        """
        为单个候选动作打分

        Args:
            pegs: 当前棋盘
            player: 行动玩家
            action: 候选动作

        Returns:
            ScoredAction；动作不合法返回 None
        """
        result = simulate(pegs, player, action)
        if result is None:
            return None
        after, plans = result

        start_distance = self.config.start_distance
        improvement = (
            total_distance(pegs, player, start_distance) - total_distance(after, player, start_distance)
        )

        if action.action_type == ActionType.JOKER:
            bonus = self._joker_bonus(pegs, after, player, action)
        else:
            bonus = sum(self.config.home_move_bonus for plan in plans if isinstance(plan.before, Home))
            bonus -= sum(self._peg_penalty(after, player, plan.peg_index) for plan in plans)
            if action.action_type == ActionType.START:
                bonus += self.config.start_move_bonus

        return ScoredAction(action, improvement, bonus, after)

    def evaluate_all(self, state: GameState, player: Optional[int] = None) -> List[ScoredAction]:
        """按枚举顺序为所有合法动作打分"""
        player = state.current_player if player is None else player
        generator = ActionGenerator(state.pegs, player, state.get_hand(player))
        scored = []
        for action in generator.iter_actions():
            candidate = self.score_action(state.pegs, player, action)
            if candidate is not None:
                scored.append(candidate)
        return scored

    def choose_move(self, state: GameState, player: Optional[int] = None) -> Action:
        """
        选择动作

        Returns:
            最高分动作；没有合法走子时弃掉第一张手牌
        """
        player = state.current_player if player is None else player
        best: Optional[ScoredAction] = None
        for candidate in self.evaluate_all(state, player):
            # 严格大于才替换: 同分保留先枚举到的
            if best is None or candidate.score > best.score:
                best = candidate

        if best is None:
            hand = state.get_hand(player)
            if not hand:
                raise ValueError(f"Player {player} has no cards to discard")
            logger.debug("Player %d has no legal move, discarding %s", player, hand[0])
            return Action.discard(hand[0])

        logger.debug(
            "Player %d chose %s (improvement=%d, bonus=%d)",
            player, best.action, best.improvement, best.bonus,
        )
        return best.action


def choose_move(state: GameState, player: Optional[int] = None) -> Action:
    return HeuristicAI().choose_move(state, player)
