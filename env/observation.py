"""
观察空间编码

将游戏状态转换为数值特征表示
所有按玩家排列的特征都以视角玩家为第 0 行，其余玩家按行动顺序排列
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence
import numpy as np

from core.state import GameState, STUCK_LIMIT
from core.board import (
    NUM_PLAYERS,
    PEGS_PER_PLAYER,
    TRACK_LENGTH,
    HOME_SLOTS,
    Home,
    Track,
    pegs_in_start,
)
from core.cards import ALL_RANKS, RANK_TO_INDEX, Card


NUM_RANKS = len(ALL_RANKS)


@dataclass
class Observation:
    """
    结构化观测

    Attributes:
        track: 赛道占据情况 (4, 72)
        home: 终点区占据情况 (4, 5)
        start: 起点区棋子比例 (4,)
        hand: 自己手牌的牌面计数 (14,)
        stuck: 各玩家卡死计数 / 3 (4,)
        position: 视角玩家座位 one-hot (4,)
        legal_actions: 合法动作列表
        player: 视角玩家
    """
    track: np.ndarray
    home: np.ndarray
    start: np.ndarray
    hand: np.ndarray
    stuck: np.ndarray
    position: np.ndarray
    legal_actions: List
    player: int

    def to_dict(self) -> Dict[str, np.ndarray]:
        """转换为字典格式"""
        return {
            "track": self.track,
            "home": self.home,
            "start": self.start,
            "hand": self.hand,
            "stuck": self.stuck,
            "position": self.position,
        }

    def to_flat_array(self) -> np.ndarray:
        """
        展平为单一向量

        特征维度:
        - track: 4 * 72 = 288
        - home: 4 * 5 = 20
        - start: 4
        - hand: 14
        - stuck: 4
        - position: 4
        """
        return np.concatenate([
            self.track.flatten(),
            self.home.flatten(),
            self.start,
            self.hand,
            self.stuck,
            self.position,
        ])


FLAT_SIZE = NUM_PLAYERS * TRACK_LENGTH + NUM_PLAYERS * HOME_SLOTS + NUM_PLAYERS + NUM_RANKS + NUM_PLAYERS * 2


class ObservationBuilder:
    """
    观测构建器

    负责将 GameState 转换为 Observation
    """

    def build(self, state: GameState, perspective: Optional[int] = None) -> Observation:
        """
        从游戏状态构建观测

        Args:
            state: 游戏状态
            perspective: 视角玩家 (默认为当前玩家)

        Returns:
            Observation 对象
        """
        if perspective is None:
            perspective = state.current_player

        order = self.player_order(perspective)

        track = np.zeros((NUM_PLAYERS, TRACK_LENGTH), dtype=np.float32)
        home = np.zeros((NUM_PLAYERS, HOME_SLOTS), dtype=np.float32)
        start = np.zeros(NUM_PLAYERS, dtype=np.float32)

        for row, player in enumerate(order):
            for peg in state.pegs[player]:
                if isinstance(peg, Track):
                    track[row, peg.position] = 1.0
                elif isinstance(peg, Home):
                    home[row, peg.slot] = 1.0

            start[row] = pegs_in_start(state.pegs, player) / PEGS_PER_PLAYER

        stuck = np.array(
            [state.stuck_counts[p] / STUCK_LIMIT for p in order], dtype=np.float32
        )

        position = np.zeros(NUM_PLAYERS, dtype=np.float32)
        position[perspective] = 1.0

        return Observation(
            track=track,
            home=home,
            start=start,
            hand=encode_hand(state.get_hand(perspective)),
            stuck=stuck,
            position=position,
            legal_actions=state.get_legal_actions() if perspective == state.current_player else [],
            player=perspective,
        )

    @staticmethod
    def player_order(perspective: int) -> List[int]:
        """视角玩家在前，其余按行动顺序"""
        return [(perspective + k) % NUM_PLAYERS for k in range(NUM_PLAYERS)]


def encode_hand(hand: Sequence[Card]) -> np.ndarray:
    """手牌按牌面计数 (14,)"""
    result = np.zeros(NUM_RANKS, dtype=np.float32)
    for card in hand:
        result[RANK_TO_INDEX[card.rank]] += 1
    return result
