"""
奖励函数

支持两种奖励设计:
- 终局奖励 (sparse)
- 过程奖励 (shaped): 距离改善 + 终局奖励
"""
from dataclasses import dataclass
from typing import Dict, Optional
from enum import Enum

from core.state import GameState
from core.board import NUM_PLAYERS, total_distance


class RewardType(Enum):
    """奖励类型"""
    SPARSE = "sparse"      # 仅终局奖励
    SHAPED = "shaped"      # 过程奖励


@dataclass
class RewardConfig:
    """奖励配置"""
    reward_type: RewardType = RewardType.SPARSE
    win_reward: float = 1.0
    lose_reward: float = -1.0
    progress_scale: float = 0.01   # 每减少 1 点距离的奖励

    @classmethod
    def from_dict(cls, d: dict) -> 'RewardConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        if "reward_type" in filtered:
            filtered["reward_type"] = RewardType(filtered["reward_type"])
        return cls(**filtered)


class RewardCalculator:
    """
    奖励计算器

    根据配置计算不同类型的奖励
    """

    def __init__(self, config: Optional[RewardConfig] = None):
        self.config = config or RewardConfig()

    def compute(
        self,
        state: GameState,
        prev_state: Optional[GameState] = None,
        player: Optional[int] = None,
    ) -> float:
        """
        计算奖励

        Args:
            state: 当前状态
            prev_state: 前一状态 (用于 shaped 奖励)
            player: 计算奖励的玩家视角

        Returns:
            奖励值
        """
        if player is None:
            player = state.current_player

        if self.config.reward_type == RewardType.SPARSE:
            return self._sparse_reward(state, player)
        elif self.config.reward_type == RewardType.SHAPED:
            return self._shaped_reward(state, prev_state, player)
        else:
            return 0.0

    def _sparse_reward(self, state: GameState, player: int) -> float:
        """
        稀疏奖励：仅在游戏结束时给予

        Returns:
            胜利: +1, 失败: -1, 其他: 0
        """
        if not state.is_finished:
            return 0.0
        if state.winner == player:
            return self.config.win_reward
        return self.config.lose_reward

    def _shaped_reward(
        self,
        state: GameState,
        prev_state: Optional[GameState],
        player: int,
    ) -> float:
        """
        过程奖励

        己方总距离的减少量 (被撞回时为负) 乘以 progress_scale，再加终局奖励
        """
        reward = self._sparse_reward(state, player)

        if prev_state is not None:
            improvement = total_distance(prev_state.pegs, player) - total_distance(state.pegs, player)
            reward += improvement * self.config.progress_scale

        return reward

    def compute_all(
        self,
        state: GameState,
        prev_state: Optional[GameState] = None,
    ) -> Dict[int, float]:
        """计算所有玩家的奖励"""
        return {p: self.compute(state, prev_state, p) for p in range(NUM_PLAYERS)}


def create_reward_calculator(
    reward_type: str = "sparse",
    **kwargs
) -> RewardCalculator:
    """
    工厂函数：创建奖励计算器

    Args:
        reward_type: 奖励类型 ("sparse", "shaped")
        **kwargs: 其他配置参数

    Returns:
        RewardCalculator 实例
    """
    config = RewardConfig(
        reward_type=RewardType(reward_type),
        **kwargs
    )
    return RewardCalculator(config)
