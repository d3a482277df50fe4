"""
Pegs and Jokers Gymnasium 环境

遵循标准 Gymnasium API，四个座位轮流由调用方控制
"""
from typing import Dict, Any, Tuple, Optional, List, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from core.state import GameState, HAND_SIZE
from core.actions import Action
from core.board import (
    NUM_PLAYERS,
    TRACK_LENGTH,
    HOME_SLOTS,
    PLAYER_NAMES,
    Home,
    Start,
    Track,
)
from core.cards import cards_to_str

from .observation import NUM_RANKS, ObservationBuilder
from .reward import RewardCalculator, RewardConfig, RewardType

# 合法动作列表长度的上界 (6 张 9 × 5 枚棋子 × 8 种前进步数 × 4 枚后退棋子 = 960)
MAX_LEGAL_ACTIONS = 1024


class PegsEnv(gym.Env):
    """
    Pegs and Jokers Gymnasium 环境

    动作可以是 Action 对象，或当前合法动作列表中的索引

    API:
    - reset() -> observation, info
    - step(action) -> observation, reward, terminated, truncated, info
    """

    metadata = {
        "render_modes": ["human", "ansi"],
        "name": "PegsAndJokers-v1",
    }

    def __init__(
        self,
        render_mode: Optional[str] = None,
        reward_type: str = "sparse",
        reward_config: Optional[RewardConfig] = None,
        agent_player: Optional[int] = None,
        max_steps: int = 2000,
        seed: Optional[int] = None,
    ):
        """
        Args:
            render_mode: 渲染模式 ("human", "ansi", None)
            reward_type: 奖励类型 ("sparse", "shaped")
            reward_config: 完整奖励配置 (优先于 reward_type)
            agent_player: 奖励视角 (None=刚行动的玩家)
            max_steps: 超过该动作数即截断
            seed: 随机种子
        """
        super().__init__()

        self.render_mode = render_mode
        self.max_steps = max_steps
        self._seed = seed
        self._agent_player = agent_player

        self._obs_builder = ObservationBuilder()
        self._reward_calculator = RewardCalculator(
            reward_config or RewardConfig(reward_type=RewardType(reward_type))
        )

        self._state: Optional[GameState] = None
        self._prev_state: Optional[GameState] = None

        self._define_spaces()

    def _define_spaces(self):
        """定义观测和动作空间"""
        self.action_space = spaces.Discrete(MAX_LEGAL_ACTIONS)

        self.observation_space = spaces.Dict({
            "track": spaces.Box(0, 1, shape=(NUM_PLAYERS, TRACK_LENGTH), dtype=np.float32),
            "home": spaces.Box(0, 1, shape=(NUM_PLAYERS, HOME_SLOTS), dtype=np.float32),
            "start": spaces.Box(0, 1, shape=(NUM_PLAYERS,), dtype=np.float32),
            "hand": spaces.Box(0, HAND_SIZE, shape=(NUM_RANKS,), dtype=np.float32),
            "stuck": spaces.Box(0, 1, shape=(NUM_PLAYERS,), dtype=np.float32),
            "position": spaces.Box(0, 1, shape=(NUM_PLAYERS,), dtype=np.float32),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        重置环境

        Args:
            seed: 随机种子
            options: 额外选项

        Returns:
            (observation, info) 元组
        """
        super().reset(seed=seed)

        game_seed = seed if seed is not None else self._seed

        self._state = GameState.initial(seed=game_seed)
        self._prev_state = None

        obs = self._build_observation()
        info = self._build_info()

        if self.render_mode == "human":
            self.render()

        return obs, info

    def step(
        self,
        action: Union[int, Action],
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        执行动作

        Args:
            action: 合法动作索引或 Action 对象

        Returns:
            (observation, reward, terminated, truncated, info) 元组
        """
        if self._state is None:
            raise RuntimeError("Environment not reset. Call reset() first.")

        concrete_action = self._decode_action(action)

        # 非法动作：给予惩罚并保持状态
        try:
            if concrete_action is None:
                raise ValueError(f"Invalid action index: {action}")
            new_state = self._state.with_action(concrete_action)
        except ValueError as e:
            obs = self._build_observation()
            info = self._build_info()
            info["error"] = str(e)
            return obs, -1.0, False, False, info

        self._prev_state = self._state
        self._state = new_state

        obs = self._build_observation()
        reward = self._compute_reward()

        terminated = self._state.is_finished
        truncated = not terminated and self._state.step_count >= self.max_steps

        info = self._build_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    def _decode_action(self, action: Union[int, Action]) -> Optional[Action]:
        """解码动作"""
        if isinstance(action, Action):
            return action
        elif isinstance(action, (int, np.integer)):
            legal_actions = self._state.get_legal_actions()
            if 0 <= action < len(legal_actions):
                return legal_actions[action]
            return None
        else:
            raise ValueError(f"Invalid action type: {type(action)}")

    def _build_observation(self) -> Dict[str, np.ndarray]:
        return self._obs_builder.build(self._state).to_dict()

    def _build_info(self) -> Dict[str, Any]:
        """构建 info 字典"""
        legal_actions = self._state.get_legal_actions()

        info = {
            "current_player": self._state.current_player,
            "legal_actions": legal_actions,
            "step_count": self._state.step_count,
            "stuck_counts": self._state.stuck_counts,
            "last_moves": self._state.last_moves,
        }

        if self._state.is_finished:
            info["winner"] = self._state.winner

        return info

    def _compute_reward(self) -> float:
        """计算奖励 (默认视角为刚行动的玩家)"""
        player = self._agent_player
        if player is None:
            player = self._prev_state.current_player
        return self._reward_calculator.compute(self._state, self._prev_state, player)

    def render(self) -> Optional[str]:
        """渲染环境"""
        if self.render_mode == "ansi" or self.render_mode == "human":
            return self._render_text()
        return None

    def _render_text(self) -> str:
        """文本渲染"""
        lines = []
        lines.append("=" * 50)
        lines.append(f"Step: {self._state.step_count}")
        lines.append(f"Current Player: {PLAYER_NAMES[self._state.current_player]}")

        for p in range(NUM_PLAYERS):
            pegs = self._state.pegs[p]
            track = sorted(peg.position for peg in pegs if isinstance(peg, Track))
            home = sorted(peg.slot for peg in pegs if isinstance(peg, Home))
            start = sum(1 for peg in pegs if isinstance(peg, Start))
            lines.append(
                f"{PLAYER_NAMES[p]:<7} start={start} track={track} home={home} "
                f"stuck={self._state.stuck_counts[p]}"
            )
            lines.append(f"        hand: {cards_to_str(self._state.hands[p])}")
            if self._state.last_moves[p]:
                lines.append(f"        last: {self._state.last_moves[p]}")

        if self._state.is_finished:
            lines.append(f"Winner: {PLAYER_NAMES[self._state.winner]}")

        lines.append("=" * 50)

        output = "\n".join(lines)
        if self.render_mode == "human":
            print(output)
        return output

    def close(self):
        pass

    @property
    def state(self) -> Optional[GameState]:
        """获取当前状态 (用于调试)"""
        return self._state

    def get_legal_actions(self) -> List[Action]:
        """获取当前合法动作"""
        if self._state is None:
            return []
        return self._state.get_legal_actions()

    def sample_action(self) -> Optional[Action]:
        """随机采样一个合法动作"""
        legal_actions = self.get_legal_actions()
        if not legal_actions:
            return None
        idx = self.np_random.integers(len(legal_actions))
        return legal_actions[idx]


def make_env(**kwargs) -> PegsEnv:
    """
    工厂函数：创建环境

    Args:
        **kwargs: 环境参数

    Returns:
        PegsEnv 实例
    """
    return PegsEnv(**kwargs)
