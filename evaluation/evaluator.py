"""
评估器

在模拟环境中评估智能体表现
"""
from typing import Callable, List, Optional, Sequence
from dataclasses import dataclass, field
import numpy as np
import logging

from core.actions import Action
from core.ai import HeuristicAI
from core.board import NUM_PLAYERS, Start
from core.config import HeuristicConfig
from core.state import GameState
from env.pegs_env import PegsEnv

logger = logging.getLogger(__name__)


@dataclass
class EvalResult:
    """评估结果"""
    win_rate: float
    avg_length: float
    games_played: int
    avg_stuck_discards: float = 0.0
    avg_bumps: float = 0.0
    truncated_games: int = 0
    seat_wins: List[int] = field(default_factory=lambda: [0] * NUM_PLAYERS)

    def __repr__(self) -> str:
        return (
            f"EvalResult(win_rate={self.win_rate:.2%}, "
            f"avg_length={self.avg_length:.1f}, "
            f"games={self.games_played})"
        )


class Agent:
    """智能体基类"""

    def __init__(self, name: str = "agent"):
        self.name = name

    def act(self, state: GameState, legal_actions: List[Action]) -> Action:
        """选择动作"""
        raise NotImplementedError

    def reset(self):
        """重置状态"""
        pass


class RandomAgent(Agent):
    """随机智能体"""

    def __init__(self, name: str = "random", seed: Optional[int] = None):
        super().__init__(name)
        self.rng = np.random.default_rng(seed)

    def act(self, state: GameState, legal_actions: List[Action]) -> Action:
        if not legal_actions:
            raise ValueError("No legal actions to choose from")
        idx = self.rng.integers(len(legal_actions))
        return legal_actions[idx]


class HeuristicAgent(Agent):
    """启发式智能体"""

    def __init__(self, name: str = "heuristic", config: Optional[HeuristicConfig] = None):
        super().__init__(name)
        self.ai = HeuristicAI(config)

    def act(self, state: GameState, legal_actions: List[Action]) -> Action:
        return self.ai.choose_move(state)


def count_bumps(prev_state: GameState, state: GameState, player: int) -> int:
    """player 的一步中被撞回起点区的对手棋子数"""
    bumps = 0
    for p in range(NUM_PLAYERS):
        if p == player:
            continue
        for before, after in zip(prev_state.pegs[p], state.pegs[p]):
            if not isinstance(before, Start) and isinstance(after, Start):
                bumps += 1
    return bumps


class Evaluator:
    """
    评估器

    被评估的智能体轮流坐到四个座位上
    """

    def __init__(self, env_fn: Callable[[], PegsEnv] = PegsEnv):
        self.env_fn = env_fn

    @staticmethod
    def default_opponents(seed: Optional[int] = None) -> List[Agent]:
        """三个随机对手，各自使用不同的种子"""
        return [
            RandomAgent(f"random{i}", seed=None if seed is None else seed + i)
            for i in range(NUM_PLAYERS - 1)
        ]

    def evaluate(
        self,
        agent: Agent,
        n_games: int = 100,
        opponents: Optional[Sequence[Agent]] = None,
        seed: Optional[int] = None,
        verbose: bool = False,
    ) -> EvalResult:
        """
        评估智能体

        Args:
            agent: 待评估智能体
            n_games: 游戏数量
            opponents: 3 个对手 (默认随机智能体)
            seed: 第一局的种子，后续每局加 1
            verbose: 是否输出进度

        Returns:
            评估结果
        """
        if opponents is None:
            opponents = self.default_opponents(seed)
        if len(opponents) != NUM_PLAYERS - 1:
            raise ValueError(f"Need exactly {NUM_PLAYERS - 1} opponents, got {len(opponents)}")

        env = self.env_fn()

        wins = 0
        total_length = 0
        stuck_discards = 0
        bumps = 0
        truncated_games = 0
        seat_wins = [0] * NUM_PLAYERS

        for game_idx in range(n_games):
            # 智能体位置轮换
            agent_seat = game_idx % NUM_PLAYERS
            seats = list(opponents)
            seats.insert(agent_seat, agent)
            for a in seats:
                a.reset()

            game_seed = seed + game_idx if seed is not None else None
            _, info = env.reset(seed=game_seed)
            done = False
            truncated = False

            while not done:
                player = info["current_player"]
                prev_state = env.state
                action = seats[player].act(prev_state, info["legal_actions"])
                _, _, terminated, truncated, info = env.step(action)
                done = terminated or truncated

                if player == agent_seat:
                    if action.is_discard:
                        stuck_discards += 1
                    bumps += count_bumps(prev_state, env.state, player)

            winner = info.get("winner")
            if winner == agent_seat:
                wins += 1
                seat_wins[agent_seat] += 1
            if truncated:
                truncated_games += 1
            total_length += env.state.step_count

            if verbose and (game_idx + 1) % 10 == 0:
                logger.info("Game %d/%d, Win rate: %.2f%%", game_idx + 1, n_games, 100 * wins / (game_idx + 1))

        return EvalResult(
            win_rate=wins / n_games if n_games > 0 else 0.0,
            avg_length=total_length / n_games if n_games > 0 else 0.0,
            games_played=n_games,
            avg_stuck_discards=stuck_discards / n_games if n_games > 0 else 0.0,
            avg_bumps=bumps / n_games if n_games > 0 else 0.0,
            truncated_games=truncated_games,
            seat_wins=seat_wins,
        )
