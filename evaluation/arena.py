"""
对战竞技场

组织四人对战
"""
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from dataclasses import dataclass
from collections import defaultdict
from itertools import combinations
import logging

from core.board import NUM_PLAYERS
from env.pegs_env import PegsEnv

from .evaluator import Agent

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """对局结果"""
    agents: Tuple[str, ...]          # 按座位排列的智能体名
    winner: Optional[int]            # 获胜座位，截断时为 None
    length: int

    @property
    def winner_agent(self) -> Optional[str]:
        return self.agents[self.winner] if self.winner is not None else None


@dataclass
class TournamentResult:
    """锦标赛结果"""
    standings: Dict[str, Dict[str, float]]
    total_games: int
    matches: List[MatchResult]

    def get_ranking(self) -> List[Tuple[str, float]]:
        """获取排名"""
        return sorted(
            [(name, stats["win_rate"]) for name, stats in self.standings.items()],
            key=lambda x: x[1],
            reverse=True,
        )

    def __repr__(self) -> str:
        ranking = self.get_ranking()
        lines = [f"Tournament Results ({self.total_games} games):"]
        for i, (name, win_rate) in enumerate(ranking):
            lines.append(f"  {i+1}. {name}: {win_rate:.2%}")
        return "\n".join(lines)


class Arena:
    """
    对战竞技场

    组织智能体之间的对战
    """

    def __init__(self, env_fn: Callable[[], PegsEnv] = PegsEnv):
        self.env_fn = env_fn

    def play_match(
        self,
        agents: Sequence[Agent],
        n_games: int = 1,
        seed: Optional[int] = None,
    ) -> List[MatchResult]:
        """
        进行对局

        Args:
            agents: 4 个智能体，按座位排列
            n_games: 对局数
            seed: 第一局的种子，后续每局加 1

        Returns:
            对局结果列表
        """
        if len(agents) != NUM_PLAYERS:
            raise ValueError(f"Need exactly {NUM_PLAYERS} agents, got {len(agents)}")

        env = self.env_fn()
        results = []

        for game_idx in range(n_games):
            for agent in agents:
                agent.reset()
            game_seed = seed + game_idx if seed is not None else None
            _, info = env.reset(seed=game_seed)
            done = False

            while not done:
                player = info["current_player"]
                action = agents[player].act(env.state, info["legal_actions"])
                _, _, terminated, truncated, info = env.step(action)
                done = terminated or truncated

            result = MatchResult(
                agents=tuple(agent.name for agent in agents),
                winner=info.get("winner"),
                length=env.state.step_count,
            )
            logger.debug("Match %s won by %s", result.agents, result.winner_agent)
            results.append(result)

        return results

    def round_robin(
        self,
        agents: Sequence[Agent],
        games_per_match: int = 1,
        seed: Optional[int] = None,
    ) -> TournamentResult:
        """
        循环赛

        每个四人组合按 4 种轮转座位各打 games_per_match 局

        Args:
            agents: 智能体列表 (至少 4 个，名字唯一)
            games_per_match: 每种座位安排的对局数
            seed: 随机种子

        Returns:
            锦标赛结果
        """
        if len(agents) < NUM_PLAYERS:
            raise ValueError(f"Need at least {NUM_PLAYERS} agents, got {len(agents)}")

        standings = {agent.name: defaultdict(float) for agent in agents}
        all_matches = []

        for group in combinations(agents, NUM_PLAYERS):
            for shift in range(NUM_PLAYERS):
                seating = group[shift:] + group[:shift]
                results = self.play_match(seating, games_per_match, seed)
                all_matches.extend(results)

                for result in results:
                    for name in result.agents:
                        standings[name]["games"] += 1
                    if result.winner_agent is not None:
                        standings[result.winner_agent]["wins"] += 1

        for name, stats in standings.items():
            stats["win_rate"] = stats["wins"] / stats["games"] if stats["games"] > 0 else 0.0

        logger.info("Round robin finished: %d games", len(all_matches))

        return TournamentResult(
            standings={name: dict(stats) for name, stats in standings.items()},
            total_games=len(all_matches),
            matches=all_matches,
        )
