#!/usr/bin/env python3
"""
评估脚本

Usage:
    python scripts/evaluate.py --games 100
    python scripts/evaluate.py --config heuristic.json --opponent heuristic --games 50
    python scripts/evaluate.py --tournament --configs a.json b.json
"""
import argparse
import logging
import sys
from pathlib import Path
import json

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core.config import HeuristicConfig
from env import PegsEnv
from evaluation import (
    Evaluator,
    RandomAgent,
    HeuristicAgent,
    Arena,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Pegs and Jokers Evaluation")

    parser.add_argument("--tournament", action="store_true", help="Run tournament")

    parser.add_argument("--config", type=str, help="Heuristic config JSON for the evaluated agent")
    parser.add_argument("--configs", nargs="+", type=str, help="Heuristic configs for tournament")

    parser.add_argument("--games", type=int, default=100, help="Number of games")
    parser.add_argument(
        "--opponent",
        type=str,
        default="random",
        choices=["random", "heuristic"],
        help="Opponent type",
    )
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument("--max-steps", type=int, default=2000, help="Truncate games after this many actions")

    parser.add_argument("--output", type=str, help="Output file for results")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")

    return parser.parse_args()


def load_config(path: str) -> HeuristicConfig:
    with open(path) as f:
        return HeuristicConfig.from_dict(json.load(f))


def evaluate_single(args):
    """评估单个启发式配置"""
    config = load_config(args.config) if args.config else HeuristicConfig()
    logger.info(f"Evaluating heuristic: {config}")

    agent = HeuristicAgent("heuristic", config)

    if args.opponent == "random":
        opponents = [RandomAgent(f"random{i}", seed=args.seed + i) for i in range(3)]
    else:
        opponents = [HeuristicAgent(f"heuristic{i}") for i in range(3)]

    evaluator = Evaluator(env_fn=lambda: PegsEnv(max_steps=args.max_steps))
    result = evaluator.evaluate(
        agent=agent,
        n_games=args.games,
        opponents=opponents,
        seed=args.seed,
        verbose=args.verbose,
    )

    logger.info("=" * 50)
    logger.info("Evaluation Results")
    logger.info("=" * 50)
    logger.info(f"Win Rate: {result.win_rate:.2%}")
    logger.info(f"Average Length: {result.avg_length:.1f}")
    logger.info(f"Average Stuck Discards: {result.avg_stuck_discards:.2f}")
    logger.info(f"Average Bumps: {result.avg_bumps:.2f}")
    logger.info(f"Truncated Games: {result.truncated_games}")
    logger.info("=" * 50)

    if args.output:
        with open(args.output, "w") as f:
            json.dump({
                "win_rate": result.win_rate,
                "avg_length": result.avg_length,
                "avg_stuck_discards": result.avg_stuck_discards,
                "avg_bumps": result.avg_bumps,
                "truncated_games": result.truncated_games,
                "seat_wins": result.seat_wins,
                "games_played": result.games_played,
            }, f, indent=2)
        logger.info(f"Results saved to {args.output}")

    return result


def run_tournament(args):
    """运行锦标赛"""
    configs = args.configs or []
    logger.info(f"Running tournament with {len(configs)} configs")

    agents = [HeuristicAgent(f"config_{i}", load_config(path)) for i, path in enumerate(configs)]

    # 添加基线智能体
    agents.append(HeuristicAgent("heuristic"))
    agents.append(RandomAgent("random", seed=args.seed))
    while len(agents) < 4:
        agents.append(RandomAgent(f"random_{len(agents)}", seed=args.seed + len(agents)))

    arena = Arena(env_fn=lambda: PegsEnv(max_steps=args.max_steps))
    result = arena.round_robin(agents, games_per_match=max(1, args.games // 4), seed=args.seed)

    logger.info("=" * 50)
    logger.info("Tournament Results")
    logger.info("=" * 50)

    ranking = result.get_ranking()
    for i, (name, win_rate) in enumerate(ranking):
        logger.info(f"{i+1}. {name}: {win_rate:.2%}")

    logger.info("=" * 50)

    if args.output:
        with open(args.output, "w") as f:
            json.dump({
                "rankings": ranking,
                "total_games": result.total_games,
            }, f, indent=2)

    return result


def main():
    args = parse_args()

    if args.tournament:
        run_tournament(args)
    else:
        evaluate_single(args)


if __name__ == "__main__":
    main()
