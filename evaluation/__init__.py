"""
Evaluation Layer - 评估框架

Modules:
    evaluator: 评估器和智能体
    arena: 对战竞技场
"""
from .evaluator import (
    EvalResult,
    Agent,
    RandomAgent,
    HeuristicAgent,
    Evaluator,
    count_bumps,
)
from .arena import (
    MatchResult,
    TournamentResult,
    Arena,
)

__all__ = [
    # evaluator
    "EvalResult",
    "Agent",
    "RandomAgent",
    "HeuristicAgent",
    "Evaluator",
    "count_bumps",
    # arena
    "MatchResult",
    "TournamentResult",
    "Arena",
]
