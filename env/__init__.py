"""
Environment Layer - Gymnasium 兼容环境

Modules:
    pegs_env: 主环境类
    observation: 观测空间构建
    reward: 奖励函数
"""
from .pegs_env import (
    PegsEnv,
    MAX_LEGAL_ACTIONS,
    make_env,
)

from .observation import (
    Observation,
    ObservationBuilder,
    FLAT_SIZE,
    encode_hand,
)

from .reward import (
    RewardType,
    RewardConfig,
    RewardCalculator,
    create_reward_calculator,
)

__all__ = [
    # env
    "PegsEnv",
    "MAX_LEGAL_ACTIONS",
    "make_env",
    # observation
    "Observation",
    "ObservationBuilder",
    "FLAT_SIZE",
    "encode_hand",
    # reward
    "RewardType",
    "RewardConfig",
    "RewardCalculator",
    "create_reward_calculator",
]
