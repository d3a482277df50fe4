"""
AI 配置

定义启发式评分使用的各项权重 (默认值即标准评分)
"""
from dataclasses import dataclass


@dataclass
class HeuristicConfig:
    """
    启发式评分配置

    Attributes:
        start_distance: 起点区棋子的距离常数
        home_move_bonus: 移动已在终点区的棋子的奖励 (每枚)
        start_move_bonus: START 类候选的额外奖励 (负数为惩罚)
        joker_base_bonus: Joker 撞子的基础奖励
        joker_disruption_range: 被撞棋子离家距离小于该值时额外奖励 (差值的一半)
        come_out_penalty: 停在对手出场位的惩罚
        come_out_start_peg_penalty: 该对手起点区每枚棋子的附加惩罚
        joker_own_come_out_penalty: Joker 落在被撞玩家自己出场位的惩罚
    """
    start_distance: int = 100
    home_move_bonus: int = 10
    start_move_bonus: int = -5
    joker_base_bonus: int = 5
    joker_disruption_range: int = 20
    come_out_penalty: int = 15
    come_out_start_peg_penalty: int = 3
    joker_own_come_out_penalty: int = 30

    @classmethod
    def from_dict(cls, d: dict) -> 'HeuristicConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)
