"""
Core Layer - 纯游戏逻辑 (无 ML 依赖)

Modules:
    cards: 牌定义与牌组
    deck: 抽牌与弃牌堆
    board: 棋盘拓扑与棋子位置
    rules: 规则引擎
    actions: 动作类型与生成
    state: 游戏状态
    ai: 启发式对手
    turn: 交互式回合控制
"""
from .cards import (
    Card,
    CardInfo,
    CARD_VALUES,
    RANKS,
    SUITS,
    JOKER,
    make_card,
    create_deck,
    cards_to_str,
)

from .board import (
    NUM_PLAYERS,
    PEGS_PER_PLAYER,
    TRACK_LENGTH,
    HOME_SLOTS,
    PLAYER_NAMES,
    Start,
    Track,
    Home,
    Peg,
    Pegs,
    come_out_position,
    home_entrance,
    distance_to_home,
)

from .rules import (
    RuleEngine,
    MovePlan,
    IllegalMoveError,
    describe_move,
)

from .actions import (
    ActionType,
    Action,
    ActionGenerator,
    enumerate_legal_moves,
    has_any_valid_move,
)

from .state import (
    GameState,
    HAND_SIZE,
    STUCK_LIMIT,
    new_game,
)

from .config import HeuristicConfig

from .ai import (
    HeuristicAI,
    ScoredAction,
    choose_move,
)

from .turn import (
    TurnController,
    TurnPhase,
)

__all__ = [
    # cards
    "Card",
    "CardInfo",
    "CARD_VALUES",
    "RANKS",
    "SUITS",
    "JOKER",
    "make_card",
    "create_deck",
    "cards_to_str",
    # board
    "NUM_PLAYERS",
    "PEGS_PER_PLAYER",
    "TRACK_LENGTH",
    "HOME_SLOTS",
    "PLAYER_NAMES",
    "Start",
    "Track",
    "Home",
    "Peg",
    "Pegs",
    "come_out_position",
    "home_entrance",
    "distance_to_home",
    # rules
    "RuleEngine",
    "MovePlan",
    "IllegalMoveError",
    "describe_move",
    # actions
    "ActionType",
    "Action",
    "ActionGenerator",
    "enumerate_legal_moves",
    "has_any_valid_move",
    # state
    "GameState",
    "HAND_SIZE",
    "STUCK_LIMIT",
    "new_game",
    # ai
    "HeuristicConfig",
    "HeuristicAI",
    "ScoredAction",
    "choose_move",
    # turn
    "TurnController",
    "TurnPhase",
]
