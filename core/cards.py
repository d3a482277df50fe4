"""
牌的定义

Pegs and Jokers 使用两副完整扑克牌 (含大小王)，共 108 张：
- A, 2-10, J, Q, K 每副各 4 种花色
- 每副 2 张 Joker
"""
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


# 花色 (Joker 使用通配符标记)
SUITS: Tuple[str, ...] = ('♠', '♥', '♦', '♣')
JOKER_SUIT = '🃏'

JOKER = 'JOKER'

# 牌面顺序 (不含 Joker)
RANKS: Tuple[str, ...] = ('A', '2', '3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K')

# 所有牌面 (含 Joker)，用于编码
ALL_RANKS: Tuple[str, ...] = RANKS + (JOKER,)

RANK_TO_INDEX: Dict[str, int] = {rank: i for i, rank in enumerate(ALL_RANKS)}

NUM_DECKS = 2
JOKERS_PER_DECK = 2


@dataclass(frozen=True)
class CardInfo:
    """
    牌的移动语义

    Attributes:
        value: 移动步数 (不带方向)
        can_start: 能否把起点区的棋子移到出场位
        backward: 是否后退
        can_split: 可以拆分给两枚棋子 (7)
        must_split: 必须拆分为一进一退 (9)
        is_joker: 是否为 Joker
    """
    value: int
    can_start: bool = False
    backward: bool = False
    can_split: bool = False
    must_split: bool = False
    is_joker: bool = False

    @property
    def signed_value(self) -> int:
        """带方向的步数 (8 为 -8)"""
        return -self.value if self.backward else self.value


CARD_VALUES: Dict[str, CardInfo] = {
    'A': CardInfo(1, can_start=True),
    '2': CardInfo(2),
    '3': CardInfo(3),
    '4': CardInfo(4),
    '5': CardInfo(5),
    '6': CardInfo(6),
    '7': CardInfo(7, can_split=True),
    '8': CardInfo(8, backward=True),
    '9': CardInfo(9, must_split=True),
    '10': CardInfo(10),
    'J': CardInfo(11, can_start=True),
    'Q': CardInfo(12, can_start=True),
    'K': CardInfo(13, can_start=True),
    JOKER: CardInfo(0, is_joker=True),
}


@dataclass(frozen=True)
class Card:
    """
    不可变的牌

    两副牌中存在相同牌面和花色的牌，必须通过 id 区分
    """
    rank: str
    suit: str
    id: str

    def __post_init__(self):
        if self.rank not in CARD_VALUES:
            raise ValueError(f"Unknown rank: {self.rank!r}")

    @property
    def info(self) -> CardInfo:
        return CARD_VALUES[self.rank]

    @property
    def is_joker(self) -> bool:
        return self.rank == JOKER

    def __str__(self) -> str:
        if self.is_joker:
            return JOKER_SUIT
        return f"{self.rank}{self.suit}"


def make_card(rank: str, suit: str = SUITS[0], deck: int = 0) -> Card:
    """按规则生成 id 的便捷构造函数 (Joker 忽略花色，用 deck 区分)"""
    if rank == JOKER:
        return Card(JOKER, JOKER_SUIT, f"JOKER1_{deck}")
    return Card(rank, suit, f"{rank}{suit}{deck}")


def create_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """
    生成并洗好两副牌

    Args:
        rng: 随机数生成器 (None 使用全局 random)

    Returns:
        108 张牌的列表
    """
    deck = []
    for d in range(NUM_DECKS):
        for suit in SUITS:
            for rank in RANKS:
                deck.append(Card(rank, suit, f"{rank}{suit}{d}"))
        for n in range(1, JOKERS_PER_DECK + 1):
            deck.append(Card(JOKER, JOKER_SUIT, f"JOKER{n}_{d}"))

    (rng or random).shuffle(deck)
    return deck


def cards_to_str(cards) -> str:
    """
    将牌列表转换为可读字符串

    Returns:
        如 "A♠ 7♥ 🃏"
    """
    return ' '.join(str(c) for c in cards)
