"""
牌堆与弃牌堆管理

抽牌堆为空时，把四个玩家的弃牌堆合并洗混成新的抽牌堆
"""
import logging
import random
from typing import Optional, Tuple

from .cards import Card

logger = logging.getLogger(__name__)

DiscardPiles = Tuple[Tuple[Card, ...], ...]


def draw_card(
    draw_pile: Tuple[Card, ...],
    discard_piles: DiscardPiles,
    rng: Optional[random.Random] = None,
) -> Tuple[Optional[Card], Tuple[Card, ...], DiscardPiles]:
    """
    从抽牌堆顶 (末尾) 抽一张牌

    Args:
        draw_pile: 抽牌堆
        discard_piles: 各玩家弃牌堆
        rng: 重洗时使用的随机数生成器

    Returns:
        (抽到的牌, 新抽牌堆, 新弃牌堆)；抽牌堆和弃牌堆都为空时牌为 None
    """
    if not draw_pile:
        all_discards = [card for pile in discard_piles for card in pile]
        if not all_discards:
            return None, (), discard_piles

        (rng or random).shuffle(all_discards)
        logger.debug("Reshuffled %d discarded cards into the draw pile", len(all_discards))
        empty: DiscardPiles = tuple(() for _ in discard_piles)
        return all_discards[-1], tuple(all_discards[:-1]), empty

    return draw_pile[-1], draw_pile[:-1], discard_piles


def discard(discard_piles: DiscardPiles, player: int, card: Card) -> DiscardPiles:
    """把牌追加到指定玩家的弃牌堆"""
    return tuple(
        pile + (card,) if i == player else pile
        for i, pile in enumerate(discard_piles)
    )
