"""
动作类型定义与动作生成器

一个回合的动作是带标签的候选记录:
SIMPLE / START / SPLIT7 / SPLIT9 / JOKER，无路可走时为 DISCARD
"""
from enum import IntEnum
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from .board import PEGS_PER_PLAYER, Pegs, Start, Track, all_home, is_retired
from .cards import Card, CardInfo
from .rules import MAX_NINE_SPLIT, MovePlan, RuleEngine


class ActionType(IntEnum):
    """动作类型"""
    SIMPLE = 0    # 单枚棋子按牌值移动 (含后退的 8、整走的 7)
    START = 1     # 用出场牌把起点区棋子移到出场位
    SPLIT7 = 2    # 7 拆给两枚棋子，均向前
    SPLIT9 = 3    # 9 拆为一进一退
    JOKER = 4     # Joker 撞回对手棋子并占据其位置
    DISCARD = 5   # 无合法走子时弃牌


# 7 可拆出的第一段步数
SEVEN_SPLITS: Tuple[int, ...] = tuple(range(1, 7))

# 9 的前进段步数
NINE_FORWARD_SPLITS: Tuple[int, ...] = tuple(range(1, MAX_NINE_SPLIT + 1))


@dataclass(frozen=True, slots=True)
class Action:
    """
    不可变动作表示

    Attributes:
        action_type: 动作类型
        card: 使用 (或弃掉) 的牌
        peg_index: 第一枚棋子
        amount: 第一段步数 (None 表示整张牌)
        second_peg: 拆分时的第二枚棋子
        second_amount: 拆分时第二段步数
        target: Joker 目标 (player, peg_index)
    """
    action_type: ActionType
    card: Card
    peg_index: Optional[int] = None
    amount: Optional[int] = None
    second_peg: Optional[int] = None
    second_amount: Optional[int] = None
    target: Optional[Tuple[int, int]] = None

    @classmethod
    def simple(cls, card: Card, peg_index: int, amount: Optional[int] = None) -> 'Action':
        return cls(ActionType.SIMPLE, card, peg_index, amount)

    @classmethod
    def start(cls, card: Card, peg_index: int) -> 'Action':
        return cls(ActionType.START, card, peg_index)

    @classmethod
    def split(cls, card: Card, peg_index: int, amount: int, second_peg: Optional[int] = None) -> 'Action':
        """
        创建拆分动作，第二段步数由第一段推出

        second_peg 为 None 表示第一段即获胜，不执行第二段
        """
        info = card.info
        if info.can_split:
            action_type = ActionType.SPLIT7
        elif info.must_split:
            action_type = ActionType.SPLIT9
        else:
            raise ValueError(f"Card {card} cannot be split")
        return cls(action_type, card, peg_index, amount, second_peg, companion_amount(info, amount))

    @classmethod
    def joker(cls, card: Card, peg_index: int, target: Tuple[int, int]) -> 'Action':
        return cls(ActionType.JOKER, card, peg_index, target=target)

    @classmethod
    def discard(cls, card: Card) -> 'Action':
        return cls(ActionType.DISCARD, card)

    @property
    def is_split(self) -> bool:
        return self.action_type in (ActionType.SPLIT7, ActionType.SPLIT9)

    @property
    def is_discard(self) -> bool:
        return self.action_type == ActionType.DISCARD

    def is_well_formed(self) -> bool:
        """
        动作类型与牌、各字段是否相符 (不看棋盘)

        SIMPLE 不能用 9 或 Joker，7 只能整走；拆分必须用对应的牌，
        第二段步数必须等于由第一段推出的值；JOKER 必须带目标
        """
        info = self.card.info
        kind = self.action_type
        if kind == ActionType.DISCARD:
            return True
        if self.peg_index is None:
            return False
        if kind != ActionType.JOKER and self.target is not None:
            return False
        if not self.is_split and (self.second_peg is not None or self.second_amount is not None):
            return False

        if kind == ActionType.SIMPLE:
            if info.must_split or info.is_joker:
                return False
            return not info.can_split or self.amount in (None, info.value)
        if kind == ActionType.START:
            return info.can_start and self.amount is None
        if kind == ActionType.JOKER:
            return info.is_joker and self.target is not None and self.amount is None

        if self.amount is None or self.second_peg == self.peg_index:
            return False
        if kind == ActionType.SPLIT7:
            if not info.can_split or not 1 <= self.amount < info.value:
                return False
        elif not info.must_split or not 0 < abs(self.amount) <= MAX_NINE_SPLIT:
            return False
        return self.second_amount is None or self.second_amount == companion_amount(info, self.amount)

    def sub_moves(self) -> List[Tuple[int, Optional[int]]]:
        """按执行顺序列出 (peg_index, amount)，第二段步数总是重新推出"""
        if self.is_discard:
            return []
        moves = [(self.peg_index, self.amount)]
        if self.is_split and self.second_peg is not None:
            moves.append((self.second_peg, companion_amount(self.card.info, self.amount)))
        return moves


def companion_amount(info: CardInfo, amount: int) -> int:
    """拆分第二段的带方向步数: 7 为 7 - s，9 与第一段方向相反"""
    remaining = info.value - abs(amount)
    if info.must_split and amount > 0:
        return -remaining
    return remaining


def simulate(pegs: Pegs, player: int, action: Action) -> Optional[Tuple[Pegs, List[MovePlan]]]:
    """
    在棋盘快照上依次执行动作的各段

    拆分的第二段在第一段执行后的棋盘上验证；第一段即获胜时不执行第二段，
    没有第二枚棋子的拆分只有在第一段获胜时才合法

    Returns:
        (新棋盘, 各段 MovePlan)；形状不符或任一段不合法返回 None
    """
    if action.is_discard or not action.is_well_formed():
        return None

    plans = []
    for peg_index, amount in action.sub_moves():
        plan = RuleEngine.plan_move(pegs, player, peg_index, action.card, amount, action.target)
        if plan is None:
            return None
        pegs = RuleEngine.apply_plan(pegs, plan)
        plans.append(plan)
        if all_home(pegs, player):
            break

    if action.action_type == ActionType.START and not isinstance(plans[0].before, Start):
        return None
    if action.is_split and len(plans) == 1 and not all_home(pegs, player):
        return None

    return pegs, plans


class ActionGenerator:
    """
    合法动作生成器

    枚举手牌中每张牌、每枚未退役棋子的所有走法 (含全部拆分组合)
    """

    def __init__(self, pegs: Pegs, player: int, hand: Sequence[Card]):
        """
        Args:
            pegs: 棋盘快照
            player: 行动玩家
            hand: 手牌
        """
        self.pegs = pegs
        self.player = player
        self.hand = list(hand)

    def _legal(self, pegs: Pegs, peg_index: int, card: Card, amount: Optional[int] = None) -> bool:
        return RuleEngine.is_legal(pegs, self.player, peg_index, card, amount)

    def _after(self, peg_index: int, card: Card, amount: Optional[int]) -> Pegs:
        pegs, _ = RuleEngine.execute(self.pegs, self.player, peg_index, card, amount)
        return pegs

    def gen_simple(self, card: Card, peg_index: int) -> Iterator[Action]:
        """普通牌 (含 8 和出场牌) 的单枚棋子走法"""
        info = card.info
        if info.can_split or info.must_split or info.is_joker:
            return
        if self._legal(self.pegs, peg_index, card):
            yield Action.simple(card, peg_index)

    def gen_seven(self, card: Card, peg_index: int) -> Iterator[Action]:
        """7: 整走一次，或拆为 s + (7 - s) 给两枚不同的棋子"""
        if self._legal(self.pegs, peg_index, card, card.info.value):
            yield Action.simple(card, peg_index, card.info.value)

        for split in SEVEN_SPLITS:
            if not self._legal(self.pegs, peg_index, card, split):
                continue
            after_first = self._after(peg_index, card, split)
            if all_home(after_first, self.player):
                # 第一段即获胜
                yield Action.split(card, peg_index, split)
                continue
            remaining = companion_amount(card.info, split)
            for second in range(PEGS_PER_PLAYER):
                if second != peg_index and self._legal(after_first, second, card, remaining):
                    yield Action.split(card, peg_index, split, second)

    def gen_nine(self, card: Card, peg_index: int) -> Iterator[Action]:
        """9: 本棋子前进 f，另一枚棋子后退 9 - f"""
        for forward in NINE_FORWARD_SPLITS:
            if not self._legal(self.pegs, peg_index, card, forward):
                continue
            after_first = self._after(peg_index, card, forward)
            if all_home(after_first, self.player):
                yield Action.split(card, peg_index, forward)
                continue
            backward = companion_amount(card.info, forward)
            for second in range(PEGS_PER_PLAYER):
                if second != peg_index and self._legal(after_first, second, card, backward):
                    yield Action.split(card, peg_index, forward, second)

    def gen_start(self, card: Card, peg_index: int) -> Iterator[Action]:
        """出场牌作用于起点区棋子"""
        if not card.info.can_start or not isinstance(self.pegs[self.player][peg_index], Start):
            return
        if self._legal(self.pegs, peg_index, card):
            yield Action.start(card, peg_index)

    def gen_joker(self, card: Card, peg_index: int) -> Iterator[Action]:
        """Joker: 对每个对手赛道上的棋子各生成一个动作"""
        if not card.info.is_joker:
            return
        if not isinstance(self.pegs[self.player][peg_index], (Start, Track)):
            return
        for p, player_pegs in enumerate(self.pegs):
            if p == self.player:
                continue
            for i, peg in enumerate(player_pegs):
                if isinstance(peg, Track):
                    yield Action.joker(card, peg_index, (p, i))

    def iter_actions(self) -> Iterator[Action]:
        """按固定顺序惰性枚举所有合法动作"""
        for card in self.hand:
            info = card.info
            for peg_index in range(PEGS_PER_PLAYER):
                if is_retired(self.pegs[self.player][peg_index]):
                    continue
                yield from self.gen_simple(card, peg_index)
                if info.can_split:
                    yield from self.gen_seven(card, peg_index)
                if info.must_split:
                    yield from self.gen_nine(card, peg_index)
                yield from self.gen_start(card, peg_index)
                yield from self.gen_joker(card, peg_index)

    def generate_all(self) -> List[Action]:
        """
        生成所有合法走子动作

        Returns:
            动作列表 (不含弃牌)
        """
        return list(self.iter_actions())

    def generate_discards(self) -> List[Action]:
        """无路可走时，每张手牌各对应一个弃牌动作"""
        return [Action.discard(card) for card in self.hand]

    def has_any_valid_move(self) -> bool:
        return next(self.iter_actions(), None) is not None


def enumerate_legal_moves(pegs: Pegs, player: int, hand: Sequence[Card]) -> List[Action]:
    return ActionGenerator(pegs, player, hand).generate_all()


def has_any_valid_move(pegs: Pegs, player: int, hand: Sequence[Card]) -> bool:
    return ActionGenerator(pegs, player, hand).has_any_valid_move()
