"""
规则引擎 - 合法性判定与走子执行

合法性判定和执行共用同一个路径计算 (plan_move)，
因此判定为合法的走子一定能被确定性地执行。
所有方法都是纯函数，不修改输入。
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from .board import (
    HOME_SLOTS,
    LAST_HOME_SLOT,
    PLAYER_NAMES,
    START,
    Home,
    Peg,
    Pegs,
    Start,
    Track,
    come_out_position,
    find_peg_at,
    home_slot_occupied,
    iter_opponent_track_pegs,
    own_peg_at,
    replace_peg,
    steps_to_entry,
    wrap,
)
from .cards import Card, CardInfo

# 9 拆分时单边的最大步数
MAX_NINE_SPLIT = 8


class IllegalMoveError(ValueError):
    """请求的动作在当前状态下不合法"""


@dataclass(frozen=True)
class MovePlan:
    """
    一次单枚棋子移动的完整结果

    Attributes:
        player: 走子玩家
        peg_index: 棋子序号
        before: 移动前位置
        destination: 移动后位置
        path: 依次经过的位置 (含终点)，供表现层逐步回放
        bumped: 被撞回起点区的对手棋子 (player, peg_index)
    """
    player: int
    peg_index: int
    before: Peg
    destination: Peg
    path: Tuple[Peg, ...]
    bumped: Optional[Tuple[int, int]] = None


class RuleEngine:
    """
    Pegs and Jokers 规则引擎

    所有方法都是静态方法，无状态
    """

    @staticmethod
    def resolve_amount(info: CardInfo, amount: Optional[int]) -> Optional[int]:
        """
        确定本次移动的带方向步数

        Args:
            info: 牌的语义
            amount: 调用方给出的拆分步数 (None 表示整张牌)

        Returns:
            步数；该牌不允许这个步数时返回 None
        """
        if info.must_split:
            # 9 必须拆分: 任意 1-8 的正负步数
            if amount is None or amount == 0 or abs(amount) > MAX_NINE_SPLIT:
                return None
            return amount

        if info.can_split:
            # 7 可整走或向前拆出 1-6
            if amount is None:
                return info.value
            return amount if 1 <= amount <= info.value else None

        if amount is not None and amount != info.signed_value:
            return None
        return info.signed_value

    @staticmethod
    def _joker_target(
        pegs: Pegs,
        player: int,
        target: Optional[Tuple[int, int]],
    ) -> Optional[Tuple[int, int, Track]]:
        """选出 Joker 的目标；未指定时取遍历顺序中的第一个对手棋子"""
        if target is None:
            return next(iter_opponent_track_pegs(pegs, player), None)

        target_player, target_index = target
        if target_player == player or not 0 <= target_player < len(pegs):
            return None
        if not 0 <= target_index < len(pegs[target_player]):
            return None
        peg = pegs[target_player][target_index]
        if not isinstance(peg, Track):
            return None
        return target_player, target_index, peg

    @staticmethod
    def _plan_track(pegs: Pegs, player: int, peg_index: int, position: int, amount: int) -> Optional[MovePlan]:
        """赛道上按步数移动 (含进入终点区的判定)"""
        before = pegs[player][peg_index]

        if amount > 0:
            # 路径经过终点入口时，先尝试进入终点区
            to_entry = steps_to_entry(position, player)
            if to_entry <= amount:
                slot = amount - to_entry
                if slot < HOME_SLOTS and not home_slot_occupied(pegs, player, slot):
                    track_blocked = any(
                        own_peg_at(pegs, player, wrap(position + step))
                        for step in range(1, to_entry)
                    )
                    home_blocked = any(
                        home_slot_occupied(pegs, player, s) for s in range(slot)
                    )
                    if not track_blocked and not home_blocked:
                        path = tuple(Track(wrap(position + step)) for step in range(1, to_entry))
                        path += tuple(Home(s) for s in range(slot + 1))
                        return MovePlan(player, peg_index, before, Home(slot), path)
                # 其余情况 (越过终点区、被占据、被阻挡): 继续沿赛道移动

        new_pos = wrap(position + amount)
        occupant = find_peg_at(pegs, new_pos)
        if occupant is not None and occupant[0] == player:
            return None

        direction = 1 if amount > 0 else -1
        for step in range(direction, amount, direction):
            if own_peg_at(pegs, player, wrap(position + step)):
                return None

        path = tuple(Track(wrap(position + step)) for step in range(direction, amount + direction, direction))
        return MovePlan(player, peg_index, before, Track(new_pos), path, bumped=occupant)

    @staticmethod
    def plan_move(
        pegs: Pegs,
        player: int,
        peg_index: int,
        card: Card,
        amount: Optional[int] = None,
        target: Optional[Tuple[int, int]] = None,
    ) -> Optional[MovePlan]:
        """
        计算单枚棋子的走子结果

        Args:
            pegs: 棋盘快照
            player: 走子玩家
            peg_index: 棋子序号
            card: 使用的牌
            amount: 拆分步数 (7/9 拆分时使用，9 必须提供)
            target: Joker 的目标对手棋子 (player, peg_index)，None 表示第一个

        Returns:
            MovePlan；不合法返回 None
        """
        if not 0 <= peg_index < len(pegs[player]):
            raise ValueError(f"Invalid peg index: {peg_index}")

        peg = pegs[player][peg_index]
        info = card.info

        if isinstance(peg, Home):
            if info.is_joker or info.backward or info.must_split:
                return None
            steps = RuleEngine.resolve_amount(info, amount)
            if steps is None or steps <= 0:
                return None
            new_slot = peg.slot + steps
            if new_slot > LAST_HOME_SLOT:
                return None
            if any(home_slot_occupied(pegs, player, s) for s in range(peg.slot + 1, new_slot + 1)):
                return None
            path = tuple(Home(s) for s in range(peg.slot + 1, new_slot + 1))
            return MovePlan(player, peg_index, peg, Home(new_slot), path)

        if info.is_joker:
            found = RuleEngine._joker_target(pegs, player, target)
            if found is None:
                return None
            target_player, target_index, target_peg = found
            destination = Track(target_peg.position)
            return MovePlan(
                player, peg_index, peg, destination, (destination,),
                bumped=(target_player, target_index),
            )

        if isinstance(peg, Start):
            if not info.can_start:
                return None
            if amount is not None and amount != info.signed_value:
                return None
            position = come_out_position(player)
            occupant = find_peg_at(pegs, position)
            if occupant is not None and occupant[0] == player:
                return None
            destination = Track(position)
            return MovePlan(player, peg_index, peg, destination, (destination,), bumped=occupant)

        steps = RuleEngine.resolve_amount(info, amount)
        if steps is None:
            return None
        return RuleEngine._plan_track(pegs, player, peg_index, peg.position, steps)

    @staticmethod
    def is_legal(
        pegs: Pegs,
        player: int,
        peg_index: int,
        card: Card,
        amount: Optional[int] = None,
        target: Optional[Tuple[int, int]] = None,
    ) -> bool:
        """判断单枚棋子的走子是否合法 (拆分的另一半由调用方单独验证)"""
        return RuleEngine.plan_move(pegs, player, peg_index, card, amount, target) is not None

    @staticmethod
    def apply_plan(pegs: Pegs, plan: MovePlan) -> Pegs:
        """把 MovePlan 应用到棋盘，返回新棋盘"""
        if plan.bumped is not None:
            pegs = replace_peg(pegs, plan.bumped[0], plan.bumped[1], START)
        return replace_peg(pegs, plan.player, plan.peg_index, plan.destination)

    @staticmethod
    def execute(
        pegs: Pegs,
        player: int,
        peg_index: int,
        card: Card,
        amount: Optional[int] = None,
        target: Optional[Tuple[int, int]] = None,
    ) -> Tuple[Pegs, bool]:
        """
        执行走子

        Returns:
            (新棋盘, 是否撞回了对手棋子)

        Raises:
            IllegalMoveError: 走子不合法
        """
        plan = RuleEngine.plan_move(pegs, player, peg_index, card, amount, target)
        if plan is None:
            raise IllegalMoveError(
                f"Illegal move: player {player} peg {peg_index} with {card} (amount={amount})"
            )
        return RuleEngine.apply_plan(pegs, plan), plan.bumped is not None

    @staticmethod
    def move_path(
        pegs: Pegs,
        player: int,
        peg_index: int,
        card: Card,
        amount: Optional[int] = None,
        target: Optional[Tuple[int, int]] = None,
    ) -> Tuple[Peg, ...]:
        """走子依次经过的位置；不合法返回空元组"""
        plan = RuleEngine.plan_move(pegs, player, peg_index, card, amount, target)
        return plan.path if plan is not None else ()


def describe_move(
    before: Peg,
    after: Peg,
    card: Card,
    amount: Optional[int] = None,
    bumped_player: Optional[int] = None,
) -> str:
    """
    生成一步走子的简短描述

    Examples:
        "Space 12 to Space 19", "Joker bumped Blue", "Space 2 to Home 1"
    """
    info = card.info

    if info.is_joker and bumped_player is not None:
        return f"Joker bumped {PLAYER_NAMES[bumped_player]}"

    if isinstance(before, Start) and info.can_start:
        return "Started a peg"

    if isinstance(before, Track) and isinstance(after, Home):
        return f"Space {before.position} to Home {after.slot}"

    if isinstance(before, Home) and isinstance(after, Home):
        return f"Home {before.slot} to Home {after.slot}"

    if isinstance(before, Track) and isinstance(after, Track):
        return f"Space {before.position} to Space {after.position}"

    return "Moved"


def describe_split(first: str, second: str) -> str:
    return f"Split: {first}, {second}"
