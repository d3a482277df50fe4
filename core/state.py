"""
游戏状态定义

使用不可变数据结构:
- 每个完成的动作返回新状态，拒绝的动作不产生任何修改
- 回合推进、补牌、卡死计数、胜负判定都在这里完成
"""
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple
import logging
import random

from .actions import Action, ActionGenerator, ActionType, simulate
from .board import (
    NUM_PLAYERS,
    PLAYER_NAMES,
    START,
    Peg,
    Pegs,
    Start,
    Track,
    all_home,
    come_out_position,
    find_peg_at,
    initial_pegs,
    own_peg_at,
    replace_peg,
)
from .cards import Card, create_deck
from .deck import DiscardPiles, discard, draw_card
from .rules import IllegalMoveError, RuleEngine, describe_move, describe_split

logger = logging.getLogger(__name__)

HAND_SIZE = 6

# 连续卡死弃牌达到该次数时自动出场一枚棋子
STUCK_LIMIT = 3

STUCK_DISCARD = "Discarded (stuck)"
STUCK_AUTO_START = "Stuck 3x - Started a peg"

# 一段棋子移动的回放记录: (player, peg_index, 依次经过的位置)
PathSegment = Tuple[int, int, Tuple[Peg, ...]]


@dataclass(frozen=True)
class GameState:
    """
    不可变游戏状态

    Attributes:
        pegs: 4 × 5 棋子位置
        hands: 各玩家手牌 (按抽牌顺序)
        draw_pile: 抽牌堆，末尾为堆顶
        discard_piles: 各玩家弃牌堆
        current_player: 当前行动玩家 0-3
        stuck_counts: 各玩家连续卡死弃牌次数
        winner: 赢家，未结束为 None
        last_moves: 各玩家最近一次动作描述
        history: 动作历史 ((player, description), ...)
        last_paths: 最近一次动作中每枚移动棋子的路径
        step_count: 已完成的动作数
        rng: 重洗弃牌堆用的随机数生成器 (不参与比较)
    """
    pegs: Pegs
    hands: Tuple[Tuple[Card, ...], ...]
    draw_pile: Tuple[Card, ...]
    discard_piles: DiscardPiles
    current_player: int = 0
    stuck_counts: Tuple[int, ...] = (0,) * NUM_PLAYERS
    winner: Optional[int] = None
    last_moves: Tuple[Optional[str], ...] = (None,) * NUM_PLAYERS
    history: Tuple[Tuple[int, str], ...] = ()
    last_paths: Tuple[PathSegment, ...] = ()
    step_count: int = 0
    rng: random.Random = field(default_factory=random.Random, compare=False, repr=False)

    @classmethod
    def initial(cls, seed: Optional[int] = None) -> 'GameState':
        """
        创建初始游戏状态

        两副牌洗混，按玩家顺序每人发 6 张，所有棋子在起点区，玩家 0 先行

        Args:
            seed: 随机种子

        Returns:
            初始状态
        """
        rng = random.Random(seed)
        deck = create_deck(rng)

        hands = tuple(
            tuple(deck[p * HAND_SIZE:(p + 1) * HAND_SIZE])
            for p in range(NUM_PLAYERS)
        )

        return cls(
            pegs=initial_pegs(),
            hands=hands,
            draw_pile=tuple(deck[NUM_PLAYERS * HAND_SIZE:]),
            discard_piles=tuple(() for _ in range(NUM_PLAYERS)),
            rng=rng,
        )

    @property
    def is_finished(self) -> bool:
        return self.winner is not None

    def get_hand(self, player: Optional[int] = None) -> Tuple[Card, ...]:
        """获取指定玩家的手牌 (默认当前玩家)"""
        return self.hands[self.current_player if player is None else player]

    def is_legal(
        self,
        player: int,
        peg_index: int,
        card: Card,
        amount: Optional[int] = None,
        target: Optional[Tuple[int, int]] = None,
    ) -> bool:
        return RuleEngine.is_legal(self.pegs, player, peg_index, card, amount, target)

    def has_any_valid_move(self, player: Optional[int] = None) -> bool:
        player = self.current_player if player is None else player
        return ActionGenerator(self.pegs, player, self.hands[player]).has_any_valid_move()

    def enumerate_legal_moves(self, player: Optional[int] = None) -> List[Action]:
        """所有合法走子 (不含弃牌)"""
        player = self.current_player if player is None else player
        return ActionGenerator(self.pegs, player, self.hands[player]).generate_all()

    def get_legal_actions(self) -> List[Action]:
        """
        获取当前玩家的合法动作

        Returns:
            有合法走子时为走子列表，否则为每张手牌一个弃牌动作；游戏结束为空
        """
        if self.is_finished:
            return []
        generator = ActionGenerator(self.pegs, self.current_player, self.get_hand())
        actions = generator.generate_all()
        if actions:
            return actions
        return generator.generate_discards()

    def _draw_after_consuming(self, player: int, card: Card):
        """把牌从手中移到弃牌堆并补一张"""
        hand = list(self.hands[player])
        hand.remove(card)
        discard_piles = discard(self.discard_piles, player, card)

        new_card, draw_pile, discard_piles = draw_card(self.draw_pile, discard_piles, self.rng)
        if new_card is not None:
            hand.append(new_card)

        hands = tuple(tuple(hand) if p == player else h for p, h in enumerate(self.hands))
        return hands, draw_pile, discard_piles

    def _record(self, player: int, description: str):
        last_moves = tuple(description if p == player else m for p, m in enumerate(self.last_moves))
        return last_moves, self.history + ((player, description),)

    def with_action(self, action: Action) -> 'GameState':
        """
        执行一个完整动作后的新状态

        Args:
            action: 走子动作或弃牌动作

        Returns:
            新状态

        Raises:
            IllegalMoveError: 动作在当前状态下不合法
        """
        if self.is_finished:
            raise IllegalMoveError("Game is finished")

        if action.is_discard:
            hand = self.get_hand()
            if action.card not in hand:
                raise IllegalMoveError(f"Card {action.card} is not in hand")
            return self.with_discard(hand.index(action.card))

        player = self.current_player
        if action.card not in self.get_hand():
            raise IllegalMoveError(f"Card {action.card} is not in player {player}'s hand")

        result = simulate(self.pegs, player, action)
        if result is None:
            raise IllegalMoveError(f"Illegal action for player {player}: {action}")
        _, plans = result

        # 拆分的每一段结束后都检查胜负
        pegs = self.pegs
        descriptions = []
        paths = []
        winner = None
        for plan, (_, amount) in zip(plans, action.sub_moves()):
            pegs = RuleEngine.apply_plan(pegs, plan)
            bumped_player = plan.bumped[0] if action.action_type == ActionType.JOKER else None
            descriptions.append(describe_move(plan.before, plan.destination, action.card, amount, bumped_player))
            paths.append((player, plan.peg_index, plan.path))
            if all_home(pegs, player):
                winner = player
                break

        description = descriptions[0]
        if len(descriptions) == 2:
            description = describe_split(*descriptions)

        hands, draw_pile, discard_piles = self._draw_after_consuming(player, action.card)
        last_moves, history = self._record(player, description)

        if winner is not None:
            logger.info("%s wins after %d actions", PLAYER_NAMES[winner], self.step_count + 1)

        return replace(
            self,
            pegs=pegs,
            hands=hands,
            draw_pile=draw_pile,
            discard_piles=discard_piles,
            current_player=player if winner is not None else (player + 1) % NUM_PLAYERS,
            stuck_counts=tuple(0 if p == player else c for p, c in enumerate(self.stuck_counts)),
            winner=winner,
            last_moves=last_moves,
            history=history,
            last_paths=tuple(paths),
            step_count=self.step_count + 1,
        )

    def with_discard(self, card_index: int) -> 'GameState':
        """
        卡死弃牌后的新状态

        只有当前玩家没有任何合法走子时才允许。连续第 3 次弃牌时计数清零，
        若有起点区棋子且出场位没有己方棋子，则自动出场 (撞回出场位上的对手)

        Args:
            card_index: 弃掉的手牌序号

        Returns:
            新状态

        Raises:
            IllegalMoveError: 游戏已结束、序号越界或仍有合法走子
        """
        if self.is_finished:
            raise IllegalMoveError("Game is finished")

        player = self.current_player
        hand = self.get_hand()
        if not 0 <= card_index < len(hand):
            raise IllegalMoveError(f"Invalid card index: {card_index}")
        if self.has_any_valid_move(player):
            raise IllegalMoveError(f"Player {player} has a legal move and cannot discard")

        hands, draw_pile, discard_piles = self._draw_after_consuming(player, hand[card_index])

        stuck = self.stuck_counts[player] + 1
        pegs = self.pegs
        paths: Tuple[PathSegment, ...] = ()
        description = STUCK_DISCARD

        if stuck >= STUCK_LIMIT:
            stuck = 0
            peg_index = next(
                (i for i, peg in enumerate(pegs[player]) if isinstance(peg, Start)), None
            )
            position = come_out_position(player)
            if peg_index is not None and not own_peg_at(pegs, player, position):
                occupant = find_peg_at(pegs, position)
                if occupant is not None:
                    pegs = replace_peg(pegs, occupant[0], occupant[1], START)
                pegs = replace_peg(pegs, player, peg_index, Track(position))
                paths = ((player, peg_index, (Track(position),)),)
                description = STUCK_AUTO_START
                logger.debug("%s was stuck %d times and started a peg", PLAYER_NAMES[player], STUCK_LIMIT)

        last_moves, history = self._record(player, description)

        return replace(
            self,
            pegs=pegs,
            hands=hands,
            draw_pile=draw_pile,
            discard_piles=discard_piles,
            current_player=(player + 1) % NUM_PLAYERS,
            stuck_counts=tuple(stuck if p == player else c for p, c in enumerate(self.stuck_counts)),
            last_moves=last_moves,
            history=history,
            last_paths=paths,
            step_count=self.step_count + 1,
        )


def new_game(seed: Optional[int] = None) -> GameState:
    """开始新游戏"""
    return GameState.initial(seed=seed)
