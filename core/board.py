"""
棋盘拓扑

- 环形赛道共 72 格，分为 4 段，每位玩家 18 格
- 每位玩家有 5 枚棋子、5 格私有终点区 (home)
- 棋子位置是三选一的标签联合: Start | Track(position) | Home(slot)
"""
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

NUM_PLAYERS = 4
PEGS_PER_PLAYER = 5
SIDE_LENGTH = 18
TRACK_LENGTH = SIDE_LENGTH * NUM_PLAYERS
HOME_SLOTS = 5
LAST_HOME_SLOT = HOME_SLOTS - 1

# 出场位与终点入口在每段上的偏移
COME_OUT_OFFSET = 8
HOME_ENTRANCE_OFFSET = 3

# 起点区棋子的 "距离"，表示很远
START_DISTANCE = 100

PLAYER_NAMES: Tuple[str, ...] = ('Yellow', 'Blue', 'Pink', 'Green')


@dataclass(frozen=True)
class Start:
    """在起点区"""

    def __str__(self) -> str:
        return "Start"


@dataclass(frozen=True)
class Track:
    """在赛道上"""
    position: int

    def __post_init__(self):
        if not 0 <= self.position < TRACK_LENGTH:
            raise ValueError(f"Track position out of range: {self.position}")

    def __str__(self) -> str:
        return f"Space {self.position}"


@dataclass(frozen=True)
class Home:
    """在终点区"""
    slot: int

    def __post_init__(self):
        if not 0 <= self.slot < HOME_SLOTS:
            raise ValueError(f"Home slot out of range: {self.slot}")

    def __str__(self) -> str:
        return f"Home {self.slot}"


Peg = Union[Start, Track, Home]

# pegs[player][peg_index]
Pegs = Tuple[Tuple[Peg, ...], ...]

START = Start()


def initial_pegs() -> Pegs:
    """所有棋子都在起点区"""
    return tuple(
        tuple(START for _ in range(PEGS_PER_PLAYER))
        for _ in range(NUM_PLAYERS)
    )


def wrap(position: int) -> int:
    """环形赛道取模 (支持负数)"""
    return position % TRACK_LENGTH


def come_out_position(player: int) -> int:
    """玩家棋子从起点区出场的赛道位置"""
    return player * SIDE_LENGTH + COME_OUT_OFFSET


def home_entrance(player: int) -> int:
    """终点区入口 (终点区开始前的最后一格)"""
    return player * SIDE_LENGTH + HOME_ENTRANCE_OFFSET


def home_entry_point(player: int) -> int:
    """恰好到达该格即进入终点区第 0 格"""
    return wrap(home_entrance(player) + 1)


def steps_to_entry(position: int, player: int) -> int:
    """
    从赛道位置走到终点入口所需步数

    正好站在入口上时需要绕行一整圈 (72)
    """
    steps = wrap(home_entry_point(player) - position)
    return steps if steps else TRACK_LENGTH


def distance_to_home(peg: Peg, player: int, start_distance: int = START_DISTANCE) -> int:
    """
    棋子离 "完全回家" 的距离，越小越好

    Args:
        peg: 棋子位置
        player: 棋子所属玩家
        start_distance: 起点区棋子的距离常数

    Returns:
        home: 4 - slot; start: start_distance; track: 到入口步数 + 5
    """
    if isinstance(peg, Home):
        return LAST_HOME_SLOT - peg.slot
    if isinstance(peg, Start):
        return start_distance
    return steps_to_entry(peg.position, player) + HOME_SLOTS


def total_distance(pegs: Pegs, player: int, start_distance: int = START_DISTANCE) -> int:
    return sum(distance_to_home(peg, player, start_distance) for peg in pegs[player])


def find_peg_at(pegs: Pegs, position: int) -> Optional[Tuple[int, int]]:
    """
    查找占据赛道某格的棋子

    Returns:
        (player, peg_index)，无棋子返回 None
    """
    for p, player_pegs in enumerate(pegs):
        for i, peg in enumerate(player_pegs):
            if isinstance(peg, Track) and peg.position == position:
                return p, i
    return None


def home_slot_occupied(pegs: Pegs, player: int, slot: int) -> bool:
    return any(isinstance(peg, Home) and peg.slot == slot for peg in pegs[player])


def own_peg_at(pegs: Pegs, player: int, position: int) -> bool:
    return any(isinstance(peg, Track) and peg.position == position for peg in pegs[player])


def iter_opponent_track_pegs(pegs: Pegs, player: int) -> Iterator[Tuple[int, int, Track]]:
    """按玩家、棋子序号顺序遍历对手赛道上的棋子"""
    for p, player_pegs in enumerate(pegs):
        if p == player:
            continue
        for i, peg in enumerate(player_pegs):
            if isinstance(peg, Track):
                yield p, i, peg


def pegs_in_start(pegs: Pegs, player: int) -> int:
    return sum(1 for peg in pegs[player] if isinstance(peg, Start))


def is_retired(peg: Peg) -> bool:
    """到达终点区最后一格的棋子不再移动"""
    return isinstance(peg, Home) and peg.slot == LAST_HOME_SLOT


def all_home(pegs: Pegs, player: int) -> bool:
    return all(isinstance(peg, Home) for peg in pegs[player])


def replace_peg(pegs: Pegs, player: int, peg_index: int, peg: Peg) -> Pegs:
    """返回替换单枚棋子后的新棋盘"""
    return tuple(
        tuple(peg if (p, i) == (player, peg_index) else old for i, old in enumerate(player_pegs))
        for p, player_pegs in enumerate(pegs)
    )
