#!/usr/bin/env python3
"""
对战脚本

Usage:
    python scripts/play.py --mode watch  # 观看 AI 对战
    python scripts/play.py --mode play   # 与 AI 对战 (你是 Yellow)
"""
import argparse
import json
import logging
import sys
from pathlib import Path
import time

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core.ai import HeuristicAI
from core.board import NUM_PLAYERS, PLAYER_NAMES, Home, Start, Track
from core.cards import cards_to_str
from core.config import HeuristicConfig
from core.state import GameState
from core.turn import TurnController, TurnPhase

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)

HELP = """命令:
  c <i>            选择第 i 张手牌
  p <i> [n]        选择己方第 i 枚棋子 (7/9 拆分时给出步数 n，9 的后退为负数)
  t <player> <i>   Joker 目标: 对手 player 的第 i 枚棋子
  d <i>            无路可走时弃掉第 i 张手牌
  x                取消当前选择
  q                退出"""


def parse_args():
    parser = argparse.ArgumentParser(description="Pegs and Jokers Play")

    parser.add_argument(
        "--mode",
        type=str,
        default="watch",
        choices=["watch", "play"],
        help="Mode: watch AI or play against AI",
    )
    parser.add_argument("--delay", type=float, default=0.5, help="Delay between moves")
    parser.add_argument("--games", type=int, default=1, help="Number of games")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--config", type=str, help="Heuristic config JSON file")

    return parser.parse_args()


def load_ai(path) -> HeuristicAI:
    if not path:
        return HeuristicAI()
    with open(path) as f:
        return HeuristicAI(HeuristicConfig.from_dict(json.load(f)))


def print_board(controller: TurnController):
    """打印棋盘"""
    state = controller.state
    pegs = controller.pegs

    print("\n" + "=" * 60)
    print(f"当前玩家: {PLAYER_NAMES[state.current_player]}")
    print("-" * 60)

    for p in range(NUM_PLAYERS):
        cells = []
        for i, peg in enumerate(pegs[p]):
            cells.append(f"{i}:{peg}")
        marker = "*" if p == state.current_player else " "
        print(f"{marker}{PLAYER_NAMES[p]:<7} {'  '.join(cells)}  (stuck {state.stuck_counts[p]}/3)")
        if state.last_moves[p]:
            print(f"         上一步: {state.last_moves[p]}")

    print("=" * 60)


def print_hand(state: GameState):
    hand = state.get_hand()
    print("手牌: " + "  ".join(f"{i}:{card}" for i, card in enumerate(hand)))


def watch_game(args):
    """观看 AI 对战"""
    ai = load_ai(args.config)

    for game_idx in range(args.games):
        print(f"\n{'='*60}")
        print(f"Game {game_idx + 1}/{args.games}")
        print("=" * 60)

        seed = args.seed + game_idx if args.seed is not None else None
        controller = TurnController(GameState.initial(seed=seed), ai_players=range(NUM_PLAYERS), ai=ai)

        while not controller.state.is_finished:
            player = controller.player
            hand = cards_to_str(controller.state.get_hand())
            controller.play_ai_turn()
            print(f"{PLAYER_NAMES[player]:<7} [{hand}] -> {controller.state.last_moves[player]}")
            time.sleep(args.delay)

        print_board(controller)
        print(f"游戏结束! 胜者: {PLAYER_NAMES[controller.state.winner]}")
        print(f"总步数: {controller.state.step_count}")
        print("=" * 60)


def handle_command(controller: TurnController, command: str) -> bool:
    """处理一条玩家命令；返回 False 表示退出"""
    parts = command.split()
    if not parts:
        return True

    op, values = parts[0].lower(), parts[1:]
    try:
        numbers = [int(v) for v in values]
    except ValueError:
        print("请输入数字")
        return True

    if op == "q":
        return False
    if op == "x":
        controller.cancel()
    elif op == "c" and len(numbers) == 1:
        controller.select_card(numbers[0])
    elif op == "p" and len(numbers) in (1, 2):
        controller.select_peg(*numbers)
    elif op == "t" and len(numbers) == 2:
        controller.select_joker_target(*numbers)
    elif op == "d" and len(numbers) == 1:
        controller.discard(numbers[0])
    else:
        print(HELP)
        return True

    print(controller.message)
    return True


def play_game(args):
    """与 AI 对战"""
    ai = load_ai(args.config)

    for game_idx in range(args.games):
        print(f"\n{'='*60}")
        print(f"Game {game_idx + 1}/{args.games}")
        print("你是 Yellow!")
        print(HELP)
        print("=" * 60)

        seed = args.seed + game_idx if args.seed is not None else None
        controller = TurnController(GameState.initial(seed=seed), ai_players=(1, 2, 3), ai=ai)

        while not controller.state.is_finished:
            if controller.is_ai_turn:
                player = controller.player
                controller.play_ai_turn()
                print(f"{PLAYER_NAMES[player]}: {controller.state.last_moves[player]}")
                time.sleep(args.delay)
                continue

            print_board(controller)
            print_hand(controller.state)
            if controller.can_discard():
                print("没有合法走子，请弃牌 (d <i>)")
            if controller.phase == TurnPhase.AWAITING_SPLIT_COMPLETION:
                print(controller.message)

            if not handle_command(controller, input("> ")):
                print("退出游戏")
                return

        print_board(controller)
        if controller.state.winner == 0:
            print("恭喜你赢了!")
        else:
            print("你输了!")
        print(f"胜者: {PLAYER_NAMES[controller.state.winner]}")
        print("=" * 60)


def main():
    args = parse_args()

    print("=" * 60)
    print("Pegs and Jokers")
    print("=" * 60)

    if args.mode == "watch":
        watch_game(args)
    elif args.mode == "play":
        play_game(args)


if __name__ == "__main__":
    main()
