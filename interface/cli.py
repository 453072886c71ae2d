"""Terminal driver: play against the computer (or a friend) on an N x N board."""

import argparse

from chess2.config import CONFIG
from chess2.core.board import from_algebraic
from chess2.core.utils import setup_logging
from chess2.main import Game


def _ask_square(game: Game, prompt: str):
    while True:
        text = input(prompt).strip()
        try:
            return from_algebraic(text, game.size)
        except ValueError:
            print("Enter a square such as e2.")


def _prompt_upgrade(game: Game):
    options = game.upgrade_options()
    if not options:
        print("No upgrades available, point banked.")
        game.skip_upgrade()
        return
    for i, opt in enumerate(options, 1):
        print(f"  {i}. {opt.title} - {opt.description}")
    choice = input("Pick an upgrade (blank to bank the point): ").strip()
    if choice.isdigit() and 1 <= int(choice) <= len(options):
        game.upgrade(options[int(choice) - 1].key)
    else:
        game.skip_upgrade()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play Chess 2.0 in the terminal.")
    parser.add_argument("--size", type=int, default=CONFIG.game.board_size)
    parser.add_argument("--mode", choices=["cpu", "pvp"], default=CONFIG.game.mode)
    parser.add_argument("--level", type=int, default=CONFIG.search.default_level)
    args = parser.parse_args(argv)

    setup_logging(CONFIG.log_level)
    game = Game(size=args.size, mode=args.mode, level=args.level)

    while not game.is_game_over:
        print(game.state)
        print("----------------------------")

        if game.is_computer_turn:
            move = game.computer_move()
            if move is None:
                print("Computer has no legal moves.")
                break
            print(f"Computer plays: {move.notation(game.size)}")
            continue

        if game.state.pending_shield is not None:
            game.choose_shield(_ask_square(game, "Square of the piece to shield: "))
            continue

        text = input(f"{game.state.turn.display_name} move (e.g. e2e4, 'undo'): ").strip().lower()
        if text == "undo":
            game.undo()
            continue
        try:
            split = next(i for i in range(2, len(text)) if text[i].isalpha())
            src = from_algebraic(text[:split], game.size)
            dst = from_algebraic(text[split:], game.size)
        except (StopIteration, ValueError):
            print("Could not read that move, try again.")
            continue
        if not game.make_move(src, dst):
            print("Illegal move, try again.")
            continue
        if game.state.pending_upgrade is not None:
            _prompt_upgrade(game)

    print(game.state)
    print("Game Over")
    if game.state.winner is not None:
        print(f"Winner: {game.state.winner.display_name}")


if __name__ == "__main__":
    main()
