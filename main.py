#!/usr/bin/env python3
"""
Domino Pips Puzzle Generator

Generates domino placement puzzles, turns them into share tokens and checks
solutions against a board.

Usage:
    python main.py                     # Generate and print a random puzzle
    python main.py --seed 42 --encode  # Reproducible puzzle plus share token
    python main.py --decode TOKEN      # Print the puzzle inside a token
    python main.py --validate TOKEN    # Check the placements inside a token
    python main.py --fetch             # Fetch an official puzzle
"""

import argparse
import logging
import random
import sys
from typing import List, Optional

from domino_sets import DominoSet
from encoding import decode_puzzle, encode_puzzle
from exceptions import DecodeError, PipsError
from generator import GeneratorConfig, generate_puzzle
from grid import Board, PlacedDomino, Puzzle, board_size, find_regions, placement_values
from nyt_parser import parse_nyt_json_file
from nyt_scraper import fetch_official_puzzle
from shapes import TEMPLATES
from validator import get_violated_regions, is_board_full, validate_puzzle
from logger import configure_logging


def format_board(board: Board, placed: Optional[List[PlacedDomino]] = None) -> str:
    """
    Text picture of a board: region color initials, '.' for void and
    'o' for colorless foundation. With placements, a pip grid follows.
    """
    rows, cols = board_size(board)
    lines = []
    for r in range(rows):
        marks = []
        for c in range(cols):
            cell = board[r][c]
            if not cell.is_foundation and not cell.region_color:
                marks.append('.')
            elif not cell.region_color:
                marks.append('o')
            else:
                marks.append(cell.region_color[0].upper())
        lines.append(' '.join(marks))

    regions = find_regions(board)
    if regions:
        lines.append('')
        for region in regions:
            label = region.constraint.label() if region.constraint else '-'
            lines.append(f"  {region.color:<7} {region.display_cell}  {label:>4}  ({region.size()} cells)")

    if placed:
        values = placement_values(placed)
        lines.append('')
        for r in range(rows):
            lines.append(' '.join(
                str(values[(r, c)]) if (r, c) in values else '.'
                for c in range(cols)
            ))
    return '\n'.join(lines)


def print_puzzle(puzzle: Puzzle, show_solution: bool = True) -> None:
    print(f"{puzzle.name}  ({puzzle.rows}x{puzzle.cols}, {len(puzzle.solution_dominoes)} dominoes)")
    if puzzle.seed is not None:
        print(f"seed: {puzzle.seed}")
    print(format_board(puzzle.board, puzzle.solution_placements if show_solution else None))
    print()
    print("Dominoes:", ' '.join(repr(d) for d in puzzle.solution_dominoes))


def display_info():
    """Display information about the domino set and shape library."""
    print("=" * 60)
    print("DOMINO PIPS PUZZLE GENERATOR")
    print("=" * 60)

    d6 = DominoSet.double_six()
    total = sum(d.pips for d in d6)
    print(f"\nDouble-Six: {len(d6)} tiles (0-6), {total} pips in all")
    d6.display()

    print("Templates:")
    for template in TEMPLATES:
        hints = f", {len(template.hints)} hint(s)" if template.hints else ""
        print(f"  • {template.name}: {len(template.cells())} cells{hints}")


def check_token(token: str) -> int:
    decoded = decode_puzzle(token)
    full = is_board_full(decoded.board, decoded.placed_dominoes)
    violated = get_violated_regions(decoded.board, decoded.placed_dominoes)
    print(format_board(decoded.board, decoded.placed_dominoes))
    print()
    print(f"Board full: {'yes' if full else 'no'}")
    if violated:
        print(f"Violated regions: {', '.join(sorted(violated))}")
    solved = validate_puzzle(decoded.board, decoded.placed_dominoes)
    print("✓ Solved" if solved else "✗ Not solved")
    return 0 if solved else 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Domino Pips Puzzle Generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                    # Generate a random puzzle
  python main.py --seed 7 --encode  # Reproducible puzzle and its share token
  python main.py --decode TOKEN     # Show a shared puzzle
  python main.py --validate TOKEN   # Check a shared solution
  python main.py --nyt-file p.json  # Convert a saved NYT puzzle
        """
    )

    parser.add_argument('--seed', type=int, default=None, help='Random seed for generation')
    parser.add_argument('--encode', action='store_true', help='Print the share token of the generated puzzle')
    parser.add_argument('--hide-solution', action='store_true', help='Do not print the pip grid')
    parser.add_argument('--keep-dominoes-whole', action='store_true',
                        help='Never split a solution domino across two regions')
    parser.add_argument('--decode', metavar='TOKEN', help='Print the puzzle stored in a share token')
    parser.add_argument('--validate', metavar='TOKEN', help='Validate the placements stored in a share token')
    parser.add_argument('--fetch', action='store_true', help='Fetch a random official puzzle')
    parser.add_argument('--nyt-file', metavar='PATH', help='Convert a saved NYT puzzle JSON file')
    parser.add_argument('--info', action='store_true', help='Display the domino set and templates')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log generation details')

    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if args.info:
            display_info()
        elif args.decode:
            decoded = decode_puzzle(args.decode)
            print(format_board(decoded.board, decoded.placed_dominoes))
        elif args.validate:
            return check_token(args.validate)
        elif args.nyt_file:
            for puzzle in parse_nyt_json_file(args.nyt_file).values():
                print_puzzle(puzzle, not args.hide_solution)
                print()
        elif args.fetch:
            rng = random.Random(args.seed)
            puzzle = fetch_official_puzzle(rng)
            if puzzle is None:
                print("Could not fetch an official puzzle; generating one instead.")
                puzzle = generate_puzzle(seed=args.seed)
            print_puzzle(puzzle, not args.hide_solution)
        else:
            config = GeneratorConfig(seed=args.seed, keep_dominoes_whole=args.keep_dominoes_whole)
            puzzle = generate_puzzle(config=config)
            print_puzzle(puzzle, not args.hide_solution)
            if args.encode:
                print()
                print(encode_puzzle(puzzle.board, puzzle.solution_placements))
    except DecodeError as exc:
        print(f"Invalid token: {exc}", file=sys.stderr)
        return 2
    except (PipsError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
