"""CLI utility that prints the board layout for one position.

Usage:
    python -m shogiview.cli <sfen> [--last-move USI] [--pointer SQUARE]
        [--pending-promotion USI] [--flip] [--ratio R] [--show-attacks]
        [--labels none|standard] [--promotion-style STYLE]

Writes the layout as JSON to stdout. Defaults come from SHOGIVIEW_*
environment variables (see shogiview.config.Settings).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict

from shogiview.builder import BoardLayoutBuilder
from shogiview.config import BoardLabelType, PromotionSelectorStyle, Settings
from shogiview.model import Move, Square, board_from_sfen


def _run(args: argparse.Namespace, settings: Settings) -> dict:
    board = board_from_sfen(args.sfen)
    last_move = Move.from_usi(board, args.last_move, played=True) if args.last_move else None
    pointer = Square.from_usi(args.pointer) if args.pointer else None
    pending = Move.from_usi(board, args.pending_promotion) if args.pending_promotion else None

    overrides = {}
    if args.flip:
        overrides["flip"] = True
    if args.labels:
        overrides["board_label_type"] = BoardLabelType(args.labels)
    if args.promotion_style:
        overrides["promotion_selector_style"] = PromotionSelectorStyle(args.promotion_style)
    show_attacks = args.show_attacks or settings.show_attacks
    config = settings.board_config(position=board if show_attacks else None, **overrides)

    builder = BoardLayoutBuilder(config, args.ratio or settings.ratio)
    return asdict(builder.build(board, last_move, pointer, pending))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Compute a shogi board layout as JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("sfen", help="Position SFEN (quote the full string)")
    parser.add_argument("--last-move", metavar="USI", help="Move already played on SFEN")
    parser.add_argument("--pointer", metavar="SQUARE", help="Selected square, e.g. 7g")
    parser.add_argument(
        "--pending-promotion", metavar="USI",
        help="Move awaiting the promote / do-not-promote choice",
    )
    parser.add_argument("--flip", action="store_true", help="View from white's side")
    parser.add_argument("--ratio", type=float, help="Pixel scale factor")
    parser.add_argument(
        "--show-attacks", action="store_true",
        help="Tint squares attacked by either side",
    )
    parser.add_argument(
        "--labels", choices=[t.value for t in BoardLabelType],
        help="Rank/file label style",
    )
    parser.add_argument(
        "--promotion-style", choices=[s.value for s in PromotionSelectorStyle],
        help="Promotion selector layout",
    )
    parser.add_argument("--verbose", action="store_true", help="Log attack/overlay details")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    if args.ratio is not None and args.ratio <= 0:
        print(f"error: --ratio must be positive, got {args.ratio}", file=sys.stderr)
        sys.exit(1)

    try:
        result = _run(args, Settings())
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
    json.dump(result, sys.stdout, indent=2, ensure_ascii=False)
    print()


if __name__ == "__main__":
    main()
