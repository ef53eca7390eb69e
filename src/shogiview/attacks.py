"""Attack-surface calculation: every square a side's pieces reach.

Pure functions over a ``shogi.Board``. No legality filtering: pins, checks
and drops are ignored; this only answers "which squares are covered".
"""

import logging
from typing import Any, Callable

import shogi

from shogiview.model import Color, Direction, MoveKind, Square, capabilities, color_name

logger = logging.getLogger(__name__)

# trace(event, fields) — optional structured observability hook.
TraceFn = Callable[[str, dict[str, Any]], None]


def _walk_ray(
    board: shogi.Board,
    start: Square,
    direction: Direction,
) -> tuple[list[int], int | None]:
    """Walk from start (exclusive) until the edge or the first occupied square.

    Returns the covered square indices and the blocking index, if any. The
    blocker itself is covered.
    """
    covered: list[int] = []
    to = start.neighbor(direction)
    while to.valid:
        covered.append(to.index)
        if board.piece_at(to.index) is not None:
            return covered, to.index
        to = to.neighbor(direction)
    return covered, None


def compute_attack_squares(
    board: shogi.Board,
    color: Color,
    trace: TraceFn | None = None,
) -> set[int]:
    """Square indices attacked by ``color``'s pieces on ``board``."""
    attacked: set[int] = set()

    for square in Square.all():
        index = square.index
        piece = board.piece_at(index)
        if piece is None or piece.color != color:
            continue
        if trace:
            trace("attack.piece", {"square": index, "piece": piece.piece_type})

        for direction, kind in capabilities(piece):
            if kind is MoveKind.SHORT:
                to = square.neighbor(direction)
                if to.valid:
                    attacked.add(to.index)
            else:
                covered, blocker = _walk_ray(board, square, direction)
                attacked.update(covered)
                if blocker is not None and trace:
                    trace("attack.blocked", {
                        "square": index,
                        "direction": direction.name,
                        "blocker": blocker,
                    })

    logger.debug("%s attacks %d squares", color_name(color), len(attacked))
    if trace:
        trace("attack.done", {"color": color_name(color), "squares": sorted(attacked)})
    return attacked


def attack_map(board: shogi.Board, trace: TraceFn | None = None) -> dict[Color, set[int]]:
    """Attack sets for both sides, each computed independently."""
    return {
        shogi.BLACK: compute_attack_squares(board, shogi.BLACK, trace),
        shogi.WHITE: compute_attack_squares(board, shogi.WHITE, trace),
    }
