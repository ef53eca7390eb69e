"""Board layout builder: board position + presentation config -> layout records.

One ``BoardLayoutBuilder`` is kept per board view and reused for every
render. ``build`` is a pure function of the builder's config and ratio and
its arguments; nothing is cached between calls.

Square overlays are composed as a left-to-right fold over style patches:

    threat -> last move destination -> last move origin -> pointer

so a later patch wins wherever two patches set the same property.
"""

from __future__ import annotations

import enum
import logging
from functools import reduce
from typing import Iterable

import shogi

from shogiview.attacks import TraceFn, attack_map
from shogiview.config import BoardConfig, BoardLabelType, PromotionSelectorStyle
from shogiview.images import KING2
from shogiview.layout import (
    BoardBackground,
    BoardLabel,
    BoardLayout,
    BoardPiece,
    BoardSquare,
    Promotion,
    Rect,
    Style,
)
from shogiview.model import (
    BOARD_SIZE,
    Move,
    Square,
    color_name,
    piece_id,
    piece_name,
    promoted,
    reverse_color,
    unpromoted,
)
from shogiview.params import BOARD, BOARD_BACKGROUND_COLORS, HIGHLIGHT, PIECE, RANK_CHARS, THREAT

logger = logging.getLogger(__name__)

Pointer = Square | shogi.Piece | None


class Anchor(enum.Enum):
    """Which padding a pixel origin is measured from."""

    CELL = "cell"
    SPRITE = "sprite"


def _px(value: float) -> str:
    return f"{value:g}px"


# --- Overlay patches ---

def compose_styles(patches: Iterable[Style]) -> Style:
    """Merge patches left to right; later patches override earlier keys."""
    return reduce(lambda acc, patch: {**acc, **patch}, patches, {})


def threat_patch(
    index: int,
    black_attacks: set[int] | None,
    white_attacks: set[int] | None,
) -> Style:
    if black_attacks is None or white_attacks is None:
        return {}
    by_black = index in black_attacks
    by_white = index in white_attacks
    if by_black and by_white:
        return THREAT["both"]
    if by_black:
        return THREAT["black"]
    if by_white:
        return THREAT["white"]
    return {}


def last_move_to_patch(square: Square, last_move: Move | None) -> Style:
    if last_move is not None and square == last_move.to_square:
        return HIGHLIGHT["last_move_to"]
    return {}


def last_move_from_patch(square: Square, last_move: Move | None) -> Style:
    # Drops have no origin square to highlight.
    if last_move is not None and last_move.from_square is not None and square == last_move.from_square:
        return HIGHLIGHT["last_move_from"]
    return {}


def pointer_patch(square: Square, pointer: Pointer) -> Style:
    # A piece-in-hand pointer is highlighted by the hand view, not the board.
    if isinstance(pointer, Square) and pointer == square:
        return HIGHLIGHT["selected"]
    return {}


class BoardLayoutBuilder:
    def __init__(self, config: BoardConfig, ratio: float, trace: TraceFn | None = None):
        if ratio <= 0:
            raise ValueError(f"ratio must be positive, got {ratio}")
        self._config = config
        self._ratio = ratio
        self._trace = trace

    # --- Coordinate transform ---

    def _view(self, square: Square) -> Square:
        """Square as drawn: flipped boards are rotated 180 degrees."""
        return square.opposite if self._config.flip else square

    def _origin(self, view: Square, anchor: Anchor) -> tuple[float, float]:
        if anchor is Anchor.SPRITE:
            left, top = BOARD.left_piece_padding, BOARD.top_piece_padding
        else:
            left, top = BOARD.left_square_padding, BOARD.top_square_padding
        return (
            (left + BOARD.square_width * view.x) * self._ratio,
            (top + BOARD.square_height * view.y) * self._ratio,
        )

    def to_pixel(self, square: Square, anchor: Anchor = Anchor.CELL) -> tuple[float, float]:
        """Top-left pixel of ``square``'s cell or piece sprite."""
        return self._origin(self._view(square), anchor)

    def center_of_square(self, square: Square) -> tuple[float, float]:
        view = self._view(square)
        return (
            (BOARD.left_square_padding + BOARD.square_width * (view.x + 0.5)) * self._ratio,
            (BOARD.top_square_padding + BOARD.square_height * (view.y + 0.5)) * self._ratio,
        )

    def _cell_rect(self, view: Square) -> Rect:
        left, top = self._origin(view, Anchor.CELL)
        return Rect(
            left, top,
            BOARD.square_width * self._ratio,
            BOARD.square_height * self._ratio,
        )

    # --- Layers ---

    def _background(self) -> BoardBackground:
        return BoardBackground(
            rect=Rect(0.0, 0.0, BOARD.width * self._ratio, BOARD.height * self._ratio),
            color=BOARD_BACKGROUND_COLORS[self._config.board_image_type],
            opacity=self._config.board_image_opacity,
            grid_color=self._config.board_grid_color,
            texture_image_path=self._config.board_texture_image,
        )

    def _labels(self) -> list[BoardLabel]:
        if self._config.board_label_type == BoardLabelType.NONE:
            return []
        flip = self._config.flip
        r = self._ratio
        font_size = BOARD.label.font_size * r
        shadow = _px(font_size * 0.1)
        style = {
            "color": BOARD.label.color,
            "font-size": _px(font_size),
            "font-weight": BOARD.label.font_weight,
            "text-shadow": f"{shadow} {shadow} {shadow} {BOARD.label.shadow_color}",
        }

        labels: list[BoardLabel] = []
        # Ranks run down the right margin, or the left margin when flipped.
        for rank in range(1, BOARD_SIZE + 1):
            row = BOARD_SIZE + 1 - rank if flip else rank
            x = (
                BOARD.left_piece_padding * 0.5 * r * (1 if flip else -1)
                - font_size * 0.5
                + (0 if flip else BOARD.width) * r
            )
            y = (BOARD.top_square_padding + (row - 0.5) * BOARD.square_height) * r - font_size * 0.5
            labels.append(BoardLabel(
                id=f"rank{rank}", character=RANK_CHARS[rank],
                left=x, top=y, font_size=font_size, style=dict(style),
            ))
        # Files run along the top margin, or the bottom margin when flipped.
        for file in range(1, BOARD_SIZE + 1):
            column = BOARD_SIZE + 1 - file if flip else file
            x = (BOARD.left_piece_padding + (9.5 - column) * BOARD.square_width) * r - font_size * 0.5
            y = (
                (BOARD.height if flip else 0) * r
                + BOARD.top_square_padding * 0.7 * r * (-1 if flip else 1)
                - font_size * 0.6
            )
            labels.append(BoardLabel(
                id=f"file{file}", character=str(file),
                left=x, top=y, font_size=font_size, style=dict(style),
            ))
        return labels

    def _pieces(self, board: shogi.Board) -> list[BoardPiece]:
        pieces: list[BoardPiece] = []
        width = PIECE.width * self._ratio
        height = PIECE.height * self._ratio
        for square in Square.all():
            piece = board.piece_at(square.index)
            if piece is None:
                continue
            display_color = reverse_color(piece.color) if self._config.flip else piece.color
            # Black's king uses the alternate artwork so the two kings differ.
            if piece.piece_type == shogi.KING and piece.color == shogi.BLACK:
                key = KING2
            else:
                key = piece_name(piece.piece_type)
            left, top = self.to_pixel(square, Anchor.SPRITE)
            pieces.append(BoardPiece(
                id=f"{piece_id(piece)}{square.index}",
                image_path=self._config.piece_images[color_name(display_color)][key],
                rect=Rect(left, top, width, height),
            ))
        return pieces

    def _squares(self, last_move: Move | None, pointer: Pointer) -> list[BoardSquare]:
        black_attacks: set[int] | None = None
        white_attacks: set[int] | None = None
        position = self._config.position
        if position is not None:
            attacks = attack_map(position, self._trace)
            black_attacks = attacks[shogi.BLACK]
            white_attacks = attacks[shogi.WHITE]

        squares: list[BoardSquare] = []
        for square in Square.all():
            background = compose_styles([
                threat_patch(square.index, black_attacks, white_attacks),
                last_move_to_patch(square, last_move),
                last_move_from_patch(square, last_move),
                pointer_patch(square, pointer),
            ])
            squares.append(BoardSquare(
                id=square.index,
                file=square.file,
                rank=square.rank,
                rect=self._cell_rect(self._view(square)),
                background=background,
            ))

        tinted = sum(1 for s in squares if s.background)
        logger.debug("composed %d square overlays (attacks=%s)", tinted, position is not None)
        if self._trace:
            self._trace("overlay.done", {"tinted": tinted, "attacks": position is not None})
        return squares

    def _promotion_controls(self, move: Move | None) -> tuple[Promotion | None, Promotion | None]:
        if move is None:
            return None, None
        color = reverse_color(move.color) if self._config.flip else move.color
        view = self._view(move.to_square)
        piece = shogi.Piece(move.piece_type, color)
        images = self._config.piece_images[color_name(color)]
        promote_image = images[piece_name(promoted(piece).piece_type)]
        do_not_promote_image = images[piece_name(unpromoted(piece).piece_type)]

        width = BOARD.square_width * self._ratio
        height = BOARD.square_height * self._ratio
        last = BOARD_SIZE - 1
        style = self._config.promotion_selector_style
        if style == PromotionSelectorStyle.HORIZONTAL:
            # Centered on the destination, shifted inward at the edge files.
            column = 0 if view.x == 0 else last - 1 if view.x == last else view.x - 0.5
            x1 = (BOARD.left_square_padding + BOARD.square_width * column) * self._ratio
            y1 = y2 = (BOARD.top_square_padding + BOARD.square_height * view.y) * self._ratio
            x2 = x1 + width
        elif style == PromotionSelectorStyle.VERTICAL_PREFER_BOTTOM:
            x1, y1 = self._origin(view, Anchor.CELL)
            x2 = x1
            y2 = y1 + (-height if view.y == last else height)
        elif style == PromotionSelectorStyle.HORIZONTAL_PREFER_RIGHT:
            x1, y1 = self._origin(view, Anchor.CELL)
            y2 = y1
            x2 = x1 + (-width if view.x == last else width)
        else:
            raise ValueError(f"Unsupported promotion selector style: {style!r}")

        return (
            Promotion(image_path=promote_image, rect=Rect(x1, y1, width, height)),
            Promotion(image_path=do_not_promote_image, rect=Rect(x2, y2, width, height)),
        )

    def build(
        self,
        board: shogi.Board,
        last_move: Move | None = None,
        pointer: Pointer = None,
        pending_promotion: Move | None = None,
    ) -> BoardLayout:
        promote, do_not_promote = self._promotion_controls(pending_promotion)
        return BoardLayout(
            background=self._background(),
            labels=self._labels(),
            pieces=self._pieces(board),
            squares=self._squares(last_move, pointer),
            promote=promote,
            do_not_promote=do_not_promote,
        )
