"""Board-model adapter over python-shogi.

python-shogi indexes squares 0..80 row by row, from 9a (top left as
black sees the board) to 1i. ``Square`` exposes that
index together with the column/row pair used for pixel layout and the
direction-based neighbour walk the attack calculator needs.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

import shogi

Color = int

BOARD_SIZE = 9

RANK_LETTERS = "abcdefghi"


class Direction(enum.Enum):
    """Board direction as seen by black, value is (dx, dy) with y growing toward rank 9."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    LEFT_UP = (-1, -1)
    RIGHT_UP = (1, -1)
    LEFT_DOWN = (-1, 1)
    RIGHT_DOWN = (1, 1)
    LEFT_UP_KNIGHT = (-1, -2)
    RIGHT_UP_KNIGHT = (1, -2)
    LEFT_DOWN_KNIGHT = (-1, 2)
    RIGHT_DOWN_KNIGHT = (1, 2)

    @property
    def reverse(self) -> Direction:
        dx, dy = self.value
        return Direction((-dx, -dy))


class MoveKind(enum.Enum):
    SHORT = "short"
    LONG = "long"


@dataclass(frozen=True)
class Square:
    x: int  # column from the left as black sees it, 0 is file 9
    y: int  # row from the top, 0 is rank 1

    @classmethod
    def from_index(cls, index: int) -> Square:
        if not 0 <= index < BOARD_SIZE * BOARD_SIZE:
            raise ValueError(f"Square index out of range: {index}")
        return cls(index % BOARD_SIZE, index // BOARD_SIZE)

    @classmethod
    def from_file_rank(cls, file: int, rank: int) -> Square:
        square = cls(BOARD_SIZE - file, rank - 1)
        if not square.valid:
            raise ValueError(f"Square out of range: file={file} rank={rank}")
        return square

    @classmethod
    def from_usi(cls, name: str) -> Square:
        """Parse a USI square name such as ``"7g"``."""
        if len(name) != 2 or not name[0].isdigit() or name[1] not in RANK_LETTERS:
            raise ValueError(f"Invalid square: {name!r}")
        return cls.from_file_rank(int(name[0]), RANK_LETTERS.index(name[1]) + 1)

    @staticmethod
    def all() -> list[Square]:
        return [Square.from_index(i) for i in range(BOARD_SIZE * BOARD_SIZE)]

    @property
    def valid(self) -> bool:
        return 0 <= self.x < BOARD_SIZE and 0 <= self.y < BOARD_SIZE

    @property
    def index(self) -> int:
        return self.y * BOARD_SIZE + self.x

    @property
    def file(self) -> int:
        return BOARD_SIZE - self.x

    @property
    def rank(self) -> int:
        return self.y + 1

    @property
    def opposite(self) -> Square:
        """The same square with the board rotated 180 degrees."""
        return Square(BOARD_SIZE - 1 - self.x, BOARD_SIZE - 1 - self.y)

    @property
    def usi(self) -> str:
        return f"{self.file}{RANK_LETTERS[self.y]}"

    def neighbor(self, direction: Direction) -> Square:
        """Adjacent square in ``direction``; check ``valid`` before use."""
        dx, dy = direction.value
        return Square(self.x + dx, self.y + dy)


# --- Pieces ---

PIECE_NAMES: dict[int, str] = {
    shogi.PAWN: "pawn",
    shogi.LANCE: "lance",
    shogi.KNIGHT: "knight",
    shogi.SILVER: "silver",
    shogi.GOLD: "gold",
    shogi.BISHOP: "bishop",
    shogi.ROOK: "rook",
    shogi.KING: "king",
    shogi.PROM_PAWN: "prom_pawn",
    shogi.PROM_LANCE: "prom_lance",
    shogi.PROM_KNIGHT: "prom_knight",
    shogi.PROM_SILVER: "prom_silver",
    shogi.PROM_BISHOP: "horse",
    shogi.PROM_ROOK: "dragon",
}

_PROMOTIONS: dict[int, int] = {
    shogi.PAWN: shogi.PROM_PAWN,
    shogi.LANCE: shogi.PROM_LANCE,
    shogi.KNIGHT: shogi.PROM_KNIGHT,
    shogi.SILVER: shogi.PROM_SILVER,
    shogi.BISHOP: shogi.PROM_BISHOP,
    shogi.ROOK: shogi.PROM_ROOK,
}
_DEMOTIONS: dict[int, int] = {v: k for k, v in _PROMOTIONS.items()}

# USI drop letters, e.g. "P*5e".
DROP_LETTERS: dict[str, int] = {
    "P": shogi.PAWN,
    "L": shogi.LANCE,
    "N": shogi.KNIGHT,
    "S": shogi.SILVER,
    "G": shogi.GOLD,
    "B": shogi.BISHOP,
    "R": shogi.ROOK,
}


def piece_name(piece_type: int) -> str:
    return PIECE_NAMES[piece_type]


def color_name(color: Color) -> str:
    return "black" if color == shogi.BLACK else "white"


def reverse_color(color: Color) -> Color:
    return shogi.WHITE if color == shogi.BLACK else shogi.BLACK


def piece_id(piece: shogi.Piece) -> str:
    """Stable identity of a piece kind, e.g. ``"white_dragon"``."""
    return f"{color_name(piece.color)}_{piece_name(piece.piece_type)}"


def promoted(piece: shogi.Piece) -> shogi.Piece:
    """Promoted counterpart; pieces that cannot promote are returned as-is."""
    return shogi.Piece(_PROMOTIONS.get(piece.piece_type, piece.piece_type), piece.color)


def unpromoted(piece: shogi.Piece) -> shogi.Piece:
    return shogi.Piece(_DEMOTIONS.get(piece.piece_type, piece.piece_type), piece.color)


# --- Movement capabilities ---

_S = MoveKind.SHORT
_L = MoveKind.LONG
_D = Direction

_GOLD_MOVES = (
    (_D.UP, _S), (_D.LEFT_UP, _S), (_D.RIGHT_UP, _S),
    (_D.LEFT, _S), (_D.RIGHT, _S), (_D.DOWN, _S),
)
_ORTHOGONAL = (_D.UP, _D.DOWN, _D.LEFT, _D.RIGHT)
_DIAGONAL = (_D.LEFT_UP, _D.RIGHT_UP, _D.LEFT_DOWN, _D.RIGHT_DOWN)

# Capabilities from black's side; white uses each direction reversed.
CAPABILITIES: dict[int, tuple[tuple[Direction, MoveKind], ...]] = {
    shogi.PAWN: ((_D.UP, _S),),
    shogi.LANCE: ((_D.UP, _L),),
    shogi.KNIGHT: ((_D.LEFT_UP_KNIGHT, _S), (_D.RIGHT_UP_KNIGHT, _S)),
    shogi.SILVER: (
        (_D.UP, _S), (_D.LEFT_UP, _S), (_D.RIGHT_UP, _S),
        (_D.LEFT_DOWN, _S), (_D.RIGHT_DOWN, _S),
    ),
    shogi.GOLD: _GOLD_MOVES,
    shogi.BISHOP: tuple((d, _L) for d in _DIAGONAL),
    shogi.ROOK: tuple((d, _L) for d in _ORTHOGONAL),
    shogi.KING: tuple((d, _S) for d in _ORTHOGONAL + _DIAGONAL),
    shogi.PROM_PAWN: _GOLD_MOVES,
    shogi.PROM_LANCE: _GOLD_MOVES,
    shogi.PROM_KNIGHT: _GOLD_MOVES,
    shogi.PROM_SILVER: _GOLD_MOVES,
    shogi.PROM_BISHOP: tuple((d, _L) for d in _DIAGONAL) + tuple((d, _S) for d in _ORTHOGONAL),
    shogi.PROM_ROOK: tuple((d, _L) for d in _ORTHOGONAL) + tuple((d, _S) for d in _DIAGONAL),
}


def capabilities(piece: shogi.Piece) -> tuple[tuple[Direction, MoveKind], ...]:
    """Ordered (direction, kind) pairs for ``piece``, oriented for its color."""
    caps = CAPABILITIES.get(piece.piece_type, ())
    if piece.color == shogi.WHITE:
        return tuple((d.reverse, kind) for d, kind in caps)
    return caps


def movable_directions(piece: shogi.Piece) -> list[Direction]:
    return [d for d, _ in capabilities(piece)]


def resolve_move_kind(piece: shogi.Piece, direction: Direction) -> MoveKind | None:
    for d, kind in capabilities(piece):
        if d == direction:
            return kind
    return None


# --- Moves ---

@dataclass(frozen=True)
class Move:
    color: Color
    piece_type: int
    from_square: Square | None  # None for a drop
    to_square: Square

    @property
    def is_drop(self) -> bool:
        return self.from_square is None

    @classmethod
    def from_usi(cls, board: shogi.Board, usi: str, played: bool = False) -> Move:
        """Resolve a USI move such as ``"7g7f"``, ``"2c2b+"`` or ``"P*5e"``.

        By default ``board`` is the position before the move: board moves
        take color and piece type from the origin square, drops take the
        piece letter and the side to move. With ``played=True`` the move is
        already on ``board`` and the moved piece is read from the
        destination instead (demoted again if the move promoted).
        """
        text = usi.strip()
        if len(text) == 4 and text[1] == "*":
            piece_type = DROP_LETTERS.get(text[0].upper())
            if piece_type is None:
                raise ValueError(f"Invalid drop: {usi!r}")
            to_square = Square.from_usi(text[2:4])
            color = board.turn
            if played:
                landed = board.piece_at(to_square.index)
                if landed is None:
                    raise ValueError(f"No piece on {to_square.usi} for move {usi!r}")
                color = landed.color
            return cls(color, piece_type, None, to_square)

        if len(text) not in (4, 5) or (len(text) == 5 and text[4] != "+"):
            raise ValueError(f"Invalid move: {usi!r}")
        from_square = Square.from_usi(text[0:2])
        to_square = Square.from_usi(text[2:4])
        source = to_square if played else from_square
        piece = board.piece_at(source.index)
        if piece is None:
            raise ValueError(f"No piece on {source.usi} for move {usi!r}")
        piece_type = piece.piece_type
        if played and text.endswith("+"):
            piece_type = _DEMOTIONS.get(piece_type, piece_type)
        return cls(piece.color, piece_type, from_square, to_square)


def board_from_sfen(sfen: str) -> shogi.Board:
    """Parse an SFEN position, raising ``ValueError`` for any malformed input."""
    if not sfen.strip():
        raise ValueError("Invalid SFEN: empty string")
    try:
        return shogi.Board(sfen.strip())
    except (ValueError, KeyError, IndexError) as e:
        raise ValueError(f"Invalid SFEN: {sfen}") from e
