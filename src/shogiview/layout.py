"""Layout records produced by the board layout builder.

Plain values, no behavior beyond geometry helpers. ``dataclasses.asdict``
turns a ``BoardLayout`` into JSON-ready dicts.
"""

from dataclasses import dataclass, field

Style = dict[str, str]


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class BoardBackground:
    rect: Rect
    color: str
    opacity: float
    grid_color: str
    texture_image_path: str | None = None


@dataclass(frozen=True)
class BoardLabel:
    id: str          # "rank3", "file7"
    character: str   # kanji for ranks, digits for files
    left: float
    top: float
    font_size: float
    style: Style = field(default_factory=dict)


@dataclass(frozen=True)
class BoardPiece:
    id: str          # piece identity + square index, stable across renders
    image_path: str
    rect: Rect


@dataclass(frozen=True)
class BoardSquare:
    id: int          # square index
    file: int
    rank: int
    rect: Rect
    background: Style = field(default_factory=dict)  # composed overlay patches


@dataclass(frozen=True)
class Promotion:
    image_path: str
    rect: Rect


@dataclass(frozen=True)
class BoardLayout:
    background: BoardBackground
    labels: list[BoardLabel]
    pieces: list[BoardPiece]
    squares: list[BoardSquare]
    promote: Promotion | None = None
    do_not_promote: Promotion | None = None
