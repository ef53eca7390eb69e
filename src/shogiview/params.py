"""Geometry constants and style patches shared by the layout builder.

All lengths are base pixels; the builder multiplies them by its ratio.
"""

import enum
from dataclasses import dataclass, field


@dataclass(frozen=True)
class LabelParams:
    font_size: float = 18
    color: str = "black"
    font_weight: str = "bold"
    shadow_color: str = "white"


@dataclass(frozen=True)
class BoardParams:
    width: float = 620
    height: float = 672
    left_square_padding: float = 40
    top_square_padding: float = 48
    left_piece_padding: float = 40
    top_piece_padding: float = 48
    square_width: float = 60
    square_height: float = 64
    label: LabelParams = field(default_factory=LabelParams)


@dataclass(frozen=True)
class PieceParams:
    width: float = 60
    height: float = 64


BOARD = BoardParams()
PIECE = PieceParams()

# Style patches merged into a square's background, later keys win.
HIGHLIGHT: dict[str, dict[str, str]] = {
    "last_move_to": {"background-color": "#44cc44", "opacity": "0.4"},
    "last_move_from": {"background-color": "#44cc44", "opacity": "0.2"},
    "selected": {"background-color": "#ff4800", "opacity": "0.5"},
}

THREAT: dict[str, dict[str, str]] = {
    "both": {"background-color": "#800080", "opacity": "0.6"},
    "black": {"background-color": "#0000ff", "opacity": "0.4"},
    "white": {"background-color": "#ff0000", "opacity": "0.4"},
}

RANK_CHARS = {
    1: "一",
    2: "二",
    3: "三",
    4: "四",
    5: "五",
    6: "六",
    7: "七",
    8: "八",
    9: "九",
}


class BoardImageType(str, enum.Enum):
    LIGHT = "light"
    LIGHT2 = "light2"
    LIGHT3 = "light3"
    WARM = "warm"
    WARM2 = "warm2"
    RESIN = "resin"
    RESIN2 = "resin2"
    RESIN3 = "resin3"
    GREEN = "green"
    CHERRY_BLOSSOM = "cherry_blossom"
    AUTUMN = "autumn"
    SNOW = "snow"
    DARK_GREEN = "dark_green"
    DARK = "dark"
    CUSTOM_IMAGE = "custom_image"


TRANSPARENT = "rgba(0, 0, 0, 0)"

# Texture-backed boards draw no fill of their own.
BOARD_BACKGROUND_COLORS: dict[BoardImageType, str] = {
    BoardImageType.LIGHT: TRANSPARENT,
    BoardImageType.LIGHT2: TRANSPARENT,
    BoardImageType.LIGHT3: TRANSPARENT,
    BoardImageType.WARM: TRANSPARENT,
    BoardImageType.WARM2: TRANSPARENT,
    BoardImageType.RESIN: "#d69b00",
    BoardImageType.RESIN2: "#efbf63",
    BoardImageType.RESIN3: "#ad7624",
    BoardImageType.GREEN: "#598459",
    BoardImageType.CHERRY_BLOSSOM: "#ecb6b6",
    BoardImageType.AUTUMN: "#d09f51",
    BoardImageType.SNOW: "#c3c0d3",
    BoardImageType.DARK_GREEN: "#465e5e",
    BoardImageType.DARK: "#333333",
    BoardImageType.CUSTOM_IMAGE: TRANSPARENT,
}
