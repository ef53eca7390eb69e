"""Piece image lookup tables keyed by display color and piece type."""

import enum
import posixpath

from shogiview.model import PIECE_NAMES

PieceImageTable = dict[str, dict[str, str]]

# Extra artwork key for the second king, see BoardLayoutBuilder pieces.
KING2 = "king2"

IMAGE_KEYS: tuple[str, ...] = tuple(PIECE_NAMES.values()) + (KING2,)
COLOR_KEYS: tuple[str, ...] = ("black", "white")


class PieceImageType(str, enum.Enum):
    HITOMOJI = "hitomoji"
    HITOMOJI_GOTHIC = "hitomoji_gothic"
    HITOMOJI_DARK = "hitomoji_dark"


# Directory of each image set under the asset root.
PIECE_IMAGE_DIRS: dict[PieceImageType, str] = {
    PieceImageType.HITOMOJI: "piece/hitomoji",
    PieceImageType.HITOMOJI_GOTHIC: "piece/hitomoji_gothic",
    PieceImageType.HITOMOJI_DARK: "piece/hitomoji_dark",
}


def piece_image_table(
    image_type: PieceImageType = PieceImageType.HITOMOJI,
    asset_root: str = "assets",
) -> PieceImageTable:
    """Build the full per-color table, e.g. ``table["white"]["dragon"]``."""
    base = posixpath.join(asset_root, PIECE_IMAGE_DIRS[PieceImageType(image_type)])
    return {
        color: {key: posixpath.join(base, f"{color}_{key}.png") for key in IMAGE_KEYS}
        for color in COLOR_KEYS
    }


def missing_image_keys(table: PieceImageTable) -> list[str]:
    """``"color/key"`` entries absent from ``table``; empty when complete."""
    return [
        f"{color}/{key}"
        for color in COLOR_KEYS
        for key in IMAGE_KEYS
        if key not in table.get(color, {})
    ]
