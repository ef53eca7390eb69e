"""Board presentation configuration.

``Settings`` reads defaults from environment variables (prefix
``SHOGIVIEW_``) or a ``.env.shogiview`` file. ``BoardConfig`` is the
validated, read-only snapshot a ``BoardLayoutBuilder`` works from; an
unsupported enum value or an incomplete image table is rejected here,
before any layout is built.
"""

import enum
from typing import Any

import shogi
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shogiview.images import PieceImageTable, PieceImageType, missing_image_keys, piece_image_table
from shogiview.params import BoardImageType


class BoardLabelType(str, enum.Enum):
    NONE = "none"
    STANDARD = "standard"


class PromotionSelectorStyle(str, enum.Enum):
    HORIZONTAL = "horizontal"
    VERTICAL_PREFER_BOTTOM = "vertical_prefer_bottom"
    HORIZONTAL_PREFER_RIGHT = "horizontal_prefer_right"


class BoardConfig(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    flip: bool = False
    board_image_type: BoardImageType = BoardImageType.RESIN
    board_image_opacity: float = Field(default=1.0, ge=0.0, le=1.0)
    board_grid_color: str = "#000000"
    board_texture_image: str | None = None
    board_label_type: BoardLabelType = BoardLabelType.STANDARD
    promotion_selector_style: PromotionSelectorStyle = PromotionSelectorStyle.HORIZONTAL
    piece_images: PieceImageTable = Field(default_factory=piece_image_table)
    # Drives the attack overlay only; may differ from the board being laid out.
    position: shogi.Board | None = None

    @field_validator("piece_images")
    @classmethod
    def _complete_image_table(cls, table: PieceImageTable) -> PieceImageTable:
        missing = missing_image_keys(table)
        if missing:
            raise ValueError(f"piece_images is missing {', '.join(missing)}")
        return table


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SHOGIVIEW_", env_file=".env.shogiview", env_file_encoding="utf-8",
    )

    # Orientation and scale
    flip: bool = False
    ratio: float = Field(default=1.0, gt=0.0)

    # Board theme
    board_image_type: BoardImageType = BoardImageType.RESIN
    board_image_opacity: float = Field(default=1.0, ge=0.0, le=1.0)
    board_grid_color: str = "#000000"
    board_texture_image: str | None = None
    board_label_type: BoardLabelType = BoardLabelType.STANDARD
    promotion_selector_style: PromotionSelectorStyle = PromotionSelectorStyle.HORIZONTAL

    # Piece artwork
    piece_image_type: PieceImageType = PieceImageType.HITOMOJI
    asset_root: str = "assets"

    # Attack overlay from the laid-out position
    show_attacks: bool = False

    def board_config(self, position: shogi.Board | None = None, **overrides: Any) -> BoardConfig:
        """Snapshot these settings as a ``BoardConfig``; ``overrides`` win."""
        values: dict[str, Any] = {
            "flip": self.flip,
            "board_image_type": self.board_image_type,
            "board_image_opacity": self.board_image_opacity,
            "board_grid_color": self.board_grid_color,
            "board_texture_image": self.board_texture_image,
            "board_label_type": self.board_label_type,
            "promotion_selector_style": self.promotion_selector_style,
            "piece_images": piece_image_table(self.piece_image_type, self.asset_root),
            "position": position,
        }
        values.update(overrides)
        return BoardConfig(**values)
