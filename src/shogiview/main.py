import logging
from dataclasses import asdict

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from shogiview.attacks import attack_map
from shogiview.builder import BoardLayoutBuilder
from shogiview.config import BoardLabelType, PromotionSelectorStyle, Settings
from shogiview.model import Move, Square, board_from_sfen, color_name

logger = logging.getLogger(__name__)

settings = Settings()

app = FastAPI(title="Shogi Board Layout")


# --- Request/Response models ---

class LayoutRequest(BaseModel):
    sfen: str
    last_move: str | None = None          # USI, already played on sfen
    pointer: str | None = None            # USI square name, e.g. "7g"
    pending_promotion: str | None = None  # USI, not yet played on sfen
    flip: bool | None = None
    ratio: float | None = Field(default=None, gt=0.0)
    show_attacks: bool | None = None
    label_type: BoardLabelType | None = None
    promotion_selector_style: PromotionSelectorStyle | None = None


class AttacksRequest(BaseModel):
    sfen: str


def _parse_board(sfen: str):
    try:
        return board_from_sfen(sfen)
    except ValueError as e:
        logger.warning("Rejected position: %s", e)
        raise HTTPException(status_code=400, detail=str(e)) from e


# --- Endpoints ---

@app.get("/api/health")
async def health():
    return {"status": "ok"}


@app.post("/api/layout")
async def board_layout(req: LayoutRequest):
    board = _parse_board(req.sfen)
    try:
        last_move = Move.from_usi(board, req.last_move, played=True) if req.last_move else None
        pointer = Square.from_usi(req.pointer) if req.pointer else None
        pending = Move.from_usi(board, req.pending_promotion) if req.pending_promotion else None
    except ValueError as e:
        logger.warning("Rejected layout request: %s", e)
        raise HTTPException(status_code=400, detail=str(e)) from e

    show_attacks = settings.show_attacks if req.show_attacks is None else req.show_attacks
    overrides = {
        "flip": req.flip,
        "board_label_type": req.label_type,
        "promotion_selector_style": req.promotion_selector_style,
    }
    config = settings.board_config(
        position=board if show_attacks else None,
        **{k: v for k, v in overrides.items() if v is not None},
    )
    builder = BoardLayoutBuilder(config, req.ratio or settings.ratio)
    return asdict(builder.build(board, last_move, pointer, pending))


@app.post("/api/attacks")
async def attacks(req: AttacksRequest):
    board = _parse_board(req.sfen)
    return {
        color_name(color): sorted(Square.from_index(i).usi for i in squares)
        for color, squares in attack_map(board).items()
    }
