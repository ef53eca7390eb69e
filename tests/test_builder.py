"""Tests for builder.py — coordinates, labels, pieces, overlays, promotion selector."""

import pytest
import shogi

from shogiview.builder import (
    Anchor,
    BoardLayoutBuilder,
    compose_styles,
    last_move_from_patch,
    last_move_to_patch,
    pointer_patch,
    threat_patch,
)
from shogiview.config import BoardConfig, BoardLabelType, PromotionSelectorStyle
from shogiview.model import Move, Square, board_from_sfen
from shogiview.params import BOARD, HIGHLIGHT, THREAT, BoardImageType

EMPTY = "9/9/9/9/9/9/9/9/9 b - 1"
STARTPOS = "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R1/LNSGKGSNL b - 1"


def _sq(name: str) -> Square:
    return Square.from_usi(name)


def _builder(ratio: float = 1.0, **config) -> BoardLayoutBuilder:
    return BoardLayoutBuilder(BoardConfig(**config), ratio)


def _move(color, piece_type, frm: str | None, to: str) -> Move:
    return Move(color, piece_type, _sq(frm) if frm else None, _sq(to))


class TestCoordinateTransform:
    def test_top_left_square(self):
        assert _builder().to_pixel(_sq("9a")) == (40, 48)

    def test_ratio_scales_everything(self):
        assert _builder(ratio=2.0).to_pixel(_sq("9a")) == (80, 96)
        assert _builder(ratio=0.5).to_pixel(_sq("1i"), Anchor.SPRITE) == (260, 280)

    def test_flip_uses_opposite_square(self):
        builder = _builder(flip=True)
        assert builder.to_pixel(_sq("9a")) == (520, 560)
        assert builder.to_pixel(_sq("1i")) == (40, 48)

    def test_center_of_square(self):
        assert _builder().center_of_square(_sq("5e")) == (310, 336)

    def test_non_positive_ratio_rejected(self):
        with pytest.raises(ValueError):
            _builder(ratio=0)


class TestEmptyBoard:
    def test_end_to_end(self):
        layout = _builder().build(board_from_sfen(EMPTY))
        assert layout.pieces == []
        assert len(layout.squares) == 81
        assert [s.id for s in layout.squares] == list(range(81))
        assert all(s.background == {} for s in layout.squares)
        assert len(layout.labels) == 18
        assert layout.promote is None
        assert layout.do_not_promote is None

    def test_square_records_carry_file_and_rank(self):
        squares = _builder().build(board_from_sfen(EMPTY)).squares
        assert (squares[0].file, squares[0].rank) == (9, 1)
        assert (squares[80].file, squares[80].rank) == (1, 9)
        assert squares[0].rect.width == BOARD.square_width
        assert squares[0].rect.height == BOARD.square_height

    def test_idempotent(self):
        builder = _builder(position=board_from_sfen(STARTPOS))
        board = board_from_sfen(STARTPOS)
        last = _move(shogi.BLACK, shogi.PAWN, "7g", "7f")
        assert builder.build(board, last, _sq("5e")) == builder.build(board, last, _sq("5e"))


class TestBackground:
    def test_resin_board(self):
        bg = _builder(ratio=2.0, board_image_opacity=0.8).build(board_from_sfen(EMPTY)).background
        assert bg.color == "#d69b00"
        assert bg.opacity == 0.8
        assert (bg.rect.width, bg.rect.height) == (BOARD.width * 2, BOARD.height * 2)

    def test_texture_board_is_transparent(self):
        bg = _builder(
            board_image_type=BoardImageType.WARM, board_texture_image="board/warm.png",
        ).build(board_from_sfen(EMPTY)).background
        assert bg.color == "rgba(0, 0, 0, 0)"
        assert bg.texture_image_path == "board/warm.png"


class TestLabels:
    def test_none_label_type(self):
        layout = _builder(board_label_type=BoardLabelType.NONE).build(board_from_sfen(EMPTY))
        assert layout.labels == []

    def test_order_and_characters(self):
        labels = _builder().build(board_from_sfen(EMPTY)).labels
        assert [lb.id for lb in labels[:9]] == [f"rank{i}" for i in range(1, 10)]
        assert [lb.id for lb in labels[9:]] == [f"file{i}" for i in range(1, 10)]
        assert labels[0].character == "一"
        assert labels[8].character == "九"
        assert labels[9].character == "1"

    def test_positions(self):
        labels = {lb.id: lb for lb in _builder().build(board_from_sfen(EMPTY)).labels}
        # rank labels in the right margin, centered on the row
        assert labels["rank1"].left == pytest.approx(591)
        assert labels["rank1"].top == pytest.approx(71)
        # file 9 is the leftmost column, labels in the top margin
        assert labels["file9"].left == pytest.approx(61)
        assert labels["file9"].top == pytest.approx(22.8)

    def test_flipped_positions(self):
        labels = {lb.id: lb for lb in _builder(flip=True).build(board_from_sfen(EMPTY)).labels}
        assert labels["rank1"].left == pytest.approx(11)
        assert labels["rank1"].top == pytest.approx(583)
        assert labels["file1"].left == pytest.approx(61)
        assert labels["file1"].top > BOARD.height - BOARD.top_square_padding

    def test_style_scales_with_ratio(self):
        label = _builder(ratio=2.0).build(board_from_sfen(EMPTY)).labels[0]
        assert label.font_size == BOARD.label.font_size * 2
        assert label.style["font-size"] == "36px"
        assert label.style["font-weight"] == "bold"


class TestPieces:
    def test_one_sprite_per_piece(self):
        pieces = _builder().build(board_from_sfen(STARTPOS)).pieces
        assert len(pieces) == 40
        assert len({p.id for p in pieces}) == 40

    def test_sprite_identity_and_image(self):
        pieces = {p.id: p for p in _builder().build(board_from_sfen(STARTPOS)).pieces}
        pawn = pieces[f"black_pawn{_sq('7g').index}"]
        assert pawn.image_path.endswith("black_pawn.png")
        assert (pawn.rect.left, pawn.rect.top) == (160, 432)

    def test_black_king_uses_second_artwork(self):
        pieces = {p.id: p for p in _builder().build(board_from_sfen(STARTPOS)).pieces}
        assert pieces[f"black_king{_sq('5i').index}"].image_path.endswith("black_king2.png")
        assert pieces[f"white_king{_sq('5a').index}"].image_path.endswith("white_king.png")

    def test_flip_reverses_display_color(self):
        pieces = {p.id: p for p in _builder(flip=True).build(board_from_sfen(STARTPOS)).pieces}
        pawn = pieces[f"black_pawn{_sq('7g').index}"]
        assert pawn.image_path.endswith("white_pawn.png")
        assert pieces[f"black_king{_sq('5i').index}"].image_path.endswith("white_king2.png")

    def test_flip_is_involution_on_geometry(self):
        """flip=True on P equals flip=False on P rotated 180 degrees."""
        position = board_from_sfen("9/9/6p2/9/9/9/9/7R1/9 b - 1")
        rotated = board_from_sfen("9/1r7/9/9/9/9/2P6/9/9 b - 1")
        flipped = _builder(flip=True).build(position)
        plain = _builder().build(rotated)
        def by_position(rect):
            return rect.left, rect.top

        assert sorted((p.rect for p in flipped.pieces), key=by_position) == sorted(
            (p.rect for p in plain.pieces), key=by_position
        )
        for square in Square.all():
            assert flipped.squares[square.index].rect == plain.squares[square.opposite.index].rect


class TestOverlayPatches:
    def test_compose_later_wins(self):
        assert compose_styles([{"a": "1", "b": "1"}, {}, {"b": "2"}]) == {"a": "1", "b": "2"}

    def test_compose_does_not_mutate_patches(self):
        patch = {"a": "1"}
        compose_styles([patch, {"a": "2"}])
        assert patch == {"a": "1"}

    def test_threat_patch(self):
        assert threat_patch(3, None, None) == {}
        assert threat_patch(3, {3}, {3}) == THREAT["both"]
        assert threat_patch(3, {3}, set()) == THREAT["black"]
        assert threat_patch(3, set(), {3}) == THREAT["white"]
        assert threat_patch(3, {1}, {2}) == {}

    def test_drop_has_no_origin_highlight(self):
        drop = _move(shogi.BLACK, shogi.PAWN, None, "5e")
        assert last_move_to_patch(_sq("5e"), drop) == HIGHLIGHT["last_move_to"]
        assert all(last_move_from_patch(sq, drop) == {} for sq in Square.all())

    def test_pointer_piece_in_hand_highlights_nothing(self):
        hand = shogi.Piece(shogi.PAWN, shogi.BLACK)
        assert all(pointer_patch(sq, hand) == {} for sq in Square.all())


class TestSquareOverlays:
    def test_last_move(self):
        last = _move(shogi.BLACK, shogi.PAWN, "7g", "7f")
        squares = _builder().build(board_from_sfen(STARTPOS), last).squares
        assert squares[_sq("7f").index].background == HIGHLIGHT["last_move_to"]
        assert squares[_sq("7g").index].background == HIGHLIGHT["last_move_from"]
        assert sum(1 for s in squares if s.background) == 2

    def test_selection_wins_over_last_move_destination(self):
        last = _move(shogi.BLACK, shogi.PAWN, "7g", "7f")
        squares = _builder().build(board_from_sfen(STARTPOS), last, _sq("7f")).squares
        assert squares[_sq("7f").index].background == HIGHLIGHT["selected"]

    def test_threat_overlay_from_config_position(self):
        position = board_from_sfen("8s/9/4p4/9/4R4/9/9/9/9 b - 1")
        squares = _builder(position=position).build(position).squares
        assert squares[_sq("5d").index].background == THREAT["both"]
        assert squares[_sq("5c").index].background == THREAT["black"]
        assert squares[_sq("1b").index].background == THREAT["white"]
        assert squares[_sq("9a").index].background == {}

    def test_threat_overlay_independent_of_board_argument(self):
        position = board_from_sfen("9/9/9/9/4R4/9/9/9/9 b - 1")
        layout = _builder(position=position).build(board_from_sfen(EMPTY))
        assert layout.pieces == []
        assert sum(1 for s in layout.squares if s.background) == 16

    def test_last_move_overrides_threat_tint(self):
        position = board_from_sfen("9/9/9/9/4R4/9/9/9/9 b - 1")
        last = _move(shogi.BLACK, shogi.ROOK, "5i", "5e")
        squares = _builder(position=position).build(position, last).squares
        # 5i is attacked by the rook and is the move origin
        assert squares[_sq("5i").index].background == HIGHLIGHT["last_move_from"]

    def test_builder_trace(self):
        events = []
        builder = BoardLayoutBuilder(
            BoardConfig(position=board_from_sfen(STARTPOS)), 1.0,
            trace=lambda e, f: events.append(e),
        )
        builder.build(board_from_sfen(STARTPOS))
        assert events.count("attack.done") == 2
        assert events[-1] == "overlay.done"


class TestPromotionSelector:
    def test_absent_without_pending_move(self):
        layout = _builder().build(board_from_sfen(EMPTY))
        assert (layout.promote, layout.do_not_promote) == (None, None)

    def test_images(self):
        move = _move(shogi.BLACK, shogi.SILVER, "4d", "4c")
        layout = _builder().build(board_from_sfen(EMPTY), pending_promotion=move)
        assert layout.promote.image_path.endswith("black_prom_silver.png")
        assert layout.do_not_promote.image_path.endswith("black_silver.png")

    def test_images_flipped(self):
        move = _move(shogi.BLACK, shogi.ROOK, "2h", "2c")
        layout = _builder(flip=True).build(board_from_sfen(EMPTY), pending_promotion=move)
        assert layout.promote.image_path.endswith("white_dragon.png")
        assert layout.do_not_promote.image_path.endswith("white_rook.png")
        # 2c drawn at its opposite, 8g
        assert layout.promote.rect.top == 48 + 64 * 6

    def test_horizontal_middle(self):
        move = _move(shogi.BLACK, shogi.SILVER, "5d", "5c")
        layout = _builder().build(board_from_sfen(EMPTY), pending_promotion=move)
        assert layout.promote.rect.left == 40 + 60 * 3.5
        assert layout.do_not_promote.rect.left == layout.promote.rect.right
        assert layout.promote.rect.top == layout.do_not_promote.rect.top == 48 + 64 * 2

    @pytest.mark.parametrize("to", ["9c", "1c"])
    def test_horizontal_edge_files_stay_on_board(self, to):
        move = _move(shogi.BLACK, shogi.PAWN, to[0] + "d", to)
        layout = _builder().build(board_from_sfen(EMPTY), pending_promotion=move)
        for choice in (layout.promote, layout.do_not_promote):
            assert choice.rect.left >= BOARD.left_square_padding
            assert choice.rect.right <= BOARD.left_square_padding + 9 * BOARD.square_width
            assert 0 <= choice.rect.left and choice.rect.right <= BOARD.width

    def test_vertical_prefers_bottom(self):
        move = _move(shogi.BLACK, shogi.PAWN, "5d", "5c")
        layout = _builder(
            promotion_selector_style=PromotionSelectorStyle.VERTICAL_PREFER_BOTTOM,
        ).build(board_from_sfen(EMPTY), pending_promotion=move)
        assert layout.promote.rect.left == layout.do_not_promote.rect.left
        assert layout.do_not_promote.rect.top == layout.promote.rect.top + 64

    def test_vertical_last_rank_goes_up(self):
        move = _move(shogi.WHITE, shogi.PAWN, "5h", "5i")
        layout = _builder(
            ratio=2.0,
            promotion_selector_style=PromotionSelectorStyle.VERTICAL_PREFER_BOTTOM,
        ).build(board_from_sfen(EMPTY), pending_promotion=move)
        assert layout.do_not_promote.rect.top == layout.promote.rect.top - 128
        assert layout.promote.rect.bottom <= BOARD.height * 2
        assert layout.promote.image_path.endswith("white_prom_pawn.png")

    def test_horizontal_prefer_right(self):
        move = _move(shogi.BLACK, shogi.PAWN, "5d", "5c")
        layout = _builder(
            promotion_selector_style=PromotionSelectorStyle.HORIZONTAL_PREFER_RIGHT,
        ).build(board_from_sfen(EMPTY), pending_promotion=move)
        assert layout.promote.rect.left == 40 + 60 * 4
        assert layout.do_not_promote.rect.left == layout.promote.rect.left + 60

    def test_horizontal_prefer_right_last_file_goes_left(self):
        move = _move(shogi.BLACK, shogi.PAWN, "1d", "1c")
        layout = _builder(
            promotion_selector_style=PromotionSelectorStyle.HORIZONTAL_PREFER_RIGHT,
        ).build(board_from_sfen(EMPTY), pending_promotion=move)
        assert layout.do_not_promote.rect.left == layout.promote.rect.left - 60
        assert layout.promote.rect.right <= BOARD.width

    def test_unchecked_style_rejected(self):
        config = BoardConfig.model_construct(promotion_selector_style="diagonal")
        builder = BoardLayoutBuilder(config, 1.0)
        move = _move(shogi.BLACK, shogi.PAWN, "5d", "5c")
        with pytest.raises(ValueError, match="Unsupported promotion selector style"):
            builder.build(board_from_sfen(EMPTY), pending_promotion=move)
