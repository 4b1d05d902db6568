import numpy as np
import pytest
from PIL import Image

from chessimage.parsing.fen import parse_fen
from chessimage.rendering.board import (
    DARK_SQUARE,
    LIGHT_SQUARE,
    BoardConfig,
    is_light_square,
    render_board,
    render_fen,
    square_rect,
)
from chessimage.rendering.encoding import image_to_array
from chessimage.rendering.sprites import SpriteSet, UnknownPieceError

from conftest import BLACK_PIECE, SQUARE, WHITE_PIECE, block_images

START = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_BOARD = "8/8/8/8/8/8/8/8"


def corner(config, rank, file):
    """A pixel near the top-left of a square, outside the sprite block."""
    x0, y0, _, _ = square_rect(config, rank, file)
    return x0 + 1, y0 + 1


def centre(config, rank, file):
    x0, y0, x1, y1 = square_rect(config, rank, file)
    return (x0 + x1) // 2, (y0 + y1) // 2


def test_board_config_derives_board_size():
    assert BoardConfig(45).board_size == 360
    assert BoardConfig().square_size == 45


@pytest.mark.parametrize("size", [0, -1])
def test_board_config_rejects_non_positive_size(size):
    with pytest.raises(ValueError):
        BoardConfig(size)


def test_square_rect_flips_ranks():
    config = BoardConfig(45)
    assert square_rect(config, 0, 0) == (0, 315, 45, 360)
    assert square_rect(config, 7, 0) == (0, 0, 45, 45)
    assert square_rect(config, 7, 7) == (315, 0, 360, 45)
    assert square_rect(config, 2, 3) == (135, 225, 180, 270)


def test_parity_anchors_a1_dark():
    assert not is_light_square(0, 0)
    assert is_light_square(0, 1)
    assert is_light_square(1, 0)
    assert not is_light_square(7, 7)


def test_empty_board_is_checkerboard(config, sprites):
    image = render_board(config, parse_fen(EMPTY_BOARD), sprites)
    assert image.mode == "RGB"
    assert image.size == (8 * SQUARE, 8 * SQUARE)
    for r in range(8):
        for f in range(8):
            expected = LIGHT_SQUARE if (r + f) % 2 else DARK_SQUARE
            assert image.getpixel(centre(config, r, f)) == expected


def test_start_position_square_colours(config, sprites):
    image = render_board(config, parse_fen(START), sprites)
    # rank 0 / file 0 is dark, file 1 light; sprite corners are transparent
    assert image.getpixel(corner(config, 0, 0)) == DARK_SQUARE
    assert image.getpixel(corner(config, 0, 1)) == LIGHT_SQUARE
    # bottom-left pixel of the whole image belongs to a1
    assert image.getpixel((0, 8 * SQUARE - 1)) == DARK_SQUARE


def test_sprites_are_drawn_on_their_squares(config, sprites):
    image = render_board(config, parse_fen(START), sprites)
    # white pieces at the bottom, black at the top
    assert image.getpixel(centre(config, 0, 0)) == WHITE_PIECE
    assert image.getpixel(centre(config, 1, 5)) == WHITE_PIECE
    assert image.getpixel(centre(config, 7, 3)) == BLACK_PIECE
    assert image.getpixel(centre(config, 6, 6)) == BLACK_PIECE
    # empty middle squares show only the board
    assert image.getpixel(centre(config, 3, 3)) == DARK_SQUARE
    assert image.getpixel(centre(config, 3, 4)) == LIGHT_SQUARE


def test_example_fen_renders_full_size(sprites):
    image = render_fen(
        "rnbqkbnr/pp1ppppp/8/2p5/4P3/5N2/PPPP1PPP/RNBQKB1R b KQkq - 1 2",
        sprites,
        BoardConfig(SQUARE),
    )
    assert image.size == (8 * SQUARE, 8 * SQUARE)


def test_render_fen_uses_default_square_size():
    sprites = SpriteSet(block_images(45))
    image = render_fen(START, sprites)
    assert image.size == (360, 360)


def test_rendering_is_deterministic(config, sprites):
    board = parse_fen("r1bqkbnr/pppp1ppp/2n5/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R")
    first = image_to_array(render_board(config, board, sprites))
    second = image_to_array(render_board(config, board, sprites))
    assert first.shape == (8 * SQUARE, 8 * SQUARE, 3)
    assert np.array_equal(first, second)


def test_render_does_not_touch_sprites(config, sprites):
    before = image_to_array(sprites["K"])
    render_board(config, parse_fen(START), sprites)
    assert np.array_equal(image_to_array(sprites["K"]), before)


def test_unknown_symbol_is_rejected(config, sprites):
    with pytest.raises(UnknownPieceError) as exc_info:
        render_board(config, parse_fen("x7/8/8/8/8/8/8/8"), sprites)
    assert exc_info.value.symbol == "x"


def test_oversized_sprite_is_clipped_to_its_square(config):
    images = block_images()
    images["K"] = Image.new("RGBA", (3 * SQUARE, 3 * SQUARE), WHITE_PIECE + (255,))
    sprites = SpriteSet(images)
    image = render_board(config, parse_fen("8/8/8/8/8/8/8/K7"), sprites)
    assert image.getpixel(corner(config, 0, 0)) == WHITE_PIECE
    # neighbours right and above keep their own colour
    assert image.getpixel(corner(config, 0, 1)) == LIGHT_SQUARE
    assert image.getpixel(corner(config, 1, 0)) == LIGHT_SQUARE


def test_semi_transparent_sprite_blends_with_square(config):
    images = block_images()
    images["Q"] = Image.new("RGBA", (SQUARE, SQUARE), (255, 255, 255, 128))
    image = render_board(config, parse_fen("8/8/8/8/8/8/8/Q7"), SpriteSet(images))
    r, g, b = image.getpixel(centre(config, 0, 0))
    # strictly between the dark square and white
    assert DARK_SQUARE[0] < r < 255
    assert DARK_SQUARE[1] < g < 255
    assert DARK_SQUARE[2] < b < 255
