from __future__ import annotations

from typing import Dict, Tuple

import pytest
from PIL import Image

from chessimage.parsing.fen import PIECE_SYMBOLS
from chessimage.rendering.board import BoardConfig
from chessimage.rendering.sprites import SpriteSet, generate_sprites, save_sprites

SQUARE = 20

WHITE_PIECE: Tuple[int, int, int] = (200, 30, 30)
BLACK_PIECE: Tuple[int, int, int] = (30, 200, 30)


def block_sprite(color: Tuple[int, int, int], size: int = SQUARE) -> Image.Image:
    """Transparent square with an opaque block over its middle half."""
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    block = Image.new("RGBA", (size // 2, size // 2), color + (255,))
    img.paste(block, (size // 4, size // 4))
    return img


def block_images(size: int = SQUARE) -> Dict[str, Image.Image]:
    return {
        s: block_sprite(WHITE_PIECE if s.isupper() else BLACK_PIECE, size)
        for s in PIECE_SYMBOLS
    }


@pytest.fixture
def config() -> BoardConfig:
    return BoardConfig(SQUARE)


@pytest.fixture
def sprites() -> SpriteSet:
    return SpriteSet(block_images())


@pytest.fixture
def sprite_dir(tmp_path):
    return save_sprites(generate_sprites(SQUARE), tmp_path / "images")
