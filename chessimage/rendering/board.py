"""
Board Compositor – Board → Raster Image
=======================================

Layering, bottom to top:
  1. The whole canvas is filled with the dark square colour.
  2. Light squares (``(rank + file)`` odd) are painted over it.
  3. Piece sprites are alpha-composited onto their square.

Coordinates:
  Board rank 0 is drawn at the *bottom* of the image, so a square's top
  edge is ``board_size - (rank + 1) * square_size``.  File 0 is the left
  edge.  With this anchoring a1 (rank 0, file 0) is dark.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from PIL import Image

from chessimage.parsing.fen import BOARD_FILES, BOARD_RANKS, EMPTY, Board, parse_fen
from chessimage.rendering.sprites import SpriteSet

log = logging.getLogger(__name__)


SQUARE_SIZE: int = 45  # pixels per square edge

DARK_SQUARE: Tuple[int, int, int] = (77, 109, 146)
LIGHT_SQUARE: Tuple[int, int, int] = (236, 236, 215)


# ── Config ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class BoardConfig:
    """Pixel geometry of a rendered board."""
    square_size: int = SQUARE_SIZE
    board_size: int = field(init=False)

    def __post_init__(self) -> None:
        if self.square_size <= 0:
            raise ValueError(f"Square size must be positive, got {self.square_size}")
        object.__setattr__(self, "board_size", self.square_size * BOARD_FILES)


# ── Geometry ───────────────────────────────────────────────────────────

def square_rect(config: BoardConfig, rank: int, file: int) -> Tuple[int, int, int, int]:
    """Return ``(x0, y0, x1, y1)`` of a square, ``x1``/``y1`` exclusive."""
    size = config.square_size
    x0 = file * size
    y0 = config.board_size - rank * size - size
    return x0, y0, x0 + size, y0 + size


def is_light_square(rank: int, file: int) -> bool:
    return (rank + file) % 2 == 1


# ── Rendering ──────────────────────────────────────────────────────────

def _sprite_for_square(sprite: Image.Image, size: int) -> Image.Image:
    """Clip (or pad) *sprite* to exactly ``size × size`` from its top-left."""
    if sprite.size == (size, size):
        return sprite
    # crop() pads out-of-range areas with transparent pixels
    return sprite.crop((0, 0, size, size))


def render_board(
    config: BoardConfig,
    board: Board,
    sprites: SpriteSet,
) -> Image.Image:
    """Composite *board* into a new RGB image of ``board_size`` square.

    Parameters
    ----------
    config : BoardConfig
        Square size and derived board size.
    board : Board
        Parsed 8×8 board, rank 0 at the bottom.
    sprites : SpriteSet
        Shared piece images; read, never modified.

    Returns
    -------
    PIL.Image.Image
        RGB image, ``config.board_size`` pixels on each side.

    Raises
    ------
    UnknownPieceError
        If the board holds a symbol with no sprite.  Checked before any
        drawing so no partial image is produced.
    """
    # Resolve every sprite first: all-or-nothing
    pieces = {symbol: sprites[symbol] for symbol in board.symbols()}

    canvas = Image.new("RGBA", (config.board_size, config.board_size), DARK_SQUARE + (255,))
    light = Image.new("RGBA", (config.square_size, config.square_size), LIGHT_SQUARE + (255,))

    for r in range(BOARD_RANKS):
        for f in range(BOARD_FILES):
            x0, y0, x1, y1 = square_rect(config, r, f)
            log.debug("square r=%d f=%d rect=(%d,%d)-(%d,%d)", r, f, x0, y0, x1, y1)
            if is_light_square(r, f):
                canvas.paste(light, (x0, y0))
            symbol = board[r, f]
            if symbol != EMPTY:
                sprite = _sprite_for_square(pieces[symbol], config.square_size)
                canvas.alpha_composite(sprite, dest=(x0, y0))

    return canvas.convert("RGB")


def render_fen(
    fen: str,
    sprites: SpriteSet,
    config: Optional[BoardConfig] = None,
) -> Image.Image:
    """Parse *fen* and render it; see ``render_board``."""
    return render_board(config or BoardConfig(), parse_fen(fen), sprites)
