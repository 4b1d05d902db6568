"""
Piece Sprites – Loading & Placeholder Generation
================================================

A ``SpriteSet`` maps each of the 12 canonical piece symbols to a decoded
RGBA image.  It is built once at startup and then shared read-only by
every render call.

Asset layout (one flat directory)::

    images/
      r.png  n.png  b.png  q.png  k.png  p.png     # black
      R.png  N.png  B.png  Q.png  K.png  P.png     # white

Sprites are expected to be pre-sized to the square size used for
rendering; nothing here rescales them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Tuple

from PIL import Image, ImageDraw

from chessimage.parsing.fen import PIECE_SYMBOLS

log = logging.getLogger(__name__)


SPRITES_DIR: str = "images"

# Symbol → piece name (used for placeholder labels and error messages)
PIECE_NAMES: Dict[str, str] = {
    "r": "black_rook",
    "n": "black_knight",
    "b": "black_bishop",
    "q": "black_queen",
    "k": "black_king",
    "p": "black_pawn",
    "R": "white_rook",
    "N": "white_knight",
    "B": "white_bishop",
    "Q": "white_queen",
    "K": "white_king",
    "P": "white_pawn",
}


# ── Errors ─────────────────────────────────────────────────────────────

class SpriteLoadError(RuntimeError):
    """A required sprite is missing or could not be decoded."""


class UnknownPieceError(KeyError):
    """A board symbol has no sprite in the set."""

    def __init__(self, symbol: str) -> None:
        self.symbol = symbol
        super().__init__(symbol)

    def __str__(self) -> str:
        return f"No sprite for piece symbol {self.symbol!r}"


# ── Sprite set ─────────────────────────────────────────────────────────

class SpriteSet(Mapping):
    """Read-only mapping of piece symbol → RGBA ``PIL.Image``.

    Construction fails with ``SpriteLoadError`` unless all 12 canonical
    symbols are present.
    """

    def __init__(self, images: Mapping[str, Image.Image]) -> None:
        missing = [s for s in PIECE_SYMBOLS if s not in images]
        if missing:
            raise SpriteLoadError(
                "Missing sprites for: " + ", ".join(missing)
            )
        converted = {
            symbol: img if img.mode == "RGBA" else img.convert("RGBA")
            for symbol, img in images.items()
        }
        self._images = MappingProxyType(converted)

    @classmethod
    def from_images(cls, images: Mapping[str, Image.Image]) -> "SpriteSet":
        """Build from already decoded images (embedded assets, tests)."""
        return cls(images)

    def __getitem__(self, symbol: str) -> Image.Image:
        try:
            return self._images[symbol]
        except KeyError:
            raise UnknownPieceError(symbol) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._images)

    def __len__(self) -> int:
        return len(self._images)

    def __repr__(self) -> str:
        return f"SpriteSet(symbols={''.join(self._images)!r})"


# ── Loading ────────────────────────────────────────────────────────────

def sprite_path(directory: str | Path, symbol: str) -> Path:
    return Path(directory) / f"{symbol}.png"


def load_sprite(directory: str | Path, symbol: str) -> Image.Image:
    """Open and decode ``<directory>/<symbol>.png`` as RGBA."""
    path = sprite_path(directory, symbol)
    try:
        with Image.open(path) as img:
            return img.convert("RGBA")
    except OSError as exc:
        raise SpriteLoadError(
            f"Could not load sprite {symbol!r} "
            f"({PIECE_NAMES.get(symbol, 'unknown')}) from {path}: {exc}"
        ) from exc


def load_sprites(directory: str | Path = SPRITES_DIR) -> SpriteSet:
    """Load all 12 canonical sprites from *directory*.

    Raises
    ------
    SpriteLoadError
        On the first missing or undecodable file.
    """
    images = {symbol: load_sprite(directory, symbol) for symbol in PIECE_SYMBOLS}
    sizes = {img.size for img in images.values()}
    log.info("Loaded %d sprites from %s  sizes=%s", len(images), directory, sorted(sizes))
    return SpriteSet(images)


# ── Placeholder sprites ────────────────────────────────────────────────

_WHITE_FILL: Tuple[int, int, int, int] = (250, 250, 250, 255)
_BLACK_FILL: Tuple[int, int, int, int] = (30, 30, 30, 255)


def _draw_placeholder(symbol: str, size: int) -> Image.Image:
    """Disc in the side's colour with the piece letter in the middle."""
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)

    white = symbol.isupper()
    fill = _WHITE_FILL if white else _BLACK_FILL
    ink = _BLACK_FILL if white else _WHITE_FILL

    margin = max(1, size // 8)
    draw.ellipse(
        (margin, margin, size - 1 - margin, size - 1 - margin),
        fill=fill, outline=ink, width=max(1, size // 30),
    )
    letter = symbol.upper()
    left, top, right, bottom = draw.textbbox((0, 0), letter)
    draw.text(
        ((size - (right - left)) / 2 - left, (size - (bottom - top)) / 2 - top),
        letter, fill=ink,
    )
    return img


def generate_sprites(size: int) -> SpriteSet:
    """Draw a simple placeholder sprite set of ``size × size`` images."""
    if size <= 0:
        raise ValueError(f"Sprite size must be positive, got {size}")
    return SpriteSet({s: _draw_placeholder(s, size) for s in PIECE_SYMBOLS})


def save_sprites(sprites: SpriteSet, directory: str | Path = SPRITES_DIR) -> Path:
    """Write every sprite as ``<directory>/<symbol>.png``."""
    out = Path(directory)
    out.mkdir(parents=True, exist_ok=True)
    for symbol, img in sprites.items():
        img.save(sprite_path(out, symbol), format="PNG")
    log.info("Saved %d sprites to %s", len(sprites), out)
    return out
