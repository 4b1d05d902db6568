"""
Chess Position Renderer – Main Entry Point
==========================================

Commands:

  1. **Render**   – Render one FEN and write the image to stdout or a file.
  2. **Serve**    – Run the HTTP service (``GET /<fen>`` → JPEG).
  3. **Sprites**  – Write a placeholder sprite set to a directory.

Usage examples
--------------

**Render**::

    python chessimage.py render \\
        "rnbqkbnr/pp1ppppp/8/2p5/4P3/5N2/PPPP1PPP/RNBQKB1R b KQkq - 1 2" \\
        --sprites-dir images > board.jpg

**Serve**::

    python chessimage.py serve --sprites-dir images --port 8080

**Placeholder sprites**::

    python chessimage.py sprites --output-dir images --size 45
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from chessimage.parsing.fen import ParseError, log_board, parse_fen
from chessimage.rendering.board import SQUARE_SIZE, BoardConfig, render_board
from chessimage.rendering.encoding import JPEG_QUALITY, encode_image, write_bytes
from chessimage.rendering.sprites import (
    SPRITES_DIR,
    SpriteLoadError,
    SpriteSet,
    UnknownPieceError,
    generate_sprites,
    load_sprites,
    save_sprites,
)
from chessimage.server.app import DEFAULT_HOST, DEFAULT_PORT, create_app, run_server

log = logging.getLogger("chessimage")


DEFAULT_FEN: str = "rnbqkbnr/pp1ppppp/8/2p5/4P3/5N2/PPPP1PPP/RNBQKB1R b KQkq - 1 2"


def _load_sprites_or_exit(directory: str) -> SpriteSet:
    try:
        return load_sprites(directory)
    except SpriteLoadError as exc:
        log.error("Could not load pieces: %s", exc)
        sys.exit(1)


# ═══════════════════════════════════════════════════════════════════════
# Render
# ═══════════════════════════════════════════════════════════════════════

def cmd_render(args: argparse.Namespace) -> None:
    """Render a single FEN."""
    sprites = _load_sprites_or_exit(args.sprites_dir)
    config = BoardConfig(args.square_size)

    try:
        board = parse_fen(args.fen)
    except ParseError as exc:
        log.error("%s  (fen=%r)", exc, args.fen)
        sys.exit(1)
    log_board(board)

    try:
        image = render_board(config, board, sprites)
    except UnknownPieceError as exc:
        log.error("%s  (fen=%r)", exc, args.fen)
        sys.exit(1)

    # Encode before opening the destination so a failure leaves no file behind
    data = encode_image(image, fmt=args.format, quality=args.quality)
    if args.output in (None, "-"):
        n = write_bytes(data, sys.stdout.buffer)
    else:
        with open(args.output, "wb") as f:
            n = write_bytes(data, f)
    log.info(
        "Rendered %dx%d board  (%d bytes, %s) → %s",
        config.board_size, config.board_size, n, args.format, args.output or "stdout",
    )


# ═══════════════════════════════════════════════════════════════════════
# Serve
# ═══════════════════════════════════════════════════════════════════════

def cmd_serve(args: argparse.Namespace) -> None:
    """Load sprites once and run the HTTP service."""
    sprites = _load_sprites_or_exit(args.sprites_dir)
    app = create_app(sprites, BoardConfig(args.square_size), quality=args.quality)
    run_server(app, host=args.host, port=args.port)


# ═══════════════════════════════════════════════════════════════════════
# Sprites
# ═══════════════════════════════════════════════════════════════════════

def cmd_sprites(args: argparse.Namespace) -> None:
    """Write placeholder sprites."""
    out = save_sprites(generate_sprites(args.size), Path(args.output_dir))
    log.info("Placeholder sprites (%dpx) written to %s", args.size, out)


# ═══════════════════════════════════════════════════════════════════════
# CLI
# ═══════════════════════════════════════════════════════════════════════

def _positive_int(value: str) -> int:
    n = int(value)
    if n <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return n


def _jpeg_quality(value: str) -> int:
    n = int(value)
    if not 1 <= n <= 100:
        raise argparse.ArgumentTypeError(f"must be in 1..100, got {value}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chessimage",
        description="Render chess positions given as FEN into images.",
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", help="Available commands")

    # ── render ──
    p_render = sub.add_parser("render", help="Render one FEN to an image")
    p_render.add_argument("fen", nargs="?", default=DEFAULT_FEN,
                          help="FEN string (quote it; default: example position)")
    p_render.add_argument("--output", "-o", default=None,
                          help="Output file (default: stdout)")
    p_render.add_argument("--square-size", type=_positive_int, default=SQUARE_SIZE)
    p_render.add_argument("--sprites-dir", default=SPRITES_DIR,
                          help="Directory holding <symbol>.png sprites")
    p_render.add_argument("--format", default="jpeg", choices=["jpeg", "png"])
    p_render.add_argument("--quality", type=_jpeg_quality, default=JPEG_QUALITY,
                          help="JPEG quality 1-100")

    # ── serve ──
    p_serve = sub.add_parser("serve", help="Run the HTTP service")
    p_serve.add_argument("--host", default=DEFAULT_HOST)
    p_serve.add_argument("--port", type=int, default=DEFAULT_PORT)
    p_serve.add_argument("--square-size", type=_positive_int, default=SQUARE_SIZE)
    p_serve.add_argument("--sprites-dir", default=SPRITES_DIR,
                         help="Directory holding <symbol>.png sprites")
    p_serve.add_argument("--quality", type=_jpeg_quality, default=JPEG_QUALITY,
                         help="JPEG quality 1-100")

    # ── sprites ──
    p_sprites = sub.add_parser("sprites", help="Write placeholder piece sprites")
    p_sprites.add_argument("--output-dir", default=SPRITES_DIR)
    p_sprites.add_argument("--size", type=_positive_int, default=SQUARE_SIZE,
                           help="Sprite edge in pixels (match --square-size)")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Logs go to stderr so image bytes on stdout stay clean
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    dispatch = {
        "render": cmd_render,
        "serve": cmd_serve,
        "sprites": cmd_sprites,
    }

    dispatch[args.command](args)


if __name__ == "__main__":
    main()
