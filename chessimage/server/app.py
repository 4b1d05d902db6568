"""
HTTP Service – FEN in the path, JPEG out
========================================

``GET /<fen>`` renders the position and returns it as ``image/jpeg``; other
methods are handled the same way.
The whole request path, minus leading and trailing slashes, is the FEN;
spaces between FEN fields arrive URL-encoded (``%20``)::

    GET /rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR%20b%20KQkq%20e3%200%201

Errors in the FEN (or a symbol with no sprite) answer ``400`` with the
error message as a plain-text body.

Sprites are injected by the caller; the app never loads them itself.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response

from chessimage import __version__
from chessimage.parsing.fen import ParseError, parse_fen
from chessimage.rendering.board import BoardConfig, render_board
from chessimage.rendering.encoding import JPEG_QUALITY, MEDIA_TYPES, encode_image
from chessimage.rendering.sprites import SpriteSet, UnknownPieceError

log = logging.getLogger(__name__)


DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8080

# The handler ignores the method; every request path is a FEN
ROUTE_METHODS: List[str] = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(
    sprites: SpriteSet,
    config: Optional[BoardConfig] = None,
    quality: int = JPEG_QUALITY,
) -> FastAPI:
    """Build the FastAPI application around an already loaded sprite set."""
    board_config = config or BoardConfig()

    app = FastAPI(
        title="chessimage",
        description="Render chess positions given as FEN into JPEG images",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.sprites = sprites
    app.state.board_config = board_config

    @app.api_route("/{fen:path}", methods=ROUTE_METHODS)
    def render(fen: str) -> Response:
        # path parameters arrive percent-decoded
        fen = fen.strip("/")
        try:
            board = parse_fen(fen)
            image = render_board(board_config, board, sprites)
        except (ParseError, UnknownPieceError) as exc:
            log.info("Rejected fen %r: %s", fen, exc)
            return PlainTextResponse(str(exc), status_code=400)

        body = encode_image(image, fmt="jpeg", quality=quality)
        log.info("Rendered fen %r  (%d bytes)", fen, len(body))
        return Response(content=body, media_type=MEDIA_TYPES["jpeg"])

    log.info(
        "App ready  square_size=%d  board_size=%d  sprites=%d",
        board_config.square_size, board_config.board_size, len(sprites),
    )
    return app


def run_server(
    app: FastAPI,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve *app* with uvicorn (blocks until shutdown)."""
    import uvicorn

    log.info("Serving on http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level="info", access_log=True)
