"""
Chess Position Renderer
=======================

Renders a chess position given as a FEN string into a raster image,
from the command line or over HTTP.

Architecture:
    1. FEN Parsing     – placement field → immutable 8×8 ``Board``
    2. Sprites         – 12 piece images loaded once, shared read-only
    3. Compositing     – checkerboard + alpha-blended sprites (Pillow)
    4. Encoding        – JPEG / PNG via OpenCV
    5. Serving         – FastAPI route ``GET /<fen>`` → ``image/jpeg``
"""

__version__ = "1.0.0"
