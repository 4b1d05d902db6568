"""
Root entry point – delegates to the chessimage package.

Usage:
    python chessimage.py render "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1" > board.jpg
    python chessimage.py serve   --port 8080 --sprites-dir images
    python chessimage.py sprites --output-dir images --size 45
"""

from chessimage.main import main

if __name__ == "__main__":
    main()
