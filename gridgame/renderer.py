"""Renderer - Renderizado del tablero en terminal."""

from .core import GameView
from .state import Mark

_SYMBOLS = {Mark.EMPTY: ".", Mark.X: "X", Mark.O: "O"}


def render_board(view: GameView) -> str:
    """Devuelve el tablero como texto con índices de fila y columna.

    Formato (3×3):
         0 1 2
      0  X . .
      1  . O .
      2  . . .
    """
    width = len(str(view.size - 1))
    header = " " * (width + 2) + " ".join(str(c).rjust(width) for c in range(view.size))
    lines = [header]
    for row in range(view.size):
        cells = view.cells[row * view.size:(row + 1) * view.size]
        marks = " ".join(_SYMBOLS[c.value].rjust(width) for c in cells)
        lines.append(f"{str(row).rjust(width)}  {marks}")
    return "\n".join(lines)
