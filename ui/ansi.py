# ui/ansi.py
ESC = "\x1b["

HOME = ESC + "H"
CLEAR_SCREEN = ESC + "2J"
CLEAR_LINE = ESC + "K"
HIDE_CURSOR = ESC + "?25l"
SHOW_CURSOR = ESC + "?25h"


def move_to(row: int, col: int) -> str:
    """Absolute cursor position, 1-based."""
    return f"{ESC}{row};{col}H"
