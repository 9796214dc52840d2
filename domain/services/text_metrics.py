from __future__ import annotations

import math

# Average glyph width as a ratio of font size, approximating the
# Virgil (hand) and Cascadia (mono) fonts.
CHAR_RATIO_HAND = 0.52
CHAR_RATIO_MONO = 0.60
LINE_HEIGHT = 1.35
MIN_WRAP_CHARS = 6


def char_width(font_size: float, mono: bool = False) -> float:
    return font_size * (CHAR_RATIO_MONO if mono else CHAR_RATIO_HAND)


def measure_width(text: str, font_size: float, mono: bool = False) -> float:
    return len(text) * char_width(font_size, mono)


def line_height(font_size: float) -> float:
    return font_size * LINE_HEIGHT


def max_chars_for(max_width: float, font_size: float, mono: bool = False) -> int:
    width = char_width(font_size, mono)
    if width <= 0:
        return MIN_WRAP_CHARS
    return max(MIN_WRAP_CHARS, math.floor(max_width / width))


def wrap_text(text: str, font_size: float, max_width: float, mono: bool = False) -> list[str]:
    """Greedy word wrap by estimated character count.

    Words are split on single spaces and never broken; a word longer than the
    line limit gets a line of its own.
    """
    if not text:
        return []
    max_chars = max_chars_for(max_width, font_size, mono)
    lines: list[str] = []
    line = ""
    for word in text.split(" "):
        if len(word) > max_chars and not line:
            lines.append(word)
            continue
        if line and len(line) + len(word) + 1 > max_chars:
            lines.append(line)
            line = word
        else:
            line = f"{line} {word}" if line else word
    if line:
        lines.append(line)
    return lines


def block_height(line_count: int, font_size: float) -> float:
    return line_count * line_height(font_size) if line_count > 0 else 0.0
