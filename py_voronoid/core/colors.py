"""
Colour helpers for per-cell display colours.

Colours are '#rrggbb' hex strings. HSL components are in [0, 1].
"""

import colorsys
from typing import Tuple


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Split a '#rrggbb' string into 0-255 channels."""
    num = int(hex_color.lstrip("#"), 16)
    return (num >> 16) & 0xFF, (num >> 8) & 0xFF, num & 0xFF


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Join channels into a '#rrggbb' string, rounding and clamping each."""
    def channel(x):
        return int(round(min(255, max(0, x))))
    return "#{:02x}{:02x}{:02x}".format(channel(r), channel(g), channel(b))


def adjust_color(hex_color: str, amount: int) -> str:
    """
    Shift the brightness of a colour.

    Args:
        hex_color: Base colour
        amount: Added to every channel, -255 to 255 (positive lightens)

    Returns:
        Adjusted colour, each channel clamped to 0-255
    """
    r, g, b = hex_to_rgb(hex_color)
    return rgb_to_hex(r + amount, g + amount, b + amount)


def rgb_to_hsl(r: int, g: int, b: int) -> Tuple[float, float, float]:
    """0-255 channels to (h, s, l)."""
    h, l, s = colorsys.rgb_to_hls(r / 255, g / 255, b / 255)
    return h, s, l


def hsl_to_rgb(h: float, s: float, l: float) -> Tuple[int, int, int]:
    """(h, s, l) to 0-255 channels."""
    r, g, b = colorsys.hls_to_rgb(h, l, s)
    return int(round(r * 255)), int(round(g * 255)), int(round(b * 255))


def adjust_hue(hex_color: str, degrees: float) -> str:
    """Rotate the hue of a colour by degrees, wrapping around."""
    if degrees == 0:
        return hex_color

    h, s, l = rgb_to_hsl(*hex_to_rgb(hex_color))
    h = (h + degrees / 360 + 1) % 1
    return rgb_to_hex(*hsl_to_rgb(h, s, l))


def category_color_variation(base_color: str, index: int, amount: int = 20) -> str:
    """Darker, unchanged or lighter base colour, cycling with index."""
    return adjust_color(base_color, (index % 3 - 1) * amount)
