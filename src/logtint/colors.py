"""Color parsing, contrast and per-match color variation."""

from __future__ import annotations

import colorsys
import hashlib
from functools import lru_cache

from rich.color import Color, ColorParseError
from rich.color_triplet import ColorTriplet
from rich.style import Style

# At variance 100 the background hue may drift half way round the wheel and its
# lightness by 0.3 in either direction.
_MAX_HUE_DRIFT = 0.5
_MAX_LIGHTNESS_DRIFT = 0.3
_LIGHTNESS_FLOOR = 0.05
_LIGHTNESS_CEILING = 0.95

# WCAG AA contrast for normal text.
_MIN_CONTRAST = 4.5

_BLACK = "#000000"
_WHITE = "#ffffff"


@lru_cache(maxsize=512)
def _triplet(value: str) -> ColorTriplet:
    color = Color.parse(value)
    if color.is_default:
        msg = f"Color {value!r} has no concrete value"
        raise ValueError(msg)
    return color.get_truecolor()


def normalize_color(value: str) -> str:
    """Parse any rich color notation ('red', '#ff0000', 'rgb(1,2,3)') into #rrggbb."""
    try:
        return _triplet(value.strip().lower()).hex
    except ColorParseError as e:
        msg = f"Invalid color: {value!r}"
        raise ValueError(msg) from e


def _channel_luminance(channel: int) -> float:
    c = channel / 255
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4  # noqa: PLR2004


def relative_luminance(color: str) -> float:
    """WCAG relative luminance of a color."""
    r, g, b = _triplet(color)
    return 0.2126 * _channel_luminance(r) + 0.7152 * _channel_luminance(g) + 0.0722 * _channel_luminance(b)


def contrast_ratio(first: str, second: str) -> float:
    """WCAG contrast ratio between two colors, from 1.0 to 21.0."""
    lighter, darker = sorted((relative_luminance(first), relative_luminance(second)), reverse=True)
    return (lighter + 0.05) / (darker + 0.05)


def _unit_offsets(text: str) -> tuple[float, float]:
    """Two stable values in [-1, 1] derived from the text."""
    digest = hashlib.blake2b(text.encode("utf-8"), digest_size=4).digest()
    hue = int.from_bytes(digest[:2], "big") / 0xFFFF
    lightness = int.from_bytes(digest[2:], "big") / 0xFFFF
    return hue * 2 - 1, lightness * 2 - 1


@lru_cache(maxsize=4096)
def variate_colors(fore_color: str, back_color: str, text: str, variance: int) -> tuple[str, str]:
    """Derive a color pair for a matched substring.

    The background is shifted in hue and lightness by an amount derived from a
    digest of ``text`` and scaled by ``variance`` (0-100), so the same text
    always gets the same colors. The foreground is replaced by black or white
    when the shifted background would leave it less legible than the base pair
    (or below WCAG AA, whichever is lower).
    """
    if variance <= 0:
        return fore_color, back_color
    scale = min(variance, 100) / 100
    hue_offset, lightness_offset = _unit_offsets(text)

    r, g, b = _triplet(back_color).normalized
    h, lightness, s = colorsys.rgb_to_hls(r, g, b)
    h = (h + hue_offset * _MAX_HUE_DRIFT * scale) % 1.0
    lightness = lightness + lightness_offset * _MAX_LIGHTNESS_DRIFT * scale
    lightness = min(max(lightness, _LIGHTNESS_FLOOR), _LIGHTNESS_CEILING)
    r, g, b = colorsys.hls_to_rgb(h, lightness, s)
    new_back = ColorTriplet(round(r * 255), round(g * 255), round(b * 255)).hex

    threshold = min(_MIN_CONTRAST, contrast_ratio(fore_color, back_color))
    if contrast_ratio(fore_color, new_back) >= threshold:
        return fore_color, new_back
    on_black = contrast_ratio(_BLACK, new_back)
    on_white = contrast_ratio(_WHITE, new_back)
    return (_BLACK if on_black >= on_white else _WHITE), new_back


def match_style(fore_color: str, back_color: str) -> Style:
    """Return the rich style for a highlighted range."""
    return Style(color=fore_color, bgcolor=back_color)
