"""
Font loading and text metrics
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from PIL import ImageFont

from ..config import RenderConfig


logger = logging.getLogger(__name__)

FontType = ImageFont.FreeTypeFont


@dataclass(frozen=True)
class TextMetrics:
    """Extent of a run of text relative to its baseline."""
    width: float
    ascent: float
    descent: float

    @property
    def height(self) -> float:
        return self.ascent + self.descent


class FontSet:
    """Fonts for the main, math (italic) and symbol styles, cached per size."""

    STYLES = ('main', 'math', 'symbol')

    def __init__(self, config: Optional[RenderConfig] = None):
        self.config = config or RenderConfig()
        self._paths = {
            'main': self.config.font_path,
            'math': self.config.math_font_path or self.config.font_path,
            'symbol': self.config.symbol_font_path or self.config.font_path,
        }
        self._fonts: Dict[Tuple[str, int], FontType] = {}
        self._metrics: Dict[Tuple[str, int, str], TextMetrics] = {}

    def font(self, size: int, style: str = 'main') -> FontType:
        """Get the font for a style at the given pixel size."""
        if style not in self.STYLES:
            raise ValueError(f"Unknown font style: {style}")

        size = max(int(round(size)), self.config.min_font_size)
        key = (style, size)
        if key not in self._fonts:
            self._fonts[key] = self._load(self._paths[style], size)
        return self._fonts[key]

    def _load(self, path: Optional[str], size: int) -> FontType:
        if path:
            try:
                return ImageFont.truetype(path, size)
            except OSError as e:
                logger.warning(f"Failed to load font {path}: {e}, using default font")
        return ImageFont.load_default(size=size)

    def measure(self, text: str, size: int, style: str = 'main') -> TextMetrics:
        """Measure text drawn at the given size."""
        key = (style, int(round(size)), text)
        if key not in self._metrics:
            font = self.font(size, style)
            # Ascent and descent from the glyph boxes, relative to the baseline
            left, top, right, bottom = font.getbbox(text or ' ', anchor='ls')
            self._metrics[key] = TextMetrics(
                width=font.getlength(text),
                ascent=max(-top, 0),
                descent=max(bottom, 0)
            )
        return self._metrics[key]

    def cap_height(self, size: int) -> float:
        """Ascent of a capital letter, used as the vertical unit."""
        return self.measure('X', size).ascent


def measure_text(text: str, font_size: int, config: Optional[RenderConfig] = None) -> TextMetrics:
    """Measure text with the configured main font."""
    return FontSet(config).measure(text, font_size)


__all__ = [
    'FontSet',
    'TextMetrics',
    'measure_text'
]
