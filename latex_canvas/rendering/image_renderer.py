import logging
from typing import Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw, features

from ..glyphs import GlyphMapping
from ..models import Node, NodeType
from ..visitor import count_nodes
from .base_renderer import BaseRenderer, RenderConfig, RenderResult
from .fonts import FontSet
from .layout import Box, Glyph, LayoutEngine, Stroke


logger = logging.getLogger(__name__)


class ImageRenderer(BaseRenderer):
    """Render document trees to raster images with Pillow."""

    def __init__(self, config: Optional[RenderConfig] = None, parser=None,
                 glyphs: Optional[GlyphMapping] = None):
        super().__init__(config, parser)
        self.glyphs = glyphs or GlyphMapping(self.config.glyph_config_path)

    def is_available(self) -> bool:
        """Scalable fonts need Pillow built with FreeType."""
        return features.check('freetype2')

    def render_tree(self, document: Node, config: Optional[RenderConfig] = None) -> RenderResult:
        config = config or self.config
        fonts = FontSet(config)

        box = LayoutEngine(fonts, self.glyphs, config).visit(document)
        size = self._canvas_size(box, config)

        image = Image.new('RGB', size, config.background_color)
        draw = ImageDraw.Draw(image)
        origin = (config.padding, config.padding + box.ascent)
        self._paint(draw, fonts, box, origin, config.text_color)

        if config.trim:
            image = trim_whitespace(image, config.background_color, config.padding)

        logger.debug(f"Rendered {image.size[0]}x{image.size[1]} image")
        return RenderResult(
            image=image,
            size=image.size,
            metadata={
                'renderer': 'pillow',
                'font_size': config.font_size,
                'lines': count_nodes(document, NodeType.LINE),
                'paragraphs': count_nodes(document, NodeType.PARAGRAPH),
                'baseline': origin[1],
            }
        )

    def _canvas_size(self, box: Box, config: RenderConfig) -> Tuple[int, int]:
        fitted = (
            int(np.ceil(box.width + 2 * config.padding)),
            int(np.ceil(box.height + 2 * config.padding))
        )
        width = config.width or fitted[0]
        height = config.height or fitted[1]
        if width < fitted[0] or height < fitted[1]:
            logger.warning(
                f"Content needs {fitted[0]}x{fitted[1]} pixels, "
                f"clipping to {width}x{height}"
            )
        return width, height

    def _paint(self, draw: ImageDraw.ImageDraw, fonts: FontSet, box: Box,
               origin: Tuple[float, float], color: str):
        x, y = origin
        for dx, dy, item in box.items:
            if isinstance(item, Box):
                self._paint(draw, fonts, item, (x + dx, y + dy), color)
            elif isinstance(item, Glyph):
                if item.text:
                    draw.text((x + dx, y + dy), item.text, fill=color, anchor='ls',
                              font=fonts.font(item.size, item.style))
            elif isinstance(item, Stroke):
                points = [(x + dx + px, y + dy + py) for px, py in item.points]
                draw.line(points, fill=color, width=max(1, int(round(item.width))),
                          joint='curve')


def trim_whitespace(image: Image.Image, background: str = "white",
                    padding: int = 0) -> Image.Image:
    """Crop an image to its non-background pixels plus padding."""
    pixels = np.asarray(image.convert('L'))
    background_level = Image.new('L', (1, 1), background).getpixel((0, 0))

    mask = pixels != background_level
    if not mask.any():
        return image

    rows = np.where(mask.any(axis=1))[0]
    cols = np.where(mask.any(axis=0))[0]
    box = (
        max(int(cols[0]) - padding, 0),
        max(int(rows[0]) - padding, 0),
        min(int(cols[-1]) + 1 + padding, image.width),
        min(int(rows[-1]) + 1 + padding, image.height)
    )
    return image.crop(box)


__all__ = [
    'ImageRenderer',
    'trim_whitespace'
]
