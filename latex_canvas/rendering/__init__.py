from typing import Optional, List
import logging
from .base_renderer import BaseRenderer, RenderConfig, RenderResult
from .fonts import FontSet, TextMetrics, measure_text
from .image_renderer import ImageRenderer, trim_whitespace
from ..models import Node


logger = logging.getLogger(__name__)


class MathRenderer:
    """Main interface for rendering LaTeX to images."""

    def __init__(self, config: Optional[RenderConfig] = None, parser=None):
        self.config = config or RenderConfig()
        self.renderer = ImageRenderer(self.config, parser)

        if not self.renderer.is_available():
            logger.warning("Pillow was built without FreeType, falling back to bitmap fonts")

    def render_latex(self, latex: str, config: Optional[RenderConfig] = None) -> RenderResult:
        """Render LaTeX to image."""
        return self.renderer.render_latex(latex, config or self.config)

    def render_tree(self, document: Node, config: Optional[RenderConfig] = None) -> RenderResult:
        """Render an already parsed document tree."""
        return self.renderer.render_tree(document, config or self.config)

    def render_latex_batch(self, latex_list: List[str],
                           config: Optional[RenderConfig] = None) -> List[RenderResult]:
        """Render multiple LaTeX expressions."""
        config = config or self.config
        results = []

        for latex in latex_list:
            results.append(self.render_latex(latex, config))

        return results

    def get_available_renderers(self) -> dict:
        """Get list of available renderers."""
        return {
            "image": self.renderer.is_available()
        }


def render_math(latex: str, output_path: Optional[str] = None,
                config: Optional[RenderConfig] = None) -> RenderResult:
    """Convenience function to render LaTeX, optionally saving the image."""
    result = MathRenderer(config).render_latex(latex)

    if output_path and result.is_valid:
        result.save(output_path)

    return result


__all__ = [
    'MathRenderer',
    'BaseRenderer',
    'ImageRenderer',
    'RenderConfig',
    'RenderResult',
    'FontSet',
    'TextMetrics',
    'measure_text',
    'render_math',
    'trim_whitespace'
]
