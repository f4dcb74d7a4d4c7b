"""
Base classes for rendering system
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Union, Tuple
from abc import ABC, abstractmethod
from pathlib import Path
from PIL import Image

from ..config import RenderConfig
from ..errors import StructureError
from ..models import Node
from ..parser import LaTeXParser


logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Result of rendering operation."""
    image: Optional[Image.Image] = None
    size: Optional[Tuple[int, int]] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        """Check if render was successful."""
        return self.image is not None and not self.error

    def save(self, path: Union[str, Path], format: Optional[str] = None):
        """Save rendered image to file."""
        if self.image is None:
            raise ValueError("No render result to save")

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.image.save(path, format=format)


class BaseRenderer(ABC):
    """Base class for all renderers."""

    def __init__(self, config: Optional[RenderConfig] = None,
                 parser: Optional[LaTeXParser] = None):
        self.config = config or RenderConfig()
        self.parser = parser or LaTeXParser()

    @abstractmethod
    def is_available(self) -> bool:
        """Check if renderer is available."""
        pass

    @abstractmethod
    def render_tree(self, document: Node, config: Optional[RenderConfig] = None) -> RenderResult:
        """Render a parsed document tree."""
        pass

    def render_latex(self, latex: str, config: Optional[RenderConfig] = None) -> RenderResult:
        """Parse and render LaTeX; malformed input yields an error result."""
        try:
            document = self.parser.parse(latex)
        except StructureError as e:
            logger.warning(f"Cannot render malformed LaTeX: {e}")
            return RenderResult(error=str(e), metadata={'error': e.to_dict()})

        return self.render_tree(document, config)


__all__ = [
    'BaseRenderer',
    'RenderConfig',
    'RenderResult'
]
