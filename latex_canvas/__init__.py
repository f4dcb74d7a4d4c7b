"""
LaTeX Canvas

Tokenize a subset of LaTeX math markup, assemble it into a document tree of
environments, paragraphs, lines and groups, and render that tree to images
or MathML.
"""

__version__ = "0.1.0"
__author__ = "LaTeX Canvas Team"

# Models
from .models import (
    Lexeme,
    LexemeKind,
    Node,
    NodeType,
    ProcessingResult
)

# Errors
from .errors import (
    StructureError,
    DanglingAttachmentError,
    DuplicateAttachmentError,
    DelimiterMismatchError,
    MalformedEnvironmentError,
    EnvironmentMismatchError,
    UnknownCommandError,
    UnclosedScopeError
)

# Configuration classes
from .config import (
    ParseConfig,
    ProcessConfig,
    RenderConfig,
    load_config
)

# Core components
from .lexer import Lexer, tokenize
from .parser import LaTeXParser, parse_latex
from .visitor import NodeVisitor, walk, format_tree, delimiter_sequence
from .glyphs import GlyphMapping
from .mathml_converter import MathMLConverter
from .rendering import MathRenderer, ImageRenderer, RenderResult

# Main processor
from .processor import LaTeXCanvasProcessor

__all__ = [
    # Version
    "__version__",

    # Models
    "Lexeme",
    "LexemeKind",
    "Node",
    "NodeType",
    "ProcessingResult",

    # Errors
    "StructureError",
    "DanglingAttachmentError",
    "DuplicateAttachmentError",
    "DelimiterMismatchError",
    "MalformedEnvironmentError",
    "EnvironmentMismatchError",
    "UnknownCommandError",
    "UnclosedScopeError",

    # Configurations
    "ParseConfig",
    "ProcessConfig",
    "RenderConfig",
    "load_config",

    # Core components
    "Lexer",
    "tokenize",
    "LaTeXParser",
    "parse_latex",
    "NodeVisitor",
    "walk",
    "format_tree",
    "delimiter_sequence",
    "GlyphMapping",
    "MathMLConverter",
    "MathRenderer",
    "ImageRenderer",
    "RenderResult",

    # Main processor
    "LaTeXCanvasProcessor"
]


# Convenience function
def create_processor(**kwargs):
    """Create a configured processor instance."""
    config = ProcessConfig(**kwargs)
    return LaTeXCanvasProcessor(config)
