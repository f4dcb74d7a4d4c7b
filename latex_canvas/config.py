"""
Configuration classes for LaTeX Canvas
"""

import json
import logging
from dataclasses import dataclass, fields
from typing import Optional, Dict, Any, Tuple, Union
from pathlib import Path

import yaml


logger = logging.getLogger(__name__)


@dataclass
class ParseConfig:
    """Parser configuration."""
    # Fail on backslash commands missing from the symbol table
    strict_commands: bool = False

    # Return the tree even if groups or environments are left open
    allow_unclosed: bool = False

    max_input_length: int = 10000


@dataclass
class RenderConfig:
    """Rendering configuration."""
    # Canvas size; None fits the canvas to the content
    width: Optional[int] = None
    height: Optional[int] = None
    padding: int = 20
    output_format: str = "png"

    # Typography
    font_size: int = 48
    margin: float = 0.15  # horizontal gap between siblings, in em
    script_scale: float = 0.6
    min_font_size: int = 8
    line_spacing: float = 0.4  # vertical gap between lines, in em
    paragraph_spacing: float = 1.0  # extra gap between paragraphs, in em

    # Appearance
    background_color: str = "white"
    text_color: str = "black"

    # Fonts; Pillow's default font is used when a path is unset
    font_path: Optional[str] = None
    math_font_path: Optional[str] = None
    symbol_font_path: Optional[str] = None
    glyph_config_path: Optional[str] = None

    # Crop the canvas to the drawn pixels plus padding
    trim: bool = False


@dataclass
class ProcessConfig:
    """Main processing configuration."""
    # General settings
    verbose: bool = False
    debug: bool = False

    # Processing options
    render_images: bool = True
    convert_to_mathml: bool = False
    display_mode: bool = True

    # Output options
    output_format: str = "png"  # png, json, mathml


def _build(cls, section: Optional[Dict[str, Any]]):
    if not section:
        return cls()
    if not isinstance(section, dict):
        logger.warning(f"Ignoring malformed {cls.__name__} section: {section!r}")
        return cls()

    known = {f.name for f in fields(cls)}
    unknown = set(section) - known
    if unknown:
        logger.warning(f"Unknown {cls.__name__} keys ignored: {sorted(unknown)}")
    return cls(**{k: v for k, v in section.items() if k in known})


def load_config(path: Optional[Union[str, Path]] = None) -> Tuple[ParseConfig, ProcessConfig, RenderConfig]:
    """Load parse, process and render settings from a YAML or JSON file.

    The file may contain ``parse``, ``process`` and ``render`` sections.
    Missing files and sections fall back to the defaults.
    """
    if path is None:
        return ParseConfig(), ProcessConfig(), RenderConfig()

    path = Path(path)
    if not path.exists():
        logger.warning(f"Config file not found: {path}, using defaults")
        return ParseConfig(), ProcessConfig(), RenderConfig()

    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix in ['.yaml', '.yml']:
            data = yaml.safe_load(f) or {}
        else:
            data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")

    logger.info(f"Loaded configuration from {path}")
    return (
        _build(ParseConfig, data.get('parse')),
        _build(ProcessConfig, data.get('process')),
        _build(RenderConfig, data.get('render'))
    )
