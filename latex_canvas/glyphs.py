import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

import yaml

from .models import Lexeme, LexemeKind


logger = logging.getLogger(__name__)


class GlyphMapping:
    """Map LaTeX commands to the Unicode glyphs used for display."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self.mappings: Dict[str, Dict[str, str]] = {}
        self._load_defaults()
        if config_path:
            path = Path(config_path)
            if path.exists():
                self._load_from_file(path)
            else:
                logger.warning(f"Glyph mapping file not found: {path}")

    def _load_from_file(self, path: Path):
        """Merge mappings from YAML/JSON file over the defaults."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                if path.suffix in ['.yaml', '.yml']:
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load glyph mappings from {path}: {e}")
            return

        for category, mapping in (data or {}).items():
            if isinstance(mapping, dict):
                self.mappings.setdefault(category, {}).update(mapping)
        logger.info(f"Loaded glyph mappings from {path}")

    def _load_defaults(self):
        """Load default glyph mappings."""
        self.mappings = {
            'operators': {
                '-': '−', '*': '∗', '\\times': '×', '\\div': '÷', '\\pm': '±',
                '\\mp': '∓', '\\cdot': '⋅', '\\ast': '∗', '\\circ': '∘',
                '\\bullet': '•', '\\mod': 'mod', '\\cap': '∩', '\\cup': '∪',
                '\\wedge': '∧', '\\vee': '∨', '\\oplus': '⊕', '\\otimes': '⊗'
            },
            'relations': {
                '\\leq': '≤', '\\le': '≤', '\\geq': '≥', '\\ge': '≥',
                '\\neq': '≠', '\\ne': '≠', '\\approx': '≈', '\\equiv': '≡',
                '\\sim': '∼', '\\simeq': '≃', '\\cong': '≅', '\\propto': '∝',
                '\\in': '∈', '\\notin': '∉', '\\ni': '∋', '\\subset': '⊂',
                '\\supset': '⊃', '\\subseteq': '⊆', '\\supseteq': '⊇',
                '\\to': '→', '\\rightarrow': '→', '\\leftarrow': '←',
                '\\Rightarrow': '⇒', '\\Leftarrow': '⇐', '\\leftrightarrow': '↔',
                '\\Leftrightarrow': '⇔', '\\mapsto': '↦'
            },
            'greek_letters': {
                '\\alpha': 'α', '\\beta': 'β', '\\gamma': 'γ', '\\delta': 'δ',
                '\\epsilon': 'ϵ', '\\varepsilon': 'ε', '\\zeta': 'ζ', '\\eta': 'η',
                '\\theta': 'θ', '\\vartheta': 'ϑ', '\\iota': 'ι', '\\kappa': 'κ',
                '\\lambda': 'λ', '\\mu': 'μ', '\\nu': 'ν', '\\xi': 'ξ',
                '\\omicron': 'ο', '\\pi': 'π', '\\varpi': 'ϖ', '\\rho': 'ρ',
                '\\varrho': 'ϱ', '\\sigma': 'σ', '\\varsigma': 'ς', '\\tau': 'τ',
                '\\upsilon': 'υ', '\\phi': 'ϕ', '\\varphi': 'φ', '\\chi': 'χ',
                '\\psi': 'ψ', '\\omega': 'ω',
                '\\Gamma': 'Γ', '\\Delta': 'Δ', '\\Theta': 'Θ', '\\Lambda': 'Λ',
                '\\Xi': 'Ξ', '\\Pi': 'Π', '\\Sigma': 'Σ', '\\Upsilon': 'Υ',
                '\\Phi': 'Φ', '\\Psi': 'Ψ', '\\Omega': 'Ω'
            },
            'geometry': {
                '\\triangle': '△', '\\circle': '○', '\\square': '□', '\\bot': '⊥',
                '\\angle': '∠', '\\parallel': '∥', '\\perp': '⊥', '\\degree': '°'
            },
            'symbols': {
                '\\infty': '∞', '\\partial': '∂', '\\nabla': '∇', '\\emptyset': '∅',
                '\\therefore': '∴', '\\because': '∵', '\\cdots': '⋯',
                '\\ldots': '…', '\\dots': '…', '\\prime': '′', '\\forall': '∀',
                '\\exists': '∃'
            },
            'units': {
                '\\ell': 'ℓ', '\\mL': 'mℓ', '\\dL': 'dℓ', '\\kL': 'kℓ'
            },
            'big_operators': {
                '\\sum': '∑', '\\prod': '∏', '\\coprod': '∐', '\\int': '∫',
                '\\iint': '∬', '\\iiint': '∭', '\\oint': '∮'
            }
        }

    def get_symbol(self, latex_symbol: str, category: Optional[str] = None) -> Optional[str]:
        """Get Unicode glyph for LaTeX command."""
        if category and category in self.mappings:
            return self.mappings[category].get(latex_symbol)

        for mapping in self.mappings.values():
            if latex_symbol in mapping:
                return mapping[latex_symbol]

        return None

    def display_text(self, lexeme: Lexeme) -> str:
        """Text drawn for a lexeme; commands without a glyph keep their name."""
        glyph = self.get_symbol(lexeme.text)
        if glyph is not None:
            return glyph
        if lexeme.kind in (LexemeKind.FUNCTION, LexemeKind.OPERATOR_NAME):
            return lexeme.text.lstrip('\\')
        return lexeme.text


__all__ = [
    'GlyphMapping'
]
