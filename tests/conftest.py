import pytest
import tempfile
from pathlib import Path
from latex_canvas.config import ParseConfig, RenderConfig
from latex_canvas.parser import LaTeXParser
from latex_canvas.mathml_converter import MathMLConverter


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_latex_formulas():
    """Sample LaTeX formulas for testing."""
    return {
        'simple': 'x + y = z',
        'circle': 'x^2 + y^2 = 1',
        'fraction': r'\dfrac{1}{2}',
        'sqrt': r'\sqrt{x^2 + y^2}',
        'cases': r'\begin{cases}a\\b\end{cases}',
        'nested': r'x^{y^z}',
        'greek': r'\alpha + \beta = \gamma',
        'binom': r'\binom{n}{k}',
        'function': r'\sin(x) + \cos{y}',
        'scripts': 'x_2^3',
        'units': r'5 \mL + 2 \dL',
        'geometry': r'\angle ABC = 90 \degree',
        'multiline': 'a + b\\\\c + d',
        'paragraphs': 'a\n\nb',
    }


@pytest.fixture
def latex_parser():
    """LaTeX parser instance."""
    return LaTeXParser()


@pytest.fixture
def strict_parser():
    """Parser rejecting unknown commands."""
    return LaTeXParser(ParseConfig(strict_commands=True))


@pytest.fixture
def mathml_converter():
    """MathML converter instance."""
    return MathMLConverter()


@pytest.fixture
def render_config():
    """Small render configuration using Pillow's default font."""
    return RenderConfig(font_size=32, padding=10)
