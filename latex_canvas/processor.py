"""
Main processor for converting LaTeX sources to trees, images and MathML
"""

import json
import logging
import time
from pathlib import Path
from typing import Optional, Union, List

from .models import ProcessingResult
from .config import ParseConfig, ProcessConfig, RenderConfig
from .errors import StructureError
from .parser import LaTeXParser
from .mathml_converter import MathMLConverter
from .rendering import MathRenderer


logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = ('.tex', '.txt')

EXPORT_FORMATS = ('json', 'png', 'mathml')


class LaTeXCanvasProcessor:
    """Parse LaTeX and produce the requested outputs for it."""

    def __init__(self, config: Optional[ProcessConfig] = None,
                 parse_config: Optional[ParseConfig] = None,
                 render_config: Optional[RenderConfig] = None):
        """Initialize processor with configuration."""
        self.config = config or ProcessConfig()
        self.parse_config = parse_config or ParseConfig()
        self.render_config = render_config or RenderConfig()

        # Initialize components
        self.parser = LaTeXParser(self.parse_config)
        self.renderer = MathRenderer(self.render_config, self.parser)
        self.mathml_converter = MathMLConverter(self.parser)

        # Setup logging
        if self.config.verbose:
            logging.basicConfig(level=logging.INFO)
        if self.config.debug:
            logging.basicConfig(level=logging.DEBUG)

    def process_text(self, latex: str, source_file: Optional[str] = None) -> ProcessingResult:
        """Parse LaTeX, then render and convert it as configured."""
        start_time = time.time()
        result = ProcessingResult(latex=latex, source_file=source_file)

        try:
            result.document = self.parser.parse(latex)
        except StructureError as e:
            logger.error(f"Parsing failed: {e}")
            result.errors.append(e.to_dict())
        except ValueError as e:
            logger.error(f"Parsing failed: {e}")
            result.errors.append({'type': 'invalid_input', 'message': str(e)})

        if result.document is not None:
            if self.config.render_images:
                result.render_result = self.renderer.render_tree(result.document)
                if not result.render_result.is_valid:
                    result.errors.append({
                        'type': 'render',
                        'message': result.render_result.error
                    })

            if self.config.convert_to_mathml:
                result.mathml = self.mathml_converter.convert_tree(
                    result.document, display_mode=self.config.display_mode
                )

        result.processing_time = time.time() - start_time
        return result

    def process_file(self, file_path: Union[str, Path]) -> ProcessingResult:
        """Process a .tex or .txt file holding LaTeX markup."""
        file_path = Path(file_path)

        if not file_path.exists():
            return ProcessingResult(
                latex="",
                source_file=str(file_path),
                errors=[{'type': 'file_not_found', 'message': f"File not found: {file_path}"}]
            )

        suffix = file_path.suffix.lower()
        if suffix not in SUPPORTED_SUFFIXES:
            return ProcessingResult(
                latex="",
                source_file=str(file_path),
                errors=[{'type': 'unsupported_format', 'message': f"Unsupported file format: {suffix}"}]
            )

        try:
            latex = file_path.read_text(encoding='utf-8')
        except UnicodeDecodeError as e:
            logger.error(f"Cannot decode {file_path}: {e}")
            return ProcessingResult(
                latex="",
                source_file=str(file_path),
                errors=[{'type': 'invalid_encoding', 'message': f"File is not valid UTF-8: {e}"}]
            )

        return self.process_text(latex, str(file_path))

    def process_batch(self, files: List[Union[str, Path]]) -> List[ProcessingResult]:
        """Process multiple files in batch."""
        results = []

        for file_path in files:
            result = self.process_file(file_path)
            if not result.is_successful:
                logger.warning(f"Processing {file_path} failed: {result.errors}")
            results.append(result)

        return results

    def export_results(self, result: ProcessingResult,
                       output_path: Union[str, Path],
                       format: Optional[str] = None) -> bool:
        """Export processing results to file."""
        output_path = Path(output_path)
        format = format or self.config.output_format

        if format not in EXPORT_FORMATS:
            logger.error(f"Unsupported export format: {format}")
            return False

        try:
            if format == "json":
                with open(output_path, 'w', encoding='utf-8') as f:
                    json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
            elif format == "png":
                if not result.render_result or not result.render_result.is_valid:
                    logger.error("No rendered image to export")
                    return False
                result.render_result.save(output_path, format='PNG')
            else:
                mathml = result.mathml
                if mathml is None:
                    if result.document is None:
                        logger.error("No document tree to export")
                        return False
                    mathml = self.mathml_converter.convert_tree(
                        result.document, display_mode=self.config.display_mode
                    )
                output_path.write_text(mathml, encoding='utf-8')

            return True

        except OSError as e:
            logger.error(f"Export failed: {e}")
            return False


__all__ = [
    'LaTeXCanvasProcessor'
]
