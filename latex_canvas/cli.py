import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from latex_canvas.config import load_config
from latex_canvas.errors import StructureError
from latex_canvas.mathml_converter import MathMLConverter
from latex_canvas.models import Node
from latex_canvas.parser import LaTeXParser
from latex_canvas.rendering import MathRenderer
from latex_canvas.visitor import format_tree

app = typer.Typer(
    name="latex-canvas",
    help="latex-canvas - render LaTeX math markup to images",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def _report(error: StructureError):
    console.print(f"[red]Error:[/red] {error}", markup=True, highlight=False)
    if error.lexeme is not None:
        console.print(f"  near token {error.lexeme.text!r}", markup=False, highlight=False)


def _parse(parser: LaTeXParser, latex: str) -> Node:
    """Parse LaTeX or exit with code 1 on malformed or oversized input."""
    try:
        return parser.parse(latex)
    except StructureError as e:
        _report(e)
    except ValueError as e:
        console.print(f"[red]Invalid input:[/red] {e}", markup=True, highlight=False)
    raise typer.Exit(code=1)


@app.command()
def render(
    latex: str = typer.Argument(..., help="LaTeX math markup to render"),
    output: Path = typer.Option(..., "-o", "--output", help="Image file to write"),
    width: Optional[int] = typer.Option(None, help="Canvas width in pixels"),
    height: Optional[int] = typer.Option(None, help="Canvas height in pixels"),
    font_size: Optional[int] = typer.Option(None, "--font-size", help="Base font size in pixels"),
    trim: bool = typer.Option(False, help="Crop the image to its content"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML or JSON config file"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable informational logging"),
):
    """Parse LaTeX and write the rendered image."""
    if verbose:
        logging.basicConfig(level=logging.INFO)

    parse_config, _, render_config = load_config(config)
    if width is not None:
        render_config.width = width
    if height is not None:
        render_config.height = height
    if font_size is not None:
        render_config.font_size = font_size
    if trim:
        render_config.trim = True

    document = _parse(LaTeXParser(parse_config), latex)

    result = MathRenderer(render_config).render_tree(document)
    if not result.is_valid:
        console.print(f"[red]Render failed:[/red] {result.error}")
        raise typer.Exit(code=1)

    result.save(output)
    console.print(f"[green]Wrote {result.size[0]}x{result.size[1]} image to {output}[/green]")


@app.command()
def tree(
    latex: str = typer.Argument(..., help="LaTeX math markup to parse"),
    as_json: bool = typer.Option(False, "--json", help="Print the tree as JSON"),
    strict: bool = typer.Option(False, help="Reject unknown commands"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML or JSON config file"),
):
    """Print the document tree of LaTeX markup."""
    parse_config = load_config(config)[0]
    if strict:
        parse_config = replace(parse_config, strict_commands=True)

    document = _parse(LaTeXParser(parse_config), latex)

    if as_json:
        typer.echo(json.dumps(document.to_dict(), indent=2, ensure_ascii=False))
    else:
        typer.echo(format_tree(document))


@app.command()
def mathml(
    latex: str = typer.Argument(..., help="LaTeX math markup to convert"),
    display: bool = typer.Option(False, "--display", help="Emit display-mode MathML"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML or JSON config file"),
):
    """Print LaTeX markup converted to MathML."""
    converter = MathMLConverter(LaTeXParser(load_config(config)[0]))
    document = _parse(converter.parser, latex)
    typer.echo(converter.convert_tree(document, display_mode=display))


if __name__ == "__main__":
    app()
