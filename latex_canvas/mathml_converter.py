import logging
from typing import List, Optional

import lxml.etree as ET
from lxml.builder import ElementMaker

from .glyphs import GlyphMapping
from .models import Node, LexemeKind
from .parser import LaTeXParser
from .visitor import NodeVisitor


logger = logging.getLogger(__name__)

MATHML_NAMESPACE = 'http://www.w3.org/1998/Math/MathML'

M = ElementMaker(namespace=MATHML_NAMESPACE, nsmap={None: MATHML_NAMESPACE})

APPLY_FUNCTION = '\u2061'

_MO_KINDS = {
    LexemeKind.OPERATOR, LexemeKind.RELATION, LexemeKind.BIG_OPERATOR,
    LexemeKind.COMMA, LexemeKind.PERIOD, LexemeKind.COLON,
    LexemeKind.SEMICOLON, LexemeKind.CHARACTER
}

_MI_KINDS = {
    LexemeKind.ALPHABET, LexemeKind.GREEK, LexemeKind.SYMBOL,
    LexemeKind.GEOMETRY, LexemeKind.OPERATOR_NAME
}


class _MathMLBuilder(NodeVisitor):
    """Build MathML elements for a document tree."""

    def __init__(self, glyphs: GlyphMapping):
        self.glyphs = glyphs

    def visit_document(self, node: Node) -> ET._Element:
        return self.visit(node.children[0])

    def visit_environment(self, node: Node) -> ET._Element:
        lines = [line for paragraph in node.children for line in paragraph.children]
        if len(lines) == 1 and node.name != 'cases':
            return self.visit(lines[0])

        table = M.mtable(*[M.mtr(M.mtd(self.visit(line))) for line in lines],
                         columnalign='left')
        if node.name == 'cases':
            return M.mrow(M.mo('{', stretchy='true'), table)
        return table

    def visit_paragraph(self, node: Node) -> ET._Element:
        return M.mrow(*[self.visit(line) for line in node.children])

    def visit_line(self, node: Node) -> ET._Element:
        return M.mrow(*self._visit_all(node.children))

    def visit_paren_group(self, node: Node) -> ET._Element:
        row = M.mrow(M.mo('('), *self._visit_all(node.children), M.mo(')'))
        return self._attach_scripts(node, row)

    def visit_bracket_group(self, node: Node) -> ET._Element:
        row = M.mrow(M.mo('['), *self._visit_all(node.children), M.mo(']'))
        return self._attach_scripts(node, row)

    def visit_brace_group(self, node: Node) -> ET._Element:
        return self._attach_scripts(node, M.mrow(*self._visit_all(node.children)))

    def visit_plain(self, node: Node) -> ET._Element:
        return self._attach_scripts(node, self._convert_plain(node))

    def _convert_plain(self, node: Node) -> ET._Element:
        kind = node.kind
        text = self.glyphs.display_text(node.lexeme)

        if kind == LexemeKind.NUMBER:
            return M.mn(text)
        if kind in _MI_KINDS:
            return M.mi(text)
        if kind in _MO_KINDS:
            return M.mo(text)
        if kind == LexemeKind.UNIT:
            return M.mi(text, mathvariant='normal')
        if kind == LexemeKind.FUNCTION:
            return M.mrow(M.mi(text), M.mo(APPLY_FUNCTION), self._argument(node, 0))
        if kind == LexemeKind.SQUARE_ROOT:
            return M.msqrt(self._argument(node, 0))
        if kind == LexemeKind.FRACTION:
            return M.mfrac(self._argument(node, 0), self._argument(node, 1))
        if kind == LexemeKind.BINOMIAL:
            return M.mrow(
                M.mo('('),
                M.mfrac(self._argument(node, 0), self._argument(node, 1), linethickness='0'),
                M.mo(')')
            )

        logger.debug(f"No MathML mapping for {node.text!r}, emitting mtext")
        return M.mtext(node.text)

    def _argument(self, node: Node, index: int) -> ET._Element:
        if index < len(node.children):
            return self.visit(node.children[index])
        return M.mrow()

    def _script(self, marker: Node) -> ET._Element:
        elements = self._visit_all(marker.children)
        if len(elements) == 1:
            return elements[0]
        return M.mrow(*elements)

    def _attach_scripts(self, node: Node, base: ET._Element) -> ET._Element:
        if node.subscript and node.superscript:
            return M.msubsup(base, self._script(node.subscript), self._script(node.superscript))
        if node.superscript:
            return M.msup(base, self._script(node.superscript))
        if node.subscript:
            return M.msub(base, self._script(node.subscript))
        return base

    def _visit_all(self, nodes: List[Node]) -> List[ET._Element]:
        return [self.visit(child) for child in nodes]


class MathMLConverter:
    """Convert LaTeX or parsed document trees to MathML."""

    def __init__(self, parser: Optional[LaTeXParser] = None,
                 glyphs: Optional[GlyphMapping] = None):
        self.parser = parser or LaTeXParser()
        self.glyphs = glyphs or GlyphMapping()

    def convert(self, latex: str, display_mode: bool = False,
                pretty_print: bool = True) -> str:
        """Parse and convert LaTeX to MathML.

        Raises:
            StructureError: if the LaTeX is malformed
        """
        document = self.parser.parse(latex)
        return self.convert_tree(document, display_mode, pretty_print)

    def convert_tree(self, document: Node, display_mode: bool = False,
                     pretty_print: bool = True) -> str:
        """Convert a parsed document tree to MathML."""
        content = _MathMLBuilder(self.glyphs).visit(document)
        math = M.math(display='block' if display_mode else 'inline')

        # Unwrap the outer row so <math> holds the line content directly
        if content.tag == f'{{{MATHML_NAMESPACE}}}mrow' and not content.attrib:
            math.extend(list(content))
        else:
            math.append(content)

        return ET.tostring(math, pretty_print=pretty_print, encoding='unicode')


__all__ = [
    'MathMLConverter',
    'MATHML_NAMESPACE'
]
