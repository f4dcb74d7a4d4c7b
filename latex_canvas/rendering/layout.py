"""
Box layout of document trees

Every node is laid out as a ``Box`` measured from its baseline: ``ascent``
above it, ``descent`` below it. Boxes hold placed items (glyphs, strokes and
nested boxes) at offsets relative to their own origin, with y growing
downwards as on the image.
"""

import math
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from ..config import RenderConfig
from ..glyphs import GlyphMapping
from ..models import Node, LexemeKind
from ..visitor import NodeVisitor
from .fonts import FontSet


logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass
class Glyph:
    text: str
    size: int
    style: str = 'main'


@dataclass
class Stroke:
    points: List[Point]
    width: float = 1.0


@dataclass
class Box:
    width: float = 0.0
    ascent: float = 0.0
    descent: float = 0.0
    items: List[Tuple[float, float, Any]] = field(default_factory=list)

    @property
    def height(self) -> float:
        return self.ascent + self.descent

    def place(self, item: Any, dx: float = 0.0, dy: float = 0.0):
        self.items.append((dx, dy, item))


_MATH_STYLE_KINDS = {LexemeKind.ALPHABET, LexemeKind.GREEK}

_SYMBOL_STYLE_KINDS = {
    LexemeKind.OPERATOR, LexemeKind.RELATION, LexemeKind.BIG_OPERATOR,
    LexemeKind.GEOMETRY, LexemeKind.SYMBOL, LexemeKind.UNIT
}

BIG_OPERATOR_SCALE = 1.4


class LayoutEngine(NodeVisitor):
    """Lay out a document tree into nested boxes."""

    def __init__(self, fonts: FontSet, glyphs: GlyphMapping,
                 config: Optional[RenderConfig] = None):
        self.fonts = fonts
        self.glyphs = glyphs
        self.config = config or RenderConfig()
        self.sizes = [self.config.font_size]

    @property
    def size(self) -> int:
        return self.sizes[-1]

    @contextmanager
    def scaled(self, factor: float):
        """Lay out nested content at a scaled font size."""
        size = max(int(round(self.size * factor)), self.config.min_font_size)
        self.sizes.append(size)
        try:
            yield size
        finally:
            self.sizes.pop()

    @property
    def axis(self) -> float:
        """Height of the math axis above the baseline."""
        return self.fonts.cap_height(self.size) / 2

    @property
    def rule_width(self) -> float:
        return max(1.0, self.size / 20)

    # Structure

    def visit_document(self, node: Node) -> Box:
        return self.visit(node.children[0])

    def visit_environment(self, node: Node) -> Box:
        gap = (self.config.line_spacing + self.config.paragraph_spacing) * self.size
        body = self._stack([self.visit(paragraph) for paragraph in node.children], gap)
        if node.name == 'document':
            return body

        if node.name == 'cases':
            body = self._delimited(body, '{', None)
        return self._center_on_axis(body)

    def visit_paragraph(self, node: Node) -> Box:
        gap = self.config.line_spacing * self.size
        return self._stack([self.visit(line) for line in node.children], gap)

    def visit_line(self, node: Node) -> Box:
        return self._row([self.visit(child) for child in node.children])

    # Groups

    def visit_paren_group(self, node: Node) -> Box:
        box = self._delimited(self._row(self._visit_all(node.children)), '(', ')')
        return self._with_scripts(node, box)

    def visit_bracket_group(self, node: Node) -> Box:
        box = self._delimited(self._row(self._visit_all(node.children)), '[', ']')
        return self._with_scripts(node, box)

    def visit_brace_group(self, node: Node) -> Box:
        return self._with_scripts(node, self._row(self._visit_all(node.children)))

    # Plain nodes

    def visit_plain(self, node: Node) -> Box:
        return self._with_scripts(node, self._plain(node))

    def _plain(self, node: Node) -> Box:
        kind = node.kind
        text = self.glyphs.display_text(node.lexeme)

        if kind == LexemeKind.FRACTION:
            return self._fraction(self._argument(node, 0), self._argument(node, 1))
        if kind == LexemeKind.BINOMIAL:
            fraction = self._fraction(self._argument(node, 0), self._argument(node, 1), rule=False)
            return self._delimited(fraction, '(', ')')
        if kind == LexemeKind.SQUARE_ROOT:
            return self._radical(self._argument(node, 0))
        if kind == LexemeKind.FUNCTION:
            return self._row([self._text(text, 'main'), self._argument(node, 0)])
        if kind == LexemeKind.BIG_OPERATOR:
            with self.scaled(BIG_OPERATOR_SCALE):
                box = self._text(text, 'symbol')
            return self._center_on_axis(box)

        if kind in _MATH_STYLE_KINDS:
            style = 'math'
        elif kind in _SYMBOL_STYLE_KINDS:
            style = 'symbol'
        else:
            style = 'main'
        return self._text(text, style)

    def _argument(self, node: Node, index: int) -> Box:
        if index < len(node.children):
            return self.visit(node.children[index])
        return self._row([])

    def _with_scripts(self, node: Node, base: Box) -> Box:
        if not node.superscript and not node.subscript:
            return base

        cap = self.fonts.cap_height(self.size)
        with self.scaled(self.config.script_scale):
            sup = self._row(self._visit_all(node.superscript.children)) if node.superscript else None
            sub = self._row(self._visit_all(node.subscript.children)) if node.subscript else None

        box = Box(width=base.width, ascent=base.ascent, descent=base.descent)
        box.place(base)
        x = base.width + self.size * 0.05
        script_width = 0.0

        if sup:
            shift = max(base.ascent - sup.ascent * 0.5, cap * 0.55)
            box.place(sup, x, -shift)
            box.ascent = max(box.ascent, shift + sup.ascent)
            script_width = sup.width
        if sub:
            shift = max(base.descent + sub.ascent * 0.3, cap * 0.3)
            box.place(sub, x, shift)
            box.descent = max(box.descent, shift + sub.descent)
            script_width = max(script_width, sub.width)

        box.width = x + script_width
        return box

    # Primitives

    def _text(self, text: str, style: str = 'main') -> Box:
        metrics = self.fonts.measure(text, self.size, style)
        box = Box(width=metrics.width, ascent=metrics.ascent, descent=metrics.descent)
        box.place(Glyph(text, self.size, style))
        return box

    def _row(self, boxes: List[Box]) -> Box:
        """Place boxes side by side on a shared baseline."""
        if not boxes:
            return Box(ascent=self.fonts.cap_height(self.size))

        gap = self.config.margin * self.size
        row = Box()
        x = 0.0
        for box in boxes:
            row.place(box, x)
            x += box.width + gap
            row.ascent = max(row.ascent, box.ascent)
            row.descent = max(row.descent, box.descent)
        row.width = x - gap
        return row

    def _stack(self, boxes: List[Box], gap: float) -> Box:
        """Place boxes below each other; the first baseline is the stack's."""
        stack = Box(ascent=boxes[0].ascent)
        y = 0.0
        for index, box in enumerate(boxes):
            if index:
                y += boxes[index - 1].descent + gap + box.ascent
            stack.place(box, 0, y)
            stack.width = max(stack.width, box.width)
        stack.descent = y + boxes[-1].descent
        return stack

    def _center_on_axis(self, box: Box) -> Box:
        ascent = box.height / 2 + self.axis
        centered = Box(width=box.width, ascent=ascent, descent=box.height - ascent)
        centered.place(box, 0, ascent - box.ascent)
        return centered

    def _fraction(self, numerator: Box, denominator: Box, rule: bool = True) -> Box:
        axis = self.axis
        half_rule = self.rule_width / 2
        gap = self.size * 0.15
        pad = self.size * 0.1
        width = max(numerator.width, denominator.width) + 2 * pad

        box = Box(
            width=width,
            ascent=axis + half_rule + gap + numerator.height,
            descent=max(denominator.height + gap + half_rule - axis, 0)
        )
        box.place(numerator, (width - numerator.width) / 2,
                  -(axis + half_rule + gap + numerator.descent))
        box.place(denominator, (width - denominator.width) / 2,
                  -axis + half_rule + gap + denominator.ascent)
        if rule:
            box.place(Stroke([(0, -axis), (width, -axis)], self.rule_width))
        return box

    def _radical(self, radicand: Box) -> Box:
        gap = self.size * 0.1
        sign_width = self.size * 0.6
        top = -(radicand.ascent + gap + self.rule_width)
        bottom = radicand.descent
        middle = (top + bottom) / 2

        box = Box(width=sign_width + radicand.width + gap,
                  ascent=-top + self.rule_width, descent=bottom)
        box.place(Stroke([
            (0, middle + (bottom - top) * 0.1),
            (sign_width * 0.3, middle),
            (sign_width * 0.6, bottom),
            (sign_width, top),
            (box.width, top),
        ], self.rule_width))
        box.place(radicand, sign_width + gap / 2)
        return box

    def _delimited(self, content: Box, opener: Optional[str], closer: Optional[str]) -> Box:
        """Surround content with delimiters stretched to its height."""
        pad = self.size * 0.05
        top = min(-content.ascent - pad, -self.fonts.cap_height(self.size))
        bottom = max(content.descent + pad, self.size * 0.2)
        delimiter_width = self.size * 0.3

        box = Box(ascent=-top, descent=bottom)
        x = 0.0
        if opener:
            box.place(Stroke(_delimiter_points(opener, delimiter_width, top, bottom),
                             self.rule_width), x)
            x += delimiter_width
        box.place(content, x)
        x += content.width
        if closer:
            box.place(Stroke(_delimiter_points(closer, delimiter_width, top, bottom),
                             self.rule_width), x)
            x += delimiter_width
        box.width = x
        return box

    def _visit_all(self, nodes: List[Node]) -> List[Box]:
        return [self.visit(child) for child in nodes]


def _delimiter_points(char: str, width: float, top: float, bottom: float) -> List[Point]:
    """Outline of a stretchy delimiter drawn within ``width``."""
    height = bottom - top
    middle = (top + bottom) / 2

    if char in '()':
        steps = 16
        points = [
            (width * (0.15 + 0.7 * (1 - math.sin(math.pi * i / steps))), top + height * i / steps)
            for i in range(steps + 1)
        ]
    elif char in '[]':
        points = [(width * 0.8, top), (width * 0.3, top), (width * 0.3, bottom), (width * 0.8, bottom)]
    elif char in '{}':
        points = [
            (width * 0.9, top),
            (width * 0.5, top + height * 0.08),
            (width * 0.5, middle - height * 0.08),
            (width * 0.1, middle),
            (width * 0.5, middle + height * 0.08),
            (width * 0.5, bottom - height * 0.08),
            (width * 0.9, bottom),
        ]
    else:
        raise ValueError(f"Unsupported delimiter: {char!r}")

    if char in ')]}':
        points = [(width - x, y) for x, y in points]
    return points


__all__ = [
    'LayoutEngine',
    'Box',
    'Glyph',
    'Stroke'
]
