"""
Read-only traversal helpers for document trees
"""

from typing import Any, Iterator, List

from .models import Node, NodeType, GROUP_DELIMITERS


class NodeVisitor:
    """Walk a document tree and call a visitor method for every node.

    Subclasses implement ``visit_<node type>`` methods such as
    ``visit_plain`` or ``visit_paren_group``; nodes without a dedicated
    method go through ``generic_visit``.
    """

    def visit(self, node: Node) -> Any:
        method = getattr(self, f"visit_{node.node_type.value}", self.generic_visit)
        return method(node)

    def generic_visit(self, node: Node) -> Any:
        for child in node.children:
            self.visit(child)
        if node.superscript:
            self.visit(node.superscript)
        if node.subscript:
            self.visit(node.subscript)


def walk(node: Node) -> Iterator[Node]:
    """Yield every node depth-first, attachments after children."""
    yield node
    for child in node.children:
        yield from walk(child)
    if node.superscript:
        yield from walk(node.superscript)
    if node.subscript:
        yield from walk(node.subscript)


def node_label(node: Node) -> str:
    if node.node_type == NodeType.ENVIRONMENT:
        return f"Environment({node.name})"
    if node.node_type == NodeType.PLAIN:
        return node.text
    return node.node_type.value.title().replace('_', '')


def format_tree(node: Node, indent: str = "  ") -> str:
    """Render a tree as an indented outline, one node per line."""
    lines: List[str] = []

    def emit(current: Node, depth: int):
        lines.append(f"{indent * depth}{node_label(current)}")
        for child in current.children:
            emit(child, depth + 1)
        if current.superscript:
            emit(current.superscript, depth + 1)
        if current.subscript:
            emit(current.subscript, depth + 1)

    emit(node, 0)
    return "\n".join(lines)


def delimiter_sequence(node: Node) -> str:
    """Re-flatten the group nodes of a tree into their bracket sequence.

    Script content that was written in braces, as in ``x^{2}``, contributes
    its braces again. The braces of ``\\begin{name}`` and ``\\end{name}``
    are not part of the tree and do not appear.
    """
    parts: List[str] = []

    def collect(current: Node):
        opener, closer = GROUP_DELIMITERS.get(current.node_type, ("", ""))
        if current.braced:
            parts.append("{")
        parts.append(opener)
        for child in current.children:
            collect(child)
        parts.append(closer)
        if current.superscript:
            collect(current.superscript)
        if current.subscript:
            collect(current.subscript)
        if current.braced:
            parts.append("}")

    collect(node)
    return "".join(parts)


def count_nodes(node: Node, node_type: NodeType) -> int:
    return sum(1 for n in walk(node) if n.node_type == node_type)


__all__ = [
    'NodeVisitor',
    'walk',
    'node_label',
    'format_tree',
    'delimiter_sequence',
    'count_nodes'
]
