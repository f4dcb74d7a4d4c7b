"""
Data models for the LaTeX Canvas parser
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from enum import Enum
from datetime import datetime


class LexemeKind(Enum):
    """Closed set of lexeme kinds produced by the lexer."""
    UNKNOWN = "unknown"
    CHARACTER = "character"

    # Token shapes
    NUMBER = "number"
    ALPHABET = "alphabet"

    # Attachment markers
    SUBSCRIPT = "subscript"
    SUPERSCRIPT = "superscript"

    # Document structure
    LINE_BREAK = "line_break"
    PARAGRAPH_BREAK = "paragraph_break"
    BEGIN = "begin"
    END = "end"

    # Delimiters
    LPAREN = "lparen"
    RPAREN = "rparen"
    LBRACKET = "lbracket"
    RBRACKET = "rbracket"
    LBRACE = "lbrace"
    RBRACE = "rbrace"

    # Punctuation
    COMMA = "comma"
    PERIOD = "period"
    COLON = "colon"
    SEMICOLON = "semicolon"

    # Math symbols
    OPERATOR = "operator"
    RELATION = "relation"
    GREEK = "greek"
    GEOMETRY = "geometry"
    SYMBOL = "symbol"
    UNIT = "unit"
    BIG_OPERATOR = "big_operator"

    # Named operators
    FUNCTION = "function"
    OPERATOR_NAME = "operator_name"

    # Layout commands
    SQUARE_ROOT = "square_root"
    FRACTION = "fraction"
    BINOMIAL = "binomial"


OPENING_KINDS = {LexemeKind.LPAREN, LexemeKind.LBRACKET, LexemeKind.LBRACE}
CLOSING_KINDS = {LexemeKind.RPAREN, LexemeKind.RBRACKET, LexemeKind.RBRACE}


@dataclass(frozen=True)
class Lexeme:
    """A classified unit of input text."""
    text: str
    kind: LexemeKind
    position: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'text': self.text,
            'kind': self.kind.value
        }


class NodeType(Enum):
    """Tags of the tree node variant."""
    DOCUMENT = "document"
    ENVIRONMENT = "environment"
    PARAGRAPH = "paragraph"
    LINE = "line"
    PLAIN = "plain"
    PAREN_GROUP = "paren_group"
    BRACKET_GROUP = "bracket_group"
    BRACE_GROUP = "brace_group"


GROUP_TYPES = {NodeType.PAREN_GROUP, NodeType.BRACKET_GROUP, NodeType.BRACE_GROUP}

GROUP_FOR_OPENER = {
    LexemeKind.LPAREN: NodeType.PAREN_GROUP,
    LexemeKind.LBRACKET: NodeType.BRACKET_GROUP,
    LexemeKind.LBRACE: NodeType.BRACE_GROUP,
}

GROUP_FOR_CLOSER = {
    LexemeKind.RPAREN: NodeType.PAREN_GROUP,
    LexemeKind.RBRACKET: NodeType.BRACKET_GROUP,
    LexemeKind.RBRACE: NodeType.BRACE_GROUP,
}

GROUP_DELIMITERS = {
    NodeType.PAREN_GROUP: ('(', ')'),
    NodeType.BRACKET_GROUP: ('[', ']'),
    NodeType.BRACE_GROUP: ('{', '}'),
}


@dataclass
class Node:
    """A node of the document tree.

    ``children`` is the ordered content of the node. ``subscript`` and
    ``superscript`` are single-slot attachments holding the marker node
    (``_`` or ``^``) whose children are the script content.
    """
    node_type: NodeType
    lexeme: Optional[Lexeme] = None
    name: Optional[str] = None
    children: List['Node'] = field(default_factory=list)
    subscript: Optional['Node'] = None
    superscript: Optional['Node'] = None
    # Set when a one-child brace group was unwrapped into a script marker
    braced: bool = field(default=False, compare=False, repr=False)

    @property
    def text(self) -> Optional[str]:
        return self.lexeme.text if self.lexeme else None

    @property
    def kind(self) -> Optional[LexemeKind]:
        return self.lexeme.kind if self.lexeme else None

    @property
    def is_group(self) -> bool:
        return self.node_type in GROUP_TYPES

    @property
    def is_script_marker(self) -> bool:
        return self.kind in (LexemeKind.SUBSCRIPT, LexemeKind.SUPERSCRIPT)

    @property
    def supports_attachment(self) -> bool:
        """Whether sub/superscripts may be attached to this node."""
        return self.node_type == NodeType.PLAIN or self.is_group

    def add_child(self, node: 'Node') -> 'Node':
        self.children.append(node)
        return node

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {'type': self.node_type.value}
        if self.lexeme:
            data['lexeme'] = self.lexeme.to_dict()
        if self.name is not None:
            data['name'] = self.name
        data['children'] = [child.to_dict() for child in self.children]
        if self.subscript:
            data['subscript'] = self.subscript.to_dict()
        if self.superscript:
            data['superscript'] = self.superscript.to_dict()
        return data


def create_node(lexeme: Optional[Lexeme], node_type: NodeType = NodeType.PLAIN,
                children: Optional[List[Node]] = None) -> Node:
    """Create a node owning the given children."""
    return Node(node_type=node_type, lexeme=lexeme, children=children or [])


def create_line() -> Node:
    return Node(NodeType.LINE)


def create_paragraph() -> Node:
    """Create a paragraph holding one empty line."""
    return Node(NodeType.PARAGRAPH, children=[create_line()])


def create_environment(name: str, lexeme: Optional[Lexeme] = None) -> Node:
    """Create an environment holding one paragraph with one line."""
    return Node(NodeType.ENVIRONMENT, lexeme=lexeme, name=name,
                children=[create_paragraph()])


def create_document() -> Node:
    """Create a document with its implicit ``document`` environment."""
    return Node(NodeType.DOCUMENT, children=[create_environment("document")])


@dataclass
class ProcessingResult:
    """Result of converting one LaTeX source."""
    latex: str
    document: Optional[Node] = None
    render_result: Optional[Any] = None
    mathml: Optional[str] = None
    source_file: Optional[str] = None
    processing_time: Optional[float] = None
    errors: List[Dict[str, Any]] = field(default_factory=list)
    warnings: List[Dict[str, Any]] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'latex': self.latex,
            'tree': self.document.to_dict() if self.document else None,
            'mathml': self.mathml,
            'image_size': self.render_result.size if self.render_result else None,
            'source_file': self.source_file,
            'processing_time': self.processing_time,
            'errors': self.errors,
            'warnings': self.warnings,
            'timestamp': self.timestamp.isoformat(),
            'success': len(self.errors) == 0
        }

    @property
    def is_successful(self) -> bool:
        """Check if processing was successful."""
        return len(self.errors) == 0
