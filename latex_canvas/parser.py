import logging
from dataclasses import dataclass
from typing import List, Optional

from .config import ParseConfig
from .errors import (
    DanglingAttachmentError,
    DuplicateAttachmentError,
    DelimiterMismatchError,
    MalformedEnvironmentError,
    EnvironmentMismatchError,
    UnknownCommandError,
    UnclosedScopeError
)
from .lexer import Lexer
from .models import (
    Lexeme,
    LexemeKind,
    Node,
    NodeType,
    GROUP_FOR_OPENER,
    GROUP_FOR_CLOSER,
    GROUP_DELIMITERS,
    create_node,
    create_line,
    create_paragraph,
    create_environment,
    create_document
)
from .symbols import command_arity


logger = logging.getLogger(__name__)


@dataclass
class ScopeFrame:
    """Where new children attach, and how many the node still accepts."""
    node: Node
    expected_arity: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return (self.expected_arity is not None
                and len(self.node.children) == self.expected_arity)


@dataclass
class EnvironmentFrame:
    environment: Node
    # Scope stack depth below the environment's line frame
    base_depth: int


class ParseContext:
    """Scope and environment stacks of a single parse.

    The bottom scope frame always points at the current line of the
    document environment. Opening an environment records the scope depth
    so that breaks and ``\\end`` can unwind to it.
    """

    def __init__(self, document: Node):
        self.document = document
        root = document.children[0]
        self.environments: List[EnvironmentFrame] = [EnvironmentFrame(root, 0)]
        self.scopes: List[ScopeFrame] = [ScopeFrame(self.current_line)]

    @property
    def top(self) -> ScopeFrame:
        return self.scopes[-1]

    @property
    def environment(self) -> EnvironmentFrame:
        return self.environments[-1]

    @property
    def current_paragraph(self) -> Node:
        """Last paragraph of the innermost environment."""
        return self.environment.environment.children[-1]

    @property
    def current_line(self) -> Node:
        """Last line of the innermost environment."""
        return self.current_paragraph.children[-1]

    @property
    def depth(self) -> int:
        return len(self.scopes)

    @property
    def last_child(self) -> Optional[Node]:
        children = self.top.node.children
        return children[-1] if children else None

    @property
    def open_frames(self) -> List[ScopeFrame]:
        """Group and argument frames opened inside the innermost environment."""
        return self.scopes[self.environment.base_depth + 1:]

    @property
    def is_balanced(self) -> bool:
        return len(self.scopes) == 1 and len(self.environments) == 1

    def push_state(self, node: Node, expected_arity: Optional[int] = None):
        self.scopes.append(ScopeFrame(node, expected_arity))
        logger.debug(f"Push {node.node_type.value} {node.text!r} "
                     f"(arity={expected_arity}, depth={len(self.scopes)})")

    def pop_state(self) -> ScopeFrame:
        frame = self.scopes.pop()
        logger.debug(f"Pop {frame.node.node_type.value} {frame.node.text!r} "
                     f"(depth={len(self.scopes)})")
        return frame

    def add_child(self, node: Node) -> Node:
        return self.top.node.add_child(node)

    def pop_completed(self):
        """Pop every frame whose node has received all its arguments."""
        while len(self.scopes) > 1 and self.top.is_complete:
            self.pop_state()

    def open_environment(self, environment: Node):
        self.environments.append(EnvironmentFrame(environment, len(self.scopes)))
        self.push_state(self.current_line)

    def close_environment(self) -> Node:
        frame = self.environments.pop()
        del self.scopes[frame.base_depth:]
        return frame.environment

    def start_line(self):
        self.current_paragraph.add_child(create_line())
        self._reset_scopes(self.current_line)

    def start_paragraph(self):
        self.environment.environment.add_child(create_paragraph())
        self._reset_scopes(self.current_line)

    def _reset_scopes(self, line: Node):
        del self.scopes[self.environment.base_depth:]
        self.push_state(line)


class LaTeXParser:
    """Assemble the lexeme stream of a LaTeX math string into a document tree."""

    def __init__(self, config: Optional[ParseConfig] = None):
        self.config = config or ParseConfig()

    def parse(self, latex: str) -> Node:
        """Parse LaTeX string into a document tree.

        Args:
            latex: LaTeX string to parse

        Returns:
            The root ``DOCUMENT`` node

        Raises:
            StructureError: on the first malformed construct
            ValueError: if the input exceeds ``max_input_length``
        """
        if len(latex) > self.config.max_input_length:
            raise ValueError(f"Input LaTeX too long: {len(latex)} > {self.config.max_input_length}")

        lexer = Lexer(latex)
        document = create_document()
        context = ParseContext(document)

        while lexer.has_next():
            lexeme = lexer.next_lexeme()
            self._dispatch(lexeme, lexer, context)
            context.pop_completed()

        self._finish(context)
        return document

    def _dispatch(self, lexeme: Lexeme, lexer: Lexer, context: ParseContext):
        kind = lexeme.kind

        if kind in (LexemeKind.SUBSCRIPT, LexemeKind.SUPERSCRIPT):
            self._attach_script(lexeme, context)

        elif kind == LexemeKind.BEGIN:
            name = self._read_environment_name(lexeme, lexer)
            environment = context.add_child(create_environment(name, lexeme))
            context.open_environment(environment)

        elif kind == LexemeKind.END:
            self._end_environment(lexeme, lexer, context)

        elif kind in GROUP_FOR_OPENER:
            group = context.add_child(create_node(lexeme, GROUP_FOR_OPENER[kind]))
            context.push_state(group)

        elif kind in GROUP_FOR_CLOSER:
            self._close_group(lexeme, context)

        elif kind == LexemeKind.LINE_BREAK:
            self._check_open_frames(lexeme, context)
            context.start_line()

        elif kind == LexemeKind.PARAGRAPH_BREAK:
            self._check_open_frames(lexeme, context)
            context.start_paragraph()

        else:
            if kind == LexemeKind.UNKNOWN:
                self._unknown_command(lexeme)
            node = context.add_child(create_node(lexeme))
            arity = command_arity(kind)
            if arity is not None:
                context.push_state(node, arity)

    def _attach_script(self, lexeme: Lexeme, context: ParseContext):
        slot = 'subscript' if lexeme.kind == LexemeKind.SUBSCRIPT else 'superscript'
        base = context.last_child

        if base is None or not base.supports_attachment:
            raise DanglingAttachmentError(
                f"{slot.capitalize()} '{lexeme.text}' without a preceding node", lexeme
            )
        if getattr(base, slot) is not None:
            raise DuplicateAttachmentError(
                f"{_describe(base)} already has a {slot}", lexeme
            )

        marker = create_node(lexeme)
        setattr(base, slot, marker)
        context.push_state(marker, 1)

    def _read_environment_name(self, command: Lexeme, lexer: Lexer) -> str:
        """Consume the ``{name}`` following ``\\begin`` or ``\\end``."""
        expected = (LexemeKind.LBRACE, LexemeKind.ALPHABET, LexemeKind.RBRACE)
        parts = []

        for kind in expected:
            if not lexer.has_next():
                raise MalformedEnvironmentError(
                    f"Expected {{name}} after '{command.text}', got end of input", command
                )
            lexeme = lexer.next_lexeme()
            if lexeme.kind != kind:
                raise MalformedEnvironmentError(
                    f"Expected {{name}} after '{command.text}', got '{lexeme.text}'", lexeme
                )
            parts.append(lexeme)

        return parts[1].text

    def _end_environment(self, lexeme: Lexeme, lexer: Lexer, context: ParseContext):
        name = self._read_environment_name(lexeme, lexer)

        if len(context.environments) == 1:
            raise EnvironmentMismatchError(
                f"\\end{{{name}}} without matching \\begin{{{name}}}", lexeme
            )

        current = context.environment.environment
        if current.name != name:
            raise EnvironmentMismatchError(
                f"\\end{{{name}}} does not match \\begin{{{current.name}}}", lexeme
            )

        self._check_open_frames(lexeme, context)
        context.close_environment()

    def _close_group(self, lexeme: Lexeme, context: ParseContext):
        expected = GROUP_FOR_CLOSER[lexeme.kind]
        frame = context.top

        if frame.node.node_type != expected:
            if frame.node.is_group:
                message = f"Mismatched '{lexeme.text}': innermost open group is '{frame.node.text}'"
            elif frame.expected_arity is not None:
                message = f"Unexpected '{lexeme.text}': {_describe(frame.node)} is missing an argument"
            else:
                message = f"Unexpected '{lexeme.text}' without matching '{GROUP_DELIMITERS[expected][0]}'"
            raise DelimiterMismatchError(message, lexeme)

        group = context.pop_state().node

        # x^{2} yields the same tree as x^2
        owner = context.top.node
        if (group.node_type == NodeType.BRACE_GROUP and len(group.children) == 1
                and owner.is_script_marker and owner.children and owner.children[-1] is group):
            owner.children[-1] = group.children[0]
            owner.children[-1].braced = True

    def _check_open_frames(self, lexeme: Lexeme, context: ParseContext):
        open_frames = context.open_frames
        if open_frames and not self.config.allow_unclosed:
            frame = open_frames[-1]
            raise UnclosedScopeError(
                f"{_describe_frame(frame)} before '{lexeme.text.strip() or 'blank line'}'",
                frame.node.lexeme
            )

    def _unknown_command(self, lexeme: Lexeme):
        if self.config.strict_commands:
            raise UnknownCommandError(f"Unknown command '{lexeme.text}'", lexeme)
        logger.warning(f"Unknown command {lexeme.text!r} at position {lexeme.position}, "
                       f"passing through as literal")

    def _finish(self, context: ParseContext):
        if context.is_balanced:
            return

        if self.config.allow_unclosed:
            logger.warning(f"Input ended with {len(context.scopes) - 1} open scope(s)")
            return

        open_frames = context.open_frames
        if open_frames:
            frame = open_frames[-1]
            raise UnclosedScopeError(
                f"{_describe_frame(frame)} at end of input", frame.node.lexeme
            )

        environment = context.environment.environment
        raise UnclosedScopeError(
            f"Unclosed environment '{environment.name}' at end of input", environment.lexeme
        )


def _describe(node: Node) -> str:
    if node.lexeme:
        return f"'{node.text}'"
    return node.node_type.value


def _describe_frame(frame: ScopeFrame) -> str:
    node = frame.node
    if frame.expected_arity is not None:
        return (f"{_describe(node)} expects {frame.expected_arity} argument(s), "
                f"got {len(node.children)}")
    return f"Unclosed {_describe(node)}"


def parse_latex(latex: str, config: Optional[ParseConfig] = None) -> Node:
    """Parse LaTeX string into a document tree."""
    return LaTeXParser(config).parse(latex)


__all__ = [
    'LaTeXParser',
    'ParseContext',
    'ScopeFrame',
    'EnvironmentFrame',
    'parse_latex'
]
