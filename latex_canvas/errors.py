"""
Structural parse errors
"""

from typing import Optional, Dict, Any

from .models import Lexeme


class StructureError(ValueError):
    """Base class for errors that abort a parse."""

    error_type = "structure_error"

    def __init__(self, message: str, lexeme: Optional[Lexeme] = None,
                 position: Optional[int] = None):
        self.message = message
        self.lexeme = lexeme
        if position is None and lexeme is not None:
            position = lexeme.position
        self.position = position
        super().__init__(self._format())

    def _format(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} (at position {self.position})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to an error entry."""
        return {
            'type': self.error_type,
            'message': self.message,
            'position': self.position,
            'token': self.lexeme.text if self.lexeme else None
        }


class DanglingAttachmentError(StructureError):
    """Subscript or superscript with nothing to attach to."""
    error_type = "dangling_attachment"


class DuplicateAttachmentError(StructureError):
    """Second subscript or superscript on the same node."""
    error_type = "duplicate_attachment"


class DelimiterMismatchError(StructureError):
    """Closing delimiter without a matching opener."""
    error_type = "mismatched_delimiter"


class MalformedEnvironmentError(StructureError):
    r"""``\begin`` or ``\end`` not followed by ``{name}``."""
    error_type = "malformed_environment"


class EnvironmentMismatchError(StructureError):
    r"""``\end{name}`` not matching the innermost open environment."""
    error_type = "mismatched_environment"


class UnknownCommandError(StructureError):
    """Backslash command missing from the symbol table."""
    error_type = "unknown_command"


class UnclosedScopeError(StructureError):
    """Group, command argument or environment left open."""
    error_type = "unclosed_scope"


__all__ = [
    'StructureError',
    'DanglingAttachmentError',
    'DuplicateAttachmentError',
    'DelimiterMismatchError',
    'MalformedEnvironmentError',
    'EnvironmentMismatchError',
    'UnknownCommandError',
    'UnclosedScopeError'
]
