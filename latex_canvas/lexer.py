import regex
import logging
from typing import Iterator, List

from .models import Lexeme, LexemeKind
from .symbols import lookup_char, lookup_command


logger = logging.getLogger(__name__)


class Lexer:
    """Pull-based tokenizer producing one lexeme per call.

    Spaces and single newlines are skipped. A blank line yields a
    ``PARAGRAPH_BREAK`` and ``\\\\`` yields a ``LINE_BREAK``. Digit and
    letter runs are munched maximally.
    """

    BLANK_CHARS = ' \t\r'

    command_pattern = regex.compile(r'\\([a-zA-Z]*)')
    number_pattern = regex.compile(r'[0-9]+')
    alphabet_pattern = regex.compile(r'[a-zA-Z]+')
    # Consecutive blank lines collapse into one paragraph break.
    paragraph_pattern = regex.compile(r'\n(?:[ \t\r]*\n)+')

    def __init__(self, latex: str):
        self.input = latex
        self.index = 0

    def has_next(self) -> bool:
        """Check whether another lexeme is available."""
        self._skip_blanks()
        return self.index < len(self.input)

    def next_lexeme(self) -> Lexeme:
        """Consume and return the next lexeme."""
        if not self.has_next():
            raise IndexError("No more lexemes in input")

        text = self.input
        start = self.index
        char = text[start]

        if char == '\n':
            match = self.paragraph_pattern.match(text, start)
            self.index = match.end()
            return Lexeme(match.group(), LexemeKind.PARAGRAPH_BREAK, start)

        if char == '\\':
            if text.startswith('\\\\', start):
                self.index = start + 2
                return Lexeme('\\\\', LexemeKind.LINE_BREAK, start)
            match = self.command_pattern.match(text, start)
            self.index = match.end()
            command = match.group()
            kind = lookup_command(command)
            if kind == LexemeKind.UNKNOWN:
                logger.debug(f"Unrecognized command {command!r} at {start}")
            return Lexeme(command, kind, start)

        match = self.number_pattern.match(text, start)
        if match:
            self.index = match.end()
            return Lexeme(match.group(), LexemeKind.NUMBER, start)

        match = self.alphabet_pattern.match(text, start)
        if match:
            self.index = match.end()
            return Lexeme(match.group(), LexemeKind.ALPHABET, start)

        self.index = start + 1
        return Lexeme(char, lookup_char(char), start)

    def _skip_blanks(self):
        text = self.input
        while self.index < len(text):
            char = text[self.index]
            if char in self.BLANK_CHARS:
                self.index += 1
            elif char == '\n' and not self.paragraph_pattern.match(text, self.index):
                self.index += 1
            else:
                break

    def __iter__(self) -> Iterator[Lexeme]:
        return self

    def __next__(self) -> Lexeme:
        if not self.has_next():
            raise StopIteration
        return self.next_lexeme()


def tokenize(latex: str) -> List[Lexeme]:
    """Tokenize a whole string into a list of lexemes."""
    return list(Lexer(latex))


__all__ = [
    'Lexer',
    'tokenize'
]
