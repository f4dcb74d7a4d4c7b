"""
Symbol table mapping characters and commands to lexeme kinds
"""

from typing import Dict, Optional

from .models import LexemeKind


SIMPLE_CHARS: Dict[str, LexemeKind] = {
    '(': LexemeKind.LPAREN,
    ')': LexemeKind.RPAREN,
    '[': LexemeKind.LBRACKET,
    ']': LexemeKind.RBRACKET,
    '{': LexemeKind.LBRACE,
    '}': LexemeKind.RBRACE,
    '_': LexemeKind.SUBSCRIPT,
    '^': LexemeKind.SUPERSCRIPT,
    ',': LexemeKind.COMMA,
    '.': LexemeKind.PERIOD,
    ':': LexemeKind.COLON,
    ';': LexemeKind.SEMICOLON,
    '+': LexemeKind.OPERATOR,
    '-': LexemeKind.OPERATOR,
    '*': LexemeKind.OPERATOR,
    '/': LexemeKind.OPERATOR,
    '=': LexemeKind.RELATION,
    '<': LexemeKind.RELATION,
    '>': LexemeKind.RELATION,
    '%': LexemeKind.SYMBOL,
}

GREEK_LETTERS = {
    'alpha', 'beta', 'gamma', 'delta', 'epsilon', 'varepsilon', 'zeta',
    'eta', 'theta', 'vartheta', 'iota', 'kappa', 'lambda', 'mu',
    'nu', 'xi', 'omicron', 'pi', 'varpi', 'rho', 'varrho', 'sigma',
    'varsigma', 'tau', 'upsilon', 'phi', 'varphi', 'chi', 'psi', 'omega',
    'Gamma', 'Delta', 'Theta', 'Lambda', 'Xi', 'Pi', 'Sigma',
    'Upsilon', 'Phi', 'Psi', 'Omega'
}

BINARY_OPERATORS = {
    'times', 'div', 'pm', 'mp', 'cdot', 'ast', 'circ', 'bullet', 'mod',
    'cap', 'cup', 'wedge', 'vee', 'oplus', 'otimes'
}

RELATIONS = {
    'leq', 'le', 'geq', 'ge', 'neq', 'ne', 'approx', 'equiv', 'sim',
    'simeq', 'cong', 'propto', 'in', 'notin', 'ni', 'subset', 'supset',
    'subseteq', 'supseteq', 'to', 'rightarrow', 'leftarrow',
    'Rightarrow', 'Leftarrow', 'leftrightarrow', 'Leftrightarrow', 'mapsto'
}

GEOMETRY_SYMBOLS = {
    'triangle', 'circle', 'square', 'bot', 'angle', 'parallel', 'perp',
    'degree'
}

MISC_SYMBOLS = {
    'infty', 'partial', 'nabla', 'emptyset', 'therefore', 'because',
    'cdots', 'ldots', 'dots', 'prime', 'forall', 'exists'
}

UNITS = {'ell', 'mL', 'dL', 'kL'}

BIG_OPERATORS = {'sum', 'prod', 'int', 'iint', 'iiint', 'oint', 'coprod'}

# Unary functions that take their argument as a fixed-arity parameter.
FUNCTIONS = {'sin', 'cos', 'tan', 'log'}

OPERATOR_NAMES = {
    'lim', 'ln', 'exp', 'max', 'min', 'sup', 'inf', 'det', 'gcd',
    'cot', 'sec', 'csc', 'arcsin', 'arccos', 'arctan', 'sinh', 'cosh', 'tanh'
}

FRACTIONS = {'frac', 'dfrac', 'tfrac'}


def _build_command_table() -> Dict[str, LexemeKind]:
    table: Dict[str, LexemeKind] = {}
    groups = [
        (GREEK_LETTERS, LexemeKind.GREEK),
        (BINARY_OPERATORS, LexemeKind.OPERATOR),
        (RELATIONS, LexemeKind.RELATION),
        (GEOMETRY_SYMBOLS, LexemeKind.GEOMETRY),
        (MISC_SYMBOLS, LexemeKind.SYMBOL),
        (UNITS, LexemeKind.UNIT),
        (BIG_OPERATORS, LexemeKind.BIG_OPERATOR),
        (FUNCTIONS, LexemeKind.FUNCTION),
        (OPERATOR_NAMES, LexemeKind.OPERATOR_NAME),
        (FRACTIONS, LexemeKind.FRACTION),
    ]
    for names, kind in groups:
        for name in names:
            table['\\' + name] = kind
    table['\\sqrt'] = LexemeKind.SQUARE_ROOT
    table['\\binom'] = LexemeKind.BINOMIAL
    table['\\begin'] = LexemeKind.BEGIN
    table['\\end'] = LexemeKind.END
    return table


COMMANDS: Dict[str, LexemeKind] = _build_command_table()

COMMAND_ARITY: Dict[LexemeKind, int] = {
    LexemeKind.SQUARE_ROOT: 1,
    LexemeKind.FUNCTION: 1,
    LexemeKind.FRACTION: 2,
    LexemeKind.BINOMIAL: 2,
}


def lookup_char(char: str) -> LexemeKind:
    """Classify a single non-alphanumeric character."""
    return SIMPLE_CHARS.get(char, LexemeKind.CHARACTER)


def lookup_command(command: str) -> LexemeKind:
    """Classify a backslash command such as ``\\alpha``.

    Commands missing from the table resolve to ``LexemeKind.UNKNOWN``.
    """
    return COMMANDS.get(command, LexemeKind.UNKNOWN)


def command_arity(kind: LexemeKind) -> Optional[int]:
    """Number of arguments a command of this kind consumes, if fixed."""
    return COMMAND_ARITY.get(kind)


def is_known_command(command: str) -> bool:
    return command in COMMANDS


__all__ = [
    'SIMPLE_CHARS',
    'COMMANDS',
    'COMMAND_ARITY',
    'lookup_char',
    'lookup_command',
    'command_arity',
    'is_known_command'
]
