"""Tokenizer for single BASIC program lines.

Each program line holds exactly one statement, so `tokenize` works on one
line of text at a time and always terminates the token list with an `EOL`
token. Keywords are matched case-insensitively while identifiers keep their
case, since variable names are case-sensitive.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from .errors import LexError


class TokenType(Enum):
    LEFT_PAREN = 'LEFT_PAREN'
    RIGHT_PAREN = 'RIGHT_PAREN'
    PLUS = 'PLUS'
    MINUS = 'MINUS'
    MULTIPLY = 'MULTIPLY'
    DIVIDE = 'DIVIDE'
    MODULO = 'MODULO'
    EQUALS = 'EQUALS'
    LESS = 'LESS'
    LESS_EQUAL = 'LESS_EQUAL'
    GREATER = 'GREATER'
    GREATER_EQUAL = 'GREATER_EQUAL'
    NOT_EQUAL = 'NOT_EQUAL'
    IDENTIFIER = 'IDENTIFIER'
    STRING = 'STRING'
    NUMBER = 'NUMBER'
    # Keywords
    LET = 'LET'
    PRINT = 'PRINT'
    INPUT = 'INPUT'
    IF = 'IF'
    THEN = 'THEN'
    ELSE = 'ELSE'
    ENDIF = 'ENDIF'
    WHILE = 'WHILE'
    WEND = 'WEND'
    END = 'END'
    REM = 'REM'
    GOTO = 'GOTO'
    EOL = 'EOL'


KEYWORDS = {
    'LET': TokenType.LET,
    'PRINT': TokenType.PRINT,
    'INPUT': TokenType.INPUT,
    'IF': TokenType.IF,
    'THEN': TokenType.THEN,
    'ELSE': TokenType.ELSE,
    'ENDIF': TokenType.ENDIF,
    'WHILE': TokenType.WHILE,
    'WEND': TokenType.WEND,
    'END': TokenType.END,
    'REM': TokenType.REM,
    'GOTO': TokenType.GOTO,
}

SINGLE_CHAR_TOKENS = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.MULTIPLY,
    '/': TokenType.DIVIDE,
    '%': TokenType.MODULO,
    '=': TokenType.EQUALS,
    '<': TokenType.LESS,
    '>': TokenType.GREATER,
}

TWO_CHAR_TOKENS = {
    '<=': TokenType.LESS_EQUAL,
    '<>': TokenType.NOT_EQUAL,
    '>=': TokenType.GREATER_EQUAL,
}

_LEADING_WORD = re.compile(r'\s*([A-Za-z_][A-Za-z0-9_]*)')


@dataclass
class Token:
    type: TokenType
    lexeme: str
    value: Any = None
    line: int = 1
    column: int = 1


def _is_alpha(c: str) -> bool:
    return ('a' <= c <= 'z') or ('A' <= c <= 'Z') or c == '_'


def _is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def tokenize(source: str) -> List[Token]:
    """Convert one program line into a list of tokens ending with EOL.

    Raises LexError for an unterminated string or a character that
    cannot start any token. The text following a REM keyword is kept
    whole as the value of the REM token.
    """
    tokens: List[Token] = []
    i = 0
    line = 1
    col = 1
    length = len(source)

    def advance(n: int = 1):
        nonlocal i, col, line
        for _ in range(n):
            if i < length and source[i] == '\n':
                line += 1
                col = 1
            else:
                col += 1
            i += 1

    while i < length:
        c = source[i]
        if c in ' \t\r\n':
            advance()
            continue
        # Identifiers or keywords
        if _is_alpha(c):
            start_col = col
            start_i = i
            while i < length and (_is_alpha(source[i]) or _is_digit(source[i])):
                advance()
            text = source[start_i:i]
            kind = KEYWORDS.get(text.upper())
            if kind is None:
                tokens.append(Token(TokenType.IDENTIFIER, text, text, line, start_col))
                continue
            if kind is TokenType.REM:
                remark = source[i:].strip()
                tokens.append(Token(kind, text, remark, line, start_col))
                i = length
                break
            tokens.append(Token(kind, text, None, line, start_col))
            continue
        # Numbers: digits with an optional fraction, never an exponent or sign
        if _is_digit(c):
            start_col = col
            start_i = i
            while i < length and _is_digit(source[i]):
                advance()
            if i + 1 < length and source[i] == '.' and _is_digit(source[i + 1]):
                advance()
                while i < length and _is_digit(source[i]):
                    advance()
            text = source[start_i:i]
            tokens.append(Token(TokenType.NUMBER, text, float(text), line, start_col))
            continue
        # String literal, no escapes
        if c == '"':
            start_col = col
            start_line = line
            start_i = i
            advance()
            while i < length and source[i] != '"':
                advance()
            if i >= length:
                raise LexError(f"unterminated string literal at {start_line}:{start_col}")
            advance()
            text = source[start_i:i]
            tokens.append(Token(TokenType.STRING, text, text[1:-1], start_line, start_col))
            continue
        pair = source[i:i + 2]
        if pair in TWO_CHAR_TOKENS:
            tokens.append(Token(TWO_CHAR_TOKENS[pair], pair, None, line, col))
            advance(2)
            continue
        if c in SINGLE_CHAR_TOKENS:
            tokens.append(Token(SINGLE_CHAR_TOKENS[c], c, None, line, col))
            advance()
            continue
        raise LexError(f"unexpected character {c!r} at {line}:{col}")
    tokens.append(Token(TokenType.EOL, '', None, line, col))
    return tokens


def detokenize(tokens: List[Token]) -> str:
    """Render tokens back to source text with normalized spacing."""
    parts: List[str] = []
    for token in tokens:
        if token.type is TokenType.EOL:
            continue
        parts.append(token.lexeme)
        if token.type is TokenType.REM and token.value:
            parts.append(token.value)
    return ' '.join(parts)


def leading_keyword(source: str) -> Optional[TokenType]:
    """Return the keyword a line starts with, or None.

    Only the first word is examined, so lines that would fail to
    tokenize further on can still be classified.
    """
    match = _LEADING_WORD.match(source)
    if match is None:
        return None
    return KEYWORDS.get(match.group(1).upper())
