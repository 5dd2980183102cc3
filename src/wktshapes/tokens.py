"""
Token and source position types shared by the lexer, parser and diagnostics.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional


class TokenType(Enum):
    """All token types recognized by the WKT lexer."""

    IDENTIFIER = auto()     # POINT, LineString, Z, ZM, POINTZ ...
    NUMBER = auto()         # 19, -3.5, 1e-9, 2.5E+10
    EMPTY = auto()          # EMPTY (any case)

    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()

    EOF = auto()


@dataclass(frozen=True)
class SourceLocation:
    """A point in the input: 1-indexed line and column, 0-indexed offset."""
    line: int
    column: int
    offset: int
    filename: Optional[str] = None

    def __str__(self) -> str:
        where = f"{self.line}:{self.column}"
        return f"{self.filename}:{where}" if self.filename else where


@dataclass(frozen=True)
class SourceSpan:
    """Half-open range ``[start, end)`` of the input."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        return f"{self.start}-{self.end.line}:{self.end.column}"


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str             # case preserved
    span: SourceSpan

    @property
    def offset(self) -> int:
        return self.span.start.offset

    def describe(self) -> str:
        """Short human-readable description used in diagnostics."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type in (TokenType.IDENTIFIER, TokenType.NUMBER):
            return f"{self.type.name.lower()} '{self.lexeme}'"
        return f"'{self.lexeme}'"

    def __str__(self) -> str:
        if self.type in (TokenType.IDENTIFIER, TokenType.NUMBER):
            return f"{self.type.name}({self.lexeme!r})"
        return self.type.name


PUNCTUATION: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
}

# Words the lexer classifies itself (compared upper-cased)
RESERVED_WORDS: dict[str, TokenType] = {
    "EMPTY": TokenType.EMPTY,
}
