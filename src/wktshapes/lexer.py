"""
Lexer for Well-Known-Text geometry.

Converts source text into a flat list of tokens for the parser.
Supports:
- Identifiers (maximal runs of letters, case preserved)
- The EMPTY keyword (any case)
- Number literals: optional sign, digits, decimal point, exponent
- Parentheses and commas

The lexer knows nothing about the grammar: geometry keywords and the
Z/M/ZM suffixes are plain identifiers, including glued forms such as
``POINTZ``, which the parser splits.
"""

import re
from typing import Iterator, List, Optional

from .tokens import (
    Token, TokenType, SourceLocation, SourceSpan,
    PUNCTUATION, RESERVED_WORDS,
)
from .errors import error_unexpected_character

# One alternative per token class, tried in order.  A number run is taken
# as-is (``1.2.3`` included) and converted by the parser; an exponent is
# only part of the number when digits follow it, so ``1e`` is ``1`` + ``e``.
# Matching is ASCII only: other Unicode digits and letters are lex errors.
_RULES = (
    ("ws", r"[ \t\r\n]+"),
    ("number", r"[+-][0-9.]*(?:[eE][+-]?[0-9]+)?|[0-9.]+(?:[eE][+-]?[0-9]+)?"),
    ("word", r"[A-Za-z]+"),
    ("punct", r"[(),]"),
    ("err", r"."),
)

_TOKEN_RE = re.compile(
    "|".join(f"(?P<{name}>{pattern})" for name, pattern in _RULES),
    re.DOTALL | re.ASCII,
)


class Lexer:
    """
    Tokenizer for WKT text.

    Usage:
        tokens = Lexer(text).tokenize()

    Tokens are produced lazily, so a lexer can also be iterated; an
    unexpected character raises when the scan reaches it.
    """

    def __init__(self, source: str, filename: Optional[str] = None):
        self.source = source
        self.filename = filename

    def get_source_line(self, line_num: int) -> Optional[str]:
        """Get a specific line of source (1-indexed)."""
        lines = self.source.splitlines()
        if 1 <= line_num <= len(lines):
            return lines[line_num - 1]
        return None

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens, ending with EOF.

        Each iteration scans from the start of the source, so a lexer can be
        iterated more than once.
        """
        line, column = 1, 1
        for match in _TOKEN_RE.finditer(self.source):
            rule, text = match.lastgroup, match.group()
            start = SourceLocation(line, column, match.start(), self.filename)
            newlines = text.count("\n")
            if newlines:
                line += newlines
                column = len(text) - text.rfind("\n")
            else:
                column += len(text)
            end = SourceLocation(line, column, match.end(), self.filename)

            if rule == "ws":
                continue
            if rule == "err":
                raise error_unexpected_character(
                    text, SourceSpan(start, end), self.get_source_line(start.line))

            if rule == "number":
                token_type = TokenType.NUMBER
            elif rule == "word":
                token_type = RESERVED_WORDS.get(text.upper(), TokenType.IDENTIFIER)
            else:
                token_type = PUNCTUATION[text]
            yield Token(token_type, text, SourceSpan(start, end))

        here = SourceLocation(line, column, len(self.source), self.filename)
        yield Token(TokenType.EOF, "", SourceSpan(here, here))

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens."""
        return list(self)


def tokenize(source: str, filename: Optional[str] = None) -> List[Token]:
    """
    Convenience function to tokenize WKT text.

    Args:
        source: The WKT text to tokenize
        filename: Optional filename for error messages

    Returns:
        List of tokens, always terminated by an EOF token

    Raises:
        LexerError: If the text contains a character outside the WKT alphabet
    """
    return Lexer(source, filename).tokenize()
