"""
WKT exceptions and their diagnostics.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E3xx: Materialization errors (invariant violations, not user input)
"""

from dataclasses import dataclass, field
from typing import Optional, List
from .tokens import SourceLocation, SourceSpan

SUPPORTED_TYPES = ("POINT, LINESTRING, POLYGON, MULTIPOINT, "
                   "MULTILINESTRING, MULTIPOLYGON, GEOMETRYCOLLECTION")


@dataclass
class Diagnostic:
    """One error, with enough context to point at the offending text."""
    code: str
    message: str
    span: Optional[SourceSpan] = None
    source_line: Optional[str] = None
    hints: List[str] = field(default_factory=list)

    def _caret_lines(self) -> List[str]:
        start, end = self.span.start, self.span.end
        if end.line == start.line:
            width = end.column - start.column
        else:
            width = len(self.source_line) + 1 - start.column
        gutter = f"{start.line:>3} | "
        return [
            "    |",
            gutter + self.source_line,
            "    | " + " " * (start.column - 1) + "^" * max(1, width),
        ]

    def format(self, show_source: bool = True) -> str:
        """Render as ``file:line:col: error[CODE]: message`` plus a caret line."""
        header = f"error[{self.code}]: {self.message}"
        if self.span is not None:
            header = f"{self.span.start}: {header}"
        lines = [header]
        if show_source and self.span is not None and self.source_line is not None:
            lines.extend(self._caret_lines())
        lines.extend(f"    = hint: {hint}" for hint in self.hints)
        return "\n".join(lines)

    def to_json(self) -> dict:
        doc = {"code": self.code, "message": self.message, "hints": list(self.hints)}
        if self.span is not None:
            doc["range"] = {
                "start": _location_json(self.span.start),
                "end": _location_json(self.span.end),
            }
        return doc


def _location_json(loc: SourceLocation) -> dict:
    return {"line": loc.line, "column": loc.column, "offset": loc.offset}


class WktError(Exception):
    """Base exception for WKT errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def offset(self) -> Optional[int]:
        """Character offset of the error, or None when it has no location."""
        if self.diagnostic.span is None:
            return None
        return self.diagnostic.span.start.offset

    def __str__(self) -> str:
        return self.diagnostic.format()


class LexerError(WktError):
    """Unrecognized character in the input (E0xx)."""

    def __init__(self, diagnostic: Diagnostic, char: str):
        super().__init__(diagnostic)
        self.char = char


class ParserError(WktError):
    """Token sequence that does not match the grammar (E1xx)."""

    def __init__(self, diagnostic: Diagnostic, expected: str, found: str):
        super().__init__(diagnostic)
        self.expected = expected
        self.found = found


class MaterializationError(WktError):
    """Invalid geometry reached the shape materializer (E3xx).

    Parsed input never produces one of these; seeing it means a geometry
    was built by hand without honoring the model's invariants.
    """
    pass


def error_unexpected_character(char: str, span: SourceSpan,
                               source_line: str = None) -> LexerError:
    """E001"""
    diag = Diagnostic("E001", f"unexpected character '{char}'", span, source_line)
    return LexerError(diag, char)


def _parser_error(code: str, message: str, expected: str, found: str,
                  span: SourceSpan, source_line: Optional[str],
                  *hints: str) -> ParserError:
    return ParserError(Diagnostic(code, message, span, source_line, list(hints)),
                       expected, found)


def error_unexpected_token(expected: str, found: str, span: SourceSpan,
                           source_line: str = None) -> ParserError:
    """E101"""
    return _parser_error("E101", f"expected {expected}, found {found}",
                         expected, found, span, source_line)


def error_unexpected_eof(expected: str, span: SourceSpan,
                         source_line: str = None) -> ParserError:
    """E102"""
    return _parser_error("E102", f"unexpected end of input, expected {expected}",
                         expected, "end of input", span, source_line)


def error_unknown_geometry(word: str, span: SourceSpan,
                           source_line: str = None) -> ParserError:
    """E103"""
    return _parser_error("E103", f"unknown geometry type '{word}'",
                         "geometry type", f"identifier '{word}'", span, source_line,
                         f"supported types: {SUPPORTED_TYPES}")


def error_invalid_number(text: str, span: SourceSpan,
                         source_line: str = None) -> ParserError:
    """E104: a NUMBER token that float() rejects."""
    return _parser_error("E104", f"invalid number '{text}'",
                         "number", f"number '{text}'", span, source_line)


def error_too_few_points(count: int, span: SourceSpan,
                         source_line: str = None) -> ParserError:
    """E105"""
    return _parser_error("E105", f"line string needs at least 2 points, found {count}",
                         "at least 2 points", f"{count} point", span, source_line,
                         "use 'LINESTRING EMPTY' for a line without points")


def error_invalid_ring(reason: str, span: SourceSpan,
                       source_line: str = None) -> ParserError:
    """E106: polygon ring too short or not closed."""
    return _parser_error("E106", f"invalid polygon ring: {reason}",
                         "closed ring of at least 4 points", reason, span, source_line,
                         "a ring needs at least 4 points and its last point must repeat the first")


def error_dimension_mismatch(expected: str, found: str, span: SourceSpan,
                             source_line: str = None) -> ParserError:
    """E107: collection member declares a different dimensionality."""
    return _parser_error(
        "E107", f"dimensionality mismatch: collection is {expected}, member is {found}",
        expected, found, span, source_line)


def error_invalid_geometry(message: str) -> MaterializationError:
    """E301"""
    return MaterializationError(Diagnostic(code="E301", message=message))
