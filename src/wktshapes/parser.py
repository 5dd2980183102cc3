"""
Recursive descent parser for Well-Known-Text geometry.

Converts a token stream into Geometry Object Model nodes.  Grammar, one
production per geometry kind::

    wkt             := geometry*
    geometry        := keyword [dimension] body
    keyword         := POINT | LINESTRING | POLYGON | MULTIPOINT
                     | MULTILINESTRING | MULTIPOLYGON | GEOMETRYCOLLECTION
    dimension       := Z | M | ZM
    body            := EMPTY | '(' text ')'
    point           := coordinate
    linestring      := coordinate (',' coordinate)+
    polygon         := ring (',' ring)*
    ring            := '(' coordinate (',' coordinate){3,} ')'
    multipoint      := member (',' member)*    member := EMPTY | coordinate
                                                       | '(' coordinate ')'
    multilinestring := (EMPTY | '(' linestring ')') (',' ...)*
    multipolygon    := (EMPTY | '(' polygon ')') (',' ...)*
    collection      := geometry (',' geometry)*

The dimension may also be glued to the keyword (``POINTZ``); that form is
split after lexing by ``split_dimension_suffix``.

Geometry collections are the only unbounded nesting in the grammar.  They
are tracked on an explicit stack of open collections, so nesting depth is
limited by memory rather than by the interpreter's recursion limit.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import structlog

from .tokens import Token, TokenType, SourceSpan
from .lexer import tokenize
from .geometry import (
    Coordinate, Dimensionality, GeometryKind, GEOMETRY_TYPES,
    Geometry, Point, LineString, Polygon,
    MultiPoint, MultiLineString, MultiPolygon, GeometryCollection,
)
from .errors import (
    error_unexpected_token,
    error_unexpected_eof,
    error_unknown_geometry,
    error_invalid_number,
    error_too_few_points,
    error_invalid_ring,
    error_dimension_mismatch,
)

log = structlog.wrap_logger(logging.getLogger(__name__))

# Longest first, so POINTZM splits as POINT + ZM rather than failing on POINTZ + M
DIMENSION_SUFFIXES = ("ZM", "Z", "M")


def split_dimension_suffix(word: str) -> Optional[Tuple[GeometryKind, str]]:
    """Split a keyword glued to its dimension suffix, e.g. ``PointZ``.

    Returns ``(kind, suffix)`` with the suffix upper-cased, or ``None`` when
    no suffix leaves a known geometry keyword in front of it.
    """
    upper = word.upper()
    for suffix in DIMENSION_SUFFIXES:
        if upper.endswith(suffix):
            kind = GeometryKind.from_keyword(upper[:-len(suffix)])
            if kind is not None:
                return kind, suffix
    return None


@dataclass
class _OpenCollection:
    """A geometry collection whose closing parenthesis is still ahead."""
    start: Token
    dimensionality: Dimensionality
    fixed: bool     # declared, inherited, or set by the first member
    members: List[Geometry] = field(default_factory=list)

    def add(self, member: Geometry) -> None:
        if not self.fixed:
            self.dimensionality = member.dimensionality
            self.fixed = True
        self.members.append(member)


class Parser:
    """
    Recursive descent parser for WKT.

    Usage:
        parser = Parser(tokens)
        geometries = parser.parse_all()

    The parser does not recover from errors: the first mismatch raises a
    ParserError and no partial result is returned.
    """

    def __init__(self, tokens: List[Token], filename: Optional[str] = None,
                 source: Optional[str] = None):
        self.tokens = tokens
        self.filename = filename
        self.source = source  # Original text, for source lines in diagnostics
        self.pos = 0
        self._lines: Optional[List[str]] = None

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _current(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[self.pos]

    def _is_at_end(self) -> bool:
        """Check if at end of tokens."""
        return self._current().type == TokenType.EOF

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token is of given type."""
        return self._current().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        if not self._is_at_end():
            self.pos += 1
        return token

    def _consume(self, token_type: TokenType, expected: str) -> Token:
        """Consume token of expected type, or raise error."""
        if self._check(token_type):
            return self._advance()
        self._error(expected)

    def _match(self, token_type: TokenType) -> Optional[Token]:
        """Consume token if it matches the given type."""
        if self._check(token_type):
            return self._advance()
        return None

    def _source_line(self, span: SourceSpan) -> Optional[str]:
        if self.source is None:
            return None
        if self._lines is None:
            self._lines = self.source.splitlines()
        line = span.start.line
        if 1 <= line <= len(self._lines):
            return self._lines[line - 1]
        return None

    def _error(self, expected: str) -> None:
        """Raise a parser error at the current token."""
        token = self._current()
        if token.type == TokenType.EOF:
            raise error_unexpected_eof(expected, token.span, self._source_line(token.span))
        raise error_unexpected_token(expected, token.describe(), token.span,
                                     self._source_line(token.span))

    def _span_from(self, start: Token) -> SourceSpan:
        """Create a span from start token to the last consumed token."""
        prev_pos = max(0, self.pos - 1)
        end_token = self.tokens[prev_pos]
        return SourceSpan(start.span.start, end_token.span.end)

    # =========================================================================
    # Top Level
    # =========================================================================

    def parse_all(self) -> List[Geometry]:
        """Parse every geometry up to the end of input."""
        geometries = []
        while not self._is_at_end():
            geometries.append(self.parse_geometry())
        log.debug("parsed wkt", geometries=len(geometries), tokens=len(self.tokens))
        return geometries

    def parse_geometry(self) -> Geometry:
        """Parse one complete geometry production, collections included."""
        open_collections: List[_OpenCollection] = []

        while True:
            parent = open_collections[-1] if open_collections else None
            start, kind, declared = self._parse_header()
            dim = self._resolve_dimensionality(parent, declared, start)

            if kind is GeometryKind.GEOMETRY_COLLECTION and self._match(TokenType.LPAREN):
                fixed = declared is not None or (parent is not None and parent.fixed)
                open_collections.append(_OpenCollection(start, dim, fixed))
                continue

            node = self._parse_body(kind, dim, start)

            # Hand the finished geometry to its collection; every collection
            # whose ')' follows is finished too and moves one level up.
            while open_collections:
                collection = open_collections[-1]
                collection.add(node)
                if self._match(TokenType.COMMA):
                    break
                self._consume(TokenType.RPAREN, "',' or ')'")
                open_collections.pop()
                node = GeometryCollection(
                    dimensionality=collection.dimensionality,
                    geometries=tuple(collection.members),
                    span=self._span_from(collection.start),
                )

            if not open_collections:
                return node

    def _parse_header(self) -> Tuple[Token, GeometryKind, Optional[Dimensionality]]:
        """Parse ``keyword [dimension]``; the dimension is None when absent."""
        start = self._current()
        if not self._check(TokenType.IDENTIFIER):
            self._error("geometry type")
        word = self._advance().lexeme

        suffix = None
        kind = GeometryKind.from_keyword(word)
        if kind is None:
            split = split_dimension_suffix(word)
            if split is None:
                raise error_unknown_geometry(word, start.span, self._source_line(start.span))
            kind, suffix = split
        elif self._check(TokenType.IDENTIFIER) and self._current().lexeme.upper() in DIMENSION_SUFFIXES:
            suffix = self._advance().lexeme

        if suffix is None:
            return start, kind, None
        return start, kind, Dimensionality.from_suffix(suffix)

    def _resolve_dimensionality(self, parent: Optional[_OpenCollection],
                                declared: Optional[Dimensionality],
                                start: Token) -> Dimensionality:
        if parent is None:
            return declared or Dimensionality.XY
        if declared is None:
            return parent.dimensionality
        if parent.fixed and declared is not parent.dimensionality:
            span = self._span_from(start)
            raise error_dimension_mismatch(parent.dimensionality.name, declared.name,
                                           span, self._source_line(span))
        return declared

    # =========================================================================
    # Geometry Bodies
    # =========================================================================

    def _parse_body(self, kind: GeometryKind, dim: Dimensionality, start: Token) -> Geometry:
        """Parse ``EMPTY`` or the parenthesized text of a non-collection body."""
        if self._match(TokenType.EMPTY):
            return GEOMETRY_TYPES[kind](dimensionality=dim, is_empty=True,
                                        span=self._span_from(start))
        if not self._check(TokenType.LPAREN) or kind is GeometryKind.GEOMETRY_COLLECTION:
            self._error("'(' or EMPTY")

        if kind is GeometryKind.POINT:
            return self._parse_point_text(dim, start)
        if kind is GeometryKind.LINE_STRING:
            return self._parse_line_string_text(dim, start)
        if kind is GeometryKind.POLYGON:
            return self._parse_polygon_text(dim, start)
        if kind is GeometryKind.MULTI_POINT:
            return self._parse_multi_point_text(dim, start)
        if kind is GeometryKind.MULTI_LINE_STRING:
            return self._parse_multi_line_string_text(dim, start)
        return self._parse_multi_polygon_text(dim, start)

    def _parse_point_text(self, dim: Dimensionality, start: Token) -> Point:
        self._consume(TokenType.LPAREN, "'('")
        coord = self._parse_coordinate(dim)
        self._consume(TokenType.RPAREN, "')'")
        return Point(dimensionality=dim, coordinate=coord, span=self._span_from(start))

    def _parse_line_string_text(self, dim: Dimensionality, start: Token) -> LineString:
        coords = self._parse_coordinate_list(dim)
        span = self._span_from(start)
        if len(coords) < 2:
            raise error_too_few_points(len(coords), span, self._source_line(span))
        return LineString(dimensionality=dim, coordinates=coords, span=span)

    def _parse_polygon_text(self, dim: Dimensionality, start: Token) -> Polygon:
        self._consume(TokenType.LPAREN, "'('")
        rings = [self._parse_ring(dim)]
        while self._match(TokenType.COMMA):
            rings.append(self._parse_ring(dim))
        self._consume(TokenType.RPAREN, "',' or ')'")
        return Polygon(dimensionality=dim, rings=tuple(rings), span=self._span_from(start))

    def _parse_ring(self, dim: Dimensionality) -> Tuple[Coordinate, ...]:
        start = self._current()
        ring = self._parse_coordinate_list(dim)
        span = self._span_from(start)
        if len(ring) < 4:
            raise error_invalid_ring(f"{len(ring)} points", span, self._source_line(span))
        if ring[0] != ring[-1]:
            raise error_invalid_ring("not closed", span, self._source_line(span))
        return ring

    def _parse_multi_point_text(self, dim: Dimensionality, start: Token) -> MultiPoint:
        """Members may be bare (``1 2``), parenthesized (``(1 2)``) or EMPTY."""
        self._consume(TokenType.LPAREN, "'('")
        points = [self._parse_multi_point_member(dim)]
        while self._match(TokenType.COMMA):
            points.append(self._parse_multi_point_member(dim))
        self._consume(TokenType.RPAREN, "',' or ')'")
        return MultiPoint(dimensionality=dim, points=tuple(points), span=self._span_from(start))

    def _parse_multi_point_member(self, dim: Dimensionality) -> Point:
        start = self._current()
        if self._match(TokenType.EMPTY):
            return Point(dimensionality=dim, is_empty=True, span=self._span_from(start))
        if self._check(TokenType.LPAREN):
            return self._parse_point_text(dim, start)
        coord = self._parse_coordinate(dim)
        return Point(dimensionality=dim, coordinate=coord, span=self._span_from(start))

    def _parse_multi_line_string_text(self, dim: Dimensionality, start: Token) -> MultiLineString:
        self._consume(TokenType.LPAREN, "'('")
        lines = [self._parse_member(LineString, self._parse_line_string_text, dim)]
        while self._match(TokenType.COMMA):
            lines.append(self._parse_member(LineString, self._parse_line_string_text, dim))
        self._consume(TokenType.RPAREN, "',' or ')'")
        return MultiLineString(dimensionality=dim, line_strings=tuple(lines),
                               span=self._span_from(start))

    def _parse_multi_polygon_text(self, dim: Dimensionality, start: Token) -> MultiPolygon:
        self._consume(TokenType.LPAREN, "'('")
        polygons = [self._parse_member(Polygon, self._parse_polygon_text, dim)]
        while self._match(TokenType.COMMA):
            polygons.append(self._parse_member(Polygon, self._parse_polygon_text, dim))
        self._consume(TokenType.RPAREN, "',' or ')'")
        return MultiPolygon(dimensionality=dim, polygons=tuple(polygons),
                            span=self._span_from(start))

    def _parse_member(self, node_type, parse_text, dim: Dimensionality) -> Geometry:
        """Parse a keyword-less member body of a multi geometry."""
        start = self._current()
        if self._match(TokenType.EMPTY):
            return node_type(dimensionality=dim, is_empty=True, span=self._span_from(start))
        if not self._check(TokenType.LPAREN):
            self._error("'(' or EMPTY")
        return parse_text(dim, start)

    # =========================================================================
    # Coordinates
    # =========================================================================

    def _parse_coordinate_list(self, dim: Dimensionality) -> Tuple[Coordinate, ...]:
        """Parse ``'(' coordinate (',' coordinate)* ')'``."""
        self._consume(TokenType.LPAREN, "'('")
        coords = [self._parse_coordinate(dim)]
        while self._match(TokenType.COMMA):
            coords.append(self._parse_coordinate(dim))
        self._consume(TokenType.RPAREN, "',' or ')'")
        return tuple(coords)

    def _parse_coordinate(self, dim: Dimensionality) -> Coordinate:
        return tuple(self._parse_number() for _ in range(dim.component_count))

    def _parse_number(self) -> float:
        token = self._consume(TokenType.NUMBER, "number")
        try:
            return float(token.lexeme)
        except ValueError:
            raise error_invalid_number(token.lexeme, token.span,
                                       self._source_line(token.span)) from None


def parse(tokens: List[Token], filename: Optional[str] = None,
          source: Optional[str] = None) -> List[Geometry]:
    """
    Convenience function to parse a token list.

    Args:
        tokens: List of tokens from the lexer
        filename: Optional filename for error messages
        source: Optional original text, adds source lines to diagnostics

    Returns:
        The top-level geometries, in input order

    Raises:
        ParserError: If parsing fails
    """
    parser = Parser(tokens, filename, source)
    return parser.parse_all()


def parse_wkt(text: str, filename: Optional[str] = None) -> List[Geometry]:
    """Tokenize and parse a buffer holding one or more WKT geometries."""
    return parse(tokenize(text, filename), filename, text)
