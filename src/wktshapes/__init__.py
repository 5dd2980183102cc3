"""
wktshapes: Well-Known-Text geometry to renderable shapes.

This package provides:
- Lexer: Tokenizes WKT text
- Parser: Builds the geometry object model from tokens
- Materializer: Turns geometries into point markers, polylines and
  filled polygons
- Loader: Applies per-geometry configuration and hands shapes to a layer

Usage:
    from wktshapes import parse_wkt, materialize

    geometries = parse_wkt('GEOMETRYCOLLECTION (POINT (1 2), LINESTRING (0 0, 1 1))')
    for geometry in geometries:
        for shape in materialize(geometry):
            print(shape.to_json())
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("wktshapes")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    SourceSpan,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .parser import (
    Parser,
    parse,
    parse_wkt,
    split_dimension_suffix,
)

from .geometry import (
    Coordinate,
    Dimensionality,
    GeometryKind,
    Geometry,
    GeometryVisitor,
    Point,
    LineString,
    Polygon,
    MultiPoint,
    MultiLineString,
    MultiPolygon,
    GeometryCollection,
    format_geometry,
)

from .shapes import (
    Shape,
    ShapeAttributes,
    PointMarker,
    Polyline,
    FilledPolygon,
)

from .materializer import (
    ShapeMaterializer,
    materialize,
)

from .errors import (
    WktError,
    LexerError,
    ParserError,
    MaterializationError,
    Diagnostic,
)

from .config import (
    WktSettings,
    load_settings,
    save_settings,
)

from .loader import (
    ShapeConfiguration,
    RenderableLayer,
    WktLoader,
    load_wkt,
)

__all__ = [
    "__version__",
    # Tokens
    "Token", "TokenType", "SourceLocation", "SourceSpan",
    # Lexer / parser
    "Lexer", "tokenize", "Parser", "parse", "parse_wkt", "split_dimension_suffix",
    # Geometry
    "Coordinate", "Dimensionality", "GeometryKind", "Geometry", "GeometryVisitor",
    "Point", "LineString", "Polygon", "MultiPoint", "MultiLineString",
    "MultiPolygon", "GeometryCollection", "format_geometry",
    # Shapes
    "Shape", "ShapeAttributes", "PointMarker", "Polyline", "FilledPolygon",
    "ShapeMaterializer", "materialize",
    # Errors
    "WktError", "LexerError", "ParserError", "MaterializationError", "Diagnostic",
    # Loading
    "WktSettings", "load_settings", "save_settings",
    "ShapeConfiguration", "RenderableLayer", "WktLoader", "load_wkt",
]
