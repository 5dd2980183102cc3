"""Load WKT text into shapes and hand them to a rendering layer.

Usage::

    layer = MyLayer()                 # anything with add_renderables(shapes)
    loader = WktLoader("POINT (19 23)")
    loader.load(layer=layer)

Styling individual geometries before they reach the layer::

    def configure(geometry):
        if geometry.kind is GeometryKind.POINT:
            return ShapeConfiguration(attributes=ShapeAttributes(line_color="red"))

    loader.load(configuration_callback=configure, layer=layer)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Union

import structlog

from .config import WktSettings
from .errors import WktError
from .geometry import Geometry
from .parser import parse_wkt
from .shapes import Shape, ShapeAttributes

log = structlog.wrap_logger(logging.getLogger(__name__))


@dataclass
class ShapeConfiguration:
    """Per-geometry overrides; a field left as None keeps the shape's value."""

    attributes: Optional[ShapeAttributes] = None
    highlight_attributes: Optional[ShapeAttributes] = None
    pick_delegate: Any = None
    user_properties: Optional[Dict[str, Any]] = None

    @classmethod
    def coerce(cls, value: Union["ShapeConfiguration", Mapping[str, Any], None]
               ) -> Optional["ShapeConfiguration"]:
        """Accept a configuration, a mapping with the same keys, or None."""
        if value is None or isinstance(value, cls):
            return value
        unknown = set(value) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"unknown configuration field(s): {', '.join(sorted(unknown))}")
        return cls(**value)

    def apply(self, shape: Shape) -> None:
        """Overwrite the fields set here; each shape gets its own attribute copies."""
        if self.attributes is not None:
            shape.attributes = replace(self.attributes)
        if self.highlight_attributes is not None:
            shape.highlight_attributes = replace(self.highlight_attributes)
        if self.pick_delegate is not None:
            shape.pick_delegate = self.pick_delegate
        if self.user_properties is not None:
            shape.user_properties = dict(self.user_properties)


class RenderableLayer(Protocol):
    """The part of a host rendering layer the loader talks to."""

    def add_renderables(self, shapes: Sequence[Shape]) -> None: ...


ConfigurationCallback = Callable[[Geometry], Union[ShapeConfiguration, Mapping[str, Any], None]]
CompletionCallback = Callable[[List[Shape]], None]


class WktLoader:
    """Parse WKT text and deliver its shapes.

    Parsing is all or nothing: a malformed geometry anywhere in the text
    raises before any shape reaches the layer or the callbacks.
    """

    def __init__(self, text: str, settings: Optional[WktSettings] = None,
                 filename: Optional[str] = None):
        self.text = text
        self.settings = settings or WktSettings()
        self.filename = filename
        self.geometries: List[Geometry] = []
        self.shapes: List[Shape] = []

    def _default_shapes(self, geometry: Geometry) -> List[Shape]:
        shapes = geometry.materialize_shapes()
        defaults = self.settings.default_attributes
        highlight = self.settings.default_highlight_attributes
        for shape in shapes:
            shape.attributes = replace(defaults) if defaults is not None else None
            shape.highlight_attributes = replace(highlight) if highlight is not None else None
        return shapes

    def load(self, completion_callback: Optional[CompletionCallback] = None,
             configuration_callback: Optional[ConfigurationCallback] = None,
             layer: Optional[RenderableLayer] = None) -> List[Geometry]:
        """Parse, materialize, configure and deliver; returns the geometries.

        ``configuration_callback`` runs once per top-level geometry and its
        result applies to every shape of that geometry.
        ``completion_callback`` runs once with the full shape list, after the
        shapes were added to ``layer``.
        """
        try:
            geometries = parse_wkt(self.text, self.filename)
        except WktError as exc:
            log.error("wkt parse failed", code=exc.diagnostic.code,
                      offset=exc.offset, error=exc.diagnostic.message)
            raise

        shapes: List[Shape] = []
        for geometry in geometries:
            geometry_shapes = self._default_shapes(geometry)
            if configuration_callback is not None:
                configuration = ShapeConfiguration.coerce(configuration_callback(geometry))
                if configuration is not None:
                    for shape in geometry_shapes:
                        configuration.apply(shape)
            shapes.extend(geometry_shapes)

        self.geometries = geometries
        self.shapes = shapes
        log.info("wkt loaded", geometries=len(geometries), shapes=len(shapes))

        if layer is not None:
            layer.add_renderables(shapes)
        if completion_callback is not None:
            completion_callback(shapes)
        return geometries


def load_wkt(text: str, settings: Optional[WktSettings] = None) -> List[Shape]:
    """Parse ``text`` and return its shapes with the settings' defaults applied."""
    loader = WktLoader(text, settings)
    loader.load()
    return loader.shapes
