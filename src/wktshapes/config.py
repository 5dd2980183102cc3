"""YAML settings for loading WKT into shapes.

Example document::

    log_level: INFO
    default_attributes:
      line_color: "#3366ff"
      line_width: 1.5
    default_highlight_attributes:
      line_color: "#ff3333"
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .shapes import ShapeAttributes
from .utils.logging import LOG_LEVELS

SETTINGS_FILENAME = "wktshapes.yaml"

_ATTRIBUTE_SECTIONS = ("default_attributes", "default_highlight_attributes")


@dataclass
class WktSettings:
    """Defaults the loader applies to every materialized shape."""

    default_attributes: Optional[ShapeAttributes] = None
    default_highlight_attributes: Optional[ShapeAttributes] = None
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WktSettings":
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"unknown setting(s): {', '.join(sorted(unknown))}")
        values = dict(data)
        level = str(values.get("log_level", cls.log_level)).upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log_level '{values['log_level']}'")
        values["log_level"] = level
        for key in _ATTRIBUTE_SECTIONS:
            section = values.get(key)
            if section is not None:
                values[key] = ShapeAttributes.from_dict(section)
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {"log_level": self.log_level}
        for key in _ATTRIBUTE_SECTIONS:
            attrs = getattr(self, key)
            doc[key] = attrs.to_dict() if attrs is not None else None
        return doc


def load_settings(path: Path | str) -> WktSettings:
    """Read settings from a YAML file; an empty file gives the defaults."""
    settings_path = Path(path)
    if not settings_path.exists():
        raise FileNotFoundError(f"settings not found: {settings_path}")
    with settings_path.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, dict):
        raise ValueError(f"settings must be a mapping: {settings_path}")
    return WktSettings.from_dict(data)


def save_settings(settings: WktSettings, path: Path | str) -> None:
    settings_path = Path(path)
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    with settings_path.open("w", encoding="utf-8") as fp:
        yaml.safe_dump(settings.to_dict(), fp, sort_keys=False)
