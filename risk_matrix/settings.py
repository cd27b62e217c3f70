"""
Chart settings: flat schema, defaults, and the single resolve step.

Raw settings (from a JSON file, CLI flags, or a host settings pane) are
resolved once into an immutable LayoutConfig. The engine never looks at raw
settings and never needs to null-check a field.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

logger = logging.getLogger(__name__)


class ColouringPolicy(Enum):
    """How point markers and legend swatches are coloured."""

    PALETTE = "palette"         # fixed palette, cycled by input order
    RISK_LEVEL = "risk_level"   # High / Medium / Low band colour
    GRADIENT = "gradient"       # colour of the background cell under the point
    FIXED = "fixed"             # default_colour for every point


class SettingKind(Enum):
    INTEGER = "integer"
    NUMBER = "number"
    TOGGLE = "toggle"
    COLOUR = "colour"
    TEXT = "text"
    FONT = "font"
    CHOICE = "choice"


@dataclass(frozen=True)
class SettingSpec:
    """One entry of the settings schema."""

    kind: SettingKind
    default: Any
    display_name: str
    group: str
    choices: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        d = {
            "kind": self.kind.value,
            "default": self.default,
            "display_name": self.display_name,
            "group": self.group,
        }
        if self.choices:
            d["choices"] = list(self.choices)
        return d


# ──────────────────────────────────────────────
# Schema
# ──────────────────────────────────────────────

SETTINGS_SCHEMA: dict[str, SettingSpec] = {
    # Viewport
    "width": SettingSpec(SettingKind.NUMBER, 800.0, "Width (px)", "viewport"),
    "height": SettingSpec(SettingKind.NUMBER, 600.0, "Height (px)", "viewport"),
    # Matrix
    "matrix_size": SettingSpec(SettingKind.INTEGER, 5, "Matrix Size", "matrix"),
    "show_legend": SettingSpec(SettingKind.TOGGLE, True, "Show Legend", "matrix"),
    "point_size": SettingSpec(SettingKind.NUMBER, 8.0, "Point Size", "matrix"),
    # Gradient
    "show_gradient": SettingSpec(SettingKind.TOGGLE, True, "Show Gradient Background", "gradient"),
    "first_colour": SettingSpec(SettingKind.COLOUR, "#90EE90", "First Colour (Low Risk)", "gradient"),
    "middle_colour": SettingSpec(SettingKind.COLOUR, "#FFD700", "Middle Colour (Medium Risk)", "gradient"),
    "last_colour": SettingSpec(SettingKind.COLOUR, "#FF4500", "Last Colour (High Risk)", "gradient"),
    # Data points
    "default_colour": SettingSpec(SettingKind.COLOUR, "#0078D4", "Default Colour", "data_point"),
    "font_size": SettingSpec(SettingKind.NUMBER, 12.0, "Text Size", "data_point"),
    "colouring": SettingSpec(
        SettingKind.CHOICE, ColouringPolicy.PALETTE.value, "Point Colouring", "data_point",
        choices=tuple(p.value for p in ColouringPolicy),
    ),
    # Axis labels
    "x_axis_label": SettingSpec(SettingKind.TEXT, "Impact", "X-Axis Label", "axis_labels"),
    "x_axis_label_font_size": SettingSpec(SettingKind.NUMBER, 12.0, "X-Axis Font Size", "axis_labels"),
    "x_axis_label_font_family": SettingSpec(SettingKind.FONT, "Segoe UI", "X-Axis Font Family", "axis_labels"),
    "x_axis_label_colour": SettingSpec(SettingKind.COLOUR, "#333333", "X-Axis Colour", "axis_labels"),
    "y_axis_label": SettingSpec(SettingKind.TEXT, "Likelihood", "Y-Axis Label", "axis_labels"),
    "y_axis_label_font_size": SettingSpec(SettingKind.NUMBER, 12.0, "Y-Axis Font Size", "axis_labels"),
    "y_axis_label_font_family": SettingSpec(SettingKind.FONT, "Segoe UI", "Y-Axis Font Family", "axis_labels"),
    "y_axis_label_colour": SettingSpec(SettingKind.COLOUR, "#333333", "Y-Axis Colour", "axis_labels"),
}

SETTING_GROUPS = ("viewport", "matrix", "gradient", "data_point", "axis_labels")


@dataclass(frozen=True)
class LayoutConfig:
    """Fully populated chart settings. Build with resolve_config()."""

    matrix_size: int = 5
    width: float = 800.0
    height: float = 600.0
    show_legend: bool = True
    point_size: float = 8.0
    font_size: float = 12.0
    default_colour: str = "#0078D4"
    show_gradient: bool = True
    first_colour: str = "#90EE90"
    middle_colour: str = "#FFD700"
    last_colour: str = "#FF4500"
    x_axis_label: str = "Impact"
    x_axis_label_font_size: float = 12.0
    x_axis_label_font_family: str = "Segoe UI"
    x_axis_label_colour: str = "#333333"
    y_axis_label: str = "Likelihood"
    y_axis_label_font_size: float = 12.0
    y_axis_label_font_family: str = "Segoe UI"
    y_axis_label_colour: str = "#333333"
    colouring: ColouringPolicy = ColouringPolicy.PALETTE

    def to_dict(self) -> dict:
        d = {name: getattr(self, name) for name in SETTINGS_SCHEMA}
        d["colouring"] = self.colouring.value
        return d


# ──────────────────────────────────────────────
# Resolution
# ──────────────────────────────────────────────

_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0"}


def _coerce(spec: SettingSpec, value: Any) -> Any:
    """Convert a raw value to the schema kind. Raises ValueError/TypeError if it can't."""
    kind = spec.kind

    if kind == SettingKind.TOGGLE:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        text = str(value).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f"'{value}' is not a boolean")

    if kind == SettingKind.INTEGER:
        if isinstance(value, bool):
            raise TypeError("boolean given for an integer setting")
        number = float(value)
        if not number.is_integer():
            raise ValueError(f"{value} is not a whole number")
        return int(number)

    if kind == SettingKind.NUMBER:
        if isinstance(value, bool):
            raise TypeError("boolean given for a numeric setting")
        return float(value)

    if kind == SettingKind.CHOICE:
        if isinstance(value, Enum):
            value = value.value
        text = str(value).strip().lower()
        if text not in spec.choices:
            raise ValueError(f"'{value}' is not one of {', '.join(spec.choices)}")
        return text

    # Colour, text and font settings stay as strings; colours are not
    # validated here, bad ones render black
    if isinstance(value, (dict, list)):
        raise TypeError(f"expected text, got {type(value).__name__}")
    text = str(value).strip()
    if kind != SettingKind.TEXT and not text:
        raise ValueError("empty value")
    return text


def _flatten(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Accept flat settings or settings nested by group name."""
    flat: dict[str, Any] = {}
    for key, value in raw.items():
        if key in SETTING_GROUPS and isinstance(value, Mapping):
            flat.update(value)
        else:
            flat[key] = value
    return flat


def resolve_config(raw: Mapping[str, Any] | None = None, **overrides: Any) -> LayoutConfig:
    """Resolve raw settings into a LayoutConfig.

    Missing or None values take the schema default. Values that cannot be
    coerced to their kind fall back to the default and are logged. Numeric
    ranges are not enforced here: a zero width or matrix size is kept so
    the layout planner can report it.

    Args:
        raw: Flat mapping of setting name -> value, or a mapping nested by group.
        **overrides: Individual settings applied on top of raw.

    Returns:
        An immutable, fully populated LayoutConfig.
    """
    values = _flatten(raw or {})
    values.update(overrides)

    resolved: dict[str, Any] = {}
    for name, value in values.items():
        spec = SETTINGS_SCHEMA.get(name)
        if spec is None:
            logger.warning("Ignoring unknown setting '%s'", name)
            continue
        if value is None:
            continue
        try:
            resolved[name] = _coerce(spec, value)
        except (TypeError, ValueError) as e:
            logger.warning("Invalid value for '%s' (%s); using default %r", name, e, spec.default)

    for name, spec in SETTINGS_SCHEMA.items():
        resolved.setdefault(name, spec.default)

    resolved["colouring"] = ColouringPolicy(resolved["colouring"])
    return LayoutConfig(**resolved)


def load_config(filepath: str | Path, **overrides: Any) -> LayoutConfig:
    """Read a JSON settings file and resolve it.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a JSON object.
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with open(path, encoding="utf-8-sig") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in settings file: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a JSON object, got {type(data).__name__}")

    return resolve_config(data, **overrides)


def schema_to_dict() -> dict[str, dict]:
    return {name: spec.to_dict() for name, spec in SETTINGS_SCHEMA.items()}
