"""
Layout configuration for canvas-layout.

Every Canvas carries its own ``LayoutConfig`` so that documents with
different spacing can live side by side.  The config controls:

- ``margin``          — spacing kept between placed elements, the padding
                        around group contents, and the canvas boundary pad
- ``default_width``   — width of nodes synthesized from a bare id
- ``default_height``  — height of nodes synthesized from a bare id

Named presets cover the common cases; ``LayoutConfig.from_env()`` lets a
host process pick one (or override single values) through environment
variables:

    CANVAS_LAYOUT_PRESET          compact | default | spacious
    CANVAS_LAYOUT_MARGIN          integer > 0
    CANVAS_LAYOUT_DEFAULT_WIDTH   integer ≥ 0
    CANVAS_LAYOUT_DEFAULT_HEIGHT  integer ≥ 0
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


class LayoutConfig(BaseModel):
    """Spacing and sizing parameters for one canvas."""

    model_config = ConfigDict(frozen=True)

    margin: int = Field(default=10, gt=0)
    default_width: int = Field(default=250, ge=0)
    default_height: int = Field(default=120, ge=0)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> LayoutConfig:
        """Build a config from ``CANVAS_LAYOUT_*`` environment variables.

        The preset (if any) is applied first and individual values
        override it.  Values are validated like any other field, so a
        non-numeric margin raises pydantic's ``ValidationError``.
        """
        env = os.environ if environ is None else environ
        base = get_preset(env.get("CANVAS_LAYOUT_PRESET", "default"))

        overrides = {}
        for field_name, var in _ENV_VARS.items():
            if var in env:
                overrides[field_name] = env[var]

        if not overrides:
            return base
        return cls.model_validate({**base.model_dump(), **overrides})


_ENV_VARS = {
    "margin": "CANVAS_LAYOUT_MARGIN",
    "default_width": "CANVAS_LAYOUT_DEFAULT_WIDTH",
    "default_height": "CANVAS_LAYOUT_DEFAULT_HEIGHT",
}


COMPACT = LayoutConfig(margin=5, default_width=160, default_height=60)
DEFAULT = LayoutConfig()
SPACIOUS = LayoutConfig(margin=40, default_width=360, default_height=180)


# Preset registry
PRESETS: dict[str, LayoutConfig] = {
    "compact": COMPACT,
    "default": DEFAULT,
    "spacious": SPACIOUS,
}


def get_preset(name: str) -> LayoutConfig:
    """Get a layout preset by name.

    Args:
        name: Preset name ("compact", "default" or "spacious")

    Returns:
        LayoutConfig for the requested preset

    Raises:
        ValueError: If preset name is not recognized
    """
    if name not in PRESETS:
        valid = ", ".join(PRESETS.keys())
        raise ValueError(f"Unknown layout preset '{name}'. Valid presets: {valid}")
    return PRESETS[name]
