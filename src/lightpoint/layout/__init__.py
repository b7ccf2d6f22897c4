"""Layout/component mapping for extracted content."""

from __future__ import annotations

from lightpoint.layout.mapper import LayoutMapper, format_metric
from lightpoint.layout.themes import THEMES, get_theme

__all__ = ["THEMES", "LayoutMapper", "format_metric", "get_theme"]
