"""Colour themes for generated layouts."""

from __future__ import annotations

from typing import Literal, NamedTuple

from lightpoint.models import ComponentStyle, ComponentType


class Theme(NamedTuple):
    name: str
    mode: Literal["dark", "medium", "light"]
    page_background: str
    card_background: str
    text_primary: str
    text_secondary: str
    accent: str


THEMES: dict[str, Theme] = {
    "midnight": Theme(
        name="Midnight",
        mode="dark",
        page_background="#0a0a1a",
        card_background="rgba(26, 26, 46, 0.6)",
        text_primary="#FFFFFF",
        text_secondary="rgba(255, 255, 255, 0.8)",
        accent="#4F86F9",
    ),
    "slate": Theme(
        name="Slate",
        mode="dark",
        page_background="#1e293b",
        card_background="rgba(51, 65, 85, 0.7)",
        text_primary="#F8FAFC",
        text_secondary="#E2E8F0",
        accent="#3B82F6",
    ),
    "ocean": Theme(
        name="Ocean",
        mode="medium",
        page_background="#0f172a",
        card_background="rgba(30, 58, 95, 0.8)",
        text_primary="#FFFFFF",
        text_secondary="#DBEAFE",
        accent="#60A5FA",
    ),
    "professional": Theme(
        name="Professional",
        mode="light",
        page_background="#FFFFFF",
        card_background="rgba(248, 250, 252, 0.9)",
        text_primary="#0F172A",
        text_secondary="#334155",
        accent="#2563EB",
    ),
    "lightpoint": Theme(
        name="Lightpoint",
        mode="dark",
        page_background="#0f1729",
        card_background="rgba(26, 39, 68, 0.85)",
        text_primary="#FFFFFF",
        text_secondary="#CBD5E1",
        accent="#4F86F9",
    ),
}

DEFAULT_THEME = "lightpoint"


def get_theme(name: str | None) -> tuple[str, Theme]:
    """Resolve a theme name, falling back to the default for unknown names."""
    key = (name or DEFAULT_THEME).strip().lower()
    if key not in THEMES:
        key = DEFAULT_THEME
    return key, THEMES[key]


def style_for(theme: Theme, component_type: ComponentType, item_count: int = 1) -> ComponentStyle:
    if component_type is ComponentType.HERO:
        return ComponentStyle(background=theme.page_background, text_color=theme.text_primary)
    if component_type is ComponentType.STATS_GRID:
        columns = max(1, min(item_count, 4))
    elif component_type is ComponentType.COMPARISON_CARDS:
        columns = 2
    else:
        columns = 1
    if component_type is ComponentType.KEY_PERCENTAGE:
        text_color = theme.accent
    elif component_type is ComponentType.QUOTE_BLOCK:
        text_color = theme.text_secondary
    else:
        text_color = theme.text_primary
    return ComponentStyle(background=theme.card_background, text_color=text_color, columns=columns)
