"""Maps extracted entities to layout component descriptors.

The mapping is a fixed lookup from entity kind to component type. Output
order follows the source position of the originating entities; sections
are assigned afterwards by chunking, so they never reorder anything.

Images are optional. Each request is independent and a failure only leaves
that component without an ``image_url``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, NamedTuple, Optional

from lightpoint.core.config import LayoutConfig
from lightpoint.hooks.run_tracker import track_stage
from lightpoint.layout.themes import Theme, get_theme, style_for
from lightpoint.models import (
    BulletListContent,
    Comparison,
    ComparisonCardsContent,
    ComponentDescriptor,
    ComponentType,
    ExtractionResult,
    HeroContent,
    KeyPercentage,
    KeyPercentageContent,
    Layout,
    LayoutOptions,
    ListGroup,
    NumberedStepsContent,
    Quote,
    QuoteBlockContent,
    Stat,
    StatItem,
    StatsGridContent,
    TimelineContent,
    TimelineEntry,
    TimelineEventItem,
)
from lightpoint.providers import ImageGenerator, build_image_prompt

log = logging.getLogger(__name__)

# Tie-break for entities sharing a source position
_KIND_RANK = {
    "stat": 0,
    "key_percentage": 1,
    "quote": 2,
    "list": 3,
    "timeline": 4,
    "comparison": 5,
}


class _Entity(NamedTuple):
    position: int
    rank: int
    kind: str
    value: Any


def format_metric(stat: Stat) -> str:
    """Display string for a stat: ``41%``, ``£1.5m``, ``92,000``, ``28 days``."""
    unit = stat.unit or ""
    if unit in ("£", "$", "€"):
        return unit + _compact(stat.value)
    number = _plain(stat.value)
    if unit == "%":
        return f"{number}%"
    if unit:
        return f"{number} {unit}"
    return number


def _plain(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def _compact(value: float) -> str:
    for threshold, suffix in ((1e9, "bn"), (1e6, "m")):
        if abs(value) >= threshold:
            return f"{value / threshold:.1f}".rstrip("0").rstrip(".") + suffix
    return _plain(value)


class LayoutMapper:
    """Deterministic ``ExtractionResult`` → ``Layout`` mapping."""

    def __init__(
        self,
        config: LayoutConfig | None = None,
        image_generator: Optional[ImageGenerator] = None,
    ) -> None:
        self._config = config or LayoutConfig()
        self._images = image_generator

    async def map_to_layout(
        self,
        extraction: ExtractionResult,
        options: LayoutOptions | None = None,
    ) -> Layout:
        options = options or LayoutOptions()
        theme_key, theme = get_theme(options.theme or self._config.theme)

        with track_stage("layout_mapping"):
            components = self.build_components(extraction, options, theme)

        if options.enable_images and self._images is not None:
            await self._attach_images(components, options)

        log.info("Mapped %d components (theme=%s)", len(components), theme_key)
        return Layout(theme=theme_key, components=components)

    def build_components(
        self,
        extraction: ExtractionResult,
        options: LayoutOptions,
        theme: Theme,
    ) -> list[ComponentDescriptor]:
        components: list[ComponentDescriptor] = []
        if options.title.strip():
            components.append(
                ComponentDescriptor(
                    type=ComponentType.HERO,
                    content=HeroContent(headline=options.title.strip(), subheadline=options.excerpt.strip()),
                    style=style_for(theme, ComponentType.HERO),
                    source_position=-1,
                )
            )

        pending_stats: list[Stat] = []
        for entity in self._merge(extraction):
            if entity.kind == "stat":
                if pending_stats and not self._same_group(pending_stats, entity.value, options.source_text):
                    components.append(self._stats_grid(pending_stats, theme))
                    pending_stats = []
                pending_stats.append(entity.value)
                continue
            if pending_stats:
                components.append(self._stats_grid(pending_stats, theme))
                pending_stats = []
            components.extend(self._map_entity(entity, theme))
        if pending_stats:
            components.append(self._stats_grid(pending_stats, theme))

        self._assign_sections(components)
        return components

    # ── Entity mapping ───────────────────────────────────────────────

    def _merge(self, extraction: ExtractionResult) -> list[_Entity]:
        entities: list[_Entity] = []
        for stat in extraction.stats:
            entities.append(_Entity(stat.position, _KIND_RANK["stat"], "stat", stat))
        stat_positions = {stat.position for stat in extraction.stats}
        for pct in extraction.key_percentages:
            # Already shown in a stats grid
            if pct.position in stat_positions:
                continue
            entities.append(_Entity(pct.position, _KIND_RANK["key_percentage"], "key_percentage", pct))
        for quote in extraction.quotes:
            entities.append(_Entity(quote.position, _KIND_RANK["quote"], "quote", quote))
        for group in extraction.lists:
            entities.append(_Entity(group.position, _KIND_RANK["list"], "list", group))
        if extraction.timeline:
            # The timeline renders as one block, anchored at its earliest source line
            first = min(entry.position for entry in extraction.timeline)
            entities.append(_Entity(first, _KIND_RANK["timeline"], "timeline", extraction.timeline))
        for comparison in extraction.comparisons:
            entities.append(_Entity(comparison.position, _KIND_RANK["comparison"], "comparison", comparison))
        return sorted(entities, key=lambda e: (e.position, e.rank))

    def _same_group(self, pending: list[Stat], stat: Stat, source_text: str) -> bool:
        if len(pending) >= self._config.stats_per_grid:
            return False
        if not source_text:
            return True
        previous = pending[-1]
        between = source_text[previous.position + len(previous.raw):stat.position]
        return "\n\n" not in between and "\r\n\r\n" not in between

    def _stats_grid(self, stats: list[Stat], theme: Theme) -> ComponentDescriptor:
        items = [StatItem(metric=format_metric(s), label=s.label, unit=s.unit) for s in stats]
        return ComponentDescriptor(
            type=ComponentType.STATS_GRID,
            content=StatsGridContent(stats=items),
            style=style_for(theme, ComponentType.STATS_GRID, len(items)),
            source_position=stats[0].position,
        )

    def _map_entity(self, entity: _Entity, theme: Theme) -> list[ComponentDescriptor]:
        if entity.kind == "quote":
            quote: Quote = entity.value
            return [self._descriptor(
                ComponentType.QUOTE_BLOCK,
                QuoteBlockContent(text=quote.text, attribution=quote.attribution),
                theme, entity.position,
            )]
        if entity.kind == "list":
            return self._list_components(entity.value, theme)
        if entity.kind == "timeline":
            entries: tuple[TimelineEntry, ...] = entity.value
            events = [TimelineEventItem(date=e.date, description=e.description) for e in entries]
            return [self._descriptor(ComponentType.TIMELINE, TimelineContent(events=events), theme, entity.position)]
        if entity.kind == "comparison":
            comparison: Comparison = entity.value
            content = ComparisonCardsContent(
                left=comparison.left, right=comparison.right, connective=comparison.connective
            )
            return [self._descriptor(ComponentType.COMPARISON_CARDS, content, theme, entity.position)]
        if entity.kind == "key_percentage":
            pct: KeyPercentage = entity.value
            content = KeyPercentageContent(value=pct.value, context=pct.context)
            return [self._descriptor(ComponentType.KEY_PERCENTAGE, content, theme, entity.position)]
        raise ValueError(f"Unknown entity kind: {entity.kind}")

    def _list_components(self, group: ListGroup, theme: Theme) -> list[ComponentDescriptor]:
        size = self._config.max_list_items
        texts = [item.text for item in group.items]
        chunks = [texts[i:i + size] for i in range(0, len(texts), size)] or [[]]
        out = []
        for index, chunk in enumerate(chunks):
            if group.style == "numbered":
                content = NumberedStepsContent(steps=chunk, start=1 + index * size)
                ctype = ComponentType.NUMBERED_STEPS
            else:
                content = BulletListContent(items=chunk)
                ctype = ComponentType.BULLET_LIST
            out.append(self._descriptor(ctype, content, theme, group.position))
        return out

    @staticmethod
    def _descriptor(ctype: ComponentType, content: Any, theme: Theme, position: int) -> ComponentDescriptor:
        return ComponentDescriptor(
            type=ctype,
            content=content,
            style=style_for(theme, ctype),
            source_position=position,
        )

    def _assign_sections(self, components: list[ComponentDescriptor]) -> None:
        per_section = self._config.components_per_section
        body_index = 0
        for component in components:
            if component.type is ComponentType.HERO:
                component.section = 0
                continue
            component.section = 1 + body_index // per_section
            body_index += 1

    # ── Images ───────────────────────────────────────────────────────

    async def _attach_images(self, components: list[ComponentDescriptor], options: LayoutOptions) -> None:
        targets = [c for c in components if c.type is ComponentType.HERO]
        body = [c for c in components if c.type is not ComponentType.HERO]
        targets.extend(body[: self._config.max_image_sections])
        if not targets:
            return

        semaphore = asyncio.Semaphore(self._config.image_concurrency)
        title = options.title.strip() or "Resolving HMRC complaints"

        async def _one(component: ComponentDescriptor) -> None:
            prompt = build_image_prompt(
                title,
                heading=component.type.value.replace("_", " "),
                content=_content_summary(component),
            )
            async with semaphore:
                try:
                    component.image_url = await asyncio.wait_for(
                        self._images.generate(prompt),
                        timeout=self._config.image_timeout_seconds,
                    )
                except asyncio.TimeoutError:
                    log.warning("Image for %s component timed out", component.type.value)
                except Exception as e:
                    log.warning("Image for %s component failed: %s", component.type.value, e)

        with track_stage("layout_images"):
            await asyncio.gather(*(_one(c) for c in targets))


def _content_summary(component: ComponentDescriptor) -> str:
    content = component.content
    if isinstance(content, HeroContent):
        return content.subheadline or content.headline
    if isinstance(content, StatsGridContent):
        return "; ".join(f"{s.metric} {s.label}" for s in content.stats)
    if isinstance(content, QuoteBlockContent):
        return content.text
    if isinstance(content, BulletListContent):
        return "; ".join(content.items)
    if isinstance(content, NumberedStepsContent):
        return "; ".join(content.steps)
    if isinstance(content, TimelineContent):
        return "; ".join(e.description for e in content.events)
    if isinstance(content, ComparisonCardsContent):
        return f"{content.left} {content.connective} {content.right}"
    if isinstance(content, KeyPercentageContent):
        return f"{content.value:g}% {content.context}"
    return ""
