"""RSS 2.0 document rendering."""

from collections.abc import Iterable
from datetime import UTC, datetime
from email.utils import format_datetime

from .config import FeedConfig
from .item import ItemRenderer
from .logging_config import create_execution_logger
from .models import ContentItem, RenderedFeed
from .xml_escape import escape_attribute, escape_text

XML_DECLARATION = "<?xml version='1.0' encoding='utf-8' ?>"
FOOTER = "</channel>\n</rss>\n"


class FeedRenderer:
    """Renders a complete RSS feed from an ordered collection of items."""

    def __init__(self, execution_id: str | None = None):
        """Initialize FeedRenderer.

        Args:
            execution_id: Execution ID for logging context
        """
        self.execution_id = execution_id
        self.logger = create_execution_logger("feed_renderer", execution_id)
        self.item_renderer = ItemRenderer(execution_id=execution_id)

    def render_header(
        self,
        config: FeedConfig,
        fallback_url: str = "",
        now: datetime | None = None,
    ) -> str:
        """Render everything up to and including the channel metadata.

        Args:
            config: Feed configuration
            fallback_url: Channel link to use when config.url is empty
            now: Build time for the channel pubDate (defaults to current UTC time)

        Returns:
            Header XML
        """
        now = now or datetime.now(UTC)
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)

        lines = [XML_DECLARATION]
        if config.xsl_stylesheet_url:
            lines.append(
                f'<?xml-stylesheet type="text/xsl" '
                f'href="{escape_attribute(config.xsl_stylesheet_url)}"?>'
            )
        if config.css_stylesheet_url:
            lines.append(
                f'<?xml-stylesheet type="text/css" '
                f'href="{escape_attribute(config.css_stylesheet_url)}"?>'
            )

        link = config.url or fallback_url
        lines.extend(
            [
                "<rss version='2.0'>",
                "<channel>",
                f"  <title>{escape_text(config.title)}</title>",
                f"  <link>{escape_text(link)}</link>",
                f"  <description>{escape_text(config.description)}</description>",
                f"  <pubDate>{format_datetime(now)}</pubDate>",
            ]
        )
        if config.copyright:
            lines.append(f"  <copyright>{escape_text(config.copyright)}</copyright>")
        if config.ttl:
            lines.append(f"  <ttl>{config.ttl}</ttl>")

        return "\n".join(lines) + "\n"

    def build(
        self,
        items: Iterable[ContentItem],
        config: FeedConfig,
        fallback_url: str = "",
        now: datetime | None = None,
    ) -> RenderedFeed:
        """Render the feed and count what happened to each item.

        Items failing their visibility check are left out, as are items whose
        title is empty. Order is preserved for everything else.

        Args:
            items: Ordered content items
            config: Feed configuration
            fallback_url: Channel link to use when config.url is empty
            now: Build time for the channel pubDate

        Returns:
            RenderedFeed with the XML document and item counts
        """
        self.logger.log_execution_start(feed_title=config.title)

        parts = [self.render_header(config, fallback_url, now)]
        result = RenderedFeed(xml="")

        for item in items:
            result.items_received += 1
            if not item.is_visible():
                result.items_hidden += 1
                self.logger.log_item_skipped(item.url, "not visible")
                continue

            fragment = self.item_renderer.render(item, config)
            if fragment:
                result.items_rendered += 1
                parts.append(fragment)
            else:
                result.items_skipped += 1

        parts.append(FOOTER)
        result.xml = "".join(parts)

        self.logger.log_execution_end(success=True, metrics=result.as_metrics())
        return result

    def render(
        self,
        items: Iterable[ContentItem],
        config: FeedConfig,
        fallback_url: str = "",
        now: datetime | None = None,
    ) -> str:
        """Render the feed as a single XML string."""
        return self.build(items, config, fallback_url, now).xml


def render_feed(
    items: Iterable[ContentItem],
    config: FeedConfig,
    fallback_url: str = "",
    now: datetime | None = None,
) -> str:
    """Render a feed with a fresh FeedRenderer."""
    return FeedRenderer().render(items, config, fallback_url, now)
