"""Per-item rendering for the RSS feed."""

from datetime import UTC, datetime
from email.utils import format_datetime
from typing import Any

from dateutil import parser as date_parser

from .config import FeedConfig
from .logging_config import create_execution_logger
from .models import ContentItem
from .truncate import truncate
from .xml_escape import escape_text, plain_text, remove_invalid_chars, wrap_content


def to_rfc2822(value: Any) -> str | None:
    """Format a raw date value as an RFC-2822 date string.

    Accepts datetimes (naive ones are taken as UTC), Unix timestamps as
    numbers or digit strings, and date strings dateutil can parse.

    Returns:
        The formatted date, or None if the value cannot be read as a date
    """
    if isinstance(value, bool):
        return None

    try:
        if isinstance(value, datetime):
            moment = value
        elif isinstance(value, (int, float)):
            moment = datetime.fromtimestamp(value, tz=UTC)
        elif isinstance(value, str):
            value = value.strip()
            if value.lstrip("-").isdigit():
                moment = datetime.fromtimestamp(int(value), tz=UTC)
            else:
                moment = date_parser.parse(value)
        else:
            return None
    except (ValueError, TypeError, OverflowError, OSError):
        return None

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)

    return format_datetime(moment)


class ItemRenderer:
    """Renders one content item as an RSS <item> element."""

    def __init__(self, execution_id: str | None = None):
        self.logger = create_execution_logger("item_renderer", execution_id)

    def render(self, item: ContentItem, config: FeedConfig) -> str:
        """Render one item.

        Args:
            item: Content item to render
            config: Feed configuration with the field mappings

        Returns:
            The <item> fragment, or an empty string if the item has no title
        """
        raw_title = item.get(config.item_title_field) or ""
        title = remove_invalid_chars(plain_text(raw_title)).strip()
        if not title:
            self.logger.log_item_skipped(item.url, "empty title")
            return ""

        description = (item.get(config.item_description_field) or "").strip()
        description = truncate(description, config.item_description_max_length)

        lines = [
            "  <item>",
            f"    <title>{escape_text(title)}</title>",
            f"    <description>{wrap_content(description)}</description>",
        ]

        raw_date = item.get_raw(config.item_date_field)
        if raw_date:
            pub_date = to_rfc2822(raw_date)
            if pub_date:
                lines.append(f"    <pubDate>{pub_date}</pubDate>")
            else:
                self.logger.warning(
                    f"Unreadable date in field {config.item_date_field}",
                    item_title=title,
                    item_url=item.url,
                )

        link = escape_text(item.url)
        lines.extend(
            [
                f"    <link>{link}</link>",
                f"    <guid>{link}</guid>",
                "  </item>",
            ]
        )

        return "\n".join(lines) + "\n"


def render_item(item: ContentItem, config: FeedConfig) -> str:
    """Render one item with a fresh ItemRenderer."""
    return ItemRenderer().render(item, config)
