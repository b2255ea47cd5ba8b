"""Data models for the feed renderer."""

from dataclasses import dataclass
from typing import Any, Protocol


class ContentItem(Protocol):
    """Read-only view of one content record."""

    url: str

    def get(self, name: str) -> str | None:
        """Display value of a field, or None when absent."""

    def get_raw(self, name: str) -> Any:
        """Unformatted value of a field (e.g. a timestamp)."""

    def is_visible(self) -> bool:
        """Whether the item may appear in the feed."""


_HIDDEN_VALUES = {"false", "0", "no", "off"}


def _parse_visible(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() not in _HIDDEN_VALUES
    return bool(value)


@dataclass
class FeedItem:
    """Dict-backed content item."""

    fields: dict[str, Any]
    link: str
    visible: bool = True

    @property
    def url(self) -> str:
        return self.link

    def get(self, name: str) -> str | None:
        value = self.fields.get(name)
        if value is None:
            return None
        return str(value)

    def get_raw(self, name: str) -> Any:
        return self.fields.get(name)

    def is_visible(self) -> bool:
        return self.visible

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FeedItem":
        """Build an item from a JSON object.

        ``link`` (or ``url``) and ``visible`` are item properties. Field values
        come from a nested ``fields`` object and from any remaining keys.
        """
        data = dict(data)
        link = data.pop("link", None) or data.pop("url", None) or ""
        data.pop("url", None)
        visible = _parse_visible(data.pop("visible", True))
        item_fields = dict(data.pop("fields", None) or {})
        item_fields.update(data)
        return cls(fields=item_fields, link=str(link), visible=visible)


@dataclass
class RenderedFeed:
    """Represents one rendered feed document."""

    xml: str
    items_received: int = 0
    items_hidden: int = 0
    items_skipped: int = 0
    items_rendered: int = 0

    def as_metrics(self) -> dict[str, int]:
        return {
            "items_received": self.items_received,
            "items_hidden": self.items_hidden,
            "items_skipped": self.items_skipped,
            "items_rendered": self.items_rendered,
        }
