"""Property-based tests for feed rendering."""

import xml.etree.ElementTree as ET
from datetime import UTC, datetime

from hypothesis import given, settings
from hypothesis import strategies as st

from feedrender.config import FeedConfig
from feedrender.feed import FeedRenderer
from feedrender.models import FeedItem
from feedrender.xml_escape import remove_invalid_chars

NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)

# Any text that can be encoded, control characters included
xml_text = st.text(
    alphabet=st.characters(exclude_categories=("Cs",)),
    max_size=80,
)


def as_parsed(text):
    return remove_invalid_chars(text).replace("\r\n", "\n").replace("\r", "\n")


feed_items = st.builds(
    lambda title, description, visible, slug: FeedItem(
        fields={"title": title, "description": description},
        link=f"https://example.com/{slug}",
        visible=visible,
    ),
    xml_text,
    xml_text,
    st.booleans(),
    st.text(alphabet="abc123&?=", max_size=10),
)


class TestFeedRendererProperties:
    """Property-based tests for FeedRenderer."""

    @settings(max_examples=50)
    @given(
        st.lists(feed_items, max_size=5),
        xml_text,
        xml_text,
        st.integers(min_value=0, max_value=200),
    )
    def test_output_is_well_formed(self, items, title, description, max_length):
        """For any items and channel text, the document parses as XML."""
        config = FeedConfig.merge(
            {
                "title": title,
                "description": description,
                "item_description_max_length": max_length,
            }
        )

        result = FeedRenderer().build(items, config, "https://example.com/", NOW)
        root = ET.fromstring(result.xml.encode("utf-8"))

        channel = root.find("channel")
        assert channel.findtext("title") == as_parsed(title)
        assert len(channel.findall("item")) == result.items_rendered

    @given(st.lists(feed_items, max_size=8))
    def test_counts_add_up(self, items):
        """Every received item is either hidden, skipped or rendered."""
        result = FeedRenderer().build(items, FeedConfig.merge(), now=NOW)

        assert result.items_received == len(items)
        assert result.items_hidden == sum(1 for item in items if not item.visible)
        assert (
            result.items_hidden + result.items_skipped + result.items_rendered
            == result.items_received
        )
        root = ET.fromstring(result.xml.encode("utf-8"))
        assert len(root.find("channel").findall("item")) == result.items_rendered
