"""Markup stripping and XML escaping helpers."""

import html
import re

from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution

CDATA_START = "<![CDATA["
CDATA_END = "]]>"

# Characters XML 1.0 does not allow anywhere in a document
_INVALID_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def strip_tags(text: str) -> str:
    """Remove markup tags from text, keeping the inner text.

    Script and style elements are dropped together with their content.
    Character references stay encoded, so the result never contains a ``<``
    and stripping it again changes nothing. Whitespace is left as it is.

    Args:
        text: Text that may contain HTML markup

    Returns:
        Text without tags
    """
    if not text:
        return ""

    # No tags to remove
    if "<" not in text:
        return text

    soup = BeautifulSoup(text, "html.parser")

    for element in soup(["script", "style"]):
        element.decompose()

    return EntitySubstitution.substitute_xml(soup.get_text())


def plain_text(text: str) -> str:
    """Strip tags and decode character references, for plain-text elements."""
    return html.unescape(strip_tags(text))


def remove_invalid_chars(text: str) -> str:
    """Drop characters that may not appear in an XML 1.0 document."""
    return _INVALID_XML_CHARS.sub("", text)


def escape_text(text: str) -> str:
    """Escape text for use as XML element content."""
    if not text:
        return ""

    text = remove_invalid_chars(text)
    text = text.replace("&", "&amp;")
    text = text.replace("<", "&lt;")
    text = text.replace(">", "&gt;")

    return text


def escape_attribute(text: str) -> str:
    """Escape text for use inside a double-quoted XML attribute."""
    return escape_text(text).replace('"', "&quot;")


def wrap_content(text: str) -> str:
    """Wrap arbitrary text in a CDATA section.

    A literal ``]]>`` inside the text would close the section early, so it is
    split across two adjacent sections. Characters XML forbids are dropped.

    Args:
        text: Raw text, may contain ``<``, ``&`` or ``]]>``

    Returns:
        CDATA-wrapped text safe to embed as element content
    """
    text = remove_invalid_chars(text or "")
    text = text.replace(CDATA_END, f"]]{CDATA_END}{CDATA_START}>")
    return f"{CDATA_START}{text}{CDATA_END}"
