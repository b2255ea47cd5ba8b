"""Boundary-aware truncation of item descriptions."""

from .xml_escape import strip_tags

# Preferred cut points. Only the rightmost match counts, so order is irrelevant.
BOUNDARY_MARKERS = (". ", "? ", "! ", ", ", "; ", "-")


def _rightmost_boundary(text: str) -> int:
    """Index of the trailing character of the rightmost boundary marker, or 0."""
    best = 0
    for marker in BOUNDARY_MARKERS:
        pos = text.rfind(marker)
        if pos != -1:
            best = max(best, pos + len(marker) - 1)
    return best


def truncate(text: str, max_length: int) -> str:
    """Bound text to max_length characters at a natural boundary.

    Tags are stripped first. Text shorter than max_length is returned as-is.
    Longer text is cut at the rightmost sentence or clause boundary inside the
    first max_length characters. A later space wins only when it lies more
    than a quarter of max_length past that boundary. With no boundary at all
    the text is cut at exactly max_length.

    A max_length of 0 (or below) disables both stripping and truncation.

    Args:
        text: Text to bound, may contain HTML markup
        max_length: Maximum length of the result

    Returns:
        Text of at most max_length characters when truncation applies
    """
    if max_length <= 0:
        return text

    text = strip_tags(text)
    if len(text) < max_length:
        return text

    prefix = text[:max_length].strip()

    cut = _rightmost_boundary(prefix)
    space = prefix.rfind(" ")
    if space > cut and (space - max_length / 4) > cut:
        cut = space

    if cut == 0:
        return prefix[:max_length]

    return prefix[: cut + 1].strip()
