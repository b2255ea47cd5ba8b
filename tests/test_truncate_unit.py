"""Unit tests for description truncation."""

from feedrender.truncate import BOUNDARY_MARKERS, truncate


class TestTruncateUnit:
    """Unit tests for truncate with specific inputs."""

    def test_sentence_boundary_beats_nearby_space(self):
        """A full stop close to the cut point wins over a later space."""
        text = "Hello world. This is a test sentence that goes on."

        assert truncate(text, 20) == "Hello world."

    def test_space_preferred_when_far_past_punctuation(self):
        """Without punctuation the cut falls back to the last space."""
        text = "The quick brown fox jumps over the lazy dog"

        assert truncate(text, 20) == "The quick brown"

    def test_comma_boundary_keeps_comma(self):
        assert truncate("Alpha beta gamma, delta", 20) == "Alpha beta gamma,"

    def test_dash_boundary(self):
        assert truncate("abcdefgh-ijklmnop", 12) == "abcdefgh-"

    def test_rightmost_marker_wins_regardless_of_order(self):
        """The exclamation mark is preferred because it is furthest right."""
        text = "First? Second. Third! Fourth"

        assert truncate(text, 25) == "First? Second. Third!"

    def test_no_boundary_cuts_at_max_length(self):
        assert truncate("abcdefghijklmnopqrstuvwxyz", 10) == "abcdefghij"

    def test_zero_max_length_is_opt_out(self):
        """Zero disables both tag stripping and truncation."""
        text = "<p>Keep <b>everything</b> as it is, however long it gets.</p>"

        assert truncate(text, 0) == text

    def test_negative_max_length_is_opt_out(self):
        assert truncate("<i>abc</i>", -1) == "<i>abc</i>"

    def test_short_text_returned_unchanged(self):
        assert truncate("Short text", 50) == "Short text"
        assert truncate("  padded  ", 50) == "  padded  "

    def test_tags_stripped_below_threshold(self):
        assert truncate("<p>Short <b>text</b></p>", 50) == "Short text"

    def test_tags_stripped_before_measuring(self):
        text = "<p>Hello world. <em>This is a test sentence</em> that goes on.</p>"

        assert truncate(text, 20) == "Hello world."

    def test_text_of_exactly_max_length_is_truncated(self):
        """The no-op branch only applies to strictly shorter text."""
        assert truncate("abcde", 5) == "abcde"
        assert truncate("ab cdefghi", 10) == "ab cdefghi"

    def test_leading_whitespace_is_trimmed(self):
        assert truncate("   Hello there, general Kenobi", 12) == "Hello"

    def test_empty_text(self):
        assert truncate("", 10) == ""
        assert truncate("", 0) == ""

    def test_boundary_markers(self):
        assert set(BOUNDARY_MARKERS) == {". ", "? ", "! ", ", ", "; ", "-"}

    def test_escaped_markup_survives_repeated_truncation(self):
        text = "<p>Use &lt;b&gt;bold&lt;/b&gt; tags here</p>"

        once = truncate(text, 100)

        assert once == "Use &lt;b&gt;bold&lt;/b&gt; tags here"
        assert truncate(once, 100) == once

    def test_entities_are_kept_with_and_without_markup(self):
        assert truncate("Fish &amp; Chips", 100) == "Fish &amp; Chips"
        assert truncate("<b>Fish &amp; Chips</b>", 100) == "Fish &amp; Chips"
