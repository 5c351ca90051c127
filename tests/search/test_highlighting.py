"""Tests for search result highlighting."""

import pytest

from recordquery.search.highlighting import (
    Highlighter,
    Segment,
    has_match,
    highlight,
)


def joined(segments):
    return "".join(segment.text for segment in segments)


def marked(segments):
    return [segment.text for segment in segments if segment.matched]


class TestHighlight:
    """Test segment generation."""

    def test_literal_occurrences(self):
        """Every case-insensitive occurrence is marked."""
        segments = highlight("Monterrey Centro, monterrey", "MONTERREY")

        assert marked(segments) == ["Monterrey", "monterrey"]
        assert joined(segments) == "Monterrey Centro, monterrey"

    def test_segment_layout(self):
        """Text around a match becomes unmatched segments."""
        assert highlight("Saltillo Norte", "llo") == [
            Segment("Salti"),
            Segment("llo", matched=True),
            Segment(" Norte"),
        ]

    def test_accent_fallback(self):
        """A match found only after removing accents is mapped back."""
        segments = highlight("José Hernández Ruiz", "hernandez")

        assert marked(segments) == ["Hernández"]
        assert joined(segments) == "José Hernández Ruiz"

    def test_punctuation_fallback(self):
        """A match across removed punctuation covers the original span."""
        segments = highlight("Tel. 81-1234-5678", "811234")

        assert marked(segments) == ["81-1234"]
        assert joined(segments) == "Tel. 81-1234-5678"

    def test_fallback_at_end_of_text(self):
        """A normalized match ending the text leaves no trailing segment."""
        segments = highlight("Nuevo León", "leon")

        assert segments[-1] == Segment("León", matched=True)

    def test_fuzzy_match_is_not_highlighted(self):
        """Text matched only by similarity stays one unmatched segment."""
        segments = highlight("Monterrey", "Monterey")

        assert segments == [Segment("Monterrey")]
        assert not has_match(segments)

    @pytest.mark.parametrize("term", ["(", "a+b", "[", "\\", ".*", "?", "$^", "{2}"])
    def test_regex_metacharacters(self, term):
        """Terms with regex syntax are matched literally and never raise."""
        text = "Total (a+b) [x] \\ .* ? $^ {2}"
        segments = highlight(text, term)

        assert joined(segments) == text
        assert has_match(segments)

    def test_metacharacter_is_not_a_pattern(self):
        """A dot does not match arbitrary characters."""
        assert not has_match(highlight("abc", "."))

    def test_empty_text(self):
        """Empty text gives no segments."""
        assert highlight("", "abc") == []
        assert highlight(None, "abc") == []

    def test_blank_term(self):
        """A blank term leaves the text unmarked."""
        assert highlight("Durango", "  ") == [Segment("Durango")]

    def test_term_is_trimmed(self):
        """Surrounding spaces in the term are ignored."""
        assert marked(highlight("Durango", " Dur ")) == ["Dur"]


class TestHighlighter:
    """Test the Highlighter class."""

    def test_highlight_record(self):
        """Each listed field gets its own segments."""
        highlighter = Highlighter()
        record = {"name": "Rosa Martínez", "state": "Nuevo León", "id": 7}

        result = highlighter.highlight_record(record, "martinez", ["name", "id", "nope"])

        assert marked(result["name"]) == ["Martínez"]
        assert result["id"] == [Segment("7")]
        assert result["nope"] == []

    def test_to_markup(self):
        """Matches are wrapped and text is escaped."""
        highlighter = Highlighter()
        segments = highlighter.highlight_text("<b>Rosa</b> & co", "rosa")

        assert highlighter.to_markup(segments) == "&lt;b&gt;<mark>Rosa</mark>&lt;/b&gt; &amp; co"

    def test_custom_tag(self):
        """The wrapping tag is configurable."""
        highlighter = Highlighter(highlight_tag="em")
        segments = highlighter.highlight_text("Durango", "dur")

        assert highlighter.to_markup(segments) == "<em>Dur</em>ango"
        assert highlighter.to_markup(segments, tag="strong") == "<strong>Dur</strong>ango"
