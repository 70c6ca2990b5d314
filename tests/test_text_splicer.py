"""Tests for TextSplicer."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from assetlocalizer.sourcemap import decode_mappings, encode_mappings
from assetlocalizer.splicer import Edit, SpliceRangeError, TextSplicer


class TestTextSplicer:
    """Range replacement over the original text."""

    def test_offsets_refer_to_original_text(self) -> None:
        """Later edits use original offsets regardless of earlier lengths."""
        splicer = TextSplicer("a = X; b = Y;")
        splicer.replace(4, 5, '"long replacement"')
        splicer.replace(11, 12, "2")
        assert splicer.apply().text == 'a = "long replacement"; b = 2;'

    def test_submission_order_irrelevant(self) -> None:
        """Edits may be scheduled in any order."""
        first = TextSplicer("0123456789")
        first.replace(8, 9, "x")
        first.replace(1, 2, "y")
        second = TextSplicer("0123456789")
        second.extend([Edit(1, 2, "y"), Edit(8, 9, "x")])
        assert first.apply().text == second.apply().text == "0y234567x9"

    def test_insertion_and_deletion(self) -> None:
        """Zero-width edits insert; empty replacements delete."""
        splicer = TextSplicer("abcdef")
        splicer.replace(0, 0, ">")
        splicer.replace(2, 4, "")
        splicer.replace(6, 6, "<")
        assert splicer.apply().text == ">abef<"

    def test_insertion_before_replacement_at_same_offset(self) -> None:
        """An insertion at a replacement's start lands before it."""
        splicer = TextSplicer("abc")
        splicer.replace(1, 2, "B")
        splicer.replace(1, 1, "+")
        assert splicer.apply().text == "a+Bc"

    def test_no_edits(self) -> None:
        """Without edits the text is returned unchanged."""
        result = TextSplicer("same").apply()
        assert result.text == "same"
        assert result.source_map is None

    def test_overlap_rejected(self) -> None:
        """Overlapping ranges are a programming error."""
        splicer = TextSplicer("abcdef")
        splicer.replace(0, 3, "x")
        splicer.replace(2, 4, "y")
        with pytest.raises(SpliceRangeError, match="overlaps"):
            splicer.apply()

    def test_out_of_range_rejected(self) -> None:
        """Edits past the end are rejected."""
        splicer = TextSplicer("abc")
        splicer.replace(2, 9, "x")
        with pytest.raises(SpliceRangeError, match="exceeds text length"):
            splicer.apply()

    def test_inverted_range_rejected(self) -> None:
        """end < start is invalid at construction."""
        with pytest.raises(SpliceRangeError):
            Edit(3, 1, "x")

    def test_len_counts_scheduled_edits(self) -> None:
        """len() reports scheduled edits."""
        splicer = TextSplicer("abc")
        splicer.replace(0, 1, "x")
        assert len(splicer) == 1
        assert splicer.original == "abc"

    @given(st.text(min_size=1, max_size=60), st.data())
    def test_matches_naive_splicing(self, text: str, data: st.DataObject) -> None:
        """Result equals applying the same edits right to left."""
        cuts = sorted(data.draw(st.lists(st.integers(0, len(text)), max_size=8)))
        ranges = list(zip(cuts[::2], cuts[1::2], strict=False))
        replacements = [data.draw(st.text(max_size=5)) for _ in ranges]

        splicer = TextSplicer(text)
        for (start, end), replacement in zip(ranges, replacements, strict=True):
            splicer.replace(start, end, replacement)
        expected = text
        for (start, end), replacement in reversed(list(zip(ranges, replacements, strict=True))):
            expected = expected[:start] + replacement + expected[end:]
        assert splicer.apply().text == expected

    def test_source_map_carried(self) -> None:
        """A supplied map is remapped and renamed."""
        source_map = {
            "version": 3,
            "file": "main.js",
            "sources": ["a.js"],
            "mappings": encode_mappings([[(0, 0, 0, 0), (4, 0, 0, 4), (6, 0, 0, 9)]]),
        }
        splicer = TextSplicer("x = PH; y")
        splicer.replace(4, 6, '"Hello"')
        result = splicer.apply(source_map, file="main.en.js")
        assert result.text == 'x = "Hello"; y'
        assert result.source_map is not None
        assert result.source_map["file"] == "main.en.js"
        assert result.source_map["sources"] == ["a.js"]
        assert decode_mappings(result.source_map["mappings"]) == [
            [(0, 0, 0, 0), (4, 0, 0, 4), (11, 0, 0, 9)]
        ]
