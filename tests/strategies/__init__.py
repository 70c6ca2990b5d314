"""Hypothesis strategies for assetlocalizer property-based testing.

Usage:
    from tests.strategies import string_keys, call_sources, marker_free_text
"""

from __future__ import annotations

import string

from hypothesis import strategies as st
from hypothesis.strategies import composite

from assetlocalizer.constants import EXPRESSION_MARKER, KEY_PREFIX
from assetlocalizer.syntax import js_literal

__all__ = [
    "call_sources",
    "content_hashes",
    "js_identifiers",
    "locale_names",
    "marker_free_text",
    "string_keys",
]

# Any text Python can encode as UTF-8 (no lone surrogates).
string_keys = st.text(
    alphabet=st.characters(blacklist_categories=("Cs",)),
    min_size=1,
    max_size=40,
)

content_hashes = st.text(alphabet="0123456789abcdef", min_size=4, max_size=20)

locale_names = st.sampled_from(["en", "es", "ja", "de", "fr", "pt-BR", "zh-Hant"])


@composite
def js_identifiers(draw: st.DrawFn) -> str:
    """Generate plain ASCII JavaScript identifiers."""
    first = draw(st.sampled_from(string.ascii_letters + "_$"))
    rest = draw(st.text(alphabet=string.ascii_letters + string.digits + "_$", max_size=10))
    return first + rest


@composite
def call_sources(draw: st.DrawFn) -> str:
    """Generate canonical serialized translation calls.

    ``name("key", arg, ...)`` where args are identifiers, numbers or
    double-quoted strings, joined exactly as serialize() joins them.
    """
    name = draw(st.sampled_from(["__", "_n", "i18n.t"]))
    key = js_literal(draw(string_keys))
    extra = draw(
        st.lists(
            st.one_of(
                js_identifiers(),
                st.integers(min_value=0, max_value=10**6).map(str),
                string_keys.map(js_literal),
            ),
            max_size=3,
        )
    )
    return f"{name}({', '.join([key, *extra])})"


marker_free_text = st.text(max_size=400).filter(
    lambda text: KEY_PREFIX not in text and EXPRESSION_MARKER not in text
)
