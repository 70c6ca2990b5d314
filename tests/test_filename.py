"""Tests for output filename templating."""

import pytest

from assetlocalizer.constants import ASSET_NAME_PLACEHOLDER
from assetlocalizer.content_hash import ContentHashMap, derive_hash
from assetlocalizer.diagnostics import ConfigurationError
from assetlocalizer.filename import (
    AssetPathHook,
    content_hashes_of,
    has_locale_token,
    interpolate_filename_template,
    localize_asset_info,
    localize_asset_name,
)


class TestInterpolation:
    """[locale] token handling."""

    def test_has_locale_token(self) -> None:
        """Only the exact token counts."""
        assert has_locale_token("[name].[locale].js")
        assert not has_locale_token("[name].locale.js")

    def test_every_token_replaced(self) -> None:
        """All occurrences are replaced."""
        assert interpolate_filename_template("[locale]/[name].[locale].js", "es") == "es/[name].es.js"

    def test_path_hook_with_callable_template(self) -> None:
        """Callable templates receive the host's path context."""
        hook = AssetPathHook(ASSET_NAME_PLACEHOLDER)

        def template(context: object) -> str:
            return "[name].[locale].js" if context else "fallback.[locale].js"

        assert hook(template, {"chunk": "main"}) == f"[name].{ASSET_NAME_PLACEHOLDER}.js"
        assert hook(template) == f"fallback.{ASSET_NAME_PLACEHOLDER}.js"

    def test_path_hook_without_token(self) -> None:
        """Plain paths pass through; callable templates must yield the token when required."""
        hook = AssetPathHook("en", require_token=True)
        assert hook("static/logo.png") == "static/logo.png"
        assert AssetPathHook("en")(lambda context: "[name].js") == "[name].js"
        with pytest.raises(ConfigurationError, match=r"must include \[locale\]"):
            hook(lambda context: "[name].js")


class TestLocalizeAssetName:
    """Per-locale asset names."""

    def test_placeholder_replaced(self) -> None:
        """The name placeholder becomes the locale."""
        assert localize_asset_name(f"main.{ASSET_NAME_PLACEHOLDER}.js", "ja") == "main.ja.js"

    def test_content_hashes_derived(self) -> None:
        """Original content hashes in the name are replaced per locale."""
        name = f"main.{ASSET_NAME_PLACEHOLDER}.0123abcd.js"
        expected = f"main.es.{derive_hash('0123abcd', 'es')}.js"
        assert localize_asset_name(name, "es", ["0123abcd"]) == expected

    def test_hash_map_consulted(self) -> None:
        """The shared hash map supplies the derived value."""
        hash_map = ContentHashMap(["0123abcd"], ("en",))
        name = localize_asset_name("0123abcd.js", "en", ["0123abcd"], hash_map)
        assert name == f"{hash_map['0123abcd']['en']}.js"


class TestLocalizeAssetInfo:
    """Per-locale asset metadata."""

    def test_string_contenthash(self) -> None:
        """A single hash stays a single value and the locale is recorded."""
        info = {"contenthash": "0123abcd", "immutable": True}
        localized = localize_asset_info(info, "en")
        assert localized == {
            "contenthash": derive_hash("0123abcd", "en"),
            "immutable": True,
            "locale": "en",
        }
        assert info == {"contenthash": "0123abcd", "immutable": True}

    def test_list_contenthash(self) -> None:
        """A hash list stays a list."""
        localized = localize_asset_info({"contenthash": ["aa11", "bb22"]}, "es")
        assert localized["contenthash"] == [derive_hash("aa11", "es"), derive_hash("bb22", "es")]

    def test_no_contenthash(self) -> None:
        """Metadata without hashes only gains the locale."""
        assert localize_asset_info({}, "es") == {"locale": "es"}

    def test_content_hashes_of(self) -> None:
        """Hashes read from str or list metadata."""
        assert content_hashes_of({"contenthash": "ab"}) == ("ab",)
        assert content_hashes_of({"contenthash": ["ab", "cd"]}) == ("ab", "cd")
        assert content_hashes_of({}) == ()
