"""Tests for placeholder encoding and decoding."""

import base64

import pytest
from hypothesis import given

from assetlocalizer.constants import EXPRESSION_MARKER, KEY_PREFIX, KEY_SUFFIX
from assetlocalizer.diagnostics import PlaceholderDecodeError
from assetlocalizer.enums import PlaceholderKind
from assetlocalizer.placeholder import ExpressionPayload, KeyPayload, PlaceholderCodec
from assetlocalizer.syntax import serialize
from tests.strategies import call_sources, string_keys

CODEC = PlaceholderCodec()


class TestKeyPlaceholders:
    """String-literal encoding of bare keys."""

    def test_encoded_form(self) -> None:
        """A key placeholder is a double-quoted literal around base64 text."""
        encoded = CODEC.encode_key("hello-key")
        body = base64.b64encode(b"hello-key").decode("ascii")
        assert encoded == f'"{KEY_PREFIX}{body}{KEY_SUFFIX}"'

    @given(string_keys)
    def test_key_round_trip(self, key: str) -> None:
        """decode(encode_key(k)) returns k."""
        payload = CODEC.decode(CODEC.encode_key(key))
        assert payload == KeyPayload(key)
        assert payload.kind is PlaceholderKind.KEY

    @given(string_keys)
    def test_encoded_key_has_no_quotes_or_backslashes(self, key: str) -> None:
        """Only the outer quotes appear, whatever the key contains."""
        inner = CODEC.encode_key(key)[1:-1]
        assert '"' not in inner
        assert "\\" not in inner

    @pytest.mark.parametrize("quote", ["'", "`"])
    def test_other_quote_styles_decode(self, quote: str) -> None:
        """A minifier may switch the quote style of the literal."""
        inner = CODEC.encode_key("k")[1:-1]
        assert CODEC.decode(f"{quote}{inner}{quote}") == KeyPayload("k")

    def test_escaped_quotes_decode(self) -> None:
        """The backslash-escaped form found inside eval() strings decodes."""
        inner = CODEC.encode_key("k")[1:-1]
        assert CODEC.decode(f'\\"{inner}\\"') == KeyPayload("k")

    def test_unquoted_body_decodes(self) -> None:
        """The marker text alone (merged into a larger literal) decodes."""
        inner = CODEC.encode_key("こんにちは")[1:-1]
        assert CODEC.decode(inner) == KeyPayload("こんにちは")

    @pytest.mark.parametrize(
        "body",
        ["not base64!", "YWJ", base64.b64encode(b"\xff\xfe").decode("ascii")],
    )
    def test_invalid_body_raises(self, body: str) -> None:
        """Invalid base64 or non-UTF-8 bytes are decode failures."""
        with pytest.raises(PlaceholderDecodeError):
            CODEC.decode_key_body(body)

    def test_missing_markers_raise(self) -> None:
        """A plain literal is not a placeholder."""
        with pytest.raises(PlaceholderDecodeError, match="missing key placeholder markers"):
            CODEC.decode('"hello"')


class TestExpressionPlaceholders:
    """Call-expression encoding."""

    def test_encoded_form(self) -> None:
        """The call is wrapped between two markers."""
        encoded = CODEC.encode_expression('__("k", a)')
        assert encoded == f'{EXPRESSION_MARKER}(__("k", a),{EXPRESSION_MARKER})'

    @given(call_sources())
    def test_expression_round_trip(self, source: str) -> None:
        """The decoded call serializes back to the encoded text."""
        payload = CODEC.decode(CODEC.encode_expression(source))
        assert isinstance(payload, ExpressionPayload)
        assert payload.kind is PlaceholderKind.EXPRESSION
        assert payload.source == source
        assert serialize(payload.call) == source

    def test_minifier_whitespace_tolerated(self) -> None:
        """Whitespace around the trailer and the call is accepted."""
        text = f'{EXPRESSION_MARKER}( __( "k" , n ) , {EXPRESSION_MARKER} )'
        payload = CODEC.decode(text)
        assert isinstance(payload, ExpressionPayload)
        assert serialize(payload.call) == '__("k", n)'

    def test_renamed_identifiers_survive(self) -> None:
        """Arguments renamed by a minifier are carried through unchanged."""
        payload = CODEC.decode(CODEC.encode_expression('_n("apple", e)'))
        assert isinstance(payload, ExpressionPayload)
        assert serialize(payload.call.arguments[1]) == "e"

    def test_escaped_body_is_unescaped(self) -> None:
        """An eval-escaped call is unescaped before parsing."""
        escaped = PlaceholderCodec.escape('__("k", "a\\nb")')
        payload = CODEC.decode(CODEC.encode_expression(escaped))
        assert isinstance(payload, ExpressionPayload)
        assert payload.source == '__("k", "a\\nb")'
        assert payload.call.first_string_argument is not None
        assert payload.call.first_string_argument.value == "k"

    @pytest.mark.parametrize(
        "text",
        [
            f'{EXPRESSION_MARKER}(__("k")',
            f'{EXPRESSION_MARKER}(__("k"),{EXPRESSION_MARKER}) tail',
            f'{EXPRESSION_MARKER}(not a call,{EXPRESSION_MARKER})',
            f'{EXPRESSION_MARKER}x(__("k"),{EXPRESSION_MARKER})',
        ],
    )
    def test_malformed_expression_raises(self, text: str) -> None:
        """Missing trailer, trailing text or a non-call body fail to decode."""
        with pytest.raises(PlaceholderDecodeError):
            CODEC.decode(text)


class TestEscaping:
    """Detection and reversal of eval() string escaping."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ('__(\\"k\\")', True),
            ('__("k")', False),
            ('a \\\\"b', False),
            ("no quotes at all", False),
        ],
    )
    def test_is_escaped(self, text: str, expected: bool) -> None:
        """Escaped means every double quote has an odd run of backslashes."""
        assert PlaceholderCodec.is_escaped(text) is expected

    @given(string_keys)
    def test_escape_unescape_inverse(self, value: str) -> None:
        """unescape(escape(s)) == s."""
        assert PlaceholderCodec.unescape(PlaceholderCodec.escape(value)) == value

    def test_invalid_escape_raises(self) -> None:
        """Text that is not JSON string content fails to unescape."""
        with pytest.raises(PlaceholderDecodeError):
            PlaceholderCodec.unescape("\\q")


class TestCodecConfiguration:
    """Custom marker tokens."""

    def test_custom_markers_round_trip(self) -> None:
        """Encoder and decoder sharing custom markers agree."""
        codec = PlaceholderCodec(key_prefix="<<", key_suffix=">>", marker="MK")
        assert codec.decode(codec.encode_key("k")) == KeyPayload("k")
        payload = codec.decode(codec.encode_expression('t("k")'))
        assert isinstance(payload, ExpressionPayload)

    def test_empty_marker_rejected(self) -> None:
        """Empty marker tokens are invalid."""
        with pytest.raises(ValueError, match="must not be empty"):
            PlaceholderCodec(marker="")
