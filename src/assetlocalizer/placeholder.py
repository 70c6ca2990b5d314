"""Placeholder encoding and decoding.

A translation call is rewritten into a placeholder before the bundle is
minified. Placeholders must survive minification untouched and be found
again reliably, so they are built around digest-derived marker tokens:

Key placeholder (string-literal encoding)::

    "<KEY_PREFIX><base64(utf-8 key)><KEY_SUFFIX>"

    Valid wherever a string literal is valid. The key is base64 encoded so
    no quote or backslash can appear inside, and a minifier merging it with
    neighbouring literals leaves the marker intact.

Expression placeholder (call-expression encoding)::

    MARKER(<serialized call>,MARKER)

    The payload stays code, so a minifier may rename identifiers inside it
    and the compiler still sees valid references. The trailing marker
    delimits the end without matching parentheses.

Bundlers that wrap each module in ``eval("...")`` apply JSON string
escaping to the whole module. Decoding detects that (every double quote is
backslash-escaped) and undoes it before parsing.

Python 3.13+.
"""

import base64
import binascii
import json
import re
from dataclasses import dataclass, field

from assetlocalizer.constants import EXPRESSION_MARKER, KEY_PREFIX, KEY_SUFFIX
from assetlocalizer.diagnostics import CallSyntaxError, ErrorTemplate, PlaceholderDecodeError
from assetlocalizer.enums import PlaceholderKind
from assetlocalizer.syntax import CallExpression, js_literal, parse_call_expression
from assetlocalizer.types import StringKey

__all__ = [
    "ExpressionPayload",
    "KeyPayload",
    "Payload",
    "PlaceholderCodec",
]

_QUOTES = "\"'`"


@dataclass(frozen=True, slots=True)
class KeyPayload:
    """Decoded key placeholder."""

    key: StringKey

    @property
    def kind(self) -> PlaceholderKind:
        return PlaceholderKind.KEY


@dataclass(frozen=True, slots=True)
class ExpressionPayload:
    """Decoded expression placeholder.

    Attributes:
        source: Serialized call text as found in the asset (unescaped)
        call: Re-parsed call expression
    """

    source: str
    call: CallExpression

    @property
    def kind(self) -> PlaceholderKind:
        return PlaceholderKind.EXPRESSION


type Payload = KeyPayload | ExpressionPayload


def _decode_failure(reason: str) -> PlaceholderDecodeError:
    return PlaceholderDecodeError(ErrorTemplate.placeholder_decode_failed(reason))


@dataclass(frozen=True, slots=True)
class PlaceholderCodec:
    """Encodes payloads into placeholder text and decodes them back.

    The marker tokens default to the package constants; encoder and decoder
    must share one codec configuration.

    Example:
        >>> codec = PlaceholderCodec()
        >>> codec.decode(codec.encode_key("hello-key")).key
        'hello-key'
        >>> codec.decode(codec.encode_expression('__("k", {a})')).source
        '__("k", {a})'
    """

    key_prefix: str = KEY_PREFIX
    key_suffix: str = KEY_SUFFIX
    marker: str = EXPRESSION_MARKER
    _trailer: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for name in ("key_prefix", "key_suffix", "marker"):
            if not getattr(self, name):
                msg = f"PlaceholderCodec.{name} must not be empty"
                raise ValueError(msg)
        trailer = re.compile(r"\s*,\s*" + re.escape(self.marker) + r"\s*\)")
        object.__setattr__(self, "_trailer", trailer)

    @property
    def trailer_pattern(self) -> re.Pattern[str]:
        """Pattern matching the ``,MARKER)`` terminator (whitespace tolerant)."""
        return self._trailer

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def encode_key(self, key: StringKey) -> str:
        """Key placeholder as a double-quoted string literal.

        Raises:
            UnicodeEncodeError: If key contains lone surrogates
        """
        body = base64.b64encode(key.encode("utf-8")).decode("ascii")
        return js_literal(f"{self.key_prefix}{body}{self.key_suffix}")

    def encode_expression(self, serialized_call: str) -> str:
        """Expression placeholder wrapping already-serialized call text."""
        return f"{self.marker}({serialized_call},{self.marker})"

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def decode(self, text: str) -> Payload:
        """Decode a complete placeholder occurrence.

        Accepts both encodings, quoted or escaped-quoted key literals, and
        whitespace a minifier may have left inside the call form.

        Raises:
            PlaceholderDecodeError: Text is not a well-formed placeholder
        """
        text = text.strip()
        if text.startswith(self.marker):
            opening = text.find("(", len(self.marker))
            trailer = self._trailer.search(text, opening + 1) if opening != -1 else None
            if (
                opening == -1
                or text[len(self.marker) : opening].strip()
                or trailer is None
                or trailer.end() != len(text)
            ):
                raise _decode_failure("malformed expression placeholder")
            return self.decode_expression_body(text[opening + 1 : trailer.start()])

        if text.startswith('\\"') and text.endswith('\\"') and len(text) >= 4:
            text = text[2:-2]
        elif len(text) >= 2 and text[0] in _QUOTES and text[-1] == text[0]:
            text = text[1:-1]
        if not (text.startswith(self.key_prefix) and text.endswith(self.key_suffix)):
            raise _decode_failure("missing key placeholder markers")
        return self.decode_key_body(text[len(self.key_prefix) : len(text) - len(self.key_suffix)])

    def decode_key_body(self, body: str) -> KeyPayload:
        """Decode the base64 section of a key placeholder.

        Raises:
            PlaceholderDecodeError: Invalid base64 or UTF-8
        """
        try:
            key = base64.b64decode(body, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise _decode_failure(str(e)) from e
        return KeyPayload(key)

    def decode_expression_body(self, body: str) -> ExpressionPayload:
        """Decode the call text between ``MARKER(`` and ``,MARKER)``.

        Raises:
            PlaceholderDecodeError: Text does not parse as one call expression
        """
        source = body.strip()
        if self.is_escaped(source):
            source = self.unescape(source)
        try:
            call = parse_call_expression(source)
        except CallSyntaxError as e:
            raise _decode_failure(str(e)) from e
        return ExpressionPayload(source, call)

    # ------------------------------------------------------------------
    # Escaping
    # ------------------------------------------------------------------

    @staticmethod
    def is_escaped(text: str) -> bool:
        """True when every double quote in text is backslash-escaped.

        That is the signature of a module embedded in a JSON string literal
        (``eval("...")`` wrapping). Text without double quotes is not escaped.
        """
        found = False
        index = text.find('"')
        while index != -1:
            backslashes = 0
            back = index - 1
            while back >= 0 and text[back] == "\\":
                backslashes += 1
                back -= 1
            if backslashes % 2 == 0:
                return False
            found = True
            index = text.find('"', index + 1)
        return found

    @staticmethod
    def unescape(text: str) -> str:
        """Undo JSON string escaping.

        Raises:
            PlaceholderDecodeError: Text is not valid JSON string content
        """
        try:
            return json.loads(f'"{text}"')
        except json.JSONDecodeError as e:
            raise _decode_failure(str(e)) from e

    @staticmethod
    def escape(text: str) -> str:
        """Apply JSON string escaping (inverse of unescape)."""
        return json.dumps(text, ensure_ascii=False)[1:-1]
