"""Localize compilers and the invoker that dispatches placeholders to them.

A localize compiler turns one translation call into replacement code for one
locale. Compilers are registered by the exact function name they handle:

    def plural(context, arguments, locale_name):
        forms = context.resolve_key()
        return f"({arguments[1]} === 1 ? {js_literal(forms[0])} : {js_literal(forms[1])})"

    registry = CompilerRegistry()
    registry.register(plural, name="_n")

Compiler output is opaque replacement text; it is spliced in as returned.

Architecture:
    - LocalizeCompiler: Protocol every compiler satisfies
    - LocalizeCompilerContext: lookup and diagnostics available to a compiler
    - CompilerRegistry: name -> compiler mapping with dict-like introspection
    - default_localize_compiler: literal lookup used when none is configured
    - LocalizeInvoker: resolves decoded placeholder payloads for a locale

Python 3.13+.
"""

import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from assetlocalizer.diagnostics import (
    Diagnostic,
    DiagnosticCollector,
    ErrorTemplate,
    LocalizeCompilerError,
)
from assetlocalizer.localization import LocaleData
from assetlocalizer.placeholder import ExpressionPayload, KeyPayload, Payload
from assetlocalizer.syntax import CallExpression, js_literal, serialize
from assetlocalizer.types import LocaleName, LocalizedValue, StringKey

__all__ = [
    "CompilerRegistry",
    "LocalizeCompiler",
    "LocalizeCompilerContext",
    "LocalizeInvoker",
    "default_localize_compiler",
]

logger = logging.getLogger(__name__)


class LocalizeCompiler(Protocol):
    """Protocol for localize compilers.

    Compilers receive:
    - context: lookup and diagnostics for the call being compiled
    - arguments: each call argument serialized back to source text
    - locale_name: the locale being produced

    and return JavaScript code that replaces the whole call.
    """

    def __call__(
        self,
        context: "LocalizeCompilerContext",
        arguments: Sequence[str],
        locale_name: LocaleName,
        /,
    ) -> str:
        ...  # pragma: no cover  # Protocol stub - not executable


@dataclass(frozen=True, slots=True)
class LocalizeCompilerContext:
    """What a compiler can see and do while compiling one call.

    Attributes:
        call_node: The parsed translation call
        locale_name: Locale being produced
        locales: Loaded locale tables
        diagnostics: Build diagnostics sink
    """

    call_node: CallExpression
    locale_name: LocaleName
    locales: LocaleData
    diagnostics: DiagnosticCollector

    @property
    def key(self) -> StringKey | None:
        """Value of the first argument when it is a string literal."""
        first = self.call_node.first_string_argument
        return first.value if first is not None else None

    @property
    def call_source(self) -> str:
        """The call serialized back to source text."""
        return serialize(self.call_node)

    def resolve_key(self, key: StringKey | None = None) -> LocalizedValue | None:
        """Look up key (default: the call's first argument) in this locale.

        Returns:
            The localized value, or None when absent
        """
        lookup = key if key is not None else self.key
        if lookup is None:
            return None
        return self.locales.lookup(self.locale_name, lookup)

    def emit_warning(self, message: str) -> None:
        """Report a build warning (deduplicated by message)."""
        self.report(ErrorTemplate.compiler_warning(message, locale=self.locale_name))

    def emit_error(self, message: str) -> None:
        """Report a build error (deduplicated by message)."""
        self.report(ErrorTemplate.compiler_error(message, locale=self.locale_name))

    def report(self, diagnostic: Diagnostic) -> None:
        """Record a prepared diagnostic."""
        self.diagnostics.add(diagnostic)


def default_localize_compiler(
    context: LocalizeCompilerContext, arguments: Sequence[str], locale_name: LocaleName, /
) -> str:
    """Replace the call with the JSON literal of its translation.

    Falls back to the key itself when the locale lacks it. A call with more
    than one argument is reported as confusing usage and compiled to the
    raw key; a call without a string key is left as written.
    """
    key = context.key
    if key is None:
        context.report(ErrorTemplate.confusing_call(context.call_source, locale=locale_name))
        return context.call_source
    if len(arguments) > 1:
        context.report(ErrorTemplate.confusing_call(context.call_source, locale=locale_name))
        return js_literal(key)
    value = context.resolve_key()
    return js_literal(key if value is None else value)


class CompilerRegistry:
    """Registry of localize compilers keyed by exact function name.

    Supports dict-like introspection:
        - __iter__: Iterate over function names
        - __len__: Count registered compilers
        - __contains__: Check if a compiler exists (supports 'in' operator)

    Example:
        >>> registry = CompilerRegistry()
        >>> registry.register(default_localize_compiler, name="__")
        >>> "__" in registry
        True
        >>> len(registry)
        1
    """

    __slots__ = ("_compilers",)

    def __init__(self) -> None:
        self._compilers: dict[str, LocalizeCompiler] = {}

    @classmethod
    def from_mapping(cls, compilers: Mapping[str, LocalizeCompiler]) -> "CompilerRegistry":
        """Build a registry from a name -> compiler mapping."""
        registry = cls()
        for name, compiler in compilers.items():
            registry.register(compiler, name=name)
        return registry

    def register(self, compiler: LocalizeCompiler, *, name: str | None = None) -> None:
        """Register compiler under name (default: the callable's __name__).

        Raises:
            TypeError: If compiler is not callable
            ValueError: If the resulting name is empty
        """
        if not callable(compiler):
            msg = f"Localize compiler must be callable, got {type(compiler).__name__}"
            raise TypeError(msg)
        function_name = name if name is not None else getattr(compiler, "__name__", "")
        if not function_name:
            msg = "Localize compiler name must not be empty"
            raise ValueError(msg)
        self._compilers[function_name] = compiler

    def get(self, function_name: str) -> LocalizeCompiler | None:
        """Compiler registered for function_name, or None."""
        return self._compilers.get(function_name)

    def list_compilers(self) -> list[str]:
        """Registered function names in registration order."""
        return list(self._compilers)

    def copy(self) -> "CompilerRegistry":
        """Shallow copy; later registrations do not affect the original."""
        new_registry = CompilerRegistry()
        new_registry._compilers = self._compilers.copy()
        return new_registry

    def __iter__(self) -> Iterator[str]:
        return iter(self._compilers)

    def __len__(self) -> int:
        return len(self._compilers)

    def __contains__(self, function_name: object) -> bool:
        return function_name in self._compilers

    def __repr__(self) -> str:
        return f"CompilerRegistry(compilers={len(self._compilers)})"


class LocalizeInvoker:
    """Produces the final replacement code for a payload in one locale.

    Key payloads are a table lookup. Expression payloads are dispatched to
    the compiler registered for the call's function name, or to
    default_localize_compiler when no registry is configured.

    Thread-safe as long as the registered compilers are.
    """

    __slots__ = ("_compilers", "_diagnostics", "_locales")

    def __init__(
        self,
        locales: LocaleData,
        diagnostics: DiagnosticCollector,
        compilers: CompilerRegistry | None = None,
    ) -> None:
        self._locales = locales
        self._diagnostics = diagnostics
        self._compilers = compilers

    def invoke(self, locale: LocaleName, payload: Payload) -> str:
        """Replacement code for payload in locale.

        Raises:
            LocalizeCompilerError: Unknown compiler, compiler failure, or a
                non-string result
        """
        match payload:
            case KeyPayload(key=key):
                return self.localize_key(locale, key)
            case ExpressionPayload(call=call):
                return self.compile_call(locale, call)

    def localize_key(self, locale: LocaleName, key: StringKey) -> str:
        """JSON literal of key's value in locale, or of key itself if absent."""
        value = self._locales.lookup(locale, key)
        return js_literal(key if value is None else value)

    def compile_call(self, locale: LocaleName, call: CallExpression) -> str:
        """Run the compiler for call in locale.

        Raises:
            LocalizeCompilerError: See invoke()
        """
        function_name = call.function_name
        compiler = self._resolve(function_name)
        context = LocalizeCompilerContext(call, locale, self._locales, self._diagnostics)
        arguments = [serialize(argument) for argument in call.arguments]

        # Only TypeError and ValueError signal bad input to the compiler;
        # anything else is a bug in the compiler and propagates unchanged.
        try:
            result = compiler(context, arguments, locale)
        except (TypeError, ValueError) as e:
            diagnostic = ErrorTemplate.compiler_failed(function_name, str(e), locale=locale)
            raise LocalizeCompilerError(diagnostic) from e
        if not isinstance(result, str):
            diagnostic = ErrorTemplate.compiler_returned_non_string(
                function_name, type(result).__name__, locale=locale
            )
            raise LocalizeCompilerError(diagnostic)

        logger.debug("Compiled %s for %s", function_name, locale)
        return result

    def _resolve(self, function_name: str) -> Callable[..., object]:
        if self._compilers is None:
            return default_localize_compiler
        compiler = self._compilers.get(function_name)
        if compiler is None:
            raise LocalizeCompilerError(ErrorTemplate.compiler_not_found(function_name))
        return compiler
