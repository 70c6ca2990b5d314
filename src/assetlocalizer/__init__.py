"""assetlocalizer - one bundle build, one output asset per locale.

Translation calls such as ``__("hello-key")`` are replaced while modules are
parsed. With a single locale the translation is inserted directly. With
several locales each call becomes a placeholder that survives minification;
after the bundle is built every placeholder is located, resolved and spliced
per locale, with source maps and content hashes kept consistent.

Public API:
    AssetLocalizer - Plugin object built from LocalizeOptions
    BuildSession - Per-build hooks (on_call, localize_assets, finish, ...)
    LocalizeOptions - User configuration
    OutputTemplates - Host output filename templates
    CompilerRegistry - Function name -> localize compiler
    MemoryAssetStore - In-memory asset store
    transform_module - Reference module scanner driving the parse-time hooks

Exceptions:
    LocalizeError - Base exception class
    ConfigurationError - Invalid options, tables or templates
    MissingKeyError - Missing key with throw_on_missing enabled
    LocalizeCompilerError - Compiler lookup or execution failure

Submodules:
    assetlocalizer.placeholder - PlaceholderCodec
    assetlocalizer.locator - AssetTextLocator
    assetlocalizer.splicer - TextSplicer and source map carry-over
    assetlocalizer.content_hash - Per-locale content hash derivation
    assetlocalizer.syntax - Call-expression parser and serializer
"""

# Essential Public API - Minimal exports for clean namespace
from .compiler import CompilerRegistry, LocalizeCompilerContext, default_localize_compiler
from .config import LocalizeOptions, OutputTemplates
from .diagnostics import (
    ConfigurationError,
    LocalizeCompilerError,
    LocalizeError,
    MissingKeyError,
)
from .host import transform_module
from .session import AssetLocalizer, BuildSession
from .store import AssetRecord, MemoryAssetStore

# Version information - Auto-populated from package metadata
try:
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as _get_version
except ImportError as e:
    raise RuntimeError("importlib.metadata unavailable - Python version too old? " + str(e)) from e

try:
    __version__ = _get_version("assetlocalizer")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "AssetLocalizer",
    "AssetRecord",
    "BuildSession",
    "CompilerRegistry",
    "ConfigurationError",
    "LocalizeCompilerContext",
    "LocalizeCompilerError",
    "LocalizeError",
    "LocalizeOptions",
    "MemoryAssetStore",
    "MissingKeyError",
    "OutputTemplates",
    "__version__",
    "default_localize_compiler",
    "transform_module",
]
