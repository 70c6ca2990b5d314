"""Minimal bundler used by end-to-end tests.

Drives a BuildSession the way a host build would: every module goes through
transform_module(), the results are concatenated into one bundle asset whose
name comes from the filename hook, and the post-build pass runs against a
MemoryAssetStore.

Modules export values with lines of the form ``exports["id"] = <expr>;`` so
the built output can be "evaluated" by decoding each exported literal.
"""

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from assetlocalizer import (
    AssetLocalizer,
    BuildSession,
    MemoryAssetStore,
    OutputTemplates,
    transform_module,
)
from assetlocalizer.diagnostics import DiagnosticCollector

_EVAL_LINE = re.compile(r"^eval\((\".*\")\);$")
_EXPORT_LINE = re.compile(r'^exports\[("[^"]*")\] = (.*);$')


@dataclass
class BuildOutput:
    """Everything a test inspects after a build."""

    session: BuildSession
    store: MemoryAssetStore
    diagnostics: DiagnosticCollector
    bundle_name: str
    produced: dict[str, tuple[str, ...]]

    def code_for(self, name: str) -> str:
        record = self.store.get(name)
        assert record is not None, f"{name} not emitted; have {self.store.names()}"
        return record.code


def build(
    localizer: AssetLocalizer,
    modules: Mapping[str, str],
    *,
    filename: str = "[name].[locale].js",
    eval_wrap: bool = False,
    source_map: Mapping[str, Any] | None = None,
) -> BuildOutput:
    """Build modules into one "main" bundle and localize it."""
    session = localizer.begin_build(OutputTemplates(filename, filename))

    pieces = []
    for module_id, source in modules.items():
        code = transform_module(session, source, module_id)
        pieces.append(f"eval({json.dumps(code, ensure_ascii=False)});" if eval_wrap else code)
    bundle = "\n".join(pieces)

    name = session.asset_path(filename, {"name": "main"}).replace("[name]", "main")
    store = MemoryAssetStore(chunks={"main": [name]})
    store.emit_asset(name, bundle, source_map, {})

    produced = session.localize_assets(store)
    diagnostics = session.finish()
    return BuildOutput(session, store, diagnostics, name, produced)


def evaluate(code: str) -> dict[str, Any]:
    """Exported values of built bundle code.

    Raises:
        AssertionError: A line is neither an export nor an eval wrapper
    """
    exports: dict[str, Any] = {}
    for line in code.splitlines():
        line = line.strip()
        if not line:
            continue
        wrapped = _EVAL_LINE.match(line)
        if wrapped is not None:
            exports.update(evaluate(json.loads(wrapped.group(1))))
            continue
        match = _EXPORT_LINE.match(line)
        assert match is not None, f"unexpected line {line!r}"
        exports[json.loads(match.group(1))] = json.loads(match.group(2))
    return exports
