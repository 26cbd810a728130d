"""Function Registry - loads server-side JavaScript functions from disk.

Namespace convention:
    mongo_functions/map_views.js          -> "map_views"
    mongo_functions/reports/daily_sum.js  -> "reports.daily_sum"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from bson.code import Code

from doc_query.core.exceptions import DuplicateFunctionError, FunctionNotFoundError


class FunctionRegistry:
    """Loads and caches JavaScript function bodies from a directory structure.

    The registry is immutable after loading. `get` wraps the cached source in
    a fresh `bson.Code`, optionally with a scope, ready to pass to
    `Repository.map_reduce`.

    Args:
        root_dir: Root directory containing .js files.

    Raises:
        DuplicateFunctionError: If two files resolve to the same name.
    """

    def __init__(self, root_dir: Path | str) -> None:
        self._root_dir = Path(root_dir)
        self._sources: dict[str, str] = {}
        self._paths: dict[str, Path] = {}
        self._load()

    def _load(self) -> None:
        if not self._root_dir.exists():
            return

        for js_file in sorted(self._root_dir.rglob("*.js")):
            relative = js_file.relative_to(self._root_dir)
            parts = list(relative.parts)
            parts[-1] = parts[-1].removesuffix(".js")
            name = ".".join(parts)

            if name in self._sources:
                raise DuplicateFunctionError(name, str(self._paths[name]), str(js_file))

            self._sources[name] = js_file.read_text(encoding="utf-8").strip()
            self._paths[name] = js_file

    def source(self, name: str) -> str:
        """Raw JavaScript source for `name`."""
        try:
            return self._sources[name]
        except KeyError:
            raise FunctionNotFoundError(name) from None

    def get(self, name: str, scope: dict[str, Any] | None = None) -> Code:
        """Look up a function by dotted name and wrap it as bson Code.

        Raises:
            FunctionNotFoundError: If no function matches the given name.
        """
        return Code(self.source(name), scope)

    def has(self, name: str) -> bool:
        return name in self._sources

    @property
    def function_names(self) -> list[str]:
        """All registered names, sorted alphabetically."""
        return sorted(self._sources)

    def __len__(self) -> int:
        return len(self._sources)
