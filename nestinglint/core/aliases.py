"""
Classification of macro invocation names as ignored or not.
"""

from typing import Dict, Iterable, Iterator, Tuple

from nestinglint.core.tree import MacroImport


class MacroAliasTable:
    """
    Maps each locally visible macro name to whether its invocations are ignored.

    A name is ignored when it, or the name it was imported under, appears in
    ``ignore_macros``. Matching is by bare identifier: paths are reduced to
    their last segment and aliases are not followed through other imports.
    With ``use yew::html as h1;`` and ``use h1 as h2;`` only ``h1`` resolves
    to ``html``; ``h2`` is ignored only if ``h1`` or ``h2`` is itself listed.
    """

    def __init__(self, entries: Dict[str, bool], ignore_macros: Iterable[str] = ()):
        self._entries = dict(entries)
        self._ignore_macros = frozenset(ignore_macros)

    @classmethod
    def build(cls, imports: Iterable[MacroImport], ignore_macros: Iterable[str]) -> "MacroAliasTable":
        ignore_macros = frozenset(ignore_macros)
        entries: Dict[str, bool] = {}
        for imp in imports:
            entries[imp.local_name] = (
                imp.local_name in ignore_macros or imp.original_name in ignore_macros
            )
        return cls(entries, ignore_macros)

    def is_ignored(self, name: str) -> bool:
        """Check whether invocations of ``name`` are excluded from analysis."""
        if name in self._entries:
            return self._entries[name]
        # not imported: defined in the unit or in scope by default
        return name in self._ignore_macros

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[Tuple[str, bool]]:
        return iter(sorted(self._entries.items()))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"MacroAliasTable({dict(self)!r})"
