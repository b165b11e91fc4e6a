"""Fact extractor implementations and plugin discovery."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, Iterable, List, Sequence

from .base import FactExtractor
from .tree_sitter import CSharpExtractor

_ENTRY_POINT_GROUP = "hookscan.extractors"

ExtractorFactory = Callable[[], FactExtractor]

_BUILTIN_FACTORIES: Dict[str, ExtractorFactory] = {
    "csharp": CSharpExtractor,
}


def available_extractors() -> Dict[str, ExtractorFactory]:
    """Map lower-cased extractor names to factories; built-ins shadow plugins."""
    factories: Dict[str, ExtractorFactory] = dict(_BUILTIN_FACTORIES)
    for entry in _iter_entry_points():
        key = entry.name.lower()
        if key in factories:
            continue
        factories[key] = _plugin_factory(entry)
    return factories


def discover_extractors(enabled: Sequence[str] | None = None) -> List[FactExtractor]:
    """Instantiate the enabled extractors (all known ones when ``enabled`` is empty)."""
    factories = available_extractors()
    if enabled:
        names = list(dict.fromkeys(name.lower() for name in enabled))
        unknown = [name for name in names if name not in factories]
        if unknown:
            raise ValueError(f"Unknown extractors requested: {', '.join(sorted(unknown))}")
    else:
        names = list(factories)

    extractors: List[FactExtractor] = []
    for name in names:
        instance = factories[name]()
        if not isinstance(instance, FactExtractor):
            raise TypeError(f"Extractor '{name}' did not produce a FactExtractor")
        extractors.append(instance)
    return extractors


def _plugin_factory(entry: metadata.EntryPoint) -> ExtractorFactory:
    def _factory() -> FactExtractor:
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - plugin import failure
            raise RuntimeError(f"Failed to load extractor plugin '{entry.name}': {exc}") from exc
        if isinstance(loaded, FactExtractor):
            return loaded
        if callable(loaded):
            instance = loaded()
            if isinstance(instance, FactExtractor):
                return instance
        raise TypeError(f"Extractor plugin '{entry.name}' must be a FactExtractor subclass or factory")

    return _factory


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "CSharpExtractor",
    "FactExtractor",
    "available_extractors",
    "discover_extractors",
]
