"""Loading and indexing of deprecated hook rules."""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

import yaml

from .logging import get_logger
from .models import DeprecationRule, HookSignature

_BUNDLED_PACKAGE = "hookscan.data"
_BUNDLED_RULES = "deprecated_hooks.json"
_YAML_SUFFIXES = {".yml", ".yaml"}

logger = get_logger("registry")


class RegistryLoadError(RuntimeError):
    """Raised when the deprecated hook rule source cannot be used."""

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(f"{source}: {message}" if source else message)
        self.source = source


class DeprecationRegistry:
    """Read-only set of deprecation rules indexed by canonical old signature."""

    def __init__(self, rules: Sequence[DeprecationRule], *, strict: bool = False, source: str | None = None) -> None:
        self.source = source
        self._rules = tuple(rules)
        self._index: Dict[str, DeprecationRule] = {}
        for rule in self._rules:
            key = rule.old_hook.canonical
            existing = self._index.get(key)
            if existing is None:
                self._index[key] = rule
                continue
            if strict:
                raise RegistryLoadError(f"duplicate deprecated hook signature '{key}'", source)
            logger.warning(
                "Duplicate deprecated hook '%s' in %s; keeping the first entry",
                key,
                source or "rule source",
            )

    @classmethod
    def from_entries(
        cls,
        entries: Any,
        *,
        strict: bool = False,
        source: str | None = None,
    ) -> "DeprecationRegistry":
        """Validate decoded rule entries and build a registry from them."""
        rules = [_parse_entry(entry, position, source) for position, entry in enumerate(_entry_list(entries, source))]
        return cls(rules, strict=strict, source=source)

    @property
    def rules(self) -> tuple[DeprecationRule, ...]:
        return self._rules

    def lookup(self, signature: Union[HookSignature, str]) -> Optional[DeprecationRule]:
        key = signature.canonical if isinstance(signature, HookSignature) else signature
        return self._index.get(key)

    def __contains__(self, signature: object) -> bool:
        if not isinstance(signature, (HookSignature, str)):
            return False
        return self.lookup(signature) is not None

    def __iter__(self) -> Iterator[DeprecationRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)


def load_registry(source: Path | str | None = None, *, strict: bool = False) -> DeprecationRegistry:
    """Load rules from ``source`` (JSON or YAML) or from the bundled rule file."""
    if source is None:
        label = f"<bundled {_BUNDLED_RULES}>"
        try:
            text = resources.files(_BUNDLED_PACKAGE).joinpath(_BUNDLED_RULES).read_text(encoding="utf-8")
        except (OSError, ModuleNotFoundError) as exc:
            raise RegistryLoadError(f"bundled rules unavailable: {exc}", label) from exc
        data = _decode(text, yaml_format=False, label=label)
    else:
        path = Path(source).expanduser()
        label = str(path)
        if not path.is_file():
            raise RegistryLoadError("rule source not found", label)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise RegistryLoadError(f"unable to read rule source: {exc}", label) from exc
        data = _decode(text, yaml_format=path.suffix.lower() in _YAML_SUFFIXES, label=label)

    registry = DeprecationRegistry.from_entries(data, strict=strict, source=label)
    logger.debug("Loaded %d deprecated hook rule(s) from %s", len(registry), label)
    return registry


def _decode(text: str, *, yaml_format: bool, label: str) -> Any:
    if not text.strip():
        raise RegistryLoadError("rule source is empty", label)
    try:
        if yaml_format:
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise RegistryLoadError(f"malformed rule source: {exc}", label) from exc


def _entry_list(data: Any, source: str | None) -> List[Any]:
    if isinstance(data, Mapping):
        if "hooks" not in data:
            raise RegistryLoadError("expected a list of entries or a mapping with a 'hooks' list", source)
        data = data["hooks"]
    if not isinstance(data, list):
        raise RegistryLoadError("rule entries must be a list", source)
    return data


def _parse_entry(entry: Any, position: int, source: str | None) -> DeprecationRule:
    if not isinstance(entry, Mapping):
        raise RegistryLoadError(f"entry {position} must be a mapping", source)
    if "oldHook" not in entry or entry["oldHook"] is None:
        raise RegistryLoadError(f"entry {position} is missing 'oldHook'", source)
    old_hook = _parse_hook(entry["oldHook"], f"entry {position} oldHook", source)
    raw_new = entry.get("newHook")
    new_hook = _parse_hook(raw_new, f"entry {position} newHook", source) if raw_new is not None else None
    return DeprecationRule(old_hook=old_hook, new_hook=new_hook)


def _parse_hook(value: Any, where: str, source: str | None) -> HookSignature:
    if not isinstance(value, Mapping):
        raise RegistryLoadError(f"{where} must be a mapping", source)
    name = value.get("hookName")
    if not isinstance(name, str) or not name.strip():
        raise RegistryLoadError(f"{where} requires a non-empty 'hookName'", source)
    parameters = value.get("hookParameters")
    if not isinstance(parameters, list):
        raise RegistryLoadError(f"{where} 'hookParameters' must be a list", source)
    if not all(isinstance(item, str) for item in parameters):
        raise RegistryLoadError(f"{where} 'hookParameters' must contain only strings", source)
    return HookSignature(name=name, parameter_types=tuple(parameters))


def iter_rule_pairs(registry: Iterable[DeprecationRule]) -> Iterator[tuple[str, Optional[str]]]:
    for rule in registry:
        yield rule.old_hook.canonical, rule.replacement


__all__ = [
    "DeprecationRegistry",
    "RegistryLoadError",
    "iter_rule_pairs",
    "load_registry",
]
