"""Core data models shared across hookscan components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

_PARAMETER_SEPARATOR = ", "


def canonical_signature(name: str, parameter_types: Sequence[Optional[str]]) -> str:
    """Return the lookup key for a hook, e.g. ``OnTick(int, float)``.

    Absent parameter types render as the empty string so that positional
    structure is preserved.
    """
    joined = _PARAMETER_SEPARATOR.join(text if text is not None else "" for text in parameter_types)
    return f"{name}({joined})"


@dataclass(frozen=True)
class HookSignature:
    """A hook name together with its ordered parameter type texts."""

    name: str
    parameter_types: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists from callers while keeping the value hashable.
        object.__setattr__(self, "parameter_types", tuple(self.parameter_types))

    @property
    def canonical(self) -> str:
        return canonical_signature(self.name, self.parameter_types)

    def __str__(self) -> str:
        return self.canonical


@dataclass(frozen=True)
class DeprecationRule:
    """Maps a deprecated hook to its replacement, if one exists."""

    old_hook: HookSignature
    new_hook: Optional[HookSignature] = None

    @property
    def replacement(self) -> Optional[str]:
        return self.new_hook.canonical if self.new_hook is not None else None


@dataclass(frozen=True)
class SourceLocation:
    """Position of a declaration inside a scanned file (1-based)."""

    path: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"


@dataclass(frozen=True)
class DeclaredCallableFact:
    """A callable declaration reported by a fact source."""

    name: Optional[str]
    parameter_type_texts: Sequence[Optional[str]]
    location: Any


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class DiagnosticDescriptor:
    """Static identity of a check: id, wording, and documentation link."""

    rule_id: str
    title: str
    message_format: str
    category: str
    severity: Severity
    description: str
    help_link_base: str
    enabled_by_default: bool = True

    @property
    def help_link_uri(self) -> str:
        return f"{self.help_link_base}{self.rule_id}.md"

    def format_message(self, *args: str) -> str:
        return self.message_format.format(*args)


@dataclass(frozen=True)
class DiagnosticRecord:
    """A single finding emitted for a declaration that uses a deprecated hook."""

    rule_id: str
    severity: Severity
    location: Any
    message: str
    help_reference: str
    signature: str
    replacement: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        location = self.location
        if isinstance(location, SourceLocation):
            location_payload: Any = {
                "path": location.path,
                "line": location.line,
                "column": location.column,
            }
        else:
            location_payload = str(location) if location is not None else None
        return {
            "ruleId": self.rule_id,
            "severity": self.severity.value,
            "location": location_payload,
            "message": self.message,
            "helpReference": self.help_reference,
            "signature": self.signature,
            "replacement": self.replacement,
        }


@dataclass
class FileMeta:
    """Metadata for an individual repository file."""

    path: str
    size: int
    language: Optional[str]


@dataclass
class RepoManifest:
    """Normalized view of the repository for fact extractors."""

    root: str
    files: List[FileMeta] = field(default_factory=list)
