"""Detect declarations of deprecated hooks and report their replacements."""

from .matcher import DEPRECATED_HOOK_RULE, HookMatcher, examine
from .models import (
    DeclaredCallableFact,
    DeprecationRule,
    DiagnosticRecord,
    HookSignature,
    Severity,
    SourceLocation,
    canonical_signature,
)
from .registry import DeprecationRegistry, RegistryLoadError, load_registry

__all__ = [
    "DEPRECATED_HOOK_RULE",
    "DeclaredCallableFact",
    "DeprecationRegistry",
    "DeprecationRule",
    "DiagnosticRecord",
    "HookMatcher",
    "HookSignature",
    "RegistryLoadError",
    "Severity",
    "SourceLocation",
    "canonical_signature",
    "examine",
    "load_registry",
]
