"""Signature matching and diagnostic construction for deprecated hooks."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Iterable, Iterator, Optional

from .logging import get_logger
from .models import (
    DeclaredCallableFact,
    DiagnosticDescriptor,
    DiagnosticRecord,
    Severity,
    canonical_signature,
)
from .registry import DeprecationRegistry

NO_REPLACEMENT = "no replacement"

DEPRECATED_HOOK_RULE = DiagnosticDescriptor(
    rule_id="RUST0004",
    title="Deprecated Hook Found",
    message_format='Hook "{0}" is deprecated. Use "{1}" instead.',
    category="Hook Usage",
    severity=Severity.WARNING,
    description="This hook has been marked as deprecated and should be replaced with the new version.",
    help_link_base="https://github.com/rust-analyzer/docs/",
)

logger = get_logger("matcher")


def fact_signature(fact: DeclaredCallableFact) -> Optional[str]:
    """Return the canonical signature for ``fact`` or None when it is malformed."""
    name = getattr(fact, "name", None)
    if not isinstance(name, str) or not name.strip():
        return None
    parameters = getattr(fact, "parameter_type_texts", None)
    if isinstance(parameters, (str, bytes)) or not isinstance(parameters, Sequence):
        return None
    if any(item is not None and not isinstance(item, str) for item in parameters):
        return None
    return canonical_signature(name, parameters)


class HookMatcher:
    """Looks up declared callables in a registry and builds diagnostics on hits.

    The matcher keeps no state of its own, so one instance may be shared by
    worker threads once the registry has been loaded.
    """

    def __init__(
        self,
        registry: DeprecationRegistry,
        descriptor: DiagnosticDescriptor = DEPRECATED_HOOK_RULE,
    ) -> None:
        self.registry = registry
        self.descriptor = descriptor

    def examine(self, fact: DeclaredCallableFact) -> Optional[DiagnosticRecord]:
        signature = fact_signature(fact)
        if signature is None:
            logger.debug("Ignoring malformed declaration fact: %r", fact)
            return None

        rule = self.registry.lookup(signature)
        if rule is None:
            return None

        replacement = rule.replacement
        message = self.descriptor.format_message(signature, replacement or NO_REPLACEMENT)
        return DiagnosticRecord(
            rule_id=self.descriptor.rule_id,
            severity=self.descriptor.severity,
            location=getattr(fact, "location", None),
            message=message,
            help_reference=self.descriptor.help_link_uri,
            signature=signature,
            replacement=replacement,
        )

    def examine_all(self, facts: Iterable[DeclaredCallableFact]) -> Iterator[DiagnosticRecord]:
        for fact in facts:
            diagnostic = self.examine(fact)
            if diagnostic is not None:
                yield diagnostic


def examine(fact: DeclaredCallableFact, registry: DeprecationRegistry) -> Optional[DiagnosticRecord]:
    """Examine a single fact against ``registry`` with the default descriptor."""
    return HookMatcher(registry).examine(fact)


__all__ = [
    "DEPRECATED_HOOK_RULE",
    "HookMatcher",
    "NO_REPLACEMENT",
    "examine",
    "fact_signature",
]
