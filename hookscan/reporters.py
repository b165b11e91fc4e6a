"""Output sinks that render scan diagnostics for people and pipelines."""

from __future__ import annotations

import json
from typing import Dict, List, Protocol, Type

from .models import DiagnosticRecord
from .orchestrator import ScanResult


class Reporter(Protocol):
    """Protocol implemented by diagnostic reporters."""

    name: str

    def render(self, result: ScanResult) -> str:
        """Return the full report for ``result``."""


class TextReporter:
    """Compiler-style one line per diagnostic, followed by a summary."""

    name = "text"

    def render(self, result: ScanResult) -> str:
        lines: List[str] = [self.format_diagnostic(diagnostic) for diagnostic in result.diagnostics]
        count = len(result.diagnostics)
        noun = "deprecated hook" if count == 1 else "deprecated hooks"
        summary = f"{count} {noun} found in {result.files_scanned} file(s)"
        if result.skipped:
            summary += f" ({len(result.skipped)} skipped)"
        lines.append(summary)
        return "\n".join(lines)

    @staticmethod
    def format_diagnostic(diagnostic: DiagnosticRecord) -> str:
        return (
            f"{diagnostic.location}: {diagnostic.severity.value} {diagnostic.rule_id}: "
            f"{diagnostic.message} [{diagnostic.help_reference}]"
        )


class JsonReporter:
    """Machine-readable report for CI annotations."""

    name = "json"

    def render(self, result: ScanResult) -> str:
        payload = {
            "root": str(result.root),
            "diagnostics": [diagnostic.to_dict() for diagnostic in result.diagnostics],
            "summary": {
                "diagnostics": len(result.diagnostics),
                "filesScanned": result.files_scanned,
                "factsExamined": result.facts_examined,
                "skipped": list(result.skipped),
            },
        }
        return json.dumps(payload, indent=2)


_REPORTERS: Dict[str, Type[Reporter]] = {
    TextReporter.name: TextReporter,
    JsonReporter.name: JsonReporter,
}


def get_reporter(name: str) -> Reporter:
    try:
        return _REPORTERS[name.lower()]()
    except KeyError:
        raise ValueError(f"Unknown output format '{name}'") from None


__all__ = ["JsonReporter", "Reporter", "TextReporter", "get_reporter"]
