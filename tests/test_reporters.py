"""Tests for hookscan.reporters."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from hookscan.matcher import HookMatcher
from hookscan.models import DeclaredCallableFact, SourceLocation
from hookscan.orchestrator import ScanResult
from hookscan.registry import DeprecationRegistry
from hookscan.reporters import JsonReporter, TextReporter, get_reporter


@pytest.fixture
def result(registry: DeprecationRegistry) -> ScanResult:
    facts = [
        DeclaredCallableFact("OnTick", ["int"], SourceLocation("src/Plugin.cs", 4, 10)),
        DeclaredCallableFact("Bar", [], SourceLocation("src/Plugin.cs", 9, 14)),
    ]
    diagnostics = list(HookMatcher(registry).examine_all(facts))
    return ScanResult(root=Path("/repo"), diagnostics=diagnostics, files_scanned=1, facts_examined=2)


def test_text_reporter_formats_compiler_style_lines(result: ScanResult) -> None:
    lines = TextReporter().render(result).splitlines()

    assert lines[0] == (
        'src/Plugin.cs:4:10: warning RUST0004: Hook "OnTick(int)" is deprecated. '
        'Use "OnUpdate(int, float)" instead. [https://github.com/rust-analyzer/docs/RUST0004.md]'
    )
    assert lines[1].startswith('src/Plugin.cs:9:14: warning RUST0004: Hook "Bar()"')
    assert lines[-1] == "2 deprecated hooks found in 1 file(s)"


def test_text_reporter_mentions_skipped_files() -> None:
    output = TextReporter().render(ScanResult(root=Path("/repo"), files_scanned=1, skipped=["Bad.cs"]))
    assert output == "0 deprecated hooks found in 1 file(s) (1 skipped)"


def test_json_reporter_emits_structured_payload(result: ScanResult) -> None:
    payload = json.loads(JsonReporter().render(result))

    assert payload["summary"] == {"diagnostics": 2, "filesScanned": 1, "factsExamined": 2, "skipped": []}
    first = payload["diagnostics"][0]
    assert first["ruleId"] == "RUST0004"
    assert first["severity"] == "warning"
    assert first["location"] == {"path": "src/Plugin.cs", "line": 4, "column": 10}
    assert first["replacement"] == "OnUpdate(int, float)"
    assert payload["diagnostics"][1]["replacement"] is None


def test_get_reporter_by_name() -> None:
    assert isinstance(get_reporter("TEXT"), TextReporter)
    assert isinstance(get_reporter("json"), JsonReporter)
    with pytest.raises(ValueError):
        get_reporter("sarif")
