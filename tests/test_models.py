"""Tests for hookscan.models."""

from __future__ import annotations

from hookscan.models import (
    DeprecationRule,
    DiagnosticRecord,
    HookSignature,
    Severity,
    SourceLocation,
    canonical_signature,
)


def test_canonical_signature_joins_with_comma_space() -> None:
    assert canonical_signature("OnUpdate", ["int", "float"]) == "OnUpdate(int, float)"


def test_canonical_signature_empty_parameter_list() -> None:
    assert canonical_signature("Bar", []) == "Bar()"


def test_canonical_signature_renders_absent_type_as_empty() -> None:
    assert canonical_signature("Lambda", [None, "int"]) == "Lambda(, int)"


def test_canonical_signature_keeps_generic_text_verbatim() -> None:
    signature = canonical_signature("OnLoad", ["Dictionary<string,int>", "List<int>"])
    assert signature == "OnLoad(Dictionary<string,int>, List<int>)"


def test_hook_signature_equality_is_ordered_and_hashable() -> None:
    first = HookSignature("Foo", ["int", "float"])
    assert first == HookSignature("Foo", ("int", "float"))
    assert first != HookSignature("Foo", ("float", "int"))
    assert len({first, HookSignature("Foo", ("int", "float"))}) == 1
    assert str(first) == "Foo(int, float)"


def test_rule_replacement_is_canonical_or_none() -> None:
    with_new = DeprecationRule(HookSignature("A", ("int",)), HookSignature("B", ()))
    without_new = DeprecationRule(HookSignature("A", ("int",)))
    assert with_new.replacement == "B()"
    assert without_new.replacement is None


def test_diagnostic_to_dict_expands_source_location() -> None:
    record = DiagnosticRecord(
        rule_id="RUST0004",
        severity=Severity.WARNING,
        location=SourceLocation("src/Plugin.cs", 3, 17),
        message="msg",
        help_reference="https://example.invalid/RUST0004.md",
        signature="OnTick(int)",
    )
    payload = record.to_dict()
    assert payload["location"] == {"path": "src/Plugin.cs", "line": 3, "column": 17}
    assert payload["severity"] == "warning"
    assert payload["replacement"] is None
