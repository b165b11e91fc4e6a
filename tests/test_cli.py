"""CLI parser and command behaviour tests."""

from __future__ import annotations

import json

import pytest

from hookscan.cli import EXIT_FINDINGS, EXIT_USAGE, _build_parser, main
from tests._fixtures.repo_builder import RepoBuilder, hook

_PLUGIN = """
namespace Oxide.Plugins
{
    public class Welcome : RustPlugin
    {
        void OnPlayerInit(BasePlayer player) { }
    }
}
"""


def test_cli_accepts_verbose_before_and_after_command() -> None:
    parser = _build_parser()
    assert parser.parse_args(["--verbose", "scan"]).verbose is True
    assert parser.parse_args(["scan", "--verbose"]).verbose is True


def test_cli_scan_defaults() -> None:
    args = _build_parser().parse_args(["scan"])
    assert args.command == "scan"
    assert args.path == "."
    assert args.rules is None
    assert args.strict is None
    assert args.format is None
    assert args.include_generated is None
    assert args.fail_on_findings is False


def test_cli_scan_accepts_flags() -> None:
    args = _build_parser().parse_args(
        ["scan", "src", "--rules", "hooks.yml", "--strict", "--format", "json", "--jobs", "2", "--include-generated"]
    )
    assert args.path == "src"
    assert args.rules == "hooks.yml"
    assert args.strict is True
    assert args.format == "json"
    assert args.jobs == 2
    assert args.include_generated is True


def test_cli_scan_prints_text_report(repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    repo_builder.write({"Welcome.cs": _PLUGIN})

    exit_code = main(["scan", str(repo_builder.path())])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert 'Hook "OnPlayerInit(BasePlayer)" is deprecated. Use "OnPlayerConnected(BasePlayer)" instead.' in out
    assert "1 deprecated hook found in 1 file(s)" in out


def test_cli_scan_json_and_fail_on_findings(repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    repo_builder.write({"Welcome.cs": _PLUGIN})

    exit_code = main(["scan", str(repo_builder.path()), "--format", "json", "--fail-on-findings"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == EXIT_FINDINGS
    assert payload["diagnostics"][0]["signature"] == "OnPlayerInit(BasePlayer)"


def test_cli_scan_uses_configured_output_format(repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    repo_builder.write({"Welcome.cs": _PLUGIN, ".hookscan.yml": "output:\n  format: json\n"})

    main(["scan", str(repo_builder.path())])

    assert json.loads(capsys.readouterr().out)["summary"]["diagnostics"] == 1


def test_cli_scan_invalid_rules_exit_with_usage_code(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write({"Welcome.cs": _PLUGIN})
    rules = repo_builder.write_rules({"hooks": "nope"})

    with pytest.raises(SystemExit) as excinfo:
        main(["scan", str(repo_builder.path()), "--rules", str(rules)])

    assert excinfo.value.code == EXIT_USAGE
    assert "rule entries must be a list" in capsys.readouterr().err


def test_cli_rules_lists_pairs(repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    rules = repo_builder.write_rules(
        [
            {"oldHook": hook("OnTick", "int"), "newHook": hook("OnUpdate", "int", "float")},
            {"oldHook": hook("Bar")},
        ]
    )

    exit_code = main(["rules", str(repo_builder.path()), "--rules", str(rules)])

    assert exit_code == 0
    assert capsys.readouterr().out.splitlines() == [
        "OnTick(int) -> OnUpdate(int, float)",
        "Bar() -> no replacement",
    ]


def test_cli_scan_unknown_extractor_exits_with_usage_code(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write({"Welcome.cs": _PLUGIN, ".hookscan.yml": "extractors:\n  enabled: [cobol]\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["scan", str(repo_builder.path())])

    assert excinfo.value.code == EXIT_USAGE
    assert "cobol" in capsys.readouterr().err


def test_cli_rules_missing_path_exits_with_usage_code(tmp_path, capsys: pytest.CaptureFixture[str]) -> None:  # type: ignore[no-untyped-def]
    missing = tmp_path / "does-not-exist"

    with pytest.raises(SystemExit) as excinfo:
        main(["rules", str(missing)])

    assert excinfo.value.code == EXIT_USAGE
    assert capsys.readouterr().out == ""


def test_cli_logging_options(repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    repo_builder.write({"Welcome.cs": _PLUGIN})
    log_file = repo_builder.path() / "scan.log"

    main(["scan", str(repo_builder.path()), "--quiet", "--log-file", str(log_file)])
    quiet_err = capsys.readouterr().err
    main(["scan", str(repo_builder.path()), "-v"])
    verbose_err = capsys.readouterr().err

    assert "INFO" not in quiet_err
    assert "[hookscan] DEBUG" in verbose_err
    assert log_file.exists()
