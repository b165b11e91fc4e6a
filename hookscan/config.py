"""Configuration loading for hookscan (.hookscan.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".hookscan.yml"
OUTPUT_FORMATS = ("text", "json")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class RulesConfig:
    """Where deprecation rules come from and how duplicates are treated."""

    path: Optional[Path] = None
    strict: bool = False


@dataclass
class ScanConfig:
    """File selection and parallelism for repository scans."""

    extensions: List[str] = field(default_factory=lambda: [".cs"])
    exclude_paths: List[str] = field(default_factory=list)
    include_generated: bool = False
    jobs: Optional[int] = None


@dataclass
class OutputConfig:
    format: str = "text"


@dataclass
class ExtractorConfig:
    """Fact extractor enablement."""

    enabled: List[str] = field(default_factory=list)


@dataclass
class HookScanConfig:
    """Represents the settings defined in .hookscan.yml."""

    root: Path
    rules: RulesConfig = field(default_factory=RulesConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    extractors: ExtractorConfig = field(default_factory=ExtractorConfig)


def load_config(config_path: Path) -> HookScanConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return HookScanConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    rules = RulesConfig()
    rules_data = _as_dict(data.get("rules"))
    if rules_data:
        rules_path = _as_str(rules_data.get("path"))
        rules.path = (root / rules_path) if rules_path else None
        rules.strict = _as_bool(rules_data.get("strict")) or False

    scan = ScanConfig()
    scan_data = _as_dict(data.get("scan"))
    if scan_data:
        extensions = _as_str_list(scan_data.get("extensions"))
        if extensions:
            scan.extensions = [_normalise_extension(ext) for ext in extensions]
        scan.exclude_paths = _as_str_list(scan_data.get("exclude_paths"))
        scan.include_generated = _as_bool(scan_data.get("include_generated")) or False
        jobs = _as_int(scan_data.get("jobs"))
        if jobs is not None and jobs < 1:
            raise ConfigError("scan.jobs must be a positive integer")
        scan.jobs = jobs

    output = OutputConfig()
    output_data = _as_dict(data.get("output"))
    if output_data:
        fmt = _as_str(output_data.get("format"))
        if fmt:
            fmt = fmt.lower()
            if fmt not in OUTPUT_FORMATS:
                raise ConfigError(
                    f"output.format must be one of {', '.join(OUTPUT_FORMATS)} (got '{fmt}')"
                )
            output.format = fmt

    extractors = ExtractorConfig()
    extractor_data = _as_dict(data.get("extractors"))
    if extractor_data:
        extractors.enabled = _as_str_list(extractor_data.get("enabled"))

    return HookScanConfig(
        root=root,
        rules=rules,
        scan=scan,
        output=output,
        extractors=extractors,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _normalise_extension(value: str) -> str:
    value = value.strip().lower()
    return value if value.startswith(".") else f".{value}"


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
