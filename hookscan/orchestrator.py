"""Pipeline orchestration for repository hook scans."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .config import ConfigError, HookScanConfig, load_config
from .extractors import FactExtractor, discover_extractors
from .logging import get_logger
from .matcher import HookMatcher
from .models import DiagnosticRecord, FileMeta, RepoManifest
from .registry import DeprecationRegistry, load_registry
from .repo_scanner import RepoScanner

_MAX_DEFAULT_JOBS = 8


@dataclass
class ScanResult:
    """Outcome of a scan run."""

    root: Path
    diagnostics: List[DiagnosticRecord] = field(default_factory=list)
    files_scanned: int = 0
    facts_examined: int = 0
    skipped: List[str] = field(default_factory=list)


@dataclass
class _FileOutcome:
    diagnostics: List[DiagnosticRecord]
    facts: int
    skipped: bool


class Orchestrator:
    """Loads rules, walks the repository and matches declarations against the registry."""

    def __init__(
        self,
        extractors: Optional[Iterable[FactExtractor]] = None,
        registry: DeprecationRegistry | None = None,
    ) -> None:
        self._extractor_overrides = list(extractors) if extractors is not None else None
        self._registry_override = registry
        self.logger = get_logger("orchestrator")

    def run_scan(
        self,
        path: str,
        *,
        rules: str | Path | None = None,
        strict: bool | None = None,
        jobs: int | None = None,
        include_generated: bool | None = None,
    ) -> ScanResult:
        """Scan ``path`` and return every deprecated hook diagnostic found."""
        target = Path(path).expanduser().resolve()
        if not target.exists():
            raise FileNotFoundError(f"Repository path not found: {path}")
        config = self._load_config(target)

        # Rules must load before any file is touched; a bad rule source aborts the run.
        registry = self.load_rules(config, rules=rules, strict=strict)
        matcher = HookMatcher(registry)
        extractors = self._select_extractors(config)

        scanner = RepoScanner(
            extensions=config.scan.extensions,
            exclude_paths=config.scan.exclude_paths,
            include_generated=config.scan.include_generated if include_generated is None else include_generated,
        )
        manifest = scanner.scan(str(target))
        self.logger.info("Scanning %d file(s) under %s", len(manifest.files), manifest.root)

        worker_count = self._worker_count(jobs if jobs is not None else config.scan.jobs, len(manifest.files))
        self.logger.debug("Using %d worker(s) and %d extractor(s)", worker_count, len(extractors))

        def _examine(meta: FileMeta) -> _FileOutcome:
            return self._examine_file(manifest, meta, extractors, matcher)

        if worker_count <= 1:
            outcomes = [_examine(meta) for meta in manifest.files]
        else:
            with ThreadPoolExecutor(max_workers=worker_count, thread_name_prefix="hookscan") as pool:
                # map() keeps manifest order, so output is stable across runs.
                outcomes = list(pool.map(_examine, manifest.files))

        result = ScanResult(root=Path(manifest.root))
        for meta, outcome in zip(manifest.files, outcomes):
            if outcome.skipped:
                result.skipped.append(meta.path)
                continue
            result.files_scanned += 1
            result.facts_examined += outcome.facts
            result.diagnostics.extend(outcome.diagnostics)

        self.logger.info(
            "Found %d deprecated hook(s) across %d file(s)",
            len(result.diagnostics),
            result.files_scanned,
        )
        return result

    def list_rules(
        self,
        path: str,
        *,
        rules: str | Path | None = None,
        strict: bool | None = None,
    ) -> DeprecationRegistry:
        """Return the registry a scan of ``path`` would use."""
        target = Path(path).expanduser().resolve()
        if not target.exists():
            raise FileNotFoundError(f"Repository path not found: {path}")
        config = self._load_config(target)
        return self.load_rules(config, rules=rules, strict=strict)

    def load_rules(
        self,
        config: HookScanConfig,
        *,
        rules: str | Path | None = None,
        strict: bool | None = None,
    ) -> DeprecationRegistry:
        if self._registry_override is not None:
            return self._registry_override
        source = Path(rules) if rules is not None else config.rules.path
        effective_strict = config.rules.strict if strict is None else strict
        registry = load_registry(source, strict=effective_strict)
        self.logger.debug("Loaded %d rule(s) from %s", len(registry), registry.source)
        return registry

    @staticmethod
    def _load_config(target: Path) -> HookScanConfig:
        return load_config(target if target.is_dir() else target.parent)

    def _select_extractors(self, config: HookScanConfig) -> List[FactExtractor]:
        if self._extractor_overrides is not None:
            return list(self._extractor_overrides)
        try:
            return discover_extractors(config.extractors.enabled or None)
        except ValueError as exc:
            raise ConfigError(f"extractors.enabled: {exc}") from exc

    @staticmethod
    def _worker_count(requested: int | None, file_count: int) -> int:
        if requested is None:
            requested = min(_MAX_DEFAULT_JOBS, os.cpu_count() or 1)
        return max(1, min(requested, file_count))

    def _examine_file(
        self,
        manifest: RepoManifest,
        meta: FileMeta,
        extractors: Sequence[FactExtractor],
        matcher: HookMatcher,
    ) -> _FileOutcome:
        extractor = next((candidate for candidate in extractors if candidate.supports(meta)), None)
        if extractor is None:
            self.logger.debug("No extractor supports %s", meta.path)
            return _FileOutcome(diagnostics=[], facts=0, skipped=True)
        try:
            facts = list(extractor.extract(Path(manifest.root), meta))
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.debug("Unable to read %s: %s", meta.path, exc)
            return _FileOutcome(diagnostics=[], facts=0, skipped=True)
        diagnostics = list(matcher.examine_all(facts))
        return _FileOutcome(diagnostics=diagnostics, facts=len(facts), skipped=False)


__all__ = ["Orchestrator", "ScanResult"]
