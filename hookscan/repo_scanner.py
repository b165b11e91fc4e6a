"""Repository walking and manifest building for hook scans."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from .logging import get_logger
from .models import FileMeta, RepoManifest

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".vs",
    ".idea",
    ".venv",
    "node_modules",
    "__pycache__",
    "bin",
    "obj",
    "packages",
}

_LANGUAGE_BY_SUFFIX = {
    ".cs": "C#",
    ".csx": "C#",
}

_GENERATED_SUFFIXES = (".g.cs", ".g.i.cs", ".designer.cs", ".generated.cs", ".assemblyinfo.cs")
_GENERATED_MARKERS = ("<auto-generated", "<autogenerated")
_GENERATED_HEADER_LINES = 10

logger = get_logger("scanner")


@dataclass
class IgnoreRule:
    """A single ignore pattern taken from .gitignore or scan.exclude_paths."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool

    @classmethod
    def parse(cls, raw: str, *, negate: bool = False) -> "IgnoreRule | None":
        pattern = raw.strip()
        if not pattern:
            return None
        directory_only = pattern.endswith("/")
        anchored = pattern.startswith("/")
        pattern = pattern.strip("/")
        if not pattern:
            return None
        return cls(pattern=pattern, directory_only=directory_only, anchored=anchored, negate=negate)

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        if self.anchored or "/" in self.pattern:
            return fnmatchcase(rel_path, self.pattern)
        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.is_file():
        return []
    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8", errors="replace").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        rule = IgnoreRule.parse(line[1:] if negate else line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def is_generated_file(path: Path) -> bool:
    """Return True for designer/source-generator output that should not be linted."""
    lower = path.name.lower()
    if lower.endswith(_GENERATED_SUFFIXES):
        return True
    try:
        with path.open("r", encoding="utf-8", errors="ignore") as handle:
            for _ in range(_GENERATED_HEADER_LINES):
                line = handle.readline()
                if not line:
                    break
                lowered = line.lower()
                if any(marker in lowered for marker in _GENERATED_MARKERS):
                    return True
    except OSError:
        return False
    return False


class RepoScanner:
    """Walks a repository and lists the source files worth extracting facts from."""

    def __init__(
        self,
        *,
        extensions: Iterable[str] = (".cs",),
        exclude_paths: Iterable[str] = (),
        include_generated: bool = False,
    ) -> None:
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.exclude_paths = list(exclude_paths)
        self.include_generated = include_generated

    def scan(self, root: str) -> RepoManifest:
        """Return a manifest of matching files, sorted by relative path."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Repository path not found: {root}")
        if root_path.is_file():
            return self._single_file_manifest(root_path)
        if not root_path.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {root}")

        rules = _parse_gitignore(root_path / ".gitignore")
        for pattern in self.exclude_paths:
            rule = IgnoreRule.parse(pattern)
            if rule is not None:
                rules.append(rule)

        files: List[FileMeta] = []
        for path in self._iter_files(root_path, rules):
            if not self.include_generated and is_generated_file(path):
                logger.debug("Skipping generated file %s", path)
                continue
            rel_path = path.relative_to(root_path).as_posix()
            files.append(
                FileMeta(
                    path=rel_path,
                    size=path.stat().st_size,
                    language=_LANGUAGE_BY_SUFFIX.get(path.suffix.lower()),
                )
            )

        files.sort(key=lambda meta: meta.path)
        return RepoManifest(root=str(root_path), files=files)

    def _single_file_manifest(self, path: Path) -> RepoManifest:
        meta = FileMeta(
            path=path.name,
            size=path.stat().st_size,
            language=_LANGUAGE_BY_SUFFIX.get(path.suffix.lower()),
        )
        return RepoManifest(root=str(path.parent), files=[meta])

    def _iter_files(self, root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept_dirs = []
            for name in dirnames:
                if name in _EXCLUDED_DIRS:
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if _should_ignore(rel_path, True, rules):
                    continue
                kept_dirs.append(name)
            dirnames[:] = kept_dirs

            for filename in filenames:
                if not filename.lower().endswith(self.extensions):
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _should_ignore(rel_path, False, rules):
                    continue
                yield current_dir / filename
