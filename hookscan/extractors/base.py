"""Base classes for declaration fact extractors."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable

from ..models import DeclaredCallableFact, FileMeta


class FactExtractor(ABC):
    """Contract for fact sources that turn a source file into callable declarations."""

    name: str = ""

    @abstractmethod
    def supports(self, meta: FileMeta) -> bool:
        """Return True when this extractor understands the file."""

    @abstractmethod
    def extract(self, root: Path, meta: FileMeta) -> Iterable[DeclaredCallableFact]:
        """Yield one fact per declared callable, in source order."""
