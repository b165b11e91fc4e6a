from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from hookscan.registry import DeprecationRegistry
from tests._fixtures.repo_builder import RepoBuilder, hook


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable repo builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def registry() -> DeprecationRegistry:
    """A small registry covering replacement, no-replacement and empty-parameter rules."""
    return DeprecationRegistry.from_entries(
        [
            {"oldHook": hook("OnTick", "int"), "newHook": hook("OnUpdate", "int", "float")},
            {"oldHook": hook("Foo", "int", "float"), "newHook": hook("FooV2", "int", "float")},
            {"oldHook": hook("OnLegacy", "string")},
            {"oldHook": hook("Bar"), "newHook": None},
        ],
        source="<test>",
    )


@pytest.fixture(autouse=True)
def _reset_hookscan_logger() -> Iterator[None]:
    """Undo CLI logging configuration so caplog sees hookscan records."""
    yield
    logger = logging.getLogger("hookscan")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
