"""Pytest configuration to ensure the quickreply package is importable."""
from __future__ import annotations

import itertools
import sys
from pathlib import Path
from typing import Callable

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
_root_str = str(_REPO_ROOT)
if _root_str not in sys.path:
    sys.path.insert(0, _root_str)

import sitecustomize  # noqa: F401,E402  # Ensure src/ is on sys.path via sitecustomize hook.


@pytest.fixture
def ids() -> Callable[[], str]:
    """Deterministic uid generator yielding ``uid-1``, ``uid-2``, ..."""

    counter = itertools.count(1)
    return lambda: f"uid-{next(counter)}"
