"""Every module must import on its own, whatever is imported first."""

from __future__ import annotations

import importlib
import sys

import pytest

MODULES = [
    "sweepstake",
    "sweepstake.admin",
    "sweepstake.admin.services",
    "sweepstake.competition",
    "sweepstake.competition.services",
    "sweepstake.core.snapshots",
    "sweepstake.leaderboard",
    "sweepstake.leaderboard.scoring",
    "sweepstake.leaderboard.services",
    "sweepstake.predictions",
    "sweepstake.predictions.flow",
    "sweepstake.predictions.models",
    "sweepstake.predictions.services",
    "sweepstake.predictions.storage",
    "sweepstake.teams",
    "sweepstake.teams.models",
    "sweepstake.teams.services",
]


def _package_modules() -> dict:
    return {
        name: module
        for name, module in sys.modules.items()
        if name == "sweepstake" or name.startswith("sweepstake.")
    }


@pytest.mark.parametrize("module_name", MODULES)
def test_module_imports_standalone(module_name):
    saved = _package_modules()
    for name in saved:
        del sys.modules[name]
    try:
        module = importlib.import_module(module_name)
        assert module.__name__ == module_name
    finally:
        for name in _package_modules():
            del sys.modules[name]
        sys.modules.update(saved)
