"""Process-wide default solver settings."""

from __future__ import annotations

import copy

from .model import SolverSettings

_DEFAULT_SETTINGS = SolverSettings()


def get_default_settings() -> SolverSettings:
    return copy.deepcopy(_DEFAULT_SETTINGS)


def set_default_settings(settings: SolverSettings) -> None:
    global _DEFAULT_SETTINGS
    _DEFAULT_SETTINGS = copy.deepcopy(settings)


def reset_default_settings() -> None:
    set_default_settings(SolverSettings())
