"""
stackexchange_token.config

Strategy configuration:

- StrategySettings: validated settings for the Stack Exchange strategy.
- settings_from_env: builds them from STACKEXCHANGE_* variables.

The `stackexchange-token` command line lives in `stackexchange_token.config.cli`.
"""

from __future__ import annotations

from .env import settings_from_env
from .settings import StrategySettings

__all__ = [
    "StrategySettings",
    "settings_from_env",
]
