# File: utils/__init__.py
"""Pure Python utilities for HabitQuest.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed in this module.

Submodules:
    - dt_utils: Date/time parsing, local-day arithmetic, retention windows
    - math_utils: Clamping, ratios and counter coercion

Usage:
    from . import dt_utils
    from .math_utils import clamp
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
