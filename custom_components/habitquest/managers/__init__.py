"""Manager modules for HabitQuest integration.

Managers orchestrate workflows around the pure engines.
They are stateful, event-aware, and handle cross-cutting concerns.
"""

from .base_manager import BaseManager
from .progression_manager import ProgressionManager

__all__ = [
    "BaseManager",
    "ProgressionManager",
]
