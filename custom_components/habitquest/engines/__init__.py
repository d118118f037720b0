"""Engine modules for HabitQuest integration.

Contains pure computation engines:
- progression_engine: XP, levels, achievements, trophies and daily rewards
"""

# Use relative imports within package to avoid mypy module resolution issues
from .progression_engine import ProgressionEngine

__all__ = [
    "ProgressionEngine",
]
