"""
Shared components used by the price scanner:
- Project configuration
- Logging configuration
"""

from .config import PROJECT_ROOT, HeuristicSettings, ScraperSettings, Settings
from .logging import setup_logging

__all__ = [
    "PROJECT_ROOT",
    "HeuristicSettings",
    "ScraperSettings",
    "Settings",
    "setup_logging",
]
