"""Configuration package."""

from stockleague.config.settings import Settings
from stockleague.config.logging_config import setup_logging

__all__ = ["Settings", "setup_logging"]
