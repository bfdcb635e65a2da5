"""
Utility package for the Solvook Bot.

Configuration loading and logging setup shared by every module.
"""

from solvook_bot.utils.logger import setup_logger, configure_logging
from solvook_bot.utils.config import load_config, Config, Environment

__all__ = ["setup_logger", "configure_logging", "load_config", "Config", "Environment"]
