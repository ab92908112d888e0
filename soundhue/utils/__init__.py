"""Utility modules."""

from .logger import setup_logger, get_logger
from .config import Config, get_config

__all__ = ['setup_logger', 'get_logger', 'Config', 'get_config']
