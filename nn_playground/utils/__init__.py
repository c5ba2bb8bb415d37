"""Utility modules for the playground."""

from .logger import get_logger, setup_logging, LogLevel

__all__ = ['get_logger', 'setup_logging', 'LogLevel']
