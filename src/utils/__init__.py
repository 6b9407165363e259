"""Utility functions for the road geometry kernel."""

from .logging import get_logger
from .config import KernelSettings, load_config

__all__ = ["get_logger", "load_config", "KernelSettings"]
