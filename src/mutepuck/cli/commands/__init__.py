"""CLI commands for mutepuck."""

from .config import config
from .led import led

__all__ = ["config", "led"]
