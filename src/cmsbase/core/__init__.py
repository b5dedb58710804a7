"""Core configuration and logging for cmsbase."""

from cmsbase.core.config import Settings, get_settings
from cmsbase.core.logging import configure_logging, get_logger

__all__ = ["Settings", "configure_logging", "get_logger", "get_settings"]
