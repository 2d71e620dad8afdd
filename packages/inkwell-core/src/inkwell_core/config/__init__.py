"""Runtime configuration for inkwell."""

from inkwell_core.config.settings import StudioSettings, get_settings

__all__ = ["StudioSettings", "get_settings"]
