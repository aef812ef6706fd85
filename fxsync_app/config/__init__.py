"""
Configuration module.

Typed defaults, YAML overrides and validation for the dashboard core.
"""
from .defaults import DashboardConfig, get_default_config
from .loader import ConfigLoader, load_config

__all__ = ["DashboardConfig", "ConfigLoader", "get_default_config", "load_config"]
