from .loader import load_settings
from .types import (
    AggregatorSettings,
    ConfigError,
    ExecutorSettings,
    LimitSettings,
    Settings,
    UnsupportedConfigFormatError,
)

__all__ = [
    "load_settings",
    "Settings",
    "ExecutorSettings",
    "LimitSettings",
    "AggregatorSettings",
    "ConfigError",
    "UnsupportedConfigFormatError",
]
