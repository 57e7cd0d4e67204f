"""
Core Module Package.

This package contains the infrastructure components that all other
modules depend on.

Components:
- clock: Unified, injectable time abstraction
- config: Environment-driven configuration
- constants: Service-wide constants
- exceptions: Root exception hierarchy
- validation: Ticker symbol validation
- events: Subscribe/dispose event source
- container: Process-wide service wiring
"""

from .clock import ClockProtocol, MockClock, SystemClock
from .config import AppConfig
from .exceptions import (
    ConfigurationError,
    InsightsError,
    MissingConfigError,
    NotAuthenticatedError,
    ValidationError,
)
from .validation import is_valid_symbol, normalize_symbol

__all__ = [
    "ClockProtocol",
    "SystemClock",
    "MockClock",
    "AppConfig",
    "InsightsError",
    "ValidationError",
    "NotAuthenticatedError",
    "ConfigurationError",
    "MissingConfigError",
    "is_valid_symbol",
    "normalize_symbol",
]
