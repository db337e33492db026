"""
Configuration, logging, metrics and input helpers for the measurement engine
"""

from .config import Settings, get_settings, validate_settings
from .logging_config import setup_logging
from .metrics import EngineMetrics, setup_metrics
from .input_throttle import TapThrottle

__all__ = [
    'Settings',
    'get_settings',
    'validate_settings',
    'setup_logging',
    'EngineMetrics',
    'setup_metrics',
    'TapThrottle'
]
