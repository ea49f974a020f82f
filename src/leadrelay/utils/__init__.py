"""
Utility functions and helpers
"""
from leadrelay.utils.logging import get_logger, app_logger, configure_package_logger

__all__ = ["get_logger", "app_logger", "configure_package_logger"]
