"""Shared helpers: filesystem locations and logging setup."""

from .paths import get_app_data_dir
from .logging_utils import configure_logging

__all__ = ["get_app_data_dir", "configure_logging"]
