"""Utility functions."""

from .config import get_default_config, load_config, merge_config
from .datetime_utils import iter_days, parse_timestamp, weekday_number

__all__ = [
    'load_config',
    'get_default_config',
    'merge_config',
    'iter_days',
    'parse_timestamp',
    'weekday_number',
]
