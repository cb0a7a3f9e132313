"""Configuration package."""

from .settings import (
    get_app_name,
    get_app_version,
    get_data_dir,
    get_default_output_dir,
    get_fetch_delay,
    get_fetch_retries,
    get_fetch_timeout,
    get_log_level,
    get_profiles_dir,
    get_user_agent,
)

__all__ = [
    'get_app_name',
    'get_app_version',
    'get_data_dir',
    'get_default_output_dir',
    'get_fetch_delay',
    'get_fetch_retries',
    'get_fetch_timeout',
    'get_log_level',
    'get_profiles_dir',
    'get_user_agent',
]
