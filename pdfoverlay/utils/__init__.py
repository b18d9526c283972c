"""
Utility modules for the viewer application.
"""
from .logging_setup import configure_logging
from .resource_loader import get_app_data_dir, get_config_dir

__all__ = [
    'configure_logging',
    'get_app_data_dir',
    'get_config_dir'
]
