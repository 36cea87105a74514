"""Settings files and loaders.

Labels, currency conventions and chart names are stored in JSON files
so they can be changed without touching code.
"""

from .defaults import get_config_value, get_labels_config, load_config

__all__ = ['load_config', 'get_labels_config', 'get_config_value']
