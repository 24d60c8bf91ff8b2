"""
YAML configuration input/output.
"""

from .config import LoadedConfiguration, build_from_dict, create_example_config, load_simulation_config, save_config

__all__ = ['LoadedConfiguration', 'build_from_dict', 'create_example_config', 'load_simulation_config', 'save_config']
