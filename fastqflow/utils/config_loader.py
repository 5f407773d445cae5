import os
import copy
import yaml
from typing import Dict, Any, Optional

from fastqflow.utils.errors import ConfigError


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_fastp_bounds(fastp: Dict[str, Any], source: str) -> None:
    """Every prompt default must be an answer the prompt itself accepts."""
    if not isinstance(fastp, dict):
        raise ConfigError(f"The fastp section in {source} must be a mapping")
    for key, bounds in fastp.items():
        if not isinstance(bounds, dict):
            raise ConfigError(f"fastp.{key} in {source} must be a mapping with default/min/max")
        default, minimum, maximum = bounds.get('default'), bounds.get('min'), bounds.get('max')
        if not _is_int(default) or not _is_int(minimum):
            raise ConfigError(f"fastp.{key} in {source} needs integer 'default' and 'min' values")
        if maximum is not None and not _is_int(maximum):
            raise ConfigError(f"fastp.{key} in {source}: 'max' must be an integer")
        if minimum < 0 or default < minimum or (maximum is not None and not minimum <= default <= maximum):
            raise ConfigError(
                f"fastp.{key} in {source}: default {default} is outside "
                f"{minimum}-{maximum if maximum is not None else 'unbounded'}"
            )


class ConfigLoader:
    """Loads the bundled defaults and merges an optional user YAML file over them."""

    def __init__(self):
        current_dir = os.path.dirname(os.path.abspath(__file__))
        self.config_dir = os.path.join(os.path.dirname(current_dir), 'config')
        self.defaults_path = os.path.join(self.config_dir, 'defaults.yaml')

    def _read_yaml(self, path: str) -> Dict[str, Any]:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a mapping at the top level")
        return data

    def load_defaults(self) -> Dict[str, Any]:
        return self._read_yaml(self.defaults_path)

    def load(self, user_config: Optional[str] = None) -> Dict[str, Any]:
        """
        Return the effective settings.

        Args:
            user_config: Optional path to a YAML file overriding the defaults

        Raises:
            FileNotFoundError: user_config does not exist
            ConfigError: the file is malformed, names an unknown section or sets
                fastp bounds whose default is out of range
        """
        settings = self.load_defaults()
        if not user_config:
            _validate_fastp_bounds(settings.get('fastp', {}), self.defaults_path)
            return settings

        if not os.path.exists(user_config):
            raise FileNotFoundError(f"Config file not found: {user_config}")

        overrides = self._read_yaml(user_config)
        unknown = sorted(set(overrides) - set(settings))
        if unknown:
            raise ConfigError(
                f"Unknown section(s) in {user_config}: {', '.join(unknown)}. "
                f"Expected one of: {', '.join(sorted(settings))}"
            )

        merged = _deep_merge(settings, overrides)
        _validate_fastp_bounds(merged.get('fastp', {}), user_config)
        return merged
