"""
Configuration loading for the fractal renderer.

Render settings come from three layers, later ones winning: RenderConfig
defaults, a JSON configuration file, and FRACTALS_* environment variables.
"""

import json
import os
import logging
from dataclasses import fields, asdict
from pathlib import Path
from typing import Dict, Any, Optional, Union

from ..api import RenderConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "FRACTALS_"


def _coerce(name: str, value: Any, target_type: Any) -> Any:
    """Convert a raw config value to the type of a RenderConfig field."""
    if value is None:
        return None

    if target_type is bool:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in ('1', 'true', 'yes', 'on'):
                return True
            if lowered in ('0', 'false', 'no', 'off'):
                return False
            raise ValueError(f"Invalid boolean for {name}: {value!r}")
        return bool(value)

    if target_type == Optional[int]:
        if isinstance(value, str) and value.strip().lower() in ('', 'none'):
            return None
        return int(value)

    if target_type is int:
        return int(value)

    if target_type is float:
        return float(value)

    if name == 'background':
        if isinstance(value, str):
            value = value.split(',')
        return tuple(int(part) for part in value)

    return value


class ConfigManager:
    """Load and validate RenderConfig objects from files and dictionaries."""

    def __init__(self):
        self._field_types = {f.name: f.type for f in fields(RenderConfig)}

    def load_config(self, config_file: Union[str, Path]) -> Dict[str, Any]:
        """
        Read a JSON configuration file.

        Args:
            config_file: Path to the JSON file

        Returns:
            Parsed configuration dictionary
        """
        path = Path(config_file)
        if path.suffix.lower() != '.json':
            raise ValueError(f"Unsupported config format '{path.suffix}'. Supported: .json")

        with open(path, 'r') as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a JSON object")

        logger.info(f"Loaded configuration: {path}")
        return data

    def create_render_config(self, data: Dict[str, Any],
                             base: Optional[RenderConfig] = None) -> RenderConfig:
        """
        Build a RenderConfig from a dictionary of overrides.

        Unknown keys raise ValueError.
        """
        values = asdict(base) if base is not None else asdict(RenderConfig())

        unknown = set(data) - set(self._field_types)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        for name, raw in data.items():
            values[name] = _coerce(name, raw, self._field_types[name])

        config = RenderConfig(**values)
        config.validate()
        return config

    def save_config(self, config: RenderConfig, config_file: Union[str, Path]) -> None:
        """Write a RenderConfig to a JSON file."""
        path = Path(config_file)
        with open(path, 'w') as f:
            json.dump(asdict(config), f, indent=2)
        logger.info(f"Saved configuration: {path}")


class EnvironmentConfig:
    """RenderConfig overrides read from FRACTALS_* environment variables."""

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def get_overrides(self) -> Dict[str, str]:
        """Map e.g. FRACTALS_USE_NUMBA=0 to {'use_numba': '0'}."""
        names = {f.name for f in fields(RenderConfig)}
        overrides = {}
        for key, value in self.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue
            name = key[len(ENV_PREFIX):].lower()
            if name in names:
                overrides[name] = value
            else:
                logger.warning(f"Ignoring unknown environment setting {key}")
        return overrides


def load_config_from_args(config_file: Optional[Union[str, Path]] = None,
                          environ: Optional[Dict[str, str]] = None) -> RenderConfig:
    """
    Combine defaults, an optional config file and environment overrides.

    Args:
        config_file: Optional JSON configuration file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated RenderConfig
    """
    manager = ConfigManager()
    config = RenderConfig()

    if config_file:
        config = manager.create_render_config(manager.load_config(config_file), config)

    env_overrides = EnvironmentConfig(environ).get_overrides()
    if env_overrides:
        config = manager.create_render_config(env_overrides, config)

    return config
