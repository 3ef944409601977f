"""Configuration loading utilities."""

from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR = Path(__file__).parent


def load_yaml_config(filename: str | Path) -> dict[str, Any]:
    """Load a YAML mapping.

    Relative names resolve against the config/ directory, so the bundled
    tables can be swapped by pointing ``TAX_TABLES_FILE`` at an absolute path.

    Raises:
        ValueError: If the file does not hold a mapping at the top level.
    """
    config_path = Path(filename)
    if not config_path.is_absolute():
        config_path = CONFIG_DIR / config_path
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{config_path} must contain a YAML mapping")
    return data
