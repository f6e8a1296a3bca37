"""Reading the configuration file."""

from pathlib import Path

import yaml

from vcverifier.settings import Configuration


def read_config(config_file) -> Configuration:
    """Load a YAML configuration file, filling in defaults for absent values."""
    with Path(config_file).open(encoding="utf-8") as stream:
        data = yaml.safe_load(stream)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {config_file} must contain a mapping")
    return Configuration.from_dict(data)