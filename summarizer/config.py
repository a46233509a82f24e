"""Protein cache configuration with YAML support."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from protein_core.schemas import CacheOptions


def load_options(yaml_path: str | Path) -> CacheOptions:
    """Load cache options from a YAML file.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        CacheOptions instance

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        ValueError: If YAML is empty or the options are invalid
    """
    yaml_path = Path(yaml_path)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    with open(yaml_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not data or not isinstance(data, dict):
        raise ValueError(f"Empty or invalid YAML file: {yaml_path}")

    try:
        return CacheOptions.from_dict(data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {yaml_path}: {e}") from e


def save_options(options: CacheOptions, yaml_path: str | Path) -> None:
    """Write cache options to a YAML file."""
    yaml_path = Path(yaml_path)
    yaml_path.parent.mkdir(parents=True, exist_ok=True)

    data = options.to_dict()

    with open(yaml_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, indent=2)
