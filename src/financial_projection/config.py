# src/financial_projection/config.py
"""
Configuration Management

Loads the mode-keyed input schemas shipped with the package and holds
the numeric constants shared by the statement and valuation engines.
"""

import os
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

logger = logging.getLogger(__name__)

# Package data directory
DATA_DIR = Path(__file__).parent / "data"
SCHEMA_FILENAME = "input_schemas.yaml"

# Environment override for the schema file
SCHEMA_PATH_ENV_VAR = "FINANCIAL_PROJECTION_SCHEMAS"

# Modeling constants
DEFAULT_MODE = "founder"
SUPPORTED_MODES = ("founder", "investor")
DEFAULT_PROJECTION_YEARS = 5
BALANCE_TOLERANCE = 1e-6
DEFAULT_DEPRECIATION_GROWTH = 0.05
DEFAULT_INTEREST_RATE = 0.05
DEFAULT_CAPEX_PERCENT = 0.03
DAYS_IN_YEAR = 365


def load_yaml_config(path: Path) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        path: Path to the YAML file

    Returns:
        Dictionary containing the configuration

    Raises:
        FileNotFoundError: If the configuration file doesn't exist
        yaml.YAMLError: If the file is not valid YAML
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r") as file:
        content = yaml.safe_load(file)

    if not isinstance(content, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping")

    return content


def schema_path() -> Path:
    """Resolve the schema file, honoring the environment override."""
    override = os.environ.get(SCHEMA_PATH_ENV_VAR)
    if override:
        return Path(override)
    return DATA_DIR / SCHEMA_FILENAME


@lru_cache(maxsize=4)
def _load_schemas(path: str) -> Dict[str, Any]:
    logger.debug("Loading input schemas from %s", path)
    return load_yaml_config(Path(path))


def get_input_schemas(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Return the raw mode-keyed schema document.

    The parsed document is cached per path; callers must not mutate it.
    """
    return _load_schemas(str(path or schema_path()))
