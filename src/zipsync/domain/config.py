from __future__ import annotations

"""
Configuration Domain Management.

Handles the default runtime configuration and its persistent storage as
JSON in the user data directory.
"""

import json
import logging
import os
from typing import Any, Dict

from zipsync.domain.constants import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_EXTRACT_SUBDIR,
    DEFAULT_KEY_PREFIX,
    DEFAULT_MAX_NESTING_DEPTH,
    DEFAULT_STORAGE_BACKEND,
    DEFAULT_UPLOAD_TIMEOUT,
)
from zipsync.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE = os.path.join(get_user_data_dir(), "config.json")


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    base = os.getcwd()
    return {
        # IO Paths
        "archive_path": "",
        "extract_path": os.path.join(base, DEFAULT_EXTRACT_SUBDIR),
        "upload_path": "",

        # Object Store
        "bucket_name": "",
        "key_prefix": DEFAULT_KEY_PREFIX,
        "region": "",
        "storage_backend": DEFAULT_STORAGE_BACKEND,
        "endpoint_url": "",
        "upload_timeout": DEFAULT_UPLOAD_TIMEOUT,

        # Extraction
        "max_nesting_depth": DEFAULT_MAX_NESTING_DEPTH,

        # Stages
        "print_tree": True,
        "skip_upload": False,
    }

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Load the persisted configuration merged over the defaults.

    Returns:
        Dict[str, Any]: The loaded configuration or defaults on failure.
    """
    defaults = get_default_config()

    if not os.path.exists(CONFIG_FILE):
        logger.debug("Config file not found. Returning defaults.")
        return defaults

    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            logger.warning("Corrupted config file. Resetting to defaults.")
            return defaults

        stored = data.get("config", {})
        if isinstance(stored, dict):
            defaults.update(stored)
        return defaults

    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return defaults


def save_config(config: Dict[str, Any]) -> bool:
    """
    Persist the provided configuration.

    Args:
        config: The configuration dictionary to save.

    Returns:
        bool: True when the file was written.
    """
    state = {"version": CURRENT_CONFIG_VERSION, "config": config}
    try:
        os.makedirs(os.path.dirname(CONFIG_FILE), exist_ok=True)
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {CONFIG_FILE}")
        return True
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
        return False
