# utils.py
"""
Utility functions for the simulation framework.

This module provides helper functions, such as logging setup, that are
used across different parts of the application but do not belong to a
specific domain like physics or rendering.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any

import pygame

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: The loaded config.json. Its optional "logging" section may
#       hold "level", "format", "log_file", "max_bytes" and "backup_count".
#   - Side Effects: Configures the root logger with a console handler and
#     a rotating file handler, creating the log directory if needed. The
#     numba logger is held at WARNING so JIT compilation does not flood a
#     DEBUG run.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: The parsed JSON object.
#   - Side Effects: Warns about any of CONFIG_SECTIONS that is missing;
#     the simulation then runs on its built-in defaults for that section.
#   - Raises: FileNotFoundError, json.JSONDecodeError, or ValueError when
#     the top level is not an object.
#
# hsl_color(hue: float) -> pygame.Color:
#   - Inputs: hue in degrees, [0, 360].
#   - Outputs: A fully saturated colour at 50% lightness.

CONFIG_SECTIONS = ('logging', 'simulation_parameters', 'visualization', 'run_control')
DEFAULT_LOG_FILE = 'logs/firework_particles.log'
DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(module)s - %(message)s'

def setup_logging(config: Dict[str, Any]) -> None:
    """
    Routes log records to the console and to a rotating log file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)

    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(log_level)
    # Calling this twice must not double every line.
    root.handlers.clear()

    formatter = logging.Formatter(log_config.get('format', DEFAULT_LOG_FORMAT))
    handlers = [
        logging.StreamHandler(),
        logging.handlers.RotatingFileHandler(
            log_file_path,
            maxBytes=log_config.get('max_bytes', 1024*1024),
            backupCount=log_config.get('backup_count', 5)
        ),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    logging.getLogger('numba').setLevel(logging.WARNING)

    logging.info(f"Logging to console and {log_file_path} at level {log_level}.")

def load_config(path: str) -> Dict[str, Any]:
    """Reads config.json and reports which sections it provides."""
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError as e:
        logging.error(f"Invalid JSON in {path} (line {e.lineno}, column {e.colno}).")
        raise

    if not isinstance(config, dict):
        msg = f"Configuration error: {path} must hold a JSON object, got {type(config).__name__}."
        logging.critical(msg)
        raise ValueError(msg)

    missing = [section for section in CONFIG_SECTIONS if section not in config]
    if missing:
        logging.warning(f"{path} has no {', '.join(missing)} section(s); using defaults.")
    logging.debug(f"Configuration sections loaded from {path}: {sorted(config)}")
    return config

def hsl_color(hue: float) -> pygame.Color:
    """Returns the saturated, mid-lightness colour for a hue in degrees."""
    color = pygame.Color(0, 0, 0)
    color.hsla = (min(max(hue, 0.0), 360.0), 100, 50, 100)
    return color

def wrap_hue(hue: float) -> float:
    """Wraps a hue in degrees back into [0, 360)."""
    return hue % 360.0
