"""
Configuration loader for quiz runs.

Handles loading and validating quiz configuration files and parsing
session durations given on the command line.
"""

import json
import math
import re
import sys
from pathlib import Path
from typing import Optional

from .models import QuizConfig


CONFIG_FILENAME = "quiz_config.json"

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(text: str) -> float:
    """
    Parse a duration into seconds.

    Accepts unit-suffixed durations such as "20s", "1m30s", "500ms" or "1.5h",
    and bare numbers, which are read as seconds.

    Raises:
        ValueError: If the text is not a valid duration
    """
    value = str(text).strip()
    if not value:
        raise ValueError("empty duration")

    try:
        seconds = float(value)
    except ValueError:
        pass
    else:
        if not math.isfinite(seconds):
            raise ValueError(f"invalid duration '{text}'")
        return seconds

    position = 0
    seconds = 0.0
    for match in _DURATION_PART.finditer(value):
        if match.start() != position:
            break
        number, unit = match.groups()
        seconds += float(number) * _DURATION_UNITS[unit]
        position = match.end()

    if position != len(value):
        raise ValueError(f"invalid duration '{text}'")

    return seconds


def default_config_path() -> Path:
    if getattr(sys, 'frozen', False):
        exe_dir = Path(sys.executable).parent
    else:
        exe_dir = Path(__file__).parent.parent
    return exe_dir / CONFIG_FILENAME


def load_config(config_path: Optional[Path] = None) -> QuizConfig:
    """
    Load quiz configuration from a JSON file.

    Args:
        config_path: Path to the configuration file. If None, looks for
                    'quiz_config.json' next to the executable/script.

    Returns:
        QuizConfig object with validated configuration

    Raises:
        ValueError: If config is invalid
    """
    explicit = config_path is not None
    if config_path is None:
        config_path = default_config_path()

    if not config_path.exists():
        if explicit:
            print(f"Warning: Config file '{config_path}' not found. Using default configuration.")
        return QuizConfig.default()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}")
    except OSError as e:
        raise ValueError(f"Error reading config file: {e}")

    if not isinstance(data, dict):
        raise ValueError("Invalid configuration: top level must be a JSON object")

    if isinstance(data.get('timeout'), str) and 'timeout_seconds' not in data:
        data['timeout_seconds'] = parse_duration(data['timeout'])

    try:
        config = QuizConfig.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid configuration: {e}")

    is_valid, error_message = config.validate()
    if not is_valid:
        raise ValueError(f"Invalid configuration: {error_message}")

    return config


def create_sample_config(output_path: Path):
    """
    Create a sample configuration file.

    Args:
        output_path: Path where to save the sample config
    """
    sample_config = {
        "path": "resources/problems.csv",
        "timeout_seconds": 20,
        "log_path": None,
        "_comment": "This is a sample quiz configuration. Command-line options override these values.",
        "_instructions": {
            "path": "CSV quiz file (prompt,answer per row) or an encrypted .enc quiz file",
            "timeout_seconds": "Time allowed for the whole quiz, in seconds",
            "timeout": "Alternative to timeout_seconds using duration syntax, e.g. \"1m30s\"",
            "log_path": "File to append session events to, or null to disable logging"
        }
    }

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(sample_config, f, indent=2)

    print(f"Sample configuration created at: {output_path}")
