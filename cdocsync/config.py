"""
Configuration Manager for cdocsync

Loads settings from a YAML file with hardcoded fallbacks. Command line flags
override whatever is configured here.

Lookup order: explicit path, $CDOCSYNC_CONFIG, ./cdocsync.yaml, defaults.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import CDocsError
from .parsers.parser_factory import split_parser_args
from .reporting import Reporter

CONFIG_ENV_VAR = 'CDOCSYNC_CONFIG'
CONFIG_FILE_NAME = 'cdocsync.yaml'
LANGUAGES = ('auto', 'c', 'cpp')

# Global configuration cache
_config_cache = None


def get_default_config() -> Dict[str, Any]:
    """Get default hardcoded configuration when no YAML file is found"""
    return {
        'sidecar': 'doc_comments.json',
        'parser': {
            'args': [],
            'language': 'auto',
        },
        'extract': {
            'keep_partial': False,
        },
        'verbose': False,
    }


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    with open(config_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise CDocsError(f"{config_path}: configuration must be a mapping")
    return data


def _flag(value: Any, key: str) -> bool:
    """Return a boolean setting; a missing value is False."""
    if value is None:
        return False
    if not isinstance(value, bool):
        raise CDocsError(f"'{key}' must be true or false, got {value!r}")
    return value


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize value types and reject unknown languages and non-boolean flags."""
    for section in ('parser', 'extract'):
        if not isinstance(config.get(section), dict):
            raise CDocsError(f"'{section}' must be a mapping")
    config['parser']['args'] = split_parser_args(config['parser'].get('args'))
    language = config['parser'].get('language') or 'auto'
    if language not in LANGUAGES:
        raise CDocsError(f"Unknown parser language '{language}'. Available: {list(LANGUAGES)}")
    config['parser']['language'] = language
    config['sidecar'] = str(config.get('sidecar') or 'doc_comments.json')
    config['extract']['keep_partial'] = _flag(config['extract'].get('keep_partial'), 'extract.keep_partial')
    config['verbose'] = _flag(config.get('verbose'), 'verbose')
    return config


def find_config_file(config_path: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """Return the configuration file to use, if any."""
    if config_path:
        return Path(config_path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    local = Path.cwd() / CONFIG_FILE_NAME
    if local.exists():
        return local
    return None


def load_config(config_path: Optional[Union[str, Path]] = None,
                reporter: Optional[Reporter] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file or defaults.

    Args:
        config_path: Explicit configuration file; errors reading it are fatal
        reporter: Receives a warning when an implicit file is unusable

    Returns:
        Configuration dictionary

    Raises:
        CDocsError: If an explicit configuration file is unreadable or invalid
    """
    global _config_cache

    if config_path is None and _config_cache is not None:
        return _config_cache

    config = get_default_config()
    path = find_config_file(config_path)
    if path is not None:
        try:
            config = validate_config(_merge(config, _read_config_file(path)))
        except (OSError, UnicodeDecodeError, yaml.YAMLError, CDocsError) as e:
            if config_path is not None:
                raise CDocsError(f"Error loading config from {path}: {e}") from e
            if reporter is not None:
                reporter.warning(f"Error loading config from {path}: {e}; using defaults")
            config = validate_config(get_default_config())
    else:
        config = validate_config(config)
    if config_path is None:
        _config_cache = config
    return config


def clear_config_cache():
    global _config_cache
    _config_cache = None
