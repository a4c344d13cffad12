# ============================================
# KNNLab - src/knnlab/utils/config_loader.py
# knn_config.yaml and logging.yaml with environment overrides
# ============================================

import os
import re
import copy
import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Union, List
from dataclasses import dataclass
from datetime import datetime

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigurationError

# KNNLAB_* overrides may come from a .env file
load_dotenv()

# Whole-value placeholder: ${VAR} or ${VAR:default}
ENV_PLACEHOLDER = re.compile(r'^\$\{(?P<name>[^}:]+)(?::(?P<default>[^}]*))?\}$')

KNN_CONFIG_DEFAULTS: Dict[str, Any] = {
    'simulation': {
        'k': 3,
        'metric': 'Euclidean',
        'minkowski_p': 3.0,
        'voting': 'Majority',
        'use_scaling': False,
        'simulate_imbalance': False,
        'dataset_size': 30,
        'dataset_type': 'Continuous',
        'query': {'x': 50.0, 'y': 50.0},
        'categorical_query': {'x': 55.0, 'y': 55.0},
    },
    'elbow': {
        'max_k': 15,
    },
}

LOGGING_CONFIG_DEFAULTS: Dict[str, Any] = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        }
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'INFO',
            'formatter': 'simple',
            'stream': 'ext://sys.stdout'
        }
    },
    'loggers': {
        'knnlab': {'level': 'INFO', 'handlers': ['console'], 'propagate': True}
    }
}

DEFAULTS = {
    'knn_config': KNN_CONFIG_DEFAULTS,
    'logging': LOGGING_CONFIG_DEFAULTS,
}

# Top-level sections a config file must define to be accepted
REQUIRED_SECTIONS = {
    'knn_config': ('simulation', 'elbow'),
}

@dataclass
class ConfigMetadata:
    """Where a loaded configuration came from"""
    config_name: str
    file_path: Optional[Path]
    last_modified: Optional[datetime]
    from_defaults: bool = False

class ConfigValidationError(ConfigurationError):
    """A config file is not valid YAML, not a mapping, or lacks a required section"""
    pass

def _coerce_scalar(value: Any) -> Any:
    """Substituted environment strings back to YAML scalars ('5' -> 5, 'true' -> True)"""
    if not isinstance(value, str):
        return value
    try:
        return yaml.safe_load(value)
    except yaml.YAMLError:
        return value

def substitute_environment(value: Any) -> Any:
    """
    Resolve ${VAR} / ${VAR:default} placeholders anywhere in a parsed config

    Only values that consist entirely of a placeholder are substituted. An
    unset variable without a default leaves the placeholder in place.
    """
    if isinstance(value, dict):
        return {key: substitute_environment(item) for key, item in value.items()}
    if isinstance(value, list):
        return [substitute_environment(item) for item in value]
    if not isinstance(value, str):
        return value

    match = ENV_PLACEHOLDER.match(value)
    if match is None:
        return value

    resolved = os.getenv(match.group('name'), match.group('default'))
    return value if resolved is None else _coerce_scalar(resolved)

class ConfigLoader:
    """
    Loads the KNNLab configuration files

    Files are read from <project root>/config, or from KNNLAB_CONFIG_DIR
    when set. A missing or invalid file is replaced by the built-in
    defaults in memory; nothing is ever written back to disk.
    """

    CONFIG_FILES = ["knn_config.yaml", "logging.yaml"]

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """
        Args:
            config_dir: Directory holding the YAML files; auto-detected when None
        """
        self.project_root = self._find_project_root()
        self.config_dir = Path(config_dir or os.getenv("KNNLAB_CONFIG_DIR") or self.project_root / "config")

        self.configs: Dict[str, Dict[str, Any]] = {}
        self.metadata: Dict[str, ConfigMetadata] = {}

        # Handlers are attached once logger.py applies logging.yaml
        self.logger = logging.getLogger(__name__)

        for filename in self.CONFIG_FILES:
            self._load(Path(filename).stem)

    def _find_project_root(self) -> Path:
        current = Path(__file__).resolve()
        for parent in current.parents:
            if any((parent / marker).exists() for marker in ('setup.py', '.git', 'requirements.txt')):
                return parent
        return current.parents[3]

    def _load(self, config_name: str):
        """Load one config by name, falling back to its defaults"""
        path = self.config_dir / f"{config_name}.yaml"

        if not path.exists():
            self._use_defaults(config_name)
            return

        try:
            data = self._read(path, config_name)
        except ConfigValidationError as e:
            self.logger.warning(f"Ignoring {path.name}, using defaults: {e.message}")
            self._use_defaults(config_name)
            return

        self.configs[config_name] = data
        self.metadata[config_name] = ConfigMetadata(
            config_name=config_name,
            file_path=path,
            last_modified=datetime.fromtimestamp(path.stat().st_mtime),
        )
        self.logger.debug(f"Loaded {config_name} from {path}")

    def _read(self, path: Path, config_name: str) -> Dict[str, Any]:
        """Parse, substitute and check one YAML file"""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML in {path.name}: {e}", config_name=config_name, cause=e)

        if not isinstance(data, dict):
            raise ConfigValidationError(f"{path.name} must contain a mapping at the top level", config_name=config_name)

        data = substitute_environment(data)

        missing = [section for section in REQUIRED_SECTIONS.get(config_name, ()) if section not in data]
        if missing:
            raise ConfigValidationError(f"{path.name} is missing sections {missing}", config_name=config_name)

        return data

    def _use_defaults(self, config_name: str):
        if config_name not in DEFAULTS:
            self.logger.warning(f"No built-in defaults for {config_name}")
            return

        self.configs[config_name] = substitute_environment(copy.deepcopy(DEFAULTS[config_name]))
        self.metadata[config_name] = ConfigMetadata(
            config_name=config_name, file_path=None, last_modified=None, from_defaults=True
        )
        self.logger.debug(f"Using built-in defaults for {config_name}")

    def get_config(self, config_name: str) -> Dict[str, Any]:
        """Deep copy of a whole configuration, or {} when unknown"""
        if config_name not in self.configs:
            self.logger.warning(f"Configuration '{config_name}' not found")
            return {}
        return copy.deepcopy(self.configs[config_name])

    def get(self, config_name: str, key_path: str, default: Any = None) -> Any:
        """
        One value by dot path

        Args:
            config_name: e.g. 'knn_config'
            key_path: e.g. 'simulation.k'
            default: Returned when any segment of the path is missing
        """
        current = self.configs.get(config_name, {})
        for key in key_path.split('.'):
            if not isinstance(current, dict) or key not in current:
                return default
            current = current[key]
        return copy.deepcopy(current)

    def set(self, config_name: str, key_path: str, value: Any):
        """Override one value in memory; the file on disk is untouched"""
        *parents, leaf = key_path.split('.')
        current = self.configs.setdefault(config_name, {})
        for key in parents:
            current = current.setdefault(key, {})
        current[leaf] = value

    def reload_config(self, config_name: Optional[str] = None):
        """Re-read one config, or every known one, from disk"""
        names = [config_name] if config_name else [Path(f).stem for f in self.CONFIG_FILES]
        for name in names:
            self.configs.pop(name, None)
            self.metadata.pop(name, None)
            self._load(name)
        self.logger.info(f"Reloaded configuration: {', '.join(names)}")

    def get_metadata(self, config_name: str) -> Optional[ConfigMetadata]:
        return self.metadata.get(config_name)

    def list_configs(self) -> List[str]:
        return list(self.configs.keys())

    def export_config(self, config_name: str, format: str = 'yaml') -> str:
        """Serialize a configuration as 'yaml' or 'json'"""
        data = self.get_config(config_name)
        fmt = format.lower()

        if fmt == 'json':
            return json.dumps(data, indent=2, default=str)
        if fmt == 'yaml':
            return yaml.dump(data, default_flow_style=False, indent=2, sort_keys=False)
        raise ValueError(f"Unsupported export format: {format}")

# Global configuration instance
config = ConfigLoader()

def get_config(config_name: str) -> Dict[str, Any]:
    """Whole configuration by name"""
    return config.get_config(config_name)

def get_knn_config() -> Dict[str, Any]:
    """The simulation and elbow defaults"""
    return get_config('knn_config')
