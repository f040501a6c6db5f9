import json
import os
from dataclasses import dataclass
from pathlib import Path

from signature_algorithm import ConfigError, DecodingError

from .keyfile import DEFAULT_KEYS_PATH

# defaults < JSON config file < KEYTOOL_* environment, command line flags go on top
ENV_PREFIX = 'KEYTOOL_'

DEFAULT_CONFIG_PATH = Path('keytool.json')

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')


@dataclass
class KeyToolConfig:
    keys_path: str = DEFAULT_KEYS_PATH
    log_level: str = 'INFO'
    log_file: str | None = None


def _string(data: dict, name: str, path: Path) -> str | None:
    value = data.get(name)
    if value is not None and not isinstance(value, str):
        msg = f'config file {path}: {name} must be a string, got {type(value).__name__}'
        raise DecodingError(msg)
    return value


def apply_file(config: KeyToolConfig, path: Path) -> KeyToolConfig:
    try:
        with path.open(encoding='utf-8') as f:
            data = json.load(f)
    except OSError as exc:
        msg = f'cannot read config file {path}: {exc.strerror or exc}'
        raise ConfigError(msg) from exc
    except json.JSONDecodeError as exc:
        msg = f'config file {path} is not valid JSON: {exc}'
        raise DecodingError(msg) from exc

    if not isinstance(data, dict):
        msg = f'config file {path} must contain a JSON object'
        raise DecodingError(msg)

    # unknown keys are ignored
    config.keys_path = _string(data, 'keys_path', path) or config.keys_path
    config.log_level = _string(data, 'log_level', path) or config.log_level
    config.log_file = _string(data, 'log_file', path) or config.log_file
    return config


def apply_env(config: KeyToolConfig) -> KeyToolConfig:
    if os.getenv(f'{ENV_PREFIX}KEYS_PATH'):
        config.keys_path = os.environ[f'{ENV_PREFIX}KEYS_PATH']
    if os.getenv(f'{ENV_PREFIX}LOG_LEVEL'):
        config.log_level = os.environ[f'{ENV_PREFIX}LOG_LEVEL']
    if os.getenv(f'{ENV_PREFIX}LOG_FILE'):
        config.log_file = os.environ[f'{ENV_PREFIX}LOG_FILE']
    return config


def check_log_level(level: str) -> str:
    if level.upper() not in LOG_LEVELS:
        msg = f'unknown log level {level!r}, expected one of {", ".join(LOG_LEVELS)}'
        raise DecodingError(msg)
    return level.upper()


# an explicit path has to exist, ./keytool.json is only read when present.
# log_level is the command line override and is checked instead of the configured one
def load_config(path: Path | None = None, log_level: str | None = None) -> KeyToolConfig:
    config = KeyToolConfig()
    if path is not None:
        apply_file(config, path)
    elif DEFAULT_CONFIG_PATH.is_file():
        apply_file(config, DEFAULT_CONFIG_PATH)

    apply_env(config)
    config.log_level = check_log_level(log_level or config.log_level)
    return config
