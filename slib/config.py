"""Configuration for slib clients and daemons.

Values are resolved in order: explicit overrides, environment variables
(a local .env file is loaded first), the JSON config file, then defaults.
"""

import json
import logging
import os
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_SOCKET_NAME = 'slib.socket'

ENV_VARS = {
	'socket_name': 'SLIB_SOCKET_NAME',
	'log_level': 'SLIB_LOGGING_LEVEL',
}


class SlibConfig(BaseModel):
	model_config = ConfigDict(extra='ignore')

	socket_name: str = Field(default=DEFAULT_SOCKET_NAME, min_length=1, description='Logical name of the daemon socket')
	log_level: str = Field(default='info', description='debug, info, warning, error or critical')


def get_config_dir() -> Path:
	"""Get slib config directory."""
	if sys.platform == 'win32':
		base = Path(os.environ.get('APPDATA', Path.home()))
	else:
		base = Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / '.config'))
	return base / 'slib'


def get_config_path() -> Path:
	"""Get slib config file path."""
	return get_config_dir() / 'config.json'


def _read_config_file(path: Path) -> dict:
	if not path.exists():
		return {}
	try:
		data = json.loads(path.read_text())
	except (OSError, json.JSONDecodeError) as e:
		logger.warning(f'Ignoring unreadable config file {path}: {e}')
		return {}
	if not isinstance(data, dict):
		logger.warning(f'Ignoring config file {path}: expected a JSON object')
		return {}
	return data


def load_config(config_path: Path | None = None, **overrides: str | None) -> SlibConfig:
	"""Build the effective configuration."""
	load_dotenv(find_dotenv(usecwd=True))

	values = _read_config_file(config_path or get_config_path())
	for key, env_var in ENV_VARS.items():
		if env_value := os.environ.get(env_var):
			values[key] = env_value
	values.update({key: value for key, value in overrides.items() if value is not None})

	try:
		return SlibConfig.model_validate(values)
	except ValidationError as e:
		logger.warning(f'Invalid configuration, using defaults: {e}')
		return SlibConfig()
