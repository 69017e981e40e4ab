import logging
import os

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def setup_logging(level: str | None = None, stream=None) -> logging.Logger:
	"""Configure root logging for a slib process.

	Only entry points call this; library modules just use module loggers.
	The level falls back to SLIB_LOGGING_LEVEL, then 'info'.
	"""
	level_name = (level or os.environ.get('SLIB_LOGGING_LEVEL') or 'info').upper()
	log_level = getattr(logging, level_name, None)
	known = isinstance(log_level, int)

	logging.basicConfig(
		level=log_level if known else logging.INFO,
		format=LOG_FORMAT,
		handlers=[logging.StreamHandler(stream)],
		force=True,
	)

	logger = logging.getLogger('slib')
	if not known:
		logger.warning(f'Unknown log level {level_name!r}, using INFO')
	return logger
