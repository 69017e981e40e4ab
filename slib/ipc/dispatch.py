"""Maps decoded commands onto daemon handlers."""

import logging

from pydantic import ValidationError

from slib.ipc.daemon import Daemon
from slib.ipc.exceptions import CapabilityError
from slib.ipc.identity import build_identity
from slib.ipc.protocol import encode_reply, encode_value, validate_value
from slib.ipc.views import Command, Identity, Verify

logger = logging.getLogger(__name__)


def dispatch(daemon: Daemon, command: Command, identity: bytes | None = None) -> str:
	"""Run one command against the daemon and return the encoded reply payload.

	`Verify` is answered here without touching the daemon, so the handshake
	works even while the backend is still starting up.
	"""
	logger.debug(f'Dispatch: {command.tag()}')

	if isinstance(command, Verify):
		if identity is None:
			identity = build_identity()
		return encode_value(list(identity), Identity)

	handler = getattr(daemon, command.handler)
	result = handler(*command.arguments())

	try:
		result = validate_value(result, command.reply)
	except ValidationError as e:
		raise CapabilityError(f'{type(daemon).__name__}.{command.handler} returned {result!r}, expected {command.reply}') from e
	return encode_reply(command, result)
