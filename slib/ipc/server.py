"""Session server - serves one daemon over the local control socket.

Each connection carries exactly one request line and one reply line.
Connections are handled one at a time, in accept order, until the daemon
acknowledges a Shutdown command.
"""

import errno
import logging
import socket
from enum import Enum

from slib.ipc.daemon import Daemon
from slib.ipc.dispatch import dispatch
from slib.ipc.exceptions import DecodeError
from slib.ipc.protocol import decode_command, encode_value, frame
from slib.ipc.utils import create_listener, describe_address, get_socket_address, remove_socket_file
from slib.ipc.views import Command, Shutdown

logger = logging.getLogger(__name__)

SHUTDOWN_ACK = encode_value(True, bool)

# accept() errors that mean the listening socket itself is gone
LISTENER_ERRNOS = frozenset({errno.EBADF, errno.EINVAL, errno.ENOTSOCK})


class ServerState(str, Enum):
	LISTENING = 'listening'
	TERMINATED = 'terminated'


class SessionServer:
	"""Accept loop that dispatches one command per connection."""

	def __init__(self, daemon: Daemon, name: str | None = None, identity: bytes | None = None) -> None:
		if name is None:
			from slib.config import load_config

			name = load_config().socket_name

		self.daemon = daemon
		self.name = name
		self.address = get_socket_address(name)
		self.identity = identity
		self.state: ServerState | None = None
		self._listener: socket.socket | None = None

	def listen(self) -> None:
		"""Bind the control socket. Raises TransportError if the name is taken."""
		self._listener = create_listener(self.address)
		self.state = ServerState.LISTENING
		logger.info(f'Listening on {describe_address(self.address)}')

	def handle_connection(self, conn: socket.socket) -> Command | None:
		"""Serve a single request. Returns the command if it ended the session."""
		with conn, conn.makefile('rb') as reader:
			line = reader.readline()
			try:
				command = decode_command(line)
			except DecodeError as e:
				logger.warning(f'Dropping connection with malformed request: {e}')
				return None

			try:
				reply = dispatch(self.daemon, command, self.identity)
			except Exception as e:
				logger.exception(f'Error handling {command.tag()}: {e}')
				return None

			try:
				conn.sendall(frame(reply))
			except OSError as e:
				logger.warning(f'Failed to send reply to {command.tag()}: {e}')

		if isinstance(command, Shutdown) and reply == SHUTDOWN_ACK:
			return command
		if isinstance(command, Shutdown):
			logger.info('Daemon refused to shut down')
		return None

	def serve_forever(self) -> None:
		"""Run the accept loop until the daemon acknowledges a shutdown."""
		if self._listener is None:
			raise RuntimeError('listen() must be called before serve_forever()')

		try:
			while self.state is ServerState.LISTENING:
				try:
					conn, _ = self._listener.accept()
				except OSError as e:
					if e.errno in LISTENER_ERRNOS:
						logger.error(f'Listener on {describe_address(self.address)} is unusable: {e}')
						raise
					logger.warning(f'Incoming connection failed: {e}')
					continue

				if self.handle_connection(conn) is not None:
					logger.info('Shutdown acknowledged, stopping server')
					self.state = ServerState.TERMINATED
		finally:
			self.close()

	def run(self) -> None:
		"""Bind the socket and serve until shutdown."""
		self.listen()
		self.serve_forever()

	def close(self) -> None:
		"""Stop listening and release the socket name."""
		if self._listener is None:
			return
		self._listener.close()
		self._listener = None
		remove_socket_file(self.address)
		self.state = ServerState.TERMINATED
		logger.info('Server stopped')
