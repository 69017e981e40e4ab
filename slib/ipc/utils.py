"""Platform utilities for the daemon socket."""

import hashlib
import os
import socket
import sys
import tempfile
from pathlib import Path

from slib.ipc.exceptions import TransportError


def get_socket_address(name: str) -> str:
	"""Resolve a logical socket name to a platform address.

	On Linux, returns an abstract-namespace address (leading NUL byte).
	On Windows, returns a TCP address (tcp://localhost:PORT).
	Elsewhere, returns a Unix socket path in the temp directory.
	"""
	if sys.platform == 'win32':
		# Windows: use TCP on deterministic port (49152-65535)
		port = 49152 + (int(hashlib.md5(name.encode()).hexdigest()[:4], 16) % 16383)
		return f'tcp://localhost:{port}'
	if sys.platform.startswith('linux'):
		return f'\0{name}'
	return str(Path(tempfile.gettempdir()) / f'slib-{name}.sock')


def describe_address(address: str) -> str:
	"""Printable form of an address, abstract names shown with a leading '@'."""
	if address.startswith('\0'):
		return '@' + address[1:]
	return address


def is_filesystem_address(address: str) -> bool:
	return not address.startswith(('tcp://', '\0'))


def _tcp_host_port(address: str) -> tuple[str, int]:
	_, hostport = address.split('://', 1)
	host, port = hostport.split(':')
	return host, int(port)


def connect_to_server(address: str, timeout: float | None = None) -> socket.socket:
	"""Connect to the daemon socket at the given address."""
	if address.startswith('tcp://'):
		sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
		target = _tcp_host_port(address)
	else:
		sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
		target = address

	sock.settimeout(timeout)
	try:
		sock.connect(target)
	except OSError as e:
		sock.close()
		raise TransportError(f'Cannot connect to {describe_address(address)}: {e}') from e
	return sock


def is_listening(address: str) -> bool:
	"""Check whether something accepts connections at the address."""
	try:
		sock = connect_to_server(address, timeout=0.5)
	except TransportError:
		return False
	sock.close()
	return True


def create_listener(address: str) -> socket.socket:
	"""Bind and listen on the address.

	An address that is already served raises TransportError. A leftover socket
	file that nobody listens on is removed first.
	"""
	if address.startswith('tcp://'):
		sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
		target = _tcp_host_port(address)
	else:
		if is_filesystem_address(address) and os.path.exists(address):
			if is_listening(address):
				raise TransportError(f'Socket {address} is already in use by another daemon')
			os.unlink(address)
		sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
		target = address

	try:
		sock.bind(target)
		sock.listen()
	except OSError as e:
		sock.close()
		raise TransportError(f'Cannot listen on {describe_address(address)}: {e}') from e
	return sock


def remove_socket_file(address: str) -> None:
	"""Remove the socket file behind a filesystem address, if any."""
	if not is_filesystem_address(address):
		return
	try:
		os.unlink(address)
	except OSError:
		pass
