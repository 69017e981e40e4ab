class SlibError(Exception):
	"""Base class for all errors raised by the control protocol."""

	pass


class TransportError(SlibError):
	"""Raised when the local socket cannot be bound, connected to or read from."""

	pass


class DecodeError(SlibError):
	"""Raised when a record is not a well-formed encoding of the expected shape

	Attributes:
		record: The offending record, as received
	"""

	def __init__(self, message: str, record: str | bytes = ''):
		self.record = record
		super().__init__(message)


class IdentityMismatch(SlibError):
	"""Raised when the server reports a different build identity than the client

	Attributes:
		remote: Identity reported by the server
		local: Identity of this build
	"""

	def __init__(self, remote: bytes, local: bytes):
		self.remote = remote
		self.local = local
		super().__init__(f'Server build identity {remote.hex()} does not match client build identity {local.hex()}')


class CapabilityError(SlibError):
	"""Raised when a daemon handler returns a value of the wrong type."""

	pass
