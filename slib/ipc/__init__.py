"""Local control protocol between slib clients and the media daemon."""

from slib.ipc.client import Client
from slib.ipc.daemon import Daemon
from slib.ipc.dispatch import dispatch
from slib.ipc.exceptions import CapabilityError, DecodeError, IdentityMismatch, SlibError, TransportError
from slib.ipc.identity import build_identity
from slib.ipc.server import SessionServer
from slib.ipc.views import AlbumInfo, Command, Item, SongInfo, Status

__all__ = [
	'AlbumInfo',
	'CapabilityError',
	'Client',
	'Command',
	'Daemon',
	'DecodeError',
	'IdentityMismatch',
	'Item',
	'SessionServer',
	'SlibError',
	'SongInfo',
	'Status',
	'TransportError',
	'build_identity',
	'dispatch',
]
