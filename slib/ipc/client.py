"""Client side of the daemon control protocol.

Every call opens a fresh connection, sends one request line, reads one reply
line and closes. A client checks the daemon's build identity once, when it is
constructed.
"""

import logging
from typing import Any

from slib.ipc.exceptions import DecodeError, IdentityMismatch, TransportError
from slib.ipc.identity import build_identity, identities_match
from slib.ipc.protocol import DELIMITER, decode_reply, encode_command, frame
from slib.ipc.utils import connect_to_server, describe_address, get_socket_address
from slib.ipc.views import (
	AlbumInfo,
	Command,
	Delete,
	Download,
	FetchAlbums,
	FetchArtists,
	FetchPlaylists,
	FetchSongs,
	GetAlbumInfo,
	GetSongInfo,
	GetStatus,
	Item,
	Pause,
	Play,
	PlaylistAddTo,
	PlaylistDelete,
	PlaylistDownload,
	PlaylistNew,
	PlaylistRemoveFrom,
	PlaylistUpload,
	QueueAdd,
	QueueRemove,
	Restart,
	Scan,
	Search,
	Shutdown,
	Skip,
	SongInfo,
	Star,
	Status,
	Stop,
	Verify,
	VolumeAdjust,
	VolumeSet,
)

logger = logging.getLogger(__name__)


class Client:
	"""Connection-per-call client for a running daemon.

	Raises IdentityMismatch on construction when the daemon was built from a
	different protocol revision, and TransportError when it is not reachable.
	"""

	def __init__(
		self,
		name: str | None = None,
		*,
		identity: bytes | None = None,
		verify: bool = True,
		timeout: float | None = None,
	) -> None:
		if name is None:
			from slib.config import load_config

			name = load_config().socket_name

		self.name = name
		self.address = get_socket_address(name)
		self.identity = build_identity() if identity is None else identity
		self.timeout = timeout

		if verify:
			try:
				remote = self.verify()
			except DecodeError as e:
				# A reply that is not a byte list cannot be our identity either
				record = e.record.encode() if isinstance(e.record, str) else bytes(e.record)
				raise IdentityMismatch(record, self.identity) from e
			if not identities_match(remote, self.identity):
				raise IdentityMismatch(remote, self.identity)
			logger.debug(f'Verified daemon at {describe_address(self.address)}')

	def call(self, command: Command) -> str:
		"""Send a command and return the raw reply record, without its delimiter."""
		sock = connect_to_server(self.address, self.timeout)
		try:
			sock.sendall(frame(encode_command(command)))

			data = b''
			while not data.endswith(DELIMITER):
				chunk = sock.recv(4096)
				if not chunk:
					break
				data += chunk
		except OSError as e:
			raise TransportError(f'Connection to {describe_address(self.address)} failed: {e}') from e
		finally:
			sock.close()

		if not data.endswith(DELIMITER):
			raise TransportError(f'No response from server for {command.tag()}')
		record = data[: -len(DELIMITER)]
		try:
			return record.decode()
		except UnicodeDecodeError as e:
			raise DecodeError(f'Reply to {command.tag()} is not valid UTF-8: {e}', record) from e

	def send(self, command: Command) -> Any:
		"""Send a command and decode the reply into its declared type."""
		return decode_reply(command, self.call(command))

	def verify(self) -> bytes:
		return bytes(self.send(Verify()))

	def shutdown(self) -> bool:
		return self.send(Shutdown())

	def fetch_artists(self) -> list[Item]:
		return self.send(FetchArtists())

	def fetch_albums(self) -> list[Item]:
		return self.send(FetchAlbums())

	def fetch_playlists(self) -> list[Item]:
		return self.send(FetchPlaylists())

	def fetch_songs(self) -> list[Item]:
		return self.send(FetchSongs())

	def scan(self) -> bool:
		return self.send(Scan())

	def status(self) -> Status:
		return self.send(GetStatus())

	def restart(self) -> bool:
		return self.send(Restart())

	def play(self) -> bool:
		return self.send(Play())

	def stop(self) -> bool:
		return self.send(Stop())

	def pause(self) -> bool:
		return self.send(Pause())

	def skip(self) -> bool:
		return self.send(Skip())

	def queue_add(self, id: Item, position: int) -> bool:
		return self.send(QueueAdd(id=id, position=position))

	def queue_remove(self, id: Item) -> bool:
		return self.send(QueueRemove(id=id))

	def volume_adjust(self, amount: int) -> bool:
		return self.send(VolumeAdjust(amount=amount))

	def volume_set(self, amount: int) -> bool:
		return self.send(VolumeSet(amount=amount))

	def search(self, query: str) -> list[Item]:
		return self.send(Search(query=query))

	def download(self, id: Item) -> bool:
		return self.send(Download(id=id))

	def delete(self, id: Item) -> bool:
		return self.send(Delete(id=id))

	def star(self, id: Item) -> bool:
		return self.send(Star(id=id))

	def playlist_download(self, id: Item) -> bool:
		return self.send(PlaylistDownload(id=id))

	def playlist_upload(self, id: Item) -> bool:
		return self.send(PlaylistUpload(id=id))

	def playlist_new(self, name: str) -> bool:
		return self.send(PlaylistNew(name=name))

	def playlist_add_to(self, playlist: Item, id: Item) -> bool:
		return self.send(PlaylistAddTo(playlist=playlist, id=id))

	def playlist_remove_from(self, playlist: Item, id: Item) -> bool:
		return self.send(PlaylistRemoveFrom(playlist=playlist, id=id))

	def playlist_delete(self, id: Item) -> bool:
		return self.send(PlaylistDelete(id=id))

	def song_info(self, id: Item) -> SongInfo | None:
		return self.send(GetSongInfo(id=id))

	def album_info(self, id: Item) -> AlbumInfo | None:
		return self.send(GetAlbumInfo(id=id))
