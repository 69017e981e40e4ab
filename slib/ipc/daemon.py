"""The capability contract a media daemon implements to be served over IPC."""

from abc import ABC, abstractmethod

from slib.ipc.views import AlbumInfo, Item, SongInfo, Status


class Daemon(ABC):
	"""One handler per protocol command.

	Handlers report failure through their return value (False, None or an empty
	list) rather than by raising. `shutdown` returning True is the only thing
	that ends the session loop.
	"""

	@abstractmethod
	def shutdown(self) -> bool: ...

	@abstractmethod
	def fetch_artists(self) -> list[Item]: ...

	@abstractmethod
	def fetch_albums(self) -> list[Item]: ...

	@abstractmethod
	def fetch_playlists(self) -> list[Item]: ...

	@abstractmethod
	def fetch_songs(self) -> list[Item]: ...

	@abstractmethod
	def scan(self) -> bool: ...

	@abstractmethod
	def status(self) -> Status: ...

	@abstractmethod
	def restart(self) -> bool: ...

	@abstractmethod
	def play(self) -> bool: ...

	@abstractmethod
	def stop(self) -> bool: ...

	@abstractmethod
	def pause(self) -> bool: ...

	@abstractmethod
	def skip(self) -> bool: ...

	@abstractmethod
	def queue_add(self, id: Item, position: int) -> bool: ...

	@abstractmethod
	def queue_remove(self, id: Item) -> bool: ...

	@abstractmethod
	def volume_adjust(self, amount: int) -> bool: ...

	@abstractmethod
	def volume_set(self, amount: int) -> bool: ...

	@abstractmethod
	def search(self, query: str) -> list[Item]: ...

	@abstractmethod
	def download(self, id: Item) -> bool: ...

	@abstractmethod
	def delete(self, id: Item) -> bool: ...

	@abstractmethod
	def star(self, id: Item) -> bool: ...

	@abstractmethod
	def playlist_download(self, id: Item) -> bool: ...

	@abstractmethod
	def playlist_upload(self, id: Item) -> bool: ...

	@abstractmethod
	def playlist_new(self, name: str) -> bool: ...

	@abstractmethod
	def playlist_add_to(self, playlist: Item, id: Item) -> bool: ...

	@abstractmethod
	def playlist_remove_from(self, playlist: Item, id: Item) -> bool: ...

	@abstractmethod
	def playlist_delete(self, id: Item) -> bool: ...

	@abstractmethod
	def song_info(self, id: Item) -> SongInfo | None: ...

	@abstractmethod
	def album_info(self, id: Item) -> AlbumInfo | None: ...

	def start(self, name: str | None = None) -> None:
		"""Serve this daemon on the named socket until it agrees to shut down."""
		from slib.ipc.server import SessionServer

		SessionServer(self, name).run()
