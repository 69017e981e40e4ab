"""Shared fixtures: a recording stub daemon and a server on a background thread."""

import threading
import uuid

import pytest

from slib.ipc.client import Client
from slib.ipc.daemon import Daemon
from slib.ipc.server import SessionServer
from slib.ipc.utils import create_listener, get_socket_address, remove_socket_file
from slib.ipc.views import AlbumInfo, Item, SongInfo, Status


class StubDaemon(Daemon):
	"""Daemon that records every call and returns canned values."""

	def __init__(self) -> None:
		self.calls: list[tuple[str, tuple]] = []
		self.allow_shutdown = True
		self.search_results: list[Item] = []
		self.current_status = Status(playing=False, current_song=None, queue=[])
		self.songs: dict[str, SongInfo] = {}
		self.albums: dict[str, AlbumInfo] = {}
		self.bool_result = True

	def _record(self, name: str, *args):
		self.calls.append((name, args))

	def shutdown(self) -> bool:
		self._record('shutdown')
		return self.allow_shutdown

	def fetch_artists(self) -> list[Item]:
		self._record('fetch_artists')
		return [Item(id='ar-1', name='Artist', image_path='')]

	def fetch_albums(self) -> list[Item]:
		self._record('fetch_albums')
		return [Item(id='al-1', name='Album', image_path='')]

	def fetch_playlists(self) -> list[Item]:
		self._record('fetch_playlists')
		return []

	def fetch_songs(self) -> list[Item]:
		self._record('fetch_songs')
		return [Item(id='s-1', name='Song', image_path='')]

	def scan(self) -> bool:
		self._record('scan')
		return self.bool_result

	def status(self) -> Status:
		self._record('status')
		return self.current_status

	def restart(self) -> bool:
		self._record('restart')
		return self.bool_result

	def play(self) -> bool:
		self._record('play')
		return self.bool_result

	def stop(self) -> bool:
		self._record('stop')
		return self.bool_result

	def pause(self) -> bool:
		self._record('pause')
		return self.bool_result

	def skip(self) -> bool:
		self._record('skip')
		return self.bool_result

	def queue_add(self, id: Item, position: int) -> bool:
		self._record('queue_add', id, position)
		return self.bool_result

	def queue_remove(self, id: Item) -> bool:
		self._record('queue_remove', id)
		return self.bool_result

	def volume_adjust(self, amount: int) -> bool:
		self._record('volume_adjust', amount)
		return self.bool_result

	def volume_set(self, amount: int) -> bool:
		self._record('volume_set', amount)
		return self.bool_result

	def search(self, query: str) -> list[Item]:
		self._record('search', query)
		return self.search_results

	def download(self, id: Item) -> bool:
		self._record('download', id)
		return self.bool_result

	def delete(self, id: Item) -> bool:
		self._record('delete', id)
		return self.bool_result

	def star(self, id: Item) -> bool:
		self._record('star', id)
		return self.bool_result

	def playlist_download(self, id: Item) -> bool:
		self._record('playlist_download', id)
		return self.bool_result

	def playlist_upload(self, id: Item) -> bool:
		self._record('playlist_upload', id)
		return self.bool_result

	def playlist_new(self, name: str) -> bool:
		self._record('playlist_new', name)
		return self.bool_result

	def playlist_add_to(self, playlist: Item, id: Item) -> bool:
		self._record('playlist_add_to', playlist, id)
		return self.bool_result

	def playlist_remove_from(self, playlist: Item, id: Item) -> bool:
		self._record('playlist_remove_from', playlist, id)
		return self.bool_result

	def playlist_delete(self, id: Item) -> bool:
		self._record('playlist_delete', id)
		return self.bool_result

	def song_info(self, id: Item) -> SongInfo | None:
		self._record('song_info', id)
		return self.songs.get(id.id)

	def album_info(self, id: Item) -> AlbumInfo | None:
		self._record('album_info', id)
		return self.albums.get(id.id)


class ServerThread:
	"""A SessionServer bound in the test thread and served on a daemon thread."""

	def __init__(self, daemon: Daemon, name: str, identity: bytes | None = None) -> None:
		self.daemon = daemon
		self.name = name
		self.server = SessionServer(daemon, name, identity=identity)
		self.server.listen()
		self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)
		self.thread.start()

	def stop(self) -> None:
		if not self.thread.is_alive():
			return
		if isinstance(self.daemon, StubDaemon):
			self.daemon.allow_shutdown = True
		Client(self.name, verify=False, timeout=5).shutdown()
		self.thread.join(timeout=5)


@pytest.fixture
def socket_name() -> str:
	return f'test-{uuid.uuid4().hex[:12]}'


@pytest.fixture
def stub_daemon() -> StubDaemon:
	return StubDaemon()


@pytest.fixture
def server(stub_daemon, socket_name):
	server_thread = ServerThread(stub_daemon, socket_name)
	yield server_thread
	server_thread.stop()


@pytest.fixture
def client(server) -> Client:
	return Client(server.name, timeout=5)


@pytest.fixture
def server_factory(stub_daemon, socket_name):
	"""Start servers on the test's socket name, optionally with a foreign identity."""
	started: list[ServerThread] = []

	def start(identity: bytes | None = None) -> ServerThread:
		server_thread = ServerThread(stub_daemon, socket_name, identity=identity)
		started.append(server_thread)
		return server_thread

	yield start
	for server_thread in started:
		server_thread.stop()


@pytest.fixture
def canned_server(socket_name):
	"""A bare listener that answers one request with a fixed record, whatever the request was."""
	address = get_socket_address(socket_name)
	listener = create_listener(address)
	threads: list[threading.Thread] = []

	def start(reply: bytes) -> str:
		def answer() -> None:
			conn, _ = listener.accept()
			with conn, conn.makefile('rb') as reader:
				reader.readline()
				conn.sendall(reply)

		thread = threading.Thread(target=answer, daemon=True)
		thread.start()
		threads.append(thread)
		return socket_name

	yield start
	for thread in threads:
		thread.join(timeout=5)
	listener.close()
	remove_socket_file(address)
