"""Tests for the client session and the Verify handshake."""

import pytest

from slib.ipc.client import Client
from slib.ipc.exceptions import DecodeError, IdentityMismatch, SlibError, TransportError
from slib.ipc.identity import build_identity
from slib.ipc.views import AlbumInfo, GetStatus, Item, SongInfo, Status


def flip_byte(identity: bytes, index: int) -> bytes:
	altered = bytearray(identity)
	altered[index] ^= 0xFF
	return bytes(altered)


class TestHandshake:
	def test_identical_build_is_accepted(self, server):
		client = Client(server.name)
		assert client.identity == build_identity()

	@pytest.mark.parametrize(
		'identity',
		[flip_byte(build_identity(), 0), flip_byte(build_identity(), 17), flip_byte(build_identity(), 31)],
		ids=['first-byte', 'middle-byte', 'last-byte'],
	)
	def test_single_byte_difference_is_rejected(self, server_factory, identity):
		foreign_server = server_factory(identity)
		with pytest.raises(IdentityMismatch) as exc_info:
			Client(foreign_server.name, timeout=5)

		assert exc_info.value.remote == foreign_server.server.identity
		assert exc_info.value.local == build_identity()

	@pytest.mark.parametrize(
		'identity',
		[build_identity()[:16], build_identity() + b'\x00', b''],
		ids=['shorter', 'longer', 'empty'],
	)
	def test_length_difference_is_rejected(self, server_factory, identity):
		foreign_server = server_factory(identity)
		with pytest.raises(IdentityMismatch):
			Client(foreign_server.name, timeout=5)

	def test_mismatch_happens_before_any_operation(self, server_factory, stub_daemon):
		foreign_server = server_factory(b'\x00' * 32)
		with pytest.raises(IdentityMismatch):
			Client(foreign_server.name, timeout=5)
		assert stub_daemon.calls == []

	def test_client_identity_can_be_overridden(self, server):
		with pytest.raises(IdentityMismatch):
			Client(server.name, identity=b'old build', timeout=5)

	def test_verify_can_be_skipped(self, server_factory):
		foreign_server = server_factory(b'\x00' * 32)
		client = Client(foreign_server.name, verify=False, timeout=5)
		assert client.verify() == b'\x00' * 32
		assert client.play() is True

	@pytest.mark.parametrize(
		'reply, remote',
		[(b'"nope"\n', b'"nope"'), (b'{"id": "7"}\n', b'{"id": "7"}'), (b'"\xff"\n', b'"\xff"')],
		ids=['string', 'object', 'invalid-utf8'],
	)
	def test_reply_that_is_not_an_identity_is_rejected(self, canned_server, reply, remote):
		name = canned_server(reply)
		with pytest.raises(IdentityMismatch) as exc_info:
			Client(name, timeout=5)

		assert exc_info.value.remote == remote
		assert exc_info.value.local == build_identity()

	def test_no_server_is_a_transport_error(self, socket_name):
		with pytest.raises(TransportError):
			Client(socket_name, timeout=1)


class TestCalls:
	def test_search_scenario(self, client, stub_daemon):
		stub_daemon.search_results = [Item(id='1', name='A', image_path=''), Item(id='2', name='B', image_path='')]

		assert client.search('jazz') == [Item(id='1', name='A', image_path=''), Item(id='2', name='B', image_path='')]

	def test_queue_add_scenario(self, client, stub_daemon):
		song = Item(id='7', name='Seven', image_path='')

		assert client.queue_add(song, 3) is True
		assert stub_daemon.calls[-1] == ('queue_add', (song, 3))

	def test_raw_call_returns_record_without_delimiter(self, client):
		assert client.call(GetStatus()) == '{"playing":false,"current_song":null,"queue":[]}'

	def test_status(self, client, stub_daemon):
		song = Item(id='9', name='Nine', image_path='/covers/9.jpg')
		stub_daemon.current_status = Status(playing=True, current_song=song, queue=[song, Item(id='10', name='', image_path='')])

		status = client.status()
		assert status == stub_daemon.current_status
		assert status.queue[0].image_path == '/covers/9.jpg'

	def test_song_and_album_info(self, client, stub_daemon):
		album = Item(id='al', name='Album', image_path='')
		stub_daemon.songs['7'] = SongInfo(duration=215.5, album=album, artist='Someone')
		stub_daemon.albums['al'] = AlbumInfo(songs=[Item(id='7', name='', image_path='')], artist='Someone')

		assert client.song_info(Item(id='7', name='', image_path='')) == stub_daemon.songs['7']
		assert client.song_info(Item(id='missing', name='', image_path='')) is None
		assert client.album_info(album) == stub_daemon.albums['al']
		assert client.album_info(Item(id='missing', name='', image_path='')) is None

	def test_every_wrapper_reaches_its_handler(self, client, stub_daemon):
		song, playlist = Item(id='s', name='', image_path=''), Item(id='p', name='', image_path='')
		stub_daemon.calls.clear()

		assert client.fetch_artists() == [Item(id='ar-1', name='Artist', image_path='')]
		assert client.fetch_albums() == [Item(id='al-1', name='Album', image_path='')]
		assert client.fetch_playlists() == []
		assert client.fetch_songs() == [Item(id='s-1', name='Song', image_path='')]
		for result in (
			client.scan(),
			client.restart(),
			client.play(),
			client.stop(),
			client.pause(),
			client.skip(),
			client.queue_remove(song),
			client.volume_adjust(5),
			client.volume_set(80),
			client.download(song),
			client.delete(song),
			client.star(song),
			client.playlist_download(playlist),
			client.playlist_upload(playlist),
			client.playlist_new('Mix'),
			client.playlist_add_to(playlist, song),
			client.playlist_remove_from(playlist, song),
			client.playlist_delete(playlist),
		):
			assert result is True

		assert [name for name, _ in stub_daemon.calls] == [
			'fetch_artists',
			'fetch_albums',
			'fetch_playlists',
			'fetch_songs',
			'scan',
			'restart',
			'play',
			'stop',
			'pause',
			'skip',
			'queue_remove',
			'volume_adjust',
			'volume_set',
			'download',
			'delete',
			'star',
			'playlist_download',
			'playlist_upload',
			'playlist_new',
			'playlist_add_to',
			'playlist_remove_from',
			'playlist_delete',
		]

	def test_failure_comes_back_as_false(self, client, stub_daemon):
		stub_daemon.bool_result = False
		assert client.play() is False

	def test_dropped_request_is_a_transport_error(self, client, stub_daemon):
		def broken() -> bool:
			raise RuntimeError('player crashed')

		stub_daemon.skip = broken
		with pytest.raises(TransportError):
			client.skip()

	def test_each_call_uses_a_new_connection(self, client, stub_daemon):
		client.play()
		client.play()
		assert stub_daemon.calls[-2:] == [('play', ()), ('play', ())]

	def test_shutdown_scenario(self, client, server):
		assert client.shutdown() is True

		server.thread.join(timeout=5)
		assert not server.thread.is_alive()
		with pytest.raises(TransportError):
			client.play()

	def test_reply_of_wrong_shape_is_a_decode_error(self, client, monkeypatch):
		monkeypatch.setattr(client, 'call', lambda command: '{"unexpected": 1}')
		with pytest.raises(DecodeError):
			client.play()

	def test_invalid_utf8_reply_is_a_decode_error(self, canned_server):
		client = Client(canned_server(b'"\xff"\n'), verify=False, timeout=5)
		with pytest.raises(DecodeError) as exc_info:
			client.play()

		assert isinstance(exc_info.value, SlibError)
		assert exc_info.value.record == b'"\xff"'
