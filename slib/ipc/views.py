"""Message model for the daemon control protocol.

Commands are a closed tagged union: every concrete subclass of `Command` is one
variant. Result values (`Item`, `Status`, `SongInfo`, `AlbumInfo`) are plain
immutable pydantic models transmitted by value.
"""

from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

Byte = Annotated[int, Field(ge=0, le=255)]


# Result models
class Item(BaseModel):
	"""A library entity: song, album, artist or playlist."""

	model_config = ConfigDict(frozen=True, extra='forbid')

	id: str
	name: str
	image_path: str = Field(description='Path to artwork, empty when there is none')


class Status(BaseModel):
	model_config = ConfigDict(frozen=True, extra='forbid')

	playing: bool
	current_song: Item | None
	queue: list[Item] = Field(description='Queued items in play order')


class SongInfo(BaseModel):
	model_config = ConfigDict(frozen=True, extra='forbid')

	duration: float = Field(description='Length of the song in seconds')
	album: Item
	artist: str


class AlbumInfo(BaseModel):
	model_config = ConfigDict(frozen=True, extra='forbid')

	songs: list[Item] = Field(description='Tracks in album order')
	artist: str


Identity = list[Byte]


# Commands
class Command(BaseModel):
	"""Base class of all protocol commands.

	Class attributes describe how a variant travels and what it maps to:
		handler: name of the `Daemon` method serving it, None for `Verify`
		reply: type of the value the handler returns
		newtype: True when the variant wraps a single unnamed argument
	"""

	model_config = ConfigDict(frozen=True, extra='forbid')

	handler: ClassVar[str | None] = None
	reply: ClassVar[Any] = bool
	newtype: ClassVar[bool] = False

	@classmethod
	def tag(cls) -> str:
		return cls.__name__

	@classmethod
	def is_unit(cls) -> bool:
		return not cls.model_fields

	def arguments(self) -> tuple[Any, ...]:
		"""Payload values in declaration order, as passed to the handler."""
		return tuple(getattr(self, name) for name in type(self).model_fields)


class Verify(Command):
	"""Ask for the server's build identity"""

	reply = Identity


class Shutdown(Command):
	"""Shut the server down"""

	handler = 'shutdown'


class FetchArtists(Command):
	handler = 'fetch_artists'
	reply = list[Item]


class FetchAlbums(Command):
	handler = 'fetch_albums'
	reply = list[Item]


class FetchPlaylists(Command):
	handler = 'fetch_playlists'
	reply = list[Item]


class FetchSongs(Command):
	handler = 'fetch_songs'
	reply = list[Item]


class Scan(Command):
	"""Tell the Subsonic server to rescan"""

	handler = 'scan'


class GetStatus(Command):
	"""Get the status of playback"""

	handler = 'status'
	reply = Status

	@classmethod
	def tag(cls) -> str:
		return 'Status'


class Restart(Command):
	"""Restart the currently playing song"""

	handler = 'restart'


class Play(Command):
	handler = 'play'


class Stop(Command):
	"""Stop and clear the queue"""

	handler = 'stop'


class Pause(Command):
	handler = 'pause'


class Skip(Command):
	handler = 'skip'


class QueueAdd(Command):
	"""Add a song to the queue at a position"""

	handler = 'queue_add'

	id: Item
	position: Byte


class QueueRemove(Command):
	handler = 'queue_remove'
	newtype = True

	id: Item


class VolumeAdjust(Command):
	"""Adjust volume by percent"""

	handler = 'volume_adjust'
	newtype = True

	amount: Byte


class VolumeSet(Command):
	"""Set the volume by percent"""

	handler = 'volume_set'
	newtype = True

	amount: Byte


class Search(Command):
	handler = 'search'
	reply = list[Item]
	newtype = True

	query: str


class Download(Command):
	"""Download a song for offline playback"""

	handler = 'download'
	newtype = True

	id: Item


class Delete(Command):
	"""Delete a song from offline playback"""

	handler = 'delete'
	newtype = True

	id: Item


class Star(Command):
	"""Favorite a song on the Subsonic server"""

	handler = 'star'
	newtype = True

	id: Item


class PlaylistDownload(Command):
	"""Download all the songs from a playlist"""

	handler = 'playlist_download'
	newtype = True

	id: Item


class PlaylistUpload(Command):
	"""Upload changes on a local playlist"""

	handler = 'playlist_upload'
	newtype = True

	id: Item


class PlaylistNew(Command):
	"""Create a new local playlist"""

	handler = 'playlist_new'

	name: str


class PlaylistAddTo(Command):
	handler = 'playlist_add_to'

	playlist: Item
	id: Item


class PlaylistRemoveFrom(Command):
	handler = 'playlist_remove_from'

	playlist: Item
	id: Item


class PlaylistDelete(Command):
	"""Delete a local playlist"""

	handler = 'playlist_delete'
	newtype = True

	id: Item


class GetSongInfo(Command):
	handler = 'song_info'
	reply = SongInfo | None
	newtype = True

	id: Item

	@classmethod
	def tag(cls) -> str:
		return 'SongInfo'


class GetAlbumInfo(Command):
	handler = 'album_info'
	reply = AlbumInfo | None
	newtype = True

	id: Item

	@classmethod
	def tag(cls) -> str:
		return 'AlbumInfo'


COMMANDS: tuple[type[Command], ...] = (
	Verify,
	Shutdown,
	FetchArtists,
	FetchAlbums,
	FetchPlaylists,
	FetchSongs,
	Scan,
	GetStatus,
	Restart,
	Play,
	Stop,
	Pause,
	Skip,
	QueueAdd,
	QueueRemove,
	VolumeAdjust,
	VolumeSet,
	Search,
	Download,
	Delete,
	Star,
	PlaylistDownload,
	PlaylistUpload,
	PlaylistNew,
	PlaylistAddTo,
	PlaylistRemoveFrom,
	PlaylistDelete,
	GetSongInfo,
	GetAlbumInfo,
)

COMMANDS_BY_TAG: dict[str, type[Command]] = {command.tag(): command for command in COMMANDS}
