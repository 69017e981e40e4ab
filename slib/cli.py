#!/usr/bin/env python3
"""Command line controller for the slib daemon.

Each invocation sends a single command to the running daemon and prints the
reply. `slib serve` runs a daemon implementation in the foreground.
"""

import argparse
import importlib
import json
import logging
import sys
from typing import Any

from slib.config import load_config
from slib.ipc.client import Client
from slib.ipc.daemon import Daemon
from slib.ipc.exceptions import SlibError, TransportError
from slib.ipc.identity import identities_match
from slib.ipc.protocol import decode_reply
from slib.ipc.server import SessionServer
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
	VolumeAdjust,
	VolumeSet,
)
from slib.logging_config import setup_logging

logger = logging.getLogger('slib.cli')

FETCH_COMMANDS: dict[str, type[Command]] = {
	'artists': FetchArtists,
	'albums': FetchAlbums,
	'playlists': FetchPlaylists,
	'songs': FetchSongs,
}

SIMPLE_COMMANDS: dict[str, type[Command]] = {
	'shutdown': Shutdown,
	'scan': Scan,
	'status': GetStatus,
	'restart': Restart,
	'play': Play,
	'stop': Stop,
	'pause': Pause,
	'skip': Skip,
}

ITEM_COMMANDS: dict[str, type[Command]] = {
	'download': Download,
	'delete': Delete,
	'star': Star,
	'song-info': GetSongInfo,
	'album-info': GetAlbumInfo,
}

PLAYLIST_ITEM_COMMANDS: dict[str, type[Command]] = {
	'download': PlaylistDownload,
	'upload': PlaylistUpload,
	'delete': PlaylistDelete,
}


def build_parser() -> argparse.ArgumentParser:
	"""Build argument parser with all commands."""
	parser = argparse.ArgumentParser(
		prog='slib',
		description='Control a running slib media daemon',
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  slib status
  slib search "jazz"
  slib queue add 7 3
  slib volume set 40
  slib playlist new "Road trip"
  slib serve --daemon mypackage.player:Player
""",
	)

	# Global flags
	parser.add_argument('--socket', '-s', help='Daemon socket name (default: from config, then slib.socket)')
	parser.add_argument('--json', action='store_true', help='Print the raw JSON reply')
	parser.add_argument('--no-verify', action='store_true', help='Skip the build identity check')
	parser.add_argument('--log-level', help='Logging level (debug, info, warning, error)')

	subparsers = parser.add_subparsers(dest='command', help='Command to execute')

	# serve --daemon module:attr
	p = subparsers.add_parser('serve', help='Run a daemon implementation in the foreground')
	p.add_argument('--daemon', '-d', required=True, help='Daemon class or factory as module:attribute')

	subparsers.add_parser('verify', help='Compare the daemon build identity with this client')

	for name, command_type in SIMPLE_COMMANDS.items():
		subparsers.add_parser(name, help=(command_type.__doc__ or name.capitalize()).strip())

	# fetch <kind>
	p = subparsers.add_parser('fetch', help='List library entities')
	p.add_argument('kind', choices=list(FETCH_COMMANDS), help='What to list')

	# queue add <id> [position] | queue remove <id>
	queue_p = subparsers.add_parser('queue', help='Queue operations')
	queue_sub = queue_p.add_subparsers(dest='queue_command', required=True)
	p = queue_sub.add_parser('add', help='Add a song to the queue')
	p.add_argument('id', help='Song id')
	p.add_argument('position', type=int, nargs='?', default=0, help='Queue position (default: 0)')
	p = queue_sub.add_parser('remove', help='Remove a song from the queue')
	p.add_argument('id', help='Song id')

	# volume adjust|set <amount>
	p = subparsers.add_parser('volume', help='Volume control')
	p.add_argument('mode', choices=['adjust', 'set'])
	p.add_argument('amount', type=int, help='Percent (0-100)')

	# search <query>
	p = subparsers.add_parser('search', help='Search the library')
	p.add_argument('query', help='Search query')

	for name, command_type in ITEM_COMMANDS.items():
		p = subparsers.add_parser(name, help=(command_type.__doc__ or name.capitalize()).strip())
		p.add_argument('id', help='Item id')

	# playlist ...
	playlist_p = subparsers.add_parser('playlist', help='Playlist operations')
	playlist_sub = playlist_p.add_subparsers(dest='playlist_command', required=True)
	for name, command_type in PLAYLIST_ITEM_COMMANDS.items():
		p = playlist_sub.add_parser(name, help=(command_type.__doc__ or name).strip())
		p.add_argument('id', help='Playlist id')
	p = playlist_sub.add_parser('new', help='Create a new local playlist')
	p.add_argument('name', help='Playlist name')
	p = playlist_sub.add_parser('add', help='Add a song to a local playlist')
	p.add_argument('playlist', help='Playlist id')
	p.add_argument('id', help='Song id')
	p = playlist_sub.add_parser('remove', help='Remove a song from a local playlist')
	p.add_argument('playlist', help='Playlist id')
	p.add_argument('id', help='Song id')

	return parser


def _item(id: str) -> Item:
	# Commands only carry the id the user typed; the daemon looks up the rest.
	return Item(id=id, name='', image_path='')


def build_command(args: argparse.Namespace) -> Command:
	"""Translate parsed arguments into a protocol command."""
	command = args.command

	if command in SIMPLE_COMMANDS:
		return SIMPLE_COMMANDS[command]()
	if command == 'fetch':
		return FETCH_COMMANDS[args.kind]()
	if command == 'queue':
		if args.queue_command == 'add':
			return QueueAdd(id=_item(args.id), position=args.position)
		return QueueRemove(id=_item(args.id))
	if command == 'volume':
		command_type = VolumeAdjust if args.mode == 'adjust' else VolumeSet
		return command_type(amount=args.amount)
	if command == 'search':
		return Search(query=args.query)
	if command in ITEM_COMMANDS:
		return ITEM_COMMANDS[command](id=_item(args.id))
	if command == 'playlist':
		sub = args.playlist_command
		if sub in PLAYLIST_ITEM_COMMANDS:
			return PLAYLIST_ITEM_COMMANDS[sub](id=_item(args.id))
		if sub == 'new':
			return PlaylistNew(name=args.name)
		if sub == 'add':
			return PlaylistAddTo(playlist=_item(args.playlist), id=_item(args.id))
		return PlaylistRemoveFrom(playlist=_item(args.playlist), id=_item(args.id))

	raise ValueError(f'Unknown command: {command}')


def _format_item(item: Item) -> str:
	return f'  {item.id}: {item.name}' if item.name else f'  {item.id}'


def print_reply(value: Any) -> int:
	"""Print a decoded reply for humans. Returns the exit code."""
	if isinstance(value, bool):
		print('OK' if value else 'Failed')
		return 0 if value else 1
	if value is None:
		print('Not found')
		return 1
	if isinstance(value, Status):
		print(f'playing: {value.playing}')
		print(f'current: {_format_item(value.current_song).strip() if value.current_song else "-"}')
		print(f'queue: {len(value.queue)} item(s)')
		for item in value.queue:
			print(_format_item(item))
		return 0
	if isinstance(value, SongInfo):
		print(f'artist: {value.artist}')
		print(f'album: {_format_item(value.album).strip()}')
		print(f'duration: {value.duration:.1f}s')
		return 0
	if isinstance(value, AlbumInfo):
		print(f'artist: {value.artist}')
		for item in value.songs:
			print(_format_item(item))
		return 0
	if isinstance(value, list):
		if not value:
			print('No results')
		for item in value:
			print(_format_item(item))
		return 0

	print(value)
	return 0


def load_daemon(target: str) -> Daemon:
	"""Import and instantiate a daemon given as 'module:attribute'."""
	module_name, _, attribute = target.partition(':')
	if not module_name or not attribute:
		raise ValueError(f'Expected module:attribute, got {target!r}')

	factory = getattr(importlib.import_module(module_name), attribute)
	daemon = factory()
	if not isinstance(daemon, Daemon):
		raise TypeError(f'{target} produced {type(daemon).__name__}, which is not a slib Daemon')
	return daemon


def handle_serve(args: argparse.Namespace, socket_name: str) -> int:
	try:
		daemon = load_daemon(args.daemon)
	except (ImportError, AttributeError, TypeError, ValueError) as e:
		print(f'Error: {e}', file=sys.stderr)
		return 1

	server = SessionServer(daemon, socket_name)
	try:
		server.run()
	except TransportError as e:
		print(f'Error: {e}', file=sys.stderr)
		return 1
	except KeyboardInterrupt:
		logger.info('Interrupted')
	return 0


def handle_verify(args: argparse.Namespace, socket_name: str) -> int:
	client = Client(socket_name, verify=False)
	remote = client.verify()
	match = identities_match(remote, client.identity)

	if args.json:
		print(json.dumps({'server': remote.hex(), 'client': client.identity.hex(), 'match': match}))
	else:
		print(f'server: {remote.hex()}')
		print(f'client: {client.identity.hex()}')
		print('Build identities match' if match else 'Build identities differ')
	return 0 if match else 1


def main(argv: list[str] | None = None) -> int:
	"""Main entry point."""
	parser = build_parser()
	args = parser.parse_args(argv)

	config = load_config(socket_name=args.socket, log_level=args.log_level)
	setup_logging(config.log_level, stream=sys.stderr)

	if not args.command:
		parser.print_help()
		return 0

	try:
		if args.command == 'serve':
			return handle_serve(args, config.socket_name)
		if args.command == 'verify':
			return handle_verify(args, config.socket_name)

		try:
			command = build_command(args)
		except ValueError as e:
			print(f'Error: invalid arguments: {e}', file=sys.stderr)
			return 1

		client = Client(config.socket_name, verify=not args.no_verify)
		record = client.call(command)
		if args.json:
			print(record)
			return 0
		return print_reply(decode_reply(command, record))
	except SlibError as e:
		print(f'Error: {e}', file=sys.stderr)
		return 1


if __name__ == '__main__':
	sys.exit(main())
