"""slib - control protocol for a local media playback daemon.

The daemon implements `slib.ipc.Daemon` and serves it with
`SessionServer`; controllers talk to it through `slib.ipc.Client`.

Usage:
    slib status
    slib search "jazz"
    slib queue add 7 3
    slib serve --daemon mypackage.player:Player
"""

__all__ = ['Client', 'Daemon', 'SessionServer', 'main']


def __getattr__(name: str):
	"""Lazy import to avoid runpy warnings when running as module."""
	if name == 'main':
		from slib.cli import main

		return main
	if name in ('Client', 'Daemon', 'SessionServer'):
		import slib.ipc

		return getattr(slib.ipc, name)
	raise AttributeError(f'module {__name__!r} has no attribute {name!r}')
