"""Build identity used by the Verify handshake.

The identity is a SHA-256 digest over the source of this package. Two
processes running the same protocol code agree on it; any edit to the protocol
modules changes it.
"""

import hashlib
from functools import cache
from pathlib import Path

IDENTITY_LENGTH = 32

PACKAGE_DIR = Path(__file__).resolve().parent


def compute_identity(source_dir: Path) -> bytes:
	"""Hash the names and contents of all Python modules directly in source_dir."""
	digest = hashlib.sha256()
	for path in sorted(source_dir.glob('*.py')):
		digest.update(path.name.encode())
		digest.update(b'\0')
		# Normalise line endings so checkouts on different platforms agree
		digest.update(path.read_bytes().replace(b'\r\n', b'\n'))
		digest.update(b'\0')
	return digest.digest()


@cache
def build_identity() -> bytes:
	"""Identity of the running protocol build, computed once per process."""
	return compute_identity(PACKAGE_DIR)


def identities_match(remote: bytes, local: bytes) -> bool:
	return bytes(remote) == bytes(local)
