"""Wire codec for daemon control records.

Every request and every reply is exactly one line of compact JSON followed by
a single newline. Commands are externally tagged:

	"Status"                                   unit variant
	{"Search": "jazz"}                         single-argument variant
	{"QueueAdd": {"id": {...}, "position": 3}} named-fields variant

Reply values are the plain JSON encoding of the command's reply type.
"""

import json
from functools import cache
from typing import Any

from pydantic import TypeAdapter, ValidationError

from slib.ipc.exceptions import DecodeError
from slib.ipc.views import COMMANDS_BY_TAG, Command

DELIMITER = b'\n'


def frame(payload: str) -> bytes:
	"""Terminate a payload with the record delimiter."""
	if '\n' in payload:
		raise ValueError('Record payload must not contain a line break')
	return payload.encode() + DELIMITER


def _as_text(record: str | bytes) -> str:
	if isinstance(record, bytes):
		try:
			record = record.decode()
		except UnicodeDecodeError as e:
			raise DecodeError(f'Record is not valid UTF-8: {e}', record) from e
	return record.rstrip('\r\n')


@cache
def _adapter(shape: Any) -> TypeAdapter:
	return TypeAdapter(shape)


def encode_command(command: Command) -> str:
	"""Encode a command as a single-line record payload."""
	tag = command.tag()
	if command.is_unit():
		return json.dumps(tag)

	body = command.model_dump(mode='json')
	if command.newtype:
		(body,) = body.values()
	return json.dumps({tag: body}, separators=(',', ':'))


def decode_command(record: str | bytes) -> Command:
	"""Decode a request record into a command.

	Raises DecodeError for non-JSON text, an unknown tag, or a payload that does
	not match the variant's fields.
	"""
	text = _as_text(record)
	try:
		data = json.loads(text)
	except json.JSONDecodeError as e:
		raise DecodeError(f'Invalid JSON: {e}', record) from e

	if isinstance(data, str):
		tag, payload = data, None
	elif isinstance(data, dict) and len(data) == 1:
		((tag, payload),) = data.items()
	else:
		raise DecodeError('Command must be a tag string or a single-key object', record)

	command_type = COMMANDS_BY_TAG.get(tag)
	if command_type is None:
		raise DecodeError(f'Unknown command: {tag!r}', record)

	if command_type.is_unit():
		if payload is not None:
			raise DecodeError(f'Command {tag} takes no payload', record)
		return command_type()
	if payload is None:
		raise DecodeError(f'Command {tag} requires a payload', record)

	if command_type.newtype:
		(field_name,) = command_type.model_fields
		payload = {field_name: payload}
	elif not isinstance(payload, dict):
		raise DecodeError(f'Command {tag} expects named fields', record)

	try:
		return command_type.model_validate_json(json.dumps(payload), strict=True)
	except ValidationError as e:
		raise DecodeError(f'Invalid payload for {tag}: {e}', record) from e


def encode_value(value: Any, shape: Any) -> str:
	"""Encode a result value of the given type as a single-line record payload."""
	return _adapter(shape).dump_json(value).decode()


def validate_value(value: Any, shape: Any) -> Any:
	"""Check an in-memory value against a reply type. Raises ValidationError."""
	return _adapter(shape).validate_python(value, strict=True)


def decode_value(record: str | bytes, shape: Any) -> Any:
	"""Decode a reply record into a value of the given type."""
	text = _as_text(record)
	try:
		return _adapter(shape).validate_json(text, strict=True)
	except ValidationError as e:
		raise DecodeError(f'Invalid reply, expected {shape}: {e}', record) from e


def encode_reply(command: Command | type[Command], value: Any) -> str:
	return encode_value(value, command.reply)


def decode_reply(command: Command | type[Command], record: str | bytes) -> Any:
	return decode_value(record, command.reply)
