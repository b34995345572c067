"""Parsing of the ``type=... msg=audit(sec.msec:seq):`` message header."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from ..errors import AuditParseError, ErrorKind
from ..tables import RecordType
from .message import AuditMessage

TYPE_TOKEN = "type="
MSG_TOKEN = "msg="

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_MAX_SEQUENCE = 0xFFFFFFFF


def _header_int(text: str) -> int:
    if not (text.isascii() and text.isdigit()):
        raise AuditParseError(ErrorKind.INVALID_HEADER)
    return int(text)


def parse_audit_header(text: str) -> tuple[datetime, int, int]:
    """Parse ``audit(1490137971.011:50406)`` at the start of ``text``.

    Returns ``(timestamp, sequence, end)`` where ``end`` is the index of the
    closing parenthesis.
    """
    start = text.find("(")
    if start == -1:
        raise AuditParseError(ErrorKind.INVALID_HEADER)
    dot = text.find(".", start)
    if dot == -1:
        raise AuditParseError(ErrorKind.INVALID_HEADER)
    sep = text.find(":", dot)
    if sep == -1:
        raise AuditParseError(ErrorKind.INVALID_HEADER)
    end = text.find(")", sep)
    if end == -1:
        raise AuditParseError(ErrorKind.INVALID_HEADER)

    sec = _header_int(text[start + 1 : dot])
    msec = _header_int(text[dot + 1 : sep])
    sequence = _header_int(text[sep + 1 : end])
    if sequence > _MAX_SEQUENCE:
        raise AuditParseError(ErrorKind.INVALID_HEADER, "audit sequence out of range")

    try:
        timestamp = _EPOCH + timedelta(seconds=sec, milliseconds=msec)
    except OverflowError as e:
        raise AuditParseError(ErrorKind.INVALID_HEADER, "audit timestamp out of range") from e

    return timestamp, sequence, end


def _index_of_body(text: str, end: int) -> int | None:
    # The body starts at the first ':' or ' ' after the header.
    for i in range(end, len(text)):
        if text[i] in ": ":
            return i
    return None


def _parse_from(record_type: RecordType, raw: str, header_start: int) -> AuditMessage:
    timestamp, sequence, end = parse_audit_header(raw[header_start:])
    return AuditMessage(
        record_type=record_type,
        timestamp=timestamp,
        sequence=sequence,
        raw_data=raw,
        offset=_index_of_body(raw, header_start + end),
    )


def parse(record_type: RecordType, message: str) -> AuditMessage:
    """Parse a message as received from the kernel over netlink.

    ``message`` must begin with the ``audit(...)`` header. Only the header is
    parsed here; the body is parsed lazily by :class:`AuditMessage`.
    """
    return _parse_from(record_type, message.strip(), 0)


def parse_log_line(line: str) -> AuditMessage:
    """Parse one line as written by auditd to ``audit.log``.

    Expects ``type=SYSCALL msg=audit(1488862769.030:19469538): ...``. An
    optional ``node=<host>`` prefix is tolerated. ``raw_data`` of the returned
    message is the whole (stripped) line.
    """
    line = line.strip()
    msg_index = line.find(MSG_TOKEN)
    type_index = line.find(TYPE_TOKEN)
    if msg_index == -1 or type_index == -1:
        raise AuditParseError(ErrorKind.INVALID_HEADER)

    # type=XXX must come before msg=
    type_start = type_index + len(TYPE_TOKEN)
    if type_start >= msg_index:
        raise AuditParseError(ErrorKind.INVALID_HEADER)

    type_name = line[type_start:msg_index].strip()
    if not type_name:
        raise AuditParseError(ErrorKind.INVALID_HEADER)
    record_type = RecordType.from_name(type_name)

    return _parse_from(record_type, line, msg_index + len(MSG_TOKEN))
