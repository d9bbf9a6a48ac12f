"""FIX message container, wire parsing and message construction."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from .errors import MessageConstructionError, MessageParsingError

SOH = "\x01"
BEGIN_STRING = "FIX.4.4"

_BEGIN_STRING_TAG = 8
_BODY_LENGTH_TAG = 9
_CHECKSUM_TAG = 10
_FRAME_TAGS = frozenset({_BEGIN_STRING_TAG, _BODY_LENGTH_TAG, _CHECKSUM_TAG})

_REQUIRED_HEADER = (
    (35, "MsgType (35) is required"),
    (49, "SenderCompID (49) is required"),
    (56, "TargetCompID (56) is required"),
    (34, "MsgSeqNum (34) is required"),
)


def format_sending_time(time: datetime) -> str:
    """Format a timestamp as a FIX UTC timestamp with milliseconds."""
    if time.tzinfo is not None:
        time = time.astimezone(timezone.utc)
    return f"{time.strftime('%Y%m%d-%H:%M:%S')}.{time.microsecond // 1000:03d}"


def _encode(tag: int, value: str) -> str:
    return f"{tag}={value}{SOH}"


@dataclass
class FixMessage:
    """A FIX message as a mapping of tag numbers to string values."""

    fields: dict[int, str] = field(default_factory=dict)
    raw_message: str = ""

    @classmethod
    def parse(cls, text: str) -> FixMessage:
        """Parse a SOH-delimited FIX message."""
        fields: dict[int, str] = {}
        for part in text.split(SOH):
            if not part:
                continue
            tag_text, sep, value = part.partition("=")
            if not sep:
                raise MessageParsingError(f"Invalid field format: {part}")
            if not tag_text.isdigit():
                raise MessageParsingError(f"Invalid tag number: {tag_text}")
            fields[int(tag_text)] = value
        if not fields:
            raise MessageParsingError("Empty FIX message")
        return cls(fields=fields, raw_message=text)

    def set_field(self, tag: int, value: str) -> None:
        self.fields[tag] = value

    def get_field(self, tag: int) -> str | None:
        return self.fields.get(tag)

    def has_field(self, tag: int) -> bool:
        return tag in self.fields

    def calculate_checksum(self) -> int:
        """Sum of the bytes of every field except CheckSum, modulo 256."""
        encoded = "".join(
            _encode(tag, value) for tag, value in self.fields.items() if tag != _CHECKSUM_TAG
        )
        return sum(encoded.encode("utf-8")) % 256

    def ordered_fields(self) -> list[tuple[int, str]]:
        """Fields in wire order: BeginString, BodyLength, the rest by tag, CheckSum."""
        head = [
            (tag, self.fields[tag])
            for tag in (_BEGIN_STRING_TAG, _BODY_LENGTH_TAG)
            if tag in self.fields
        ]
        body = sorted((t, v) for t, v in self.fields.items() if t not in _FRAME_TAGS)
        tail = [(_CHECKSUM_TAG, self.fields[_CHECKSUM_TAG])] if _CHECKSUM_TAG in self.fields else []
        return head + body + tail

    def __str__(self) -> str:
        if self.raw_message:
            return self.raw_message
        return "".join(_encode(tag, value) for tag, value in self.ordered_fields())


class MessageBuilder:
    """Fluent builder that produces a framed FIX 4.4 message."""

    def __init__(self) -> None:
        self._message = FixMessage()
        self._message.set_field(_BEGIN_STRING_TAG, BEGIN_STRING)

    def msg_type(self, msg_type: str | Enum) -> MessageBuilder:
        value = msg_type.value if isinstance(msg_type, Enum) else msg_type
        self._message.set_field(35, str(value))
        return self

    def sender_comp_id(self, sender_comp_id: str) -> MessageBuilder:
        self._message.set_field(49, sender_comp_id)
        return self

    def target_comp_id(self, target_comp_id: str) -> MessageBuilder:
        self._message.set_field(56, target_comp_id)
        return self

    def msg_seq_num(self, seq_num: int) -> MessageBuilder:
        self._message.set_field(34, str(seq_num))
        return self

    def sending_time(self, time: datetime) -> MessageBuilder:
        self._message.set_field(52, format_sending_time(time))
        return self

    def field(self, tag: int, value: str) -> MessageBuilder:
        self._message.set_field(tag, value)
        return self

    def build(self) -> FixMessage:
        """Validate the header, add BodyLength and CheckSum, and render the raw message."""
        message = self._message
        if not message.has_field(_BEGIN_STRING_TAG):
            raise MessageConstructionError("BeginString (8) is required")
        for tag, error in _REQUIRED_HEADER:
            if not message.has_field(tag):
                raise MessageConstructionError(error)
        if not message.has_field(52):
            message.set_field(52, format_sending_time(datetime.now(timezone.utc)))

        message.set_field(_BODY_LENGTH_TAG, str(self._body_length()))
        message.fields.pop(_CHECKSUM_TAG, None)
        message.set_field(_CHECKSUM_TAG, f"{message.calculate_checksum():03d}")
        message.raw_message = "".join(
            _encode(tag, value) for tag, value in message.ordered_fields()
        )
        return message

    def _body_length(self) -> int:
        body = "".join(
            _encode(tag, value)
            for tag, value in self._message.fields.items()
            if tag not in _FRAME_TAGS
        )
        return len(body.encode("utf-8"))