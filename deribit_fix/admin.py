"""Session-level FIX messages: Heartbeat, Test Request, Resend Request and Reject."""

from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum, IntEnum

from .builder import FixMessage, MessageBuilder


class _MsgType(str, Enum):
    HEARTBEAT = "0"
    TEST_REQUEST = "1"
    RESEND_REQUEST = "2"
    REJECT = "3"


class SessionRejectReason(IntEnum):
    """SessionRejectReason (373) codes."""

    INVALID_TAG_NUMBER = 0
    REQUIRED_TAG_MISSING = 1
    TAG_NOT_DEFINED_FOR_MESSAGE_TYPE = 2
    UNDEFINED_TAG = 3
    TAG_SPECIFIED_WITHOUT_VALUE = 4
    VALUE_INCORRECT_FOR_TAG = 5
    INCORRECT_DATA_FORMAT = 6
    DECRYPTION_PROBLEM = 7
    SIGNATURE_PROBLEM = 8
    COMP_ID_PROBLEM = 9
    SENDING_TIME_ACCURACY_PROBLEM = 10
    INVALID_MSG_TYPE = 11
    XML_VALIDATION_ERROR = 12
    TAG_APPEARS_MORE_THAN_ONCE = 13
    TAG_SPECIFIED_OUT_OF_ORDER = 14
    REPEATING_GROUP_FIELDS_OUT_OF_ORDER = 15
    INCORRECT_NUM_IN_GROUP_COUNT = 16
    NON_DATA_VALUE_INCLUDES_FIELD_DELIMITER = 17
    OTHER = 99


def _header(msg_type: _MsgType, sender: str, target: str, seq: int) -> MessageBuilder:
    return (
        MessageBuilder()
        .msg_type(msg_type)
        .sender_comp_id(sender)
        .target_comp_id(target)
        .msg_seq_num(seq)
        .sending_time(datetime.now(timezone.utc))
    )


class _JsonDisplay:
    def __str__(self) -> str:
        return json.dumps(asdict(self))  # type: ignore[call-overload]


@dataclass
class Heartbeat(_JsonDisplay):
    """Heartbeat (0); carries TestReqID when answering a Test Request."""

    test_req_id: str | None = None

    @classmethod
    def response(cls, test_req_id: str) -> Heartbeat:
        return cls(test_req_id=test_req_id)

    def is_test_response(self) -> bool:
        return self.test_req_id is not None

    def to_fix_message(self, sender_comp_id: str, target_comp_id: str, msg_seq_num: int) -> FixMessage:
        builder = _header(_MsgType.HEARTBEAT, sender_comp_id, target_comp_id, msg_seq_num)
        if self.test_req_id is not None:
            builder.field(112, self.test_req_id)
        return builder.build()


@dataclass
class TestRequest(_JsonDisplay):
    """Test Request (1), forcing a Heartbeat with the same TestReqID."""

    __test__ = False

    test_req_id: str

    @classmethod
    def with_timestamp(cls) -> TestRequest:
        return cls(f"TESTREQ_{time.time_ns() // 1_000_000}")

    def to_fix_message(self, sender_comp_id: str, target_comp_id: str, msg_seq_num: int) -> FixMessage:
        return (
            _header(_MsgType.TEST_REQUEST, sender_comp_id, target_comp_id, msg_seq_num)
            .field(112, self.test_req_id)
            .build()
        )


@dataclass
class ResendRequest(_JsonDisplay):
    """Resend Request (2); an end of 0 means everything from the start onwards."""

    begin_seq_no: int
    end_seq_no: int

    @classmethod
    def from_sequence(cls, begin_seq_no: int) -> ResendRequest:
        return cls(begin_seq_no, 0)

    def is_infinite_range(self) -> bool:
        return self.end_seq_no == 0

    def message_count(self) -> int | None:
        if self.is_infinite_range():
            return None
        return max(self.end_seq_no - self.begin_seq_no, 0) + 1

    def to_fix_message(self, sender_comp_id: str, target_comp_id: str, msg_seq_num: int) -> FixMessage:
        return (
            _header(_MsgType.RESEND_REQUEST, sender_comp_id, target_comp_id, msg_seq_num)
            .field(7, str(self.begin_seq_no))
            .field(16, str(self.end_seq_no))
            .build()
        )


@dataclass
class Reject(_JsonDisplay):
    """Reject (3) of a message that failed session-level validation."""

    ref_seq_num: int
    ref_tag_id: int | None = None
    ref_msg_type: str | None = None
    session_reject_reason: int | None = None
    text: str | None = None

    @classmethod
    def detailed(
        cls,
        ref_seq_num: int,
        ref_tag_id: int | None,
        ref_msg_type: str | None,
        session_reject_reason: SessionRejectReason | None,
        text: str | None,
    ) -> Reject:
        return cls(
            ref_seq_num=ref_seq_num,
            ref_tag_id=ref_tag_id,
            ref_msg_type=ref_msg_type,
            session_reject_reason=(
                None if session_reject_reason is None else int(session_reject_reason)
            ),
            text=text,
        )

    @classmethod
    def invalid_tag(cls, ref_seq_num: int, tag_id: int) -> Reject:
        return cls.detailed(
            ref_seq_num,
            tag_id,
            None,
            SessionRejectReason.INVALID_TAG_NUMBER,
            f"Invalid tag number: {tag_id}",
        )

    @classmethod
    def missing_tag(cls, ref_seq_num: int, tag_id: int, msg_type: str) -> Reject:
        return cls.detailed(
            ref_seq_num,
            tag_id,
            msg_type,
            SessionRejectReason.REQUIRED_TAG_MISSING,
            f"Required tag {tag_id} missing",
        )

    @classmethod
    def incorrect_format(cls, ref_seq_num: int, tag_id: int, text: str) -> Reject:
        return cls.detailed(
            ref_seq_num, tag_id, None, SessionRejectReason.INCORRECT_DATA_FORMAT, text
        )

    def to_fix_message(self, sender_comp_id: str, target_comp_id: str, msg_seq_num: int) -> FixMessage:
        builder = _header(_MsgType.REJECT, sender_comp_id, target_comp_id, msg_seq_num)
        builder.field(45, str(self.ref_seq_num))
        if self.ref_tag_id is not None:
            builder.field(371, str(self.ref_tag_id))
        if self.ref_msg_type is not None:
            builder.field(372, self.ref_msg_type)
        if self.session_reject_reason is not None:
            builder.field(373, str(self.session_reject_reason))
        if self.text is not None:
            builder.field(58, self.text)
        return builder.build()