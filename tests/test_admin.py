import json

from deribit_fix.admin import (
    Heartbeat,
    Reject,
    ResendRequest,
    SessionRejectReason,
)
from deribit_fix.admin import TestRequest as FixTestRequest
from deribit_fix.builder import FixMessage


def test_heartbeat_creation():
    heartbeat = Heartbeat()
    assert heartbeat.test_req_id is None
    assert not heartbeat.is_test_response()

    response = Heartbeat.response("TEST123")
    assert response.test_req_id == "TEST123"
    assert response.is_test_response()


def test_test_request_creation():
    test_req = FixTestRequest("REQ123")
    assert test_req.test_req_id == "REQ123"

    timestamp_req = FixTestRequest.with_timestamp()
    assert timestamp_req.test_req_id.startswith("TESTREQ_")
    assert timestamp_req.test_req_id[len("TESTREQ_"):].isdigit()


def test_resend_request_creation():
    resend = ResendRequest(10, 20)
    assert resend.begin_seq_no == 10
    assert resend.end_seq_no == 20
    assert not resend.is_infinite_range()
    assert resend.message_count() == 11

    infinite = ResendRequest.from_sequence(15)
    assert infinite.begin_seq_no == 15
    assert infinite.end_seq_no == 0
    assert infinite.is_infinite_range()
    assert infinite.message_count() is None


def test_resend_request_single_and_reversed():
    assert ResendRequest(42, 42).message_count() == 1
    assert ResendRequest(20, 10).message_count() == 1


def test_reject_creation():
    basic_reject = Reject(123)
    assert basic_reject.ref_seq_num == 123
    assert basic_reject.ref_tag_id is None

    invalid_tag = Reject.invalid_tag(456, 999)
    assert invalid_tag.ref_seq_num == 456
    assert invalid_tag.ref_tag_id == 999
    assert invalid_tag.session_reject_reason == SessionRejectReason.INVALID_TAG_NUMBER
    assert invalid_tag.text == "Invalid tag number: 999"

    missing_tag = Reject.missing_tag(789, 35, "D")
    assert missing_tag.ref_seq_num == 789
    assert missing_tag.ref_tag_id == 35
    assert missing_tag.ref_msg_type == "D"
    assert missing_tag.session_reject_reason == SessionRejectReason.REQUIRED_TAG_MISSING
    assert missing_tag.text == "Required tag 35 missing"


def test_reject_incorrect_format():
    reject = Reject.incorrect_format(12348, 44, "Price field contains invalid characters")
    assert reject.ref_tag_id == 44
    assert reject.session_reject_reason == 6
    assert reject.text == "Price field contains invalid characters"
    assert reject.ref_msg_type is None


def test_session_reject_reason_values():
    assert SessionRejectReason(0) is SessionRejectReason.INVALID_TAG_NUMBER
    assert SessionRejectReason(1) is SessionRejectReason.REQUIRED_TAG_MISSING
    assert SessionRejectReason(99) is SessionRejectReason.OTHER

    for reason, code in (
        (SessionRejectReason.INVALID_TAG_NUMBER, "0"),
        (SessionRejectReason.REQUIRED_TAG_MISSING, "1"),
        (SessionRejectReason.OTHER, "99"),
    ):
        reject = Reject.detailed(50000, 35, "D", reason, "reason")
        msg = reject.to_fix_message("DERIBIT", "CLIENT", 4010)
        assert msg.get_field(373) == code


def test_heartbeat_to_fix_message():
    msg = Heartbeat.response("TEST123").to_fix_message("SENDER", "TARGET", 100)
    assert msg.get_field(35) == "0"
    assert msg.get_field(112) == "TEST123"
    assert msg.get_field(49) == "SENDER"
    assert msg.get_field(56) == "TARGET"
    assert msg.get_field(34) == "100"


def test_periodic_heartbeat_has_no_test_req_id():
    msg = Heartbeat().to_fix_message("CLIENT", "DERIBIT", 1001)
    assert msg.get_field(35) == "0"
    assert not msg.has_field(112)


def test_test_request_to_fix_message():
    msg = FixTestRequest("REQ456").to_fix_message("CLIENT", "SERVER", 200)
    assert msg.get_field(35) == "1"
    assert msg.get_field(112) == "REQ456"


def test_resend_request_to_fix_message():
    msg = ResendRequest(100, 110).to_fix_message("CLIENT", "DERIBIT", 3001)
    assert msg.get_field(35) == "2"
    assert msg.get_field(7) == "100"
    assert msg.get_field(16) == "110"

    infinite = ResendRequest.from_sequence(75).to_fix_message("CLIENT", "DERIBIT", 3002)
    assert infinite.get_field(16) == "0"


def test_reject_to_fix_message_detailed():
    reject = Reject.detailed(
        12349,
        54,
        "D",
        SessionRejectReason.VALUE_INCORRECT_FOR_TAG,
        "Invalid side value",
    )
    msg = reject.to_fix_message("DERIBIT", "CLIENT", 4005)
    assert msg.get_field(35) == "3"
    assert msg.get_field(45) == "12349"
    assert msg.get_field(371) == "54"
    assert msg.get_field(372) == "D"
    assert msg.get_field(373) == "5"
    assert msg.get_field(58) == "Invalid side value"


def test_basic_reject_omits_optional_fields():
    msg = Reject(12345).to_fix_message("DERIBIT", "CLIENT", 4001)
    assert msg.get_field(45) == "12345"
    for tag in (371, 372, 373, 58):
        assert not msg.has_field(tag)


def test_admin_message_round_trips_through_wire():
    msg = FixTestRequest("CYCLE").to_fix_message("CLIENT", "DERIBIT", 2006)
    parsed = FixMessage.parse(msg.raw_message)
    assert parsed.fields == msg.fields


def test_json_display():
    assert json.loads(str(Heartbeat())) == {"test_req_id": None}
    assert json.loads(str(ResendRequest(1, 10))) == {"begin_seq_no": 1, "end_seq_no": 10}
    data = json.loads(str(Reject.invalid_tag(456, 999)))
    assert data["ref_tag_id"] == 999
    assert data["session_reject_reason"] == 0