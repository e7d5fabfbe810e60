import pytest

from agentwire.message import (
    ExtensionFailureMessage,
    FailureMessage,
    Message,
    MessageError,
    MessageType,
    Reader,
    RemoveAllIdentitiesMessage,
    RequestIdentitiesMessage,
    SuccessMessage,
    TruncatedDataError,
    Writer,
)


def test_construct_from_serialized_data():
    w = Writer()
    w.write_uint32(1)
    w.write_byte(MessageType.SSH_AGENTC_SIGN_REQUEST)
    msg = Message.parse(w.getvalue())
    assert msg.msg_type == MessageType.SSH_AGENTC_SIGN_REQUEST
    assert msg.type_name() == "SSH_AGENTC_SIGN_REQUEST"


def test_construct_from_bytearray():
    w = Writer()
    w.write_uint32(1)
    w.write_byte(MessageType.SSH_AGENTC_REMOVE_ALL_IDENTITIES)
    msg = Message.parse(bytearray(w.getvalue()))
    assert msg.msg_type == MessageType.SSH_AGENTC_REMOVE_ALL_IDENTITIES
    assert msg.type_name() == "SSH_AGENTC_REMOVE_ALL_IDENTITIES"


def test_construct_from_type():
    msg = Message(MessageType.SSH_AGENTC_LOCK)
    assert msg.msg_type == MessageType.SSH_AGENTC_LOCK
    assert msg.type_name() == "SSH_AGENTC_LOCK"


def test_serialize():
    serialized = Message(MessageType.SSH_AGENTC_UNLOCK).serialize()
    assert len(serialized) == 5
    assert serialized[4] == MessageType.SSH_AGENTC_UNLOCK
    assert serialized == b"\x00\x00\x00\x01\x17"


def test_type_name_unknown():
    assert Message(0xFF).type_name() == "UNKNOWN"


@pytest.mark.parametrize(
    "msg_type, name",
    [
        (MessageType.SSH_AGENTC_REQUEST_IDENTITIES, "SSH_AGENTC_REQUEST_IDENTITIES"),
        (MessageType.SSH_AGENTC_SIGN_REQUEST, "SSH_AGENTC_SIGN_REQUEST"),
        (MessageType.SSH_AGENTC_ADD_IDENTITY, "SSH_AGENTC_ADD_IDENTITY"),
        (MessageType.SSH_AGENTC_REMOVE_IDENTITY, "SSH_AGENTC_REMOVE_IDENTITY"),
        (MessageType.SSH_AGENTC_REMOVE_ALL_IDENTITIES, "SSH_AGENTC_REMOVE_ALL_IDENTITIES"),
        (MessageType.SSH_AGENTC_LOCK, "SSH_AGENTC_LOCK"),
        (MessageType.SSH_AGENTC_UNLOCK, "SSH_AGENTC_UNLOCK"),
        (MessageType.SSH_AGENTC_ADD_IDENTITY_CONSTRAINED, "SSH_AGENTC_ADD_ID_CONSTRAINED"),
        (MessageType.SSH_AGENTC_EXTENSION, "SSH_AGENTC_EXTENSION"),
        (MessageType.SSH_AGENT_FAILURE, "SSH_AGENT_FAILURE"),
        (MessageType.SSH_AGENT_SUCCESS, "SSH_AGENT_SUCCESS"),
        (MessageType.SSH_AGENT_IDENTITIES_ANSWER, "SSH_AGENT_IDENTITIES_ANSWER"),
        (MessageType.SSH_AGENT_SIGN_RESPONSE, "SSH_AGENT_SIGN_RESPONSE"),
        (MessageType.SSH_AGENTC_ADD_SMARTCARD_KEY, "SSH_AGENTC_ADD_SMARTCARD_KEY"),
        (MessageType.SSH_AGENTC_REMOVE_SMARTCARD_KEY, "SSH_AGENTC_REMOVE_SMARTCARD_KEY"),
        (
            MessageType.SSH_AGENTC_ADD_SMARTCARD_KEY_CONSTRAINED,
            "SSH_AGENTC_ADD_SMARTCARD_KEY_CONSTRAINED",
        ),
        (MessageType.SSH_AGENT_EXTENSION_FAILURE, "SSH_AGENT_EXTENSION_FAILURE"),
        (MessageType.SSH_AGENT_EXTENSION_RESPONSE, "SSH_AGENT_EXTENSION_RESPONSE"),
    ],
)
def test_all_type_name_mappings(msg_type, name):
    assert Message(int(msg_type)).type_name() == name


def test_parse_keeps_payload_and_ignores_trailing_bytes():
    msg = Message.parse(b"\x00\x00\x00\x03\x0d\xaa\xbb\xcc\xdd")
    assert msg.msg_type == 13
    assert msg.payload == b"\xaa\xbb"


def test_parse_too_short_raises():
    with pytest.raises(TruncatedDataError):
        Message.parse(b"\x00\x00\x00")


def test_parse_declared_length_too_long_raises():
    with pytest.raises(TruncatedDataError):
        Message.parse(b"\x00\x00\x00\x09\x0d\x01")


def test_parse_zero_length_raises():
    with pytest.raises(MessageError):
        Message.parse(b"\x00\x00\x00\x00\x0d")


def test_message_type_out_of_range():
    with pytest.raises(ValueError):
        Message(0x100)


def test_serialize_parse_round_trip():
    original = Message(27, b"\x01\x02\x03")
    assert Message.parse(original.serialize()) == original


@pytest.mark.parametrize(
    "cls, msg_type",
    [
        (FailureMessage, 5),
        (SuccessMessage, 6),
        (RequestIdentitiesMessage, 11),
        (RemoveAllIdentitiesMessage, 19),
        (ExtensionFailureMessage, 28),
    ],
)
def test_simple_messages(cls, msg_type):
    msg = cls()
    assert msg.msg_type == msg_type
    assert msg.serialize() == b"\x00\x00\x00\x01" + bytes([msg_type])


def test_writer_encodings():
    w = Writer()
    w.write_byte(7)
    w.write_uint32(1)
    w.write_string("ab")
    w.write_blob(b"\xff")
    assert w.getvalue() == b"\x07\x00\x00\x00\x01\x00\x00\x00\x02ab\x00\x00\x00\x01\xff"


def test_writer_framed():
    w = Writer()
    w.write_byte(6)
    assert w.framed() == b"\x00\x00\x00\x01\x06"


@pytest.mark.parametrize("value", [-1, 256])
def test_writer_byte_range(value):
    with pytest.raises(ValueError):
        Writer().write_byte(value)


def test_writer_uint32_range():
    with pytest.raises(ValueError):
        Writer().write_uint32(2**32)


def test_reader_round_trip():
    w = Writer()
    w.write_byte(9)
    w.write_uint32(0xDEADBEEF)
    w.write_string("hello")
    w.write_blob(b"\x00\x01")
    r = Reader(w.getvalue())
    assert r.read_byte() == 9
    assert r.read_uint32() == 0xDEADBEEF
    assert r.read_string() == "hello"
    assert r.read_blob() == b"\x00\x01"
    assert r.remaining() == 0


def test_reader_truncated_blob():
    r = Reader(b"\x00\x00\x00\x05ab")
    with pytest.raises(TruncatedDataError):
        r.read_blob()


def test_reader_truncated_uint32():
    with pytest.raises(TruncatedDataError):
        Reader(b"\x00\x01").read_uint32()


def test_reader_empty_byte():
    with pytest.raises(TruncatedDataError):
        Reader(b"").read_byte()