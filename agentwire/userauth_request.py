"""Parser for the SSH user-authentication request data presented for signing."""

from __future__ import annotations

from .message import BytesLike, MessageError, Reader

SSH_MSG_USERAUTH_REQUEST = 50
CONNECTION_SERVICE = "ssh-connection"
_OPENSSH_DOMAIN = "openssh.com"
HOSTBOUND_METHOD = f"publickey-hostbound-v00@{_OPENSSH_DOMAIN}"


class UserAuthRequestMessage:
    """Fields of a host-bound public key user-authentication request.

    Raises MessageError when the data is not such a request.
    """

    def __init__(self, data: BytesLike):
        reader = Reader(data)

        self.session_id = reader.read_blob()
        if not self.session_id:
            raise MessageError("userauth request has an empty session id")

        msg_type = reader.read_byte()
        if msg_type != SSH_MSG_USERAUTH_REQUEST:
            raise MessageError(f"expected SSH_MSG_USERAUTH_REQUEST, got message type {msg_type}")

        self.username = reader.read_string()

        service = reader.read_string()
        if service != CONNECTION_SERVICE:
            raise MessageError(f"unsupported userauth service: {service}")

        method = reader.read_string()
        if method != HOSTBOUND_METHOD:
            raise MessageError(f"unsupported userauth method: {method}")

        if reader.read_byte() == 0:
            raise MessageError("userauth request carries no signature")

        self.key_type = reader.read_string()
        self.public_key = reader.read_blob()
        self.server_host_key = reader.read_blob()

    def __repr__(self) -> str:
        return (
            f"UserAuthRequestMessage(username={self.username!r}, key_type={self.key_type!r})"
        )