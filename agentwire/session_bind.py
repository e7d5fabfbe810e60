"""Session binding extension and the registry of host key verifiers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from .extension_factory import ExtensionBase, ExtensionFactory, default_factory
from .message import BytesLike, MessageError, Reader, Writer

_log = logging.getLogger(__name__)

_OPENSSH_DOMAIN = "openssh.com"
SESSION_BIND_NAME = f"session-bind@{_OPENSSH_DOMAIN}"


class HostKeyVerifier(ABC):
    """A public host key able to check signatures."""

    def __init__(self, blob: BytesLike = b""):
        self.blob = bytes(blob)

    @abstractmethod
    def verify(self, data: bytes, signature: bytes) -> bool:
        """Whether ``signature`` (an encoded SSH signature) is valid for ``data``."""


HostKeyCreator = Callable[[bytes], HostKeyVerifier]

_HOST_KEY_CREATORS: dict[str, HostKeyCreator] = {}


def register_host_key_type(name: str, creator: HostKeyCreator) -> None:
    """Register a callable building a verifier from a public key blob."""
    _HOST_KEY_CREATORS[name] = creator


def create_host_key(key_type: str, blob: BytesLike) -> HostKeyVerifier:
    """Build a verifier for ``key_type``; raises MessageError if it is unknown."""
    try:
        creator = _HOST_KEY_CREATORS[key_type]
    except KeyError:
        raise MessageError(f"unsupported host key type: {key_type}") from None
    return creator(bytes(blob))


class SessionBind(ExtensionBase):
    """Binds an agent connection to an SSH session via the server host key."""

    def __init__(
        self,
        host_key: BytesLike = b"",
        session_id: BytesLike = b"",
        signature: BytesLike = b"",
        forwarded: bool = False,
    ):
        self.host_key = bytes(host_key)
        self.session_id = bytes(session_id)
        self.signature = bytes(signature)
        self.forwarded = bool(forwarded)

    def serialize(self, writer: Writer) -> None:
        writer.write_blob(self.host_key)
        writer.write_blob(self.session_id)
        writer.write_blob(self.signature)
        writer.write_byte(1 if self.forwarded else 0)

    def deserialize(self, reader: Reader) -> None:
        """Read the binding and verify its signature over the session id."""
        self.host_key = reader.read_blob()
        self.session_id = reader.read_blob()
        self.signature = reader.read_blob()
        self.forwarded = reader.read_byte() != 0
        _log.debug(
            "host key size: %d, session id size: %d, signature size: %d, forwarded: %s",
            len(self.host_key),
            len(self.session_id),
            len(self.signature),
            self.forwarded,
        )

        host_key_reader = Reader(self.host_key)
        key_type = host_key_reader.read_string()
        host_key_reader.read_blob()
        verifier = create_host_key(key_type, self.host_key)

        if self.signature:
            signature_reader = Reader(self.signature)
            sig_type = signature_reader.read_string()
            sig_blob = signature_reader.read_blob()
            _log.debug("signature type: %s, size: %d", sig_type, len(sig_blob))
            if not verifier.verify(self.session_id, self.signature):
                _log.error("session bind signature verification failed")
                raise MessageError("session bind: signature verification failed")


def register_session_bind(factory: ExtensionFactory | None = None) -> None:
    """Register the session binding message extension with ``factory``."""
    factory = factory if factory is not None else default_factory()
    factory.register_message_extension(SESSION_BIND_NAME, SessionBind)