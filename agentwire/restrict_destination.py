"""Destination restriction key constraint and its hop descriptors."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .extension_factory import ExtensionBase, ExtensionFactory, default_factory
from .message import BytesLike, MessageError, Reader, Writer

_log = logging.getLogger(__name__)

_OPENSSH_DOMAIN = "openssh.com"
RESTRICT_DESTINATION_NAME = f"restrict-destination-v00@{_OPENSSH_DOMAIN}"


@dataclass
class MatchInfo:
    """Details of the destination constraint that permitted a key use."""

    from_host: str = ""
    to_host: str = ""
    user: str = ""

    def clear(self) -> None:
        self.from_host = ""
        self.to_host = ""
        self.user = ""


@dataclass(frozen=True)
class HopKey:
    """A host key listed in a hop, possibly a certificate authority key."""

    key: bytes
    is_ca: bool = False


@dataclass
class HopDescriptor:
    """One hop of a destination constraint: a user, a host and its keys."""

    keys: list[HopKey] = field(default_factory=list)
    hostname: str = ""
    user: str = ""

    def __post_init__(self):
        self.keys = list(self.keys)

    @classmethod
    def parse(cls, data: BytesLike, tag: str = "") -> HopDescriptor:
        """Decode a hop descriptor; extensions inside it are not supported."""
        label = f"hop-{tag}" if tag else "hop"
        reader = Reader(data)
        user = reader.read_string()
        hostname = reader.read_string()
        if reader.read_blob():
            _log.error("%s: extensions in hop descriptor not supported", label)
            raise MessageError("hop descriptor: extensions not supported")
        keys = []
        while reader.remaining() > 0:
            key = reader.read_blob()
            keys.append(HopKey(key, reader.read_byte() != 0))
        _log.debug("%s: user=%s hostname=%s keys=%d", label, user, hostname, len(keys))
        return cls(keys, hostname, user)

    def serialize(self) -> bytes:
        writer = Writer()
        writer.write_string(self.user)
        writer.write_string(self.hostname)
        writer.write_blob(b"")
        for hop_key in self.keys:
            writer.write_blob(hop_key.key)
            writer.write_byte(1 if hop_key.is_ca else 0)
        return writer.getvalue()

    def matches_key(self, key: BytesLike) -> bool:
        """Whether ``key`` is one of this hop's plain host keys.

        CA keys are skipped; an empty listed key ends the search unmatched.
        """
        wanted = bytes(key)
        for hop_key in self.keys:
            if not hop_key.key:
                _log.warning("empty key in hop descriptor")
                return False
            if hop_key.is_ca:
                _log.warning("CA keys in hop descriptors are not supported; skipping")
                continue
            if hop_key.key == wanted:
                return True
        return False

    def __str__(self) -> str:
        if not self.hostname and not self.keys and not self.user:
            return "Any"
        text = f"{self.user}@" if self.user else ""
        text += self.hostname
        if self.keys:
            text += f" ({len(self.keys)} keys)"
        return text


@dataclass
class DestinationConstraint:
    """A permitted hop from one host to another."""

    from_hop: HopDescriptor = field(default_factory=HopDescriptor)
    to_hop: HopDescriptor = field(default_factory=HopDescriptor)

    @classmethod
    def parse(cls, data: BytesLike) -> DestinationConstraint:
        """Decode and validate a constraint."""
        reader = Reader(data)
        from_blob = reader.read_blob()
        to_blob = reader.read_blob()
        if reader.read_blob():
            _log.error("extensions in destination constraint not supported")
            raise MessageError("destination constraint: extensions not supported")

        from_hop = HopDescriptor.parse(from_blob, "from")
        to_hop = HopDescriptor.parse(to_blob, "to")

        if (not from_hop.hostname) != (not from_hop.keys) or from_hop.user:
            raise MessageError("destination constraint: invalid from hop")
        if not to_hop.hostname or not to_hop.keys:
            raise MessageError("destination constraint: invalid to hop")
        return cls(from_hop, to_hop)

    def serialize(self) -> bytes:
        writer = Writer()
        writer.write_blob(self.from_hop.serialize())
        writer.write_blob(self.to_hop.serialize())
        writer.write_blob(b"")
        return writer.getvalue()

    def matches(
        self,
        from_key: BytesLike,
        to_key: BytesLike,
        user: str,
        match_info: MatchInfo | None = None,
    ) -> bool:
        """Whether a hop from ``from_key`` to ``to_key`` as ``user`` is allowed.

        When it is and ``match_info`` is given, it is filled in.
        """
        from_key = bytes(from_key)
        to_key = bytes(to_key)

        if not from_key:
            if self.from_hop.hostname or self.from_hop.keys:
                return False
        elif not self.from_hop.matches_key(from_key):
            return False

        if to_key and not self.to_hop.matches_key(to_key):
            return False

        # Exact comparison where OpenSSH uses pattern matching.
        if self.to_hop.user and user and self.to_hop.user != user:
            return False

        if match_info is not None:
            match_info.from_host = self.from_hop.hostname
            match_info.to_host = self.to_hop.hostname
            match_info.user = user

        _log.debug("allowed to host %s", self.to_hop.hostname)
        return True


class RestrictDestination(ExtensionBase):
    """Key constraint listing the destinations a key may be used for."""

    def __init__(self):
        self.constraints: list[DestinationConstraint] = []

    def serialize(self, writer: Writer) -> None:
        inner = Writer()
        for constraint in self.constraints:
            inner.write_blob(constraint.serialize())
        writer.write_blob(inner.getvalue())

    def deserialize(self, reader: Reader) -> None:
        inner = Reader(reader.read_blob())
        while True:
            self.constraints.append(DestinationConstraint.parse(inner.read_blob()))
            if inner.remaining() <= 0:
                break


def register_restrict_destination(factory: ExtensionFactory | None = None) -> None:
    """Register the destination restriction constraint with ``factory``."""
    factory = factory if factory is not None else default_factory()
    factory.register_constraint_extension(RESTRICT_DESTINATION_NAME, RestrictDestination)