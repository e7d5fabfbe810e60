# agentwire

`agentwire` reads and writes the messages that SSH clients and an SSH agent
exchange. It also handles the OpenSSH agent extensions for session binding
and destination restriction. It uses only the standard library.

## Messages

On the wire, every message is a 32-bit big-endian length, then a type byte,
then a payload. `Message.parse` reads one such frame and returns a plain
`Message`. To decode a specific message type, pass that `Message` to the
`from_message` class method of the matching class. `serialize()` produces
the framed bytes.

```python
from agentwire.message import Message
from agentwire.sign_request import SignRequestMessage
from agentwire.sign_response import SignResponseMessage

frame = SignRequestMessage(key_blob=b"\x01\x02", data=b"payload", flags=0).serialize()

msg = Message.parse(frame)
assert msg.type_name() == "SSH_AGENTC_SIGN_REQUEST"

request = SignRequestMessage.from_message(msg)
assert request.data == b"payload"

reply = SignResponseMessage(signature=b"\x05\x06").serialize()
```

The message classes and their modules:

| Module | Classes |
| --- | --- |
| `agentwire.message` | `Message`, plus the payload-less `SuccessMessage`, `FailureMessage`, `RequestIdentitiesMessage`, `RemoveAllIdentitiesMessage` and `ExtensionFailureMessage` |
| `agentwire.identities_answer` | `IdentitiesAnswerMessage`, a list of `Identity` (blob, comment) |
| `agentwire.remove_identity` | `RemoveIdentityMessage` |
| `agentwire.sign_request` | `SignRequestMessage`, `SignRequestFlags` |
| `agentwire.sign_response` | `SignResponseMessage` |
| `agentwire.lock_message` | `LockMessage`, `UnlockMessage` |
| `agentwire.add_identity` | `AddIdentityMessage` |
| `agentwire.extension_message` | `ExtensionMessage` |

Details of some of these classes:

- **`AddIdentityMessage`** accepts these key types:
  - `ssh-ed25519`
  - `ssh-rsa`
  - `ecdsa-sha2-nistp256`
  - `ecdsa-sha2-nistp384`
  - `ecdsa-sha2-nistp521`

  Its `key_blob` holds the key fields exactly as they appear on the wire, length prefixes included. Setting `confirm_required` or `lifetime` switches the message to `SSH_AGENTC_ADD_ID_CONSTRAINED`. Parsing reads the lifetime, confirm and extension constraints.
- **`UserAuthRequestMessage`**, in `agentwire.userauth_request`, parses the user-authentication data that a client sends to be signed. It accepts only host-bound public key requests.

Two exceptions, both in `agentwire.message`, report parsing errors:

- `MessageError` is raised for malformed data or the wrong message type.
- `TruncatedDataError`, a subclass of `MessageError`, is raised when the data ends early.

## Low-level encoding

`Writer` and `Reader` in `agentwire.message` encode and decode the SSH wire primitives: single bytes, `uint32` values, strings and length-prefixed blobs.

```python
from agentwire.message import Reader, Writer

w = Writer()
w.write_string("ssh-ed25519")
w.write_blob(b"\x00" * 32)

r = Reader(w.getvalue())
assert r.read_string() == "ssh-ed25519"
assert len(r.read_blob()) == 32
assert r.remaining() == 0
```

`Writer.framed()` returns the written bytes prefixed with their length.

## Extensions

An `ExtensionFactory` (in `agentwire.extension_factory`) maps names to callables that return `ExtensionBase` objects. It keeps one namespace for extension messages and another for key constraints.

`default_factory()` returns a shared factory. That factory starts out empty, so you must register the built-in extensions with it before use:

```python
from agentwire.extension_factory import default_factory
from agentwire.restrict_destination import register_restrict_destination
from agentwire.session_bind import register_session_bind

factory = default_factory()
register_session_bind(factory)
register_restrict_destination(factory)
```

`ExtensionMessage.from_message` and `AddIdentityMessage.from_message` both take an optional factory. If you leave it out, they use the default factory.

### Session binding

`SessionBind` (in `agentwire.session_bind`) carries four fields:

- the host key
- the session identifier
- a signature
- a forwarded flag

When `SessionBind` is deserialized, it looks up a verifier for the host key type and checks the signature over the session identifier. It raises `MessageError` if verification fails.

No verifiers come built in. You register one per host key type:

```python
from agentwire.session_bind import HostKeyVerifier, register_host_key_type

class MyVerifier(HostKeyVerifier):
    def verify(self, data, signature):
        ...  # check the encoded SSH signature over data using self.blob

register_host_key_type("ssh-ed25519", MyVerifier)
```

### Destination restriction

`agentwire.restrict_destination` contains these classes:

- `HopDescriptor`: a user, a host name and a list of `HopKey` entries.
- `DestinationConstraint`: a pair of hops, from one to another.
- `RestrictDestination`: the key constraint that holds a list of such constraints.

`DestinationConstraint.matches` decides whether a given hop and user are permitted. When they are, it fills in an optional `MatchInfo`.

```python
from agentwire.restrict_destination import (
    DestinationConstraint, HopDescriptor, HopKey, MatchInfo,
)

constraint = DestinationConstraint(
    HopDescriptor(),
    HopDescriptor([HopKey(b"hostkey")], "server.example.com", "alice"),
)
info = MatchInfo()
assert constraint.matches(b"", b"hostkey", "alice", info)
assert info.to_host == "server.example.com"
```

Limitations of the matching:

- User names are compared exactly; patterns are not supported.
- CA keys listed in a hop are skipped.

## What this package does not do

`agentwire` only encodes and decodes messages. It does not:

- run an agent
- listen on a socket or pipe
- store keys
- create signatures
- verify host key signatures by itself

## Tests

The tests use pytest, which comes with the `test` extra.