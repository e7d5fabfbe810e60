"""Extension payloads and the registry that creates them by name."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from .message import MessageError, Reader, Writer


class ExtensionBase(ABC):
    """Payload of an agent extension message or key constraint."""

    @abstractmethod
    def serialize(self, writer: Writer) -> None:
        """Write the extension contents to ``writer``."""

    @abstractmethod
    def deserialize(self, reader: Reader) -> None:
        """Read the extension contents from ``reader``."""


ExtensionCreator = Callable[[], ExtensionBase]


class ExtensionFactory:
    """Maps extension names to callables that build fresh extension objects.

    Message extensions and constraint extensions live in separate namespaces.
    """

    def __init__(self):
        self._message_creators: dict[str, ExtensionCreator] = {}
        self._constraint_creators: dict[str, ExtensionCreator] = {}

    def register_message_extension(self, name: str, creator: ExtensionCreator) -> None:
        self._message_creators[name] = creator

    def register_constraint_extension(self, name: str, creator: ExtensionCreator) -> None:
        self._constraint_creators[name] = creator

    def create_message_extension(self, name: str) -> ExtensionBase:
        try:
            creator = self._message_creators[name]
        except KeyError:
            raise MessageError(f"unknown message extension: {name}") from None
        return creator()

    def create_constraint_extension(self, name: str) -> ExtensionBase:
        try:
            creator = self._constraint_creators[name]
        except KeyError:
            raise MessageError(f"unknown constraint extension: {name}") from None
        return creator()


_DEFAULT_FACTORY = ExtensionFactory()


def default_factory() -> ExtensionFactory:
    """Return the process-wide extension factory."""
    return _DEFAULT_FACTORY