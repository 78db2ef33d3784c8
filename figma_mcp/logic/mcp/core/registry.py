"""Descriptor registries owned by the server.

Each registry maps a key (tool name, resource URI, prompt name) to exactly one
descriptor. Registries are populated during setup and sealed when the server
starts serving; after that they are read-only, so the single serve loop can
read them without locking.
"""

import logging
from typing import Generic, Iterator, Optional, TypeVar

from figma_mcp.lib.exceptions import DuplicateRegistrationError, RegistryClosedError
from figma_mcp.logic.mcp.models.mcp_types import Prompt, Resource, Tool

logger = logging.getLogger(__name__)

D = TypeVar("D", Tool, Resource, Prompt)


class Registry(Generic[D]):
    """Unique-key collection of descriptors for one capability category."""

    kind = "descriptor"

    def __init__(self) -> None:
        self._entries: dict[str, D] = {}
        self._sealed = False

    def register(self, descriptor: D) -> None:
        """Add a descriptor.

        Raises:
            DuplicateRegistrationError: The key is already registered; the
                existing entry is left untouched
            RegistryClosedError: The registry has been sealed
        """
        key = descriptor.key
        if self._sealed:
            raise RegistryClosedError(self.kind, key)
        if key in self._entries:
            raise DuplicateRegistrationError(self.kind, key)
        self._entries[key] = descriptor
        logger.debug(f"Registered {self.kind}: {key}")

    def get(self, key: str) -> Optional[D]:
        """Look up a descriptor; returns None when the key is absent."""
        return self._entries.get(key)

    def list(self) -> list[D]:
        """All descriptors ordered by ascending key."""
        return [self._entries[key] for key in sorted(self._entries)]

    def seal(self) -> None:
        """Reject any further registration."""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[D]:
        return iter(self.list())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(entries={len(self._entries)}, sealed={self._sealed})"


class ToolRegistry(Registry[Tool]):
    kind = "tool"


class ResourceRegistry(Registry[Resource]):
    kind = "resource"


class PromptRegistry(Registry[Prompt]):
    kind = "prompt"
