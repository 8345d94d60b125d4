from __future__ import annotations

from typing import Any

from ._keys import describe


class DependencyLookupError(Exception):
    """Base class for errors raised by a :class:`~deplookup.Registry`."""


class NotFound(DependencyLookupError, LookupError):
    """Raised by ``fetch`` when nothing is registered for the capability/name pair."""

    def __init__(self, capability: Any, name: str | None = None) -> None:
        self.capability = capability
        self.name = name
        super().__init__(f'Registry: Couldn\'t find instance of "{describe(capability, name)}"')


class ImplicitOverwrite(DependencyLookupError):
    """Raised by ``register`` when the key is already taken."""

    def __init__(self) -> None:
        super().__init__("To explicitly replace dependency use: Registry.set()")
