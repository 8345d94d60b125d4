from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from ._registry import Registry


@runtime_checkable
class Registrar(Protocol):
    """A unit of startup wiring: registers one module's dependencies."""

    def register(self, registry: Registry) -> None: ...


class CompositeRegistrar:
    """Runs registrars in order against one registry.

    The first exception stops the run and propagates; later registrars are not run.
    """

    def __init__(self, *registrars: Registrar) -> None:
        self._registrars = registrars

    def register(self, registry: Registry) -> None:
        for registrar in self._registrars:
            registrar.register(registry)
