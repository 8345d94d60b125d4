from __future__ import annotations

import threading
import weakref
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar


if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")

_UNSET: Any = object()


class Scope(Enum):
    SINGLETON = "singleton"
    PROTOTYPE = "prototype"
    REFERENCE = "reference"


class Holder(ABC, Generic[T]):
    """A factory plus the reuse state its scope needs."""

    scope: Scope

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory

    @abstractmethod
    def resolve(self) -> T: ...


class PrototypeHolder(Holder[T]):
    scope = Scope.PROTOTYPE

    def resolve(self) -> T:
        return self._factory()


class SingletonHolder(Holder[T]):
    """Calls the factory once, on first resolve, then keeps the instance.

    A factory that raises leaves the holder unmaterialized.
    """

    scope = Scope.SINGLETON

    def __init__(self, factory: Callable[[], T]) -> None:
        super().__init__(factory)
        self._instance: T = _UNSET
        self._lock = threading.RLock()

    @classmethod
    def of(cls, instance: T) -> SingletonHolder[T]:
        holder: SingletonHolder[T] = cls(lambda: instance)
        holder._instance = instance
        return holder

    @property
    def materialized(self) -> bool:
        return self._instance is not _UNSET

    def resolve(self) -> T:
        instance = self._instance
        if instance is not _UNSET:
            return instance

        with self._lock:
            if self._instance is _UNSET:
                self._instance = self._factory()
            return self._instance


class ReferenceHolder(Holder[T]):
    """Reuses the last instance while something outside the registry still holds it.

    Instances that cannot be weakly referenced are never tracked, so for those
    every resolve builds a new one (prototype behaviour).
    """

    scope = Scope.REFERENCE

    def __init__(self, factory: Callable[[], T]) -> None:
        super().__init__(factory)
        self._ref: weakref.ref[Any] | None = None
        self._lock = threading.Lock()

    def resolve(self) -> T:
        with self._lock:
            if self._ref is not None:
                instance = self._ref()
                if instance is not None:
                    return instance

            instance = self._factory()
            try:
                self._ref = weakref.ref(instance)
            except TypeError:
                self._ref = None
            return instance


_HOLDERS: dict[Scope, type[Holder[Any]]] = {
    Scope.SINGLETON: SingletonHolder,
    Scope.PROTOTYPE: PrototypeHolder,
    Scope.REFERENCE: ReferenceHolder,
}


def make_holder(scope: Scope, factory: Callable[[], T]) -> Holder[T]:
    try:
        holder_cls = _HOLDERS[scope]
    except KeyError:
        msg = f"Unknown scope: {scope!r}"
        raise ValueError(msg) from None
    return holder_cls(factory)
