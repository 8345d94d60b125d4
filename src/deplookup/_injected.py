from __future__ import annotations

import inspect
import threading
from typing import TYPE_CHECKING, Any, Generic, TypeVar, get_type_hints, overload

from ._registry import Registry


if TYPE_CHECKING:
    from collections.abc import Hashable

T = TypeVar("T")

_UNSET: Any = object()


class Inject(Generic[T]):
    """Lazily fetched dependency.

    Nothing is fetched until the first :meth:`get`; the result is then kept for
    the lifetime of the accessor. :meth:`set` overrides the cached value without
    touching the registry. When ``registry`` is omitted the default registry is
    looked up at first read.

    Example:
      greeter = Inject(Greeter, name="fr")
      greeter.get().greet()

    """

    def __init__(self, capability: Hashable, *, name: str | None = None, registry: Registry | None = None) -> None:
        self.capability = capability
        self.name = name
        self._registry = registry
        self._value: T = _UNSET
        self._lock = threading.Lock()

    @property
    def is_resolved(self) -> bool:
        return self._value is not _UNSET

    def get(self) -> T:
        value = self._value
        if value is not _UNSET:
            return value

        with self._lock:
            if self._value is _UNSET:
                registry = self._registry if self._registry is not None else Registry.default()
                self._value = registry.fetch(self.capability, self.name)
            return self._value

    def set(self, value: T) -> None:
        with self._lock:
            self._value = value

    @property
    def value(self) -> T:
        return self.get()

    @value.setter
    def value(self, value: T) -> None:
        self.set(value)

    def __repr__(self) -> str:
        state = "resolved" if self.is_resolved else "unresolved"
        return f"{type(self).__name__}({self.capability!r}, name={self.name!r}, {state})"


class Injected(Generic[T]):
    """Attribute form of :class:`Inject`.

    Each owning instance gets its own accessor on first attribute access. The
    capability defaults to the attribute's class annotation.

    Example:
      class Client:
          greeter: Greeter = Injected()
          backup: Greeter = Injected(name="fr", registry=local_registry)

    """

    def __init__(
        self,
        capability: Hashable | None = None,
        *,
        name: str | None = None,
        registry: Registry | None = None,
    ) -> None:
        self._capability = capability
        self._name = name
        self._registry = registry
        self._owner: type | None = None
        self._attr: str | None = None
        self._lock = threading.Lock()

    def __set_name__(self, owner: type, attr: str) -> None:
        self._owner = owner
        self._attr = attr

    @overload
    def __get__(self, instance: None, owner: type) -> Injected[T]: ...

    @overload
    def __get__(self, instance: object, owner: type) -> T: ...

    def __get__(self, instance: object | None, owner: type) -> Any:
        if instance is None:
            return self
        return self.accessor(instance).get()

    def __set__(self, instance: object, value: T) -> None:
        self.accessor(instance).set(value)

    def accessor(self, instance: object) -> Inject[T]:
        """Return the :class:`Inject` backing this attribute on ``instance``."""
        if self._attr is None:
            msg = "Injected must be assigned as a class attribute"
            raise TypeError(msg)

        state = getattr(instance, "__dict__", None)
        if state is None:
            msg = f"Injected requires instances with a __dict__; {type(instance).__name__} uses __slots__"
            raise TypeError(msg)

        accessor = state.get(self._attr)
        if accessor is None:
            with self._lock:
                accessor = state.get(self._attr)
                if accessor is None:
                    accessor = Inject(self._resolve_capability(), name=self._name, registry=self._registry)
                    state[self._attr] = accessor
        return accessor

    def _resolve_capability(self) -> Hashable:
        if self._capability is not None:
            return self._capability

        annotation = inspect.get_annotations(self._owner).get(self._attr, inspect.Parameter.empty)
        if isinstance(annotation, str):
            annotation = get_type_hints(self._owner).get(self._attr, inspect.Parameter.empty)
        if annotation is inspect.Parameter.empty:
            msg = (
                f"Cannot infer capability for {self._owner.__name__}.{self._attr}: "
                f"pass it to Injected() or annotate the attribute."
            )
            raise TypeError(msg)

        self._capability = annotation
        return annotation
