from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar, overload

from ._errors import ImplicitOverwrite, NotFound
from ._holders import Holder, Scope, SingletonHolder, make_holder
from ._keys import Key, compose_key, describe
from ._registrar import CompositeRegistrar


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable

    from ._registrar import Registrar

    T = TypeVar("T")

    Token = type[T] | str


class Registry:
    """Maps (capability, name) pairs to scoped providers.

    - ``register`` refuses to replace an existing registration, ``set`` always replaces
    - ``fetch`` resolves according to the registration's scope
    - one process-wide default instance, see :meth:`default`.

    Example:
      registry = Registry()
      registry.register(Greeter, EnglishGreeter)
      registry.register(Greeter, FrenchGreeter, scope=Scope.PROTOTYPE, name="fr")
      registry.fetch(Greeter, "fr")

    """

    _default: ClassVar[Registry | None] = None
    _default_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        self._holders: dict[Key, Holder[Any]] = {}
        self._lock = threading.RLock()

    @classmethod
    def default(cls) -> Registry:
        """Return the process-wide registry, creating it on first use."""
        with Registry._default_lock:
            if Registry._default is None:
                Registry._default = cls()
            return Registry._default

    @classmethod
    def set_default(cls, registry: Registry) -> None:
        with Registry._default_lock:
            Registry._default = registry
        logger.debug("Default registry replaced with %r", registry)

    @classmethod
    def reset_default(cls) -> Registry:
        """Install a fresh, empty default registry and return it.

        Intended for tests that need isolation from registrations made elsewhere.
        """
        registry = cls()
        cls.set_default(registry)
        return registry

    def register(
        self,
        capability: Token[T],
        factory: Callable[[], T],
        *,
        scope: Scope = Scope.SINGLETON,
        name: str | None = None,
    ) -> None:
        """Register a factory for a capability.

        Raises ``ImplicitOverwrite`` if the capability/name pair is already registered;
        use :meth:`set` to replace a registration on purpose.
        """
        self._store(capability, name, self._make_holder(scope, factory), replace=False)

    def set(
        self,
        capability: Token[T],
        factory: Callable[[], T],
        *,
        scope: Scope = Scope.SINGLETON,
        name: str | None = None,
    ) -> None:
        """Register a factory for a capability, replacing any existing registration."""
        self._store(capability, name, self._make_holder(scope, factory), replace=True)

    def register_instance(
        self,
        capability: Token[T],
        instance: T,
        *,
        scope: Scope = Scope.SINGLETON,
        name: str | None = None,
    ) -> None:
        """Register a pre-built instance.

        With ``Scope.PROTOTYPE`` the same instance is still handed out on every fetch;
        pass a factory to :meth:`register` to get fresh ones.
        """
        self._store(capability, name, self._instance_holder(scope, instance), replace=False)

    def set_instance(
        self,
        capability: Token[T],
        instance: T,
        *,
        scope: Scope = Scope.SINGLETON,
        name: str | None = None,
    ) -> None:
        self._store(capability, name, self._instance_holder(scope, instance), replace=True)

    @overload
    def fetch(self, capability: type[T], name: str | None = None) -> T: ...

    @overload
    def fetch(self, capability: str, name: str | None = None) -> Any: ...

    def fetch(self, capability: Token[T], name: str | None = None) -> object:
        """Resolve the capability registered under ``name``.

        Raises ``NotFound`` when nothing is registered. Exceptions raised by the
        factory reach the caller unchanged.
        """
        key = compose_key(capability, name)
        with self._lock:
            holder = self._holders.get(key)

        if holder is None:
            raise NotFound(capability, name)

        # Resolve outside the registry lock: factories may fetch their own dependencies.
        return holder.resolve()

    def is_registered(self, capability: Token[T], name: str | None = None) -> bool:
        key = compose_key(capability, name)
        with self._lock:
            return key in self._holders

    def install(self, *registrars: Registrar) -> Registry:
        """Run registrars against this registry in order, stopping at the first failure."""
        CompositeRegistrar(*registrars).register(self)
        return self

    def _store(self, capability: Token[T], name: str | None, holder: Holder[Any], *, replace: bool) -> None:
        key = compose_key(capability, name)
        with self._lock:
            if not replace and key in self._holders:
                raise ImplicitOverwrite
            self._holders[key] = holder

        logger.debug(
            "%s %s with %s scope",
            "Set" if replace else "Registered",
            describe(capability, name),
            holder.scope.value,
        )

    @staticmethod
    def _make_holder(scope: Scope, factory: Callable[[], T]) -> Holder[T]:
        if not callable(factory):
            msg = f"factory must be callable, got {type(factory).__name__}"
            raise TypeError(msg)
        return make_holder(scope, factory)

    @staticmethod
    def _instance_holder(scope: Scope, instance: T) -> Holder[T]:
        if scope is Scope.SINGLETON:
            return SingletonHolder.of(instance)
        return make_holder(scope, lambda: instance)
