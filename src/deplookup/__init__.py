"""Minimal dependency lookup library.

This package provides a registry mapping a capability (a class or a string token)
and an optional name to a scoped provider, plus lazy attribute injection on top of it.

Exports:
- `Registry`: Stores registrations and resolves them; has a replaceable process-wide default.
- `Scope`: Lifecycle of a registration (singleton, prototype or reference).
- `Inject` / `Injected`: Lazily fetched dependency, as a wrapper object or a class attribute.
- `Registrar` / `CompositeRegistrar`: Modular startup wiring applied to a registry.
- `NotFound` / `ImplicitOverwrite`: Errors raised by `fetch` and `register`.
"""

from ._errors import DependencyLookupError, ImplicitOverwrite, NotFound
from ._holders import Scope
from ._injected import Inject, Injected
from ._keys import compose_key
from ._registrar import CompositeRegistrar, Registrar
from ._registry import Registry


__all__ = [
    "CompositeRegistrar",
    "DependencyLookupError",
    "ImplicitOverwrite",
    "Inject",
    "Injected",
    "NotFound",
    "Registrar",
    "Registry",
    "Scope",
    "compose_key",
]
