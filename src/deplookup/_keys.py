from __future__ import annotations

from collections.abc import Hashable
from typing import Any


Key = tuple[Hashable, "str | None"]


def compose_key(capability: Hashable, name: str | None = None) -> Key:
    """Build the lookup key for a capability and an optional name.

    The key is a tuple, so ``("Foo", "Bar")`` and ``("FooBar", None)`` never collide.
    """
    if name is not None and not isinstance(name, str):
        msg = f"Registration name must be a str or None, got {type(name).__name__}"
        raise TypeError(msg)

    try:
        hash(capability)
    except TypeError as e:
        msg = f"Capability {capability!r} is not hashable"
        raise TypeError(msg) from e

    return (capability, name)


def describe(capability: Any, name: str | None = None) -> str:
    """Render a capability/name pair for error messages: ``Greeter``, ``Greeter[fr]``, ``'db'``."""
    if isinstance(capability, str):
        label = repr(capability)
    else:
        label = getattr(capability, "__name__", repr(capability))
    if name is not None:
        label = f"{label}[{name}]"
    return label
