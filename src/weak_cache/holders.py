"""Value holders: how a cached value is retained.

A holder is one of three shapes:

- ``DirectHolder``: a plain strong reference, never reclaimed.
- ``WeakObjectHolder``: a ``weakref.ref`` to the value itself.
- ``WeakPrimitiveHolder``: a ``weakref.ref`` to a one-slot ``Box`` around a
  value that cannot be weakly referenced (``str``, ``int``, ``None``,
  ``tuple``, ``dict`` ...).

Nothing outside the holder can reach a box, so CPython would free it the
moment ``put`` returned. The holder therefore pins its box, and the box lives
exactly as long as the holder: until the entry is overwritten, deleted, or
dropped by the next cleanup pass, which treats every boxed entry as
collectable.
"""

from __future__ import annotations

import weakref
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

PRIMITIVE_TYPES: tuple[type, ...] = (type(None), bool, int, float, complex, str, bytes)

ReclaimHook = Callable[[Any], None]


class Retention(str, Enum):
    """How a value is held by the cache."""

    DIRECT = "direct"
    WEAK_OBJECT = "weak_object"
    WEAK_PRIMITIVE = "weak_primitive"


class Box:
    """Weakly referenceable wrapper for a single value."""

    __slots__ = ("value", "__weakref__")

    def __init__(self, value: Any) -> None:
        self.value = value


def is_primitive(value: Any) -> bool:
    """True when ``value`` has to be boxed before it can be weakly referenced."""
    if isinstance(value, PRIMITIVE_TYPES):
        return True
    try:
        weakref.ref(value)
    except TypeError:
        return True
    return False


def classify(value: Any, *, hard_ref: bool | None, primitives_always_hard: bool) -> Retention:
    """Pick the retention for ``value``.

    An explicit per-call ``hard_ref`` wins over the cache-wide
    ``primitives_always_hard`` default, which only applies when ``hard_ref``
    is ``None``.
    """
    if hard_ref is True:
        return Retention.DIRECT

    primitive = is_primitive(value)
    if primitive and hard_ref is None and primitives_always_hard:
        return Retention.DIRECT
    if primitive:
        return Retention.WEAK_PRIMITIVE
    return Retention.WEAK_OBJECT


@dataclass(frozen=True)
class DirectHolder:
    value: Any

    weak: ClassVar[bool] = False
    retention: ClassVar[Retention] = Retention.DIRECT

    def resolve(self) -> Any:
        return self.value

    def collectable(self) -> bool:
        return False


@dataclass(frozen=True)
class WeakObjectHolder:
    ref: weakref.ref

    weak: ClassVar[bool] = True
    retention: ClassVar[Retention] = Retention.WEAK_OBJECT

    def resolve(self) -> Any:
        return self.ref()

    def collectable(self) -> bool:
        return self.ref() is None


@dataclass(frozen=True)
class WeakPrimitiveHolder:
    ref: weakref.ref
    pin: Box | None = field(default=None, repr=False)

    weak: ClassVar[bool] = True
    retention: ClassVar[Retention] = Retention.WEAK_PRIMITIVE

    def resolve(self) -> Any:
        box = self.ref()
        return None if box is None else box.value

    def collectable(self) -> bool:
        # the pin is the box's only strong reference
        return True


ValueHolder = DirectHolder | WeakObjectHolder | WeakPrimitiveHolder


def _register(target: Any, on_reclaim: ReclaimHook, argument: Any) -> None:
    finalizer = weakref.finalize(target, on_reclaim, argument)
    # reclamation hooks only, never interpreter shutdown
    finalizer.atexit = False


def build_holder(
    value: Any,
    retention: Retention,
    on_reclaim: ReclaimHook | None = None,
) -> ValueHolder:
    """Wrap ``value`` according to ``retention``.

    When ``on_reclaim`` is given and the retention is weak, it is registered
    against the weakly referenced target. Object values report their (now
    dead) ``weakref.ref``; primitive values report the primitive itself.
    """
    if retention is Retention.DIRECT:
        return DirectHolder(value)

    if retention is Retention.WEAK_OBJECT:
        ref = weakref.ref(value)
        if on_reclaim is not None:
            _register(value, on_reclaim, ref)
        return WeakObjectHolder(ref)

    box = Box(value)
    if on_reclaim is not None:
        _register(box, on_reclaim, value)
    return WeakPrimitiveHolder(weakref.ref(box), pin=box)
