"""Snek values managed by a mark-and-sweep virtual machine.

Every constructor registers the new object with the VM it is given, so the
VM's collector can later find and reclaim it.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from memlab.vm import VM

__all__ = [
    "Kind",
    "SnekObject",
    "new_snek_array",
    "new_snek_float",
    "new_snek_integer",
    "new_snek_string",
    "new_snek_vector3",
    "snek_add",
]


class Kind(Enum):
    """The kinds of value a Snek object can hold."""

    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()
    VECTOR3 = auto()
    ARRAY = auto()


def _float32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


@dataclass(eq=False)
class SnekObject:
    """A heap object tracked by a VM.

    ``value`` holds an ``int``, a ``float``, a ``str``, a tuple of three
    objects for a vector, or a list of objects (or ``None``) for an array.
    """

    kind: Kind
    value: Any
    is_marked: bool = False

    def _elements(self) -> list[SnekObject | None]:
        if self.kind is not Kind.ARRAY:
            raise TypeError(f"{self.kind.name} object is not an array")
        return self.value

    def set_item(self, index: int, value: SnekObject) -> None:
        """Store ``value`` in slot ``index`` of this array."""
        if value is None:
            raise ValueError("cannot store None in an array")
        elements = self._elements()
        _check_index(index, len(elements))
        elements[index] = value

    def get_item(self, index: int) -> SnekObject | None:
        """Return the object in slot ``index``; empty slots give ``None``."""
        elements = self._elements()
        _check_index(index, len(elements))
        return elements[index]


def _check_index(index: int, size: int) -> None:
    if not 0 <= index < size:
        raise IndexError(f"index {index} out of range for array of size {size}")


def _new(vm: VM, kind: Kind, value: Any) -> SnekObject:
    obj = SnekObject(kind, value)
    vm.track_object(obj)
    return obj


def new_snek_integer(vm: VM, value: int) -> SnekObject:
    """Create an integer object."""
    return _new(vm, Kind.INTEGER, int(value))


def new_snek_float(vm: VM, value: float) -> SnekObject:
    """Create a single-precision float object."""
    return _new(vm, Kind.FLOAT, _float32(value))


def new_snek_string(vm: VM, value: str) -> SnekObject:
    """Create a string object."""
    return _new(vm, Kind.STRING, str(value))


def new_snek_vector3(
    vm: VM, x: SnekObject, y: SnekObject, z: SnekObject
) -> SnekObject:
    """Create a vector referring to three component objects."""
    if x is None or y is None or z is None:
        raise ValueError("vector components must not be None")
    return _new(vm, Kind.VECTOR3, (x, y, z))


def new_snek_array(vm: VM, size: int) -> SnekObject:
    """Create an array of ``size`` empty slots."""
    if size < 0:
        raise ValueError(f"array size must not be negative: {size}")
    return _new(vm, Kind.ARRAY, [None] * size)


def snek_add(vm: VM, a: SnekObject, b: SnekObject) -> SnekObject:
    """Add two objects, creating a new object for the result.

    Integers and floats mix, strings and arrays concatenate and vectors add
    component-wise. Any other pairing raises :class:`TypeError`.
    """
    if a is None or b is None:
        raise ValueError("cannot add None")
    if a.kind is Kind.INTEGER:
        if b.kind is Kind.INTEGER:
            return new_snek_integer(vm, a.value + b.value)
        if b.kind is Kind.FLOAT:
            return new_snek_float(vm, _float32(a.value) + b.value)
    elif a.kind is Kind.FLOAT:
        if b.kind is Kind.FLOAT:
            return new_snek_float(vm, a.value + b.value)
        return snek_add(vm, b, a)
    elif a.kind is Kind.STRING:
        if b.kind is Kind.STRING:
            return new_snek_string(vm, a.value + b.value)
    elif a.kind is Kind.VECTOR3:
        if b.kind is Kind.VECTOR3:
            x, y, z = (snek_add(vm, p, q) for p, q in zip(a.value, b.value))
            return new_snek_vector3(vm, x, y, z)
    elif a.kind is Kind.ARRAY:
        if b.kind is Kind.ARRAY:
            result = new_snek_array(vm, len(a.value) + len(b.value))
            result.value[:] = [*a.value, *b.value]
            return result
    raise TypeError(f"cannot add {a.kind.name} and {b.kind.name}")