"""Snek values whose lifetime is managed by reference counting."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Any

from memlab.snek import Kind

__all__ = [
    "RefObject",
    "new_array",
    "new_float",
    "new_integer",
    "new_string",
    "new_vector3",
]


def _float32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


@dataclass(eq=False)
class RefObject:
    """A value with a reference count; it is released when the count hits zero."""

    kind: Kind
    value: Any
    refcount: int = 1

    @property
    def freed(self) -> bool:
        """Whether the object has been released."""
        return self.refcount == 0

    def incref(self) -> None:
        """Take one more reference to this object."""
        if self.freed:
            raise ValueError("object has already been released")
        self.refcount += 1

    def decref(self) -> None:
        """Drop one reference, releasing the object when none remain."""
        if self.freed:
            raise ValueError("object has already been released")
        self.refcount -= 1
        if self.refcount == 0:
            self._release()

    def _release(self) -> None:
        if self.kind in (Kind.VECTOR3, Kind.ARRAY):
            for child in self.value:
                if child is not None:
                    child.decref()
        self.value = None

    def _elements(self) -> list[RefObject | None]:
        if self.kind is not Kind.ARRAY:
            raise TypeError(f"{self.kind.name} object is not an array")
        if self.freed:
            raise ValueError("array has already been released")
        return self.value

    def set_item(self, index: int, value: RefObject) -> None:
        """Store ``value`` in slot ``index``, adjusting reference counts."""
        if value is None:
            raise ValueError("cannot store None in an array")
        elements = self._elements()
        _check_index(index, len(elements))
        old = elements[index]
        if old is not None:
            old.decref()
        elements[index] = value
        value.incref()

    def get_item(self, index: int) -> RefObject | None:
        """Return the object in slot ``index``; empty slots give ``None``."""
        elements = self._elements()
        _check_index(index, len(elements))
        return elements[index]


def _check_index(index: int, size: int) -> None:
    if not 0 <= index < size:
        raise IndexError(f"index {index} out of range for array of size {size}")


def new_integer(value: int) -> RefObject:
    """Create an integer object with one reference."""
    return RefObject(Kind.INTEGER, int(value))


def new_float(value: float) -> RefObject:
    """Create a single-precision float object with one reference."""
    return RefObject(Kind.FLOAT, _float32(value))


def new_string(value: str) -> RefObject:
    """Create a string object with one reference."""
    return RefObject(Kind.STRING, str(value))


def new_vector3(x: RefObject, y: RefObject, z: RefObject) -> RefObject:
    """Create a vector that holds a reference to each component."""
    if x is None or y is None or z is None:
        raise ValueError("vector components must not be None")
    vec = RefObject(Kind.VECTOR3, (x, y, z))
    for part in (x, y, z):
        part.incref()
    return vec


def new_array(size: int) -> RefObject:
    """Create an array of ``size`` empty slots with one reference."""
    if size < 0:
        raise ValueError(f"array size must not be negative: {size}")
    return RefObject(Kind.ARRAY, [None] * size)