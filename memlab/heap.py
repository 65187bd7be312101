"""A first-fit heap allocator working over a simulated, growable address space.

Every block carries a header of ``BLOCK_SIZE`` bytes followed by its data
area. Blocks are laid out contiguously from address 0 up to the current
program break. The break moves up when the heap is extended and moves back
down when the last block is released.
"""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterator
from dataclasses import dataclass

__all__ = [
    "BLOCK_SIZE",
    "DEFAULT_LIMIT",
    "BlockInfo",
    "Heap",
    "HeapExhaustedError",
    "InvalidPointerError",
    "align4",
]

BLOCK_SIZE = 40
"""Bytes of bookkeeping that precede each block's data area."""

DEFAULT_LIMIT = 1 << 20
"""Default size of the address space a heap may grow into."""

_MIN_SPLIT_REMAINDER = BLOCK_SIZE + 4


class HeapExhaustedError(MemoryError):
    """Raised when the heap cannot grow enough to satisfy a request."""


class InvalidPointerError(ValueError):
    """Raised when an address is not the start of an allocated block."""


def align4(size: int) -> int:
    """Round ``size`` up to the next multiple of 4 (0 stays 0)."""
    return ((size - 1) >> 2 << 2) + 4


@dataclass(frozen=True)
class BlockInfo:
    """A snapshot of one block: its data address, data size and state."""

    address: int
    size: int
    free: bool


@dataclass
class _Block:
    header: int
    size: int
    free: bool = False

    @property
    def data(self) -> int:
        return self.header + BLOCK_SIZE


class Heap:
    """A first-fit allocator with block splitting and coalescing."""

    def __init__(self, limit: int = DEFAULT_LIMIT) -> None:
        if limit < 0:
            raise ValueError("heap limit must not be negative")
        self.limit = limit
        self._memory = bytearray()
        self._blocks: list[_Block] = []

    @property
    def brk(self) -> int:
        """The current program break: the end of the used address space."""
        return len(self._memory)

    # -- public allocation interface -------------------------------------

    def malloc(self, size: int) -> int:
        """Allocate ``size`` bytes and return the address of the data area."""
        _check_size(size)
        needed = align4(size)
        index = self._find_block(needed)
        if index is None:
            index = self._extend_heap(needed)
        else:
            block = self._blocks[index]
            if block.size - needed >= _MIN_SPLIT_REMAINDER:
                self._split_block(index, needed)
            block.free = False
        return self._blocks[index].data

    def free(self, ptr: int | None) -> None:
        """Release the block at ``ptr``; addresses that are not blocks are ignored."""
        index = self._index_of(ptr)
        if index is None:
            return
        self._blocks[index].free = True
        if index > 0 and self._blocks[index - 1].free:
            index = self._fuse(index - 1)
        if index + 1 < len(self._blocks):
            self._fuse(index)
        else:
            header = self._blocks[index].header
            del self._blocks[index:]
            del self._memory[header:]

    def calloc(self, number: int, size: int) -> int:
        """Allocate ``number * size`` bytes, all set to zero."""
        _check_size(number)
        _check_size(size)
        total = number * size
        ptr = self.malloc(total)
        self._memory[ptr:ptr + total] = bytes(total)
        return ptr

    def realloc(self, ptr: int | None, size: int) -> int:
        """Resize the block at ``ptr``, moving it if it cannot grow in place.

        With ``ptr`` of ``None`` this is :meth:`malloc`. If the heap cannot
        grow, :class:`HeapExhaustedError` is raised and the original block is
        left untouched.
        """
        if ptr is None:
            return self.malloc(size)
        index = self._index_of(ptr)
        if index is None:
            raise InvalidPointerError(f"not an allocated block: {ptr!r}")
        _check_size(size)
        needed = align4(size)
        block = self._blocks[index]
        if block.size >= needed:
            if block.size - needed >= _MIN_SPLIT_REMAINDER:
                self._split_block(index, needed)
            return ptr
        following = self._next(index)
        if (
            following is not None
            and following.free
            and block.size + BLOCK_SIZE + following.size >= needed
        ):
            self._fuse(index)
            if block.size - needed >= _MIN_SPLIT_REMAINDER:
                self._split_block(index, needed)
            return ptr
        new_ptr = self.malloc(needed)
        new_block = self._blocks[self._index_of(new_ptr)]
        count = min(block.size, new_block.size)
        self._memory[new_ptr:new_ptr + count] = self._memory[ptr:ptr + count]
        self.free(ptr)
        return new_ptr

    def reallocf(self, ptr: int | None, size: int) -> int:
        """Like :meth:`realloc`, but releases ``ptr`` when resizing fails."""
        try:
            return self.realloc(ptr, size)
        except (HeapExhaustedError, InvalidPointerError):
            self.free(ptr)
            raise

    # -- data access -----------------------------------------------------

    def read(self, ptr: int, length: int) -> bytes:
        """Return ``length`` bytes from the start of the block at ``ptr``."""
        block = self._require(ptr)
        if length < 0 or length > block.size:
            raise ValueError(
                f"cannot read {length} bytes from a block of {block.size}"
            )
        return bytes(self._memory[ptr:ptr + length])

    def write(self, ptr: int, data: bytes) -> None:
        """Copy ``data`` to the start of the block at ``ptr``."""
        block = self._require(ptr)
        if len(data) > block.size:
            raise ValueError(
                f"cannot write {len(data)} bytes into a block of {block.size}"
            )
        self._memory[ptr:ptr + len(data)] = data

    def blocks(self) -> Iterator[BlockInfo]:
        """Yield a snapshot of every block in address order."""
        for block in self._blocks:
            yield BlockInfo(block.data, block.size, block.free)

    # -- internals -------------------------------------------------------

    def _index_of(self, ptr: object) -> int | None:
        if not isinstance(ptr, int) or not self._blocks:
            return None
        index = bisect_left(self._blocks, ptr, key=lambda b: b.data)
        if index < len(self._blocks) and self._blocks[index].data == ptr:
            return index
        return None

    def _require(self, ptr: int) -> _Block:
        index = self._index_of(ptr)
        if index is None:
            raise InvalidPointerError(f"not an allocated block: {ptr!r}")
        return self._blocks[index]

    def _next(self, index: int) -> _Block | None:
        return self._blocks[index + 1] if index + 1 < len(self._blocks) else None

    def _find_block(self, size: int) -> int | None:
        return next(
            (
                index
                for index, block in enumerate(self._blocks)
                if block.free and block.size >= size
            ),
            None,
        )

    def _extend_heap(self, size: int) -> int:
        needed = BLOCK_SIZE + size
        if self.brk + needed > self.limit:
            raise HeapExhaustedError(
                f"cannot grow heap by {needed} bytes (limit {self.limit})"
            )
        self._blocks.append(_Block(self.brk, size))
        self._memory.extend(bytes(needed))
        return len(self._blocks) - 1

    def _split_block(self, index: int, size: int) -> None:
        block = self._blocks[index]
        remainder = _Block(
            header=block.header + BLOCK_SIZE + size,
            size=block.size - size - BLOCK_SIZE,
            free=True,
        )
        block.size = size
        self._blocks.insert(index + 1, remainder)

    def _fuse(self, index: int) -> int:
        following = self._next(index)
        if following is not None and following.free:
            self._blocks[index].size += BLOCK_SIZE + following.size
            del self._blocks[index + 1]
        return index


def _check_size(size: int) -> None:
    if size < 0:
        raise ValueError(f"size must not be negative: {size}")