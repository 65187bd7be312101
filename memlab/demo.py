"""A short walk through the allocator: malloc, calloc, realloc and free."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from memlab.heap import DEFAULT_LIMIT, Heap, HeapExhaustedError

_INT_SIZE = 4


def _read_int(heap: Heap, ptr: int) -> int:
    return int.from_bytes(heap.read(ptr, _INT_SIZE), "little", signed=True)


def _write_int(heap: Heap, ptr: int, value: int) -> None:
    heap.write(ptr, value.to_bytes(_INT_SIZE, "little", signed=True))


def _read_cstring(heap: Heap, ptr: int, capacity: int) -> str:
    return heap.read(ptr, capacity).split(b"\0", 1)[0].decode()


def _write_cstring(heap: Heap, ptr: int, text: str) -> None:
    heap.write(ptr, text.encode() + b"\0")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the demonstration; return 0 on success and 1 on allocation failure."""
    parser = argparse.ArgumentParser(
        prog="memlab-demo", description="Exercise the simulated heap allocator."
    )
    parser.add_argument(
        "--heap-size",
        type=int,
        default=DEFAULT_LIMIT,
        help="bytes of address space the heap may use",
    )
    args = parser.parse_args(argv)
    heap = Heap(args.heap_size)

    print("Custom malloc test")

    try:
        a = heap.malloc(_INT_SIZE)
    except HeapExhaustedError:
        return 1
    _write_int(heap, a, 42)
    print(f"a = {_read_int(heap, a)}")

    try:
        text = heap.calloc(10, 1)
    except HeapExhaustedError:
        return 1
    _write_cstring(heap, text, "hi")
    print(f"str = {_read_cstring(heap, text, 10)}")

    print("About to realloc")
    try:
        new_text = heap.realloc(text, 20)
    except HeapExhaustedError:
        print("realloc failed")
        return 1
    print("Realloc successful")

    _write_cstring(heap, new_text, _read_cstring(heap, new_text, 20) + " there")
    print(f"str = {_read_cstring(heap, new_text, 20)}")

    heap.free(a)
    heap.free(new_text)

    print("Memory freed successfully")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())