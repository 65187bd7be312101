# memlab

A small laboratory for exploring how memory management works, written in
plain Python with no third-party dependencies. It has three independent
parts:

- **`memlab.heap`**: a first-fit heap allocator over a simulated address
  space. Memory is a `bytearray` that grows like a program break. Every
  block has a 40-byte header (`BLOCK_SIZE`) before its data area. Blocks
  that are too large are split, freed blocks merge with free neighbours,
  and the heap shrinks when the last block is freed.
- **`memlab.snek`** and **`memlab.vm`**: a tiny object model ("snek"
  objects: integers, single-precision floats, strings, 3-vectors and
  arrays) and a virtual machine that reclaims unreachable objects by
  mark-and-sweep collection.
- **`memlab.refcount`**: the same kinds of object, managed by reference
  counting instead.

Everything happens inside Python objects. No real process memory is
allocated or released, and none of these allocators can stand in for the
interpreter's own memory management.

## Installation

```
pip install .
```

## The heap allocator

```python
from memlab.heap import Heap

heap = Heap(limit=4096)           # address space the heap may grow into
a = heap.malloc(4)                # returns the address of the data area
heap.write(a, (42).to_bytes(4, "little"))

s = heap.calloc(10, 1)            # zero-filled
heap.write(s, b"hi\0")
s = heap.realloc(s, 20)           # grows in place or moves, copying the data
print(heap.read(s, 3))            # b'hi\x00'

for block in heap.blocks():       # BlockInfo(address, size, free)
    print(block)

heap.free(a)
heap.free(s)
print(heap.brk)                   # 0: the heap has shrunk back
```

The default limit is `DEFAULT_LIMIT` (1 MiB). Request sizes are rounded
up to a multiple of 4 by `align4`.

Errors:

- `HeapExhaustedError` (a `MemoryError`) when the heap cannot grow past
  its limit.
- `InvalidPointerError` (a `ValueError`) when `realloc`, `read` or `write`
  is given an address that is not the start of a block.
- `ValueError` for negative sizes, and for reads or writes longer than
  the block.

`free` ignores addresses it does not recognise, including `None`.
`realloc(None, size)` behaves like `malloc(size)`. `reallocf` is like
`realloc` but frees the original block before re-raising when resizing
fails.

## Mark-and-sweep collection

```python
from memlab.vm import VM
from memlab.snek import new_snek_array, new_snek_integer

vm = VM()
frame = vm.new_frame()
arr = new_snek_array(vm, 2)
arr.set_item(0, new_snek_integer(vm, 7))
frame.reference_object(arr)

vm.collect_garbage()   # returns 0: arr and its element are reachable
vm.pop_frame()
vm.collect_garbage()   # returns 2: nothing is referenced any more
```

Every constructor (`new_snek_integer`, `new_snek_float`,
`new_snek_string`, `new_snek_vector3`, `new_snek_array`) registers the new
object with the VM it is given. Objects referenced from a frame on the
VM's stack are roots. `collect_garbage` runs `mark`, `trace` and `sweep`
and returns the number of objects dropped from `vm.objects`.

`SnekObject.get_item` and `set_item` work on arrays only (`TypeError`
otherwise) and raise `IndexError` for a slot out of range. Empty slots
read as `None`.

`snek_add(vm, a, b)` creates a new object:

- integers add, and an integer mixed with a float gives a float
- strings concatenate
- vectors add component by component
- arrays are joined

Any other pairing raises `TypeError`.

## Reference counting

```python
from memlab.refcount import new_integer, new_vector3

x = new_integer(1)           # refcount 1
v = new_vector3(x, x, x)     # x.refcount is now 4
v.decref()                   # v is released and drops its three references
print(x.refcount, v.freed)   # 1 True
```

`RefObject.set_item` drops the reference held by the slot it overwrites
and takes one on the new value. Calling `incref` or `decref` on an object
that has already been released raises `ValueError`.

## Demo

A walkthrough of the allocator runs from the command line:

```
memlab-demo
memlab-demo --heap-size 256
```

It prints:

```
Custom malloc test
a = 42
str = hi
About to realloc
Realloc successful
str = hi there
Memory freed successfully
```

It exits with status 1 if the heap is too small for one of its requests.

## Running the tests

```
pip install .[test]
pytest
```