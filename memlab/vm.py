"""A virtual machine with stack frames and a mark-and-sweep collector."""

from __future__ import annotations

from collections.abc import Iterable

from memlab.snek import Kind, SnekObject

__all__ = ["Frame", "VM"]


class Frame:
    """A stack frame holding references that act as collection roots."""

    def __init__(self) -> None:
        self.references: list[SnekObject] = []

    def reference_object(self, obj: SnekObject) -> None:
        """Record ``obj`` as referenced from this frame."""
        self.references.append(obj)


def _children(obj: SnekObject) -> Iterable[SnekObject | None]:
    if obj.kind in (Kind.VECTOR3, Kind.ARRAY):
        return obj.value
    return ()


class VM:
    """Owns every object created for it and reclaims unreachable ones."""

    def __init__(self) -> None:
        self.frames: list[Frame] = []
        self.objects: list[SnekObject] = []

    def new_frame(self) -> Frame:
        """Create a frame, push it and return it."""
        frame = Frame()
        self.push_frame(frame)
        return frame

    def push_frame(self, frame: Frame) -> None:
        """Push ``frame`` onto the frame stack."""
        self.frames.append(frame)

    def pop_frame(self) -> Frame:
        """Pop and return the top frame."""
        if not self.frames:
            raise IndexError("no frame to pop")
        return self.frames.pop()

    def track_object(self, obj: SnekObject) -> None:
        """Register ``obj`` so the collector manages it."""
        self.objects.append(obj)

    def mark(self) -> None:
        """Mark every object referenced directly from a frame."""
        for frame in self.frames:
            for obj in frame.references:
                obj.is_marked = True

    def trace(self) -> None:
        """Extend the marks to everything reachable from marked objects."""
        gray = [obj for obj in self.objects if obj.is_marked]
        while gray:
            for child in _children(gray.pop()):
                if child is not None and not child.is_marked:
                    child.is_marked = True
                    gray.append(child)

    def sweep(self) -> int:
        """Drop unmarked objects, clear marks, and return how many were dropped."""
        survivors = []
        for obj in self.objects:
            if obj.is_marked:
                obj.is_marked = False
                survivors.append(obj)
        freed = len(self.objects) - len(survivors)
        self.objects = survivors
        return freed

    def collect_garbage(self) -> int:
        """Run mark, trace and sweep; return the number of objects reclaimed."""
        self.mark()
        self.trace()
        return self.sweep()