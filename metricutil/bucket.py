"""A thread-safe, append-only bucket with snapshot and clear-with-observe support."""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")

BLOCK_SIZE = 64


class BlockFullError(Exception):
    """Raised when pushing into a block that has no free slots left."""

    def __init__(self, value: Any) -> None:
        super().__init__("block is full")
        self.value = value


class Block(Generic[T]):
    """A fixed-size chunk of values.

    Writers reserve a slot through the write index, fill it, then mark it as
    written in the read bitmap. The readable length is the run of written slots
    from the start, so a reader never sees a slot whose write is still in flight.
    """

    __slots__ = ("_lock", "_write", "_read", "_slots", "next")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._write = 0
        self._read = 0
        self._slots: List[Any] = [None] * BLOCK_SIZE
        self.next: Optional[Block[T]] = None

    def __len__(self) -> int:
        read = self._read
        # Number of trailing one bits in the read bitmap.
        return (~read & (read + 1)).bit_length() - 1

    def next_len(self) -> int:
        """The length of the block written before this one, or 0 if there is none."""
        following = self.next
        return 0 if following is None else len(following)

    def is_quiesced(self) -> bool:
        """Whether no writes to this block are in flight."""
        length = len(self)
        if length == BLOCK_SIZE:
            return True
        with self._lock:
            written = min(self._write, BLOCK_SIZE)
        return written == length

    def data(self) -> List[T]:
        """The values written to this block so far, in write order."""
        return self._slots[: len(self)]

    def push(self, value: T) -> None:
        """Writes a value into the next free slot, raising BlockFullError if none is left."""
        with self._lock:
            index = self._write
            self._write += 1
        if index >= BLOCK_SIZE:
            raise BlockFullError(value)
        self._slots[index] = value
        with self._lock:
            self._read |= 1 << index

    def __repr__(self) -> str:
        return (
            f"Block(block_size={BLOCK_SIZE}, write={self._write}, read={self._read}, "
            f"len={len(self)}, has_next={self.next is not None})"
        )


class AtomicBucket(Generic[T]):
    """An unbounded, thread-safe bucket of values built from a chain of blocks.

    Values cannot be removed one by one: callers read the whole bucket or clear it.
    Blocks are visited newest first while values inside a block keep their write
    order, so with blocks of 4 and values 0..9 the reading order is
    ``[6 7 8 9] [2 3 4 5] [0 1]``.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tail: Optional[Block[T]] = None

    def is_empty(self) -> bool:
        """Whether the bucket holds no values."""
        tail = self._tail
        if tail is None:
            return True
        # A fresh tail block may be empty while the one before it is not.
        return len(tail) == 0 and tail.next_len() == 0

    def push(self, value: T) -> None:
        """Adds a value to the bucket."""
        while True:
            with self._lock:
                tail = self._tail
                if tail is None:
                    tail = Block()
                    self._tail = tail
            try:
                tail.push(value)
                return
            except BlockFullError:
                with self._lock:
                    if self._tail is tail:
                        fresh: Block[T] = Block()
                        fresh.next = tail
                        self._tail = fresh

    def record(self, value: T) -> None:
        """Records a histogram sample; the same as ``push``."""
        self.push(value)

    def data(self) -> List[T]:
        """All values in the bucket, newest block first."""
        values: List[T] = []
        self.data_with(values.extend)
        return values

    @staticmethod
    def _walk(block: Optional[Block[T]], f: Callable[[Sequence[T]], Any]) -> None:
        while block is not None:
            while not block.is_quiesced():
                time.sleep(0)
            f(block.data())
            block = block.next

    def data_with(self, f: Callable[[Sequence[T]], Any]) -> None:
        """Calls ``f`` with the values of each block, newest block first."""
        self._walk(self._tail, f)

    def clear(self) -> None:
        """Removes every value from the bucket."""
        self.clear_with(lambda _values: None)

    def clear_with(self, f: Callable[[Sequence[T]], Any]) -> None:
        """Detaches every block from the bucket, calling ``f`` with the values of each.

        Values pushed while this runs land in a new chain and are kept for the next call.
        """
        with self._lock:
            block = self._tail
            self._tail = None
        self._walk(block, f)

    def __repr__(self) -> str:
        return f"AtomicBucket(tail={self._tail!r})"