from typing import List, Optional

DEFAULT_RESPONSE_CAPACITY = 500


class ResponseBuffer:
    """Write-only text sink handed to command handlers.

    The buffer holds at most ``capacity`` characters. Anything written past
    that point is dropped and ``truncated`` is set, so the console can tell
    the user the reply was cut short. ``capacity=None`` makes it unbounded.

    It behaves enough like a text file for ``print(..., file=response)``.
    """

    def __init__(self, capacity: Optional[int] = DEFAULT_RESPONSE_CAPACITY) -> None:
        if capacity is not None and capacity < 0:
            raise ValueError("capacity must be non-negative")
        self._capacity = capacity
        self._chunks: List[str] = []
        self._size = 0
        self._truncated = False

    @property
    def capacity(self) -> Optional[int]:
        return self._capacity

    @property
    def truncated(self) -> bool:
        return self._truncated

    def write(self, text: str) -> int:
        if self._capacity is not None:
            room = self._capacity - self._size
            if len(text) > room:
                self._truncated = True
                text = text[: max(room, 0)]
        if text:
            self._chunks.append(text)
            self._size += len(text)
        return len(text)

    def flush(self) -> None:
        pass

    def getvalue(self) -> str:
        return "".join(self._chunks)

    def __len__(self) -> int:
        return self._size
