"""Sequential ID allocation."""


class IdAllocator:
    """
    Hands out increasing integer IDs, starting at 1.

    The counter pre-increments, so last_id is the most recently issued ID
    (0 before anything has been issued). IDs are never handed out twice,
    even after the entity that held them is gone.
    """

    def __init__(self, last_id: int = 0):
        if last_id < 0:
            raise ValueError(f"last_id cannot be negative: {last_id}")
        self._last_id = last_id

    @property
    def last_id(self) -> int:
        return self._last_id

    def next_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def advance_to(self, seen_id: int) -> None:
        """Make sure future IDs are above seen_id."""
        if seen_id > self._last_id:
            self._last_id = seen_id

    def __repr__(self) -> str:
        return f"IdAllocator(last_id={self._last_id})"
