from collections import deque
from collections.abc import Iterator
from collections.abc import Sequence
from random import Random


class RecentMessages:
    """Bounded FIFO of messages produced lately, used to avoid repeats.

    Owned by whoever picks messages; once full, the oldest entry is evicted.
    """

    def __init__(self, capacity: int = 50) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._messages: deque[str] = deque(maxlen=capacity)

    def __contains__(self, message: object) -> bool:
        return message in self._messages

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def add(self, message: str) -> None:
        self._messages.append(message)

    def pick_fresh(
        self, candidates: Sequence[str], rng: Random, attempts: int = 15
    ) -> str | None:
        """Draw a candidate that was not produced recently and remember it.

        Gives up and returns ``None`` after ``attempts`` draws that all hit
        recent messages.
        """

        if not candidates:
            return None

        for _ in range(max(1, attempts)):
            message = rng.choice(candidates)
            if message not in self:
                self.add(message)
                return message
        return None
