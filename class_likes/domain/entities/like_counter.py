"""LikeCounter entity — one class session's shared like count."""

from dataclasses import dataclass

from class_likes.domain.policies.counting import apply_delta, delta_for
from class_likes.domain.value_objects.enums import LikeAction

# classId -> count, as read at one point in time
CounterSnapshot = dict[str, int]


@dataclass
class LikeCounter:
    class_id: str
    count: int = 0

    def apply(self, action: LikeAction) -> int:
        """Apply a like/unlike and return the new count (never below 0)."""
        self.count = apply_delta(self.count, delta_for(action))
        return self.count
