"""ClassSession entity — a row of the read-only weekly schedule."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ClassSession:
    id: str
    subject: str
    day: str
    date: str  # ISO date, YYYY-MM-DD
    time: str
    location: str
    professor: str
    room: str | None = None
    category: str | None = None
    initial_likes: int = 0

    def sort_key(self) -> tuple[str, str, str]:
        return (self.date, self.time, self.id)
